from __future__ import annotations

from pathlib import Path
import pandas as pd
import matplotlib.pyplot as plt
import squarify
from matplotlib import font_manager

# domestic, export
RATIO_COLORS = ["#0088FE", "#FFBB28"]
TREEMAP_COLOR = "#3b82f6"

# ships with matplotlib and carries Arabic-script glyphs (no shaping or RTL)
LABEL_FONT = "DejaVu Sans"
plt.rcParams["font.family"] = LABEL_FONT


def label_font_path() -> str:
    """TTF used for sheet labels, shared with the PDF report."""
    return font_manager.findfont(font_manager.FontProperties(family=LABEL_FONT))


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _finish(fig, title: str, ylabel: str, out_path: Path, legend: bool = False) -> None:
    plt.title(title)
    plt.ylabel(ylabel)
    if legend:
        plt.legend()
    plt.xticks(rotation=45, ha="right")
    plt.tight_layout()
    fig.savefig(out_path, dpi=200)
    plt.close(fig)


def save_trend_chart(time_series: pd.DataFrame, title: str, out_path: Path) -> None:
    fig = plt.figure()
    x = time_series["period"].astype(str)
    for c in time_series.columns[1:]:
        y = pd.to_numeric(time_series[c], errors="coerce")
        plt.plot(x, y, label=str(c))
    plt.xlabel("Period")
    _finish(fig, title, "Domestic volume", out_path, legend=True)


def save_stacked_chart(monthly: pd.DataFrame, title: str, out_path: Path) -> None:
    fig = plt.figure()
    x = monthly["month"].astype(str)
    bottom = pd.Series(0.0, index=monthly.index)
    for c in monthly.columns[1:]:
        y = pd.to_numeric(monthly[c], errors="coerce").fillna(0)
        plt.bar(x, y, bottom=bottom, label=str(c))
        bottom = bottom + y
    plt.xlabel("Month")
    _finish(fig, title, "Domestic volume", out_path, legend=True)


def save_bar_chart(labels, values, title: str, ylabel: str, out_path: Path, top_n: int = 12) -> bool:
    # keep top N by value
    s = pd.Series(list(values), index=pd.Index(list(labels), dtype=str)).dropna()
    if s.empty:
        return False
    s = s.sort_values(ascending=True).tail(top_n)

    fig = plt.figure()
    plt.barh(s.index.astype(str), s.values)
    plt.xlabel(ylabel)
    _finish(fig, title, "", out_path)
    return True


def save_comparison_chart(comparison: pd.DataFrame, title: str, out_path: Path) -> None:
    labels = (comparison["category"].astype(str) + " / " + comparison["month"].astype(str)).tolist()
    pos = list(range(len(labels)))
    width = 0.4

    fig = plt.figure()
    plt.bar([p - width / 2 for p in pos], comparison["domestic_value"], width=width, label="domestic", color=RATIO_COLORS[0])
    plt.bar([p + width / 2 for p in pos], comparison["export_value"], width=width, label="export", color=RATIO_COLORS[1])
    plt.xticks(pos, labels)
    _finish(fig, title, "Value", out_path, legend=True)


def save_ratio_chart(ratio: pd.DataFrame, title: str, out_path: Path) -> bool:
    values = pd.to_numeric(ratio["value"], errors="coerce").fillna(0).clip(lower=0)
    if values.sum() <= 0:
        return False
    fig = plt.figure()
    plt.pie(values, labels=ratio["name"].astype(str), colors=RATIO_COLORS, autopct="%1.1f%%")
    plt.title(title)
    plt.tight_layout()
    fig.savefig(out_path, dpi=200)
    plt.close(fig)
    return True


def save_treemap_chart(totals: pd.DataFrame, title: str, out_path: Path) -> bool:
    t = totals.copy()
    t["value"] = pd.to_numeric(t["value"], errors="coerce")
    t = t[t["value"] > 0].sort_values("value", ascending=False)
    if t.empty:
        return False

    fig, ax = plt.subplots()
    labels = [f"{n}\n{v:,.0f}" for n, v in zip(t["name"].astype(str), t["value"])]
    squarify.plot(
        sizes=t["value"].tolist(),
        label=labels,
        color=TREEMAP_COLOR,
        ax=ax,
        pad=True,
        edgecolor="white",
        text_kwargs={"color": "white", "fontsize": 9},
    )
    ax.axis("off")
    plt.title(title)
    plt.tight_layout()
    fig.savefig(out_path, dpi=200)
    plt.close(fig)
    return True


def generate_charts(tables: dict[str, pd.DataFrame], out_dir: Path) -> list[Path]:
    """
    Creates PNG charts and returns the list of generated file paths.
    Uses the frames from tables.build_tables; empty views are skipped.
    """
    ensure_dir(out_dir)
    created: list[Path] = []

    ts = tables.get("TimeSeries", pd.DataFrame())
    if not ts.empty and len(ts.columns) > 1:
        p = out_dir / "trend_by_category.png"
        save_trend_chart(ts, "Domestic Volume Trend", p)
        created.append(p)

    monthly = tables.get("MonthlyStacked", pd.DataFrame())
    if not monthly.empty and len(monthly.columns) > 1:
        p = out_dir / "monthly_stacked.png"
        save_stacked_chart(monthly, "Domestic Volume by Month", p)
        created.append(p)

    totals = tables.get("CategoryTotals", pd.DataFrame())
    if not totals.empty:
        p = out_dir / "category_totals.png"
        if save_bar_chart(totals["name"], totals["value"], "Domestic Volume by Category", "Domestic volume", p):
            created.append(p)
        p = out_dir / "category_treemap.png"
        if save_treemap_chart(totals, "Category Share of Domestic Volume", p):
            created.append(p)

    comparison = tables.get("SalesComparison", pd.DataFrame())
    if not comparison.empty:
        p = out_dir / "domestic_vs_export.png"
        save_comparison_chart(comparison, "Domestic vs Export", p)
        created.append(p)

    ratio = tables.get("Ratio", pd.DataFrame())
    if not ratio.empty:
        p = out_dir / "domestic_export_ratio.png"
        if save_ratio_chart(ratio, "Domestic / Export Share", p):
            created.append(p)

    return created
