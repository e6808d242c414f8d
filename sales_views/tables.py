from __future__ import annotations

from dataclasses import asdict
from typing import Any

import pandas as pd

from sales_views.models import AggregateBundle


def _wide(points, key: str, categories: tuple[str, ...], fill: Any) -> pd.DataFrame:
    rows = []
    for p in points:
        row: dict[str, Any] = {key: getattr(p, key)}
        for c in categories:
            row[c] = p.values.get(c, fill)
        rows.append(row)
    return pd.DataFrame(rows, columns=[key, *categories])


def build_tables(bundle: AggregateBundle, rows_loaded: int = 0, rows_skipped: int = 0) -> dict[str, pd.DataFrame]:
    """
    Returns 6 tables:
      - Summary (headline numbers)
      - TimeSeries (period x category, blank where a category has no value)
      - MonthlyStacked (month x category, 0 where absent)
      - CategoryTotals
      - SalesComparison
      - Ratio
    Category columns follow bundle.categories (first-seen order).
    """
    cats = bundle.categories

    time_series = _wide(bundle.time_series, "period", cats, fill=pd.NA)
    monthly = _wide(bundle.monthly_stacked, "month", cats, fill=0)

    category_totals = pd.DataFrame(
        [asdict(t) for t in bundle.category_totals], columns=["name", "value"]
    )
    comparison = pd.DataFrame(
        [asdict(r) for r in bundle.sales_comparison],
        columns=["category", "month", "domestic_value", "export_value"],
    )
    ratio = pd.DataFrame([asdict(r) for r in bundle.ratio_totals], columns=["name", "value"])

    totals = dict(zip(ratio["name"], ratio["value"]))
    summary = pd.DataFrame(
        {
            "metric": [
                "rows_loaded",
                "rows_skipped",
                "categories",
                "periods",
                "domestic_volume",
                "domestic_value",
                "export_value",
            ],
            "value": [
                rows_loaded,
                rows_skipped,
                len(cats),
                len(bundle.time_series),
                category_totals["value"].sum() if not category_totals.empty else 0,
                totals.get("domestic", 0),
                totals.get("export", 0),
            ],
        }
    )

    return {
        "Summary": summary,
        "TimeSeries": time_series,
        "MonthlyStacked": monthly,
        "CategoryTotals": category_totals,
        "SalesComparison": comparison,
        "Ratio": ratio,
    }


def bundle_to_dict(bundle: AggregateBundle) -> dict[str, Any]:
    """Plain JSON-ready structure; dynamic category fields are flattened into each point."""
    return {
        "categories": list(bundle.categories),
        "time_series": [{"period": p.period, **p.values} for p in bundle.time_series],
        "monthly_stacked": [{"month": p.month, **p.values} for p in bundle.monthly_stacked],
        "category_totals": [asdict(t) for t in bundle.category_totals],
        "sales_comparison": [asdict(r) for r in bundle.sales_comparison],
        "ratio_totals": [asdict(r) for r in bundle.ratio_totals],
    }
