from __future__ import annotations

from pathlib import Path
from datetime import datetime
from xml.sax.saxutils import escape

import pandas as pd
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.lib import colors
from reportlab.platypus import (
    SimpleDocTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
    Image,
    PageBreak,
    KeepTogether,
)
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from sales_views.charts import label_font_path

# Helvetica has no Persian glyphs; category and month labels need a TTF
LABEL_FONT_NAME = "DejaVuSans"


TABLE_STYLE = TableStyle(
    [
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("FONTNAME", (0, 0), (-1, -1), LABEL_FONT_NAME),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("PADDING", (0, 0), (-1, -1), 4),
    ]
)


def _register_label_font() -> None:
    if LABEL_FONT_NAME not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(LABEL_FONT_NAME, label_font_path()))


def _label_styles():
    styles = getSampleStyleSheet()
    for name in ("Title", "Heading2", "Normal"):
        styles[name].fontName = LABEL_FONT_NAME
    return styles


def _fmt_num(x) -> str:
    if x is None or pd.isna(x):
        return ""
    if isinstance(x, bool):
        return str(x)
    if isinstance(x, int):
        return f"{x:,}"
    if isinstance(x, float):
        return f"{x:,.0f}" if x.is_integer() else f"{x:,.2f}"
    return str(x)


def _frame_table(df: pd.DataFrame, max_rows: int = 25) -> Table:
    d = df.head(max_rows)
    d_fmt = d.apply(lambda col: col.map(_fmt_num)) if not d.empty else d
    table_data = [[str(c) for c in d.columns]] + d_fmt.values.tolist()
    tbl = Table(table_data, repeatRows=1)
    tbl.setStyle(TABLE_STYLE)
    return tbl


def _bullets(story: list, styles, title: str, lines: list[str], limit: int) -> None:
    if not lines:
        return
    story.append(Paragraph(title, styles["Heading2"]))
    for line in lines[:limit]:
        story.append(Paragraph(f"• {escape(line)}", styles["Normal"]))
    if len(lines) > limit:
        story.append(Paragraph(f"(+ {len(lines) - limit} more)", styles["Normal"]))
    story.append(Spacer(1, 0.25 * cm))


def write_pdf_report(
    out_path: Path,
    tables: dict[str, pd.DataFrame],
    chart_paths: list[Path],
    source_label: str,
    report_title: str = "Sales Dashboard",
    report_subtitle: str = "",
    notes: list[str] | None = None,
    warnings: list[str] | None = None,
) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)

    _register_label_font()
    styles = _label_styles()
    story = []

    # ---- Title page ----
    story.append(Paragraph(escape(report_title or "Sales Dashboard"), styles["Title"]))
    if report_subtitle:
        story.append(Spacer(1, 0.15 * cm))
        story.append(Paragraph(escape(report_subtitle), styles["Heading2"]))

    story.append(Spacer(1, 0.25 * cm))
    story.append(Paragraph(f"Source: {escape(source_label)}", styles["Normal"]))
    story.append(Paragraph(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}", styles["Normal"]))
    story.append(Spacer(1, 0.35 * cm))

    _bullets(story, styles, "Warnings", list(warnings or []), limit=10)

    # ---- Headline numbers ----
    story.append(Paragraph("Summary", styles["Heading2"]))
    story.append(_frame_table(tables["Summary"]))
    story.append(Spacer(1, 0.25 * cm))

    story.append(Paragraph("Domestic / Export Totals", styles["Heading2"]))
    story.append(_frame_table(tables["Ratio"]))
    story.append(Spacer(1, 0.25 * cm))

    clean_notes = [str(x).strip() for x in (notes or []) if str(x).strip()]
    _bullets(story, styles, "Commentary", clean_notes, limit=8)

    # ---- Charts (2 per page) ----
    chart_paths = [Path(p) for p in chart_paths if Path(p).exists()]
    if chart_paths:
        story.append(PageBreak())
        story.append(Paragraph("Charts", styles["Heading2"]))
        story.append(Spacer(1, 0.2 * cm))

    page_w, page_h = A4
    margin = 1.7 * cm
    max_w = page_w - 2 * margin
    max_h_each = (page_h - 2 * margin - 4.5 * cm) / 2

    for idx in range(0, len(chart_paths), 2):
        pair: list = []
        for p in chart_paths[idx : idx + 2]:
            pair.append(Paragraph(p.name, styles["Normal"]))
            pair.append(Spacer(1, 0.12 * cm))
            img = Image(str(p))
            img.hAlign = "CENTER"
            img._restrictSize(max_w, max_h_each)
            pair.append(img)
            pair.append(Spacer(1, 0.35 * cm))

        story.append(KeepTogether(pair))

        if idx + 2 < len(chart_paths):
            story.append(PageBreak())

    # ---- Category totals snapshot ----
    totals = tables.get("CategoryTotals", pd.DataFrame())
    if not totals.empty:
        story.append(PageBreak())
        story.append(Paragraph("Category Totals", styles["Heading2"]))
        story.append(_frame_table(totals))

    doc = SimpleDocTemplate(
        str(out_path),
        pagesize=A4,
        leftMargin=margin,
        rightMargin=margin,
        topMargin=margin,
        bottomMargin=margin,
        title=report_title or "Sales Dashboard",
    )
    doc.build(story)
