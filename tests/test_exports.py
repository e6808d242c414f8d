from __future__ import annotations

import json
from pathlib import Path

from openpyxl import load_workbook
from reportlab.pdfbase import pdfmetrics

from sales_views.aggregate import aggregate
from sales_views.charts import generate_charts
from sales_views.export_excel import write_excel_pack
from sales_views.export_json import write_bundle_json
from sales_views.models import SaleRecord
from sales_views.pdf_report import LABEL_FONT_NAME, write_pdf_report
from sales_views.runlog import write_run_log
from sales_views.tables import build_tables


def _bundle():
    return aggregate(
        [
            SaleRecord("فلزی", 1, 1402, domestic_volume=1000, domestic_value=1000, export_value=400),
            SaleRecord("فلزی", 2, 1402, domestic_volume=1200, domestic_value=1200, export_value=100),
            SaleRecord("پالایشی", 1, 1402, domestic_volume=2400, domestic_value=2400, export_value=0),
        ]
    )


def test_excel_pack_has_one_sheet_per_view(tmp_path: Path) -> None:
    out = tmp_path / "pack.xlsx"
    write_excel_pack(out, build_tables(_bundle(), rows_loaded=3), warnings=["Missing column for 'year'"])
    wb = load_workbook(out)
    assert wb.sheetnames == [
        "Summary",
        "TimeSeries",
        "MonthlyStacked",
        "CategoryTotals",
        "SalesComparison",
        "Ratio",
        "Warnings",
    ]
    ws = wb["CategoryTotals"]
    assert [c.value for c in ws[1]] == ["name", "value"]
    assert ws["A2"].value == "فلزی"
    assert ws["B2"].value == 2200


def test_json_export_round_trips_labels(tmp_path: Path) -> None:
    out = tmp_path / "views.json"
    write_bundle_json(out, _bundle())
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["categories"] == ["فلزی", "پالایشی"]
    assert "فلزی" in out.read_text(encoding="utf-8")
    assert data["ratio_totals"][0] == {"name": "domestic", "value": 4600}


def test_charts_and_pdf(tmp_path: Path) -> None:
    tables = build_tables(_bundle(), rows_loaded=3)
    created = generate_charts(tables, tmp_path / "charts")
    assert {p.name for p in created} == {
        "trend_by_category.png",
        "monthly_stacked.png",
        "category_totals.png",
        "category_treemap.png",
        "domestic_vs_export.png",
        "domestic_export_ratio.png",
    }
    assert all(p.exists() for p in created)

    pdf = tmp_path / "report.pdf"
    write_pdf_report(pdf, tables, created, source_label="sales.xlsx", notes=["Q1 <draft>"])
    assert pdf.read_bytes().startswith(b"%PDF")
    assert LABEL_FONT_NAME in pdfmetrics.getRegisteredFontNames()


def test_charts_skip_empty_views(tmp_path: Path) -> None:
    assert generate_charts(build_tables(aggregate([])), tmp_path / "charts") == []


def test_run_log(tmp_path: Path) -> None:
    out = tmp_path / "run_log.txt"
    write_run_log(
        out,
        source="sales.xlsx",
        out_dir=str(tmp_path),
        rows_loaded=4,
        rows_skipped=1,
        categories=["فلزی"],
        charts_count=2,
        pdf_created=False,
        warnings=None,
    )
    text = out.read_text(encoding="utf-8")
    assert "Rows skipped: 1" in text
    assert "Categories: فلزی" in text
    assert "- (none)" in text


def test_treemap_skips_categories_without_volume(tmp_path: Path) -> None:
    bundle = aggregate([SaleRecord("فلزی", 1, 1402, domestic_volume=0)])
    created = generate_charts(build_tables(bundle), tmp_path / "charts")
    assert "category_treemap.png" not in {p.name for p in created}
