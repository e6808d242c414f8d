from __future__ import annotations

import pandas as pd

from sales_views.aggregate import aggregate
from sales_views.models import SaleRecord
from sales_views.tables import build_tables, bundle_to_dict


def _bundle():
    return aggregate(
        [
            SaleRecord("فلزی", 1, 1402, domestic_volume=100, domestic_value=10, export_value=4),
            SaleRecord("پالایشی", 2, 1402, domestic_volume=300, domestic_value=30, export_value=6),
        ]
    )


def test_build_tables_orders_category_columns_by_first_seen() -> None:
    tables = build_tables(_bundle(), rows_loaded=3, rows_skipped=1)
    assert list(tables["MonthlyStacked"].columns) == ["month", "فلزی", "پالایشی"]
    assert list(tables["TimeSeries"].columns) == ["period", "فلزی", "پالایشی"]


def test_stacked_table_fills_absent_categories_with_zero() -> None:
    monthly = build_tables(_bundle())["MonthlyStacked"]
    assert monthly.loc[0, "پالایشی"] == 0
    assert monthly.loc[1, "فلزی"] == 0


def test_time_series_table_leaves_absent_categories_blank() -> None:
    ts = build_tables(_bundle())["TimeSeries"]
    assert pd.isna(ts.loc[0, "پالایشی"])
    assert ts.loc[0, "فلزی"] == 100


def test_summary_metrics() -> None:
    summary = build_tables(_bundle(), rows_loaded=3, rows_skipped=1)["Summary"]
    m = dict(zip(summary["metric"], summary["value"]))
    assert m["rows_loaded"] == 3
    assert m["rows_skipped"] == 1
    assert m["categories"] == 2
    assert m["domestic_volume"] == 400
    assert m["domestic_value"] == 40
    assert m["export_value"] == 10


def test_empty_bundle_tables() -> None:
    tables = build_tables(aggregate([]))
    assert tables["CategoryTotals"].empty
    assert tables["SalesComparison"].empty
    assert tables["Ratio"]["value"].tolist() == [0, 0]


def test_bundle_to_dict_flattens_category_fields() -> None:
    d = bundle_to_dict(_bundle())
    assert d["categories"] == ["فلزی", "پالایشی"]
    assert d["time_series"][0] == {"period": "1402-1", "فلزی": 100}
    assert d["monthly_stacked"][1] == {"month": "اردیبهشت", "پالایشی": 300}
    assert d["ratio_totals"] == [{"name": "domestic", "value": 40}, {"name": "export", "value": 10}]
