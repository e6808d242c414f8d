from __future__ import annotations

import random

from sales_views.aggregate import aggregate, aggregate_rows
from sales_views.clean import CATEGORY_LABEL, DOMESTIC_VOLUME_LABEL, MONTH_LABEL, YEAR_LABEL
from sales_views.models import (
    CategoryTotal,
    RatioTotal,
    SaleRecord,
    SalesComparisonRow,
    StackedMonthPoint,
    TimeSeriesPoint,
)


def _records() -> list[SaleRecord]:
    return [
        SaleRecord("فلزی", 1, 1402, domestic_volume=1000, domestic_value=10, export_value=4),
        SaleRecord("پالایشی", 1, 1402, domestic_volume=2400, domestic_value=20, export_value=0),
        SaleRecord("فلزی", 2, 1402, domestic_volume=1200, domestic_value=12, export_value=1),
        SaleRecord("معدنی", 2, 1402, domestic_volume=1700, domestic_value=17, export_value=1),
        SaleRecord("فلزی", 1, 1403, domestic_volume=900, domestic_value=9, export_value=2),
    ]


def test_duplicate_period_keeps_last_value_while_totals_sum() -> None:
    records = [
        SaleRecord("Metal", 1, 1402, domestic_volume=100),
        SaleRecord("Metal", 1, 1402, domestic_volume=50),
    ]
    bundle = aggregate(records)
    assert bundle.time_series == (TimeSeriesPoint("1402-1", {"Metal": 50}),)
    assert bundle.category_totals == (CategoryTotal("Metal", 150),)
    assert bundle.monthly_stacked == (StackedMonthPoint("فروردین", {"Metal": 150}),)


def test_time_series_groups_by_year_and_month_in_first_seen_order() -> None:
    bundle = aggregate(_records())
    assert [p.period for p in bundle.time_series] == ["1402-1", "1402-2", "1403-1"]
    assert bundle.time_series[0].values == {"فلزی": 1000, "پالایشی": 2400}
    assert bundle.time_series[2].values == {"فلزی": 900}


def test_monthly_stacked_collapses_years() -> None:
    bundle = aggregate(_records())
    assert bundle.monthly_stacked == (
        StackedMonthPoint("فروردین", {"فلزی": 1900, "پالایشی": 2400}),
        StackedMonthPoint("اردیبهشت", {"فلزی": 1200, "معدنی": 1700}),
    )


def test_category_list_follows_first_appearance() -> None:
    bundle = aggregate(_records())
    assert bundle.categories == ("فلزی", "پالایشی", "معدنی")
    assert [t.name for t in bundle.category_totals] == list(bundle.categories)


def test_category_totals_are_order_independent() -> None:
    records = _records()
    shuffled = list(records)
    random.Random(7).shuffle(shuffled)
    a = {t.name: t.value for t in aggregate(records).category_totals}
    b = {t.name: t.value for t in aggregate(shuffled).category_totals}
    assert a == b == {"فلزی": 3100, "پالایشی": 2400, "معدنی": 1700}


def test_sales_comparison_is_one_row_per_record() -> None:
    bundle = aggregate(_records())
    assert len(bundle.sales_comparison) == 5
    assert bundle.sales_comparison[0] == SalesComparisonRow("فلزی", "فروردین", 10, 4)


def test_ratio_totals_match_comparison_rows() -> None:
    bundle = aggregate(_records())
    assert bundle.ratio_totals == (RatioTotal("domestic", 68), RatioTotal("export", 8))
    assert bundle.ratio_totals[0].value == sum(r.domestic_value for r in bundle.sales_comparison)
    assert bundle.ratio_totals[1].value == sum(r.export_value for r in bundle.sales_comparison)


def test_empty_input() -> None:
    bundle = aggregate([])
    assert bundle.time_series == ()
    assert bundle.monthly_stacked == ()
    assert bundle.category_totals == ()
    assert bundle.sales_comparison == ()
    assert bundle.categories == ()
    assert bundle.ratio_totals == (RatioTotal("domestic", 0), RatioTotal("export", 0))


def test_repeated_calls_are_equal() -> None:
    records = tuple(_records())
    assert aggregate(records) == aggregate(records)


def test_out_of_range_month_keeps_its_code() -> None:
    bundle = aggregate([SaleRecord("فلزی", 99, 1402, domestic_volume=5)])
    assert bundle.monthly_stacked[0].month == "99"
    assert bundle.time_series[0].period == "1402-99"
    assert bundle.sales_comparison[0].month == "99"


def test_missing_year_uses_unknown_period() -> None:
    bundle = aggregate([SaleRecord("فلزی", 3, None, domestic_volume=5)])
    assert bundle.time_series[0].period == "unknown-3"


def test_aggregate_rows_skips_ungroupable_rows_everywhere() -> None:
    rows = [
        {CATEGORY_LABEL: "فلزی", YEAR_LABEL: 1402, MONTH_LABEL: 1, DOMESTIC_VOLUME_LABEL: 10},
        {CATEGORY_LABEL: None, YEAR_LABEL: 1402, MONTH_LABEL: 1, DOMESTIC_VOLUME_LABEL: 99},
        {CATEGORY_LABEL: "معدنی", YEAR_LABEL: 1402, MONTH_LABEL: None, DOMESTIC_VOLUME_LABEL: 99},
        {CATEGORY_LABEL: "فلزی", YEAR_LABEL: 1402.0, MONTH_LABEL: "1", DOMESTIC_VOLUME_LABEL: "abc"},
    ]
    bundle = aggregate_rows(rows)
    assert bundle.categories == ("فلزی",)
    assert bundle.time_series == (TimeSeriesPoint("1402-1", {"فلزی": 0}),)
    assert bundle.category_totals == (CategoryTotal("فلزی", 10),)
    assert len(bundle.sales_comparison) == 2
    assert all("undefined" not in p.period for p in bundle.time_series)
