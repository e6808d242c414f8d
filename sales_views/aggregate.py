"""Aggregate views over parsed sales records.

`aggregate` folds a record sequence once into every view the dashboard
renders. All accumulator state is local to the call, so concurrent calls
never share anything and repeated calls on the same input are deep-equal.

Note the two accumulation rules:
  - time_series keeps the LAST domestic volume seen for a category within a
    (year, month) period; duplicates overwrite.
  - monthly_stacked, category_totals and ratio_totals SUM.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping

from sales_views.clean import parse_rows
from sales_views.models import (
    AggregateBundle,
    CategoryTotal,
    Number,
    RatioTotal,
    SaleRecord,
    SalesComparisonRow,
    StackedMonthPoint,
    TimeSeriesPoint,
)
from sales_views.months import month_label

DOMESTIC = "domestic"
EXPORT = "export"
UNKNOWN_YEAR = "unknown"


def period_key(rec: SaleRecord) -> str:
    year = UNKNOWN_YEAR if rec.year is None else rec.year
    return f"{year}-{rec.month_code}"


def aggregate(records: Iterable[SaleRecord]) -> AggregateBundle:
    # dicts keep insertion order -> first-seen order for every view
    periods: dict[str, dict[str, Number]] = {}
    months: dict[str, dict[str, Number]] = {}
    totals: dict[str, Number] = {}
    comparison: list[SalesComparisonRow] = []
    domestic_total: Number = 0
    export_total: Number = 0

    for rec in records:
        if not rec.category or rec.month_code in (None, ""):
            continue

        label = month_label(rec.month_code)

        periods.setdefault(period_key(rec), {})[rec.category] = rec.domestic_volume

        month = months.setdefault(label, {})
        month[rec.category] = month.get(rec.category, 0) + rec.domestic_volume

        totals[rec.category] = totals.get(rec.category, 0) + rec.domestic_volume

        comparison.append(
            SalesComparisonRow(
                category=rec.category,
                month=label,
                domestic_value=rec.domestic_value,
                export_value=rec.export_value,
            )
        )
        domestic_total += rec.domestic_value
        export_total += rec.export_value

    return AggregateBundle(
        time_series=tuple(TimeSeriesPoint(period=k, values=v) for k, v in periods.items()),
        monthly_stacked=tuple(StackedMonthPoint(month=k, values=v) for k, v in months.items()),
        category_totals=tuple(CategoryTotal(name=k, value=v) for k, v in totals.items()),
        sales_comparison=tuple(comparison),
        ratio_totals=(
            RatioTotal(name=DOMESTIC, value=domestic_total),
            RatioTotal(name=EXPORT, value=export_total),
        ),
        # totals is keyed in first-seen order, so it doubles as the category list
        categories=tuple(totals.keys()),
    )


def aggregate_rows(
    rows: Iterable[Mapping[str, Any]],
    aliases: Mapping[str, str] | None = None,
) -> AggregateBundle:
    """Parse decoded sheet rows and aggregate the accepted records."""
    return aggregate(parse_rows(rows, aliases=aliases).records)
