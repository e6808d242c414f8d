from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

Number = Union[int, float]


@dataclass(frozen=True)
class SaleRecord:
    category: str
    month_code: int | str
    year: int | str | None = None
    domestic_volume: Number = 0
    domestic_value: Number = 0
    export_value: Number = 0


@dataclass(frozen=True)
class TimeSeriesPoint:
    period: str
    values: dict[str, Number] = field(default_factory=dict)


@dataclass(frozen=True)
class StackedMonthPoint:
    month: str
    values: dict[str, Number] = field(default_factory=dict)


@dataclass(frozen=True)
class CategoryTotal:
    name: str
    value: Number


@dataclass(frozen=True)
class SalesComparisonRow:
    category: str
    month: str
    domestic_value: Number
    export_value: Number


@dataclass(frozen=True)
class RatioTotal:
    name: str
    value: Number


@dataclass(frozen=True)
class AggregateBundle:
    """
    Presentation-ready views derived from one row set:
      - time_series: last domestic volume per (year, month) and category
      - monthly_stacked: domestic volume summed per month label and category
      - category_totals: domestic volume summed per category
      - sales_comparison: per-row domestic vs export value
      - ratio_totals: grand totals, domestic first, export second
      - categories: distinct categories in first-seen order
    """

    time_series: tuple[TimeSeriesPoint, ...] = ()
    monthly_stacked: tuple[StackedMonthPoint, ...] = ()
    category_totals: tuple[CategoryTotal, ...] = ()
    sales_comparison: tuple[SalesComparisonRow, ...] = ()
    ratio_totals: tuple[RatioTotal, ...] = ()
    categories: tuple[str, ...] = ()
