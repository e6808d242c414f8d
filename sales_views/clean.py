from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Mapping

import pandas as pd

from sales_views.models import SaleRecord

log = logging.getLogger(__name__)


CATEGORY_LABEL = "دسته کسب و کار"
YEAR_LABEL = "سال"
MONTH_LABEL = "ماه"
DOMESTIC_VOLUME_LABEL = "فروش داخلی (حجمی)"
DOMESTIC_VALUE_LABEL = "فروش داخلی (ریالی)"
EXPORT_VALUE_LABEL = "صادرات"

FIELDS = ["category", "year", "month_code", "domestic_volume", "domestic_value", "export_value"]
FIGURES = ["domestic_volume", "domestic_value", "export_value"]

DEFAULT_ALIASES = {
    # sheet labels
    CATEGORY_LABEL: "category",
    YEAR_LABEL: "year",
    MONTH_LABEL: "month_code",
    DOMESTIC_VOLUME_LABEL: "domestic_volume",
    DOMESTIC_VALUE_LABEL: "domestic_value",
    EXPORT_VALUE_LABEL: "export_value",
    # english exports of the same sheet
    "category": "category",
    "year": "year",
    "month": "month_code",
    "month_code": "month_code",
    "domestic_volume": "domestic_volume",
    "domestic_value": "domestic_value",
    "export_value": "export_value",
    "export": "export_value",
}

REQUIRED = ["category", "month_code"]  # rows without these cannot be grouped

# Persian (U+06F0..) and Arabic-Indic (U+0660..) digits
_DIGITS = str.maketrans("۰۱۲۳۴۵۶۷۸۹٠١٢٣٤٥٦٧٨٩", "01234567890123456789")
_SEPARATORS = re.compile(r"[,\s٬،]")


@dataclass(frozen=True)
class CleanResult:
    records: list[SaleRecord]
    skipped: int = 0
    warnings: list[str] = field(default_factory=list)


def normalise_label(label: Any) -> str:
    return re.sub(r"\s+", " ", str(label)).strip()


def resolve_columns(labels: Iterable[Any], aliases: Mapping[str, str] | None = None) -> dict[str, str]:
    """
    Map raw sheet labels to record fields.
    Extra aliases (from config) win over the defaults; the first label that
    resolves to a field keeps it.
    """
    table = {normalise_label(k): v for k, v in DEFAULT_ALIASES.items()}
    for k, v in (aliases or {}).items():
        table[normalise_label(k)] = v

    out: dict[str, str] = {}
    taken: set[str] = set()
    for label in labels:
        key = normalise_label(label)
        target = table.get(key) or table.get(key.lower())
        if target is None or target not in FIELDS or target in taken:
            continue
        out[label] = target
        taken.add(target)
    return out


def _numeric_text(s: pd.Series) -> pd.Series:
    return (
        s.astype(str)
        .str.translate(_DIGITS)
        .str.replace(_SEPARATORS, "", regex=True)
        .str.replace("٫", ".", regex=False)  # arabic decimal separator
    )


def coerce_figures(s: pd.Series) -> pd.Series:
    """Summable figures; absent, boolean or non-numeric cells count as 0."""
    s = s.astype(object)
    num = pd.to_numeric(_numeric_text(s), errors="coerce")
    num = num.mask(num.abs() == float("inf")).fillna(0)
    if (num % 1 == 0).all():
        num = num.astype("int64")
    return num


def coerce_keys(s: pd.Series, part: str) -> pd.Series:
    """
    Grouping keys for year/month cells: integral numbers become int, other
    text stays stripped text, blanks become NaN. Date cells (Excel
    date-formatted columns) contribute their `part` ("year" or "month").
    """
    s = s.astype(object)
    text = s.where(s.notna(), "").astype(str).str.strip()
    num = pd.to_numeric(_numeric_text(text), errors="coerce")

    out = text.mask(text == "").astype(object)
    integral = num.notna() & (num % 1 == 0)
    if integral.any():
        out[integral] = [int(v) for v in num[integral]]
    dates = s.map(lambda x: isinstance(x, date)).astype(bool)
    if dates.any():
        out[dates] = [getattr(d, part) for d in s[dates]]
    return out


def coerce_labels(s: pd.Series) -> pd.Series:
    s = s.astype(object)
    s = s.map(lambda x: int(x) if isinstance(x, float) and x.is_integer() else x)
    text = s.astype(str).str.replace(r"\s+", " ", regex=True).str.strip()
    return text.mask(s.isna() | (text == ""))


def validate_columns(columns: Mapping[str, str], has_rows: bool) -> list[str]:
    warnings: list[str] = []
    if not has_rows:
        return warnings
    present = set(columns.values())
    for f in FIELDS:
        if f not in present:
            if f in REQUIRED:
                warnings.append(f"Missing required column for '{f}'; no rows can be grouped")
            else:
                warnings.append(f"Missing column for '{f}'; treated as absent")
    return warnings


def coerce_frame(df: pd.DataFrame, columns: Mapping[str, str]) -> pd.DataFrame:
    df = df[list(columns)].rename(columns=dict(columns)).copy()
    for f in FIELDS:
        if f not in df.columns:
            df[f] = None

    df["category"] = coerce_labels(df["category"])
    df["month_code"] = coerce_keys(df["month_code"], "month")
    df["year"] = coerce_keys(df["year"], "year")
    for c in FIGURES:
        df[c] = coerce_figures(df[c])
    return df[FIELDS]


def parse_rows(rows: Iterable[Mapping[str, Any]], aliases: Mapping[str, str] | None = None) -> CleanResult:
    rows = list(rows)
    if not rows:
        return CleanResult(records=[])

    # columns follow first appearance across rows; absent cells are NaN
    df = pd.DataFrame(rows)

    columns = resolve_columns(df.columns, aliases=aliases)
    warnings = validate_columns(columns, has_rows=True)

    df = coerce_frame(df, columns)
    keep = df["category"].notna() & df["month_code"].notna()
    skipped = int((~keep).sum())

    df = df[keep].astype(object)
    df = df.where(df.notna(), None)
    records = [SaleRecord(**rec) for rec in df.to_dict(orient="records")]

    if skipped:
        log.info("Skipped %d row(s) without category or month", skipped)
    for w in warnings:
        log.warning(w)

    return CleanResult(records=records, skipped=skipped, warnings=warnings)
