from __future__ import annotations


# Solar Hijri month codes as stored in the sales sheet.
MONTH_LABELS: dict[int, str] = {
    1: "فروردین",
    2: "اردیبهشت",
    3: "خرداد",
    4: "تیر",
    5: "مرداد",
    6: "شهریور",
    7: "مهر",
    8: "آبان",
    9: "آذر",
    10: "دی",
    11: "بهمن",
    12: "اسفند",
}


def month_label(code: int | str) -> str:
    """Display label for a month code; unknown codes pass through as text."""
    if isinstance(code, int) and code in MONTH_LABELS:
        return MONTH_LABELS[code]
    return str(code)
