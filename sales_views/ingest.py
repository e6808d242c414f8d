from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import pandas as pd

log = logging.getLogger(__name__)


SUPPORTED = {".csv", ".xlsx", ".xls"}


def is_url(source: str | Path) -> bool:
    return urlparse(str(source)).scheme in {"http", "https"}


def _suffix(source: str | Path) -> str:
    if is_url(source):
        return Path(urlparse(str(source)).path).suffix.lower()
    return Path(source).suffix.lower()


def read_frame(source: str | Path) -> pd.DataFrame:
    """Decode the first sheet of one workbook (or one CSV) from a path or URL."""
    suffix = _suffix(source)
    if suffix not in SUPPORTED:
        raise ValueError(f"Unsupported file type '{suffix or '?'}' for {source} (expected one of {sorted(SUPPORTED)})")

    if not is_url(source) and not Path(source).exists():
        raise FileNotFoundError(f"Input file not found: {source}")

    if suffix == ".csv":
        # try utf-8, then fallback
        try:
            df = pd.read_csv(source)
        except UnicodeDecodeError:
            df = pd.read_csv(source, encoding="latin-1")
    else:
        df = pd.read_excel(source, sheet_name=0)

    log.info("Read %d rows x %d columns from %s", len(df), len(df.columns), source)
    return df


def frame_to_rows(df: pd.DataFrame) -> list[dict[str, Any]]:
    if df.empty:
        return []
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient="records")


def read_rows(source: str | Path) -> list[dict[str, Any]]:
    return frame_to_rows(read_frame(source))
