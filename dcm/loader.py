"""
Table loader (CSV / Excel -> RawRow list)
========================================

This module reads the two dashboard source tables and hands them to the
aggregation stages as plain rows (column name -> cell text).

Key ideas:
- Cells are read as strings; numeric parsing happens later (`to_number`) so
  that one bad cell only zeroes that cell, never the whole column.
- Column labels are stripped because exported headers often carry spaces.
- Anything that stops a table from being fetched raises `DataLoadError`.
"""

from __future__ import annotations
from typing import List
import math
import os

import pandas as pd
from loguru import logger

from .models import RawRow

REQUIRED_COLUMNS = ("Country", "ISO3", "Indicator")


class DataLoadError(RuntimeError):
    """A source table could not be fetched or turned into records."""


def to_number(x) -> float:
    """Convert a cell to float, returning 0.0 if missing/invalid/non-finite."""
    if x is None:
        return 0.0
    if isinstance(x, str):
        x = x.strip()
        if not x:
            return 0.0
    try:
        v = float(x)
    except (TypeError, ValueError):
        return 0.0
    return v if math.isfinite(v) else 0.0


def _to_str(x) -> str:
    if x is None or (isinstance(x, float) and math.isnan(x)):
        return ""
    return str(x).strip()


def _read_frame(path: str) -> pd.DataFrame:
    ext = os.path.splitext(path)[1].lower()
    if ext in (".xlsx", ".xlsm"):
        return pd.read_excel(path, engine="openpyxl", dtype=str)
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def read_rows(path: str) -> List[RawRow]:
    """Read one source table into a list of RawRow dicts.

    Raises:
        DataLoadError: file missing or unreadable, or required columns absent.
    """
    if not os.path.exists(path):
        raise DataLoadError(f"Source table not found: {path}")
    try:
        df = _read_frame(path)
    except Exception as e:
        raise DataLoadError(f"Could not read {path}: {e}") from e

    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DataLoadError(f"{path} is missing required columns {missing}. Available={list(df.columns)}")

    cols = list(df.columns)
    rows: List[RawRow] = [
        {c: _to_str(v) for c, v in zip(cols, values)}
        for values in df.itertuples(index=False, name=None)
    ]
    logger.debug("Read {} rows ({} columns) from {}", len(rows), len(cols), path)
    return rows
