"""
Derived metrics
===============

Small pure helpers over an `IndicatorSeries`, shared by every view.
None of them mutate their input.
"""

from __future__ import annotations
from typing import Dict, Iterable, Optional, Union
import math

from .models import IndicatorSeries, YearValue


class _Skip:
    """Marker returned by `normalize_by_area` when a country must be dropped."""

    _instance: Optional["_Skip"] = None

    def __new__(cls) -> "_Skip":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SKIP"

    def __bool__(self) -> bool:
        return False


SKIP = _Skip()


def sum_indicator(series: IndicatorSeries) -> float:
    """Sum of all yearly values (0 for an empty series)."""
    return sum(yv.value for yv in series.yearly_values)


def combine_series(series: Iterable[IndicatorSeries], type_: str) -> IndicatorSeries:
    """Year-wise sum of several series into one (years from any input)."""
    totals: Dict[int, float] = {}
    for s in series:
        for yv in s.yearly_values:
            totals[yv.year] = totals.get(yv.year, 0.0) + yv.value
    return IndicatorSeries(
        type=type_,
        yearly_values=tuple(YearValue(year=y, value=totals[y]) for y in sorted(totals)),
    )


def _in_range(series: IndicatorSeries, year_low: int, year_high: int):
    # An inverted range matches no year
    return [yv.value for yv in series.yearly_values if year_low <= yv.year <= year_high]


def mean_indicator_over_range(series: IndicatorSeries, year_low: int, year_high: int) -> float:
    """Mean over years in [year_low, year_high]; 0 when no year qualifies.

    "No data" and "a true mean of zero" are indistinguishable here; use
    `mean_or_none_over_range` when that matters.
    """
    vals = _in_range(series, year_low, year_high)
    return sum(vals) / len(vals) if vals else 0.0


def mean_or_none_over_range(series: IndicatorSeries, year_low: int, year_high: int) -> Optional[float]:
    """Like `mean_indicator_over_range` but None when no year qualifies."""
    vals = _in_range(series, year_low, year_high)
    return sum(vals) / len(vals) if vals else None


def latest_value(series: IndicatorSeries, default: Optional[float] = None) -> Optional[float]:
    """Value of the latest year with a finite reading, or `default`."""
    for yv in sorted(series.yearly_values, key=lambda yv: yv.year, reverse=True):
        if isinstance(yv.year, int) and math.isfinite(yv.value):
            return yv.value
    return default


def normalize_by_area(value: float, area_value: Optional[float], scale_factor: float) -> Union[float, _Skip]:
    """Scale `value` per unit of land area, or SKIP when the area is unusable.

    The area is unusable when it is None, zero or NaN; callers must then drop
    the country instead of emitting inf/NaN.
    """
    if area_value is None or area_value == 0 or math.isnan(area_value):
        return SKIP
    return value * scale_factor / area_value
