"""
View records (what each dashboard chart plots)
==============================================

Each function reads the shared Dataset and SelectionState and returns plain
frozen records, already filtered and sorted. Drawing them is left to the UI.

- `disaster_bars`           stacked bar: disasters per type per country
- `carbon_disaster_scatter` mean carbon stocks vs. mean yearly disasters
- `carbon_stock_bars`       mean carbon stocks + latest forest extent index
- `disaster_time_series`    yearly disaster totals per country (+ "ALL")

When `state.normalize` is on, values are divided by the country's latest
land area (from the carbon table). Countries without a usable land area are
dropped from that view with a warning.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import math

from loguru import logger

from .config import DashboardConfig
from .metrics import (
    SKIP,
    combine_series,
    latest_value,
    mean_indicator_over_range,
    normalize_by_area,
    sum_indicator,
)
from .models import CARBON, CountryRecord, Dataset, IndicatorSeries, YearValue
from .state import SelectionState

ALL_COUNTRIES = "ALL"


@dataclass(frozen=True)
class DisasterBar:
    iso3: str
    country: str
    values: Tuple[Tuple[str, float], ...]
    total: float
    highlighted: bool

    def value(self, type_: str) -> float:
        return dict(self.values).get(type_, 0.0)


@dataclass(frozen=True)
class ScatterPoint:
    iso3: str
    country: str
    carbon: float
    disasters: float
    highlighted: bool
    hovered: bool


@dataclass(frozen=True)
class CarbonBar:
    iso3: str
    country: str
    carbon_stock: float
    forest_extent_index: float
    highlighted: bool


@dataclass(frozen=True)
class TimeSeries:
    iso3: str
    country: str
    points: Tuple[YearValue, ...]


def land_area(dataset: Dataset, iso3: str) -> Optional[float]:
    """Latest non-zero land area for a country, None if unknown.

    Blank cells are read as 0, so zero readings are skipped here rather than
    treated as an area.
    """
    series = dataset.series(CARBON, iso3, "Land area")
    if series is None:
        return None
    for yv in reversed(series.yearly_values):
        if yv.value != 0 and math.isfinite(yv.value):
            return yv.value
    return None


def _per_area(dataset: Dataset, iso3: str, values: Dict, cfg: DashboardConfig, view: str) -> Optional[Dict]:
    area = land_area(dataset, iso3)
    out: Dict = {}
    for k, v in values.items():
        nv = normalize_by_area(v, area, cfg.area_scale_factor)
        if nv is SKIP:
            logger.warning("{}: dropping {} (land area missing or zero)", view, iso3)
            return None
        out[k] = nv
    return out


def _selected_disasters(rec: CountryRecord, state: SelectionState) -> IndicatorSeries:
    return combine_series((rec.indicator(t) for t in state.ordered_types()), "Selected")


def disaster_bars(dataset: Dataset, state: SelectionState, cfg: DashboardConfig) -> List[DisasterBar]:
    """Per-country totals of each selected disaster type, largest total first."""
    types = state.ordered_types()
    out: List[DisasterBar] = []
    for rec in dataset.disasters:
        if not state.is_visible(rec.iso3):
            continue
        values = {t: sum_indicator(rec.indicator(t)) for t in types}
        if state.normalize:
            values = _per_area(dataset, rec.iso3, values, cfg, "disaster_bars")
            if values is None:
                continue
        out.append(DisasterBar(
            iso3=rec.iso3,
            country=rec.country,
            values=tuple((t, values[t]) for t in types),
            total=sum(values.values()),
            highlighted=rec.iso3 in state.highlighted_countries,
        ))
    out.sort(key=lambda b: (-b.total, b.country))
    return out


def carbon_disaster_scatter(dataset: Dataset, state: SelectionState, cfg: DashboardConfig) -> List[ScatterPoint]:
    """One point per country present in both tables."""
    out: List[ScatterPoint] = []
    for rec in dataset.disasters:
        if not state.is_visible(rec.iso3):
            continue
        carbon_rec = dataset.carbon_record(rec.iso3)
        if carbon_rec is None:
            logger.debug("carbon_disaster_scatter: no carbon data for {}", rec.iso3)
            continue
        values = {
            "carbon": mean_indicator_over_range(carbon_rec.indicator("Carbon stocks"), cfg.year_low, cfg.year_high),
            "disasters": mean_indicator_over_range(_selected_disasters(rec, state), cfg.year_low, cfg.year_high),
        }
        if state.normalize:
            values = _per_area(dataset, rec.iso3, values, cfg, "carbon_disaster_scatter")
            if values is None:
                continue
        out.append(ScatterPoint(
            iso3=rec.iso3,
            country=rec.country,
            carbon=values["carbon"],
            disasters=values["disasters"],
            highlighted=rec.iso3 in state.highlighted_countries,
            hovered=rec.iso3 == state.mouse_over_country,
        ))
    return out


def carbon_stock_bars(dataset: Dataset, state: SelectionState, cfg: DashboardConfig) -> List[CarbonBar]:
    """Mean carbon stocks per country, largest first."""
    out: List[CarbonBar] = []
    for rec in dataset.carbon:
        if not state.is_visible(rec.iso3):
            continue
        stock = mean_indicator_over_range(rec.indicator("Carbon stocks"), cfg.year_low, cfg.year_high)
        if state.normalize:
            values = _per_area(dataset, rec.iso3, {"stock": stock}, cfg, "carbon_stock_bars")
            if values is None:
                continue
            stock = values["stock"]
        out.append(CarbonBar(
            iso3=rec.iso3,
            country=rec.country,
            carbon_stock=stock,
            forest_extent_index=latest_value(rec.indicator("Index of forest extent"), default=cfg.forest_extent_missing),
            highlighted=rec.iso3 in state.highlighted_countries,
        ))
    out.sort(key=lambda b: (-b.carbon_stock, b.country))
    return out


def disaster_time_series(dataset: Dataset, state: SelectionState, cfg: DashboardConfig) -> List[TimeSeries]:
    """Yearly totals of the selected types, one line per visible country.

    The first line is the "ALL" aggregate of the country lines that follow.
    """
    lines: List[TimeSeries] = []
    for rec in dataset.disasters:
        if not state.is_visible(rec.iso3):
            continue
        series = _selected_disasters(rec, state)
        points = series.yearly_values
        if state.normalize:
            values = _per_area(dataset, rec.iso3, {yv.year: yv.value for yv in points}, cfg, "disaster_time_series")
            if values is None:
                continue
            points = tuple(YearValue(year=y, value=values[y]) for y in sorted(values))
        lines.append(TimeSeries(iso3=rec.iso3, country=rec.country, points=points))

    total = combine_series((IndicatorSeries(type=l.iso3, yearly_values=l.points) for l in lines), ALL_COUNTRIES)
    return [TimeSeries(iso3=ALL_COUNTRIES, country="All countries", points=total.yearly_values)] + lines
