"""
Data model (YearValue / IndicatorSeries / CountryRecord / Dataset)
=================================================================

The two source tables have one row per (country, indicator) pair with one
column per year. They are reshaped into nested, immutable records:

    Dataset
      disasters: CountryRecord...      (climate-related disaster frequency)
      carbon:    CountryRecord...      (forest area and carbon stocks)

    CountryRecord
      indicators: IndicatorSeries...   (one per known type, never missing)

    IndicatorSeries
      yearly_values: YearValue...      (ascending by year)

Everything is `frozen=True` so a reload can be compared field-for-field
against a previous one, and views can never edit shared data.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# A raw source row: column name -> cell text
RawRow = Dict[str, str]

DISASTERS = "disasters"
CARBON = "carbon"

DISASTER_TYPES: Tuple[str, ...] = (
    "Drought",
    "Extreme temperature",
    "Flood",
    "Landslide",
    "Storm",
    "TOTAL",
    "Wildfire",
)

CARBON_TYPES: Tuple[str, ...] = (
    "Carbon stocks",
    "Forest area",
    "Index of carbon stocks in forests",
    "Index of forest extent",
    "Land area",
    "Share of forest area",
)

# The disaster table carries more metadata columns than the carbon table.
DISASTER_METADATA_COLUMNS: Tuple[str, ...] = ("Country", "ISO2", "ISO3", "Indicator", "Unit", "Source")
CARBON_METADATA_COLUMNS: Tuple[str, ...] = ("Country", "ISO2", "ISO3")


@dataclass(frozen=True)
class YearValue:
    year: int
    value: float


@dataclass(frozen=True)
class IndicatorSeries:
    """Yearly readings of one indicator for one country."""
    type: str
    yearly_values: Tuple[YearValue, ...] = ()

    def is_empty(self) -> bool:
        return not self.yearly_values

    def years(self) -> Tuple[int, ...]:
        return tuple(yv.year for yv in self.yearly_values)


@dataclass(frozen=True)
class CountryRecord:
    """All indicator series of one country from one source table.

    `indicators` holds exactly one series per known type, in known-type order.
    """
    country: str
    iso3: str
    indicators: Tuple[IndicatorSeries, ...]

    def indicator(self, type_: str) -> IndicatorSeries:
        """Return the series for `type_` (KeyError if the type is not tracked)."""
        for s in self.indicators:
            if s.type == type_:
                return s
        raise KeyError(f"Unknown indicator type {type_!r} for {self.iso3}")

    def types(self) -> Tuple[str, ...]:
        return tuple(s.type for s in self.indicators)


@dataclass(frozen=True)
class Dataset:
    """Both derived collections, keyed logically by ISO3."""
    disasters: Tuple[CountryRecord, ...] = ()
    carbon: Tuple[CountryRecord, ...] = ()

    def records(self, kind: str) -> Tuple[CountryRecord, ...]:
        if kind == DISASTERS:
            return self.disasters
        if kind == CARBON:
            return self.carbon
        raise ValueError(f"kind must be '{DISASTERS}' or '{CARBON}'")

    def disaster_record(self, iso3: str) -> Optional[CountryRecord]:
        return _find(self.disasters, iso3)

    def carbon_record(self, iso3: str) -> Optional[CountryRecord]:
        return _find(self.carbon, iso3)

    def series(self, kind: str, iso3: str, type_: str) -> Optional[IndicatorSeries]:
        """Lookup by country and indicator; None when the country is absent."""
        rec = _find(self.records(kind), iso3)
        return rec.indicator(type_) if rec is not None else None

    def iso3_codes(self) -> Tuple[str, ...]:
        """ISO3 codes seen in either table, disasters first, no duplicates."""
        seen: Dict[str, None] = {}
        for rec in self.disasters + self.carbon:
            seen.setdefault(rec.iso3, None)
        return tuple(seen)

    def is_empty(self) -> bool:
        return not self.disasters and not self.carbon


def _find(records: Tuple[CountryRecord, ...], iso3: str) -> Optional[CountryRecord]:
    for rec in records:
        if rec.iso3 == iso3:
            return rec
    return None
