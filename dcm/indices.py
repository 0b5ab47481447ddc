"""
Grouping and indicator extraction
=================================

Two stages turn raw rows into `CountryRecord`s:

1) `group_by_country` buckets rows by their `Country` value.
2) `extract_indicators` picks, for every known indicator type, the first row
   of that country whose `Indicator` label contains the type name, and turns
   its year columns into a `YearValue` series.

Source labels are decorated ("Climate related disasters frequency, Number of
Disasters: Flood"), so matching is by substring. The label -> types mapping
is computed once per table in an `IndicatorTable` instead of re-scanning
strings for every country.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from .loader import to_number
from .models import CountryRecord, IndicatorSeries, RawRow, YearValue


def group_by_country(rows: Iterable[RawRow]) -> Dict[str, List[RawRow]]:
    """Group rows by `Country`, keeping first-seen country order and row order."""
    by_country: Dict[str, List[RawRow]] = {}
    for row in rows:
        by_country.setdefault(row.get("Country", ""), []).append(row)
    return by_country


@dataclass
class IndicatorTable:
    """Ordered lookup from an indicator label to the known types it matches.

    Matching is a case-sensitive substring test. A label may match several
    types; the table only answers "does this label count as type T".
    """
    known_types: Tuple[str, ...]
    _cache: Dict[str, Tuple[str, ...]] = field(default_factory=dict, init=False)

    def types_for(self, label: str) -> Tuple[str, ...]:
        hit = self._cache.get(label)
        if hit is None:
            hit = tuple(t for t in self.known_types if t in label)
            self._cache[label] = hit
        return hit

    def preload(self, labels: Iterable[str]) -> None:
        for label in labels:
            self.types_for(label)

    def first_rows(self, country_rows: Sequence[RawRow]) -> Dict[str, RawRow]:
        """Map each known type to the first row (in row order) whose label matches it."""
        out: Dict[str, RawRow] = {}
        for row in country_rows:
            for t in self.types_for(row.get("Indicator", "")):
                out.setdefault(t, row)
        return out


def _parse_year(label) -> Optional[int]:
    try:
        return int(str(label).strip())
    except (TypeError, ValueError):
        return None


def _yearly_values(row: RawRow, metadata_columns: Sequence[str]) -> Tuple[YearValue, ...]:
    out: List[YearValue] = []
    for col, cell in row.items():
        if col in metadata_columns:
            continue
        year = _parse_year(col)
        if year is None:
            logger.debug("Skipping non-year column {!r}", col)
            continue
        out.append(YearValue(year=year, value=to_number(cell)))
    out.sort(key=lambda yv: yv.year)
    return tuple(out)


def extract_indicators(
    country_rows: Sequence[RawRow],
    known_types: Sequence[str],
    metadata_columns: Sequence[str],
    table: Optional[IndicatorTable] = None,
) -> Tuple[IndicatorSeries, ...]:
    """Build one IndicatorSeries per known type, in `known_types` order.

    Types without a matching row get an empty series rather than no entry.
    """
    if table is None:
        table = IndicatorTable(known_types=tuple(known_types))
    matched = table.first_rows(country_rows)
    series: List[IndicatorSeries] = []
    for t in known_types:
        row = matched.get(t)
        if row is None:
            series.append(IndicatorSeries(type=t))
        else:
            series.append(IndicatorSeries(type=t, yearly_values=_yearly_values(row, metadata_columns)))
    return tuple(series)


def build_country_records(
    rows: Sequence[RawRow],
    known_types: Sequence[str],
    metadata_columns: Sequence[str],
) -> Tuple[CountryRecord, ...]:
    """Group rows and extract indicators: one CountryRecord per distinct country.

    ISO3 is taken from the first row seen for each country.
    """
    table = IndicatorTable(known_types=tuple(known_types))
    table.preload(row.get("Indicator", "") for row in rows)
    records: List[CountryRecord] = []
    for country, country_rows in group_by_country(rows).items():
        records.append(CountryRecord(
            country=country,
            iso3=country_rows[0].get("ISO3", ""),
            indicators=extract_indicators(country_rows, known_types, metadata_columns, table=table),
        ))
    return tuple(records)
