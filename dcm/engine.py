"""
Core engine (Aggregator)
========================

This is the heart of the project. The Aggregator works like a tiny in-memory
"metrics service" for the dashboard:

1) Fetch both source tables -> RawRow lists (loader)
2) Group + extract -> Dataset of immutable CountryRecords (indices)
3) Hold the current Dataset and the shared SelectionState
4) Answer view queries (views) and export per-country summaries

A reload builds the complete new Dataset before replacing the old one, so a
failed reload leaves the previous data in place.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from . import views
from .config import DashboardConfig
from .indices import build_country_records
from .loader import DataLoadError, read_rows
from .metrics import combine_series, mean_indicator_over_range, sum_indicator
from .models import CountryRecord, Dataset, IndicatorSeries, RawRow
from .state import SelectionHistory, SelectionState

SUMMARY_FIELDS = ["iso3", "country", "disasters_total", "carbon_stock_mean", "land_area"]


@dataclass
class Aggregator:
    """Holds the current Dataset, the selection state and the config.

    Views never get the Aggregator itself; they receive `dataset`, `state`
    and `config` and return records.
    """
    config: DashboardConfig = field(default_factory=DashboardConfig)
    dataset: Dataset = field(default_factory=Dataset)
    history: SelectionHistory = field(default_factory=SelectionHistory)
    # Stores CLI commands (for reproducibility of exports)
    command_log: List[str] = field(default_factory=list)

    @property
    def state(self) -> SelectionState:
        return self.history.state

    # ---------------- Reload ----------------
    def reload(self, disaster_rows: Optional[Sequence[RawRow]], carbon_rows: Optional[Sequence[RawRow]]) -> Dataset:
        """Rebuild both collections from raw rows and replace the held Dataset.

        Raises:
            DataLoadError: either table is missing or cannot be turned into
                records. The previous Dataset is kept.
        """
        if disaster_rows is None:
            raise DataLoadError("Disaster rows were not fetched")
        if carbon_rows is None:
            raise DataLoadError("Carbon rows were not fetched")
        cfg = self.config
        try:
            new = Dataset(
                disasters=build_country_records(disaster_rows, cfg.disaster_types, cfg.disaster_metadata_columns),
                carbon=build_country_records(carbon_rows, cfg.carbon_types, cfg.carbon_metadata_columns),
            )
        except (AttributeError, TypeError) as e:
            raise DataLoadError(f"Malformed source rows: {e}") from e
        self.dataset = new
        logger.info("Reloaded dataset: {} disaster countries, {} carbon countries",
                    len(new.disasters), len(new.carbon))
        return new

    def reload_from_files(self, disaster_path: Optional[str] = None, carbon_path: Optional[str] = None) -> Dataset:
        """Fetch both tables, then reload. Either fetch failing aborts the reload."""
        disaster_path = disaster_path or self.config.disaster_path
        carbon_path = carbon_path or self.config.carbon_path
        if not disaster_path or not carbon_path:
            raise DataLoadError("Both a disaster and a carbon table path are required")
        disaster_rows = read_rows(disaster_path)
        carbon_rows = read_rows(carbon_path)
        dataset = self.reload(disaster_rows, carbon_rows)
        self.config.disaster_path, self.config.carbon_path = disaster_path, carbon_path
        return dataset

    # ---------------- Queries ----------------
    def country(self, iso3: str) -> Dict[str, Optional[CountryRecord]]:
        return {"disasters": self.dataset.disaster_record(iso3), "carbon": self.dataset.carbon_record(iso3)}

    def series(self, kind: str, iso3: str, type_: str) -> Optional[IndicatorSeries]:
        return self.dataset.series(kind, iso3, type_)

    def disaster_bars(self) -> List[views.DisasterBar]:
        return views.disaster_bars(self.dataset, self.state, self.config)

    def carbon_disaster_scatter(self) -> List[views.ScatterPoint]:
        return views.carbon_disaster_scatter(self.dataset, self.state, self.config)

    def carbon_stock_bars(self) -> List[views.CarbonBar]:
        return views.carbon_stock_bars(self.dataset, self.state, self.config)

    def disaster_time_series(self) -> List[views.TimeSeries]:
        return views.disaster_time_series(self.dataset, self.state, self.config)

    # ---------------- Output operations ----------------
    def summary_rows(self) -> List[Dict[str, Any]]:
        """One un-normalized summary row per visible country (either table)."""
        cfg = self.config
        rows: List[Dict[str, Any]] = []
        for iso3 in self.dataset.iso3_codes():
            if not self.state.is_visible(iso3):
                continue
            d = self.dataset.disaster_record(iso3)
            c = self.dataset.carbon_record(iso3)
            total = None
            if d is not None:
                total = sum_indicator(combine_series((d.indicator(t) for t in self.state.ordered_types()), "Selected"))
            rows.append({
                "iso3": iso3,
                "country": (d or c).country,
                "disasters_total": total,
                "carbon_stock_mean": mean_indicator_over_range(c.indicator("Carbon stocks"), cfg.year_low, cfg.year_high) if c else None,
                "land_area": views.land_area(self.dataset, iso3),
            })
        return rows

    def export_csv(self, path: str) -> None:
        import csv
        rows = self.summary_rows()
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=SUMMARY_FIELDS)
            w.writeheader()
            for r in rows:
                w.writerow(r)

    def export_json(self, path: str) -> None:
        """Export the summary rows plus the selection that produced them."""
        import json
        s = self.state
        payload = {
            "year_range": [self.config.year_low, self.config.year_high],
            "selected_disaster_types": s.ordered_types(),
            "selected_countries": sorted(s.selected_countries),
            "highlighted_countries": sorted(s.highlighted_countries),
            "commands": list(self.command_log),
            "countries": self.summary_rows(),
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
