"""Configuration knobs for the aggregator, views and CLI."""

from dataclasses import dataclass
from typing import Optional, Tuple

from .models import (
    CARBON_METADATA_COLUMNS,
    CARBON_TYPES,
    DISASTER_METADATA_COLUMNS,
    DISASTER_TYPES,
)

DEFAULT_DISASTER_CSV = "14_Climate-related_Disasters_Frequency_total.csv"
DEFAULT_CARBON_CSV = "13_Forest_and_Carbon.csv"


@dataclass
class DashboardConfig:
    """High-level knobs shared by the engine and the views."""
    disaster_path: Optional[str] = DEFAULT_DISASTER_CSV
    carbon_path: Optional[str] = DEFAULT_CARBON_CSV

    # Inclusive year range used for means (scatter, carbon bars, export)
    year_low: int = 1992
    year_high: int = 2020

    # Land area is reported in 1000 ha, so 1000 gives "per million ha"
    area_scale_factor: float = 1000.0

    # Shown instead of the forest extent index when a country has none
    forest_extent_missing: float = -100.0

    disaster_types: Tuple[str, ...] = DISASTER_TYPES
    carbon_types: Tuple[str, ...] = CARBON_TYPES
    disaster_metadata_columns: Tuple[str, ...] = DISASTER_METADATA_COLUMNS
    carbon_metadata_columns: Tuple[str, ...] = CARBON_METADATA_COLUMNS

    def set_year_range(self, year_low: int, year_high: int) -> None:
        if year_low > year_high:
            raise ValueError(f"year range must be ascending, got {year_low}-{year_high}")
        self.year_low, self.year_high = year_low, year_high
