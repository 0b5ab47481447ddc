"""
Selection state
===============

The four dashboard views share one small mutable object describing what the
user has picked:

- which disaster types are shown,
- which countries are selected (empty = all) and which are pinned
  ("highlighted", shown regardless of the selection),
- which country the mouse is over,
- whether values are normalized by land area.

Views only read it; the mutation methods below are the whole write surface.
`SelectionHistory` adds undo/redo (two stacks of snapshots) for the CLI.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, List, Optional, Set

from .models import DISASTER_TYPES

DEFAULT_SELECTED_TYPES: FrozenSet[str] = frozenset(t for t in DISASTER_TYPES if t != "TOTAL")


@dataclass
class SelectionState:
    selected_disaster_types: Set[str] = field(default_factory=lambda: set(DEFAULT_SELECTED_TYPES))
    # ISO3 codes; empty means "all countries"
    selected_countries: Set[str] = field(default_factory=set)
    highlighted_countries: Set[str] = field(default_factory=set)
    mouse_over_country: Optional[str] = None
    normalize: bool = False

    def toggle_disaster_type(self, type_: str) -> bool:
        """Add or remove a disaster type. Returns True if it is now selected."""
        if type_ not in DISASTER_TYPES:
            raise ValueError(f"Unknown disaster type {type_!r}. Known: {', '.join(DISASTER_TYPES)}")
        if type_ in self.selected_disaster_types:
            self.selected_disaster_types.discard(type_)
            return False
        self.selected_disaster_types.add(type_)
        return True

    def set_selected_countries(self, countries: Iterable[str]) -> None:
        self.selected_countries = set(countries)

    def add_highlighted_country(self, iso3: str) -> None:
        self.highlighted_countries.add(iso3)

    def remove_highlighted_country(self, iso3: str) -> None:
        self.highlighted_countries.discard(iso3)

    def reset_highlighted_countries(self) -> None:
        self.highlighted_countries = set()

    def toggle_normalize(self) -> bool:
        self.normalize = not self.normalize
        return self.normalize

    def set_mouse_over_country(self, iso3: str) -> None:
        self.mouse_over_country = iso3

    def clear_mouse_over_country(self) -> None:
        self.mouse_over_country = None

    def is_visible(self, iso3: str) -> bool:
        """True if the country passes the selection or is highlighted."""
        if iso3 in self.highlighted_countries:
            return True
        return not self.selected_countries or iso3 in self.selected_countries

    def ordered_types(self) -> List[str]:
        """Selected disaster types in canonical order."""
        return [t for t in DISASTER_TYPES if t in self.selected_disaster_types]

    def snapshot(self) -> "SelectionState":
        """Deep-enough copy: new sets, same immutable members."""
        return replace(
            self,
            selected_disaster_types=set(self.selected_disaster_types),
            selected_countries=set(self.selected_countries),
            highlighted_countries=set(self.highlighted_countries),
        )


@dataclass
class SelectionHistory:
    """Undo/redo stacks around a SelectionState."""
    state: SelectionState = field(default_factory=SelectionState)
    _undo: List[SelectionState] = field(default_factory=list, init=False)
    _redo: List[SelectionState] = field(default_factory=list, init=False)

    def push(self) -> None:
        """Record the current state before a mutation."""
        self._undo.append(self.state.snapshot())
        self._redo.clear()

    def rollback(self) -> None:
        """Drop the last `push` and restore the state it recorded."""
        if self._undo:
            self.state = self._undo.pop()

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(self.state.snapshot())
        self.state = self._undo.pop()
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(self.state.snapshot())
        self.state = self._redo.pop()
        return True
