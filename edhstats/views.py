"""Filtering, sorting and sort-state handling for stats tables."""

from dataclasses import dataclass
from typing import NamedTuple, Optional

from .constants import NO_DATA, WINDOW_TOTAL, WINRATE_TIERS
from .models import StatRecord

ASC = 'asc'
DESC = 'desc'

# Keys that follow the selected window instead of the lifetime total
WINDOWED_KEYS = {'games_total', 'wins_total', 'winrate_total'}

AVERAGE_KEYS = {'avg_win_turn', 'avg_elim_turn', 'avg_first_elim_turn'}


class SortMode(NamedTuple):
    """One state of a sort cycle."""
    key: str
    order: str


# Grouped columns step through a fixed sequence of modes on each click
SORT_CYCLES: dict[str, tuple[SortMode, ...]] = {
    'turns': (
        SortMode('avg_win_turn', DESC),
        SortMode('avg_win_turn', ASC),
        SortMode('avg_first_elim_turn', DESC),
        SortMode('avg_first_elim_turn', ASC),
        SortMode('avg_elim_turn', DESC),
        SortMode('avg_elim_turn', ASC),
    ),
    'decks': (
        SortMode('active_decks_count', DESC),
        SortMode('active_decks_count', ASC),
        SortMode('decks_count', DESC),
        SortMode('decks_count', ASC),
    ),
    'elims_made': (
        SortMode('elims_made_C', DESC),
        SortMode('elims_made_D', DESC),
        SortMode('elims_made_N', DESC),
        SortMode('elims_made_O', DESC),
    ),
    'elims_taken': (
        SortMode('elims_taken_C', DESC),
        SortMode('elims_taken_D', DESC),
        SortMode('elims_taken_N', DESC),
        SortMode('elims_taken_O', DESC),
    ),
}


@dataclass
class SortState:
    """
    Current sort of a table.

    A plain column toggles between descending and ascending when clicked
    again and starts descending otherwise. A grouped column walks its
    SORT_CYCLES table; entering a group starts at its first mode.
    """
    key: str = 'winrate_total'
    order: str = DESC
    group: Optional[str] = None
    position: int = 0

    def select(self, key: str) -> SortMode:
        """Click on a plain column."""
        if self.group is None and self.key == key:
            self.order = ASC if self.order == DESC else DESC
        else:
            self.key, self.order = key, DESC
        self.group, self.position = None, 0
        return self.mode

    def cycle(self, group: str) -> SortMode:
        """Click on a grouped column."""
        modes = SORT_CYCLES[group]
        if self.group == group:
            self.position = (self.position + 1) % len(modes)
        else:
            self.group, self.position = group, 0
        self.key, self.order = modes[self.position]
        return self.mode

    @property
    def mode(self) -> SortMode:
        return SortMode(self.key, self.order)


def filter_records(
    records: list[StatRecord],
    window: str = WINDOW_TOTAL,
    search: str = '',
) -> list[StatRecord]:
    """Keep records whose name contains ``search`` and that played in ``window``."""
    needle = search.lower()
    result = []
    for record in records:
        if needle and needle not in record.label.lower():
            continue
        if window != WINDOW_TOTAL and record.games_in(window) == 0:
            continue
        result.append(record)
    return result


def sort_value(record: StatRecord, key: str, window: str = WINDOW_TOTAL) -> float | str:
    """Comparable value of ``key`` for a record, honouring the window."""
    if key in WINDOWED_KEYS:
        metric = key.split('_')[0]
        return record.metric(f'{metric}_{window}')
    if key in AVERAGE_KEYS:
        value = getattr(record, key)
        return 0.0 if value == NO_DATA else float(value)
    if key.startswith('elims_made_'):
        return float(record.elims_made_pct.get(key[len('elims_made_'):], 0))
    if key.startswith('elims_taken_'):
        return float(record.elims_taken_pct.get(key[len('elims_taken_'):], 0))
    if key in ('name', 'label'):
        return record.label.lower()
    if '_' in key and key.split('_')[0] in ('games', 'wins', 'winrate'):
        return record.metric(key)
    return float(getattr(record, key, 0) or 0)


def sort_records(
    records: list[StatRecord],
    key: str,
    order: str = DESC,
    window: str = WINDOW_TOTAL,
) -> list[StatRecord]:
    """Stable sort of records by ``key``; returns a new list."""
    return sorted(
        records,
        key=lambda record: sort_value(record, key, window),
        reverse=(order == DESC),
    )


def winrate_tier(value: float | str) -> str:
    """Band a win percentage: elite, strong, average or weak."""
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return 'weak'
    for floor, tier in WINRATE_TIERS:
        if rate >= floor:
            return tier
    return 'weak'
