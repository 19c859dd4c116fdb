"""Data models for the Commander stats engine."""

from dataclasses import dataclass, field
from typing import Any, NamedTuple, Optional

from .constants import ELIMINATION_TYPES, NO_DATA, WINDOW_RECENT, WINDOW_TOTAL


class DeckKey(NamedTuple):
    """Structured deck identity: a deck is owned by exactly one player."""
    deck_name: str
    owner: str

    @property
    def label(self) -> str:
        return f'{self.deck_name} ({self.owner})'


def empty_windows() -> dict[str, int]:
    return {WINDOW_TOTAL: 0, WINDOW_RECENT: 0}


def empty_tally() -> dict[str, int]:
    return {elim_type: 0 for elim_type in ELIMINATION_TYPES}


def empty_pct() -> dict[str, float]:
    return {'C': 0.0, 'D': 0.0, 'N': 0.0, 'O': 0.0}


@dataclass
class StatRecord:
    """Counters and derived ratios for one player, deck or colour group.

    Raw counters are keyed by window ('total', 'recent' or a 'YYYY' year).
    Derived fields stay empty until finalize.derive() fills them.
    """
    name: str
    key: Any = None  # player name, DeckKey or colour key
    deck_name: Optional[str] = None
    owner: Optional[str] = None
    is_active: bool = False
    color_identity: str = ''

    games: dict[str, int] = field(default_factory=empty_windows)
    wins: dict[str, int] = field(default_factory=empty_windows)
    win_turns: list[int] = field(default_factory=list)
    elim_turns: list[int] = field(default_factory=list)
    first_elim_turns: list[int] = field(default_factory=list)
    elims_made: dict[str, int] = field(default_factory=empty_tally)
    elims_taken: dict[str, int] = field(default_factory=empty_tally)

    # Derived
    winrate: dict[str, str] = field(default_factory=dict)
    avg_win_turn: str = NO_DATA
    avg_elim_turn: str = NO_DATA
    avg_first_elim_turn: str = NO_DATA
    elims_made_pct: dict[str, float] = field(default_factory=empty_pct)
    elims_taken_pct: dict[str, float] = field(default_factory=empty_pct)
    decks_count: int = 0
    active_decks_count: int = 0

    @property
    def identity(self) -> Any:
        return self.key if self.key is not None else self.name

    @property
    def label(self) -> str:
        if isinstance(self.key, DeckKey):
            return self.key.label
        return self.name

    def games_in(self, window: str) -> int:
        return self.games.get(window, 0)

    def wins_in(self, window: str) -> int:
        return self.wins.get(window, 0)

    def years(self) -> list[str]:
        return sorted(w for w in self.games if w.isdigit())

    def metric(self, key: str) -> float:
        """
        Numeric value of a metric key such as 'games_total' or 'winrate_2024'.

        Unknown windows read as 0.
        """
        metric, _, window = key.partition('_')
        if metric == 'games':
            return float(self.games_in(window))
        if metric == 'wins':
            return float(self.wins_in(window))
        if metric == 'winrate':
            return float(self.winrate.get(window, 0) or 0)
        raise KeyError(f'Unknown metric key: {key}')

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready view of the record."""
        data: dict[str, Any] = {
            'name': self.label,
            'is_active': self.is_active,
            'games': dict(self.games),
            'wins': dict(self.wins),
            'winrate': dict(self.winrate),
            'win_turns': list(self.win_turns),
            'elim_turns': list(self.elim_turns),
            'first_elim_turns': list(self.first_elim_turns),
            'avg_win_turn': self.avg_win_turn,
            'avg_elim_turn': self.avg_elim_turn,
            'avg_first_elim_turn': self.avg_first_elim_turn,
            'elims_made': dict(self.elims_made),
            'elims_taken': dict(self.elims_taken),
            'elims_made_pct': dict(self.elims_made_pct),
            'elims_taken_pct': dict(self.elims_taken_pct),
            'decks_count': self.decks_count,
            'active_decks_count': self.active_decks_count,
        }
        if isinstance(self.key, DeckKey):
            data['deck_name'] = self.deck_name
            data['owner'] = self.owner
        if self.color_identity:
            data['color_identity'] = self.color_identity
        return data


@dataclass
class Aggregates:
    """Output of one ingestion pass."""
    players: dict[str, StatRecord] = field(default_factory=dict)
    decks: dict[DeckKey, StatRecord] = field(default_factory=dict)
    match_counts: dict[str, int] = field(default_factory=lambda: {WINDOW_TOTAL: 0})


@dataclass
class ProcessedStats:
    """Finalized player and deck records."""
    players: list[StatRecord]
    decks: list[StatRecord]
    match_counts: dict[str, int] = field(default_factory=dict)


@dataclass
class YearSummary:
    """Highlights for a single calendar year."""
    year: str
    top_players: list[StatRecord]
    top_decks: list[StatRecord]
    total_matches: int
    total_players: int
    avg_winrate: str
