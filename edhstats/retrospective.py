"""Year-in-review highlights built from finalized records."""

from typing import Optional

from .models import StatRecord, YearSummary
from .utils import format_one_decimal
from .views import sort_records

# Players per match assumed when no match counts are available
DEFAULT_POD_SIZE = 4


def year_summary(
    players: list[StatRecord],
    decks: list[StatRecord],
    year: str,
    match_counts: Optional[dict[str, int]] = None,
    top_n: int = 5,
) -> YearSummary:
    """
    Summarize one calendar year.

    Args:
        players: Finalized player records
        decks: Finalized deck records
        year: Year window, e.g. '2025'
        match_counts: Matches per window from ingest(); without it the
            total is estimated from player-games over a four-player pod
        top_n: Number of players and decks to highlight

    Returns:
        YearSummary with the best active players and decks by win rate
    """
    year = str(year)
    active_players = [p for p in players if p.is_active and p.games_in(year) > 0]
    played_decks = [d for d in decks if d.games_in(year) > 0]

    key = f'winrate_{year}'
    top_players = sort_records(active_players, key, window=year)[:top_n]
    top_decks = sort_records(played_decks, key, window=year)[:top_n]

    if match_counts is not None:
        total_matches = match_counts.get(year, 0)
    else:
        total_matches = round(sum(p.games_in(year) for p in active_players) / DEFAULT_POD_SIZE)

    if active_players:
        mean = sum(p.metric(key) for p in active_players) / len(active_players)
        avg_winrate = format_one_decimal(mean)
    else:
        avg_winrate = format_one_decimal(0)

    return YearSummary(
        year=year,
        top_players=top_players,
        top_decks=top_decks,
        total_matches=total_matches,
        total_players=len(active_players),
        avg_winrate=avg_winrate,
    )
