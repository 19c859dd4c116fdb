"""Finalization: derive ratios, averages and breakdowns from raw counters."""

import logging
from collections import Counter
from typing import Any, Iterable, Mapping, Optional

from .aggregation import ingest
from .constants import ELIMINATION_SHORT_KEYS, ELIMINATION_TYPES, NO_DATA, WINDOW_RECENT, WINDOW_TOTAL
from .models import DeckKey, ProcessedStats, StatRecord, empty_pct
from .schemas import StatsConfig
from .utils import average, format_one_decimal

logger = logging.getLogger('edhstats.finalize')


def winrate(wins: int, games: int) -> str:
    """Win percentage with one decimal ('0.0' when no games)."""
    if games <= 0:
        return format_one_decimal(0)
    return format_one_decimal(wins / games * 100)


def average_turn(turns: list[int]) -> str:
    """Mean turn with one decimal, or '-' for an empty sample."""
    mean = average(turns)
    if mean is None:
        return NO_DATA
    return format_one_decimal(mean)


def elimination_pct(tally: Mapping[str, int]) -> dict[str, float]:
    """
    Share of each elimination cause, keyed C/D/N/O.

    All four are exactly 0 when nothing was tallied; otherwise they sum to
    100 within rounding.
    """
    total = sum(tally.get(elim_type, 0) for elim_type in ELIMINATION_TYPES)
    if total == 0:
        return empty_pct()
    return {
        ELIMINATION_SHORT_KEYS[elim_type]: round(tally.get(elim_type, 0) / total * 100, 1)
        for elim_type in ELIMINATION_TYPES
    }


def derive(record: StatRecord) -> StatRecord:
    """
    Fill the derived fields of a record from its raw counters.

    Shared by the player/deck pass and the colour-group pass. Overwrites any
    previous derivation, so calling it twice gives the same result.
    """
    windows = {WINDOW_TOTAL, WINDOW_RECENT} | set(record.games)
    record.winrate = {
        window: winrate(record.wins_in(window), record.games_in(window))
        for window in sorted(windows)
    }

    record.avg_win_turn = average_turn(record.win_turns)
    record.avg_elim_turn = average_turn(record.elim_turns)
    record.avg_first_elim_turn = average_turn(record.first_elim_turns)

    record.elims_made_pct = elimination_pct(record.elims_made)
    record.elims_taken_pct = elimination_pct(record.elims_taken)
    return record


def attach_deck_counts(players: Iterable[StatRecord], decks: Mapping[DeckKey, StatRecord]) -> None:
    """Set decks_count / active_decks_count on player records by deck owner."""
    owned: Counter[str] = Counter()
    active: Counter[str] = Counter()
    for key, deck in decks.items():
        owned[key.owner] += 1
        if deck.is_active:
            active[key.owner] += 1

    for player in players:
        player.decks_count = owned[player.name]
        player.active_decks_count = active[player.name]


def finalize(
    records: Mapping[Any, StatRecord],
    decks: Optional[Mapping[DeckKey, StatRecord]] = None,
) -> list[StatRecord]:
    """
    Derive every record of an accumulation map and return them as a list.

    Args:
        records: Player or deck map from ingest()
        decks: Deck map; when given, player records also get deck counts

    Returns:
        List of finalized StatRecord objects (order not significant)
    """
    finalized = [derive(record) for record in records.values()]
    if decks is not None:
        attach_deck_counts(finalized, decks)
    return finalized


def process(
    matches: Iterable[dict[str, Any]],
    config: Optional[StatsConfig] = None,
) -> ProcessedStats:
    """
    Ingest and finalize in one call.

    Example:
        from edhstats import process
        stats = process(matches)
        for player in stats.players:
            print(player.name, player.winrate['total'])
    """
    aggregates = ingest(matches, config)
    players = finalize(aggregates.players, decks=aggregates.decks)
    decks = finalize(aggregates.decks)

    logger.info(
        f'Processed {aggregates.match_counts.get(WINDOW_TOTAL, 0)} matches: '
        f'{len(players)} players, {len(decks)} decks'
    )
    return ProcessedStats(players=players, decks=decks, match_counts=dict(aggregates.match_counts))
