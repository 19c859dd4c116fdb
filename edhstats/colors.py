"""Colour identity normalization and per-colour-group aggregation."""

import logging
from typing import Iterable, Optional

from .constants import COLOR_NAMES, COLOR_ORDER, COLORLESS, ELIMINATION_TYPES
from .finalize import derive
from .models import StatRecord

logger = logging.getLogger('edhstats.colors')


def normalize_color_identity(raw: Optional[str]) -> str:
    """
    Canonical WUBRG-ordered key for a colour identity string.

    Case-insensitive; unknown characters are dropped and repeated letters
    collapse. No recognised letter means colourless.

    Examples:
        'ubw' -> 'WUB'
        'GGr' -> 'RG'
        '' -> 'C'
        'XYZ' -> 'C'
    """
    if not raw:
        return COLORLESS
    letters = {c for c in str(raw).upper() if c in COLOR_ORDER}
    key = ''.join(sorted(letters, key=COLOR_ORDER.__getitem__))
    return key or COLORLESS


def display_name(key: str) -> str:
    """Archetype name for a canonical key ('WUB' -> 'Esper')."""
    return COLOR_NAMES.get(key, key)


def _merge_into(group: StatRecord, deck: StatRecord) -> None:
    for window, count in deck.games.items():
        group.games[window] = group.games.get(window, 0) + count
    for window, count in deck.wins.items():
        group.wins[window] = group.wins.get(window, 0) + count

    group.win_turns.extend(deck.win_turns)
    group.elim_turns.extend(deck.elim_turns)
    group.first_elim_turns.extend(deck.first_elim_turns)

    for elim_type in ELIMINATION_TYPES:
        group.elims_made[elim_type] += deck.elims_made.get(elim_type, 0)
        group.elims_taken[elim_type] += deck.elims_taken.get(elim_type, 0)

    group.decks_count += 1
    if deck.is_active:
        group.active_decks_count += 1
        group.is_active = True


def aggregate_color_groups(decks: Iterable[StatRecord]) -> list[StatRecord]:
    """
    Re-aggregate deck records by canonical colour identity.

    Counters, timing samples and elimination tallies are summed per group and
    the ratios are derived again from the sums.

    Args:
        decks: Deck StatRecord objects (finalized or not)

    Returns:
        One StatRecord per colour group, keyed by the canonical colour key
    """
    groups: dict[str, StatRecord] = {}

    for deck in decks:
        key = normalize_color_identity(deck.color_identity)
        if key not in groups:
            groups[key] = StatRecord(name=display_name(key), key=key, color_identity=key)
        _merge_into(groups[key], deck)

    logger.debug(f'Grouped decks into {len(groups)} colour identities')
    return [derive(group) for group in groups.values()]
