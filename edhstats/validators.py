"""Validation functions for match rows and aggregated records."""

from typing import Any

from .aggregation import get_participants
from .constants import ELIMINATION_SHORT_KEYS, ELIMINATION_TYPES, WINNER_SENTINEL
from .models import StatRecord


def validate_match(match: dict[str, Any]) -> list[str]:
    """
    Validate a match row before aggregation.

    Checks:
    - Date present and shaped YYYY-MM-DD
    - 2 to 4 participants, each with a resolved player and deck
    - Exactly one winner
    - Known elimination types
    - Eliminators took part in the same match

    Args:
        match: Match dict in the persistence shape

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    label = match.get('id') or match.get('date') or '<undated>'

    date = match.get('date')
    if not date:
        errors.append(f'Match {label} has no date')
    elif len(str(date)) < 10 or not str(date)[:4].isdigit():
        errors.append(f'Match {label} has malformed date: {date}')

    raw = match.get('match_participants', match.get('participants'))
    participants = get_participants(match)
    if isinstance(raw, list) and len(raw) != len(participants):
        errors.append(f'Match {label} has {len(raw) - len(participants)} malformed participant entries')
    count = len(participants)
    if count < 2 or count > 4:
        errors.append(f'Match {label} has {count} participants (expected 2-4)')

    winners = [p for p in participants if p.get('is_winner') is True]
    if participants and len(winners) != 1:
        errors.append(f'Match {label} has {len(winners)} winners (expected 1)')

    names = set()
    for participant in participants:
        player = participant.get('players')
        deck = participant.get('decks')
        player = player if isinstance(player, dict) else {}
        deck = deck if isinstance(deck, dict) else {}
        if not isinstance(player.get('name'), str) or not player['name']:
            errors.append(f'Match {label} has a participant without a player')
            continue
        names.add(player['name'])
        if not isinstance(deck.get('deck_name'), str) or not deck['deck_name']:
            errors.append(f'Match {label}: {player["name"]} has no deck')

    for participant in participants:
        elim_type = participant.get('elimination_type')
        if elim_type and elim_type != WINNER_SENTINEL and elim_type not in ELIMINATION_TYPES:
            errors.append(f'Match {label} has unknown elimination type: {elim_type}')

        eliminator = participant.get('eliminated_by')
        if isinstance(eliminator, str) and eliminator and eliminator not in names:
            errors.append(f'Match {label}: eliminator {eliminator} did not play in the match')

    return errors


def validate_stat_record(record: StatRecord) -> list[str]:
    """
    Check that a finalized record is internally consistent.

    Sanity checks:
    - Wins never exceed games in any window
    - Elimination percentages sum to 100 (within rounding) when tallied,
      and are all zero otherwise

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    for window, games in record.games.items():
        wins = record.wins_in(window)
        if wins > games:
            warnings.append(f'{record.label} has {wins} wins in {games} games ({window})')

    for tally_name in ('elims_made', 'elims_taken'):
        tally = getattr(record, tally_name)
        pct = getattr(record, f'{tally_name}_pct')
        tallied = sum(tally.get(t, 0) for t in ELIMINATION_TYPES)
        pct_sum = sum(pct.get(k, 0) for k in ELIMINATION_SHORT_KEYS.values())
        if tallied == 0 and pct_sum != 0:
            warnings.append(f'{record.label} {tally_name} percentages set without eliminations')
        elif tallied > 0 and abs(pct_sum - 100) > 0.5:
            warnings.append(
                f'{record.label} {tally_name} percentages sum to {pct_sum:.1f} (expected 100)'
            )

    return warnings


def validate_all(
    matches: list[dict[str, Any]],
    records: list[StatRecord] | None = None,
) -> tuple[list[str], list[str]]:
    """
    Validate a whole dataset.

    Returns:
        Tuple of (errors, warnings)
        - errors: Match rows the engine would skip or misattribute
        - warnings: Inconsistencies in aggregated records
    """
    errors: list[str] = []
    warnings: list[str] = []

    for match in matches:
        if not isinstance(match, dict):
            errors.append(f'Match entry is not an object: {match!r}')
            continue
        errors.extend(validate_match(match))

    for record in records or []:
        warnings.extend(validate_stat_record(record))

    return errors, warnings
