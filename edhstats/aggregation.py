"""Match ingestion: one pass over the match list into per-entity counters.

Takes match dicts as returned by the persistence layer (participants already
carry resolved ``players`` and ``decks`` sub-objects) and accumulates raw
counters per player and per deck. No ratios are computed here; see
finalize.py.

Malformed rows are skipped, never raised on.
"""

import logging
from typing import Any, Iterable, Optional

from .config import get_config
from .constants import ELIMINATION_TYPES, WINDOW_RECENT, WINDOW_TOTAL, WINNER_SENTINEL
from .models import Aggregates, DeckKey, StatRecord
from .schemas import StatsConfig
from .utils import parse_turn

logger = logging.getLogger('edhstats.aggregation')


def match_windows(year: str, config: StatsConfig) -> list[str]:
    """
    Windows a match played in ``year`` counts towards.

    Examples (cutoff 2023):
        '2024' -> ['total', '2024', 'recent']
        '2019' -> ['total', '2019']
    """
    windows = [WINDOW_TOTAL]
    if len(year) == 4 and year.isdigit():
        windows.append(year)
        if int(year) >= config.recent_cutoff_year:
            windows.append(WINDOW_RECENT)
    return windows


def get_participants(match: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Participant rows of a match ('participants' accepted as an alias).

    Entries that are not objects (nulls, bare strings) are dropped.
    """
    participants = match.get('match_participants')
    if participants is None:
        participants = match.get('participants')
    if not isinstance(participants, list):
        return []
    return [p for p in participants if isinstance(p, dict)]


def _names(participant: dict[str, Any]) -> tuple[str, str] | None:
    """(player name, deck name), or None when either is unresolved."""
    player = participant.get('players')
    deck = participant.get('decks')
    if not isinstance(player, dict) or not isinstance(deck, dict):
        return None
    player_name = player.get('name')
    deck_name = deck.get('deck_name')
    if not isinstance(player_name, str) or not isinstance(deck_name, str):
        return None
    if not player_name or not deck_name:
        return None
    return player_name, deck_name


def _color_identity(deck: dict[str, Any]) -> str:
    colors = deck.get('color_identity') or ''
    if isinstance(colors, (list, tuple)):
        return ''.join(str(c) for c in colors)
    return str(colors)


def _player_record(players: dict[str, StatRecord], name: str) -> StatRecord:
    if name not in players:
        players[name] = StatRecord(name=name, key=name)
    return players[name]


def _deck_record(decks: dict[DeckKey, StatRecord], key: DeckKey) -> StatRecord:
    if key not in decks:
        decks[key] = StatRecord(name=key.deck_name, key=key, deck_name=key.deck_name, owner=key.owner)
    return decks[key]


def _count_game(record: StatRecord, windows: list[str], is_winner: bool, turn: int) -> None:
    for window in windows:
        record.games[window] = record.games.get(window, 0) + 1
        record.wins.setdefault(window, 0)
        if is_winner:
            record.wins[window] += 1

    if turn > 0:
        if is_winner:
            record.win_turns.append(turn)
        else:
            record.elim_turns.append(turn)


def _tally(tally: dict[str, int], elim_type: str) -> None:
    # Unknown causes have no slot and are dropped
    if elim_type in ELIMINATION_TYPES:
        tally[elim_type] = tally.get(elim_type, 0) + 1


def _note_first_elim(first_elims: dict[Any, int], key: Any, turn: int) -> None:
    """Keep the earliest recorded turn per eliminator within one match."""
    if turn <= 0:
        return
    current = first_elims.get(key)
    if current is None or turn < current:
        first_elims[key] = turn


def _find_deck_of(participants: list[dict[str, Any]], player_name: str) -> Optional[DeckKey]:
    for participant in participants:
        names = _names(participant)
        if names and names[0] == player_name:
            return DeckKey(names[1], player_name)
    return None


def _ingest_match(match: dict[str, Any], result: Aggregates, config: StatsConfig) -> bool:
    """Accumulate a single match. Returns False when the match was skipped."""
    date = match.get('date')
    participants = get_participants(match)
    if not date or not participants:
        logger.debug(f'Skipping match without date or participants: {match.get("id")}')
        return False

    windows = match_windows(str(date)[:4], config)

    winners = [p for p in participants if p.get('is_winner') is True]
    if len(winners) != 1:
        logger.warning(f'Match {match.get("id", date)} has {len(winners)} winners')
    winner = winners[0] if winners else None

    max_turn = max((parse_turn(p.get('turn_eliminated')) for p in participants), default=0)

    for window in windows:
        result.match_counts[window] = result.match_counts.get(window, 0) + 1

    player_first_elims: dict[str, int] = {}
    deck_first_elims: dict[DeckKey, int] = {}

    for participant in participants:
        names = _names(participant)
        if names is None:
            logger.debug(f'Skipping unresolved participant in match {match.get("id", date)}')
            continue
        player_name, deck_name = names

        is_winner = participant is winner
        own_turn = parse_turn(participant.get('turn_eliminated'))
        turn = max_turn if is_winner else own_turn

        player_record = _player_record(result.players, player_name)
        player_record.is_active = bool(participant['players'].get('is_active', True))

        deck_key = DeckKey(deck_name, player_name)
        deck_record = _deck_record(result.decks, deck_key)
        deck_record.is_active = bool(participant['decks'].get('is_active', True))
        deck_record.color_identity = _color_identity(participant['decks'])

        _count_game(player_record, windows, is_winner, turn)
        _count_game(deck_record, windows, is_winner, turn)

        if is_winner:
            continue

        elim_type = participant.get('elimination_type')
        if not elim_type or elim_type == WINNER_SENTINEL:
            continue

        _tally(player_record.elims_taken, elim_type)
        _tally(deck_record.elims_taken, elim_type)

        eliminator = participant.get('eliminated_by')
        if not isinstance(eliminator, str) or not eliminator or elim_type not in ELIMINATION_TYPES:
            continue

        # Created here the eliminator stays inactive until seen as a participant
        killer_record = _player_record(result.players, eliminator)
        _tally(killer_record.elims_made, elim_type)
        _note_first_elim(player_first_elims, eliminator, own_turn)

        killer_deck_key = _find_deck_of(participants, eliminator)
        if killer_deck_key is not None:
            killer_deck_record = _deck_record(result.decks, killer_deck_key)
            _tally(killer_deck_record.elims_made, elim_type)
            _note_first_elim(deck_first_elims, killer_deck_key, own_turn)

    for name, turn in player_first_elims.items():
        result.players[name].first_elim_turns.append(turn)
    for key, turn in deck_first_elims.items():
        result.decks[key].first_elim_turns.append(turn)

    return True


def ingest(
    matches: Iterable[dict[str, Any]],
    config: Optional[StatsConfig] = None,
) -> Aggregates:
    """
    Accumulate raw per-player and per-deck counters from a match list.

    Args:
        matches: Match dicts with resolved participant players and decks
        config: Optional StatsConfig (default: get_config())

    Returns:
        Aggregates with player records keyed by name, deck records keyed
        by DeckKey and the number of matches counted per window

    The input is never mutated. Matches without a date or participants,
    entries that are not objects and participants without a resolved player
    or deck are skipped.

    First-elimination samples hold one turn per entity per match: the
    earliest turn among its eliminations there, whatever the participant
    order.
    """
    config = config or get_config()
    result = Aggregates()

    seen = skipped = 0
    for match in matches:
        seen += 1
        if not isinstance(match, dict) or not _ingest_match(match, result, config):
            skipped += 1

    logger.debug(
        f'Ingested {seen - skipped}/{seen} matches: '
        f'{len(result.players)} players, {len(result.decks)} decks'
    )
    return result
