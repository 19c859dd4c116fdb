"""Shared factories for match rows and stat records."""

import pytest

from edhstats.finalize import derive
from edhstats.models import StatRecord
from edhstats.schemas import StatsConfig


def build_participant(
    player,
    deck=None,
    is_winner=False,
    turn=None,
    elim_type=None,
    by=None,
    player_active=True,
    deck_active=True,
    colors='',
):
    """Participant row shaped like the persistence layer returns it."""
    return {
        'is_winner': is_winner,
        'turn_eliminated': turn,
        'elimination_type': elim_type,
        'eliminated_by': by,
        'players': {'name': player, 'is_active': player_active},
        'decks': {
            'deck_name': deck or f'{player} Deck',
            'is_active': deck_active,
            'color_identity': colors,
        },
    }


def build_match(date, *participants, notes=None):
    return {'date': date, 'notes': notes, 'match_participants': list(participants)}


def build_record(name, games, wins=None, key=None, is_active=True):
    """Finalized StatRecord from per-window game/win counts."""
    record = StatRecord(name=name, key=key if key is not None else name, is_active=is_active)
    for window, count in games.items():
        record.games[window] = count
        record.wins[window] = (wins or {}).get(window, 0)
    return derive(record)


@pytest.fixture
def make_participant():
    return build_participant


@pytest.fixture
def make_match():
    return build_match


@pytest.fixture
def make_record():
    return build_record


@pytest.fixture
def config():
    """Default settings, independent of data/stats_config.json."""
    return StatsConfig()


@pytest.fixture
def two_player_match(make_match, make_participant):
    """Alice beats Bob with combat damage on turn 6."""
    return make_match(
        '2024-05-01',
        make_participant('Alice', 'Atraxa', is_winner=True),
        make_participant('Bob', 'Krenko', turn=6, elim_type='Combat Damage', by='Alice'),
    )
