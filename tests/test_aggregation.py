"""Unit tests for match ingestion."""

import copy
import logging

import pytest

from edhstats.aggregation import ingest, match_windows
from edhstats.models import DeckKey
from edhstats.utils import parse_turn


class TestSingleMatch:
    """Counters produced by one match."""

    def test_winner_and_loser_counters(self, two_player_match, config):
        """Test the basic two-player scenario."""
        result = ingest([two_player_match], config)
        alice = result.players['Alice']
        bob = result.players['Bob']

        assert alice.games['total'] == 1
        assert alice.wins['total'] == 1
        assert alice.win_turns == [6]
        assert alice.elims_made['Combat Damage'] == 1

        assert bob.games['total'] == 1
        assert bob.wins['total'] == 0
        assert bob.elim_turns == [6]
        assert bob.elims_taken['Combat Damage'] == 1

    def test_deck_records_mirror_players(self, two_player_match, config):
        """Test deck records receive the same counters as their pilots."""
        result = ingest([two_player_match], config)
        atraxa = result.decks[DeckKey('Atraxa', 'Alice')]
        krenko = result.decks[DeckKey('Krenko', 'Bob')]

        assert atraxa.wins['total'] == 1
        assert atraxa.elims_made['Combat Damage'] == 1
        assert atraxa.first_elim_turns == [6]
        assert krenko.elims_taken['Combat Damage'] == 1
        assert krenko.elim_turns == [6]

    def test_missing_elimination_type(self, make_match, make_participant, config):
        """Test no tallies are recorded when the cause is absent."""
        match = make_match(
            '2024-05-01',
            make_participant('Alice', is_winner=True),
            make_participant('Bob', turn=6, by='Alice'),
        )
        result = ingest([match], config)

        assert sum(result.players['Alice'].elims_made.values()) == 0
        assert sum(result.players['Bob'].elims_taken.values()) == 0
        assert result.players['Alice'].win_turns == [6]
        assert result.players['Bob'].elim_turns == [6]
        assert result.players['Alice'].first_elim_turns == []

    def test_winner_sentinel_not_counted(self, make_match, make_participant, config):
        """Test the 'Winner' sentinel never counts as a cause."""
        match = make_match(
            '2024-05-01',
            make_participant('Alice', is_winner=True, elim_type='Winner'),
            make_participant('Bob', turn=4, elim_type='Winner', by='Alice'),
        )
        result = ingest([match], config)

        assert sum(result.players['Alice'].elims_made.values()) == 0
        assert sum(result.players['Bob'].elims_taken.values()) == 0

    def test_unknown_elimination_type_ignored(self, make_match, make_participant, config):
        """Test unknown causes have no slot in the tallies."""
        match = make_match(
            '2024-05-01',
            make_participant('Alice', is_winner=True),
            make_participant('Bob', turn=4, elim_type='Poison', by='Alice'),
        )
        result = ingest([match], config)

        assert 'Poison' not in result.players['Bob'].elims_taken
        assert sum(result.players['Bob'].elims_taken.values()) == 0
        assert sum(result.players['Alice'].elims_made.values()) == 0

    def test_winner_turn_is_last_elimination(self, make_match, make_participant, config):
        """Test the winner's turn is the match's highest elimination turn."""
        match = make_match(
            '2024-05-01',
            make_participant('Alice', is_winner=True),
            make_participant('Bob', turn=5, elim_type='Combat Damage', by='Alice'),
            make_participant('Cara', turn=9, elim_type='Other', by='Alice'),
            make_participant('Dan', turn=7, elim_type='Commander Damage', by='Cara'),
        )
        result = ingest([match], config)
        assert result.players['Alice'].win_turns == [9]

    def test_no_recorded_turns(self, make_match, make_participant, config):
        """Test zero or missing turns are not sampled."""
        match = make_match(
            '2024-05-01',
            make_participant('Alice', is_winner=True),
            make_participant('Bob', turn=0, elim_type='Other', by='Alice'),
        )
        result = ingest([match], config)

        assert result.players['Alice'].win_turns == []
        assert result.players['Bob'].elim_turns == []
        assert result.players['Alice'].first_elim_turns == []

    def test_turns_parsed_permissively(self, make_match, make_participant, config):
        """Test numeric strings parse and junk reads as not recorded."""
        match = make_match(
            '2024-05-01',
            make_participant('Alice', is_winner=True),
            make_participant('Bob', turn='8', elim_type='Other', by='Alice'),
            make_participant('Cara', turn='soon', elim_type='Other', by='Alice'),
        )
        result = ingest([match], config)

        assert result.players['Bob'].elim_turns == [8]
        assert result.players['Cara'].elim_turns == []
        assert result.players['Alice'].win_turns == [8]


class TestFirstElimination:
    """First-elimination samples are limited to one per match."""

    def test_one_sample_per_match(self, make_match, make_participant, config):
        """Test a double knockout yields a single sample."""
        match = make_match(
            '2024-05-01',
            make_participant('Alice', 'Atraxa', is_winner=True),
            make_participant('Bob', turn=7, elim_type='Combat Damage', by='Alice'),
            make_participant('Cara', turn=5, elim_type='Commander Damage', by='Alice'),
            make_participant('Dan', turn=8, elim_type='Other', by='Bob'),
        )
        result = ingest([match], config)

        assert result.players['Alice'].first_elim_turns == [5]
        assert result.decks[DeckKey('Atraxa', 'Alice')].first_elim_turns == [5]
        assert result.players['Alice'].elims_made['Combat Damage'] == 1
        assert result.players['Alice'].elims_made['Commander Damage'] == 1
        assert result.players['Bob'].first_elim_turns == [8]

    def test_one_sample_per_match_across_matches(self, make_match, make_participant, config):
        """Test each match contributes its own sample."""
        matches = [
            make_match(
                '2024-05-01',
                make_participant('Alice', is_winner=True),
                make_participant('Bob', turn=6, elim_type='Other', by='Alice'),
                make_participant('Cara', turn=4, elim_type='Other', by='Alice'),
            ),
            make_match(
                '2024-05-08',
                make_participant('Alice', is_winner=True),
                make_participant('Bob', turn=10, elim_type='Other', by='Alice'),
            ),
        ]
        result = ingest(matches, config)
        assert result.players['Alice'].first_elim_turns == [4, 10]


class TestIdentityHandling:
    """Record creation, activity flags and skipped rows."""

    def test_active_flag_is_last_seen(self, make_match, make_participant, config):
        """Test is_active reflects the most recent row, not the first."""
        matches = [
            make_match(
                '2023-01-01',
                make_participant('Alice', 'Atraxa', is_winner=True, player_active=True),
                make_participant('Bob', turn=3),
            ),
            make_match(
                '2024-01-01',
                make_participant('Alice', 'Atraxa', is_winner=True, player_active=False, deck_active=False),
                make_participant('Bob', turn=3),
            ),
        ]
        result = ingest(matches, config)

        assert result.players['Alice'].is_active is False
        assert result.decks[DeckKey('Atraxa', 'Alice')].is_active is False

    def test_eliminator_outside_match_created_inactive(self, make_match, make_participant, config):
        """Test an eliminator who did not play gets an inactive record and no deck."""
        match = make_match(
            '2024-05-01',
            make_participant('Alice', is_winner=True),
            make_participant('Bob', turn=3, elim_type='Other', by='Ghost'),
        )
        result = ingest([match], config)

        ghost = result.players['Ghost']
        assert ghost.is_active is False
        assert ghost.games['total'] == 0
        assert ghost.elims_made['Other'] == 1
        assert all(key.owner != 'Ghost' for key in result.decks)

    def test_same_deck_name_different_owners(self, make_match, make_participant, config):
        """Test decks are keyed by name and owner."""
        match = make_match(
            '2024-05-01',
            make_participant('Alice', 'Edgar', is_winner=True),
            make_participant('Bob', 'Edgar', turn=3),
        )
        result = ingest([match], config)
        assert set(result.decks) == {DeckKey('Edgar', 'Alice'), DeckKey('Edgar', 'Bob')}

    def test_color_identity_kept_on_deck(self, make_match, make_participant, config):
        """Test deck records carry their colour identity."""
        match = make_match(
            '2024-05-01',
            make_participant('Alice', 'Atraxa', is_winner=True, colors='WUBG'),
            make_participant('Bob', 'Krenko', turn=3, colors='R'),
        )
        result = ingest([match], config)
        assert result.decks[DeckKey('Atraxa', 'Alice')].color_identity == 'WUBG'

    @pytest.mark.parametrize('match', [
        {'date': None, 'match_participants': []},
        {'date': '2024-01-01', 'match_participants': []},
        {'date': '', 'match_participants': [{'players': {'name': 'A'}, 'decks': {'deck_name': 'D'}}]},
        {'date': '2024-01-01'},
    ])
    def test_malformed_matches_skipped(self, match, config):
        """Test matches without date or participants are skipped."""
        result = ingest([match], config)
        assert result.players == {}
        assert result.match_counts['total'] == 0

    def test_unresolved_participant_skipped(self, make_match, make_participant, config):
        """Test participants without a player or deck count nowhere."""
        broken = make_participant('Bob', turn=3)
        broken['decks'] = None
        match = make_match('2024-05-01', make_participant('Alice', is_winner=True), broken)
        result = ingest([match], config)

        assert 'Bob' not in result.players
        assert result.players['Alice'].games['total'] == 1

    def test_non_object_entries_skipped(self, make_match, make_participant, config):
        """Test null and string entries in the participant list are ignored."""
        match = make_match('2024-01-01', None, make_participant('Alice', is_winner=True), 'Bob')
        match['match_participants'].append(make_participant('Cara', turn=4, elim_type='Other', by='Alice'))
        result = ingest([match, None, 'junk'], config)

        assert set(result.players) == {'Alice', 'Cara'}
        assert result.players['Alice'].elims_made['Other'] == 1
        assert result.match_counts['total'] == 1

    def test_non_object_player_or_deck_skipped(self, make_match, make_participant, config):
        """Test bare strings in place of player or deck objects count as unresolved."""
        string_player = make_participant('Bob', turn=3)
        string_player['players'] = 'Bob'
        string_deck = make_participant('Cara', turn=2)
        string_deck['decks'] = 'Krenko'
        unhashable = make_participant('Dan', turn=2, elim_type='Other', by=['Alice'])
        unhashable['decks']['deck_name'] = ['Edgar']
        match = make_match(
            '2024-01-01',
            make_participant('Alice', is_winner=True),
            string_player,
            string_deck,
            unhashable,
        )
        result = ingest([match], config)

        assert set(result.players) == {'Alice'}
        assert set(result.decks) == {DeckKey('Alice Deck', 'Alice')}

    def test_participants_alias(self, make_participant, config):
        """Test the 'participants' key is accepted."""
        match = {
            'date': '2024-05-01',
            'participants': [
                make_participant('Alice', is_winner=True),
                make_participant('Bob', turn=2),
            ],
        }
        result = ingest([match], config)
        assert result.players['Alice'].wins['total'] == 1

    def test_multiple_winners_first_found(self, make_match, make_participant, config, caplog):
        """Test only the first winner is credited and a warning is logged."""
        match = make_match(
            '2024-05-01',
            make_participant('Alice', is_winner=True),
            make_participant('Bob', is_winner=True),
        )
        with caplog.at_level(logging.WARNING, logger='edhstats'):
            result = ingest([match], config)

        assert result.players['Alice'].wins['total'] == 1
        assert result.players['Bob'].wins['total'] == 0
        assert '2 winners' in caplog.text

    def test_input_not_mutated(self, two_player_match, config):
        """Test ingestion leaves the match list untouched."""
        matches = [two_player_match]
        snapshot = copy.deepcopy(matches)
        ingest(matches, config)
        assert matches == snapshot


class TestWindows:
    """Per-year and recent-window counting."""

    def test_match_windows(self, config):
        """Test window membership around the cutoff year."""
        assert match_windows('2024', config) == ['total', '2024', 'recent']
        assert match_windows('2023', config) == ['total', '2023', 'recent']
        assert match_windows('2022', config) == ['total', '2022']
        assert match_windows('bad!', config) == ['total']

    def test_year_and_recent_counters(self, make_match, make_participant, config):
        """Test games and wins are split by year and recent window."""
        matches = [
            make_match('2022-03-01', make_participant('Alice', is_winner=True), make_participant('Bob', turn=4)),
            make_match('2024-03-01', make_participant('Alice', turn=4), make_participant('Bob', is_winner=True)),
            make_match('2024-04-01', make_participant('Alice', is_winner=True), make_participant('Bob', turn=4)),
        ]
        result = ingest(matches, config)
        alice = result.players['Alice']

        assert alice.games == {'total': 3, 'recent': 2, '2022': 1, '2024': 2}
        assert alice.wins == {'total': 2, 'recent': 1, '2022': 1, '2024': 1}
        assert result.match_counts == {'total': 3, '2022': 1, '2024': 2, 'recent': 2}

    def test_cutoff_is_configurable(self, make_match, make_participant, config):
        """Test a later cutoff shrinks the recent window."""
        config = config.model_copy(update={'recent_cutoff_year': 2025})
        match = make_match('2024-03-01', make_participant('Alice', is_winner=True), make_participant('Bob', turn=4))
        result = ingest([match], config)
        assert result.players['Alice'].games['recent'] == 0


class TestConservation:
    """Dataset-wide invariants."""

    def test_games_sum_to_participants(self, make_match, make_participant, config):
        """Test total games across players equals counted participants."""
        matches = [
            make_match('2024-01-01', *[make_participant(n, is_winner=(n == 'A')) for n in 'ABCD']),
            make_match('2024-01-02', *[make_participant(n, is_winner=(n == 'B')) for n in 'ABC']),
            make_match('2024-01-03', *[make_participant(n, is_winner=(n == 'C')) for n in 'CD']),
            make_match(None, *[make_participant(n) for n in 'AB']),
        ]
        result = ingest(matches, config)

        assert sum(p.games['total'] for p in result.players.values()) == 9
        assert sum(d.games['total'] for d in result.decks.values()) == 9
        for record in list(result.players.values()) + list(result.decks.values()):
            for window, games in record.games.items():
                assert record.wins.get(window, 0) <= games


@pytest.mark.parametrize('raw, turn', [
    (7, 7),
    ('7', 7),
    (' 7.9 ', 7),
    ('', 0),
    (None, 0),
    ('soon', 0),
    (-3, 0),
    (True, 0),
    (float('inf'), 0),
])
def test_parse_turn(raw, turn):
    """Test permissive turn parsing."""
    assert parse_turn(raw) == turn
