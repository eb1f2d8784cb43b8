"""
Unit tests for group standings.
"""
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from conftest import make_competitors, make_teams
from tourney.generation import generate_round_robin, generate_single_elimination
from tourney.models import Team, STATUS_FINISHED, STATUS_CANCELLED, STATUS_ONGOING
from tourney.partition import partition_teams
from tourney.standings import calculate_standings, group_matches_by_group


def _finish(match, winner_id=None):
    match.status = STATUS_FINISHED
    match.winner_id = winner_id


def _rows(standings):
    return {s.id: s for s in standings}


class TestCalculateStandings:
    """Tests for the points table of a single group."""

    def test_all_teams_listed_before_any_result(self):
        matches = generate_round_robin(make_teams(4), num_groups=1, teams_per_group=4)
        standings = calculate_standings(matches)
        assert len(standings) == 4
        assert all(s.played == 0 and s.points == 0 for s in standings)

    def test_win_and_loss(self):
        matches = generate_round_robin(make_teams(2), num_groups=1, teams_per_group=2)
        _finish(matches[0], 'P2')
        rows = _rows(calculate_standings(matches))
        assert (rows['P2'].played, rows['P2'].won, rows['P2'].points) == (1, 1, 3)
        assert (rows['P1'].played, rows['P1'].lost, rows['P1'].points) == (1, 1, 0)
        assert calculate_standings(matches)[0].id == 'P2'

    def test_draw_when_no_winner(self):
        """A finished match without a winner counts as a draw for both sides."""
        matches = generate_round_robin(make_teams(2), num_groups=1, teams_per_group=2)
        _finish(matches[0])
        for row in calculate_standings(matches):
            assert (row.played, row.drawn, row.points) == (1, 1, 1)

    def test_unfinished_matches_ignored(self):
        matches = generate_round_robin(make_teams(3), num_groups=1, teams_per_group=3)
        matches[0].status = STATUS_ONGOING
        matches[0].winner_id = 'P1'
        matches[1].status = STATUS_CANCELLED
        matches[1].winner_id = 'P1'
        assert all(s.played == 0 for s in calculate_standings(matches))

    def test_cycle_ties_everyone(self):
        """A beats B, B beats C, C beats A: all on 3 points."""
        matches = generate_round_robin(make_teams(3), num_groups=1, teams_per_group=3)
        # pairs are (P1,P2), (P1,P3), (P2,P3)
        _finish(matches[0], 'P1')
        _finish(matches[1], 'P3')
        _finish(matches[2], 'P2')
        standings = calculate_standings(matches)
        assert {s.id for s in standings} == {'P1', 'P2', 'P3'}
        for row in standings:
            assert (row.played, row.won, row.lost, row.points) == (2, 1, 1, 3)

    def test_sorted_by_points_then_wins(self):
        matches = generate_round_robin(make_teams(4), num_groups=1, teams_per_group=4)
        # (P1,P2) (P1,P3) (P1,P4) (P2,P3) (P2,P4) (P3,P4)
        _finish(matches[0])
        _finish(matches[1])
        _finish(matches[2])
        _finish(matches[3], 'P3')
        _finish(matches[4], 'P4')
        _finish(matches[5])
        # P3 = P4 = 5, P1 = 3 (no wins), P2 = 1
        standings = calculate_standings(matches)
        assert [s.points for s in standings] == [5, 5, 3, 1]
        assert {s.id for s in standings[:2]} == {'P3', 'P4'}
        assert standings[-1].id == 'P2'

    def test_wins_break_points_tie(self):
        matches = generate_round_robin(make_teams(5), num_groups=1, teams_per_group=5)
        _finish(matches[0], 'P1')   # P1 beats P2
        _finish(matches[4])         # P2 draw P3
        _finish(matches[7])         # P3 draw P4
        _finish(matches[8])         # P3 draw P5
        standings = calculate_standings(list(reversed(matches)))
        assert [(s.id, s.points, s.won) for s in standings[:2]] == [('P1', 3, 1), ('P3', 3, 0)]

    def test_team_identity_is_order_independent(self):
        """Same members listed in a different order are one team."""
        players = make_competitors(4)
        teams = partition_teams(players, 2)
        matches = generate_round_robin(teams, num_groups=1, teams_per_group=2)
        reordered = generate_round_robin(
            [Team(list(reversed(teams[0].members))), teams[1]], num_groups=1, teams_per_group=2)
        _finish(reordered[0], 'P2')
        standings = calculate_standings(matches + reordered)
        assert len(standings) == 2
        rows = _rows(standings)
        assert rows['P1-P2'].won == 1

    def test_display_name_for_teams(self):
        matches = generate_round_robin(partition_teams(make_competitors(6), 3), num_groups=1, teams_per_group=2)
        standings = calculate_standings(matches)
        assert standings[0].name == "Player P1 & 2 others"


class TestGroupMatchesByGroup:
    def test_groups_rebuilt_and_sorted(self):
        matches = generate_round_robin(make_teams(6), num_groups=2, teams_per_group=3)
        groups = group_matches_by_group(list(reversed(matches)))
        assert [g.name for g in groups] == ["Group A", "Group B"]
        assert all(len(g.matches) == 3 and len(g.standings) == 3 for g in groups)

    def test_bracket_matches_ignored(self):
        matches = generate_single_elimination(make_teams(4))[0].matches
        assert group_matches_by_group(matches) == []
