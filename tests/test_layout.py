"""
Unit tests for bracket layout.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from conftest import make_teams
from tourney.errors import LayoutNotReady
from tourney.generation import generate_single_elimination
from tourney.layout import compute_layout, Pending, Ready, Segment, CARD_WIDTH, ROUND_GAP
from tourney.models import Round


def _heights(rounds, height=100):
    return {m.id: height for r in rounds for m in r.matches}


class TestPending:
    """Layout waits for every measured height."""

    def test_missing_heights(self):
        rounds = generate_single_elimination(make_teams(4))
        heights = _heights(rounds)
        final_id = rounds[1].matches[0].id
        del heights[final_id]

        layout = compute_layout(rounds, heights)
        assert isinstance(layout, Pending)
        assert not layout.ready
        assert layout.missing_ids == [final_id]

    def test_require_raises(self):
        rounds = generate_single_elimination(make_teams(2))
        with pytest.raises(LayoutNotReady) as exc:
            compute_layout(rounds, {}).require()
        assert exc.value.missing_ids == [rounds[0].matches[0].id]

    def test_empty_bracket(self):
        layout = compute_layout([], {})
        assert layout.ready
        assert layout.rects == {}


class TestPositions:
    """Tests for card placement."""

    def test_two_feeders_centre_parent(self):
        rounds = generate_single_elimination(make_teams(4))
        m1, m2 = rounds[0].matches
        final = rounds[1].matches[0]
        heights = {m1.id: 100, m2.id: 140, final.id: 60}

        layout = compute_layout(rounds, heights, min_spacing=20)
        assert isinstance(layout, Ready)
        assert [layout.rects[m1.id].y, layout.rects[m2.id].y] == [0, 120]
        # feeder centres 50 and 190 -> 120
        assert layout.rects[final.id].center_y == 120
        assert layout.rects[final.id].y == 120 - 60 / 2

    def test_columns(self):
        rounds = generate_single_elimination(make_teams(8))
        layout = compute_layout(rounds, _heights(rounds), card_width=200, round_gap=50)
        for index, round_ in enumerate(rounds):
            for match in round_.matches:
                assert layout.rects[match.id].x == index * 250
                assert layout.rects[match.id].width == 200
        assert layout.width == 2 * 250 + 200

    def test_default_constants(self):
        rounds = generate_single_elimination(make_teams(4))
        layout = compute_layout(rounds, _heights(rounds))
        assert layout.rects[rounds[1].matches[0].id].x == CARD_WIDTH + ROUND_GAP
        assert layout.rects[rounds[0].matches[1].id].y == 140

    def test_single_feeder(self):
        """A match with only one feeder is centred on it."""
        teams = make_teams(2)
        first = generate_single_elimination(teams)[0].matches[0]
        rounds = generate_single_elimination(make_teams(4))
        child = rounds[1].matches[0]
        uneven = [Round("Semi-Finals", [first]), Round("Final", [child])]

        layout = compute_layout(uneven, {first.id: 100, child.id: 40})
        assert layout.rects[child.id].center_y == layout.rects[first.id].center_y

    def test_no_feeders_fallback(self):
        rounds = generate_single_elimination(make_teams(2))
        # a two-match round after a one-match round: the second card has no feeders
        next_round = generate_single_elimination(make_teams(4))[0]
        layout = compute_layout(rounds + [next_round], _heights(rounds + [next_round], 80), min_spacing=20)
        orphan = next_round.matches[1]
        assert layout.rects[orphan.id].y == 1 * (80 + 20)

    def test_height_covers_every_card(self):
        rounds = generate_single_elimination(make_teams(8))
        layout = compute_layout(rounds, _heights(rounds, 100), min_spacing=40)
        assert layout.height == 3 * 140 + 100


class TestConnectors:
    """Tests for connector geometry."""

    def test_pair_connector(self):
        rounds = generate_single_elimination(make_teams(4))
        m1, m2 = rounds[0].matches
        final = rounds[1].matches[0]
        layout = compute_layout(rounds, {m1.id: 100, m2.id: 140, final.id: 60},
                                card_width=200, round_gap=100, min_spacing=20)
        assert layout.connectors == [
            Segment(200, 50, 250, 50),
            Segment(200, 190, 250, 190),
            Segment(250, 50, 250, 190),
            Segment(250, 120, 300, 120),
        ]

    def test_single_feeder_straight_line(self):
        first = generate_single_elimination(make_teams(2))[0].matches[0]
        child = generate_single_elimination(make_teams(4))[1].matches[0]
        layout = compute_layout([Round("Semi-Finals", [first]), Round("Final", [child])],
                                {first.id: 100, child.id: 100}, card_width=200, round_gap=100)
        assert layout.connectors == [Segment(200, 50, 300, 50)]

    def test_connector_count(self):
        rounds = generate_single_elimination(make_teams(8))
        layout = compute_layout(rounds, _heights(rounds))
        # 4 segments per parent: 2 semis + 1 final
        assert len(layout.connectors) == 12

    def test_to_dict(self):
        rounds = generate_single_elimination(make_teams(2))
        data = compute_layout(rounds, _heights(rounds)).to_dict()
        assert set(data) == {'rects', 'connectors', 'width', 'height'}
        assert data['connectors'] == []
