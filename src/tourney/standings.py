"""
Round robin group reconstruction and standings.
"""
from typing import List, Dict, Iterable

from tourney.models import Group, Match, Standing

POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1


def calculate_standings(matches: Iterable[Match]) -> List[Standing]:
    """
    Standings for one group's matches.

    Every team appearing in any match gets a row. Only finished matches
    count: the side containing the winner gets 3 points, and a finished match
    whose winner is on neither side is a draw worth 1 point each.

    Ranking: points (desc) -> wins (desc). Teams tied on both keep the order
    in which they first appear.
    """
    table: Dict[str, Standing] = {}
    matches = list(matches)

    for match in matches:
        for team in (match.slot_a, match.slot_b):
            if team is not None and len(team) > 0 and team.key not in table:
                table[team.key] = Standing(team)

    for match in matches:
        if not match.is_finished or match.slot_a is None or match.slot_b is None:
            continue

        stats_a = table.get(match.slot_a.key)
        stats_b = table.get(match.slot_b.key)
        if stats_a is None or stats_b is None:
            continue

        stats_a.played += 1
        stats_b.played += 1

        if match.slot_a.has_member(match.winner_id):
            stats_a.won += 1
            stats_a.points += POINTS_FOR_WIN
            stats_b.lost += 1
        elif match.slot_b.has_member(match.winner_id):
            stats_b.won += 1
            stats_b.points += POINTS_FOR_WIN
            stats_a.lost += 1
        else:
            # draw, or finished with no winner recorded
            stats_a.drawn += 1
            stats_b.drawn += 1
            stats_a.points += POINTS_FOR_DRAW
            stats_b.points += POINTS_FOR_DRAW

    return sorted(table.values(), key=lambda s: (-s.points, -s.won))


def group_matches_by_group(matches: Iterable[Match]) -> List[Group]:
    """Rebuild groups (sorted by name) from their matches and rank each one."""
    grouped: Dict[str, List[Match]] = {}
    for match in matches:
        if not match.group_name:
            continue
        grouped.setdefault(match.group_name, []).append(match)

    return [
        Group(name, grouped[name], calculate_standings(grouped[name]))
        for name in sorted(grouped)
    ]
