"""
Round ordering and winner advancement for single elimination structures.
"""
import logging
import re
from typing import List, Dict, Optional, Iterable

from tourney.errors import StructuralLookupFailure
from tourney.models import Match, Round, Team, placeholder_for

logger = logging.getLogger(__name__)

# Named rounds sort after every numbered "Round N", in this order.
NAMED_ROUND_ORDER = ['quarter', 'semi', 'final']
UNKNOWN_ROUND_ORDER = 999


def round_name_of(match_name: str) -> str:
    """Round part of a match name: "Round 1 - Match 3" -> "Round 1"."""
    return match_name.split(' - Match ')[0] or 'Uncategorized'


def match_number_of(match_name: str) -> int:
    _, sep, number = match_name.partition(' - Match ')
    if not sep:
        return 0
    digits = re.match(r'\d+', number.strip())
    return int(digits.group()) if digits else 0


def round_sort_key(round_name: str) -> int:
    """
    Sort key for round names: "Round N" by N, then Quarter-Finals,
    Semi-Finals and Final, then anything unrecognised.
    """
    lower = round_name.lower()
    if lower.startswith('round'):
        digits = re.sub(r'[^0-9]', '', lower)
        return int(digits) if digits else UNKNOWN_ROUND_ORDER
    for index, prefix in enumerate(NAMED_ROUND_ORDER):
        if lower.startswith(prefix):
            return 100 + index
    return UNKNOWN_ROUND_ORDER


def group_matches_by_round(matches: Iterable[Match]) -> List[Round]:
    """Group a flat match list into rounds in play order, matches by number."""
    grouped: Dict[str, List[Match]] = {}
    for match in matches:
        grouped.setdefault(round_name_of(match.match_name), []).append(match)

    rounds = []
    for name in sorted(grouped, key=round_sort_key):
        round_matches = sorted(grouped[name], key=lambda m: match_number_of(m.match_name))
        rounds.append(Round(name, round_matches))
    return rounds


class Advancement:
    """Write of a winning team into one slot of a downstream match."""

    def __init__(self, target_id, slot, team):
        self.target_id = target_id
        self.slot = slot
        self.team = team

    def changes(self) -> Dict:
        """Field updates for the store's single-record update."""
        return {f'slot_{self.slot}': self.team, f'placeholder_{self.slot}': ''}

    def __repr__(self):
        return f"Advancement(target_id={self.target_id}, slot={self.slot}, team={self.team})"


def resolve_winning_team(match: Match, winner_id) -> Optional[Team]:
    """The team containing ``winner_id``, or None if nobody in the match has that id."""
    if winner_id is None:
        return None
    if match.is_free_for_all:
        for competitor in match.all_competitors:
            if competitor.id == winner_id:
                return Team([competitor])
        return None
    for slot in ('a', 'b'):
        team = match.get_slot(slot)
        if team is not None and team.has_member(winner_id):
            return team
    return None


def find_downstream(match: Match, matches: Iterable[Match]):
    """
    Locate the match fed by ``match``'s winner.

    Returns ``(target, slot)`` or None when nothing depends on it (a Final or
    a group match). Matches carrying an explicit ``next_match_id`` are looked
    up by id; older records fall back to searching slot placeholders for
    "Winner of <match name>", slot a first.
    """
    matches = list(matches)
    if match.next_match_id:
        for candidate in matches:
            if candidate.id == match.next_match_id:
                return candidate, match.next_slot or 'a'
        raise StructuralLookupFailure(
            f"{match.match_name} points at missing match {match.next_match_id}"
        )

    placeholder = placeholder_for(match.match_name)
    for slot in ('a', 'b'):
        hits = [
            m for m in matches
            if m.id != match.id
            and m.tournament_name == match.tournament_name
            and m.get_placeholder(slot) == placeholder
        ]
        if len(hits) > 1:
            raise StructuralLookupFailure(
                f"{len(hits)} matches wait on {match.match_name} in slot {slot}"
            )
        if hits:
            return hits[0], slot
    return None


def advance_winner(match: Match, matches: Iterable[Match]) -> Optional[Advancement]:
    """
    Work out where a finished match's winner goes.

    Returns None when the match is not finished, has no winner, is a group
    match, or has nothing downstream. The caller applies the result as a
    single-record update, so re-running this after the write is harmless.
    """
    if not match.is_finished or match.winner_id is None or match.group_name:
        return None

    team = resolve_winning_team(match, match.winner_id)
    if team is None:
        logger.warning("Winner %s is not part of %s; nothing to advance",
                       match.winner_id, match.match_name)
        return None

    downstream = find_downstream(match, matches)
    if downstream is None:
        return None
    target, slot = downstream
    return Advancement(target.id, slot, team)


def apply_advancement(matches: Iterable[Match], advancement: Advancement) -> Optional[Match]:
    """In-memory version of the store update: put the team in the target slot."""
    for candidate in matches:
        if candidate.id == advancement.target_id:
            candidate.set_slot(advancement.slot, advancement.team)
            return candidate
    return None


def champion(rounds: List[Round]) -> Optional[Team]:
    """Winning team of a finished Final, if there is one."""
    if not rounds or not rounds[-1].matches:
        return None
    final = rounds[-1].matches[0]
    if not final.is_finished:
        return None
    return resolve_winning_team(final, final.winner_id)


def filter_visible(matches: Iterable[Match], visible_statuses: Dict[str, bool]) -> List[Match]:
    """Keep only matches whose status is switched on; unknown statuses stay visible."""
    return [m for m in matches if visible_statuses.get(m.status, True)]
