"""
Tournament structure generation: single elimination brackets, free-for-all
finals and round robin groups.
"""
import logging
import math
import random
import uuid
from typing import List, Optional

from tourney.errors import (
    InvalidShapeError, InvalidGroupCountError, IncorrectPlayerCountError, InsufficientPlayersError,
)
from tourney.models import (
    Competitor, Match, Round, Team, MATCH_TYPE_BATTLE_ROYALE, STATUS_DRAFT,
    get_team_size, placeholder_for,
)
from tourney.partition import partition_teams

logger = logging.getLogger(__name__)

FORMAT_SINGLE_ELIMINATION = 'single_elimination'
FORMAT_ROUND_ROBIN = 'round_robin'


def new_match_id() -> str:
    return uuid.uuid4().hex


def is_power_of_two(n: int) -> bool:
    return n >= 2 and (n & (n - 1)) == 0


def round_label(round_index: int, total_rounds: int) -> str:
    """Display name of a round, counted from the first round (index 0)."""
    if round_index == total_rounds - 1:
        return "Final"
    elif round_index == total_rounds - 2:
        return "Semi-Finals"
    elif round_index == total_rounds - 3:
        return "Quarter-Finals"
    else:
        return f"Round {round_index + 1}"


def group_letter(index: int) -> str:
    """Spreadsheet-style letters: 0 -> A, 25 -> Z, 26 -> AA."""
    letters = ''
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord('A') + remainder) + letters
    return letters


class TournamentConfig:
    """Requested shape of a tournament."""

    def __init__(self, name, game='', match_type='1v1', format=FORMAT_SINGLE_ELIMINATION,
                 num_teams=None, num_groups=1, teams_per_group=None, shuffle=True):
        self.name = name
        self.game = game
        self.match_type = match_type
        self.format = format
        self.num_teams = num_teams
        self.num_groups = num_groups
        self.teams_per_group = teams_per_group
        self.shuffle = shuffle

    @property
    def team_size(self) -> int:
        return get_team_size(self.match_type)

    @property
    def is_free_for_all(self) -> bool:
        return self.match_type == MATCH_TYPE_BATTLE_ROYALE

    def required_players(self) -> Optional[int]:
        """Number of competitors this configuration needs, or None if any count works."""
        if self.is_free_for_all:
            return None
        if self.format == FORMAT_ROUND_ROBIN:
            if self.teams_per_group is None:
                return None
            return self.num_groups * self.teams_per_group * self.team_size
        if self.num_teams is None:
            return None
        return self.num_teams * self.team_size

    def __repr__(self):
        return f"TournamentConfig(name={self.name}, format={self.format}, match_type={self.match_type})"


def _check_even_teams(teams: List[Team], expected_teams: int):
    if not teams:
        return
    size = len(teams[0])
    if any(len(team) != size for team in teams):
        raise IncorrectPlayerCountError(expected_teams * size, sum(len(team) for team in teams))


def generate_single_elimination(teams: List[Team], tournament_name: str = '', game: str = '',
                                match_type: str = '1v1') -> List[Round]:
    """
    Build every round of a single elimination bracket.

    Round 0 pairs teams[2i] with teams[2i+1]. Each later match waits on the
    winners of matches 2i and 2i+1 of the previous round: its slots carry
    "Winner of ..." placeholders and the feeders point at it through
    ``next_match_id``/``next_slot``.
    """
    num_teams = len(teams)
    if not is_power_of_two(num_teams):
        raise InvalidShapeError(num_teams)
    _check_even_teams(teams, num_teams)

    total_rounds = int(math.log2(num_teams))

    def _match(name, **kwargs):
        return Match(id=new_match_id(), match_name=name, tournament_name=tournament_name,
                     game=game, match_type=match_type, status=STATUS_DRAFT, **kwargs)

    first_name = round_label(0, total_rounds)
    previous = [
        _match(f"{first_name} - Match {i + 1}", slot_a=teams[i * 2], slot_b=teams[i * 2 + 1])
        for i in range(num_teams // 2)
    ]
    rounds = [Round(first_name, previous)]

    for round_index in range(1, total_rounds):
        name = round_label(round_index, total_rounds)
        current = []
        for i in range(len(previous) // 2):
            feeder_a = previous[i * 2]
            feeder_b = previous[i * 2 + 1]
            match = _match(
                f"{name} - Match {i + 1}",
                placeholder_a=placeholder_for(feeder_a.match_name),
                placeholder_b=placeholder_for(feeder_b.match_name),
                source_match_ids=[feeder_a.id, feeder_b.id],
            )
            feeder_a.next_match_id, feeder_a.next_slot = match.id, 'a'
            feeder_b.next_match_id, feeder_b.next_slot = match.id, 'b'
            current.append(match)
        rounds.append(Round(name, current))
        previous = current

    logger.info("Generated single elimination bracket for %d teams: %s",
                num_teams, ', '.join(r.name for r in rounds))
    return rounds


def generate_free_for_all(competitors: List[Competitor], label: str, game: str = '') -> List[Round]:
    """One match containing every competitor; there is no bracket tree."""
    if len(competitors) < 2:
        raise InsufficientPlayersError(len(competitors))
    match = Match(
        id=new_match_id(),
        match_name=f"{label} - Final",
        tournament_name=label,
        game=game,
        match_type=MATCH_TYPE_BATTLE_ROYALE,
        all_competitors=list(competitors),
        status=STATUS_DRAFT,
    )
    return [Round("Final", [match])]


def generate_round_robin(teams: List[Team], num_groups: int, teams_per_group: int,
                         tournament_name: str = '', game: str = '', match_type: str = '1v1') -> List[Match]:
    """
    Deal teams into groups by index modulo ``num_groups`` and pair every team
    in a group with every other one.

    Returns the flat list of all groups' matches, each tagged with its group name.
    """
    if num_groups < 1:
        raise InvalidGroupCountError(num_groups)
    expected = num_groups * teams_per_group
    if len(teams) != expected:
        size = len(teams[0]) if teams else 1
        raise IncorrectPlayerCountError(expected * size, sum(len(team) for team in teams))
    _check_even_teams(teams, expected)

    groups = [[] for _ in range(num_groups)]
    for index, team in enumerate(teams):
        groups[index % num_groups].append(team)

    matches = []
    for group_index, group_teams in enumerate(groups):
        group_name = f"Group {group_letter(group_index)}"
        if len(group_teams) < 2:
            logger.warning("%s has fewer than 2 teams (%d). Skipping match generation.",
                           group_name, len(group_teams))
            continue
        match_number = 1
        for j in range(len(group_teams)):
            for k in range(j + 1, len(group_teams)):
                matches.append(Match(
                    id=new_match_id(),
                    match_name=f"{group_name} - Match {match_number}",
                    tournament_name=tournament_name,
                    game=game,
                    match_type=match_type,
                    slot_a=Team(group_teams[j].members),
                    slot_b=Team(group_teams[k].members),
                    group_name=group_name,
                    status=STATUS_DRAFT,
                ))
                match_number += 1

    logger.info("Generated %d round robin matches across %d groups", len(matches), num_groups)
    return matches


def generate_structure(competitors: List[Competitor], config: TournamentConfig,
                       rng: Optional[random.Random] = None) -> List[Match]:
    """
    Validate the selection against ``config`` and build the tournament.

    Returns the flat list of matches to persist. Every validation error is
    raised before any match is produced.
    """
    if config.is_free_for_all:
        rounds = generate_free_for_all(competitors, config.name, config.game)
        return [m for r in rounds for m in r.matches]

    teams_per_group = config.teams_per_group
    if config.format == FORMAT_ROUND_ROBIN:
        if config.num_groups < 1:
            raise InvalidGroupCountError(config.num_groups)
        if teams_per_group is None:
            num_teams = math.ceil(len(competitors) / config.team_size)
            teams_per_group = math.ceil(num_teams / config.num_groups)

    required = config.required_players()
    if required is None and config.format == FORMAT_ROUND_ROBIN:
        required = config.num_groups * teams_per_group * config.team_size
    if required is not None and len(competitors) != required:
        raise IncorrectPlayerCountError(required, len(competitors))

    teams = partition_teams(competitors, config.team_size, shuffle=config.shuffle, rng=rng)

    if config.format == FORMAT_ROUND_ROBIN:
        return generate_round_robin(teams, config.num_groups, teams_per_group,
                                    tournament_name=config.name, game=config.game,
                                    match_type=config.match_type)

    rounds = generate_single_elimination(teams, tournament_name=config.name, game=config.game,
                                         match_type=config.match_type)
    return [m for r in rounds for m in r.matches]


def swap_competitor(match: Match, slot: str, index: int, competitor: Competitor):
    """
    Put ``competitor`` at position ``index`` of a draft match's slot.

    If the competitor already plays in this match the two positions trade
    places; otherwise the current occupant is replaced.
    """
    target = match.get_slot(slot)
    if target is None:
        raise ValueError(f"Slot {slot} of {match.match_name} has no team to edit")
    if not 0 <= index < len(target.members):
        raise ValueError(f"Slot {slot} of {match.match_name} has no position {index}")
    current = target.members[index]

    for other_slot in ('a', 'b'):
        other = match.get_slot(other_slot)
        if other is None:
            continue
        for other_index, member in enumerate(other.members):
            if member.id == competitor.id:
                other.members[other_index] = current
                target.members[index] = member
                return match

    target.members[index] = competitor
    return match
