"""
Data model for tournament structures: competitors, teams, matches, rounds and groups.
"""
from typing import List, Dict, Optional


STATUS_DRAFT = 'draft'
STATUS_UPCOMING = 'upcoming'
STATUS_ONGOING = 'ongoing'
STATUS_FINISHED = 'finished'
STATUS_CANCELLED = 'cancelled'

MATCH_STATUSES = (STATUS_DRAFT, STATUS_UPCOMING, STATUS_ONGOING, STATUS_FINISHED, STATUS_CANCELLED)

MATCH_TYPE_BATTLE_ROYALE = 'Battle Royale'

TEAM_SIZES = {
    '1v1': 1,
    '2v2': 2,
    '4v4': 4,
}

PLACEHOLDER_PREFIX = 'Winner of '


def get_team_size(match_type: str) -> int:
    """Number of competitors per side for a match type (defaults to 1)."""
    return TEAM_SIZES.get(match_type, 1)


def team_key(members) -> str:
    """Order-independent identity of a team: sorted member ids joined by '-'."""
    return '-'.join(sorted(member.id for member in members))


def placeholder_for(match_name: str) -> str:
    return f"{PLACEHOLDER_PREFIX}{match_name}"


class Competitor:
    def __init__(self, id, name, attributes=None):
        self.id = id
        self.name = name
        self.attributes = attributes if attributes else {}

    def to_dict(self):
        data = {'id': self.id, 'name': self.name}
        if self.attributes:
            data['attributes'] = dict(self.attributes)
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(id=str(data['id']), name=data.get('name', ''), attributes=data.get('attributes'))

    def __eq__(self, other):
        return isinstance(other, Competitor) and self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"Competitor(id={self.id}, name={self.name})"


class Team:
    def __init__(self, members):
        self.members = list(members)

    @property
    def key(self) -> str:
        return team_key(self.members)

    @property
    def display_name(self) -> str:
        """First member's name, with a count of the others for multi-member teams."""
        if not self.members:
            return 'TBD'
        main = self.members[0].name
        others = len(self.members) - 1
        if others == 0:
            return main
        return f"{main} & {others} other{'s' if others > 1 else ''}"

    def has_member(self, competitor_id) -> bool:
        return any(member.id == competitor_id for member in self.members)

    def __len__(self):
        return len(self.members)

    def __eq__(self, other):
        return isinstance(other, Team) and self.key == other.key

    def __hash__(self):
        return hash(self.key)

    def __repr__(self):
        return f"Team(key={self.key})"


class Match:
    """
    A single match record.

    Standard matches use ``slot_a``/``slot_b``; a slot is either a resolved
    Team or None, in which case ``placeholder_a``/``placeholder_b`` may hold
    a "Winner of <match name>" forward reference. Free-for-all matches list
    every entrant in ``all_competitors`` instead.

    ``source_match_ids`` and ``next_match_id``/``next_slot`` form the explicit
    bracket topology assigned at generation time.
    """

    def __init__(self, id, match_name, tournament_name='', game='', match_type='1v1',
                 slot_a=None, slot_b=None, placeholder_a='', placeholder_b='',
                 all_competitors=None, group_name=None, status=STATUS_DRAFT,
                 winner_id=None, score=(0, 0), source_match_ids=None,
                 next_match_id=None, next_slot=None):
        self.id = id
        self.match_name = match_name
        self.tournament_name = tournament_name
        self.game = game
        self.match_type = match_type
        self.slot_a = slot_a
        self.slot_b = slot_b
        self.placeholder_a = placeholder_a or ''
        self.placeholder_b = placeholder_b or ''
        self.all_competitors = all_competitors
        self.group_name = group_name
        self.status = status
        self.winner_id = winner_id
        self.score = tuple(score)
        self.source_match_ids = list(source_match_ids) if source_match_ids else []
        self.next_match_id = next_match_id
        self.next_slot = next_slot

    @property
    def is_free_for_all(self) -> bool:
        return self.all_competitors is not None

    @property
    def is_finished(self) -> bool:
        return self.status == STATUS_FINISHED

    def get_slot(self, slot: str) -> Optional[Team]:
        return self.slot_a if slot == 'a' else self.slot_b

    def get_placeholder(self, slot: str) -> str:
        return self.placeholder_a if slot == 'a' else self.placeholder_b

    def set_slot(self, slot: str, team: Optional[Team], placeholder: str = ''):
        if slot == 'a':
            self.slot_a, self.placeholder_a = team, placeholder
        else:
            self.slot_b, self.placeholder_b = team, placeholder

    def to_dict(self) -> Dict:
        """Plain-data form used by the YAML store."""
        data = {
            'id': self.id,
            'match_name': self.match_name,
            'tournament_name': self.tournament_name,
            'game': self.game,
            'match_type': self.match_type,
            'slot_a': [m.to_dict() for m in self.slot_a.members] if self.slot_a else [],
            'slot_b': [m.to_dict() for m in self.slot_b.members] if self.slot_b else [],
            'placeholder_a': self.placeholder_a,
            'placeholder_b': self.placeholder_b,
            'status': self.status,
            'winner_id': self.winner_id,
            'score': list(self.score),
            'source_match_ids': list(self.source_match_ids),
            'next_match_id': self.next_match_id,
            'next_slot': self.next_slot,
        }
        if self.all_competitors is not None:
            data['all_competitors'] = [c.to_dict() for c in self.all_competitors]
        if self.group_name is not None:
            data['group_name'] = self.group_name
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> 'Match':
        def _team(members):
            if not members:
                return None
            return Team([Competitor.from_dict(m) for m in members])

        all_competitors = data.get('all_competitors')
        if all_competitors is not None:
            all_competitors = [Competitor.from_dict(c) for c in all_competitors]

        return cls(
            id=data['id'],
            match_name=data['match_name'],
            tournament_name=data.get('tournament_name', ''),
            game=data.get('game', ''),
            match_type=data.get('match_type', '1v1'),
            slot_a=_team(data.get('slot_a')),
            slot_b=_team(data.get('slot_b')),
            placeholder_a=data.get('placeholder_a', ''),
            placeholder_b=data.get('placeholder_b', ''),
            all_competitors=all_competitors,
            group_name=data.get('group_name'),
            status=data.get('status', STATUS_DRAFT),
            winner_id=data.get('winner_id'),
            score=data.get('score') or (0, 0),
            source_match_ids=data.get('source_match_ids'),
            next_match_id=data.get('next_match_id'),
            next_slot=data.get('next_slot'),
        )

    def __repr__(self):
        return f"Match(id={self.id}, match_name={self.match_name}, status={self.status})"


class Round:
    def __init__(self, name, matches=None):
        self.name = name
        self.matches = matches if matches else []

    def __repr__(self):
        return f"Round(name={self.name}, matches={len(self.matches)})"


class Standing:
    def __init__(self, team: Team):
        self.team = team
        self.played = 0
        self.won = 0
        self.drawn = 0
        self.lost = 0
        self.points = 0

    @property
    def id(self) -> str:
        return self.team.key

    @property
    def name(self) -> str:
        return self.team.display_name

    @property
    def players(self) -> List[Competitor]:
        return self.team.members

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'players': [p.to_dict() for p in self.players],
            'played': self.played,
            'won': self.won,
            'drawn': self.drawn,
            'lost': self.lost,
            'points': self.points,
        }

    def __repr__(self):
        return f"Standing(id={self.id}, points={self.points})"


class Group:
    def __init__(self, name, matches=None, standings=None):
        self.name = name
        self.matches = matches if matches else []
        self.standings = standings if standings else []

    def __repr__(self):
        return f"Group(name={self.name}, matches={len(self.matches)})"
