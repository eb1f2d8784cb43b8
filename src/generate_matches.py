"""
Print the structure a roster would produce, without storing anything.

Usage:
    python src/generate_matches.py data/roster.yaml --name "Carrom Cup" --teams 8
    python src/generate_matches.py data/roster.yaml --name "Carrom Cup" --format round_robin --groups 2
    python src/generate_matches.py data/roster.yaml --name "Ludo Night" --match-type "Battle Royale"

Exit codes:
    0: Success
    1: Roster empty or structure invalid
"""
import argparse
import sys

from tourney.errors import TournamentError
from tourney.generation import TournamentConfig, FORMAT_SINGLE_ELIMINATION, FORMAT_ROUND_ROBIN, generate_structure
from tourney.models import Match
from tourney.resolution import group_matches_by_round
from tourney.standings import group_matches_by_group
from tourney.store import RosterStore


def describe_side(match: Match, slot: str) -> str:
    team = match.get_slot(slot)
    if team is not None:
        return ' & '.join(member.name for member in team.members)
    return match.get_placeholder(slot) or 'TBD'


def format_matches(matches):
    """Render matches grouped by group (round robin) or by round."""
    lines = []
    groups = group_matches_by_group(matches)
    sections = [(g.name, g.matches) for g in groups] if groups else \
        [(r.name, r.matches) for r in group_matches_by_round(matches)]

    for name, section_matches in sections:
        if lines:
            lines.append('')
        lines.append(f"# {name}")
        for match in section_matches:
            if match.is_free_for_all:
                names = ', '.join(c.name for c in match.all_competitors)
                lines.append(f"{match.match_name}: {names}")
            else:
                lines.append(f"{match.match_name}: {describe_side(match, 'a')} vs {describe_side(match, 'b')}")
    return '\n'.join(lines)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Generate a tournament structure from a roster YAML file')
    parser.add_argument('roster', help='Roster YAML file with a "competitors" list')
    parser.add_argument('--name', required=True, help='Tournament name')
    parser.add_argument('--game', default='', help='Game being played')
    parser.add_argument('--match-type', default='1v1', help='1v1, 2v2, 4v4 or "Battle Royale"')
    parser.add_argument('--format', default=FORMAT_SINGLE_ELIMINATION,
                        choices=[FORMAT_SINGLE_ELIMINATION, FORMAT_ROUND_ROBIN])
    parser.add_argument('--teams', type=int, help='Number of teams in the bracket')
    parser.add_argument('--groups', type=int, default=1, help='Number of round robin groups')
    parser.add_argument('--teams-per-group', type=int, help='Teams in each round robin group')
    parser.add_argument('--branch', help='Only use competitors from this branch')
    parser.add_argument('--no-shuffle', action='store_true', help='Keep roster order')

    args = parser.parse_args(argv)

    filters = {'branch': args.branch} if args.branch else {}
    competitors = RosterStore(args.roster).get_competitors(**filters)
    if not competitors:
        print(f"Error: no competitors found in {args.roster}", file=sys.stderr)
        return 1

    tournament_config = TournamentConfig(
        name=args.name,
        game=args.game,
        match_type=args.match_type,
        format=args.format,
        num_teams=args.teams,
        num_groups=args.groups,
        teams_per_group=args.teams_per_group,
        shuffle=not args.no_shuffle,
    )
    try:
        matches = generate_structure(competitors, tournament_config)
    except TournamentError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_matches(matches))
    return 0


if __name__ == '__main__':
    sys.exit(main())
