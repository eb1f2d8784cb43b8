"""
Flask JSON API for the tournament structure engine.
"""
import os
from flask import Flask, request, jsonify

from tourney import config
from tourney.errors import TournamentError, MatchNotFoundError
from tourney.generation import TournamentConfig, FORMAT_SINGLE_ELIMINATION
from tourney.service import TournamentService
from tourney.store import MatchStore, RosterStore

app = Flask(__name__)

DATA_DIR = config.DATA_DIR


def _file_path(filename: str) -> str:
    return os.path.join(DATA_DIR, filename)


def get_service() -> TournamentService:
    settings = config.load_settings(DATA_DIR)
    store = MatchStore(_file_path(config.MATCHES_FILENAME))
    return TournamentService(store, layout_settings=settings['layout'])


def get_roster() -> RosterStore:
    return RosterStore(_file_path(config.ROSTER_FILENAME))


def _int_field(data, key, default=None):
    value = data.get(key, default)
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f'{key} must be an integer')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f'{key} must be an integer')


def _bool_field(data, key, default):
    value = data.get(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ('true', '1', 'yes'):
        return True
    if isinstance(value, str) and value.lower() in ('false', '0', 'no'):
        return False
    raise ValueError(f'{key} must be true or false')


def team_to_json(team):
    if team is None:
        return None
    return {'id': team.key, 'name': team.display_name, 'players': [m.to_dict() for m in team.members]}


def rounds_to_json(rounds):
    return [{'name': r.name, 'matches': [m.to_dict() for m in r.matches]} for r in rounds]


@app.errorhandler(TournamentError)
def handle_tournament_error(e):
    app.logger.warning(f'Request failed: {e}')
    return jsonify({'success': False, 'error': str(e)}), 400


@app.errorhandler(MatchNotFoundError)
def handle_match_not_found(e):
    return jsonify({'success': False, 'error': str(e)}), 404


@app.errorhandler(ValueError)
def handle_value_error(e):
    return jsonify({'success': False, 'error': str(e)}), 400


@app.route('/api/tournaments', methods=['GET'])
def api_list_tournaments():
    return jsonify({'tournaments': get_service().match_store.list_tournaments()})


@app.route('/api/tournaments', methods=['POST'])
def api_create_tournament():
    """Generate and store a tournament from the selected roster."""
    data = request.get_json() or {}
    name = data.get('name', '')
    if not isinstance(name, str) or not name.strip():
        return jsonify({'success': False, 'error': 'Tournament name required'}), 400
    name = name.strip()

    competitors = get_roster().get_competitors(**(data.get('filters') or {}))
    player_ids = data.get('player_ids')
    if player_ids is not None:
        selected = set(str(p) for p in player_ids)
        competitors = [c for c in competitors if c.id in selected]
    if not competitors:
        return jsonify({'success': False, 'error': 'No players selected.'}), 400

    tournament_config = TournamentConfig(
        name=name,
        game=data.get('game', ''),
        match_type=data.get('match_type', '1v1'),
        format=data.get('format', FORMAT_SINGLE_ELIMINATION),
        num_teams=_int_field(data, 'num_teams'),
        num_groups=_int_field(data, 'num_groups', 1),
        teams_per_group=_int_field(data, 'teams_per_group'),
        shuffle=_bool_field(data, 'shuffle', True),
    )
    matches = get_service().create_tournament(competitors, tournament_config)
    app.logger.info(f'Created tournament {name} ({len(matches)} matches)')
    return jsonify({'success': True, 'matches': [m.to_dict() for m in matches]}), 201


@app.route('/api/tournaments/<name>', methods=['DELETE'])
def api_delete_tournament(name):
    removed = get_service().match_store.delete_tournament(name)
    return jsonify({'success': True, 'deleted': removed})


@app.route('/api/tournaments/<name>/bracket', methods=['GET'])
def api_bracket(name):
    """Rounds in play order; ?public=1 hides statuses switched off in settings."""
    service = get_service()
    visible = None
    if request.args.get('public'):
        visible = config.load_settings(DATA_DIR)['visible_statuses']
    rounds = service.get_bracket(name, visible_statuses=visible)
    return jsonify({
        'rounds': rounds_to_json(rounds),
        'champion': team_to_json(service.get_champion(name)),
    })


@app.route('/api/tournaments/<name>/groups', methods=['GET'])
def api_groups(name):
    visible = None
    if request.args.get('public'):
        visible = config.load_settings(DATA_DIR)['visible_statuses']
    groups = get_service().get_groups(name, visible_statuses=visible)
    return jsonify({'groups': [{
        'name': g.name,
        'matches': [m.to_dict() for m in g.matches],
        'standings': [s.to_dict() for s in g.standings],
    } for g in groups]})


@app.route('/api/tournaments/<name>/layout', methods=['POST'])
def api_layout(name):
    """Lay out the bracket from measured card heights; 202 until all are known."""
    data = request.get_json() or {}
    heights = {k: float(v) for k, v in (data.get('heights') or {}).items()}
    layout = get_service().get_layout(name, heights)
    if not layout.ready:
        return jsonify({'ready': False, 'missing': layout.missing_ids}), 202
    return jsonify({'ready': True, **layout.to_dict()})


@app.route('/api/tournaments/<name>/resolve', methods=['POST'])
def api_resolve(name):
    advanced = get_service().resolve_tournament(name)
    return jsonify({'success': True, 'advanced': advanced})


@app.route('/api/matches/<match_id>', methods=['POST'])
def api_update_match(match_id):
    """Update status / winner / score of one match."""
    data = request.get_json() or {}
    changes = {k: data[k] for k in ('status', 'winner_id', 'score') if k in data}
    if not changes:
        return jsonify({'success': False, 'error': 'Nothing to update'}), 400
    match = get_service().update_match(match_id, **changes)
    return jsonify({'success': True, 'match': match.to_dict()})


@app.route('/api/matches/<match_id>/swap', methods=['POST'])
def api_swap_player(match_id):
    """Edit a draft match: put a roster player at slot a/b, position index."""
    data = request.get_json() or {}
    slot = data.get('slot')
    if slot not in ('a', 'b'):
        return jsonify({'success': False, 'error': 'Slot must be "a" or "b"'}), 400
    index = _int_field(data, 'index', 0)

    player_id = str(data.get('player_id'))
    competitor = next((c for c in get_roster().get_competitors() if c.id == player_id), None)
    if competitor is None:
        return jsonify({'success': False, 'error': f'Unknown player {player_id}'}), 400

    match = get_service().edit_draft(match_id, slot, index, competitor)
    return jsonify({'success': True, 'match': match.to_dict()})


if __name__ == '__main__':
    app.run(debug=True, port=int(os.environ.get('PORT', 5000)))
