"""
Shared pytest fixtures for tournament engine tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os
import yaml

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tourney.models import Competitor, Team
from tourney.store import MatchStore


def make_competitors(count, prefix='P', branch=None):
    attributes = {'branch': branch} if branch else None
    return [Competitor(id=f"{prefix}{i + 1}", name=f"Player {prefix}{i + 1}", attributes=attributes)
            for i in range(count)]


def make_teams(count, team_size=1):
    players = make_competitors(count * team_size)
    return [Team(players[i:i + team_size]) for i in range(0, len(players), team_size)]


@pytest.fixture
def eight_players():
    return make_competitors(8)


@pytest.fixture
def match_store(tmp_path):
    return MatchStore(str(tmp_path / "matches.yaml"))


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Data directory with a roster of 8 North and 4 South players."""
    import app as app_module

    roster = make_competitors(8, branch='North') + make_competitors(4, prefix='S', branch='South')
    (tmp_path / "roster.yaml").write_text(yaml.dump(
        {'competitors': [c.to_dict() for c in roster]}, default_flow_style=False))

    monkeypatch.setattr(app_module, 'DATA_DIR', str(tmp_path))
    return str(tmp_path)


@pytest.fixture
def client(temp_data_dir):
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client
