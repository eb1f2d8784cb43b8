"""
Data directory and settings.yaml handling.
"""
import os
import yaml

from tourney.layout import CARD_WIDTH, ROUND_GAP, MIN_CARD_SPACING
from tourney.models import MATCH_STATUSES, STATUS_DRAFT

BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DATA_DIR = os.environ.get('TOURNAMENT_DATA_DIR', os.path.join(BASE_DIR, 'data'))

SETTINGS_FILENAME = 'settings.yaml'
ROSTER_FILENAME = 'roster.yaml'
MATCHES_FILENAME = 'matches.yaml'


def get_default_settings():
    """Return default settings."""
    return {
        'layout': {
            'card_width': CARD_WIDTH,
            'round_gap': ROUND_GAP,
            'min_card_spacing': MIN_CARD_SPACING,
        },
        # Drafts are hidden from public views until published
        'visible_statuses': {status: status != STATUS_DRAFT for status in MATCH_STATUSES},
    }


def load_settings(data_dir=None):
    """Load settings.yaml from the data directory, filling in defaults."""
    defaults = get_default_settings()
    path = os.path.join(data_dir or DATA_DIR, SETTINGS_FILENAME)
    if not os.path.exists(path):
        return defaults
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if not data:
        return defaults
    return {
        'layout': {**defaults['layout'], **(data.get('layout') or {})},
        'visible_statuses': {**defaults['visible_statuses'], **(data.get('visible_statuses') or {})},
    }


def save_settings(settings, data_dir=None):
    """Save settings to YAML file."""
    directory = data_dir or DATA_DIR
    os.makedirs(directory, exist_ok=True)
    with open(os.path.join(directory, SETTINGS_FILENAME), 'w', encoding='utf-8') as f:
        yaml.dump(settings, f, default_flow_style=False)
