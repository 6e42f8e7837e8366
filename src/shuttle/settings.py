"""
Tournament settings: defaults merged with an optional YAML file.
"""
import os

import yaml

from shuttle.models import DOUBLES, SINGLE_ELIMINATION


def get_default_settings():
    """Return default settings."""
    return {
        'tournament_name': 'Open Badminton Tournament',
        'event_type': DOUBLES,
        'format': SINGLE_ELIMINATION,
        'club_protection': True,
        'has_third_place_match': True,
        'teams_per_group': 4,
        'advance_per_group': 2,
        'court_names': '4',
        'start_time': '08:00',
        'match_duration_minutes': 30,
    }


def load_settings(path):
    """Load settings from a YAML file, merging with defaults."""
    defaults = get_default_settings()
    if not path or not os.path.exists(path):
        return defaults
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
        if not data:
            return defaults
        return {**defaults, **data}


def save_settings(path, settings):
    """Save settings to a YAML file."""
    with open(path, 'w', encoding='utf-8') as f:
        yaml.dump(settings, f, default_flow_style=False)
