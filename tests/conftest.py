"""
Shared pytest fixtures for the draw and bracket tests.

Running tests:
    pytest tests/                  - full suite
    pytest tests/ -m "not slow"   - skip the property sweeps
"""
import pytest
import random
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from shuttle.models import Player, Team


def make_team(index, club='Club A'):
    """Build a singles team 't<index>' whose player belongs to ``club``."""
    player = Player(f"p{index}", f"Player {index}", club, f"P-{index:03d}")
    return Team(f"t{index}", f"S-{index:03d}", [player])


@pytest.fixture
def team_factory():
    """Return a function building ``count`` teams, optionally cycling through ``clubs``."""
    def _make(count, clubs=None):
        clubs = clubs or ['Club A']
        return [make_team(i + 1, clubs[i % len(clubs)]) for i in range(count)]
    return _make


@pytest.fixture
def eight_teams(team_factory):
    return team_factory(8, clubs=['Club A', 'Club B', 'Club C', 'Club D'])


@pytest.fixture
def rng():
    """Seeded random generator for reproducible draws."""
    return random.Random(2024)


@pytest.fixture
def sample_players():
    """Ten players from three clubs."""
    clubs = ['Smash BC', 'Shuttle Stars', 'Net Rushers']
    return [Player(f"p{i}", f"Player {i}", clubs[i % 3], f"P-{i:03d}") for i in range(1, 11)]
