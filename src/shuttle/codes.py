"""
Human-readable codes and opaque identifiers for players and teams.
"""
import uuid

from shuttle.models import SINGLES


def generate_player_code(index: int) -> str:
    """Code for the player at zero-based ``index``: 0 -> 'P-001'."""
    return f"P-{index + 1:03d}"


def generate_team_code(index: int, event_type: str) -> str:
    """Code for the team at zero-based ``index``: 'S-001' for singles, 'D-001' for doubles."""
    prefix = 'S' if event_type == SINGLES else 'D'
    return f"{prefix}-{index + 1:03d}"


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"
