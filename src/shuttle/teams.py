"""
Roster parsing and team building.

Teams are rebuilt from the full roster on every change; team ids are not
stable across rebuilds.
"""
import re
from typing import List

from shuttle.codes import generate_player_code, generate_team_code, new_id
from shuttle.models import Player, Team, SINGLES, DEFAULT_CLUB

DEFAULT_PLAYER_NAME = 'New Player'

_SEPARATOR = re.compile(r'[|\-]')


def parse_roster(text: str, start_index: int = 0) -> List[Player]:
    """
    Parse one player per line in the form ``Name | Club``.

    A ``-`` is accepted as separator too. Blank lines are skipped. Codes are
    numbered from ``start_index`` so players appended to an existing roster
    keep unique codes.
    """
    players = []
    lines = [line for line in text.splitlines() if line.strip()]
    for offset, line in enumerate(lines):
        parts = _SEPARATOR.split(line)
        name = parts[0].strip() or DEFAULT_PLAYER_NAME
        club = parts[1].strip() if len(parts) > 1 and parts[1].strip() else DEFAULT_CLUB
        players.append(Player(
            id=new_id('p'),
            name=name,
            club=club,
            code=generate_player_code(start_index + offset),
        ))
    return players


def create_teams(players: List[Player], event_type: str) -> List[Team]:
    """Group players into teams of one (singles) or two (doubles), keeping input order."""
    step = 1 if event_type == SINGLES else 2
    teams = []
    for index, start in enumerate(range(0, len(players), step)):
        team_players = players[start:start + step]
        teams.append(Team(
            id=new_id('team'),
            code=generate_team_code(index, event_type),
            players=team_players,
        ))
    return teams


def make_placeholder_teams(teams: List[Team]) -> List[Team]:
    """Copies of ``teams`` whose players are named 'Position N', for a pre-draw preview."""
    placeholders = []
    for index, team in enumerate(teams):
        players = [Player(p.id, f"Position {index + 1}", p.club, p.code) for p in team.players]
        placeholders.append(team.with_players(players))
    return placeholders
