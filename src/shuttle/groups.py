"""
Round-robin group stage: group generation, standings and advancement.
"""
import logging
import math
import string
from itertools import combinations
from typing import List, Dict

from shuttle.codes import new_id
from shuttle.models import Group, Match, MatchSource, Team, TeamStats, GROUP
from shuttle.results import get_outcome, Outcome, is_decided

logger = logging.getLogger(__name__)

POINTS_PER_WIN = 2


def get_group_name(index: int) -> str:
    """Name for the group at zero-based ``index``: 0 -> 'Group A'."""
    letters = string.ascii_uppercase
    label = ''
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        label = letters[remainder] + label
    return f"Group {label}"


def generate_groups(teams: List[Team], teams_per_group: int) -> List[Group]:
    """
    Split ``teams`` into consecutive chunks and generate every pairing in each.

    Teams keep their input order (no snake seeding). The last group may be
    smaller than ``teams_per_group``.
    """
    if teams_per_group < 2 or not teams:
        return []

    group_count = math.ceil(len(teams) / teams_per_group)
    groups = []
    for i in range(group_count):
        group_teams = teams[i * teams_per_group:(i + 1) * teams_per_group]
        group_id = new_id('group')
        matches = []
        for position, (team_a, team_b) in enumerate(combinations(group_teams, 2)):
            matches.append(Match(
                f"gm-{group_id}-{position}",
                GROUP,
                0,
                position,
                slot_a=MatchSource.pair(team_a.id),
                slot_b=MatchSource.pair(team_b.id),
                team_a=team_a,
                team_b=team_b,
                group_id=group_id,
            ))
        groups.append(Group(group_id, get_group_name(i), group_teams, matches))
    return groups


def calculate_group_rankings(group: Group) -> List[TeamStats]:
    """
    Calculate standings for a group from its match scores.

    A win is worth 2 points. Undecided matches (no score, 0-0, tie) are not
    counted. Ranking: points (desc), then point differential (desc); teams
    still level keep their group order.
    """
    stats = {team.id: TeamStats(team.id) for team in group.teams}

    for match in group.matches:
        outcome = get_outcome(match)
        if outcome is Outcome.UNDECIDED or match.team_a is None or match.team_b is None:
            continue
        stats_a = stats.get(match.team_a.id)
        stats_b = stats.get(match.team_b.id)
        if stats_a is None or stats_b is None:
            continue

        stats_a.played += 1
        stats_b.played += 1
        stats_a.diff += match.score_a - match.score_b
        stats_b.diff += match.score_b - match.score_a

        winner, loser = (stats_a, stats_b) if outcome is Outcome.A_WINS else (stats_b, stats_a)
        winner.won += 1
        winner.points += POINTS_PER_WIN
        loser.lost += 1

    return sorted(stats.values(), key=lambda s: (-s.points, -s.diff))


def is_group_complete(group: Group) -> bool:
    return all(is_decided(m) for m in group.matches)


def select_advancing_teams(groups: List[Group], advance_per_group: int) -> List[Team]:
    """
    Take the top ``advance_per_group`` teams of each group as knockout seeds.

    Order: group order, then ranking order within the group. Returns an
    empty list when fewer than 2 teams would qualify.
    """
    if advance_per_group < 1:
        return []

    advancing = []
    for group in groups:
        teams_by_id = {team.id: team for team in group.teams}
        for team_stats in calculate_group_rankings(group)[:advance_per_group]:
            advancing.append(teams_by_id[team_stats.team_id])

    if len(advancing) < 2:
        logger.warning("Only %d team(s) qualify from the group stage", len(advancing))
        return []
    return advancing


def get_standings_table(groups: List[Group]) -> Dict[str, List[Dict]]:
    """Rankings of every group keyed by group name, rows as dicts with the team attached."""
    table = {}
    for group in groups:
        teams_by_id = {team.id: team for team in group.teams}
        rows = []
        for rank, team_stats in enumerate(calculate_group_rankings(group), start=1):
            row = team_stats.to_dict()
            row['rank'] = rank
            row['team'] = teams_by_id[team_stats.team_id]
            rows.append(row)
        table[group.name] = rows
    return table
