"""
Event category workflow.

Structural changes (roster edits, a new draw, leaving the group stage)
rebuild teams, matches and groups from scratch; score entry re-propagates
results. Every function returns a new EventCategory and leaves its input
untouched.
"""
import logging
import random
from typing import List, Optional

from shuttle.allocation import assign_courts_and_time
from shuttle.codes import new_id
from shuttle.draw import shuffle_with_club_protection
from shuttle.elimination import build_bracket, fill_bracket, renumber_matches
from shuttle.groups import generate_groups, select_advancing_teams
from shuttle.models import (
    EventCategory, Match, Player,
    DOUBLES, SINGLE_ELIMINATION, GROUP_STAGE_ELIMINATION,
)
from shuttle.results import update_match_score
from shuttle.teams import create_teams, make_placeholder_teams

logger = logging.getLogger(__name__)


def create_category(name: str, event_type: str = DOUBLES, format: str = SINGLE_ELIMINATION,
                    settings: Optional[dict] = None) -> EventCategory:
    settings = settings or {}
    return EventCategory(
        new_id('cat'),
        name,
        event_type=event_type,
        format=format,
        has_third_place_match=settings.get('has_third_place_match', True),
        teams_per_group=settings.get('teams_per_group', 4),
        advance_per_group=settings.get('advance_per_group', 2),
    )


def _sync_roster(category: EventCategory, players: List[Player]) -> EventCategory:
    teams = create_teams(players, category.event_type)
    matches = []
    if category.format == SINGLE_ELIMINATION:
        # Preview bracket: real structure, teams shown only by position
        skeleton = build_bracket(len(teams), category.has_third_place_match)
        matches = fill_bracket(make_placeholder_teams(teams), skeleton)
    return category.copy(players=players, teams=teams, matches=matches, groups=[], is_draw_done=False)


def add_players(category: EventCategory, players: List[Player]) -> EventCategory:
    return _sync_roster(category, category.players + list(players))


def remove_player(category: EventCategory, player_id: str) -> EventCategory:
    players = [p for p in category.players if p.id != player_id]
    if len(players) == len(category.players):
        logger.warning("Cannot remove player: unknown player %s", player_id)
        return category
    return _sync_roster(category, players)


def perform_draw(category: EventCategory, club_protection: bool = True,
                 rng: Optional[random.Random] = None) -> EventCategory:
    """
    Draw the category: shuffle teams, then build and seed the bracket, or
    split them into groups for the group stage format.
    """
    draw_order = shuffle_with_club_protection(category.teams, club_protection, rng)

    if category.format == GROUP_STAGE_ELIMINATION:
        groups = generate_groups(draw_order, category.teams_per_group)
        return category.copy(teams=draw_order, groups=groups, matches=[], is_draw_done=True)

    skeleton = build_bracket(len(draw_order), category.has_third_place_match)
    matches = fill_bracket(draw_order, skeleton)
    return category.copy(teams=draw_order, matches=matches, groups=[], is_draw_done=True)


def record_score(category: EventCategory, match_id: str, score_a: int, score_b: int) -> EventCategory:
    """Record a score on a bracket match or on a group match."""
    if any(m.id == match_id for m in category.matches):
        return category.copy(matches=update_match_score(category.matches, match_id, score_a, score_b))

    for index, group in enumerate(category.groups):
        if any(m.id == match_id for m in group.matches):
            groups = list(category.groups)
            groups[index] = group.with_matches(update_match_score(group.matches, match_id, score_a, score_b))
            return category.copy(groups=groups)

    logger.warning("Cannot record score: unknown match %s", match_id)
    return category


def finish_group_stage(category: EventCategory) -> EventCategory:
    """Seed the group qualifiers into a fresh knockout bracket."""
    qualifiers = select_advancing_teams(category.groups, category.advance_per_group)
    if len(qualifiers) < 2:
        logger.warning("Category %s: not enough qualifiers for a knockout bracket", category.name)
        return category

    skeleton = build_bracket(len(qualifiers), category.has_third_place_match)
    return category.copy(matches=fill_bracket(qualifiers, skeleton))


def all_matches(category: EventCategory) -> List[Match]:
    """Group matches followed by bracket matches."""
    matches = []
    for group in category.groups:
        matches.extend(group.matches)
    matches.extend(category.matches)
    return matches


def auto_schedule(category: EventCategory, court_names: str, start_time: str,
                  duration_minutes: int) -> EventCategory:
    """Assign courts and times across group and bracket matches, then renumber."""
    scheduled = renumber_matches(assign_courts_and_time(all_matches(category), court_names,
                                                        start_time, duration_minutes))
    by_id = {m.id: m for m in scheduled}
    groups = [g.with_matches([by_id[m.id] for m in g.matches]) for g in category.groups]
    matches = [by_id[m.id] for m in category.matches]
    return category.copy(groups=groups, matches=matches)
