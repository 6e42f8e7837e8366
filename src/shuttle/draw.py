"""
Draw order generation.

The draw order is the sequence in which teams are seeded into a bracket:
positions 2k and 2k+1 normally end up facing each other, so the
club-protected shuffle tries to keep teams of the same club out of those
pairs.
"""
import logging
import random
from typing import List, Optional

from shuttle.models import Team

logger = logging.getLogger(__name__)


def shuffle_teams(teams: List[Team], rng: Optional[random.Random] = None) -> List[Team]:
    """Return a uniformly random permutation of ``teams`` (Fisher-Yates)."""
    rng = rng or random
    shuffled = list(teams)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def _group_by_club(teams: List[Team]) -> List[List[Team]]:
    clubs = {}
    for team in teams:
        clubs.setdefault(team.club, []).append(team)
    # Largest clubs first; sorted() is stable so equal sizes keep their shuffled order
    return sorted(clubs.values(), key=len, reverse=True)


def _is_safe(slots: List[Optional[Team]], index: int, club: str) -> bool:
    partner = index ^ 1
    if partner >= len(slots) or slots[partner] is None:
        return True
    return slots[partner].club != club


def _take_slot(slots, preferred: List[int], other: List[int], club: str) -> int:
    for pool in (preferred, other):
        for index in pool:
            if _is_safe(slots, index, club):
                pool.remove(index)
                return index
    pool = preferred if preferred else other
    index = pool.pop(0)
    logger.debug("No club-safe slot left for club %s, placing at %d", club, index)
    return index


def shuffle_with_club_protection(teams: List[Team], protect: bool,
                                 rng: Optional[random.Random] = None) -> List[Team]:
    """
    Produce a draw order that avoids same-club pairs where possible.

    Without protection, or with fewer than 4 teams, this is a plain shuffle.
    Otherwise clubs are placed largest first, their members alternating
    between the top and bottom half of the draw order, each half visited in
    random order. A slot whose pair partner already holds a team of the same
    club is skipped; when no safe slot is left the team is placed anyway.
    """
    if not protect or len(teams) < 4:
        return shuffle_teams(teams, rng)

    rng = rng or random
    size = len(teams)
    slots = [None] * size
    top = list(range(size // 2))
    bottom = list(range(size // 2, size))
    rng.shuffle(top)
    rng.shuffle(bottom)

    for club_index, club_teams in enumerate(_group_by_club(shuffle_teams(teams, rng))):
        for member_index, team in enumerate(club_teams):
            prefer_top = (club_index + member_index) % 2 == 0
            preferred, other = (top, bottom) if prefer_top else (bottom, top)
            slots[_take_slot(slots, preferred, other, team.club)] = team

    collisions = count_club_collisions(slots)
    if collisions:
        logger.debug("Club-protected draw kept %d same-club pair(s)", collisions)
    return slots


def count_club_collisions(order: List[Team]) -> int:
    """Count draw-order pairs (2k, 2k+1) whose teams share a club."""
    collisions = 0
    for i in range(0, len(order) - 1, 2):
        if order[i].club == order[i + 1].club:
            collisions += 1
    return collisions
