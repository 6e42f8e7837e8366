"""
Match outcomes and forward propagation of results through a bracket.
"""
import enum
import logging
from typing import List, Dict, Optional

from shuttle.models import Match, Team, F, THIRD_PLACE, SLOT_A

logger = logging.getLogger(__name__)


class Outcome(enum.Enum):
    UNDECIDED = 'UNDECIDED'
    A_WINS = 'A_WINS'
    B_WINS = 'B_WINS'


def get_outcome(match: Match) -> Outcome:
    """
    Decide a match from its scores.

    A match is decided only when both scores are recorded, they differ and
    at least one is positive. Missing scores, 0-0 and ties are undecided.
    """
    score_a, score_b = match.score_a, match.score_b
    if score_a is None or score_b is None:
        return Outcome.UNDECIDED
    if score_a <= 0 and score_b <= 0:
        return Outcome.UNDECIDED
    if score_a > score_b:
        return Outcome.A_WINS
    if score_b > score_a:
        return Outcome.B_WINS
    return Outcome.UNDECIDED


def is_decided(match: Match) -> bool:
    return get_outcome(match) is not Outcome.UNDECIDED


def get_winner(match: Match) -> Optional[Team]:
    outcome = get_outcome(match)
    if outcome is Outcome.A_WINS:
        return match.team_a
    if outcome is Outcome.B_WINS:
        return match.team_b
    return None


def get_loser(match: Match) -> Optional[Team]:
    outcome = get_outcome(match)
    if outcome is Outcome.A_WINS:
        return match.team_b
    if outcome is Outcome.B_WINS:
        return match.team_a
    return None


def _place_team(matches: Dict[str, Match], link, team: Optional[Team]):
    target = matches.get(link.match_id)
    if target is None:
        logger.warning("Match link points to unknown match %s", link.match_id)
        return
    if link.target_slot == SLOT_A:
        matches[link.match_id] = target.copy(team_a=team)
    else:
        matches[link.match_id] = target.copy(team_b=team)


def recalculate_bracket(matches: List[Match]) -> List[Match]:
    """
    Push every match's winner (and loser, for semifinals) into the slots it feeds.

    Matches are visited by increasing round index, so a single pass carries
    a result change all the way to the final. Undecided matches clear the
    slots they feed. Returns new match records in input order; the input
    list is left untouched.
    """
    if not matches:
        return []

    updated = {m.id: m.copy() for m in matches}
    order = sorted(matches, key=lambda m: m.round_index)

    for original in order:
        match = updated[original.id]
        if match.next_match is not None:
            _place_team(updated, match.next_match, get_winner(match))
        if match.next_loser is not None:
            _place_team(updated, match.next_loser, get_loser(match))

    return [updated[m.id] for m in matches]


def update_match_score(matches: List[Match], match_id: str, score_a: int, score_b: int) -> List[Match]:
    """Record a score for one match and propagate the result."""
    if (score_a is not None and score_a < 0) or (score_b is not None and score_b < 0):
        raise ValueError(f"Scores must not be negative: {score_a}-{score_b}")
    if not any(m.id == match_id for m in matches):
        logger.warning("Cannot record score: unknown match %s", match_id)
        return list(matches)

    scored = [m.copy(score_a=score_a, score_b=score_b) if m.id == match_id else m for m in matches]
    return recalculate_bracket(scored)


def clear_match_score(matches: List[Match], match_id: str) -> List[Match]:
    return update_match_score(matches, match_id, None, None)


def _find_round(matches: List[Match], round_key: str) -> Optional[Match]:
    for match in matches:
        if match.round_key == round_key:
            return match
    return None


def get_champion(matches: List[Match]) -> Optional[Team]:
    """Get the winner of the final, or None while it is undecided."""
    final = _find_round(matches, F)
    return get_winner(final) if final else None


def get_podium(matches: List[Match]) -> Dict[str, Optional[Team]]:
    """Get champion, runner-up and third place (None where not decided yet)."""
    final = _find_round(matches, F)
    third_place = _find_round(matches, THIRD_PLACE)
    return {
        'champion': get_winner(final) if final else None,
        'runner_up': get_loser(final) if final else None,
        'third_place': get_winner(third_place) if third_place else None,
    }
