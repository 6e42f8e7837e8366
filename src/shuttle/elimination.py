"""
Single elimination bracket construction and seeding.

A bracket for ``n`` teams has a main draw whose size is the largest power of
two not above ``n``. The ``n - main`` surplus teams play a play-in round
whose winners join the first main-draw round; every first-round slot not
fed by a play-in is a bye slot that the filler seeds directly.
"""
import logging
from typing import List, Dict, Optional

from shuttle.models import (
    Match, MatchLink, MatchSource, Team,
    PLAYIN, R128, R64, R32, R16, QF, SF, F, THIRD_PLACE, ROUND_NAMES,
    SLOT_A, SLOT_B,
)
from shuttle.results import recalculate_bracket, get_champion

logger = logging.getLogger(__name__)

THIRD_PLACE_MATCH_ID = 'm-3rd'

_ROUND_KEYS_BY_DISTANCE = {1: F, 2: SF, 3: QF, 4: R16, 5: R32, 6: R64}


def get_round_key(main_size: int, round_number: int) -> str:
    """
    Get the round key for main-draw round ``round_number`` (1 = first round).

    The key depends on the distance from the final: the last round is the
    Final, the one before it the Semifinal and so on.
    """
    main_rounds = main_size.bit_length() - 1
    rounds_from_final = main_rounds - round_number + 1
    return _ROUND_KEYS_BY_DISTANCE.get(rounds_from_final, R128)


def get_round_name(round_key: str) -> str:
    """Get the display name of a round key."""
    return ROUND_NAMES.get(round_key, round_key)


def calculate_main_draw_size(num_teams: int) -> int:
    """Calculate the main draw size (largest power of 2 not above num_teams)."""
    if num_teams < 1:
        return 0
    return 1 << (num_teams.bit_length() - 1)


def calculate_play_in_count(num_teams: int) -> int:
    """Calculate how many play-in matches are needed."""
    return num_teams - calculate_main_draw_size(num_teams)


def _play_in_target_index(play_in_index: int, first_round_size: int) -> int:
    # Even play-ins fill from the top of the draw, odd ones from the bottom
    if play_in_index % 2 == 0:
        return play_in_index // 2
    return first_round_size - 1 - play_in_index // 2


def build_bracket(team_count: int, include_third_place: bool = True) -> List[Match]:
    """
    Build the empty bracket skeleton for ``team_count`` teams.

    Returns every match (play-ins, main draw and the optional third place
    match) with advancement links wired and match numbers assigned. Returns
    an empty list for fewer than 2 teams.
    """
    if team_count < 2:
        return []

    main_size = calculate_main_draw_size(team_count)
    play_in_count = team_count - main_size
    main_rounds = main_size.bit_length() - 1

    all_matches = []
    rounds = []
    for round_number in range(1, main_rounds + 1):
        round_key = get_round_key(main_size, round_number)
        round_matches = [
            Match(f"m-{round_number}-{position}", round_key, round_number, position)
            for position in range(main_size >> round_number)
        ]
        rounds.append(round_matches)
        all_matches.extend(round_matches)

    third_place = None
    if main_size >= 4 and include_third_place:
        third_place = Match(THIRD_PLACE_MATCH_ID, THIRD_PLACE, main_rounds, 1)
        all_matches.append(third_place)

    for round_idx in range(len(rounds) - 1):
        next_round = rounds[round_idx + 1]
        for position, match in enumerate(rounds[round_idx]):
            target = next_round[position // 2]
            slot = SLOT_A if position % 2 == 0 else SLOT_B
            match.next_match = MatchLink(target.id, slot)
            if slot == SLOT_A:
                target.slot_a = MatchSource.winner_of(match.id)
            else:
                target.slot_b = MatchSource.winner_of(match.id)
            if match.round_key == SF and third_place is not None:
                match.next_loser = MatchLink(third_place.id, slot)

    first_round = rounds[0]
    for i in range(play_in_count):
        target = first_round[_play_in_target_index(i, len(first_round))]
        play_in = Match(f"p-{i}", PLAYIN, 0, i)
        if target.slot_a is None:
            play_in.next_match = MatchLink(target.id, SLOT_A)
            target.slot_a = MatchSource.winner_of(play_in.id)
        else:
            play_in.next_match = MatchLink(target.id, SLOT_B)
            target.slot_b = MatchSource.winner_of(play_in.id)
        all_matches.append(play_in)

    for match in first_round:
        if match.slot_a is None:
            match.slot_a = MatchSource.bye()
        if match.slot_b is None:
            match.slot_b = MatchSource.bye()

    logger.debug("Built bracket for %d teams: main draw %d, %d play-ins",
                 team_count, main_size, play_in_count)
    return renumber_matches(all_matches)


def fill_bracket(teams: List[Team], matches: List[Match]) -> List[Match]:
    """
    Seed ``teams`` in draw order into a built bracket.

    Play-in matches are filled first, two teams each, by ascending position.
    Remaining teams go into first-round bye slots by ascending position,
    slot A before slot B. Slots left over when teams run out stay byes.
    The input list is not modified.
    """
    if not teams:
        return list(matches)

    remaining = list(teams)
    updated = {m.id: m for m in matches}

    play_ins = sorted((m for m in matches if m.round_key == PLAYIN), key=lambda m: m.position)
    for match in play_ins:
        if len(remaining) < 2:
            break
        team_a = remaining.pop(0)
        team_b = remaining.pop(0)
        updated[match.id] = match.copy(
            slot_a=MatchSource.pair(team_a.id), team_a=team_a,
            slot_b=MatchSource.pair(team_b.id), team_b=team_b,
        )

    first_round = sorted((m for m in matches if m.round_index == 1 and m.round_key != THIRD_PLACE),
                         key=lambda m: m.position)
    for match in first_round:
        changes = {}
        if match.slot_a is not None and match.slot_a.is_bye and remaining:
            team = remaining.pop(0)
            changes.update(slot_a=MatchSource.pair(team.id), team_a=team)
        if match.slot_b is not None and match.slot_b.is_bye and remaining:
            team = remaining.pop(0)
            changes.update(slot_b=MatchSource.pair(team.id), team_b=team)
        if changes:
            updated[match.id] = match.copy(**changes)

    if remaining:
        logger.warning("Bracket has no free slot for %d team(s)", len(remaining))

    return recalculate_bracket([updated[m.id] for m in matches])


def renumber_matches(matches: List[Match]) -> List[Match]:
    """
    Assign display match numbers.

    Order: scheduled matches first (by time, then court), then matches whose
    two teams are known, then by round and position. The returned list keeps
    the input order.
    """
    def sort_key(match):
        if match.scheduled_time:
            return (0, match.scheduled_time, match.court or '')
        return (1, 0 if match.is_ready else 1, match.round_index, match.position)

    ordered = sorted(matches, key=sort_key)
    numbers = {match.id: number for number, match in enumerate(ordered, start=1)}
    return [m.copy(match_number=numbers[m.id]) for m in matches]


def get_matches_by_round(matches: List[Match]) -> Dict[str, List[Match]]:
    """Group matches by round key, in bracket order (play-in first, third place last)."""
    rounds = {}
    for match in sorted(matches, key=lambda m: (m.round_index, m.round_key == THIRD_PLACE, m.position)):
        rounds.setdefault(match.round_key, []).append(match)
    return rounds


def bracket_summary(matches: List[Match]) -> Dict:
    """
    Get bracket statistics for display.

    Returns dict with:
    - 'total_matches': number of matches
    - 'matches_per_round': round key -> match count
    - 'play_ins': number of play-in matches
    - 'open_byes': first-round slots still marked as bye
    - 'champion': winning team of the final, or None
    """
    matches_per_round = {key: len(ms) for key, ms in get_matches_by_round(matches).items()}
    open_byes = 0
    for match in matches:
        if match.round_index != 1 or match.round_key == THIRD_PLACE:
            continue
        open_byes += sum(1 for slot in (match.slot_a, match.slot_b) if slot is not None and slot.is_bye)

    return {
        'total_matches': len(matches),
        'matches_per_round': matches_per_round,
        'play_ins': matches_per_round.get(PLAYIN, 0),
        'open_byes': open_byes,
        'champion': get_champion(matches),
    }


def find_match(matches: List[Match], match_id: str) -> Optional[Match]:
    for match in matches:
        if match.id == match_id:
            return match
    return None
