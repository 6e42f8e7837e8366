import datetime
import logging
from typing import List

from shuttle.models import Match, SF, F, THIRD_PLACE

logger = logging.getLogger(__name__)

# Organizers place these rounds by hand
MANUAL_ROUNDS = (SF, F, THIRD_PLACE)

DEFAULT_COURT_PREFIX = 'Court'


def parse_court_names(court_names: str) -> List[str]:
    """
    Parse the court setting.

    A plain number generates that many labels ('Court 1', 'Court 2', ...);
    anything else is read as a comma-separated list of names.
    """
    text = (court_names or '').strip()
    if text and ',' not in text and text.isdigit():
        count = int(text) or 1
        return [f"{DEFAULT_COURT_PREFIX} {i + 1}" for i in range(count)]
    return [name.strip() for name in text.split(',') if name.strip()]


class CourtAllocator:
    def __init__(self, court_names, start_time, match_duration_minutes):
        if isinstance(court_names, str):
            court_names = parse_court_names(court_names)
        self.courts = list(court_names)
        self.start_time = start_time
        self.match_duration = datetime.timedelta(minutes=match_duration_minutes)
        self.schedule = {court: [] for court in self.courts}  # court: [match_id, ...]

    def _parse_time(self, time_str):
        return datetime.datetime.strptime(time_str, '%H:%M').time()

    def _datetime_from_time(self, time_obj, base_date=None):
        base_date = base_date or datetime.date.today()
        return datetime.datetime.combine(base_date, time_obj)

    def _is_schedulable(self, match: Match) -> bool:
        return match.round_key not in MANUAL_ROUNDS and not match.scheduled_time

    def _sort_key(self, match: Match):
        # Matches with both teams known go first
        return (0 if match.is_ready else 1, match.round_index, match.position)

    def allocate(self, matches: List[Match]) -> List[Match]:
        """
        Give a court and start time to every match still lacking one.

        Matches are dealt round-robin over the courts; each court runs its
        matches back to back from the start time, after any match already
        booked on it. Semifinals, the final, the third place match and
        matches already scheduled are returned unchanged. Each call starts
        from a fresh schedule.
        """
        if not self.courts:
            logger.warning("No courts configured, nothing scheduled")
            return list(matches)

        day_start = self._datetime_from_time(self._parse_time(self.start_time))
        pending = sorted((m for m in matches if self._is_schedulable(m)), key=self._sort_key)

        # Matches already on a court keep their slots; new ones queue behind them
        self.schedule = {court: [] for court in self.courts}
        next_start = {court: day_start for court in self.courts}
        booked = sorted((m for m in matches if m.scheduled_time and m.court in self.schedule),
                        key=lambda m: m.scheduled_time)
        for match in booked:
            self.schedule[match.court].append(match.id)
            booked_end = self._datetime_from_time(self._parse_time(match.scheduled_time)) + self.match_duration
            queued_end = day_start + len(self.schedule[match.court]) * self.match_duration
            next_start[match.court] = max(next_start[match.court], booked_end, queued_end)

        assignments = {}
        for idx, match in enumerate(pending):
            court = self.courts[idx % len(self.courts)]
            start = next_start[court]
            next_start[court] = start + self.match_duration
            self.schedule[court].append(match.id)
            assignments[match.id] = (court, start.strftime('%H:%M'))

        logger.debug("Scheduled %d match(es) on %d court(s)", len(assignments), len(self.courts))
        return [
            m.copy(court=assignments[m.id][0], scheduled_time=assignments[m.id][1])
            if m.id in assignments else m
            for m in matches
        ]

    def get_schedule_output(self, matches: List[Match]):
        """Scheduled matches per court, in time order."""
        by_id = {m.id: m for m in matches}
        output = []
        for court in self.courts:
            court_info = {"court_name": court, "matches": []}
            for match_id in self.schedule[court]:
                match = by_id.get(match_id)
                if match is None:
                    continue
                court_info["matches"].append({
                    "start_time": match.scheduled_time,
                    "match_id": match.id,
                    "round": match.round_key,
                    "teams": (match.team_a, match.team_b),
                })
            output.append(court_info)
        return output


def assign_courts_and_time(matches: List[Match], court_names: str, start_time: str,
                           duration_minutes: int) -> List[Match]:
    """Schedule ``matches`` with a fresh CourtAllocator."""
    return CourtAllocator(court_names, start_time, duration_minutes).allocate(matches)
