# Draw a category from a roster file and print the bracket or the groups

import logging
import os
import sys

from shuttle.category import create_category, add_players, perform_draw, auto_schedule
from shuttle.draw import count_club_collisions
from shuttle.elimination import get_matches_by_round, get_round_name
from shuttle.models import GROUP_STAGE_ELIMINATION
from shuttle.settings import load_settings
from shuttle.teams import parse_roster


def load_roster(file_path):
    with open(file_path, mode='r', encoding='utf-8') as file:
        return parse_roster(file.read())


def format_team(team, fallback='TBD'):
    if team is None:
        return fallback
    return f"{team.code} {team.name} ({team.club})"


def print_bracket(matches):
    for round_key, round_matches in get_matches_by_round(matches).items():
        print(f"# {get_round_name(round_key)}")
        for match in round_matches:
            when = f" [{match.court} {match.scheduled_time}]" if match.scheduled_time else ""
            print(f"  M{match.match_number}: {format_team(match.team_a)} vs {format_team(match.team_b)}{when}")


def print_groups(groups):
    first_group = True
    for group in groups:
        if not first_group:
            print()
        print(f"# {group.name}")
        for team in group.teams:
            print(f"  {format_team(team)}")
        for match in group.matches:
            when = f" [{match.court} {match.scheduled_time}]" if match.scheduled_time else ""
            print(f"  {match.team_a.code} vs {match.team_b.code}{when}")
        first_group = False


def main():
    script_dir = os.path.dirname(__file__)
    base_dir = os.path.dirname(script_dir)

    roster_file = sys.argv[1] if len(sys.argv) > 1 else os.path.join(base_dir, 'data', 'roster.txt')
    settings_file = sys.argv[2] if len(sys.argv) > 2 else os.path.join(base_dir, 'data', 'settings.yaml')

    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')
    settings = load_settings(settings_file)

    players = load_roster(roster_file)
    if not players:
        print(f"No players loaded. Check {roster_file}", file=sys.stderr)
        return

    category = create_category(settings['tournament_name'], settings['event_type'],
                               settings['format'], settings)
    category = add_players(category, players)
    if len(category.teams) < 2:
        print("At least 2 teams are needed for a draw.", file=sys.stderr)
        return

    category = perform_draw(category, settings['club_protection'])
    category = auto_schedule(category, str(settings['court_names']), settings['start_time'],
                             settings['match_duration_minutes'])

    print(f"{settings['tournament_name']}: {len(category.teams)} teams")
    print(f"Same-club pairs in draw: {count_club_collisions(category.teams)}\n")
    if category.format == GROUP_STAGE_ELIMINATION:
        print_groups(category.groups)
    else:
        print_bracket(category.matches)


if __name__ == '__main__':
    main()
