"""
Unit tests for group generation, standings and advancement.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from shuttle.groups import (
    get_group_name,
    generate_groups,
    calculate_group_rankings,
    is_group_complete,
    select_advancing_teams,
    get_standings_table,
)
from shuttle.models import GROUP
from shuttle.results import update_match_score


def _score(group, results):
    """Apply {position: (score_a, score_b)} to a group's matches."""
    matches = group.matches
    for position, (score_a, score_b) in results.items():
        matches = update_match_score(matches, matches[position].id, score_a, score_b)
    return group.with_matches(matches)


@pytest.fixture
def group_of_four(team_factory):
    return generate_groups(team_factory(4), 4)[0]


class TestGenerateGroups:
    """Tests for round-robin group generation."""

    def test_group_names(self):
        assert get_group_name(0) == "Group A"
        assert get_group_name(25) == "Group Z"
        assert get_group_name(26) == "Group AA"

    def test_four_teams_six_matches(self, group_of_four):
        """Test a group of 4 plays every pairing once."""
        assert len(group_of_four.matches) == 6
        pairs = {frozenset((m.team_a.id, m.team_b.id)) for m in group_of_four.matches}
        assert len(pairs) == 6

    def test_chunks_in_input_order(self, team_factory):
        """Test teams are sliced into consecutive groups, the last one smaller."""
        groups = generate_groups(team_factory(10), 4)
        assert [g.name for g in groups] == ["Group A", "Group B", "Group C"]
        assert [[t.id for t in g.teams] for g in groups] == [
            ['t1', 't2', 't3', 't4'], ['t5', 't6', 't7', 't8'], ['t9', 't10'],
        ]
        assert [len(g.matches) for g in groups] == [6, 6, 1]

    def test_group_matches_are_prefilled(self, group_of_four):
        for match in group_of_four.matches:
            assert match.round_key == GROUP
            assert match.group_id == group_of_four.id
            assert match.is_ready
            assert match.next_match is None

    def test_degenerate_sizes(self, team_factory):
        assert generate_groups([], 4) == []
        assert generate_groups(team_factory(6), 1) == []


class TestGroupRankings:
    """Tests for standings calculation."""

    def test_no_results(self, group_of_four):
        """Test an unplayed group keeps its team order."""
        rankings = calculate_group_rankings(group_of_four)
        assert [s.team_id for s in rankings] == ['t1', 't2', 't3', 't4']
        assert all(s.played == 0 for s in rankings)

    def test_three_results(self, group_of_four):
        # Pairings in order: t1-t2, t1-t3, t1-t4, t2-t3, t2-t4, t3-t4
        group = _score(group_of_four, {0: (21, 10), 3: (21, 19), 5: (15, 21)})
        rankings = calculate_group_rankings(group)
        stats = {s.team_id: s for s in rankings}

        assert [s.team_id for s in rankings] == ['t1', 't4', 't2', 't3']
        assert (stats['t1'].played, stats['t1'].won, stats['t1'].points, stats['t1'].diff) == (1, 1, 2, 11)
        assert (stats['t2'].played, stats['t2'].won, stats['t2'].lost, stats['t2'].diff) == (2, 1, 1, -9)
        assert (stats['t3'].played, stats['t3'].lost, stats['t3'].points, stats['t3'].diff) == (2, 2, 0, -8)
        assert stats['t4'].diff == 6

    def test_undecided_matches_ignored(self, group_of_four):
        """Test 0-0 and tied scores are treated as unplayed."""
        group = _score(group_of_four, {0: (0, 0), 1: (21, 21)})
        assert all(s.played == 0 for s in calculate_group_rankings(group))

    def test_ranking_is_deterministic(self, group_of_four):
        group = _score(group_of_four, {0: (21, 19), 5: (21, 19)})
        first = calculate_group_rankings(group)
        second = calculate_group_rankings(group)
        assert first == second
        assert [s.team_id for s in first] == ['t1', 't3', 't2', 't4']

    def test_rankings_property(self, group_of_four):
        group = _score(group_of_four, {2: (5, 21)})
        assert group.rankings[0].team_id == 't4'

    def test_is_group_complete(self, group_of_four):
        assert not is_group_complete(group_of_four)
        group = _score(group_of_four, {i: (21, 10) for i in range(6)})
        assert is_group_complete(group)


class TestAdvancement:
    """Tests for selecting knockout qualifiers."""

    def test_group_order_then_rank(self, team_factory):
        groups = generate_groups(team_factory(8), 4)
        groups[1] = _score(groups[1], {0: (10, 21)})  # t6 beats t5
        advancing = select_advancing_teams(groups, 2)
        assert [t.id for t in advancing] == ['t1', 't2', 't6', 't7']

    def test_too_few_qualifiers(self, team_factory):
        groups = generate_groups(team_factory(4), 4)
        assert select_advancing_teams(groups, 1) == []
        assert select_advancing_teams(groups, 0) == []

    def test_advance_more_than_group_size(self, team_factory):
        groups = generate_groups(team_factory(5), 4)
        assert len(select_advancing_teams(groups, 3)) == 4

    def test_standings_table(self, team_factory):
        groups = generate_groups(team_factory(6), 3)
        table = get_standings_table(groups)
        assert list(table) == ["Group A", "Group B"]
        assert table["Group B"][0]['rank'] == 1
        assert table["Group B"][0]['team'].id == 't4'
