"""
Unit tests for draw order generation and club protection.
"""
import pytest
import random
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from shuttle.draw import shuffle_teams, shuffle_with_club_protection, count_club_collisions


def _ids(teams):
    return sorted(t.id for t in teams)


class TestShuffleTeams:
    """Tests for the plain shuffle."""

    def test_is_permutation(self, eight_teams, rng):
        assert _ids(shuffle_teams(eight_teams, rng)) == _ids(eight_teams)

    def test_does_not_modify_input(self, eight_teams, rng):
        before = [t.id for t in eight_teams]
        shuffle_teams(eight_teams, rng)
        assert [t.id for t in eight_teams] == before

    def test_reproducible_with_seed(self, eight_teams):
        first = shuffle_teams(eight_teams, random.Random(7))
        second = shuffle_teams(eight_teams, random.Random(7))
        assert [t.id for t in first] == [t.id for t in second]

    def test_empty_and_single(self, team_factory):
        assert shuffle_teams([]) == []
        single = team_factory(1)
        assert shuffle_teams(single) == single


class TestClubProtection:
    """Tests for the club-protected draw."""

    def test_without_protection_is_plain_shuffle(self, eight_teams):
        protected = shuffle_with_club_protection(eight_teams, False, random.Random(3))
        plain = shuffle_teams(eight_teams, random.Random(3))
        assert [t.id for t in protected] == [t.id for t in plain]

    def test_small_draw_is_plain_shuffle(self, team_factory):
        teams = team_factory(3)
        result = shuffle_with_club_protection(teams, True, random.Random(1))
        assert _ids(result) == _ids(teams)

    @pytest.mark.parametrize("seed", range(25))
    def test_is_permutation(self, seed, team_factory):
        teams = team_factory(13, clubs=['A', 'A', 'A', 'B', 'C'])
        result = shuffle_with_club_protection(teams, True, random.Random(seed))
        assert _ids(result) == _ids(teams)

    @pytest.mark.parametrize("seed", range(25))
    def test_pairs_of_clubs_never_collide(self, seed, eight_teams):
        """Test four clubs of two teams each always end up in different pairs."""
        result = shuffle_with_club_protection(eight_teams, True, random.Random(seed))
        assert count_club_collisions(result) == 0

    @pytest.mark.parametrize("seed", range(25))
    def test_half_field_club_is_spread(self, seed, team_factory):
        """Test a club holding half of the field gets one team per pair."""
        teams = team_factory(8, clubs=['Big', 'Big', 'Big', 'Big', 'X', 'Y', 'Z', 'W'])
        result = shuffle_with_club_protection(teams, True, random.Random(seed))
        assert count_club_collisions(result) == 0

    def test_dominant_club_degrades_silently(self, team_factory):
        """Test a club larger than half the draw still produces a full draw."""
        teams = team_factory(8, clubs=['Big'] * 6 + ['X', 'Y'])
        result = shuffle_with_club_protection(teams, True, random.Random(5))
        assert _ids(result) == _ids(teams)
        assert count_club_collisions(result) >= 2

    def test_single_club(self, team_factory):
        teams = team_factory(6, clubs=['Only'])
        result = shuffle_with_club_protection(teams, True, random.Random(9))
        assert _ids(result) == _ids(teams)
        assert count_club_collisions(result) == 3

    def test_reproducible_with_seed(self, team_factory):
        teams = team_factory(10, clubs=['A', 'B', 'C'])
        first = shuffle_with_club_protection(teams, True, random.Random(11))
        second = shuffle_with_club_protection(teams, True, random.Random(11))
        assert [t.id for t in first] == [t.id for t in second]


class TestCountClubCollisions:
    """Tests for the collision diagnostic."""

    def test_counts_pairs(self, team_factory):
        teams = team_factory(4, clubs=['A', 'A', 'B', 'C'])
        assert count_club_collisions(teams) == 1

    def test_ignores_unpaired_last_team(self, team_factory):
        teams = team_factory(3, clubs=['A', 'B', 'B'])
        assert count_club_collisions(teams) == 0
