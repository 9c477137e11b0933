"""
Tests for the leveling curves.

Tests cover:
1. Stat promotion across several levels
2. Demotion limits and the zero floor
3. Character level derived from lifetime XP
"""
import pytest

from questforge.services import leveling


class TestStatCurve:
    """Tests for apply_stat_delta"""

    def test_single_level_up(self):
        result = leveling.apply_stat_delta(1, 80, 30)

        assert result.level == 2
        assert result.xp == 10
        assert result.leveled_up is True

    def test_multi_level_up_in_one_award(self):
        """250 XP from L1/0 crosses L1 (100) and stops inside L2 (needs 200)"""
        result = leveling.apply_stat_delta(1, 0, 250)

        assert result.level == 2
        assert result.xp == 150
        assert result.next_level_xp == 200

    def test_large_award_reaches_level_three(self):
        result = leveling.apply_stat_delta(1, 0, 300)

        assert result.level == 3
        assert result.xp == 0

    def test_penalty_at_level_one_floors_at_zero(self):
        result = leveling.apply_stat_delta(1, 30, -1000)

        assert result.level == 1
        assert result.xp == 0
        assert result.leveled_down is False

    def test_penalty_demotes_at_most_one_level(self):
        """L3/10 with -1000 drops to L2 and floors at 0, never to L1"""
        result = leveling.apply_stat_delta(3, 10, -1000)

        assert result.level == 2
        assert result.xp == 0
        assert result.leveled_down is True

    def test_small_penalty_borrows_from_previous_level(self):
        """L2/10 with -30: previous level costs 100, so 100 - 20 = 80"""
        result = leveling.apply_stat_delta(2, 10, -30)

        assert result.level == 1
        assert result.xp == 80

    def test_penalty_within_level_keeps_level(self):
        result = leveling.apply_stat_delta(2, 50, -20)

        assert result.level == 2
        assert result.xp == 30

    @pytest.mark.parametrize("level,xp,delta", [
        (1, 0, 99), (1, 99, 1), (2, 150, 500), (4, 10, -50), (5, 0, -1), (1, 0, 5000),
    ])
    def test_xp_always_below_next_level_cost(self, level, xp, delta):
        result = leveling.apply_stat_delta(level, xp, delta)

        assert result.level >= 1
        assert 0 <= result.xp < result.level * 100


class TestCharacterCurve:
    """Tests for character_level_from_total"""

    def test_zero_xp_is_level_one(self):
        result = leveling.character_level_from_total(0)

        assert result.level == 1
        assert result.xp_in_level == 0
        assert result.xp_for_next_level == 500

    def test_exact_threshold(self):
        """500 (L1) + 1000 (L2) = 1500 lands exactly on L3"""
        result = leveling.character_level_from_total(1500)

        assert result.level == 3
        assert result.xp_in_level == 0
        assert result.xp_for_next_level == 1500

    def test_just_below_threshold(self):
        result = leveling.character_level_from_total(1499)

        assert result.level == 2
        assert result.xp_in_level == 999

    @pytest.mark.parametrize("level", [1, 2, 3, 7, 12])
    def test_cumulative_matches_level_from_total(self, level):
        total = leveling.cumulative_character_xp(level)

        assert leveling.character_level_from_total(total).level == level
        assert leveling.character_level_from_total(total - 1).level == max(1, level - 1)


class TestStatPower:
    def test_power_without_bonus(self):
        assert leveling.stat_power(100) == 30

    def test_power_adds_flat_bonus(self):
        assert leveling.stat_power(50, bonus=3) == 24  # floor(7.07 * 3) + 3


class TestLargeAmounts:
    """Levels are solved directly, so huge totals stay consistent"""

    def test_huge_stat_award(self):
        result = leveling.apply_stat_delta(1, 0, 10 ** 15)

        assert result.level == 4472136
        assert 0 <= result.xp < result.level * 100
        assert 50 * result.level * (result.level - 1) + result.xp == 10 ** 15

    def test_huge_character_total(self):
        result = leveling.character_level_from_total(10 ** 15)

        assert leveling.cumulative_character_xp(result.level) + result.xp_in_level == 10 ** 15
        assert 0 <= result.xp_in_level < result.xp_for_next_level

    @pytest.mark.parametrize("total", [0, 1, 99, 100, 299, 300, 599, 600, 12345])
    def test_matches_level_by_level_walk(self, total):
        level, remaining = 1, total
        while remaining >= level * 100:
            remaining -= level * 100
            level += 1

        result = leveling.apply_stat_delta(1, 0, total)

        assert (result.level, result.xp) == (level, remaining)
