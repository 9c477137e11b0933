"""
Leveling curves.
Pure functions: no database access, no side effects.

Per-stat curve:   level N -> N+1 costs N * 100 XP.
Character curve:  level N -> N+1 costs N * 500 XP,
                  cumulative XP to reach level N is 500 * N * (N-1) / 2.

Both curves are arithmetic, so levels are solved in closed form rather
than by stepping one level at a time.
"""
import math

from questforge.constants import (
    STAT_XP_PER_LEVEL,
    CHARACTER_XP_PER_LEVEL,
    STAT_POWER_FACTOR,
)
from questforge.schemas import StatProgress, CharacterProgress


def _cumulative_xp(level: int, per_level: int) -> int:
    """XP needed to go from level 1 to `level` when level N costs N * per_level"""
    return per_level * level * (level - 1) // 2


def _level_for_cumulative(total_xp: int, per_level: int) -> int:
    """Highest level L with per_level * L * (L-1) / 2 <= total_xp"""
    # L * (L-1) <= k  <=>  L <= (1 + sqrt(1 + 4k)) / 2
    k = (2 * max(0, total_xp)) // per_level
    return (1 + math.isqrt(1 + 4 * k)) // 2


def stat_xp_to_next(level: int) -> int:
    """XP needed to advance a stat from `level` to `level + 1`"""
    return level * STAT_XP_PER_LEVEL


def apply_stat_delta(level: int, xp: int, delta: int) -> StatProgress:
    """
    Apply a signed XP delta to a stat's (level, xp).

    A negative result demotes at most one level per award and then floors
    at 0; level 1 never demotes. A positive result may advance several
    levels at once.

    Args:
        level: Current stat level (>= 1)
        xp: Current progress within the level (>= 0)
        delta: Signed XP amount

    Returns:
        StatProgress with the new level and xp
    """
    start_level = level
    xp = xp + delta

    if xp < 0:
        if level > 1:
            level -= 1
            xp = max(0, stat_xp_to_next(level) + xp)
        else:
            xp = 0

    total = _cumulative_xp(level, STAT_XP_PER_LEVEL) + xp
    level = _level_for_cumulative(total, STAT_XP_PER_LEVEL)
    xp = total - _cumulative_xp(level, STAT_XP_PER_LEVEL)

    return StatProgress(
        level=level,
        xp=xp,
        next_level_xp=stat_xp_to_next(level),
        leveled_up=level > start_level,
        leveled_down=level < start_level,
    )


def character_xp_to_next(level: int) -> int:
    """XP needed to advance the character from `level` to `level + 1`"""
    return level * CHARACTER_XP_PER_LEVEL


def cumulative_character_xp(level: int) -> int:
    """Lifetime XP required to reach `level`"""
    return _cumulative_xp(level, CHARACTER_XP_PER_LEVEL)


def character_level_from_total(total_xp: int) -> CharacterProgress:
    """
    Derive the overall character level from lifetime XP.

    Args:
        total_xp: Sum of all stats' lifetime-earned XP

    Returns:
        CharacterProgress (level, xp within level, xp needed for next)
    """
    total_xp = max(0, total_xp)
    level = _level_for_cumulative(total_xp, CHARACTER_XP_PER_LEVEL)

    return CharacterProgress(
        level=level,
        xp_in_level=total_xp - cumulative_character_xp(level),
        xp_for_next_level=character_xp_to_next(level),
    )


def stat_power(total_xp: int, bonus: int = 0) -> int:
    """Display power of a stat: floor(sqrt(total_xp) * 3) plus flat bonuses"""
    return math.floor(math.sqrt(max(0, total_xp)) * STAT_POWER_FACTOR) + bonus
