"""
Character progression: experience curve, leveling and stat points.

Every function returns a new Character; inputs are never mutated.
Refused stat changes return the character unchanged rather than raising.
"""

from __future__ import annotations

import math

from ..state.schema import PILLARS, Character, Pillar, StatPool

BASE_STATS_PER_PILLAR = 1
STARTING_BONUS_POINTS = 2
POINTS_PER_LEVEL = 1
XP_PER_LEVEL_SQUARED = 50
DEFAULT_REST_TIME = 5
MIN_STAT_VALUE = 1


# -----------------------------------------------------------------------------
# Experience curve
# -----------------------------------------------------------------------------

def xp_for_level(level: int) -> int:
    """Total XP at which a level is reached: level² × 50."""
    return level * level * XP_PER_LEVEL_SQUARED


def xp_for_next_level(level: int) -> int:
    return xp_for_level(level + 1)


def xp_to_next_level(level: int, current_xp: int) -> int:
    """XP still missing before the next level."""
    return xp_for_next_level(level) - current_xp


def level_from_xp(xp: int) -> int:
    """Inverse of the curve, never below level 1."""
    if xp <= 0:
        return 1
    level = math.isqrt(xp // XP_PER_LEVEL_SQUARED)
    return max(level, 1)


def level_progress(character: Character) -> float:
    """Fraction of the way from this level's threshold to the next."""
    floor = xp_for_level(character.level)
    span = xp_for_next_level(character.level) - floor
    fraction = (character.experience - floor) / span
    return min(max(fraction, 0.0), 1.0)


def apply_experience(character: Character, xp_gained: int) -> Character:
    """
    Award experience, levelling up as many times as the new total allows.

    Each level gained grants POINTS_PER_LEVEL available points.
    """
    new_xp = character.experience + xp_gained
    new_level = level_from_xp(new_xp)
    levels_gained = new_level - character.level

    if levels_gained > 0:
        return character.model_copy(update={
            "experience": new_xp,
            "level": new_level,
            "available_points": character.available_points + levels_gained * POINTS_PER_LEVEL,
        })

    return character.model_copy(update={"experience": new_xp})


def grant_level(character: Character) -> Character:
    """
    Administrative level-up.

    Experience is raised to the new level's threshold so that it never
    falls below what the level requires.
    """
    new_level = character.level + 1
    return character.model_copy(update={
        "level": new_level,
        "experience": max(character.experience, xp_for_level(new_level)),
        "available_points": character.available_points + POINTS_PER_LEVEL,
    })


# -----------------------------------------------------------------------------
# Stat points
# -----------------------------------------------------------------------------

def create_base_stats() -> StatPool:
    return StatPool.base(BASE_STATS_PER_PILLAR)


def calculate_available_points(level: int, allocated_points: int) -> int:
    total_points = STARTING_BONUS_POINTS + (level - 1) * POINTS_PER_LEVEL
    return total_points - allocated_points


def total_allocated_points(stats: StatPool) -> int:
    return stats.total() - BASE_STATS_PER_PILLAR * len(PILLARS)


def can_allocate(character: Character) -> bool:
    return character.available_points > 0


def can_deallocate(character: Character, pillar: Pillar | str) -> bool:
    return character.stats[pillar] > MIN_STAT_VALUE


def allocate_point(character: Character, pillar: Pillar | str) -> Character:
    """Spend one point on a pillar. No-op without available points."""
    if not can_allocate(character):
        return character

    stats = character.stats.with_value(pillar, character.stats[pillar] + 1)
    return character.model_copy(update={
        "stats": stats,
        "available_points": character.available_points - 1,
    })


def deallocate_point(character: Character, pillar: Pillar | str) -> Character:
    """Refund one point from a pillar. No-op at the floor of 1."""
    if not can_deallocate(character, pillar):
        return character

    stats = character.stats.with_value(pillar, character.stats[pillar] - 1)
    return character.model_copy(update={
        "stats": stats,
        "available_points": character.available_points + 1,
    })


def create_character(name: str, level: int = 1) -> Character:
    return Character(
        name=name,
        level=level,
        experience=xp_for_level(level),  # Start with XP for current level
        stats=create_base_stats(),
        available_points=STARTING_BONUS_POINTS + (level - 1) * POINTS_PER_LEVEL,
        can_fly=False,
        is_flight_licensed=False,
        rest_time=DEFAULT_REST_TIME,
    )
