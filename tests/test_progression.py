"""
Tests for the experience curve, levelling and stat-point allocation.
"""

import pytest

from dispatch_sim.state.schema import Character, Pillar, StatPool
from dispatch_sim.systems.progression import (
    STARTING_BONUS_POINTS,
    allocate_point,
    apply_experience,
    calculate_available_points,
    can_deallocate,
    create_base_stats,
    create_character,
    deallocate_point,
    grant_level,
    level_from_xp,
    level_progress,
    total_allocated_points,
    xp_for_level,
    xp_for_next_level,
    xp_to_next_level,
)


# -----------------------------------------------------------------------------
# Experience Curve Tests
# -----------------------------------------------------------------------------

class TestExperienceCurve:
    """Tests for level² × 50."""

    @pytest.mark.parametrize("level,xp", [(1, 50), (2, 200), (3, 450), (10, 5000)])
    def test_thresholds(self, level, xp):
        assert xp_for_level(level) == xp

    def test_next_level(self):
        assert xp_for_next_level(1) == 200
        assert xp_to_next_level(1, 120) == 80

    def test_inverse(self):
        """level_from_xp undoes xp_for_level."""
        for level in range(1, 30):
            assert level_from_xp(xp_for_level(level)) == level

    def test_just_below_threshold(self):
        assert level_from_xp(199) == 1
        assert level_from_xp(449) == 2

    def test_floor_of_one(self):
        """Experience below the first threshold is still level 1."""
        assert level_from_xp(0) == 1
        assert level_from_xp(49) == 1
        assert level_from_xp(-10) == 1

    def test_level_progress(self):
        character = Character(name="Mid", level=1, experience=125)
        assert level_progress(character) == pytest.approx(0.5)


# -----------------------------------------------------------------------------
# Levelling Tests
# -----------------------------------------------------------------------------

class TestApplyExperience:
    """Tests for awarding experience."""

    def test_gain_without_level(self):
        before = Character(name="A", level=1, experience=50)
        after = apply_experience(before, 100)
        assert after.experience == 150
        assert after.level == 1
        assert after.available_points == 0

    def test_single_level(self):
        before = Character(name="A", level=1, experience=150)
        after = apply_experience(before, 50)
        assert after.level == 2
        assert after.available_points == 1

    def test_multi_level_jump(self):
        """Enough XP for several levels grants a point per level."""
        before = Character(name="A", level=1, experience=50, available_points=1)
        after = apply_experience(before, 450)
        assert after.experience == 500
        assert after.level == 3
        assert after.available_points == 3

    def test_input_not_mutated(self):
        before = Character(name="A", level=1, experience=50)
        apply_experience(before, 1000)
        assert before.level == 1
        assert before.experience == 50

    def test_grant_level_raises_experience(self):
        """Administrative level-up keeps XP at or above the new threshold."""
        before = Character(name="A", level=1, experience=60)
        after = grant_level(before)
        assert after.level == 2
        assert after.experience == xp_for_level(2)
        assert after.available_points == 1

    def test_grant_level_keeps_higher_experience(self):
        """Experience already past the new threshold is left alone."""
        before = Character(name="A", level=2, experience=600)
        assert grant_level(before).experience == 600


# -----------------------------------------------------------------------------
# Stat Point Tests
# -----------------------------------------------------------------------------

class TestStatPoints:
    """Tests for spending and refunding points."""

    def test_allocate(self):
        before = Character(name="A", available_points=2)
        after = allocate_point(before, Pillar.MOBILITY)
        assert after.stats.mobility == 2
        assert after.available_points == 1

    def test_allocate_accepts_string(self):
        before = Character(name="A", available_points=1)
        assert allocate_point(before, "intellect").stats.intellect == 2

    def test_allocate_without_points_is_noop(self):
        """Refused allocation returns the same character."""
        before = Character(name="A", available_points=0)
        assert allocate_point(before, Pillar.COMBAT) is before

    def test_deallocate(self):
        before = Character(name="A", stats=StatPool.from_values([3, 1, 1, 1, 1]))
        after = deallocate_point(before, Pillar.COMBAT)
        assert after.stats.combat == 2
        assert after.available_points == 1

    def test_deallocate_at_floor_is_noop(self):
        before = Character(name="A")
        assert not can_deallocate(before, Pillar.VIGOR)
        assert deallocate_point(before, Pillar.VIGOR) is before

    def test_round_trip_preserves_budget(self):
        """Spending then refunding leaves stats and points unchanged."""
        before = Character(name="A", available_points=2)
        after = deallocate_point(allocate_point(before, Pillar.CHARISMA), Pillar.CHARISMA)
        assert after.stats == before.stats
        assert after.available_points == before.available_points

    def test_points_budget(self):
        assert calculate_available_points(1, 0) == STARTING_BONUS_POINTS
        assert calculate_available_points(3, 2) == 2
        stats = StatPool.from_values([2, 2, 1, 1, 1])
        assert total_allocated_points(stats) == 2
        assert total_allocated_points(create_base_stats()) == 0


class TestCreateCharacter:
    """Tests for fresh characters."""

    def test_defaults(self):
        character = create_character("Rookie")
        assert character.name == "Rookie"
        assert character.level == 1
        assert character.experience == 50
        assert character.stats == StatPool.base(1)
        assert character.available_points == STARTING_BONUS_POINTS
        assert character.rest_time == 5
        assert not character.can_fly
        assert character.id

    def test_higher_level(self):
        character = create_character("Veteran", level=3)
        assert character.experience == 450
        assert character.available_points == 4

    def test_unique_ids(self):
        assert create_character("A").id != create_character("B").id
