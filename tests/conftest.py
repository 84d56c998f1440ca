"""
Pytest fixtures for Dispatch Simulator tests.

Provides in-memory stores, a manual clock and a small fixed catalog so tests
never touch the shipped data files or the wall clock.
"""

import pytest

from dispatch_sim import DispatchManager
from dispatch_sim.state import (
    Catalog,
    Character,
    EventBus,
    ManualClock,
    MemoryStore,
    Mission,
    MissionRewards,
    StatPool,
)

START = 1_000_000


@pytest.fixture
def memory_store():
    """In-memory progress store for testing."""
    return MemoryStore()


@pytest.fixture
def clock():
    """Manual clock parked at a fixed start time."""
    return ManualClock(start=START)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def walker():
    """Plain agent: no flight, rest 2."""
    return Character(
        id="agent-walker",
        name="Walker",
        level=1,
        experience=50,
        stats=StatPool.from_values([3, 2, 1, 1, 1]),
        rest_time=2,
    )


@pytest.fixture
def flyer():
    """Licensed flyer with rest 3."""
    return Character(
        id="agent-flyer",
        name="Flyer",
        level=1,
        experience=50,
        stats=StatPool.from_values([1, 1, 3, 1, 1]),
        available_points=1,
        can_fly=True,
        is_flight_licensed=True,
        rest_time=3,
    )


@pytest.fixture
def grounded_flyer():
    """Can fly but has no license."""
    return Character(
        id="agent-grounded",
        name="Grounded",
        stats=StatPool.from_values([1, 2, 2, 1, 1]),
        can_fly=True,
        is_flight_licensed=False,
        rest_time=5,
    )


@pytest.fixture
def short_mission():
    """Travel 2, duration 4, one agent, 50 XP."""
    return Mission(
        id="mission-short",
        name="Short Hop",
        requirements=StatPool.from_values([0, 1, 2, 1, 0]),
        max_agents=1,
        rewards=MissionRewards(experience=50),
        travel_time=2,
        mission_duration=4,
    )


@pytest.fixture
def team_mission():
    """Travel 10, duration 5, two agents, excludes the grounded flyer."""
    return Mission(
        id="mission-team",
        name="Team Job",
        requirements=StatPool.from_values([2, 2, 2, 2, 2]),
        max_agents=2,
        excluded_agents=["agent-grounded"],
        rewards=MissionRewards(experience=150),
        travel_time=10,
        mission_duration=5,
    )


@pytest.fixture
def catalog(walker, flyer, grounded_flyer, short_mission, team_mission):
    """Catalog built from the fixture agents and missions."""
    return Catalog(
        agents=[walker, flyer, grounded_flyer],
        missions=[short_mission, team_mission],
    )


@pytest.fixture
def manager(memory_store, clock, catalog):
    """Dispatch manager wired to in-memory storage and a manual clock."""
    return DispatchManager(store=memory_store, clock=clock, catalog=catalog)
