"""
Mission timing for a team of agents.

The mission starts once the slowest traveller arrives, and the team is free
again once the slowest-recovering agent has rested:

    total = 2 × team travel time + mission duration + team rest time

Times here are in mission time units. TIME_SCALE_MS converts them to the
milliseconds used by deployed missions.
"""

from __future__ import annotations

from ..state.schema import AgentTravelTime, Character, Mission, TimeBreakdown

# Multiplier for travel time when agent can fly AND is licensed
FLIGHT_SPEED_MULTIPLIER = 0.5

# Milliseconds per mission time unit
TIME_SCALE_MS = 1000


def agent_travel_time(base_travel_time: float, agent: Character) -> float:
    """One-way travel time for a single agent."""
    if agent.can_fly and agent.is_flight_licensed:
        return base_travel_time * FLIGHT_SPEED_MULTIPLIER
    return base_travel_time


def team_travel_time(mission: Mission, agents: list[Character]) -> float:
    """One leg of team travel: the slowest agent. 0 for an empty team."""
    if not agents:
        return 0
    return max(agent_travel_time(mission.travel_time, a) for a in agents)


def team_rest_time(agents: list[Character]) -> float:
    """The team is ready when its slowest-recovering agent is."""
    if not agents:
        return 0
    return max(a.rest_time for a in agents)


def mission_start_time(mission: Mission, agents: list[Character]) -> float:
    """Time until the mission proper begins."""
    return team_travel_time(mission, agents)


def total_mission_time(mission: Mission, agents: list[Character]) -> float:
    if not agents:
        return 0
    return (
        team_travel_time(mission, agents) * 2
        + mission.mission_duration
        + team_rest_time(agents)
    )


def mission_time_breakdown(mission: Mission, agents: list[Character]) -> TimeBreakdown:
    """Full timing detail for display and for deployment."""
    if not agents:
        return TimeBreakdown(mission_duration=mission.mission_duration)

    per_agent = [
        AgentTravelTime(
            agent_id=a.id,
            name=a.name,
            travel_time=agent_travel_time(mission.travel_time, a),
        )
        for a in agents
    ]
    travel_times = [t.travel_time for t in per_agent]
    rest_times = [a.rest_time for a in agents]

    slowest = max(travel_times)
    fastest = min(travel_times)
    longest_rest = max(rest_times)
    shortest_rest = min(rest_times)

    return TimeBreakdown(
        travel_time_outbound=slowest,
        travel_time_return=slowest,
        mission_duration=mission.mission_duration,
        rest_time=longest_rest,
        total_time=slowest * 2 + mission.mission_duration + longest_rest,
        has_fast_travelers=slowest != fastest,
        has_quick_recovery=longest_rest != shortest_rest,
        slowest_travel_time=slowest,
        fastest_travel_time=fastest,
        longest_rest_time=longest_rest,
        shortest_rest_time=shortest_rest,
        agent_travel_times=per_agent,
    )
