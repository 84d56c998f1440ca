"""
Phase calculation for deployed missions.

A deployed mission walks through contiguous time windows measured from its
start time:

    travel-outbound [0, out)
    active          [out, out + dur)
    travel-return   [out + dur, out + dur + ret)
    resting         [out + dur + ret, total)
    completed       [total, ∞)

A boundary belongs to the phase being entered, so zero-length windows are
skipped. Phase is always derived from (mission, time); nothing stored on the
record is treated as ground truth.
"""

from __future__ import annotations

from ..state.schema import ActiveMission, Character, Mission, MissionPhase, MissionProgress, generate_id


def create_active_mission(
    mission: Mission,
    agents: list[Character],
    travel_outbound_duration: float,
    mission_duration: float,
    travel_return_duration: float,
    rest_duration: float,
    start_time: int,
    mission_id: str | None = None,
) -> ActiveMission:
    """Build a deployed mission. Durations are in milliseconds."""
    total_duration = (
        travel_outbound_duration + mission_duration + travel_return_duration + rest_duration
    )

    return ActiveMission(
        id=mission_id or generate_id(),
        mission=mission,
        agents=list(agents),
        start_time=start_time,
        current_phase=MissionPhase.TRAVEL_OUTBOUND,
        phase_start_time=start_time,
        travel_outbound_duration=travel_outbound_duration,
        mission_duration=mission_duration,
        travel_return_duration=travel_return_duration,
        rest_duration=rest_duration,
        total_duration=total_duration,
    )


def phase_bounds(active: ActiveMission) -> list[tuple[MissionPhase, float, float]]:
    """(phase, start offset, end offset) for each timed phase, in order."""
    bounds = []
    offset = 0.0
    for phase, duration in (
        (MissionPhase.TRAVEL_OUTBOUND, active.travel_outbound_duration),
        (MissionPhase.ACTIVE, active.mission_duration),
        (MissionPhase.TRAVEL_RETURN, active.travel_return_duration),
        (MissionPhase.RESTING, active.rest_duration),
    ):
        bounds.append((phase, offset, offset + duration))
        offset += duration
    return bounds


def _fraction(part: float, whole: float) -> float:
    if whole <= 0:
        return 1.0 if part >= 0 else 0.0
    return min(max(part / whole, 0.0), 1.0)


def calculate_mission_progress(active: ActiveMission, current_time: float) -> MissionProgress:
    """Current phase and progress of a deployed mission at ``current_time``."""
    elapsed = current_time - active.start_time

    if elapsed >= active.total_duration:
        return MissionProgress(
            phase=MissionPhase.COMPLETED,
            phase_progress=1.0,
            total_progress=1.0,
            elapsed_seconds=elapsed / 1000,
            remaining_ms=0,
        )

    # Latest window whose start has been reached. Before the start time the
    # mission is still travelling outbound.
    phase, start, end = phase_bounds(active)[0]
    for bounds in phase_bounds(active):
        if elapsed >= bounds[1]:
            phase, start, end = bounds

    return MissionProgress(
        phase=phase,
        phase_progress=_fraction(elapsed - start, end - start),
        total_progress=_fraction(elapsed, active.total_duration),
        elapsed_seconds=elapsed / 1000,
        remaining_ms=active.total_duration - elapsed,
    )


def phase_start_time(active: ActiveMission, phase: MissionPhase) -> float:
    """Absolute time at which ``phase`` begins for this mission."""
    if phase == MissionPhase.COMPLETED:
        return active.start_time + active.total_duration
    for bounded_phase, start, _ in phase_bounds(active):
        if bounded_phase == phase:
            return active.start_time + start
    raise ValueError(f"Unknown phase: {phase}")


def refresh_phase(active: ActiveMission, current_time: float) -> ActiveMission:
    """Copy whose informational phase fields match the calculated phase."""
    phase = calculate_mission_progress(active, current_time).phase
    if phase == active.current_phase:
        return active
    return active.model_copy(update={
        "current_phase": phase,
        "phase_start_time": phase_start_time(active, phase),
    })
