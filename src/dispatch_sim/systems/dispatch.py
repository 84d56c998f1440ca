"""
Mission lifecycle orchestration.

Owns the active and completed mission sets and moves missions between them
as time passes. Time is read from an injected Clock; a driver (the CLI loop,
a UI timer, or a test) calls tick() periodically. Any tick period works;
transitions are observed within one tick of when they happen.

Lifecycle:
    deploy() -> active -> tick() sees "completed" -> completed (callback fires)
             -> tick() after the display window -> retired (dropped)
"""

from __future__ import annotations

import logging
from typing import Callable

from ..state.clock import Clock
from ..state.event_bus import EventBus, EventType
from ..state.schema import (
    ActiveMission,
    Character,
    CompletedMission,
    Mission,
    MissionPhase,
    MissionProgress,
)
from .phases import calculate_mission_progress, create_active_mission, refresh_phase
from .timing import TIME_SCALE_MS, mission_time_breakdown

logger = logging.getLogger(__name__)

# Show completed missions for 15 seconds
COMPLETION_DISPLAY_MS = 15000

CompletionCallback = Callable[[ActiveMission], None]


class MissionDispatcher:
    """
    Time-driven registry of deployed missions.

    The dispatcher does not check team size, exclusions or availability;
    see systems.validation for that.
    """

    def __init__(
        self,
        clock: Clock,
        bus: EventBus | None = None,
        on_mission_complete: CompletionCallback | None = None,
        time_scale: float = TIME_SCALE_MS,
        completion_display_ms: float = COMPLETION_DISPLAY_MS,
    ):
        self.clock = clock
        self.bus = bus or EventBus()
        self.time_scale = time_scale
        self.completion_display_ms = completion_display_ms
        self._callbacks: list[CompletionCallback] = []
        if on_mission_complete:
            self._callbacks.append(on_mission_complete)

        self._active: list[ActiveMission] = []
        self._completed: list[CompletedMission] = []
        self.current_time: int = clock.now()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def active_missions(self) -> list[ActiveMission]:
        return list(self._active)

    @property
    def completed_missions(self) -> list[CompletedMission]:
        return list(self._completed)

    def get(self, active_id: str) -> ActiveMission | None:
        return next((m for m in self._active if m.id == active_id), None)

    def get_progress(self, active_id: str, now: float | None = None) -> MissionProgress | None:
        active = self.get(active_id)
        if active is None:
            return None
        return calculate_mission_progress(active, self.current_time if now is None else now)

    def busy_agent_ids(self) -> set[str]:
        return {agent_id for m in self._active for agent_id in m.agent_ids}

    def is_available(self, agent_id: str) -> bool:
        """False while the agent is on any active mission."""
        return agent_id not in self.busy_agent_ids()

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def on_mission_complete(self, callback: CompletionCallback) -> None:
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def off_mission_complete(self, callback: CompletionCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def deploy(self, mission: Mission, agents: list[Character]) -> ActiveMission:
        """Commit a team to a mission. The team is snapshotted as-is."""
        breakdown = mission_time_breakdown(mission, agents)
        now = self.clock.now()

        active = create_active_mission(
            mission,
            [a.model_copy(deep=True) for a in agents],
            breakdown.travel_time_outbound * self.time_scale,
            breakdown.mission_duration * self.time_scale,
            breakdown.travel_time_return * self.time_scale,
            breakdown.rest_time * self.time_scale,
            start_time=now,
        )

        self._active = [*self._active, active]
        logger.info(
            f"Deployed {mission.name} ({active.id}) with "
            f"{len(agents)} agent(s), total {active.total_duration / 1000:.1f}s"
        )
        self.bus.emit(EventType.MISSION_DEPLOYED, mission=active)
        return active

    def tick(self, now: int | None = None) -> list[CompletedMission]:
        """
        Advance to ``now`` (default: the clock) and apply due transitions.

        Returns the missions that completed on this tick.
        """
        now = self.clock.now() if now is None else now
        self.current_time = now

        still_active: list[ActiveMission] = []
        finished: list[ActiveMission] = []
        for active in self._active:
            progress = calculate_mission_progress(active, now)
            if progress.phase == MissionPhase.COMPLETED:
                finished.append(active)
            else:
                still_active.append(refresh_phase(active, now))

        newly_completed = [
            CompletedMission.model_validate({
                **active.model_dump(),
                "current_phase": MissionPhase.COMPLETED,
                "phase_start_time": active.end_time,
                "completed_at": now,
            })
            for active in finished
        ]

        retained: list[CompletedMission] = []
        retired: list[CompletedMission] = []
        for mission in self._completed:
            if now - mission.completed_at < self.completion_display_ms:
                retained.append(mission)
            else:
                retired.append(mission)

        self._active = still_active
        self._completed = [*retained, *newly_completed]

        for mission in retired:
            logger.debug(f"Retired completed mission {mission.id}")
            self.bus.emit(EventType.MISSION_RETIRED, mission=mission)

        for active in finished:
            logger.info(f"Mission complete: {active.mission.name} ({active.id})")
            self._notify_complete(active)

        return newly_completed

    def _notify_complete(self, active: ActiveMission) -> None:
        for callback in list(self._callbacks):
            try:
                callback(active)
            except Exception:
                logger.exception(f"Completion callback failed for mission {active.id}")
        self.bus.emit(EventType.MISSION_COMPLETED, mission=active)

    def remove_mission(self, active_id: str) -> bool:
        """
        Administrative removal of an active mission.

        Skips completion callbacks and payouts entirely.
        """
        remaining = [m for m in self._active if m.id != active_id]
        if len(remaining) == len(self._active):
            return False

        self._active = remaining
        logger.warning(f"Removed active mission {active_id} without completion")
        self.bus.emit(EventType.MISSION_REMOVED, mission_id=active_id)
        return True

    def is_idle(self) -> bool:
        """No missions in flight."""
        return not self._active
