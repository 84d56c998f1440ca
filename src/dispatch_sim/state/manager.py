"""
Game state ownership.

DispatchManager is the single container for everything that changes while
the game runs: the roster overlay, the completion log and the set of
deployed missions. Presentation code holds one manager and calls through it.

Storage is delegated to a ProgressStore implementation:
- JsonFileStore for production (file-based)
- MemoryStore for testing (in-memory)
"""

from __future__ import annotations

import logging
from pathlib import Path

from .catalog import Catalog
from .clock import Clock, SystemClock
from .errors import DeploymentError, UnknownEntityError
from .event_bus import EventBus
from .schema import ActiveMission, Character, Difficulty, Mission, MissionCompletion, Pillar
from .store import JsonFileStore, ProgressStore
from ..systems.dispatch import COMPLETION_DISPLAY_MS, MissionDispatcher
from ..systems.progress import UserProgressTracker
from ..systems.roster import RosterSystem
from ..systems.timing import TIME_SCALE_MS
from ..systems.validation import DeploymentCheck, validate_deployment

logger = logging.getLogger(__name__)


class DispatchManager:
    """
    Owns roster, progress, missions and the event bus.

    Completing a mission records it in the user's progress log and awards
    the mission's experience to every agent on the team.
    """

    def __init__(
        self,
        store: ProgressStore | Path | str = "saves",
        clock: Clock | None = None,
        catalog: Catalog | None = None,
        bus: EventBus | None = None,
        time_scale: float = TIME_SCALE_MS,
        completion_display_ms: float = COMPLETION_DISPLAY_MS,
    ):
        if isinstance(store, (Path, str)):
            store = JsonFileStore(store)

        self.store = store
        self.clock = clock or SystemClock()
        self.catalog = catalog or Catalog()
        self.bus = bus or EventBus()

        self.roster = RosterSystem(self.store, self.catalog, self.bus)
        self.progress = UserProgressTracker(self.store, self.bus)
        self.dispatcher = MissionDispatcher(
            self.clock,
            self.bus,
            on_mission_complete=self.handle_mission_complete,
            time_scale=time_scale,
            completion_display_ms=completion_display_ms,
        )

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def agents(self) -> list[Character]:
        return self.roster.agents()

    def get_agent(self, agent_id: str) -> Character:
        agent = self.roster.agent(agent_id)
        if agent is None:
            raise UnknownEntityError("agent", agent_id)
        return agent

    def get_mission(self, mission_id: str) -> Mission:
        mission = self.catalog.mission(mission_id)
        if mission is None:
            raise UnknownEntityError("mission", mission_id)
        return mission

    def available_missions(self, difficulty: Difficulty | str | None = None) -> list[Mission]:
        """Missions not yet completed, optionally filtered by difficulty."""
        missions = [
            m for m in self.catalog.missions()
            if not self.progress.is_completed(m.id)
        ]
        if difficulty is not None:
            difficulty = Difficulty(difficulty)
            missions = [m for m in missions if m.difficulty == difficulty]
        return missions

    def is_agent_available(self, agent_id: str) -> bool:
        return self.dispatcher.is_available(agent_id)

    # -------------------------------------------------------------------------
    # Deployment
    # -------------------------------------------------------------------------

    def check_deployment(self, mission_id: str, agent_ids: list[str]) -> DeploymentCheck:
        mission = self.get_mission(mission_id)
        team = [self.get_agent(a) for a in agent_ids]
        return validate_deployment(mission, team, self.dispatcher.is_available)

    def deploy(self, mission_id: str, agent_ids: list[str], force: bool = False) -> ActiveMission:
        """
        Validate and deploy a team using the agents' current progress.

        Raises DeploymentError if the team breaks a deployment rule,
        unless ``force`` is set.
        """
        mission = self.get_mission(mission_id)
        team = [self.get_agent(a) for a in agent_ids]

        check = validate_deployment(mission, team, self.dispatcher.is_available)
        if not check.feasible:
            if not force:
                raise DeploymentError(check)
            logger.warning(f"Forcing deployment of {mission.name}: {check.summary}")

        return self.dispatcher.deploy(mission, team)

    def tick(self):
        return self.dispatcher.tick()

    def handle_mission_complete(self, active: ActiveMission) -> None:
        """
        Record the completion and pay out experience to the team.

        The completion is stamped with the time of the tick that observed it.
        """
        experience = active.mission.reward_experience
        self.progress.add_completion(MissionCompletion(
            mission_id=active.mission.id,
            completed_at=self.dispatcher.current_time,
            agents=active.agent_ids,
            experience_gained=experience,
        ))
        if experience > 0:
            self.roster.award_experience(active.agent_ids, experience)

    # -------------------------------------------------------------------------
    # Roster shortcuts
    # -------------------------------------------------------------------------

    def allocate_point(self, agent_id: str, pillar: Pillar | str) -> Character:
        self.get_agent(agent_id)
        return self.roster.allocate_point(agent_id, pillar)

    def deallocate_point(self, agent_id: str, pillar: Pillar | str) -> Character:
        self.get_agent(agent_id)
        return self.roster.deallocate_point(agent_id, pillar)

    def reset(self, agents: bool = True, progress: bool = True) -> None:
        if agents:
            self.roster.reset()
        if progress:
            self.progress.reset()
