"""
Roster with persisted progression.

Base agents come from the static catalog. Progress (level, experience,
points, stats) lives in a sparse overlay document keyed by agent id and is
merged onto the base definitions whenever the roster is read. The overlay
is written back in full after every change.
"""

from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError

from ..state.catalog import Catalog
from ..state.event_bus import EventBus, EventType
from ..state.schema import AgentProgress, Character, Pillar
from ..state.store import AGENT_PROGRESS_KEY, ProgressStore
from . import progression

logger = logging.getLogger(__name__)

AgentProgressData = dict[str, AgentProgress]

_overlay_adapter = TypeAdapter(AgentProgressData)


class RosterSystem:
    """
    Manages agent progression on top of the static roster.

    Requires a store for the overlay document and a catalog for the base
    agent definitions.
    """

    def __init__(self, store: ProgressStore, catalog: Catalog, bus: EventBus | None = None):
        self.store = store
        self.catalog = catalog
        self.bus = bus or EventBus()
        self._progress: AgentProgressData = self._load()

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _load(self) -> AgentProgressData:
        raw = self.store.read(AGENT_PROGRESS_KEY)
        if not raw:
            return {}
        try:
            return _overlay_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Failed to parse agent progress, starting fresh: {e}")
            return {}

    def _save(self) -> None:
        self.store.write(
            AGENT_PROGRESS_KEY,
            _overlay_adapter.dump_json(self._progress, by_alias=True).decode("utf-8"),
        )

    @property
    def progress(self) -> AgentProgressData:
        return dict(self._progress)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def agents(self) -> list[Character]:
        """All agents with their saved progress applied."""
        return [self._merged(base) for base in self.catalog.agents()]

    def agent(self, agent_id: str) -> Character | None:
        base = self.catalog.agent(agent_id)
        return self._merged(base) if base else None

    def _merged(self, base: Character) -> Character:
        overlay = self._progress.get(base.id)
        return overlay.apply_to(base) if overlay else base

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def award_experience(self, agent_ids: list[str], xp_amount: int) -> list[Character]:
        """
        Award experience to each listed agent, levelling up as needed.

        Each agent is paid once even if listed twice. Unknown ids are
        skipped. Returns the updated agents.
        """
        updated: list[Character] = []

        for agent_id in dict.fromkeys(agent_ids):
            current = self.agent(agent_id)
            if current is None:
                logger.warning(f"Cannot award experience to unknown agent {agent_id}")
                continue

            after = progression.apply_experience(current, xp_amount)
            self._progress[agent_id] = AgentProgress.from_character(after)
            updated.append(after)

            self.bus.emit(
                EventType.EXPERIENCE_AWARDED,
                agent_id=agent_id,
                amount=xp_amount,
                experience=after.experience,
            )
            if after.level > current.level:
                logger.info(f"{after.name} reached level {after.level}")
                self.bus.emit(
                    EventType.AGENT_LEVELED_UP,
                    agent_id=agent_id,
                    before=current.level,
                    after=after.level,
                    available_points=after.available_points,
                )

        if updated:
            self._save()
        return updated

    def update_agent_stats(self, character: Character) -> Character:
        """Store an agent's level, experience, points and stats as given."""
        self._progress[character.id] = AgentProgress.from_character(character)
        self._save()
        self.bus.emit(
            EventType.AGENT_STATS_CHANGED,
            agent_id=character.id,
            stats=character.stats,
            available_points=character.available_points,
        )
        return character

    def allocate_point(self, agent_id: str, pillar: Pillar | str) -> Character | None:
        """Spend a point. Refused requests change nothing."""
        current = self.agent(agent_id)
        if current is None:
            return None
        after = progression.allocate_point(current, pillar)
        if after is current:
            logger.debug(f"Allocation refused for {agent_id}: no available points")
            return current
        return self.update_agent_stats(after)

    def deallocate_point(self, agent_id: str, pillar: Pillar | str) -> Character | None:
        """Refund a point. Refused at the stat floor."""
        current = self.agent(agent_id)
        if current is None:
            return None
        after = progression.deallocate_point(current, pillar)
        if after is current:
            logger.debug(f"Deallocation refused for {agent_id}: {Pillar(pillar).value} at floor")
            return current
        return self.update_agent_stats(after)

    def grant_level(self, agent_id: str) -> Character | None:
        current = self.agent(agent_id)
        if current is None:
            return None
        after = progression.grant_level(current)
        self.bus.emit(
            EventType.AGENT_LEVELED_UP,
            agent_id=agent_id,
            before=current.level,
            after=after.level,
            available_points=after.available_points,
        )
        return self.update_agent_stats(after)

    def reset(self) -> None:
        """Drop all saved progress."""
        self._progress = {}
        self.store.delete(AGENT_PROGRESS_KEY)
        self.bus.emit(EventType.AGENT_PROGRESS_RESET)
