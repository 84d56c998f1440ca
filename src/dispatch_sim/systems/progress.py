"""
User progress: the append-only log of mission completions.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from ..state.catalog import Catalog
from ..state.event_bus import EventBus, EventType
from ..state.schema import Mission, MissionCompletion, UserProgress
from ..state.store import USER_PROGRESS_KEY, ProgressStore

logger = logging.getLogger(__name__)


class UserProgressTracker:
    """Records completions and answers "has this mission been done?"."""

    def __init__(self, store: ProgressStore, bus: EventBus | None = None):
        self.store = store
        self.bus = bus or EventBus()
        self._progress = self._load()

    def _load(self) -> UserProgress:
        raw = self.store.read(USER_PROGRESS_KEY)
        if not raw:
            return UserProgress()
        try:
            return UserProgress.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Failed to parse user progress, starting fresh: {e}")
            return UserProgress()

    def _save(self) -> None:
        self.store.write(USER_PROGRESS_KEY, self._progress.model_dump_json(by_alias=True))

    @property
    def progress(self) -> UserProgress:
        return self._progress

    def add_completion(self, completion: MissionCompletion) -> UserProgress:
        self._progress = self._progress.with_completion(completion)
        self._save()
        self.bus.emit(EventType.COMPLETION_RECORDED, completion=completion)
        return self._progress

    def is_completed(self, mission_id: str) -> bool:
        return mission_id in self._progress.completed_mission_ids

    def reset(self) -> None:
        self._progress = UserProgress()
        self._save()
        self.bus.emit(EventType.PROGRESS_RESET)

    def history(self, catalog: Catalog) -> list[tuple[MissionCompletion, Mission]]:
        """
        Completions paired with their missions, newest first.

        Completions whose mission no longer exists are left out here but
        stay in the log.
        """
        entries = []
        for completion in sorted(
            self._progress.mission_completions,
            key=lambda c: c.completed_at,
            reverse=True,
        ):
            mission = catalog.mission(completion.mission_id)
            if mission is None:
                logger.debug(f"Skipping completion of unknown mission {completion.mission_id}")
                continue
            entries.append((completion, mission))
        return entries
