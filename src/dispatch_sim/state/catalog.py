"""
Static reference data: the base roster and the mission list.

Loaded from JSON files shipped with the package (or a directory supplied by
the caller). Entries that fail validation are logged and skipped.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from .schema import Character, Difficulty, Mission

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"

ModelT = TypeVar("ModelT", bound=BaseModel)


class Catalog:
    """
    Read-only view over agents.json and missions.json.

    Files are read once and cached.
    """

    def __init__(
        self,
        data_dir: Path | str | None = None,
        agents: list[Character] | None = None,
        missions: list[Mission] | None = None,
    ):
        self.data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR
        self._agents = list(agents) if agents is not None else None
        self._missions = list(missions) if missions is not None else None

    def _load(self, filename: str, model: type[ModelT]) -> list[ModelT]:
        path = self.data_dir / filename
        if not path.exists():
            logger.warning(f"Data file not found: {path}")
            return []

        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Error loading {path}: {e}")
            return []

        items = []
        for entry in raw:
            try:
                items.append(model.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping invalid entry in {filename}: {e}")
        return items

    def agents(self) -> list[Character]:
        if self._agents is None:
            self._agents = self._load("agents.json", Character)
        return list(self._agents)

    def missions(self) -> list[Mission]:
        if self._missions is None:
            self._missions = self._load("missions.json", Mission)
        return list(self._missions)

    def agent(self, agent_id: str) -> Character | None:
        return next((a for a in self.agents() if a.id == agent_id), None)

    def mission(self, mission_id: str) -> Mission | None:
        return next((m for m in self.missions() if m.id == mission_id), None)

    def missions_by_difficulty(self, difficulty: Difficulty | str) -> list[Mission]:
        difficulty = Difficulty(difficulty)
        return [m for m in self.missions() if m.difficulty == difficulty]
