"""State management for Dispatch Simulator."""

from .schema import (
    PILLARS,
    ActiveMission,
    AgentProgress,
    Character,
    CompletedMission,
    Difficulty,
    Mission,
    MissionCompletion,
    MissionPhase,
    MissionProgress,
    MissionRewards,
    Pillar,
    StatPool,
    TimeBreakdown,
    UserProgress,
)
from .store import (
    AGENT_PROGRESS_KEY,
    USER_PROGRESS_KEY,
    JsonFileStore,
    MemoryStore,
    ProgressStore,
)
from .clock import Clock, ManualClock, SystemClock
from .catalog import Catalog
from .errors import DeploymentError, DispatchError, UnknownEntityError
from .event_bus import EventBus, EventType, GameEvent

__all__ = [
    # Schema
    "PILLARS",
    "ActiveMission",
    "AgentProgress",
    "Character",
    "CompletedMission",
    "Difficulty",
    "Mission",
    "MissionCompletion",
    "MissionPhase",
    "MissionProgress",
    "MissionRewards",
    "Pillar",
    "StatPool",
    "TimeBreakdown",
    "UserProgress",
    # Store
    "AGENT_PROGRESS_KEY",
    "USER_PROGRESS_KEY",
    "JsonFileStore",
    "MemoryStore",
    "ProgressStore",
    # Clock
    "Clock",
    "ManualClock",
    "SystemClock",
    # Catalog
    "Catalog",
    # Errors
    "DeploymentError",
    "DispatchError",
    "UnknownEntityError",
    # Event Bus
    "EventBus",
    "EventType",
    "GameEvent",
]
