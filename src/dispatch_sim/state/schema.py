"""
Pydantic models for Dispatch Simulator game state.

Python attributes are snake_case; persisted documents and the static data
files use camelCase keys. Both spellings are accepted on input.
"""

from __future__ import annotations

from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------

class Pillar(str, Enum):
    """The five stat dimensions, in canonical (angular) order."""
    COMBAT = "Combat"
    VIGOR = "Vigor"
    MOBILITY = "Mobility"
    CHARISMA = "Charisma"
    INTELLECT = "Intellect"

    @property
    def field_name(self) -> str:
        return self.value.lower()

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


PILLARS: tuple[Pillar, ...] = tuple(Pillar)


class Difficulty(str, Enum):
    """Informational difficulty tier. Does not feed any formula."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    EXTREME = "Extreme"

    @property
    def rank(self) -> int:
        return list(Difficulty).index(self)

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class MissionPhase(str, Enum):
    """Temporal states of a deployed mission, in strict order."""
    TRAVEL_OUTBOUND = "travel-outbound"
    ACTIVE = "active"
    TRAVEL_RETURN = "travel-return"
    RESTING = "resting"
    COMPLETED = "completed"

    @property
    def order(self) -> int:
        return list(MissionPhase).index(self)

    @property
    def label(self) -> str:
        return self.value.replace("-", " ").title()


def generate_id() -> str:
    return str(uuid4())[:8]


class CamelModel(BaseModel):
    """Base for documents stored with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# -----------------------------------------------------------------------------
# Stats
# -----------------------------------------------------------------------------

class StatPool(BaseModel):
    """
    Fixed five-dimensional stat vector shared by characters and missions.

    All five keys are always present. Pools are treated as values: the
    helpers return new pools rather than mutating in place.
    """
    model_config = ConfigDict(
        alias_generator=str.capitalize,
        populate_by_name=True,
        frozen=True,
    )

    combat: int = 0
    vigor: int = 0
    mobility: int = 0
    charisma: int = 0
    intellect: int = 0

    @classmethod
    def empty(cls) -> "StatPool":
        return cls()

    @classmethod
    def base(cls, value: int = 1) -> "StatPool":
        return cls(**{p.field_name: value for p in PILLARS})

    @classmethod
    def from_values(cls, values: list[int] | tuple[int, ...]) -> "StatPool":
        """Build a pool from five values in canonical pillar order."""
        if len(values) != len(PILLARS):
            raise ValueError(f"Expected {len(PILLARS)} values, got {len(values)}")
        return cls(**{p.field_name: v for p, v in zip(PILLARS, values)})

    def __getitem__(self, pillar: Pillar | str) -> int:
        return getattr(self, Pillar(pillar).field_name)

    def with_value(self, pillar: Pillar | str, value: int) -> "StatPool":
        return self.model_copy(update={Pillar(pillar).field_name: value})

    def as_list(self) -> list[int]:
        return [self[p] for p in PILLARS]

    def total(self) -> int:
        return sum(self.as_list())

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


# -----------------------------------------------------------------------------
# Characters
# -----------------------------------------------------------------------------

class Character(CamelModel):
    """An agent on the roster."""
    id: str = Field(default_factory=generate_id)
    name: str
    level: int = Field(default=1, ge=1)
    experience: int = Field(default=0, ge=0)
    stats: StatPool = Field(default_factory=StatPool.base)
    available_points: int = Field(default=0, ge=0)
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)
    can_fly: bool = False
    is_flight_licensed: bool = False
    rest_time: float = Field(default=5, gt=0)  # Base recovery, in time units

    @property
    def flies_licensed(self) -> bool:
        """Only licensed flyers get the travel bonus."""
        return self.can_fly and self.is_flight_licensed


class AgentProgress(CamelModel):
    """Sparse per-agent overlay persisted between sessions."""
    level: int = 1
    experience: int = 0
    available_points: int = 0
    stats: StatPool | None = None

    @classmethod
    def from_character(cls, character: Character) -> "AgentProgress":
        return cls(
            level=character.level,
            experience=character.experience,
            available_points=character.available_points,
            stats=character.stats,
        )

    def apply_to(self, base: Character) -> Character:
        """Merge this overlay onto a static base definition."""
        return base.model_copy(update={
            "level": self.level,
            "experience": self.experience,
            "available_points": self.available_points,
            "stats": self.stats or base.stats,
        })


# -----------------------------------------------------------------------------
# Missions
# -----------------------------------------------------------------------------

class MissionRewards(CamelModel):
    experience: int = 0


class Mission(CamelModel):
    """Static mission definition. Never mutated at runtime."""
    id: str = Field(default_factory=generate_id)
    name: str
    description: str = ""
    requirements: StatPool = Field(default_factory=StatPool.empty)
    difficulty: Difficulty = Difficulty.MEDIUM
    max_agents: int = Field(default=2, gt=0)
    excluded_agents: list[str] = Field(default_factory=list)
    rewards: MissionRewards | None = None
    travel_time: float = Field(default=5, gt=0)       # One-way, in time units
    mission_duration: float = Field(default=10, gt=0)  # In time units

    @property
    def reward_experience(self) -> int:
        return self.rewards.experience if self.rewards else 0

    def is_excluded(self, agent_id: str) -> bool:
        return agent_id in self.excluded_agents


class AgentTravelTime(CamelModel):
    agent_id: str
    name: str
    travel_time: float


class TimeBreakdown(CamelModel):
    """Team timing for a mission, in mission time units."""
    travel_time_outbound: float = 0
    travel_time_return: float = 0
    mission_duration: float = 0
    rest_time: float = 0
    total_time: float = 0
    has_fast_travelers: bool = False
    has_quick_recovery: bool = False
    slowest_travel_time: float = 0
    fastest_travel_time: float = 0
    longest_rest_time: float = 0
    shortest_rest_time: float = 0
    agent_travel_times: list[AgentTravelTime] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Deployed missions
# -----------------------------------------------------------------------------

class ActiveMission(CamelModel):
    """
    A deployed mission. Durations are in milliseconds.

    The team is a snapshot taken at deployment; later progression does not
    affect an in-flight mission. ``current_phase`` and ``phase_start_time``
    are informational and refreshed from the phase calculation.
    """
    id: str = Field(default_factory=generate_id)
    mission: Mission
    agents: list[Character] = Field(default_factory=list)
    start_time: int
    current_phase: MissionPhase = MissionPhase.TRAVEL_OUTBOUND
    phase_start_time: float
    travel_outbound_duration: float = Field(default=0, ge=0)
    mission_duration: float = Field(default=0, ge=0)
    travel_return_duration: float = Field(default=0, ge=0)
    rest_duration: float = Field(default=0, ge=0)
    total_duration: float = Field(default=0, ge=0)

    @property
    def agent_ids(self) -> list[str]:
        return [a.id for a in self.agents]

    @property
    def end_time(self) -> float:
        return self.start_time + self.total_duration


class CompletedMission(ActiveMission):
    completed_at: int


class MissionProgress(BaseModel):
    """Result of a phase query at a point in time."""
    phase: MissionPhase
    phase_progress: float
    total_progress: float
    elapsed_seconds: float
    remaining_ms: float


# -----------------------------------------------------------------------------
# User progress
# -----------------------------------------------------------------------------

class MissionCompletion(CamelModel):
    mission_id: str
    completed_at: int
    agents: list[str] = Field(default_factory=list)  # Agent IDs
    experience_gained: int = 0


class UserProgress(CamelModel):
    """Append-only completion log plus derived totals."""
    completed_mission_ids: list[str] = Field(default_factory=list)
    mission_completions: list[MissionCompletion] = Field(default_factory=list)
    total_experience: int = 0

    def with_completion(self, completion: MissionCompletion) -> "UserProgress":
        return UserProgress(
            completed_mission_ids=[*self.completed_mission_ids, completion.mission_id],
            mission_completions=[*self.mission_completions, completion],
            total_experience=self.total_experience + completion.experience_gained,
        )
