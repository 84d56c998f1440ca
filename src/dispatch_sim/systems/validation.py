"""
Deployment validator.

Pure function: validate_deployment(mission, team, is_available) -> DeploymentCheck.
No state mutation, no side effects.

The dispatcher itself deploys whatever it is given. Callers that want
team-size, exclusion and availability rules enforced run this first; the
check also previews timing and success odds so the player sees what a
deployment will look like before committing.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

from pydantic import BaseModel, Field

from ..state.schema import Character, Mission, TimeBreakdown
from .geometry import team_success_probability
from .timing import mission_time_breakdown


class RequirementStatus(str, Enum):
    MET = "met"
    UNMET = "unmet"


class Requirement(BaseModel):
    """A single deployment rule and whether the team satisfies it."""
    label: str
    status: RequirementStatus
    detail: str = ""

    @property
    def met(self) -> bool:
        return self.status == RequirementStatus.MET


class DeploymentCheck(BaseModel):
    """Preview of a deployment."""
    feasible: bool
    requirements: list[Requirement] = Field(default_factory=list)
    success_probability: float = 0.0
    time_breakdown: TimeBreakdown

    @property
    def problems(self) -> list[Requirement]:
        return [r for r in self.requirements if not r.met]

    @property
    def summary(self) -> str:
        if self.feasible:
            return "Ready to deploy."
        return "; ".join(r.detail or r.label for r in self.problems)


def _requirement(label: str, ok: bool, detail: str = "") -> Requirement:
    return Requirement(
        label=label,
        status=RequirementStatus.MET if ok else RequirementStatus.UNMET,
        detail="" if ok else detail,
    )


def validate_deployment(
    mission: Mission,
    team: list[Character],
    is_available: Callable[[str], bool] | None = None,
) -> DeploymentCheck:
    """Check a proposed team against the mission's deployment rules."""
    is_available = is_available or (lambda _agent_id: True)
    ids = [a.id for a in team]

    duplicates = sorted({a.name for a in team if ids.count(a.id) > 1})
    excluded = [a.name for a in team if mission.is_excluded(a.id)]
    busy = [a.name for a in team if not is_available(a.id)]

    requirements = [
        _requirement(
            "At least one agent",
            bool(team),
            "No agents selected.",
        ),
        _requirement(
            f"At most {mission.max_agents} agent(s)",
            len(team) <= mission.max_agents,
            f"Team of {len(team)} exceeds the limit of {mission.max_agents}.",
        ),
        _requirement(
            "No duplicate agents",
            not duplicates,
            f"Selected more than once: {', '.join(duplicates)}.",
        ),
        _requirement(
            "No excluded agents",
            not excluded,
            f"Excluded from this mission: {', '.join(excluded)}.",
        ),
        _requirement(
            "All agents available",
            not busy,
            f"Already deployed: {', '.join(busy)}.",
        ),
    ]

    return DeploymentCheck(
        feasible=all(r.met for r in requirements),
        requirements=requirements,
        success_probability=team_success_probability(
            [a.stats for a in team], mission.requirements,
        ),
        time_breakdown=mission_time_breakdown(mission, team),
    )
