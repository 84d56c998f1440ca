"""
Game systems for Dispatch Simulator.

Pure computation lives in geometry, progression, timing and phases.
Dispatch, roster and progress own state and delegate persistence to a store.
"""

from .dispatch import MissionDispatcher
from .roster import RosterSystem
from .progress import UserProgressTracker
from .validation import DeploymentCheck, Requirement, RequirementStatus, validate_deployment

__all__ = [
    "MissionDispatcher",
    "RosterSystem",
    "UserProgressTracker",
    "DeploymentCheck",
    "Requirement",
    "RequirementStatus",
    "validate_deployment",
]
