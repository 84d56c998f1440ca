"""Exceptions raised by the manager layer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..systems.validation import DeploymentCheck


class DispatchError(Exception):
    """Base class for Dispatch Simulator errors."""


class UnknownEntityError(DispatchError):
    """A mission or agent id did not resolve."""

    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"Unknown {kind}: {entity_id}")


class DeploymentError(DispatchError):
    """A deployment failed validation."""

    def __init__(self, check: "DeploymentCheck"):
        self.check = check
        super().__init__(check.summary)
