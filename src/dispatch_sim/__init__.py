"""Dispatch Simulator: mission simulation engine."""

from .state.manager import DispatchManager

__version__ = "0.1.0"

__all__ = ["DispatchManager", "__version__"]
