"""
Event bus for Dispatch Simulator state changes.

Provides decoupled communication between the engine and whatever renders
it. Each DispatchManager owns its own bus; there is no global instance.

Usage:
    bus = EventBus()
    bus.on(EventType.MISSION_COMPLETED, my_handler)
    bus.emit(EventType.MISSION_COMPLETED, mission=finished)

    def my_handler(event: GameEvent):
        print(f"{event.data['mission'].mission.name} is done!")
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Game events that can be published."""

    # Mission lifecycle
    MISSION_DEPLOYED = "mission.deployed"
    MISSION_COMPLETED = "mission.completed"
    MISSION_RETIRED = "mission.retired"
    MISSION_REMOVED = "mission.removed"

    # Agent progression
    EXPERIENCE_AWARDED = "agent.experience_awarded"
    AGENT_LEVELED_UP = "agent.leveled_up"
    AGENT_STATS_CHANGED = "agent.stats_changed"
    AGENT_PROGRESS_RESET = "agent.progress_reset"

    # User progress
    COMPLETION_RECORDED = "progress.completion_recorded"
    PROGRESS_RESET = "progress.reset"


@dataclass
class GameEvent:
    """
    One published event.

    ``data`` holds the keyword arguments passed to emit(); ``timestamp`` is
    wall-clock time of publication, independent of the engine clock.
    """

    type: EventType
    data: dict = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.type.value}] {self.data}"


EventHandler = Callable[[GameEvent], None]


class EventBus:
    """
    Synchronous event bus.

    Listeners are called immediately on emit(), in subscription order.
    A failing listener is logged and skipped so it cannot break the others.
    The most recent ``history_limit`` events are kept for inspection.
    """

    def __init__(self, history_limit: int = 100):
        self._handlers: dict[EventType, list[EventHandler]] = {}
        self._recent: deque[GameEvent] = deque(maxlen=history_limit)

    def on(self, event_type: EventType, handler: EventHandler) -> None:
        """Subscribe. Subscribing the same handler twice has no effect."""
        handlers = self._handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)

    def off(self, event_type: EventType, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_type: EventType, **data) -> GameEvent:
        """Publish an event and return it."""
        event = GameEvent(type=event_type, data=data)
        self._recent.append(event)

        for handler in tuple(self._handlers.get(event_type, ())):
            try:
                handler(event)
            except Exception:
                logger.exception(f"Listener failed on {event_type.value}")

        return event

    def clear(self) -> None:
        """Drop every subscription. History is kept."""
        self._handlers.clear()

    def get_history(self, event_type: EventType | None = None) -> list[GameEvent]:
        """Recent events, optionally filtered by type."""
        return [e for e in self._recent if event_type is None or e.type == event_type]

    def listener_count(self, event_type: EventType) -> int:
        return len(self._handlers.get(event_type, ()))
