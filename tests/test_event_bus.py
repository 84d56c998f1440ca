"""
Tests for the event bus.
"""

from dispatch_sim.state.event_bus import EventBus, EventType, GameEvent


class TestEventBus:
    """Tests for subscribe and emit."""

    def test_emit_reaches_subscriber(self):
        bus = EventBus()
        received: list[GameEvent] = []
        bus.on(EventType.MISSION_DEPLOYED, received.append)

        event = bus.emit(EventType.MISSION_DEPLOYED, mission_id="m1")
        assert received == [event]
        assert event.data == {"mission_id": "m1"}

    def test_other_types_ignored(self):
        bus = EventBus()
        received = []
        bus.on(EventType.MISSION_COMPLETED, received.append)
        bus.emit(EventType.MISSION_DEPLOYED)
        assert received == []

    def test_no_duplicate_subscriptions(self):
        bus = EventBus()
        received = []
        bus.on(EventType.PROGRESS_RESET, received.append)
        bus.on(EventType.PROGRESS_RESET, received.append)
        assert bus.listener_count(EventType.PROGRESS_RESET) == 1

    def test_off(self):
        bus = EventBus()
        received = []
        bus.on(EventType.PROGRESS_RESET, received.append)
        bus.off(EventType.PROGRESS_RESET, received.append)
        bus.emit(EventType.PROGRESS_RESET)
        assert received == []

    def test_failing_handler_isolated(self):
        """One broken listener does not stop the rest."""
        bus = EventBus()
        received = []

        def broken(event):
            raise ValueError("nope")

        bus.on(EventType.PROGRESS_RESET, broken)
        bus.on(EventType.PROGRESS_RESET, received.append)
        bus.emit(EventType.PROGRESS_RESET)
        assert len(received) == 1

    def test_history(self):
        bus = EventBus(history_limit=3)
        for _ in range(5):
            bus.emit(EventType.MISSION_DEPLOYED)
        bus.emit(EventType.MISSION_COMPLETED)
        assert len(bus.get_history()) == 3
        assert len(bus.get_history(EventType.MISSION_COMPLETED)) == 1

    def test_clear(self):
        bus = EventBus()
        bus.on(EventType.PROGRESS_RESET, lambda e: None)
        bus.clear()
        assert bus.listener_count(EventType.PROGRESS_RESET) == 0

    def test_event_str(self):
        event = GameEvent(type=EventType.PROGRESS_RESET, data={"x": 1})
        assert str(event) == "[progress.reset] {'x': 1}"
