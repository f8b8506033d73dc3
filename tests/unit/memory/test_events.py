"""Unit tests for MemoryEventBus."""

import pytest

from agentmem.memory.enums import MemoryEventType
from agentmem.memory.events import MemoryEventBus
from agentmem.memory.models import MemoryEvent


@pytest.fixture
def bus() -> MemoryEventBus:
    return MemoryEventBus()


class TestEmit:
    """Tests for event delivery."""

    def test_type_listener_receives_event(self, bus: MemoryEventBus) -> None:
        received: list[MemoryEvent] = []
        bus.on(MemoryEventType.MEMORY_ADDED, received.append)

        event = bus.emit(MemoryEventType.MEMORY_ADDED, {"entry_id": "m1"})

        assert received == [event]
        assert event.data == {"entry_id": "m1"}

    def test_other_types_not_delivered(self, bus: MemoryEventBus) -> None:
        received: list[MemoryEvent] = []
        bus.on("memory_added", received.append)
        bus.emit("memory_searched")
        assert received == []

    def test_order_type_then_global(self, bus: MemoryEventBus) -> None:
        """Should call type listeners before global ones, each in subscription order."""
        calls: list[str] = []
        bus.subscribe(lambda e: calls.append("global-1"))
        bus.on("memory_added", lambda e: calls.append("type-1"))
        bus.on("memory_added", lambda e: calls.append("type-2"))
        bus.subscribe(lambda e: calls.append("global-2"))

        bus.emit("memory_added")

        assert calls == ["type-1", "type-2", "global-1", "global-2"]

    def test_listener_failure_isolated(self, bus: MemoryEventBus) -> None:
        """Should keep delivering after a listener raises and not raise to the emitter."""
        calls: list[str] = []

        def broken(event: MemoryEvent) -> None:
            raise RuntimeError("listener bug")

        bus.on("memory_added", broken)
        bus.on("memory_added", lambda e: calls.append("after"))
        bus.subscribe(broken)
        bus.subscribe(lambda e: calls.append("global"))

        bus.emit("memory_added")

        assert calls == ["after", "global"]

    def test_exactly_once_per_registration(self, bus: MemoryEventBus) -> None:
        received: list[MemoryEvent] = []
        bus.subscribe(received.append)
        bus.emit("memory_added")
        bus.emit("memory_deleted")
        assert [e.type for e in received] == [
            MemoryEventType.MEMORY_ADDED,
            MemoryEventType.MEMORY_DELETED,
        ]

    def test_unsubscribe_during_delivery(self, bus: MemoryEventBus) -> None:
        """Should deliver to listeners registered at emit time."""
        calls: list[str] = []

        def once(event: MemoryEvent) -> None:
            calls.append("once")
            bus.unsubscribe(once)

        bus.subscribe(once)
        bus.subscribe(lambda e: calls.append("second"))

        bus.emit("memory_added")
        bus.emit("memory_added")

        assert calls == ["once", "second", "second"]

    def test_unknown_type_rejected(self, bus: MemoryEventBus) -> None:
        with pytest.raises(ValueError):
            bus.emit("memory_exploded")


class TestSubscriptions:
    """Tests for subscribe/unsubscribe bookkeeping."""

    def test_off_is_idempotent(self, bus: MemoryEventBus) -> None:
        def listener(event: MemoryEvent) -> None:
            pass

        bus.off("memory_added", listener)
        bus.unsubscribe(listener)
        bus.on("memory_added", listener)
        bus.off("memory_added", listener)
        bus.off("memory_added", listener)
        assert bus.listener_counts()["memory_added"] == 0

    def test_listener_counts_and_clear(self, bus: MemoryEventBus) -> None:
        bus.subscribe(lambda e: None)
        bus.on("memory_searched", lambda e: None)
        assert bus.listener_counts() == {"global": 1, "memory_searched": 1}

        bus.clear()
        assert bus.listener_counts() == {"global": 0}
