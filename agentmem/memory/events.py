"""In-process publish/subscribe for memory lifecycle events."""

from collections.abc import Callable
from typing import Any

from agentmem.memory.enums import MemoryEventType
from agentmem.memory.models import MemoryEvent
from agentmem.observability.logging import get_logger
from agentmem.observability.metrics import LISTENER_ERRORS

logger = get_logger(__name__)

MemoryListener = Callable[[MemoryEvent], None]


class MemoryEventBus:
    """Synchronous fan-out of memory events with per-listener error isolation.

    Type-specific listeners run before global listeners, each group in
    subscription order. A listener that raises is logged and skipped; the
    emitter never sees the exception.
    """

    def __init__(self) -> None:
        self._listeners: dict[MemoryEventType, list[MemoryListener]] = {}
        self._global_listeners: list[MemoryListener] = []

    def emit(self, type: MemoryEventType | str, data: dict[str, Any] | None = None) -> MemoryEvent:
        """Deliver an event to every listener registered right now."""
        event = MemoryEvent(type=MemoryEventType(type), data=data or {})

        # Snapshot so listeners may (un)subscribe during delivery
        for listener in list(self._listeners.get(event.type, ())):
            self._deliver(listener, event, scope="type")
        for listener in list(self._global_listeners):
            self._deliver(listener, event, scope="global")
        return event

    def _deliver(self, listener: MemoryListener, event: MemoryEvent, *, scope: str) -> None:
        try:
            listener(event)
        except Exception as e:
            LISTENER_ERRORS.labels(event_type=event.type.value).inc()
            logger.error(
                "memory_listener_failed",
                event_type=event.type.value,
                scope=scope,
                listener=getattr(listener, "__qualname__", repr(listener)),
                error=str(e),
                exc_info=True,
            )

    def on(self, type: MemoryEventType | str, callback: MemoryListener) -> None:
        """Subscribe to a specific event type."""
        self._listeners.setdefault(MemoryEventType(type), []).append(callback)

    def off(self, type: MemoryEventType | str, callback: MemoryListener) -> None:
        """Unsubscribe from a specific event type; unknown callbacks are ignored."""
        listeners = self._listeners.get(MemoryEventType(type))
        if listeners and callback in listeners:
            listeners.remove(callback)

    def subscribe(self, callback: MemoryListener) -> None:
        """Subscribe to all events."""
        self._global_listeners.append(callback)

    def unsubscribe(self, callback: MemoryListener) -> None:
        """Unsubscribe from all events; unknown callbacks are ignored."""
        if callback in self._global_listeners:
            self._global_listeners.remove(callback)

    def clear(self) -> None:
        """Remove all listeners."""
        self._listeners.clear()
        self._global_listeners = []

    def listener_counts(self) -> dict[str, int]:
        """Listener counts by event type, plus "global"."""
        counts = {"global": len(self._global_listeners)}
        for event_type, listeners in self._listeners.items():
            counts[event_type.value] = len(listeners)
        return counts
