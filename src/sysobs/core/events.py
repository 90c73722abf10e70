"""Event recorders for the ingestion side channel."""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Mapping
from typing import Any, Protocol

from sysobs.core.store import utc_now
from sysobs.models.bundles import EventRecord
from sysobs.models.enums import EventType

logger = logging.getLogger("sysobs.events")


class EventRecorder(Protocol):
    """Fire-and-forget sink for ingestion events. The return value is ignored."""

    def __call__(
        self, event_type: EventType, source: str, data: Mapping[str, Any]
    ) -> object: ...


def log_event(event_type: EventType, source: str, data: Mapping[str, Any]) -> None:
    """Default recorder: write the event to the ``sysobs.events`` logger."""
    logger.info("%s event from %s: %s", event_type.value, source, dict(data))


class EventLog:
    """Bounded in-memory recorder keeping the most recent events."""

    def __init__(self, maxlen: int = 500) -> None:
        self._events: deque[EventRecord] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def __call__(
        self, event_type: EventType, source: str, data: Mapping[str, Any]
    ) -> None:
        record = EventRecord(
            event_type=EventType(event_type).value,
            source=source,
            data=dict(data),
            recorded_at=utc_now(),
        )
        with self._lock:
            self._events.append(record)
        log_event(event_type, source, data)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def recent(self, limit: int = 50, event_type: str | None = None) -> list[EventRecord]:
        """Newest events first, optionally filtered by type."""
        with self._lock:
            events = list(self._events)
        if event_type:
            events = [e for e in events if e.event_type == event_type]
        return list(reversed(events))[:limit]
