"""
Audit event emitter — one-way hand-off of TipEvent / MemoEvent records.

emit() never raises and returns nothing; sinks are plain callables. A failing
sink is logged and skipped, the tip outcome is already decided by then.

Default sink writes one JSON line per event to the "audit" logger.
"""
import json
import logging
import threading
import time
from collections import deque
from typing import Callable, Union

from domain.tips import MemoEvent, TipEvent

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("audit")

AuditEvent = Union[TipEvent, MemoEvent]
EventSink = Callable[[AuditEvent], None]
Clock = Callable[[], int]


def system_clock() -> int:
    """Unix timestamp in seconds."""
    return int(time.time())


def log_sink(event: AuditEvent) -> None:
    audit_logger.info(json.dumps(event.to_dict(), ensure_ascii=False, sort_keys=True))


class MemorySink:
    """Keeps the most recent events in memory. Used by tests and simulation."""

    def __init__(self, maxlen: int = 1000):
        self._events: deque = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def __call__(self, event: AuditEvent) -> None:
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> list[AuditEvent]:
        with self._lock:
            return list(self._events)

    def of_type(self, event_type: type) -> list[AuditEvent]:
        return [e for e in self.events if isinstance(e, event_type)]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()


class EventEmitter:
    """
    Hands each event to every sink in turn on the caller's thread.

    Sinks must return quickly (logging, in-memory buffers). A sink that talks
    to an external system should enqueue and return, e.g. behind a
    logging.handlers.QueueHandler, or it delays the tip result.
    """

    def __init__(self, sinks: list[EventSink] | None = None):
        self._sinks: list[EventSink] = list(sinks) if sinks is not None else [log_sink]

    def add_sink(self, sink: EventSink) -> None:
        self._sinks.append(sink)

    def emit(self, event: AuditEvent) -> None:
        for sink in self._sinks:
            try:
                sink(event)
            except Exception as e:
                logger.error(f"Audit sink {sink!r} failed for {event.name}: {e}", exc_info=True)
