# JSON logger subscribing to EventBus
# src/monitoring/logger.py
"""
Structured search logs.

Provides:
- JsonFileLogger: subscribes to an EventBus and writes MonitoringEvents as JSONL.
- log_event: convenience helper for publishing MonitoringEvents via the EventBus.

Usage:

    from pathlib import Path
    from monitoring.bus import EventBus
    from monitoring.logger import JsonFileLogger

    bus = EventBus()
    with JsonFileLogger(Path("logs/nav/events.log"), bus):
        ...  # run searches with an EventBusObserver(bus)
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from .bus import EventBus
from .events import EventType, MonitoringEvent

log = logging.getLogger(__name__)


# ============================================================
# JSONL File Logger
# ============================================================

class JsonFileLogger:
    """
    JSON-lines sink for MonitoringEvent instances.

    One JSON object per line, UTF-8, parent directories created on demand.
    Filtering by event type is optional; by default everything is written.
    """

    def __init__(
        self,
        path: Path,
        bus: EventBus,
        event_types: Optional[set[EventType]] = None,
    ) -> None:
        self._path = Path(path)
        self._bus = bus
        self._event_types = event_types
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self._path.open("a", encoding="utf-8")
        self.written = 0
        bus.subscribe(self._on_event)

    @property
    def path(self) -> Path:
        return self._path

    def _on_event(self, event: MonitoringEvent) -> None:
        if self._event_types is not None and event.event_type not in self._event_types:
            return
        line = json.dumps(event.to_dict(), ensure_ascii=False)
        try:
            self._file.write(line + "\n")
            self._file.flush()
        except (OSError, ValueError):
            # Disk full or closed handle: keep the search running.
            log.warning("Could not write monitoring event to %s", self._path, exc_info=True)
            return
        self.written += 1

    def close(self) -> None:
        """Unsubscribe and close the file. Safe to call twice."""
        self._bus.unsubscribe(self._on_event)
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> "JsonFileLogger":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


# ============================================================
# Convenience helper for emitting events
# ============================================================

def log_event(
    bus: EventBus,
    module: str,
    event_type: EventType,
    message: str,
    payload: Optional[Dict[str, Any]] = None,
    correlation_id: Optional[str] = None,
) -> MonitoringEvent:
    """
    Create and publish a MonitoringEvent, returning it.

        log_event(
            bus=bus,
            module="nav.astar",
            event_type=EventType.SEARCH_FOUND,
            message="Path found",
            payload={"path_length": 12},
            correlation_id=search.search_id,
        )
    """
    event = MonitoringEvent(
        ts=time.time(),
        module=module,
        event_type=event_type,
        message=message,
        payload=payload or {},
        correlation_id=correlation_id,
    )
    bus.publish(event)
    return event
