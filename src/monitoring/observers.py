# src/monitoring/observers.py
"""
Bridge from search observer hooks to the monitoring EventBus.

Attach an EventBusObserver to any search; every lifecycle hook becomes a
MonitoringEvent whose correlation_id is the search's search_id, so a
dashboard or log reader can group one search's events together.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from nav.steps import SearchObserver, StepResult, StepSearch, StepStatus
from world.coords import Coord

from .bus import EventBus, default_bus
from .events import EventType
from .logger import log_event


def _coord(value: Optional[Coord]) -> Optional[List[int]]:
    return list(value) if value is not None else None


class EventBusObserver(SearchObserver):
    """
    Publishes search lifecycle events.

    NODE_EXPANDED is the only high-volume event; pass
    `emit_node_events=False` to keep logs small on long searches.
    """

    def __init__(self, bus: Optional[EventBus] = None, emit_node_events: bool = True) -> None:
        self.bus = bus or default_bus
        self.emit_node_events = emit_node_events

    def _publish(
        self,
        search: StepSearch,
        event_type: EventType,
        message: str,
        payload: Dict[str, Any],
    ) -> None:
        log_event(
            bus=self.bus,
            module=f"nav.{search.kind}",
            event_type=event_type,
            message=message,
            payload=payload,
            correlation_id=search.search_id,
        )

    def on_search_started(self, search: StepSearch) -> None:
        self._publish(
            search,
            EventType.SEARCH_STARTED,
            f"{search.kind} started",
            {"kind": search.kind, "start": _coord(search.start), "goal": _coord(search.goal)},
        )

    def on_node_expanded(self, search: StepSearch, coord: Coord) -> None:
        if not self.emit_node_events:
            return
        self._publish(
            search,
            EventType.NODE_EXPANDED,
            "node expanded",
            {"coord": list(coord), "expanded": search.stats.nodes_expanded},
        )

    def on_batch(self, search: StepSearch, batch: List[Coord]) -> None:
        self._publish(
            search,
            EventType.FLOOD_FILL_BATCH,
            f"batch of {len(batch)} cells",
            {"size": len(batch), "cells": [list(c) for c in batch]},
        )

    def on_search_finished(self, search: StepSearch, result: StepResult) -> None:
        stats = search.stats.to_dict()
        if result.status is StepStatus.FOUND:
            path = result.path or []
            self._publish(
                search,
                EventType.SEARCH_FOUND,
                f"path of {len(path)} cells found",
                {"path_length": len(path), "path": [list(c) for c in path], "stats": stats},
            )
        elif result.status is StepStatus.EXHAUSTED:
            self._publish(
                search,
                EventType.SEARCH_EXHAUSTED,
                "search exhausted",
                {"stats": stats},
            )
        else:
            error = result.error
            self._publish(
                search,
                EventType.SEARCH_FAILED,
                str(error),
                {
                    "reason": getattr(error, "code", "unknown"),
                    "details": getattr(error, "details", {}),
                    "stats": stats,
                },
            )


__all__ = ["EventBusObserver"]
