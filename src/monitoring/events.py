# path: src/monitoring/events.py
"""
Event and command schemas for search monitoring.

This module defines:
- MonitoringEvent (structured search lifecycle events)
- EventType enum
- ControlCommandType enum
- ControlCommand for human/tool-issued scheduler controls

All events are JSON-serializable via `.to_dict()` and are intended
for use with monitoring.bus.EventBus and monitoring.logger.JsonFileLogger.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum, auto
from typing import Any, Dict, Optional


# ============================================================
# Event Types
# ============================================================

class EventType(Enum):
    """Typed monitoring events emitted by searches and the scheduler."""

    # Search lifecycle
    SEARCH_STARTED = auto()
    NODE_EXPANDED = auto()
    SEARCH_FOUND = auto()
    SEARCH_FAILED = auto()
    SEARCH_EXHAUSTED = auto()   # flood fill visited everything reachable

    # Flood fill produced a batch of reachable cells
    FLOOD_FILL_BATCH = auto()

    # Scheduler state snapshot (on request)
    SNAPSHOT = auto()

    # Control surface events
    CONTROL_COMMAND = auto()

    # Generic log messages
    LOG = auto()


# ============================================================
# Monitoring Event Structure
# ============================================================

@dataclass
class MonitoringEvent:
    """
    Event emitted by a search, the scheduler or the control surface.

    All fields must be JSON-safe.
    """

    ts: float                   # UNIX timestamp (seconds)
    module: str                 # Source module string ("nav.astar", "nav.scheduler", etc.)
    event_type: EventType       # Enum describing the event class
    message: str                # Short human-readable description
    payload: Dict[str, Any]     # Structured data (coords, stats, failure reason)
    correlation_id: Optional[str] = None  # search_id; groups one search's events

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe dict for loggers."""
        data = asdict(self)
        data["event_type"] = self.event_type.name  # store name, not enum
        return data


# ============================================================
# Control Commands
# ============================================================

class ControlCommandType(Enum):
    """
    Commands that humans or tools can send to a running scheduler.
    """

    PAUSE = auto()          # Stop ticking
    RESUME = auto()         # Resume ticking
    SINGLE_TICK = auto()    # Run exactly one tick, then pause again
    CANCEL_SEARCH = auto()  # Stop resuming one search (by search_id)
    DUMP_STATE = auto()     # Emit a SNAPSHOT event


@dataclass
class ControlCommand:
    """
    Represents an external command for the scheduler.

    Sent through EventBus.publish_command(), then interpreted by
    monitoring.controller.SchedulerController.
    """

    cmd: ControlCommandType             # The specific command
    args: Dict[str, Any]                # Additional arguments for command execution

    @staticmethod
    def pause() -> "ControlCommand":
        return ControlCommand(ControlCommandType.PAUSE, {})

    @staticmethod
    def resume() -> "ControlCommand":
        return ControlCommand(ControlCommandType.RESUME, {})

    @staticmethod
    def single_tick() -> "ControlCommand":
        return ControlCommand(ControlCommandType.SINGLE_TICK, {})

    @staticmethod
    def cancel_search(search_id: str) -> "ControlCommand":
        return ControlCommand(ControlCommandType.CANCEL_SEARCH, {"search_id": search_id})

    @staticmethod
    def dump_state() -> "ControlCommand":
        return ControlCommand(ControlCommandType.DUMP_STATE, {})
