# src/monitoring/__init__.py
"""Search monitoring: event bus, JSONL logging, observers and the TUI dashboard."""

from .bus import EventBus, default_bus
from .events import ControlCommand, ControlCommandType, EventType, MonitoringEvent
from .logger import JsonFileLogger, log_event
from .observers import EventBusObserver

__all__ = [
    "EventBus",
    "default_bus",
    "ControlCommand",
    "ControlCommandType",
    "EventType",
    "MonitoringEvent",
    "JsonFileLogger",
    "log_event",
    "EventBusObserver",
]
