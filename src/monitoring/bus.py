# EventBus for search monitoring events and control commands
# src/monitoring/bus.py
"""
In-process pub/sub for search monitoring.

- Subscribers receive MonitoringEvent objects.
- Command handlers receive ControlCommand objects.
- Used by:
    - monitoring.observers.EventBusObserver (publisher)
    - JsonFileLogger and SearchDashboard (subscribers)
    - SchedulerController (command handler)

Searches run on a single thread, but dashboards and tools may publish
commands from another one, so the subscriber lists are lock-protected.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Callable, List

from .events import ControlCommand, MonitoringEvent

log = logging.getLogger(__name__)


# ============================================================
# Type aliases
# ============================================================

SubscriberFn = Callable[[MonitoringEvent], None]
CommandHandlerFn = Callable[[ControlCommand], None]


# ============================================================
# Event Bus
# ============================================================

class EventBus:
    """
    Thread-safe event bus for monitoring events and control commands.

    Each publish iterates over a snapshot of the subscriber list, taken
    under the lock, so subscribers may (un)subscribe from inside a callback.
    """

    def __init__(self) -> None:
        self._subscribers: List[SubscriberFn] = []
        self._cmd_handlers: List[CommandHandlerFn] = []
        self._lock = Lock()
        self.dropped = 0

    # --------------------------------------------------------
    # Subscription API
    # --------------------------------------------------------

    def subscribe(self, fn: SubscriberFn) -> None:
        with self._lock:
            self._subscribers.append(fn)

    def unsubscribe(self, fn: SubscriberFn) -> None:
        """Safe to call even if `fn` is not subscribed."""
        with self._lock:
            if fn in self._subscribers:
                self._subscribers.remove(fn)

    def subscribe_commands(self, fn: CommandHandlerFn) -> None:
        with self._lock:
            self._cmd_handlers.append(fn)

    def unsubscribe_commands(self, fn: CommandHandlerFn) -> None:
        with self._lock:
            if fn in self._cmd_handlers:
                self._cmd_handlers.remove(fn)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    # --------------------------------------------------------
    # Publish API
    # --------------------------------------------------------

    def publish(self, event: MonitoringEvent) -> None:
        """
        Deliver `event` to every subscriber.

        A subscriber that raises is logged and counted in `dropped`; the
        remaining subscribers still receive the event.
        """
        with self._lock:
            subscribers = list(self._subscribers)

        for fn in subscribers:
            try:
                fn(event)
            except Exception:
                self.dropped += 1
                log.exception("Monitoring subscriber %r failed on %s", fn, event.event_type.name)

    def publish_command(self, cmd: ControlCommand) -> None:
        with self._lock:
            handlers = list(self._cmd_handlers)

        for fn in handlers:
            try:
                fn(cmd)
            except Exception:
                self.dropped += 1
                log.exception("Command handler %r failed on %s", fn, cmd.cmd.name)


# Process-wide bus for hosts that don't want to pass one around.
default_bus = EventBus()
