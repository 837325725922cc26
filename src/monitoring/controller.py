# SchedulerController linking control commands to a CooperativeScheduler
# src/monitoring/controller.py
"""
Control surface for running searches.

SchedulerController wraps a CooperativeScheduler and exposes external
control via ControlCommand messages on the EventBus.

Supported commands (ControlCommandType):
- PAUSE          -> stop ticking
- RESUME         -> resume ticking
- SINGLE_TICK    -> run exactly one tick, then pause again
- CANCEL_SEARCH  -> stop resuming the search with the given search_id
- DUMP_STATE     -> emit scheduler state as a SNAPSHOT event
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from nav.scheduler import CooperativeScheduler

from .bus import EventBus
from .events import ControlCommand, ControlCommandType, EventType
from .logger import log_event

log = logging.getLogger(__name__)


class SchedulerController:
    """
    The host loop should call `maybe_tick()` instead of `scheduler.tick()`
    directly, so pause/single-tick flags are respected.
    """

    def __init__(self, scheduler: CooperativeScheduler, bus: EventBus) -> None:
        self._scheduler = scheduler
        self._bus = bus
        self._paused = False
        self._single_tick = False
        self._bus.subscribe_commands(self._handle_command)

    # --------------------------------------------------------
    # Command handling
    # --------------------------------------------------------

    def _handle_command(self, cmd: ControlCommand) -> None:
        if cmd.cmd == ControlCommandType.PAUSE:
            self._paused = True
            self._single_tick = False
            self._log_control("PAUSE", {"paused": True})

        elif cmd.cmd == ControlCommandType.RESUME:
            self._paused = False
            self._single_tick = False
            self._log_control("RESUME", {"paused": False})

        elif cmd.cmd == ControlCommandType.SINGLE_TICK:
            self._single_tick = True
            self._paused = False
            self._log_control("SINGLE_TICK", {"single_tick": True})

        elif cmd.cmd == ControlCommandType.CANCEL_SEARCH:
            search_id = str(cmd.args.get("search_id", ""))
            task = self._scheduler.find_task(search_id)
            if task is None:
                log.warning("CANCEL_SEARCH for unknown search %r", search_id)
                self._log_control("CANCEL_SEARCH", {"search_id": search_id, "found": False})
                return
            task.cancel()
            self._log_control("CANCEL_SEARCH", {"search_id": search_id, "found": True})

        elif cmd.cmd == ControlCommandType.DUMP_STATE:
            log_event(
                bus=self._bus,
                module="monitoring.controller",
                event_type=EventType.SNAPSHOT,
                message="Scheduler state snapshot",
                payload={"state": self._scheduler.describe()},
            )

    # --------------------------------------------------------
    # Ticking API for the host loop
    # --------------------------------------------------------

    def maybe_tick(self) -> bool:
        """Tick unless paused. Returns whether a tick ran."""
        if self._paused:
            return False

        self._scheduler.tick()

        if self._single_tick:
            self._paused = True
            self._single_tick = False
            self._log_control("SINGLE_TICK_COMPLETED", {"paused": True})
        return True

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def single_tick_pending(self) -> bool:
        return self._single_tick

    def _log_control(self, cmd_name: str, payload: Dict[str, Any]) -> None:
        log_event(
            bus=self._bus,
            module="monitoring.controller",
            event_type=EventType.CONTROL_COMMAND,
            message=f"Control command: {cmd_name}",
            payload={"cmd": cmd_name, **payload},
        )
