# rich-based TUI dashboard
# src/monitoring/dashboard_tui.py
"""
TUI dashboard for running searches.

A lightweight terminal UI (using `rich`) that subscribes to the monitoring
EventBus and renders:

- Active searches:
    - Kind (astar / bidirectional_astar / flood_fill)
    - Start and goal
    - Nodes expanded so far

- Finished searches (most recent first):
    - Outcome (FOUND / EXHAUSTED / FAILED)
    - Path length or cells visited
    - Failure reason

- Totals:
    - Searches started / found / failed
    - Last control command

This runs entirely in-process. No web server, no external services.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .bus import EventBus, default_bus
from .events import EventType, MonitoringEvent

_FINISHED_EVENTS = {
    EventType.SEARCH_FOUND: "FOUND",
    EventType.SEARCH_EXHAUSTED: "EXHAUSTED",
    EventType.SEARCH_FAILED: "FAILED",
}


def _fmt_coord(value: Any) -> str:
    if not value:
        return "-"
    return "(" + ", ".join(str(v) for v in value) + ")"


class SearchDashboard:
    """
    Live terminal dashboard bound to a monitoring.EventBus.

    Events only patch a small in-memory state; rendering happens on the
    dashboard's own refresh loop.
    """

    def __init__(self, bus: EventBus, max_finished: int = 10, console: Optional[Console] = None) -> None:
        self._bus = bus
        self._console = console or Console()
        self._max_finished = max_finished
        self._lock = threading.Lock()

        self.active: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        self.finished: List[Dict[str, Any]] = []
        self.totals: Dict[str, int] = {"started": 0, "found": 0, "exhausted": 0, "failed": 0}
        self.last_command: Optional[str] = None

        self._bus.subscribe(self._on_event)

    def close(self) -> None:
        self._bus.unsubscribe(self._on_event)

    # --------------------------------------------------------
    # Event handler
    # --------------------------------------------------------

    def _on_event(self, event: MonitoringEvent) -> None:
        et = event.event_type
        sid = event.correlation_id or "?"

        with self._lock:
            if et == EventType.SEARCH_STARTED:
                self.totals["started"] += 1
                self.active[sid] = {
                    "id": sid,
                    "kind": event.payload.get("kind", event.module),
                    "start": event.payload.get("start"),
                    "goal": event.payload.get("goal"),
                    "expanded": 0,
                    "cells": 0,
                }

            elif et == EventType.NODE_EXPANDED:
                entry = self.active.get(sid)
                if entry is not None:
                    entry["expanded"] = event.payload.get("expanded", entry["expanded"] + 1)

            elif et == EventType.FLOOD_FILL_BATCH:
                entry = self.active.get(sid)
                if entry is not None:
                    entry["cells"] += int(event.payload.get("size", 0))

            elif et in _FINISHED_EVENTS:
                outcome = _FINISHED_EVENTS[et]
                self.totals[outcome.lower()] += 1
                entry = self.active.pop(sid, None) or {"id": sid, "kind": event.module}
                stats = event.payload.get("stats", {}) or {}
                entry.update(
                    {
                        "outcome": outcome,
                        "expanded": stats.get("nodes_expanded", entry.get("expanded", 0)),
                        "path_length": event.payload.get("path_length"),
                        "cells": stats.get("cells_yielded", entry.get("cells", 0)),
                        "reason": event.payload.get("reason"),
                    }
                )
                self.finished.insert(0, entry)
                del self.finished[self._max_finished:]

            elif et == EventType.CONTROL_COMMAND:
                self.last_command = str(event.payload.get("cmd", event.message))

    # --------------------------------------------------------
    # Rendering helpers
    # --------------------------------------------------------

    def _render_active_panel(self) -> Panel:
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("Search", style="bold")
        table.add_column("Kind")
        table.add_column("Start")
        table.add_column("Goal")
        table.add_column("Expanded", justify="right")

        if self.active:
            for entry in self.active.values():
                table.add_row(
                    entry["id"],
                    str(entry["kind"]),
                    _fmt_coord(entry["start"]),
                    _fmt_coord(entry["goal"]),
                    str(entry["expanded"] or entry["cells"]),
                )
        else:
            table.add_row("<none>", "-", "-", "-", "-")

        return Panel(table, title="Active Searches", border_style="cyan")

    def _render_finished_panel(self) -> Panel:
        table = Table(show_header=True, header_style="bold yellow", expand=True)
        table.add_column("Search", style="bold")
        table.add_column("Kind")
        table.add_column("Outcome")
        table.add_column("Expanded", justify="right")
        table.add_column("Result")

        if not self.finished:
            table.add_row("<none>", "-", "-", "-", "-")

        for entry in self.finished:
            outcome = entry["outcome"]
            style = {"FOUND": "green", "EXHAUSTED": "blue", "FAILED": "red"}[outcome]
            if outcome == "FOUND":
                detail = f"path {entry.get('path_length')}"
            elif outcome == "EXHAUSTED":
                detail = f"{entry.get('cells', 0)} cells"
            else:
                detail = str(entry.get("reason") or "unknown")
            table.add_row(
                entry["id"],
                str(entry["kind"]),
                f"[{style}]{outcome}[/{style}]",
                str(entry.get("expanded", 0)),
                detail,
            )

        return Panel(table, title="Finished Searches", border_style="yellow")

    def _render_totals_panel(self) -> Panel:
        txt = Text()
        for key in ("started", "found", "exhausted", "failed"):
            txt.append(f"{key.capitalize()}: ", style="bold")
            txt.append(f"{self.totals[key]}   ")
        txt.append("\nLast command: ", style="bold")
        txt.append(self.last_command or "<none>")
        return Panel(txt, title="Totals", border_style="magenta")

    def _build_layout(self) -> Layout:
        layout = Layout()
        layout.split(
            Layout(name="totals", size=4),
            Layout(name="middle", ratio=1),
        )
        with self._lock:
            layout["totals"].update(self._render_totals_panel())
            layout["middle"].split_row(
                Layout(name="active"),
                Layout(name="finished"),
            )
            layout["active"].update(self._render_active_panel())
            layout["finished"].update(self._render_finished_panel())
        return layout

    # --------------------------------------------------------
    # Main loop
    # --------------------------------------------------------

    def run(
        self,
        refresh_per_second: float = 4.0,
        stop: Optional[threading.Event] = None,
    ) -> None:
        """
        Run the TUI loop until `stop` is set (forever if None).

        This blocks the current thread; searches usually tick on another.
        """
        refresh_delay = 1.0 / max(refresh_per_second, 0.1)
        with Live(self._build_layout(), console=self._console, refresh_per_second=refresh_per_second) as live:
            while stop is None or not stop.is_set():
                live.update(self._build_layout())
                time.sleep(refresh_delay)


def run_dashboard_with_default_bus() -> None:
    """Spawn a dashboard bound to monitoring.bus.default_bus."""
    SearchDashboard(default_bus).run()


if __name__ == "__main__":
    run_dashboard_with_default_bus()
