#tests/test_monitoring_dashboard_tui.py
"""
Smoke tests for monitoring.dashboard_tui.SearchDashboard.

Covers:
- Event updates patch internal state
- Layout builds cleanly with and without data
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console

from monitoring.bus import EventBus
from monitoring.dashboard_tui import SearchDashboard
from monitoring.events import ControlCommand, EventType, MonitoringEvent
from monitoring.controller import SchedulerController
from monitoring.observers import EventBusObserver
from nav.pathfinder import AStarPathfinder
from nav.scheduler import CooperativeScheduler
from tests.fakes.worlds import make_options
from world.testing import flat_world


def make_event(event_type: EventType, sid: str, payload: dict) -> MonitoringEvent:
    return MonitoringEvent(
        ts=0.0,
        module="nav.astar",
        event_type=event_type,
        message="",
        payload=payload,
        correlation_id=sid,
    )


def _render(dashboard: SearchDashboard) -> str:
    console = Console(file=StringIO(), width=140, record=True)
    console.print(dashboard._build_layout())
    return console.export_text()


def test_dashboard_tracks_search_lifecycle():
    bus = EventBus()
    dashboard = SearchDashboard(bus, max_finished=2)

    bus.publish(make_event(EventType.SEARCH_STARTED, "s1", {"kind": "astar", "start": [0, 64, 0], "goal": [5, 64, 5]}))
    bus.publish(make_event(EventType.NODE_EXPANDED, "s1", {"coord": [0, 64, 0], "expanded": 1}))
    bus.publish(make_event(EventType.NODE_EXPANDED, "s1", {"coord": [1, 64, 1], "expanded": 2}))
    assert dashboard.active["s1"]["expanded"] == 2

    bus.publish(make_event(EventType.SEARCH_FAILED, "s1", {"reason": "no_path", "stats": {"nodes_expanded": 7}}))
    assert "s1" not in dashboard.active
    assert dashboard.finished[0]["outcome"] == "FAILED"
    assert dashboard.finished[0]["expanded"] == 7
    assert dashboard.totals == {"started": 1, "found": 0, "exhausted": 0, "failed": 1}

    for sid in ("s2", "s3"):
        bus.publish(make_event(EventType.SEARCH_FOUND, sid, {"path_length": 4, "stats": {}}))
    assert [e["id"] for e in dashboard.finished] == ["s3", "s2"]

    text = _render(dashboard)
    assert "Finished Searches" in text
    assert "path 4" in text


def test_dashboard_counts_flood_fill_cells_and_commands():
    bus = EventBus()
    dashboard = SearchDashboard(bus)
    SchedulerController(CooperativeScheduler(), bus)

    bus.publish(make_event(EventType.SEARCH_STARTED, "f1", {"kind": "flood_fill", "start": [5, 64, 5], "goal": None}))
    bus.publish(make_event(EventType.FLOOD_FILL_BATCH, "f1", {"size": 8}))
    bus.publish(make_event(EventType.FLOOD_FILL_BATCH, "f1", {"size": 3}))
    assert dashboard.active["f1"]["cells"] == 11

    bus.publish_command(ControlCommand.pause())
    assert dashboard.last_command == "PAUSE"

    text = _render(dashboard)
    assert "flood_fill" in text
    assert "PAUSE" in text


def test_dashboard_follows_real_search_and_closes():
    bus = EventBus()
    dashboard = SearchDashboard(bus)
    search = AStarPathfinder(
        make_options(flat_world(), (1, 64, 1), (4, 64, 4)),
        observers=[EventBusObserver(bus)],
    )
    search.run_to_completion()

    assert dashboard.totals["found"] == 1
    assert dashboard.finished[0]["kind"] == "astar"
    assert dashboard.finished[0]["path_length"] >= 4

    dashboard.close()
    assert bus.subscriber_count == 0


def test_empty_dashboard_renders():
    dashboard = SearchDashboard(EventBus())
    assert "<none>" in _render(dashboard)
