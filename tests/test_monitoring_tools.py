#tests/test_monitoring_tools.py
"""
Tests for monitoring.tools: search summaries rebuilt from JSONL logs.
"""

from __future__ import annotations

import json
from pathlib import Path

from monitoring.bus import EventBus
from monitoring.logger import JsonFileLogger
from monitoring.observers import EventBusObserver
from monitoring.tools import load_events_from_jsonl, load_last_n_search_summaries, main
from nav.options import FloodFillOptions
from nav.flood_fill import FloodFillIterator
from nav.pathfinder import AStarPathfinder
from tests.fakes.worlds import make_options
from world.testing import flat_world


def _write_log(path: Path) -> tuple:
    bus = EventBus()
    grid = flat_world()
    with JsonFileLogger(path, bus):
        found = AStarPathfinder(
            make_options(grid, (1, 64, 1), (4, 64, 1)),
            observers=[EventBusObserver(bus)],
        )
        found.run_to_completion()

        failed = AStarPathfinder(
            make_options(grid, (1, 64, 1), (10, 64, 10), max_nodes=1),
            observers=[EventBusObserver(bus)],
        )
        failed.run_to_completion()

        flood = FloodFillIterator(
            FloodFillOptions(start=(5, 64, 5), grid=grid, max_distance=1.5, passable_type_ids={"minecraft:air"}),
            observers=[EventBusObserver(bus)],
        )
        cells = list(flood)
    return found, failed, flood, cells


def test_summaries_are_rebuilt_per_search(tmp_path: Path):
    log_path = tmp_path / "events.log"
    found, failed, flood, cells = _write_log(log_path)

    summaries = {s.search_id: s for s in load_last_n_search_summaries(log_path, last_n=10)}
    assert set(summaries) == {found.search_id, failed.search_id, flood.search_id}

    ok = summaries[found.search_id]
    assert ok.kind == "astar"
    assert ok.outcome == "FOUND"
    assert ok.start == [1, 64, 1] and ok.goal == [4, 64, 1]
    assert ok.path_length == len(found.result.path)

    bad = summaries[failed.search_id]
    assert bad.outcome == "FAILED"
    assert bad.reason == "node_limit_exceeded"

    fill = summaries[flood.search_id]
    assert fill.outcome == "EXHAUSTED"
    assert fill.cells_yielded == len(cells)
    assert fill.goal is None


def test_outcome_filter_and_limit(tmp_path: Path):
    log_path = tmp_path / "events.log"
    _, failed, _, _ = _write_log(log_path)

    only_failed = load_last_n_search_summaries(log_path, last_n=5, outcome="FAILED")
    assert [s.search_id for s in only_failed] == [failed.search_id]
    assert len(load_last_n_search_summaries(log_path, last_n=2)) == 2


def test_malformed_lines_are_skipped(tmp_path: Path):
    log_path = tmp_path / "events.log"
    log_path.write_text(
        "not json\n"
        "\n"
        + json.dumps({"event_type": "NOPE"}) + "\n"
        + json.dumps(
            {
                "ts": 1.0,
                "module": "nav.astar",
                "event_type": "SEARCH_STARTED",
                "message": "",
                "payload": {"kind": "astar"},
                "correlation_id": "s1",
            }
        )
        + "\n",
        encoding="utf-8",
    )
    events = load_events_from_jsonl(log_path)
    assert len(events) == 1

    (summary,) = load_last_n_search_summaries(log_path, last_n=5)
    assert summary.search_id == "s1"
    assert summary.outcome is None


def test_missing_log_gives_no_summaries(tmp_path: Path):
    assert load_last_n_search_summaries(tmp_path / "absent.log", last_n=3) == []


def test_cli_prints_json(tmp_path: Path, capsys):
    log_path = tmp_path / "events.log"
    _write_log(log_path)

    main(["inspect-searches", "--log-path", str(log_path), "-n", "1", "--outcome", "FOUND"])
    out = json.loads(capsys.readouterr().out)
    assert len(out) == 1
    assert out[0]["outcome"] == "FOUND"
