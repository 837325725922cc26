"""
End-to-end demo for block-nav.

Usage (from repo root, after `pip install -e .`):

    python -m scripts.demo_search [--profile humanoid] [--log-path logs/nav/events.log]

What this does:

  1. Loads a navigation profile from config/nav.yaml.
  2. Builds a small in-memory world: a stone floor split by a wall with one gap.
  3. Runs A*, bidirectional A* and a flood fill through one
     CooperativeScheduler, all interleaved tick by tick.
  4. Writes every search event to a JSONL log and prints a short summary.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from env.loader import load_nav_profile
from monitoring.bus import EventBus
from monitoring.logger import JsonFileLogger
from monitoring.observers import EventBusObserver
from monitoring.tools import load_last_n_search_summaries
from nav import (
    AStarPathfinder,
    BidirectionalAStarPathfinder,
    CooperativeScheduler,
    FloodFillIterator,
    StepStatus,
)
from nav.logging_config import configure_logging
from world.grid import ChunkedGrid

log = logging.getLogger(__name__)


def _build_world() -> ChunkedGrid:
    grid = ChunkedGrid()
    grid.fill((0, 63, 0), (15, 63, 15), "minecraft:stone")
    for z in range(16):
        if z == 12:
            continue
        grid.set_cell((8, 64, z), "minecraft:stone")
        grid.set_cell((8, 65, z), "minecraft:stone")
    grid.set_cell((13, 64, 3), "minecraft:iron_ore", tags=["ore"])
    return grid


def _print_header() -> None:
    print("=" * 72)
    print(" block-nav · search demo")
    print("=" * 72)
    print()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run demo searches over a small world.")
    parser.add_argument("--profile", default=None, help="Profile name in config/nav.yaml.")
    parser.add_argument("--log-path", default="logs/nav/events.log", help="JSONL event log.")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    _print_header()

    profile = load_nav_profile(args.profile)
    grid = _build_world()
    bus = EventBus()
    observer = EventBusObserver(bus, emit_node_events=False)
    scheduler = CooperativeScheduler(steps_per_tick=4)

    start, goal = (2, 64, 2), (13, 64, 2)
    searches = [
        AStarPathfinder(profile.pathfind_options(start, goal, grid), observers=[observer]),
        BidirectionalAStarPathfinder(profile.pathfind_options(start, goal, grid), observers=[observer]),
        FloodFillIterator(profile.flood_fill_options(start, grid), observers=[observer]),
    ]

    log_path = Path(args.log_path)
    with JsonFileLogger(log_path, bus):
        tasks = [scheduler.run_cooperative(search) for search in searches]
        ticks = scheduler.drain()

    print(f"[OK] {len(tasks)} searches finished in {ticks} ticks (profile '{profile.name}')")
    failures = 0
    for search, task in zip(searches, tasks):
        result = task.result
        assert result is not None
        if result.status is StepStatus.FOUND:
            print(f"  {search.kind:<20} FOUND      path of {len(result.path or [])} cells")
        elif result.status is StepStatus.EXHAUSTED:
            print(f"  {search.kind:<20} EXHAUSTED  {search.stats.cells_yielded} cells reachable")
        else:
            failures += 1
            print(f"  {search.kind:<20} FAILED     {result.error}")

    print()
    print(f"Event log: {log_path}")
    for summary in load_last_n_search_summaries(log_path, last_n=len(searches)):
        print(f"  {summary.search_id}  {str(summary.kind):<20} {summary.outcome}  expanded={summary.nodes_expanded}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
