#src/monitoring/tools.py
"""
Human-facing utilities for search logs.

Provides:

- Search inspector:
    - Load the JSONL log written by JsonFileLogger.
    - Group events by search (correlation_id).
    - Summarize kind, endpoints, outcome, path length, nodes expanded and
      failure reason for the last N searches.

- Monitoring CLI (argparse):
    - inspect-searches [--log-path PATH] [-n N] [--outcome FOUND|EXHAUSTED|FAILED]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .events import EventType, MonitoringEvent

log = logging.getLogger(__name__)

JsonDict = Dict[str, Any]

_OUTCOMES = {
    EventType.SEARCH_FOUND: "FOUND",
    EventType.SEARCH_EXHAUSTED: "EXHAUSTED",
    EventType.SEARCH_FAILED: "FAILED",
}


# ============================================================
# Search inspector
# ============================================================

@dataclass
class SearchSummary:
    """
    One search reconstructed from monitoring logs.

    `outcome` is None while the log holds no finish event for the search
    (still running, or the host died mid-search).
    """
    search_id: str
    kind: Optional[str]
    start: Optional[List[int]]
    goal: Optional[List[int]]
    outcome: Optional[str]
    path_length: Optional[int]
    nodes_expanded: int
    cells_yielded: int
    reason: Optional[str]
    duration_s: Optional[float]

    def to_dict(self) -> JsonDict:
        return asdict(self)


def load_events_from_jsonl(path: Path) -> List[MonitoringEvent]:
    """
    Load MonitoringEvents from a JSONL file produced by JsonFileLogger.

    Blank lines are ignored; malformed lines or unknown event types are
    skipped with a warning. A missing file yields no events.
    """
    if not path.exists():
        return []

    events: List[MonitoringEvent] = []
    with path.open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                data = json.loads(line)
                etype = EventType[data["event_type"]]
            except (json.JSONDecodeError, KeyError, TypeError):
                log.warning("Skipping unreadable event at %s:%d", path, lineno)
                continue

            events.append(
                MonitoringEvent(
                    ts=data.get("ts", 0.0),
                    module=data.get("module", ""),
                    event_type=etype,
                    message=data.get("message", ""),
                    payload=data.get("payload") or {},
                    correlation_id=data.get("correlation_id"),
                )
            )
    return events


def _group_events_by_search(events: Iterable[MonitoringEvent]) -> Dict[str, List[MonitoringEvent]]:
    """Events without a correlation_id (controller, CLI) are not search events."""
    grouped: Dict[str, List[MonitoringEvent]] = {}
    for evt in events:
        if not evt.correlation_id:
            continue
        grouped.setdefault(evt.correlation_id, []).append(evt)
    return grouped


def _build_search_summary(search_id: str, events: List[MonitoringEvent]) -> SearchSummary:
    kind: Optional[str] = None
    start: Optional[List[int]] = None
    goal: Optional[List[int]] = None
    outcome: Optional[str] = None
    path_length: Optional[int] = None
    nodes_expanded = 0
    cells_yielded = 0
    reason: Optional[str] = None
    duration_s: Optional[float] = None

    for evt in events:
        payload = evt.payload or {}

        if evt.event_type == EventType.SEARCH_STARTED:
            kind = payload.get("kind", kind)
            start = payload.get("start", start)
            goal = payload.get("goal", goal)

        elif evt.event_type == EventType.NODE_EXPANDED:
            nodes_expanded = max(nodes_expanded, int(payload.get("expanded", 0)))

        elif evt.event_type == EventType.FLOOD_FILL_BATCH:
            cells_yielded += int(payload.get("size", 0))

        elif evt.event_type in _OUTCOMES:
            outcome = _OUTCOMES[evt.event_type]
            path_length = payload.get("path_length")
            reason = payload.get("reason")
            stats = payload.get("stats") or {}
            # final stats win over anything counted from streamed events
            nodes_expanded = stats.get("nodes_expanded", nodes_expanded)
            cells_yielded = stats.get("cells_yielded", cells_yielded)
            duration_s = stats.get("duration_s")

    if kind is None and events:
        kind = events[0].module.rpartition(".")[2] or None

    return SearchSummary(
        search_id=search_id,
        kind=kind,
        start=start,
        goal=goal,
        outcome=outcome,
        path_length=path_length,
        nodes_expanded=nodes_expanded,
        cells_yielded=cells_yielded,
        reason=reason,
        duration_s=duration_s,
    )


def load_last_n_search_summaries(
    log_path: Path,
    last_n: int,
    outcome: Optional[str] = None,
) -> List[SearchSummary]:
    """
    Summaries of the last N searches in `log_path`, newest first.

    Searches are ordered by the timestamp of their last event; `outcome`
    (FOUND / EXHAUSTED / FAILED) filters before the limit is applied.
    """
    grouped = _group_events_by_search(load_events_from_jsonl(log_path))

    def search_last_ts(item: Tuple[str, List[MonitoringEvent]]) -> float:
        _, evts = item
        return max((e.ts for e in evts), default=0.0)

    summaries: List[SearchSummary] = []
    for search_id, evts in sorted(grouped.items(), key=search_last_ts, reverse=True):
        summary = _build_search_summary(search_id, evts)
        if outcome is not None and summary.outcome != outcome:
            continue
        summaries.append(summary)
        if len(summaries) >= last_n:
            break
    return summaries


# ============================================================
# Monitoring CLI
# ============================================================

def _cmd_inspect_searches(args: argparse.Namespace) -> None:
    summaries = load_last_n_search_summaries(
        Path(args.log_path),
        last_n=args.n,
        outcome=args.outcome,
    )
    json.dump([s.to_dict() for s in summaries], sys.stdout, indent=2, sort_keys=True)
    print()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="block-nav-monitor",
        description="Inspect block-nav search logs.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_inspect = sub.add_parser("inspect-searches", help="Summarize the last N searches from a JSONL log.")
    p_inspect.add_argument(
        "--log-path",
        type=str,
        default="logs/nav/events.log",
        help="Path to monitoring JSONL log file.",
    )
    p_inspect.add_argument(
        "-n",
        type=int,
        default=5,
        help="Number of recent searches to show.",
    )
    p_inspect.add_argument(
        "--outcome",
        choices=sorted(_OUTCOMES.values()),
        default=None,
        help="Only show searches that finished this way.",
    )
    p_inspect.set_defaults(func=_cmd_inspect_searches)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """
    Entry point for the monitoring CLI.

        python -m monitoring.tools inspect-searches -n 3
        python -m monitoring.tools inspect-searches --outcome FAILED
    """
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
