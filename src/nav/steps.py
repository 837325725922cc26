# resumable step protocol shared by every search
# src/nav/steps.py
"""
Step-driven execution for searches.

Every search (A*, bidirectional A*, flood fill) is a StepSearch: an explicit
state object whose `step()` performs one small unit of work and reports
where the search stands:

    CONTINUE   more work to do (optionally carrying a flood fill batch)
    FOUND      a path was found
    EXHAUSTED  a flood fill ran out of cells to visit
    FAILED     the search gave up (NodeLimitExceeded, NoPathFound)

A host loop (see nav.scheduler) calls `step()` once per tick, which bounds
the synchronous work any single search does per unit of host time.

Internally each search writes its body as a generator (`_run`) that yields
after every unit of work; `step()` resumes it once.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from enum import Enum, auto
from time import perf_counter
from typing import TYPE_CHECKING, Any, Dict, Generator, List, Optional, Sequence

from world.coords import Coord

from .errors import PathfindingError

if TYPE_CHECKING:
    from .scheduler import CooperativeScheduler

log = logging.getLogger(__name__)


class StepStatus(Enum):
    CONTINUE = auto()
    FOUND = auto()
    EXHAUSTED = auto()
    FAILED = auto()


@dataclass
class StepResult:
    """Outcome of one `step()` call."""

    status: StepStatus
    path: Optional[List[Coord]] = None
    error: Optional[PathfindingError] = None
    batch: Optional[List[Coord]] = None

    @property
    def done(self) -> bool:
        return self.status is not StepStatus.CONTINUE

    @classmethod
    def proceed(cls, batch: Optional[List[Coord]] = None) -> "StepResult":
        return cls(StepStatus.CONTINUE, batch=batch)

    @classmethod
    def found(cls, path: List[Coord]) -> "StepResult":
        return cls(StepStatus.FOUND, path=list(path))

    @classmethod
    def exhausted(cls) -> "StepResult":
        return cls(StepStatus.EXHAUSTED)

    @classmethod
    def failed(cls, error: PathfindingError) -> "StepResult":
        return cls(StepStatus.FAILED, error=error)


class SearchObserver:
    """
    Hooks a search calls as it runs. All methods are no-ops by default.

    Observers must not influence the search; an observer that raises is
    logged and otherwise ignored.
    """

    def on_search_started(self, search: "StepSearch") -> None:
        pass

    def on_node_expanded(self, search: "StepSearch", coord: Coord) -> None:
        pass

    def on_candidate_accepted(self, search: "StepSearch", coord: Coord) -> None:
        pass

    def on_batch(self, search: "StepSearch", batch: List[Coord]) -> None:
        pass

    def on_search_finished(self, search: "StepSearch", result: StepResult) -> None:
        pass


@dataclass
class SearchStats:
    steps: int = 0
    nodes_expanded: int = 0
    candidates_accepted: int = 0
    cells_yielded: int = 0
    duration_s: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "steps": self.steps,
            "nodes_expanded": self.nodes_expanded,
            "candidates_accepted": self.candidates_accepted,
            "cells_yielded": self.cells_yielded,
            "duration_s": self.duration_s,
        }


class StepSearch:
    """
    Base class: turns a generator body into a `step()` state machine.

    Subclasses implement `_run()`, a generator that yields None (or, for
    flood fill, a batch of coordinates) after each unit of work, returns
    the path on success (None when simply exhausted), and raises a
    PathfindingError on failure.
    """

    kind: str = "search"

    def __init__(self, observers: Sequence[SearchObserver] = ()) -> None:
        self.search_id: str = uuid.uuid4().hex[:12]
        self.stats = SearchStats()
        self._observers: List[SearchObserver] = list(observers)
        self._gen: Optional[Generator[Optional[List[Coord]], None, Optional[List[Coord]]]] = None
        self._result: Optional[StepResult] = None
        self._started_at: float = 0.0

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def start(self) -> Coord:
        raise NotImplementedError

    @property
    def goal(self) -> Optional[Coord]:
        return None

    @property
    def result(self) -> Optional[StepResult]:
        return self._result

    @property
    def done(self) -> bool:
        return self._result is not None

    def add_observer(self, observer: SearchObserver) -> None:
        self._observers.append(observer)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def _run(self) -> Generator[Optional[List[Coord]], None, Optional[List[Coord]]]:
        raise NotImplementedError

    def step(self) -> StepResult:
        """Perform one unit of work. Calling after completion is a no-op."""
        if self._result is not None:
            return self._result

        if self._gen is None:
            self._started_at = perf_counter()
            log.debug("%s %s started at %s", self.kind, self.search_id, self.start)
            self._notify("on_search_started", self)
            self._gen = self._run()

        try:
            batch = next(self._gen)
        except StopIteration as stop:
            path = stop.value
            self._finish(StepResult.found(path) if path is not None else StepResult.exhausted())
            return self._result  # type: ignore[return-value]
        except PathfindingError as exc:
            self._finish(StepResult.failed(exc))
            return self._result  # type: ignore[return-value]

        self.stats.steps += 1
        if batch:
            self.stats.cells_yielded += len(batch)
            self._notify("on_batch", self, batch)
        return StepResult.proceed(batch)

    def run_to_completion(self) -> StepResult:
        """Drive `step()` until the search finishes, with no scheduler."""
        result = self.step()
        while not result.done:
            result = self.step()
        return result

    def _drive(self, scheduler: Optional["CooperativeScheduler"]) -> StepResult:
        if scheduler is None:
            return self.run_to_completion()
        task = scheduler.run_cooperative(self)
        return scheduler.run_until_complete(task)

    def _finish(self, result: StepResult) -> None:
        self._result = result
        self.stats.duration_s = perf_counter() - self._started_at
        self._gen = None
        if result.status is StepStatus.FAILED:
            log.warning(
                "%s %s failed after %d steps: %s",
                self.kind,
                self.search_id,
                self.stats.steps,
                result.error,
            )
        else:
            log.info(
                "%s %s finished (%s) after %d steps, %d nodes expanded",
                self.kind,
                self.search_id,
                result.status.name,
                self.stats.steps,
                self.stats.nodes_expanded,
            )
        self._notify("on_search_finished", self, result)

    # ------------------------------------------------------------------
    # Observer fan-out
    # ------------------------------------------------------------------

    def _notify(self, hook: str, *args: Any) -> None:
        for observer in self._observers:
            try:
                getattr(observer, hook)(*args)
            except Exception:
                # Observers must never break the search.
                log.exception("Search observer %r failed in %s", observer, hook)

    def _expanded(self, coord: Coord) -> None:
        self.stats.nodes_expanded += 1
        self._notify("on_node_expanded", self, coord)

    def _accepted(self, coord: Coord) -> None:
        self.stats.candidates_accepted += 1
        self._notify("on_candidate_accepted", self, coord)


__all__ = [
    "StepStatus",
    "StepResult",
    "SearchObserver",
    "SearchStats",
    "StepSearch",
]
