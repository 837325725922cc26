# tick-driven host loop for step searches
# src/nav/scheduler.py
"""
CooperativeScheduler: resumes step sources once per tick.

A step source is anything with a `step() -> StepResult` method (every
search in this package), or a plain iterator, which is treated as
CONTINUE per item and finished when exhausted.

`run_immediate(callback)` queues a zero-argument callable that runs once
at the start of the next tick, before any search is resumed; the debug
marker observer uses it to place markers outside the search's own step.

Single-threaded: nothing here takes a lock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional

from .steps import StepResult, StepStatus

log = logging.getLogger(__name__)

StepCallback = Callable[[StepResult], None]


class _IteratorSource:
    """Adapts a plain iterator to the step() protocol."""

    def __init__(self, iterator: Iterator[Any]) -> None:
        self._iterator = iterator

    def step(self) -> StepResult:
        try:
            item = next(self._iterator)
        except StopIteration as stop:
            value = stop.value
            return StepResult.found(value) if value is not None else StepResult.exhausted()
        return StepResult.proceed(item if isinstance(item, list) else None)


@dataclass
class SearchTask:
    """Handle for one step source running under a scheduler."""

    source: Any
    on_step: Optional[StepCallback] = None
    result: Optional[StepResult] = None
    cancelled: bool = False
    steps: int = 0
    name: str = field(default="")

    @property
    def done(self) -> bool:
        return self.result is not None or self.cancelled

    def cancel(self) -> None:
        """Stop resuming this task; the source itself is left untouched."""
        self.cancelled = True

    def _advance(self) -> StepResult:
        result = self.source.step()
        self.steps += 1
        if self.on_step is not None:
            self.on_step(result)
        if result.done:
            self.result = result
        return result


class CooperativeScheduler:
    """
    Resumes every live task `steps_per_tick` times per tick.

    Immediate callbacks queued during a tick run at the start of the next.
    """

    def __init__(self, steps_per_tick: int = 1) -> None:
        if steps_per_tick < 1:
            raise ValueError(f"steps_per_tick must be >= 1, got {steps_per_tick}")
        self.steps_per_tick = steps_per_tick
        self.ticks = 0
        self._tasks: List[SearchTask] = []
        self._immediate: List[Callable[[], None]] = []

    @property
    def active_tasks(self) -> List[SearchTask]:
        return [t for t in self._tasks if not t.done]

    @property
    def pending_callbacks(self) -> int:
        return len(self._immediate)

    def find_task(self, name: str) -> Optional[SearchTask]:
        for task in self._tasks:
            if task.name == name:
                return task
        return None

    def describe(self) -> Dict[str, Any]:
        """JSON-safe summary of scheduler state."""
        return {
            "ticks": self.ticks,
            "steps_per_tick": self.steps_per_tick,
            "pending_callbacks": len(self._immediate),
            "tasks": [
                {"name": t.name, "steps": t.steps, "cancelled": t.cancelled, "done": t.done}
                for t in self._tasks
            ],
        }

    def run_cooperative(self, step_source: Any, on_step: Optional[StepCallback] = None) -> SearchTask:
        """Register a step source; it is first resumed on the next tick."""
        source = step_source if hasattr(step_source, "step") else _IteratorSource(iter(step_source))
        task = SearchTask(
            source=source,
            on_step=on_step,
            name=getattr(step_source, "search_id", type(step_source).__name__),
        )
        self._tasks.append(task)
        log.debug("Scheduled task %s", task.name)
        return task

    def run_immediate(self, callback: Callable[[], None]) -> None:
        self._immediate.append(callback)

    def tick(self) -> None:
        """Run queued callbacks, then resume each live task."""
        self.ticks += 1

        callbacks, self._immediate = self._immediate, []
        for callback in callbacks:
            callback()

        for task in list(self._tasks):
            for _ in range(self.steps_per_tick):
                if task.done:
                    break
                task._advance()

        self._tasks = [t for t in self._tasks if not t.done]

    def run_until_complete(self, task: SearchTask, max_ticks: Optional[int] = None) -> StepResult:
        """
        Tick until `task` finishes and return its final StepResult.

        Raises RuntimeError if the task was cancelled, TimeoutError if
        `max_ticks` ticks pass first.
        """
        start_tick = self.ticks
        while not task.done:
            if max_ticks is not None and self.ticks - start_tick >= max_ticks:
                raise TimeoutError(f"Task {task.name} still running after {max_ticks} ticks")
            self.tick()

        if task.result is None:
            raise RuntimeError(f"Task {task.name} was cancelled before completing")
        if task.result.status is StepStatus.FAILED:
            log.debug("Task %s failed: %s", task.name, task.result.error)
        return task.result

    def drain(self, max_ticks: Optional[int] = None) -> int:
        """Tick until no tasks or callbacks remain. Returns ticks taken."""
        start_tick = self.ticks
        while self._tasks or self._immediate:
            if max_ticks is not None and self.ticks - start_tick >= max_ticks:
                raise TimeoutError(f"Scheduler not idle after {max_ticks} ticks")
            self.tick()
        return self.ticks - start_tick


__all__ = ["CooperativeScheduler", "SearchTask"]
