# A* pathfinding over a GridProvider
# src/nav/pathfinder.py
"""
Single-source A* pathfinding over any GridProvider.

- Euclidean distance heuristic, unit step cost.
- Neighbors: the 8-cell horizontal ring (walk, fall one cell, jump one
  cell), or the 6 axis directions in vertical mode.
- max_nodes bounds the closed set; reaching it raises NodeLimitExceeded.
- Runs as a step sequence: one pop, one neighbor check or one candidate
  per step, so a CooperativeScheduler can interleave it with other work.

This module never writes to the grid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generator, List, Optional, Sequence

from world.coords import Coord
from world.grid import read_cell

from .errors import ConstructionError, NodeLimitExceeded, NoPathFound, PathfindingError
from .frontier import CandidateExpander, Frontier
from .options import PathfindOptions
from .region import neighbor_coords
from .steps import SearchObserver, StepSearch, StepStatus

if TYPE_CHECKING:
    from .scheduler import CooperativeScheduler

log = logging.getLogger(__name__)


@dataclass
class PathfindingResult:
    """Structured result for a pathfinding attempt."""

    path: List[Coord]
    success: bool
    reason: str | None = None


def _check_readable(options: PathfindOptions, coord: Coord, role: str) -> None:
    cell = read_cell(options.grid, coord)
    if cell is None or not cell.is_valid():
        raise ConstructionError(
            f"{role} cell {coord} could not be read",
            details={"role": role, "coord": list(coord)},
        )


class PathSearch(StepSearch):
    """
    Common surface of the start-to-goal searches.

    Construction validates that both endpoints can be read. Call `step()`
    repeatedly, or `pathfind()` to run to completion.
    """

    def __init__(self, options: PathfindOptions, observers: Sequence[SearchObserver] = ()) -> None:
        super().__init__(observers)
        _check_readable(options, options.start, "start")
        _check_readable(options, options.goal, "goal")
        self.options = options
        self._expander = CandidateExpander(options)

    @property
    def start(self) -> Coord:
        return self.options.start

    @property
    def goal(self) -> Coord:
        return self.options.goal

    def pathfind(self, scheduler: Optional["CooperativeScheduler"] = None) -> List[Coord]:
        """
        Run the search to completion and return the path, start and goal
        inclusive. Raises NodeLimitExceeded or NoPathFound on failure.
        """
        result = self._drive(scheduler)
        if result.status is StepStatus.FAILED:
            assert result.error is not None
            raise result.error
        assert result.path is not None
        return list(result.path)


class AStarPathfinder(PathSearch):
    """A* search from options.start to options.goal."""

    kind = "astar"

    def __init__(self, options: PathfindOptions, observers: Sequence[SearchObserver] = ()) -> None:
        super().__init__(options, observers)
        # G cost of the goal node once found; equals len(path) - 1.
        self.goal_cost: Optional[float] = None

    def _run(self) -> Generator[None, None, List[Coord]]:
        goal = self.options.goal
        max_nodes = self.options.max_nodes
        frontier = Frontier(self.options.start, goal)

        while frontier.has_open:
            if frontier.closed_count >= max_nodes:
                raise NodeLimitExceeded(
                    f"A* closed {frontier.closed_count} nodes without reaching {goal}",
                    details={"max_nodes": max_nodes, "goal": list(goal)},
                )

            node_id = frontier.pop_best()
            current = frontier.node(node_id)
            if current.coord == goal:
                return self._finish_path(frontier, node_id)

            frontier.close(node_id)
            self._expanded(current.coord)
            yield

            candidates: List[Coord] = []
            for neighbor in neighbor_coords(current.coord, self._expander.vertical):
                for candidate in self._expander.candidates(neighbor, goal):
                    if candidate not in candidates:
                        candidates.append(candidate)
                yield

            for candidate in candidates:
                if candidate == goal:
                    return self._finish_path(frontier, frontier.child(candidate, node_id))
                new_id = frontier.offer(candidate, node_id)
                if new_id is not None:
                    self._accepted(candidate)
                yield

        raise NoPathFound(
            f"No path from {self.options.start} to {goal}",
            details={"closed": frontier.closed_count},
        )

    def _finish_path(self, frontier: Frontier, node_id: int) -> List[Coord]:
        self.goal_cost = frontier.node(node_id).g_cost
        path = frontier.path_to(node_id)
        log.debug("A* %s path of %d cells: %s", self.search_id, len(path), path)
        return path


def find_path(
    options: PathfindOptions,
    *,
    bidirectional: bool = False,
    scheduler: Optional["CooperativeScheduler"] = None,
    observers: Sequence[SearchObserver] = (),
) -> PathfindingResult:
    """
    Run a search and report the outcome instead of raising.

    Returns a PathfindingResult with:
      - path: list of coordinates including start and goal (empty on failure)
      - success: bool
      - reason: on failure, the error code ("node_limit_exceeded",
        "no_path_found")

    Construction failures (unreadable start/goal) still raise
    ConstructionError: there is no search to report on.
    """
    if bidirectional:
        from .bidirectional import BidirectionalAStarPathfinder

        search: PathSearch = BidirectionalAStarPathfinder(options, observers)
    else:
        search = AStarPathfinder(options, observers)

    try:
        path = search.pathfind(scheduler)
    except PathfindingError as exc:
        return PathfindingResult(path=[], success=False, reason=exc.code)
    return PathfindingResult(path=path, success=True)


__all__ = ["PathSearch", "AStarPathfinder", "PathfindingResult", "find_path"]
