# src/nav/bidirectional.py
"""
Bidirectional A*: one frontier grows from the start toward the goal, a
second from the goal toward the start, until they touch.

Each round pops the best node of both frontiers. The frontiers meet when
a popped coordinate is already closed on the other side, or when a new
candidate is already open on the other side; the two parent chains are
then spliced at the shared coordinate.

Neighbor rules and the node budget are the same as AStarPathfinder, applied
per frontier: either one closing max_nodes nodes fails the search.
"""

from __future__ import annotations

import logging
from typing import Dict, Generator, List, Optional

from world.coords import Coord

from .errors import NodeLimitExceeded, NoPathFound
from .frontier import Frontier
from .pathfinder import PathSearch
from .region import neighbor_coords

log = logging.getLogger(__name__)


def splice_paths(forward: List[Coord], backward: List[Coord]) -> List[Coord]:
    """
    Join a start-side path and a goal-side path that share a coordinate.

    `forward` runs start -> meeting point, `backward` meeting point -> goal.
    The result is cut at the first coordinate of `forward` that also
    appears in `backward`, so no coordinate is listed twice.
    """
    positions: Dict[Coord, int] = {}
    for index, coord in enumerate(backward):
        positions.setdefault(coord, index)
    for index, coord in enumerate(forward):
        found = positions.get(coord)
        if found is not None:
            return forward[:index] + backward[found:]
    return forward + backward


class BidirectionalAStarPathfinder(PathSearch):
    """A* from both ends at once; see the module docstring."""

    kind = "bidirectional_astar"

    def _run(self) -> Generator[None, None, List[Coord]]:
        start, goal = self.options.start, self.options.goal
        max_nodes = self.options.max_nodes
        forward = Frontier(start, goal)
        backward = Frontier(goal, start)

        while forward.has_open and backward.has_open:
            if forward.closed_count >= max_nodes or backward.closed_count >= max_nodes:
                raise NodeLimitExceeded(
                    f"Bidirectional A* exhausted its node budget between {start} and {goal}",
                    details={
                        "max_nodes": max_nodes,
                        "forward_closed": forward.closed_count,
                        "backward_closed": backward.closed_count,
                    },
                )

            f_id = forward.pop_best()
            b_id = backward.pop_best()
            f_coord = forward.node(f_id).coord
            b_coord = backward.node(b_id).coord

            if f_coord == b_coord:
                return self._join(forward, f_id, backward, b_id)
            met = backward.find_closed(f_coord)
            if met is not None:
                return self._join(forward, f_id, backward, met)
            met = forward.find_closed(b_coord)
            if met is not None:
                return self._join(forward, met, backward, b_id)

            forward.close(f_id)
            backward.close(b_id)
            self._expanded(f_coord)
            self._expanded(b_coord)
            yield

            path = yield from self._expand(forward, f_id, backward, reverse=False)
            if path is not None:
                return path
            path = yield from self._expand(backward, b_id, forward, reverse=True)
            if path is not None:
                return path

        raise NoPathFound(
            f"No path from {start} to {goal}",
            details={
                "forward_closed": forward.closed_count,
                "backward_closed": backward.closed_count,
            },
        )

    def _expand(
        self,
        own: Frontier,
        node_id: int,
        other: Frontier,
        reverse: bool,
    ) -> Generator[None, None, Optional[List[Coord]]]:
        """Expand one popped node of `own`; returns the path if the frontiers meet."""
        target = own.target
        current = own.node(node_id).coord

        candidates: List[Coord] = []
        for neighbor in neighbor_coords(current, self._expander.vertical):
            for candidate in self._expander.candidates(neighbor, target):
                if candidate not in candidates:
                    candidates.append(candidate)
            yield

        for candidate in candidates:
            if candidate == target:
                met_id: Optional[int] = other.root_id
            elif own.is_closed(candidate):
                continue
            else:
                met_id = other.find_open(candidate)

            if met_id is not None:
                child_id = own.child(candidate, node_id)
                if reverse:
                    return self._join(other, met_id, own, child_id)
                return self._join(own, child_id, other, met_id)

            if own.offer(candidate, node_id) is not None:
                self._accepted(candidate)
            yield

        return None

    def _join(self, forward: Frontier, f_id: int, backward: Frontier, b_id: int) -> List[Coord]:
        # backward chain runs meeting point -> goal already
        path = splice_paths(forward.path_to(f_id), backward.arena.chain(b_id))
        log.debug(
            "Frontiers met at %s after %d/%d closed nodes",
            forward.node(f_id).coord,
            forward.closed_count,
            backward.closed_count,
        )
        return path


__all__ = ["BidirectionalAStarPathfinder", "splice_paths"]
