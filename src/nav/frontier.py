# src/nav/frontier.py
"""
Search bookkeeping shared by the A* pathfinders.

- NodeArena: append-only node storage; parents are arena indices.
- Frontier: one open/closed set pair growing from an origin toward a target.
- CandidateExpander: turns a neighbor coordinate into the cell(s) an entity
  would actually end up in (fall and jump substitution, goal bypass).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from world.coords import Coord, distance, offset, pack_coord
from world.grid import CellSnapshot, GridProvider, read_cell

from .options import PathfindOptions, SafetyOptions
from .safety import classify_cell, is_passable

log = logging.getLogger(__name__)


@dataclass
class SearchNode:
    coord: Coord
    parent: Optional[int]
    g_cost: float
    h_cost: float

    @property
    def f_cost(self) -> float:
        return self.g_cost + self.h_cost


class NodeArena:
    """Append-only list of SearchNodes addressed by integer id."""

    def __init__(self) -> None:
        self._nodes: List[SearchNode] = []

    def add(self, coord: Coord, parent: Optional[int], g_cost: float, h_cost: float) -> int:
        self._nodes.append(SearchNode(coord, parent, g_cost, h_cost))
        return len(self._nodes) - 1

    def __getitem__(self, node_id: int) -> SearchNode:
        return self._nodes[node_id]

    def __len__(self) -> int:
        return len(self._nodes)

    def chain(self, node_id: int) -> List[Coord]:
        """Coordinates from `node_id` back to the root, node first."""
        coords: List[Coord] = []
        current: Optional[int] = node_id
        while current is not None:
            node = self._nodes[current]
            coords.append(node.coord)
            current = node.parent
        return coords


class Frontier:
    """
    Open and closed sets for one search direction.

    The open list keeps insertion order so that the min-F scan breaks ties
    toward the earliest inserted node. A coordinate is in at most one of
    the two sets at any time.
    """

    def __init__(self, origin: Coord, target: Coord) -> None:
        self.origin = origin
        self.target = target
        self.arena = NodeArena()
        self._open: List[int] = []
        self._open_index: Dict[int, int] = {}
        self._closed: Dict[int, int] = {}
        self.root_id = self._insert(origin, None, 0.0)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def has_open(self) -> bool:
        return bool(self._open)

    @property
    def open_count(self) -> int:
        return len(self._open)

    @property
    def closed_count(self) -> int:
        return len(self._closed)

    def node(self, node_id: int) -> SearchNode:
        return self.arena[node_id]

    def find_open(self, coord: Coord) -> Optional[int]:
        return self._open_index.get(pack_coord(coord))

    def find_closed(self, coord: Coord) -> Optional[int]:
        return self._closed.get(pack_coord(coord))

    def is_closed(self, coord: Coord) -> bool:
        return pack_coord(coord) in self._closed

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def pop_best(self) -> int:
        """Remove and return the open node with the lowest F cost."""
        best_pos = 0
        best_f = self.arena[self._open[0]].f_cost
        for pos in range(1, len(self._open)):
            f_cost = self.arena[self._open[pos]].f_cost
            if f_cost < best_f:
                best_pos, best_f = pos, f_cost
        node_id = self._open.pop(best_pos)
        del self._open_index[pack_coord(self.arena[node_id].coord)]
        return node_id

    def close(self, node_id: int) -> None:
        self._closed[pack_coord(self.arena[node_id].coord)] = node_id

    def child(self, coord: Coord, parent_id: int) -> int:
        """Create a node for `coord` under `parent_id` without opening it."""
        g_cost = self.arena[parent_id].g_cost + 1
        return self.arena.add(coord, parent_id, g_cost, distance(coord, self.target))

    def offer(self, coord: Coord, parent_id: int) -> Optional[int]:
        """
        Add `coord` as a successor of `parent_id`.

        Returns the id of a newly opened node, or None when the coordinate
        was already closed or already open (an open node is relaxed in
        place when the new route is cheaper).
        """
        key = pack_coord(coord)
        if key in self._closed:
            return None

        g_cost = self.arena[parent_id].g_cost + 1
        existing = self._open_index.get(key)
        if existing is not None:
            node = self.arena[existing]
            if g_cost < node.g_cost:
                node.g_cost = g_cost
                node.parent = parent_id
            return None

        return self._insert(coord, parent_id, g_cost)

    def _insert(self, coord: Coord, parent_id: Optional[int], g_cost: float) -> int:
        node_id = self.arena.add(coord, parent_id, g_cost, distance(coord, self.target))
        self._open.append(node_id)
        self._open_index[pack_coord(coord)] = node_id
        return node_id

    def path_to(self, node_id: int) -> List[Coord]:
        """Path from the origin to `node_id`, origin first."""
        return list(reversed(self.arena.chain(node_id)))


class CandidateExpander:
    """
    Applies the per-neighbor acceptance rules of the A* searches.

    Given a neighbor coordinate, `candidates(coord, target)` returns the
    coordinates an entity could move into through it: nothing (unreadable,
    ignored, unsafe), the target itself (goal bypass), the cell below (safe
    fall), the cell above (safe jump) or the cell itself. Vertical mode may
    add the checked cell's own above/below neighbors, but only those that
    are readable, passable, not ignored and safe; they are never queued
    unchecked.
    """

    def __init__(self, options: PathfindOptions) -> None:
        self.grid: GridProvider = options.grid
        self.safety: SafetyOptions = options.safety_options()
        self.vertical = options.allow_vertical_flood
        self._ignored_coords = options.coords_to_ignore
        self._ignored_types = options.type_ids_to_ignore
        self._ignored_tags = options.tags_to_ignore

    def is_ignored(self, cell: CellSnapshot) -> bool:
        if cell.coord in self._ignored_coords:
            return True
        if cell.type_id in self._ignored_types:
            return True
        return cell.has_any_tag(self._ignored_tags)

    def candidates(self, coord: Coord, target: Coord) -> List[Coord]:
        cell = read_cell(self.grid, coord)
        if cell is None or not cell.is_valid():
            return []
        if coord == target:
            return [coord]
        if self.is_ignored(cell):
            return []

        result = classify_cell(cell, self.safety)
        if not result.is_safe:
            log.debug("Rejected %s: %s", coord, result.reason())
            return []

        if result.can_safely_fall_from:
            landing = offset(coord, dy=-1)
        elif result.can_safely_jump_onto:
            landing = offset(coord, dy=1)
        else:
            landing = coord

        found: List[Coord] = []
        if landing not in self._ignored_coords:
            found.append(landing)

        if self.vertical:
            for extra in (offset(coord, dy=1), offset(coord, dy=-1)):
                if extra not in found and self._vertical_ok(extra):
                    found.append(extra)
        return found

    def _vertical_ok(self, coord: Coord) -> bool:
        if coord in self._ignored_coords:
            return False
        cell = read_cell(self.grid, coord)
        if cell is None or not is_passable(cell, self.safety):
            return False
        return classify_cell(cell, self.safety).is_safe


__all__ = ["SearchNode", "NodeArena", "Frontier", "CandidateExpander"]
