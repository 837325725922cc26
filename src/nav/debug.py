# src/nav/debug.py
"""
In-world visualization of a running search.

DebugMarkerObserver places a marker cell on every coordinate a search
accepts into its frontier, and removes them again when the search ends.
All grid writes go through `scheduler.run_immediate`, never from inside
the search's own step.
"""

from __future__ import annotations

import logging
from typing import List, Set

from world.coords import Coord
from world.grid import AIR, GridProvider, read_cell

from .scheduler import CooperativeScheduler
from .steps import SearchObserver, StepResult, StepSearch

log = logging.getLogger(__name__)

STRUCTURE_VOID = "minecraft:structure_void"


class DebugMarkerObserver(SearchObserver):
    def __init__(
        self,
        grid: GridProvider,
        scheduler: CooperativeScheduler,
        marker_type_id: str = STRUCTURE_VOID,
        clear_type_id: str = AIR,
    ) -> None:
        self.grid = grid
        self.scheduler = scheduler
        self.marker_type_id = marker_type_id
        self.clear_type_id = clear_type_id
        self.placed: List[Coord] = []
        self._seen: Set[Coord] = set()

    def _endpoints(self, search: StepSearch) -> Set[Coord]:
        ends = {search.start}
        if search.goal is not None:
            ends.add(search.goal)
        return ends

    def on_candidate_accepted(self, search: StepSearch, coord: Coord) -> None:
        if coord in self._seen or coord in self._endpoints(search):
            return
        self._seen.add(coord)
        self.placed.append(coord)
        marker = self.marker_type_id
        self.scheduler.run_immediate(lambda: self.grid.set_cell_type(coord, marker))

    def on_search_finished(self, search: StepSearch, result: StepResult) -> None:
        markers = [c for c in self.placed if c not in self._endpoints(search)]
        self.placed = []
        self._seen.clear()
        log.debug("Clearing %d debug markers for %s", len(markers), search.search_id)
        self.scheduler.run_immediate(lambda: self._clear(markers))

    def _clear(self, markers: List[Coord]) -> None:
        for coord in markers:
            cell = read_cell(self.grid, coord)
            # only undo our own marker; the world may have changed since
            if cell is not None and cell.type_id == self.marker_type_id:
                self.grid.set_cell_type(coord, self.clear_type_id)


__all__ = ["DebugMarkerObserver", "STRUCTURE_VOID"]
