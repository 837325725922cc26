# bounded breadth-first reachability
# src/nav/flood_fill.py
"""
Flood fill: everything an entity could reach from a start cell, within a
Euclidean radius, in breadth-first batches.

Typical use is "find ore blocks near the player": put the ore in the
always-include sets and iterate the reachable cells until one matches.

Batches are level-synchronous: each round dequeues up to `batch_size`
cells, expands them, enqueues what they reach for later rounds and yields
the dequeued cells. Every accepted cell is closed immediately, so no cell
is yielded twice.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Generator, Iterator, List, Optional, Sequence

from world.coords import Coord, distance, offset, pack_coord
from world.grid import CellSnapshot, read_cell
from world.queue import BoundedQueue

from .errors import ConstructionError
from .options import FloodFillOptions
from .region import horizontal_ring
from .safety import classify_cell, is_passable
from .steps import SearchObserver, StepSearch, StepStatus

if TYPE_CHECKING:
    from .scheduler import CooperativeScheduler

log = logging.getLogger(__name__)


def flood_offsets(vertical: bool) -> List[Coord]:
    """
    Relative positions examined around each cell.

    The 8-cell horizontal ring, plus in vertical mode one cell straight up
    and every one of those 9 positions shifted one cell up and down.
    """
    base = horizontal_ring((0, 0, 0))
    if not vertical:
        return base
    base.append((0, 1, 0))
    shifted: List[Coord] = []
    for dx, dy, dz in base:
        shifted.append((dx, dy + 1, dz))
        shifted.append((dx, dy - 1, dz))
    return base + shifted


class FloodFillIterator(StepSearch):
    """
    Lazy breadth-first explorer.

    Construction reads the start cell (ConstructionError if it can't be
    read), closes the ignored coordinates and queues the start's accepted
    neighbors. The start itself is left open: when it is reachable it is
    found again from a neighbor and yielded once, like any other cell.
    Nothing else happens until iterated.
    """

    kind = "flood_fill"

    def __init__(self, options: FloodFillOptions, observers: Sequence[SearchObserver] = ()) -> None:
        super().__init__(observers)
        self.options = options
        self.batch_size = options.batch_size
        self._safety = options.safety_options()
        self._offsets = flood_offsets(options.allow_vertical_flood)
        self._queue: BoundedQueue[Coord] = BoundedQueue()
        self._closed: set[int] = set()

        start_cell = read_cell(options.grid, options.start)
        if start_cell is None or not start_cell.is_valid():
            raise ConstructionError(
                f"flood fill start {options.start} could not be read",
                details={"coord": list(options.start)},
            )

        for coord in options.coords_to_ignore:
            self._closed.add(pack_coord(coord))
        self._queue.enqueue_all(self._adjacent(options.start, notify=False))

    # ------------------------------------------------------------------
    # Public iteration surface
    # ------------------------------------------------------------------

    @property
    def start(self) -> Coord:
        return self.options.start

    @property
    def pending(self) -> int:
        """Cells queued but not yet yielded."""
        return len(self._queue)

    def set_batch_size(self, batch_size: int) -> None:
        """Change the batch size; applies from the next round."""
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self.batch_size = batch_size

    def steps(self) -> Iterator[Optional[List[Coord]]]:
        """
        Cooperative step sequence: None for an idle step, otherwise a
        non-empty batch of reachable coordinates.
        """
        while True:
            result = self.step()
            if result.done:
                return
            yield result.batch

    def batches(self) -> Iterator[List[Coord]]:
        for batch in self.steps():
            if batch:
                yield batch

    def __iter__(self) -> Iterator[Coord]:
        for batch in self.batches():
            yield from batch

    def run(self, scheduler: "CooperativeScheduler") -> List[Coord]:
        """Run to exhaustion through `scheduler`, returning every cell found."""
        found: List[Coord] = []
        self.add_observer(_BatchCollector(found))
        result = self._drive(scheduler)
        if result.status is StepStatus.FAILED:
            assert result.error is not None
            raise result.error
        return found

    # ------------------------------------------------------------------
    # Search body
    # ------------------------------------------------------------------

    def _run(self) -> Generator[Optional[List[Coord]], None, None]:
        grid = self.options.grid
        while not self._queue.is_empty:
            round_cells = self._queue.dequeue_chunk(self.batch_size)
            # idle step between rounds
            yield None

            batch: List[Coord] = []
            for coord in round_cells:
                cell = read_cell(grid, coord)
                if cell is None or not cell.is_valid():
                    # unloaded since it was queued
                    continue
                self._expanded(coord)
                self._queue.enqueue_all(self._adjacent(coord))
                batch.append(coord)

            if batch:
                log.debug("Flood fill %s batch of %d, %d queued", self.search_id, len(batch), len(self._queue))
                yield batch
        return None

    def _adjacent(self, center: Coord, notify: bool = True) -> List[Coord]:
        accepted: List[Coord] = []
        for dx, dy, dz in self._offsets:
            coord = offset(center, dx, dy, dz)
            found = self._accept(coord)
            if found is not None:
                accepted.append(found)
                if notify:
                    self._accepted(found)
        return accepted

    def _accept(self, coord: Coord) -> Optional[Coord]:
        opts = self.options
        if distance(coord, opts.start) > opts.max_distance:
            return None
        key = pack_coord(coord)
        if key in self._closed:
            return None

        cell = read_cell(opts.grid, coord)
        if cell is None or not cell.is_valid():
            return None

        if self._is_ignored(cell):
            self._closed.add(key)
            return None

        if self._always_included(cell):
            self._closed.add(key)
            return coord

        if opts.allow_vertical_flood:
            if is_passable(cell, self._safety):
                self._closed.add(key)
                return coord
            return None

        result = classify_cell(cell, self._safety)
        if not result.is_safe:
            return None
        if result.can_safely_fall_from:
            target = offset(coord, dy=-1)
        elif result.can_safely_jump_onto:
            target = offset(coord, dy=1)
        else:
            target = coord

        target_key = pack_coord(target)
        if target_key in self._closed or distance(target, opts.start) > opts.max_distance:
            return None
        self._closed.add(target_key)
        return target

    def _is_ignored(self, cell: CellSnapshot) -> bool:
        if cell.type_id in self.options.type_ids_to_ignore:
            return True
        return cell.has_any_tag(self.options.tags_to_ignore)

    def _always_included(self, cell: CellSnapshot) -> bool:
        if cell.type_id in self.options.always_include_type_ids:
            return True
        return cell.has_any_tag(self.options.always_include_tags)


class _BatchCollector(SearchObserver):
    def __init__(self, sink: List[Coord]) -> None:
        self._sink = sink

    def on_batch(self, search: StepSearch, batch: List[Coord]) -> None:
        self._sink.extend(batch)


__all__ = ["FloodFillIterator", "flood_offsets"]
