# grid provider contract + in-memory chunked grid
# src/world/grid.py
"""
Grid access layer for navigation.

This module does not know anything about movement rules. It only:
- Defines the GridProvider contract that searches read cells through.
- Defines CellSnapshot, the result of one cell read.
- Provides ChunkedGrid, an in-memory provider that stores cells in
  16x16 chunk columns which can be loaded and unloaded at runtime.

Every read may fail with CellUnloadedError. Callers in `nav` are expected
to recover from that locally; nothing here retries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Protocol, Tuple

from .coords import Coord

AIR = "minecraft:air"
CHUNK_SIZE = 16


class CellUnloadedError(LookupError):
    """Raised when a cell cannot be read (unloaded chunk, out of world)."""

    def __init__(self, coord: Coord) -> None:
        super().__init__(f"Cell at {coord!r} is not loaded")
        self.coord = coord


class GridProvider(Protocol):
    """
    Minimal read/write surface a search needs from the world.

    get_cell() must raise CellUnloadedError for any cell it cannot read.
    set_cell_type() is only used by debug visualization.
    """

    def get_cell(self, coord: Coord) -> "CellSnapshot":
        ...

    def set_cell_type(self, coord: Coord, type_id: str) -> None:
        ...


@dataclass(frozen=True)
class CellSnapshot:
    """
    One read of one cell.

    Snapshots are throwaway values: the grid may change between two reads
    of the same coordinate, so nothing should hold on to one beyond a
    single check.
    """

    coord: Coord
    type_id: str
    tags: FrozenSet[str] = frozenset()
    valid: bool = True
    grid: Optional[GridProvider] = field(default=None, compare=False, repr=False)

    def is_valid(self) -> bool:
        return self.valid

    def has_any_tag(self, tags: Iterable[str]) -> bool:
        return any(tag in self.tags for tag in tags)

    def below(self, n: int = 1) -> "CellSnapshot":
        """Read the cell n below. Raises CellUnloadedError."""
        return self._relative(-n)

    def above(self, n: int = 1) -> "CellSnapshot":
        """Read the cell n above. Raises CellUnloadedError."""
        return self._relative(n)

    def _relative(self, dy: int) -> "CellSnapshot":
        x, y, z = self.coord
        target = (x, y + dy, z)
        if self.grid is None:
            raise CellUnloadedError(target)
        return self.grid.get_cell(target)


# ---------------------------------------------------------------------------
# In-memory chunked grid
# ---------------------------------------------------------------------------


@dataclass
class GridChunk:
    """
    One 16 x height x 16 column of cells.

    Only non-air cells are stored; everything else in a loaded chunk reads
    as air.
    """

    x: int
    z: int
    cells: Dict[Tuple[int, int, int], Tuple[str, FrozenSet[str], bool]] = field(
        default_factory=dict
    )


def chunk_key(coord: Coord) -> Tuple[int, int]:
    return coord[0] // CHUNK_SIZE, coord[2] // CHUNK_SIZE


class ChunkedGrid:
    """
    In-memory GridProvider.

    Cells live in GridChunk columns keyed by (chunk_x, chunk_z). Reading a
    cell whose chunk is not loaded, or whose y lies outside
    [min_y, max_y], raises CellUnloadedError.

    Writing to a cell auto-loads its chunk.
    """

    def __init__(self, *, min_y: int = -64, max_y: int = 319, default_type: str = AIR) -> None:
        if min_y > max_y:
            raise ValueError(f"min_y ({min_y}) must not exceed max_y ({max_y})")
        self.min_y = min_y
        self.max_y = max_y
        self.default_type = default_type
        self._chunks: Dict[Tuple[int, int], GridChunk] = {}
        self.reads = 0

    # ------------------------------------------------------------------
    # Chunk lifecycle
    # ------------------------------------------------------------------

    def load_chunk(self, chunk_x: int, chunk_z: int) -> GridChunk:
        key = (chunk_x, chunk_z)
        chunk = self._chunks.get(key)
        if chunk is None:
            chunk = GridChunk(x=chunk_x, z=chunk_z)
            self._chunks[key] = chunk
        return chunk

    def unload_chunk(self, chunk_x: int, chunk_z: int) -> None:
        self._chunks.pop((chunk_x, chunk_z), None)

    def is_loaded(self, coord: Coord) -> bool:
        return chunk_key(coord) in self._chunks and self.min_y <= coord[1] <= self.max_y

    def loaded_chunks(self) -> list[Tuple[int, int]]:
        return sorted(self._chunks)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set_cell(
        self,
        coord: Coord,
        type_id: str,
        tags: Iterable[str] = (),
        *,
        valid: bool = True,
    ) -> None:
        x, y, z = coord
        if not self.min_y <= y <= self.max_y:
            raise ValueError(f"y={y} is outside [{self.min_y}, {self.max_y}]")
        chunk = self.load_chunk(*chunk_key(coord))
        local = (x % CHUNK_SIZE, y, z % CHUNK_SIZE)
        if type_id == self.default_type and not tags and valid:
            chunk.cells.pop(local, None)
            return
        chunk.cells[local] = (type_id, frozenset(tags), valid)

    def set_cell_type(self, coord: Coord, type_id: str) -> None:
        """GridProvider write hook; keeps existing tags, raises if unloaded."""
        current = self.get_cell(coord)
        self.set_cell(coord, type_id, current.tags, valid=current.valid)

    def fill(
        self,
        corner1: Coord,
        corner2: Coord,
        type_id: str,
        tags: Iterable[str] = (),
    ) -> None:
        """Set every cell in the inclusive box between two corners."""
        tag_set = frozenset(tags)
        lo = tuple(min(a, b) for a, b in zip(corner1, corner2))
        hi = tuple(max(a, b) for a, b in zip(corner1, corner2))
        for x in range(lo[0], hi[0] + 1):
            for y in range(lo[1], hi[1] + 1):
                for z in range(lo[2], hi[2] + 1):
                    self.set_cell((x, y, z), type_id, tag_set)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_cell(self, coord: Coord) -> CellSnapshot:
        self.reads += 1
        x, y, z = coord
        if not self.min_y <= y <= self.max_y:
            raise CellUnloadedError(coord)
        chunk = self._chunks.get(chunk_key(coord))
        if chunk is None:
            raise CellUnloadedError(coord)

        stored = chunk.cells.get((x % CHUNK_SIZE, y, z % CHUNK_SIZE))
        if stored is None:
            return CellSnapshot(coord=(x, y, z), type_id=self.default_type, grid=self)

        type_id, tags, valid = stored
        return CellSnapshot(coord=(x, y, z), type_id=type_id, tags=tags, valid=valid, grid=self)

    def try_get_cell(self, coord: Coord) -> Optional[CellSnapshot]:
        """get_cell() that returns None instead of raising."""
        try:
            return self.get_cell(coord)
        except CellUnloadedError:
            return None

    def describe(self) -> Dict[str, Any]:
        return {
            "chunks": len(self._chunks),
            "stored_cells": sum(len(c.cells) for c in self._chunks.values()),
            "min_y": self.min_y,
            "max_y": self.max_y,
        }


def read_cell(grid: GridProvider, coord: Coord) -> Optional[CellSnapshot]:
    """
    Read a cell through any GridProvider, mapping failures to None.

    This is the single place the nav layer turns a failed read into
    "absent for this step".
    """
    try:
        return grid.get_cell(coord)
    except CellUnloadedError:
        return None


__all__ = [
    "AIR",
    "CHUNK_SIZE",
    "CellUnloadedError",
    "GridProvider",
    "CellSnapshot",
    "GridChunk",
    "ChunkedGrid",
    "chunk_key",
    "read_cell",
]
