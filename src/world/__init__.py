# world package
# src/world/__init__.py
"""
Grid world access for block-nav.

Exports:
    - Coord / pack_coord / distance: coordinate helpers
    - GridProvider, CellSnapshot, CellUnloadedError: the read contract
    - ChunkedGrid: in-memory chunked provider
    - BoundedQueue: FIFO used by breadth-first exploration
"""

from __future__ import annotations

from .coords import Coord, as_coord, distance, offset, pack_coord, unpack_coord
from .grid import (
    AIR,
    CellSnapshot,
    CellUnloadedError,
    ChunkedGrid,
    GridProvider,
    read_cell,
)
from .queue import BoundedQueue, QueueFullError

__all__ = [
    "Coord",
    "as_coord",
    "distance",
    "offset",
    "pack_coord",
    "unpack_coord",
    "AIR",
    "CellSnapshot",
    "CellUnloadedError",
    "ChunkedGrid",
    "GridProvider",
    "read_cell",
    "BoundedQueue",
    "QueueFullError",
]
