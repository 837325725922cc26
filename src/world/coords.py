# integer block coordinates and packed map keys
# src/world/coords.py
"""
Coordinate helpers for the block grid.

A Coord is a plain (x, y, z) integer tuple. Searches key their open and
closed sets by `pack_coord`, which folds a Coord into a single int so
membership tests hash one integer instead of a tuple or string.

Packing has no range limit: each axis is zigzag-encoded (0, -1, 1, -2,
... map to 0, 1, 2, 3, ...) and the three bit strings are interleaved
into one Python int, so coordinates at the ±30,000,000 world border pack
as readily as those near the origin.
"""

from __future__ import annotations

import math
from typing import Tuple

Coord = Tuple[int, int, int]


def _zigzag(value: int) -> int:
    return value * 2 if value >= 0 else -value * 2 - 1


def _unzigzag(value: int) -> int:
    return value // 2 if value % 2 == 0 else -(value + 1) // 2


def pack_coord(coord: Coord) -> int:
    """Pack (x, y, z) into one non-negative int, bit-interleaved x/y/z."""
    zx, zy, zz = (_zigzag(int(v)) for v in coord)
    packed = 0
    bit = 0
    while zx or zy or zz:
        packed |= ((zx & 1) << (bit + 2)) | ((zy & 1) << (bit + 1)) | ((zz & 1) << bit)
        zx >>= 1
        zy >>= 1
        zz >>= 1
        bit += 3
    return packed


def unpack_coord(packed: int) -> Coord:
    """Inverse of pack_coord."""
    zx = zy = zz = 0
    shift = 0
    while packed:
        zz |= (packed & 1) << shift
        zy |= ((packed >> 1) & 1) << shift
        zx |= ((packed >> 2) & 1) << shift
        packed >>= 3
        shift += 1
    return _unzigzag(zx), _unzigzag(zy), _unzigzag(zz)


def offset(coord: Coord, dx: int = 0, dy: int = 0, dz: int = 0) -> Coord:
    return coord[0] + dx, coord[1] + dy, coord[2] + dz


def add(a: Coord, b: Coord) -> Coord:
    return a[0] + b[0], a[1] + b[1], a[2] + b[2]


def distance(a: Coord, b: Coord) -> float:
    """Euclidean distance between two coordinates."""
    return math.sqrt(
        (a[0] - b[0]) ** 2
        + (a[1] - b[1]) ** 2
        + (a[2] - b[2]) ** 2
    )


def as_coord(value) -> Coord:
    """
    Normalize a tuple/list or an object with x/y/z attributes into a Coord.

    Float components are floored, matching how block positions are derived
    from entity positions.
    """
    if hasattr(value, "x") and hasattr(value, "y") and hasattr(value, "z"):
        x, y, z = value.x, value.y, value.z
    else:
        x, y, z = value
    return math.floor(x), math.floor(y), math.floor(z)


__all__ = [
    "Coord",
    "pack_coord",
    "unpack_coord",
    "offset",
    "add",
    "distance",
    "as_coord",
]
