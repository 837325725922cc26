# src/nav/region.py
"""
Neighbor and region enumeration.

Iteration order here is part of the search contract: A* breaks F-cost ties
by insertion order, so the order neighbors are generated in decides which
of two equally good paths is returned.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from world.coords import Coord

# +x, -x, +y, -y, +z, -z
_AXIS_DIRECTIONS: tuple[Coord, ...] = (
    (1, 0, 0),
    (-1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
    (0, 0, 1),
    (0, 0, -1),
)


def horizontal_ring(center: Coord, radius: int = 1) -> List[Coord]:
    """
    Cells at Chebyshev distance exactly `radius` on the center's y level.

    8 cells at radius 1, 8 * radius in general. Ordered by x, then z.
    """
    if radius < 1:
        raise ValueError("radius must be >= 1")
    cx, cy, cz = center
    ring: List[Coord] = []
    for dx in range(-radius, radius + 1):
        for dz in range(-radius, radius + 1):
            if max(abs(dx), abs(dz)) != radius:
                continue
            ring.append((cx + dx, cy, cz + dz))
    return ring


def axis_neighbors(center: Coord, radius: int = 1) -> List[Coord]:
    """The 6 axis-aligned neighbors, each `radius` cells away."""
    if radius < 1:
        raise ValueError("radius must be >= 1")
    cx, cy, cz = center
    return [
        (cx + dx * radius, cy + dy * radius, cz + dz * radius)
        for dx, dy, dz in _AXIS_DIRECTIONS
    ]


def neighbor_coords(center: Coord, vertical: bool, radius: int = 1) -> List[Coord]:
    """Flattened ring normally; the 6-direction axis set in vertical mode."""
    if vertical:
        return axis_neighbors(center, radius)
    return horizontal_ring(center, radius)


@dataclass(frozen=True)
class CuboidRegion:
    """Axis-aligned inclusive box of cells between two corners."""

    corner1: Coord
    corner2: Coord
    radius: int = 0
    vertically_flat: bool = False

    @classmethod
    def from_center(cls, center: Coord, radius: float, vertically_flat: bool = False) -> "CuboidRegion":
        r = int(round(radius))
        x, y, z = center
        dy = 0 if vertically_flat else r
        return cls(
            corner1=(x - r, y - dy, z - r),
            corner2=(x + r, y + dy, z + r),
            radius=r,
            vertically_flat=vertically_flat,
        )

    @property
    def min_corner(self) -> Coord:
        return (
            min(self.corner1[0], self.corner2[0]),
            min(self.corner1[1], self.corner2[1]),
            min(self.corner1[2], self.corner2[2]),
        )

    @property
    def max_corner(self) -> Coord:
        return (
            max(self.corner1[0], self.corner2[0]),
            max(self.corner1[1], self.corner2[1]),
            max(self.corner1[2], self.corner2[2]),
        )

    def contains(self, coord: Coord) -> bool:
        lo, hi = self.min_corner, self.max_corner
        return all(lo[i] <= coord[i] <= hi[i] for i in range(3))

    def all_locations(self) -> List[Coord]:
        """Every cell in the box, nested x, then y, then z."""
        lo, hi = self.min_corner, self.max_corner
        return [
            (x, y, z)
            for x in range(lo[0], hi[0] + 1)
            for y in range(lo[1], hi[1] + 1)
            for z in range(lo[2], hi[2] + 1)
        ]

    def outer_shell(self) -> List[Coord]:
        """
        Cells on the surface of the box, each listed once.

        Faces are emitted in a fixed order: -x, +x, +y, -y, +z, -z.
        """
        lo, hi = self.min_corner, self.max_corner
        seen: set[Coord] = set()
        shell: List[Coord] = []

        def take(coord: Coord) -> None:
            if coord not in seen:
                seen.add(coord)
                shell.append(coord)

        ys = range(lo[1], hi[1] + 1)
        zs = range(lo[2], hi[2] + 1)
        xs = range(lo[0], hi[0] + 1)
        for x in (lo[0], hi[0]):
            for y in ys:
                for z in zs:
                    take((x, y, z))
        for y in (hi[1], lo[1]):
            for x in xs:
                for z in zs:
                    take((x, y, z))
        for z in (hi[2], lo[2]):
            for x in xs:
                for y in ys:
                    take((x, y, z))
        return shell


__all__ = [
    "horizontal_ring",
    "axis_neighbors",
    "neighbor_coords",
    "CuboidRegion",
]
