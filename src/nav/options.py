# src/nav/options.py
"""
Immutable configuration values for the safety oracle and the searches.

Each options value is validated once, at construction. Collections passed
in as lists or tuples are normalized to frozensets so membership checks in
the hot loops are O(1) and the value can't be mutated mid-search.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, FrozenSet, Iterable

from world.coords import Coord, as_coord
from world.grid import GridProvider


def _frozen(values: Iterable[Any]) -> FrozenSet[Any]:
    if isinstance(values, str):
        # A bare string is almost certainly a single id, not an iterable of chars.
        return frozenset((values,))
    return frozenset(values)


def _freeze_fields(obj: Any, *names: str) -> None:
    for name in names:
        object.__setattr__(obj, name, _frozen(getattr(obj, name)))


@dataclass(frozen=True)
class SafetyOptions:
    """
    Movement rules the safety oracle applies to a single cell.

    Fields:
        entity_height:
            Height in cells of the walking entity (2 for humanoids).
        passable_type_ids / passable_tags:
            Cells matching either are walk-through (air, grass, flowers).
        non_jumpable_type_ids / non_jumpable_tags:
            Solid cells that may never be jumped onto (fences, walls).
        allow_vertical_flood:
            Simplified "free vertical movement" mode: any passable cell with
            a readable cell below it is safe, hazards and headroom ignored.
    """

    entity_height: int = 2
    passable_type_ids: FrozenSet[str] = frozenset()
    passable_tags: FrozenSet[str] = frozenset()
    non_jumpable_type_ids: FrozenSet[str] = frozenset()
    non_jumpable_tags: FrozenSet[str] = frozenset()
    allow_vertical_flood: bool = False

    def __post_init__(self) -> None:
        if self.entity_height < 1:
            raise ValueError(f"entity_height must be >= 1, got {self.entity_height}")
        _freeze_fields(
            self,
            "passable_type_ids",
            "passable_tags",
            "non_jumpable_type_ids",
            "non_jumpable_tags",
        )


@dataclass(frozen=True)
class _SearchOptionsBase:
    """Fields shared by PathfindOptions and FloodFillOptions."""

    coords_to_ignore: FrozenSet[Coord] = frozenset()
    type_ids_to_ignore: FrozenSet[str] = frozenset()
    tags_to_ignore: FrozenSet[str] = frozenset()
    passable_type_ids: FrozenSet[str] = frozenset()
    passable_tags: FrozenSet[str] = frozenset()
    non_jumpable_type_ids: FrozenSet[str] = frozenset()
    non_jumpable_tags: FrozenSet[str] = frozenset()
    entity_height: int = 2
    allow_vertical_flood: bool = False

    def _normalize_base(self) -> None:
        if self.entity_height < 1:
            raise ValueError(f"entity_height must be >= 1, got {self.entity_height}")
        object.__setattr__(
            self,
            "coords_to_ignore",
            frozenset(as_coord(c) for c in self.coords_to_ignore),
        )
        _freeze_fields(
            self,
            "type_ids_to_ignore",
            "tags_to_ignore",
            "passable_type_ids",
            "passable_tags",
            "non_jumpable_type_ids",
            "non_jumpable_tags",
        )

    def safety_options(self) -> SafetyOptions:
        """Project the movement rules onto the oracle's options."""
        return SafetyOptions(
            entity_height=self.entity_height,
            passable_type_ids=self.passable_type_ids,
            passable_tags=self.passable_tags,
            non_jumpable_type_ids=self.non_jumpable_type_ids,
            non_jumpable_tags=self.non_jumpable_tags,
            allow_vertical_flood=self.allow_vertical_flood,
        )


@dataclass(frozen=True)
class PathfindOptions(_SearchOptionsBase):
    """
    Configuration for AStarPathfinder and BidirectionalAStarPathfinder.

    `max_nodes` bounds the closed set (per frontier for bidirectional
    search); reaching it fails the search with NodeLimitExceeded.
    """

    start: Coord = (0, 0, 0)
    goal: Coord = (0, 0, 0)
    grid: GridProvider = field(default=None, compare=False, repr=False)  # type: ignore[assignment]
    max_nodes: int = 100

    def __post_init__(self) -> None:
        if self.grid is None:
            raise ValueError("PathfindOptions.grid is required")
        if self.max_nodes < 1:
            raise ValueError(f"max_nodes must be >= 1, got {self.max_nodes}")
        object.__setattr__(self, "start", as_coord(self.start))
        object.__setattr__(self, "goal", as_coord(self.goal))
        self._normalize_base()

    def with_overrides(self, **changes: Any) -> "PathfindOptions":
        return replace(self, **changes)


@dataclass(frozen=True)
class FloodFillOptions(_SearchOptionsBase):
    """
    Configuration for FloodFillIterator.

    Cells whose type or tag appears in the always-include sets are yielded
    regardless of passability (the thing being searched for, e.g. an ore).
    """

    start: Coord = (0, 0, 0)
    grid: GridProvider = field(default=None, compare=False, repr=False)  # type: ignore[assignment]
    max_distance: float = 16.0
    always_include_type_ids: FrozenSet[str] = frozenset()
    always_include_tags: FrozenSet[str] = frozenset()
    batch_size: int = 8

    def __post_init__(self) -> None:
        if self.grid is None:
            raise ValueError("FloodFillOptions.grid is required")
        if self.max_distance < 0:
            raise ValueError(f"max_distance must be >= 0, got {self.max_distance}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")
        object.__setattr__(self, "start", as_coord(self.start))
        self._normalize_base()
        _freeze_fields(self, "always_include_type_ids", "always_include_tags")

    def with_overrides(self, **changes: Any) -> "FloodFillOptions":
        return replace(self, **changes)


__all__ = ["SafetyOptions", "PathfindOptions", "FloodFillOptions"]
