# NavProfile dataclass
# src/env/schema.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from nav.options import FloodFillOptions, PathfindOptions
from world.coords import Coord
from world.grid import GridProvider


@dataclass
class NavProfile:
    """Named bundle of movement rules and search budgets."""
    name: str
    entity_height: int = 2
    passable_type_ids: List[str] = field(default_factory=list)
    passable_tags: List[str] = field(default_factory=list)
    non_jumpable_type_ids: List[str] = field(default_factory=list)
    non_jumpable_tags: List[str] = field(default_factory=list)
    type_ids_to_ignore: List[str] = field(default_factory=list)
    tags_to_ignore: List[str] = field(default_factory=list)
    always_include_type_ids: List[str] = field(default_factory=list)  # flood fill only
    always_include_tags: List[str] = field(default_factory=list)      # flood fill only
    max_nodes: int = 100
    batch_size: int = 8
    allow_vertical_flood: bool = False
    max_distance: Optional[float] = None  # default flood fill radius

    def _movement_fields(self) -> dict[str, Any]:
        return {
            "entity_height": self.entity_height,
            "passable_type_ids": self.passable_type_ids,
            "passable_tags": self.passable_tags,
            "non_jumpable_type_ids": self.non_jumpable_type_ids,
            "non_jumpable_tags": self.non_jumpable_tags,
            "type_ids_to_ignore": self.type_ids_to_ignore,
            "tags_to_ignore": self.tags_to_ignore,
            "allow_vertical_flood": self.allow_vertical_flood,
        }

    def pathfind_options(
        self,
        start: Coord,
        goal: Coord,
        grid: GridProvider,
        **overrides: Any,
    ) -> PathfindOptions:
        """Build PathfindOptions from this profile; keyword overrides win."""
        values = self._movement_fields()
        values["max_nodes"] = self.max_nodes
        values.update(overrides)
        return PathfindOptions(start=start, goal=goal, grid=grid, **values)

    def flood_fill_options(
        self,
        start: Coord,
        grid: GridProvider,
        max_distance: Optional[float] = None,
        **overrides: Any,
    ) -> FloodFillOptions:
        """Build FloodFillOptions from this profile; keyword overrides win."""
        radius = max_distance if max_distance is not None else self.max_distance
        values = self._movement_fields()
        values["always_include_type_ids"] = self.always_include_type_ids
        values["always_include_tags"] = self.always_include_tags
        values["batch_size"] = self.batch_size
        if radius is not None:
            values["max_distance"] = radius
        values.update(overrides)
        return FloodFillOptions(start=start, grid=grid, **values)
