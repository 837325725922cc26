# src/nav/__init__.py
"""
Grid navigation: movement safety, A* / bidirectional A* pathfinding and
flood-fill reachability, all driven step by step.

    from nav import AStarPathfinder, PathfindOptions

    path = AStarPathfinder(PathfindOptions(start=a, goal=b, grid=grid)).pathfind()
"""

from .bidirectional import BidirectionalAStarPathfinder
from .debug import DebugMarkerObserver
from .errors import ConstructionError, NodeLimitExceeded, NoPathFound, PathfindingError
from .flood_fill import FloodFillIterator
from .options import FloodFillOptions, PathfindOptions, SafetyOptions
from .pathfinder import AStarPathfinder, PathfindingResult, find_path
from .region import CuboidRegion, axis_neighbors, horizontal_ring, neighbor_coords
from .safety import SafetyResult, classify_cell, is_passable
from .scheduler import CooperativeScheduler, SearchTask
from .steps import SearchObserver, StepResult, StepSearch, StepStatus

__all__ = [
    "AStarPathfinder",
    "BidirectionalAStarPathfinder",
    "FloodFillIterator",
    "PathfindingResult",
    "find_path",
    "PathfindOptions",
    "FloodFillOptions",
    "SafetyOptions",
    "SafetyResult",
    "classify_cell",
    "is_passable",
    "horizontal_ring",
    "axis_neighbors",
    "neighbor_coords",
    "CuboidRegion",
    "CooperativeScheduler",
    "SearchTask",
    "SearchObserver",
    "StepResult",
    "StepSearch",
    "StepStatus",
    "DebugMarkerObserver",
    "PathfindingError",
    "ConstructionError",
    "NodeLimitExceeded",
    "NoPathFound",
]
