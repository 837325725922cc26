# src/nav/errors.py
"""
Domain errors for navigation searches.

Only construction failures and terminal search outcomes (budget exhausted,
frontier exhausted) are raised to callers. Failed grid reads never surface
here; the searches recover from them locally.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class PathfindingError(RuntimeError):
    """
    Base class for search failures.

    `code` is a stable machine-readable identifier (also used as the
    `reason` of a PathfindingResult); `details` carries JSON-safe context.
    """

    code: str = "pathfinding_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.details: Dict[str, Any] = dict(details or {})

    def __str__(self) -> str:
        msg = super().__str__()
        if self.details:
            return f"{msg} (code={self.code!r}, details={self.details!r})"
        return f"{msg} (code={self.code!r})"


class ConstructionError(PathfindingError):
    """Start or goal cell could not be read when the search was built."""

    code = "construction_failed"


class NodeLimitExceeded(PathfindingError):
    """The closed set reached max_nodes before the goal was found."""

    code = "node_limit_exceeded"


class NoPathFound(PathfindingError):
    """Every reachable candidate was considered without reaching the goal."""

    code = "no_path_found"


__all__ = [
    "PathfindingError",
    "ConstructionError",
    "NodeLimitExceeded",
    "NoPathFound",
]
