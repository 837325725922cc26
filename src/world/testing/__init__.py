# src/world/testing/__init__.py
"""Grid fakes and builders for tests."""

from .fakes import DEFAULT_LEGEND, FlakyGrid, flat_world, grid_from_layers

__all__ = ["DEFAULT_LEGEND", "FlakyGrid", "flat_world", "grid_from_layers"]
