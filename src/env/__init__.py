# src/env/__init__.py
"""Configuration: YAML navigation profiles."""

from .loader import list_profiles, load_nav_profile
from .schema import NavProfile

__all__ = ["NavProfile", "list_profiles", "load_nav_profile"]
