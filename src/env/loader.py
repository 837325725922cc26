# src/env/loader.py
"""
Navigation profile loading.

config/nav.yaml names the active profile and defines every available one:

    profile: humanoid
    profiles:
      humanoid:
        entity_height: 2
        passable_type_ids: [minecraft:air, ...]
        ...

`load_nav_profile()` resolves the active profile (or a named one) into a
NavProfile, which then builds PathfindOptions / FloodFillOptions.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .schema import NavProfile

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_ROOT = PROJECT_ROOT / "config"
DEFAULT_CONFIG = CONFIG_ROOT / "nav.yaml"

_LIST_KEYS = (
    "passable_type_ids",
    "passable_tags",
    "non_jumpable_type_ids",
    "non_jumpable_tags",
    "type_ids_to_ignore",
    "tags_to_ignore",
    "always_include_type_ids",
    "always_include_tags",
)
_INT_KEYS = ("entity_height", "max_nodes", "batch_size")


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML mapping from `path`."""
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Malformed YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping at top of {path}, got {type(data)}")
    return data


def _select_profile(cfg: Dict[str, Any], name: Optional[str]) -> Tuple[str, Dict[str, Any]]:
    """Return (profile_name, profile_mapping), preferring an explicit name."""
    profile_name = name or cfg.get("profile")
    if not profile_name:
        raise ValueError("nav.yaml must define a 'profile' key.")
    profiles = cfg.get("profiles")
    if not isinstance(profiles, dict):
        raise ValueError("nav.yaml must define a 'profiles' mapping.")
    if profile_name not in profiles:
        raise KeyError(f"Profile '{profile_name}' not found in nav.yaml profiles.")
    raw = profiles[profile_name] or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Profile '{profile_name}' must be a mapping, got {type(raw)}")
    return profile_name, raw


def _as_str_list(profile: str, key: str, value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"Profile '{profile}': '{key}' must be a list of strings")
    return list(value)


def _build_profile(name: str, raw: Dict[str, Any]) -> NavProfile:
    known = set(_LIST_KEYS) | set(_INT_KEYS) | {"allow_vertical_flood", "max_distance"}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Profile '{name}' has unknown keys: {unknown}")

    kwargs: Dict[str, Any] = {"name": name}
    for key in _LIST_KEYS:
        if key in raw:
            kwargs[key] = _as_str_list(name, key, raw[key])
    for key in _INT_KEYS:
        if key in raw:
            value = raw[key]
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"Profile '{name}': '{key}' must be a positive integer")
            kwargs[key] = value
    if "allow_vertical_flood" in raw:
        if not isinstance(raw["allow_vertical_flood"], bool):
            raise ValueError(f"Profile '{name}': 'allow_vertical_flood' must be true/false")
        kwargs["allow_vertical_flood"] = raw["allow_vertical_flood"]
    if raw.get("max_distance") is not None:
        value = raw["max_distance"]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise ValueError(f"Profile '{name}': 'max_distance' must be a non-negative number")
        kwargs["max_distance"] = float(value)
    return NavProfile(**kwargs)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_nav_profile(name: Optional[str] = None, path: Optional[Path] = None) -> NavProfile:
    """
    Main entry point: returns the resolved NavProfile.

    Args:
        name: profile to load; defaults to the file's `profile` key
        path: YAML file; defaults to config/nav.yaml under the project root
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG
    cfg = _load_yaml(config_path)
    profile_name, raw = _select_profile(cfg, name)
    profile = _build_profile(profile_name, raw)
    log.info("Loaded nav profile '%s' from %s", profile_name, config_path)
    return profile


def list_profiles(path: Optional[Path] = None) -> List[str]:
    cfg = _load_yaml(Path(path) if path is not None else DEFAULT_CONFIG)
    profiles = cfg.get("profiles")
    if not isinstance(profiles, dict):
        raise ValueError("nav.yaml must define a 'profiles' mapping.")
    return sorted(profiles)
