# movement legality oracle for single cells
# src/nav/safety.py
"""
Movement safety oracle.

`classify_cell(cell, options)` decides whether an entity may occupy `cell`
and how it gets there:

    - walk onto it (passable cell, solid non-hazard floor, enough headroom)
    - fall into the cell below it (passable, passable below, solid floor two
      below that is not a hazard)
    - jump onto it (solid, jumpable, enough headroom above it)

or rejects it with a specific reason. The oracle is a pure function of the
grid reads it performs: it never writes, and a read that fails is reported
as `adjacent_unloaded` instead of raising.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Optional

from world.grid import CellSnapshot, CellUnloadedError

from .options import SafetyOptions

LAVA = "minecraft:lava"
WATER = "minecraft:water"


@dataclass
class SafetyResult:
    """
    Outcome of one safety check.

    Read `is_safe` first. When it is True, at most one of
    `can_safely_fall_from` / `can_safely_jump_onto` says which cell the
    entity actually ends up in. When it is False, exactly one of the
    remaining flags explains why.
    """

    is_safe: bool = False
    can_safely_fall_from: bool = False
    can_safely_jump_onto: bool = False
    is_possible_cliff: bool = False
    is_water: bool = False
    is_lava: bool = False
    has_water_below: bool = False
    has_lava_below: bool = False
    not_enough_space_above_to_walk: bool = False
    not_enough_space_above_to_jump: bool = False
    cannot_be_jumped_over: bool = False
    adjacent_unloaded: bool = False

    def reason(self) -> str:
        """Short name of the flag that decided this result."""
        for name, value in asdict(self).items():
            if name != "is_safe" and value:
                return name
        return "safe" if self.is_safe else "unsafe"

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Cell predicates
# ---------------------------------------------------------------------------


def is_passable(cell: CellSnapshot, options: SafetyOptions) -> bool:
    """A valid cell whose type or any tag is declared passable."""
    if not cell.is_valid():
        return False
    if cell.type_id in options.passable_type_ids:
        return True
    return cell.has_any_tag(options.passable_tags)


def can_be_jumped_over(cell: CellSnapshot, options: SafetyOptions) -> bool:
    if cell.type_id in options.non_jumpable_type_ids:
        return False
    return not cell.has_any_tag(options.non_jumpable_tags)


def is_lava(cell: CellSnapshot, options: SafetyOptions) -> bool:
    # Declaring lava passable opts out of the hazard check.
    return cell.type_id == LAVA and LAVA not in options.passable_type_ids


def is_water(cell: CellSnapshot, options: SafetyOptions) -> bool:
    return cell.type_id == WATER and WATER not in options.passable_type_ids


def _try_below(cell: CellSnapshot, n: int) -> Optional[CellSnapshot]:
    try:
        return cell.below(n)
    except CellUnloadedError:
        return None


def _try_above(cell: CellSnapshot, n: int) -> Optional[CellSnapshot]:
    try:
        return cell.above(n)
    except CellUnloadedError:
        return None


def _hazard_result(floor: CellSnapshot, options: SafetyOptions) -> Optional[SafetyResult]:
    """Unsafe result if `floor` is lava or water, else None."""
    if is_lava(floor, options):
        return SafetyResult(is_safe=False, has_lava_below=True)
    if is_water(floor, options):
        return SafetyResult(is_safe=False, has_water_below=True)
    return None


# ---------------------------------------------------------------------------
# Oracle
# ---------------------------------------------------------------------------


def classify_cell(cell: CellSnapshot, options: SafetyOptions) -> SafetyResult:
    """
    Run the safety check on `cell`.

    The caller is expected to have read `cell` successfully; everything
    around it is read here and may turn out to be unloaded.
    """
    if is_passable(cell, options):
        return _classify_passable(cell, options)
    return _classify_solid(cell, options)


def _classify_passable(cell: CellSnapshot, options: SafetyOptions) -> SafetyResult:
    below = _try_below(cell, 1)
    if below is None:
        return SafetyResult(is_safe=False, adjacent_unloaded=True)

    if options.allow_vertical_flood:
        # Caller accepts unrestricted vertical traversal.
        return SafetyResult(is_safe=True)

    if is_passable(below, options):
        further_below = _try_below(cell, 2)
        if further_below is None:
            return SafetyResult(is_safe=False, adjacent_unloaded=True)
        if is_passable(further_below, options):
            # More than one cell of open air: an uncontrolled drop.
            return SafetyResult(is_safe=False, is_possible_cliff=True)

        hazard = _hazard_result(further_below, options)
        if hazard is not None:
            return hazard
        return SafetyResult(is_safe=True, can_safely_fall_from=True)

    hazard = _hazard_result(below, options)
    if hazard is not None:
        return hazard

    # Solid floor: the rest of the body must fit above the cell.
    for i in range(1, options.entity_height):
        overhead = _try_above(cell, i)
        if overhead is None:
            return SafetyResult(is_safe=False, adjacent_unloaded=True)
        if not is_passable(overhead, options):
            return SafetyResult(is_safe=False, not_enough_space_above_to_walk=True)

    return SafetyResult(is_safe=True)


def _classify_solid(cell: CellSnapshot, options: SafetyOptions) -> SafetyResult:
    if not can_be_jumped_over(cell, options):
        return SafetyResult(is_safe=False, cannot_be_jumped_over=True)

    # Standing on top of the cell needs a full entity height of clearance.
    for i in range(1, options.entity_height + 1):
        overhead = _try_above(cell, i)
        if overhead is None:
            return SafetyResult(is_safe=False, adjacent_unloaded=True)
        if not is_passable(overhead, options):
            return SafetyResult(is_safe=False, not_enough_space_above_to_jump=True)

    return SafetyResult(is_safe=True, can_safely_jump_onto=True)


__all__ = [
    "LAVA",
    "WATER",
    "SafetyResult",
    "classify_cell",
    "is_passable",
    "can_be_jumped_over",
    "is_lava",
    "is_water",
]
