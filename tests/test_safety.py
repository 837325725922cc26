# tests/test_safety.py
"""
Unit tests for the movement safety oracle.

Each scenario is a single 1x1 column drawn bottom-up with grid_from_layers;
the cell under test is (0, y, 0).
"""

from __future__ import annotations

import pytest

from nav.options import SafetyOptions
from nav.safety import SafetyResult, classify_cell, is_passable, is_water
from world.grid import ChunkedGrid
from world.testing import FlakyGrid, grid_from_layers


AIR_AND_PLANTS = SafetyOptions(
    passable_type_ids={"minecraft:air"},
    passable_tags={"plant"},
    non_jumpable_tags={"fence"},
)


def column(*cells: str) -> ChunkedGrid:
    return grid_from_layers([[c] for c in cells])


def check(grid, y: int, options: SafetyOptions = AIR_AND_PLANTS) -> SafetyResult:
    return classify_cell(grid.get_cell((0, y, 0)), options)


# ---------------------------------------------------------------------------
# Passable cells
# ---------------------------------------------------------------------------


def test_walk_on_solid_floor_with_headroom_is_safe() -> None:
    result = check(column("#", ".", "."), 1)
    assert result == SafetyResult(is_safe=True)
    assert result.reason() == "safe"


def test_fall_onto_lava_is_unsafe() -> None:
    result = check(column("L", ".", "."), 2)
    assert result.is_safe is False
    assert result.has_lava_below is True
    assert result.reason() == "has_lava_below"


def test_three_open_cells_is_a_cliff() -> None:
    result = check(column(".", ".", "."), 2)
    assert result.is_safe is False
    assert result.is_possible_cliff is True


def test_single_drop_onto_solid_is_a_safe_fall() -> None:
    result = check(column("#", ".", ".", "."), 2)
    assert result.is_safe is True
    assert result.can_safely_fall_from is True
    assert result.can_safely_jump_onto is False


def test_fall_onto_water_reports_water_below() -> None:
    result = check(column("W", ".", ".", "."), 2)
    assert result.is_safe is False
    assert result.has_water_below is True


def test_standing_on_water_reports_water_below() -> None:
    result = check(column("W", ".", "."), 1)
    assert result.is_safe is False
    assert result.has_water_below is True
    assert result.has_lava_below is False


def test_standing_on_lava_reports_lava_below() -> None:
    result = check(column("L", ".", "."), 1)
    assert result.is_safe is False
    assert result.has_lava_below is True


def test_blocked_headroom_prevents_walking() -> None:
    result = check(column("#", ".", "#"), 1)
    assert result.is_safe is False
    assert result.not_enough_space_above_to_walk is True


def test_short_entity_fits_under_low_ceiling() -> None:
    opts = SafetyOptions(entity_height=1, passable_type_ids={"minecraft:air"})
    assert check(column("#", ".", "#"), 1, opts).is_safe is True


def test_plants_are_passable_through_tags() -> None:
    grid = column("#", "G", "G")
    assert is_passable(grid.get_cell((0, 1, 0)), AIR_AND_PLANTS)
    assert check(grid, 1).is_safe is True


def test_unreadable_cell_below_reports_adjacent_unloaded() -> None:
    grid = FlakyGrid(column("#", ".", "."), unloaded=[(0, 0, 0)])
    result = classify_cell(grid.get_cell((0, 1, 0)), AIR_AND_PLANTS)
    assert result.is_safe is False
    assert result.adjacent_unloaded is True


def test_unreadable_headroom_reports_adjacent_unloaded() -> None:
    grid = FlakyGrid(column("#", ".", "."), unloaded=[(0, 2, 0)])
    result = classify_cell(grid.get_cell((0, 1, 0)), AIR_AND_PLANTS)
    assert result.adjacent_unloaded is True


def test_cell_below_world_floor_is_unloaded() -> None:
    grid = grid_from_layers([["."], ["."]], min_y=0)
    result = check(grid, 0)
    assert result.adjacent_unloaded is True


# ---------------------------------------------------------------------------
# Solid cells
# ---------------------------------------------------------------------------


def test_jump_onto_solid_with_headroom_is_safe() -> None:
    result = check(column("#", ".", "."), 0)
    assert result.is_safe is True
    assert result.can_safely_jump_onto is True


def test_non_jumpable_tag_cannot_be_jumped_over() -> None:
    result = check(column("F", ".", "."), 0)
    assert result.is_safe is False
    assert result.cannot_be_jumped_over is True


def test_non_jumpable_type_cannot_be_jumped_over() -> None:
    opts = SafetyOptions(
        passable_type_ids={"minecraft:air"},
        non_jumpable_type_ids={"minecraft:stone"},
    )
    result = check(column("#", ".", "."), 0, opts)
    assert result.cannot_be_jumped_over is True


def test_blocked_second_cell_above_prevents_jump() -> None:
    result = check(column("#", ".", "#"), 0)
    assert result.is_safe is False
    assert result.not_enough_space_above_to_jump is True


# ---------------------------------------------------------------------------
# Vertical mode and hazard opt-out
# ---------------------------------------------------------------------------


def test_vertical_mode_skips_cliff_and_hazard_checks() -> None:
    opts = SafetyOptions(passable_type_ids={"minecraft:air"}, allow_vertical_flood=True)
    assert check(column(".", ".", "."), 2, opts) == SafetyResult(is_safe=True)
    assert check(column("L", "."), 1, opts).is_safe is True


def test_vertical_mode_still_needs_readable_cell_below() -> None:
    opts = SafetyOptions(passable_type_ids={"minecraft:air"}, allow_vertical_flood=True)
    grid = FlakyGrid(column(".", "."), unloaded=[(0, 0, 0)])
    result = classify_cell(grid.get_cell((0, 1, 0)), opts)
    assert result.adjacent_unloaded is True


def test_declaring_water_passable_disables_water_hazard() -> None:
    opts = SafetyOptions(passable_type_ids={"minecraft:air", "minecraft:water"})
    cell = column("W").get_cell((0, 0, 0))
    assert is_water(cell, AIR_AND_PLANTS) is True
    assert is_water(cell, opts) is False


def test_invalid_cell_is_never_passable() -> None:
    grid = ChunkedGrid()
    grid.set_cell((0, 1, 0), "minecraft:air", valid=False)
    assert not is_passable(grid.get_cell((0, 1, 0)), AIR_AND_PLANTS)


def test_entity_height_is_validated() -> None:
    with pytest.raises(ValueError):
        SafetyOptions(entity_height=0)


def test_result_to_dict_lists_every_flag() -> None:
    data = SafetyResult(is_safe=False, is_possible_cliff=True).to_dict()
    assert len(data) == 12
    assert data["is_possible_cliff"] is True
