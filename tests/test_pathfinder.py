# tests/test_pathfinder.py
"""
Unit tests for AStarPathfinder and find_path.

Worlds are built in memory: flat_world() is a 12x12 stone floor at y=63,
so walkable cells sit at y=64. Cells past the floor edge are cliffs and
cells outside chunk (0, 0) are unloaded.
"""

from __future__ import annotations

from typing import List

import pytest

from nav.errors import ConstructionError, NodeLimitExceeded, NoPathFound
from nav.frontier import CandidateExpander
from nav.options import PathfindOptions
from nav.pathfinder import AStarPathfinder, find_path
from nav.safety import classify_cell
from nav.steps import SearchObserver, StepStatus
from tests.fakes.worlds import assert_walkable_hops, make_options, step_world, walled_world
from world.coords import Coord
from world.testing import flat_world, grid_from_layers


# ---------------------------------------------------------------------------
# Happy paths
# ---------------------------------------------------------------------------


def test_find_path_in_open_space() -> None:
    grid = flat_world()
    start, goal = (1, 64, 1), (8, 64, 5)

    search = AStarPathfinder(make_options(grid, start, goal))
    path = search.pathfind()

    assert path[0] == start
    assert path[-1] == goal
    assert len(set(path)) == len(path)
    assert all(c[1] == 64 for c in path)
    assert_walkable_hops(path)
    assert len(path) - 1 == search.goal_cost
    # at least the Chebyshev distance
    assert len(path) - 1 >= 7


def test_every_intermediate_cell_is_oracle_safe() -> None:
    grid = flat_world()
    opts = make_options(grid, (0, 64, 0), (10, 64, 3))
    path = AStarPathfinder(opts).pathfind()
    safety = opts.safety_options()
    for coord in path[1:-1]:
        assert classify_cell(grid.get_cell(coord), safety).is_safe


def test_start_equals_goal() -> None:
    grid = flat_world()
    assert AStarPathfinder(make_options(grid, (2, 64, 2), (2, 64, 2))).pathfind() == [(2, 64, 2)]


def test_path_goes_through_wall_gap() -> None:
    grid = walled_world(gap_z=11)
    path = AStarPathfinder(make_options(grid, (1, 64, 1), (9, 64, 1))).pathfind()
    assert (5, 64, 11) in path
    assert_walkable_hops(path)


def test_path_jumps_up_and_falls_down() -> None:
    grid = step_world()

    up = AStarPathfinder(make_options(grid, (0, 1, 1), (4, 2, 1))).pathfind()
    assert up[-1] == (4, 2, 1)
    assert_walkable_hops(up)
    assert any(b[1] - a[1] == 1 for a, b in zip(up, up[1:]))

    down = AStarPathfinder(make_options(grid, (4, 2, 1), (0, 1, 1))).pathfind()
    assert down[-1] == (0, 1, 1)
    assert_walkable_hops(down)
    assert any(b[1] - a[1] == -1 for a, b in zip(down, down[1:]))


def test_path_avoids_cells_above_lava() -> None:
    grid = flat_world()
    for z in range(1, 12):
        grid.set_cell((5, 63, z), "minecraft:lava")

    path = AStarPathfinder(make_options(grid, (1, 64, 6), (9, 64, 6))).pathfind()
    assert (5, 64, 0) in path
    assert all(grid.get_cell((x, y - 1, z)).type_id != "minecraft:lava" for x, y, z in path)


def test_goal_is_accepted_even_if_unsafe_to_stand_on() -> None:
    grid = walled_world()
    goal = (5, 64, 5)  # inside the wall
    path = AStarPathfinder(make_options(grid, (1, 64, 5), goal)).pathfind()
    assert path[-1] == goal


def test_options_accept_entity_positions() -> None:
    grid = flat_world()
    opts = make_options(grid, (1.5, 64.0, 1.2), (3.9, 64.2, 1.0))
    assert opts.start == (1, 64, 1)
    assert AStarPathfinder(opts).pathfind()[-1] == (3, 64, 1)


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


def test_node_limit_of_one_fails_for_distant_goal() -> None:
    grid = flat_world()
    search = AStarPathfinder(make_options(grid, (1, 64, 1), (10, 64, 10), max_nodes=1))
    with pytest.raises(NodeLimitExceeded) as excinfo:
        search.pathfind()
    assert excinfo.value.code == "node_limit_exceeded"
    assert excinfo.value.details["max_nodes"] == 1


def test_solid_wall_means_no_path() -> None:
    grid = walled_world()
    with pytest.raises(NoPathFound):
        AStarPathfinder(make_options(grid, (1, 64, 1), (9, 64, 1))).pathfind()


def test_ignored_coordinate_blocks_only_crossing() -> None:
    grid = flat_world()
    for z in range(1, 12):
        grid.set_cell((5, 63, z), "minecraft:lava")
    opts = make_options(grid, (1, 64, 6), (9, 64, 6), coords_to_ignore=[(5, 64, 0)])
    with pytest.raises(NoPathFound):
        AStarPathfinder(opts).pathfind()


def test_ignored_tag_blocks_grass_gap() -> None:
    grid = walled_world(gap_z=11)
    grid.set_cell((5, 64, 11), "minecraft:tallgrass", ["plant"])

    assert AStarPathfinder(make_options(grid, (1, 64, 1), (9, 64, 1))).pathfind()
    with pytest.raises(NoPathFound):
        AStarPathfinder(make_options(grid, (1, 64, 1), (9, 64, 1), tags_to_ignore={"plant"})).pathfind()


def test_unreadable_goal_fails_construction() -> None:
    grid = flat_world()
    with pytest.raises(ConstructionError) as excinfo:
        AStarPathfinder(make_options(grid, (1, 64, 1), (40, 64, 40)))
    assert excinfo.value.details["role"] == "goal"


def test_invalid_start_fails_construction() -> None:
    grid = flat_world()
    grid.set_cell((1, 64, 1), "minecraft:air", valid=False)
    with pytest.raises(ConstructionError):
        AStarPathfinder(make_options(grid, (1, 64, 1), (3, 64, 1)))


def test_options_are_validated() -> None:
    grid = flat_world()
    with pytest.raises(ValueError):
        make_options(grid, (0, 64, 0), (1, 64, 0), max_nodes=0)
    with pytest.raises(ValueError):
        PathfindOptions(start=(0, 0, 0), goal=(1, 0, 0))


# ---------------------------------------------------------------------------
# Step protocol, find_path wrapper, observers
# ---------------------------------------------------------------------------


def test_step_protocol_reports_continue_then_found() -> None:
    grid = flat_world()
    search = AStarPathfinder(make_options(grid, (1, 64, 1), (4, 64, 1)))

    first = search.step()
    assert first.status is StepStatus.CONTINUE

    result = search.run_to_completion()
    assert result.status is StepStatus.FOUND
    assert result.path is not None and result.path[-1] == (4, 64, 1)
    assert search.stats.steps > 1
    # finished searches keep returning their result
    assert search.step() is search.result


def test_find_path_reports_failure_reasons() -> None:
    grid = walled_world()

    ok = find_path(make_options(grid, (1, 64, 1), (3, 64, 3)))
    assert ok.success and ok.path[-1] == (3, 64, 3) and ok.reason is None

    blocked = find_path(make_options(grid, (1, 64, 1), (9, 64, 1)))
    assert blocked.success is False
    assert blocked.path == []
    assert blocked.reason == "no_path_found"

    budget = find_path(make_options(grid, (1, 64, 1), (4, 64, 10), max_nodes=1))
    assert budget.reason == "node_limit_exceeded"


class Recorder(SearchObserver):
    def __init__(self) -> None:
        self.events: List[str] = []
        self.accepted: List[Coord] = []

    def on_search_started(self, search) -> None:
        self.events.append("started")

    def on_node_expanded(self, search, coord) -> None:
        self.events.append("expanded")

    def on_candidate_accepted(self, search, coord) -> None:
        self.accepted.append(coord)

    def on_search_finished(self, search, result) -> None:
        self.events.append(f"finished:{result.status.name}")


class Exploding(SearchObserver):
    def on_node_expanded(self, search, coord) -> None:
        raise RuntimeError("observer bug")


def test_observers_see_lifecycle_and_cannot_break_search() -> None:
    grid = flat_world()
    recorder = Recorder()
    search = AStarPathfinder(make_options(grid, (1, 64, 1), (6, 64, 1)), observers=[Exploding(), recorder])

    path = search.pathfind()

    assert path[-1] == (6, 64, 1)
    assert recorder.events[0] == "started"
    assert recorder.events[-1] == "finished:FOUND"
    assert recorder.events.count("expanded") == search.stats.nodes_expanded
    assert len(recorder.accepted) == len(set(recorder.accepted))


def test_vertical_mode_climbs_through_open_air() -> None:
    grid = flat_world()
    start, goal = (1, 64, 1), (1, 70, 1)
    search = AStarPathfinder(make_options(grid, start, goal, allow_vertical_flood=True))
    path = search.pathfind()
    assert path[0] == start and path[-1] == goal
    assert len(path) - 1 == search.goal_cost


# ---------------------------------------------------------------------------
# World border
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("ox, oz", [(29_999_980, 29_999_980), (-30_000_000, -30_000_000)])
def test_search_near_world_border(ox: int, oz: int) -> None:
    grid = flat_world(origin=(ox, oz))
    start, goal = (ox + 1, 64, oz + 1), (ox + 9, 64, oz + 6)

    path = AStarPathfinder(make_options(grid, start, goal)).pathfind()
    assert path[0] == start and path[-1] == goal
    assert_walkable_hops(path)

    result = find_path(make_options(grid, start, goal), bidirectional=True)
    assert result.success
    assert result.path[0] == start and result.path[-1] == goal


def test_vertical_extras_must_be_passable_and_safe() -> None:
    # two layers of air; y=-1 lies below the grid and cannot be read
    grid = grid_from_layers([["..."] * 3, ["..."] * 3], min_y=0)
    expander = CandidateExpander(make_options(grid, (0, 1, 0), (2, 1, 2), allow_vertical_flood=True))

    # above is open air; below is air whose own floor is unreadable
    assert expander.candidates((1, 1, 1), (9, 9, 9)) == [(1, 1, 1), (1, 2, 1)]

    grid.set_cell((1, 2, 1), "minecraft:stone")
    assert expander.candidates((1, 1, 1), (9, 9, 9)) == [(1, 1, 1)]

    plain = CandidateExpander(make_options(grid, (0, 1, 0), (2, 1, 2)))
    assert (1, 2, 1) not in plain.candidates((1, 1, 1), (9, 9, 9))
