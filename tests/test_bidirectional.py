# tests/test_bidirectional.py
"""Tests for BidirectionalAStarPathfinder and path splicing."""

from __future__ import annotations

import pytest

from nav.bidirectional import BidirectionalAStarPathfinder, splice_paths
from nav.errors import ConstructionError, NodeLimitExceeded, NoPathFound
from nav.pathfinder import AStarPathfinder, find_path
from nav.scheduler import CooperativeScheduler
from tests.fakes.worlds import assert_walkable_hops, make_options, step_world, walled_world
from world.testing import flat_world


def test_splice_joins_at_shared_coordinate() -> None:
    a, b, c, d, e = [(i, 0, 0) for i in range(5)]
    assert splice_paths([a, b], [b, c]) == [a, b, c]
    assert splice_paths([a, b, c, d], [c, d, e]) == [a, b, c, d, e]
    # earliest shared coordinate wins, so nothing repeats
    assert splice_paths([a, b, c], [b, e, c]) == [a, b, e, c]


def test_open_space_path_has_no_repeats() -> None:
    grid = flat_world()
    start, goal = (1, 64, 1), (10, 64, 8)
    path = BidirectionalAStarPathfinder(make_options(grid, start, goal)).pathfind()

    assert path[0] == start
    assert path[-1] == goal
    assert len(path) == len(set(path))
    assert_walkable_hops(path)


def test_start_equals_goal() -> None:
    grid = flat_world()
    search = BidirectionalAStarPathfinder(make_options(grid, (3, 64, 3), (3, 64, 3)))
    assert search.pathfind() == [(3, 64, 3)]


def test_adjacent_goal() -> None:
    grid = flat_world()
    path = BidirectionalAStarPathfinder(make_options(grid, (3, 64, 3), (4, 64, 3))).pathfind()
    assert path == [(3, 64, 3), (4, 64, 3)]


def test_frontiers_meet_across_a_jump() -> None:
    grid = step_world()
    path = BidirectionalAStarPathfinder(make_options(grid, (0, 1, 1), (4, 2, 1))).pathfind()
    assert path[0] == (0, 1, 1)
    assert path[-1] == (4, 2, 1)
    assert_walkable_hops(path)


@pytest.mark.parametrize("gap_z", [None, 0, 11])
def test_agrees_with_single_source_on_existence(gap_z) -> None:
    grid = walled_world(gap_z=gap_z)
    opts = make_options(grid, (1, 64, 5), (9, 64, 5))

    single = find_path(opts)
    double = find_path(opts, bidirectional=True)

    assert single.success == double.success
    if double.success:
        assert double.path[0] == (1, 64, 5)
        assert double.path[-1] == (9, 64, 5)
        assert (5, 64, gap_z) in double.path


def test_no_path_when_walled_off() -> None:
    grid = walled_world()
    with pytest.raises(NoPathFound):
        BidirectionalAStarPathfinder(make_options(grid, (1, 64, 1), (9, 64, 1))).pathfind()


def test_node_limit_applies_per_frontier() -> None:
    grid = flat_world()
    search = BidirectionalAStarPathfinder(make_options(grid, (0, 64, 0), (11, 64, 11), max_nodes=1))
    with pytest.raises(NodeLimitExceeded) as excinfo:
        search.pathfind()
    assert excinfo.value.details["forward_closed"] == 1
    assert excinfo.value.details["backward_closed"] == 1


def test_unreadable_start_fails_construction() -> None:
    grid = flat_world()
    with pytest.raises(ConstructionError):
        BidirectionalAStarPathfinder(make_options(grid, (-5, 64, 0), (3, 64, 3)))


def test_runs_under_scheduler_like_single_source() -> None:
    grid = flat_world()
    scheduler = CooperativeScheduler()
    opts = make_options(grid, (1, 64, 1), (9, 64, 9))

    double = BidirectionalAStarPathfinder(opts).pathfind(scheduler)
    single = AStarPathfinder(opts).pathfind(scheduler)

    assert double[-1] == single[-1] == (9, 64, 9)
    assert scheduler.ticks > 0
