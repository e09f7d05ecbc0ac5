import random
from collections import deque

import numpy as np
import pytest

from fire_escape.model.grid import CellKind, Grid
from fire_escape.model.hazard import compute_hazard_times
from fire_escape.model.planner import RoutePlanner, find_safe_route, manhattan


def plan(lines):
    grid = Grid.from_lines(lines)
    times = compute_hazard_times(grid)
    route = find_safe_route(grid, grid.find(CellKind.START), grid.find(CellKind.EXIT), times)
    return grid, times, route


def assert_valid_route(grid, times, route, start, goal):
    assert route[0] == start
    assert route[-1] == goal
    for i, (r, c) in enumerate(route):
        assert grid.is_walkable(r, c)
        assert i < times[r, c]
    for (r1, c1), (r2, c2) in zip(route, route[1:]):
        assert abs(r1 - r2) + abs(c1 - c2) == 1


def brute_force_steps(grid, times, start, goal):
    """Shortest safe route length by enumerating every simple path."""
    best = None

    def walk(pos, step, seen):
        nonlocal best
        if best is not None and step >= best:
            return
        if pos == goal:
            best = step
            return
        for nxt in grid.neighbors(*pos):
            if nxt not in seen and step + 1 < times[nxt]:
                seen.add(nxt)
                walk(nxt, step + 1, seen)
                seen.remove(nxt)

    if times[start] > 0:
        walk(start, 0, {start})
    return best


def random_puzzle(rng, rows, cols):
    cells = rng.choices(".#F", weights=[7, 2, 1], k=rows * cols)
    spots = rng.sample(range(rows * cols), 2)
    cells[spots[0]] = "D"
    cells[spots[1]] = "S"
    return ["".join(cells[r * cols:(r + 1) * cols]) for r in range(rows)]


def test_manhattan():
    assert manhattan((0, 0), (2, 3)) == 5
    assert manhattan((4, 1), (1, 4)) == 6


def test_open_grid_without_fire():
    grid, times, route = plan(["D..", "...", "..S"])
    assert len(route) == 5
    assert_valid_route(grid, times, route, (0, 0), (2, 2))


def test_fire_next_to_exit_blocks_escape():
    grid, times, route = plan(["D..", "...", ".FS"])
    assert times[2, 2] == 1
    assert route is None


def test_wall_strip_separates_start_and_exit():
    _, _, route = plan(["D#.", ".#.", ".#S"])
    assert route is None


def test_arriving_with_the_fire_is_capture():
    # Exit burns at step 4 and is exactly 4 moves away
    _, times, route = plan(["F...S", ".....", "..D.."])
    assert times[0, 4] == 4
    assert route is None


def test_arriving_one_step_ahead_escapes():
    grid, times, route = plan(["F...S", ".....", "...D."])
    assert len(route) - 1 == 3
    assert_valid_route(grid, times, route, (2, 3), (0, 4))


def test_route_stays_ahead_of_nearby_fire():
    grid, times, route = plan(["D..S", ".##.", "F..."])
    assert times[1, 0] == 1
    assert route == ((0, 0), (0, 1), (0, 2), (0, 3))
    assert_valid_route(grid, times, route, (0, 0), (0, 3))


def test_start_equals_exit():
    grid = Grid.from_lines(["...", ".D.", "..."])
    times = compute_hazard_times(grid)
    assert find_safe_route(grid, (1, 1), (1, 1), times) == ((1, 1),)


def test_start_already_burning():
    grid = Grid.from_lines(["F.S"])
    times = compute_hazard_times(grid)
    assert find_safe_route(grid, (0, 0), (0, 2), times) is None
    assert find_safe_route(grid, (0, 0), (0, 0), times) is None


def test_out_of_bounds_positions_raise():
    grid = Grid.from_lines(["D.S"])
    times = compute_hazard_times(grid)
    with pytest.raises(ValueError):
        find_safe_route(grid, (0, 0), (0, 3), times)
    with pytest.raises(ValueError):
        find_safe_route(grid, (-1, 0), (0, 2), times)


def test_mismatched_hazard_table_raises():
    grid = Grid.from_lines(["D.S"])
    with pytest.raises(ValueError):
        RoutePlanner(grid, np.full((2, 3), np.inf))


def test_planner_statistics():
    grid = Grid.from_lines(["D....", ".....", "....S"])
    planner = RoutePlanner(grid, compute_hazard_times(grid))
    route = planner.find_route((0, 0), (2, 4))
    assert len(route) == 7
    assert planner.expanded >= len(route)
    assert planner.pushed >= planner.expanded


@pytest.mark.parametrize("seed", range(60))
def test_route_is_valid_and_minimal(seed):
    rng = random.Random(seed)
    lines = random_puzzle(rng, rng.randint(1, 4), rng.randint(2, 4))
    grid, times, route = plan(lines)
    start, goal = grid.find(CellKind.START), grid.find(CellKind.EXIT)

    expected = brute_force_steps(grid, times, start, goal)
    if expected is None:
        assert route is None
    else:
        assert route is not None
        assert_valid_route(grid, times, route, start, goal)
        assert len(route) - 1 == expected


@pytest.mark.parametrize("seed", range(20))
def test_without_fire_matches_plain_reachability(seed):
    rng = random.Random(1000 + seed)
    rows, cols = rng.randint(2, 8), rng.randint(2, 8)
    cells = rng.choices(".#", weights=[3, 1], k=rows * cols)
    cells[0] = "D"
    cells[-1] = "S"
    grid = Grid.from_lines(["".join(cells[r * cols:(r + 1) * cols]) for r in range(rows)])
    times = compute_hazard_times(grid)
    assert np.all(np.isinf(times))

    # Plain BFS distances from the start
    goal = (rows - 1, cols - 1)
    dist = {(0, 0): 0}
    queue = deque([(0, 0)])
    while queue:
        pos = queue.popleft()
        for nxt in grid.neighbors(*pos):
            if nxt not in dist:
                dist[nxt] = dist[pos] + 1
                queue.append(nxt)

    route = find_safe_route(grid, (0, 0), goal, times)
    if goal in dist:
        assert len(route) - 1 == dist[goal]
    else:
        assert route is None


def test_repeated_searches_are_identical():
    lines = [
        "D...#....",
        ".##.#.##.",
        "....F....",
        ".##.#.##.",
        "....#...S",
    ]
    _, _, first = plan(lines)
    _, _, second = plan(lines)
    assert first == second


def test_wall_endpoints_raise():
    grid = Grid.from_lines(["#.S", "D.."])
    times = compute_hazard_times(grid)
    with pytest.raises(ValueError):
        find_safe_route(grid, (0, 0), (0, 2), times)
    with pytest.raises(ValueError):
        find_safe_route(grid, (0, 0), (0, 0), times)
    with pytest.raises(ValueError):
        find_safe_route(grid, (1, 0), (0, 0), times)
