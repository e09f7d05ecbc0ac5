"""Time-constrained A* route search."""

import heapq
import logging
from typing import List, Optional, Tuple

import numpy as np

from .grid import DIRECTIONS, Grid, Position
from .state import Route, SearchNode

logger = logging.getLogger(__name__)


def manhattan(a: Position, b: Position) -> int:
    """Admissible heuristic for 4-connected unit-cost moves."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


class RoutePlanner:
    """
    A* search that refuses to enter a cell at or after its hazard-arrival time.

    Elapsed time equals path cost (one step per move), so a neighbor reached
    at cost g is only admissible when g < hazard_times[neighbor]. Arriving at
    the same step as the hazard counts as capture.

    Frontier entries are (f, h, seq, node index): lower f, then lower h,
    then FIFO by seq. Nodes live in an arena list and refer to their parent
    by index. Stale frontier entries are discarded on pop.
    """

    def __init__(self, grid: Grid, hazard_times: np.ndarray):
        if hazard_times.shape != grid.shape:
            raise ValueError(
                f"Hazard table shape {hazard_times.shape} does not match grid {grid.shape}"
            )
        self.grid = grid
        self.hazard_times = hazard_times
        self.expanded = 0
        self.pushed = 0

    def _check_position(self, pos: Position, label: str) -> None:
        if not self.grid.in_bounds(*pos):
            raise ValueError(
                f"{label} {pos} is outside a {self.grid.rows}x{self.grid.cols} grid"
            )
        if not self.grid.is_walkable(*pos):
            raise ValueError(f"{label} {pos} is a wall")

    def find_route(self, start: Position, goal: Position) -> Optional[Route]:
        """Return the minimal-time safe route from start to goal, or None."""
        self._check_position(start, "Start")
        self._check_position(goal, "Exit")
        self.expanded = 0
        self.pushed = 0

        # Already engulfed at time 0
        if self.hazard_times[start] <= 0:
            logger.debug("Start %s burns at step 0", start)
            return None

        walls = self.grid.walls
        best_g = np.full(self.grid.shape, np.inf)
        finalized = np.zeros(self.grid.shape, dtype=bool)
        arena: List[SearchNode] = []
        frontier: List[Tuple[int, int, int, int]] = []

        def push(node: SearchNode) -> None:
            arena.append(node)
            heapq.heappush(frontier, (node.f, node.h, self.pushed, len(arena) - 1))
            self.pushed += 1

        best_g[start] = 0
        push(SearchNode(start, 0, manhattan(start, goal)))

        while frontier:
            _, _, _, index = heapq.heappop(frontier)
            current = arena[index]
            r, c = current.position

            if finalized[r, c]:
                continue
            finalized[r, c] = True
            self.expanded += 1

            if current.position == goal:
                route = self._reconstruct(arena, index)
                logger.debug("Route found: %d steps, %d expansions", len(route) - 1, self.expanded)
                return route

            tentative_g = current.g + 1
            for dr, dc in DIRECTIONS:
                nr, nc = r + dr, c + dc
                if not (0 <= nr < self.grid.rows and 0 <= nc < self.grid.cols):
                    continue
                if walls[nr, nc]:
                    continue
                # Hazard gets there first or at the same time
                if tentative_g >= self.hazard_times[nr, nc]:
                    continue
                if tentative_g < best_g[nr, nc]:
                    best_g[nr, nc] = tentative_g
                    neighbor = (nr, nc)
                    push(SearchNode(neighbor, tentative_g, manhattan(neighbor, goal), index))

        logger.debug("No safe route after %d expansions", self.expanded)
        return None

    @staticmethod
    def _reconstruct(arena: List[SearchNode], index: int) -> Route:
        path = []
        while index != -1:
            node = arena[index]
            path.append(node.position)
            index = node.parent
        path.reverse()
        return tuple(path)


def find_safe_route(grid: Grid, start: Position, goal: Position,
                    hazard_times: np.ndarray) -> Optional[Route]:
    """Convenience wrapper around RoutePlanner.find_route."""
    return RoutePlanner(grid, hazard_times).find_route(start, goal)
