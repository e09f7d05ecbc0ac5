"""Hazard-arrival times via multi-source BFS."""

import logging
from collections import deque
from typing import Optional

import numpy as np

from .grid import DIRECTIONS, CellKind, Grid

logger = logging.getLogger(__name__)

# Sentinel for cells the hazard never reaches
HAZARD_NEVER = np.inf


def compute_hazard_times(grid: Grid) -> np.ndarray:
    """
    Compute the earliest step at which the hazard occupies each cell.

    BFS from all hazard sources simultaneously. Walls are impassable and
    keep HAZARD_NEVER, as do cells no source can reach. The returned array
    is read-only.
    """
    times = np.full(grid.shape, HAZARD_NEVER)
    walls = grid.walls
    queue = deque()

    # Initialize sources with time 0
    for r, c in grid.positions_of(CellKind.HAZARD):
        times[r, c] = 0
        queue.append((r, c))

    logger.debug("Hazard sources: %d on %dx%d grid", len(queue), grid.rows, grid.cols)

    # BFS expansion (4-connected)
    while queue:
        r, c = queue.popleft()
        t = times[r, c]
        for dr, dc in DIRECTIONS:
            nr, nc = r + dr, c + dc
            if (0 <= nr < grid.rows and 0 <= nc < grid.cols
                    and not walls[nr, nc] and times[nr, nc] > t + 1):
                times[nr, nc] = t + 1
                queue.append((nr, nc))

    times.setflags(write=False)
    return times


class HazardClock:
    """
    Hazard front for one grid.

    Times are computed lazily on first access and cached, so a clock can be
    shared between the planner and the renderer. A renderer that already
    holds the table passes it in instead of recomputing it.
    """

    def __init__(self, grid: Grid, times: Optional[np.ndarray] = None):
        if times is not None and times.shape != grid.shape:
            raise ValueError(f"Hazard table shape {times.shape} does not match grid {grid.shape}")
        self.grid = grid
        self._times = times

    def compute(self) -> np.ndarray:
        """Return the hazard-arrival table, computing it on first use."""
        if self._times is None:
            self._times = compute_hazard_times(self.grid)
        return self._times

    @property
    def times(self) -> np.ndarray:
        """Hazard-arrival table (HAZARD_NEVER where the fire never gets)."""
        return self.compute()

    def burning_at(self, step: int) -> np.ndarray:
        """Boolean mask of cells the hazard occupies at the given step."""
        return self.times <= step

