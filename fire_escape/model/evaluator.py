"""Escape evaluation: ties hazard propagation and route search together."""

import logging

from .grid import CellKind, Grid
from .hazard import HazardClock
from .planner import RoutePlanner
from .state import EscapeResult

logger = logging.getLogger(__name__)


class EscapeEvaluator:
    """
    Orchestrates one evaluation:

    1. Locate start and exit cells
    2. Compute hazard-arrival times
    3. Search for a safe route
    """

    def __init__(self, grid: Grid):
        self.grid = grid
        self.clock = HazardClock(grid)

    def evaluate(self) -> EscapeResult:
        start = self.grid.find(CellKind.START)
        goal = self.grid.find(CellKind.EXIT)

        if start is None or goal is None:
            logger.debug("Missing endpoint (start=%s, exit=%s); skipping search", start, goal)
            return EscapeResult(escapable=False, start=start, exit=goal)

        hazard_times = self.clock.compute()
        planner = RoutePlanner(self.grid, hazard_times)
        route = planner.find_route(start, goal)

        return EscapeResult(
            escapable=route is not None,
            route=route,
            start=start,
            exit=goal,
            hazard_times=hazard_times,
            expanded=planner.expanded,
        )


def evaluate(grid: Grid) -> EscapeResult:
    """Evaluate a single grid."""
    return EscapeEvaluator(grid).evaluate()


def can_escape(grid: Grid) -> bool:
    """Check if the agent can reach the exit ahead of the hazard."""
    return evaluate(grid).escapable
