"""Model package for the fire escape solver."""

from .grid import CellKind, Grid, Position, DIRECTIONS
from .hazard import HazardClock, compute_hazard_times, HAZARD_NEVER
from .planner import RoutePlanner, find_safe_route, manhattan
from .state import SearchNode, EscapeResult, Route
from .evaluator import EscapeEvaluator, evaluate, can_escape

__all__ = [
    'CellKind',
    'Grid',
    'Position',
    'DIRECTIONS',
    'HazardClock',
    'compute_hazard_times',
    'HAZARD_NEVER',
    'RoutePlanner',
    'find_safe_route',
    'manhattan',
    'SearchNode',
    'EscapeResult',
    'Route',
    'EscapeEvaluator',
    'evaluate',
    'can_escape',
]
