"""Fire escape solver: can the agent outrun a spreading fire to the exit?"""

from .model import CellKind, Grid, EscapeResult, evaluate, can_escape
from .puzzles import PuzzleFormatError, load_puzzles, parse_puzzles

__version__ = '0.1.0'

__all__ = [
    'CellKind',
    'Grid',
    'EscapeResult',
    'evaluate',
    'can_escape',
    'PuzzleFormatError',
    'load_puzzles',
    'parse_puzzles',
]
