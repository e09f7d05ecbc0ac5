"""Search and result dataclasses for the fire escape solver."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import numpy as np

from .grid import Position

Route = Tuple[Position, ...]


@dataclass(frozen=True)
class SearchNode:
    """Arena entry for A*; parent is an index into the same arena (-1 = root)."""
    position: Position
    g: int
    h: int
    parent: int = -1

    @property
    def f(self) -> int:
        return self.g + self.h


@dataclass(frozen=True)
class EscapeResult:
    """Outcome of evaluating one grid."""
    escapable: bool
    route: Optional[Route] = None
    start: Optional[Position] = None
    exit: Optional[Position] = None
    hazard_times: Optional[np.ndarray] = field(default=None, compare=False, repr=False)
    expanded: int = 0

    @property
    def steps(self) -> Optional[int]:
        """Number of moves along the route."""
        if self.route is None:
            return None
        return len(self.route) - 1

    @property
    def verdict(self) -> str:
        return "Y" if self.escapable else "N"

    @property
    def reason(self) -> str:
        """Short label for why the grid is (not) escapable."""
        if self.escapable:
            return "escaped"
        if self.start is None or self.exit is None:
            return "missing_endpoint"
        return "cut_off"

    def to_csv_row(self, puzzle: int, rows: int, cols: int) -> Dict:
        """Convert to CSV-compatible format."""
        return {
            "puzzle": puzzle,
            "rows": rows,
            "cols": cols,
            "escapable": self.verdict,
            "steps": "" if self.steps is None else self.steps,
            "route": " ".join(f"{r}:{c}" for r, c in self.route or ()),
        }
