"""Grid snapshot for the fire escape solver."""

from enum import Enum
from typing import Iterable, List, Optional, Tuple

import numpy as np

Position = Tuple[int, int]  # (row, col)

# Von Neumann neighborhood (4-connected): up, right, down, left
DIRECTIONS: Tuple[Position, ...] = ((-1, 0), (0, 1), (1, 0), (0, -1))


class CellKind(Enum):
    """Contents of a single cell, valued by its puzzle-file character."""
    EMPTY = "."
    WALL = "#"
    HAZARD = "F"
    START = "D"
    EXIT = "S"

    @property
    def code(self) -> int:
        """Integer code stored in the grid array."""
        return _KIND_CODES[self]

    @classmethod
    def from_char(cls, char: str) -> "CellKind":
        """Map a puzzle character to a cell kind; unknown characters are empty."""
        try:
            return cls(char)
        except ValueError:
            return cls.EMPTY


_KINDS: Tuple[CellKind, ...] = tuple(CellKind)
_KIND_CODES = {kind: i for i, kind in enumerate(_KINDS)}


class Grid:
    """
    Immutable snapshot of cell contents.

    Coordinate convention: (row, col) for API and [row, col] for array
    indexing. The backing array is read-only.
    """

    def __init__(self, cells: np.ndarray):
        cells = np.array(cells, dtype=np.int8)
        if cells.ndim != 2 or cells.shape[0] < 1 or cells.shape[1] < 1:
            raise ValueError(f"Grid needs at least one row and one column, got shape {cells.shape}")
        if cells.min() < 0 or cells.max() >= len(_KINDS):
            raise ValueError("Grid contains unknown cell codes")
        cells.setflags(write=False)
        self.cells = cells
        self.rows, self.cols = cells.shape

    @classmethod
    def from_kinds(cls, table: Iterable[Iterable[CellKind]]) -> "Grid":
        """Build a grid from rows of cell kinds; rows must be equal length."""
        rows = [[kind.code for kind in row] for row in table]
        widths = {len(row) for row in rows}
        if len(widths) > 1:
            raise ValueError(f"Grid rows have differing lengths: {sorted(widths)}")
        return cls(np.array(rows, dtype=np.int8))

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "Grid":
        """Build a grid from text rows using the puzzle character map."""
        return cls.from_kinds([CellKind.from_char(ch) for ch in line] for line in lines)

    @property
    def shape(self) -> Tuple[int, int]:
        """(rows, cols)."""
        return self.rows, self.cols

    @property
    def walls(self) -> np.ndarray:
        """Boolean mask: True = wall (impassable)."""
        return self.cells == CellKind.WALL.code

    def mask(self, kind: CellKind) -> np.ndarray:
        """Boolean mask of cells of the given kind."""
        return self.cells == kind.code

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if position lies inside the grid."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    def is_walkable(self, row: int, col: int) -> bool:
        """Check if cell is within bounds and not a wall."""
        if not self.in_bounds(row, col):
            return False
        return self.cells[row, col] != CellKind.WALL.code

    def kind_at(self, row: int, col: int) -> CellKind:
        """Return cell kind at position; out-of-bounds raises ValueError."""
        if not self.in_bounds(row, col):
            raise ValueError(f"Position {(row, col)} is outside a {self.rows}x{self.cols} grid")
        return _KINDS[self.cells[row, col]]

    def neighbors(self, row: int, col: int) -> List[Position]:
        """Walkable orthogonal neighbors of a cell."""
        out = []
        for dr, dc in DIRECTIONS:
            nr, nc = row + dr, col + dc
            if self.is_walkable(nr, nc):
                out.append((nr, nc))
        return out

    def find(self, kind: CellKind) -> Optional[Position]:
        """First cell of the given kind in row-major order, or None."""
        rs, cs = np.nonzero(self.cells == kind.code)
        if len(rs) == 0:
            return None
        return int(rs[0]), int(cs[0])

    def positions_of(self, kind: CellKind) -> List[Position]:
        """All cells of the given kind in row-major order."""
        rs, cs = np.nonzero(self.cells == kind.code)
        return [(int(r), int(c)) for r, c in zip(rs, cs)]

    def to_lines(self) -> List[str]:
        """Render the grid back to puzzle-file rows."""
        return ["".join(_KINDS[code].value for code in row) for row in self.cells]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return np.array_equal(self.cells, other.cells)

    def __hash__(self) -> int:
        return hash((self.shape, self.cells.tobytes()))

    def __repr__(self) -> str:
        return f"Grid(rows={self.rows}, cols={self.cols})"
