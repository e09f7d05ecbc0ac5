"""Reader for the puzzle-set text format.

Format:
    T
    N M
    <N lines of at least M characters>
    ... (repeated T times)

Rows longer than M are truncated. Characters outside ``#.FDS`` become
empty cells.
"""

import re
from pathlib import Path
from typing import List, Optional

from .model.grid import Grid


class PuzzleFormatError(ValueError):
    """Raised when a puzzle-set file does not follow the expected layout."""

    def __init__(self, message: str, puzzle: Optional[int] = None,
                 line: Optional[int] = None):
        self.puzzle = puzzle
        self.line = line
        where = []
        if puzzle is not None:
            where.append(f"puzzle {puzzle}")
        if line is not None:
            where.append(f"line {line}")
        prefix = f"{', '.join(where)}: " if where else ""
        super().__init__(prefix + message)


# Only real line terminators end a row; other control characters stay in it
_LINE_BREAK = re.compile(r"\r\n|[\n\r\u2028\u2029\u0085]")


class _LineCursor:
    """Sequential access to lines, with token reads for the header values."""

    def __init__(self, text: str):
        self.lines = _LINE_BREAK.split(text)
        if self.lines[-1] == "":
            self.lines.pop()
        self.index = 0
        self._tokens: List[str] = []

    @property
    def line_number(self) -> int:
        return self.index

    def next_int(self, what: str, puzzle: Optional[int] = None) -> int:
        while not self._tokens:
            if self.index >= len(self.lines):
                raise PuzzleFormatError(f"Unexpected end of input reading {what}",
                                        puzzle, self.line_number)
            self._tokens = self.lines[self.index].split()
            self.index += 1
        token = self._tokens.pop(0)
        try:
            return int(token)
        except ValueError:
            raise PuzzleFormatError(f"Expected integer for {what}, got {token!r}",
                                    puzzle, self.line_number) from None

    def next_line(self) -> Optional[str]:
        # Anything left on the "N M" line is discarded
        self._tokens = []
        if self.index >= len(self.lines):
            return None
        line = self.lines[self.index]
        self.index += 1
        return line


def parse_puzzles(text: str) -> List[Grid]:
    """Parse a puzzle set into grids, in input order."""
    cursor = _LineCursor(text)
    count = cursor.next_int("puzzle count")
    if count < 0:
        raise PuzzleFormatError(f"Puzzle count must be non-negative, got {count}")

    grids = []
    for puzzle in range(1, count + 1):
        rows = cursor.next_int("row count", puzzle)
        cols = cursor.next_int("column count", puzzle)
        if rows < 1 or cols < 1:
            raise PuzzleFormatError(f"Grid must be at least 1x1, got {rows}x{cols}",
                                    puzzle, cursor.line_number)

        lines = []
        for i in range(rows):
            line = cursor.next_line()
            if line is None:
                raise PuzzleFormatError(f"Incomplete grid: expected {rows} rows, got {i}",
                                        puzzle, cursor.line_number)
            if len(line) < cols:
                raise PuzzleFormatError(f"Row {i + 1} too short ({len(line)} < {cols})",
                                        puzzle, cursor.line_number)
            lines.append(line[:cols])
        grids.append(Grid.from_lines(lines))
    return grids


def load_puzzles(path: Path) -> List[Grid]:
    """Load and parse a puzzle-set file."""
    with open(path, encoding="utf-8") as f:
        return parse_puzzles(f.read())


def format_puzzles(grids: List[Grid]) -> str:
    """Serialize grids back into the puzzle-set format."""
    out = [str(len(grids))]
    for grid in grids:
        out.append(f"{grid.rows} {grid.cols}")
        out.extend(grid.to_lines())
    return "\n".join(out) + "\n"
