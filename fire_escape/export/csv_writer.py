"""CSV export of per-puzzle verdicts."""

import csv
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..model.grid import Grid
    from ..model.state import EscapeResult


class CSVWriter:
    """
    Exports verdicts to CSV format incrementally.

    Output format:
        puzzle,rows,cols,escapable,steps,route
        1,3,3,Y,4,0:0 0:1 0:2 1:2 2:2
        ...
    """

    FIELDNAMES = ['puzzle', 'rows', 'cols', 'escapable', 'steps', 'route']

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)
        self.file: Optional[object] = None
        self.writer: Optional[csv.DictWriter] = None
        self._is_open = False

    def open(self) -> None:
        """Initialize file and write header."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.file = open(self.output_path, 'w', newline='')
        self.writer = csv.DictWriter(self.file, fieldnames=self.FIELDNAMES)
        self.writer.writeheader()
        self._is_open = True

    def append(self, puzzle: int, grid: "Grid", result: "EscapeResult") -> None:
        """Write the verdict row for one puzzle."""
        if not self._is_open:
            self.open()
        self.writer.writerow(result.to_csv_row(puzzle, grid.rows, grid.cols))
        self.file.flush()

    def close(self) -> None:
        """Close file handle."""
        if self.file:
            self.file.close()
            self.file = None
            self.writer = None
            self._is_open = False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
