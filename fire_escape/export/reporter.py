"""Summary report generation for a puzzle batch."""

from typing import Dict, List, Optional, TYPE_CHECKING
from pathlib import Path

if TYPE_CHECKING:
    from ..model.state import EscapeResult


class Reporter:
    """Accumulates verdicts and produces a formatted text report."""

    def __init__(self, input_path: str, workers: int = 1):
        self.input_path = input_path
        self.workers = workers
        self.results: List["EscapeResult"] = []
        self.reasons: Dict[str, int] = {'escaped': 0, 'missing_endpoint': 0, 'cut_off': 0}
        self.interrupted = False

    def update(self, result: "EscapeResult") -> None:
        """Accumulate one verdict."""
        self.results.append(result)
        self.reasons[result.reason] += 1

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def escapable(self) -> int:
        return self.reasons['escaped']

    def route_steps(self) -> List[int]:
        return [r.steps for r in self.results if r.steps is not None]

    def summary(self) -> Dict[str, Optional[float]]:
        steps = self.route_steps()
        return {
            'total': self.total,
            'escapable': self.escapable,
            'escapable_pct': (self.escapable / self.total * 100) if self.total else 0.0,
            'avg_steps': (sum(steps) / len(steps)) if steps else None,
            'max_steps': max(steps) if steps else None,
            'expanded': sum(r.expanded for r in self.results),
        }

    def generate_summary(self, output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool) -> str:
        """Returns formatted text report."""
        stats = self.summary()
        avg = f"{stats['avg_steps']:.1f} steps" if stats['avg_steps'] is not None else "n/a"
        longest = f"{stats['max_steps']} steps" if stats['max_steps'] is not None else "n/a"

        lines = [
            "",
            "=" * 80,
            "                    FIRE ESCAPE BATCH REPORT",
            "=" * 80,
            f"Puzzle File: {self.input_path}",
            f"Workers:     {self.workers}",
        ]
        if self.interrupted:
            lines.append("Status:      INTERRUPTED (verdicts below are incomplete)")

        lines += [
            "",
            "VERDICTS",
            "-" * 40,
            f"Puzzles Evaluated:     {stats['total']}",
            f"Escapable:             {stats['escapable']} / {stats['total']} ({stats['escapable_pct']:.1f}%)",
            f"Average Route Length:  {avg}",
            f"Longest Route:         {longest}",
            f"Search Expansions:     {stats['expanded']}",
            "",
            "FAILURE BREAKDOWN",
            "-" * 40,
            f"Missing Start/Exit:    {self.reasons['missing_endpoint']}",
            f"Cut Off by Fire/Walls: {self.reasons['cut_off']}",
            "",
            "OUTPUT FILES",
            "-" * 40,
        ]

        if csv_enabled:
            lines.append(f"CSV Log:    {output_dir / 'verdicts.csv'}")
        else:
            lines.append("CSV Log:    (disabled)")

        if snapshot_enabled:
            lines.append(f"Snapshots:  {output_dir / 'puzzle_<n>.png'}")
        else:
            lines.append("Snapshots:  (disabled)")

        if gif_enabled:
            lines.append(f"Animations: {output_dir / 'puzzle_<n>.gif'}")
        else:
            lines.append("Animations: (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)
