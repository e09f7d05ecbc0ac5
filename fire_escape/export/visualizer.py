"""Rendering of grids, hazard fronts and escape routes."""

import io
from pathlib import Path
from typing import List, Optional, TYPE_CHECKING

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.colors import to_rgb
from PIL import Image

from ..model.grid import CellKind
from ..model.hazard import HazardClock

if TYPE_CHECKING:
    from ..model.grid import Grid
    from ..model.state import EscapeResult


class Visualizer:
    """
    Generates visual outputs using matplotlib.

    Supports:
    - Single PNG snapshots of a grid with its route
    - Animated GIF of the hazard front racing the agent

    The grid and route are only read, never modified.
    """

    # Color scheme
    COLORS = {
        CellKind.WALL: '#000000',    # Black
        CellKind.EMPTY: '#2ECC71',   # Green
        CellKind.HAZARD: '#E74C3C',  # Red
        CellKind.START: '#00FFFF',   # Cyan
        CellKind.EXIT: '#F1C40F',    # Yellow
        'route': '#1F4FE0',          # Blue
        'burning': '#C0392B',        # Dark red
        'agent': '#FFFFFF',
    }

    def __init__(self, grid: "Grid", show_hazard_times: bool = True, dpi: int = 120):
        self.grid = grid
        self.show_hazard_times = show_hazard_times
        self.dpi = dpi
        self.frames: List[Image.Image] = []

    def _base_image(self) -> np.ndarray:
        """RGB layer colored by cell kind."""
        base = np.ones((self.grid.rows, self.grid.cols, 3))
        for kind in CellKind:
            base[self.grid.mask(kind)] = to_rgb(self.COLORS[kind])
        return base

    def _create_figure(self, result: Optional["EscapeResult"] = None,
                       step: Optional[int] = None,
                       title: Optional[str] = None) -> plt.Figure:
        """Create matplotlib figure for the grid, optionally at a given step."""
        rows, cols = self.grid.shape
        fig_width = max(4, min(16, cols * 0.5 + 2))
        fig_height = max(3, min(16, rows * 0.5 + 1))
        fig, ax = plt.subplots(figsize=(fig_width, fig_height))

        base = self._base_image()
        hazard_times = result.hazard_times if result is not None else None

        # Cells already taken by the hazard at this step
        if step is not None and hazard_times is not None:
            clock = HazardClock(self.grid, hazard_times)
            burning = clock.burning_at(step) & ~self.grid.walls
            base[burning] = to_rgb(self.COLORS['burning'])

        ax.imshow(base, origin='upper', aspect='equal',
                  extent=[-0.5, cols - 0.5, rows - 0.5, -0.5])

        # Grid lines
        ax.set_xticks(np.arange(-0.5, cols, 1), minor=True)
        ax.set_yticks(np.arange(-0.5, rows, 1), minor=True)
        ax.grid(which='minor', color='black', linewidth=0.5)
        ax.tick_params(which='minor', length=0)

        if self.show_hazard_times and hazard_times is not None and step is None:
            for r in range(rows):
                for c in range(cols):
                    t = hazard_times[r, c]
                    if np.isfinite(t) and t > 0:
                        ax.text(c, r, str(int(t)), ha='center', va='center',
                                fontsize=7, color='black', alpha=0.6)

        # Route overlay
        route = result.route if result is not None else None
        if route:
            shown = route if step is None else route[:step + 1]
            ys = [p[0] for p in shown]
            xs = [p[1] for p in shown]
            ax.plot(xs, ys, '-', color=self.COLORS['route'], linewidth=2.5)
            ax.plot(xs, ys, 's', color=self.COLORS['route'], markersize=6)
            if step is not None:
                r, c = shown[-1]
                ax.plot(c, r, 'o', color=self.COLORS['agent'], markersize=9,
                        markeredgecolor='black', markeredgewidth=1.0)

        if title is None:
            title = f'{rows}x{cols} grid'
            if result is not None:
                title += f' | Escapable: {result.verdict}'
                if result.steps is not None:
                    title += f' | Steps: {result.steps}'
            if step is not None:
                title += f' | t = {step}'
        ax.set_title(title)
        ax.set_xlabel('Column')
        ax.set_ylabel('Row')

        # Legend
        legend_elements = [
            plt.Line2D([0], [0], marker='s', color='w', label=label,
                       markerfacecolor=self.COLORS[key], markeredgecolor='black',
                       markersize=8)
            for key, label in [
                (CellKind.WALL, 'Wall'),
                (CellKind.EMPTY, 'Empty'),
                (CellKind.HAZARD, 'Fire'),
                (CellKind.START, 'Start'),
                (CellKind.EXIT, 'Exit'),
                ('route', 'Route'),
            ]
        ]
        ax.legend(handles=legend_elements, loc='upper left',
                  bbox_to_anchor=(1.02, 1.0), fontsize=8)

        plt.tight_layout()
        return fig

    def buffer_frame(self, result: "EscapeResult", step: int) -> None:
        """Store frame for GIF generation."""
        fig = self._create_figure(result, step=step)

        # Convert to PIL Image
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=80)
        buf.seek(0)
        img = Image.open(buf).copy()
        self.frames.append(img)
        buf.close()
        plt.close(fig)

    def save_snapshot(self, output_path: Path,
                      result: Optional["EscapeResult"] = None,
                      title: Optional[str] = None) -> None:
        """Save single PNG image of the grid and its route."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._create_figure(result, title=title)
        fig.savefig(output_path, dpi=self.dpi, bbox_inches='tight')
        plt.close(fig)

    def render_escape(self, result: "EscapeResult") -> int:
        """Buffer one frame per step of the route. Returns frame count."""
        self.frames.clear()
        if not result.route:
            return 0
        for step in range(len(result.route)):
            self.buffer_frame(result, step)
        return len(result.route)

    def generate_gif(self, output_path: Path, fps: int = 4) -> None:
        """Compile buffered frames into animated GIF."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        duration = int(1000 / fps)  # milliseconds per frame

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            duration=duration,
            loop=0
        )
