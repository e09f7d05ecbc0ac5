#!/usr/bin/env python3
"""
Fire Escape Solver

Decides, for each grid in a puzzle set, whether the agent (D) can reach the
exit (S) strictly before the spreading fire (F) does, and prints one Y/N
verdict per grid in input order.

Usage:
    python -m fire_escape.main puzzles.txt [options]

Examples:
    python -m fire_escape.main puzzles.txt
    python -m fire_escape.main puzzles.txt --snapshot --gif --out-dir results/
    python -m fire_escape.main --config configs/default.yaml --workers 4
    python -m fire_escape.main puzzles.txt --no-csv --quiet
"""

import argparse
import concurrent.futures
import logging
import sys
from pathlib import Path
from typing import Iterator, List, Optional

from .config import EscapeConfig, default_config, load_config
from .model.evaluator import evaluate
from .model.grid import Grid
from .model.state import EscapeResult
from .puzzles import load_puzzles
from .export.csv_writer import CSVWriter
from .export.visualizer import Visualizer
from .export.reporter import Reporter


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Fire escape solver: multi-source fire BFS + time-constrained A*',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m fire_escape.main puzzles.txt
    python -m fire_escape.main puzzles.txt --snapshot --gif --out-dir results/
    python -m fire_escape.main --config configs/default.yaml --workers 4
    python -m fire_escape.main puzzles.txt --no-csv --quiet
        """
    )

    parser.add_argument('input', type=Path, nargs='?', default=None,
                        help='Puzzle-set file (overrides "input" from the config)')
    parser.add_argument('--config', type=Path, default=None,
                        help='Path to YAML configuration file')

    # Optional overrides
    parser.add_argument('--out-dir', type=Path, default=None,
                        help='Output directory for exports (default: ./output)')
    parser.add_argument('--workers', type=int, default=None,
                        help='Evaluate puzzles in N parallel processes')

    # Export toggles
    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable CSV verdict log (default)')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV verdict log')

    parser.add_argument('--snapshot', dest='snapshot', action='store_true', default=None,
                        help='Save a PNG per puzzle')
    parser.add_argument('--no-snapshot', dest='snapshot', action='store_false',
                        help='Disable PNG snapshots (default)')

    parser.add_argument('--gif', action='store_true', default=False,
                        help='Save a GIF of the escape for each escapable puzzle')

    parser.add_argument('--report', dest='report', action='store_true', default=None,
                        help='Print the summary report (default)')
    parser.add_argument('--no-report', dest='report', action='store_false',
                        help='Only print verdicts')

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress everything but the verdicts')
    parser.add_argument('--verbose', action='store_true', default=False,
                        help='Enable debug logging')

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> EscapeConfig:
    """Load the config file (if any) and apply CLI overrides."""
    config = load_config(args.config) if args.config else default_config()

    if args.input is not None:
        config.input_path = args.input
    if config.input_path is None:
        raise ValueError("No puzzle file given (positional argument or 'input' in config)")
    if args.out_dir is not None:
        config.out_dir = args.out_dir
    if args.workers is not None:
        if args.workers < 1:
            raise ValueError(f"--workers must be at least 1, got {args.workers}")
        config.workers = args.workers
    if args.csv is not None:
        config.export.csv = args.csv
    if args.snapshot is not None:
        config.export.snapshot = args.snapshot
    if args.gif:
        config.export.gif = True
    if args.report is not None:
        config.report = args.report
    config.quiet = args.quiet
    return config


def evaluate_all(grids: List[Grid], workers: int = 1) -> Iterator[EscapeResult]:
    """Yield results in input order, optionally from a process pool."""
    if workers <= 1 or len(grids) <= 1:
        for grid in grids:
            yield evaluate(grid)
        return

    max_workers = min(workers, len(grids))
    with concurrent.futures.ProcessPoolExecutor(max_workers=max_workers) as executor:
        yield from executor.map(evaluate, grids)


def export_visuals(config: EscapeConfig, puzzle: int, grid: Grid,
                   result: EscapeResult) -> None:
    """Write the PNG snapshot and/or escape GIF for one puzzle."""
    visualizer = Visualizer(grid, config.render.show_hazard_times, config.render.dpi)
    if config.export.snapshot:
        visualizer.save_snapshot(config.out_dir / f'puzzle_{puzzle}.png', result)
    if config.export.gif and result.escapable:
        visualizer.render_escape(result)
        visualizer.generate_gif(config.out_dir / f'puzzle_{puzzle}.gif', fps=config.render.fps)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(levelname)s %(name)s: %(message)s')

    try:
        config = build_config(args)
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    try:
        grids = load_puzzles(config.input_path)
    except FileNotFoundError:
        print(f"Error: Puzzle file not found: {config.input_path}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error reading puzzles: {e}", file=sys.stderr)
        return 1

    def info(message: str) -> None:
        # Verdicts own stdout; progress goes to stderr
        if not config.quiet:
            print(message, file=sys.stderr)

    info(f"Loaded {len(grids)} puzzle(s) from {config.input_path}")

    csv_writer = None
    if config.export.csv:
        csv_writer = CSVWriter(config.out_dir / 'verdicts.csv')
        csv_writer.open()

    reporter = Reporter(str(config.input_path), config.workers)

    try:
        for puzzle, (grid, result) in enumerate(zip(grids, evaluate_all(grids, config.workers)), 1):
            print(result.verdict)

            if csv_writer:
                csv_writer.append(puzzle, grid, result)
            if config.export.snapshot or config.export.gif:
                export_visuals(config, puzzle, grid, result)

            reporter.update(result)
    except KeyboardInterrupt:
        reporter.interrupted = True
        info("\nEvaluation interrupted by user.")
    finally:
        if csv_writer:
            csv_writer.close()

    if config.report and not config.quiet:
        report = reporter.generate_summary(
            config.out_dir,
            config.export.csv,
            config.export.snapshot,
            config.export.gif
        )
        print(report, file=sys.stderr)

    return 130 if reporter.interrupted else 0


if __name__ == '__main__':
    sys.exit(main())
