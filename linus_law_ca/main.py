#!/usr/bin/env python3
"""
Linus's Law Cellular Automaton

Simulates contributors improving the positional accuracy of crowd-sourced
map objects, to see whether more contributors mean less error.

Usage:
    linus-law-ca [--config configs/default.yaml] [options]

Examples:
    linus-law-ca
    linus-law-ca --config configs/default.yaml --gif --out-dir results/
    linus-law-ca --config configs/casual_only.yaml --uniform --quiet
    linus-law-ca --horizon 500 --seed 42
"""

import argparse
import sys
from pathlib import Path

from .config import ConfigError, default_config, load_config, validate_config
from .model.engine import SimulationEngine
from .export.csv_writer import CSVWriter
from .export.visualizer import Visualizer
from .export.reporter import Reporter


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Linus's Law Cellular Automaton Simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    linus-law-ca
    linus-law-ca --config configs/default.yaml --gif --out-dir results/
    linus-law-ca --config configs/casual_only.yaml --uniform --quiet
    linus-law-ca --horizon 500 --seed 42
        """
    )

    parser.add_argument('--config', type=Path, default=None,
                        help='Path to YAML configuration file '
                             '(default: built-in two-class scenario)')

    # Optional overrides
    parser.add_argument('--horizon', type=int, default=None,
                        help='Override run horizon (ticks)')
    parser.add_argument('--out-dir', type=Path, default=Path('./output'),
                        help='Output directory for exports (default: ./output)')

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('--prioritized', dest='prioritized', action='store_true',
                      default=None,
                      help='Attractiveness-weighted target selection')
    mode.add_argument('--uniform', dest='prioritized', action='store_false',
                      help='Uniform target selection')

    # Export toggles
    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable CSV export (default)')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV export')

    parser.add_argument('--snapshot', dest='snapshot', action='store_true', default=None,
                        help='Enable final snapshot (default)')
    parser.add_argument('--no-snapshot', dest='snapshot', action='store_false',
                        help='Disable final snapshot')

    parser.add_argument('--gif', action='store_true', default=False,
                        help='Enable GIF animation export')

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress stdout output')

    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility')

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Load configuration
    try:
        config = load_config(args.config) if args.config else default_config()
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    # Apply CLI overrides
    if args.horizon is not None:
        config.horizon = args.horizon
    if args.prioritized is not None:
        config.selection.prioritized = args.prioritized
    if args.csv is not None:
        config.csv_enabled = args.csv
    if args.snapshot is not None:
        config.snapshot_enabled = args.snapshot
    if args.gif:
        config.gif_enabled = True
    config.quiet = args.quiet
    if args.seed is not None:
        config.seed = args.seed
    config.out_dir = args.out_dir

    try:
        validate_config(config)
    except ConfigError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    if not config.quiet:
        print("Initializing simulation...")
        print(f"  Grid: {config.grid.width}x{config.grid.height} "
              f"(existence ratio {config.grid.existence_ratio})")
        for b in config.behaviors:
            print(f"  {b.name}: {b.count} agents x {b.frequency} actions/tick")
        mode = 'prioritized' if config.selection.prioritized else 'uniform'
        print(f"  Selection: {mode}, radius {config.selection.radius}")
        print(f"  Horizon: {config.horizon}")

    engine = SimulationEngine(config)
    engine.setup()

    if not config.quiet:
        print(f"  Objects: {engine.metrics.existing_count}")

    # Initialize exporters
    csv_writer = None
    if config.csv_enabled:
        csv_writer = CSVWriter(config.out_dir / 'metrics_log.csv')
        csv_writer.open()

    visualizer = Visualizer(config.grid.width, config.grid.height)
    config_label = str(args.config) if args.config else '(built-in default)'
    reporter = Reporter(config_label, config.seed)

    if not config.quiet:
        print("\nRunning simulation...")

    final_state = None
    try:
        while not engine.is_finished():
            state = engine.step()
            final_state = state

            if csv_writer:
                csv_writer.append(state)

            # Buffer GIF frame (every N ticks to reduce memory)
            if config.gif_enabled:
                if state.tick % 5 == 0 or engine.is_finished():
                    visualizer.buffer_frame(state)

            reporter.update(state)

            if not config.quiet and state.tick % 50 == 0:
                m = state.metrics
                print(f"  Tick {state.tick}: {m.mapped_count} mapped, "
                      f"mean error {m.mean_quality:.2f} m")

    except KeyboardInterrupt:
        if not config.quiet:
            print("\nSimulation interrupted by user.")

    # Cleanup and final exports
    if csv_writer:
        csv_writer.close()
        if not config.quiet:
            print(f"\nCSV saved: {config.out_dir / 'metrics_log.csv'}")

    if config.snapshot_enabled and final_state:
        snapshot_path = config.out_dir / 'final_state.png'
        visualizer.save_snapshot(final_state, snapshot_path)
        if not config.quiet:
            print(f"Snapshot saved: {snapshot_path}")

    if config.gif_enabled:
        gif_path = config.out_dir / 'simulation.gif'
        if not config.quiet:
            print(f"Generating GIF ({len(visualizer.frames)} frames)...")
        visualizer.generate_gif(gif_path, fps=10)
        if not config.quiet:
            print(f"Animation saved: {gif_path}")

    if not config.quiet and engine.summary:
        report = reporter.generate_summary(
            engine.summary,
            config.out_dir,
            config.csv_enabled,
            config.snapshot_enabled,
            config.gif_enabled
        )
        print(report)

    return 0


if __name__ == '__main__':
    sys.exit(main())
