#!/usr/bin/env python3
"""
Dice Pool Probability - Main Pipeline Entry Point.

Usage:
    python main.py                              # 5d6, target 4+, 1 hit (constants.yaml)
    python main.py --rolls 8 --success 3        # 8 dice needing 3 hits
    python main.py --sides 10 --target 8        # d10 pool, 8+ hits
    python main.py --trials 100000 --seed 7     # larger Monte Carlo run
    python main.py --output results/run1        # Custom output directory
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from analysis import run_pool_analysis
from config.settings import DiceSettings
from entities import PoolSpec
from utils import get_max_rolls, get_monte_carlo_defaults, load_constants_from_file


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Dice Pool Success Probability & Simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --rolls 6 --target 5 --success 2
  python main.py --sides 10 --target 8 --trials 50000 --output results/d10
        """,
    )

    parser.add_argument(
        "--rolls",
        type=int,
        default=5,
        help="Number of dice in the pool (default: 5)",
    )

    parser.add_argument(
        "--target",
        type=int,
        default=None,
        help="Inclusive face value counted as a hit (default: constants.yaml)",
    )

    parser.add_argument(
        "--success",
        type=int,
        default=None,
        help="Hits required for success (default: constants.yaml)",
    )

    parser.add_argument(
        "--sides",
        type=int,
        default=None,
        help="Faces per die (default: constants.yaml)",
    )

    parser.add_argument(
        "--trials",
        type=int,
        default=None,
        help="Monte Carlo pools to simulate (default: constants.yaml)",
    )

    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: constants.yaml)",
    )

    parser.add_argument(
        "--max-rolls",
        type=int,
        default=None,
        help="Largest pool size in the chance table (default: constants.yaml)",
    )

    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory for results (default: results/<timestamp>)",
    )

    parser.add_argument(
        "--constants",
        type=str,
        default=None,
        help="Path to constants.yaml file (default: config/constants.yaml)",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )

    return parser.parse_args(argv)


def create_settings(args: argparse.Namespace, constants: dict) -> DiceSettings:
    """
    Create DiceSettings from constants, with command line overrides.

    Raises:
        InvalidParameter: If the resulting configuration is invalid
    """
    base = DiceSettings.from_config(constants)
    return DiceSettings(
        sides_on_die=args.sides if args.sides is not None else base.sides_on_die,
        standard_target=(
            args.target if args.target is not None else base.standard_target
        ),
        success_threshold=(
            args.success if args.success is not None else base.success_threshold
        ),
        max_tries=base.max_tries,
    )


def run_pipeline(args: argparse.Namespace) -> dict:
    """Load constants, build settings and run the analysis."""
    constants = load_constants_from_file(args.constants)
    settings = create_settings(args, constants)

    default_trials, default_seed = get_monte_carlo_defaults(constants)
    n_trials = args.trials if args.trials is not None else default_trials
    seed = args.seed if args.seed is not None else default_seed
    max_rolls = args.max_rolls if args.max_rolls is not None else get_max_rolls(constants)

    if args.output:
        output_dir = Path(args.output)
    else:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_dir = Path(f"results/{timestamp}")

    spec = PoolSpec.standard(settings, args.rolls)

    if args.verbose:
        print("=" * 60)
        print("Dice Pool Success Probability")
        print("=" * 60)
        print(f"Die: d{settings.sides_on_die}")
        print(f"Pool: {spec.rolls} dice, target {spec.target}+")
        print(f"Success threshold: {spec.success_threshold} hit(s)")
        print(f"Trials: {n_trials} (seed {seed})")
        print(f"Output: {output_dir}")
        print("=" * 60)

    return run_pool_analysis(
        settings,
        spec,
        n_trials=n_trials,
        seed=seed,
        max_rolls=max_rolls,
        output_dir=output_dir,
        verbose=args.verbose,
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        result = run_pipeline(args)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except (ValueError, KeyError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 3

    stats = result["statistics"]
    print(f"Exact chance: {stats['exact']['chance_pct']}%")
    print(f"Simulated success rate: {100 * stats['success_rate']:.2f}%")
    return 0


if __name__ == "__main__":
    sys.exit(main())
