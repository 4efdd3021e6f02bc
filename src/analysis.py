"""Monte Carlo vs. closed-form analysis of dice pools."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from config.settings import DiceSettings
from entities import PoolSpec
from probability import ProbabilityEngine
from simulation.engine import DiceSimulator


def pool_successes(hits: np.ndarray, spec: PoolSpec) -> np.ndarray:
    """Per-trial success flags; an empty pool always fails."""
    hits_arr = np.asarray(hits)
    return (hits_arr >= spec.success_threshold) & (spec.rolls > 0)


def compute_statistics(
    hits: np.ndarray, success_threshold: int, rolls: int | None = None
) -> dict[str, Any]:
    """Compute summary statistics from simulated hit counts.

    Args:
        hits: Hit count of each simulated pool.
        success_threshold: Hits needed for a success.
        rolls: Pool size; when given, a pool with no dice counts as a failure.

    Returns:
        Dictionary with statistical summaries.
    """
    hits_arr = np.asarray(hits)
    if hits_arr.size == 0:
        raise ValueError("compute_statistics needs at least one trial")

    successes = hits_arr >= success_threshold
    if rolls is not None and rolls <= 0:
        successes = np.zeros_like(successes)

    return {
        "n_trials": int(hits_arr.size),
        "success_rate": float(np.mean(successes)),
        "hits": {
            "mean": float(np.mean(hits_arr)),
            "std": float(np.std(hits_arr)),
            "min": int(np.min(hits_arr)),
            "max": int(np.max(hits_arr)),
            "median": float(np.median(hits_arr)),
            "p5": float(np.percentile(hits_arr, 5)),
            "p95": float(np.percentile(hits_arr, 95)),
        },
    }


def build_hit_distribution(
    engine: ProbabilityEngine, spec: PoolSpec, hits: np.ndarray
) -> pd.DataFrame:
    """Analytic probability mass next to the empirical frequency per hit count."""
    pmf = engine.hit_distribution(spec.rolls, spec.target)
    counts = np.bincount(np.asarray(hits, dtype=np.int64), minlength=len(pmf))
    return pd.DataFrame(
        {
            "hits": np.arange(len(pmf)),
            "analytic": pmf,
            "empirical": counts[: len(pmf)] / max(len(hits), 1),
        }
    )


def build_chance_table(
    engine: ProbabilityEngine, max_rolls: int, target: int | None = None
) -> pd.DataFrame:
    """Truncated success chance for every pool size and threshold up to max_rolls."""
    if target is None:
        target = engine.settings.standard_target

    rows = []
    for rolls in range(1, max_rolls + 1):
        for threshold in range(0, rolls + 1):
            rows.append(
                {
                    "rolls": rolls,
                    "target": target,
                    "success_threshold": threshold,
                    "probability": engine.success_probability(rolls, target, threshold),
                    "chance_pct": engine.compute_success_chance(
                        rolls, target, threshold
                    ),
                }
            )
    return pd.DataFrame(rows)


def run_pool_analysis(
    settings: DiceSettings,
    spec: PoolSpec,
    n_trials: int = 10000,
    seed: int = 42,
    max_rolls: int | None = None,
    output_dir: str | Path | None = None,
    verbose: bool = True,
) -> dict[str, Any]:
    """Run the full pool analysis pipeline.

    Args:
        settings: Dice configuration.
        spec: Pool under study.
        n_trials: Number of Monte Carlo pools.
        seed: Random seed.
        max_rolls: Largest pool size in the chance table (skipped if None).
        output_dir: Optional output directory for results.
        verbose: Print progress.

    Returns:
        Dictionary with statistics, raw hits, distribution and chance table.
    """
    spec.validate(settings)
    engine = ProbabilityEngine(settings)
    simulator = DiceSimulator(settings, seed=seed)

    exact_chance = engine.compute_success_chance(
        spec.rolls, spec.target, spec.success_threshold
    )
    exact_probability = engine.success_probability(
        spec.rolls, spec.target, spec.success_threshold
    )
    if verbose:
        print(
            f"[Dice] Pool: {spec.rolls}d{settings.sides_on_die}, "
            f"target {spec.target}+, need {spec.success_threshold} hit(s)"
        )
        print(f"[Dice] Exact chance: {exact_chance}%")
        print(f"[Dice] Running {n_trials} Monte Carlo pools (seed {seed})...")

    seed_handle = simulator.save_seed()
    hits = simulator.simulate(spec, n_trials)

    stats = compute_statistics(hits, spec.success_threshold, spec.rolls)
    stats["pool"] = {
        "rolls": spec.rolls,
        "target": spec.target,
        "success_threshold": spec.success_threshold,
        "sides_on_die": settings.sides_on_die,
    }
    stats["exact"] = {
        "probability": exact_probability,
        "chance_pct": exact_chance,
        "expected_hits": engine.expected_hits(spec.rolls, spec.target),
    }
    stats["seed"] = {"value": seed, "handle": seed_handle.index}
    stats["abs_error"] = abs(stats["success_rate"] - exact_probability)

    if verbose:
        print(
            f"[Dice] Completed. Simulated success rate: {stats['success_rate']:.4f} "
            f"(exact {exact_probability:.4f}, |err| {stats['abs_error']:.4f})"
        )
        print(
            f"[Dice] Mean hits: {stats['hits']['mean']:.3f} "
            f"(expected {stats['exact']['expected_hits']:.3f})"
        )

    distribution = None
    if spec.rolls > 0:
        distribution = build_hit_distribution(engine, spec, hits)

    chance_table = None
    if max_rolls is not None:
        if verbose:
            print(f"[Dice] Building chance table up to {max_rolls} dice...")
        chance_table = build_chance_table(engine, max_rolls, spec.target)

    # Save results if output_dir provided
    if output_dir is not None:
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        stats_file = output_path / "pool_statistics.json"
        with open(stats_file, "w") as f:
            json.dump(stats, f, indent=2)
        if verbose:
            print(f"[Dice] Statistics saved to: {stats_file}")

        hits_df = pd.DataFrame(
            {
                "trial": range(len(hits)),
                "hits": hits,
                "success": pool_successes(hits, spec),
            }
        )
        hits_file = output_path / "hit_counts.csv"
        hits_df.to_csv(hits_file, index=False)
        if verbose:
            print(f"[Dice] Raw hit counts saved to: {hits_file}")

        if distribution is not None:
            dist_file = output_path / "hit_distribution.csv"
            distribution.to_csv(dist_file, index=False)
            if verbose:
                print(f"[Dice] Hit distribution saved to: {dist_file}")

        if chance_table is not None:
            table_file = output_path / "chance_table.csv"
            chance_table.to_csv(table_file, index=False)
            if verbose:
                print(f"[Dice] Chance table saved to: {table_file}")

    return {
        "statistics": stats,
        "hits": hits,
        "distribution": distribution,
        "chance_table": chance_table,
    }
