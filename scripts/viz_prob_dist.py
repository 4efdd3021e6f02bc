#!/usr/bin/env python3
"""Plot the hit distribution and success-chance curves of a pool analysis.

Left: analytic hit-count mass against the simulated frequencies.
Right: truncated success chance by pool size, one line per threshold.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd


def main():
    parser = argparse.ArgumentParser(
        description="Generate hit distribution and success chance plots"
    )
    parser.add_argument(
        "--results", required=True, help="Path to pool analysis results directory"
    )
    parser.add_argument("--output", default=None, help="Output file path")
    parser.add_argument(
        "--max-threshold",
        type=int,
        default=4,
        help="Highest success threshold drawn on the chance curve (default: 4)",
    )
    args = parser.parse_args()

    results_dir = Path(args.results)
    dist_file = results_dir / "hit_distribution.csv"
    table_file = results_dir / "chance_table.csv"
    stats_file = results_dir / "pool_statistics.json"

    for required in (dist_file, table_file, stats_file):
        if not required.exists():
            print(f"Error: Results file not found: {required}")
            return 1

    dist = pd.read_csv(dist_file)
    table = pd.read_csv(table_file)
    with open(stats_file) as f:
        stats = json.load(f)

    pool = stats["pool"]
    threshold = pool["success_threshold"]

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 5))

    # ===== Left: Hit Distribution =====
    x = dist["hits"].values
    width = 0.4
    colors = np.where(x >= threshold, "steelblue", "lightgray")
    ax1.bar(
        x - width / 2,
        dist["analytic"].values,
        width=width,
        color=colors,
        edgecolor="white",
        label="Binomial",
    )
    ax1.bar(
        x + width / 2,
        dist["empirical"].values,
        width=width,
        color="#A23B72",
        alpha=0.7,
        edgecolor="white",
        label=f"Simulated (n={stats['n_trials']})",
    )
    ax1.axvline(
        x=threshold - 0.5,
        color="orange",
        linestyle="--",
        linewidth=2,
        label=f"Threshold ({threshold})",
    )

    ax1.set_xlabel("Hits", fontsize=12)
    ax1.set_ylabel("Probability", fontsize=12)
    ax1.set_title(
        f"{pool['rolls']}d{pool['sides_on_die']} hits on {pool['target']}+",
        fontsize=14,
    )
    ax1.set_xticks(x)
    ax1.legend(loc="upper right", fontsize=9)
    ax1.grid(True, alpha=0.3)

    textstr = (
        f"Exact: {stats['exact']['chance_pct']}%\n"
        f"Simulated: {100 * stats['success_rate']:.2f}%"
    )
    props = dict(boxstyle="round", facecolor="wheat", alpha=0.7)
    ax1.text(
        0.05,
        0.95,
        textstr,
        transform=ax1.transAxes,
        fontsize=11,
        verticalalignment="top",
        bbox=props,
    )

    # ===== Right: Success Chance by Pool Size =====
    for t in range(1, args.max_threshold + 1):
        rows = table[table["success_threshold"] == t]
        if rows.empty:
            continue
        ax2.plot(
            rows["rolls"].values,
            rows["chance_pct"].values,
            marker="o",
            linewidth=2,
            label=f"{t}+ hits",
        )

    ax2.set_xlabel("Dice in Pool", fontsize=12)
    ax2.set_ylabel("Success Chance (%)", fontsize=12)
    ax2.set_title(f"Success Chance, target {pool['target']}+", fontsize=14)
    ax2.set_ylim(0, 100)
    ax2.legend(loc="lower right", fontsize=9)
    ax2.grid(True, alpha=0.3)

    # Output
    output_path = args.output
    if output_path is None:
        figures_dir = results_dir.parent / "figures"
        figures_dir.mkdir(exist_ok=True)
        output_path = figures_dir / "pool_distribution.png"

    plt.tight_layout()
    plt.savefig(output_path, dpi=150)
    print(f"Saved: {output_path}")
    plt.close()
    return 0


if __name__ == "__main__":
    exit(main())
