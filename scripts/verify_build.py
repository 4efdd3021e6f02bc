#!/usr/bin/env python3
import sys
from pathlib import Path

from scipy import stats as sp_stats

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from config.settings import DiceSettings
from probability import ProbabilityEngine
from simulation.engine import DiceSimulator
from utils import load_constants_from_file


def verify():
    print("Loading constants...")
    constants = load_constants_from_file()

    print("Initializing DiceSettings...")
    settings = DiceSettings.from_config(constants)
    engine = ProbabilityEngine(settings)
    print(f"Die: d{settings.sides_on_die}, target {settings.standard_target}+")

    print("\n--- Engine vs scipy.stats.binom ---")
    p = engine.hit_probability()
    worst = 0.0
    for rolls in (1, 2, 5, 10, 50, 200, 1000):
        for threshold in (1, rolls // 2, rolls):
            ours = engine.success_probability(rolls, success_threshold=threshold)
            ref = float(sp_stats.binom.sf(threshold - 1, rolls, p))
            worst = max(worst, abs(ours - ref))
            print(f"n={rolls:<5} t={threshold:<5} ours={ours:.10f} scipy={ref:.10f}")
    print(f"Max abs difference: {worst:.3e}")

    print("\n--- Seed reproduction ---")
    sim = DiceSimulator(settings, seed=42)
    handle = sim.save_seed()
    first = [sim.roll_die() for _ in range(10)]
    sim.set_seed(handle)
    second = [sim.roll_die() for _ in range(10)]
    print(f"Draws: {first}")
    print(f"Reproduced: {first == second}")


if __name__ == "__main__":
    verify()
