import json

import numpy as np
import pandas as pd
import pytest

from analysis import (
    build_chance_table,
    build_hit_distribution,
    compute_statistics,
    run_pool_analysis,
)
from config.settings import DiceSettings
from entities import PoolSpec
from main import main as cli_main
from probability import ProbabilityEngine


def test_compute_statistics():
    stats = compute_statistics(np.array([0, 1, 2, 3, 4]), success_threshold=2)
    assert stats["n_trials"] == 5
    assert stats["success_rate"] == pytest.approx(0.6)
    assert stats["hits"]["mean"] == pytest.approx(2.0)
    assert stats["hits"]["min"] == 0
    assert stats["hits"]["max"] == 4
    assert stats["hits"]["median"] == pytest.approx(2.0)


def test_compute_statistics_needs_trials():
    with pytest.raises(ValueError):
        compute_statistics(np.array([], dtype=int), success_threshold=1)


def test_chance_table():
    engine = ProbabilityEngine(DiceSettings())
    table = build_chance_table(engine, max_rolls=3)
    assert len(table) == 2 + 3 + 4
    row = table[(table["rolls"] == 2) & (table["success_threshold"] == 1)]
    assert row["chance_pct"].item() == 75
    assert (table[table["success_threshold"] == 0]["chance_pct"] == 100).all()


def test_hit_distribution_frame():
    engine = ProbabilityEngine(DiceSettings())
    spec = PoolSpec(rolls=2, target=4, success_threshold=1)
    frame = build_hit_distribution(engine, spec, np.array([0, 1, 1, 2]))
    assert frame["hits"].tolist() == [0, 1, 2]
    assert frame["analytic"].tolist() == pytest.approx([0.25, 0.5, 0.25])
    assert frame["empirical"].tolist() == pytest.approx([0.25, 0.5, 0.25])


def test_run_pool_analysis_writes_outputs(tmp_path):
    settings = DiceSettings()
    spec = PoolSpec(rolls=4, target=5, success_threshold=2)
    result = run_pool_analysis(
        settings,
        spec,
        n_trials=5000,
        seed=3,
        max_rolls=4,
        output_dir=tmp_path,
        verbose=False,
    )

    stats = result["statistics"]
    assert stats["n_trials"] == 5000
    assert stats["exact"]["chance_pct"] == 40
    assert stats["abs_error"] < 0.03

    for name in (
        "pool_statistics.json",
        "hit_counts.csv",
        "hit_distribution.csv",
        "chance_table.csv",
    ):
        assert (tmp_path / name).exists()

    saved = json.loads((tmp_path / "pool_statistics.json").read_text())
    assert saved["pool"]["rolls"] == 4
    assert saved["seed"] == {"value": 3, "handle": 0}
    assert len(pd.read_csv(tmp_path / "hit_counts.csv")) == 5000


def test_run_pool_analysis_is_reproducible():
    settings = DiceSettings()
    spec = PoolSpec.standard(settings, 6)
    first = run_pool_analysis(settings, spec, n_trials=500, seed=9, verbose=False)
    second = run_pool_analysis(settings, spec, n_trials=500, seed=9, verbose=False)
    assert np.array_equal(first["hits"], second["hits"])
    assert first["chance_table"] is None


def test_run_pool_analysis_verbose(capsys):
    settings = DiceSettings()
    run_pool_analysis(settings, PoolSpec(2, 4, 1), n_trials=100, verbose=True)
    out = capsys.readouterr().out
    assert "[Dice] Exact chance: 75%" in out


# =============================================================================
# CLI
# =============================================================================


def test_cli_runs(tmp_path, capsys):
    code = cli_main(
        ["--rolls", "2", "--trials", "1000", "--max-rolls", "3", "--output", str(tmp_path)]
    )
    assert code == 0
    assert "Exact chance: 75%" in capsys.readouterr().out
    assert (tmp_path / "chance_table.csv").exists()


def test_cli_overrides_dice(tmp_path, capsys):
    code = cli_main(
        [
            "--rolls", "1",
            "--sides", "10",
            "--target", "8",
            "--trials", "200",
            "--output", str(tmp_path),
        ]
    )
    assert code == 0
    assert "Exact chance: 30%" in capsys.readouterr().out


def test_cli_configuration_error(tmp_path, capsys):
    code = cli_main(["--target", "9", "--output", str(tmp_path)])
    assert code == 3
    assert "Configuration error" in capsys.readouterr().err


def test_cli_missing_constants(tmp_path, capsys):
    code = cli_main(["--constants", str(tmp_path / "nope.yaml")])
    assert code == 2
    assert "Error" in capsys.readouterr().err


def test_empty_pool_never_counts_as_success(tmp_path):
    settings = DiceSettings(success_threshold=0)
    spec = PoolSpec(0, 4, 0)
    result = run_pool_analysis(
        settings, spec, n_trials=50, output_dir=tmp_path, verbose=False
    )
    stats = result["statistics"]
    assert stats["exact"]["chance_pct"] == 0
    assert stats["success_rate"] == 0.0
    assert stats["abs_error"] == 0.0
    assert not pd.read_csv(tmp_path / "hit_counts.csv")["success"].any()


def test_compute_statistics_empty_pool():
    stats = compute_statistics(np.zeros(4, dtype=int), success_threshold=0, rolls=0)
    assert stats["success_rate"] == 0.0
