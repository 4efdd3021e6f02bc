from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

# =============================================================================
# Constants
# =============================================================================

DEFAULT_CONSTANTS_PATH = Path(__file__).parent / "config" / "constants.yaml"

REQUIRED_CONSTANT_SECTIONS = [
    "dice",
    "monte_carlo",
    "chance_table",
]
REQUIRED_DICE_KEYS = ["sides_on_die", "standard_target", "success_threshold"]


# =============================================================================
# Loading
# =============================================================================


def load_constants_from_file(path: Path | str | None = None) -> dict[str, Any]:
    """Load constants from YAML file and check required sections."""
    path = DEFAULT_CONSTANTS_PATH if path is None else Path(path)
    if not path.exists():
        # Try relative to this file
        path = Path(__file__).parent / path
    if not path.exists():
        raise FileNotFoundError(f"Constants file not found: {path}")
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        raise ValueError(f"Constants file is empty: {path}")

    validate_constants(data)
    return data


def validate_constants(constants: dict[str, Any]) -> None:
    """Raise KeyError naming the first missing section or dice key."""
    for section in REQUIRED_CONSTANT_SECTIONS:
        if section not in constants:
            raise KeyError(f"constants.{section} is required")
    for key in REQUIRED_DICE_KEYS:
        if key not in constants["dice"]:
            raise KeyError(f"constants.dice.{key} is required")


def get_monte_carlo_defaults(constants: dict[str, Any]) -> tuple[int, int]:
    """(n_trials, seed) from the monte_carlo section."""
    mc = constants.get("monte_carlo", {})
    return int(mc.get("n_trials", 10000)), int(mc.get("seed", 42))


def get_max_rolls(constants: dict[str, Any]) -> int:
    return int(constants.get("chance_table", {}).get("max_rolls", 12))
