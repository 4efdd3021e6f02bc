"""
Dice Pool Settings.

This module contains the configuration value object shared by the analytic
engine and the simulator: die size, the standard target, and the default
success threshold and retry bound.

Numeric defaults for runs live in config/constants.yaml (section ``dice``).

STRICT VALIDATION: every field is type and range checked on construction.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Any


class InvalidParameter(ValueError):
    """Raised when a dice parameter is outside its meaningful domain."""


@dataclass(frozen=True)
class DiceSettings:
    """
    Immutable configuration for one family of dice pools.

    A single instance is shared read-only by every engine and simulator
    built from it; independent instances may coexist in one process.
    """

    sides_on_die: int = 6
    standard_target: int = 4
    success_threshold: int = 1
    max_tries: int = 100

    def __post_init__(self):
        _validate_integer(self, "sides_on_die", self.sides_on_die)
        _validate_integer(self, "standard_target", self.standard_target)
        _validate_integer(self, "success_threshold", self.success_threshold)
        _validate_integer(self, "max_tries", self.max_tries)

        if self.sides_on_die < 2:
            raise InvalidParameter(
                f"{self.__class__.__name__}.sides_on_die must be >= 2, got {self.sides_on_die}"
            )
        _validate_range(self, "standard_target", self.standard_target, 1, self.sides_on_die)
        _validate_non_negative(self, "success_threshold", self.success_threshold)
        _validate_non_negative(self, "max_tries", self.max_tries)

    @classmethod
    def from_config(cls, constants: dict[str, Any]) -> "DiceSettings":
        """Load from constants.yaml dice section."""
        dice = constants.get("dice", {})
        return cls(
            sides_on_die=dice.get("sides_on_die", 6),
            standard_target=dice.get("standard_target", 4),
            success_threshold=dice.get("success_threshold", 1),
            max_tries=dice.get("max_tries", 100),
        )


def _validate_integer(obj: Any, field_name: str, value: Any) -> None:
    """Validate that a field holds an integer (bool excluded)."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameter(
            f"{_owner(obj)}{field_name} must be int, got {type(value).__name__}"
        )


def _validate_non_negative(obj: Any, field_name: str, value: int) -> None:
    """Validate that a numeric field is non-negative."""
    if value < 0:
        raise InvalidParameter(
            f"{_owner(obj)}{field_name} must be non-negative, got {value}"
        )


def _validate_range(
    obj: Any, field_name: str, value: int, min_val: int, max_val: int
) -> None:
    """Validate that a numeric field is within range."""
    if not (min_val <= value <= max_val):
        raise InvalidParameter(
            f"{_owner(obj)}{field_name} must be in [{min_val}, {max_val}], got {value}"
        )


def _owner(obj: Any) -> str:
    if obj is None:
        return ""
    return f"{obj.__class__.__name__}."


# =============================================================================
# Boundary checks shared by the engine and the simulator
# =============================================================================


def validate_target(target: Any, sides_on_die: int) -> int:
    """Check a hit target against the die size and return it as int."""
    _validate_integer(None, "target", target)
    _validate_range(None, "target", target, 1, sides_on_die)
    return int(target)


def validate_count(field_name: str, value: Any) -> int:
    """Check a non-negative integer count (threshold, tries)."""
    _validate_integer(None, field_name, value)
    _validate_non_negative(None, field_name, value)
    return int(value)


def validate_rolls(rolls: Any) -> int:
    """Check a pool size. Non-positive pools are legal and mean 'no dice'."""
    _validate_integer(None, "rolls", rolls)
    return int(rolls)
