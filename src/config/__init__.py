"""Configuration package for the dice pool model."""

from .settings import (
    DiceSettings,
    InvalidParameter,
    validate_count,
    validate_rolls,
    validate_target,
)

__all__ = [
    "DiceSettings",
    "InvalidParameter",
    "validate_count",
    "validate_rolls",
    "validate_target",
]
