from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, TYPE_CHECKING

from config.settings import validate_count, validate_rolls, validate_target

if TYPE_CHECKING:
    from config.settings import DiceSettings


@dataclass(frozen=True)
class PoolSpec:
    """One dice pool test, built per call and never stored."""

    rolls: int
    target: int
    success_threshold: int

    def validate(self, settings: DiceSettings) -> "PoolSpec":
        """Check the pool against a configuration; returns self for chaining."""
        validate_rolls(self.rolls)
        validate_target(self.target, settings.sides_on_die)
        validate_count("success_threshold", self.success_threshold)
        return self

    @classmethod
    def standard(cls, settings: DiceSettings, rolls: int) -> "PoolSpec":
        """Pool of ``rolls`` dice using the configured target and threshold."""
        return cls(
            rolls=rolls,
            target=settings.standard_target,
            success_threshold=settings.success_threshold,
        )


class RollOutcome(NamedTuple):
    """Result of a simulated test: ``success, hits = outcome``."""

    success: bool
    hits: int


@dataclass(frozen=True)
class SeedHandle:
    """Opaque reference to a seed state saved in a SeedRegistry."""

    index: int

    def __int__(self) -> int:
        return self.index
