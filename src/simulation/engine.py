"""Seeded dice pool simulator."""

from __future__ import annotations

import numpy as np

from config.settings import (
    DiceSettings,
    validate_count,
    validate_rolls,
    validate_target,
)
from entities import PoolSpec, RollOutcome, SeedHandle

from .stochastics import SeedRegistry


class DiceSimulator:
    """Rolls dice pools against a SeedRegistry's random source.

    Each simulator owns its registry unless one is passed in; simulators that
    share a registry also share (and interleave) its draw sequence.
    """

    def __init__(
        self,
        settings: DiceSettings | None = None,
        registry: SeedRegistry | None = None,
        seed: int | None = None,
    ):
        """
        Args:
            settings: Dice configuration (defaults to d6, target 4).
            registry: Random source to draw from; a new one is created if None.
            seed: Seed for the new registry. Ignored when ``registry`` is given.
        """
        self.settings = settings if settings is not None else DiceSettings()
        self.registry = registry if registry is not None else SeedRegistry(seed)

    # ------------------------------------------------------------------
    # Seeds
    # ------------------------------------------------------------------

    def save_seed(self) -> SeedHandle:
        return self.registry.save_seed()

    def set_seed(self, value: int | SeedHandle) -> None:
        self.registry.set_seed(value)

    # ------------------------------------------------------------------
    # Single draws
    # ------------------------------------------------------------------

    def roll_die(self) -> int:
        """One face in [1, sides_on_die], upper bound inclusive."""
        return int(
            self.registry.rng.integers(1, self.settings.sides_on_die, endpoint=True)
        )

    def _roll_target(self, target: int) -> bool:
        return self.roll_die() >= target

    def roll_hits(self, rolls: int, target: int | None = None) -> int:
        """Roll ``rolls`` dice one at a time and count faces >= target."""
        rolls = validate_rolls(rolls)
        target = self._target(target)
        hits = 0
        for _ in range(rolls):
            if self._roll_target(target):
                hits += 1
        return hits

    def roll_test_with_hits(
        self,
        rolls: int,
        target: int | None = None,
        success_threshold: int | None = None,
    ) -> RollOutcome:
        """Simulate one pool test.

        Returns:
            RollOutcome(success, hits). An empty pool (rolls <= 0) fails with
            zero hits and draws nothing.
        """
        spec = self._spec(rolls, target, success_threshold)
        if spec.rolls <= 0:
            return RollOutcome(False, 0)
        hits = self.roll_hits(spec.rolls, spec.target)
        return RollOutcome(hits >= spec.success_threshold, hits)

    def roll_test(
        self,
        rolls: int,
        target: int | None = None,
        success_threshold: int | None = None,
    ) -> bool:
        return self.roll_test_with_hits(rolls, target, success_threshold).success

    def roll_until_hit(
        self, target: int | None = None, max_tries: int | None = None
    ) -> int | None:
        """Roll single dice until one meets ``target``.

        Args:
            target: Hit target (defaults to the standard target).
            max_tries: Maximum number of dice rolled (defaults to settings).

        Returns:
            The 1-indexed try that hit, or None if all ``max_tries`` missed.
        """
        target = self._target(target)
        if max_tries is None:
            max_tries = self.settings.max_tries
        max_tries = validate_count("max_tries", max_tries)

        for attempt in range(1, max_tries + 1):
            if self._roll_target(target):
                return attempt
        return None

    # ------------------------------------------------------------------
    # Vectorised draws
    # ------------------------------------------------------------------

    def roll_pool(self, rolls: int) -> np.ndarray:
        """Faces of one pool as an int array (empty for rolls <= 0)."""
        rolls = validate_rolls(rolls)
        if rolls <= 0:
            return np.empty(0, dtype=np.int64)
        return self.registry.rng.integers(
            1, self.settings.sides_on_die, size=rolls, endpoint=True
        )

    def simulate(self, spec: PoolSpec, n_trials: int) -> np.ndarray:
        """Hit counts of ``n_trials`` independent pools.

        Args:
            spec: Pool to simulate (validated against the settings).
            n_trials: Number of pools rolled.

        Returns:
            Integer array of length n_trials.
        """
        spec.validate(self.settings)
        n_trials = validate_count("n_trials", n_trials)
        if spec.rolls <= 0:
            return np.zeros(n_trials, dtype=np.int64)

        faces = self.registry.rng.integers(
            1,
            self.settings.sides_on_die,
            size=(n_trials, spec.rolls),
            endpoint=True,
        )
        return (faces >= spec.target).sum(axis=1)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _target(self, target: int | None) -> int:
        if target is None:
            return self.settings.standard_target
        return validate_target(target, self.settings.sides_on_die)

    def _spec(
        self, rolls: int, target: int | None, success_threshold: int | None
    ) -> PoolSpec:
        if success_threshold is None:
            success_threshold = self.settings.success_threshold
        spec = PoolSpec(
            rolls=rolls,
            target=self._target(target),
            success_threshold=success_threshold,
        )
        return spec.validate(self.settings)
