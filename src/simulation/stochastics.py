"""Random source and saved seed states for dice simulation."""

from __future__ import annotations

import copy
import numbers
import threading
from typing import Any

import numpy as np

from config.settings import InvalidParameter
from entities import SeedHandle


class SeedRegistry:
    """Owns a numpy Generator and an append-only list of its saved states.

    A saved state is the full bit-generator state (including buffered
    32-bit draws), so restoring a handle reproduces the exact draw sequence
    that followed the save.
    """

    def __init__(self, seed: int | np.random.SeedSequence | None = None):
        self._lock = threading.Lock()
        self._states: list[dict[str, Any]] = []
        self._reseed(seed)

    def _reseed(self, seed: int | np.random.SeedSequence | None) -> None:
        if isinstance(seed, np.random.SeedSequence):
            self._seed_sequence = seed
        else:
            self._seed_sequence = np.random.SeedSequence(seed)
        self.rng = np.random.default_rng(self._seed_sequence)

    def __len__(self) -> int:
        return len(self._states)

    def save_seed(self) -> SeedHandle:
        """Capture the current generator state and return its handle."""
        with self._lock:
            self._states.append(copy.deepcopy(self.rng.bit_generator.state))
            return SeedHandle(len(self._states) - 1)

    def get_seed(self, handle: SeedHandle) -> dict[str, Any]:
        """Copy of the state saved under ``handle``."""
        if not isinstance(handle, SeedHandle):
            raise InvalidParameter(
                f"handle must be SeedHandle, got {type(handle).__name__}"
            )
        # Issued handles never move, so reads need no lock
        if not 0 <= handle.index < len(self._states):
            raise InvalidParameter(f"Unknown seed handle: {handle.index}")
        return copy.deepcopy(self._states[handle.index])

    def set_seed(self, value: int | SeedHandle) -> None:
        """Replace the generator state.

        Args:
            value: An int reseeds the generator from scratch; a SeedHandle
                restores the state saved under it.
        """
        if isinstance(value, SeedHandle):
            state = self.get_seed(value)
            with self._lock:
                self.rng.bit_generator.state = state
            return

        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidParameter(
                f"seed must be int or SeedHandle, got {type(value).__name__}"
            )
        if value < 0:
            raise InvalidParameter(f"seed must be non-negative, got {value}")
        with self._lock:
            self._reseed(int(value))

    def spawn(self, n: int) -> list["SeedRegistry"]:
        """Independent child registries, one per parallel roller.

        Children derive from the seed sequence of the last integer seed (or the
        constructor seed) and its spawn count. Restoring a SeedHandle rewinds
        the draw stream only, so spawning after a restore continues from that
        sequence rather than replaying the children spawned before the save.
        """
        return [SeedRegistry(child) for child in self._seed_sequence.spawn(n)]
