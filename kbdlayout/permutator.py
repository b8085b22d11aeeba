"""Permutations of the movable keys of a layout string."""

from __future__ import annotations

import random
from typing import Sequence

__all__ = ["LayoutPermutator"]


class LayoutPermutator:
    """Splits a layout string into fixed and permutable keys and rebuilds it."""

    def __init__(self, layout: str, fixed: str, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._perm_keys: list[str] = []
        self._perm_indices: list[int] = []
        self._fixed_keys: list[str] = []
        self._fixed_indices: list[int] = []
        for i, c in enumerate(layout):
            if c in fixed:
                self._fixed_keys.append(c)
                self._fixed_indices.append(i)
            else:
                self._perm_keys.append(c)
                self._perm_indices.append(i)

    def generate_string(self, permutation: Sequence[int]) -> str:
        """Build the layout string with permutable keys placed at the given positions."""
        res = ["-"] * (len(self._fixed_keys) + len(self._perm_keys))
        for i, c in zip(self._fixed_indices, self._fixed_keys):
            res[i] = c
        for i, c in zip(permutation, self._perm_keys):
            res[i] = c
        return "".join(res)

    def generate_random(self) -> list[int]:
        """A random arrangement of the permutable positions."""
        indices = list(self._perm_indices)
        self._rng.shuffle(indices)
        return indices

    def perform_n_swaps(self, permutation: Sequence[int], nr_switches: int) -> list[int]:
        """A copy of the permutation with nr_switches random pairs swapped."""
        indices = list(permutation)
        if nr_switches > 0 and len(indices) < 2:
            raise ValueError("at least two permutable keys are needed for a swap")
        for _ in range(nr_switches):
            a, b = self._rng.sample(range(len(indices)), 2)
            indices[a], indices[b] = indices[b], indices[a]
        return indices

    def switch_n_keys(self, permutation: Sequence[int], n_keys: int) -> list[int]:
        """A copy of the permutation with n_keys randomly chosen entries shuffled."""
        indices = list(permutation)
        sw_from = self._rng.sample(range(len(indices)), min(n_keys, len(indices)))
        sw_to = list(sw_from)
        self._rng.shuffle(sw_to)
        for src, dst in zip(sw_from, sw_to):
            indices[dst] = permutation[src]
        return indices

    def permutable_indices(self) -> list[int]:
        """Positions of the permutable keys in the layout string given at creation."""
        return list(self._perm_indices)