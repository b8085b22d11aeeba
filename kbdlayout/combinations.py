"""Expansion of keys with modifiers into unigram, bigram and trigram combinations."""

from __future__ import annotations

from typing import Hashable, Iterator, MutableMapping, Sequence, Tuple, TypeVar

__all__ = [
    "insert_or_add_weight",
    "take_one_layerkey",
    "take_two_layerkey",
    "take_three_layerkey",
]

K = TypeVar("K", bound=Hashable)


def insert_or_add_weight(mapping: MutableMapping[K, float], key: K, weight: float) -> None:
    """Add ``weight`` to the entry for ``key``, creating it at zero if missing."""
    mapping[key] = mapping.get(key, 0.0) + weight


def take_one_layerkey(
    base_key: K, modifiers: Sequence[K], weight: float
) -> Iterator[Tuple[K, float]]:
    """Unigrams of the base key followed by one for each modifier."""
    yield base_key, weight
    for modifier in modifiers:
        yield modifier, weight


def take_two_layerkey(
    base_key: K,
    modifiers: Sequence[K],
    weight: float,
    same_key_mod_factor: float,
) -> Iterator[Tuple[Tuple[K, K], float]]:
    """Bigrams of each modifier with the base key and of each pair of modifiers.

    For every modifier ``m1`` the bigram ``(m1, base)`` comes first, followed by
    ``(m1, m2)`` and ``(m2, m1)`` for each later modifier ``m2``; bigrams of two
    modifiers carry the weight scaled by ``same_key_mod_factor``.
    """
    pair_weight = weight * same_key_mod_factor
    for i, outer in enumerate(modifiers):
        yield (outer, base_key), weight
        for inner in modifiers[i + 1 :]:
            yield (outer, inner), pair_weight
            yield (inner, outer), pair_weight


def take_three_layerkey(
    base_key: K,
    modifiers: Sequence[K],
    weight: float,
    same_key_mod_factor: float,
) -> Iterator[Tuple[Tuple[K, K, K], float]]:
    """Trigrams of two modifiers with the base key and of three modifiers.

    Nothing is produced with fewer than two modifiers. Trigrams ending in the
    base key carry the weight scaled once by ``same_key_mod_factor``; those made
    of three modifiers (all six orderings) are scaled twice.
    """
    two_weight = weight * same_key_mod_factor
    three_weight = weight * same_key_mod_factor * same_key_mod_factor
    count = len(modifiers)
    for i, outer in enumerate(modifiers):
        for j in range(i + 1, count):
            middle = modifiers[j]
            yield (outer, middle, base_key), two_weight
            yield (middle, outer, base_key), two_weight
            for inner in modifiers[j + 1 :]:
                yield (outer, middle, inner), three_weight
                yield (outer, inner, middle), three_weight
                yield (middle, outer, inner), three_weight
                yield (middle, inner, outer), three_weight
                yield (inner, outer, middle), three_weight
                yield (inner, middle, outer), three_weight