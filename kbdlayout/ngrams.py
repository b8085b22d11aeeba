"""Unigram, bigram and trigram frequency tables used for layout evaluation."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import ClassVar, Hashable, MutableMapping, Sequence, TypeVar

__all__ = [
    "IncreaseCommonNgramsConfig",
    "NgramsConfig",
    "increase_common_ngrams",
    "Unigrams",
    "Bigrams",
    "Trigrams",
]

log = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


@dataclass
class IncreaseCommonNgramsConfig:
    """Parameters for increasing the weight of already common ngrams."""

    enabled: bool = True
    critical_fraction: float = 0.001
    factor: float = 2.0
    total_weight_threshold: float = 20.0


@dataclass
class NgramsConfig:
    """Configuration for ngram processing."""

    increase_common_ngrams: IncreaseCommonNgramsConfig


def increase_common_ngrams(
    symbol_weights: MutableMapping[K, float], config: IncreaseCommonNgramsConfig
) -> None:
    """Raise, in place, the weights of ngrams above the critical fraction."""
    if not config.enabled:
        return
    total_weight = sum(symbol_weights.values())
    critical_point = config.critical_fraction * total_weight
    if total_weight <= config.total_weight_threshold:
        return
    for key, weight in symbol_weights.items():
        if weight > critical_point:
            symbol_weights[key] = weight + (weight - critical_point) * (config.factor - 1.0)


def _unescape(text: str) -> str:
    return text.replace("\\n", "\n").replace("\\\\", "\\")


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def _lines(data: str) -> list[str]:
    lines = data.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _format_weight(weight: float) -> str:
    if math.isnan(weight):
        return "NaN"
    if math.isinf(weight):
        return "inf" if weight > 0 else "-inf"
    text = format(Decimal(repr(float(weight))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@dataclass
class _Ngrams:
    """Mapping of ngrams to their frequency ("weight")."""

    grams: dict = field(default_factory=dict)

    order: ClassVar[int] = 1
    label: ClassVar[str] = "Ngrams"

    @classmethod
    def _key(cls, chars: Sequence[str]) -> Hashable:
        return tuple(chars)

    @staticmethod
    def _chars(key: Hashable) -> tuple[str, ...]:
        return tuple(key)  # type: ignore[arg-type]

    @classmethod
    def _parse_key(cls, ngram: str) -> Hashable:
        chars = tuple(ngram)
        if len(chars) != cls.order:
            log.info("Len of ngram %s is unequal %d: %r", ngram, cls.order, chars)
        if len(chars) < cls.order:
            raise ValueError(f"ngram {ngram!r} has fewer than {cls.order} characters")
        return cls._key(chars[: cls.order])

    @classmethod
    def _count_text(cls, text: str):
        chars = [c for c in text if c != "\r"]
        grams: dict = {}
        for window in zip(*(chars[i:] for i in range(cls.order))):
            key = cls._key(window)
            grams[key] = grams.get(key, 0.0) + 1.0
        return cls(grams)

    @classmethod
    def _parse_frequencies(cls, data: str):
        grams: dict = {}
        for line in _lines(data):
            weight_text, sep, ngram = line.lstrip().partition(" ")
            try:
                weight = float(weight_text)
            except ValueError as exc:
                raise ValueError(f"invalid weight in line {line!r}") from exc
            if not sep:
                raise ValueError(f"missing ngram in line {line!r}")
            key = cls._parse_key(_unescape(ngram))
            grams[key] = grams.get(key, 0.0) + weight
        return cls(grams)

    @classmethod
    def _read_file(cls, filename):
        return cls._parse_frequencies(Path(filename).read_text(encoding="utf-8"))

    def _total(self) -> float:
        return sum(self.grams.values())

    def _top(self, fraction: float):
        target_weight = fraction * self._total()
        accumulated = 0.0
        kept: dict = {}
        for key, weight in sorted(self.grams.items(), key=lambda kv: kv[1], reverse=True):
            if not accumulated < target_weight:
                break
            accumulated += weight
            kept[key] = weight
        log.info(
            "%s: Reducing from originally %d to the top %d ngrams.",
            self.label,
            len(self.grams),
            len(kept),
        )
        return type(self)(kept)

    def _without(self, exclude: str):
        return type(self)(
            {k: w for k, w in self.grams.items() if exclude not in self._chars(k)}
        )

    def _save(self, filename) -> None:
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        ordered = sorted(self.grams.items(), key=lambda kv: kv[1], reverse=True)
        with path.open("w", encoding="utf-8", newline="") as out:
            for key, weight in ordered:
                ngram = "".join(_escape(c) for c in self._chars(key))
                out.write(f"{_format_weight(weight)} {ngram}\n")

    def _increased(self, params: IncreaseCommonNgramsConfig):
        grams = dict(self.grams)
        increase_common_ngrams(grams, params)
        return type(self)(grams)


class Unigrams(_Ngrams):
    """Single characters with their weights."""

    order = 1
    label = "Unigrams"

    @classmethod
    def _key(cls, chars: Sequence[str]) -> Hashable:
        return chars[0]

    @staticmethod
    def _chars(key: Hashable) -> tuple[str, ...]:
        return (key,)  # type: ignore[return-value]

    @classmethod
    def _parse_key(cls, ngram: str) -> Hashable:
        chars = tuple(ngram)
        if len(chars) != 1:
            log.error("Len of unigram %s is unequal one: %r", ngram, chars)
        return chars[0] if chars else " "

    @classmethod
    def from_text(cls, text: str) -> "Unigrams":
        """Count the characters of the text, ignoring carriage returns."""
        return cls._count_text(text)

    @classmethod
    def from_frequencies_str(cls, data: str) -> "Unigrams":
        """Parse lines of the form '<weight> <unigram>'."""
        return cls._parse_frequencies(data)

    @classmethod
    def from_file(cls, filename) -> "Unigrams":
        """Read unigrams and weights from a frequency file."""
        return cls._read_file(filename)

    def total_weight(self) -> float:
        """Combined weight of all unigrams."""
        return self._total()

    def tops(self, fraction: float) -> "Unigrams":
        """The most common unigrams, up to the given fraction of the total weight."""
        return self._top(fraction)

    def exclude_char(self, exclude: str) -> "Unigrams":
        """The unigrams other than the given character."""
        return self._without(exclude)

    def save_frequencies(self, filename) -> None:
        """Write the unigrams, most common first, to a frequency file."""
        self._save(filename)

    def increase_common(self, params: IncreaseCommonNgramsConfig) -> "Unigrams":
        """A copy with the weights of common unigrams increased."""
        return self._increased(params)


class Bigrams(_Ngrams):
    """Pairs of characters with their weights."""

    order = 2
    label = "Bigrams"

    @classmethod
    def from_text(cls, text: str) -> "Bigrams":
        """Count the character pairs of the text, ignoring carriage returns."""
        return cls._count_text(text)

    @classmethod
    def from_frequencies_str(cls, data: str) -> "Bigrams":
        """Parse lines of the form '<weight> <bigram>'."""
        return cls._parse_frequencies(data)

    @classmethod
    def from_file(cls, filename) -> "Bigrams":
        """Read bigrams and weights from a frequency file."""
        return cls._read_file(filename)

    def total_weight(self) -> float:
        """Combined weight of all bigrams."""
        return self._total()

    def tops(self, fraction: float) -> "Bigrams":
        """The most common bigrams, up to the given fraction of the total weight."""
        return self._top(fraction)

    def exclude_char(self, exclude: str) -> "Bigrams":
        """The bigrams that do not contain the given character."""
        return self._without(exclude)

    def save_frequencies(self, filename) -> None:
        """Write the bigrams, most common first, to a frequency file."""
        self._save(filename)

    def increase_common(self, params: IncreaseCommonNgramsConfig) -> "Bigrams":
        """A copy with the weights of common bigrams increased."""
        return self._increased(params)


class Trigrams(_Ngrams):
    """Triples of characters with their weights."""

    order = 3
    label = "Trigrams"

    @classmethod
    def from_text(cls, text: str) -> "Trigrams":
        """Count the character triples of the text, ignoring carriage returns."""
        return cls._count_text(text)

    @classmethod
    def from_frequencies_str(cls, data: str) -> "Trigrams":
        """Parse lines of the form '<weight> <trigram>'."""
        return cls._parse_frequencies(data)

    @classmethod
    def from_file(cls, filename) -> "Trigrams":
        """Read trigrams and weights from a frequency file."""
        return cls._read_file(filename)

    def total_weight(self) -> float:
        """Combined weight of all trigrams."""
        return self._total()

    def tops(self, fraction: float) -> "Trigrams":
        """The most common trigrams, up to the given fraction of the total weight."""
        return self._top(fraction)

    def exclude_char(self, exclude: str) -> "Trigrams":
        """The trigrams that do not contain the given character."""
        return self._without(exclude)

    def save_frequencies(self, filename) -> None:
        """Write the trigrams, most common first, to a frequency file."""
        self._save(filename)

    def increase_common(self, params: IncreaseCommonNgramsConfig) -> "Trigrams":
        """A copy with the weights of common trigrams increased."""
        return self._increased(params)