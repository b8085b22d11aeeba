"""Results of metric evaluations and their aggregation into a total cost."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Any, Iterator

__all__ = [
    "NormalizationKind",
    "Normalization",
    "MetricType",
    "MetricResult",
    "NormalizedMetricResult",
    "MetricResults",
    "EvaluationResult",
]

_USIZE_MAX = 2**64 - 1


class NormalizationKind(enum.Enum):
    """How a metric's total cost is normalized."""

    FIXED = "fixed"
    WEIGHT_FOUND = "weight_found"
    WEIGHT_ALL = "weight_all"


@dataclass(frozen=True)
class Normalization:
    """A normalization strategy together with its fixed divisor."""

    kind: NormalizationKind
    value: float

    def to_dict(self) -> dict[str, Any]:
        """Tagged form: ``{"type": ..., "value": ...}``."""
        return {"type": self.kind.value, "value": self.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Normalization":
        """Build a normalization from its tagged form."""
        try:
            kind = NormalizationKind(data["type"])
            value = float(data["value"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"invalid normalization: {data!r}") from exc
        return cls(kind, value)


class MetricType(enum.Enum):
    """Which data a metric operates on."""

    LAYOUT = "Layout"
    UNIGRAM = "Unigram"
    BIGRAM = "Bigram"
    TRIGRAM = "Trigram"


def _divide(numerator: float, denominator: float) -> float:
    """IEEE division: zero denominators give infinities or NaN instead of raising."""
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def _fixed(value: float, precision: int) -> str:
    if math.isnan(value):
        return "NaN"
    return f"{value:.{precision}f}"


@dataclass
class MetricResult:
    """The outcome of a single metric evaluation."""

    name: str
    cost: float
    message: str | None
    weight: float
    normalization: Normalization

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "cost": self.cost,
            "message": self.message,
            "weight": self.weight,
            "normalization": self.normalization.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MetricResult":
        return cls(
            name=data["name"],
            cost=float(data["cost"]),
            message=data.get("message"),
            weight=float(data["weight"]),
            normalization=Normalization.from_dict(data["normalization"]),
        )


@dataclass
class NormalizedMetricResult:
    """A metric result together with its normalized costs."""

    core: MetricResult
    weighted_cost: float
    unweighted_cost: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "core": self.core.to_dict(),
            "weighted_cost": self.weighted_cost,
            "unweighted_cost": self.unweighted_cost,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NormalizedMetricResult":
        return cls(
            core=MetricResult.from_dict(data["core"]),
            weighted_cost=float(data["weighted_cost"]),
            unweighted_cost=float(data["unweighted_cost"]),
        )


@dataclass
class MetricResults:
    """Results of all metrics of one metric type."""

    metric_type: MetricType
    found_weight: float
    not_found_weight: float
    metric_costs: list[NormalizedMetricResult] = field(default_factory=list)

    def add_result(self, metric_cost: MetricResult) -> None:
        """Normalize a metric result and append it."""
        self.metric_costs.append(
            NormalizedMetricResult(
                core=metric_cost,
                weighted_cost=self._cost(metric_cost, normalize=True, weight=True),
                unweighted_cost=self._cost(metric_cost, normalize=True, weight=False),
            )
        )

    def _normalize(self, value: float, normalization: Normalization) -> float:
        kind = normalization.kind
        if kind is NormalizationKind.FIXED:
            result = _divide(value, normalization.value)
        elif kind is NormalizationKind.WEIGHT_FOUND:
            result = _divide(value, normalization.value * self.found_weight)
        else:
            result = _divide(
                value, normalization.value * (self.found_weight + self.not_found_weight)
            )
        return 0.0 if math.isnan(result) else result

    def _cost(self, metric_cost: MetricResult, normalize: bool, weight: bool) -> float:
        cost = metric_cost.weight * metric_cost.cost if weight else metric_cost.cost
        return self._normalize(cost, metric_cost.normalization) if normalize else cost

    def total_cost(self) -> float:
        """Weighted and normalized total cost of all metrics."""
        return sum(
            (self._cost(mc.core, normalize=True, weight=True) for mc in self.metric_costs),
            0.0,
        )

    def unnormalized_total_cost(self) -> float:
        """Weighted but not normalized total cost of all metrics."""
        return sum(
            (self._cost(mc.core, normalize=False, weight=True) for mc in self.metric_costs),
            0.0,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "metric_type": self.metric_type.value,
            "found_weight": self.found_weight,
            "not_found_weight": self.not_found_weight,
            "metric_costs": [mc.to_dict() for mc in self.metric_costs],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MetricResults":
        return cls(
            metric_type=MetricType(data["metric_type"]),
            found_weight=float(data["found_weight"]),
            not_found_weight=float(data["not_found_weight"]),
            metric_costs=[NormalizedMetricResult.from_dict(mc) for mc in data["metric_costs"]],
        )

    def __str__(self) -> str:
        lines = [f"{self.metric_type.value} metrics:"]
        if self.metric_type is not MetricType.LAYOUT:
            total = self.not_found_weight + self.found_weight
            percent = _divide(100.0 * self.not_found_weight, total)
            lines.append(f"  Not found: {_fixed(percent, 4)}% of {_fixed(total, 4)}")
        for mc in self.metric_costs:
            cost = f"{_fixed(mc.weighted_cost, 2):>7}"
            lines.append(f"  {cost} {mc.core.name:<35} | {mc.core.message or ''}")
        return "\n".join(lines) + "\n"


@dataclass
class EvaluationResult:
    """All metric results for one layout."""

    layout: str
    individual_results: list[MetricResults] = field(default_factory=list)

    def total_cost(self) -> float:
        """Sum of the total costs of all non-empty metric groups."""
        return sum(
            (r.total_cost() for r in self.individual_results if r.metric_costs), 0.0
        )

    def optimization_score(self) -> int:
        """1e8 divided by the total cost, truncated and clamped to an unsigned 64-bit range."""
        score = _divide(1e8, self.total_cost())
        if math.isnan(score) or score <= 0:
            return 0
        if score >= 2**64:
            return _USIZE_MAX
        return int(score)

    def __iter__(self) -> Iterator[MetricResults]:
        return iter(self.individual_results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "layout": self.layout,
            "individual_results": [r.to_dict() for r in self.individual_results],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EvaluationResult":
        return cls(
            layout=data["layout"],
            individual_results=[MetricResults.from_dict(r) for r in data["individual_results"]],
        )

    def __str__(self) -> str:
        body = "".join(f"{results}\n" for results in self.individual_results)
        return (
            f"{body}Cost: {_fixed(self.total_cost(), 2)} "
            f"(optimization score: {self.optimization_score()})\n"
        )