"""Simulated annealing optimization of a layout string's permutable keys."""

from __future__ import annotations

import logging
import math
import random
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, MutableMapping, Sequence

import yaml

from kbdlayout.permutator import LayoutPermutator

__all__ = [
    "Parameters",
    "IterationState",
    "mean",
    "cost_standard_deviation",
    "SimulatedAnnealing",
    "optimize",
]

log = logging.getLogger(__name__)

_USED_NEIGHBORS = 100
_TEMPERATURE_DECAY = 0.998


@dataclass
class Parameters:
    """Parameters of a simulated annealing run."""

    init_temp: float | None = 150.0
    key_switches: int = 1
    stall_accepted: int = 5000
    max_iters: int = 100_000

    @classmethod
    def from_yaml(cls, filename) -> "Parameters":
        """Read parameters from a YAML file; ``init_temp`` may be missing or null."""
        data = yaml.safe_load(Path(filename).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"expected a mapping of parameters in {filename}")
        values: dict = {}
        for name in ("key_switches", "stall_accepted", "max_iters"):
            if name not in data:
                raise ValueError(f"missing parameter {name!r} in {filename}")
            value = data[name]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"parameter {name!r} must be a non-negative integer")
            values[name] = value
        init_temp = data.get("init_temp")
        if init_temp is not None:
            if isinstance(init_temp, bool) or not isinstance(init_temp, (int, float)):
                raise ValueError("parameter 'init_temp' must be a number")
            init_temp = float(init_temp)
        values["init_temp"] = init_temp
        return cls(**values)

    def correct_init_temp(self) -> None:
        """Replace a non-positive initial temperature by the smallest positive float."""
        if self.init_temp is not None and self.init_temp <= 0.0:
            self.init_temp = sys.float_info.min


@dataclass
class IterationState:
    """Snapshot of the annealing process after one iteration."""

    iteration: int
    param: list[int]
    cost: float
    prev_cost: float
    best_param: list[int]
    best_cost: float
    temperature: float
    accepted: bool
    new_best: bool
    stalled: int = field(default=0)


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; NaN for an empty sequence."""
    if not values:
        return math.nan
    return sum(values) / len(values)


def cost_standard_deviation(
    initial_indices: Sequence[int],
    cost: Callable[[str], float],
    permutator: LayoutPermutator,
    key_pair_switches: int,
) -> float:
    """Standard deviation of the costs along a random walk of neighbouring layouts."""
    costs = []
    current = list(initial_indices)
    for _ in range(_USED_NEIGHBORS):
        costs.append(cost(permutator.generate_string(current)))
        current = permutator.perform_n_swaps(current, key_pair_switches)
    average = mean(costs)
    variance = sum((c - average) ** 2 for c in costs) / _USED_NEIGHBORS
    return math.sqrt(variance)


def _acceptance_probability(delta: float, temperature: float) -> float:
    if temperature <= 0.0:
        return 0.0
    x = delta / temperature
    if x > 700.0:
        return 0.0
    return 1.0 / (1.0 + math.exp(x))


class SimulatedAnnealing:
    """Simulated annealing over permutations of a layout's permutable keys."""

    def __init__(
        self,
        cost: Callable[[str], float],
        permutator: LayoutPermutator,
        params: Parameters,
        init_temp: float,
        rng: random.Random | None = None,
        observer: Callable[[IterationState], None] | None = None,
    ) -> None:
        if not init_temp > 0.0:
            raise ValueError("initial temperature must be > 0")
        self._cost = cost
        self._permutator = permutator
        self._params = params
        self._init_temp = init_temp
        self._rng = rng if rng is not None else random.Random()
        self._observer = observer

    def _evaluate(self, param: Sequence[int]) -> float:
        return self._cost(self._permutator.generate_string(param))

    def _notify(self, state: IterationState) -> None:
        if self._observer is not None:
            self._observer(state)

    def run(self, initial_indices: Sequence[int]) -> IterationState:
        """Anneal from the given arrangement and return the final state."""
        param = list(initial_indices)
        cost = self._evaluate(param)
        state = IterationState(
            iteration=0,
            param=param,
            cost=cost,
            prev_cost=cost,
            best_param=list(param),
            best_cost=cost,
            temperature=self._init_temp,
            accepted=True,
            new_best=True,
        )
        self._notify(state)

        stalled = 0
        temperature = self._init_temp
        while state.iteration < self._params.max_iters:
            candidate = self._permutator.perform_n_swaps(state.param, self._params.key_switches)
            candidate_cost = self._evaluate(candidate)
            accepted = candidate_cost < state.cost or (
                _acceptance_probability(candidate_cost - state.cost, temperature)
                > self._rng.random()
            )
            stalled = 0 if accepted else stalled + 1
            new_best = accepted and candidate_cost < state.best_cost
            iteration = state.iteration + 1
            temperature = self._init_temp * _TEMPERATURE_DECAY**iteration
            state = IterationState(
                iteration=iteration,
                param=candidate if accepted else state.param,
                cost=candidate_cost if accepted else state.cost,
                prev_cost=state.cost,
                best_param=list(candidate) if new_best else state.best_param,
                best_cost=candidate_cost if new_best else state.best_cost,
                temperature=temperature,
                accepted=accepted,
                new_best=new_best,
                stalled=stalled,
            )
            self._notify(state)
            if stalled > self._params.stall_accepted:
                break
        return state


def _default_observer(
    process_name: str, permutator: LayoutPermutator, log_everything: bool
) -> Callable[[IterationState], None]:
    def observe(state: IterationState) -> None:
        if state.new_best:
            reason = "First tested layout:" if state.iteration == 0 else "New best:"
            log.info(
                "%s: %s %s (%6.1f)",
                process_name,
                reason,
                permutator.generate_string(state.best_param),
                state.best_cost,
            )
        if state.iteration > 0 and (log_everything or state.iteration % 100 == 0):
            output = (
                f"{process_name}: n: {state.iteration:>3}, "
                f"current: {permutator.generate_string(state.param)} ({state.cost:>6.1f}), "
                f"best: {permutator.generate_string(state.best_param)} "
                f"({state.best_cost:>6.1f}), temp: {state.temperature:.5f}°"
            )
            if log_everything:
                is_better = state.cost < state.prev_cost
                pad = " " if is_better else ""
                output += f" better: {is_better}{pad} acc: {state.accepted}"
            log.info("%s", output)

    return observe


def optimize(
    process_name: str,
    params: Parameters,
    layout_str: str,
    fixed_characters: str,
    evaluate: Callable[[str], float],
    start_with_layout: bool = False,
    log_everything: bool = False,
    result_cache: MutableMapping[str, float] | None = None,
    observer: Callable[[IterationState], None] | None = None,
    rng: random.Random | None = None,
) -> tuple[str, float]:
    """Run one simulated annealing pass and return the best layout string and its cost."""
    rng = rng if rng is not None else random.Random()
    permutator = LayoutPermutator(layout_str, fixed_characters, rng)
    initial_indices = (
        permutator.permutable_indices() if start_with_layout else permutator.generate_random()
    )

    if params.init_temp is not None:
        init_temp = params.init_temp
    else:
        log.info("%s: Calculating initial temperature", process_name)
        init_temp = cost_standard_deviation(
            initial_indices, evaluate, permutator, params.key_switches
        )
        log.info("%s: Initial temperature = %s°", process_name, init_temp)

    def cost(layout: str) -> float:
        if result_cache is None:
            return evaluate(layout)
        if layout not in result_cache:
            result_cache[layout] = evaluate(layout)
        return result_cache[layout]

    if observer is None:
        observer = _default_observer(process_name, permutator, log_everything)

    solver = SimulatedAnnealing(cost, permutator, params, init_temp, rng, observer)
    log.info(
        "%s: Starting optimization with: initial_temperature: %.2f°, %r",
        process_name,
        init_temp,
        params,
    )
    final = solver.run(initial_indices)
    return permutator.generate_string(final.best_param), final.best_cost