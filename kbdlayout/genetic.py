"""Genetic optimization of a layout string's permutable keys."""

from __future__ import annotations

import itertools
import logging
import math
import random
from dataclasses import dataclass, fields
from operator import itemgetter
from pathlib import Path
from typing import Callable, Sequence

import yaml

from kbdlayout.permutator import LayoutPermutator

__all__ = [
    "GeneticParameters",
    "average_fitness",
    "no_op_crossover",
    "cycle_crossover",
    "optimize",
]

log = logging.getLogger(__name__)

Genome = list[int]


@dataclass
class GeneticParameters:
    """Parameters of the genetic algorithm."""

    population_size: int = 100
    generation_limit: int = 2000
    num_individuals_per_parents: int = 2
    selection_ratio: float = 0.7
    mutation_rate: float = 0.1
    reinsertion_ratio: float = 0.7

    @classmethod
    def from_yaml(cls, filename) -> "GeneticParameters":
        """Read all parameters from a YAML file."""
        data = yaml.safe_load(Path(filename).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"expected a mapping of parameters in {filename}")
        values = {}
        for f in fields(cls):
            if f.name not in data:
                raise ValueError(f"missing parameter {f.name!r} in {filename}")
            value = data[f.name]
            if f.type in ("int", int):
                if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                    raise ValueError(f"parameter {f.name!r} must be a non-negative integer")
            else:
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ValueError(f"parameter {f.name!r} must be a number")
                value = float(value)
            values[f.name] = value
        return cls(**values)


def average_fitness(fitness_values: Sequence[int]) -> int:
    """Integer mean of the fitness values."""
    return sum(fitness_values) // len(fitness_values)


def no_op_crossover(parents: Sequence[Genome], rng: random.Random) -> list[Genome]:
    """Children that are copies of their parents."""
    return [list(parent) for parent in parents]


def cycle_crossover(parents: Sequence[Genome], rng: random.Random) -> list[Genome]:
    """Cycle crossover: each parent is paired with the next, the last with the second."""
    partners = itertools.cycle(parents[1:]) if len(parents) > 1 else iter(())
    children = []
    for p1, p2 in zip(parents, partners):
        if not p1:
            raise ValueError("cannot cross over empty genomes")
        position = {value: idx for idx, value in enumerate(p1)}
        offspring: list[int | None] = [None] * len(p1)
        start = rng.randrange(len(p1))
        offspring[start] = p1[start]
        idx = position[p2[start]]
        while idx != start:
            offspring[idx] = p1[idx]
            idx = position[p2[idx]]
        children.append([o if o is not None else v for o, v in zip(offspring, p2)])
    return children


def _select(
    population: list[Genome], values: list[int], ratio: float, per_parents: int
) -> list[list[Genome]]:
    ranked = [g for _, g in sorted(zip(values, population), key=itemgetter(0), reverse=True)]
    count = math.floor(len(population) * ratio + 0.5)
    pool = itertools.cycle(ranked)
    return [[list(next(pool)) for _ in range(per_parents)] for _ in range(count)]


def _swap_order_mutation(genome: Genome, rate: float, rng: random.Random) -> Genome:
    mutated = list(genome)
    if len(mutated) < 2:
        return mutated
    for _ in range(math.floor(len(mutated) * rate + rng.random())):
        first, second = sorted(rng.sample(range(len(mutated)), 2))
        mutated.insert(first + 1, mutated.pop(second))
    return mutated


def _uniform_reinsert(
    population: list[Genome], offspring: list[Genome], ratio: float, rng: random.Random
) -> list[Genome]:
    size = len(population)
    taken = min(len(offspring), size, math.floor(size * ratio + 0.5))
    return rng.sample(offspring, taken) + rng.sample(population, size - taken)


def optimize(
    params: GeneticParameters,
    fitness: Callable[[str], int],
    layout_str: str,
    fixed_characters: str,
    start_with_layout: bool = False,
    cache_results: bool = False,
    rng: random.Random | None = None,
) -> tuple[str, int]:
    """Run the genetic algorithm and return the best layout string and its fitness."""
    if params.generation_limit < 1:
        raise ValueError("generation_limit must be at least 1")
    if params.population_size < 1:
        raise ValueError("population_size must be at least 1")
    rng = rng if rng is not None else random.Random()
    permutator = LayoutPermutator(layout_str, fixed_characters, rng)
    cache: dict[str, int] | None = {} if cache_results else None

    def fitness_of(genome: Genome) -> int:
        layout = permutator.generate_string(genome)
        if cache is None:
            return fitness(layout)
        if layout not in cache:
            cache[layout] = fitness(layout)
        return cache[layout]

    base = permutator.permutable_indices()
    if start_with_layout:
        population = [list(base) for _ in range(params.population_size)]
    else:
        population = [rng.sample(base, len(base)) for _ in range(params.population_size)]

    log.info("Starting optimization with: %r", params)
    best: tuple[int, Genome] | None = None

    for generation in range(1, params.generation_limit + 1):
        values = [fitness_of(genome) for genome in population]
        gen_fitness, gen_best = max(zip(values, population), key=itemgetter(0))
        if best is None:
            best = (gen_fitness, list(gen_best))
        elif gen_fitness > best[0]:
            best = (gen_fitness, list(gen_best))
            log.info(
                "New best in generation %d: %s (score: %d)",
                generation,
                permutator.generate_string(gen_best),
                gen_fitness,
            )
        log.info(
            "Generation %d: average_fitness: %d, best fitness: %d, all time best: %d, "
            "generation's best: %s",
            generation,
            average_fitness(values),
            gen_fitness,
            best[0],
            permutator.generate_string(gen_best),
        )
        if generation == params.generation_limit:
            break
        selection = _select(
            population, values, params.selection_ratio, params.num_individuals_per_parents
        )
        offspring = [
            _swap_order_mutation(child, params.mutation_rate, rng)
            for parents in selection
            for child in no_op_crossover(parents, rng)
        ]
        population = _uniform_reinsert(population, offspring, params.reinsertion_ratio, rng)

    best_layout = permutator.generate_string(best[1])
    log.info("Final result after generation %d: %s", params.generation_limit, best_layout)
    return best_layout, best[0]