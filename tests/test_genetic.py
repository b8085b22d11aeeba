import random

import pytest

from kbdlayout.genetic import (
    GeneticParameters,
    average_fitness,
    cycle_crossover,
    no_op_crossover,
    optimize,
)


def _small_params(**overrides):
    values = dict(
        population_size=10,
        generation_limit=5,
        num_individuals_per_parents=2,
        selection_ratio=0.7,
        mutation_rate=0.1,
        reinsertion_ratio=0.7,
    )
    values.update(overrides)
    return GeneticParameters(**values)


def _matches(target):
    def score(layout):
        return sum(a == b for a, b in zip(layout, target))

    return score


def test_default_parameters():
    params = GeneticParameters()
    assert params.population_size == 100
    assert params.generation_limit == 2000
    assert params.num_individuals_per_parents == 2
    assert params.selection_ratio == 0.7
    assert params.mutation_rate == 0.1
    assert params.reinsertion_ratio == 0.7


def test_from_yaml_reads_all_fields(tmp_path):
    path = tmp_path / "params.yml"
    path.write_text(
        "population_size: 12\ngeneration_limit: 7\nnum_individuals_per_parents: 3\n"
        "selection_ratio: 0.5\nmutation_rate: 0.2\nreinsertion_ratio: 0.6\n",
        encoding="utf-8",
    )
    params = GeneticParameters.from_yaml(path)
    assert params == GeneticParameters(12, 7, 3, 0.5, 0.2, 0.6)


def test_from_yaml_missing_field(tmp_path):
    path = tmp_path / "params.yml"
    path.write_text("population_size: 12\n", encoding="utf-8")
    with pytest.raises(ValueError):
        GeneticParameters.from_yaml(path)


def test_average_fitness_uses_integer_division():
    assert average_fitness([7, 7, 7]) == 7
    assert average_fitness([1, 2]) == 1


def test_average_fitness_of_nothing_fails():
    with pytest.raises(ZeroDivisionError):
        average_fitness([])


def test_no_op_crossover_copies_parents():
    parents = [[0, 1, 2], [2, 1, 0]]
    children = no_op_crossover(parents, random.Random(0))
    assert children == parents
    assert all(child is not parent for child, parent in zip(children, parents))


def test_cycle_crossover_children_are_permutations():
    rng = random.Random(3)
    parents = [[0, 1, 2, 3, 4], [4, 3, 2, 1, 0], [1, 0, 3, 2, 4]]
    for _ in range(20):
        children = cycle_crossover(parents, rng)
        assert len(children) == len(parents)
        for child in children:
            assert sorted(child) == [0, 1, 2, 3, 4]


def test_cycle_crossover_takes_each_gene_from_a_parent():
    rng = random.Random(5)
    p1, p2 = [0, 1, 2, 3], [1, 0, 3, 2]
    for _ in range(20):
        child = cycle_crossover([p1, p2], rng)[0]
        assert all(c in (a, b) for c, a, b in zip(child, p1, p2))


def test_cycle_crossover_of_identical_parents():
    genome = [3, 1, 0, 2]
    assert cycle_crossover([genome, list(genome)], random.Random(1)) == [genome, genome]


def test_cycle_crossover_single_parent_has_no_children():
    assert cycle_crossover([[0, 1, 2]], random.Random(1)) == []


def test_optimize_keeps_best_starting_layout():
    layout = "abcdef"
    best, score = optimize(
        _small_params(), _matches(layout), layout, "", True, False, random.Random(1)
    )
    assert best == layout
    assert score == len(layout)


def test_optimize_result_is_consistent_permutation():
    layout = "abcdefgh"
    score_fn = _matches("hgfedcba")
    best, score = optimize(
        _small_params(), score_fn, layout, "ab", False, False, random.Random(2)
    )
    assert sorted(best) == sorted(layout)
    assert best[:2] == "ab"
    assert score == score_fn(best)


def test_optimize_cache_evaluates_each_layout_once():
    calls = []

    def score_fn(layout):
        calls.append(layout)
        return len(layout)

    best, score = optimize(_small_params(), score_fn, "abcd", "", False, True, random.Random(4))
    assert sorted(best) == ["a", "b", "c", "d"]
    assert score == 4
    assert calls
    assert len(calls) == len(set(calls))


def test_optimize_rejects_zero_generations():
    with pytest.raises(ValueError):
        optimize(_small_params(generation_limit=0), _matches("ab"), "ab", "", True)