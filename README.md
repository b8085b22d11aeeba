# kbdlayout

Building blocks for evaluating and optimizing keyboard layouts.

- `kbdlayout.ngrams` holds unigram, bigram and trigram frequency tables
  (`Unigrams`, `Bigrams`, `Trigrams`). Each table maps an ngram to its weight.
  You can build a table in these ways:
  - count it from text with `from_text`, which ignores carriage returns;
  - parse lines of the form `<weight> <ngram>` with `from_frequencies_str` or
    `from_file`. In these lines `\n` stands for a line break and `\\` for a
    backslash.

  Once you have a table you can:
  - get its weight with `total_weight`;
  - keep only the most common entries up to a fraction of the total weight
    with `tops`;
  - drop every ngram that contains a character with `exclude_char`;
  - boost the weights of common ngrams with `increase_common` and
    `IncreaseCommonNgramsConfig`;
  - write it, most common first, with `save_frequencies`. This creates missing
    parent directories.

  `increase_common_ngrams` applies the boost in place to any mapping of
  weights.
- `kbdlayout.combinations` expands a key and its modifiers into the key
  presses needed to type it:
  - `take_one_layerkey` gives the unigrams;
  - `take_two_layerkey` gives the bigrams;
  - `take_three_layerkey` gives the trigrams;
  - `insert_or_add_weight` adds a weight into a mapping.
- `kbdlayout.results` covers the results of metric evaluations:
  - `MetricResult` holds a single result, and `Normalization` with
    `NormalizationKind` sets how it is normalized;
  - `MetricResults` groups the results of one `MetricType`, gives each its
    normalized weighted and unweighted cost, and sums them in `total_cost`;
  - `EvaluationResult` gathers every group for one layout and gives the
    overall `total_cost` and `optimization_score`.

  Each of these has a text form via `str()`. They also convert to and from
  plain dicts with `to_dict`/`from_dict`.
- `kbdlayout.permutator`: `LayoutPermutator` keeps some characters of a layout
  string in place and permutes the others. It can make random arrangements,
  random swaps and random reshuffles.
- `kbdlayout.annealing` searches for the layout string with the lowest cost by
  simulated annealing. It provides `Parameters`, `SimulatedAnnealing` and
  `optimize`.
- `kbdlayout.genetic` searches for the layout string with the highest fitness
  with a genetic algorithm. It provides `GeneticParameters` and `optimize`.

Both searches can read their parameters from a YAML file with `from_yaml`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

### Ngram tables

```python
from kbdlayout.ngrams import Bigrams, IncreaseCommonNgramsConfig

bigrams = Bigrams.from_text("hello world")
print(bigrams.total_weight())            # 10.0
top = bigrams.tops(0.5)
boosted = bigrams.increase_common(IncreaseCommonNgramsConfig())
top.save_frequencies("out/2-grams.txt")
```

### Key combinations

```python
from kbdlayout.combinations import take_two_layerkey

print(list(take_two_layerkey("a", ["shift"], 1.0, 0.5)))
# [(('shift', 'a'), 1.0)]
```

### Metric results

```python
from kbdlayout.results import (
    EvaluationResult, MetricResult, MetricResults, MetricType,
    Normalization, NormalizationKind,
)

group = MetricResults(MetricType.BIGRAM, found_weight=90.0, not_found_weight=10.0)
group.add_result(MetricResult(
    name="Finger repeats", cost=5.0, message=None, weight=1.0,
    normalization=Normalization(NormalizationKind.WEIGHT_FOUND, 1.0),
))
result = EvaluationResult("abcdefgh", [group])
print(result.total_cost(), result.optimization_score())
print(result)
```

### Simulated annealing

The cost function takes a layout string and returns a number. Lower is better.
`optimize` returns the best layout string and its cost.

```python
from kbdlayout.annealing import Parameters, optimize

def evaluate(layout: str) -> float:
    return float(sum(i * ord(c) for i, c in enumerate(layout)))

params = Parameters(init_temp=10.0, key_switches=1, stall_accepted=500, max_iters=2000)
best_layout, best_cost = optimize("demo", params, "abcdefgh", "ah", evaluate,
                                  start_with_layout=True)
print(best_layout, best_cost)
```

The characters in the fixed string (here `a` and `h`) keep their positions.
If `init_temp` is `None`, the starting temperature is computed from the
standard deviation of costs along a random walk of neighbouring layouts.

### Genetic algorithm

The fitness function takes a layout string and returns an integer. Higher is
better. `optimize` returns the best layout string and its fitness.

```python
import random
from kbdlayout.genetic import GeneticParameters, optimize

def fitness(layout: str) -> int:
    return sum(i * ord(c) for i, c in enumerate(layout))

params = GeneticParameters(population_size=20, generation_limit=50)
best_layout, best_fitness = optimize(params, fitness, "abcdefgh", "ah",
                                     rng=random.Random(1))
print(best_layout, best_fitness)
```

## What this package does not do

The package does not include:

- a model of keyboards or layouts;
- any layout metrics;
- an evaluator that turns a layout into an `EvaluationResult`;
- mapping of character ngrams onto a layout's keys.

The searches work only through the cost or fitness function you pass in.
There is no command-line tool, web service or stored database of evaluated
layouts.