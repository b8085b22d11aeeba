"""Ngram tables, key combinations, evaluation results and layout search for keyboard layouts."""

__version__ = "0.1.0"
__all__ = ["annealing", "combinations", "genetic", "ngrams", "permutator", "results"]