from itertools import permutations

import pytest

from kbdlayout.combinations import (
    insert_or_add_weight,
    take_one_layerkey,
    take_three_layerkey,
    take_two_layerkey,
)

BASE = 0


def test_insert_or_add_weight_creates_entry():
    mapping = {}
    insert_or_add_weight(mapping, (1, 2), 1.5)
    assert mapping == {(1, 2): 1.5}


def test_insert_or_add_weight_accumulates():
    mapping = {"a": 1.0}
    insert_or_add_weight(mapping, "a", 2.0)
    insert_or_add_weight(mapping, "b", 0.5)
    assert mapping == {"a": 3.0, "b": 0.5}


def test_take_one_without_modifiers_yields_base_only():
    assert list(take_one_layerkey(BASE, [], 3.0)) == [(BASE, 3.0)]


def test_take_one_yields_base_then_modifiers():
    result = list(take_one_layerkey(BASE, [7, 8], 2.0))
    assert result == [(BASE, 2.0), (7, 2.0), (8, 2.0)]


def test_take_two_without_modifiers_is_empty():
    assert list(take_two_layerkey(BASE, [], 1.0, 0.5)) == []


def test_take_two_single_modifier():
    assert list(take_two_layerkey(BASE, [5], 4.0, 0.5)) == [((5, BASE), 4.0)]


def test_take_two_two_modifiers_order_and_weights():
    w, f = 4.0, 0.25
    result = list(take_two_layerkey(BASE, [1, 2], w, f))
    assert result == [
        ((1, BASE), w),
        ((1, 2), w * f),
        ((2, 1), w * f),
        ((2, BASE), w),
    ]


@pytest.mark.parametrize("n", [0, 1, 2, 3, 4, 5])
def test_take_two_count(n):
    mods = list(range(1, n + 1))
    result = list(take_two_layerkey(BASE, mods, 1.0, 0.5))
    assert len(result) == n + n * (n - 1)
    assert len({k for k, _ in result}) == len(result)


def test_take_two_covers_all_modifier_pairs():
    mods = [1, 2, 3]
    result = dict(take_two_layerkey(BASE, mods, 1.0, 0.5))
    pairs = {k for k in result if BASE not in k}
    assert pairs == set(permutations(mods, 2))
    assert {k for k in result if BASE in k} == {(m, BASE) for m in mods}


@pytest.mark.parametrize("mods", [[], [3]])
def test_take_three_needs_two_modifiers(mods):
    assert list(take_three_layerkey(BASE, mods, 1.0, 0.5)) == []


def test_take_three_two_modifiers():
    w, f = 2.0, 0.5
    result = list(take_three_layerkey(BASE, [1, 2], w, f))
    assert result == [((1, 2, BASE), w * f), ((2, 1, BASE), w * f)]


def test_take_three_three_modifiers_order():
    w, f = 8.0, 0.5
    result = list(take_three_layerkey(BASE, [1, 2, 3], w, f))
    two = w * f
    three = w * f * f
    assert result[:8] == [
        ((1, 2, BASE), two),
        ((2, 1, BASE), two),
        ((1, 2, 3), three),
        ((1, 3, 2), three),
        ((2, 1, 3), three),
        ((2, 3, 1), three),
        ((3, 1, 2), three),
        ((3, 2, 1), three),
    ]
    assert result[8:] == [
        ((1, 3, BASE), two),
        ((3, 1, BASE), two),
        ((2, 3, BASE), two),
        ((3, 2, BASE), two),
    ]


@pytest.mark.parametrize("n", [2, 3, 4, 5])
def test_take_three_count_and_uniqueness(n):
    mods = list(range(1, n + 1))
    result = list(take_three_layerkey(BASE, mods, 1.0, 0.5))
    keys = [k for k, _ in result]
    assert len(keys) == len(set(keys))
    with_base = {k for k in keys if k[2] == BASE}
    without_base = {k for k in keys if BASE not in k}
    assert with_base == {(a, b, BASE) for a, b in permutations(mods, 2)}
    assert without_base == set(permutations(mods, 3))
    assert len(keys) == len(with_base) + len(without_base)


def test_take_three_weights_depend_on_base_presence():
    w, f = 3.0, 0.2
    for key, weight in take_three_layerkey(BASE, [1, 2, 3, 4], w, f):
        if key[2] == BASE:
            assert weight == pytest.approx(w * f)
        else:
            assert weight == pytest.approx(w * f * f)


def test_generators_accumulate_into_map():
    mapping = {}
    for key, weight in take_one_layerkey(BASE, [1, 1], 1.0):
        insert_or_add_weight(mapping, key, weight)
    assert mapping == {BASE: 1.0, 1: 2.0}