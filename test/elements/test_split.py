"""
Tests for the Split bipartition algebra, including property-based checks of
complement involution, crossing symmetry and the containment/crossing
exclusivity.
"""

import logging

import numpy as np
import pytest
from hypothesis import given, settings, strategies as st

from treegeodesic.elements.split import Split
from treegeodesic.exceptions import InvalidParameterError

MAX_LEAVES = 16

indices_strategy = st.sets(st.integers(min_value=0, max_value=MAX_LEAVES - 1), max_size=10)
non_empty_indices = st.sets(
    st.integers(min_value=0, max_value=MAX_LEAVES - 1), min_size=1, max_size=10
)


def test_split_equality_ignores_order_and_duplicates():
    assert Split((2, 0, 1, 1)) == Split((0, 1, 2))
    assert Split((2, 0, 1)).indices == (0, 1, 2)
    assert hash(Split((0, 3))) == hash(Split((3, 0)))
    assert Split((0, 1)) != Split((0, 2))


def test_empty_split():
    split = Split()
    assert split.is_empty()
    assert len(split) == 0
    assert not Split((1,)).is_empty()


def test_contains_includes_equality():
    a = Split((0, 1, 2))
    assert a.contains(Split((0, 1)))
    assert a.contains(Split((0, 1, 2)))
    assert not Split((0, 1)).contains(a)
    assert a.properly_contains(Split((1, 2)))
    assert not a.properly_contains(Split((0, 1, 2)))


def test_disjoint_and_crossing():
    a = Split((0, 1))
    assert a.disjoint_from(Split((2, 3)))
    assert not a.disjoint_from(Split((1, 2)))
    assert a.crosses(Split((0, 2)))
    assert not a.crosses(Split((0, 1, 2)))
    assert not a.crosses(Split((2, 3)))
    assert not a.crosses(Split((0, 1)))


def test_contains_index_and_membership():
    split = Split((1, 3))
    assert split.contains_index(3)
    assert 1 in split
    assert 2 not in split


def test_add_one_remove_one():
    split = Split((0,))
    split.add_one(4)
    assert split == Split((0, 4))
    split.remove_one(0)
    assert split.indices == (4,)
    assert split.bitmask == 1 << 4


def test_complement_in_place():
    split = Split((0, 1))
    result = split.complement(5)
    assert result is split
    assert split.indices == (2, 3, 4)


def test_is_compatible_with():
    split = Split((0, 1))
    assert split.is_compatible_with([Split((0, 1)), Split((0, 1, 2)), Split((3, 4))])
    assert not split.is_compatible_with([Split((3, 4)), Split((1, 2))])
    assert split.is_compatible_with([])


def test_copy_is_independent():
    split = Split((0, 1))
    clone = split.copy()
    clone.add_one(2)
    assert split.indices == (0, 1)
    assert clone.indices == (0, 1, 2)


def test_from_string():
    split = Split.from_string("0110")
    assert split.indices == (1, 2)
    assert split.to_bit_string(5) == "01100"
    with pytest.raises(InvalidParameterError):
        Split.from_string("01a0")


def test_from_taxa_and_naming():
    encoding = {"A": 0, "B": 1, "C": 2, "D": 3}
    split = Split.from_taxa(["B", "A"], encoding)
    assert split.indices == (0, 1)
    assert split.taxa == frozenset({"A", "B"})
    assert str(split) == "(A, B)"
    assert split.bipartition() == "A, B | C, D"
    with pytest.raises(InvalidParameterError):
        Split.from_taxa(["Z"], encoding)


def test_to_string_verbose_and_reroot():
    names = ["A", "B", "C", "D", "E"]
    split = Split((0, 1))
    assert split.to_string_verbose(names) == "A,B"
    # The root is on the shown side, so the opposite side is printed
    assert split.to_string_reroot(names, "A") == "C,D,E"
    assert split.to_string_reroot(names, "E") == "A,B"


def test_to_string_reroot_unknown_root_falls_back(caplog):
    split = Split((0, 1))
    with caplog.at_level(logging.WARNING):
        assert split.to_string_reroot(["A", "B", "C"], "Q") == "A,B"
    assert "not a leaf name" in caplog.text


def test_negative_index_rejected():
    with pytest.raises(InvalidParameterError):
        Split((-1, 2))


def test_ordering_by_indices():
    splits = [Split((2, 3)), Split((0, 1)), Split((0, 2))]
    assert [s.indices for s in sorted(splits)] == [(0, 1), (0, 2), (2, 3)]


@given(indices_strategy, st.integers(min_value=MAX_LEAVES, max_value=MAX_LEAVES + 8))
@settings(max_examples=100)
def test_complement_is_an_involution(indices, num_leaves):
    split = Split(indices)
    twice = split.copy().complement(num_leaves).complement(num_leaves)
    assert twice == split


@given(indices_strategy, indices_strategy)
@settings(max_examples=200)
def test_crossing_is_symmetric(first, second):
    a, b = Split(first), Split(second)
    assert a.crosses(b) == b.crosses(a)


@given(non_empty_indices, non_empty_indices)
@settings(max_examples=200)
def test_exactly_one_relation_holds_for_distinct_splits(first, second):
    a, b = Split(first), Split(second)
    if a == b:
        assert a.contains(b) and b.contains(a)
        assert not a.crosses(b)
        return
    relations = [a.disjoint_from(b), a.contains(b), b.contains(a), a.crosses(b)]
    assert sum(relations) == 1


@given(non_empty_indices)
def test_split_never_crosses_itself(indices):
    split = Split(indices)
    assert not split.crosses(split)
    assert not split.crosses(split.copy())


@pytest.mark.parametrize("index", [63, 64, 70, 200])
def test_numpy_indices_beyond_machine_word(index):
    split = Split([np.int64(1), np.int64(index)])
    assert split.indices == (1, index)
    assert split.contains_index(np.int64(index))
    split.remove_one(np.int64(index))
    split.add_one(np.int32(index))
    assert split == Split((1, index))


def test_non_integer_index_rejected():
    with pytest.raises(TypeError):
        Split([1.5])
