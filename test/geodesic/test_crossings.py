import pytest

from treegeodesic.elements.split import Split
from treegeodesic.geodesic.crossings import (
    SplitRelationCache,
    calculate_ratio,
    count_crossing_pairs,
    crossing_components,
    get_crossings,
    get_min_elements,
    iter_path_space_sequences,
    remove_min_el_from,
    sorted_leg_choices,
)


@pytest.fixture
def independent_pair(make_edges):
    """Two crossings that do not interact: {0,1} x {1,4} and {2,3} x {3,5}."""
    start = make_edges([((0, 1), [1.0]), ((2, 3), [3.0])], num_leaves=6)
    target = make_edges([((1, 4), [2.0]), ((3, 5), [1.0])], num_leaves=6, first_id=2)
    return start, target


@pytest.fixture
def chain(make_edges):
    """The second target edge can only be added after both start edges are gone."""
    start = make_edges([((0, 1), [4.0]), ((0, 1, 2), [1.0])], num_leaves=5)
    target = make_edges([((1, 2), [1.0]), ((1, 2, 3), [2.0])], num_leaves=5, first_id=2)
    return start, target


def test_get_crossings(independent_pair, chain):
    m = get_crossings(*independent_pair)
    assert [s.indices for s in m] == [(0,), (1,)]
    assert count_crossing_pairs(m) == 2

    m = get_crossings(*chain)
    assert [s.indices for s in m] == [(0,), (0, 1)]
    assert count_crossing_pairs(m) == 3


def test_get_min_elements_skips_empty_and_duplicates():
    m = [Split((0, 1)), Split(), Split((0,)), Split((0,)), Split((2,))]
    min_els = get_min_elements(m)
    assert [s.indices for s in min_els] == [(0,), (2,)]
    assert get_min_elements([Split(), Split()]) == []


def test_calculate_ratio_adds_covered_target_edges(chain):
    start, target = chain
    m = get_crossings(start, target)
    ratio = calculate_ratio(Split((0,)), m, start, target)
    assert [e.original_id for e in ratio.e_edges] == [0]
    assert [e.original_id for e in ratio.f_edges] == [2]
    assert ratio.ratio == pytest.approx(4.0)


def test_remove_min_el_from(chain):
    m = get_crossings(*chain)
    remaining = remove_min_el_from(m, Split((0,)))
    assert [s.indices for s in remaining] == [(), (1,)]
    assert [s.indices for s in m] == [(0,), (0, 1)]


def test_sorted_leg_choices_ascending(independent_pair):
    start, target = independent_pair
    m = get_crossings(start, target)
    choices = sorted_leg_choices(m, start, target)
    assert [ratio.ratio for _, ratio in choices] == pytest.approx([0.5, 3.0])
    assert [min_el.indices for min_el, _ in choices] == [(0,), (1,)]


def test_crossing_components(independent_pair, chain):
    start, target = independent_pair
    components = crossing_components(start, target, get_crossings(start, target))
    assert components == [([0], [0]), ([1], [1])]

    start, target = chain
    components = crossing_components(start, target, get_crossings(start, target))
    assert components == [([0, 1], [0, 1])]


def test_crossing_components_ignore_uncrossed_edges(make_edges):
    start = make_edges([((0, 1), [1.0]), ((3, 4), [1.0])], num_leaves=6)
    target = make_edges([((1, 2), [1.0])], num_leaves=6)
    components = crossing_components(start, target, get_crossings(start, target))
    assert components == [([0], [0])]


def test_path_space_enumerates_every_ordering(independent_pair):
    start, target = independent_pair
    m = get_crossings(start, target)
    sequences = list(iter_path_space_sequences(m, start, target))
    assert [s.to_string_comb_type() for s in sequences] == [
        "[0] -> [2]; [1] -> [3]",
        "[1] -> [3]; [0] -> [2]",
    ]
    # Snapshots do not share the accumulator
    assert sequences[0] is not sequences[1]
    assert len(sequences[0]) == 2


def test_path_space_of_three_independent_crossings(make_edges):
    start = make_edges([((0, 1), [1.0]), ((3, 4), [1.0]), ((6, 7), [1.0])], num_leaves=9)
    target = make_edges([((1, 2), [1.0]), ((4, 5), [1.0]), ((7, 8), [1.0])], num_leaves=9)
    m = get_crossings(start, target)
    sequences = list(iter_path_space_sequences(m, start, target))
    assert len(sequences) == 6
    assert len({s.to_string_comb_type() for s in sequences}) == 6


def test_path_space_of_chain_has_one_ordering(chain):
    start, target = chain
    sequences = list(iter_path_space_sequences(get_crossings(start, target), start, target))
    assert len(sequences) == 1
    assert sequences[0].to_string_comb_type() == "[0] -> [2]; [1] -> [3]"


def test_path_space_without_crossings_yields_empty_sequence(make_edges):
    start = make_edges([((0, 1), [1.0])], num_leaves=5)
    target = make_edges([((3, 4), [1.0])], num_leaves=5)
    sequences = list(iter_path_space_sequences(get_crossings(start, target), start, target))
    assert len(sequences) == 1
    assert len(sequences[0]) == 0


def test_split_relation_cache(independent_pair):
    start, target = independent_pair
    cache = SplitRelationCache()
    first = get_crossings(start, target, cache)
    assert cache.misses == 4 and cache.hits == 0
    assert len(cache) == 4

    second = get_crossings(start, target, cache)
    assert [s.bitmask for s in second] == [s.bitmask for s in first]
    assert cache.hits == 4

    assert cache.crosses(target[0], start[0]) is True
    assert cache.hits == 5

    cache.clear()
    assert len(cache) == 0 and cache.hits == 0 and cache.misses == 0
