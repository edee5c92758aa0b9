import math

import pytest
from hypothesis import given, settings, strategies as st

from treegeodesic.elements.edge_attribute import EdgeAttribute
from treegeodesic.elements.split import Split
from treegeodesic.elements.tree_edge import TreeEdge
from treegeodesic.geodesic.ratio import Ratio
from treegeodesic.geodesic.ratio_sequence import RatioSequence


def leg(e_length, f_length, first_id=0):
    return Ratio(
        [TreeEdge(Split((0, 1)), EdgeAttribute([e_length]), first_id)],
        [TreeEdge(Split((0, 2)), EdgeAttribute([f_length]), first_id + 1)],
    )


positive = st.floats(min_value=0.01, max_value=100, allow_nan=False)


def test_distance_is_root_of_squared_leg_lengths():
    sequence = RatioSequence([leg(3.0, 4.0), leg(1.0, 2.0)])
    assert sequence.distance == pytest.approx(math.sqrt(25 + 5))
    assert sequence.get_distance() == sequence.distance
    assert RatioSequence().distance == 0.0


def test_cached_distance_is_invalidated():
    sequence = RatioSequence([leg(3.0, 4.0)])
    assert sequence.distance == pytest.approx(5.0)
    extra = leg(1.0, 1.0)
    sequence.append(extra)
    assert sequence.distance == pytest.approx(math.sqrt(27))
    sequence.remove(extra)
    assert sequence.distance == pytest.approx(5.0)
    sequence.add(extra)
    assert sequence.pop() is extra
    assert sequence.distance == pytest.approx(5.0)


def test_remove_prefers_identity():
    first, second = leg(1.0, 1.0), leg(1.0, 1.0)
    assert first == second
    sequence = RatioSequence([first, second])
    sequence.remove(second)
    assert sequence[0] is first
    sequence.remove(leg(1.0, 1.0))
    assert len(sequence) == 0
    with pytest.raises(ValueError):
        sequence.remove(first)


def test_copy_is_independent():
    sequence = RatioSequence([leg(3.0, 4.0)])
    clone = sequence.copy()
    clone.append(leg(1.0, 1.0))
    clone[0].e_edges[0].attribute.scale_by(0)
    assert len(sequence) == 1
    assert sequence.distance == pytest.approx(5.0)


def test_non_descending_sequence_is_unchanged():
    sequence = RatioSequence([leg(1.0, 2.0, 0), leg(2.0, 1.0, 2)])
    assert sequence.is_non_descending()
    normalized = sequence.get_non_descending_with_min_distance()
    assert normalized == sequence
    assert normalized is not sequence


def test_descending_pair_is_merged():
    sequence = RatioSequence([leg(2.0, 1.0, 0), leg(1.0, 2.0, 2)])
    assert not sequence.is_non_descending()
    normalized = sequence.normalized()
    assert len(normalized) == 1
    assert normalized[0].ratio == pytest.approx(1.0)
    assert [e.original_id for e in normalized[0].e_edges] == [0, 2]
    assert len(sequence) == 2


def test_merging_cascades():
    sequence = RatioSequence([leg(3.0, 1.0, 0), leg(1.0, 1.0, 2), leg(2.0, 1.0, 4)])
    normalized = sequence.get_non_descending_with_min_distance()
    assert len(normalized) == 1
    assert normalized[0].ratio == pytest.approx(math.sqrt(14 / 3))


def test_interleave_is_stable_on_ties():
    first = RatioSequence([leg(1.0, 2.0, 0), leg(1.0, 1.0, 2)])
    second = RatioSequence([leg(1.0, 1.0, 10), leg(3.0, 1.0, 12)])
    merged = RatioSequence.interleave(first, second)
    assert [r.e_edges[0].original_id for r in merged] == [0, 2, 10, 12]
    assert merged.is_non_descending()
    assert RatioSequence.interleave(RatioSequence(), first) == first


def test_reverse():
    sequence = RatioSequence([leg(1.0, 2.0, 0), leg(2.0, 1.0, 2)])
    reversed_sequence = sequence.reverse()
    assert reversed_sequence.ratio_values() == pytest.approx([0.5, 2.0])
    assert [r.e_edges[0].original_id for r in reversed_sequence] == [3, 1]


def test_edge_collections_and_strings():
    sequence = RatioSequence([leg(1.0, 2.0, 0), leg(2.0, 1.0, 2)])
    assert [e.original_id for e in sequence.get_e_edges()] == [0, 2]
    assert [e.original_id for e in sequence.get_f_edges()] == [1, 3]
    assert sequence.to_string_comb_type() == "[0] -> [1]; [2] -> [3]"
    assert sequence.to_string_value() == "[0.5, 2]"
    assert str(sequence) == "[0] -> [1]; [2] -> [3]\n[0.5, 2]"
    assert [d["ratio_value"] for d in sequence.to_list()] == pytest.approx([0.5, 2.0])


@given(st.lists(st.tuples(positive, positive), min_size=1, max_size=8))
@settings(max_examples=100)
def test_normalization_yields_non_descending_ratios(lengths):
    sequence = RatioSequence(
        leg(e, f, 2 * k) for k, (e, f) in enumerate(lengths)
    )
    normalized = sequence.get_non_descending_with_min_distance()
    assert normalized.is_non_descending()
    assert 1 <= len(normalized) <= len(sequence)
    assert len(normalized.get_e_edges()) == len(sequence)
    assert normalized.distance == pytest.approx(sequence.distance)
