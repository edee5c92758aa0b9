"""
The crossing relation between the non-common edges of two trees.

For every target edge f the crossing set m[f] holds the positions of the start
edges that cross f. An edge f can only be added once every start edge in m[f]
has been removed, so a path between the two trees is an ordering of removals of
minimal crossing sets. Crossing sets are stored as Splits over edge positions
(not leaves) and reuse the bitmask algebra.
"""

from typing import Dict, Iterator, List, Sequence, Tuple

from treegeodesic.elements.split import Split
from treegeodesic.elements.tree_edge import TreeEdge
from treegeodesic.exceptions import CrossingPosetError
from treegeodesic.geodesic.ratio import Ratio
from treegeodesic.geodesic.ratio_sequence import RatioSequence


class SplitRelationCache:
    """
    Memo of crosses() results keyed by the bitmask pair.

    Owned by the caller and passed to the solver explicitly, so that a batch run
    can share it across tree pairs while single computations stay independent.
    """

    def __init__(self) -> None:
        self._crosses: Dict[Tuple[int, int], bool] = {}
        self.hits = 0
        self.misses = 0

    def crosses(self, first: Split | TreeEdge, second: Split | TreeEdge) -> bool:
        a, b = first.bitmask, second.bitmask
        key = (a, b) if a <= b else (b, a)
        cached = self._crosses.get(key)
        if cached is not None:
            self.hits += 1
            return cached
        self.misses += 1
        result = first.crosses(second)
        self._crosses[key] = result
        return result

    def clear(self) -> None:
        self._crosses.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._crosses)


def get_crossings(
    start_edges: Sequence[TreeEdge],
    target_edges: Sequence[TreeEdge],
    cache: SplitRelationCache | None = None,
) -> List[Split]:
    """Return, for every target edge, the set of start-edge positions crossing it."""
    crosses = cache.crosses if cache is not None else (lambda a, b: a.crosses(b))
    m: List[Split] = []
    for f_edge in target_edges:
        bitmask = 0
        for i, e_edge in enumerate(start_edges):
            if crosses(e_edge, f_edge):
                bitmask |= 1 << i
        m.append(Split.from_bitmask(bitmask))
    return m


def count_crossing_pairs(m: Sequence[Split]) -> int:
    return sum(len(s) for s in m)


def get_min_elements(m: Sequence[Split]) -> List[Split]:
    """Distinct non-empty members of m that properly contain no other non-empty member."""
    distinct: List[Split] = []
    seen = set()
    for s in m:
        if not s.is_empty() and s.bitmask not in seen:
            seen.add(s.bitmask)
            distinct.append(s)
    return [
        s.copy()
        for s in distinct
        if not any(s.properly_contains(other) for other in distinct)
    ]


def calculate_ratio(
    min_el: Split,
    m: Sequence[Split],
    start_edges: Sequence[TreeEdge],
    target_edges: Sequence[TreeEdge],
) -> Ratio:
    """
    The leg that removes the start edges in `min_el` and adds every target edge
    whose remaining crossing set is covered by `min_el`.
    """
    e_edges = [start_edges[i] for i in min_el]
    f_edges = [
        target_edges[j]
        for j, s in enumerate(m)
        if not s.is_empty() and min_el.contains(s)
    ]
    return Ratio(e_edges, f_edges)


def remove_min_el_from(m: Sequence[Split], min_el: Split) -> List[Split]:
    """Crossing sets left after the start edges in `min_el` have been removed."""
    return [Split.from_bitmask(s.bitmask & ~min_el.bitmask) for s in m]


def sorted_leg_choices(
    m: Sequence[Split],
    start_edges: Sequence[TreeEdge],
    target_edges: Sequence[TreeEdge],
) -> List[Tuple[Split, Ratio]]:
    """
    Candidate next legs, ascending by ratio value (ties keep discovery order).

    Raises:
        CrossingPosetError: If unresolved crossings remain without a minimal element
    """
    min_els = get_min_elements(m)
    if not min_els and any(not s.is_empty() for s in m):
        raise CrossingPosetError(
            "Crossing poset has unresolved splits but no minimal element"
        )
    choices = [
        (min_el, calculate_ratio(min_el, m, start_edges, target_edges))
        for min_el in min_els
    ]
    choices.sort(key=lambda choice: choice[1].ratio)
    return choices


def crossing_components(
    start_edges: Sequence[TreeEdge],
    target_edges: Sequence[TreeEdge],
    m: Sequence[Split],
) -> List[Tuple[List[int], List[int]]]:
    """
    Connected components of the crossing graph.

    Returns:
        One (start positions, target positions) pair per component, ordered by
        the smallest start position. Edges without any crossing are left out.
    """
    offset = len(start_edges)
    parent = list(range(offset + len(target_edges)))

    def find(x: int) -> int:
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    for j, s in enumerate(m):
        for i in s:
            root_i, root_j = find(i), find(offset + j)
            if root_i != root_j:
                parent[root_j] = root_i

    crossing_start = {i for s in m for i in s}
    groups: Dict[int, Tuple[List[int], List[int]]] = {}
    for i in range(offset):
        if i in crossing_start:
            groups.setdefault(find(i), ([], []))[0].append(i)
    for j, s in enumerate(m):
        if not s.is_empty():
            groups.setdefault(find(offset + j), ([], []))[1].append(j)
    return sorted(groups.values(), key=lambda group: group[0][0])


def iter_path_space_sequences(
    m: Sequence[Split],
    start_edges: Sequence[TreeEdge],
    target_edges: Sequence[TreeEdge],
) -> Iterator[RatioSequence]:
    """
    Depth-first enumeration of every ordering of minimal-element removals.

    Uses an explicit stack instead of recursion; one RatioSequence serves as
    the accumulator, each leg appended on the way down is popped before the
    next sibling is tried. Yields an independent snapshot for every complete
    ordering, smallest-ratio choices first.
    """
    if all(s.is_empty() for s in m):
        yield RatioSequence()
        return

    ratio_seq = RatioSequence()
    stack: List[Tuple[List[Split], Iterator[Tuple[Split, Ratio]]]] = [
        (list(m), iter(sorted_leg_choices(m, start_edges, target_edges)))
    ]
    while stack:
        current_m, choices = stack[-1]
        choice = next(choices, None)
        if choice is None:
            stack.pop()
            if stack:
                ratio_seq.pop()
            continue
        min_el, ratio = choice
        new_m = remove_min_el_from(current_m, min_el)
        ratio_seq.append(ratio)
        if all(s.is_empty() for s in new_m):
            yield RatioSequence(ratio_seq)
            ratio_seq.pop()
        else:
            stack.append(
                (new_m, iter(sorted_leg_choices(new_m, start_edges, target_edges)))
            )
