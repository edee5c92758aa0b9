"""
Helpers operating on whole edge lists of a tree.

The tree-construction layer (Newick parsing, traversal, rerooting) lives outside
this package; it hands over either ready-made TreeEdge lists or a mapping of
clusters to branch lengths, as produced by ``Node.to_weighted_splits()``.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from tabulate import tabulate

from treegeodesic.elements.edge_attribute import EdgeAttribute
from treegeodesic.elements.split import Split
from treegeodesic.elements.tree_edge import TreeEdge
from treegeodesic.exceptions import (
    InvalidEdgeSetError,
    InvalidParameterError,
    LeafSetMismatchError,
)

logger = logging.getLogger(__name__)

LeafNames = Union[Sequence[str], Mapping[str, int]]
ClusterKey = Union[Split, Tuple[int, ...], Iterable[str]]
LengthValue = Union[float, Sequence[float], EdgeAttribute, None]


def make_encoding(leaf_names: LeafNames) -> Dict[str, int]:
    """Return the name -> index map of an ordered leaf-name list."""
    if isinstance(leaf_names, Mapping):
        return dict(leaf_names)
    encoding = {name: i for i, name in enumerate(leaf_names)}
    if len(encoding) != len(leaf_names):
        raise InvalidParameterError("Leaf names must be unique")
    return encoding


def leaf_names_of(encoding: Mapping[str, int]) -> List[str]:
    return [name for name, _ in sorted(encoding.items(), key=lambda item: item[1])]


def clone_edges(edges: Iterable[TreeEdge]) -> List[TreeEdge]:
    return [edge.copy() for edge in edges]


def _to_attribute(value: LengthValue) -> EdgeAttribute:
    if isinstance(value, EdgeAttribute):
        return value.copy()
    if value is None:
        return EdgeAttribute()
    if isinstance(value, (int, float)):
        return EdgeAttribute([float(value)])
    return EdgeAttribute(value)


def _to_split(key: ClusterKey, encoding: Dict[str, int]) -> Split:
    if isinstance(key, Split):
        return Split.from_bitmask(key.bitmask, encoding)
    members = list(key)
    if all(isinstance(m, str) for m in members):
        return Split.from_taxa(members, encoding)
    return Split(members, encoding)


def edges_from_weighted_splits(
    weighted_splits: Mapping[Any, LengthValue],
    leaf_names: LeafNames,
    rooted: bool = True,
) -> List[TreeEdge]:
    """
    Convert a cluster -> length mapping into the internal edges of one tree.

    Trivial splits (empty, single leaf, the whole leaf set) are dropped. For
    unrooted trees every split is stored as the side not containing the last
    leaf, so the two edges incident to a degree-two root collapse into one edge
    whose attribute is their sum.

    Args:
        weighted_splits: Mapping of clusters (Split, index tuple or taxon names)
            to branch lengths (float, vector or EdgeAttribute)
        leaf_names: Ordered leaf names or an existing encoding
        rooted: Whether the tree is rooted

    Returns:
        List of TreeEdge with sequential original ids in input order
    """
    encoding = make_encoding(leaf_names)
    num_leaves = len(encoding)
    by_bitmask: Dict[int, TreeEdge] = {}
    for key, value in weighted_splits.items():
        split = _to_split(key, encoding)
        if split.indices and split.indices[-1] >= num_leaves:
            raise LeafSetMismatchError(
                f"Split {split.indices} refers to a leaf outside the {num_leaves} known leaves"
            )
        if not rooted and split.contains_index(num_leaves - 1):
            split.complement(num_leaves)
        if len(split) < 2 or len(split) >= num_leaves - (0 if rooted else 1):
            continue
        attribute = _to_attribute(value)
        existing = by_bitmask.get(split.bitmask)
        if existing is not None:
            logger.debug(f"Merging duplicate split {split} into a single edge")
            existing.attribute.add(attribute)
            continue
        by_bitmask[split.bitmask] = TreeEdge(split, attribute, len(by_bitmask))
    return list(by_bitmask.values())


def shared_encoding(
    start_edges: Sequence[TreeEdge],
    target_edges: Sequence[TreeEdge],
    leaf_names: Optional[LeafNames] = None,
) -> Dict[str, int]:
    """
    Return the leaf encoding shared by every edge of both trees.

    Raises:
        LeafSetMismatchError: If two edges, or an edge and `leaf_names`,
            disagree on the leaf universe
    """
    expected: Optional[Dict[str, int]] = (
        make_encoding(leaf_names) if leaf_names is not None else None
    )
    for edge in list(start_edges) + list(target_edges):
        if expected is None:
            expected = edge.encoding
        elif edge.encoding != expected:
            raise LeafSetMismatchError(
                f"Edge {edge} uses a different leaf universe than the rest of the "
                f"comparison ({len(edge.encoding)} vs {len(expected)} leaves)"
            )
    expected = expected if expected is not None else {}
    if expected:
        num_leaves = len(expected)
        for edge in list(start_edges) + list(target_edges):
            if edge.indices and edge.indices[-1] >= num_leaves:
                raise LeafSetMismatchError(
                    f"Edge {edge} refers to a leaf outside the {num_leaves} known leaves"
                )
    elif start_edges or target_edges:
        logger.warning(
            "Edges carry no leaf encoding and no leaf names were given; "
            "the two trees are assumed to share a leaf universe"
        )
    return expected


def validate_edge_set(edges: Sequence[TreeEdge]) -> None:
    """
    Check that the edges of one tree have distinct, pairwise compatible splits.

    Raises:
        InvalidEdgeSetError: On a duplicate or a crossing pair
    """
    seen: Dict[int, TreeEdge] = {}
    for i, edge in enumerate(edges):
        if edge.bitmask in seen:
            raise InvalidEdgeSetError(f"Split {edge.split} occurs twice in one tree")
        seen[edge.bitmask] = edge
        for other in edges[:i]:
            if edge.crosses(other):
                InvalidEdgeSetError.raise_crossing(edge.split, other.split)


def get_common_edges(
    start_edges: Sequence[TreeEdge], target_edges: Sequence[TreeEdge]
) -> List[TreeEdge]:
    """
    Return the edges whose length changes linearly along the geodesic.

    A split present in both trees carries difference(start, target). A split of
    one tree that is compatible with every split of the other tree carries its
    own attribute.
    """
    common: List[TreeEdge] = []
    target_by_bitmask = {edge.bitmask: edge for edge in target_edges}
    start_bitmasks = {edge.bitmask for edge in start_edges}

    for edge in start_edges:
        match = target_by_bitmask.get(edge.bitmask)
        if match is not None:
            attribute = EdgeAttribute.difference(edge.attribute, match.attribute)
        elif edge.is_compatible_with(target_edges):
            attribute = EdgeAttribute.difference(edge.attribute, None)
        else:
            continue
        common.append(
            TreeEdge(edge.as_split(), attribute, edge.original_id, edge.original_edge.copy())
        )

    for edge in target_edges:
        if edge.bitmask in start_bitmasks:
            continue
        if edge.is_compatible_with(start_edges):
            common.append(
                TreeEdge(
                    edge.as_split(),
                    EdgeAttribute.difference(None, edge.attribute),
                    edge.original_id,
                    edge.original_edge.copy(),
                )
            )
    return common


def split_off_common_edges(
    start_edges: Sequence[TreeEdge], target_edges: Sequence[TreeEdge]
) -> Tuple[List[TreeEdge], List[TreeEdge], List[TreeEdge]]:
    """
    Partition a tree pair into common edges and the edges that cross something.

    Returns:
        (common edges, remaining start edges, remaining target edges); the
        remaining edges are clones of the inputs
    """
    common = get_common_edges(start_edges, target_edges)
    common_bitmasks = {edge.bitmask for edge in common}
    start_rest = clone_edges(e for e in start_edges if e.bitmask not in common_bitmasks)
    target_rest = clone_edges(e for e in target_edges if e.bitmask not in common_bitmasks)
    return common, start_rest, target_rest


def format_edges_verbose(
    edges: Sequence[TreeEdge],
    leaf_names: Sequence[str],
    original_edges: bool = True,
) -> str:
    """Render an edge list as a table of id, length and leaves below."""
    rows: List[List[Any]] = []
    for edge in edges:
        split = edge.split
        if original_edges and not edge.original_edge.is_empty():
            split = edge.original_edge
        rows.append(
            [edge.original_id, str(edge.attribute), split.to_string_verbose(list(leaf_names))]
        )
    return tabulate(
        rows, headers=["Edge ID", "Length", "Leaves Below"], tablefmt="plain"
    )
