"""
Geodesic between two trees in BHV tree space.

The solver clones both edge lists, splits off the common edges (whose lengths
change linearly and contribute an orthogonal term), builds the crossing
relation of the rest and searches the orderings of minimal crossing sets for the
shortest normalised ratio sequence.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from tabulate import tabulate

from treegeodesic.elements.edge_list import (
    LeafNames,
    leaf_names_of,
    shared_encoding,
    split_off_common_edges,
    validate_edge_set,
)
from treegeodesic.elements.split import Split
from treegeodesic.elements.tree_edge import TreeEdge
from treegeodesic.geodesic.config import GeodesicConfig
from treegeodesic.geodesic.crossings import (
    SplitRelationCache,
    crossing_components,
    get_crossings,
    iter_path_space_sequences,
)
from treegeodesic.geodesic.ratio_sequence import RatioSequence
from treegeodesic.logger import geo_logger
from treegeodesic.logger.formatting import format_edge_ids, format_split

logger = logging.getLogger(__name__)


def _edge_label(edge: TreeEdge, leaf_names: Sequence[str]) -> str:
    if leaf_names:
        return "(" + ", ".join(leaf_names[i] for i in edge.indices) + ")"
    return format_split(edge)


@dataclass
class Geodesic:
    """Result of a geodesic computation between a start and a target tree."""

    ratio_sequence: RatioSequence
    """Normalised (non-descending) legs through the non-common edges."""

    common_edges: List[TreeEdge] = field(default_factory=list)
    """Edges whose attribute changes linearly; each carries the attribute difference."""

    leaf_names: List[str] = field(default_factory=list)

    optimal: bool = True
    """False when the search was cut short by GeodesicConfig.max_candidates."""

    candidates_explored: int = 0

    @property
    def common_length(self) -> float:
        return math.sqrt(sum(edge.norm() ** 2 for edge in self.common_edges))

    @property
    def distance(self) -> float:
        return math.hypot(self.ratio_sequence.distance, self.common_length)

    def legs(self) -> List[Dict[str, Any]]:
        return self.ratio_sequence.to_list()

    def combinatorial_type(self) -> str:
        return self.ratio_sequence.to_string_comb_type()

    def report(self, leaf_names: Optional[Sequence[str]] = None) -> str:
        """Human-readable summary: the legs, the common edges and the distance."""
        names = list(leaf_names) if leaf_names is not None else self.leaf_names

        def label(edges: List[TreeEdge]) -> str:
            return " ".join(_edge_label(edge, names) for edge in edges) or "-"

        parts: List[str] = []
        if self.ratio_sequence:
            rows = [
                [k + 1, label(r.e_edges), label(r.f_edges), f"{r.ratio:.6g}", f"{r.length:.6g}"]
                for k, r in enumerate(self.ratio_sequence)
            ]
            parts.append(
                tabulate(rows, headers=["Leg", "Removed", "Added", "Ratio", "Length"])
            )
        if self.common_edges:
            rows = [
                [_edge_label(edge, names), str(edge.attribute), f"{edge.norm():.6g}"]
                for edge in self.common_edges
            ]
            parts.append(
                tabulate(rows, headers=["Common edge", "Attribute difference", "Norm"])
            )
        parts.append(f"Geodesic distance: {self.distance:.10g}")
        return "\n\n".join(parts)


@dataclass
class PathSpaceGeodesic:
    """One combinatorial type of path together with its normalised form."""

    sequence: RatioSequence
    normalized: RatioSequence

    @property
    def distance(self) -> float:
        return self.normalized.distance


@dataclass
class _SearchResult:
    best: RatioSequence
    explored: int
    optimal: bool


class GeodesicSolver:
    """
    Computes geodesic distances and paths between edge sets of two trees.

    Args:
        config: Solver configuration
        leaf_names: Optional ordered leaf names every edge must be expressed in
        cache: Optional crossing memo shared with other computations
    """

    def __init__(
        self,
        config: Optional[GeodesicConfig] = None,
        leaf_names: Optional[LeafNames] = None,
        cache: Optional[SplitRelationCache] = None,
    ):
        self.config = config if config is not None else GeodesicConfig()
        self.leaf_names = leaf_names
        self.cache = cache
        self.logger = logging.getLogger(self.config.logger_name)

    # ------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------

    def distance(
        self, start_edges: Sequence[TreeEdge], target_edges: Sequence[TreeEdge]
    ) -> float:
        return self.geodesic(start_edges, target_edges).distance

    def geodesic(
        self, start_edges: Sequence[TreeEdge], target_edges: Sequence[TreeEdge]
    ) -> Geodesic:
        """
        Compute the geodesic from the start tree to the target tree.

        Raises:
            LeafSetMismatchError: If the trees do not share a leaf universe
            InvalidEdgeSetError: If validation is on and an edge list is not a tree
            CrossingPosetError: If the crossing poset is malformed
        """
        encoding = self._prepare(start_edges, target_edges)
        common, start_rest, target_rest = split_off_common_edges(start_edges, target_edges)
        m = get_crossings(start_rest, target_rest, self.cache)
        self._trace_input(common, start_rest, target_rest, m)

        if self.config.split_components:
            problems: List[Tuple[List[TreeEdge], List[TreeEdge]]] = [
                ([start_rest[i] for i in start_pos], [target_rest[j] for j in target_pos])
                for start_pos, target_pos in crossing_components(start_rest, target_rest, m)
            ]
        elif start_rest or target_rest:
            problems = [(start_rest, target_rest)]
        else:
            problems = []

        sequence = RatioSequence()
        explored = 0
        optimal = True
        for e_edges, f_edges in problems:
            result = self._search(e_edges, f_edges)
            sequence = RatioSequence.interleave(sequence, result.best)
            explored += result.explored
            optimal = optimal and result.optimal
        sequence = sequence.get_non_descending_with_min_distance()

        geodesic = Geodesic(
            ratio_sequence=sequence,
            common_edges=common,
            leaf_names=leaf_names_of(encoding),
            optimal=optimal,
            candidates_explored=explored,
        )
        self.logger.debug(
            f"Geodesic over {len(problems)} component(s), {explored} candidate(s): "
            f"distance {geodesic.distance:.10g}"
        )
        if not geo_logger.disabled:
            geo_logger.result("Combinatorial type", sequence.to_string_comb_type())
            geo_logger.result("Geodesic distance", geodesic.distance)
            geo_logger.end_section()
        return geodesic

    def path_space_geodesics(
        self, start_edges: Sequence[TreeEdge], target_edges: Sequence[TreeEdge]
    ) -> Iterator[PathSpaceGeodesic]:
        """
        Yield every combinatorial type of path through the non-common edges.

        Each item holds the raw ordering of minimal crossing sets and its
        normalised form. Common edges are left out of every item.
        """
        self._prepare(start_edges, target_edges)
        common, start_rest, target_rest = split_off_common_edges(start_edges, target_edges)
        if common:
            self.logger.info(
                f"Trees have {len(common)} common or compatible edge(s); "
                f"enumerating path spaces of the remaining edges only"
            )
        m = get_crossings(start_rest, target_rest, self.cache)
        for sequence in iter_path_space_sequences(m, start_rest, target_rest):
            yield PathSpaceGeodesic(
                sequence, sequence.get_non_descending_with_min_distance()
            )

    # ------------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------------

    def _prepare(
        self, start_edges: Sequence[TreeEdge], target_edges: Sequence[TreeEdge]
    ) -> Dict[str, int]:
        encoding = shared_encoding(start_edges, target_edges, self.leaf_names)
        if self.config.validate_input:
            validate_edge_set(start_edges)
            validate_edge_set(target_edges)
        return encoding

    def _search(
        self, e_edges: List[TreeEdge], f_edges: List[TreeEdge]
    ) -> _SearchResult:
        """
        Depth-first search for the shortest normalised candidate of one component.

        Every candidate covers each edge exactly once, so no candidate is shorter
        than sqrt(sum |e|^2 + sum |f|^2); the search stops as soon as a candidate
        reaches that bound.
        """
        tolerance = self.config.tolerance
        m = get_crossings(e_edges, f_edges, self.cache)
        lower_bound = math.sqrt(
            sum(edge.norm() ** 2 for edge in e_edges)
            + sum(edge.norm() ** 2 for edge in f_edges)
        )

        best: Optional[RatioSequence] = None
        explored = 0
        optimal = True
        for candidate in iter_path_space_sequences(m, e_edges, f_edges):
            explored += 1
            normalized = candidate.get_non_descending_with_min_distance()
            if not geo_logger.disabled:
                geo_logger.debug(
                    f"Candidate {explored}: {candidate.to_string_comb_type()} -> "
                    f"{normalized.to_string_comb_type()} ({normalized.distance:.6g})"
                )
            if best is None or normalized.distance < best.distance - tolerance:
                best = normalized
            if best.distance <= lower_bound + tolerance:
                break
            if (
                self.config.max_candidates is not None
                and explored >= self.config.max_candidates
            ):
                optimal = False
                self.logger.warning(
                    f"Stopped geodesic search after {explored} candidates; "
                    f"the reported path may not be the shortest"
                )
                break

        return _SearchResult(
            best if best is not None else RatioSequence(), explored, optimal
        )

    def _trace_input(
        self,
        common: List[TreeEdge],
        start_rest: List[TreeEdge],
        target_rest: List[TreeEdge],
        m: List[Split],
    ) -> None:
        if geo_logger.disabled:
            return
        geo_logger.section("Geodesic")
        geo_logger.table(
            [[format_split(e), str(e.attribute)] for e in common],
            headers=["Common edge", "Attribute difference"],
            title="Common edges",
        )
        geo_logger.table(
            [
                [format_edge_ids([f_edge]), format_edge_ids(start_rest[i] for i in s)]
                for f_edge, s in zip(target_rest, m)
            ],
            headers=["Target edge", "Crossed start edges"],
            title="Crossing sets",
        )


def compute_geodesic(
    start_edges: Sequence[TreeEdge],
    target_edges: Sequence[TreeEdge],
    config: Optional[GeodesicConfig] = None,
    leaf_names: Optional[LeafNames] = None,
) -> Geodesic:
    return GeodesicSolver(config, leaf_names).geodesic(start_edges, target_edges)


def geodesic_distance(
    start_edges: Sequence[TreeEdge],
    target_edges: Sequence[TreeEdge],
    config: Optional[GeodesicConfig] = None,
    leaf_names: Optional[LeafNames] = None,
) -> float:
    return GeodesicSolver(config, leaf_names).distance(start_edges, target_edges)
