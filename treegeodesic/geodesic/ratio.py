"""
One leg of a geodesic: edges leaving the start tree paired with edges entering
the target tree.
"""

import math
from typing import Any, Dict, Iterable, List, Optional

from treegeodesic.elements.tree_edge import TreeEdge
from treegeodesic.logger.formatting import format_edge_ids


def _combined_norm(edges: Iterable[TreeEdge]) -> float:
    return math.sqrt(sum(edge.norm() ** 2 for edge in edges))


class Ratio:
    """
    A leg (A, B) of a candidate geodesic.

    Attributes:
        e_edges: Edges removed from the start tree along this leg (A)
        f_edges: Edges added from the target tree along this leg (B)
    """

    __slots__ = ("e_edges", "f_edges")

    def __init__(
        self,
        e_edges: Optional[Iterable[TreeEdge]] = None,
        f_edges: Optional[Iterable[TreeEdge]] = None,
    ):
        self.e_edges: List[TreeEdge] = list(e_edges) if e_edges is not None else []
        self.f_edges: List[TreeEdge] = list(f_edges) if f_edges is not None else []

    @property
    def e_length(self) -> float:
        """Norm of the combined attribute vector of the removed edges."""
        return _combined_norm(self.e_edges)

    @property
    def f_length(self) -> float:
        """Norm of the combined attribute vector of the added edges."""
        return _combined_norm(self.f_edges)

    @property
    def ratio(self) -> float:
        """
        e_length / f_length.

        A leg without added edges has ratio +inf, a leg without removed edges has
        ratio 0. A zero f_length gives +inf unless e_length is zero as well.
        """
        if not self.f_edges:
            return math.inf if self.e_edges else 0.0
        if not self.e_edges:
            return 0.0
        e_length, f_length = self.e_length, self.f_length
        if f_length == 0:
            return math.inf if e_length > 0 else 0.0
        return e_length / f_length

    @property
    def length(self) -> float:
        """Length contribution of the leg: sqrt(e_length^2 + f_length^2)."""
        return math.hypot(self.e_length, self.f_length)

    # names used by geodesic reports
    @property
    def removed_edges(self) -> List[TreeEdge]:
        return self.e_edges

    @property
    def added_edges(self) -> List[TreeEdge]:
        return self.f_edges

    def add_e_edge(self, edge: TreeEdge) -> None:
        self.e_edges.append(edge)

    def add_f_edge(self, edge: TreeEdge) -> None:
        self.f_edges.append(edge)

    @staticmethod
    def combine(first: "Ratio", second: "Ratio") -> "Ratio":
        """Merge two legs into one, keeping the edge order of `first` then `second`."""
        return Ratio(first.e_edges + second.e_edges, first.f_edges + second.f_edges)

    def reverse(self) -> "Ratio":
        """The same leg travelled from the target tree back to the start tree."""
        return Ratio(self.f_edges, self.e_edges)

    def copy(self) -> "Ratio":
        return Ratio(
            [edge.copy() for edge in self.e_edges],
            [edge.copy() for edge in self.f_edges],
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Ratio):
            return NotImplemented
        return self.e_edges == other.e_edges and self.f_edges == other.f_edges

    __hash__ = None  # type: ignore[assignment]

    def to_string_comb_type(self) -> str:
        return f"{format_edge_ids(self.e_edges)} -> {format_edge_ids(self.f_edges)}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "removed_edges": list(self.e_edges),
            "added_edges": list(self.f_edges),
            "ratio_value": self.ratio,
            "leg_length": self.length,
        }

    def __str__(self) -> str:
        return f"{self.to_string_comb_type()} (ratio {self.ratio:.6g})"

    def __repr__(self) -> str:
        return f"Ratio({self.e_edges!r}, {self.f_edges!r})"
