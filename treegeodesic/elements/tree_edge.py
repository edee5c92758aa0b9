from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from treegeodesic.elements.edge_attribute import EdgeAttribute
from treegeodesic.elements.split import Split


class TreeEdge:
    """
    One internal branch of a tree: a split plus its attribute and provenance.

    Attributes:
        split: The bipartition induced by the edge
        attribute: Branch length(s) of the edge
        original_edge: The split this edge was derived from (provenance)
        original_id: Identifier of the edge in its source tree, -1 if unassigned.
            Edges derived from an original edge keep its id.
    """

    __slots__ = ("split", "attribute", "original_edge", "original_id")

    def __init__(
        self,
        split: Optional[Split] = None,
        attribute: Optional[EdgeAttribute] = None,
        original_id: int = -1,
        original_edge: Optional[Split] = None,
    ):
        self.split: Split = split if split is not None else Split()
        self.attribute: EdgeAttribute = (
            attribute if attribute is not None else EdgeAttribute()
        )
        if original_edge is None:
            original_edge = self.split.copy() if split is not None else Split()
        self.original_edge: Split = original_edge
        self.original_id: int = original_id

    # Split API --------------------------------------------------------------

    @property
    def bitmask(self) -> int:
        return self.split.bitmask

    @property
    def indices(self) -> Tuple[int, ...]:
        return self.split.indices

    @property
    def encoding(self) -> Dict[str, int]:
        return self.split.encoding

    def __iter__(self) -> Iterator[int]:
        return iter(self.split)

    def __len__(self) -> int:
        return len(self.split)

    def is_empty(self) -> bool:
        return self.split.is_empty()

    def contains(self, other: Any) -> bool:
        return self.split.contains(other)

    def properly_contains(self, other: Any) -> bool:
        return self.split.properly_contains(other)

    def disjoint_from(self, other: Any) -> bool:
        return self.split.disjoint_from(other)

    def crosses(self, other: Any) -> bool:
        return self.split.crosses(other)

    def is_compatible_with(self, splits: Iterable[Any]) -> bool:
        return self.split.is_compatible_with(splits)

    def add_one(self, index: int) -> None:
        self.split.add_one(index)

    def remove_one(self, index: int) -> None:
        self.split.remove_one(index)

    def complement(self, num_leaves: int) -> "TreeEdge":
        self.split.complement(num_leaves)
        return self

    # Edge API ---------------------------------------------------------------

    def norm(self) -> float:
        return self.attribute.norm()

    def is_zero(self) -> bool:
        """True if the edge has length exactly zero (no tolerance)."""
        return self.norm() == 0

    def same_bipartition(self, other: Any) -> bool:
        return self.split.bitmask == other.bitmask

    def as_split(self) -> Split:
        """Return a detached copy of the split alone."""
        return self.split.copy()

    def copy(self) -> "TreeEdge":
        return TreeEdge(
            self.split.copy(),
            self.attribute.copy(),
            self.original_id,
            self.original_edge.copy(),
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, TreeEdge):
            return NotImplemented
        if self is other:
            return True
        return self.split == other.split and self.attribute == other.attribute

    def __hash__(self) -> int:
        return hash(self.split.bitmask)

    def __str__(self) -> str:
        return f"{self.attribute} {self.split}"

    def __repr__(self) -> str:
        return (
            f"TreeEdge({self.split.indices}, {self.attribute}, "
            f"original_id={self.original_id})"
        )

    def to_string_verbose(self, leaf_names: List[str]) -> str:
        return (
            f"{self.original_id}\t\t{self.attribute}\t\t"
            f"{self.split.to_string_verbose(leaf_names)}"
        )

    def to_string_reroot(self, leaf_names: List[str], new_root: str) -> str:
        return (
            f"{self.original_id}\t\t{self.attribute}\t\t"
            f"{self.split.to_string_reroot(leaf_names, new_root)}"
        )
