# split.py
import logging
import operator
from typing import Tuple, FrozenSet, Dict, Iterator, Iterable, List, Any, Optional
from functools import total_ordering

from treegeodesic.exceptions import InvalidParameterError

logger = logging.getLogger(__name__)


def _bitmask_to_indices(bitmask: int) -> Tuple[int, ...]:
    indices: List[int] = []
    idx = 0
    while bitmask:
        if bitmask & 1:
            indices.append(idx)
        bitmask >>= 1
        idx += 1
    return tuple(indices)


@total_ordering
class Split:
    __slots__ = ("indices", "encoding", "bitmask", "_cached_reverse_encoding")

    def __init__(
        self,
        indices: Iterable[int] = (),
        encoding: Optional[Dict[str, int]] = None,
    ):
        """
        Split represents one side of a leaf bipartition as a set of leaf indices.
        The other side is implicit: every index of the leaf universe not in the split.

        encoding: dict mapping taxon names (str) to indices (int). All splits that are
        compared with each other are expected to share the same encoding.
        Indices are stored sorted and unique.
        """
        bitmask = 0
        for idx in indices:
            # numpy integers shift in fixed width and lose bits past 63
            idx = operator.index(idx)
            if idx < 0:
                raise InvalidParameterError(f"Leaf index must be non-negative, got {idx}")
            bitmask |= 1 << idx
        self.encoding: Dict[str, int] = encoding if encoding is not None else {}
        self._cached_reverse_encoding: Optional[Dict[int, str]] = None
        self._set_bitmask(bitmask)

    @classmethod
    def from_bitmask(
        cls, bitmask: int, encoding: Optional[Dict[str, int]] = None
    ) -> "Split":
        split = cls((), encoding)
        split._set_bitmask(bitmask)
        return split

    @classmethod
    def from_string(
        cls, s: str, encoding: Optional[Dict[str, int]] = None
    ) -> "Split":
        """
        Build a split from a 0-1 string; position i holds the membership of leaf i.

        Raises:
            InvalidParameterError: If the string contains characters other than 0 and 1
        """
        bitmask = 0
        for i, char in enumerate(s):
            if char == "1":
                bitmask |= 1 << i
            elif char != "0":
                raise InvalidParameterError(
                    f"Error creating split: input string {s!r} should only contain 0s and 1s"
                )
        return cls.from_bitmask(bitmask, encoding)

    @classmethod
    def from_taxa(cls, taxa: Iterable[str], encoding: Dict[str, int]) -> "Split":
        try:
            return cls((encoding[name] for name in taxa), encoding)
        except KeyError as e:
            raise InvalidParameterError(f"Taxon {e.args[0]!r} is not in the encoding") from e

    def _set_bitmask(self, bitmask: int) -> None:
        self.bitmask: int = bitmask
        self.indices: Tuple[int, ...] = _bitmask_to_indices(bitmask)

    def __iter__(self) -> Iterator[int]:
        return iter(self.indices)

    def __len__(self) -> int:
        return len(self.indices)

    def __contains__(self, index: object) -> bool:
        if isinstance(index, int):
            return self.contains_index(index)
        return False

    def __getitem__(self, index: int) -> int:
        return self.indices[index]

    def __lt__(self, other: Any) -> bool:
        if isinstance(other, Split):
            return self.indices < other.indices
        return NotImplemented

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Split):
            return self.bitmask == other.bitmask
        if isinstance(other, tuple):
            return self.indices == tuple(sorted(set(other)))
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.bitmask)

    # ------------------------------------------------------------------------
    # Set algebra. `other` may be anything exposing a `bitmask` (e.g. TreeEdge).
    # ------------------------------------------------------------------------

    def is_empty(self) -> bool:
        return self.bitmask == 0

    def contains(self, other: Any) -> bool:
        """
        Check if this split contains the given split.
        In particular, returns True if the two splits are equal.
        """
        return other.bitmask & ~self.bitmask == 0

    def contains_index(self, index: int) -> bool:
        return bool(self.bitmask >> operator.index(index) & 1)

    def properly_contains(self, other: Any) -> bool:
        return self.contains(other) and self.bitmask != other.bitmask

    def disjoint_from(self, other: Any) -> bool:
        return self.bitmask & other.bitmask == 0

    def crosses(self, other: Any) -> bool:
        """
        Check if this split crosses the given split: the two overlap and neither
        contains the other. A split never crosses itself.
        """
        shared = self.bitmask & other.bitmask
        return shared != 0 and shared != self.bitmask and shared != other.bitmask

    def is_compatible_with(self, splits: Iterable[Any]) -> bool:
        """
        Return True if this split crosses none of the given splits.
        Being equal to one of them counts as compatible.
        """
        return not any(self.crosses(s) for s in splits)

    # ------------------------------------------------------------------------
    # In-place mutation. Callers that need a stable value must copy() first.
    # ------------------------------------------------------------------------

    def add_one(self, index: int) -> None:
        """Move leaf `index` to this side of the bipartition."""
        self._set_bitmask(self.bitmask | 1 << operator.index(index))

    def remove_one(self, index: int) -> None:
        """Move leaf `index` to the other side of the bipartition."""
        self._set_bitmask(self.bitmask & ~(1 << operator.index(index)))

    def complement(self, num_leaves: int) -> "Split":
        """Flip membership of every leaf index in [0, num_leaves). Returns self."""
        self._set_bitmask(self.bitmask ^ ((1 << num_leaves) - 1))
        return self

    def copy(self) -> "Split":
        return Split.from_bitmask(self.bitmask, self.encoding)

    # ------------------------------------------------------------------------
    # Naming
    # ------------------------------------------------------------------------

    @property
    def reverse_encoding(self) -> Dict[int, str]:
        """
        Return a reverse mapping from index to taxon name.
        Caches the result for performance.
        """
        if self._cached_reverse_encoding is None:
            self._cached_reverse_encoding = {v: k for k, v in self.encoding.items()}
        return self._cached_reverse_encoding

    @property
    def taxa(self) -> FrozenSet[str]:
        return frozenset(self.reverse_encoding.get(i, str(i)) for i in self.indices)

    def complementary_indices(self) -> Tuple[int, ...]:
        full_set = set(self.reverse_encoding.keys())
        return tuple(sorted(full_set - set(self.indices)))

    def bipartition(self) -> str:
        """
        Return a string representation of the bipartition (left | right) using taxon names.
        """
        left = sorted(self.reverse_encoding.get(i, str(i)) for i in self.indices)
        right = sorted(self.reverse_encoding[i] for i in self.complementary_indices())
        return f"{', '.join(left)} | {', '.join(right)}"

    def to_string_verbose(self, leaf_names: List[str]) -> str:
        return ",".join(leaf_names[i] for i in self.indices)

    def to_string_reroot(self, leaf_names: List[str], new_root: str) -> str:
        """
        Name the side of the bipartition that does not contain `new_root`.

        Falls back to to_string_verbose() when `new_root` is not a leaf name.
        """
        if new_root not in leaf_names:
            logger.warning(
                f"Specified root {new_root!r} is not a leaf name, not re-rooting"
            )
            return self.to_string_verbose(leaf_names)
        if not self.contains_index(leaf_names.index(new_root)):
            return self.to_string_verbose(leaf_names)
        return ",".join(
            name for i, name in enumerate(leaf_names) if not self.contains_index(i)
        )

    def to_bit_string(self, num_leaves: int) -> str:
        return "".join("1" if self.contains_index(i) else "0" for i in range(num_leaves))

    def __str__(self) -> str:
        if self.encoding:
            taxa_names = sorted(self.reverse_encoding.get(i, str(i)) for i in self.indices)
            return f"({', '.join(taxa_names)})"
        return "{" + ", ".join(str(i) for i in self.indices) + "}"

    def __repr__(self) -> str:
        return f"Split({self.indices})"
