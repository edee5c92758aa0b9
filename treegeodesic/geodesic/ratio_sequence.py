"""
Ordered sequences of legs describing one combinatorial type of path between
two trees.
"""

import math
from typing import Any, Dict, Iterable, Iterator, List, Optional

from treegeodesic.elements.tree_edge import TreeEdge
from treegeodesic.geodesic.ratio import Ratio


class RatioSequence:
    """
    Ordered list of Ratio legs with a cached total length.

    A sequence is a valid geodesic representative only when its ratio values are
    non-descending; get_non_descending_with_min_distance() turns any candidate
    into that form.
    """

    __slots__ = ("_ratios", "_distance")

    def __init__(self, ratios: Optional[Iterable[Ratio]] = None):
        self._ratios: List[Ratio] = list(ratios) if ratios is not None else []
        self._distance: Optional[float] = None

    # Sequence protocol ------------------------------------------------------

    def __len__(self) -> int:
        return len(self._ratios)

    def __iter__(self) -> Iterator[Ratio]:
        return iter(self._ratios)

    def __getitem__(self, index: int) -> Ratio:
        return self._ratios[index]

    def __bool__(self) -> bool:
        return bool(self._ratios)

    def append(self, ratio: Ratio) -> None:
        self._ratios.append(ratio)
        self._distance = None

    add = append

    def remove(self, ratio: Ratio) -> None:
        """Remove `ratio`, preferring the very object over an equal one."""
        for i, candidate in enumerate(self._ratios):
            if candidate is ratio:
                del self._ratios[i]
                self._distance = None
                return
        self._ratios.remove(ratio)
        self._distance = None

    def pop(self, index: int = -1) -> Ratio:
        self._distance = None
        return self._ratios.pop(index)

    def copy(self) -> "RatioSequence":
        """Independent copy; ratios and their edges are cloned."""
        return RatioSequence(ratio.copy() for ratio in self._ratios)

    # Geometry ---------------------------------------------------------------

    @property
    def distance(self) -> float:
        """sqrt of the sum of squared leg lengths."""
        if self._distance is None:
            self._distance = math.sqrt(sum(r.length**2 for r in self._ratios))
        return self._distance

    def get_distance(self) -> float:
        return self.distance

    def ratio_values(self) -> List[float]:
        return [r.ratio for r in self._ratios]

    def is_non_descending(self) -> bool:
        values = self.ratio_values()
        return all(a <= b for a, b in zip(values, values[1:]))

    def get_non_descending_with_min_distance(self) -> "RatioSequence":
        """
        Merge adjacent legs whose ratios descend until the sequence is non-descending.

        Pool-adjacent-violators: each leg is pushed on a stack and merged with the
        stack top while the top has the larger ratio. At most len(self) - 1 merges
        happen. The original sequence is left untouched.
        """
        stack: List[Ratio] = []
        for ratio in self._ratios:
            current = ratio
            while stack and stack[-1].ratio > current.ratio:
                current = Ratio.combine(stack.pop(), current)
            stack.append(current)
        return RatioSequence(stack)

    normalized = get_non_descending_with_min_distance

    @staticmethod
    def interleave(first: "RatioSequence", second: "RatioSequence") -> "RatioSequence":
        """Stable merge of two non-descending sequences by ratio value."""
        merged: List[Ratio] = []
        i = j = 0
        while i < len(first) and j < len(second):
            if first[i].ratio <= second[j].ratio:
                merged.append(first[i])
                i += 1
            else:
                merged.append(second[j])
                j += 1
        merged.extend(first._ratios[i:])
        merged.extend(second._ratios[j:])
        return RatioSequence(merged)

    def reverse(self) -> "RatioSequence":
        """The sequence travelled from the target tree back to the start tree."""
        return RatioSequence(ratio.reverse() for ratio in reversed(self._ratios))

    def get_e_edges(self) -> List[TreeEdge]:
        return [edge for ratio in self._ratios for edge in ratio.e_edges]

    def get_f_edges(self) -> List[TreeEdge]:
        return [edge for ratio in self._ratios for edge in ratio.f_edges]

    # Display ----------------------------------------------------------------

    def to_string_comb_type(self) -> str:
        return "; ".join(ratio.to_string_comb_type() for ratio in self._ratios)

    def to_string_value(self) -> str:
        return "[" + ", ".join(f"{value:.6g}" for value in self.ratio_values()) + "]"

    def to_string_comb_type_and_value(self) -> str:
        return f"{self.to_string_comb_type()}\n{self.to_string_value()}"

    def to_list(self) -> List[Dict[str, Any]]:
        return [ratio.to_dict() for ratio in self._ratios]

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, RatioSequence):
            return NotImplemented
        return self._ratios == other._ratios

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self.to_string_comb_type_and_value()

    def __repr__(self) -> str:
        return f"RatioSequence({self._ratios!r})"
