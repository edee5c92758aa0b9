"""
Vector-valued edge attributes (branch lengths) and their arithmetic.

An attribute is either a float vector of length >= 1 or the absent value, which
stands for "no recorded edge". The combinators treat the absent value
differently on purpose:

- difference() passes the present operand through unchanged,
- weighted_pair_average() substitutes a zero vector of matching size,
- product() yields the absent value.
"""

import logging
from typing import Any, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from treegeodesic.exceptions import DimensionMismatchError, InvalidParameterError

logger = logging.getLogger(__name__)

VectorLike = Union[Sequence[float], NDArray[np.float64]]


class EdgeAttribute:
    __slots__ = ("vect",)

    # compares float values up to TOLERANCE (8 decimal places)
    TOLERANCE: float = 1e-8

    def __init__(self, vect: Optional[VectorLike] = None):
        if vect is None:
            self.vect: Optional[NDArray[np.float64]] = None
        else:
            self.vect = np.array(vect, dtype=np.float64).reshape(-1)
            if self.vect.shape[0] == 0:
                raise InvalidParameterError(
                    "Edge attribute vector must have at least one element"
                )

    @classmethod
    def from_string(cls, s: str) -> "EdgeAttribute":
        """
        Parse an attribute from "1.5" (a vector of length 1) or "[1 2 3]".

        Raises:
            InvalidParameterError: If the string does not hold numbers where expected
        """
        text = s.strip()
        try:
            if text.startswith("[") and text.endswith("]"):
                elements = text[1:-1].split()
                if not elements:
                    raise ValueError("empty vector")
                return cls([float(x) for x in elements])
            return cls([float(text)])
        except ValueError as e:
            raise InvalidParameterError(
                f"Error creating edge attribute from {s!r}: input string does not "
                f"have a number where expected or has a bracket problem ({e})"
            ) from e

    @staticmethod
    def zero_attribute(size: int) -> "EdgeAttribute":
        """
        Return an attribute of the given size with all elements set to zero.

        Raises:
            InvalidParameterError: If size < 1
        """
        if size < 1:
            raise InvalidParameterError(f"Invalid attribute size {size}")
        return EdgeAttribute(np.zeros(size, dtype=np.float64))

    # ------------------------------------------------------------------------
    # Basic accessors
    # ------------------------------------------------------------------------

    def is_absent(self) -> bool:
        return self.vect is None

    def size(self) -> int:
        return 0 if self.vect is None else int(self.vect.shape[0])

    def get(self, position: int) -> float:
        if self.vect is None:
            raise IndexError("Absent edge attribute has no elements")
        return float(self.vect[position])

    def __getitem__(self, position: int) -> float:
        return self.get(position)

    def copy(self) -> "EdgeAttribute":
        return EdgeAttribute(None if self.vect is None else self.vect.copy())

    def _check_same_size(self, other: "EdgeAttribute") -> None:
        if self.size() != other.size():
            DimensionMismatchError.raise_for(self, other)

    # ------------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------------

    def norm(self) -> float:
        """Euclidean norm of the vector; 0.0 for the absent attribute."""
        if self.vect is None:
            return 0.0
        return float(np.sqrt(np.dot(self.vect, self.vect)))

    def sum_of_attribute_vector(self) -> float:
        if self.vect is None:
            return 0.0
        return float(self.vect.sum())

    def add(self, other: Optional["EdgeAttribute"]) -> "EdgeAttribute":
        """
        Add `other` to this attribute element-wise, in place.

        An absent `other` is a no-op. An absent self takes over the values of
        `other`. Returns self.
        """
        if other is None or other.vect is None:
            return self
        if self.vect is None:
            self.vect = other.vect.copy()
            return self
        self._check_same_size(other)
        self.vect = self.vect + other.vect
        return self

    def scale_by(self, factor: float) -> "EdgeAttribute":
        """Multiply every element by `factor`, in place. Returns self."""
        if self.vect is not None:
            self.vect = self.vect * factor
        return self

    def ensure_positive(self) -> None:
        """Replace a single-element vector by its absolute value."""
        if self.vect is not None and self.vect.shape[0] == 1:
            self.vect = np.abs(self.vect)

    def ensure_non_negative(self) -> None:
        """Set a single negative element to zero; longer vectors are left alone."""
        if self.vect is not None and self.vect.shape[0] == 1 and self.vect[0] < 0:
            self.vect = np.zeros(1, dtype=np.float64)

    @staticmethod
    def difference(
        a1: Optional["EdgeAttribute"], a2: Optional["EdgeAttribute"]
    ) -> "EdgeAttribute":
        """
        Element-wise a1 - a2.

        If exactly one operand is absent the other one is returned unchanged
        (not negated). Two absent operands give the absent attribute.
        """
        first_absent = a1 is None or a1.vect is None
        second_absent = a2 is None or a2.vect is None
        if first_absent and second_absent:
            logger.warning(
                "Calculating difference between two absent edge attributes; "
                "returning an absent attribute"
            )
            return EdgeAttribute()
        if first_absent:
            return a2.copy()  # type: ignore[union-attr]
        if second_absent:
            return a1.copy()  # type: ignore[union-attr]
        a1._check_same_size(a2)  # type: ignore[union-attr, arg-type]
        return EdgeAttribute(a1.vect - a2.vect)  # type: ignore[union-attr, operator]

    @staticmethod
    def product(
        a1: Optional["EdgeAttribute"], a2: Optional["EdgeAttribute"]
    ) -> "EdgeAttribute":
        """Element-wise product; absent if either operand is absent."""
        if a1 is None or a2 is None or a1.vect is None or a2.vect is None:
            return EdgeAttribute()
        a1._check_same_size(a2)
        return EdgeAttribute(a1.vect * a2.vect)

    @staticmethod
    def weighted_pair_average(
        start: Optional["EdgeAttribute"],
        target: Optional["EdgeAttribute"],
        position: float,
    ) -> "EdgeAttribute":
        """
        Find the point (1 - position) * start + position * target.

        Position should be between 0 (start) and 1 (target); values outside that
        range are reported but still computed. An absent endpoint is treated as
        the zero vector sized to match the other one.
        """
        start_absent = start is None or start.vect is None
        target_absent = target is None or target.vect is None
        if start_absent and target_absent:
            logger.warning(
                "Calculating point between two absent edge attributes; "
                "returning an absent attribute"
            )
            return EdgeAttribute()
        if start_absent:
            start = EdgeAttribute.zero_attribute(target.size())  # type: ignore[union-attr]
        if target_absent:
            target = EdgeAttribute.zero_attribute(start.size())  # type: ignore[union-attr]
        assert start is not None and target is not None
        start._check_same_size(target)
        if position < 0 or position > 1:
            logger.warning(
                f"Invalid parameter: position must be between 0 and 1, got {position}"
            )
        if start == target:
            return start.copy()
        return EdgeAttribute(
            (1 - position) * start.vect + position * target.vect  # type: ignore[operator]
        )

    # ------------------------------------------------------------------------
    # Comparison and display
    # ------------------------------------------------------------------------

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, EdgeAttribute):
            return NotImplemented
        if self is other:
            return True
        if self.vect is None or other.vect is None:
            return self.vect is None and other.vect is None
        if self.vect.shape != other.vect.shape:
            return False
        return bool(np.all(np.abs(self.vect - other.vect) <= self.TOLERANCE))

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        if self.vect is None:
            return ""
        formatted = [
            np.format_float_positional(float(x), precision=10, trim="-")
            for x in self.vect
        ]
        if len(formatted) == 1:
            return formatted[0]
        return "[" + " ".join(formatted) + "]"

    def __repr__(self) -> str:
        return f"EdgeAttribute({self})"
