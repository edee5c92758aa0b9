"""
Custom exceptions for the geodesic distance computation.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any, NoReturn

if TYPE_CHECKING:
    from treegeodesic.elements.split import Split


class GeodesicError(Exception):
    """Base exception for tree-space geodesic errors."""

    pass


class LeafSetMismatchError(GeodesicError):
    """Raised when two edge sets are not expressed over the same leaf universe."""

    pass


class DimensionMismatchError(GeodesicError, ValueError):
    """Raised when attribute arithmetic mixes vectors of different lengths."""

    @staticmethod
    def raise_for(first: Any, second: Any) -> NoReturn:
        """
        Raises a DimensionMismatchError describing the two offending attributes.

        Args:
            first: The left operand
            second: The right operand

        Raises:
            DimensionMismatchError: Always
        """
        raise DimensionMismatchError(
            f"Vectors have different lengths: {first} ({first.size()}) "
            f"and {second} ({second.size()})"
        )


class InvalidParameterError(GeodesicError, ValueError):
    """Raised when an argument is rejected before any computation happens."""

    pass


class InvalidEdgeSetError(GeodesicError):
    """Raised when the edges of one tree do not form a valid split system."""

    @staticmethod
    def raise_crossing(first: Split, second: Split) -> NoReturn:
        raise InvalidEdgeSetError(
            f"Edges {first} and {second} of the same tree cross each other; "
            f"the edge list is not a valid tree."
        )


class CrossingPosetError(GeodesicError):
    """Raised when the crossing poset has unresolved splits but no minimal element."""

    pass
