"""Geodesic distances between phylogenetic trees in BHV tree space."""

from treegeodesic.elements import EdgeAttribute, Split, TreeEdge, edges_from_weighted_splits
from treegeodesic.exceptions import (
    CrossingPosetError,
    DimensionMismatchError,
    GeodesicError,
    InvalidEdgeSetError,
    InvalidParameterError,
    LeafSetMismatchError,
)
from treegeodesic.geodesic import (
    Geodesic,
    GeodesicConfig,
    GeodesicSolver,
    Ratio,
    RatioSequence,
    compute_geodesic,
    geodesic_distance,
    geodesic_distance_matrix,
)

__all__ = [
    "EdgeAttribute",
    "Split",
    "TreeEdge",
    "edges_from_weighted_splits",
    "CrossingPosetError",
    "DimensionMismatchError",
    "GeodesicError",
    "InvalidEdgeSetError",
    "InvalidParameterError",
    "LeafSetMismatchError",
    "Geodesic",
    "GeodesicConfig",
    "GeodesicSolver",
    "Ratio",
    "RatioSequence",
    "compute_geodesic",
    "geodesic_distance",
    "geodesic_distance_matrix",
]
