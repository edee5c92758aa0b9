"""Ratio sequences and the geodesic search between two trees."""

from treegeodesic.geodesic.config import GeodesicConfig
from treegeodesic.geodesic.ratio import Ratio
from treegeodesic.geodesic.ratio_sequence import RatioSequence
from treegeodesic.geodesic.crossings import (
    SplitRelationCache,
    crossing_components,
    get_crossings,
    get_min_elements,
)
from treegeodesic.geodesic.solver import (
    Geodesic,
    GeodesicSolver,
    PathSpaceGeodesic,
    compute_geodesic,
    geodesic_distance,
)
from treegeodesic.geodesic.batch import (
    calculate_along_trajectory,
    geodesic_distance_matrix,
)

__all__ = [
    "GeodesicConfig",
    "Ratio",
    "RatioSequence",
    "SplitRelationCache",
    "crossing_components",
    "get_crossings",
    "get_min_elements",
    "Geodesic",
    "GeodesicSolver",
    "PathSpaceGeodesic",
    "compute_geodesic",
    "geodesic_distance",
    "calculate_along_trajectory",
    "geodesic_distance_matrix",
]
