"""Geodesic distances over collections of trees."""

import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from itertools import pairwise
from typing import List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray
from tqdm import tqdm

from treegeodesic.elements.edge_list import LeafNames
from treegeodesic.elements.tree_edge import TreeEdge
from treegeodesic.exceptions import GeodesicError, InvalidParameterError
from treegeodesic.geodesic.config import GeodesicConfig
from treegeodesic.geodesic.crossings import SplitRelationCache
from treegeodesic.geodesic.solver import GeodesicSolver

logger = logging.getLogger(__name__)

_ON_ERROR_CHOICES = ("raise", "nan")


def _pair_distance(
    i: int,
    j: int,
    start_edges: Sequence[TreeEdge],
    target_edges: Sequence[TreeEdge],
    config: Optional[GeodesicConfig],
    leaf_names: Optional[LeafNames],
) -> Tuple[int, int, float]:
    return i, j, GeodesicSolver(config, leaf_names).distance(start_edges, target_edges)


def _handle_failure(
    pair: Tuple[int, int], error: GeodesicError, on_error: str
) -> float:
    if on_error == "raise":
        raise error
    logger.error(f"Geodesic for tree pair {pair} failed: {error}")
    return float("nan")


def geodesic_distance_matrix(
    edge_sets: Sequence[Sequence[TreeEdge]],
    config: Optional[GeodesicConfig] = None,
    leaf_names: Optional[LeafNames] = None,
    on_error: str = "raise",
    show_progress: bool = False,
    n_jobs: int = 1,
) -> NDArray[np.float64]:
    """
    Symmetric matrix of geodesic distances between every pair of edge sets.

    Each pair is computed independently. With on_error="nan" a failing pair is
    logged and stored as NaN without affecting the other pairs.

    Args:
        edge_sets: One edge list per tree
        config: Solver configuration shared by all pairs
        leaf_names: Optional leaf names every tree must use
        on_error: "raise" or "nan"
        show_progress: Display a tqdm progress bar
        n_jobs: Number of worker processes; 1 computes in this process and
            shares one crossing cache across pairs

    Returns:
        (n, n) float array with a zero diagonal
    """
    if on_error not in _ON_ERROR_CHOICES:
        raise InvalidParameterError(
            f"on_error must be one of {_ON_ERROR_CHOICES}, got {on_error!r}"
        )
    if n_jobs < 1:
        raise InvalidParameterError(f"n_jobs must be at least 1, got {n_jobs}")

    n = len(edge_sets)
    matrix: NDArray[np.float64] = np.zeros((n, n), dtype=float)
    pairs = [(i, j) for i in range(n) for j in range(i)]

    if n_jobs == 1:
        solver = GeodesicSolver(config, leaf_names, cache=SplitRelationCache())
        for i, j in tqdm(pairs, desc="Geodesic distances", disable=not show_progress):
            try:
                value = solver.distance(edge_sets[i], edge_sets[j])
            except GeodesicError as e:
                value = _handle_failure((i, j), e, on_error)
            matrix[i, j] = matrix[j, i] = value
        return matrix

    with ProcessPoolExecutor(max_workers=n_jobs) as executor:
        future_to_pair = {
            executor.submit(
                _pair_distance, i, j, edge_sets[i], edge_sets[j], config, leaf_names
            ): (i, j)
            for i, j in pairs
        }
        for future in tqdm(
            as_completed(future_to_pair),
            total=len(future_to_pair),
            desc="Geodesic distances",
            disable=not show_progress,
        ):
            i, j = future_to_pair[future]
            try:
                _, _, value = future.result()
            except GeodesicError as e:
                value = _handle_failure((i, j), e, on_error)
            matrix[i, j] = matrix[j, i] = value
    return matrix


def calculate_along_trajectory(
    edge_sets: Sequence[Sequence[TreeEdge]],
    config: Optional[GeodesicConfig] = None,
    leaf_names: Optional[LeafNames] = None,
) -> List[float]:
    """Geodesic distances between consecutive edge sets of a trajectory."""
    solver = GeodesicSolver(config, leaf_names, cache=SplitRelationCache())
    return [solver.distance(first, second) for first, second in pairwise(edge_sets)]
