import logging
from typing import Callable, Dict, List, Sequence, Tuple

import pytest

from treegeodesic.elements.edge_attribute import EdgeAttribute
from treegeodesic.elements.split import Split
from treegeodesic.elements.tree_edge import TreeEdge
from treegeodesic.logger import geo_logger


def pytest_configure(config):
    """Set up test environment before tests run."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def encoding_for(num_leaves: int) -> Dict[str, int]:
    return {f"T{i}": i for i in range(num_leaves)}


@pytest.fixture
def make_edges() -> Callable[..., List[TreeEdge]]:
    """Build a TreeEdge list from (indices, attribute vector) pairs."""

    def _make(
        specs: Sequence[Tuple[Sequence[int], Sequence[float]]],
        num_leaves: int = 4,
        first_id: int = 0,
    ) -> List[TreeEdge]:
        encoding = encoding_for(num_leaves)
        return [
            TreeEdge(Split(indices, encoding), EdgeAttribute(vector), first_id + k)
            for k, (indices, vector) in enumerate(specs)
        ]

    return _make


@pytest.fixture
def trace_logger():
    """Enable the geodesic trace for one test and reset it afterwards."""
    geo_logger.clear()
    geo_logger.disabled = False
    yield geo_logger
    geo_logger.disabled = True
    geo_logger.clear()
