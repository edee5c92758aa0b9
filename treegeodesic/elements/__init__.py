"""Split algebra, edge attributes and annotated tree edges."""

from treegeodesic.elements.split import Split
from treegeodesic.elements.edge_attribute import EdgeAttribute
from treegeodesic.elements.tree_edge import TreeEdge
from treegeodesic.elements.edge_list import (
    clone_edges,
    edges_from_weighted_splits,
    format_edges_verbose,
    get_common_edges,
    make_encoding,
    shared_encoding,
    split_off_common_edges,
    validate_edge_set,
)

__all__ = [
    "Split",
    "EdgeAttribute",
    "TreeEdge",
    "clone_edges",
    "edges_from_weighted_splits",
    "format_edges_verbose",
    "get_common_edges",
    "make_encoding",
    "shared_encoding",
    "split_off_common_edges",
    "validate_edge_set",
]
