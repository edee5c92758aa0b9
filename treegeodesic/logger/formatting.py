"""Text formatting utilities for logging."""

from typing import Any, Iterable, Set


def format_set(s: Set[Any]) -> str:
    """Format set for consistent display."""
    if not s:
        return "∅"
    return "{" + ", ".join(str(x) for x in sorted(s)) + "}"


def format_split(split: Any) -> str:
    """Format a Split (or TreeEdge) as '(a, b, ...)', using taxon names when known."""
    reverse_encoding = getattr(split, "reverse_encoding", None)
    if reverse_encoding is None and hasattr(split, "split"):
        reverse_encoding = split.split.reverse_encoding
    indices: Iterable[int] = getattr(split, "indices", ())
    if reverse_encoding:
        names = sorted(reverse_encoding.get(i, str(i)) for i in indices)
    else:
        names = [str(i) for i in indices]
    return "(" + ", ".join(names) + ")"


def format_edge_ids(edges: Iterable[Any]) -> str:
    """Format edges by original id, falling back to their split where no id is set."""
    labels = [
        str(edge.original_id) if edge.original_id >= 0 else format_split(edge)
        for edge in edges
    ]
    return "[" + ", ".join(labels) + "]"
