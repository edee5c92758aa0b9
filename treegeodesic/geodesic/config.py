from dataclasses import dataclass
from typing import Optional

from treegeodesic.elements.edge_attribute import EdgeAttribute
from treegeodesic.exceptions import InvalidParameterError


@dataclass
class GeodesicConfig:
    """Configuration for the geodesic solver."""

    validate_input: bool = True
    """Check that each tree's edges are distinct and pairwise compatible."""

    split_components: bool = True
    """Search every connected component of the crossing graph on its own and
    interleave the per-component sequences by ratio value."""

    max_candidates: Optional[int] = None
    """Stop a component's search after this many complete candidate sequences.
    A truncated search marks the result as not proven optimal."""

    tolerance: float = EdgeAttribute.TOLERANCE
    """Slack used when comparing candidate distances."""

    logger_name: str = "treegeodesic.geodesic.solver"

    def __post_init__(self) -> None:
        if self.tolerance < 0:
            raise InvalidParameterError(
                f"tolerance must be non-negative, got {self.tolerance}"
            )
        if self.max_candidates is not None and self.max_candidates < 1:
            raise InvalidParameterError(
                f"max_candidates must be at least 1, got {self.max_candidates}"
            )
