"""Logging package for treegeodesic."""

from treegeodesic.logger.base_logger import AlgorithmLogger
from treegeodesic.logger.table_logger import TableLogger
from treegeodesic.logger.combined_logger import Logger
from treegeodesic.logger.formatting import format_set, format_split, format_edge_ids

# Trace of the geodesic search, disabled unless a caller switches it on
geo_logger = Logger("Geodesic")
geo_logger.disabled = True

__all__ = [
    "AlgorithmLogger",
    "TableLogger",
    "Logger",
    "geo_logger",
    "format_set",
    "format_split",
    "format_edge_ids",
]
