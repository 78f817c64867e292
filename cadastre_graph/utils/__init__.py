"""
Utility functions for cadastre-graph.
"""

from .geometry import find_invalid_shapes, has_usable_shape

from .spatial import build_spatial_index, candidate_pairs

from .io import DEFAULT_COLUMNS, parcels_from_geodataframe, load_parcels

from .logging import setup_logger, log_graph_summary, ProgressLogger

__all__ = [
    # Geometry
    "find_invalid_shapes",
    "has_usable_shape",
    # Spatial
    "build_spatial_index",
    "candidate_pairs",
    # IO
    "DEFAULT_COLUMNS",
    "parcels_from_geodataframe",
    "load_parcels",
    # Logging
    "setup_logger",
    "log_graph_summary",
    "ProgressLogger",
]
