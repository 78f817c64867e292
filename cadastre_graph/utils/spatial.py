"""
Spatial index helpers for candidate pair filtering.
"""

from typing import Optional, Sequence

import numpy as np
from shapely.geometry.base import BaseGeometry
from shapely.strtree import STRtree


def _as_geometry_array(shapes: Sequence[BaseGeometry]) -> np.ndarray:
    geoms = np.empty(len(shapes), dtype=object)
    geoms[:] = list(shapes)
    return geoms


def build_spatial_index(shapes: Sequence[BaseGeometry]) -> STRtree:
    """
    Build an STRtree spatial index over shapes.

    Args:
        shapes: Geometries to index

    Returns:
        STRtree spatial index
    """
    return STRtree(_as_geometry_array(shapes))


def candidate_pairs(shapes: Sequence[Optional[BaseGeometry]]) -> np.ndarray:
    """
    Find index pairs (i, j), i < j, whose shapes intersect.

    Touching shapes intersect, so every physically adjacent pair is a
    candidate. Missing or empty shapes never produce a candidate.

    Args:
        shapes: Shapes in input order (None allowed)

    Returns:
        Integer array of shape (n, 2), sorted by i then j
    """
    indices = np.array(
        [i for i, s in enumerate(shapes) if s is not None and not s.is_empty],
        dtype=np.intp,
    )
    if len(indices) < 2:
        return np.empty((0, 2), dtype=np.intp)

    geoms = _as_geometry_array([shapes[i] for i in indices])
    tree = build_spatial_index(geoms)

    # Bulk query returns INDICES into geoms (Shapely 2.0+)
    left, right = tree.query(geoms, predicate="intersects")
    left = indices[left]
    right = indices[right]

    mask = left < right
    pairs = np.column_stack([left[mask], right[mask]])
    order = np.lexsort((pairs[:, 1], pairs[:, 0]))
    return pairs[order]
