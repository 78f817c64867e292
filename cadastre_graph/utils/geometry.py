"""
Geometry checks run before a graph build.
"""

from typing import Iterable, List, Tuple

import shapely


def find_invalid_shapes(parcels: Iterable) -> List[Tuple[int, str]]:
    """
    Find parcels whose shape is not a valid geometry.

    Parcels without a shape or with an empty shape are skipped; they can
    never be adjacent and do not reach the geometry engine.

    Args:
        parcels: Parcels to check

    Returns:
        List of (parcel_id, validity reason) tuples, in input order
    """
    invalid = []
    for parcel in parcels:
        if not has_usable_shape(parcel):
            continue
        if not parcel.shape.is_valid:
            invalid.append((parcel.id, shapely.is_valid_reason(parcel.shape)))
    return invalid


def has_usable_shape(parcel) -> bool:
    """Whether a parcel's shape can take part in adjacency tests."""
    return parcel.shape is not None and not parcel.shape.is_empty
