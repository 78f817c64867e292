"""Shared test fixtures and helpers."""

from typing import Optional

import pytest
from shapely.geometry import MultiPolygon, box

from cadastre_graph.models.parcel import Location, Parcel


DEFAULT_LOCATION = Location("Sé", "Funchal", "Ilha da Madeira")


def square(x: float, y: float, size: float = 1.0) -> MultiPolygon:
    """Axis-aligned square as a single-part MultiPolygon."""
    return MultiPolygon([box(x, y, x + size, y + size)])


def make_parcel(
    parcel_id: int,
    owner_id: int,
    shape=None,
    area: Optional[float] = None,
    location: Optional[Location] = DEFAULT_LOCATION,
    length: float = 4.0,
) -> Parcel:
    if area is None:
        area = shape.area if shape is not None else 1.0
    return Parcel(
        id=parcel_id,
        length=length,
        area=area,
        owner_id=owner_id,
        shape=shape,
        location=location,
    )


@pytest.fixture
def row_of_three():
    """Three unit squares in a row, owners 1, 1, 2."""
    return [
        make_parcel(1, 1, square(0, 0)),
        make_parcel(2, 1, square(1, 0)),
        make_parcel(3, 2, square(2, 0)),
    ]


@pytest.fixture
def grid_parcels():
    """3x3 grid of unit squares, owner = column + 1."""
    parcels = []
    parcel_id = 1
    for row in range(3):
        for col in range(3):
            parcels.append(make_parcel(parcel_id, col + 1, square(col, row)))
            parcel_id += 1
    return parcels
