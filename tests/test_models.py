"""Tests for parcel value objects and listing helpers."""

import pytest

from cadastre_graph.errors import RejectedInputError
from cadastre_graph.models.parcel import (
    Location,
    ParcelSortKey,
    count_by_location,
    sort_parcels,
)
from tests.conftest import make_parcel, square


FUNCHAL = Location("Sé", "Funchal", "Ilha da Madeira")
CALHETA = Location("arco da Calheta", "Calheta", "Ilha da Madeira")
MACHICO = Location("Caniçal", "Machico", "Ilha da Madeira")


def test_location_str() -> None:
    assert str(FUNCHAL) == "Sé, Funchal, Ilha da Madeira"


def test_location_availability() -> None:
    location = Location("NA", "Funchal", "Ilha da Madeira")
    assert not location.is_available("district")
    assert location.is_available("municipality")
    with pytest.raises(RejectedInputError):
        location.is_available("country")


def test_parcel_identity_is_id() -> None:
    first = make_parcel(7, 1, square(0, 0), area=10.0)
    same_id = make_parcel(7, 2, square(5, 5), area=99.0)
    other = make_parcel(8, 1, square(0, 0), area=10.0)

    assert first == same_id
    assert hash(first) == hash(same_id)
    assert first != other
    assert len({first, same_id, other}) == 2


def test_parcel_is_immutable() -> None:
    parcel = make_parcel(1, 1, square(0, 0))
    with pytest.raises(AttributeError):
        parcel.area = 5.0


class TestSortParcels:
    def setup_method(self) -> None:
        self.parcels = [
            make_parcel(3, 2, square(0, 0), area=30.0, location=FUNCHAL, length=1.0),
            make_parcel(1, 3, square(1, 0), area=10.0, location=CALHETA, length=3.0),
            make_parcel(2, 1, square(2, 0), area=20.0, location=MACHICO, length=2.0),
        ]

    @pytest.mark.parametrize("key, expected", [
        (ParcelSortKey.ID, [1, 2, 3]),
        (ParcelSortKey.AREA, [1, 2, 3]),
        (ParcelSortKey.LENGTH, [3, 2, 1]),
        (ParcelSortKey.OWNER, [2, 3, 1]),
        (ParcelSortKey.DISTRICT, [1, 2, 3]),
        (ParcelSortKey.MUNICIPALITY, [1, 3, 2]),
        ("owner", [2, 3, 1]),
    ])
    def test_sort(self, key, expected) -> None:
        assert [p.id for p in sort_parcels(self.parcels, key)] == expected

    def test_input_untouched(self) -> None:
        sort_parcels(self.parcels, ParcelSortKey.ID)
        assert [p.id for p in self.parcels] == [3, 1, 2]

    def test_invalid_key(self) -> None:
        with pytest.raises(RejectedInputError, match="Invalid sort key"):
            sort_parcels(self.parcels, "price")


def test_count_by_location() -> None:
    parcels = [
        make_parcel(1, 1, square(0, 0), location=FUNCHAL),
        make_parcel(2, 1, square(1, 0), location=FUNCHAL),
        make_parcel(3, 2, square(2, 0), location=CALHETA),
        make_parcel(4, 2, square(3, 0), location=None),
    ]
    assert count_by_location(parcels) == {FUNCHAL: 2, CALHETA: 1}
