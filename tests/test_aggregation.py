"""Tests for location filtering and average-area statistics."""

import pytest

from cadastre_graph.errors import EmptyLocationError, RejectedInputError
from cadastre_graph.models.parcel import Location
from cadastre_graph.services.aggregation import filter_by_location
from cadastre_graph.services.owner_graph import build_owner_graph
from cadastre_graph.services.parcel_graph import build_parcel_graph
from tests.conftest import make_parcel, square


FUNCHAL = Location("Sé", "Funchal", "Ilha da Madeira")
SANTA_LUZIA = Location("Santa Luzia", "Funchal", "Ilha da Madeira")
CALHETA = Location("Calheta", "Calheta", "Ilha da Madeira")


@pytest.fixture
def mixed_locations():
    return [
        make_parcel(1, 1, square(0, 0), location=FUNCHAL),
        make_parcel(2, 1, square(1, 0), location=SANTA_LUZIA),
        make_parcel(3, 1, square(2, 0), location=SANTA_LUZIA),
        make_parcel(4, 2, square(0, 5), area=3.0, location=CALHETA),
        make_parcel(5, 3, None, area=7.0, location=None),
    ]


class TestFilterByLocation:
    def test_single_level(self, mixed_locations) -> None:
        ids = [p.id for p in filter_by_location(mixed_locations, municipality="Funchal")]
        assert ids == [1, 2, 3]

    def test_levels_combine(self, mixed_locations) -> None:
        ids = [p.id for p in filter_by_location(mixed_locations, district="Santa Luzia", county="Ilha da Madeira")]
        assert ids == [2, 3]

    def test_case_sensitive(self, mixed_locations) -> None:
        assert filter_by_location(mixed_locations, municipality="funchal") == []

    def test_parcel_without_location_never_matches(self, mixed_locations) -> None:
        ids = [p.id for p in filter_by_location(mixed_locations, county="Ilha da Madeira")]
        assert 5 not in ids

    def test_unavailable_sentinel_matches_exactly(self) -> None:
        parcel = make_parcel(1, 1, square(0, 0), location=Location("NA", "Funchal", "NA"))
        assert filter_by_location([parcel], district="NA") == [parcel]


class TestAverageArea:
    def test_owner_merge_row_of_three(self, row_of_three) -> None:
        graph = build_owner_graph(row_of_three)
        # owner 1: 1 + 1 merged, owner 2: 1
        assert graph.average_area(district="Sé") == pytest.approx(1.5)

    def test_plain_mean_row_of_three(self, row_of_three) -> None:
        graph = build_parcel_graph(row_of_three)
        assert graph.average_area(municipality="Funchal") == pytest.approx(1.0)

    def test_merge_is_single_hop(self, mixed_locations) -> None:
        graph = build_owner_graph(mixed_locations)
        # Parcel 1 absorbs its direct neighbour 2 (outside the filter) but
        # not parcel 3, which is two hops away.
        assert graph.average_area(district="Sé") == pytest.approx(2.0)

    def test_owner_mean_across_owners(self, mixed_locations) -> None:
        graph = build_owner_graph(mixed_locations)
        # owner 1: 3 unit squares, owner 2: area 3
        assert graph.average_area(county="Ilha da Madeira") == pytest.approx(3.0)

    def test_idempotent(self, mixed_locations) -> None:
        graph = build_owner_graph(mixed_locations)
        first = graph.average_area(municipality="Funchal")
        second = graph.average_area(municipality="Funchal")
        assert first == second
        assert graph.parcel_graph.average_area(municipality="Funchal") == \
            graph.parcel_graph.average_area(municipality="Funchal")

    def test_no_filter_rejected(self, row_of_three) -> None:
        owner_graph = build_owner_graph(row_of_three)
        with pytest.raises(RejectedInputError, match="At least one"):
            owner_graph.average_area()
        with pytest.raises(RejectedInputError):
            owner_graph.parcel_graph.average_area()

    def test_empty_result_names_filter(self, row_of_three) -> None:
        graph = build_owner_graph(row_of_three)
        with pytest.raises(EmptyLocationError, match="X") as exc_info:
            graph.average_area(district="X")
        assert exc_info.value.filters == {"district": "X"}
        assert isinstance(exc_info.value, RejectedInputError)

    def test_empty_result_plain_variant(self, row_of_three) -> None:
        graph = build_parcel_graph(row_of_three)
        with pytest.raises(EmptyLocationError) as exc_info:
            graph.average_area(municipality="Porto", county="Norte")
        assert "municipality=Porto" in str(exc_info.value)
        assert "county=Norte" in str(exc_info.value)
