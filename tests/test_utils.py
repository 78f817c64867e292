"""Tests for the import, spatial index and logging helpers."""

import geopandas as gpd
import pytest
from shapely.geometry import Polygon, box

from cadastre_graph.models.parcel import Location
from cadastre_graph.services.parcel_graph import scan_adjacent_pairs
from cadastre_graph.utils.io import load_parcels, parcels_from_geodataframe
from cadastre_graph.utils.logging import ProgressLogger
from cadastre_graph.utils.spatial import candidate_pairs
from tests.conftest import square


class TestParcelsFromGeoDataFrame:
    @pytest.fixture
    def gdf(self) -> gpd.GeoDataFrame:
        return gpd.GeoDataFrame(
            {
                "id": [1, 2, 3, 4, 5],
                "length": [4.0, 4.0, -1.0, 4.0, 4.0],
                "area": [1.0, 2.0, 1.0, None, 3.0],
                "owner": [10, 20, 30, 40, 50],
                "district": ["Sé", None, "Sé", "Sé", "Sé"],
                "municipality": ["Funchal"] * 5,
            },
            geometry=[square(0, 0), square(1, 0), square(2, 0), square(3, 0), Polygon()],
        )

    def test_invalid_rows_skipped(self, gdf) -> None:
        parcels = parcels_from_geodataframe(gdf)
        assert [p.id for p in parcels] == [1, 2, 5]

    def test_fields(self, gdf) -> None:
        first = parcels_from_geodataframe(gdf)[0]
        assert first.owner_id == 10
        assert first.area == pytest.approx(1.0)
        assert first.shape.equals(square(0, 0))
        assert first.location == Location("Sé", "Funchal", "NA")

    def test_missing_location_becomes_sentinel(self, gdf) -> None:
        second = parcels_from_geodataframe(gdf)[1]
        assert second.location.district == Location.UNAVAILABLE
        assert not second.location.is_available("district")

    def test_empty_geometry_dropped(self, gdf) -> None:
        last = parcels_from_geodataframe(gdf)[-1]
        assert last.shape is None

    def test_column_mapping(self, gdf) -> None:
        renamed = gdf.rename(columns={"owner": "titular"})
        parcels = parcels_from_geodataframe(renamed, columns={"owner_id": "titular"})
        assert [p.owner_id for p in parcels] == [10, 20, 50]

    def test_missing_required_column(self, gdf) -> None:
        with pytest.raises(KeyError, match="area"):
            parcels_from_geodataframe(gdf.drop(columns=["area"]))


def test_load_parcels_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_parcels(tmp_path / "missing.gpkg")


class TestCandidatePairs:
    def test_pairs_sorted_and_filtered(self) -> None:
        shapes = [square(0, 0), None, square(1, 0), Polygon(), square(5, 5), square(0, 1)]
        pairs = candidate_pairs(shapes)
        assert pairs.tolist() == [[0, 2], [0, 5], [2, 5]]

    def test_nested_shapes_are_candidates(self) -> None:
        pairs = candidate_pairs([box(0, 0, 4, 4), box(1, 1, 2, 2)])
        assert pairs.tolist() == [[0, 1]]

    def test_fewer_than_two_shapes(self) -> None:
        assert candidate_pairs([square(0, 0), None]).shape == (0, 2)


class RecordingLogger:
    def __init__(self):
        self.messages = []

    def debug(self, message):
        self.messages.append(message)


def test_progress_logger_intervals() -> None:
    log = RecordingLogger()
    progress = ProgressLogger(10, "Scan", unit="pairs", matched_label="adjacent",
                              log_every=50, logger_instance=log)
    for i in range(10):
        progress.update(matched=int(i % 3 == 0))
    progress.finish()

    assert log.messages == [
        "Scan: 10% (1/10 pairs, 1 adjacent)",
        "Scan: 50% (5/10 pairs, 2 adjacent)",
        "Scan: 100% (10/10 pairs, 4 adjacent)",
        "Scan: 10 pairs checked, 4 adjacent",
    ]


def test_progress_logger_zero_total() -> None:
    log = RecordingLogger()
    progress = ProgressLogger(0, "Scan", logger_instance=log)
    progress.finish()
    assert log.messages == ["Scan: 0 items checked, 0 matched"]


def test_adjacency_scan_reports_pairs(monkeypatch, row_of_three) -> None:
    log = RecordingLogger()
    monkeypatch.setattr("cadastre_graph.utils.logging.logger", log)
    list(scan_adjacent_pairs(row_of_three, use_spatial_index=False))
    assert log.messages[-1] == "  Adjacency scan: 3 pairs checked, 2 adjacent"
