"""
I/O utility functions: turning geospatial tables into Parcel objects.
"""

import warnings
from pathlib import Path
from typing import Dict, List, Optional, Union

import geopandas as gpd
import pandas as pd
from loguru import logger

from cadastre_graph.models.parcel import Location, Parcel


# Parcel attribute -> column name in the source table
DEFAULT_COLUMNS: Dict[str, str] = {
    "id": "id",
    "length": "length",
    "area": "area",
    "owner_id": "owner",
    "district": "district",
    "municipality": "municipality",
    "county": "county",
}


def _location_value(row: pd.Series, column: str) -> str:
    value = row.get(column)
    if value is None or pd.isna(value):
        return Location.UNAVAILABLE
    return str(value)


def parcels_from_geodataframe(
    gdf: gpd.GeoDataFrame,
    columns: Optional[Dict[str, str]] = None,
) -> List[Parcel]:
    """
    Convert a GeoDataFrame into a list of Parcels.

    Rows with a missing or non-positive id, length, area or owner are
    skipped. Missing location values become the NA sentinel.

    Args:
        gdf: GeoDataFrame with one parcel per row
        columns: Column mapping overriding DEFAULT_COLUMNS

    Returns:
        List of Parcels in row order
    """
    mapping = {**DEFAULT_COLUMNS, **(columns or {})}
    missing = [mapping[k] for k in ("id", "length", "area", "owner_id") if mapping[k] not in gdf.columns]
    if missing:
        raise KeyError(f"Missing required columns: {missing}")

    parcels = []
    skipped = 0

    for _, row in gdf.iterrows():
        try:
            parcel_id = int(row[mapping["id"]])
            length = float(row[mapping["length"]])
            area = float(row[mapping["area"]])
            owner_id = int(row[mapping["owner_id"]])
        except (TypeError, ValueError):
            skipped += 1
            continue

        # NaN fails every comparison, so missing measures are skipped too
        if not (parcel_id > 0 and length > 0 and area > 0 and owner_id > 0):
            skipped += 1
            continue

        geometry = row[gdf.geometry.name]
        if geometry is not None and geometry.is_empty:
            geometry = None

        parcels.append(Parcel(
            id=parcel_id,
            length=length,
            area=area,
            owner_id=owner_id,
            shape=geometry,
            location=Location(
                district=_location_value(row, mapping["district"]),
                municipality=_location_value(row, mapping["municipality"]),
                county=_location_value(row, mapping["county"]),
            ),
        ))

    if skipped:
        logger.warning(f"Skipped {skipped:,} invalid records")
    logger.info(f"Loaded {len(parcels):,} parcels")

    return parcels


def load_parcels(
    filepath: Union[str, Path],
    layer: Optional[str] = None,
    columns: Optional[Dict[str, str]] = None,
    limit: Optional[int] = None,
) -> List[Parcel]:
    """
    Load parcels from a GeoPackage (or any file geopandas can read).

    Args:
        filepath: Path to the file
        layer: Layer name (optional if single layer)
        columns: Column mapping overriding DEFAULT_COLUMNS
        limit: Keep only the first N rows

    Returns:
        List of Parcels
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    logger.info(f"Loading {filepath.name}...")

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        kwargs = {}
        if layer:
            kwargs["layer"] = layer
        gdf = gpd.read_file(filepath, **kwargs)

    if limit and limit < len(gdf):
        gdf = gdf.head(limit)
        logger.info(f"  Limited to {len(gdf):,} rows")

    return parcels_from_geodataframe(gdf, columns)
