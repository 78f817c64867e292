"""
Location filtering and average-area statistics.

Two aggregations are offered:
- average_parcel_area: plain mean of parcel areas
- average_owner_area: mean of per-owner totals where each parcel is merged
  with its directly adjacent parcels of the same owner
"""

from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Set

from loguru import logger

from cadastre_graph.errors import EmptyLocationError, RejectedInputError
from cadastre_graph.models.parcel import Parcel
from cadastre_graph.services.adjacency import neighbors


NO_FILTER_ERROR = "At least one location filter (district, municipality or county) must be given"


def _provided_filters(
    district: Optional[str],
    municipality: Optional[str],
    county: Optional[str],
) -> Dict[str, str]:
    provided = {
        level: value
        for level, value in (("district", district), ("municipality", municipality), ("county", county))
        if value is not None
    }
    if not provided:
        logger.warning("Average area requested without a location filter")
        raise RejectedInputError(NO_FILTER_ERROR)
    return provided


def filter_by_location(
    parcels: Sequence[Parcel],
    district: Optional[str] = None,
    municipality: Optional[str] = None,
    county: Optional[str] = None,
) -> List[Parcel]:
    """
    Keep parcels whose location matches every provided level exactly.

    Omitted levels act as wildcards. Comparison is case-sensitive.
    Parcels without a location never match.
    """
    def matches(parcel: Parcel) -> bool:
        location = parcel.location
        if location is None:
            return False
        return (
            (district is None or location.district == district)
            and (municipality is None or location.municipality == municipality)
            and (county is None or location.county == county)
        )

    return [p for p in parcels if matches(p)]


def _filtered(parcels, district, municipality, county) -> List[Parcel]:
    filters = _provided_filters(district, municipality, county)
    filtered = filter_by_location(parcels, district, municipality, county)
    if not filtered:
        logger.warning(f"No parcels match location filter {filters}")
        raise EmptyLocationError(filters)
    logger.debug(f"Location filter {filters} matched {len(filtered):,} parcels")
    return filtered


def average_parcel_area(
    parcels: Sequence[Parcel],
    district: Optional[str] = None,
    municipality: Optional[str] = None,
    county: Optional[str] = None,
) -> float:
    """
    Mean parcel area within a location.

    Raises:
        RejectedInputError: no filter given
        EmptyLocationError: filter matched nothing
    """
    filtered = _filtered(parcels, district, municipality, county)
    return sum(p.area for p in filtered) / len(filtered)


def average_owner_area(
    parcels: Sequence[Parcel],
    adjacency: Mapping[Parcel, FrozenSet[Parcel]],
    district: Optional[str] = None,
    municipality: Optional[str] = None,
    county: Optional[str] = None,
) -> float:
    """
    Mean area per owner within a location, merging adjacent holdings.

    Each unvisited parcel absorbs its direct neighbours with the same owner
    (one hop only, not the whole same-owner component). The merged totals
    are summed per owner and the mean across owners is returned.

    Args:
        parcels: All parcels of the graph
        adjacency: Parcel adjacency map
        district: District filter
        municipality: Municipality filter
        county: County filter

    Returns:
        Mean of the per-owner area sums

    Raises:
        RejectedInputError: no filter given
        EmptyLocationError: filter matched nothing
    """
    filtered = _filtered(parcels, district, municipality, county)

    owner_areas: Dict[int, float] = {}
    visited: Set[Parcel] = set()

    for parcel in filtered:
        if parcel in visited:
            continue

        owner = parcel.owner_id
        total_area = parcel.area
        visited.add(parcel)

        for adjacent in neighbors(parcel, adjacency):
            if adjacent.owner_id == owner and adjacent not in visited:
                total_area += adjacent.area
                visited.add(adjacent)

        owner_areas[owner] = owner_areas.get(owner, 0.0) + total_area

    return sum(owner_areas.values()) / len(owner_areas)
