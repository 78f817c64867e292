"""
Parcel and location value objects.

Parcels are created once by the import layer and never mutated afterwards.
Identity is the externally assigned parcel id.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

from shapely.geometry.base import BaseGeometry

from cadastre_graph.errors import RejectedInputError


LOCATION_LEVELS = ("district", "municipality", "county")


@dataclass(frozen=True)
class Location:
    """Three-level administrative location (smallest unit first)."""
    district: str
    municipality: str
    county: str

    UNAVAILABLE = "NA"

    def is_available(self, level: str) -> bool:
        """Whether the given level holds a real value (not the NA sentinel)."""
        if level not in LOCATION_LEVELS:
            raise RejectedInputError(f"Unknown location level: {level}")
        return getattr(self, level) != self.UNAVAILABLE

    def __str__(self) -> str:
        return f"{self.district}, {self.municipality}, {self.county}"


@dataclass(frozen=True)
class Parcel:
    """
    A single cadastral parcel.

    id, length, area and owner_id are validated positive by the importer.
    shape may be None for degraded records; such parcels are never adjacent
    to anything.
    """
    id: int
    length: float = field(compare=False)
    area: float = field(compare=False)
    owner_id: int = field(compare=False)
    shape: Optional[BaseGeometry] = field(default=None, compare=False, repr=False)
    location: Optional[Location] = field(default=None, compare=False)

    def __hash__(self) -> int:
        return hash(self.id)


class ParcelSortKey(str, Enum):
    """Available orderings for parcel listings."""
    ID = "id"
    LENGTH = "length"
    AREA = "area"
    OWNER = "owner"
    DISTRICT = "district"
    MUNICIPALITY = "municipality"
    COUNTY = "county"


def _location_key(level: str):
    def key(parcel: Parcel) -> str:
        if parcel.location is None:
            return ""
        return getattr(parcel.location, level).casefold()
    return key


_SORT_KEYS = {
    ParcelSortKey.ID: lambda p: p.id,
    ParcelSortKey.LENGTH: lambda p: p.length,
    ParcelSortKey.AREA: lambda p: p.area,
    ParcelSortKey.OWNER: lambda p: p.owner_id,
    ParcelSortKey.DISTRICT: _location_key("district"),
    ParcelSortKey.MUNICIPALITY: _location_key("municipality"),
    ParcelSortKey.COUNTY: _location_key("county"),
}


def sort_parcels(parcels: Iterable[Parcel], key) -> List[Parcel]:
    """
    Return a new list of parcels sorted ascending by the given key.

    Location keys compare case-insensitively.

    Args:
        parcels: Parcels to sort
        key: ParcelSortKey or its string value

    Returns:
        Sorted list (the input is left untouched)
    """
    try:
        sort_key = ParcelSortKey(key)
    except ValueError:
        raise RejectedInputError(f"Invalid sort key: {key!r}") from None
    return sorted(parcels, key=_SORT_KEYS[sort_key])


def count_by_location(parcels: Iterable[Parcel]) -> Dict[Location, int]:
    """Count parcels per location, skipping parcels without one."""
    return dict(Counter(p.location for p in parcels if p.location is not None))
