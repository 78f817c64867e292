"""
Owner adjacency graph.

Two owners are adjacent when at least one parcel of each shares a border.
The parcel adjacency is kept alongside so that same-owner holdings can be
merged by the average-area aggregation.
"""

from typing import FrozenSet, Mapping, Optional, Sequence, Tuple

from loguru import logger

from cadastre_graph.errors import RejectedInputError
from cadastre_graph.models.parcel import Parcel
from cadastre_graph.services import adjacency as adj
from cadastre_graph.services.aggregation import average_owner_area
from cadastre_graph.services.parcel_graph import ParcelGraph, build_parcel_graph, validate_parcels


class OwnerGraph:
    """Read-only undirected adjacency graph over owner ids."""

    def __init__(self, parcel_graph: ParcelGraph, owner_adjacency: Mapping[int, FrozenSet[int]]):
        self._parcel_graph = parcel_graph
        self._owner_adjacency = owner_adjacency

    @property
    def parcel_graph(self) -> ParcelGraph:
        return self._parcel_graph

    @property
    def parcels(self) -> Tuple[Parcel, ...]:
        return self._parcel_graph.parcels

    @property
    def owner_adjacency(self) -> Mapping[int, FrozenSet[int]]:
        return self._owner_adjacency

    # -------------------------------------------------------------------------
    # Owner queries
    # -------------------------------------------------------------------------

    def adjacent_owners(self, owner_id: int) -> FrozenSet[int]:
        """Owners holding a parcel that borders a parcel of owner_id."""
        return adj.neighbors(adj.check_owner_id(owner_id), self._owner_adjacency)

    def owners_are_adjacent(self, first: int, second: int) -> bool:
        return adj.are_adjacent(
            adj.check_owner_id(first), adj.check_owner_id(second), self._owner_adjacency
        )

    def owner_vertex_count(self) -> int:
        """Number of owners with at least one neighbouring owner."""
        return len(self._owner_adjacency)

    def owner_edge_count(self) -> int:
        return adj.count_edges(self._owner_adjacency)

    # -------------------------------------------------------------------------
    # Parcel queries
    # -------------------------------------------------------------------------

    def adjacent_parcels(self, parcel: Parcel) -> FrozenSet[Parcel]:
        return self._parcel_graph.adjacent_to(parcel)

    def parcels_are_adjacent(self, first: Parcel, second: Parcel) -> bool:
        return self._parcel_graph.are_adjacent(first, second)

    def average_area(
        self,
        district: Optional[str] = None,
        municipality: Optional[str] = None,
        county: Optional[str] = None,
    ) -> float:
        """Mean per-owner area within a location, merging adjacent holdings."""
        return average_owner_area(
            self.parcels, self._parcel_graph.adjacency, district, municipality, county
        )

    def __repr__(self) -> str:
        return f"OwnerGraph(owners={self.owner_vertex_count()}, adjacencies={self.owner_edge_count()})"


def build_owner_graph(
    parcels: Sequence[Parcel],
    parcel_graph: Optional[ParcelGraph] = None,
    use_spatial_index: Optional[bool] = None,
    check_validity: Optional[bool] = None,
) -> OwnerGraph:
    """
    Build the owner adjacency graph.

    Args:
        parcels: Non-empty list of parcels without None elements
        parcel_graph: Already built graph over the same parcels (reused
            instead of scanning the pairs again)
        use_spatial_index: Passed to build_parcel_graph when no graph is given
        check_validity: Passed to build_parcel_graph when no graph is given

    Returns:
        Fully built OwnerGraph

    Raises:
        RejectedInputError: invalid parcel list, or parcel_graph built from
            different parcels
        GraphBuildError: the geometry engine failed
    """
    parcels = validate_parcels(parcels)

    if parcel_graph is None:
        parcel_graph = build_parcel_graph(parcels, use_spatial_index, check_validity)
    elif set(parcel_graph.parcels) != set(parcels):
        raise RejectedInputError("Parcel graph was built from a different parcel list")

    logger.info("Building owner graph...")

    owner_adjacency: adj.AdjacencyMap = {}
    for parcel, adjacent in parcel_graph.adjacency.items():
        for other in adjacent:
            if parcel.owner_id != other.owner_id:
                adj.add_edge(parcel.owner_id, other.owner_id, owner_adjacency)

    graph = OwnerGraph(parcel_graph, adj.freeze(owner_adjacency))
    logger.info(
        f"Owner graph built: {graph.owner_vertex_count():,} owners, "
        f"{graph.owner_edge_count():,} adjacencies"
    )
    return graph
