"""
Parcel adjacency graph.

Built once from a fixed parcel list by an exhaustive pairwise scan; an
optional STRtree prefilter skips pairs whose shapes cannot intersect
without changing the result.
"""

from typing import FrozenSet, Iterator, Mapping, Optional, Sequence, Tuple

from loguru import logger
from shapely.errors import GEOSException

from cadastre_graph.config import settings
from cadastre_graph.errors import GraphBuildError, RejectedInputError
from cadastre_graph.models.parcel import Parcel
from cadastre_graph.services import adjacency as adj
from cadastre_graph.services.aggregation import average_parcel_area
from cadastre_graph.utils.geometry import find_invalid_shapes
from cadastre_graph.utils.logging import ProgressLogger
from cadastre_graph.utils.spatial import candidate_pairs


NULL_PARCELS_ERROR = "Parcel list must not be None"
EMPTY_PARCELS_ERROR = "Parcel list must not be empty"
NULL_ELEMENTS_ERROR = "Parcel list must not contain None elements"


def validate_parcels(parcels: Optional[Sequence[Parcel]]) -> Tuple[Parcel, ...]:
    """Check the builder preconditions and return the parcels as a tuple."""
    if parcels is None:
        raise RejectedInputError(NULL_PARCELS_ERROR)
    parcels = tuple(parcels)
    if not parcels:
        raise RejectedInputError(EMPTY_PARCELS_ERROR)
    if any(p is None for p in parcels):
        raise RejectedInputError(NULL_ELEMENTS_ERROR)
    return parcels


def check_shapes(parcels: Sequence[Parcel], strict: bool = True) -> None:
    """
    Report parcels carrying a shape shapely considers invalid.

    Invalid shapes are common in cadastral data and GEOS usually still
    answers the adjacency predicates for them, so by default they are only
    logged. In strict mode the build is aborted instead.

    Args:
        parcels: Validated parcel list
        strict: Raise instead of warning

    Raises:
        GraphBuildError: strict mode and at least one invalid shape
    """
    invalid = find_invalid_shapes(parcels)
    if not invalid:
        return

    log = logger.error if strict else logger.warning
    log(f"{len(invalid):,} parcel(s) with invalid shapes")
    for parcel_id, reason in invalid[:10]:
        log(f"  Invalid shape for parcel {parcel_id}: {reason}")

    if strict:
        raise GraphBuildError(
            f"{len(invalid)} invalid shape(s), first: {invalid[0][1]}",
            parcel_ids=[parcel_id for parcel_id, _ in invalid],
        )


def _index_pairs(n: int, parcels: Sequence[Parcel], use_spatial_index: bool) -> Tuple[Iterator[Tuple[int, int]], int]:
    if use_spatial_index:
        try:
            pairs = candidate_pairs([p.shape for p in parcels])
        except GEOSException as e:
            raise GraphBuildError(f"Spatial index query failed: {e}", cause=e) from e
        logger.debug(f"  Spatial index kept {len(pairs):,} of {n * (n - 1) // 2:,} pairs")
        return ((int(i), int(j)) for i, j in pairs), len(pairs)

    all_pairs = ((i, j) for i in range(n) for j in range(i + 1, n))
    return all_pairs, n * (n - 1) // 2


def scan_adjacent_pairs(
    parcels: Sequence[Parcel],
    use_spatial_index: bool = False,
    log_every: int = 10,
) -> Iterator[Tuple[Parcel, Parcel]]:
    """
    Yield every physically adjacent pair (parcels[i], parcels[j]), i < j.

    Args:
        parcels: Validated parcel list
        use_spatial_index: Prefilter candidate pairs with an STRtree
        log_every: Progress logging interval in percent

    Yields:
        Adjacent parcel pairs in (i, j) order

    Raises:
        GraphBuildError: the geometry engine failed on a pair
    """
    n = len(parcels)
    pairs, total = _index_pairs(n, parcels, use_spatial_index)
    progress = ProgressLogger(
        total, "  Adjacency scan", unit="pairs", matched_label="adjacent", log_every=log_every
    )

    for i, j in pairs:
        first, second = parcels[i], parcels[j]
        try:
            adjacent = adj.is_physically_adjacent(first.shape, second.shape)
        except GEOSException as e:
            logger.error(f"Topology error comparing parcels {first.id} and {second.id}: {e}")
            raise GraphBuildError(str(e), parcel_ids=(first.id, second.id), cause=e) from e

        progress.update(matched=int(adjacent))
        if adjacent:
            yield first, second

    progress.finish()


class ParcelGraph:
    """Read-only undirected adjacency graph over parcels."""

    def __init__(self, parcels: Sequence[Parcel], adjacency: Mapping[Parcel, FrozenSet[Parcel]]):
        self._parcels = tuple(parcels)
        self._adjacency = adjacency

    @property
    def parcels(self) -> Tuple[Parcel, ...]:
        return self._parcels

    @property
    def adjacency(self) -> Mapping[Parcel, FrozenSet[Parcel]]:
        return self._adjacency

    def adjacent_to(self, parcel: Parcel) -> FrozenSet[Parcel]:
        """Parcels sharing a border with parcel (empty if none)."""
        return adj.neighbors(parcel, self._adjacency)

    def are_adjacent(self, first: Parcel, second: Parcel) -> bool:
        return adj.are_adjacent(first, second, self._adjacency)

    def vertex_count(self) -> int:
        """Number of distinct parcels, isolated ones included."""
        return len(set(self._parcels))

    def edge_count(self) -> int:
        return adj.count_edges(self._adjacency)

    def average_area(
        self,
        district: Optional[str] = None,
        municipality: Optional[str] = None,
        county: Optional[str] = None,
    ) -> float:
        """Plain mean parcel area within a location."""
        return average_parcel_area(self._parcels, district, municipality, county)

    def __repr__(self) -> str:
        return f"ParcelGraph(parcels={self.vertex_count()}, adjacencies={self.edge_count()})"


def build_parcel_graph(
    parcels: Sequence[Parcel],
    use_spatial_index: Optional[bool] = None,
    check_validity: Optional[bool] = None,
) -> ParcelGraph:
    """
    Build the parcel adjacency graph.

    Args:
        parcels: Non-empty list of parcels without None elements
        use_spatial_index: STRtree prefilter (defaults to settings)
        check_validity: Abort on invalid shapes instead of warning
            (defaults to settings)

    Returns:
        Fully built ParcelGraph

    Raises:
        RejectedInputError: parcel list is None, empty or has None elements
        GraphBuildError: the geometry engine failed, or a shape is invalid
            and check_validity is on
    """
    parcels = validate_parcels(parcels)
    if use_spatial_index is None:
        use_spatial_index = settings.use_spatial_index
    if check_validity is None:
        check_validity = settings.check_validity

    logger.info(f"Building parcel graph from {len(parcels):,} parcels...")

    check_shapes(parcels, strict=check_validity)

    adjacency: adj.AdjacencyMap = {}
    for first, second in scan_adjacent_pairs(parcels, use_spatial_index, settings.progress_log_every):
        adj.add_edge(first, second, adjacency)

    graph = ParcelGraph(parcels, adj.freeze(adjacency))
    logger.info(f"Parcel graph built: {graph.edge_count():,} adjacencies")
    return graph
