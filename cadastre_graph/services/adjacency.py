"""
Physical adjacency predicate and adjacency-map operations.

An adjacency map is a plain dict vertex -> set of neighbours. The functions
here are shared by the parcel graph (Parcel vertices) and the owner graph
(integer owner ids). Maps are mutable only while a builder fills them and
are frozen before a graph is handed out.
"""

import numbers
from types import MappingProxyType
from typing import Dict, FrozenSet, Hashable, Mapping, MutableMapping, Optional, Set, TypeVar

from shapely.geometry.base import BaseGeometry

from cadastre_graph.errors import RejectedInputError


V = TypeVar("V", bound=Hashable)

AdjacencyMap = Dict[V, Set[V]]

NULL_VERTEX_ERROR = "Vertices must not be None"
INVALID_OWNER_ERROR = "Owner id must be a positive integer"


def is_physically_adjacent(shape_a: Optional[BaseGeometry], shape_b: Optional[BaseGeometry]) -> bool:
    """
    Check whether two parcel shapes are physical neighbours.

    Shapes are adjacent when they touch, or when they overlap without one
    lying entirely within the other (digitisation slivers count as
    adjacency, nesting is a data anomaly).

    GEOS topology errors are not caught here; the graph builder aborts on
    them.

    Args:
        shape_a: First shape (None allowed)
        shape_b: Second shape (None allowed)

    Returns:
        True if adjacent, False otherwise or when a shape is missing
    """
    if shape_a is None or shape_b is None:
        return False

    if shape_a.touches(shape_b):
        return True

    return (
        shape_a.intersects(shape_b)
        and not shape_a.within(shape_b)
        and not shape_b.within(shape_a)
    )


def _check_vertex(vertex) -> None:
    if vertex is None:
        raise RejectedInputError(NULL_VERTEX_ERROR)


def check_owner_id(owner_id) -> int:
    """
    Validate an owner id and return it as a plain int.

    Any integral type is accepted (numpy integers read from a GeoDataFrame
    column included); bools are not.
    """
    if isinstance(owner_id, bool) or not isinstance(owner_id, numbers.Integral) or owner_id <= 0:
        raise RejectedInputError(f"{INVALID_OWNER_ERROR}: {owner_id!r}")
    return int(owner_id)


def add_edge(a: V, b: V, adjacency: MutableMapping[V, Set[V]]) -> None:
    """
    Insert a symmetric edge between a and b.

    Self-loops are ignored. Integer vertices live in the owner keyspace and
    must be positive.
    """
    _check_vertex(a)
    _check_vertex(b)

    if isinstance(a, numbers.Integral) and isinstance(b, numbers.Integral):
        a = check_owner_id(a)
        b = check_owner_id(b)

    if a == b:
        return

    adjacency.setdefault(a, set()).add(b)
    adjacency.setdefault(b, set()).add(a)


def neighbors(vertex: V, adjacency: Mapping[V, FrozenSet[V]]) -> FrozenSet[V]:
    """Return the neighbours of vertex (empty if it has none)."""
    _check_vertex(vertex)
    return frozenset(adjacency.get(vertex, ()))


def are_adjacent(a: V, b: V, adjacency: Mapping[V, FrozenSet[V]]) -> bool:
    """Whether a and b share an edge; False when either is unknown."""
    _check_vertex(a)
    _check_vertex(b)
    return b in adjacency.get(a, ())


def count_edges(adjacency: Mapping[V, FrozenSet[V]]) -> int:
    """Undirected edge count (every edge is stored from both endpoints)."""
    return sum(len(adjacent) for adjacent in adjacency.values()) // 2


def freeze(adjacency: AdjacencyMap) -> Mapping[V, FrozenSet[V]]:
    """Return a read-only copy of an adjacency map."""
    return MappingProxyType({vertex: frozenset(adjacent) for vertex, adjacent in adjacency.items()})
