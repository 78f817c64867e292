"""
Graph services for cadastre-graph.

Services:
- adjacency: physical adjacency predicate and adjacency-map operations
- parcel_graph: parcel adjacency graph
- owner_graph: owner adjacency graph (keeps parcel adjacency)
- aggregation: location filter and average-area statistics
- exchange_service: ranked parcel exchange suggestions
"""

from cadastre_graph.services.adjacency import is_physically_adjacent
from cadastre_graph.services.parcel_graph import ParcelGraph, build_parcel_graph
from cadastre_graph.services.owner_graph import OwnerGraph, build_owner_graph
from cadastre_graph.services.aggregation import (
    filter_by_location,
    average_parcel_area,
    average_owner_area,
)
from cadastre_graph.services.exchange_service import ExchangeSuggestionEngine

__all__ = [
    # Adjacency
    "is_physically_adjacent",

    # Graphs
    "ParcelGraph",
    "build_parcel_graph",
    "OwnerGraph",
    "build_owner_graph",

    # Aggregation
    "filter_by_location",
    "average_parcel_area",
    "average_owner_area",

    # Exchange
    "ExchangeSuggestionEngine",
]
