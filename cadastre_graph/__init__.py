"""
cadastre-graph: parcel and owner adjacency graphs for cadastral data.
"""

from cadastre_graph.errors import (
    ErrorKind,
    CadastreGraphError,
    RejectedInputError,
    EmptyLocationError,
    GraphBuildError,
)
from cadastre_graph.models import Location, Parcel, ExchangeSuggestion
from cadastre_graph.services import (
    ParcelGraph,
    OwnerGraph,
    ExchangeSuggestionEngine,
    build_parcel_graph,
    build_owner_graph,
)

__version__ = "1.0.0"

__all__ = [
    "ErrorKind",
    "CadastreGraphError",
    "RejectedInputError",
    "EmptyLocationError",
    "GraphBuildError",
    "Location",
    "Parcel",
    "ExchangeSuggestion",
    "ParcelGraph",
    "OwnerGraph",
    "ExchangeSuggestionEngine",
    "build_parcel_graph",
    "build_owner_graph",
]
