"""
Data model for cadastre-graph.
"""

from cadastre_graph.models.parcel import (
    LOCATION_LEVELS,
    Location,
    Parcel,
    ParcelSortKey,
    sort_parcels,
    count_by_location,
)
from cadastre_graph.models.schemas import (
    ExchangeSuggestion,
    SuggestionRecord,
    GraphSummary,
    AnalysisReport,
)

__all__ = [
    # Parcels
    "LOCATION_LEVELS",
    "Location",
    "Parcel",
    "ParcelSortKey",
    "sort_parcels",
    "count_by_location",
    # Results
    "ExchangeSuggestion",
    "SuggestionRecord",
    "GraphSummary",
    "AnalysisReport",
]
