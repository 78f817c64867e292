"""
Result types and report schemas.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from cadastre_graph.models.parcel import Parcel


# =============================================================================
# EXCHANGE SUGGESTIONS
# =============================================================================

@dataclass(frozen=True)
class ExchangeSuggestion:
    """A candidate swap of two adjacent parcels held by different owners."""
    parcel_a: Parcel
    parcel_b: Parcel
    area_difference: float
    feasibility_score: float  # (0, 1], 1 = equal areas
    average_area_improvement: float  # relative, signed

    @property
    def ranking_score(self) -> float:
        return self.feasibility_score * self.average_area_improvement

    def to_record(self) -> "SuggestionRecord":
        return SuggestionRecord(
            parcel_a_id=self.parcel_a.id,
            parcel_b_id=self.parcel_b.id,
            owner_a_id=self.parcel_a.owner_id,
            owner_b_id=self.parcel_b.owner_id,
            area_a=self.parcel_a.area,
            area_b=self.parcel_b.area,
            area_difference=self.area_difference,
            feasibility_score=self.feasibility_score,
            average_area_improvement=self.average_area_improvement,
            ranking_score=self.ranking_score,
        )

    def __str__(self) -> str:
        return (
            f"Swap parcel {self.parcel_a.id} (owner {self.parcel_a.owner_id}) "
            f"with parcel {self.parcel_b.id} (owner {self.parcel_b.owner_id}): "
            f"area difference {self.area_difference:.2f}, "
            f"feasibility {self.feasibility_score:.2f}, "
            f"improvement {self.average_area_improvement:+.4f}"
        )


# =============================================================================
# REPORTS
# =============================================================================

class SuggestionRecord(BaseModel):
    """Flat, serialisable view of an exchange suggestion."""
    parcel_a_id: int
    parcel_b_id: int
    owner_a_id: int
    owner_b_id: int
    area_a: float = Field(..., gt=0)
    area_b: float = Field(..., gt=0)
    area_difference: float = Field(..., ge=0)
    feasibility_score: float = Field(..., gt=0, le=1)
    average_area_improvement: float
    ranking_score: float


class GraphSummary(BaseModel):
    """Vertex and edge counts of both graphs."""
    parcel_count: int
    parcel_edge_count: int
    owner_count: int
    owner_edge_count: int


class AnalysisReport(BaseModel):
    """Everything one analysis run produces."""
    summary: GraphSummary
    location_filter: Dict[str, str] = {}
    average_parcel_area: Optional[float] = None
    average_owner_area: Optional[float] = None
    suggestions: List[SuggestionRecord] = []
