"""
Exchange suggestion engine.

Looks for pairs of adjacent parcels held by neighbouring owners and ranks
the possible swaps by how balanced they are (feasibility) and how much
they would change the owners' mean parcel area (improvement).
"""

from typing import Dict, Iterator, List, Optional

from loguru import logger

from cadastre_graph.config import settings
from cadastre_graph.errors import RejectedInputError
from cadastre_graph.models.parcel import Parcel
from cadastre_graph.models.schemas import ExchangeSuggestion
from cadastre_graph.services import adjacency as adj
from cadastre_graph.services.owner_graph import OwnerGraph


def feasibility_score(first: Parcel, second: Parcel) -> float:
    """Ratio of the smaller to the larger area, in (0, 1]."""
    return min(first.area, second.area) / max(first.area, second.area)


def average_area_improvement(
    given: Parcel,
    received: Parcel,
    holdings_a: List[Parcel],
    holdings_b: List[Parcel],
) -> float:
    """
    Relative change of the two owners' mean parcel area after a swap.

    Owner A gives `given` and receives `received`; owner B the opposite.
    Parcel counts do not change with a swap.

    Args:
        given: Parcel currently held by owner A
        received: Parcel currently held by owner B
        holdings_a: All parcels of owner A
        holdings_b: All parcels of owner B

    Returns:
        (post-swap average - current average) / current average
    """
    total_a = sum(p.area for p in holdings_a)
    total_b = sum(p.area for p in holdings_b)

    current = (total_a / len(holdings_a) + total_b / len(holdings_b)) / 2

    swapped_a = total_a - given.area + received.area
    swapped_b = total_b - received.area + given.area
    after = (swapped_a / len(holdings_a) + swapped_b / len(holdings_b)) / 2

    return (after - current) / current


class ExchangeSuggestionEngine:
    """Generates ranked parcel exchange suggestions between owners."""

    def __init__(self, owner_graph: OwnerGraph, skip_equal_area: Optional[bool] = None):
        """
        Initialize engine.

        Args:
            owner_graph: Built owner graph (its parcel graph is used too)
            skip_equal_area: Drop swaps of parcels with identical areas
                (defaults to settings)
        """
        if owner_graph is None:
            raise RejectedInputError("Owner graph must not be None")
        self._owner_graph = owner_graph
        self._skip_equal_area = settings.skip_equal_area if skip_equal_area is None else skip_equal_area
        self._by_owner = self._group_by_owner()

    def _group_by_owner(self) -> Dict[int, List[Parcel]]:
        by_owner: Dict[int, List[Parcel]] = {}
        for parcel in self._owner_graph.parcels:
            by_owner.setdefault(parcel.owner_id, []).append(parcel)
        return by_owner

    def parcels_by_owner(self) -> Dict[int, List[Parcel]]:
        """Copy of the owner -> parcels grouping (input order kept)."""
        return {owner: list(parcels) for owner, parcels in self._by_owner.items()}

    def _pair_candidates(self, owner_a: int, owner_b: int) -> Iterator[ExchangeSuggestion]:
        holdings_a = self._by_owner[owner_a]
        holdings_b = self._by_owner[owner_b]

        for first in holdings_a:
            for second in holdings_b:
                if not self._owner_graph.parcels_are_adjacent(first, second):
                    continue
                if self._skip_equal_area and first.area == second.area:
                    continue

                yield ExchangeSuggestion(
                    parcel_a=first,
                    parcel_b=second,
                    area_difference=abs(first.area - second.area),
                    feasibility_score=feasibility_score(first, second),
                    average_area_improvement=average_area_improvement(
                        first, second, holdings_a, holdings_b
                    ),
                )

    @staticmethod
    def _check_limit(max_suggestions) -> None:
        if isinstance(max_suggestions, bool) or not isinstance(max_suggestions, int) or max_suggestions <= 0:
            logger.warning(f"Rejected max_suggestions={max_suggestions!r}")
            raise RejectedInputError(f"max_suggestions must be a positive integer: {max_suggestions!r}")

    @staticmethod
    def _rank(candidates: List[ExchangeSuggestion], max_suggestions: int) -> List[ExchangeSuggestion]:
        # sorted() is stable with reverse=True: equal scores keep generation order
        ranked = sorted(candidates, key=lambda s: s.ranking_score, reverse=True)
        return ranked[:max_suggestions]

    def generate_suggestions(self, max_suggestions: int) -> List[ExchangeSuggestion]:
        """
        Rank every possible swap between neighbouring owners.

        Candidates are generated per owner pair (ascending owner ids), then
        per parcel in input order, and sorted by
        feasibility_score * average_area_improvement, descending.

        Args:
            max_suggestions: Maximum number of suggestions to return

        Returns:
            At most max_suggestions suggestions, best first

        Raises:
            RejectedInputError: max_suggestions is not a positive integer
        """
        self._check_limit(max_suggestions)

        candidates: List[ExchangeSuggestion] = []

        # only neighbouring owners can swap; each pair is visited once, lower id first
        for owner_a in sorted(self._by_owner):
            later = (o for o in self._owner_graph.adjacent_owners(owner_a) if o > owner_a)
            for owner_b in sorted(later):
                candidates.extend(self._pair_candidates(owner_a, owner_b))

        logger.info(f"Found {len(candidates):,} exchange candidates")
        return self._rank(candidates, max_suggestions)

    def suggestions_for_owner(self, owner_id: int, max_suggestions: int) -> List[ExchangeSuggestion]:
        """
        Rank the swaps available to a single owner.

        parcel_a of every suggestion belongs to owner_id. An owner without
        parcels gets an empty list.
        """
        owner_id = adj.check_owner_id(owner_id)
        self._check_limit(max_suggestions)

        if owner_id not in self._by_owner:
            return []

        candidates: List[ExchangeSuggestion] = []
        for other in sorted(self._owner_graph.adjacent_owners(owner_id)):
            candidates.extend(self._pair_candidates(owner_id, other))

        logger.debug(f"Owner {owner_id}: {len(candidates):,} exchange candidates")
        return self._rank(candidates, max_suggestions)
