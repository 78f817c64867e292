"""
Error taxonomy for graph construction and queries.

Two kinds of failure reach callers:
- REJECTED_INPUT: the call itself was wrong (fix your call)
- GEOMETRY_FAILURE: a parcel shape broke the geometry engine (fix your data)
"""

from enum import Enum
from typing import Dict, Optional, Sequence


class ErrorKind(str, Enum):
    """Kind of failure reported by the core."""
    REJECTED_INPUT = "rejected_input"
    GEOMETRY_FAILURE = "geometry_failure"


class CadastreGraphError(Exception):
    """Base class for all errors raised by cadastre_graph."""

    kind: ErrorKind = ErrorKind.REJECTED_INPUT


class RejectedInputError(CadastreGraphError, ValueError):
    """Raised when a build or query receives invalid arguments."""

    kind = ErrorKind.REJECTED_INPUT


class EmptyLocationError(RejectedInputError):
    """Raised when a location filter matches no parcels."""

    def __init__(self, filters: Dict[str, str]):
        self.filters = dict(filters)
        described = " ".join(f"{level}={value}" for level, value in self.filters.items())
        super().__init__(f"No parcels in the requested area: {described}")


class GraphBuildError(CadastreGraphError):
    """Raised when a graph build is aborted by a geometry failure."""

    kind = ErrorKind.GEOMETRY_FAILURE

    def __init__(self, reason: str, parcel_ids: Sequence[int] = (), cause: Optional[BaseException] = None):
        self.reason = reason
        self.parcel_ids = tuple(parcel_ids)
        self.cause = cause
        ids = ", ".join(str(pid) for pid in self.parcel_ids)
        prefix = f"Graph build failed (parcels {ids})" if ids else "Graph build failed"
        super().__init__(f"{prefix}: {reason}")
