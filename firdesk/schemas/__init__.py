"""Pydantic schemas for FIR records and filters."""

from firdesk.schemas.filters import FilterCriteria
from firdesk.schemas.fir import (
    FIRHistoryEntry,
    FIRPage,
    FIRRecord,
    FIRStatus,
    Priority,
    StatusUpdateRequest,
)

__all__ = [
    "FIRHistoryEntry",
    "FIRPage",
    "FIRRecord",
    "FIRStatus",
    "FilterCriteria",
    "Priority",
    "StatusUpdateRequest",
]
