"""Pydantic schemas for FIR records and the remote service payloads."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FIRStatus(str, Enum):
    """Workflow status of a FIR."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    UNDER_INVESTIGATION = "UNDER_INVESTIGATION"
    IN_PROGRESS = "IN_PROGRESS"
    CLOSED = "CLOSED"

    @property
    def label(self) -> str:
        """Human-readable status label."""
        return self.value.replace("_", " ").title()


class Priority(str, Enum):
    """FIR priority, totally ordered from LOW to EMERGENCY."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    EMERGENCY = "EMERGENCY"

    @property
    def rank(self) -> int:
        """Sort rank; higher is more urgent."""
        return _PRIORITY_RANK[self]

    @property
    def label(self) -> str:
        return self.value.title()


_PRIORITY_RANK = {
    Priority.LOW: 0,
    Priority.MEDIUM: 1,
    Priority.HIGH: 2,
    Priority.EMERGENCY: 3,
}


class CamelModel(BaseModel):
    """Base model accepting the service's camelCase JSON and snake_case kwargs."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FIRHistoryEntry(CamelModel):
    """Audit log entry attached to a FIR."""

    id: int
    action: str
    description: str | None = None
    officer_name: str | None = None
    timestamp: datetime | None = None


class FIRRecord(CamelModel):
    """
    A single First Information Report as returned by the remote service.

    Records are immutable; changes produce a new instance via ``model_copy``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int
    fir_number: str
    complainant_name: str
    complainant_email: str | None = None
    incident_type: str
    description: str = ""
    date_time: datetime  # incident timestamp
    priority: Priority = Priority.MEDIUM
    location: str | None = None
    status: FIRStatus = FIRStatus.PENDING

    assigned_station: str | None = None
    assigned_officer: str | None = None
    remarks: str | None = None
    action_notes: list[str] = Field(default_factory=list)
    evidence_files: list[str] = Field(default_factory=list)

    created_at: datetime  # filing timestamp
    updated_at: datetime | None = None
    history: list[FIRHistoryEntry] = Field(default_factory=list)


class FIRPage(CamelModel):
    """Paginated response envelope from ``/fir/paginated``."""

    content: list[FIRRecord]
    page: int = 0
    size: int = 0
    total_elements: int = 0
    total_pages: int = 0
    has_next: bool = False


class StatusUpdateRequest(CamelModel):
    """Payload for ``PATCH /fir/{id}/status``."""

    status: FIRStatus | None = None
    remarks: str | None = None
    action_note: str | None = None
    assigned_station: str | None = None
    assigned_officer: str | None = None
    assigned_officer_id: int | None = None

    def to_payload(self) -> dict:
        """Serialize to the wire format, omitting unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
