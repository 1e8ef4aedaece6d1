"""State-change message schemas published to dashboard subscribers."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from firdesk.schemas.filters import FilterCriteria
from firdesk.schemas.fir import FIRStatus


class RecordsChangedMessage(BaseModel):
    """The authoritative record set changed."""

    type: Literal["records_changed"] = "records_changed"
    reason: Literal["replace", "append", "update"]
    record_ids: list[int]
    total: int
    timestamp: datetime


class PinsChangedMessage(BaseModel):
    """The pin set changed."""

    type: Literal["pins_changed"] = "pins_changed"
    record_id: int
    pinned: bool


class FilterSettledMessage(BaseModel):
    """A new filter snapshot settled and the page window was reset."""

    type: Literal["filter_settled"] = "filter_settled"
    criteria: FilterCriteria


class TransitionMessage(BaseModel):
    """Lifecycle change of one status transition."""

    type: Literal["transition"] = "transition"
    record_id: int
    fir_number: str
    from_status: FIRStatus
    to_status: FIRStatus
    state: Literal["pending", "committed", "rolled_back"]


class NotificationMessage(BaseModel):
    """Non-blocking operator notification."""

    type: Literal["notification"] = "notification"
    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


StateMessage = (
    RecordsChangedMessage
    | PinsChangedMessage
    | FilterSettledMessage
    | TransitionMessage
    | NotificationMessage
)
