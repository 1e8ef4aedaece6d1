"""Kanban board columns and the drag-and-drop session."""

import logging
from dataclasses import dataclass
from enum import Enum

from firdesk.schemas.fir import FIRRecord, FIRStatus

logger = logging.getLogger(__name__)


class BoardColumn(str, Enum):
    """Kanban columns; REJECTED records share the CLOSED column."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    UNDER_INVESTIGATION = "UNDER_INVESTIGATION"
    IN_PROGRESS = "IN_PROGRESS"
    CLOSED = "CLOSED"

    @property
    def label(self) -> str:
        if self is BoardColumn.CLOSED:
            return "Closed/Rejected"
        return self.value.replace("_", " ").title()

    @property
    def drop_status(self) -> FIRStatus:
        """Status assigned to a record dropped here (never REJECTED)."""
        return FIRStatus(self.value)

    @classmethod
    def for_status(cls, status: FIRStatus) -> "BoardColumn":
        if status == FIRStatus.REJECTED:
            return cls.CLOSED
        return cls(status.value)


@dataclass(frozen=True)
class DropResult:
    """A drop that requires a status change."""

    record: FIRRecord
    column: BoardColumn
    new_status: FIRStatus


class DragSession:
    """
    Device-independent drag state: begin, hover, drop, cancel.

    Mouse, touch and keyboard front-ends all drive the same calls.
    """

    def __init__(self):
        self.record: FIRRecord | None = None
        self.hover_column: BoardColumn | None = None

    @property
    def active(self) -> bool:
        return self.record is not None

    def begin(self, record: FIRRecord) -> None:
        self.record = record
        self.hover_column = None

    def hover(self, column: BoardColumn | None) -> None:
        if self.active:
            self.hover_column = column

    def cancel(self) -> None:
        self.record = None
        self.hover_column = None

    def drop(self, column: BoardColumn) -> DropResult | None:
        """
        End the session over ``column``.

        Returns None when nothing is being dragged or the record already
        sits in that column.
        """
        record = self.record
        self.cancel()
        if record is None:
            return None
        if BoardColumn.for_status(record.status) == column:
            logger.debug(f"{record.fir_number} dropped on its own column; no-op")
            return None
        return DropResult(record=record, column=column, new_status=column.drop_status)
