"""Status transition engine with optimistic updates and rollback."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from firdesk.schemas.fir import FIRRecord, FIRStatus, StatusUpdateRequest
from firdesk.services.fir_client import FIRClient, FIRClientError
from firdesk.state.schemas import TransitionMessage
from firdesk.state.store import DashboardState

logger = logging.getLogger(__name__)


class TransitionState(str, Enum):
    """Lifecycle of one transition."""

    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass
class TransitionOperation:
    """A single status change from request to settlement."""

    original: FIRRecord
    optimistic: FIRRecord
    request: StatusUpdateRequest
    state: TransitionState = TransitionState.PENDING
    result: FIRRecord | None = None
    error: str | None = None
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def record_id(self) -> int:
        return self.original.id

    @property
    def target(self) -> FIRStatus:
        return self.optimistic.status


def build_update_request(
    new_status: FIRStatus,
    remarks: str | None = None,
    assigned_station: str | None = None,
    assigned_officer: str | None = None,
    assigned_officer_id: int | None = None,
) -> StatusUpdateRequest:
    """
    Shape the update payload.

    Free text is sent as the rejection reason when rejecting and as an
    appended action note for any other target.
    """
    text = remarks.strip() if remarks else None
    return StatusUpdateRequest(
        status=new_status,
        remarks=text if new_status == FIRStatus.REJECTED else None,
        action_note=text if new_status != FIRStatus.REJECTED and text else None,
        assigned_station=assigned_station,
        assigned_officer=assigned_officer,
        assigned_officer_id=assigned_officer_id,
    )


def apply_optimistic(record: FIRRecord, request: StatusUpdateRequest) -> FIRRecord:
    """Best guess of the record after the server applies ``request``."""
    changes: dict = {"status": request.status}
    if request.remarks:
        changes["remarks"] = request.remarks
    if request.action_note:
        changes["action_notes"] = [*record.action_notes, request.action_note]
    if request.assigned_station is not None:
        changes["assigned_station"] = request.assigned_station
    if request.assigned_officer is not None:
        changes["assigned_officer"] = request.assigned_officer
    return record.model_copy(update=changes)


class StatusTransitionEngine:
    """
    Executes status changes against the remote service.

    The optimistic record is written to the state before the request is
    issued. On success it is replaced by the server's canonical record; on
    failure the pre-transition record is restored. Only one transition per
    record id may be in flight at a time.
    """

    def __init__(self, client: FIRClient, state: DashboardState):
        self.client = client
        self.state = state
        self._in_flight: dict[int, TransitionOperation] = {}

    def is_in_flight(self, record_id: int) -> bool:
        return record_id in self._in_flight

    async def transition(
        self,
        record: FIRRecord,
        new_status: FIRStatus,
        remarks: str | None = None,
        **assignment,
    ) -> TransitionOperation | None:
        """
        Move ``record`` to ``new_status``.

        Returns:
            The settled operation, or None if the request was a no-op
            (same status) or another transition on the record is running.
        """
        current = self.state.get(record.id) or record
        if new_status == current.status:
            logger.debug(f"{current.fir_number} already {new_status.value}; skipping")
            return None
        if record.id in self._in_flight:
            logger.info(f"Transition already in flight for {current.fir_number}; ignoring")
            return None

        request = build_update_request(new_status, remarks, **assignment)
        operation = TransitionOperation(
            original=current,
            optimistic=apply_optimistic(current, request),
            request=request,
        )
        self._in_flight[record.id] = operation
        self.state.replace_record(operation.optimistic)
        self._publish(operation)

        try:
            canonical = await self.client.update_status(record.id, request)
        except FIRClientError as e:
            self._rollback(operation, str(e))
        else:
            self._commit(operation, canonical)
        finally:
            self._in_flight.pop(record.id, None)

        return operation

    def _commit(self, operation: TransitionOperation, canonical: FIRRecord) -> None:
        operation.state = TransitionState.COMMITTED
        operation.result = canonical
        self.state.replace_record(canonical)
        logger.info(
            f"{canonical.fir_number}: {operation.original.status.value} -> {canonical.status.value}"
        )
        self._publish(operation)
        self.state.notify("FIR Updated", f"{canonical.fir_number} status changed")

    def _rollback(self, operation: TransitionOperation, error: str) -> None:
        operation.state = TransitionState.ROLLED_BACK
        operation.error = error
        fir_number = operation.original.fir_number
        # Only undo our own optimistic write; a reload may have replaced it
        if self.state.get(operation.record_id) is operation.optimistic:
            self.state.replace_record(operation.original)
        logger.warning(f"Transition of {fir_number} to {operation.target.value} failed: {error}")
        self._publish(operation)
        self.state.notify("Error", f"Failed to update status of {fir_number}", destructive=True)

    def _publish(self, operation: TransitionOperation) -> None:
        self.state.publish(
            TransitionMessage(
                record_id=operation.record_id,
                fir_number=operation.original.fir_number,
                from_status=operation.original.status,
                to_status=operation.target,
                state=operation.state.value,
            )
        )
