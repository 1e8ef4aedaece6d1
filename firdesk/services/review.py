"""Review dialog binding: selected record plus a status/remarks draft."""

import logging

from firdesk.schemas.fir import FIRRecord, FIRStatus
from firdesk.services.fir_client import FIRClient, FIRClientError
from firdesk.services.transitions import StatusTransitionEngine, TransitionOperation

logger = logging.getLogger(__name__)


class ReviewDialog:
    """
    Holds the record under review and the operator's draft.

    ``remarks`` is sent as the rejection reason when the draft status is
    REJECTED and as an action note otherwise.
    """

    def __init__(self, engine: StatusTransitionEngine, client: FIRClient | None = None):
        self.engine = engine
        self.client = client
        self.record: FIRRecord | None = None
        self.new_status: FIRStatus | None = None
        self.remarks: str = ""

    @property
    def is_open(self) -> bool:
        return self.record is not None

    @property
    def remarks_role(self) -> str:
        """What the free text will be recorded as."""
        return "rejection_reason" if self.new_status == FIRStatus.REJECTED else "action_note"

    def open(self, record: FIRRecord) -> None:
        self.record = record
        self.new_status = None
        self.remarks = ""

    def close(self) -> None:
        self.record = None
        self.new_status = None
        self.remarks = ""

    def set_status(self, status: FIRStatus | str) -> None:
        self.new_status = FIRStatus(status)

    def set_remarks(self, text: str) -> None:
        self.remarks = text

    async def refresh(self) -> FIRRecord | None:
        """Re-fetch the record under review (history, notes) from the service."""
        if self.record is None or self.client is None:
            return self.record
        try:
            self.record = await self.client.get_fir(self.record.id)
        except FIRClientError as e:
            logger.warning(f"Could not refresh {self.record.fir_number}: {e}")
        return self.record

    async def submit(self) -> TransitionOperation | None:
        """
        Apply the draft through the transition engine.

        The dialog closes once a transition settles as committed.
        """
        if self.record is None or self.new_status is None:
            return None
        operation = await self.engine.transition(self.record, self.new_status, self.remarks or None)
        if operation is not None and operation.result is not None:
            self.close()
        return operation
