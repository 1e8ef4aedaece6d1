"""Observable container for the authoritative FIR record set."""

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from firdesk.schemas.fir import FIRRecord
from firdesk.state.schemas import NotificationMessage, RecordsChangedMessage, StateMessage

logger = logging.getLogger(__name__)

Subscriber = Callable[[StateMessage], None]


class DashboardState:
    """
    Holds the authoritative record set and fans out change messages.

    Mutators are called only by the page loader and the transition engine;
    presentation code reads ``records`` and subscribes to messages.
    """

    def __init__(self):
        self._records: list[FIRRecord] = []
        self._subscribers: list[Subscriber] = []

    @property
    def records(self) -> tuple[FIRRecord, ...]:
        """Read-only snapshot of the current record set."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, record_id: int) -> FIRRecord | None:
        """Look up a record by id."""
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a subscriber. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, message: StateMessage) -> None:
        """Deliver ``message`` to every subscriber."""
        for callback in list(self._subscribers):
            try:
                callback(message)
            except Exception as e:
                logger.warning(f"Subscriber failed on {message.type}: {e}", exc_info=True)

    def notify(self, title: str, description: str, destructive: bool = False) -> None:
        """Publish an operator notification."""
        self.publish(
            NotificationMessage(
                title=title,
                description=description,
                variant="destructive" if destructive else "default",
            )
        )

    def replace_all(self, records: Iterable[FIRRecord]) -> None:
        """Replace the whole record set."""
        self._records = _dedupe(records)
        self._changed("replace", [r.id for r in self._records])

    def append(self, records: Iterable[FIRRecord]) -> list[FIRRecord]:
        """
        Append records not already present.

        Returns the records actually added.
        """
        seen = {r.id for r in self._records}
        incoming = _dedupe(records)
        added = [r for r in incoming if r.id not in seen]
        if len(added) < len(incoming):
            logger.debug(f"Dropped {len(incoming) - len(added)} already-loaded records on append")

        self._records.extend(added)
        self._changed("append", [r.id for r in added])
        return added

    def replace_record(self, record: FIRRecord) -> bool:
        """
        Swap in a new version of an existing record, keeping its position.

        Returns False if the record is not in the set (e.g. filtered out).
        """
        for index, current in enumerate(self._records):
            if current.id == record.id:
                self._records[index] = record
                self._changed("update", [record.id])
                return True
        return False

    def _changed(self, reason: str, record_ids: list[int]) -> None:
        self.publish(
            RecordsChangedMessage(
                reason=reason,
                record_ids=record_ids,
                total=len(self._records),
                timestamp=datetime.now(UTC),
            )
        )


def _dedupe(records: Iterable[FIRRecord]) -> list[FIRRecord]:
    """Drop repeated ids, keeping the first occurrence."""
    seen: set[int] = set()
    unique: list[FIRRecord] = []
    for record in records:
        if record.id in seen:
            continue
        seen.add(record.id)
        unique.append(record)
    return unique
