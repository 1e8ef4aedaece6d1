"""Pin store: persisted set of pinned FIR ids, independent of server state."""

import json
import logging

from firdesk.config import get_settings
from firdesk.services.kv_store import KeyValueStore, StorageError
from firdesk.state.schemas import PinsChangedMessage
from firdesk.state.store import DashboardState

logger = logging.getLogger(__name__)
settings = get_settings()


class PinStore:
    """
    Client-local pinned FIR ids.

    Loaded once at start-up and written back synchronously on every change.
    Filter changes, reloads and failed transitions never touch it.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = settings.pin_storage_key,
        state: DashboardState | None = None,
    ):
        self.store = store
        self.key = key
        self.state = state
        self._ids: set[int] = set()

    def load(self) -> None:
        """Read the pin set from storage; corrupt or missing data yields an empty set."""
        try:
            raw = self.store.get(self.key)
        except StorageError as e:
            logger.warning(f"Could not read pinned FIRs, starting empty: {e}")
            self._ids = set()
            return

        self._ids = _decode(raw)
        logger.info(f"Loaded {len(self._ids)} pinned FIRs")

    @property
    def pinned_ids(self) -> frozenset[int]:
        return frozenset(self._ids)

    def __contains__(self, record_id: int) -> bool:
        return record_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def is_pinned(self, record_id: int) -> bool:
        return record_id in self._ids

    def toggle_pin(self, record_id: int) -> bool:
        """Flip the pin on ``record_id``. Returns the new pinned state."""
        if record_id in self._ids:
            self._ids.discard(record_id)
            pinned = False
        else:
            self._ids.add(record_id)
            pinned = True
        self._persist()
        if self.state is not None:
            self.state.publish(PinsChangedMessage(record_id=record_id, pinned=pinned))
        return pinned

    def pin(self, record_id: int) -> None:
        if not self.is_pinned(record_id):
            self.toggle_pin(record_id)

    def unpin(self, record_id: int) -> None:
        if self.is_pinned(record_id):
            self.toggle_pin(record_id)

    def _persist(self) -> None:
        try:
            self.store.set(self.key, json.dumps(sorted(self._ids)))
        except StorageError as e:
            # Keep the in-memory pin; the next successful write carries it
            logger.error(f"Failed to persist pinned FIRs: {e}")
            if self.state is not None:
                self.state.notify("Error", "Could not save pinned FIRs", destructive=True)


def _decode(raw: str | None) -> set[int]:
    if not raw:
        return set()
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Pinned FIR data is not valid JSON; resetting")
        return set()
    if not isinstance(data, list):
        logger.warning("Pinned FIR data is not a list; resetting")
        return set()

    ids: set[int] = set()
    for item in data:
        # bool is an int subclass; reject it explicitly
        if isinstance(item, int) and not isinstance(item, bool):
            ids.add(item)
        elif isinstance(item, str) and item.isdigit():
            ids.add(int(item))
        else:
            logger.warning(f"Skipping invalid pinned FIR id: {item!r}")
    return ids
