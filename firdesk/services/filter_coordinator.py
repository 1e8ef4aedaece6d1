"""Filter coordinator: collects raw filter edits and emits settled snapshots."""

import logging
from collections.abc import Callable
from typing import Any

from firdesk.config import get_settings
from firdesk.schemas.filters import DEBOUNCED_FIELDS, FilterCriteria
from firdesk.services.debounce import Debouncer

logger = logging.getLogger(__name__)
settings = get_settings()

SettledCallback = Callable[[FilterCriteria], None]


class FilterCoordinator:
    """
    Owns the draft filter criteria and decides when a snapshot is settled.

    Every edit, text or selector, restarts the quiet interval. A burst of
    edits therefore settles once, to the state after the last edit, and is
    emitted only if it differs from the last snapshot. ``flush`` settles
    without waiting (e.g. Enter or initial load).
    """

    def __init__(
        self,
        on_settled: SettledCallback,
        initial: FilterCriteria | None = None,
        quiet_interval: float = settings.filter_debounce_ms / 1000,
    ):
        self.on_settled = on_settled
        self._draft = initial or FilterCriteria(page_size=settings.page_size)
        self._settled: FilterCriteria | None = None
        self._debouncer = Debouncer(quiet_interval, self._settle)

    @property
    def draft(self) -> FilterCriteria:
        """Criteria including edits that have not settled yet."""
        return self._draft

    @property
    def settled(self) -> FilterCriteria | None:
        """Last emitted snapshot, or None before the first settlement."""
        return self._settled

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    @property
    def quiet_interval(self) -> float:
        return self._debouncer.delay

    def update(self, **changes: Any) -> None:
        """
        Apply raw edits to any filter fields.

        Raises:
            ValueError: if a field name is unknown or a value is invalid
        """
        unknown = set(changes) - set(FilterCriteria.model_fields)
        if unknown:
            raise ValueError(f"Unknown filter fields: {', '.join(sorted(unknown))}")

        self._draft = self._draft.with_changes(**changes)
        if not DEBOUNCED_FIELDS & set(changes):
            logger.debug(f"Selector edit {sorted(changes)} waits for the quiet interval")
        self._debouncer.schedule()

    def set_search(self, text: str) -> None:
        self.update(search=text)

    def set_complainant(self, text: str) -> None:
        self.update(complainant=text)

    def reset(self) -> None:
        """Clear every filter back to defaults."""
        self._debouncer.cancel()
        self._draft = FilterCriteria(page_size=self._draft.page_size)
        self._settle()

    def flush(self) -> None:
        """Settle any pending text edit right away (e.g. on Enter)."""
        if not self._debouncer.flush():
            self._settle()

    def cancel(self) -> None:
        """Drop a pending settlement without emitting."""
        self._debouncer.cancel()

    def _settle(self) -> None:
        snapshot = self._draft
        if snapshot == self._settled:
            logger.debug("Filter settled unchanged; no fetch needed")
            return
        self._settled = snapshot
        logger.info(f"Filter settled: {snapshot.to_query_params(0)}")
        self.on_settled(snapshot)
