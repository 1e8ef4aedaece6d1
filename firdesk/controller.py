"""Dashboard controller wiring filters, paging, transitions, pins and views."""

import asyncio
import logging
from collections.abc import Coroutine
from datetime import date
from typing import Any

from firdesk.schemas.filters import FilterCriteria
from firdesk.schemas.fir import FIRRecord, FIRStatus
from firdesk.services.board import BoardColumn, DragSession
from firdesk.services.context_menu import ContextMenu, ContextMenuState
from firdesk.services.filter_coordinator import FilterCoordinator
from firdesk.services.fir_client import FIRClient
from firdesk.services.kv_store import KeyValueStore
from firdesk.services.page_loader import PageLoader
from firdesk.services.pin_store import PinStore
from firdesk.services.projections import DateGroup, board_columns, date_groups, flat_list
from firdesk.services.review import ReviewDialog
from firdesk.services.stats import DashboardStats, compute_stats
from firdesk.services.transitions import StatusTransitionEngine, TransitionOperation
from firdesk.state.schemas import FilterSettledMessage
from firdesk.state.store import DashboardState

logger = logging.getLogger(__name__)


class DashboardController:
    """
    Officer-facing FIR workflow controller.

    Data flows filter coordinator -> page loader -> dashboard state ->
    projections, with the pin store overlaid on every projection. The
    transition engine writes to the dashboard state directly and is driven
    by drag-and-drop, the context menu's review action and the review dialog.
    """

    def __init__(
        self,
        client: FIRClient,
        kv_store: KeyValueStore,
        initial_filters: FilterCriteria | None = None,
        quiet_interval: float | None = None,
    ):
        self.client = client
        self.state = DashboardState()
        self.pins = PinStore(kv_store, state=self.state)
        self.loader = PageLoader(client, self.state)
        self.engine = StatusTransitionEngine(client, self.state)
        coordinator_kwargs: dict[str, Any] = {"initial": initial_filters}
        if quiet_interval is not None:
            coordinator_kwargs["quiet_interval"] = quiet_interval
        self.filters = FilterCoordinator(self._on_filter_settled, **coordinator_kwargs)
        self.drag = DragSession()
        self.review = ReviewDialog(self.engine, client)
        self.menu = ContextMenu(self.pins, on_review=self.review.open)
        self._tasks: set[asyncio.Task] = set()

    # Lifecycle

    async def start(self) -> None:
        """Load pins and fetch the first page for the initial filters."""
        self.pins.load()
        self.filters.flush()
        await self.wait_idle()

    async def aclose(self) -> None:
        """Cancel pending settlements and background fetches."""
        self.filters.cancel()
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()

    async def wait_idle(self) -> None:
        """Wait for a pending filter settlement and the fetches it starts."""
        while self._tasks or self.filters.pending:
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
            else:
                await asyncio.sleep(self.filters.quiet_interval)

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # Filters and paging

    def update_filters(self, **changes: Any) -> None:
        self.filters.update(**changes)

    def _on_filter_settled(self, snapshot: FilterCriteria) -> None:
        self.loader.reset(snapshot)
        self.state.publish(FilterSettledMessage(criteria=snapshot))
        self._spawn(self.loader.load_first())

    async def refresh(self) -> bool:
        """Reload the active snapshot from page 0."""
        snapshot = self.loader.active_snapshot
        if snapshot is None:
            return False
        self.loader.reset(snapshot, clear=False)
        return await self.loader.load_first()

    async def load_more(self) -> bool:
        return await self.loader.load_more()

    async def on_scroll(self, scroll_top: float, viewport_height: float, content_height: float) -> bool:
        """Scroll event: closes the context menu and loads more near the bottom."""
        self.menu.on_scroll()
        if not self.loader.should_load_more(scroll_top, viewport_height, content_height):
            return False
        return await self.loader.load_more()

    # Pins

    def toggle_pin(self, record_id: int) -> bool:
        return self.pins.toggle_pin(record_id)

    def is_pinned(self, record_id: int) -> bool:
        return self.pins.is_pinned(record_id)

    # Transitions

    async def transition(
        self, record: FIRRecord, new_status: FIRStatus, remarks: str | None = None
    ) -> TransitionOperation | None:
        return await self.engine.transition(record, new_status, remarks)

    def begin_drag(self, record: FIRRecord) -> None:
        self.menu.close()
        self.drag.begin(record)

    def hover(self, column: BoardColumn | None) -> None:
        self.drag.hover(column)

    def cancel_drag(self) -> None:
        self.drag.cancel()

    async def drop(self, column: BoardColumn) -> TransitionOperation | None:
        """Finish a drag over ``column``; same-column drops do nothing."""
        result = self.drag.drop(column)
        if result is None:
            return None
        return await self.engine.transition(result.record, result.new_status)

    # Context menu and review

    def open_context_menu(self, x: int, y: int, record: FIRRecord) -> ContextMenuState:
        return self.menu.open(x, y, record)

    def open_review(self, record: FIRRecord) -> None:
        self.menu.close()
        self.review.open(record)

    # Views

    def flat_view(self) -> list[FIRRecord]:
        return flat_list(self.state.records, self.pins.pinned_ids)

    def grouped_view(self, today: date | None = None) -> list[DateGroup]:
        return date_groups(self.state.records, self.pins.pinned_ids, today=today)

    def board_view(self) -> dict[BoardColumn, list[FIRRecord]]:
        return board_columns(self.state.records, self.pins.pinned_ids)

    def stats(self) -> DashboardStats:
        return compute_stats(self.state.records)
