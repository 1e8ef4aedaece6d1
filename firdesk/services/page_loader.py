"""Page loader: incremental, single-flight fetching of the filtered FIR list."""

import logging
from dataclasses import dataclass

from firdesk.config import get_settings
from firdesk.schemas.filters import FilterCriteria
from firdesk.services.fir_client import FIRClient, FIRClientError
from firdesk.state.store import DashboardState

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class PageWindow:
    """Paging progress for the active filter snapshot."""

    page_size: int
    page: int = -1  # last successfully loaded page index
    loaded_count: int = 0
    total_elements: int | None = None
    has_more: bool = True

    @property
    def next_page(self) -> int:
        return self.page + 1


class PageLoader:
    """
    Loads pages for the active snapshot into the dashboard state.

    Responses are tagged with a generation number taken when the request is
    issued. Any reset bumps the generation, so a late response for a
    superseded snapshot (or an out-of-order page) is discarded instead of
    merged.
    """

    def __init__(
        self,
        client: FIRClient,
        state: DashboardState,
        threshold_px: int = settings.load_more_threshold_px,
    ):
        self.client = client
        self.state = state
        self.threshold_px = threshold_px
        self._active: FilterCriteria | None = None
        self._generation = 0
        self._loading = False
        self.window = PageWindow(page_size=settings.page_size)

    @property
    def active_snapshot(self) -> FilterCriteria | None:
        return self._active

    @property
    def is_loading(self) -> bool:
        return self._loading

    def reset(self, snapshot: FilterCriteria, clear: bool = True) -> None:
        """
        Make ``snapshot`` active and invalidate the page window.

        With ``clear`` the accumulated records are emptied too; a refresh of
        the same snapshot keeps them on screen until page 0 replaces them.
        """
        self._active = snapshot
        self._generation += 1
        self._loading = False
        self.window = PageWindow(page_size=snapshot.page_size)
        if clear:
            self.state.replace_all([])
        logger.debug(f"Page window reset (generation {self._generation})")

    async def load_page(self, snapshot: FilterCriteria, page_index: int, append: bool) -> bool:
        """
        Fetch one page for ``snapshot`` and merge it into the record set.

        Args:
            snapshot: Filter snapshot the page belongs to
            page_index: Zero-based page index
            append: Append to the existing records instead of replacing them

        Returns:
            True if the page was applied, False if it failed or was stale
        """
        if snapshot != self._active:
            logger.debug("Ignoring load for inactive snapshot")
            return False

        generation = self._generation
        self._loading = True
        try:
            page = await self.client.fetch_page(snapshot, page_index)
        except FIRClientError as e:
            if generation != self._generation:
                logger.debug(f"Discarding failure of superseded page {page_index}: {e}")
                return False
            logger.warning(f"Failed to load FIR page {page_index}: {e}")
            self.state.notify("Error", "Failed to load FIRs", destructive=True)
            return False
        finally:
            if generation == self._generation:
                self._loading = False

        if generation != self._generation or snapshot != self._active:
            logger.debug(f"Discarding stale page {page_index} response")
            return False
        if append and page_index != self.window.next_page:
            logger.debug(f"Discarding out-of-order page {page_index} (expected {self.window.next_page})")
            return False

        if append:
            added = self.state.append(page.content)
            self.window.loaded_count += len(added)
        else:
            self.state.replace_all(page.content)
            self.window.loaded_count = len(self.state)

        self.window.page = page_index
        self.window.total_elements = page.total_elements
        self.window.has_more = page.has_next
        logger.info(
            f"Loaded page {page_index}: {self.window.loaded_count}/{page.total_elements} FIRs"
        )
        return True

    async def load_first(self) -> bool:
        """Load page 0 of the active snapshot, replacing the record set."""
        if self._active is None:
            return False
        return await self.load_page(self._active, 0, append=False)

    async def load_more(self) -> bool:
        """
        Append the next page if one exists and nothing is in flight.

        Concurrent calls while a fetch is running are no-ops.
        """
        if self._active is None or self._loading or not self.window.has_more:
            return False
        return await self.load_page(self._active, self.window.next_page, append=True)

    def near_bottom(self, scroll_top: float, viewport_height: float, content_height: float) -> bool:
        """Whether the scroll position is within the load-more threshold."""
        return content_height - (scroll_top + viewport_height) <= self.threshold_px

    def should_load_more(self, scroll_top: float, viewport_height: float, content_height: float) -> bool:
        """Near the bottom, idle, and more pages available."""
        return (
            self._active is not None
            and not self._loading
            and self.window.has_more
            and self.near_bottom(scroll_top, viewport_height, content_height)
        )
