"""Tests for the debouncer and filter coordinator."""

import asyncio

import pytest

from firdesk.schemas.filters import FilterCriteria
from firdesk.schemas.fir import FIRStatus
from firdesk.services.debounce import Debouncer
from firdesk.services.filter_coordinator import FilterCoordinator

QUIET = 0.05


class TestDebouncer:
    @pytest.mark.asyncio
    async def test_only_last_token_fires(self):
        fired = []
        debouncer = Debouncer(QUIET, lambda: fired.append(1))

        first = debouncer.schedule()
        second = debouncer.schedule()
        assert second == first + 1

        await asyncio.sleep(QUIET * 3)
        assert fired == [1]
        assert debouncer.pending is False

    @pytest.mark.asyncio
    async def test_cancel(self):
        fired = []
        debouncer = Debouncer(QUIET, lambda: fired.append(1))
        debouncer.schedule()
        debouncer.cancel()

        await asyncio.sleep(QUIET * 3)
        assert fired == []

    @pytest.mark.asyncio
    async def test_flush(self):
        fired = []
        debouncer = Debouncer(QUIET, lambda: fired.append(1))

        assert debouncer.flush() is False
        debouncer.schedule()
        assert debouncer.flush() is True
        assert fired == [1]

        await asyncio.sleep(QUIET * 3)
        assert fired == [1]


class TestFilterCoordinator:
    @pytest.mark.asyncio
    async def test_keystrokes_collapse_to_one_snapshot(self):
        """Test rapid edits inside the quiet interval settle once, to the last value."""
        settled: list[FilterCriteria] = []
        coordinator = FilterCoordinator(settled.append, quiet_interval=QUIET)

        for text in ["t", "th", "the", "thef", "theft"]:
            coordinator.set_search(text)
            await asyncio.sleep(QUIET / 5)

        assert settled == []
        await asyncio.sleep(QUIET * 3)

        assert len(settled) == 1
        assert settled[0].search == "theft"

    @pytest.mark.asyncio
    async def test_selector_settles_after_quiet_interval(self):
        settled: list[FilterCriteria] = []
        coordinator = FilterCoordinator(settled.append, quiet_interval=QUIET)

        coordinator.update(status="PENDING")
        assert settled == []
        assert coordinator.pending is True

        await asyncio.sleep(QUIET * 3)
        assert len(settled) == 1
        assert settled[0].status == FIRStatus.PENDING

    @pytest.mark.asyncio
    async def test_selector_joins_pending_text_edit(self):
        """Test a selector change during a text debounce does not fetch separately."""
        settled: list[FilterCriteria] = []
        coordinator = FilterCoordinator(settled.append, quiet_interval=QUIET)

        coordinator.set_search("knife")
        coordinator.update(status="UNDER_INVESTIGATION")
        assert settled == []

        await asyncio.sleep(QUIET * 3)
        assert len(settled) == 1
        assert settled[0].search == "knife"
        assert settled[0].status == FIRStatus.UNDER_INVESTIGATION

    @pytest.mark.asyncio
    async def test_text_edit_after_selector_settles_once(self):
        """Test selector then typing inside the quiet interval emits one snapshot."""
        settled: list[FilterCriteria] = []
        coordinator = FilterCoordinator(settled.append, quiet_interval=QUIET)

        coordinator.update(status="PENDING")
        coordinator.set_search("FIR")
        await asyncio.sleep(QUIET * 3)

        assert len(settled) == 1
        assert settled[0].status == FIRStatus.PENDING
        assert settled[0].search == "FIR"

    @pytest.mark.asyncio
    async def test_unchanged_snapshot_not_emitted(self):
        settled: list[FilterCriteria] = []
        coordinator = FilterCoordinator(settled.append, quiet_interval=QUIET)

        coordinator.update(status="PENDING")
        await asyncio.sleep(QUIET * 3)
        coordinator.set_search("x")
        coordinator.set_search("")
        await asyncio.sleep(QUIET * 3)

        assert len(settled) == 1

    @pytest.mark.asyncio
    async def test_flush_settles_initial_snapshot(self):
        settled: list[FilterCriteria] = []
        coordinator = FilterCoordinator(settled.append, initial=FilterCriteria(page_size=5))

        coordinator.flush()
        coordinator.flush()

        assert settled == [FilterCriteria(page_size=5)]
        assert coordinator.settled == FilterCriteria(page_size=5)

    @pytest.mark.asyncio
    async def test_reset(self):
        settled: list[FilterCriteria] = []
        coordinator = FilterCoordinator(settled.append, quiet_interval=QUIET)

        coordinator.update(priority="HIGH")
        await asyncio.sleep(QUIET * 3)
        coordinator.set_search("pending text")
        coordinator.reset()
        await asyncio.sleep(QUIET * 3)

        assert [s.priority for s in settled] == ["HIGH", None]
        assert settled[-1].search == ""

    def test_unknown_field(self):
        coordinator = FilterCoordinator(lambda s: None)
        with pytest.raises(ValueError):
            coordinator.update(colour="red")
