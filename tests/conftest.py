"""Pytest fixtures for firdesk tests."""

import asyncio
from datetime import datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock

import pytest

from firdesk.config import Settings
from firdesk.schemas.filters import FilterCriteria
from firdesk.schemas.fir import FIRPage, FIRRecord, FIRStatus, Priority, StatusUpdateRequest
from firdesk.services.fir_client import FIRClient, FIRClientError
from firdesk.services.kv_store import InMemoryKeyValueStore
from firdesk.state.store import DashboardState

BASE_TIME = datetime(2026, 10, 19, 9, 0, 0)


def make_record(
    id: int,
    status: FIRStatus = FIRStatus.PENDING,
    priority: Priority = Priority.MEDIUM,
    created_at: datetime | None = None,
    **overrides: Any,
) -> FIRRecord:
    """Build a FIR with sensible defaults; ``FIR-2026-000N`` numbering."""
    created_at = created_at or BASE_TIME - timedelta(hours=id)
    data = {
        "id": id,
        "fir_number": f"FIR-2026-{id:04d}",
        "complainant_name": f"Complainant {id}",
        "complainant_email": f"c{id}@example.com",
        "incident_type": "Theft",
        "description": f"Incident {id}",
        "date_time": created_at - timedelta(hours=1),
        "priority": priority,
        "location": "Sector 5",
        "status": status,
        "created_at": created_at,
        "updated_at": created_at,
    }
    data.update(overrides)
    return FIRRecord(**data)


class FakeFIRService:
    """
    In-memory stand-in for the remote service.

    Filters by status/priority/type and pages newest-first like the real one.
    """

    def __init__(self, records: list[FIRRecord]):
        self.records = {r.id: r for r in records}
        self.page_calls: list[tuple[FilterCriteria, int]] = []
        self.update_calls: list[tuple[int, StatusUpdateRequest]] = []
        self.fail_updates = False
        self.fail_pages = False

    def matching(self, criteria: FilterCriteria) -> list[FIRRecord]:
        records = sorted(self.records.values(), key=lambda r: r.created_at, reverse=True)
        if criteria.status is not None:
            records = [r for r in records if r.status == criteria.status]
        if criteria.priority is not None:
            records = [r for r in records if r.priority == criteria.priority]
        if criteria.incident_type:
            records = [r for r in records if r.incident_type == criteria.incident_type]
        if criteria.search:
            term = criteria.search.lower()
            records = [r for r in records if term in r.fir_number.lower() or term in r.description.lower()]
        return records

    async def fetch_page(self, criteria: FilterCriteria, page: int) -> FIRPage:
        self.page_calls.append((criteria, page))
        if self.fail_pages:
            raise FIRClientError("Service unavailable", status_code=503)
        records = self.matching(criteria)
        start = page * criteria.page_size
        content = records[start : start + criteria.page_size]
        return FIRPage(
            content=content,
            page=page,
            size=criteria.page_size,
            total_elements=len(records),
            total_pages=-(-len(records) // criteria.page_size),
            has_next=start + criteria.page_size < len(records),
        )

    async def update_status(self, fir_id: int, request: StatusUpdateRequest) -> FIRRecord:
        self.update_calls.append((fir_id, request))
        if self.fail_updates:
            raise FIRClientError("Update rejected", status_code=500)
        current = self.records[fir_id]
        changes: dict[str, Any] = {
            "status": request.status,
            "updated_at": (current.updated_at or current.created_at) + timedelta(minutes=5),
        }
        if request.remarks:
            changes["remarks"] = request.remarks
        if request.action_note:
            changes["action_notes"] = [*current.action_notes, request.action_note]
        updated = current.model_copy(update=changes)
        self.records[fir_id] = updated
        return updated


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults."""
    return Settings(
        api_base_url="http://test/api",
        api_token="test_token",
        state_database_url="sqlite:///:memory:",
        retry_backoff_seconds=0,
        filter_debounce_ms=20,
        debug=True,
    )


@pytest.fixture
def sample_records() -> list[FIRRecord]:
    """Ten FIRs; the first five PENDING, the rest spread over other statuses."""
    statuses = [
        FIRStatus.PENDING,
        FIRStatus.PENDING,
        FIRStatus.PENDING,
        FIRStatus.PENDING,
        FIRStatus.PENDING,
        FIRStatus.APPROVED,
        FIRStatus.UNDER_INVESTIGATION,
        FIRStatus.IN_PROGRESS,
        FIRStatus.CLOSED,
        FIRStatus.REJECTED,
    ]
    return [make_record(i + 1, status=status) for i, status in enumerate(statuses)]


@pytest.fixture
def fake_service(sample_records) -> FakeFIRService:
    return FakeFIRService(sample_records)


@pytest.fixture
def mock_client(fake_service) -> FIRClient:
    """FIRClient whose network calls are served by ``fake_service``."""
    client = FIRClient(base_url="http://test/api", backoff=0)
    client.fetch_page = AsyncMock(side_effect=fake_service.fetch_page)
    client.update_status = AsyncMock(side_effect=fake_service.update_status)
    client.get_fir = AsyncMock(side_effect=lambda fir_id: fake_service.records[fir_id])
    return client


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def state() -> DashboardState:
    return DashboardState()


@pytest.fixture
def messages(state) -> list:
    """Every message published on ``state``."""
    received: list = []
    state.subscribe(received.append)
    return received


class Gate:
    """Lets a test hold a fake network call open until released."""

    def __init__(self):
        self._event = asyncio.Event()

    def release(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()
