"""Dashboard assembly and lifespan management."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from firdesk.config import Settings, configure_logging, get_settings
from firdesk.controller import DashboardController
from firdesk.database import make_engine
from firdesk.schemas.filters import FilterCriteria
from firdesk.services.fir_client import FIRClient, HeadersProvider
from firdesk.services.kv_store import KeyValueStore, SqlKeyValueStore

logger = logging.getLogger(__name__)


def build_dashboard(
    settings: Settings | None = None,
    headers_provider: HeadersProvider | None = None,
    kv_store: KeyValueStore | None = None,
) -> DashboardController:
    """Create a controller from settings, with SQL-backed pin storage by default."""
    settings = settings or get_settings()
    if headers_provider is None and settings.api_token:
        token = settings.api_token

        def headers_provider() -> dict[str, str]:
            return {"Authorization": f"Bearer {token}"}

    client = FIRClient(
        base_url=settings.api_base_url,
        headers_provider=headers_provider,
        max_retries=settings.max_retries,
        timeout=settings.request_timeout_seconds,
        backoff=settings.retry_backoff_seconds,
    )
    if kv_store is None:
        kv_store = SqlKeyValueStore(make_engine(settings.state_database_url))
    return DashboardController(
        client,
        kv_store,
        initial_filters=FilterCriteria(page_size=settings.page_size),
        quiet_interval=settings.filter_debounce_ms / 1000,
    )


@asynccontextmanager
async def dashboard_session(
    settings: Settings | None = None,
    headers_provider: HeadersProvider | None = None,
    kv_store: KeyValueStore | None = None,
) -> AsyncIterator[DashboardController]:
    """Start a dashboard, yield it, and shut it down cleanly."""
    settings = settings or get_settings()
    configure_logging(settings)
    logger.info("Starting FIR dashboard...")

    controller = build_dashboard(settings, headers_provider, kv_store)
    await controller.start()
    try:
        yield controller
    finally:
        await controller.aclose()
        store = controller.pins.store
        if isinstance(store, SqlKeyValueStore):
            store.engine.dispose()
        logger.info("FIR dashboard shut down")
