"""Services for fetching, transitioning and projecting FIRs."""

from firdesk.services.fir_client import FIRClient, FIRClientError
from firdesk.services.filter_coordinator import FilterCoordinator
from firdesk.services.page_loader import PageLoader, PageWindow
from firdesk.services.pin_store import PinStore
from firdesk.services.transitions import StatusTransitionEngine, TransitionState

__all__ = [
    "FIRClient",
    "FIRClientError",
    "FilterCoordinator",
    "PageLoader",
    "PageWindow",
    "PinStore",
    "StatusTransitionEngine",
    "TransitionState",
]
