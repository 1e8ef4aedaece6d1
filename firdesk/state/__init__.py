"""Observable dashboard state and its change messages."""

from firdesk.state.store import DashboardState

__all__ = ["DashboardState"]
