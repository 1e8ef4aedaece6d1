"""Position-aware context menu bound to one FIR."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from firdesk.config import get_settings
from firdesk.schemas.fir import FIRRecord
from firdesk.services.pin_store import PinStore

logger = logging.getLogger(__name__)
settings = get_settings()


class MenuAction(str, Enum):
    TOGGLE_PIN = "toggle_pin"
    REVIEW = "review"


@dataclass(frozen=True)
class ContextMenuState:
    """Open menu: anchor coordinates (already clamped) and target record."""

    x: int
    y: int
    record: FIRRecord


class ContextMenu:
    """
    Single-instance context menu.

    Opening while already open retargets the one instance. Any outside
    click, scroll, Escape or action selection closes it.
    """

    def __init__(
        self,
        pins: PinStore,
        on_review: Callable[[FIRRecord], None],
        width: int = settings.context_menu_width,
        height: int = settings.context_menu_height,
        margin: int = settings.context_menu_margin,
        viewport_width: int = settings.viewport_width,
        viewport_height: int = settings.viewport_height,
    ):
        self.pins = pins
        self.on_review = on_review
        self.width = width
        self.height = height
        self.margin = margin
        self.viewport: tuple[int, int] = (viewport_width, viewport_height)
        self.state: ContextMenuState | None = None

    @property
    def visible(self) -> bool:
        return self.state is not None

    def set_viewport(self, width: int, height: int) -> None:
        self.viewport = (width, height)
        if self.state is not None:
            self.state = ContextMenuState(*self._clamp(self.state.x, self.state.y), self.state.record)

    def open(self, x: int, y: int, record: FIRRecord) -> ContextMenuState:
        self.state = ContextMenuState(*self._clamp(x, y), record)
        return self.state

    def close(self) -> None:
        self.state = None

    def on_outside_click(self) -> None:
        self.close()

    def on_scroll(self) -> None:
        self.close()

    def on_key(self, key: str) -> None:
        if key == "Escape":
            self.close()

    def actions(self) -> list[tuple[MenuAction, str]]:
        """Available actions with their labels for the open target."""
        if self.state is None:
            return []
        pin_label = "Unpin" if self.pins.is_pinned(self.state.record.id) else "Pin as Important"
        return [(MenuAction.TOGGLE_PIN, pin_label), (MenuAction.REVIEW, "Review")]

    def select(self, action: MenuAction) -> None:
        """Run ``action`` on the target record and close the menu."""
        if self.state is None:
            return
        record = self.state.record
        self.close()
        if action == MenuAction.TOGGLE_PIN:
            self.pins.toggle_pin(record.id)
        elif action == MenuAction.REVIEW:
            self.on_review(record)

    def _clamp(self, x: int, y: int) -> tuple[int, int]:
        """Shift the anchor so the menu stays inside the viewport."""
        vw, vh = self.viewport
        if x + self.width > vw - self.margin:
            x = vw - self.width - self.margin
        if y + self.height > vh - self.margin:
            y = vh - self.height - self.margin
        return max(x, self.margin), max(y, self.margin)
