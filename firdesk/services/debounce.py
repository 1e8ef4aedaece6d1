"""Debounce timer built on the running asyncio loop."""

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Token-based debounce timer.

    Each ``schedule`` cancels the pending token and arms a new one; only a
    token that fires without being superseded invokes the callback.
    """

    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self._token = 0
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        """Whether a token is armed and has not fired yet."""
        return self._handle is not None

    def schedule(self) -> int:
        """Arm a new token, superseding any pending one. Returns the token."""
        self.cancel()
        self._token += 1
        token = self._token
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, token)
        return token

    def cancel(self) -> None:
        """Drop the pending token without firing."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> bool:
        """Fire the pending token now. Returns False if nothing was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire(self._token)
        return True

    def _fire(self, token: int) -> None:
        if token != self._token or self._handle is None:
            logger.debug(f"Ignoring superseded debounce token {token}")
            return
        self._handle = None
        self.callback()
