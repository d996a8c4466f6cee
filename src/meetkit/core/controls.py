"""ControlVisibilityTimer: auto-hide for the floating call controls."""

from __future__ import annotations

import asyncio
import logging

from meetkit.core.store import SessionStore
from meetkit.models.enums import InteractionKind

logger = logging.getLogger("meetkit.controls")


class ControlVisibilityTimer:
    """Shows the controls on interaction and hides them after inactivity.

    Each qualifying interaction cancels the pending countdown and arms a
    new one (debounce, not throttle). The countdown is a single
    ``loop.call_later`` handle, cancelled on ``close()``.
    """

    def __init__(self, store: SessionStore, *, hide_delay: float = 3.0) -> None:
        self._store = store
        self._hide_delay = hide_delay
        self._handle: asyncio.TimerHandle | None = None
        self._closed = False

    @property
    def hide_delay(self) -> float:
        return self._hide_delay

    @property
    def pending(self) -> bool:
        """True while a hide countdown is armed."""
        return self._handle is not None

    def start(self) -> None:
        """Show the controls and arm the first countdown."""
        self._closed = False
        self.interaction()

    def interaction(self, kind: InteractionKind = InteractionKind.POINTER_MOVE) -> None:
        """Reveal the controls and restart the hide countdown.

        Raises:
            ValueError: *kind* is not a qualifying interaction.
        """
        InteractionKind(kind)
        if self._closed:
            return
        if not self._store.state.show_controls:
            self._store.set_controls_visible(True)
        self._cancel()
        self._handle = asyncio.get_running_loop().call_later(self._hide_delay, self._hide)

    def close(self) -> None:
        self._closed = True
        self._cancel()

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _hide(self) -> None:
        self._handle = None
        if self._closed:
            return
        logger.debug("No interaction for %.1fs, hiding controls", self._hide_delay)
        self._store.set_controls_visible(False)
