"""GestureInterpreter: pinch-to-zoom and pin/unpin on the video grid."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from meetkit.core.store import SessionStore
from meetkit.models.enums import GesturePhase
from meetkit.models.gesture import PinchState, TouchPoint

logger = logging.getLogger("meetkit.gesture")


class GestureInterpreter:
    """Turns two-finger touch sequences into zoom and pin decisions.

    * **Idle** to **Pinching** when exactly two touch points are first seen.
    * While pinching, each move publishes ``clamp(scale, min_zoom, max_zoom)``
      and, independently of that clamp, pins the active speaker when the raw
      scale exceeds *pin_threshold* or unpins when it drops below
      *unpin_threshold*.
    * Any touch end or cancel returns to **Idle**, resets zoom to 1 and
      unpins.

    A third finger added mid-pinch is ignored; only the first two points are
    measured against the initial reference distance.
    """

    def __init__(
        self,
        store: SessionStore,
        *,
        min_zoom: float = 1.0,
        max_zoom: float = 3.0,
        pin_threshold: float = 1.2,
        unpin_threshold: float = 0.8,
    ) -> None:
        self._store = store
        self._min_zoom = min_zoom
        self._max_zoom = max_zoom
        self._pin_threshold = pin_threshold
        self._unpin_threshold = unpin_threshold
        self._pinch: PinchState | None = None

    @property
    def phase(self) -> GesturePhase:
        return GesturePhase.IDLE if self._pinch is None else GesturePhase.PINCHING

    @property
    def pinch(self) -> PinchState | None:
        return self._pinch

    def touch_start(self, points: Sequence[TouchPoint]) -> None:
        if self._pinch is not None or len(points) != 2:
            return
        distance = points[0].distance_to(points[1])
        if distance <= 0:
            logger.debug("Ignoring pinch start with coincident touch points")
            return
        self._pinch = PinchState(initial_distance=distance)

    def touch_move(self, points: Sequence[TouchPoint]) -> None:
        if self._pinch is None:
            return
        if len(points) < 2:
            self.touch_end(points)
            return

        scale = points[0].distance_to(points[1]) / self._pinch.initial_distance
        self._pinch.scale = scale
        self._store.set_zoom(min(max(scale, self._min_zoom), self._max_zoom))

        speaker = self._store.state.active_speaker
        if speaker is not None and scale > self._pin_threshold:
            self._store.set_pinned(speaker.id)
        elif scale < self._unpin_threshold:
            self._store.set_pinned(None)

    def touch_end(self, points: Sequence[TouchPoint] = ()) -> None:
        self._pinch = None
        self._store.set_zoom(1.0)
        self._store.set_pinned(None)

    def touch_cancel(self) -> None:
        self.touch_end()
