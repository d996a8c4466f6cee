"""Touch gesture value types."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class TouchPoint:
    """A single touch point in client coordinates."""

    x: float
    y: float

    def distance_to(self, other: TouchPoint) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass
class PinchState:
    """Ephemeral state of one two-finger pinch, from touch start to release."""

    initial_distance: float
    scale: float = 1.0
