"""Media capture provider interface and stream handles."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from meetkit.models.enums import MediaKind, MediaToggleStatus, TrackState

logger = logging.getLogger("meetkit.media")

TrackEndedCallback = Callable[["MediaTrack"], Any]
"""Callback for a track that ended out-of-band: (track)."""


class MediaTrack:
    """A single capture track (video or audio) belonging to a stream.

    ``stop()`` is idempotent: a track that has already ended ignores further
    stop calls. Ended listeners only fire when the capture ends out-of-band
    (e.g. the OS "stop sharing" button), never as a result of ``stop()``.
    """

    def __init__(self, kind: str = "video", *, track_id: str | None = None) -> None:
        self.id = track_id or uuid4().hex
        self.kind = kind
        self._state = TrackState.LIVE
        self._ended_listeners: list[TrackEndedCallback] = []
        self.stop_count = 0

    @property
    def state(self) -> TrackState:
        return self._state

    @property
    def is_live(self) -> bool:
        return self._state == TrackState.LIVE

    def stop(self) -> None:
        if self._state == TrackState.ENDED:
            return
        self._state = TrackState.ENDED
        self.stop_count += 1

    def add_ended_listener(self, callback: TrackEndedCallback) -> None:
        self._ended_listeners.append(callback)

    def remove_ended_listener(self, callback: TrackEndedCallback) -> None:
        if callback in self._ended_listeners:
            self._ended_listeners.remove(callback)

    def end(self) -> None:
        """Mark the track ended by its source and notify listeners."""
        if self._state == TrackState.ENDED:
            return
        self._state = TrackState.ENDED
        for callback in list(self._ended_listeners):
            try:
                callback(self)
            except Exception:
                logger.exception("Track ended listener failed", extra={"track_id": self.id})


@dataclass
class MediaStream:
    """A captured stream and the tracks it owns."""

    kind: MediaKind
    tracks: list[MediaTrack] = field(default_factory=lambda: [MediaTrack("video")])
    id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def video_tracks(self) -> list[MediaTrack]:
        return [t for t in self.tracks if t.kind == "video"]

    @property
    def live_tracks(self) -> list[MediaTrack]:
        return [t for t in self.tracks if t.is_live]

    def stop(self) -> None:
        """Stop every track, logging instead of raising on track errors."""
        for track in self.tracks:
            try:
                track.stop()
            except Exception:
                logger.exception(
                    "Failed to stop track", extra={"stream_id": self.id, "track_id": track.id}
                )


@dataclass
class MediaToggleResult:
    """Outcome of a camera or screen-share toggle."""

    kind: MediaKind
    status: MediaToggleStatus
    stream: MediaStream | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status in (MediaToggleStatus.STARTED, MediaToggleStatus.STOPPED)


class MediaProvider(ABC):
    """Abstract capture provider for the local participant's camera and screen.

    Implement this to bridge to a real capture stack. The library ships with
    ``MockMediaProvider`` for tests and demos.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for identification."""
        ...

    @abstractmethod
    async def request_camera(self) -> MediaStream:
        """Acquire a camera stream.

        Raises:
            MediaAccessDeniedError: Permission was refused or the device
                failed.
        """
        ...

    @abstractmethod
    async def request_screen_capture(self) -> MediaStream:
        """Acquire a screen-capture stream.

        Raises:
            MediaAccessDeniedError: The user cancelled or capture failed.
            UnsupportedCapabilityError: Screen capture is unavailable.
        """
        ...

    @abstractmethod
    def supports_screen_capture(self) -> bool:
        """One-shot probe for screen-capture support."""
        ...

    async def close(self) -> None:
        """Release provider resources.

        Override this method in subclasses that need cleanup.
        The default implementation does nothing.
        """
        return None
