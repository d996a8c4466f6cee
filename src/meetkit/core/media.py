"""MediaResourceManager: camera and screen-share acquisition and release."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from meetkit.core.errors import (
    MediaAccessDeniedError,
    SessionClosedError,
    UnsupportedCapabilityError,
)
from meetkit.core.store import SessionStore
from meetkit.media.base import MediaProvider, MediaStream, MediaToggleResult, MediaTrack
from meetkit.models.enums import MediaKind, MediaToggleStatus, NoticeKind

logger = logging.getLogger("meetkit.media")

CAMERA_DENIED_NOTICE = "Could not access camera. Please check your permissions."
SCREEN_SHARE_DENIED_NOTICE = "Could not start screen sharing."

ScreenShareEndedCallback = Callable[[MediaStream], Any]


class MediaResourceManager:
    """Bridges camera/screen-share toggles to asynchronous acquisition.

    The manager holds the only references to live streams and is the only
    component that stops their tracks. Every acquisition captures a
    generation number; if the manager is closed or the action is
    superseded while the request is in flight, the late stream is stopped
    and discarded without touching the store.
    """

    def __init__(
        self,
        store: SessionStore,
        provider: MediaProvider,
        *,
        participant_id: str | None = None,
        on_screen_share_ended: ScreenShareEndedCallback | None = None,
    ) -> None:
        self._store = store
        self._provider = provider
        self._participant_id = participant_id or store.local_participant_id
        self._on_screen_share_ended = on_screen_share_ended
        self._camera: MediaStream | None = None
        self._screen: MediaStream | None = None
        self._camera_generation = 0
        self._screen_generation = 0
        self._camera_pending: int | None = None
        self._closed = False

    @property
    def provider(self) -> MediaProvider:
        return self._provider

    @property
    def camera_stream(self) -> MediaStream | None:
        return self._camera

    @property
    def screen_stream(self) -> MediaStream | None:
        return self._screen

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def probe(self) -> bool:
        """Query screen-capture support once and record it in the store."""
        try:
            supported = bool(self._provider.supports_screen_capture())
        except Exception:
            logger.exception(
                "Screen capture probe failed", extra={"provider": self._provider.name}
            )
            supported = False
        self._store.set_screen_share_supported(supported)
        return supported

    # -- Camera --

    async def toggle_video(self) -> MediaToggleResult:
        """Turn the camera on (after acquisition succeeds) or off (immediately)."""
        self._ensure_open()
        participant = self._store.get_participant(self._participant_id)
        if participant.is_video_on:
            self._stop_camera()
            return MediaToggleResult(MediaKind.CAMERA, MediaToggleStatus.STOPPED)

        if self._camera_pending == self._camera_generation:
            return MediaToggleResult(MediaKind.CAMERA, MediaToggleStatus.PENDING)

        generation = self._camera_generation
        self._camera_pending = generation
        try:
            stream = await self._provider.request_camera()
        except Exception as exc:
            if self._is_stale(generation, self._camera_generation):
                return MediaToggleResult(MediaKind.CAMERA, MediaToggleStatus.STALE)
            error = _as_access_error(MediaKind.CAMERA, exc)
            logger.warning("Camera access denied: %s", error.reason or error)
            self._store.push_notice(NoticeKind.CAMERA_DENIED, CAMERA_DENIED_NOTICE)
            return MediaToggleResult(MediaKind.CAMERA, MediaToggleStatus.DENIED, error=error)
        finally:
            if self._camera_pending == generation:
                self._camera_pending = None

        if self._is_stale(generation, self._camera_generation):
            logger.debug("Discarding camera stream %s acquired after teardown", stream.id)
            stream.stop()
            return MediaToggleResult(MediaKind.CAMERA, MediaToggleStatus.STALE)

        if self._camera is not None:
            self._camera.stop()
        self._camera = stream
        self._store.set_video_on(self._participant_id, True, stream_id=stream.id)
        logger.info("Camera started", extra={"stream_id": stream.id})
        return MediaToggleResult(MediaKind.CAMERA, MediaToggleStatus.STARTED, stream=stream)

    def _stop_camera(self) -> None:
        self._camera_generation += 1
        stream, self._camera = self._camera, None
        if self._store.state.get_participant(self._participant_id) is not None:
            self._store.set_video_on(self._participant_id, False)
        if stream is not None:
            stream.stop()
            logger.info("Camera stopped", extra={"stream_id": stream.id})

    # -- Screen share --

    async def toggle_screen_share(self) -> MediaToggleResult:
        """Start or stop sharing the screen.

        A no-op returning ``UNSUPPORTED`` when the capability probe found no
        screen-capture support.
        """
        self._ensure_open()
        if not self._store.state.is_screen_share_supported:
            return MediaToggleResult(MediaKind.SCREEN, MediaToggleStatus.UNSUPPORTED)

        participant = self._store.get_participant(self._participant_id)
        if participant.is_screen_share_on:
            self._stop_screen()
            return MediaToggleResult(MediaKind.SCREEN, MediaToggleStatus.STOPPED)

        self._screen_generation += 1
        generation = self._screen_generation
        self._store.set_screen_share_on(self._participant_id, True)
        try:
            stream = await self._provider.request_screen_capture()
        except UnsupportedCapabilityError as exc:
            if self._is_stale(generation, self._screen_generation):
                return MediaToggleResult(MediaKind.SCREEN, MediaToggleStatus.STALE)
            self._store.set_screen_share_on(self._participant_id, False)
            return MediaToggleResult(MediaKind.SCREEN, MediaToggleStatus.UNSUPPORTED, error=exc)
        except Exception as exc:
            if self._is_stale(generation, self._screen_generation):
                return MediaToggleResult(MediaKind.SCREEN, MediaToggleStatus.STALE)
            error = _as_access_error(MediaKind.SCREEN, exc)
            logger.warning("Screen share failed: %s", error.reason or error)
            self._store.set_screen_share_on(self._participant_id, False)
            self._store.push_notice(NoticeKind.SCREEN_SHARE_DENIED, SCREEN_SHARE_DENIED_NOTICE)
            return MediaToggleResult(MediaKind.SCREEN, MediaToggleStatus.DENIED, error=error)

        if self._is_stale(generation, self._screen_generation):
            logger.debug("Discarding screen stream %s acquired after teardown", stream.id)
            stream.stop()
            return MediaToggleResult(MediaKind.SCREEN, MediaToggleStatus.STALE)

        if self._screen is not None:
            self._release_screen_stream(self._screen)
        self._screen = stream
        for track in stream.video_tracks[:1]:
            track.add_ended_listener(self._on_screen_track_ended)
        self._store.set_screen_share_on(self._participant_id, True, stream_id=stream.id)
        logger.info("Screen share started", extra={"stream_id": stream.id})
        return MediaToggleResult(MediaKind.SCREEN, MediaToggleStatus.STARTED, stream=stream)

    def _on_screen_track_ended(self, track: MediaTrack) -> None:
        stream = self._screen
        if stream is None or track not in stream.tracks:
            return
        logger.info("Screen share ended by the capture source", extra={"stream_id": stream.id})
        self._stop_screen()
        if self._on_screen_share_ended is not None:
            self._on_screen_share_ended(stream)

    def _stop_screen(self) -> None:
        self._screen_generation += 1
        stream, self._screen = self._screen, None
        if self._store.state.get_participant(self._participant_id) is not None:
            self._store.set_screen_share_on(self._participant_id, False)
        if stream is not None:
            self._release_screen_stream(stream)
            logger.info("Screen share stopped", extra={"stream_id": stream.id})

    def _release_screen_stream(self, stream: MediaStream) -> None:
        for track in stream.video_tracks[:1]:
            track.remove_ended_listener(self._on_screen_track_ended)
        stream.stop()

    # -- Teardown --

    def release_all(self) -> None:
        """Stop every owned track and invalidate in-flight acquisitions."""
        self._stop_camera()
        self._stop_screen()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.release_all()

    # -- Internal helpers --

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError("Media manager is closed")

    def _is_stale(self, generation: int, current: int) -> bool:
        return self._closed or generation != current


def _as_access_error(kind: MediaKind, exc: Exception) -> MediaAccessDeniedError:
    if isinstance(exc, MediaAccessDeniedError):
        return exc
    return MediaAccessDeniedError(kind, str(exc) or type(exc).__name__)
