"""Mock media provider for testing."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from meetkit.core.errors import MediaAccessDeniedError, UnsupportedCapabilityError
from meetkit.media.base import MediaProvider, MediaStream, MediaTrack
from meetkit.models.enums import MediaKind


@dataclass
class MockMediaCall:
    """Record of a call made to MockMediaProvider."""

    method: str
    args: dict[str, Any] = field(default_factory=dict)


class MockMediaProvider(MediaProvider):
    """Mock capture provider.

    Tracks every call and every stream it hands out, and lets tests deny
    access, hold requests in flight, or end a screen share out-of-band.

    Example:
        provider = MockMediaProvider(deny_camera=True)
        with pytest.raises(MediaAccessDeniedError):
            await provider.request_camera()

        provider = MockMediaProvider(hold=True)
        task = asyncio.create_task(provider.request_camera())
        provider.release()  # let held requests resolve
    """

    def __init__(
        self,
        *,
        screen_capture_supported: bool = True,
        deny_camera: bool = False,
        deny_screen: bool = False,
        hold: bool = False,
    ) -> None:
        self.screen_capture_supported = screen_capture_supported
        self.deny_camera = deny_camera
        self.deny_screen = deny_screen
        self._gate = asyncio.Event()
        if not hold:
            self._gate.set()
        # Tracking
        self.calls: list[MockMediaCall] = []
        self.issued: list[MediaStream] = []

    @property
    def name(self) -> str:
        return "MockMediaProvider"

    def supports_screen_capture(self) -> bool:
        self.calls.append(MockMediaCall(method="supports_screen_capture"))
        return self.screen_capture_supported

    async def request_camera(self) -> MediaStream:
        self.calls.append(MockMediaCall(method="request_camera"))
        await self._gate.wait()
        if self.deny_camera:
            raise MediaAccessDeniedError(MediaKind.CAMERA, "Permission denied")
        return self._issue(MediaKind.CAMERA)

    async def request_screen_capture(self) -> MediaStream:
        self.calls.append(MockMediaCall(method="request_screen_capture"))
        if not self.screen_capture_supported:
            raise UnsupportedCapabilityError("Screen capture is not supported")
        await self._gate.wait()
        if self.deny_screen:
            raise MediaAccessDeniedError(MediaKind.SCREEN, "Permission denied")
        return self._issue(MediaKind.SCREEN)

    async def close(self) -> None:
        self._gate.set()
        self.calls.append(MockMediaCall(method="close"))

    # -------------------------------------------------------------------------
    # Test helpers
    # -------------------------------------------------------------------------

    def hold(self) -> None:
        """Keep subsequent requests in flight until ``release()``."""
        self._gate.clear()

    def release(self) -> None:
        """Let held requests resolve."""
        self._gate.set()

    def live_tracks(self, kind: MediaKind | None = None) -> list[MediaTrack]:
        """Every issued track that is still running."""
        return [
            track
            for stream in self.issued
            if kind is None or stream.kind == kind
            for track in stream.live_tracks
        ]

    def simulate_track_ended(self, stream: MediaStream | None = None) -> None:
        """End the first video track of *stream* (default: last screen stream)."""
        if stream is None:
            screens = [s for s in self.issued if s.kind == MediaKind.SCREEN]
            if not screens:
                raise RuntimeError("No screen-capture stream has been issued")
            stream = screens[-1]
        stream.video_tracks[0].end()

    def _issue(self, kind: MediaKind) -> MediaStream:
        stream = MediaStream(kind=kind)
        self.issued.append(stream)
        return stream
