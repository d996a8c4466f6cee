"""Media capture providers."""

from meetkit.media.base import (
    MediaProvider,
    MediaStream,
    MediaToggleResult,
    MediaTrack,
    TrackEndedCallback,
)
from meetkit.media.mock import MockMediaCall, MockMediaProvider

__all__ = [
    "MediaProvider",
    "MediaStream",
    "MediaToggleResult",
    "MediaTrack",
    "MockMediaCall",
    "MockMediaProvider",
    "TrackEndedCallback",
]
