"""AudioFrame data model for audio level analysis."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class AudioFrame:
    """A frame of 16-bit little-endian PCM audio from one participant."""

    data: bytes
    """Raw audio bytes (PCM)."""

    sample_rate: int = 16000
    """Sample rate in Hz."""

    channels: int = 1
    """Number of audio channels. Stereo frames are analysed on the first channel."""

    timestamp_ms: float | None = None
    """Timestamp in milliseconds (relative to session start)."""

    def __post_init__(self) -> None:
        if not isinstance(self.data, bytes):
            raise ValueError("AudioFrame.data must be bytes")
        if self.sample_rate <= 0 or self.sample_rate > 192_000:
            raise ValueError(f"sample_rate must be between 1 and 192000, got {self.sample_rate}")
        if self.channels not in (1, 2):
            raise ValueError(f"channels must be 1 or 2, got {self.channels}")
        frame_align = 2 * self.channels
        if len(self.data) % frame_align != 0:
            raise ValueError(
                f"data length ({len(self.data)}) must be divisible by "
                f"sample_width * channels ({frame_align})"
            )

    @property
    def num_samples(self) -> int:
        """Number of samples per channel."""
        return len(self.data) // (2 * self.channels)
