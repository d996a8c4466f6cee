"""Audio level sampling interface used by active-speaker detection."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AudioLevelSource(ABC):
    """One participant's audio analysis pipeline.

    ``sample()`` returns the current peak of the byte frequency data,
    an integer in 0-255. ``close()`` releases the underlying audio
    resource; the detector calls it exactly once per source.
    """

    @abstractmethod
    def sample(self) -> int:
        """Return the current peak level (0-255)."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the audio resource behind this source."""
        ...


class AudioLevelSampler(ABC):
    """Abstract factory for per-participant audio level sources.

    Implement this to plug in real audio analysis. The library ships with
    ``AnalyserAudioLevelSampler`` (frame-fed FFT analysis) and
    ``MockAudioLevelSampler`` for tests.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Sampler name for identification."""
        ...

    @abstractmethod
    def open(self, participant_id: str) -> AudioLevelSource | None:
        """Open a level source for *participant_id*.

        Returns:
            The source, or ``None`` when the participant has no audio
            resource available. Callers skip such participants.
        """
        ...
