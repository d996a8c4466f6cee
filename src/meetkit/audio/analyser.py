"""Frequency-domain audio level analysis.

Reproduces the byte frequency data of a Web Audio ``AnalyserNode``:
the most recent ``fft_size`` samples are Blackman-windowed, transformed,
smoothed over time and mapped from the ``[min_decibels, max_decibels]``
range onto 0-255. The peak of those bins is the volume proxy used for
active-speaker detection.

Requires numpy: ``pip install meetkit[analyser]``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from meetkit.audio.audio_frame import AudioFrame
from meetkit.audio.base import AudioLevelSampler, AudioLevelSource

if TYPE_CHECKING:
    import numpy as np

logger = logging.getLogger("meetkit.audio")


def _pcm_to_float64(frame: AudioFrame) -> np.ndarray:
    """Decode int16 LE PCM to floats in [-1, 1], first channel only."""
    import numpy as np

    samples = np.frombuffer(frame.data, dtype="<i2")[:: frame.channels]
    return samples.astype(np.float64) / 32768.0


def _blackman(size: int) -> np.ndarray:
    import numpy as np

    i = np.arange(size)
    return 0.42 - 0.5 * np.cos(2 * np.pi * i / size) + 0.08 * np.cos(4 * np.pi * i / size)


class FrequencyAnalyser:
    """Rolling FFT analyser over pushed PCM frames.

    Parameters:
        fft_size: Window length in samples (power of two, 32-32768).
        min_decibels: Level mapped to byte 0.
        max_decibels: Level mapped to byte 255.
        smoothing_time_constant: Weight of the previous magnitude (0-1).
    """

    def __init__(
        self,
        *,
        fft_size: int = 32,
        min_decibels: float = -100.0,
        max_decibels: float = -30.0,
        smoothing_time_constant: float = 0.8,
    ) -> None:
        try:
            import numpy as np
        except ImportError as exc:
            raise ImportError(
                "numpy is required for FrequencyAnalyser. "
                "Install it with: pip install meetkit[analyser]"
            ) from exc

        if fft_size < 32 or fft_size > 32768 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_size must be a power of two in 32-32768, got {fft_size}")
        if min_decibels >= max_decibels:
            raise ValueError("min_decibels must be below max_decibels")
        if not 0.0 <= smoothing_time_constant <= 1.0:
            raise ValueError("smoothing_time_constant must be within [0, 1]")
        self._fft_size = fft_size
        self._min_db = min_decibels
        self._max_db = max_decibels
        self._smoothing = smoothing_time_constant
        self._window = _blackman(fft_size)
        self._buffer = np.zeros(fft_size)
        self._smoothed = np.zeros(fft_size // 2)

    @property
    def frequency_bin_count(self) -> int:
        return self._fft_size // 2

    def push(self, frame: AudioFrame) -> None:
        import numpy as np

        samples = _pcm_to_float64(frame)
        n = self._fft_size
        if len(samples) >= n:
            self._buffer = samples[-n:].copy()
        elif len(samples):
            self._buffer = np.concatenate((self._buffer[len(samples) :], samples))

    def get_byte_frequency_data(self) -> list[int]:
        """Compute smoothed byte-scaled magnitudes for each frequency bin."""
        import numpy as np

        spectrum = np.fft.rfft(self._buffer * self._window)
        spectrum = spectrum[: self.frequency_bin_count]
        magnitude = np.abs(spectrum) / self._fft_size
        self._smoothed = self._smoothing * self._smoothed + (1 - self._smoothing) * magnitude
        with np.errstate(divide="ignore"):
            db = 20 * np.log10(self._smoothed)
        scale = 255.0 / (self._max_db - self._min_db)
        levels = np.clip(np.floor(scale * (db - self._min_db)), 0, 255)
        return [int(b) for b in levels]

    def peak(self) -> int:
        """Highest byte frequency bin (the volume proxy)."""
        return max(self.get_byte_frequency_data(), default=0)

    def reset(self) -> None:
        import numpy as np

        self._buffer = np.zeros(self._fft_size)
        self._smoothed = np.zeros(self.frequency_bin_count)


class _AnalyserLevelSource(AudioLevelSource):
    def __init__(
        self, sampler: AnalyserAudioLevelSampler, participant_id: str, analyser: FrequencyAnalyser
    ) -> None:
        self._sampler = sampler
        self.participant_id = participant_id
        self.analyser = analyser
        self.closed = False

    def sample(self) -> int:
        if self.closed:
            return 0
        return self.analyser.peak()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._sampler._detach_source(self)


class AnalyserAudioLevelSampler(AudioLevelSampler):
    """Sampler that analyses PCM frames pushed per participant.

    A participant has an audio resource once ``attach()`` has been called
    for it; ``open()`` returns ``None`` for anyone else. Frames pushed with
    ``push()`` feed every open source for that participant.

    Example:
        sampler = AnalyserAudioLevelSampler()
        sampler.attach("2")
        source = sampler.open("2")
        sampler.push("2", AudioFrame(data=pcm_bytes))
        level = source.sample()
    """

    def __init__(
        self,
        *,
        fft_size: int = 32,
        min_decibels: float = -100.0,
        max_decibels: float = -30.0,
        smoothing_time_constant: float = 0.8,
    ) -> None:
        self._analyser_kwargs = {
            "fft_size": fft_size,
            "min_decibels": min_decibels,
            "max_decibels": max_decibels,
            "smoothing_time_constant": smoothing_time_constant,
        }
        self._attached: set[str] = set()
        self._sources: dict[str, list[_AnalyserLevelSource]] = {}

    @property
    def name(self) -> str:
        return "AnalyserAudioLevelSampler"

    def attach(self, participant_id: str) -> None:
        """Declare that *participant_id* has an audio resource."""
        self._attached.add(participant_id)

    def detach(self, participant_id: str) -> None:
        """Remove the audio resource and close any open sources for it."""
        self._attached.discard(participant_id)
        for source in list(self._sources.get(participant_id, [])):
            source.close()

    def open(self, participant_id: str) -> AudioLevelSource | None:
        if participant_id not in self._attached:
            return None
        source = _AnalyserLevelSource(
            self, participant_id, FrequencyAnalyser(**self._analyser_kwargs)
        )
        self._sources.setdefault(participant_id, []).append(source)
        return source

    def push(self, participant_id: str, frame: AudioFrame) -> None:
        """Feed a frame of *participant_id*'s audio to its open sources."""
        for source in self._sources.get(participant_id, []):
            source.analyser.push(frame)

    def open_source_count(self, participant_id: str | None = None) -> int:
        if participant_id is not None:
            return len(self._sources.get(participant_id, []))
        return sum(len(s) for s in self._sources.values())

    def _detach_source(self, source: _AnalyserLevelSource) -> None:
        sources = self._sources.get(source.participant_id)
        if not sources:
            return
        if source in sources:
            sources.remove(source)
        if not sources:
            del self._sources[source.participant_id]
        logger.debug("Closed audio level source", extra={"participant_id": source.participant_id})
