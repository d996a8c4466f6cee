"""Mock audio level sampler for testing."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from meetkit.audio.base import AudioLevelSampler, AudioLevelSource


@dataclass
class MockSamplerCall:
    """Record of a call made to MockAudioLevelSampler."""

    method: str
    args: dict[str, Any] = field(default_factory=dict)


class MockLevelSource(AudioLevelSource):
    """Level source returning a settable (or scripted) level."""

    def __init__(self, participant_id: str, level: int = 0) -> None:
        self.participant_id = participant_id
        self.level = level
        self._script: list[int] = []
        self.sample_count = 0
        self.close_count = 0

    @property
    def closed(self) -> bool:
        return self.close_count > 0

    def script(self, levels: Iterable[int]) -> None:
        """Queue levels returned by the next samples, then fall back to ``level``."""
        self._script.extend(levels)

    def sample(self) -> int:
        self.sample_count += 1
        if self._script:
            return self._script.pop(0)
        return self.level

    def close(self) -> None:
        self.close_count += 1


class MockAudioLevelSampler(AudioLevelSampler):
    """Mock sampler with per-participant levels.

    Participants listed in *silent_ids* have no audio resource and get no
    source. Every source handed out is kept in ``sources`` so tests can
    check it was closed exactly once.

    Example:
        sampler = MockAudioLevelSampler(levels={"2": 80})
        detector = ActiveSpeakerDetector(store, sampler)
        detector.start()
        sampler.set_level("3", 90)
    """

    def __init__(
        self,
        levels: dict[str, int] | None = None,
        *,
        silent_ids: Iterable[str] = (),
        fail_ids: Iterable[str] = (),
    ) -> None:
        self._levels: dict[str, int] = dict(levels or {})
        self.silent_ids = set(silent_ids)
        self.fail_ids = set(fail_ids)
        # Tracking
        self.calls: list[MockSamplerCall] = []
        self.sources: list[MockLevelSource] = []

    @property
    def name(self) -> str:
        return "MockAudioLevelSampler"

    def open(self, participant_id: str) -> AudioLevelSource | None:
        self.calls.append(MockSamplerCall(method="open", args={"participant_id": participant_id}))
        if participant_id in self.silent_ids:
            return None
        source: MockLevelSource
        if participant_id in self.fail_ids:
            source = _FailingLevelSource(participant_id)
        else:
            source = MockLevelSource(participant_id, self._levels.get(participant_id, 0))
        self.sources.append(source)
        return source

    # -------------------------------------------------------------------------
    # Test helpers
    # -------------------------------------------------------------------------

    def set_level(self, participant_id: str, level: int) -> None:
        """Set the level for *participant_id*, including any open sources."""
        self._levels[participant_id] = level
        for source in self.open_sources(participant_id):
            source.level = level

    def open_sources(self, participant_id: str | None = None) -> list[MockLevelSource]:
        return [
            s
            for s in self.sources
            if not s.closed and (participant_id is None or s.participant_id == participant_id)
        ]


class _FailingLevelSource(MockLevelSource):
    def sample(self) -> int:
        self.sample_count += 1
        raise RuntimeError(f"Audio analysis failed for {self.participant_id}")
