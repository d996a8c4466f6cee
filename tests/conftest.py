"""Shared test fixtures and helpers."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

import pytest

from meetkit.audio.mock import MockAudioLevelSampler
from meetkit.core.store import SessionStore
from meetkit.media.mock import MockMediaProvider
from meetkit.models.config import SessionConfig
from meetkit.models.gesture import TouchPoint
from meetkit.models.participant import Participant


@pytest.fixture
def advance() -> Callable[[int], Coroutine[Any, Any, None]]:
    """Yield control to let pending tasks run without real delay.

    await advance()       # 5 yields (default)
    await advance(10)     # 10 yields for heavier workloads
    """

    async def _advance(n: int = 5) -> None:
        for _ in range(n):
            await asyncio.sleep(0)

    return _advance


def make_roster(*names: str) -> list[Participant]:
    """Participants with ids "1", "2", ... in order; "1" is the local participant."""
    return [Participant(id=str(i), name=name) for i, name in enumerate(names, start=1)]


@pytest.fixture
def roster() -> list[Participant]:
    return make_roster("You", "John Doe", "Jane Smith")


@pytest.fixture
def store(roster: list[Participant]) -> SessionStore:
    return SessionStore("1", roster)


@pytest.fixture
def sampler() -> MockAudioLevelSampler:
    return MockAudioLevelSampler()


@pytest.fixture
def provider() -> MockMediaProvider:
    return MockMediaProvider()


@pytest.fixture
def fast_config() -> SessionConfig:
    """Config with short timers so tests run quickly."""
    return SessionConfig(speaker_sample_interval=0.01, controls_hide_delay=0.05)


def pinch(distance: float) -> list[TouchPoint]:
    """Two touch points *distance* apart on the x axis."""
    return [TouchPoint(0.0, 0.0), TouchPoint(distance, 0.0)]
