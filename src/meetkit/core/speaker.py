"""ActiveSpeakerDetector: periodic audio level sampling per remote participant."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from meetkit.audio.base import AudioLevelSampler, AudioLevelSource
from meetkit.core.store import SessionStore
from meetkit.models.session import SessionState

logger = logging.getLogger("meetkit.speaker")


class ActiveSpeakerDetector:
    """Flags the remote participant whose audio level crosses a threshold.

    One sampling task per remote participant reads its level source every
    *interval* seconds. A level strictly above *threshold* makes that
    participant the exclusive active speaker. The last sample above the
    threshold wins; there is no hysteresis.

    Pipelines are rebuilt whenever the roster membership changes
    (``SessionState.roster_version``) and torn down on ``close()``. Each
    level source is closed exactly once.
    """

    def __init__(
        self,
        store: SessionStore,
        sampler: AudioLevelSampler,
        *,
        threshold: int = 50,
        interval: float = 0.2,
        exclude: Iterable[str] | None = None,
    ) -> None:
        self._store = store
        self._sampler = sampler
        self._threshold = threshold
        self._interval = interval
        self._exclude = (
            set(exclude) if exclude is not None else {store.local_participant_id}
        )
        self._sources: dict[str, AudioLevelSource] = {}
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def monitored_ids(self) -> list[str]:
        """Participants that currently have a sampling pipeline."""
        return list(self._sources)

    def start(self) -> None:
        """Build pipelines for the current roster and follow roster changes."""
        if self._running:
            return
        self._build()
        self._running = True
        self._store.add_listener(self._on_store_change)

    async def close(self) -> None:
        """Cancel every sampling task and release every level source."""
        if not self._running:
            return
        self._running = False
        self._store.remove_listener(self._on_store_change)
        tasks = list(self._tasks.values())
        self._teardown()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def sample_once(self, participant_id: str) -> int | None:
        """Run one detection tick for *participant_id*.

        Returns:
            The sampled level, or ``None`` if the participant has no
            pipeline or the sample failed.
        """
        source = self._sources.get(participant_id)
        if source is None:
            return None
        try:
            level = source.sample()
        except Exception:
            logger.exception(
                "Audio level sample failed", extra={"participant_id": participant_id}
            )
            return None
        if level > self._threshold:
            current = self._store.state.active_speaker
            if current is None or current.id != participant_id:
                logger.debug("Active speaker -> %s (level=%d)", participant_id, level)
            self._store.set_active_speaker(participant_id)
        return level

    # -- Internal --

    def _on_store_change(self, old: SessionState, new: SessionState) -> None:
        if old.roster_version != new.roster_version:
            logger.debug("Roster changed, rebuilding audio pipelines")
            self._teardown()
            self._build()

    def _build(self) -> None:
        loop = asyncio.get_running_loop()
        for participant in self._store.state.participants:
            if participant.id in self._exclude:
                continue
            source = self._sampler.open(participant.id)
            if source is None:
                logger.debug("No audio resource for %s, skipping", participant.id)
                continue
            self._sources[participant.id] = source
            self._tasks[participant.id] = loop.create_task(
                self._run(participant.id), name=f"speaker_sampler:{participant.id}"
            )

    def _teardown(self) -> None:
        for task in self._tasks.values():
            task.cancel()
        self._tasks.clear()
        sources, self._sources = self._sources, {}
        for participant_id, source in sources.items():
            try:
                source.close()
            except Exception:
                logger.exception(
                    "Failed to close audio level source", extra={"participant_id": participant_id}
                )

    async def _run(self, participant_id: str) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.sample_once(participant_id)
