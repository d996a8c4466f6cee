"""MeetingSession: wires the store, media, speaker, gesture and control components."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Iterable, Sequence
from datetime import datetime
from typing import Any

from meetkit.audio.base import AudioLevelSampler
from meetkit.audio.mock import MockAudioLevelSampler
from meetkit.core._defaults import default_roster, seed_messages
from meetkit.core.controls import ControlVisibilityTimer
from meetkit.core.errors import EmptyContentError, SessionClosedError
from meetkit.core.gesture import GestureInterpreter
from meetkit.core.media import MediaResourceManager
from meetkit.core.speaker import ActiveSpeakerDetector
from meetkit.core.store import SessionStore
from meetkit.media.base import MediaProvider, MediaStream, MediaToggleResult
from meetkit.media.mock import MockMediaProvider
from meetkit.models.config import SessionConfig
from meetkit.models.enums import (
    InteractionKind,
    MediaKind,
    MediaToggleStatus,
    Orientation,
    SessionEventType,
)
from meetkit.models.gesture import TouchPoint
from meetkit.models.message import Message
from meetkit.models.participant import Participant
from meetkit.models.session import SessionState
from meetkit.models.session_event import SessionEvent

logger = logging.getLogger("meetkit.session")

SessionEventHandler = Callable[[SessionEvent], Coroutine[Any, Any, None]]
SeedMessage = tuple[str, str, datetime]

_TOGGLE_EVENTS: dict[tuple[MediaKind, MediaToggleStatus], SessionEventType] = {
    (MediaKind.CAMERA, MediaToggleStatus.STARTED): SessionEventType.CAMERA_STARTED,
    (MediaKind.CAMERA, MediaToggleStatus.STOPPED): SessionEventType.CAMERA_STOPPED,
    (MediaKind.CAMERA, MediaToggleStatus.DENIED): SessionEventType.MEDIA_ACCESS_DENIED,
    (MediaKind.SCREEN, MediaToggleStatus.STARTED): SessionEventType.SCREEN_SHARE_STARTED,
    (MediaKind.SCREEN, MediaToggleStatus.STOPPED): SessionEventType.SCREEN_SHARE_STOPPED,
    (MediaKind.SCREEN, MediaToggleStatus.DENIED): SessionEventType.MEDIA_ACCESS_DENIED,
}


def orientation_for(width: float, height: float) -> Orientation:
    """Portrait when the viewport is taller than it is wide."""
    return Orientation.PORTRAIT if height > width else Orientation.LANDSCAPE


class MeetingSession:
    """A simulated video meeting driven entirely by local state."""

    def __init__(
        self,
        config: SessionConfig | None = None,
        *,
        media: MediaProvider | None = None,
        audio: AudioLevelSampler | None = None,
        participants: Iterable[Participant] | None = None,
        messages: Iterable[SeedMessage] | None = None,
    ) -> None:
        """Initialise the session.

        Args:
            config: Session tunables. Defaults to ``SessionConfig()``.
            media: Capture provider for camera and screen share. Defaults
                to ``MockMediaProvider``.
            audio: Audio level sampler for speaker detection. Defaults to
                a silent ``MockAudioLevelSampler``.
            participants: Initial roster. Defaults to the built-in mock
                roster of twelve participants.
            messages: Seed chat as ``(sender_id, content, time)`` tuples.
                Defaults to three opening messages. Seed messages start
                out read.
        """
        self._config = cfg = config or SessionConfig()
        local_id = cfg.local_participant_id
        roster = (
            list(participants)
            if participants is not None
            else default_roster(local_id, cfg.local_participant_name)
        )
        self._store = SessionStore(
            local_id,
            roster,
            orientation=orientation_for(cfg.viewport_width, cfg.viewport_height),
            zoom_bounds=(cfg.min_zoom, cfg.max_zoom),
        )
        seeds = messages if messages is not None else seed_messages(roster, local_id)
        for sender, content, time in seeds:
            self._store.append_message(sender, content, time)
        self._store.mark_read()

        self._media_provider = media or MockMediaProvider()
        self._media = MediaResourceManager(
            self._store,
            self._media_provider,
            on_screen_share_ended=self._on_screen_share_ended,
        )
        self._speaker = ActiveSpeakerDetector(
            self._store,
            audio or MockAudioLevelSampler(),
            threshold=cfg.speaker_threshold,
            interval=cfg.speaker_sample_interval,
            exclude={local_id},
        )
        self._gestures = GestureInterpreter(
            self._store,
            min_zoom=cfg.min_zoom,
            max_zoom=cfg.max_zoom,
            pin_threshold=cfg.pin_scale_threshold,
            unpin_threshold=cfg.unpin_scale_threshold,
        )
        self._controls = ControlVisibilityTimer(self._store, hide_delay=cfg.controls_hide_delay)
        self._event_handlers: list[tuple[str, SessionEventHandler]] = []
        self._pending_emits: set[asyncio.Task[None]] = set()
        self._started = False
        self._closed = False
        self._store.add_listener(self._on_store_change)

    # -- Components --

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def store(self) -> SessionStore:
        """The session state store (rendering reads snapshots from here)."""
        return self._store

    @property
    def state(self) -> SessionState:
        return self._store.state

    @property
    def unread_count(self) -> int:
        return self._store.unread_count

    @property
    def media(self) -> MediaResourceManager:
        return self._media

    @property
    def speaker_detector(self) -> ActiveSpeakerDetector:
        return self._speaker

    @property
    def gestures(self) -> GestureInterpreter:
        return self._gestures

    @property
    def controls(self) -> ControlVisibilityTimer:
        return self._controls

    @property
    def is_closed(self) -> bool:
        return self._closed

    # -- Lifecycle --

    async def start(self) -> None:
        """Probe capabilities, arm the controls timer and start speaker detection."""
        self._ensure_open()
        if self._started:
            return
        self._started = True
        await self._media.probe()
        self._controls.start()
        self._speaker.start()
        logger.info(
            "Session started",
            extra={
                "participants": len(self._store.state.participants),
                "screen_share_supported": self._store.state.is_screen_share_supported,
            },
        )

    async def close(self) -> None:
        """Tear down every timer, sampling task and media resource."""
        if self._closed:
            return
        self._closed = True
        self._controls.close()
        await self._speaker.close()
        await self._media.close()
        await self._media_provider.close()
        self._store.remove_listener(self._on_store_change)
        if self._pending_emits:
            await asyncio.gather(*self._pending_emits, return_exceptions=True)
        logger.info("Session closed")

    async def __aenter__(self) -> MeetingSession:
        await self.start()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    def on(self, event_type: str) -> Callable[..., Any]:
        """Decorator to register a session event handler filtered by type."""

        def decorator(fn: SessionEventHandler) -> SessionEventHandler:
            self._event_handlers.append((event_type, fn))
            return fn

        return decorator

    # -- Chat --

    def send_message(self, content: str) -> Message | None:
        """Send a chat message as the local participant.

        Blank or whitespace-only content is ignored and returns ``None``.
        """
        self._ensure_open()
        try:
            self._store.append_message(self._store.local_participant_id, content)
        except EmptyContentError:
            logger.debug("Ignoring empty chat message")
            return None
        message = self._after_append()
        self._emit_nowait(
            SessionEventType.MESSAGE_SENT,
            participant_id=message.sender,
            data={"message_id": message.id},
        )
        return message

    def receive_message(self, sender_id: str, content: str) -> Message | None:
        """Append a chat message from another participant."""
        self._ensure_open()
        try:
            self._store.append_message(sender_id, content)
        except EmptyContentError:
            logger.debug("Ignoring empty chat message from %s", sender_id)
            return None
        message = self._after_append()
        self._emit_nowait(
            SessionEventType.MESSAGE_RECEIVED,
            participant_id=sender_id,
            data={"message_id": message.id},
        )
        return message

    def open_chat(self) -> None:
        self._ensure_open()
        was_open = self._store.state.is_chat_open
        self._store.set_chat_open(True)
        self._store.mark_read()
        if not was_open:
            self._emit_nowait(SessionEventType.CHAT_OPENED)

    def close_chat(self) -> None:
        self._ensure_open()
        if not self._store.state.is_chat_open:
            return
        self._store.set_chat_open(False)
        self._emit_nowait(SessionEventType.CHAT_CLOSED)

    def toggle_chat(self) -> bool:
        """Open or close the chat panel; returns the new open state."""
        if self._store.state.is_chat_open:
            self.close_chat()
        else:
            self.open_chat()
        return self._store.state.is_chat_open

    def mark_read(self) -> None:
        self._store.mark_read()

    # -- Local participant controls --

    def toggle_mute(self) -> bool:
        """Flip the local participant's mute flag; returns the new value."""
        self._ensure_open()
        local = self._store.get_participant(self._store.local_participant_id)
        muted = not local.is_muted
        self._store.set_muted(local.id, muted)
        self._emit_nowait(
            SessionEventType.MUTE_CHANGED, participant_id=local.id, data={"muted": muted}
        )
        return muted

    async def toggle_video(self) -> MediaToggleResult:
        self._ensure_open()
        result = await self._media.toggle_video()
        await self._emit_toggle(result)
        return result

    async def toggle_screen_share(self) -> MediaToggleResult:
        self._ensure_open()
        result = await self._media.toggle_screen_share()
        await self._emit_toggle(result)
        return result

    def dismiss_notice(self, notice_id: int) -> bool:
        return self._store.dismiss_notice(notice_id)

    # -- Device and pointer events --

    def handle_interaction(self, kind: InteractionKind = InteractionKind.POINTER_MOVE) -> None:
        """Pointer move, touch start or click anywhere in the meeting view."""
        self._controls.interaction(kind)

    def handle_touch_start(self, points: Sequence[TouchPoint]) -> None:
        if self._store.state.is_call_finished:
            return
        self._gestures.touch_start(points)

    def handle_touch_move(self, points: Sequence[TouchPoint]) -> None:
        if self._store.state.is_call_finished:
            return
        self._gestures.touch_move(points)

    def handle_touch_end(self, points: Sequence[TouchPoint] = ()) -> None:
        if self._store.state.is_call_finished:
            return
        self._gestures.touch_end(points)

    def handle_touch_cancel(self) -> None:
        if self._store.state.is_call_finished:
            return
        self._gestures.touch_cancel()

    def handle_resize(self, width: float, height: float) -> Orientation:
        """Re-derive orientation from the viewport size."""
        orientation = orientation_for(width, height)
        self._store.set_orientation(orientation)
        return orientation

    # -- Call lifecycle --

    async def end_call(self) -> None:
        """Leave the call: release media and stop detection and the controls timer."""
        self._ensure_open()
        if self._store.state.is_call_finished:
            return
        self._media.release_all()
        self._controls.close()
        await self._speaker.close()
        self._gestures.touch_cancel()
        self._store.set_call_finished(True)
        logger.info("Call ended")
        await self._emit(SessionEventType.CALL_ENDED)

    async def rejoin(self) -> None:
        """Return to the meeting after ``end_call()``."""
        self._ensure_open()
        if not self._store.state.is_call_finished:
            return
        self._store.set_call_finished(False)
        if self._started:
            self._controls.start()
            self._speaker.start()
        logger.info("Call rejoined")
        await self._emit(SessionEventType.CALL_REJOINED)

    # -- Internal helpers --

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError("Session is closed")

    def _after_append(self) -> Message:
        if self._store.state.is_chat_open:
            self._store.mark_read()
        return self._store.state.messages[-1]

    def _on_screen_share_ended(self, stream: MediaStream) -> None:
        self._emit_nowait(
            SessionEventType.SCREEN_SHARE_STOPPED,
            participant_id=self._store.local_participant_id,
            data={"stream_id": stream.id, "reason": "ended"},
        )

    def _on_store_change(self, old: SessionState, new: SessionState) -> None:
        old_speaker, new_speaker = old.active_speaker, new.active_speaker
        old_id = old_speaker.id if old_speaker else None
        new_id = new_speaker.id if new_speaker else None
        if old_id != new_id:
            self._emit_nowait(
                SessionEventType.ACTIVE_SPEAKER_CHANGED,
                participant_id=new_id,
                data={"previous": old_id},
            )
        if old.pinned_participant_id != new.pinned_participant_id:
            self._emit_nowait(
                SessionEventType.PINNED_CHANGED,
                participant_id=new.pinned_participant_id,
                data={"previous": old.pinned_participant_id},
            )

    async def _emit_toggle(self, result: MediaToggleResult) -> None:
        event_type = _TOGGLE_EVENTS.get((result.kind, result.status))
        if event_type is None:
            return
        data: dict[str, Any] = {"kind": str(result.kind)}
        if result.stream is not None:
            data["stream_id"] = result.stream.id
        if result.error is not None:
            data["error"] = str(result.error)
        await self._emit(
            event_type, participant_id=self._store.local_participant_id, data=data
        )

    async def _emit(
        self,
        event_type: SessionEventType,
        participant_id: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Deliver a session event to handlers registered for *event_type*."""
        event = SessionEvent(type=event_type, participant_id=participant_id, data=data or {})
        for filter_type, handler in self._event_handlers:
            if filter_type == event.type:
                try:
                    await handler(event)
                except Exception:
                    logger.exception(
                        "Session event handler failed", extra={"event_type": str(event.type)}
                    )

    def _emit_nowait(
        self,
        event_type: SessionEventType,
        participant_id: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> None:
        """Schedule ``_emit`` from synchronous code paths.

        Without a running event loop the event is dropped; the state change
        that produced it has already been committed.
        """
        if not any(filter_type == event_type for filter_type, _ in self._event_handlers):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, dropping %s event", event_type)
            return
        task = loop.create_task(
            self._emit(event_type, participant_id=participant_id, data=data),
            name=f"session_event:{event_type}",
        )
        self._pending_emits.add(task)
        task.add_done_callback(self._pending_emits.discard)
