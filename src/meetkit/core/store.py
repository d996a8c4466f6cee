"""SessionStore: the single source of truth for a meeting session."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any

from meetkit.core.errors import EmptyContentError, ParticipantNotFoundError
from meetkit.models.enums import NoticeKind, Orientation
from meetkit.models.message import Message
from meetkit.models.participant import Participant
from meetkit.models.session import Notice, SessionState

logger = logging.getLogger("meetkit.store")

StoreListener = Callable[[SessionState, SessionState], Any]
"""Listener called with ``(old_state, new_state)`` after each committed mutation."""


class SessionStore:
    """Owns the roster, the chat log and every session flag.

    Each operation builds a new frozen :class:`SessionState` and swaps it in
    with a single assignment, so readers see either the old or the new
    snapshot and nothing in between.

    **Concurrency note:** no operation awaits. Within a single asyncio event
    loop each mutation runs to completion before any other handler, which is
    what makes the swap atomic. Listeners run synchronously after the swap.
    """

    def __init__(
        self,
        local_participant_id: str = "1",
        participants: Iterable[Participant] = (),
        messages: Iterable[Message] = (),
        *,
        orientation: Orientation = Orientation.LANDSCAPE,
        zoom_bounds: tuple[float, float] = (1.0, 3.0),
    ) -> None:
        roster = tuple(participants)
        _validate_roster(roster)
        self._zoom_min, self._zoom_max = zoom_bounds
        self._state = SessionState(
            local_participant_id=local_participant_id,
            participants=roster,
            messages=tuple(messages),
            orientation=orientation,
            zoom_scale=self._zoom_min,
        )
        self._listeners: list[StoreListener] = []
        self._next_notice_id = 1

    # -- Queries --

    @property
    def state(self) -> SessionState:
        """The current snapshot."""
        return self._state

    def snapshot(self) -> SessionState:
        return self._state

    @property
    def local_participant_id(self) -> str:
        return self._state.local_participant_id

    @property
    def unread_count(self) -> int:
        return self._state.unread_count

    def get_participant(self, participant_id: str) -> Participant:
        """Return the participant or raise ``ParticipantNotFoundError``."""
        participant = self._state.get_participant(participant_id)
        if participant is None:
            raise ParticipantNotFoundError(f"Participant {participant_id} not in roster")
        return participant

    # -- Listeners --

    def add_listener(self, listener: StoreListener) -> StoreListener:
        self._listeners.append(listener)
        return listener

    def remove_listener(self, listener: StoreListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    # -- Participant flags --

    def set_muted(self, participant_id: str, muted: bool) -> None:
        self._update_participant(participant_id, is_muted=muted)

    def set_video_on(self, participant_id: str, on: bool, *, stream_id: str | None = None) -> None:
        self._update_participant(
            participant_id, is_video_on=on, video_stream_id=stream_id if on else None
        )

    def set_screen_share_on(
        self, participant_id: str, on: bool, *, stream_id: str | None = None
    ) -> None:
        self._update_participant(
            participant_id, is_screen_share_on=on, screen_stream_id=stream_id if on else None
        )

    def set_active_speaker(self, participant_id: str | None) -> None:
        """Flag *participant_id* as the only active speaker (``None`` clears all)."""
        if participant_id is not None:
            self.get_participant(participant_id)
        participants = tuple(
            p.model_copy(update={"is_active": p.id == participant_id})
            if p.is_active != (p.id == participant_id)
            else p
            for p in self._state.participants
        )
        self._commit(participants=participants)

    # -- Roster membership --

    def add_participant(self, participant: Participant) -> None:
        if self._state.get_participant(participant.id) is not None:
            raise ValueError(f"Participant {participant.id} already in roster")
        roster = self._state.participants + (participant,)
        if participant.is_active:
            roster = tuple(
                p.model_copy(update={"is_active": False}) if p is not participant else p
                for p in roster
            )
        self._commit(participants=roster, roster_version=self._state.roster_version + 1)

    def remove_participant(self, participant_id: str) -> None:
        self.get_participant(participant_id)
        roster = tuple(p for p in self._state.participants if p.id != participant_id)
        pinned = self._state.pinned_participant_id
        self._commit(
            participants=roster,
            pinned_participant_id=None if pinned == participant_id else pinned,
            roster_version=self._state.roster_version + 1,
        )

    def set_roster(self, participants: Iterable[Participant]) -> None:
        roster = tuple(participants)
        _validate_roster(roster)
        pinned = self._state.pinned_participant_id
        if pinned is not None and not any(p.id == pinned for p in roster):
            pinned = None
        self._commit(
            participants=roster,
            pinned_participant_id=pinned,
            roster_version=self._state.roster_version + 1,
        )

    # -- Chat --

    def append_message(
        self,
        sender: str,
        content: str,
        time: datetime | None = None,
        *,
        sender_name: str | None = None,
    ) -> int:
        """Append a message and return its id.

        Raises:
            EmptyContentError: *content* is empty or whitespace only. The
                log is left untouched.
            ParticipantNotFoundError: *sender* is unknown and no
                *sender_name* was given.
        """
        if not content.strip():
            raise EmptyContentError("Message content is empty")
        if sender_name is None:
            sender_name = self.get_participant(sender).name
        if time is None:
            time = datetime.now(UTC)
        elif time.tzinfo is None:
            time = time.replace(tzinfo=UTC)
        else:
            time = time.astimezone(UTC)

        messages = self._state.messages
        message_id = max((m.id for m in messages), default=0) + 1
        message = Message(
            id=message_id, sender=sender, sender_name=sender_name, content=content, time=time
        )
        self._commit(messages=messages + (message,))
        return message_id

    def mark_read(self) -> None:
        """Advance the read watermark to the newest message from others."""
        self._commit(last_read_other_message_id=self._state.last_other_message_id())

    # -- View flags --

    def set_pinned(self, participant_id: str | None) -> None:
        if participant_id is not None:
            self.get_participant(participant_id)
        self._commit(pinned_participant_id=participant_id)

    def set_zoom(self, scale: float) -> None:
        self._commit(zoom_scale=min(max(scale, self._zoom_min), self._zoom_max))

    def set_chat_open(self, open_: bool) -> None:
        self._commit(is_chat_open=open_)

    def set_controls_visible(self, visible: bool) -> None:
        self._commit(show_controls=visible)

    def set_orientation(self, orientation: Orientation) -> None:
        self._commit(orientation=orientation)

    def set_screen_share_supported(self, supported: bool) -> None:
        self._commit(is_screen_share_supported=supported)

    def set_call_finished(self, finished: bool) -> None:
        self._commit(is_call_finished=finished)

    # -- Notices --

    def push_notice(self, kind: NoticeKind, message: str) -> Notice:
        """Append a notice. Ids are never reused, even after a dismissal."""
        notice = Notice(id=self._next_notice_id, kind=kind, message=message)
        self._next_notice_id += 1
        self._commit(notices=self._state.notices + (notice,))
        return notice

    def dismiss_notice(self, notice_id: int) -> bool:
        """Remove a notice. Returns True if it existed."""
        notices = tuple(n for n in self._state.notices if n.id != notice_id)
        if len(notices) == len(self._state.notices):
            return False
        self._commit(notices=notices)
        return True

    # -- Internal helpers --

    def _update_participant(self, participant_id: str, **changes: Any) -> None:
        self.get_participant(participant_id)
        participants = tuple(
            p.model_copy(update=changes) if p.id == participant_id else p
            for p in self._state.participants
        )
        self._commit(participants=participants)

    def _commit(self, **changes: Any) -> None:
        old = self._state
        new = old.model_copy(update=changes)
        if new == old:
            return
        self._state = new
        for listener in list(self._listeners):
            try:
                listener(old, new)
            except Exception:
                logger.exception("Store listener failed", extra={"listener": repr(listener)})


def _validate_roster(roster: tuple[Participant, ...]) -> None:
    ids = [p.id for p in roster]
    if len(ids) != len(set(ids)):
        raise ValueError("Roster contains duplicate participant ids")
    if sum(1 for p in roster if p.is_active) > 1:
        raise ValueError("At most one participant may be active")
