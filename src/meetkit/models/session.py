"""Session state snapshot and user-visible notices."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from meetkit.models.enums import NoticeKind, Orientation
from meetkit.models.message import Message
from meetkit.models.participant import Participant


class Notice(BaseModel):
    """A user-visible notice raised by a degraded feature."""

    model_config = ConfigDict(frozen=True)

    id: int
    kind: NoticeKind
    message: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class SessionState(BaseModel):
    """Immutable snapshot of everything a meeting session knows.

    The store replaces the whole snapshot on each mutation, so a reader
    holding a ``SessionState`` never sees a partially applied update.
    """

    model_config = ConfigDict(frozen=True)

    local_participant_id: str
    participants: tuple[Participant, ...] = ()
    messages: tuple[Message, ...] = ()
    pinned_participant_id: str | None = None
    zoom_scale: float = 1.0
    is_chat_open: bool = False
    show_controls: bool = True
    last_read_other_message_id: int = 0
    orientation: Orientation = Orientation.LANDSCAPE
    is_screen_share_supported: bool = False
    is_call_finished: bool = False
    notices: tuple[Notice, ...] = ()
    roster_version: int = 0

    @property
    def unread_count(self) -> int:
        """Messages from others newer than the read watermark."""
        return sum(
            1
            for m in self.messages
            if m.sender != self.local_participant_id and m.id > self.last_read_other_message_id
        )

    @property
    def active_speaker(self) -> Participant | None:
        return next((p for p in self.participants if p.is_active), None)

    @property
    def local_participant(self) -> Participant | None:
        return self.get_participant(self.local_participant_id)

    @property
    def visible_participants(self) -> tuple[Participant, ...]:
        """The pinned participant alone, or the whole roster in grid view."""
        if self.pinned_participant_id is None:
            return self.participants
        return tuple(p for p in self.participants if p.id == self.pinned_participant_id)

    def get_participant(self, participant_id: str) -> Participant | None:
        return next((p for p in self.participants if p.id == participant_id), None)

    def last_other_message_id(self) -> int:
        """Highest message id not sent by the local participant (0 if none)."""
        return max(
            (m.id for m in self.messages if m.sender != self.local_participant_id),
            default=0,
        )
