"""Chat message model."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """A chat message in the session log.

    ``id`` is assigned by the store and is strictly increasing.
    ``sender`` is the participant id; ``sender_name`` is the display name
    captured when the message was appended.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    sender: str
    sender_name: str
    content: str
    time: datetime = Field(default_factory=lambda: datetime.now(UTC))
