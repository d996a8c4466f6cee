"""Session-level event model."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from meetkit.models.enums import SessionEventType


class SessionEvent(BaseModel):
    """An event emitted by a meeting session to host-application handlers."""

    type: SessionEventType
    participant_id: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    data: dict[str, Any] = Field(default_factory=dict)
