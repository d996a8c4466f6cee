"""Participant model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Participant(BaseModel):
    """A member of the call roster, local or remote.

    ``video_stream_id`` and ``screen_stream_id`` identify the stream bound
    for display. The live stream handle itself is owned by the media
    manager and never stored here.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    is_active: bool = False
    is_muted: bool = False
    is_video_on: bool = False
    is_screen_share_on: bool = False
    video_stream_id: str | None = None
    screen_stream_id: str | None = None
