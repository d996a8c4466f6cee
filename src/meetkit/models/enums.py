"""All string enums for meetkit."""

from __future__ import annotations

from enum import StrEnum, unique


@unique
class Orientation(StrEnum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


@unique
class GesturePhase(StrEnum):
    IDLE = "idle"
    PINCHING = "pinching"


@unique
class InteractionKind(StrEnum):
    """User interactions that reveal the floating controls."""

    POINTER_MOVE = "pointer_move"
    TOUCH_START = "touch_start"
    CLICK = "click"


@unique
class MediaKind(StrEnum):
    CAMERA = "camera"
    SCREEN = "screen"


@unique
class TrackState(StrEnum):
    LIVE = "live"
    ENDED = "ended"


@unique
class MediaToggleStatus(StrEnum):
    STARTED = "started"
    STOPPED = "stopped"
    DENIED = "denied"
    UNSUPPORTED = "unsupported"
    PENDING = "pending"
    STALE = "stale"


@unique
class NoticeKind(StrEnum):
    CAMERA_DENIED = "camera_denied"
    SCREEN_SHARE_DENIED = "screen_share_denied"


@unique
class SessionEventType(StrEnum):
    # Chat
    MESSAGE_SENT = "message_sent"
    MESSAGE_RECEIVED = "message_received"
    CHAT_OPENED = "chat_opened"
    CHAT_CLOSED = "chat_closed"
    # Local participant controls
    MUTE_CHANGED = "mute_changed"
    CAMERA_STARTED = "camera_started"
    CAMERA_STOPPED = "camera_stopped"
    SCREEN_SHARE_STARTED = "screen_share_started"
    SCREEN_SHARE_STOPPED = "screen_share_stopped"
    MEDIA_ACCESS_DENIED = "media_access_denied"
    # Derived from store transitions
    ACTIVE_SPEAKER_CHANGED = "active_speaker_changed"
    PINNED_CHANGED = "pinned_changed"
    # Call lifecycle
    CALL_ENDED = "call_ended"
    CALL_REJOINED = "call_rejoined"
