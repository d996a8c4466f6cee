"""Exception hierarchy for meetkit."""

from __future__ import annotations

from meetkit.models.enums import MediaKind


class MeetKitError(Exception):
    """Base exception for all meetkit errors."""


class ParticipantNotFoundError(MeetKitError):
    """Participant id is not in the roster."""


class EmptyContentError(MeetKitError):
    """Chat message content is empty after trimming."""


class SessionClosedError(MeetKitError):
    """Action attempted on a session that has been closed."""


class MediaAccessDeniedError(MeetKitError):
    """A camera or screen-capture request was rejected or failed."""

    def __init__(self, kind: MediaKind, reason: str = "") -> None:
        self.kind = kind
        self.reason = reason
        super().__init__(f"{kind} access denied" + (f": {reason}" if reason else ""))


class UnsupportedCapabilityError(MeetKitError):
    """The requested capture capability is not available on this device."""
