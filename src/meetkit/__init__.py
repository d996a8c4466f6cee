"""meetkit - Pure async Python core for a simulated video meeting."""

from meetkit._version import __version__
from meetkit.audio import (
    AnalyserAudioLevelSampler,
    AudioFrame,
    AudioLevelSampler,
    AudioLevelSource,
    FrequencyAnalyser,
    MockAudioLevelSampler,
)
from meetkit.core.controls import ControlVisibilityTimer
from meetkit.core.errors import (
    EmptyContentError,
    MediaAccessDeniedError,
    MeetKitError,
    ParticipantNotFoundError,
    SessionClosedError,
    UnsupportedCapabilityError,
)
from meetkit.core.gesture import GestureInterpreter
from meetkit.core.media import MediaResourceManager
from meetkit.core.session import MeetingSession, SessionEventHandler, orientation_for
from meetkit.core.speaker import ActiveSpeakerDetector
from meetkit.core.store import SessionStore, StoreListener
from meetkit.media import (
    MediaProvider,
    MediaStream,
    MediaToggleResult,
    MediaTrack,
    MockMediaProvider,
)
from meetkit.models.config import SessionConfig
from meetkit.models.enums import (
    GesturePhase,
    InteractionKind,
    MediaKind,
    MediaToggleStatus,
    NoticeKind,
    Orientation,
    SessionEventType,
    TrackState,
)
from meetkit.models.gesture import PinchState, TouchPoint
from meetkit.models.message import Message
from meetkit.models.participant import Participant
from meetkit.models.session import Notice, SessionState
from meetkit.models.session_event import SessionEvent

__all__ = [
    "__version__",
    # Core
    "MeetingSession",
    "SessionEventHandler",
    "SessionStore",
    "StoreListener",
    "ActiveSpeakerDetector",
    "ControlVisibilityTimer",
    "GestureInterpreter",
    "MediaResourceManager",
    "orientation_for",
    # Errors
    "MeetKitError",
    "EmptyContentError",
    "MediaAccessDeniedError",
    "ParticipantNotFoundError",
    "SessionClosedError",
    "UnsupportedCapabilityError",
    # Models
    "Message",
    "Notice",
    "Participant",
    "PinchState",
    "SessionConfig",
    "SessionEvent",
    "SessionState",
    "TouchPoint",
    # Enums
    "GesturePhase",
    "InteractionKind",
    "MediaKind",
    "MediaToggleStatus",
    "NoticeKind",
    "Orientation",
    "SessionEventType",
    "TrackState",
    # Media
    "MediaProvider",
    "MediaStream",
    "MediaToggleResult",
    "MediaTrack",
    "MockMediaProvider",
    # Audio
    "AnalyserAudioLevelSampler",
    "AudioFrame",
    "AudioLevelSampler",
    "AudioLevelSource",
    "FrequencyAnalyser",
    "MockAudioLevelSampler",
]
