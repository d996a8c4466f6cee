"""Tests for data models, enums and configuration."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from meetkit.core.errors import MediaAccessDeniedError
from meetkit.models.config import SessionConfig
from meetkit.models.enums import (
    InteractionKind,
    MediaKind,
    MediaToggleStatus,
    Orientation,
    SessionEventType,
)
from meetkit.models.gesture import PinchState, TouchPoint
from meetkit.models.message import Message
from meetkit.models.participant import Participant
from meetkit.models.session import SessionState
from meetkit.models.session_event import SessionEvent


class TestEnums:
    def test_values(self) -> None:
        assert Orientation.PORTRAIT == "portrait"
        assert InteractionKind.TOUCH_START == "touch_start"
        assert MediaToggleStatus.UNSUPPORTED == "unsupported"

    def test_session_event_count(self) -> None:
        assert len(SessionEventType) == 14

    def test_invalid_raises(self) -> None:
        with pytest.raises(ValueError):
            MediaKind("microphone")


class TestParticipant:
    def test_defaults(self) -> None:
        p = Participant(id="2", name="John Doe")
        assert p.is_active is False
        assert p.is_muted is False
        assert p.is_video_on is False
        assert p.video_stream_id is None

    def test_frozen(self) -> None:
        p = Participant(id="2", name="John Doe")
        with pytest.raises(ValidationError):
            p.is_muted = True  # type: ignore[misc]

    def test_missing_name(self) -> None:
        with pytest.raises(ValidationError):
            Participant(id="2")  # type: ignore[call-arg]


class TestMessage:
    def test_default_time_is_utc(self) -> None:
        msg = Message(id=1, sender="2", sender_name="John Doe", content="hi")
        assert msg.time.tzinfo is not None
        assert msg.time <= datetime.now(UTC)

    def test_json_round_trip(self) -> None:
        msg = Message(id=7, sender="3", sender_name="Jane Smith", content="yes")
        assert Message.model_validate_json(msg.model_dump_json()) == msg


class TestSessionState:
    def _state(self, **kwargs: object) -> SessionState:
        participants = (
            Participant(id="1", name="You"),
            Participant(id="2", name="John Doe", is_active=True),
        )
        messages = (
            Message(id=1, sender="2", sender_name="John Doe", content="a"),
            Message(id=2, sender="1", sender_name="You", content="b"),
            Message(id=3, sender="2", sender_name="John Doe", content="c"),
        )
        return SessionState(
            local_participant_id="1", participants=participants, messages=messages, **kwargs
        )

    def test_unread_count(self) -> None:
        assert self._state().unread_count == 2
        assert self._state(last_read_other_message_id=1).unread_count == 1
        assert self._state(last_read_other_message_id=3).unread_count == 0

    def test_last_other_message_id(self) -> None:
        assert self._state().last_other_message_id() == 3

    def test_lookups(self) -> None:
        state = self._state()
        assert state.active_speaker is not None
        assert state.active_speaker.id == "2"
        assert state.local_participant is not None
        assert state.local_participant.name == "You"
        assert state.get_participant("9") is None

    def test_visible_participants_when_pinned(self) -> None:
        state = self._state(pinned_participant_id="2")
        assert [p.id for p in state.visible_participants] == ["2"]


class TestGestureTypes:
    def test_touch_point_is_hashable(self) -> None:
        assert len({TouchPoint(1, 2), TouchPoint(1, 2)}) == 1

    def test_pinch_state_default_scale(self) -> None:
        assert PinchState(initial_distance=120).scale == 1.0


class TestSessionEvent:
    def test_defaults(self) -> None:
        event = SessionEvent(type=SessionEventType.CALL_ENDED)
        assert event.participant_id is None
        assert event.data == {}
        assert event.timestamp.tzinfo is not None

    def test_type_from_string(self) -> None:
        event = SessionEvent(type="chat_opened")  # type: ignore[arg-type]
        assert event.type == SessionEventType.CHAT_OPENED


class TestSessionConfig:
    def test_defaults(self) -> None:
        cfg = SessionConfig()
        assert cfg.local_participant_id == "1"
        assert cfg.speaker_threshold == 50
        assert cfg.speaker_sample_interval == 0.2
        assert cfg.controls_hide_delay == 3.0
        assert (cfg.min_zoom, cfg.max_zoom) == (1.0, 3.0)
        assert (cfg.unpin_scale_threshold, cfg.pin_scale_threshold) == (0.8, 1.2)

    def test_threshold_range(self) -> None:
        with pytest.raises(ValidationError):
            SessionConfig(speaker_threshold=300)

    def test_positive_delays(self) -> None:
        with pytest.raises(ValidationError):
            SessionConfig(controls_hide_delay=0)

    def test_zoom_bounds_ordered(self) -> None:
        with pytest.raises(ValidationError, match="min_zoom"):
            SessionConfig(min_zoom=4.0)

    def test_pin_thresholds_ordered(self) -> None:
        with pytest.raises(ValidationError, match="unpin_scale_threshold"):
            SessionConfig(pin_scale_threshold=1.0, unpin_scale_threshold=1.1)


class TestErrors:
    def test_access_denied_message(self) -> None:
        err = MediaAccessDeniedError(MediaKind.CAMERA, "Permission denied")
        assert str(err) == "camera access denied: Permission denied"
        assert err.kind == MediaKind.CAMERA
        assert str(MediaAccessDeniedError(MediaKind.SCREEN)) == "screen access denied"
