"""Tests for SessionStore."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from meetkit.core.errors import EmptyContentError, ParticipantNotFoundError
from meetkit.core.store import SessionStore
from meetkit.models.enums import NoticeKind, Orientation
from meetkit.models.participant import Participant
from meetkit.models.session import SessionState
from tests.conftest import make_roster


class TestAppendMessage:
    def test_ids_are_sequential_from_empty_log(self, store: SessionStore) -> None:
        ids = [store.append_message("1", f"msg {n}") for n in range(5)]
        assert ids == [1, 2, 3, 4, 5]
        assert [m.id for m in store.state.messages] == ids

    def test_ids_follow_current_max(self, store: SessionStore) -> None:
        store.append_message("2", "first")
        store.append_message("3", "second")
        assert store.append_message("1", "third") == 3

    def test_empty_content_rejected(self, store: SessionStore) -> None:
        store.append_message("1", "hello")
        before = store.state
        for blank in ("", "   ", "\n\t"):
            with pytest.raises(EmptyContentError):
                store.append_message("1", blank)
        assert store.state is before
        assert len(store.state.messages) == 1

    def test_rejected_send_does_not_consume_an_id(self, store: SessionStore) -> None:
        store.append_message("1", "a")
        with pytest.raises(EmptyContentError):
            store.append_message("1", " ")
        assert store.append_message("1", "b") == 2

    def test_sender_name_taken_from_roster(self, store: SessionStore) -> None:
        store.append_message("2", "hi")
        message = store.state.messages[-1]
        assert message.sender == "2"
        assert message.sender_name == "John Doe"

    def test_unknown_sender_requires_name(self, store: SessionStore) -> None:
        with pytest.raises(ParticipantNotFoundError):
            store.append_message("99", "hi")
        store.append_message("99", "hi", sender_name="Guest")
        assert store.state.messages[-1].sender_name == "Guest"

    def test_time_defaults_to_utc_now(self, store: SessionStore) -> None:
        before = datetime.now(UTC)
        store.append_message("1", "hi")
        stamp = store.state.messages[-1].time
        assert stamp.tzinfo is not None
        assert before <= stamp <= datetime.now(UTC)

    def test_time_normalised_to_utc(self, store: SessionStore) -> None:
        local = datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        store.append_message("1", "aware", local)
        store.append_message("1", "naive", datetime(2024, 1, 1, 12, 0))
        aware, naive = store.state.messages
        assert aware.time == datetime(2024, 1, 1, 10, 0, tzinfo=UTC)
        assert naive.time == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


class TestUnreadCount:
    def test_own_messages_never_unread(self, store: SessionStore) -> None:
        store.append_message("1", "hi")
        assert store.unread_count == 0

    def test_remote_messages_unread_until_marked(self, store: SessionStore) -> None:
        store.append_message("2", "one")
        store.append_message("3", "two")
        assert store.unread_count == 2
        store.mark_read()
        assert store.unread_count == 0
        assert store.state.last_read_other_message_id == 2

    def test_increments_per_remote_message_after_mark(self, store: SessionStore) -> None:
        store.append_message("2", "one")
        store.mark_read()
        for expected in range(1, 4):
            store.append_message("3", f"m{expected}")
            store.append_message("1", "mine")
            assert store.unread_count == expected

    def test_mark_read_with_no_remote_messages(self, store: SessionStore) -> None:
        store.append_message("1", "only me")
        store.mark_read()
        assert store.state.last_read_other_message_id == 0


class TestActiveSpeaker:
    def test_exclusive_selection(self, store: SessionStore) -> None:
        store.set_active_speaker("2")
        store.set_active_speaker("3")
        active = [p.id for p in store.state.participants if p.is_active]
        assert active == ["3"]

    def test_clear(self, store: SessionStore) -> None:
        store.set_active_speaker("2")
        store.set_active_speaker(None)
        assert store.state.active_speaker is None

    def test_unknown_id(self, store: SessionStore) -> None:
        with pytest.raises(ParticipantNotFoundError):
            store.set_active_speaker("42")

    def test_roster_with_two_active_rejected(self) -> None:
        roster = [
            Participant(id="1", name="A", is_active=True),
            Participant(id="2", name="B", is_active=True),
        ]
        with pytest.raises(ValueError):
            SessionStore("1", roster)


class TestParticipantFlags:
    def test_set_muted(self, store: SessionStore) -> None:
        store.set_muted("1", True)
        assert store.get_participant("1").is_muted is True

    def test_video_stream_binding_cleared_when_off(self, store: SessionStore) -> None:
        store.set_video_on("1", True, stream_id="cam-1")
        assert store.get_participant("1").video_stream_id == "cam-1"
        store.set_video_on("1", False, stream_id="ignored")
        participant = store.get_participant("1")
        assert participant.is_video_on is False
        assert participant.video_stream_id is None

    def test_screen_share_flag(self, store: SessionStore) -> None:
        store.set_screen_share_on("1", True, stream_id="scr")
        assert store.get_participant("1").screen_stream_id == "scr"

    def test_unknown_participant(self, store: SessionStore) -> None:
        with pytest.raises(ParticipantNotFoundError):
            store.set_muted("nope", True)


class TestViewFlags:
    def test_zoom_clamped(self, store: SessionStore) -> None:
        store.set_zoom(5.0)
        assert store.state.zoom_scale == 3.0
        store.set_zoom(0.2)
        assert store.state.zoom_scale == 1.0
        store.set_zoom(1.7)
        assert store.state.zoom_scale == 1.7

    def test_pin_requires_existing_participant(self, store: SessionStore) -> None:
        store.set_pinned("2")
        assert store.state.pinned_participant_id == "2"
        with pytest.raises(ParticipantNotFoundError):
            store.set_pinned("77")
        store.set_pinned(None)
        assert store.state.pinned_participant_id is None

    def test_visible_participants(self, store: SessionStore) -> None:
        assert len(store.state.visible_participants) == 3
        store.set_pinned("3")
        assert [p.id for p in store.state.visible_participants] == ["3"]

    def test_simple_flags(self, store: SessionStore) -> None:
        store.set_chat_open(True)
        store.set_controls_visible(False)
        store.set_orientation(Orientation.PORTRAIT)
        store.set_screen_share_supported(True)
        store.set_call_finished(True)
        state = store.state
        assert state.is_chat_open is True
        assert state.show_controls is False
        assert state.orientation == Orientation.PORTRAIT
        assert state.is_screen_share_supported is True
        assert state.is_call_finished is True


class TestRosterMembership:
    def test_add_participant_bumps_version(self, store: SessionStore) -> None:
        version = store.state.roster_version
        store.add_participant(Participant(id="4", name="Mike Johnson"))
        assert store.state.roster_version == version + 1
        assert store.get_participant("4").name == "Mike Johnson"

    def test_add_duplicate_rejected(self, store: SessionStore) -> None:
        with pytest.raises(ValueError):
            store.add_participant(Participant(id="2", name="Again"))

    def test_add_active_participant_keeps_exclusivity(self, store: SessionStore) -> None:
        store.set_active_speaker("2")
        store.add_participant(Participant(id="4", name="Loud", is_active=True))
        assert [p.id for p in store.state.participants if p.is_active] == ["4"]

    def test_remove_pinned_participant_clears_pin(self, store: SessionStore) -> None:
        store.set_pinned("3")
        store.remove_participant("3")
        assert store.state.pinned_participant_id is None
        assert store.state.get_participant("3") is None

    def test_set_roster_keeps_valid_pin(self, store: SessionStore) -> None:
        store.set_pinned("2")
        store.set_roster(make_roster("You", "John Doe"))
        assert store.state.pinned_participant_id == "2"
        store.set_roster(make_roster("You"))
        assert store.state.pinned_participant_id is None


class TestNotices:
    def test_push_and_dismiss(self, store: SessionStore) -> None:
        first = store.push_notice(NoticeKind.CAMERA_DENIED, "no camera")
        second = store.push_notice(NoticeKind.SCREEN_SHARE_DENIED, "no screen")
        assert (first.id, second.id) == (1, 2)
        assert store.dismiss_notice(first.id) is True
        assert store.dismiss_notice(first.id) is False
        assert [n.id for n in store.state.notices] == [2]

    def test_ids_not_reused_after_dismissal(self, store: SessionStore) -> None:
        first = store.push_notice(NoticeKind.CAMERA_DENIED, "no camera")
        store.dismiss_notice(first.id)
        second = store.push_notice(NoticeKind.CAMERA_DENIED, "still no camera")
        assert second.id != first.id
        assert store.dismiss_notice(first.id) is False
        assert [n.id for n in store.state.notices] == [second.id]


class TestListeners:
    def test_listener_receives_old_and_new(self, store: SessionStore) -> None:
        seen: list[tuple[SessionState, SessionState]] = []
        store.add_listener(lambda old, new: seen.append((old, new)))
        store.set_chat_open(True)
        assert len(seen) == 1
        old, new = seen[0]
        assert old.is_chat_open is False
        assert new.is_chat_open is True
        assert new is store.state

    def test_noop_mutation_does_not_notify(self, store: SessionStore) -> None:
        calls: list[int] = []
        store.add_listener(lambda old, new: calls.append(1))
        store.set_chat_open(False)
        store.set_pinned(None)
        assert calls == []

    def test_failing_listener_does_not_break_mutation(self, store: SessionStore) -> None:
        calls: list[str] = []

        def bad(old: SessionState, new: SessionState) -> None:
            raise RuntimeError("boom")

        store.add_listener(bad)
        store.add_listener(lambda old, new: calls.append("ok"))
        store.set_muted("1", True)
        assert store.get_participant("1").is_muted is True
        assert calls == ["ok"]

    def test_remove_listener(self, store: SessionStore) -> None:
        calls: list[int] = []

        def listener(old: SessionState, new: SessionState) -> None:
            calls.append(1)

        store.add_listener(listener)
        store.remove_listener(listener)
        store.remove_listener(listener)
        store.set_chat_open(True)
        assert calls == []

    def test_snapshots_are_immutable(self, store: SessionStore) -> None:
        snapshot = store.snapshot()
        store.set_active_speaker("2")
        assert snapshot.active_speaker is None
        with pytest.raises(Exception):
            snapshot.is_chat_open = True  # type: ignore[misc]
