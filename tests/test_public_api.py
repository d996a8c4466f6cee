"""Tests for public API surface."""

from __future__ import annotations

import meetkit


class TestPublicAPI:
    def test_version_string(self) -> None:
        assert isinstance(meetkit.__version__, str)
        assert meetkit.__version__ == "0.1.0"

    def test_all_names_importable(self) -> None:
        for name in meetkit.__all__:
            obj = getattr(meetkit, name)
            assert obj is not None, f"{name} is None"

    def test_core_classes_available(self) -> None:
        assert meetkit.MeetingSession is not None
        assert meetkit.SessionStore is not None
        assert meetkit.ActiveSpeakerDetector is not None
        assert meetkit.GestureInterpreter is not None
        assert meetkit.ControlVisibilityTimer is not None
        assert meetkit.MediaResourceManager is not None

    def test_subpackage_imports(self) -> None:
        from meetkit.audio import mock as audio_mock
        from meetkit.core import store
        from meetkit.media import base
        from meetkit.models import enums

        assert audio_mock is not None
        assert store is not None
        assert base is not None
        assert enums is not None

    def test_exception_classes(self) -> None:
        for exc in (
            meetkit.EmptyContentError,
            meetkit.MediaAccessDeniedError,
            meetkit.ParticipantNotFoundError,
            meetkit.SessionClosedError,
            meetkit.UnsupportedCapabilityError,
        ):
            assert issubclass(exc, meetkit.MeetKitError)
