"""meetkit quickstart: a simulated meeting with chat, camera and pinch-to-pin.

Run with:
    uv run python examples/quickstart.py
"""

from __future__ import annotations

import asyncio

from meetkit import (
    MeetingSession,
    MockAudioLevelSampler,
    MockMediaProvider,
    SessionConfig,
    SessionEvent,
    SessionEventType,
    TouchPoint,
)


async def main() -> None:
    # --- Setup -----------------------------------------------------------
    # Jane Smith (id "3") is loud enough to become the active speaker.
    audio = MockAudioLevelSampler(levels={"3": 120})
    media = MockMediaProvider()
    config = SessionConfig(speaker_sample_interval=0.05, controls_hide_delay=0.5)

    async with MeetingSession(config, media=media, audio=audio) as session:

        @session.on(SessionEventType.ACTIVE_SPEAKER_CHANGED)
        async def on_speaker(event: SessionEvent) -> None:
            speaker = session.state.get_participant(event.participant_id or "")
            print(f"Active speaker -> {speaker.name if speaker else 'nobody'}")

        @session.on(SessionEventType.CAMERA_STARTED)
        async def on_camera(event: SessionEvent) -> None:
            print(f"Camera started (stream {event.data['stream_id'][:8]})")

        state = session.state
        print(f"Joined with {len(state.participants)} participants")
        for message in state.messages:
            print(f"  [{message.sender_name}] {message.content}")

        # --- Chat ----------------------------------------------------------
        session.send_message("Hi all, sharing my camera now.")
        session.send_message("   ")  # blank messages are ignored
        session.receive_message("2", "Sounds good!")
        print(f"Unread messages: {session.unread_count}")
        session.open_chat()
        print(f"Unread after opening chat: {session.unread_count}")

        # --- Media ---------------------------------------------------------
        result = await session.toggle_video()
        print(f"toggle_video -> {result.status}")

        # --- Speaker detection ---------------------------------------------
        await asyncio.sleep(0.2)

        # --- Pinch to pin the active speaker -------------------------------
        session.handle_touch_start([TouchPoint(100, 300), TouchPoint(200, 300)])
        session.handle_touch_move([TouchPoint(50, 300), TouchPoint(250, 300)])
        pinned = session.state.pinned_participant_id
        print(f"Zoom {session.state.zoom_scale:.1f}x, pinned participant: {pinned}")
        session.handle_touch_end()
        state = session.state
        pinned = state.pinned_participant_id
        print(f"After release: zoom {state.zoom_scale:.1f}x, pinned: {pinned}")

        # --- Controls auto-hide --------------------------------------------
        await asyncio.sleep(0.6)
        print(f"Controls visible after inactivity: {session.state.show_controls}")

        # --- Leave ---------------------------------------------------------
        await session.end_call()
        print(f"Call finished: {session.state.is_call_finished}")

    print(f"Live camera tracks after close: {len(media.live_tracks())}")


if __name__ == "__main__":
    asyncio.run(main())
