"""meetkit -- Active-speaker detection from raw PCM frames.

Feeds synthetic 16-bit PCM into an AnalyserAudioLevelSampler and prints a
text level meter per remote participant while the detector picks the
active speaker. The loud participant moves around every second.

Prerequisites:
    pip install meetkit[analyser]

Run with:
    uv run python examples/active_speaker_meter.py
"""

from __future__ import annotations

import asyncio
import logging
import math
import struct

from meetkit import (
    AnalyserAudioLevelSampler,
    AudioFrame,
    MeetingSession,
    Participant,
    SessionConfig,
)

logging.basicConfig(level=logging.WARNING)

SAMPLE_RATE = 16000
FRAME_SAMPLES = 320  # 20ms

PARTICIPANTS = [
    Participant(id="1", name="You"),
    Participant(id="2", name="John Doe"),
    Participant(id="3", name="Jane Smith"),
    Participant(id="4", name="Mike Johnson"),
]


def _tone(amplitude: int, freq: float = 440.0) -> AudioFrame:
    samples = [
        int(amplitude * math.sin(2 * math.pi * freq * i / SAMPLE_RATE))
        for i in range(FRAME_SAMPLES)
    ]
    return AudioFrame(data=struct.pack(f"<{FRAME_SAMPLES}h", *samples))


def _meter(level: int, width: int = 32) -> str:
    filled = level * width // 255
    return "[" + "#" * filled + "." * (width - filled) + "]"


async def main() -> None:
    sampler = AnalyserAudioLevelSampler()
    for participant in PARTICIPANTS[1:]:
        sampler.attach(participant.id)

    config = SessionConfig(speaker_sample_interval=0.1)
    async with MeetingSession(config, audio=sampler, participants=PARTICIPANTS) as session:
        for second, loud_id in enumerate(["2", "3", "4", "3"]):
            for _ in range(10):
                for participant in PARTICIPANTS[1:]:
                    amplitude = 8000 if participant.id == loud_id else 2
                    sampler.push(participant.id, _tone(amplitude))
                await asyncio.sleep(0.1)

            print(f"t={second + 1}s")
            for participant in PARTICIPANTS[1:]:
                level = session.speaker_detector.sample_once(participant.id) or 0
                print(f"  {participant.name:<14} {_meter(level)} {level:3d}")
            speaker = session.state.active_speaker
            print(f"  active speaker: {speaker.name if speaker else '-'}")


if __name__ == "__main__":
    asyncio.run(main())
