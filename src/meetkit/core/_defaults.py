"""Default mock roster and seed chat used when a session starts."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from meetkit.models.participant import Participant

_REMOTE_NAMES = [
    "John Doe",
    "Jane Smith",
    "Mike Johnson",
    "Sarah Wilson",
    "Alex Chen",
    "Emma Rodriguez",
    "David Kim",
    "Angelina Jolie",
    "Brad Pitt",
    "Tom Hanks",
    "Meryl Streep",
]


def default_roster(local_id: str = "1", local_name: str = "You") -> list[Participant]:
    """Local participant first, then eleven remotes; John Doe starts active."""
    roster = [Participant(id=local_id, name=local_name)]
    next_id = 2
    for name in _REMOTE_NAMES:
        while str(next_id) == local_id:
            next_id += 1
        roster.append(Participant(id=str(next_id), name=name, is_active=name == "John Doe"))
        next_id += 1
    return roster


def seed_messages(roster: list[Participant], local_id: str) -> list[tuple[str, str, datetime]]:
    """Three opening messages as ``(sender_id, content, time)`` tuples."""
    now = datetime.now(UTC)
    by_name = {p.name: p.id for p in roster}
    seeds = [
        (
            by_name.get("John Doe"),
            "Hey everyone, is the meeting starting soon?",
            now - timedelta(minutes=5),
        ),
        (
            by_name.get("Jane Smith"),
            "Yes, I'm here and ready!",
            now - timedelta(minutes=2),
        ),
        (local_id, "Great, let's begin the meeting.", now),
    ]
    return [(sender, content, time) for sender, content, time in seeds if sender is not None]
