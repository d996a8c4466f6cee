"""Session configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class SessionConfig(BaseModel):
    """Tunables for a meeting session.

    Attributes:
        local_participant_id: Roster id of the local participant.
        local_participant_name: Display name used for locally sent messages.
        speaker_threshold: Peak byte-frequency level (0-255) above which a
            remote participant is considered speaking.
        speaker_sample_interval: Seconds between audio level samples.
        controls_hide_delay: Seconds of inactivity before the floating
            controls hide.
        min_zoom: Lower bound of the published zoom scale.
        max_zoom: Upper bound of the published zoom scale.
        pin_scale_threshold: Raw pinch scale above which the active speaker
            is pinned.
        unpin_scale_threshold: Raw pinch scale below which any pin is
            cleared.
        viewport_width: Initial viewport width, used for orientation.
        viewport_height: Initial viewport height, used for orientation.
    """

    local_participant_id: str = "1"
    local_participant_name: str = "You"
    speaker_threshold: int = Field(default=50, ge=0, le=255)
    speaker_sample_interval: float = Field(default=0.2, gt=0)
    controls_hide_delay: float = Field(default=3.0, gt=0)
    min_zoom: float = Field(default=1.0, gt=0)
    max_zoom: float = Field(default=3.0, gt=0)
    pin_scale_threshold: float = Field(default=1.2, gt=0)
    unpin_scale_threshold: float = Field(default=0.8, gt=0)
    viewport_width: int = Field(default=1280, gt=0)
    viewport_height: int = Field(default=720, gt=0)

    @model_validator(mode="after")
    def _check_ranges(self) -> SessionConfig:
        if self.min_zoom > self.max_zoom:
            raise ValueError("min_zoom must not exceed max_zoom")
        if self.unpin_scale_threshold >= self.pin_scale_threshold:
            raise ValueError("unpin_scale_threshold must be below pin_scale_threshold")
        return self
