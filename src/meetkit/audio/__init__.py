"""Audio level sampling for active-speaker detection."""

from meetkit.audio.analyser import AnalyserAudioLevelSampler, FrequencyAnalyser
from meetkit.audio.audio_frame import AudioFrame
from meetkit.audio.base import AudioLevelSampler, AudioLevelSource
from meetkit.audio.mock import MockAudioLevelSampler, MockLevelSource, MockSamplerCall

__all__ = [
    "AnalyserAudioLevelSampler",
    "AudioFrame",
    "AudioLevelSampler",
    "AudioLevelSource",
    "FrequencyAnalyser",
    "MockAudioLevelSampler",
    "MockLevelSource",
    "MockSamplerCall",
]
