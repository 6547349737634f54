"""Input layer - Audio frames from files and live devices."""

from .loader import AudioLoader
from .microphone import MicrophoneSource, FrameAssembler

__all__ = [
    "AudioLoader",
    "MicrophoneSource",
    "FrameAssembler",
]
