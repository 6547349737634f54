"""Core types and constants for Chromatic Tuner."""

from .frame import AudioFrame, InvalidFrameError
from .note import Pitch, NoteEstimate
from .constants import (
    PITCH_NAMES,
    DEFAULT_REFERENCE_A4,
    REFERENCE_PITCHES,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_FRAME_SIZE,
)

__all__ = [
    "AudioFrame",
    "InvalidFrameError",
    "Pitch",
    "NoteEstimate",
    "PITCH_NAMES",
    "DEFAULT_REFERENCE_A4",
    "REFERENCE_PITCHES",
    "DEFAULT_SAMPLE_RATE",
    "DEFAULT_FRAME_SIZE",
]
