"""Chromatic Tuner - Real-time pitch estimation and note mapping.

Architecture Layers:
    1. core/        - Frames, note identities, constants
    2. input/       - Audio frames from files and microphones
    3. analysis/    - Pitch estimation and signal level
    4. tuning/      - Note table, frequency to note mapping, tuning status
    5. acquisition/ - Frame-by-frame tuner loop
    6. synthesis/   - Reference tone generation and playback
"""

__version__ = "0.1.0"

# Core types
from .core import AudioFrame, InvalidFrameError, Pitch, NoteEstimate

# Input layer
from .input import AudioLoader, MicrophoneSource, FrameAssembler

# Analysis layer
from .analysis import PitchEstimator, EstimatorConfig, estimate_pitch

# Tuning layer
from .tuning import NoteTable, NoteMapper, map_to_note, TuningStatus

# Acquisition layer
from .acquisition import TunerSession, TunerReading

# Synthesis layer
from .synthesis import ToneSynthesizer, TonePlayer, write_tone

__all__ = [
    # Core
    "AudioFrame",
    "InvalidFrameError",
    "Pitch",
    "NoteEstimate",
    # Input
    "AudioLoader",
    "MicrophoneSource",
    "FrameAssembler",
    # Analysis
    "PitchEstimator",
    "EstimatorConfig",
    "estimate_pitch",
    # Tuning
    "NoteTable",
    "NoteMapper",
    "map_to_note",
    "TuningStatus",
    # Acquisition
    "TunerSession",
    "TunerReading",
    # Synthesis
    "ToneSynthesizer",
    "TonePlayer",
    "write_tone",
]
