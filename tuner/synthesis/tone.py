"""Reference tone synthesis."""

import math
from pathlib import Path
from typing import Optional, Union

import numpy as np
import soundfile as sf

from ..core import Pitch
from ..core.constants import (
    DEFAULT_SAMPLE_RATE,
    DEFAULT_TONE_DURATION,
    TONE_GAIN,
    TONE_FLOOR_GAIN,
)
from ..tuning import NoteTable


class ToneSynthesizer:
    """Generates sine reference tones with an exponential decay envelope."""

    def __init__(
        self,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        gain: float = TONE_GAIN,
        floor_gain: float = TONE_FLOOR_GAIN,
        table: Optional[NoteTable] = None,
    ):
        """
        Initialize ToneSynthesizer.

        Args:
            sample_rate: Output sample rate in Hz
            gain: Starting amplitude (fraction of full scale)
            floor_gain: Amplitude reached at the end of the tone
            table: Note table used to resolve note names (default: A4=440)
        """
        if sample_rate <= 0:
            raise ValueError(f"Invalid sample rate: {sample_rate}")
        if not 0 < floor_gain < gain <= 1:
            raise ValueError(
                f"Gains must satisfy 0 < floor_gain < gain <= 1, got {floor_gain}, {gain}"
            )
        self.sample_rate = sample_rate
        self.gain = gain
        self.floor_gain = floor_gain
        self.table = table if table is not None else NoteTable.for_reference()

    def envelope(self, n_samples: int) -> np.ndarray:
        """Exponential ramp from `gain` down to `floor_gain` over n_samples."""
        if n_samples <= 1:
            return np.full(max(n_samples, 0), self.gain)
        progress = np.arange(n_samples) / (n_samples - 1)
        return self.gain * (self.floor_gain / self.gain) ** progress

    def synthesize(
        self,
        frequency: float,
        duration: float = DEFAULT_TONE_DURATION,
    ) -> np.ndarray:
        """
        Render a decaying sine tone.

        Args:
            frequency: Tone frequency in Hz
            duration: Tone length in seconds

        Returns:
            Mono float32 waveform
        """
        if not math.isfinite(frequency) or frequency <= 0:
            raise ValueError(f"Frequency must be positive: {frequency}")
        if frequency >= self.sample_rate / 2:
            raise ValueError(
                f"Frequency {frequency} Hz is at or above Nyquist "
                f"for {self.sample_rate} Hz output"
            )
        if not math.isfinite(duration) or duration <= 0:
            raise ValueError(f"Duration must be positive: {duration}")

        n_samples = int(round(duration * self.sample_rate))
        if n_samples == 0:
            raise ValueError(
                f"Duration {duration}s is shorter than one sample at {self.sample_rate} Hz"
            )
        t = np.arange(n_samples) / self.sample_rate
        wave = np.sin(2 * np.pi * frequency * t) * self.envelope(n_samples)
        return wave.astype(np.float32)

    def synthesize_note(
        self,
        note: Union[Pitch, str],
        duration: float = DEFAULT_TONE_DURATION,
    ) -> np.ndarray:
        """Render the reference tone for a note ('E2', Pitch, ...)."""
        return self.synthesize(self.table.frequency_of(note), duration)


def write_tone(
    path: Union[str, Path],
    wave: np.ndarray,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
) -> Path:
    """
    Write a synthesized tone to a WAV file.

    Args:
        path: Output file path
        wave: Waveform from ToneSynthesizer
        sample_rate: Sample rate of the waveform

    Returns:
        Path of the written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    sf.write(str(path), wave, sample_rate)
    return path
