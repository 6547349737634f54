"""Audio file loading and framing."""

import numpy as np
import librosa
from pathlib import Path
from typing import Iterator, Optional, Tuple

from ..core import AudioFrame
from ..core.constants import DEFAULT_FRAME_SIZE, DEFAULT_HOP_LENGTH


class AudioLoader:
    """Loads audio files and slices them into analysis frames."""

    SUPPORTED_FORMATS = {".wav", ".mp3", ".flac", ".ogg", ".m4a", ".mp4"}

    def __init__(
        self,
        target_sr: Optional[int] = None,
        frame_size: int = DEFAULT_FRAME_SIZE,
        hop_length: int = DEFAULT_HOP_LENGTH,
        normalize: bool = False,
    ):
        """
        Initialize AudioLoader.

        Args:
            target_sr: Target sample rate for resampling (None keeps the file's rate)
            frame_size: Samples per analysis frame (power of two)
            hop_length: Samples between consecutive frame starts
            normalize: Peak-normalize audio if True. This changes the level
                the silence gate sees, so it is off by default.
        """
        if frame_size <= 0 or frame_size & (frame_size - 1):
            raise ValueError(f"Frame size must be a power of two: {frame_size}")
        if hop_length <= 0:
            raise ValueError(f"Hop length must be positive: {hop_length}")

        self.target_sr = target_sr
        self.frame_size = frame_size
        self.hop_length = hop_length
        self.normalize = normalize

    def load(self, path: str) -> Tuple[np.ndarray, int]:
        """
        Load audio file as mono.

        Args:
            path: Path to audio file

        Returns:
            Tuple of (audio array, sample rate)

        Raises:
            ValueError: If file format not supported
            FileNotFoundError: If file doesn't exist
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {self.SUPPORTED_FORMATS}"
            )

        audio, sr = librosa.load(str(path), sr=self.target_sr, mono=True)

        if self.normalize:
            audio = self._normalize(audio)

        return audio, int(sr)

    def _normalize(self, audio: np.ndarray) -> np.ndarray:
        """Normalize audio to [-1, 1] range using peak normalization."""
        peak = np.abs(audio).max() if audio.size else 0.0
        if peak > 0:
            audio = audio / peak
        return audio

    def split_frames(self, audio: np.ndarray, sr: int) -> Iterator[Tuple[float, AudioFrame]]:
        """
        Slice audio into full-length frames.

        Trailing samples that do not fill a whole frame are dropped.

        Yields:
            Tuples of (frame start time in seconds, frame)
        """
        if len(audio) < self.frame_size:
            return

        frames = librosa.util.frame(
            np.ascontiguousarray(audio),
            frame_length=self.frame_size,
            hop_length=self.hop_length,
            axis=0,
        )
        for i, block in enumerate(frames):
            yield i * self.hop_length / sr, AudioFrame(block, sr)

    def frames(self, path: str) -> Iterator[Tuple[float, AudioFrame]]:
        """Load a file and yield (time, frame) pairs."""
        audio, sr = self.load(path)
        yield from self.split_frames(audio, sr)

    def get_duration(self, audio: np.ndarray, sr: int) -> float:
        """Get duration in seconds."""
        return len(audio) / sr
