"""Autocorrelation pitch estimation for single frames."""

from dataclasses import dataclass
from typing import Optional, Tuple

import librosa
import numpy as np

from ..core import AudioFrame
from ..core.constants import (
    SILENCE_RMS_THRESHOLD,
    CLIP_THRESHOLD,
    MIN_CORRELATION_LENGTH,
)
from .loudness import rms


@dataclass
class EstimatorConfig:
    """Configuration for the pitch estimator.

    Attributes:
        silence_threshold: RMS below which a frame is treated as silent (default: 0.01)
        clip_threshold: Edge samples louder than this are trimmed off (default: 0.2)
        min_correlation_length: Shortest trimmed buffer worth correlating;
            shorter trims fall back to the full frame (default: 3)
    """

    silence_threshold: float = SILENCE_RMS_THRESHOLD
    clip_threshold: float = CLIP_THRESHOLD
    min_correlation_length: int = MIN_CORRELATION_LENGTH


class PitchEstimator:
    """Estimates the fundamental frequency of one audio frame.

    Time-domain autocorrelation with edge trimming and parabolic peak
    refinement. Stateless: the same frame always gives the same result,
    and nothing from a frame is kept after `estimate` returns.
    """

    def __init__(self, config: Optional[EstimatorConfig] = None):
        self.config = config or EstimatorConfig()

        if self.config.silence_threshold < 0:
            raise ValueError("silence_threshold must be non-negative")
        if not 0 < self.config.clip_threshold <= 1:
            raise ValueError("clip_threshold must be in (0, 1]")
        if self.config.min_correlation_length < MIN_CORRELATION_LENGTH:
            raise ValueError(
                f"min_correlation_length must be at least {MIN_CORRELATION_LENGTH}"
            )

    def estimate(self, frame: AudioFrame) -> Optional[float]:
        """
        Estimate the fundamental frequency of a frame.

        Args:
            frame: Audio frame (validated on construction)

        Returns:
            Frequency in Hz, or None if the frame is silent or has no
            usable periodicity
        """
        samples = frame.samples

        if rms(samples) < self.config.silence_threshold:
            return None

        buffer = self._trim_edges(samples)
        correlation = librosa.autocorrelate(buffer)

        lag = self._find_period(correlation)
        if lag is None:
            return None

        return frame.sample_rate / lag

    def _trim_edges(self, samples: np.ndarray) -> np.ndarray:
        """
        Drop loud edge samples so the buffer starts and ends near a quiet point.

        The start is the first sample in the first half quieter than the
        clip threshold; the end is the last such sample in the second half
        (exclusive). Missing quiet points leave that edge untouched. If the
        trim leaves fewer than `min_correlation_length` samples, the full
        frame is used instead.
        """
        n = samples.size
        quiet = np.abs(samples) < self.config.clip_threshold

        head = np.flatnonzero(quiet[: n // 2])
        start = int(head[0]) if head.size else 0

        # Walk back from the last sample over (roughly) the second half
        tail = np.flatnonzero(quiet[n - 1 : n - (n + 1) // 2 : -1])
        end = n - 1 - int(tail[0]) if tail.size else n - 1

        if end - start < self.config.min_correlation_length:
            return samples
        return samples[start:end]

    @staticmethod
    def _find_period(correlation: np.ndarray) -> Optional[float]:
        """
        Locate the period lag in an autocorrelation sequence.

        Returns:
            Sub-sample lag of the strongest peak after the zero-lag lobe,
            or None if there is no such peak
        """
        size = correlation.size
        if size < MIN_CORRELATION_LENGTH:
            return None

        # End of the zero-lag lobe: first lag where the curve stops falling
        rising = np.flatnonzero(correlation[:-1] <= correlation[1:])
        if rising.size == 0:
            return None
        dip = int(rising[0])

        peak = dip + int(np.argmax(correlation[dip:]))
        if peak == 0 or correlation[peak] <= 0:
            return None

        lag = float(peak)
        if peak < size - 1:
            lag += _parabolic_offset(
                correlation[peak - 1], correlation[peak], correlation[peak + 1]
            )

        if not np.isfinite(lag) or lag <= 0:
            return None
        return lag


def _parabolic_offset(left: float, center: float, right: float) -> float:
    """Vertex offset of the parabola through three equally spaced points."""
    a = (left + right - 2 * center) / 2
    b = (right - left) / 2
    if a == 0:
        return 0.0
    return -b / (2 * a)


def estimate_pitch(
    samples: np.ndarray,
    sample_rate: float,
    config: Optional[EstimatorConfig] = None,
) -> Optional[float]:
    """Estimate the fundamental frequency of a raw sample block."""
    return PitchEstimator(config).estimate(AudioFrame(samples, sample_rate))


def correlation_profile(
    frame: AudioFrame,
    config: Optional[EstimatorConfig] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Trimmed buffer and its autocorrelation, for inspection and plotting.

    Returns:
        Tuple of (trimmed samples, autocorrelation by lag)
    """
    estimator = PitchEstimator(config)
    buffer = estimator._trim_edges(frame.samples)
    return buffer, librosa.autocorrelate(buffer)
