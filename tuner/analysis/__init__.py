"""Analysis layer - Frame-level signal analysis.

This layer extracts measurements from raw audio frames:
- Fundamental frequency (autocorrelation pitch estimation)
- Signal level (RMS, meter volume)
"""

from .pitch import PitchEstimator, EstimatorConfig, estimate_pitch, correlation_profile
from .loudness import rms, volume_level

__all__ = [
    "PitchEstimator",
    "EstimatorConfig",
    "estimate_pitch",
    "correlation_profile",
    "rms",
    "volume_level",
]
