"""Signal level helpers."""

import numpy as np

from ..core.constants import VOLUME_SCALE


def rms(samples: np.ndarray) -> float:
    """Root-mean-square amplitude of a block of samples."""
    samples = np.asarray(samples, dtype=np.float64)
    if samples.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(samples**2)))


def volume_level(samples: np.ndarray, scale: float = VOLUME_SCALE) -> float:
    """Input level for a meter, in [0, 1]."""
    return min(rms(samples) * scale, 1.0)
