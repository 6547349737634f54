"""Audio frame - one block of samples handed to the pitch estimator."""

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np


class InvalidFrameError(ValueError):
    """Raised when a frame cannot be analysed (empty, bad sample rate, NaN/Inf)."""


@dataclass(frozen=True, eq=False)
class AudioFrame:
    """A fixed block of mono samples in [-1, 1] plus its sample rate.

    The samples are copied into a read-only float64 array on construction,
    so callers may reuse their capture buffer as soon as the frame exists.
    """

    samples: np.ndarray
    sample_rate: float

    def __init__(self, samples: Union[np.ndarray, Sequence[float]], sample_rate: float):
        data = np.array(samples, dtype=np.float64, copy=True)

        if data.ndim != 1:
            raise InvalidFrameError(
                f"Frame must be one-dimensional, got shape {data.shape}"
            )
        if data.size == 0:
            raise InvalidFrameError("Frame contains no samples")
        if not np.isfinite(sample_rate) or sample_rate <= 0:
            raise InvalidFrameError(f"Invalid sample rate: {sample_rate}")
        if not np.all(np.isfinite(data)):
            raise InvalidFrameError("Frame contains NaN or infinite samples")

        data.setflags(write=False)
        object.__setattr__(self, "samples", data)
        object.__setattr__(self, "sample_rate", float(sample_rate))

    def __len__(self) -> int:
        return int(self.samples.size)

    @property
    def duration(self) -> float:
        """Frame duration in seconds."""
        return self.samples.size / self.sample_rate
