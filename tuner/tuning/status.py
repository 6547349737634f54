"""Tuning status classification for the meter."""

from enum import Enum
from typing import Optional

from ..core.constants import IN_TUNE_CENTS, ALMOST_CENTS


class TuningStatus(Enum):
    """How far a note is from pitch."""

    IN_TUNE = "In Tune!"
    ALMOST = "Almost"
    SHARP = "Too Sharp"
    FLAT = "Too Flat"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_cents(
        cls,
        cents: Optional[float],
        in_tune: float = IN_TUNE_CENTS,
        almost: float = ALMOST_CENTS,
    ) -> Optional["TuningStatus"]:
        """Classify a cents deviation. None stays None."""
        if cents is None:
            return None
        deviation = abs(cents)
        if deviation <= in_tune:
            return cls.IN_TUNE
        if deviation <= almost:
            return cls.ALMOST
        return cls.SHARP if cents > 0 else cls.FLAT
