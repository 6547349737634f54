"""Frequency to note mapping."""

import math
from typing import Optional

from ..core import Pitch, NoteEstimate
from ..core.constants import (
    CENTS_PER_SEMITONE,
    MIN_FREQUENCY,
    MAX_FREQUENCY,
)
from .table import NoteTable, A4_INDEX


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class NoteMapper:
    """Maps a measured frequency to the nearest note and its cents deviation."""

    def __init__(
        self,
        table: Optional[NoteTable] = None,
        min_frequency: float = MIN_FREQUENCY,
        max_frequency: float = MAX_FREQUENCY,
    ):
        """
        Initialize NoteMapper.

        Args:
            table: Note table holding the reference pitch (default: A4=440)
            min_frequency: Lowest frequency that maps to a note
            max_frequency: Highest frequency that maps to a note
        """
        if not 0 < min_frequency < max_frequency:
            raise ValueError(
                f"Invalid frequency range: [{min_frequency}, {max_frequency}]"
            )
        self.table = table if table is not None else NoteTable.for_reference()
        self.min_frequency = min_frequency
        self.max_frequency = max_frequency

    @property
    def reference_a4(self) -> float:
        return self.table.reference_a4

    def map(self, frequency: Optional[float]) -> Optional[NoteEstimate]:
        """
        Find the nearest note to a frequency.

        Args:
            frequency: Frequency in Hz (None is accepted and maps to None)

        Returns:
            NoteEstimate, or None if the frequency is missing or outside
            the representable range
        """
        if frequency is None or not math.isfinite(frequency):
            return None
        if not self.min_frequency <= frequency <= self.max_frequency:
            return None

        semitones = self.table.semitones_from_a4(frequency)
        rounded = _round_half_up(semitones)
        cents = _round_half_up((semitones - rounded) * CENTS_PER_SEMITONE)

        # +50 after rounding means the next semitone up is as close
        if cents >= CENTS_PER_SEMITONE // 2:
            rounded += 1
            cents -= CENTS_PER_SEMITONE

        pitch = Pitch(rounded + A4_INDEX)
        return NoteEstimate(
            pitch=pitch,
            cents=cents,
            frequency=float(frequency),
            target_frequency=self.table.frequency_at(rounded),
        )


def map_to_note(
    frequency: Optional[float],
    table: Optional[NoteTable] = None,
) -> Optional[NoteEstimate]:
    """Map a frequency to a note using the default frequency range."""
    return NoteMapper(table).map(frequency)
