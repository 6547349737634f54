"""Equal-temperament note table for a reference A4 pitch."""

import functools
import math
from dataclasses import dataclass, field
from typing import Tuple, Union

import numpy as np

from ..core import Pitch
from ..core.constants import (
    DEFAULT_REFERENCE_A4,
    A4_OCTAVE,
    SEMITONE_OFFSET_OF_A4_FROM_C0,
    SEMITONES_PER_OCTAVE,
    TABLE_OCTAVES,
)

# A4 counted in semitones from C0
A4_INDEX = A4_OCTAVE * SEMITONES_PER_OCTAVE + SEMITONE_OFFSET_OF_A4_FROM_C0


@dataclass(frozen=True)
class NoteEntry:
    """One row of the note table."""

    pitch: Pitch
    frequency: float

    @property
    def semitones_from_a4(self) -> int:
        return self.pitch.index - A4_INDEX


@dataclass(frozen=True)
class NoteTable:
    """Immutable note/frequency table for one reference pitch.

    Built once per reference selection and shared read-only by the
    mapper and the tone synthesizer. Covers C0..B8.

    Attributes:
        reference_a4: Frequency of A4 in Hz
        entries: Table rows in ascending pitch order
    """

    reference_a4: float = DEFAULT_REFERENCE_A4
    entries: Tuple[NoteEntry, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not math.isfinite(self.reference_a4) or self.reference_a4 <= 0:
            raise ValueError(f"Reference pitch must be positive: {self.reference_a4}")

        object.__setattr__(self, "reference_a4", float(self.reference_a4))
        first = TABLE_OCTAVES.start * SEMITONES_PER_OCTAVE
        last = TABLE_OCTAVES.stop * SEMITONES_PER_OCTAVE
        entries = tuple(
            NoteEntry(Pitch(index), self.frequency_at(index - A4_INDEX))
            for index in range(first, last)
        )
        object.__setattr__(self, "entries", entries)

    @classmethod
    @functools.lru_cache(maxsize=16)
    def for_reference(cls, reference_a4: float = DEFAULT_REFERENCE_A4) -> "NoteTable":
        """Return the shared table for a reference pitch."""
        return cls(reference_a4=float(reference_a4))

    def frequency_at(self, semitones_from_a4: float) -> float:
        """Frequency of a note `semitones_from_a4` semitones away from A4."""
        return self.reference_a4 * 2.0 ** (semitones_from_a4 / SEMITONES_PER_OCTAVE)

    def frequency_of(self, pitch: Union[Pitch, str]) -> float:
        """
        Frequency of a pitch under this table's reference.

        Args:
            pitch: Pitch object or note name such as 'E2' or 'A#4'

        Returns:
            Frequency in Hz
        """
        if isinstance(pitch, str):
            pitch = Pitch.parse(pitch)
        return self.frequency_at(pitch.index - A4_INDEX)

    def frequency_of_name(self, name: str) -> float:
        """Frequency for a note name (e.g. 'E2')."""
        return self.frequency_of(Pitch.parse(name))

    def semitones_from_a4(self, frequency: float) -> float:
        """Fractional distance of `frequency` from A4 in semitones."""
        return SEMITONES_PER_OCTAVE * math.log2(frequency / self.reference_a4)

    def nearest(self, frequency: float) -> NoteEntry:
        """Table entry closest to `frequency` on a log scale."""
        if frequency <= 0:
            raise ValueError(f"Frequency must be positive: {frequency}")
        freqs = np.array([e.frequency for e in self.entries])
        idx = int(np.argmin(np.abs(np.log2(freqs / frequency))))
        return self.entries[idx]

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
