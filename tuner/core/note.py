"""Note identity and note estimate data classes."""

import re
from dataclasses import dataclass
from typing import Optional

from .constants import (
    PITCH_NAMES,
    FLAT_ALIASES,
    SEMITONES_PER_OCTAVE,
)

_NOTE_PATTERN = re.compile(r"^\s*([A-Ga-g])([#b]?)(-?\d+)\s*$")


@dataclass(frozen=True, order=True)
class Pitch:
    """A chromatic pitch: pitch class plus octave (e.g. A#4).

    Ordering follows the chromatic index, so B3 sorts before C4.
    """

    index: int  # semitones above C0

    @classmethod
    def from_parts(cls, pitch_class: str, octave: int) -> "Pitch":
        """Build a pitch from a class name ('C#', 'Bb', ...) and an octave."""
        name = FLAT_ALIASES.get(pitch_class, pitch_class)
        if name not in PITCH_NAMES:
            raise ValueError(f"Unknown pitch class: {pitch_class!r}")
        return cls(octave * SEMITONES_PER_OCTAVE + PITCH_NAMES.index(name))

    @classmethod
    def parse(cls, text: str) -> "Pitch":
        """Parse a note name such as 'E2', 'A#4' or 'Bb3'."""
        match = _NOTE_PATTERN.match(text)
        if match is None:
            raise ValueError(f"Invalid note name: {text!r}")
        letter, accidental, octave = match.groups()
        return cls.from_parts(letter.upper() + accidental, int(octave))

    @property
    def pitch_class(self) -> str:
        """Pitch class name with sharp spelling."""
        return PITCH_NAMES[self.index % SEMITONES_PER_OCTAVE]

    @property
    def pitch_class_index(self) -> int:
        """Position in the chromatic sequence (0-11, where 0=C)."""
        return self.index % SEMITONES_PER_OCTAVE

    @property
    def octave(self) -> int:
        return self.index // SEMITONES_PER_OCTAVE

    @property
    def name(self) -> str:
        """Full note name (e.g., 'C4', 'A#3')."""
        return f"{self.pitch_class}{self.octave}"

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class NoteEstimate:
    """Nearest note to a measured frequency."""

    pitch: Pitch
    cents: int  # signed deviation from the nearest note, in [-50, 49]
    frequency: float  # measured frequency in Hz
    target_frequency: Optional[float] = None  # exact frequency of `pitch`

    @property
    def pitch_class(self) -> str:
        return self.pitch.pitch_class

    @property
    def octave(self) -> int:
        return self.pitch.octave

    @property
    def full_name(self) -> str:
        """Note name with octave (e.g., 'A4')."""
        return self.pitch.name

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "note": self.pitch_class,
            "octave": self.octave,
            "full_note": self.full_name,
            "cents": self.cents,
            "frequency": self.frequency,
            "target_frequency": self.target_frequency,
        }
