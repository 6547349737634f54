"""Acquisition loop - frames in, tuner readings out."""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from ..core import AudioFrame, NoteEstimate
from ..analysis import PitchEstimator, volume_level
from ..tuning import NoteMapper, NoteTable, TuningStatus


@dataclass(frozen=True)
class TunerReading:
    """Result of one acquisition cycle."""

    volume: float  # meter level in [0, 1]
    frequency: Optional[float] = None  # None when silent or indeterminate
    note: Optional[NoteEstimate] = None
    status: Optional[TuningStatus] = None
    held: bool = False  # note carried over from an earlier frame

    @property
    def has_note(self) -> bool:
        return self.note is not None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "volume": self.volume,
            "frequency": self.frequency,
            "note": self.note.to_dict() if self.note else None,
            "status": self.status.label if self.status else None,
            "held": self.held,
        }


class TunerSession:
    """Runs the estimator and mapper over a stream of frames.

    One frame is processed at a time; `run` pulls the next frame only
    after the previous reading has been consumed. Stopping is just
    not asking for more readings.
    """

    def __init__(
        self,
        estimator: Optional[PitchEstimator] = None,
        mapper: Optional[NoteMapper] = None,
        hold_last: bool = False,
    ):
        """
        Initialize TunerSession.

        Args:
            estimator: Pitch estimator (default configuration if None)
            mapper: Note mapper (A4=440 if None)
            hold_last: Keep reporting the last note through silent frames
        """
        self.estimator = estimator or PitchEstimator()
        self.mapper = mapper or NoteMapper()
        self.hold_last = hold_last
        self._last_note: Optional[NoteEstimate] = None

    @classmethod
    def for_reference(cls, reference_a4: float, **kwargs) -> "TunerSession":
        """Session using the shared note table for `reference_a4`."""
        return cls(mapper=NoteMapper(NoteTable.for_reference(reference_a4)), **kwargs)

    @property
    def last_note(self) -> Optional[NoteEstimate]:
        return self._last_note

    def process(self, frame: AudioFrame) -> TunerReading:
        """Estimate, map and classify one frame."""
        volume = volume_level(frame.samples)
        frequency = self.estimator.estimate(frame)
        note = self.mapper.map(frequency)

        if note is not None:
            self._last_note = note
            return TunerReading(
                volume=volume,
                frequency=frequency,
                note=note,
                status=TuningStatus.from_cents(note.cents),
            )

        if self.hold_last and self._last_note is not None:
            return TunerReading(
                volume=volume,
                frequency=frequency,
                note=self._last_note,
                status=TuningStatus.from_cents(self._last_note.cents),
                held=True,
            )

        return TunerReading(volume=volume, frequency=frequency)

    def run(self, frames: Iterable[AudioFrame]) -> Iterator[TunerReading]:
        """Yield one reading per frame. No frames, no readings."""
        for frame in frames:
            yield self.process(frame)

    def reset(self) -> None:
        """Forget the held note."""
        self._last_note = None
