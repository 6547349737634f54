"""Reference tone playback on the default output device."""

import threading
import warnings
from typing import Optional

from ..core.constants import DEFAULT_TONE_DURATION
from .tone import ToneSynthesizer


class TonePlayer:
    """Plays reference tones through sounddevice.

    One tone at a time: starting a new tone stops the previous one. The
    output stream is released when the envelope finishes or on `stop()`.
    `backend` is any object with sounddevice's play/stop/wait functions;
    by default sounddevice itself, imported on first use since it needs
    PortAudio.
    """

    def __init__(
        self,
        synthesizer: Optional[ToneSynthesizer] = None,
        device: Optional[int] = None,
        backend=None,
    ):
        self.synthesizer = synthesizer or ToneSynthesizer()
        self.device = device
        self._backend = backend
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._playing = False

    @property
    def is_playing(self) -> bool:
        return self._playing

    def play(
        self,
        frequency: float,
        duration: float = DEFAULT_TONE_DURATION,
        blocking: bool = False,
    ) -> None:
        """
        Play a decaying sine tone.

        Args:
            frequency: Tone frequency in Hz
            duration: Tone length in seconds
            blocking: Wait until the tone has finished
        """
        sd = self._sd()
        wave = self.synthesizer.synthesize(frequency, duration)
        if frequency * duration < 1:
            warnings.warn(
                f"Tone of {duration}s at {frequency} Hz is shorter than one period"
            )

        with self._lock:
            self._release(sd)
            sd.play(wave, self.synthesizer.sample_rate, device=self.device)
            self._playing = True
            self._generation += 1
            if not blocking:
                self._timer = threading.Timer(
                    duration, self._finish, args=(self._generation,)
                )
                self._timer.daemon = True
                self._timer.start()

        if blocking:
            try:
                sd.wait()
            finally:
                self.stop()

    def play_note(
        self,
        note: str,
        duration: float = DEFAULT_TONE_DURATION,
        blocking: bool = False,
    ) -> None:
        """Play the reference tone for a note name such as 'A4'."""
        self.play(self.synthesizer.table.frequency_of(note), duration, blocking)

    def stop(self) -> None:
        """Stop playback and release the output stream."""
        with self._lock:
            if not self._playing:
                return
            self._release(self._sd())

    def _finish(self, generation: int) -> None:
        # Only the timer of the current tone may release the device
        with self._lock:
            if generation != self._generation or not self._playing:
                return
            self._release(self._sd())

    def _sd(self):
        if self._backend is None:
            import sounddevice

            self._backend = sounddevice
        return self._backend

    def _release(self, sd) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._playing:
            sd.stop()
            self._playing = False

    def __enter__(self) -> "TonePlayer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
