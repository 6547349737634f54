"""Live microphone capture."""

import queue
import warnings
from typing import Iterator, List, Optional

import numpy as np

from ..core import AudioFrame
from ..core.constants import (
    DEFAULT_SAMPLE_RATE,
    DEFAULT_FRAME_SIZE,
    DEFAULT_HOP_LENGTH,
)


class FrameAssembler:
    """Collects device blocks of arbitrary size into overlapping frames."""

    def __init__(
        self,
        frame_size: int = DEFAULT_FRAME_SIZE,
        hop_length: int = DEFAULT_HOP_LENGTH,
    ):
        if frame_size <= 0 or hop_length <= 0:
            raise ValueError("frame_size and hop_length must be positive")
        self.frame_size = frame_size
        self.hop_length = hop_length
        self._buffer = np.zeros(0, dtype=np.float32)

    @property
    def pending(self) -> int:
        """Samples buffered but not yet emitted."""
        return int(self._buffer.size)

    def push(self, block: np.ndarray) -> List[np.ndarray]:
        """
        Add a block of samples.

        Returns:
            Complete frames that became available, oldest first
        """
        block = np.asarray(block, dtype=np.float32).reshape(-1)
        self._buffer = np.concatenate([self._buffer, block])

        ready = []
        while self._buffer.size >= self.frame_size:
            ready.append(self._buffer[: self.frame_size].copy())
            self._buffer = self._buffer[self.hop_length :]
        return ready

    def reset(self) -> None:
        self._buffer = np.zeros(0, dtype=np.float32)


class MicrophoneSource:
    """Delivers frames from the default input device.

    Use as a context manager, or call `start()` / `stop()`. Iterating
    `frames()` blocks until the next frame is available; stopping the
    source ends the iteration.
    """

    def __init__(
        self,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        frame_size: int = DEFAULT_FRAME_SIZE,
        hop_length: int = DEFAULT_HOP_LENGTH,
        device: Optional[int] = None,
        timeout: float = 1.0,
        backend=None,
    ):
        """
        Initialize MicrophoneSource.

        Args:
            sample_rate: Requested capture rate in Hz
            frame_size: Samples per frame
            hop_length: Samples between frame starts
            device: sounddevice input device index (None = default)
            timeout: Seconds to wait for audio before checking for stop
            backend: Module providing `InputStream` (default: sounddevice,
                imported on first use since it needs PortAudio)
        """
        self.sample_rate = sample_rate
        self.device = device
        self.timeout = timeout
        self._backend = backend
        self._assembler = FrameAssembler(frame_size, hop_length)
        # Enough blocks for one frame; older audio is dropped when the reader lags
        max_blocks = -(-frame_size // hop_length) + 1
        self._blocks: "queue.Queue[np.ndarray]" = queue.Queue(maxsize=max_blocks)
        self._stream = None

    @property
    def is_running(self) -> bool:
        return self._stream is not None

    def start(self) -> None:
        """Open and start the input stream."""
        if self._stream is not None:
            return
        if self._backend is None:
            import sounddevice

            self._backend = sounddevice

        stream = self._backend.InputStream(
            samplerate=self.sample_rate,
            blocksize=self._assembler.hop_length,
            channels=1,
            dtype="float32",
            device=self.device,
            callback=self._callback,
        )
        stream.start()
        self.sample_rate = int(stream.samplerate)
        self._stream = stream

    def stop(self) -> None:
        """Stop and close the input stream."""
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.stop()
            stream.close()
        self._assembler.reset()
        self._drain()

    def _drain(self) -> None:
        while True:
            try:
                self._blocks.get_nowait()
            except queue.Empty:
                return

    def _callback(self, indata, frames, time_info, status) -> None:
        if status:
            warnings.warn(f"Audio input status: {status}")
        block = indata[:, 0].copy()
        while True:
            try:
                self._blocks.put_nowait(block)
                return
            except queue.Full:
                try:
                    self._blocks.get_nowait()
                except queue.Empty:
                    pass

    def frames(self) -> Iterator[AudioFrame]:
        """Yield frames until the source is stopped."""
        while self._stream is not None:
            try:
                block = self._blocks.get(timeout=self.timeout)
            except queue.Empty:
                continue
            for samples in self._assembler.push(block):
                yield AudioFrame(samples, self.sample_rate)

    def __enter__(self) -> "MicrophoneSource":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
