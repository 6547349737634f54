"""Tests for the acquisition loop and frame sources."""

import numpy as np
import pytest

from tuner.core import AudioFrame
from tuner.acquisition import TunerSession, TunerReading
from tuner.input import FrameAssembler, MicrophoneSource
from tuner.tuning import TuningStatus

SR = 44100
FRAME_SIZE = 4096


def sine_frame(freq: float, amplitude: float = 0.8) -> AudioFrame:
    t = np.arange(FRAME_SIZE) / SR
    return AudioFrame(amplitude * np.sin(2 * np.pi * freq * t), SR)


def silent_frame() -> AudioFrame:
    return AudioFrame(np.zeros(FRAME_SIZE), SR)


class TestTunerSession:
    """Tests for TunerSession."""

    def test_pitched_frame(self):
        reading = TunerSession().process(sine_frame(440.0))
        assert reading.note.full_name == "A4"
        assert reading.frequency == pytest.approx(440.0, rel=0.01)
        assert reading.status is TuningStatus.IN_TUNE
        assert reading.volume == 1.0
        assert not reading.held

    def test_silent_frame(self):
        reading = TunerSession().process(silent_frame())
        assert reading == TunerReading(volume=0.0)
        assert not reading.has_note

    def test_volume_tracks_level(self):
        reading = TunerSession().process(sine_frame(440.0, amplitude=0.1))
        assert reading.volume == pytest.approx(0.1 / np.sqrt(2) * 5, rel=0.02)

    def test_out_of_range_frequency_has_no_note(self):
        # Alternating samples estimate near Nyquist, above the mapper's range
        samples = 0.5 * np.where(np.arange(FRAME_SIZE) % 2 == 0, 1.0, -1.0)
        reading = TunerSession().process(AudioFrame(samples, SR))
        assert reading.frequency is not None
        assert reading.note is None

    def test_hold_last(self):
        session = TunerSession(hold_last=True)
        session.process(sine_frame(220.0))
        reading = session.process(silent_frame())
        assert reading.held
        assert reading.note.full_name == "A3"
        assert reading.frequency is None
        assert session.last_note.full_name == "A3"

        session.reset()
        assert not session.process(silent_frame()).has_note

    def test_no_hold_by_default(self):
        session = TunerSession()
        session.process(sine_frame(220.0))
        assert session.process(silent_frame()).note is None

    def test_reference_pitch(self):
        reading = TunerSession.for_reference(442.0).process(sine_frame(440.0))
        assert reading.note.full_name == "A4"
        assert -12 <= reading.note.cents <= -4

    def test_run_is_lazy(self):
        pulled = []

        def frames():
            for freq in (110.0, 220.0, 440.0):
                pulled.append(freq)
                yield sine_frame(freq)

        readings = TunerSession().run(frames())
        first = next(readings)
        assert first.note.full_name == "A2"
        assert pulled == [110.0]
        assert [r.note.full_name for r in readings] == ["A3", "A4"]

    def test_no_frames_no_readings(self):
        assert list(TunerSession().run([])) == []

    def test_to_dict(self):
        result = TunerSession().process(sine_frame(440.0)).to_dict()
        assert result["note"]["full_note"] == "A4"
        assert result["status"] == "In Tune!"
        assert TunerSession().process(silent_frame()).to_dict()["note"] is None


class TestFrameAssembler:
    """Tests for FrameAssembler."""

    def test_waits_for_full_frame(self):
        assembler = FrameAssembler(frame_size=8, hop_length=4)
        assert assembler.push(np.arange(5)) == []
        assert assembler.pending == 5

    def test_overlapping_frames(self):
        assembler = FrameAssembler(frame_size=8, hop_length=4)
        frames = assembler.push(np.arange(16))
        assert len(frames) == 3
        np.testing.assert_array_equal(frames[0], np.arange(8))
        np.testing.assert_array_equal(frames[1], np.arange(4, 12))
        np.testing.assert_array_equal(frames[2], np.arange(8, 16))
        assert assembler.pending == 4

    def test_blocks_of_any_size(self):
        assembler = FrameAssembler(frame_size=8, hop_length=8)
        frames = []
        for start in range(0, 24, 3):
            frames += assembler.push(np.arange(start, start + 3))
        assert len(frames) == 3
        np.testing.assert_array_equal(frames[2], np.arange(16, 24))

    def test_reset(self):
        assembler = FrameAssembler(frame_size=8, hop_length=4)
        assembler.push(np.arange(5))
        assembler.reset()
        assert assembler.pending == 0

    def test_invalid(self):
        with pytest.raises(ValueError):
            FrameAssembler(frame_size=0)


class FakeInputStream:
    def __init__(self, samplerate, blocksize, channels, dtype, device, callback):
        self.samplerate = samplerate
        self.blocksize = blocksize
        self.callback = callback
        self.started = False
        self.closed = False

    def start(self):
        self.started = True

    def stop(self):
        self.started = False

    def close(self):
        self.closed = True


class FakeSoundDevice:
    InputStream = FakeInputStream


class TestMicrophoneSource:
    """MicrophoneSource against a fake input stream."""

    def test_frames_from_callback_blocks(self):
        source = MicrophoneSource(frame_size=FRAME_SIZE, hop_length=2048,
                                  backend=FakeSoundDevice())
        with source:
            stream = source._stream
            assert stream.started
            assert stream.blocksize == 2048

            t = np.arange(FRAME_SIZE) / SR
            wave = (0.8 * np.sin(2 * np.pi * 440.0 * t)).astype(np.float32)
            for block in np.split(wave, 2):
                stream.callback(block.reshape(-1, 1), len(block), None, None)

            frame = next(source.frames())
            assert len(frame) == FRAME_SIZE
            assert frame.sample_rate == SR
            reading = TunerSession().process(frame)
            assert reading.note.full_name == "A4"

        assert stream.closed
        assert not source.is_running
        assert list(source.frames()) == []

    def test_status_flags_warn(self):
        source = MicrophoneSource(backend=FakeSoundDevice())
        with pytest.warns(UserWarning, match="input overflow"):
            source._callback(np.zeros((16, 1), dtype=np.float32), 16, None, "input overflow")

    def test_restart_discards_earlier_audio(self):
        """Audio captured before stop() is not replayed after a restart."""
        source = MicrophoneSource(frame_size=FRAME_SIZE, hop_length=2048,
                                  backend=FakeSoundDevice())
        source.start()
        for _ in range(3):
            source._stream.callback(np.full((2048, 1), 0.9, dtype=np.float32), 2048, None, None)
        source.stop()

        source.start()
        for _ in range(2):
            source._stream.callback(np.full((2048, 1), -0.1, dtype=np.float32), 2048, None, None)
        frame = next(source.frames())
        assert np.all(frame.samples < 0)
        source.stop()

    def test_lagging_reader_drops_oldest_blocks(self):
        source = MicrophoneSource(frame_size=FRAME_SIZE, hop_length=2048,
                                  backend=FakeSoundDevice())
        with source:
            for i in range(5):
                block = np.full((2048, 1), i * 0.1, dtype=np.float32)
                source._stream.callback(block, 2048, None, None)
            assert source._blocks.qsize() == 3

            frame = next(source.frames())
            assert frame.samples[0] == pytest.approx(0.2)
            assert frame.samples[-1] == pytest.approx(0.3)
