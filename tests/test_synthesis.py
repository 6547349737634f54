"""Tests for reference tone synthesis and playback."""

import numpy as np
import pytest
import soundfile as sf

from tuner.core import AudioFrame
from tuner.analysis import PitchEstimator
from tuner.tuning import NoteTable, NoteMapper
from tuner.synthesis import ToneSynthesizer, TonePlayer, write_tone


class FakeSoundDevice:
    """Records sounddevice calls."""

    def __init__(self):
        self.calls = []

    def play(self, data, samplerate, device=None):
        self.calls.append(("play", len(data), samplerate, device))

    def stop(self):
        self.calls.append(("stop",))

    def wait(self):
        self.calls.append(("wait",))


class TestToneSynthesizer:
    """Tests for ToneSynthesizer."""

    @pytest.fixture
    def synth(self):
        return ToneSynthesizer(sample_rate=44100)

    def test_length_and_dtype(self, synth):
        wave = synth.synthesize(440.0)
        assert len(wave) == int(round(1.5 * 44100))
        assert wave.dtype == np.float32

    def test_envelope_endpoints(self, synth):
        env = synth.envelope(1000)
        assert env[0] == pytest.approx(0.3)
        assert env[-1] == pytest.approx(0.001)
        assert np.all(np.diff(env) < 0)

    def test_envelope_is_exponential(self, synth):
        env = synth.envelope(101)
        ratios = env[1:] / env[:-1]
        assert np.allclose(ratios, ratios[0])

    def test_amplitude_never_exceeds_gain(self, synth):
        wave = synth.synthesize(330.0, duration=0.5)
        assert np.max(np.abs(wave)) <= 0.3 + 1e-6

    def test_tail_is_near_silent(self, synth):
        wave = synth.synthesize(440.0)
        assert np.max(np.abs(wave[-100:])) < 0.002

    def test_estimator_recovers_tone(self, synth):
        wave = synth.synthesize(440.0)
        estimate = PitchEstimator().estimate(AudioFrame(wave[:4096], 44100))
        assert estimate == pytest.approx(440.0, rel=0.01)

    @pytest.mark.parametrize("name", ["E2", "A2", "D3", "G3", "B3", "E4"])
    def test_note_round_trip(self, name):
        table = NoteTable(442.0)
        synth = ToneSynthesizer(table=table)
        wave = synth.synthesize_note(name)
        frequency = PitchEstimator().estimate(AudioFrame(wave[:4096], synth.sample_rate))
        note = NoteMapper(table).map(frequency)
        assert note.full_name == name
        assert abs(note.cents) <= 15

    @pytest.mark.parametrize("freq", [0.0, -10.0, float("nan"), 22050.0, 30000.0])
    def test_invalid_frequency(self, synth, freq):
        with pytest.raises(ValueError):
            synth.synthesize(freq)

    @pytest.mark.parametrize("duration", [0.0, -1.0, float("inf")])
    def test_invalid_duration(self, synth, duration):
        with pytest.raises(ValueError):
            synth.synthesize(440.0, duration)

    def test_duration_shorter_than_one_sample(self, synth):
        with pytest.raises(ValueError, match="shorter than one sample"):
            synth.synthesize(440.0, duration=1e-6)

    def test_invalid_gains(self):
        with pytest.raises(ValueError):
            ToneSynthesizer(gain=0.001, floor_gain=0.3)

    def test_unknown_note(self, synth):
        with pytest.raises(ValueError):
            synth.synthesize_note("H4")


class TestWriteTone:

    def test_write_wav(self, tmp_path):
        synth = ToneSynthesizer(sample_rate=22050)
        wave = synth.synthesize(220.0, duration=0.25)
        path = write_tone(tmp_path / "tones" / "a3.wav", wave, 22050)

        data, sr = sf.read(str(path))
        assert sr == 22050
        assert len(data) == len(wave)


class TestTonePlayer:
    """Playback against a recording backend."""

    def test_blocking_play_releases_device(self):
        backend = FakeSoundDevice()
        player = TonePlayer(ToneSynthesizer(sample_rate=22050), backend=backend)
        player.play(440.0, duration=0.1, blocking=True)

        names = [c[0] for c in backend.calls]
        assert ("play", 2205, 22050, None) in backend.calls
        assert names.index("play") < names.index("wait")
        assert names[-1] == "stop"
        assert not player.is_playing

    def test_non_blocking_play_and_stop(self):
        backend = FakeSoundDevice()
        with TonePlayer(backend=backend) as player:
            player.play(440.0, duration=5.0)
            assert player.is_playing
        assert not player.is_playing
        assert backend.calls[-1] == ("stop",)

    def test_new_tone_replaces_old(self):
        backend = FakeSoundDevice()
        player = TonePlayer(backend=backend)
        player.play(440.0, duration=5.0)
        player.play_note("E2", duration=5.0)
        names = [c[0] for c in backend.calls]
        assert names == ["play", "stop", "play"]
        player.stop()

    def test_stop_when_idle_is_noop(self):
        backend = FakeSoundDevice()
        TonePlayer(backend=backend).stop()
        assert backend.calls == []

    def test_short_tone_warns(self):
        player = TonePlayer(backend=FakeSoundDevice())
        with pytest.warns(UserWarning, match="shorter than one period"):
            player.play(100.0, duration=0.005)
        player.stop()
