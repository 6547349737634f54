"""Global constants for Chromatic Tuner."""

# Pitch names
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
FLAT_ALIASES = {"Db": "C#", "Eb": "D#", "Gb": "F#", "Ab": "G#", "Bb": "A#"}

# Reference tuning
DEFAULT_REFERENCE_A4 = 440.0
REFERENCE_PITCHES = (432.0, 435.0, 438.0, 440.0, 442.0, 444.0)
A4_OCTAVE = 4
SEMITONE_OFFSET_OF_A4_FROM_C0 = 9  # A is the 10th class counting from C
SEMITONES_PER_OCTAVE = 12
CENTS_PER_SEMITONE = 100
TABLE_OCTAVES = range(0, 9)  # C0..B8

# Audio capture defaults
DEFAULT_SAMPLE_RATE = 44100
DEFAULT_FRAME_SIZE = 4096
DEFAULT_HOP_LENGTH = 2048

# Pitch estimation
SILENCE_RMS_THRESHOLD = 0.01
CLIP_THRESHOLD = 0.2
MIN_CORRELATION_LENGTH = 3  # smallest buffer that still fits a parabola

# Representable frequency range (Hz)
MIN_FREQUENCY = 20.0
MAX_FREQUENCY = 5000.0

# Reference tone
TONE_GAIN = 0.3
TONE_FLOOR_GAIN = 0.001
DEFAULT_TONE_DURATION = 1.5

# Meter
IN_TUNE_CENTS = 5
ALMOST_CENTS = 15
VOLUME_SCALE = 5.0
