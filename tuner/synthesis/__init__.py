"""Synthesis layer - Reference tone generation and playback."""

from .tone import ToneSynthesizer, write_tone
from .playback import TonePlayer

__all__ = [
    "ToneSynthesizer",
    "write_tone",
    "TonePlayer",
]
