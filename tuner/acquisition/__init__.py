"""Acquisition layer - Per-frame tuner loop."""

from .session import TunerSession, TunerReading

__all__ = [
    "TunerSession",
    "TunerReading",
]
