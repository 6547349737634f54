"""Tuning layer - Note table, frequency mapping and tuning status.

This layer turns frequencies into musical meaning:
- Equal-temperament note table for a reference A4
- Nearest note and cents deviation for a measured frequency
- In tune / almost / sharp / flat classification
"""

from .table import NoteTable, NoteEntry
from .mapper import NoteMapper, map_to_note
from .status import TuningStatus

__all__ = [
    "NoteTable",
    "NoteEntry",
    "NoteMapper",
    "map_to_note",
    "TuningStatus",
]
