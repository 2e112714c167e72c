"""Core types and constants for Harmonic Lab."""

from .note import Note, Segment, WeightedNote, midi_to_spn
from .meter import TimeSignature
from .config import AnalysisConfig
from .constants import (
    NOTE_NAMES,
    TYPE_SHORT,
    CHORD_TYPES,
    ChordType,
    DEFAULT_TIME_SIGNATURE,
    DEFAULT_DURATION,
    SUBDIVISIONS,
    chord_name,
)

__all__ = [
    "Note",
    "Segment",
    "WeightedNote",
    "midi_to_spn",
    "TimeSignature",
    "AnalysisConfig",
    "NOTE_NAMES",
    "TYPE_SHORT",
    "CHORD_TYPES",
    "ChordType",
    "DEFAULT_TIME_SIGNATURE",
    "DEFAULT_DURATION",
    "SUBDIVISIONS",
    "chord_name",
]
