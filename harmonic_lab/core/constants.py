"""Global constants for Harmonic Lab."""

from dataclasses import dataclass
from typing import Dict, Tuple

# Pitch names (flat spellings, as displayed in chord symbols)
NOTE_NAMES = ["C", "Db", "D", "Eb", "E", "F", "F#", "G", "Ab", "A", "Bb", "B"]

# Analysis defaults
DECAY_RATE = 0.3
PASSING_NOTE_THRESHOLD = 0.125
MIN_SALIENCE = 0.025
NON_CHORD_TONE_FLOOR = 0.05
COMPLEXITY_PENALTY = 0.05
DEFAULT_TOP_K = 3

# Musical defaults
DEFAULT_TIME_SIGNATURE = "4/4"
DEFAULT_DURATION = 1.0  # quarter note = 1 beat

# Rhythmic subdivisions tried by a full run: (duration in beats, label)
SUBDIVISIONS = [
    (2.0, "HALF NOTES"),
    (1.0, "QUARTER NOTES"),
    (0.5, "EIGHTH NOTES"),
    (0.25, "SIXTEENTH NOTES"),
]

DURATION_LABELS = {2.0: "HALF", 1.0: "QUARTER", 0.5: "EIGHTH", 0.25: "SIXTEENTH"}


@dataclass(frozen=True)
class ChordType:
    """A chord quality: member intervals, the subset that must sound, and cost."""

    name: str
    intervals: Tuple[int, ...]
    required: Tuple[int, ...]
    complexity: int  # 1-4, charged once per beat
    symbol: str = ""


def _chord_type(name: str, intervals, required, complexity: int, symbol: str) -> Tuple[str, ChordType]:
    return name, ChordType(name, tuple(intervals), tuple(required), complexity, symbol)


# Ordered: candidate generation walks qualities in this order
CHORD_TYPES: Dict[str, ChordType] = dict([
    _chord_type("major", [0, 4, 7], [0, 4], 1, ""),
    _chord_type("minor", [0, 3, 7], [0, 3], 1, "m"),
    _chord_type("diminished", [0, 3, 6], [0, 3, 6], 2, "dim"),
    _chord_type("augmented", [0, 4, 8], [0, 4, 8], 2, "aug"),
    _chord_type("dominant_7", [0, 4, 7, 10], [0, 4, 10], 3, "7"),
    _chord_type("major_7", [0, 4, 7, 11], [0, 4, 11], 3, "maj7"),
    _chord_type("minor_7", [0, 3, 7, 10], [0, 3, 10], 3, "m7"),
    _chord_type("half_dim_7", [0, 3, 6, 10], [0, 3, 6, 10], 4, "m7b5"),
    _chord_type("dim_7", [0, 3, 6, 9], [0, 3, 6, 9], 4, "dim7"),
    _chord_type("min_maj_7", [0, 3, 7, 11], [0, 3, 11], 4, "m(maj7)"),
    _chord_type("major_6", [0, 4, 7, 9], [0, 4, 9], 3, "6"),
    _chord_type("minor_6", [0, 3, 7, 9], [0, 3, 9], 3, "m6"),
])

TYPE_SHORT = {name: chord_type.symbol for name, chord_type in CHORD_TYPES.items()}


def chord_name(root: int, quality: str) -> str:
    """Get chord symbol for a root pitch class and quality (e.g. 'Bbm7')."""
    return NOTE_NAMES[root % 12] + TYPE_SHORT.get(quality, quality)
