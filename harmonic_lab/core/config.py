"""Analysis configuration."""

from dataclasses import dataclass

from .constants import (
    DECAY_RATE,
    PASSING_NOTE_THRESHOLD,
    MIN_SALIENCE,
    NON_CHORD_TONE_FLOOR,
    COMPLEXITY_PENALTY,
    DEFAULT_TOP_K,
)


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for harmonic inference.

    Attributes:
        decay_rate: Salience lost per beat of distance from the evaluation beat (default: 0.3)
        passing_note_threshold: Duration subtracted before weighting, in beats (default: 0.125)
        min_salience: Floor for the undecayed salience of any note (default: 0.025)
        non_chord_tone_floor: Salience a non-chord tone may carry for free (default: 0.05)
        complexity_penalty: Cost per complexity level of a chord quality (default: 0.05)
        top_k: Number of alternatives kept in diagnostic traces (default: 3)
    """

    decay_rate: float = DECAY_RATE
    passing_note_threshold: float = PASSING_NOTE_THRESHOLD
    min_salience: float = MIN_SALIENCE
    non_chord_tone_floor: float = NON_CHORD_TONE_FLOOR
    complexity_penalty: float = COMPLEXITY_PENALTY
    top_k: int = DEFAULT_TOP_K
