"""Inference layer - Harmonic understanding of written voices.

Pipeline: Notes → Segments → [Salience → Chord candidates] → DP search → Best progression
"""

from .segments import SegmentBuilder, approach_multiplier
from .salience import SalienceModel, SaliencePolicy
from .chords import ChordScorer, ChordCandidate, MatchedNote, NonChordTone
from .search import (
    HarmonicSearch,
    DPState,
    PathStep,
    StrategyResult,
    STRATEGY_LABELS,
    format_harmony,
    walk_back,
)
from .diagnostics import (
    BeatTrace,
    HarmonyEntry,
    beat_traces,
    complete_harmonies,
    unharmonised,
)
from .harmony import HarmonyAnalyzer, AnalysisSummary

__all__ = [
    # Segments
    "SegmentBuilder",
    "approach_multiplier",
    # Salience
    "SalienceModel",
    "SaliencePolicy",
    # Chord scoring
    "ChordScorer",
    "ChordCandidate",
    "MatchedNote",
    "NonChordTone",
    # Search
    "HarmonicSearch",
    "DPState",
    "PathStep",
    "StrategyResult",
    "STRATEGY_LABELS",
    "format_harmony",
    "walk_back",
    # Diagnostics
    "BeatTrace",
    "HarmonyEntry",
    "beat_traces",
    "complete_harmonies",
    "unharmonised",
    # Harmony analysis
    "HarmonyAnalyzer",
    "AnalysisSummary",
]
