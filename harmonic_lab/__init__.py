"""Harmonic Lab - Chord progression inference for written voices.

Architecture Layers:
    1. core/      - Notes, meter, chord catalogue, configuration
    2. input/     - Voice notation parsing (SPN)
    3. inference/ - Segments, salience, chord scoring, DP search, strategy selection
    4. output/    - Diagnostic log, JSON summaries, console tables
"""

__version__ = "0.3.0"

# Core types
from .core import Note, TimeSignature, AnalysisConfig, CHORD_TYPES

# Input layer
from .input import parse_voice, build_notes

# Inference layer
from .inference import (
    SegmentBuilder,
    SalienceModel,
    ChordScorer,
    HarmonicSearch,
    HarmonyAnalyzer,
    AnalysisSummary,
)

# Output layer
from .output import HarmonyReport, summary_to_dict

__all__ = [
    # Core
    "Note",
    "TimeSignature",
    "AnalysisConfig",
    "CHORD_TYPES",
    # Input
    "parse_voice",
    "build_notes",
    # Inference
    "SegmentBuilder",
    "SalienceModel",
    "ChordScorer",
    "HarmonicSearch",
    "HarmonyAnalyzer",
    "AnalysisSummary",
    # Output
    "HarmonyReport",
    "summary_to_dict",
]
