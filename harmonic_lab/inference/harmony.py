"""Harmony analysis - Run every search strategy and pick a winner.

Implements the harmonic inference pipeline:
- Segment building with melodic approach weights
- Salience weighting per evaluation beat
- Chord candidate scoring
- Four DP search strategies over the beat timeline
- Selection of the best-scoring strategy
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from ..core import DEFAULT_TIME_SIGNATURE, AnalysisConfig, Note, Segment, TimeSignature
from .chords import ChordScorer
from .diagnostics import BeatTrace, HarmonyEntry, beat_traces, complete_harmonies
from .salience import SalienceModel
from .search import HarmonicSearch, StrategyResult
from .segments import SegmentBuilder, note_order

logger = logging.getLogger(__name__)


@dataclass
class AnalysisSummary:
    """Container for one analysis run over all strategies."""

    label: str
    time_signature: TimeSignature
    num_beats: int
    notes: List[Note] = field(default_factory=list)
    segments: List[Segment] = field(default_factory=list)
    results: List[StrategyResult] = field(default_factory=list)
    best: Optional[StrategyResult] = None
    top_k: int = 3

    @property
    def progressions(self) -> Dict[str, str]:
        """Progression per strategy name."""
        return {r.name: r.progression for r in self.results}

    def result(self, name: str) -> StrategyResult:
        """Get the result of one strategy by name."""
        for r in self.results:
            if r.name == name:
                return r
        raise KeyError(name)

    def traces(self, name: str) -> List[BeatTrace]:
        """Per-beat alternatives of one strategy."""
        return beat_traces(self.result(name), self.top_k)

    def complete_harmonies(self, name: str) -> List[HarmonyEntry]:
        """Top complete harmonies of one strategy."""
        return complete_harmonies(self.result(name), self.top_k)


class HarmonyAnalyzer:
    """Infer the chord progression under one or two voices.

    Runs strategies A, B, C and D over the same segments and reports the
    one with the greatest final total (earlier strategies win ties).
    """

    def __init__(
        self,
        time_signature: Union[str, TimeSignature] = DEFAULT_TIME_SIGNATURE,
        config: Optional[AnalysisConfig] = None,
    ):
        """
        Initialize HarmonyAnalyzer.

        Args:
            time_signature: Meter, e.g. "3/4" (raises ValueError if malformed)
            config: Analysis constants (default: AnalysisConfig())
        """
        self.time_signature = TimeSignature.parse(time_signature)
        self.config = config or AnalysisConfig()

        self.segment_builder = SegmentBuilder(self.time_signature)
        self.salience_model = SalienceModel(self.time_signature, self.config)
        self.scorer = ChordScorer(self.config)
        self.search = HarmonicSearch(self.salience_model, self.scorer, self.config)

    @staticmethod
    def count_beats(notes: Sequence[Note]) -> int:
        """Number of whole beats needed to cover every note."""
        return math.ceil(max(n.onset + n.duration for n in notes))

    def analyze(self, notes: Sequence[Note], label: str = "") -> AnalysisSummary:
        """
        Perform full harmonic analysis.

        Args:
            notes: Notes of all voices
            label: Name of the run, for reports

        Returns:
            AnalysisSummary with every strategy's result and the best one
        """
        if len(notes) < 2:
            raise ValueError(f"Need at least 2 notes total, got {len(notes)}.")

        ordered = sorted(notes, key=note_order)
        num_beats = self.count_beats(ordered)
        segments = self.segment_builder.build(ordered)

        results = [
            self.search.run(name, segments, num_beats)
            for name in self.search.strategy_names
        ]
        best = results[int(np.argmax([r.total for r in results]))]
        logger.debug(f"{label or 'analysis'}: best strategy {best.name} ({best.total:.3f})")

        return AnalysisSummary(
            label=label,
            time_signature=self.time_signature,
            num_beats=num_beats,
            notes=ordered,
            segments=segments,
            results=results,
            best=best,
            top_k=self.config.top_k,
        )
