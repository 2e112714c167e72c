"""Chord scoring - Match weighted notes against chord qualities.

Implements chord candidate scoring with:
- Required-interval gating per chord quality
- Member weights favouring root and third
- Non-chord-tone penalties above a salience floor
- Bass-note multiplier (root position preferred)
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..core import AnalysisConfig, CHORD_TYPES, WeightedNote, chord_name

ChordKey = Tuple[int, str]


@dataclass(frozen=True)
class MatchedNote:
    """A note counted as a chord member."""
    onset: float
    pitch_class: int
    pitch: int
    salience: float
    weight: float
    contribution: float


@dataclass(frozen=True)
class NonChordTone:
    """A sounding note outside the chord."""
    onset: float
    pitch_class: int
    pitch: int
    salience: float
    penalty: float


@dataclass(frozen=True)
class ChordCandidate:
    """A scored chord for one beat."""

    root: int  # Pitch class 0-11
    quality: str  # Key into CHORD_TYPES
    score: float
    matched: List[MatchedNote] = field(default_factory=list)
    nct: List[NonChordTone] = field(default_factory=list)
    matched_salience: float = 0.0
    nct_penalty: float = 0.0
    bass_mult: float = 1.0
    complexity: int = 1

    @property
    def key(self) -> ChordKey:
        """Identity of the chord (root, quality)."""
        return (self.root, self.quality)

    @property
    def symbol(self) -> str:
        """Get chord symbol (e.g., 'C', 'Am', 'G7')."""
        return chord_name(self.root, self.quality)

    @property
    def boundary(self) -> Optional[float]:
        """Latest onset claimed as a member, or None."""
        if not self.matched:
            return None
        return max(m.onset for m in self.matched)

    def local_score(self, complexity_penalty: float) -> float:
        """Score after the flat complexity charge."""
        return self.score - self.complexity * complexity_penalty


class ChordScorer:
    """Score chord hypotheses against weighted notes.

    Features:
    - Fixed catalogue of twelve qualities (see CHORD_TYPES)
    - Member weights by interval above the root
    - Optional positive-only mode for exploratory passes
    """

    # Member weights by interval above the root (default 0.6)
    MEMBER_WEIGHTS = {
        0: 1.1,   # Root
        3: 1.0,   # Minor third
        4: 1.0,   # Major third
        7: 0.8,   # Fifth
        10: 0.8,  # Minor seventh
        11: 0.8,  # Major seventh
    }

    # Multiplier by interval of the lowest note above the root (default 1.0)
    BASS_MULTIPLIERS = {
        0: 1.1,   # Root position
        7: 0.9,   # Fifth in bass
        10: 0.8,  # Seventh in bass
        11: 0.8,
    }

    MIN_NOTES = 2

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    @classmethod
    def member_weight(cls, interval: int) -> float:
        """Weight of a chord member at the given interval above the root."""
        return cls.MEMBER_WEIGHTS.get(interval % 12, 0.6)

    @classmethod
    def bass_multiplier(cls, interval: Optional[int]) -> float:
        """Multiplier for the interval of the bass note above the root."""
        if interval is None:
            return 1.0
        return cls.BASS_MULTIPLIERS.get(interval % 12, 1.0)

    def score(
        self,
        root: int,
        quality: str,
        notes: Sequence[WeightedNote],
        positive_only: bool = False,
    ) -> Optional[ChordCandidate]:
        """
        Score one chord against weighted notes.

        Args:
            root: Root pitch class (0-11)
            quality: Chord quality name from CHORD_TYPES
            notes: Weighted notes visible at the beat
            positive_only: Ignore non-chord-tone penalties

        Returns:
            ChordCandidate, or None when a required interval is missing
            or fewer than two notes are given
        """
        chord_type = CHORD_TYPES.get(quality)
        if chord_type is None:
            raise ValueError(f"Unknown chord quality: {quality!r}")

        pitch_classes = {n.pitch_class for n in notes}
        for req in chord_type.required:
            if (root + req) % 12 not in pitch_classes:
                return None
        if len(notes) < self.MIN_NOTES:
            return None

        # Bass: first of the lowest-pitched notes
        bass = min(notes, key=lambda n: n.pitch)
        bass_interval = (bass.pitch_class - root) % 12

        matched_sal = 0.0
        nct_pen = 0.0
        matched = []
        nct = []
        for n in notes:
            interval = (n.pitch_class - root) % 12
            if interval in chord_type.intervals:
                w = self.member_weight(interval)
                matched_sal += n.salience * w
                matched.append(MatchedNote(
                    onset=n.onset,
                    pitch_class=n.pitch_class,
                    pitch=n.pitch,
                    salience=n.salience,
                    weight=w,
                    contribution=n.salience * w,
                ))
            else:
                pen = 0.0 if positive_only else max(n.salience - self.config.non_chord_tone_floor, 0.0)
                nct_pen += pen
                nct.append(NonChordTone(
                    onset=n.onset,
                    pitch_class=n.pitch_class,
                    pitch=n.pitch,
                    salience=n.salience,
                    penalty=pen,
                ))

        bass_mult = self.bass_multiplier(bass_interval)
        return ChordCandidate(
            root=root,
            quality=quality,
            score=(matched_sal - nct_pen) * bass_mult,
            matched=matched,
            nct=nct,
            matched_salience=matched_sal,
            nct_penalty=nct_pen,
            bass_mult=bass_mult,
            complexity=chord_type.complexity,
        )

    def find_candidates(
        self,
        notes: Sequence[WeightedNote],
        positive_only: bool = False,
    ) -> List[ChordCandidate]:
        """
        Score every chord rooted on a sounding pitch class.

        Returns:
            Candidates sorted by score, best first (stable for ties)
        """
        candidates = []
        for root in self.present_roots(notes):
            for quality in CHORD_TYPES:
                candidate = self.score(root, quality, notes, positive_only)
                if candidate is not None:
                    candidates.append(candidate)
        candidates.sort(key=lambda c: c.score, reverse=True)
        return candidates

    @staticmethod
    def present_roots(notes: Sequence[WeightedNote]) -> List[int]:
        """Sounding pitch classes in ascending order."""
        return sorted({n.pitch_class for n in notes})

