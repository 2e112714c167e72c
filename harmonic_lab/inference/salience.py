"""Salience model - Time-decayed perceptual weight of segments.

A segment asserts itself more when it is long, metrically strong and
approached by leap. Its weight fades linearly with the distance, in whole
beats, between its beat and the evaluation beat.
"""

import math
from enum import Enum
from typing import List, Optional, Sequence, Union

from ..core import DEFAULT_TIME_SIGNATURE, AnalysisConfig, Segment, TimeSignature, WeightedNote

# Tolerance for metric position comparisons (in beats)
_POSITION_EPS = 0.01


class SaliencePolicy(Enum):
    """Which segments are audible from an evaluation beat."""

    PAST = "past"
    BIDIRECTIONAL = "bidirectional"


class SalienceModel:
    """Weight segments as heard from a given beat."""

    def __init__(
        self,
        time_signature: Union[str, TimeSignature, None] = None,
        config: Optional[AnalysisConfig] = None,
    ):
        """
        Initialize SalienceModel.

        Args:
            time_signature: Meter used for metric weights (default: 4/4)
            config: Analysis constants (default: AnalysisConfig())
        """
        self.time_signature = TimeSignature.parse(time_signature or DEFAULT_TIME_SIGNATURE)
        self.config = config or AnalysisConfig()

    def metric_weight(self, onset: float) -> float:
        """
        Metric accent of an onset within the bar.

        Returns:
            1.2 downbeat, 1.0 mid-bar accent (even numerators >= 4),
            0.75 other beats, 0.5 half beats, 0.4 anything weaker
        """
        ts = self.time_signature
        bar_len = ts.bar_length
        beat_len = ts.beat_length
        pos = onset % bar_len

        if pos < _POSITION_EPS or abs(pos - bar_len) < _POSITION_EPS:
            return 1.2

        if ts.numerator >= 4 and ts.numerator % 2 == 0 and abs(pos - bar_len / 2) < _POSITION_EPS:
            return 1.0

        beat_pos = (pos / beat_len) % 1
        if beat_pos < _POSITION_EPS or abs(beat_pos - 1) < _POSITION_EPS:
            return 0.75

        half_beat = beat_len / 2
        if half_beat > 0 and abs((pos / half_beat) % 1) < _POSITION_EPS:
            return 0.5

        return 0.4

    def salience(self, segment: Segment, decay: float) -> float:
        """Salience of a segment scaled by its decay."""
        raw = (
            (segment.duration - self.config.passing_note_threshold)
            * self.metric_weight(segment.onset)
            * segment.approach
        )
        return max(raw, self.config.min_salience) * decay

    def decay(self, distance: int) -> float:
        """Linear decay for a distance in beats, clamped at zero."""
        return max(1.0 - distance * self.config.decay_rate, 0.0)

    def collect_past(self, segments: Sequence[Segment], beat: int) -> List[WeightedNote]:
        """
        Segments that started at or before the evaluation beat.

        Args:
            segments: Segments sorted by onset
            beat: Evaluation beat

        Returns:
            Weighted notes with positive decay
        """
        out = []
        for seg in segments:
            seg_beat = math.floor(seg.onset)
            if seg_beat > beat:
                break
            weight = self.decay(beat - seg_beat)
            if weight <= 0:
                continue
            out.append(self._weigh(seg, weight))
        return out

    def collect_bidirectional(self, segments: Sequence[Segment], beat: int) -> List[WeightedNote]:
        """Segments on either side of the evaluation beat."""
        out = []
        for seg in segments:
            weight = self.decay(abs(beat - math.floor(seg.onset)))
            if weight <= 0:
                continue
            out.append(self._weigh(seg, weight))
        return out

    def collect(
        self,
        segments: Sequence[Segment],
        beat: int,
        policy: SaliencePolicy = SaliencePolicy.PAST,
    ) -> List[WeightedNote]:
        """Collect weighted notes under the given policy."""
        if policy == SaliencePolicy.BIDIRECTIONAL:
            return self.collect_bidirectional(segments, beat)
        return self.collect_past(segments, beat)

    def _weigh(self, seg: Segment, decay: float) -> WeightedNote:
        return WeightedNote(
            pitch=seg.pitch,
            pitch_class=seg.pitch_class,
            onset=seg.onset,
            salience=self.salience(seg, decay),
            decay=decay,
        )
