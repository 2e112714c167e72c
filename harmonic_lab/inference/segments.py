"""Segment building - Split notes into beat-local segments.

Each note is cut at every beat boundary it spans. Every slice carries the
approach multiplier of its note, derived from the melodic interval to the
closest earlier note in any voice.
"""

import logging
import math
from typing import List, Optional, Sequence, Union

from ..core import DEFAULT_TIME_SIGNATURE, Note, Segment, TimeSignature

logger = logging.getLogger(__name__)

# Slices shorter than this are rounding residue
_EPS = 1e-9


def approach_multiplier(interval: Optional[int]) -> float:
    """Weight for how a note was approached melodically.

    Args:
        interval: Semitones from the preceding note, or None for no predecessor

    Returns:
        0.8 for steps, 1.2 for fourth/fifth/octave leaps, 1.0 otherwise
    """
    if interval is None:
        return 1.0
    size = abs(interval)
    if size == 0:
        return 1.0
    if size <= 2:
        return 0.8
    if size <= 4:
        return 1.0
    if size in (5, 7, 12):
        return 1.2
    return 1.0


def note_order(note) -> tuple:
    """Sort key shared by notes and segments: onset, then pitch."""
    return (note.onset, note.pitch)


class SegmentBuilder:
    """Convert a merged note list into beat-local segments."""

    def __init__(self, time_signature: Union[str, TimeSignature, None] = None):
        self.time_signature = TimeSignature.parse(time_signature or DEFAULT_TIME_SIGNATURE)

    def build(self, notes: Sequence[Note]) -> List[Segment]:
        """
        Build segments from notes of one or more voices.

        Args:
            notes: Notes in any order; ordered by (onset, pitch) before use

        Returns:
            Segments sorted by onset, then pitch
        """
        ordered = sorted(notes, key=note_order)
        beat_len = self.time_signature.beat_length
        segments = []

        for i, note in enumerate(ordered):
            prev = self._previous_note(ordered, i)
            approach = approach_multiplier(note.pitch - prev.pitch if prev else None)

            end = note.onset + note.duration
            cursor = note.onset
            while cursor < end - _EPS:
                next_boundary = (math.floor(cursor / beat_len) + 1) * beat_len
                stop = min(end, next_boundary)
                if stop <= cursor:
                    break
                segments.append(Segment(
                    pitch=note.pitch,
                    onset=cursor,
                    duration=stop - cursor,
                    approach=approach,
                ))
                cursor = stop

        segments.sort(key=note_order)
        logger.debug(f"Built {len(segments)} segments from {len(ordered)} notes")
        return segments

    @staticmethod
    def _previous_note(ordered: Sequence[Note], index: int) -> Optional[Note]:
        """Closest earlier entry with a strictly earlier onset, in any voice."""
        onset = ordered[index].onset
        for j in range(index - 1, -1, -1):
            if ordered[j].onset < onset:
                return ordered[j]
        return None
