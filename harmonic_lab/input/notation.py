"""Voice notation parsing - Scientific pitch notation to notes.

A voice is a whitespace-separated list of tokens:
- Notes in SPN: C4, Eb3, F#5, Bbb2 (superscript octaves such as C⁴ accepted)
- An optional duration multiplier suffix: C42 is C4 lasting 2 units
- Length declarations: L:1/8 sets the unit for the notes that follow

Durations are in beats, a quarter note being one beat.
"""

import re
from typing import List, Optional, Sequence, Tuple

from ..core import DEFAULT_DURATION, Note
from ..inference.segments import note_order

_SUPERSCRIPTS = str.maketrans("⁰¹²³⁴⁵⁶⁷⁸⁹⁻", "0123456789-")
_SPN_RE = re.compile(r"^([A-Ga-g])(#{1,2}|b{1,2})?(-?\d)$")
_TOKEN_RE = re.compile(r"^([A-Ga-g])(#{1,2}|b{1,2})?(-?\d)(\d+(?:\.\d+)?)?$")
_LENGTH_RE = re.compile(r"^L:(\d+)/(\d+)$", re.IGNORECASE)

_LETTER_PCS = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
_ACCIDENTALS = {"": 0, "#": 1, "##": 2, "b": -1, "bb": -2}


def _to_pitch(letter: str, accidental: Optional[str], octave: str) -> int:
    pc = _LETTER_PCS[letter.upper()] + _ACCIDENTALS[accidental or ""]
    return (int(octave) + 1) * 12 + pc


def parse_spn(text: str) -> Optional[int]:
    """
    Parse a note name such as 'C4' or 'Eb3' to a MIDI pitch.

    Returns:
        MIDI pitch, or None if the text is not a note name
    """
    match = _SPN_RE.match(text.translate(_SUPERSCRIPTS))
    if not match:
        return None
    return _to_pitch(*match.groups())


def parse_note_token(token: str) -> Optional[Tuple[int, Optional[float]]]:
    """
    Parse a note token with optional duration multiplier.

    Returns:
        (pitch, multiplier or None), or None if the token is not a note
    """
    match = _TOKEN_RE.match(token.translate(_SUPERSCRIPTS))
    if not match:
        return None
    letter, accidental, octave, mult = match.groups()
    multiplier = float(mult) if mult else None
    if multiplier is not None and multiplier <= 0:
        return None
    return _to_pitch(letter, accidental, octave), multiplier


def parse_length_decl(token: str) -> Optional[float]:
    """
    Parse a length declaration such as 'L:1/8'.

    Returns:
        Unit length in beats, or None if the token is not a declaration

    Raises:
        ValueError: If numerator or denominator is zero
    """
    match = _LENGTH_RE.match(token)
    if not match:
        return None
    num, den = int(match.group(1)), int(match.group(2))
    if num <= 0 or den <= 0:
        raise ValueError(f"Invalid length declaration \"{token}\".")
    return 4 * num / den


def parse_voice(text: str, default_duration: float = DEFAULT_DURATION) -> List[Note]:
    """
    Parse one voice into consecutive notes starting at beat 0.

    Args:
        text: Voice tokens
        default_duration: Unit length in beats until an L: declaration

    Returns:
        Notes in order

    Raises:
        ValueError: If a token cannot be parsed
    """
    notes = []
    onset = 0.0
    unit = default_duration
    for token in text.split():
        length = parse_length_decl(token)
        if length is not None:
            unit = length
            continue
        parsed = parse_note_token(token)
        if parsed is None:
            raise ValueError(
                f"Cannot parse note \"{token}\". Use SPN (C4/Eb3/F#5), optional superscript "
                f"octave (C⁴), optional L:x/y, optional duration multiplier suffix."
            )
        pitch, multiplier = parsed
        duration = unit * (multiplier if multiplier is not None else 1)
        notes.append(Note(pitch=pitch, onset=onset, duration=duration))
        onset += duration
    return notes


def merge_voices(*voices: Sequence[Note]) -> List[Note]:
    """Merge voices into one list ordered by onset, then pitch."""
    merged = [n for voice in voices for n in voice]
    merged.sort(key=note_order)
    return merged


def build_notes(
    voice1: str,
    duration1: float = DEFAULT_DURATION,
    voice2: str = "",
    duration2: float = DEFAULT_DURATION,
) -> List[Note]:
    """Parse and merge one or two voices."""
    v1 = parse_voice(voice1, duration1)
    v2 = parse_voice(voice2, duration2) if voice2.strip() else []
    return merge_voices(v1, v2)
