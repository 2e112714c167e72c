"""Note data classes - the units the harmonic engine consumes."""

from dataclasses import dataclass

from .constants import NOTE_NAMES


def midi_to_spn(pitch: int) -> str:
    """Format a MIDI pitch in scientific pitch notation (e.g. 60 -> 'C4')."""
    octave = (pitch // 12) - 1
    return f"{NOTE_NAMES[pitch % 12]}{octave}"


@dataclass(frozen=True)
class Note:
    """A written note on the beat timeline."""

    pitch: int  # MIDI pitch
    onset: float  # Start in beats (quarter note = 1 beat)
    duration: float  # Length in beats

    def __post_init__(self):
        if self.onset < 0:
            raise ValueError(f"Note onset must be >= 0, got {self.onset}")
        if self.duration <= 0:
            raise ValueError(f"Note duration must be > 0, got {self.duration}")

    @property
    def offset(self) -> float:
        """End of the note in beats."""
        return self.onset + self.duration

    @property
    def pitch_class(self) -> int:
        """Get pitch class (0-11, where 0=C)."""
        return self.pitch % 12

    @property
    def pitch_name(self) -> str:
        """Get note name (e.g., 'C4', 'Bb3')."""
        return midi_to_spn(self.pitch)


@dataclass(frozen=True)
class Segment:
    """A slice of a note that never crosses a beat boundary."""

    pitch: int
    onset: float
    duration: float
    approach: float = 1.0  # Melodic approach multiplier

    @property
    def pitch_class(self) -> int:
        return self.pitch % 12


@dataclass(frozen=True)
class WeightedNote:
    """A segment as heard from one evaluation beat."""

    pitch: int
    pitch_class: int
    onset: float
    salience: float
    decay: float
