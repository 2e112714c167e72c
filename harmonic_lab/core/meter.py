"""Time signature handling."""

import re
from dataclasses import dataclass
from typing import Union

_TIME_SIG_RE = re.compile(r"^(\d+)/(\d+)$")


@dataclass(frozen=True)
class TimeSignature:
    """Meter of the analysed passage.

    Lengths are measured in beats, where a quarter note is one beat
    regardless of the denominator.
    """

    numerator: int = 4
    denominator: int = 4

    def __post_init__(self):
        if self.numerator <= 0 or self.denominator <= 0:
            raise ValueError(
                f"Invalid time signature \"{self.numerator}/{self.denominator}\"."
            )

    @property
    def beat_length(self) -> float:
        return 4 / self.denominator

    @property
    def bar_length(self) -> float:
        return self.numerator * self.beat_length

    @classmethod
    def parse(cls, sig: Union[str, "TimeSignature", None]) -> "TimeSignature":
        """Parse a signature such as '3/4' or '6/8'."""
        if isinstance(sig, TimeSignature):
            return sig
        match = _TIME_SIG_RE.match(str(sig or "").strip())
        if not match:
            raise ValueError(f"Invalid time signature \"{sig}\".")
        return cls(int(match.group(1)), int(match.group(2)))

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"
