"""Diagnostic traces - Alternative harmonies kept in the DP tables."""

from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Sequence, Tuple

from .chords import NonChordTone
from .search import DPState, DPTable, PathStep, StrategyResult, format_harmony, walk_back


@dataclass
class HarmonyEntry:
    """A complete harmony ending in one DP state."""

    rank: int
    path: List[PathStep]
    total: float

    @property
    def progression(self) -> str:
        return format_harmony(self.path, counts=True)

    @property
    def unharmonised(self) -> List[NonChordTone]:
        return unharmonised(self.path)


@dataclass
class BeatTrace:
    """Top alternatives ending at one beat."""

    beat: int
    top_harmonies: List[HarmonyEntry] = field(default_factory=list)
    best_per_chord: List[HarmonyEntry] = field(default_factory=list)

    @property
    def has_candidates(self) -> bool:
        return bool(self.top_harmonies)


def unharmonised(path: Sequence[PathStep]) -> List[NonChordTone]:
    """Non-chord tones that cost something anywhere along a path."""
    notes = []
    for step in path:
        if step.chord is None:
            continue
        notes.extend(n for n in step.chord.nct if n.penalty > 0)
    return notes


def chord_states(row: Dict[Hashable, DPState]) -> List[Tuple[Hashable, DPState]]:
    """Chord-holding states of a row, best total first."""
    states = [(key, state) for key, state in row.items() if state.chord is not None]
    return sorted(states, key=lambda item: item[1].total, reverse=True)


def _entries(table: DPTable, beat: int, states, top_k: int) -> List[HarmonyEntry]:
    return [
        HarmonyEntry(rank=i + 1, path=walk_back(table, beat, key), total=state.total)
        for i, (key, state) in enumerate(states[:top_k])
    ]


def beat_traces(result: StrategyResult, top_k: int = 3) -> List[BeatTrace]:
    """
    Per-beat alternatives from a strategy's final DP table.

    Args:
        result: Strategy outcome
        top_k: Alternatives kept per beat

    Returns:
        One BeatTrace per beat; traces without candidates are empty
    """
    traces = []
    for beat, row in enumerate(result.table):
        states = chord_states(row)
        trace = BeatTrace(beat=beat)
        if states:
            trace.top_harmonies = _entries(result.table, beat, states, top_k)

            # Path-dependent tables hold one state per (chord, boundary)
            by_chord: Dict[Hashable, Tuple[Hashable, DPState]] = {}
            for key, state in states:
                existing = by_chord.get(state.chord.key)
                if existing is None or state.total > existing[1].total:
                    by_chord[state.chord.key] = (key, state)
            per_chord = sorted(by_chord.values(), key=lambda item: item[1].total, reverse=True)
            trace.best_per_chord = _entries(result.table, beat, per_chord, top_k)
        traces.append(trace)
    return traces


def complete_harmonies(result: StrategyResult, top_k: int = 3) -> List[HarmonyEntry]:
    """Best complete harmonies at the final beat."""
    if not result.table:
        return []
    last = len(result.table) - 1
    return _entries(result.table, last, chord_states(result.table[last]), top_k)
