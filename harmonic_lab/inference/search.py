"""Path search - Dynamic programming over the beat timeline.

Every strategy chooses, per beat, either no chord or one chord candidate,
maximising the sum of local scores (chord score minus complexity charge).

Strategies:
- A: Bidirectional salience, path-dependent boundary
- B: Two passes; pass 1 combines a forward and a backward DP
- C: Two passes; pass 1 is a forward DP
- D: Past-only salience, path-dependent boundary

The path-dependent strategies fold a boundary (latest onset claimed by the
running chord) into the state, so a note claimed by one chord cannot be
claimed again by a different chord that follows it.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Sequence, Tuple

from ..core import AnalysisConfig, CHORD_TYPES, Segment, WeightedNote
from .chords import ChordCandidate, ChordKey, ChordScorer
from .salience import SalienceModel, SaliencePolicy

logger = logging.getLogger(__name__)

NO_CHORD = None
NO_BOUNDARY = -math.inf

STRATEGY_LABELS = {
    "A": "Bidirectional + path-dependent boundary",
    "B": "Fwd+Bwd combined two-pass",
    "C": "Forward-only two-pass",
    "D": "Path-dependent boundary (past-only)",
}


@dataclass
class DPState:
    """Best way of ending (or, for backward tables, starting) in a state.

    `link` is the predecessor key in forward tables and the successor key in
    backward tables. `chain` counts consecutive beats of the same chord and
    never feeds into `total`.
    """

    total: float
    link: Optional[Hashable]
    chord: Optional[ChordCandidate]
    chain: int = 0
    boundary: float = NO_BOUNDARY


DPTable = List[Dict[Hashable, DPState]]


@dataclass
class PathStep:
    """One beat of a chosen path."""

    beat: int
    key: Optional[ChordKey]
    chord: Optional[ChordCandidate]
    total: float
    chain: int = 0
    boundary: Optional[float] = None

    @property
    def symbol(self) -> str:
        return self.chord.symbol if self.chord else "-"


def format_harmony(path: Sequence[PathStep], counts: bool = False) -> str:
    """
    Format a path as a chord progression string.

    Consecutive beats of the same chord are merged; beats without a chord
    are dropped.

    Args:
        path: Path steps in beat order
        counts: Append run lengths, e.g. 'C(x4)'

    Returns:
        Progression such as 'C -> G7 -> C', or '(none)'
    """
    runs: List[List] = []
    for step in path:
        name = step.symbol
        if runs and runs[-1][0] == name:
            runs[-1][1] += 1
        else:
            runs.append([name, 1])
    names = [
        f"{name}(x{count})" if counts and count > 1 else name
        for name, count in runs
        if name != "-"
    ]
    return " -> ".join(names) or "(none)"


@dataclass
class StrategyResult:
    """Outcome of one search strategy."""

    name: str
    label: str
    path: List[PathStep]
    table: DPTable  # Table the path was backtracked from
    path_dependent: bool = False
    provisional_path: Optional[List[PathStep]] = None  # Pass 1 of B and C
    pass_tables: Dict[str, DPTable] = field(default_factory=dict)

    @property
    def total(self) -> float:
        """Final accumulated score."""
        if not self.path:
            return -math.inf
        return self.path[-1].total

    @property
    def progression(self) -> str:
        return format_harmony(self.path)

    @property
    def progression_with_counts(self) -> str:
        return format_harmony(self.path, counts=True)

    @property
    def chord_names(self) -> List[str]:
        """Chord symbol per beat ('-' for no chord)."""
        return [step.symbol for step in self.path]


def _best_state(row: Dict[Hashable, DPState], chords_only: bool = False) -> Tuple[Optional[Hashable], Optional[DPState]]:
    """Highest-total state of a row; first seen wins ties."""
    best_key, best_state = None, None
    best_total = -math.inf
    for key, state in row.items():
        if chords_only and state.chord is None:
            continue
        if best_state is None or state.total > best_total:
            best_key, best_state, best_total = key, state, state.total
    return best_key, best_state


def walk_back(table: DPTable, beat: int, key: Hashable) -> List[PathStep]:
    """Follow predecessor links from (beat, key) down to beat 0."""
    path = []
    cur = key
    for b in range(beat, -1, -1):
        if cur not in table[b]:
            raise RuntimeError(f"DP table has no state {cur!r} at beat {b}")
        state = table[b][cur]
        path.append(PathStep(
            beat=b,
            key=state.chord.key if state.chord else NO_CHORD,
            chord=state.chord,
            total=state.total,
            chain=state.chain,
            boundary=state.boundary if state.boundary != NO_BOUNDARY else None,
        ))
        cur = state.link
    path.reverse()
    return path


class HarmonicSearch:
    """DP search strategies over per-beat chord candidates."""

    def __init__(
        self,
        salience_model: SalienceModel,
        scorer: Optional[ChordScorer] = None,
        config: Optional[AnalysisConfig] = None,
    ):
        self.config = config or salience_model.config
        self.salience_model = salience_model
        self.scorer = scorer or ChordScorer(self.config)
        self._strategies = {
            "A": self.bidirectional_boundary,
            "B": self.combined_two_pass,
            "C": self.forward_two_pass,
            "D": self.past_boundary,
        }

    @property
    def strategy_names(self) -> List[str]:
        return list(self._strategies)

    def run(self, name: str, segments: Sequence[Segment], num_beats: int) -> StrategyResult:
        """Run one strategy by name ('A'-'D')."""
        if name not in self._strategies:
            raise ValueError(f"Unknown strategy: {name!r}")
        result = self._strategies[name](segments, num_beats)
        logger.debug(f"Strategy {name}: {result.progression_with_counts} total={result.total:.3f}")
        return result

    # ------------------------------------------------------------------
    # Simple DP
    # ------------------------------------------------------------------

    def forward_dp(self, beat_candidates: Sequence[Sequence[ChordCandidate]]) -> DPTable:
        """
        Forward DP over per-beat candidates.

        Chord changes are free: each chord state extends the best state of
        the previous beat, whatever chord it held.
        """
        return self._simple_dp(list(beat_candidates))

    def backward_dp(self, beat_candidates: Sequence[Sequence[ChordCandidate]]) -> DPTable:
        """Mirror of forward_dp, built from the last beat towards the first."""
        reversed_table = self._simple_dp(list(beat_candidates)[::-1])
        return reversed_table[::-1]

    def _simple_dp(self, beat_candidates: List[Sequence[ChordCandidate]]) -> DPTable:
        penalty = self.config.complexity_penalty
        table: DPTable = []

        for b, candidates in enumerate(beat_candidates):
            row: Dict[Hashable, DPState] = {}
            if b == 0:
                row[NO_CHORD] = DPState(total=0.0, link=None, chord=None, chain=0)
                for c in candidates:
                    row[c.key] = DPState(total=c.local_score(penalty), link=None, chord=c, chain=1)
                table.append(row)
                continue

            prev_row = table[b - 1]
            best_key, best_prev = _best_state(prev_row)
            row[NO_CHORD] = DPState(total=best_prev.total, link=best_key, chord=None, chain=0)

            for c in candidates:
                local = c.local_score(penalty)
                best_total, best_link, best_chain = -math.inf, None, 1
                for pk, ps in prev_row.items():
                    total = ps.total + local
                    if total > best_total:
                        same = ps.chord is not None and ps.chord.key == c.key
                        best_total, best_link = total, pk
                        best_chain = ps.chain + 1 if same else 1
                existing = row.get(c.key)
                if existing is None or best_total > existing.total:
                    row[c.key] = DPState(total=best_total, link=best_link, chord=c, chain=best_chain)
            table.append(row)

        return table

    # ------------------------------------------------------------------
    # Path-dependent DP
    # ------------------------------------------------------------------

    def path_dependent_dp(
        self,
        segments: Sequence[Segment],
        num_beats: int,
        policy: SaliencePolicy,
    ) -> DPTable:
        """
        DP whose states carry the boundary of the running chord.

        State keys are (chord key or None, boundary). A chord differing from
        the predecessor's only sees notes after the predecessor's boundary.
        """
        penalty = self.config.complexity_penalty
        table: DPTable = []

        for b in range(num_beats):
            notes = self.salience_model.collect(segments, b, policy)
            row: Dict[Hashable, DPState] = {}

            if b == 0:
                row[(NO_CHORD, NO_BOUNDARY)] = DPState(total=0.0, link=None, chord=None, chain=0)
                for c in self.scorer.find_candidates(notes):
                    boundary = c.boundary if c.boundary is not None else NO_BOUNDARY
                    self._relax(row, (c.key, boundary), DPState(
                        total=c.local_score(penalty), link=None, chord=c, chain=1, boundary=boundary,
                    ))
                table.append(row)
                continue

            roots = self.scorer.present_roots(notes)
            scored: Dict[Tuple[int, str, Optional[float]], Optional[ChordCandidate]] = {}

            for prev_key, prev in table[b - 1].items():
                prev_chord_key = prev.chord.key if prev.chord else NO_CHORD
                self._relax(row, (NO_CHORD, prev.boundary), DPState(
                    total=prev.total, link=prev_key, chord=None, chain=0, boundary=prev.boundary,
                ))

                for root in roots:
                    for quality in CHORD_TYPES:
                        same = (root, quality) == prev_chord_key
                        c = self._score_after(scored, root, quality, notes, None if same else prev.boundary)
                        if c is None:
                            continue
                        boundary = c.boundary if c.boundary is not None else prev.boundary
                        self._relax(row, ((root, quality), boundary), DPState(
                            total=prev.total + c.local_score(penalty),
                            link=prev_key,
                            chord=c,
                            chain=prev.chain + 1 if same else 1,
                            boundary=boundary,
                        ))
            table.append(row)

        return table

    @staticmethod
    def _relax(row: Dict[Hashable, DPState], key: Hashable, state: DPState) -> None:
        existing = row.get(key)
        if existing is None or state.total > existing.total:
            row[key] = state

    def _score_after(
        self,
        cache: Dict[Tuple[int, str, Optional[float]], Optional[ChordCandidate]],
        root: int,
        quality: str,
        notes: Sequence[WeightedNote],
        after: Optional[float],
    ) -> Optional[ChordCandidate]:
        """Score a chord on notes with onset > `after` (all notes when None)."""
        cache_key = (root, quality, after)
        if cache_key not in cache:
            visible = notes if after is None else [n for n in notes if n.onset > after]
            cache[cache_key] = self.scorer.score(root, quality, visible)
        return cache[cache_key]

    # ------------------------------------------------------------------
    # Backtracking
    # ------------------------------------------------------------------

    def backtrack(self, table: DPTable, chords_only: bool = True) -> List[PathStep]:
        """
        Backtrack from the best final state.

        With chords_only the best chord state of the last beat wins and
        no-chord states are only used when the last beat has nothing else.
        Otherwise every state of the last beat competes.
        """
        if not table:
            return []
        final_key, final_state = _best_state(table[-1], chords_only=chords_only)
        if final_state is None:
            final_key, final_state = _best_state(table[-1])
        return walk_back(table, len(table) - 1, final_key)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def bidirectional_boundary(self, segments: Sequence[Segment], num_beats: int) -> StrategyResult:
        """Strategy A."""
        table = self.path_dependent_dp(segments, num_beats, SaliencePolicy.BIDIRECTIONAL)
        return StrategyResult("A", STRATEGY_LABELS["A"], self.backtrack(table), table, path_dependent=True)

    def past_boundary(self, segments: Sequence[Segment], num_beats: int) -> StrategyResult:
        """Strategy D."""
        table = self.path_dependent_dp(segments, num_beats, SaliencePolicy.PAST)
        return StrategyResult("D", STRATEGY_LABELS["D"], self.backtrack(table), table, path_dependent=True)

    def combined_two_pass(self, segments: Sequence[Segment], num_beats: int) -> StrategyResult:
        """Strategy B: forward and backward totals pick the provisional chords."""
        penalty = self.config.complexity_penalty
        exploratory = self.exploratory_candidates(segments, num_beats)
        fwd = self.forward_dp(exploratory)
        bwd = self.backward_dp(exploratory)

        provisional: List[PathStep] = []
        for b in range(num_beats):
            best_key, best_chord, best_combined = NO_CHORD, None, -math.inf
            for key, fs in fwd[b].items():
                if key not in bwd[b]:
                    continue
                local = fs.chord.local_score(penalty) if fs.chord else 0.0
                combined = fs.total + bwd[b][key].total - local
                if combined > best_combined:
                    best_key, best_chord, best_combined = key, fs.chord, combined
            provisional.append(PathStep(beat=b, key=best_key, chord=best_chord, total=best_combined))
        self._fill_chains(provisional)

        final = self.forward_dp(self.constrained_candidates(segments, num_beats, provisional))
        return StrategyResult(
            "B", STRATEGY_LABELS["B"], self.backtrack(final), final,
            provisional_path=provisional,
            pass_tables={"forward": fwd, "backward": bwd},
        )

    def forward_two_pass(self, segments: Sequence[Segment], num_beats: int) -> StrategyResult:
        """Strategy C: a forward DP picks the provisional chords."""
        exploratory = self.forward_dp(self.exploratory_candidates(segments, num_beats))
        # Pass 1 may end on no chord
        provisional = self.backtrack(exploratory, chords_only=False)

        final = self.forward_dp(self.constrained_candidates(segments, num_beats, provisional))
        return StrategyResult(
            "C", STRATEGY_LABELS["C"], self.backtrack(final), final,
            provisional_path=provisional,
            pass_tables={"provisional": exploratory},
        )

    def exploratory_candidates(self, segments: Sequence[Segment], num_beats: int) -> List[List[ChordCandidate]]:
        """Positive-only candidates per beat from past-only salience."""
        return [
            self.scorer.find_candidates(self.salience_model.collect_past(segments, b), positive_only=True)
            for b in range(num_beats)
        ]

    def constrained_candidates(
        self,
        segments: Sequence[Segment],
        num_beats: int,
        provisional: Sequence[PathStep],
    ) -> List[List[ChordCandidate]]:
        """
        Fully scored candidates that respect the provisional note claims.

        For chord K at beat b, notes claimed by a different provisional chord
        at an earlier beat are hidden up to the latest such claim, unless
        the provisional chord of the note's own beat is K.
        """
        claims: List[Tuple[Optional[ChordKey], List[float]]] = [
            (step.key, [m.onset for m in step.chord.matched]) if step.chord else (NO_CHORD, [])
            for step in provisional
        ]

        beat_candidates = []
        for b in range(num_beats):
            notes = self.salience_model.collect_past(segments, b)
            candidates = []
            for root in self.scorer.present_roots(notes):
                for quality in CHORD_TYPES:
                    key = (root, quality)
                    boundary = NO_BOUNDARY
                    for claimed_key, onsets in claims[:b]:
                        if claimed_key is NO_CHORD or claimed_key == key:
                            continue
                        for onset in onsets:
                            if onset > boundary:
                                boundary = onset
                    kept = [
                        n for n in notes
                        if self._claimed_by(n, key, claims) or n.onset > boundary
                    ]
                    c = self.scorer.score(root, quality, kept)
                    if c is not None:
                        candidates.append(c)
            candidates.sort(key=lambda c: c.score, reverse=True)
            beat_candidates.append(candidates)
        return beat_candidates

    @staticmethod
    def _claimed_by(note: WeightedNote, key: ChordKey, claims) -> bool:
        note_beat = math.floor(note.onset)
        return note_beat < len(claims) and claims[note_beat][0] == key

    @staticmethod
    def _fill_chains(path: List[PathStep]) -> None:
        prev = None
        for step in path:
            if step.chord is None:
                step.chain = 0
            elif prev is not None and prev.key == step.key:
                step.chain = prev.chain + 1
            else:
                step.chain = 1
            prev = step
