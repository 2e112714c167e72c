"""Diagnostic report - Plain-text log and JSON-ready summaries."""

from typing import Any, Dict, List, Optional, Sequence

from ..core import AnalysisConfig, midi_to_spn
from ..inference import (
    AnalysisSummary,
    ChordCandidate,
    HarmonyEntry,
    PathStep,
    SalienceModel,
    StrategyResult,
    format_harmony,
)

RULE = "=" * 78


def _num(value: float) -> str:
    """Compact number for onsets (0, 1.5, 0.25)."""
    return f"{value:g}"


def format_chord_detail(chord: Optional[ChordCandidate]) -> str:
    """Scoring detail of one chord: local score, matched and unharmonised notes."""
    if chord is None:
        return "(null)"
    matched = ", ".join(
        f"{midi_to_spn(m.pitch)}@{_num(m.onset)}: sal={m.salience:.3f} * w={m.weight:g} = {m.contribution:.3f}"
        for m in chord.matched
    )
    unharmonised = ", ".join(
        f"{midi_to_spn(n.pitch)}@{_num(n.onset)}: sal={n.salience:.3f} pen={n.penalty:.3f}"
        for n in chord.nct
        if n.penalty > 0
    )
    text = (
        f"{chord.symbol}  local={chord.score:.3f}  cplx={chord.complexity}  bass={chord.bass_mult:.1f}"
        f"\n               matched: [{matched}]"
    )
    if unharmonised:
        text += f"\n               unharmonised: [{unharmonised}]"
    return text


class HarmonyReport:
    """Build the diagnostic log of one or more analysis runs."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()
        self._lines: List[str] = []

    def header(self, summary: AnalysisSummary) -> List[str]:
        return [
            f"Harmonic Analysis Lab   Meter={summary.time_signature}   "
            f"Decay={self.config.decay_rate:g}, complexity_penalty={self.config.complexity_penalty:g}/level"
        ]

    def lines(self, summaries: Sequence[AnalysisSummary]) -> List[str]:
        """
        Full log for a sequence of runs sharing one meter.

        Args:
            summaries: Runs, e.g. one per rhythmic subdivision

        Returns:
            Log lines
        """
        self._lines = []
        if not summaries:
            return []
        self._lines.extend(self.header(summaries[0]))
        for summary in summaries:
            self._run(summary)
        return self._lines

    def text(self, summaries: Sequence[AnalysisSummary]) -> str:
        return "\n".join(self.lines(summaries))

    def _log(self, line: str) -> None:
        self._lines.append(line)

    def _run(self, summary: AnalysisSummary) -> None:
        note_desc = " ".join(midi_to_spn(n.pitch) for n in summary.notes)
        self._log(f"\n{RULE}")
        self._log(f"  {summary.label}  ({note_desc}, {summary.num_beats} beats)")
        self._log(RULE)

        model = SalienceModel(summary.time_signature, self.config)
        self._log("\n  Notes per beat:")
        for b in range(summary.num_beats):
            desc = "  ".join(
                f"{midi_to_spn(n.pitch)}@{_num(n.onset)}(sal={n.salience:.3f}, decay={n.decay:.1f})"
                for n in model.collect_past(summary.segments, b)
            )
            self._log(f"    beat {b}: {desc}")

        for result in summary.results:
            if result.provisional_path is None:
                self._strategy(summary, result, f"{result.name} - {result.label}")
                continue
            scope = "fwd+bwd" if result.name == "B" else "fwd"
            self._log(f"\n  {result.name} - {result.label}")
            self._log(
                f"    Pass 1 (positive-only, {scope}): "
                + " | ".join(step.symbol for step in result.provisional_path)
            )
            self._strategy(summary, result, "    Pass 2 (constrained, full scoring):")

    def _strategy(self, summary: AnalysisSummary, result: StrategyResult, title: str) -> None:
        self._log(f"\n  {title}")

        for trace in summary.traces(result.name):
            if not trace.has_candidates:
                self._log(f"    beat {trace.beat}: (no candidates)")
                continue
            self._log(f"    beat {trace.beat}:")
            self._log(f"      Top {summary.top_k} harmonies to this beat:")
            for entry in trace.top_harmonies:
                self._entry(entry)
            self._log("      Best harmony per chord:")
            for entry in trace.best_per_chord:
                name = entry.path[-1].symbol
                self._log(f"        {name:<8} via {format_harmony(entry.path, counts=True):<24} total={entry.total:.3f}")

        self._log(f"\n    Top {summary.top_k} complete harmonies:")
        for entry in summary.complete_harmonies(result.name):
            self._entry(entry)

        self._log(f"\n  RESULT: {result.progression_with_counts}  (total={result.total:.3f})")

    def _entry(self, entry: HarmonyEntry) -> None:
        unh = entry.unharmonised
        unh_text = (
            ", ".join(f"{midi_to_spn(n.pitch)}@{_num(n.onset)}({n.penalty:.3f})" for n in unh)
            if unh else "(none)"
        )
        self._log(f"      #{entry.rank}  {entry.progression}    total={entry.total:.3f}")

        seen = set()
        for step in entry.path:
            if step.chord is None:
                continue
            key = (step.beat, step.chord.key)
            if key in seen:
                continue
            seen.add(key)
            bnd = f"  bnd={_num(step.boundary)}" if step.boundary is not None else ""
            self._log(f"            beat {step.beat}: {format_chord_detail(step.chord)}{bnd}")
        self._log(f"            unharmonised in harmony: [{unh_text}]")


def path_to_dict(path: Sequence[PathStep]) -> List[Dict[str, Any]]:
    return [
        {"beat": step.beat, "chord": step.symbol, "total": step.total, "chain": step.chain}
        for step in path
    ]


def summary_to_dict(summary: AnalysisSummary) -> Dict[str, Any]:
    """JSON-serialisable view of an analysis run."""
    return {
        "label": summary.label,
        "time_signature": str(summary.time_signature),
        "num_beats": summary.num_beats,
        "best": {
            "approach": summary.best.name,
            "progression": summary.best.progression,
            "total": summary.best.total,
        },
        "progressions": summary.progressions,
        "results": [
            {
                "approach": r.name,
                "label": r.label,
                "progression": r.progression,
                "total": r.total,
                "path": path_to_dict(r.path),
                "provisional": [s.symbol for s in r.provisional_path] if r.provisional_path else None,
            }
            for r in summary.results
        ],
    }
