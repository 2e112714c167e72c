"""Console tables for analysis results."""

import math
from collections import Counter
from typing import List, Tuple

from rich.table import Table

from ..inference import AnalysisSummary


def _total(value: float) -> str:
    return f"{value:.3f}" if math.isfinite(value) else "-"


def approach_table(summary: AnalysisSummary) -> Table:
    """Strategies ranked by total, with distance from the best."""
    table = Table(title=f"{summary.label} - Best: {summary.best.name} ({summary.best.progression})")
    table.add_column("Approach", style="cyan")
    table.add_column("Progression", style="green")
    table.add_column("Total score", style="magenta", justify="right")
    table.add_column("Δ from best", style="yellow", justify="right")

    ranked = sorted(summary.results, key=lambda r: r.total, reverse=True)
    best = ranked[0].total if ranked else -math.inf
    for r in ranked:
        delta = best - r.total if math.isfinite(best) and math.isfinite(r.total) else math.nan
        table.add_row(
            r.name,
            r.progression,
            _total(r.total),
            "0.000" if delta == 0 else _total(delta),
        )
    return table


def majority_picks(summary: AnalysisSummary) -> List[Tuple[str, int, List[str]]]:
    """
    Majority chord per beat across strategies.

    Returns:
        (winning chord name, number of strategies agreeing, picks per strategy)
    """
    num_beats = max((len(r.path) for r in summary.results), default=0)
    rows = []
    for b in range(num_beats):
        picks = [r.chord_names[b] if b < len(r.path) else "-" for r in summary.results]
        # most_common keeps first-seen order among equal counts
        winner, agree = Counter(picks).most_common(1)[0]
        rows.append((winner, agree, picks))
    return rows


def beat_table(summary: AnalysisSummary) -> Table:
    """Per-beat picks of every strategy with the majority choice."""
    table = Table(title="Per-beat picks")
    table.add_column("Beat", justify="right")
    table.add_column("Majority pick", style="green")
    table.add_column("Agreement", style="magenta")
    for r in summary.results:
        table.add_column(r.name, style="cyan")

    total = len(summary.results)
    for b, (winner, agree, picks) in enumerate(majority_picks(summary)):
        table.add_row(str(b), winner, f"{agree}/{total}", *picks)
    return table
