"""Command-line interface for Harmonic Lab.

Provides commands for:
- analyze: Infer the chord progression under one or two voices
- chords: List the chord qualities the engine knows
"""

import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from .core import (
    CHORD_TYPES,
    DEFAULT_DURATION,
    DEFAULT_TIME_SIGNATURE,
    NOTE_NAMES,
    SUBDIVISIONS,
    AnalysisConfig,
    chord_name,
)
from .core.constants import DURATION_LABELS
from .inference import AnalysisSummary, HarmonyAnalyzer
from .input import build_notes
from .output import HarmonyReport, approach_table, beat_table, summary_to_dict

app = typer.Typer(
    name="harmonic-lab",
    help="Infer chord progressions from written voices",
    rich_markup_mode="markdown",
)
console = Console()


def _run_label(dur1: float, dur2: float, has_second_voice: bool) -> str:
    label = f"V1:{DURATION_LABELS.get(dur1, f'{dur1:g}')}"
    if has_second_voice:
        label += f" V2:{DURATION_LABELS.get(dur2, f'{dur2:g}')}"
    return label


def run_analysis(
    voice1: str,
    voice2: str = "",
    dur1: float = DEFAULT_DURATION,
    dur2: float = DEFAULT_DURATION,
    time_sig: str = DEFAULT_TIME_SIGNATURE,
    all_durations: bool = False,
    config: Optional[AnalysisConfig] = None,
) -> List[AnalysisSummary]:
    """
    Analyse voices once, or once per rhythmic subdivision.

    With all_durations the first voice takes each subdivision in turn; the
    second voice keeps dur2 when given.

    Raises:
        ValueError: On malformed voices, meter, or fewer than 2 notes
    """
    analyzer = HarmonyAnalyzer(time_signature=time_sig, config=config)
    has_v2 = bool(voice2.strip())

    if not all_durations:
        notes = build_notes(voice1, dur1, voice2, dur2)
        return [analyzer.analyze(notes, label=_run_label(dur1, dur2, has_v2))]

    summaries = []
    for duration, label in SUBDIVISIONS:
        notes = build_notes(voice1, duration, voice2, dur2 if has_v2 else duration)
        summaries.append(analyzer.analyze(notes, label=label))
    return summaries


@app.command()
def analyze(
    voice1: str = typer.Argument(..., help="First voice in SPN, e.g. 'C4 E4 G4 C5'"),
    voice2: str = typer.Option("", "--v2", help="Optional second voice"),
    dur1: float = typer.Option(DEFAULT_DURATION, "--dur1", help="Unit length of voice 1 in beats"),
    dur2: float = typer.Option(DEFAULT_DURATION, "--dur2", help="Unit length of voice 2 in beats"),
    time_sig: str = typer.Option(DEFAULT_TIME_SIGNATURE, "--time-sig", "-t", help="Time signature"),
    all_durations: bool = typer.Option(
        False, "--all-durations", "-a", help="Run half, quarter, eighth and sixteenth subdivisions"
    ),
    show_log: bool = typer.Option(False, "--log", help="Print the full diagnostic log"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
):
    """Infer the most plausible chord progression.

    Examples:
        harmonic-lab analyze "C4 E4 G4 C4"
        harmonic-lab analyze "C4 E4 G4" --v2 "C3 C3 C3"
        harmonic-lab analyze "E5 D5 C5 D5 E5 E5 E52" -t 3/4 --all-durations
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    config = AnalysisConfig()
    try:
        summaries = run_analysis(voice1, voice2, dur1, dur2, time_sig, all_durations, config)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if as_json:
        console.print_json(data=[summary_to_dict(s) for s in summaries])
        return

    for summary in summaries:
        console.print()
        console.print(approach_table(summary))
        console.print(beat_table(summary))
        console.print(
            f"[green]Best: {summary.best.name} - {summary.best.progression} "
            f"(total={summary.best.total:.3f})[/green]"
        )

    if show_log:
        console.print()
        console.print(HarmonyReport(config).text(summaries), markup=False, highlight=False)


@app.command()
def chords(
    root: str = typer.Option("C", "--root", "-r", help="Root used for example symbols"),
):
    """List the chord qualities in the catalogue."""
    if root not in NOTE_NAMES:
        console.print(f"[red]Error: Unknown root {root!r}. Use one of: {' '.join(NOTE_NAMES)}[/red]")
        raise typer.Exit(1)
    root_pc = NOTE_NAMES.index(root)

    table = Table(title="Chord Qualities")
    table.add_column("Quality", style="cyan")
    table.add_column("Symbol", style="green")
    table.add_column("Intervals", style="yellow")
    table.add_column("Required", style="yellow")
    table.add_column("Complexity", style="magenta", justify="right")

    for name, chord_type in CHORD_TYPES.items():
        table.add_row(
            name,
            chord_name(root_pc, name),
            " ".join(str(i) for i in chord_type.intervals),
            " ".join(str(i) for i in chord_type.required),
            str(chord_type.complexity),
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
