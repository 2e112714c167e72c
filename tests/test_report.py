"""Tests for the output layer and the command-line interface."""

import json
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from harmonic_lab.cli import app, run_analysis
from harmonic_lab.inference import HarmonyAnalyzer
from harmonic_lab.input import build_notes
from harmonic_lab.output import (
    HarmonyReport,
    approach_table,
    beat_table,
    format_chord_detail,
    majority_picks,
    summary_to_dict,
)

runner = CliRunner()


@pytest.fixture
def arpeggio_summary():
    """Analysis of a C major arpeggio in quarter notes."""
    return HarmonyAnalyzer("4/4").analyze(build_notes("C4 E4 G4 C4"), label="QUARTER NOTES")


class TestHarmonyReport:
    """Tests for the plain-text diagnostic log."""

    def test_header(self, arpeggio_summary):
        lines = HarmonyReport().lines([arpeggio_summary])

        assert lines[0].startswith("Harmonic Analysis Lab")
        assert "Meter=4/4" in lines[0]
        assert "Decay=0.3" in lines[0]

    def test_run_banner(self, arpeggio_summary):
        text = HarmonyReport().text([arpeggio_summary])

        assert "QUARTER NOTES  (C4 E4 G4 C4, 4 beats)" in text

    def test_results_per_strategy(self, arpeggio_summary):
        lines = HarmonyReport().lines([arpeggio_summary])

        results = [line.strip() for line in lines if "RESULT:" in line]
        assert len(results) == 4
        assert results[0].startswith("RESULT: C(x4)")
        assert all(r.startswith("RESULT: C(x") for r in results)

    def test_empty_beats_reported(self, arpeggio_summary):
        lines = HarmonyReport().lines([arpeggio_summary])

        assert sum("(no candidates)" in line for line in lines) == 3

    def test_provisional_passes(self, arpeggio_summary):
        text = HarmonyReport().text([arpeggio_summary])

        assert "Pass 1 (positive-only, fwd+bwd): - | C | C | C" in text
        assert "Pass 1 (positive-only, fwd): - | C | C | C" in text

    def test_no_summaries(self):
        assert HarmonyReport().lines([]) == []

    def test_chord_detail(self, arpeggio_summary):
        chord = arpeggio_summary.result("A").path[0].chord

        assert format_chord_detail(None) == "(null)"
        detail = format_chord_detail(chord)
        assert detail.startswith("C  local=")
        assert "bass=1.1" in detail
        assert "C4@0" in detail


class TestSummaryDict:
    """Tests for JSON-ready summaries."""

    def test_serialisable(self, arpeggio_summary):
        data = json.loads(json.dumps(summary_to_dict(arpeggio_summary)))

        assert data["time_signature"] == "4/4"
        assert data["num_beats"] == 4
        assert data["best"] == {
            "approach": "A",
            "progression": "C",
            "total": pytest.approx(arpeggio_summary.best.total),
        }

    def test_progressions_per_strategy(self, arpeggio_summary):
        data = summary_to_dict(arpeggio_summary)

        assert data["progressions"] == {"A": "C", "B": "C", "C": "C", "D": "C"}
        assert data["progressions"] == arpeggio_summary.progressions

    def test_results(self, arpeggio_summary):
        data = summary_to_dict(arpeggio_summary)

        assert [r["approach"] for r in data["results"]] == ["A", "B", "C", "D"]
        assert data["results"][0]["provisional"] is None
        assert data["results"][1]["provisional"] == ["-", "C", "C", "C"]
        assert [step["chord"] for step in data["results"][0]["path"]] == ["C", "C", "C", "C"]


class TestTables:
    """Tests for console tables."""

    def test_majority_picks(self, arpeggio_summary):
        rows = majority_picks(arpeggio_summary)

        assert len(rows) == 4
        assert rows[0][:2] == ("-", 3)
        assert rows[0][2] == ["C", "-", "-", "-"]
        assert all(row[:2] == ("C", 4) for row in rows[1:])

    def test_approach_table(self, arpeggio_summary):
        table = approach_table(arpeggio_summary)

        assert table.row_count == 4
        assert len(table.columns) == 4

    def test_beat_table(self, arpeggio_summary):
        table = beat_table(arpeggio_summary)

        assert table.row_count == 4
        assert len(table.columns) == 7


class TestRunAnalysis:
    """Tests for single and multi-subdivision runs."""

    def test_single_run(self):
        summaries = run_analysis("C4 E4 G4 C4")

        assert len(summaries) == 1
        assert summaries[0].label == "V1:QUARTER"

    def test_second_voice_label(self):
        summaries = run_analysis("C4 E4 G4", voice2="C3 C3 C3", dur2=1.0)

        assert summaries[0].label == "V1:QUARTER V2:QUARTER"

    def test_all_durations(self):
        summaries = run_analysis("C4 E4 G4 C4", all_durations=True)

        assert [s.label for s in summaries] == [
            "HALF NOTES", "QUARTER NOTES", "EIGHTH NOTES", "SIXTEENTH NOTES",
        ]
        assert [s.num_beats for s in summaries] == [8, 4, 2, 1]

    def test_invalid_input(self):
        with pytest.raises(ValueError):
            run_analysis("C4")
        with pytest.raises(ValueError):
            run_analysis("C4 E4", time_sig="four")


class TestCli:
    """Tests for the typer application."""

    def test_analyze(self):
        result = runner.invoke(app, ["analyze", "C4 E4 G4 C4"])

        assert result.exit_code == 0
        assert "Best: A - C" in result.output

    def test_analyze_two_voices(self):
        result = runner.invoke(app, ["analyze", "C4 E4 G4", "--v2", "C3 C3 C3"])

        assert result.exit_code == 0
        assert "Best:" in result.output

    def test_analyze_log(self):
        result = runner.invoke(app, ["analyze", "C4 E4 G4 C4", "--log"])

        assert result.exit_code == 0
        assert "RESULT: C(x4)" in result.output

    def test_analyze_json(self):
        result = runner.invoke(app, ["analyze", "C4 E4 G4 C4", "--json"])

        assert result.exit_code == 0
        assert '"progression": "C"' in result.output

    def test_too_few_notes(self):
        result = runner.invoke(app, ["analyze", "C4"])

        assert result.exit_code == 1
        assert "Need at least 2 notes" in result.output

    def test_bad_time_signature(self):
        result = runner.invoke(app, ["analyze", "C4 E4", "-t", "44"])

        assert result.exit_code == 1
        assert "Invalid time signature" in result.output

    def test_bad_note(self):
        result = runner.invoke(app, ["analyze", "C4 Q4"])

        assert result.exit_code == 1
        assert "Cannot parse note" in result.output

    def test_chords(self):
        result = runner.invoke(app, ["chords", "--root", "G"])

        assert result.exit_code == 0
        assert "dominant_7" in result.output
        assert "G7" in result.output

    def test_chords_unknown_root(self):
        result = runner.invoke(app, ["chords", "--root", "X"])

        assert result.exit_code == 1
