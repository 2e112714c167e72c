"""Tests for voice notation parsing."""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from harmonic_lab.core import DEFAULT_DURATION, Note, midi_to_spn
from harmonic_lab.input import (
    build_notes,
    merge_voices,
    parse_length_decl,
    parse_note_token,
    parse_spn,
    parse_voice,
)


class TestParseSpn:
    """Tests for scientific pitch notation."""

    def test_natural_notes(self):
        assert parse_spn("C4") == 60
        assert parse_spn("A4") == 69
        assert parse_spn("c4") == 60
        assert parse_spn("C-1") == 0

    def test_accidentals(self):
        assert parse_spn("Eb3") == 51
        assert parse_spn("F#5") == 78
        assert parse_spn("Bb2") == 46
        assert parse_spn("Cb4") == 59
        assert parse_spn("B#3") == 60
        assert parse_spn("Dbb4") == 60

    def test_superscript_octave(self):
        assert parse_spn("C⁴") == 60
        assert parse_spn("G³") == 55

    def test_not_a_note(self):
        assert parse_spn("H4") is None
        assert parse_spn("C") is None
        assert parse_spn("") is None

    def test_spn_round_trip_names(self):
        assert midi_to_spn(60) == "C4"
        assert midi_to_spn(70) == "Bb4"


class TestParseTokens:
    """Tests for note tokens and length declarations."""

    def test_plain_note(self):
        assert parse_note_token("C4") == (60, None)

    def test_duration_multiplier(self):
        assert parse_note_token("C42") == (60, 2.0)
        assert parse_note_token("Eb30.5") == (51, 0.5)

    def test_zero_multiplier_rejected(self):
        assert parse_note_token("C40") is None

    def test_length_declaration(self):
        assert parse_length_decl("L:1/8") == 0.5
        assert parse_length_decl("L:1/4") == 1.0
        assert parse_length_decl("L:3/8") == 1.5
        assert parse_length_decl("C4") is None

    def test_zero_length_declaration(self):
        with pytest.raises(ValueError):
            parse_length_decl("L:0/4")
        with pytest.raises(ValueError):
            parse_length_decl("L:1/0")


class TestParseVoice:
    """Tests for whole-voice parsing."""

    def test_consecutive_onsets(self):
        notes = parse_voice("C4 E4 G4")

        assert [n.pitch for n in notes] == [60, 64, 67]
        assert [n.onset for n in notes] == [0.0, 1.0, 2.0]
        assert all(n.duration == 1.0 for n in notes)

    def test_unit_defaults_to_one_beat(self):
        notes = parse_voice("C4 E4")

        assert DEFAULT_DURATION == 1.0
        assert all(n.duration == DEFAULT_DURATION for n in notes)

    def test_default_duration(self):
        notes = parse_voice("C4 E4", default_duration=0.5)

        assert [n.onset for n in notes] == [0.0, 0.5]

    def test_multiplier_and_length_declaration(self):
        notes = parse_voice("C4 E42 L:1/8 G4")

        assert [(n.onset, n.duration) for n in notes] == [(0.0, 1.0), (1.0, 2.0), (3.0, 0.5)]

    def test_unparseable_token(self):
        with pytest.raises(ValueError, match="Cannot parse note"):
            parse_voice("C4 X9")

    def test_empty_voice(self):
        assert parse_voice("   ") == []


class TestMergeVoices:
    """Tests for voice merging."""

    def test_merge_orders_by_onset_then_pitch(self):
        upper = [Note(pitch=64, onset=0.0, duration=1.0), Note(pitch=67, onset=1.0, duration=1.0)]
        lower = [Note(pitch=48, onset=0.0, duration=2.0)]

        merged = merge_voices(upper, lower)

        assert [(n.onset, n.pitch) for n in merged] == [(0.0, 48), (0.0, 64), (1.0, 67)]

    def test_build_notes_two_voices(self):
        notes = build_notes("C4 E4 G4", 1.0, "C3", 3.0)

        assert len(notes) == 4
        assert notes[0] == Note(pitch=48, onset=0.0, duration=3.0)

    def test_build_notes_ignores_blank_second_voice(self):
        assert build_notes("C4 E4", 1.0, "  ", 1.0) == parse_voice("C4 E4")
