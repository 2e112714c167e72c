"""Input layer - Parse written voices into notes."""

from .notation import (
    parse_spn,
    parse_note_token,
    parse_length_decl,
    parse_voice,
    merge_voices,
    build_notes,
)

__all__ = [
    "parse_spn",
    "parse_note_token",
    "parse_length_decl",
    "parse_voice",
    "merge_voices",
    "build_notes",
]
