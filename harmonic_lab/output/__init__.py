"""Output layer - Report analysis results.

This layer presents analysed harmony as:
- A plain-text diagnostic log
- JSON-ready summaries
- Console tables
"""

from .report import HarmonyReport, format_chord_detail, summary_to_dict
from .tables import approach_table, beat_table, majority_picks

__all__ = [
    "HarmonyReport",
    "format_chord_detail",
    "summary_to_dict",
    "approach_table",
    "beat_table",
    "majority_picks",
]
