"""
Output module: console tables and result files for the matcher.

Provides:
- format_match_table: Ranked matches as a fixed-width text table
- format_classification: Per-token class listing plus counts
- format_entry: One catalog entry as text
- save_matches_to_csv / save_matches_to_json: Persist a ranked result list
"""

from typing import Dict, List, Optional, Union
import json
import os

from .catalog import CatalogEntry
from .engine import MatchResult, results_to_frame
from .tokens import SARGAM_TO_OFFSET, PitchClass, SequenceLike, as_tokens, classify, token_to_hz, token_to_midi
from .trie import TrieLabel


def format_match_table(results: List[MatchResult]) -> str:
    if not results:
        return "No matching ragas."

    header = f"{'#':>3}  {'Raga':<18}{'Combined':>9}{'Exact/Part':>12}{'Edit':>9}{'Overlap':>9}"
    lines = [header, "-" * len(header)]
    for rank, r in enumerate(results, start=1):
        lines.append(
            f"{rank:>3}  {r.entry_name:<18}{r.combined_score:>9.2f}"
            f"{r.exact_partial_score:>12.2f}{r.edit_distance_score:>9.2f}{r.set_overlap_score:>9.2f}"
        )
    return "\n".join(lines)


def format_classification(
    sequence: SequenceLike,
    counts: Dict[PitchClass, int],
    tonic: Optional[Union[int, str]] = None,
) -> str:
    """
    List each token with its class; with a tonic, canonical tokens also get
    their MIDI number and frequency.
    """
    lines = []
    for token in as_tokens(sequence):
        line = f"  {token:<6}{classify(token).value:<9}"
        if tonic is not None and token in SARGAM_TO_OFFSET:
            midi = token_to_midi(token, tonic)
            line += f"  midi={midi:<4d} {token_to_hz(token, tonic):8.2f} Hz"
        lines.append(line.rstrip())

    summary = ", ".join(f"{pc.value}={counts.get(pc, 0)}" for pc in PitchClass)
    lines.append(f"Counts: {summary}")
    return "\n".join(lines)


def format_prefix_matches(labels: List[TrieLabel]) -> str:
    if not labels:
        return "No catalog sequence is a prefix of the input."
    return "\n".join(f"  {i}. {label}" for i, label in enumerate(labels, start=1))


def format_entry(entry: CatalogEntry) -> str:
    lines = [
        f"{entry.name}" + (f" (aka {', '.join(entry.aliases)})" if entry.aliases else ""),
        f"  Arohana:   {entry.arohana}",
        f"  Avarohana: {entry.avarohana}",
        f"  Swaras:    {entry.swara_type_summary}",
    ]
    if entry.thaat:
        lines.append(f"  Thaat:     {entry.thaat}")
    if entry.description:
        lines.append(f"  {entry.description}")
    return "\n".join(lines)


def save_matches_to_csv(results: List[MatchResult], output_path: str) -> str:
    """Write ranked matches (with rank column) to CSV. Returns the path."""
    os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)
    df = results_to_frame(results)
    df.to_csv(output_path, index=False, float_format="%.4f")
    return output_path


def save_matches_to_json(
    results: List[MatchResult],
    output_path: str,
    sequence: Optional[str] = None,
) -> str:
    """Write ranked matches to JSON alongside the query. Returns the path."""
    os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)
    payload = {
        "sequence": sequence,
        "matches": [dict(rank=i, **r.to_dict()) for i, r in enumerate(results, start=1)],
    }
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    return output_path
