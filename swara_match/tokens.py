"""
Tokens module: swara tokenization, pitch-modifier classification and sargam helpers.

Tokens follow the ASCII sargam convention used throughout the catalog:
uppercase initial for shuddha steps, lowercase initial for komal steps and a
trailing apostrophe for teevra (only Ma' in practice).

Provides:
- PitchClass: Classification result enum
- tokenize: Split a raw sequence string into tokens
- classify / classify_sequence: Per-token and per-sequence pitch-modifier classes
- summarize_swara_types: Human-readable komal/teevra summary
- token_to_offset / token_to_midi / token_to_hz: Place a token against a tonic
"""

from enum import Enum
from typing import Dict, Iterable, List, Optional, Union

import librosa
from librosa.util.exceptions import ParameterError


class PitchClass(str, Enum):
    """Pitch-modifier class of a single swara token."""

    SHUDDHA = "shuddha"
    KOMAL = "komal"
    TEEVRA = "teevra"
    UNKNOWN = "unknown"


# Sa and Pa never take a modifier
ACHAL_SWARAS = ("Sa", "Pa")

TEEVRA_MARK = "'"

# Semitone offset from Sa for each canonical spelling
SARGAM_TO_OFFSET: Dict[str, int] = {
    "Sa": 0,
    "re": 1,      # komal Re
    "Re": 2,
    "ga": 3,      # komal Ga
    "Ga": 4,
    "Ma": 5,
    "Ma'": 6,     # teevra Ma
    "Pa": 7,
    "dha": 8,     # komal Dha
    "Dha": 9,
    "ni": 10,     # komal Ni
    "Ni": 11,
}


SequenceLike = Union[str, Iterable[str], None]


# =============================================================================
# TOKENIZATION
# =============================================================================

def tokenize(text: Optional[str]) -> List[str]:
    """Split a raw swara string on whitespace. None or blank gives []."""
    if not text:
        return []
    return text.split()


def as_tokens(sequence: SequenceLike) -> List[str]:
    """Accept either a raw string or an iterable of tokens."""
    if sequence is None:
        return []
    if isinstance(sequence, str):
        return tokenize(sequence)
    return [t for t in sequence if t]


# =============================================================================
# CLASSIFICATION
# =============================================================================

def classify(token: Optional[str]) -> PitchClass:
    """
    Classify one token into its pitch-modifier class.

    Rules are applied in order and the first match wins:
    empty -> UNKNOWN, contains an apostrophe -> TEEVRA, Sa/Pa -> SHUDDHA,
    lowercase initial -> KOMAL, uppercase initial -> SHUDDHA, else UNKNOWN.
    """
    if not token:
        return PitchClass.UNKNOWN
    if TEEVRA_MARK in token:
        return PitchClass.TEEVRA
    if token in ACHAL_SWARAS:
        return PitchClass.SHUDDHA

    first = token[0]
    if first.islower():
        return PitchClass.KOMAL
    if first.isupper():
        return PitchClass.SHUDDHA
    return PitchClass.UNKNOWN


def classify_sequence(sequence: SequenceLike) -> Dict[PitchClass, int]:
    """Count tokens per PitchClass. Every class is present, zero-initialized."""
    counts = {pc: 0 for pc in PitchClass}
    for token in as_tokens(sequence):
        counts[classify(token)] += 1
    return counts


def summarize_swara_types(sequence: SequenceLike) -> str:
    """
    Describe which modified swaras a sequence uses.

    e.g. "Sa re Ga Ma' Pa dha Ni Sa" -> "Komal: re, dha; Teevra: Ma'"
    """
    komal: List[str] = []
    teevra: List[str] = []
    for token in as_tokens(sequence):
        pc = classify(token)
        if pc == PitchClass.KOMAL and token not in komal:
            komal.append(token)
        elif pc == PitchClass.TEEVRA and token not in teevra:
            teevra.append(token)

    parts = []
    if komal:
        parts.append("Komal: " + ", ".join(komal))
    if teevra:
        parts.append("Teevra: " + ", ".join(teevra))
    return "; ".join(parts) if parts else "All shuddha"


# =============================================================================
# PITCH PLACEMENT
# =============================================================================

def token_to_offset(token: str) -> int:
    """Semitone offset (0-11) of a canonical sargam token from Sa."""
    if token not in SARGAM_TO_OFFSET:
        raise ValueError(f"Unknown sargam token: {token!r}")
    return SARGAM_TO_OFFSET[token]


def _tonic_to_midi(tonic: Union[int, str], octave: int) -> int:
    if isinstance(tonic, int):
        return (tonic % 12) + (octave + 1) * 12
    name = str(tonic).strip()
    if not name:
        raise ValueError("Empty tonic string")
    if not name[-1].isdigit():
        name = f"{name}{octave}"
    try:
        return int(librosa.note_to_midi(name))
    except ParameterError as exc:
        raise ValueError(f"Invalid tonic: {tonic}") from exc


def token_to_midi(token: str, tonic: Union[int, str], octave: int = 4) -> int:
    """
    MIDI note number of a token, with Sa placed on the tonic.

    Args:
        token: Canonical sargam token (e.g. "Ga", "Ma'")
        tonic: Pitch class (0-11) or note name ("C#", "D3")
        octave: Octave used when the tonic carries none
    """
    return _tonic_to_midi(tonic, octave) + token_to_offset(token)


def token_to_hz(token: str, tonic: Union[int, str], octave: int = 4) -> float:
    """Frequency of a token against a tonic."""
    return float(librosa.midi_to_hz(token_to_midi(token, tonic, octave)))
