"""
Similarity metrics between two swara token sequences.

All scorers take (input, pattern) token lists and return a float in [0, 100].
Either side being empty yields 0.

Provides:
- exact_partial_score: Directional input-coverage score (NOT symmetric)
- levenshtein_distance / edit_distance_score: Token-level edit distance
- set_overlap_score: Jaccard overlap of distinct tokens
"""

from typing import Sequence

from rapidfuzz.distance import Levenshtein


EXACT_MATCH_POINTS = 100.0
PARTIAL_MATCH_POINTS = 50.0
MAX_SCORE = 100.0


def exact_partial_score(input_tokens: Sequence[str], pattern_tokens: Sequence[str]) -> float:
    """
    Fraction of the input accounted for by the pattern.

    Each input token scans the pattern in order and stops at the first token
    that is equal (exact match) or equal ignoring case (partial match, half
    credit). Normalized by input length only, so swapping the arguments
    changes the result. This is a coverage measure, not a distance.
    """
    if not input_tokens or not pattern_tokens:
        return 0.0

    exact = 0
    partial = 0
    for token in input_tokens:
        lowered = token.lower()
        for candidate in pattern_tokens:
            if token == candidate:
                exact += 1
                break
            if lowered == candidate.lower():
                partial += 1
                break

    n = len(input_tokens)
    score = EXACT_MATCH_POINTS * exact / n + PARTIAL_MATCH_POINTS * partial / n
    return float(min(MAX_SCORE, score))


def levenshtein_distance(a: Sequence[str], b: Sequence[str]) -> int:
    """Token-level edit distance with unit insert/delete/substitute cost."""
    return Levenshtein.distance(list(a), list(b))


def edit_distance_score(input_tokens: Sequence[str], pattern_tokens: Sequence[str]) -> float:
    """Edit distance mapped to similarity: (1 - d / longer length) * 100, floored at 0."""
    if not input_tokens or not pattern_tokens:
        return 0.0

    distance = levenshtein_distance(input_tokens, pattern_tokens)
    longest = max(len(input_tokens), len(pattern_tokens))
    return float(max(0.0, (1.0 - distance / longest) * MAX_SCORE))


def set_overlap_score(input_tokens: Sequence[str], pattern_tokens: Sequence[str]) -> float:
    """Jaccard similarity of the distinct (case-sensitive) tokens on each side."""
    if not input_tokens or not pattern_tokens:
        return 0.0

    left = set(input_tokens)
    right = set(pattern_tokens)
    union = left | right
    if not union:
        return 0.0
    return float(MAX_SCORE * len(left & right) / len(union))
