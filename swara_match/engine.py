"""
Match engine: score a swara sequence against every catalog entry and rank.

Scoring per entry:
- each metric is computed against the arohana and the avarohana, and the
  better of the two is kept (independently per metric)
- combined = 0.5 * exact_partial + 0.3 * edit_distance + 0.2 * set_overlap

exact_partial is a directional coverage measure (how much of the input the
pattern accounts for); the other two are symmetric. The weighted sum is not
a metric in the mathematical sense.

Provides:
- ScoringWeights: Combiner coefficients
- MatchResult: Per-entry score breakdown
- score_entry / identify / top_matches: Functional API over an explicit catalog
- results_to_frame: Ranked pandas table of results
- MatchEngine: Catalog + weights + prefix index bundled behind one object
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

import pandas as pd

from .catalog import CatalogEntry, ReferenceCatalog
from .metrics import edit_distance_score, exact_partial_score, set_overlap_score
from .tokens import PitchClass, SequenceLike, as_tokens, classify, classify_sequence
from .trie import PrefixIndex, TrieLabel


# =============================================================================
# SCORING PARAMETERS
# =============================================================================

@dataclass(frozen=True)
class ScoringWeights:
    """Combiner coefficients. Must be non-negative and sum to 1."""

    EXACT_PARTIAL: float = 0.5
    EDIT_DISTANCE: float = 0.3
    SET_OVERLAP: float = 0.2

    def __post_init__(self):
        values = (self.EXACT_PARTIAL, self.EDIT_DISTANCE, self.SET_OVERLAP)
        if any(v < 0 for v in values):
            raise ValueError(f"Scoring weights must be non-negative: {values}")
        if abs(sum(values) - 1.0) > 1e-9:
            raise ValueError(f"Scoring weights must sum to 1.0, got {sum(values):.6f}")

    def combine(self, exact_partial: float, edit_distance: float, set_overlap: float) -> float:
        return (
            self.EXACT_PARTIAL * exact_partial
            + self.EDIT_DISTANCE * edit_distance
            + self.SET_OVERLAP * set_overlap
        )


DEFAULT_WEIGHTS = ScoringWeights()


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class MatchResult:
    """Scoring result for a single catalog entry. All scores are in [0, 100]."""

    entry_name: str
    combined_score: float
    exact_partial_score: float
    edit_distance_score: float
    set_overlap_score: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


RESULT_COLUMNS = [
    "entry_name",
    "combined_score",
    "exact_partial_score",
    "edit_distance_score",
    "set_overlap_score",
]


# =============================================================================
# SCORING & RANKING
# =============================================================================

def _best_of_directions(metric, input_tokens: List[str], entry: CatalogEntry) -> float:
    return max(
        metric(input_tokens, list(entry.ascending)),
        metric(input_tokens, list(entry.descending)),
    )


def score_entry(
    input_sequence: SequenceLike,
    entry: CatalogEntry,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> MatchResult:
    """Score one entry, keeping the better direction per metric."""
    tokens = as_tokens(input_sequence)

    exact_partial = _best_of_directions(exact_partial_score, tokens, entry)
    edit_distance = _best_of_directions(edit_distance_score, tokens, entry)
    set_overlap = _best_of_directions(set_overlap_score, tokens, entry)

    combined = weights.combine(exact_partial, edit_distance, set_overlap)
    combined = max(0.0, min(100.0, combined))

    return MatchResult(
        entry_name=entry.name,
        combined_score=float(combined),
        exact_partial_score=exact_partial,
        edit_distance_score=edit_distance,
        set_overlap_score=set_overlap,
    )


def identify(
    input_sequence: SequenceLike,
    catalog: ReferenceCatalog,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> Dict[str, MatchResult]:
    """Score every entry; entries with a combined score of exactly 0 are left out."""
    tokens = as_tokens(input_sequence)
    if not tokens:
        return {}

    results: Dict[str, MatchResult] = {}
    for entry in catalog:
        result = score_entry(tokens, entry, weights)
        if result.combined_score > 0:
            results[entry.name] = result
    return results


def _rank_key(result: MatchResult):
    # combined desc, then name asc (case-folded, then exact)
    return (-result.combined_score, result.entry_name.lower(), result.entry_name)


def rank_results(results: Dict[str, MatchResult]) -> List[MatchResult]:
    return sorted(results.values(), key=_rank_key)


def top_matches(
    input_sequence: SequenceLike,
    catalog: ReferenceCatalog,
    n: int,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> List[MatchResult]:
    """
    Best `n` entries by combined score.

    Ties on combined score are broken by entry name. A negative `n` is a
    caller error and raises ValueError; blank input gives [].
    """
    if n < 0:
        raise ValueError(f"top_n must be >= 0, got {n}")
    ranked = rank_results(identify(input_sequence, catalog, weights))
    return ranked[:n]


def results_to_frame(results: List[MatchResult]) -> pd.DataFrame:
    """Ranked results as a DataFrame with a 1-based rank column."""
    df = pd.DataFrame([r.to_dict() for r in results], columns=RESULT_COLUMNS)
    df["rank"] = range(1, len(df) + 1)
    return df


# =============================================================================
# ENGINE
# =============================================================================

class MatchEngine:
    """
    Bundles a catalog, scoring weights and the prefix index built from the
    same catalog. Everything is built in __init__ and read-only afterwards.
    """

    def __init__(
        self,
        catalog: ReferenceCatalog,
        weights: ScoringWeights = DEFAULT_WEIGHTS,
        verbose: bool = False,
    ):
        self.catalog = catalog
        self.weights = weights
        self.verbose = verbose
        self.prefix_index = PrefixIndex.from_catalog(catalog, verbose=verbose)

    def classify(self, token: Optional[str]) -> PitchClass:
        return classify(token)

    def classify_sequence(self, sequence: SequenceLike) -> Dict[PitchClass, int]:
        return classify_sequence(sequence)

    def get_entry(self, name: Optional[str]) -> Optional[CatalogEntry]:
        return self.catalog.get_entry(name)

    def score_entry(self, input_sequence: SequenceLike, entry: CatalogEntry) -> MatchResult:
        return score_entry(input_sequence, entry, self.weights)

    def identify(self, input_sequence: SequenceLike) -> Dict[str, MatchResult]:
        return identify(input_sequence, self.catalog, self.weights)

    def top_matches(self, input_sequence: SequenceLike, n: int = 5) -> List[MatchResult]:
        results = top_matches(input_sequence, self.catalog, n, self.weights)
        if self.verbose:
            if results:
                best = results[0]
                print(f"[MATCH] {len(results)} result(s); best '{best.entry_name}' at {best.combined_score:.2f}")
            else:
                print("[MATCH] No catalog entry scored above 0")
        return results

    def prefix_matches(self, input_sequence: SequenceLike) -> List[TrieLabel]:
        """Catalog sequences that are an exact prefix of the input (independent of ranking)."""
        return self.prefix_index.search_walk(input_sequence)
