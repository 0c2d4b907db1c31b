# Swara Match Package
"""
Raga identification from symbolic swara sequences.

Modules:
- tokens: Tokenization and shuddha/komal/teevra classification
- metrics: Exact/partial coverage, edit distance and set overlap scores
- trie: Exact prefix index over reference sequences
- catalog: Reference raga entries and CSV loading
- engine: Weighted combination and ranking
- config: Configuration and CLI argument handling
- output: Text tables and result files
"""

from .tokens import PitchClass, classify, classify_sequence, tokenize
from .metrics import edit_distance_score, exact_partial_score, levenshtein_distance, set_overlap_score
from .trie import Direction, PrefixIndex, TrieLabel
from .catalog import CatalogEntry, CatalogError, ReferenceCatalog, default_catalog, load_catalog_csv
from .engine import MatchEngine, MatchResult, ScoringWeights, identify, score_entry, top_matches
from .config import MatcherConfig, build_cli_parser, create_config, load_config_from_cli, parse_config_from_argv

__version__ = "0.1.0"

__all__ = [
    # Tokens
    "PitchClass",
    "classify",
    "classify_sequence",
    "tokenize",
    # Metrics
    "edit_distance_score",
    "exact_partial_score",
    "levenshtein_distance",
    "set_overlap_score",
    # Index
    "Direction",
    "PrefixIndex",
    "TrieLabel",
    # Catalog
    "CatalogEntry",
    "CatalogError",
    "ReferenceCatalog",
    "default_catalog",
    "load_catalog_csv",
    # Engine
    "MatchEngine",
    "MatchResult",
    "ScoringWeights",
    "identify",
    "score_entry",
    "top_matches",
    # Config
    "MatcherConfig",
    "build_cli_parser",
    "create_config",
    "load_config_from_cli",
    "parse_config_from_argv",
]
