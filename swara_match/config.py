"""
Configuration module for the swara matcher.

Provides:
- MatcherConfig: Dataclass with all matcher parameters
- build_cli_parser / parse_config_from_argv / load_config_from_cli: CLI handling
- create_config: Programmatic construction
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence
import argparse
import os
import sys

from .catalog import find_default_catalog_path
from .engine import ScoringWeights
from .tokens import token_to_midi


MODES: List[str] = ["match", "classify", "prefix", "show", "list"]

# modes that operate on an input swara sequence
SEQUENCE_MODES = {"match", "classify", "prefix"}


@dataclass
class MatcherConfig:
    """config for the swara matcher"""

    mode: str = "match"  # one of MODES

    # input sequence (space separated swaras) or raga name for "show"
    sequence: Optional[str] = None
    raga_name: Optional[str] = None

    # ranking
    top_n: int = 5

    # combiner weights (must sum to 1)
    exact_partial_weight: float = 0.5
    edit_distance_weight: float = 0.3
    set_overlap_weight: float = 0.2

    # db paths
    catalog_path: Optional[str] = None    # Bundled table if None

    # pitch display for "classify" (e.g. C#, D3)
    tonic: Optional[str] = None

    # output
    csv_output: Optional[str] = None
    json_output: Optional[str] = None
    verbose: bool = False

    def __post_init__(self):
        """Validate and normalize."""
        if self.mode not in MODES:
            raise ValueError(f"Unsupported mode '{self.mode}'. Expected one of: {', '.join(MODES)}")

        if self.top_n < 0:
            raise ValueError(f"--top must be >= 0, got {self.top_n}")

        if self.mode in SEQUENCE_MODES and self.sequence is None:
            raise ValueError(f"{self.mode.capitalize()} mode requires --sequence/-s")

        if self.mode == "show" and not self.raga_name:
            raise ValueError("Show mode requires a raga name")

        # raises ValueError on bad weights
        ScoringWeights(
            EXACT_PARTIAL=self.exact_partial_weight,
            EDIT_DISTANCE=self.edit_distance_weight,
            SET_OVERLAP=self.set_overlap_weight,
        )

        if self.tonic:
            token_to_midi("Sa", self.tonic)

        if self.catalog_path is None:
            self.catalog_path = find_default_catalog_path()
        else:
            self.catalog_path = os.path.abspath(self.catalog_path)
            if not os.path.isfile(self.catalog_path):
                raise FileNotFoundError(f"Catalog file not found: {self.catalog_path}")

        for attr in ("csv_output", "json_output"):
            path = getattr(self, attr)
            if path:
                setattr(self, attr, os.path.abspath(path))

    @property
    def weights(self) -> ScoringWeights:
        return ScoringWeights(
            EXACT_PARTIAL=self.exact_partial_weight,
            EDIT_DISTANCE=self.edit_distance_weight,
            SET_OVERLAP=self.set_overlap_weight,
        )


def build_cli_parser() -> argparse.ArgumentParser:
    """Build the argparse parser with one subcommand per mode."""
    parser = argparse.ArgumentParser(
        description="Swara Sequence Raga Matcher",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    subparsers = parser.add_subparsers(dest="command", help="Matcher mode")

    # --- Common arguments function ---
    # subcommand copies default to SUPPRESS: options given before the subcommand are kept
    def add_common_args(p, suppress=False):
        p.add_argument("--catalog", default=argparse.SUPPRESS if suppress else None, help="Override path to raga catalog CSV")
        p.add_argument("--verbose", "-v", action="store_true",
                       default=argparse.SUPPRESS if suppress else False, help="Print catalog/index/match progress")

    def add_sequence_arg(p, required=True):
        p.add_argument("--sequence", "-s", required=required,
                       help="Swara sequence, space separated (e.g. \"Sa Re Ga Ma' Pa\")")

    def add_match_args(p, suppress=False):
        def default(value):
            return argparse.SUPPRESS if suppress else value

        p.add_argument("--top", "-n", type=int, default=default(5), help="Number of matches to return")
        p.add_argument("--exact-weight", type=float, default=default(0.5), help="Weight of the exact/partial coverage score")
        p.add_argument("--edit-weight", type=float, default=default(0.3), help="Weight of the edit distance score")
        p.add_argument("--overlap-weight", type=float, default=default(0.2), help="Weight of the set overlap score")
        p.add_argument("--csv", dest="csv_output", default=default(None), help="Also write ranked matches to this CSV file")
        p.add_argument("--json", dest="json_output", default=default(None), help="Also write ranked matches to this JSON file")

    # --- Match Mode ---
    match_parser = subparsers.add_parser("match", help="Rank catalog ragas against a swara sequence")
    add_common_args(match_parser, suppress=True)
    add_sequence_arg(match_parser)
    add_match_args(match_parser, suppress=True)

    # --- Classify Mode ---
    classify_parser = subparsers.add_parser("classify", help="Classify each swara as shuddha/komal/teevra")
    add_common_args(classify_parser, suppress=True)
    add_sequence_arg(classify_parser)
    classify_parser.add_argument("--tonic", help="Tonic for pitch display (e.g. C#, D3)")

    # --- Prefix Mode ---
    prefix_parser = subparsers.add_parser("prefix", help="List catalog sequences that are an exact prefix of the input")
    add_common_args(prefix_parser, suppress=True)
    add_sequence_arg(prefix_parser)

    # --- Show Mode ---
    show_parser = subparsers.add_parser("show", help="Show one catalog raga")
    add_common_args(show_parser, suppress=True)
    show_parser.add_argument("name", help="Raga name or alias (case-insensitive)")

    # --- List Mode ---
    list_parser = subparsers.add_parser("list", help="List all catalog ragas")
    add_common_args(list_parser, suppress=True)

    # --- Root Parser (defaults to match) ---
    add_common_args(parser)
    add_sequence_arg(parser, required=False)
    add_match_args(parser)

    return parser


def _config_from_args(args: argparse.Namespace) -> MatcherConfig:
    mode = args.command if args.command in MODES else "match"

    return MatcherConfig(
        mode=mode,
        sequence=getattr(args, 'sequence', None),
        raga_name=getattr(args, 'name', None),
        top_n=getattr(args, 'top', 5),
        exact_partial_weight=getattr(args, 'exact_weight', 0.5),
        edit_distance_weight=getattr(args, 'edit_weight', 0.3),
        set_overlap_weight=getattr(args, 'overlap_weight', 0.2),
        catalog_path=getattr(args, 'catalog', None),
        tonic=getattr(args, 'tonic', None),
        csv_output=getattr(args, 'csv_output', None),
        json_output=getattr(args, 'json_output', None),
        verbose=getattr(args, 'verbose', False),
    )


def parse_config_from_argv(argv: Sequence[str]) -> MatcherConfig:
    """Parse an argv list (without program name) into a MatcherConfig."""
    parser = build_cli_parser()
    args = parser.parse_args(list(argv))

    if args.command is None and not args.sequence:
        parser.error("the following arguments are required: --sequence/-s")

    return _config_from_args(args)


def load_config_from_cli() -> MatcherConfig:
    """Parse command-line arguments and return configuration."""
    parser = build_cli_parser()
    args = parser.parse_args(sys.argv[1:])

    if args.command is None and not args.sequence:
        parser.error("the following arguments are required: --sequence/-s")

    try:
        return _config_from_args(args)
    except (ValueError, FileNotFoundError) as exc:
        parser.error(str(exc))


def create_config(mode: str = "match", **kwargs) -> MatcherConfig:
    """
    Convenience function to create configuration programmatically.

    Args:
        mode: One of MODES
        **kwargs: Override any default configuration values

    Returns:
        MatcherConfig instance
    """
    return MatcherConfig(mode=mode, **kwargs)
