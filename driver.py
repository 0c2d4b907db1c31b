#!/usr/bin/env python3
"""
driver file for the swara matcher

modes:
    match    - rank catalog ragas against a swara sequence (default)
    classify - classify each swara as shuddha/komal/teevra
    prefix   - list catalog sequences that are an exact prefix of the input
    show     - print one catalog raga
    list     - print every catalog raga
"""

import sys
from pathlib import Path
from typing import Any, Optional

# add package to path if running directly
if __name__ == "__main__":
    package_dir = Path(__file__).parent
    if str(package_dir) not in sys.path:
        sys.path.insert(0, str(package_dir))

from swara_match.config import MatcherConfig, load_config_from_cli
from swara_match.catalog import ReferenceCatalog, default_catalog, load_catalog_csv
from swara_match.engine import MatchEngine
from swara_match.output import (
    format_classification,
    format_entry,
    format_match_table,
    format_prefix_matches,
    save_matches_to_csv,
    save_matches_to_json,
)


def _load_catalog(config: MatcherConfig) -> ReferenceCatalog:
    if config.catalog_path:
        return load_catalog_csv(config.catalog_path, verbose=config.verbose)
    return default_catalog(verbose=config.verbose)


def run_matcher(config: MatcherConfig, catalog: Optional[ReferenceCatalog] = None) -> Any:
    """
    run the matcher in the configured mode

    args:
        config: matcher configuration
        catalog: prebuilt catalog; loaded from config.catalog_path when None

    outputs:
        match -> List[MatchResult], classify -> Dict[PitchClass, int],
        prefix -> List[TrieLabel], show -> CatalogEntry or None,
        list -> List[CatalogEntry]
    """
    print("=" * 60)
    print("SWARA MATCHER")
    print(f"MODE: {config.mode.upper()}")
    print("=" * 60)

    if catalog is None:
        catalog = _load_catalog(config)
    engine = MatchEngine(catalog, weights=config.weights, verbose=config.verbose)

    if config.mode == "list":
        for entry in catalog:
            print(format_entry(entry))
            print()
        print(f"{len(catalog)} ragas")
        return list(catalog)

    if config.mode == "show":
        entry = engine.get_entry(config.raga_name)
        if entry is None:
            print(f"[WARN] Raga '{config.raga_name}' not found in catalog.")
        else:
            print(format_entry(entry))
        return entry

    print(f"Input: {config.sequence}")
    print()

    if config.mode == "classify":
        counts = engine.classify_sequence(config.sequence)
        print(format_classification(config.sequence, counts, tonic=config.tonic))
        return counts

    if config.mode == "prefix":
        labels = engine.prefix_matches(config.sequence)
        print(format_prefix_matches(labels))
        return labels

    # match
    print(f"[STEP 1/2] Scoring {len(catalog)} ragas...")
    results = engine.top_matches(config.sequence, config.top_n)
    print(format_match_table(results))

    print("\n[STEP 2/2] Writing outputs...")
    if config.csv_output:
        save_matches_to_csv(results, config.csv_output)
        print(f"  Saved: {config.csv_output}")
    if config.json_output:
        save_matches_to_json(results, config.json_output, sequence=config.sequence)
        print(f"  Saved: {config.json_output}")
    if not (config.csv_output or config.json_output):
        print("  (no output files requested)")

    exact = engine.prefix_matches(config.sequence)
    if exact:
        print(f"\nExact prefix match: {', '.join(str(label) for label in exact)}")

    return results


def main():
    """Main entry point for CLI."""
    config = load_config_from_cli()
    run_matcher(config)
    return


if __name__ == "__main__":
    main()
