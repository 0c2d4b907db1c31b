"""
Catalog module: reference raga entries and their lookup.

A ReferenceCatalog is an immutable value built once (from the bundled CSV
table, another CSV, or literal records) and handed explicitly to whatever
needs it. There is no module-level catalog instance.

Provides:
- CatalogEntry: One named raga with arohana/avarohana sequences
- ReferenceCatalog: Immutable, case-insensitive lookup over entries
- load_catalog_csv: Build a catalog from a CSV file
- default_catalog: Build a catalog from the bundled table
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple
import os

import pandas as pd

from .tokens import SequenceLike, as_tokens, summarize_swara_types


REQUIRED_COLUMNS = ["name", "arohana", "avarohana"]
ALIAS_SEPARATOR = ";"


class CatalogError(ValueError):
    """Raised when catalog data is inconsistent (duplicate names, bad columns)."""


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class CatalogEntry:
    """A reference raga: two canonical sequences plus descriptive metadata."""

    name: str
    ascending: Tuple[str, ...]
    descending: Tuple[str, ...]
    description: str = ""
    swara_type_summary: str = ""
    thaat: str = ""
    aliases: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def create(
        cls,
        name: str,
        ascending: SequenceLike,
        descending: SequenceLike,
        description: str = "",
        swara_type_summary: Optional[str] = None,
        thaat: str = "",
        aliases: Iterable[str] = (),
    ) -> "CatalogEntry":
        """Build an entry from raw strings or token lists; the summary is derived when omitted."""
        aro = tuple(as_tokens(ascending))
        ava = tuple(as_tokens(descending))
        if swara_type_summary is None:
            swara_type_summary = summarize_swara_types(list(aro) + list(ava))
        return cls(
            name=name.strip(),
            ascending=aro,
            descending=ava,
            description=description,
            swara_type_summary=swara_type_summary,
            thaat=thaat,
            aliases=tuple(a.strip() for a in aliases if a and a.strip()),
        )

    @property
    def arohana(self) -> str:
        return " ".join(self.ascending)

    @property
    def avarohana(self) -> str:
        return " ".join(self.descending)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "arohana": self.arohana,
            "avarohana": self.avarohana,
            "description": self.description,
            "swara_types": self.swara_type_summary,
            "thaat": self.thaat,
            "aliases": list(self.aliases),
        }


# =============================================================================
# CATALOG
# =============================================================================

class ReferenceCatalog:
    """
    Read-only collection of CatalogEntry objects.

    Entry names (and aliases) must be unique ignoring case; lookup by either
    resolves to the entry. Iteration follows construction order.
    """

    def __init__(self, entries: Iterable[CatalogEntry], source: Optional[str] = None):
        self._entries: Tuple[CatalogEntry, ...] = tuple(entries)
        self.source = source

        lookup: Dict[str, CatalogEntry] = {}
        for entry in self._entries:
            if not entry.name:
                raise CatalogError("Catalog entry with empty name")
            for key in (entry.name,) + entry.aliases:
                folded = key.lower()
                existing = lookup.get(folded)
                if existing is not None and existing is not entry:
                    raise CatalogError(
                        f"Duplicate catalog name '{key}' (already used by '{existing.name}')"
                    )
                lookup[folded] = entry
        self._lookup: Mapping[str, CatalogEntry] = MappingProxyType(lookup)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._lookup

    def __repr__(self) -> str:
        return f"ReferenceCatalog({len(self)} entries, source={self.source!r})"

    @property
    def entries(self) -> Tuple[CatalogEntry, ...]:
        return self._entries

    @property
    def names(self) -> List[str]:
        return [entry.name for entry in self._entries]

    def get_entry(self, name: Optional[str]) -> Optional[CatalogEntry]:
        """Case-insensitive lookup by name or alias. Returns None when not found."""
        if not name:
            return None
        return self._lookup.get(name.strip().lower())

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]], source: Optional[str] = None) -> "ReferenceCatalog":
        """
        Build a catalog from dict-like rows.

        Each row needs name, arohana and avarohana; description, swara_types,
        thaat and aliases (";"-separated string or list) are optional.
        """
        entries = []
        for row in records:
            missing = [col for col in REQUIRED_COLUMNS if col not in row]
            if missing:
                raise CatalogError(f"Catalog row missing columns {missing}: {dict(row)}")
            entries.append(CatalogEntry.create(
                name=str(row["name"]),
                ascending=row["arohana"],
                descending=row["avarohana"],
                description=str(row.get("description") or ""),
                swara_type_summary=row.get("swara_types") or None,
                thaat=str(row.get("thaat") or ""),
                aliases=_parse_aliases(row.get("aliases")),
            ))
        return cls(entries, source=source)


def _parse_aliases(raw: Any) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [a.strip() for a in raw.split(ALIAS_SEPARATOR) if a.strip()]
    return [str(a) for a in raw]


# =============================================================================
# LOADING
# =============================================================================

def find_default_catalog_path() -> Optional[str]:
    """Find the bundled raga table in standard locations."""
    package_dir = Path(__file__).parent
    candidates = [
        package_dir / "data" / "raga_catalog.csv",
        package_dir.parent / "data" / "raga_catalog.csv",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


def load_catalog_csv(csv_path: str, verbose: bool = False) -> ReferenceCatalog:
    """Load a catalog from CSV (columns: name, arohana, avarohana[, description, swara_types, thaat, aliases])."""
    if not os.path.isfile(csv_path):
        raise FileNotFoundError(f"Catalog file not found: {csv_path}")

    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    df.columns = [str(c).strip().lower() for c in df.columns]

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise CatalogError(f"Catalog CSV {csv_path} is missing columns: {', '.join(missing)}")

    df = df[df["name"].str.strip() != ""]
    catalog = ReferenceCatalog.from_records(df.to_dict(orient="records"), source=os.path.abspath(csv_path))
    if verbose:
        print(f"[CATALOG] Loaded {len(catalog)} ragas from {os.path.basename(csv_path)}")
    return catalog


def default_catalog(verbose: bool = False) -> ReferenceCatalog:
    """Build a fresh catalog from the bundled raga table."""
    path = find_default_catalog_path()
    if path is None:
        raise FileNotFoundError("Bundled raga catalog (data/raga_catalog.csv) not found")
    return load_catalog_csv(path, verbose=verbose)
