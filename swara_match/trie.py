"""
Prefix index: a token trie over catalog reference sequences.

Answers "which reference sequences are an exact prefix of this input" by a
strict left-to-right walk. It is independent of the fuzzy ranking in
engine.py and never consulted there.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional

from .tokens import SequenceLike, as_tokens

if TYPE_CHECKING:
    from .catalog import ReferenceCatalog


class Direction(str, Enum):
    ASCENDING = "Arohana"
    DESCENDING = "Avarohana"


@dataclass(frozen=True)
class TrieLabel:
    """Which catalog entry and which of its two sequences ends at a node."""

    entry_name: str
    direction: Direction

    def __str__(self) -> str:
        return f"{self.entry_name} ({self.direction.value})"


@dataclass
class TrieNode:
    children: Dict[str, "TrieNode"] = field(default_factory=dict)
    label: Optional[TrieLabel] = None

    @property
    def is_terminal(self) -> bool:
        return self.label is not None


class PrefixIndex:
    """Token trie keyed on exact (case-sensitive) tokens."""

    def __init__(self, verbose: bool = False):
        self.root = TrieNode()
        self.verbose = verbose
        self._terminal_count = 0

    def __len__(self) -> int:
        return self._terminal_count

    def insert(self, sequence: SequenceLike, label: TrieLabel) -> None:
        """Add a path for `sequence` and mark its last node with `label`; last insert wins."""
        node = self.root
        for token in as_tokens(sequence):
            child = node.children.get(token)
            if child is None:
                child = TrieNode()
                node.children[token] = child
            node = child

        if node.label is None:
            self._terminal_count += 1
        elif self.verbose and node.label != label:
            print(f"[INDEX] '{label}' replaces '{node.label}' (identical sequence)")
        node.label = label

    def search_walk(self, sequence: SequenceLike) -> List[TrieLabel]:
        """
        Labels of every reference sequence that is a prefix of the input.

        The walk consumes input tokens from the root and stops at the first
        token with no matching edge. Labels come back in walk order.
        """
        found: List[TrieLabel] = []
        node = self.root
        for token in as_tokens(sequence):
            node = node.children.get(token)
            if node is None:
                break
            if node.label is not None:
                found.append(node.label)
        return found

    @classmethod
    def from_catalog(cls, catalog: "ReferenceCatalog", verbose: bool = False) -> "PrefixIndex":
        """Index every entry's ascending then descending sequence, in catalog order."""
        index = cls(verbose=verbose)
        for entry in catalog:
            if entry.ascending:
                index.insert(entry.ascending, TrieLabel(entry.name, Direction.ASCENDING))
            if entry.descending:
                index.insert(entry.descending, TrieLabel(entry.name, Direction.DESCENDING))
        if verbose:
            print(f"[INDEX] Indexed {len(index)} reference sequences from {len(catalog)} entries")
        return index
