"""
Exclusion rules for the walker.

Patterns are regular expressions searched anywhere in a node's absolute
path. A matching directory is skipped together with its whole subtree.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable

# Generated source files and OS metadata files
DEFAULT_FILTERS: tuple[str, ...] = (
    r".*\.py$",
    r"\.DS_Store$",
)


class FilterDecision(Enum):
    """Outcome of testing one path against the exclusion rules."""

    KEEP = "keep"
    SKIP_FILE = "skip-file"
    SKIP_TREE = "skip-tree"


class Filter:
    """
    Compiled exclusion rules.

    Usage:
        rules = Filter([r"\\.git$", r"\\.tmp$"])
        if rules.check("/src/.git", is_dir=True) is FilterDecision.SKIP_TREE:
            ...
    """

    def __init__(self, patterns: Iterable[str] = DEFAULT_FILTERS) -> None:
        self.patterns: tuple[str, ...] = tuple(patterns)
        self._compiled = [re.compile(p) for p in self.patterns]

    def matches(self, path: str) -> bool:
        """True if any pattern is found in the path."""
        return any(rx.search(path) for rx in self._compiled)

    def check(self, path: str, is_dir: bool) -> FilterDecision:
        """Decide what the walker should do with a node."""
        if not self.matches(path):
            return FilterDecision.KEEP
        if is_dir:
            return FilterDecision.SKIP_TREE
        return FilterDecision.SKIP_FILE


def normalize_path(path: str) -> str:
    """
    Turn a host relative path into a virtual path.

    Converts Windows backslashes and guarantees a single leading slash.
    """
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return "/" + normalized.lstrip("/")
