"""
fsembed ingest layer.

Walks directory trees into flat entry mappings ready for generation.

Usage:
    from fsembed.ingest import Filter, walk

    entries = walk(["./static"], Filter([r"\\.map$"]))
    for true_path, entry in entries.items():
        print(true_path, "->", entry.path, entry.size)
"""

from .filters import DEFAULT_FILTERS, Filter, FilterDecision, normalize_path
from .walker import Entry, is_under, prune_empty_dirs, walk

__all__ = [
    # Filters
    "DEFAULT_FILTERS",
    "Filter",
    "FilterDecision",
    "normalize_path",
    # Walker
    "Entry",
    "is_under",
    "prune_empty_dirs",
    "walk",
]
