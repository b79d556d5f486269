"""
Directory walker.

Turns one or more filesystem roots into a flat mapping of entries keyed by
their absolute path on disk. Each entry carries its virtual path (rooted at
``/`` with forward slashes), its metadata and, for non-empty files, the
encoded payload.
"""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from typing import Iterable

from fsembed import codec
from fsembed.errors import WalkError

from .filters import Filter, FilterDecision, normalize_path


# -----------------------------------------------------------------------------
# Entry
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Entry:
    """
    One file or directory captured at pack time.

    Attributes:
        path: Virtual path, always starting with ``/``
        name: Base name on disk
        size: Length of the original content (0 for directories)
        mod_time: Modification time in whole seconds since the epoch
        is_dir: Whether this is a directory
        data: Encoded payload, None for directories and empty files
    """

    path: str
    name: str
    size: int
    mod_time: int
    is_dir: bool = False
    data: str | None = None


def is_under(path: str, directory: str) -> bool:
    """True if ``path`` lies strictly below the virtual ``directory``."""
    prefix = directory.rstrip("/") + "/"
    return path != directory and path.startswith(prefix)


# -----------------------------------------------------------------------------
# Walk
# -----------------------------------------------------------------------------


def walk(
    roots: Iterable[str],
    rules: Filter | None = None,
    *,
    verbose: bool = False,
) -> dict[str, Entry]:
    """
    Walk every root and collect entries.

    Args:
        roots: Files or directories to pack, in order
        rules: Exclusion rules (defaults to :data:`DEFAULT_FILTERS`)
        verbose: Print each visited path

    Returns:
        Mapping of absolute path to Entry, with empty directories pruned

    Raises:
        WalkError: If any path cannot be read
    """
    if rules is None:
        rules = Filter()

    if verbose:
        print("Walking files...")

    result: dict[str, Entry] = {}
    for root in roots:
        _walk_root(os.path.abspath(root), rules, result, verbose)

    prune_empty_dirs(result)

    if verbose:
        print(f"Collected {len(result)} entries")
    return result


def _walk_root(
    root: str,
    rules: Filter,
    result: dict[str, Entry],
    verbose: bool,
) -> None:
    def visit(true_path: str, virtual_path: str) -> bool:
        """Record one node. Returns False if a directory must not be descended."""
        try:
            st = os.stat(true_path)
        except OSError as e:
            raise WalkError(true_path, e) from e

        is_dir = stat.S_ISDIR(st.st_mode)
        decision = rules.check(true_path, is_dir)
        if decision is not FilterDecision.KEEP:
            if verbose:
                print(f"  [skip] {true_path}")
            return False

        entry = _make_entry(true_path, virtual_path, st, is_dir)
        result[true_path] = entry
        if verbose:
            kind = "dir" if is_dir else "file"
            print(f"  [{kind}] {true_path} -> {virtual_path}")
        return True

    def fail(err: OSError) -> None:
        raise WalkError(err.filename or root, err) from err

    # A missing root fails in visit()
    if not os.path.isdir(root):
        visit(root, "/" + os.path.basename(root))
        return

    if not visit(root, "/"):
        return

    for dirpath, dirnames, filenames in os.walk(root, onerror=fail):
        kept = []
        for dirname in sorted(dirnames):
            full_path = os.path.join(dirpath, dirname)
            if visit(full_path, normalize_path(os.path.relpath(full_path, root))):
                kept.append(dirname)
        # Filter in place to prevent descent
        dirnames[:] = kept

        for filename in sorted(filenames):
            full_path = os.path.join(dirpath, filename)
            visit(full_path, normalize_path(os.path.relpath(full_path, root)))


def _make_entry(true_path: str, virtual_path: str, st: os.stat_result, is_dir: bool) -> Entry:
    name = os.path.basename(true_path)
    mod_time = int(st.st_mtime)

    if is_dir:
        return Entry(path=virtual_path, name=name, size=0, mod_time=mod_time, is_dir=True)

    data: str | None = None
    size = 0
    if st.st_size > 0:
        try:
            with open(true_path, "rb") as f:
                content = f.read()
        except OSError as e:
            raise WalkError(true_path, e) from e
        size = len(content)
        if content:
            data = codec.encode(content)

    return Entry(path=virtual_path, name=name, size=size, mod_time=mod_time, data=data)


# -----------------------------------------------------------------------------
# Pruning
# -----------------------------------------------------------------------------


def prune_empty_dirs(entries: dict[str, Entry]) -> None:
    """
    Remove directories with no file anywhere beneath them.

    Directories holding only (empty) subdirectories are removed too.
    Mutates ``entries`` in place.
    """
    file_paths = [e.path for e in entries.values() if not e.is_dir]

    for key, entry in list(entries.items()):
        if not entry.is_dir:
            continue
        if not any(is_under(p, entry.path) for p in file_paths):
            del entries[key]
