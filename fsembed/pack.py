"""
Pack command implementation.

Walks the configured inputs and writes them out as generated Python
modules, either one module declaring the whole tree (output ends in
``.py``) or one module per file.
"""

from __future__ import annotations

import os
from pathlib import Path

from fsembed.config import SOURCE_SUFFIX, PackConfig
from fsembed.errors import PackError
from fsembed.generate import (
    GenerateOptions,
    check_target,
    identifier,
    package_name,
    render_file,
    render_fs,
    write_file,
)
from fsembed.ingest import Entry, Filter, walk


def pack(config: PackConfig) -> list[Path]:
    """
    Pack the configured inputs into generated modules.

    Nothing is written unless the walk succeeds and every output path
    passes the overwrite checks.

    Args:
        config: Pack options

    Returns:
        Paths of the modules written

    Raises:
        WalkError: If an input cannot be read
        AlreadyExistsError: If an output exists and ``config.force`` is False
        TargetIsDirectoryError: If an output path is a directory
        PackError: If the inputs cannot be rendered, or two inputs map to
            the same output module
    """
    entries = walk(config.files, Filter(config.filters), verbose=config.verbose)

    if config.aggregate:
        if config.verbose:
            print("\nWriting filesystem module...")
        outputs = [_render_aggregate(entries, config)]
    else:
        if config.verbose:
            print("\nWriting file modules...")
        outputs = _render_per_file(entries, config)

    # Check every target before touching the disk
    for out, _ in outputs:
        check_target(out, config.force)

    written: list[Path] = []
    for out, text in outputs:
        if write_file(out, text, force=config.force):
            written.append(Path(out))
            if config.verbose:
                print(f"  [write] {out}")

    if config.verbose:
        print(f"\nWrote {len(written)} module(s)")
    return written


def _options(config: PackConfig, out: str) -> GenerateOptions:
    return GenerateOptions(
        package=package_name(out),
        import_path=config.import_path,
        var_prefix=config.var,
    )


def _render_aggregate(entries: dict[str, Entry], config: PackConfig) -> tuple[str, str]:
    out = os.path.abspath(config.out)
    var_name = config.var or identifier(out, trim_ext=True)
    options = _options(config, out)
    options.var_prefix = ""
    return out, render_fs(entries, var_name, options)


def _render_per_file(entries: dict[str, Entry], config: PackConfig) -> list[tuple[str, str]]:
    outputs = []
    sources: dict[str, str] = {}
    for true_path in sorted(entries):
        entry = entries[true_path]
        if entry.is_dir:
            continue

        if config.out:
            out = os.path.join(config.out, entry.path.lstrip("/") + SOURCE_SUFFIX)
        else:
            out = true_path + SOURCE_SUFFIX
        out = os.path.abspath(out)

        # Two inputs sharing a virtual path would overwrite each other
        if out in sources:
            raise PackError(f"{sources[out]} and {true_path} both map to {out}")
        sources[out] = true_path

        outputs.append((out, render_file(entry, _options(config, out))))
    return outputs
