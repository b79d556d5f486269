"""
Source generation.

Renders walked entries as Python modules. The emitted modules import
``File`` and ``Fs`` from the runtime and declare the embedded tree as
literal data, so loading them needs nothing but :mod:`fsembed.runtime`.

Output is sorted by virtual path and contains no timestamps of its own,
so packing the same tree twice gives byte-identical modules.
"""

from __future__ import annotations

import keyword
import os
import re
from dataclasses import dataclass

from fsembed import FORMAT_VERSION, __version__
from fsembed.config import DEFAULT_IMPORT
from fsembed.errors import AlreadyExistsError, PackError, TargetIsDirectoryError
from fsembed.ingest.walker import Entry

INDENT = "    "

_NON_LETTERS = re.compile(r"[^a-zA-Z]+")
_CAMEL_BOUNDARY = re.compile(r"_[a-zA-Z]")


@dataclass
class GenerateOptions:
    """
    Options shared by both output shapes.

    Attributes:
        package: Name of the package the module is generated into
        import_path: Module providing ``File`` and ``Fs``
        var_prefix: Prefix for per-file variable names
    """

    package: str = ""
    import_path: str = DEFAULT_IMPORT
    var_prefix: str = ""


# -----------------------------------------------------------------------------
# Naming
# -----------------------------------------------------------------------------


def identifier(name: str, trim_ext: bool = False) -> str:
    """
    Derive a variable name from a file name.

    Runs of non-letters become word boundaries, words are camel-cased and
    the first letter is capitalised: ``logo-small.png`` -> ``LogoSmallPng``.

    Args:
        name: File name or path (only the base name is used)
        trim_ext: Drop the extension first

    Returns:
        A valid Python identifier
    """
    base = os.path.basename(name.rstrip("/\\"))
    if trim_ext:
        base = os.path.splitext(base)[0]

    base = _NON_LETTERS.sub("_", base)
    base = _CAMEL_BOUNDARY.sub(lambda m: m.group(0)[1].upper(), base)
    if not base.strip("_"):
        return "File"

    base = base[0].upper() + base[1:]
    if keyword.iskeyword(base):
        base += "_"
    return base


def package_name(out_path: str) -> str:
    """Name of the directory the output is written into."""
    return os.path.basename(os.path.dirname(os.path.abspath(out_path)))


def _check_identifier(name: str) -> str:
    if not name.isidentifier() or keyword.iskeyword(name):
        raise PackError(f"Not a valid variable name: {name!r}")
    return name


# -----------------------------------------------------------------------------
# Ordering
# -----------------------------------------------------------------------------


def sorted_entries(entries: dict[str, Entry]) -> list[Entry]:
    """
    Order entries by virtual path.

    Several roots may produce the same virtual path. Colliding directories
    are merged; a collision involving a file is an error.

    Raises:
        PackError: If two files share a virtual path
    """
    by_path: dict[str, Entry] = {}
    for true_path in sorted(entries):
        entry = entries[true_path]
        previous = by_path.get(entry.path)
        if previous is not None and not (previous.is_dir and entry.is_dir):
            raise PackError(f"Duplicate virtual path {entry.path} (from {true_path})")
        by_path[entry.path] = entry

    return [by_path[p] for p in sorted(by_path)]


# -----------------------------------------------------------------------------
# Rendering
# -----------------------------------------------------------------------------


def _header(options: GenerateOptions, names: str) -> list[str]:
    package = options.package or "__main__"
    return [
        '"""',
        f"Embedded files for the ``{package}`` package.",
        "",
        f"Generated by fsembed {__version__}. DO NOT EDIT.",
        '"""',
        "",
        f"from {options.import_path} import {names}",
        "",
        "",
    ]


def _file_literal(entry: Entry, indent: str, with_path: bool = False) -> list[str]:
    """Lines of a ``File(...)`` call; the first line carries no indent."""
    inner = indent + INDENT
    lines = ["File("]
    if with_path:
        lines.append(f"{inner}path={entry.path!r},")
    lines.append(f"{inner}name={entry.name!r},")
    lines.append(f"{inner}mod_time={entry.mod_time},")

    if entry.is_dir:
        lines.append(f"{inner}is_dir=True,")
    elif entry.size > 0 and entry.data:
        lines.append(f"{inner}size={entry.size},")
        # Payload lines stay flush left inside the raw string
        lines.append(f'{inner}data=r"""{entry.data}""",')

    lines.append(f"{indent})")
    return lines


def render_fs(entries: dict[str, Entry], var_name: str, options: GenerateOptions) -> str:
    """
    Render the whole tree as one ``Fs`` declaration.

    Args:
        entries: Walker output
        var_name: Name of the module-level variable
        options: Generation options

    Returns:
        Module source text
    """
    _check_identifier(var_name)

    lines = _header(options, "File, Fs")
    lines.append(f"{var_name} = Fs(")
    lines.append(INDENT + "{")
    indent = INDENT * 2
    for entry in sorted_entries(entries):
        body = _file_literal(entry, indent)
        lines.append(f"{indent}{entry.path!r}: {body[0]}")
        lines.extend(body[1:-1])
        lines.append(body[-1] + ",")
    lines.append(INDENT + "},")
    lines.append(f"{INDENT}format_version={FORMAT_VERSION},")
    lines.append(")")

    return "\n".join(lines) + "\n"


def render_file(entry: Entry, options: GenerateOptions) -> str:
    """
    Render a single file as one ``File`` declaration.

    The variable is named ``<var_prefix><Identifier>`` after the file name.

    Returns:
        Module source text
    """
    var_name = _check_identifier(options.var_prefix + identifier(entry.name))

    lines = _header(options, "File")
    body = _file_literal(entry, "", with_path=True)
    lines.append(f"{var_name} = {body[0]}")
    lines.extend(body[1:])

    return "\n".join(lines) + "\n"


# -----------------------------------------------------------------------------
# Writing
# -----------------------------------------------------------------------------


def check_target(path: str, force: bool) -> str:
    """
    Verify that an output path may be written.

    Returns:
        The absolute path

    Raises:
        AlreadyExistsError: If the path exists and ``force`` is False
        TargetIsDirectoryError: If the path is an existing directory
    """
    path = os.path.abspath(path)
    if not force and os.path.lexists(path):
        raise AlreadyExistsError(path)
    if os.path.isdir(path):
        raise TargetIsDirectoryError(path)
    return path


def write_file(path: str, text: str, force: bool = False) -> bool:
    """
    Write generated text to disk.

    Empty text is a no-op. Missing parent directories are created.

    Returns:
        True if the file was written
    """
    if not text:
        return False

    path = check_target(path, force)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(text)
    return True
