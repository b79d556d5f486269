"""
fsembed CLI.

Commands:
    pack       Embed files/directories into generated Python modules
    ls         List the entries of an embedded filesystem
    serve      Serve an embedded filesystem over HTTP

Examples:
    fsembed pack ./static -o myapp/assets.py
    fsembed pack ./icons -o myapp/icons/ --var Icon
    fsembed ls myapp.assets:Assets
    fsembed serve myapp.assets:Assets -p 3000
"""

from __future__ import annotations

import argparse
import importlib
import sys

from fsembed.ingest.filters import DEFAULT_FILTERS

# Exit status when the output exists and --force was not given
EXIT_EXISTS = 2

OVERWRITE_HINT = "Output already exists; pass --force/-f to overwrite."


def load_fs(reference: str):
    """
    Import an embedded filesystem from ``module:variable``.

    Raises:
        ValueError: If the reference is malformed or not an Fs
    """
    from fsembed.runtime import Fs

    module_name, sep, var = reference.partition(":")
    if not sep or not module_name or not var:
        raise ValueError(f"Expected MODULE:VARIABLE, got {reference!r}")

    module = importlib.import_module(module_name)
    fs = getattr(module, var, None)
    if not isinstance(fs, Fs):
        raise ValueError(f"{reference} is not an embedded filesystem")
    return fs


def cmd_pack(args: argparse.Namespace) -> int:
    """Handle pack command."""
    from fsembed.config import get_pack_config
    from fsembed.errors import AlreadyExistsError
    from fsembed.pack import pack

    files = list(args.inputs) + list(args.input or [])
    if not files:
        print("Error: no input files given", file=sys.stderr)
        return 1

    config = get_pack_config(
        files=files,
        out=args.out,
        force=args.force,
        import_path=args.import_path,
        var=args.var,
        filters=args.exclude if args.exclude is not None else list(DEFAULT_FILTERS),
        verbose=args.verbose,
    )

    try:
        written = pack(config)
        if not args.verbose:
            for path in written:
                print(f"Created: {path}")
        return 0
    except AlreadyExistsError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(OVERWRITE_HINT)
        return EXIT_EXISTS
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def cmd_ls(args: argparse.Namespace) -> int:
    """Handle ls command."""
    try:
        fs = load_fs(args.reference)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for path in sorted(fs):
        info = fs[path]
        if info.is_dir:
            print(f"{'<dir>':>10}  {info.mod_time:%Y-%m-%d %H:%M}  {path}")
        else:
            print(f"{info.size:>10,}  {info.mod_time:%Y-%m-%d %H:%M}  {path}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle serve command - start the HTTP server."""
    from fsembed.serve import run_server

    try:
        fs = load_fs(args.reference)
        run_server(fs, host=args.host, port=args.port, title=args.reference)
        return 0
    except KeyboardInterrupt:
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fsembed",
        description="Embed files into Python source as a read-only virtual filesystem.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # pack
    pack_parser = subparsers.add_parser(
        "pack",
        help="Embed files/directories into generated Python modules",
    )
    pack_parser.add_argument(
        "inputs",
        nargs="*",
        help="Files or directories to embed",
    )
    pack_parser.add_argument(
        "-i",
        "--input",
        action="append",
        help="File or directory to embed (repeatable)",
    )
    pack_parser.add_argument(
        "-o",
        "--out",
        default="",
        help="Output module (*.py) for one filesystem, a directory for one module "
        "per file, or empty to write next to each input file",
    )
    pack_parser.add_argument(
        "--import",
        dest="import_path",
        default=None,
        help="Module the generated code imports File/Fs from (default: fsembed.runtime)",
    )
    pack_parser.add_argument(
        "--var",
        default=None,
        help="Variable name (single module) or variable prefix (one module per file)",
    )
    pack_parser.add_argument(
        "-x",
        "--exclude",
        action="append",
        default=None,
        help="Regular expression of paths to skip (repeatable, replaces the defaults: "
        + ", ".join(DEFAULT_FILTERS)
        + ")",
    )
    pack_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite existing output files",
    )
    pack_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print progress information",
    )

    # ls
    ls_parser = subparsers.add_parser(
        "ls",
        help="List the entries of an embedded filesystem",
    )
    ls_parser.add_argument(
        "reference",
        help="MODULE:VARIABLE of a generated filesystem",
    )

    # serve
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve an embedded filesystem over HTTP",
    )
    serve_parser.add_argument(
        "reference",
        help="MODULE:VARIABLE of a generated filesystem",
    )
    serve_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    serve_parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "pack":
        return cmd_pack(args)
    elif args.command == "ls":
        return cmd_ls(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
