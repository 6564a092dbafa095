"""Command-line interface for the ``tick`` package.

This module exposes the CLI entrypoint used by the console script
``tick``. It is a thin adapter from parsed arguments to
:func:`tick.touch.touch_paths`; errors raised by the library are printed
as ``tick: <message>`` and turned into exit status 1.
"""
import argparse
import sys
from pathlib import Path
from importlib.metadata import PackageNotFoundError, version
from . import sources
from . import touch as touch_mod
from .errors import TickError

NAME = "tick"

try:
    __version__ = version(NAME)
except PackageNotFoundError:
    __version__ = "unknown"


def options_from_args(args) -> touch_mod.TouchOptions:
    """Build :class:`TouchOptions` from an argparse Namespace."""
    reference = getattr(args, "reference", None)
    return touch_mod.TouchOptions(
        no_create=bool(getattr(args, "no_create", False)),
        access_only=bool(getattr(args, "access", False)),
        modify_only=bool(getattr(args, "modify", False)),
        date=getattr(args, "date", None),
        compact_time=getattr(args, "stamp", None),
        reference=Path(reference) if reference is not None else None,
        category=getattr(args, "word", None),
        no_dereference=bool(getattr(args, "no_dereference", False)),
        strict=bool(getattr(args, "strict", False)),
        dry_run=bool(getattr(args, "dry_run", False)),
        verbose=bool(getattr(args, "verbose", False)),
    )


def cmd_touch(args) -> int:
    """Handle a parsed command line and return the exit status."""
    files = getattr(args, "files", None) or []
    if not files:
        print(f"{NAME}: missing operand")
        print(f"Try '{NAME} --help' for more information")
        return 0

    options = options_from_args(args)
    try:
        sources.ensure_single_source(
            options.date, options.compact_time, options.reference)
        touch_mod.touch_paths([Path(f) for f in files], options)
    except TickError as e:
        print(f"{NAME}: {e}", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=NAME,
        description=(
            "Update the access and modification times of each FILE to the "
            "current time. A FILE argument that does not exist is created "
            "empty, unless -c is supplied."
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=__version__
    )
    parser.add_argument("files", nargs="*", metavar="FILE", help="files to touch")
    parser.add_argument(
        "-c",
        "--no-create",
        action="store_true",
        help="do not create any files",
    )
    parser.add_argument(
        "-a",
        dest="access",
        action="store_true",
        help="change only the access time",
    )
    parser.add_argument(
        "-m",
        dest="modify",
        action="store_true",
        help="change only the modification time",
    )
    parser.add_argument(
        "-d",
        "--date",
        metavar="STRING",
        help="parse STRING and use it instead of current time",
    )
    parser.add_argument(
        "-t",
        dest="stamp",
        metavar="STAMP",
        help=(
            "use [[CC]YY]MMDDhhmm[.ss] instead of current time, "
            "with a date-time format that differs from -d's"
        ),
    )
    parser.add_argument(
        "-r",
        "--reference",
        metavar="FILE",
        help="use this file's times instead of current time",
    )
    parser.add_argument(
        "--time",
        dest="word",
        metavar="WORD",
        help=(
            "specify which time to change: access time (-a): 'access', "
            "'atime', 'use'; modification time (-m): 'modify', 'mtime'"
        ),
    )
    parser.add_argument(
        "-n",
        "--no-dereference",
        action="store_true",
        help=(
            "affect each symbolic link instead of any referenced file "
            "(useful only on systems that can change the timestamps of a symlink)"
        ),
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="refuse to combine -m with --time instead of applying both",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="do not modify files; print the changes that would be made",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="print a line for every file processed",
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    raise SystemExit(cmd_touch(args))
