"""runestr CLI - inspect strings and manage the Unicode table cache."""
from __future__ import annotations

import argparse
import logging
import sys
import unicodedata
from pathlib import Path
from typing import Optional, Sequence

from runestr.internals.errors import TextError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="runestr",
        description="runestr - rune-indexed UTF-8 strings",
    )
    parser.add_argument(
        "--version", action="store_true", help="Show version and exit",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)",
    )
    parser.add_argument(
        "--table-cache", action="store_true",
        help="Load Unicode tables through the on-disk cache (see 'tables build')",
    )

    subparsers = parser.add_subparsers(dest="command")

    # runestr tables build|info
    tables_parser = subparsers.add_parser("tables", help="Manage the Unicode table cache")
    tables_parser.set_defaults(print_tables_help=tables_parser.print_help)
    tables_sub = tables_parser.add_subparsers(dest="tables_command")
    tables_build = tables_sub.add_parser("build", help="Build tables and write the cache file")
    tables_build.add_argument("--output", default=None, help="Output .rtab path (default: configured cache)")
    tables_build.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    info_parser = tables_sub.add_parser("info", help="Summarize a table cache file")
    info_parser.add_argument("path", nargs="?", default=None, help=".rtab path (default: configured cache)")

    # runestr inspect <text>
    inspect_parser = subparsers.add_parser("inspect", help="Show the runes of a string")
    inspect_parser.add_argument("text")

    # runestr find <text> <needle>
    find_parser = subparsers.add_parser("find", help="Search a string by rune index")
    find_parser.add_argument("text")
    find_parser.add_argument("needle")
    find_parser.add_argument("--start", type=int, default=0,
                             help="Start rune index; negative searches backward")
    find_parser.add_argument("--all", action="store_true", help="Print every match")

    return parser


def _default_table_path() -> Path:
    from runestr.config import load_config

    return load_config().table_cache_path(unicodedata.unidata_version)


def _install_cached_tables() -> None:
    from runestr.config import load_config
    from runestr.unicode.tables import install_tables, load_tables

    install_tables(load_tables(load_config()))


def cmd_tables_build(args: argparse.Namespace) -> int:
    from tqdm import tqdm

    from runestr.unicode.table_format import TableFormat
    from runestr.unicode.tables import PLANE_COUNT, PLANE_SIZE, build_tables

    output = Path(args.output) if args.output else _default_table_path()
    with tqdm(total=PLANE_COUNT * PLANE_SIZE, desc="Building tables", unit="cp",
              unit_scale=True, disable=args.no_progress) as pbar:
        tables = build_tables(progress=pbar.update)

    output.parent.mkdir(parents=True, exist_ok=True)
    TableFormat.write(output, tables)
    print(f"Wrote Unicode {tables.unicode_version} tables to {output}")
    return 0


def cmd_tables_info(args: argparse.Namespace) -> int:
    from runestr.unicode.table_format import TableFormat

    path = Path(args.path) if args.path else _default_table_path()
    tables = TableFormat.read(path)
    print(f"File:     {path}")
    print(f"Unicode:  {tables.unicode_version}")
    print(f"Ranges:   {sum(len(t) for t in tables.categories.values())} "
          f"in {len(tables.categories)} categories")
    for name in sorted(tables.categories):
        print(f"  {name}  {len(tables.categories[name]):>5}")
    print(f"Case map: {len(tables.to_upper)} upper, {len(tables.to_lower)} lower")
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    from runestr.string import String
    from runestr.unicode import codec

    s = String(args.text)
    print(f"bytes: {s.raw_byte_length()}  runes: {s.length()}")
    for i, rune in enumerate(s):
        flags = "".join((
            "L" if codec.is_letter(rune) else "-",
            "D" if codec.is_digit(rune) else "-",
            "S" if codec.is_space(rune) else "-",
        ))
        print(f"{i:>4}  U+{rune:04X}  {codec.encoded_width(rune)}  {flags}")
    return 0


def cmd_find(args: argparse.Namespace) -> int:
    from runestr.string import String

    s = String(args.text)
    if args.all:
        for index in s.find_all(args.needle):
            print(index)
        return 0
    print(s.find(args.needle, args.start))
    return 0


def run(args: argparse.Namespace) -> int:
    if args.version:
        from runestr.internals.version import print_banner
        print_banner()
        return 0

    if args.command is None:
        build_parser().print_help()
        return 0

    if args.table_cache:
        _install_cached_tables()

    if args.command == "tables":
        if args.tables_command == "build":
            return cmd_tables_build(args)
        if args.tables_command == "info":
            return cmd_tables_info(args)
        args.print_tables_help()
        return 0

    if args.command == "inspect":
        return cmd_inspect(args)

    if args.command == "find":
        return cmd_find(args)

    return 0


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def cli_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        return run(args)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130
    except (TextError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(cli_main())
