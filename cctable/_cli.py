"""cctable command-line interface.

Usage:
    python3 -m cctable table-to-json save.lvl [save.json]
    python3 -m cctable json-to-table save.json [save.lvl]
    python3 -m cctable version

When OUTPUT is omitted it is the input's file name with the extension
swapped, written to the current directory.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import (
    TableError,
    __version__,
    json_to_table,
    table_to_json,
)

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cctable",
        description="Convert Construct Classic hash tables to and from JSON",
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log decoding/encoding progress")
    sub = parser.add_subparsers(dest="command")

    # ── table-to-json ──
    t2j = sub.add_parser("table-to-json",
                         help="Convert a Construct Classic hash table to a JSON file")
    t2j.add_argument("input", type=Path)
    t2j.add_argument("output", type=Path, nargs="?")

    # ── json-to-table ──
    j2t = sub.add_parser("json-to-table",
                         help="Convert a JSON file to a Construct Classic hash table")
    j2t.add_argument("input", type=Path)
    j2t.add_argument("output", type=Path, nargs="?")

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def output_path(output: Optional[Path], input_path: Path, default_ext: str) -> Path:
    """Return `output`, or ./<input stem>.<default_ext> when it is None."""
    if output is not None:
        return output
    return Path(".") / "{}.{}".format(input_path.stem, default_ext)


def _cmd_table_to_json(args: argparse.Namespace) -> Path:
    out = output_path(args.output, args.input, "json")
    raw = args.input.read_bytes()
    logger.debug("read %d bytes from %s", len(raw), args.input)
    out.write_text(table_to_json(raw), encoding="utf-8")
    return out


def _cmd_json_to_table(args: argparse.Namespace) -> Path:
    out = output_path(args.output, args.input, "lvl")
    # Bytes, so json_to_table reports non-UTF-8 input as a TableError.
    raw = json_to_table(args.input.read_bytes())
    out.write_bytes(raw)
    logger.debug("wrote %d bytes to %s", len(raw), out)
    return out


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"cctable {__version__}")
        return

    try:
        if args.command == "table-to-json":
            out = _cmd_table_to_json(args)
        else:
            out = _cmd_json_to_table(args)
    except (TableError, OSError) as e:
        print(f"cctable: error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f'Successfully converted "{args.input}" to "{out}"', file=sys.stderr)


if __name__ == "__main__":
    main()
