"""
CLI interface: dump a JSON or TOML document.

Usage:
    python -m vardump config.toml
    python -m vardump data.json --depth 2 --format text
    cat data.json | python -m vardump -
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import toml

from .dumper import FORMATS, dump
from .options import DumpOptions, InvalidOptionsError, get_options


def load_document(source: str) -> Any:
    """Load a JSON or TOML document from a path, '-' reads JSON from stdin."""
    if source == "-":
        return json.load(sys.stdin)

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"{path} missing.")
    if path.suffix.lower() == ".toml":
        return toml.load(path)
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def build_parser() -> argparse.ArgumentParser:
    defaults = get_options()
    parser = argparse.ArgumentParser(description="Dump a JSON or TOML document as a readable tree",
                                     prog="python -m vardump")
    parser.add_argument("source", help="JSON or TOML file, '-' reads JSON from stdin")
    parser.add_argument("--depth", type=int, default=defaults.depth,
                        help=f"Nesting levels expanded, 0 for unlimited (default: {defaults.depth})")
    parser.add_argument("--truncate", type=int, default=defaults.truncate,
                        help=f"String bytes shown, 0 for unlimited (default: {defaults.truncate})")
    parser.add_argument("--collapse", type=int, default=defaults.collapse,
                        help=f"Child count rendered pre-collapsed (default: {defaults.collapse})")
    parser.add_argument("--location", action="store_true", help="Annotate output with the dump call site")
    parser.add_argument("--format", choices=FORMATS, default=None,
                        help="Output format (default: detected from the terminal)")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = DumpOptions(depth=args.depth, truncate=args.truncate, collapse=args.collapse,
                              location=args.location)
    except InvalidOptionsError as e:
        parser.error(str(e))

    try:
        document = load_document(args.source)
    except (OSError, ValueError, toml.TomlDecodeError) as e:
        print(f"error: cannot load {args.source}: {e}", file=sys.stderr)
        return 1

    dump(document, options, format=args.format)
    return 0


if __name__ == "__main__":
    sys.exit(main())
