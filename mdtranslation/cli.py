"""
mdtranslation command line.

Commands:
    mdtranslation passthrough input.md [output.md]
    mdtranslation extract input.md [output.md] --source-language fr-FR

Output goes to stdout when no output path is given.

Usage:
    python -m mdtranslation <command> [args]

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from mdtranslation.config import TranslationConfig, load_config
from mdtranslation.errors import StructureError
from mdtranslation.pipeline import passthrough, translate_extract
from mdtranslation.version import __version__

logger = logging.getLogger(__name__)


def _read_input(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _write_output(text: str, path: Optional[str]) -> None:
    if path:
        Path(path).write_text(text, encoding="utf-8")
        logger.info(f"Wrote {len(text)} chars to {path}")
    else:
        sys.stdout.write(text)


def cmd_passthrough(args: argparse.Namespace, config: TranslationConfig) -> None:
    """Tokenize and re-render the input unchanged."""
    text = _read_input(args.input)
    _write_output(passthrough(text, config), args.output)


def cmd_extract(args: argparse.Namespace, config: TranslationConfig) -> None:
    """Write the clause list of the input as a translation worksheet."""
    text = _read_input(args.input)
    _write_output(translate_extract(text, args.source_language, config), args.output)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdtranslation",
        description="Markdown sentence extraction for translation workflows",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to mdtranslation.yaml (searched upward from cwd if omitted)",
    )

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # passthrough
    p_pass = sub.add_parser("passthrough", help="Tokenize and re-render markdown")
    p_pass.add_argument("input", help="Input markdown file")
    p_pass.add_argument("output", nargs="?", default=None, help="Output file (stdout if omitted)")
    p_pass.set_defaults(func=cmd_passthrough)

    # extract
    p_extract = sub.add_parser("extract", help="Extract sentences as numbered clauses")
    p_extract.add_argument("input", help="Input markdown file")
    p_extract.add_argument("output", nargs="?", default=None, help="Output file (stdout if omitted)")
    p_extract.add_argument(
        "--source-language", default=None,
        help="Language id of the input (default: from config, en-US)",
    )
    p_extract.set_defaults(func=cmd_extract)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(Path(args.config) if args.config else None)

        if args.verbose:
            logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")
        else:
            logging.basicConfig(level=getattr(logging, config.log_level, logging.WARNING))

        args.func(args, config)
    except (StructureError, OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
