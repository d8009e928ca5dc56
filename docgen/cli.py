"""
docgen — command-line tool for Nix reference documentation.

Usage:
  docgen <command> [options]
  docgen --file F [functions options]     same as `docgen functions ...`

Commands:
  functions   Renders the documented functions of a Nix file as Markdown.
  file-doc    Prints the file-level doc comment of a Nix file.
  options     Renders an options JSON file as Markdown.

Markdown goes to stdout; warnings and errors go to stderr. Site-wide
defaults can be set with DOCGEN_* variables or a `.env` file.
"""

from __future__ import annotations

import argparse
import sys

from docgen import __version__
from docgen._config import load_env
from docgen.commands import file_doc as cmd_file_doc
from docgen.commands import functions as cmd_functions
from docgen.commands import options as cmd_options

_ROOT_FLAGS = ("-h", "--help", "--version")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docgen",
        description="docgen — Markdown reference pages from Nix doc comments.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"docgen {__version__}"
    )

    subparsers = parser.add_subparsers(
        title="commands",
        metavar="<command>",
        dest="command",
    )
    subparsers.required = True

    cmd_functions.add_parser(subparsers)
    cmd_file_doc.add_parser(subparsers)
    cmd_options.add_parser(subparsers)

    return parser


def with_default_command(argv: list[str]) -> list[str]:
    """
    `docgen --file F --export a,b` (no command) means `docgen functions ...`,
    the call shape used by existing documentation build scripts.
    """
    if argv and argv[0].startswith("-") and argv[0] not in _ROOT_FLAGS:
        return ["functions", *argv]
    return argv


def main(argv: list[str] | None = None) -> None:
    load_env()
    parser = build_parser()
    args = parser.parse_args(with_default_command(sys.argv[1:] if argv is None else argv))
    args.func(args)


if __name__ == "__main__":
    main()
