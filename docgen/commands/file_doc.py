"""Command: docgen file-doc — the file-level doc comment of a Nix file."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from data_model.errors import ParseError
from docgen._console import add_output_flags, fail, report, write_stdout
from extractor import locate_doc_comments, read_file_doc
from md_render.functions import render_file_doc
from nix_parser import parse

FORMATS = ("markdown", "json", "plain")


def _plain(text: str) -> str:
    index = locate_doc_comments(parse(text))
    return index.file_doc.body if index.file_doc is not None else ""


def run(args: argparse.Namespace) -> None:
    path = Path(args.file)
    if args.shift_headings < 0:
        fail("Invalid options:", "--shift-headings must not be negative")

    try:
        text = path.read_text(encoding="utf-8")
        doc, diagnostics = read_file_doc(text)
        plain = _plain(text) if args.format == "plain" else ""
    except OSError as exc:
        fail(f"Cannot read {path}:", exc)
    except ParseError as exc:
        fail(f"Parse error in {path}:", exc)

    report(diagnostics, str(path), args)
    fallback = args.fallback or ""

    if args.format == "json":
        body = render_file_doc(doc, args.shift_headings).rstrip("\n") if doc is not None else ""
        payload = {"file": args.file, "doc": body or fallback or None}
        write_stdout(json.dumps(payload, ensure_ascii=False, indent=2) + "\n")
    elif args.format == "plain":
        body = plain or fallback
        write_stdout(body + "\n" if body else "")
    else:
        body = render_file_doc(doc, args.shift_headings) if doc is not None else ""
        if not body and fallback:
            body = fallback + "\n"
        write_stdout(body)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "file-doc",
        help="Prints the file-level doc comment of a Nix file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Prints the doc comment at the very top of a Nix file. A file without one
produces empty output (or the --fallback text); this is not an error.

Examples:
  docgen file-doc --file lib/strings.nix
  docgen file-doc --file lib/strings.nix --shift-headings 1
  docgen file-doc --file lib/attrsets.nix --format json
  docgen file-doc --file lib/misc.nix --fallback "Miscellaneous functions."
        """,
    )
    p.add_argument(
        "--file", "-f",
        required=True,
        metavar="FILE",
        help="Nix file to read.",
    )
    p.add_argument(
        "--format",
        choices=FORMATS,
        default="markdown",
        help='Output format (default: markdown); json prints {"file": ..., "doc": markdown or null}.',
    )
    p.add_argument(
        "--shift-headings",
        type=int,
        default=0,
        metavar="N",
        help="Levels added to the comment's headings (default: 0).",
    )
    p.add_argument(
        "--fallback",
        default=None,
        metavar="TEXT",
        help="Text printed when the file has no file-level doc comment.",
    )
    add_output_flags(p)
    p.set_defaults(func=run)
