"""Command: docgen functions — reference page of the functions a Nix file exports."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from data_model.errors import ParseError
from data_model.render import RenderConfig
from docgen._config import defaults
from docgen._console import add_output_flags, fail, report, write_stdout
from extractor import collect_function_entries, document_functions
from md_render.functions import render_functions_json


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

def _parse_exports(value: str | None) -> tuple[str, ...] | None:
    if value is None:
        return None
    return tuple(name.strip() for name in value.split(",") if name.strip())


def _load_locations(path: Path) -> dict[str, str]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        fail(f"Cannot read locations file {path}:", exc)
    except json.JSONDecodeError as exc:
        fail(f"Invalid locations JSON in {path}:", exc)
    if not isinstance(data, dict):
        fail(f"Invalid locations JSON in {path}:", "expected an object of identifier → location")
    return {str(k): str(v) for k, v in data.items()}


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace) -> None:
    path = Path(args.file)
    locations = _load_locations(Path(args.locs)) if args.locs else None

    try:
        config = RenderConfig(
            base_level    = args.base_level,
            shift         = args.shift_headings,
            anchor_prefix = args.anchor_prefix,
            prefix        = args.prefix,
            category      = args.category,
            description   = args.description,
            exports       = _parse_exports(args.export),
        )
    except ValueError as exc:
        fail("Invalid options:", exc)

    try:
        text = path.read_text(encoding="utf-8")
        if args.json_output:
            extraction = collect_function_entries(text, config, locations=locations)
            output = render_functions_json(extraction.entries, config) + "\n"
            diagnostics = extraction.diagnostics
        else:
            rendered = document_functions(text, config, locations=locations)
            output = rendered.markdown
            diagnostics = rendered.diagnostics
    except OSError as exc:
        fail(f"Cannot read {path}:", exc)
    except ParseError as exc:
        fail(f"Parse error in {path}:", exc)

    report(diagnostics, str(path), args)
    write_stdout(output)


# ---------------------------------------------------------------------------
# Parser registration
# ---------------------------------------------------------------------------

def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    env = defaults()
    p = subparsers.add_parser(
        "functions",
        help="Renders the documented functions of a Nix file as Markdown.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Renders every documented binding of the attribute set a Nix file exports.
Doc comments are `/** ... */` blocks directly above a binding or parameter.

Examples:
  docgen functions --file lib/strings.nix --category strings \\
      --description "String manipulation functions"
  docgen functions --file lib/lists.nix --export map,filter,foldl
  docgen functions --file lib/trivial.nix --locs locations.json --json-output
        """,
    )
    p.add_argument(
        "--file", "-f",
        required=True,
        metavar="FILE",
        help="Nix file to document.",
    )
    p.add_argument(
        "--category", "-c",
        default="",
        help="Category name; qualifies identifiers and anchors the header.",
    )
    p.add_argument(
        "--description", "-d",
        default="",
        help="Category header text.",
    )
    p.add_argument(
        "--prefix", "-p",
        default=env.prefix,
        help=f"Identifier prefix (default: {env.prefix!r}, env DOCGEN_PREFIX).",
    )
    p.add_argument(
        "--anchor-prefix",
        default=env.anchor_prefix,
        metavar="PREFIX",
        help=f"Anchor prefix (default: {env.anchor_prefix!r}, env DOCGEN_ANCHOR_PREFIX).",
    )
    p.add_argument(
        "--export", "-e",
        default=None,
        metavar="NAMES",
        help="Comma-separated names to render, in this order; others are omitted.",
    )
    p.add_argument(
        "--shift-headings",
        type=int,
        default=1,
        metavar="N",
        help="Levels between the category heading and function headings (default: 1).",
    )
    p.add_argument(
        "--base-level",
        type=int,
        default=1,
        metavar="N",
        help="Level of the category heading, 1-6 (default: 1).",
    )
    p.add_argument(
        "--locs", "-l",
        default=None,
        metavar="FILE",
        help="JSON file mapping qualified identifiers to location Markdown.",
    )
    p.add_argument(
        "--json-output", "-j",
        action="store_true",
        help="Print entries as JSON instead of Markdown.",
    )
    add_output_flags(p)
    p.set_defaults(func=run)
