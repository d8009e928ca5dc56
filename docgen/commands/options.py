"""Command: docgen options — reference page of declared module options."""

from __future__ import annotations

import argparse
from pathlib import Path

from data_model.errors import OptionsJsonError
from data_model.render import DeclarationLinks, RenderConfig
from docgen._config import defaults
from docgen._console import add_output_flags, fail, report, status, write_stdout
from options_doc import document_options


def run(args: argparse.Namespace) -> None:
    path = Path(args.file)
    links = (
        DeclarationLinks(base_url=args.declarations_base_url, revision=args.revision)
        if args.include_declarations
        else None
    )

    try:
        config = RenderConfig(
            base_level    = args.base_level,
            shift         = args.shift_headings,
            anchor_prefix = args.anchor_prefix,
            title         = args.title,
            preamble      = args.preamble,
            declarations  = links,
        )
    except ValueError as exc:
        fail("Invalid options:", exc)

    try:
        rendered = document_options(path.read_text(encoding="utf-8"), config)
    except OSError as exc:
        fail(f"Cannot read {path}:", exc)
    except OptionsJsonError as exc:
        fail(f"Invalid options JSON in {path}:", exc)

    report(rendered.diagnostics, str(path), args)

    if args.output:
        out = Path(args.output)
        try:
            out.write_text(rendered.markdown, encoding="utf-8")
        except OSError as exc:
            fail(f"Cannot write {out}:", exc)
        status(f"[green]Written:[/green] {out}", args)
    else:
        write_stdout(rendered.markdown)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    env = defaults()
    p = subparsers.add_parser(
        "options",
        help="Renders an options JSON file as Markdown.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Renders the JSON produced by `lib.optionAttrSetToDocList` (an object of
option name → {description, type, default?, example?, declarations?}).
Entries without a description or type are skipped with a warning.

Examples:
  docgen options --file options.json --title "NixOS Options"
  docgen options --file options.json --anchor-prefix opt- --output options.md
  docgen options --file options.json \\
      --declarations-base-url https://github.com/NixOS/nixpkgs --revision nixos-24.05
        """,
    )
    p.add_argument(
        "--file", "-f",
        required=True,
        metavar="FILE",
        help="Options JSON file.",
    )
    p.add_argument(
        "--title", "-t",
        default="Module Options",
        help="Document heading (default: 'Module Options').",
    )
    p.add_argument(
        "--preamble",
        default=None,
        metavar="TEXT",
        help="Markdown placed between the heading and the first option.",
    )
    p.add_argument(
        "--anchor-prefix",
        default=env.options_anchor_prefix,
        metavar="PREFIX",
        help=f"Anchor prefix (default: {env.options_anchor_prefix!r}, env DOCGEN_OPTIONS_ANCHOR_PREFIX).",
    )
    p.add_argument(
        "--output", "-o",
        default=None,
        metavar="FILE",
        help="Write Markdown to FILE instead of stdout.",
    )
    p.add_argument(
        "--include-declarations",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="List the files declaring each option (default: yes).",
    )
    p.add_argument(
        "--declarations-base-url",
        default=env.declarations_base_url,
        metavar="URL",
        help="Repository URL for declaration links (env DOCGEN_DECLARATIONS_BASE_URL).",
    )
    p.add_argument(
        "--revision",
        default=env.revision,
        metavar="REV",
        help="Revision used in declaration links (default: master, env DOCGEN_REVISION).",
    )
    p.add_argument(
        "--shift-headings",
        type=int,
        default=1,
        metavar="N",
        help="Levels between the title and option headings (default: 1).",
    )
    p.add_argument(
        "--base-level",
        type=int,
        default=1,
        metavar="N",
        help="Level of the title heading, 1-6 (default: 1).",
    )
    add_output_flags(p)
    p.set_defaults(func=run)
