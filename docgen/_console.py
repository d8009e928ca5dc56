"""
Terminal output shared by the docgen commands.

Rendered Markdown goes to stdout untouched; everything meant for a human
(diagnostics, errors, status lines) goes through a rich console on stderr.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable
from typing import NoReturn

from rich.console import Console
from rich.markup import escape

from data_model.diagnostics import Diagnostic, Severity

err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def add_output_flags(p: argparse.ArgumentParser) -> None:
    group = p.add_mutually_exclusive_group()
    group.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Do not print warnings.",
    )
    group.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Also print informational diagnostics (ignored doc comments).",
    )


def report(diagnostics: Iterable[Diagnostic], path: str | None, args: argparse.Namespace) -> None:
    for d in diagnostics:
        if d.severity is Severity.INFO and not args.verbose:
            continue
        if d.severity is Severity.WARNING and args.quiet:
            continue
        style = "yellow" if d.severity is Severity.WARNING else "dim"
        err_console.print(f"[{style}]{d.severity}:[/{style}] {escape(d.format(path))}")


def status(message: str, args: argparse.Namespace) -> None:
    if not args.quiet:
        err_console.print(message)


def fail(label: str, exc: BaseException | str) -> NoReturn:
    err_console.print(f"[red]{escape(label)}[/red] {escape(str(exc))}")
    raise SystemExit(1)


def write_stdout(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()
