"""
extractor/api.py — the documentation pipelines for one Nix file.

  collect_function_entries(text, config)  → Extraction
  document_functions(text, config)        → Rendered   (Markdown)
  read_file_doc(text)                     → (StructuredDoc | None, diagnostics)
  document_file(text, shift)              → Rendered   (Markdown, "" when absent)

Every call is a pure function of its arguments. ParseError propagates to the
caller; every other problem ends up in the returned diagnostics.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from data_model.diagnostics import Diagnostic
from data_model.docs import FunctionEntry, StructuredDoc
from data_model.render import RenderConfig, Rendered
from md_render.body import parse_doc_body
from md_render.functions import render_file_doc, render_functions
from nix_parser import parse

from .collector import collect
from .locator import DocIndex, locate_doc_comments


@dataclass(slots=True)
class Extraction:
    entries: list[FunctionEntry] = field(default_factory=list)
    file_doc: StructuredDoc | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)


def collect_function_entries(
    text: str,
    config: RenderConfig,
    *,
    locations: Mapping[str, str] | None = None,
) -> Extraction:
    source = parse(text)
    index = locate_doc_comments(source)
    entries, diagnostics = collect(source, index, config, locations)
    file_doc, file_diagnostics = _parse_file_doc(index)
    return Extraction(
        entries=entries,
        file_doc=file_doc,
        diagnostics=index.diagnostics + file_diagnostics + diagnostics,
    )


def document_functions(
    text: str,
    config: RenderConfig,
    *,
    locations: Mapping[str, str] | None = None,
) -> Rendered:
    extraction = collect_function_entries(text, config, locations=locations)
    markdown = render_functions(extraction.entries, config, file_doc=extraction.file_doc)
    return Rendered(markdown, tuple(extraction.diagnostics))


def read_file_doc(text: str) -> tuple[StructuredDoc | None, list[Diagnostic]]:
    index = locate_doc_comments(parse(text))
    return _parse_file_doc(index)


def document_file(text: str, shift: int = 0) -> Rendered:
    doc, diagnostics = read_file_doc(text)
    markdown = render_file_doc(doc, shift) if doc is not None else ""
    return Rendered(markdown, tuple(diagnostics))


def _parse_file_doc(index: DocIndex) -> tuple[StructuredDoc | None, list[Diagnostic]]:
    if index.file_doc is None:
        return None, []
    doc, diagnostics = parse_doc_body(index.file_doc.body, span=index.file_doc.span)
    return doc, diagnostics
