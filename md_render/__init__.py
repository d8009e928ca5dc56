"""
md_render — doc-comment body parsing and Markdown rendering.

Public API:
  parse_doc_body(text)                      → (StructuredDoc, diagnostics)
  render_functions(entries, config)         → Markdown
  render_functions_json(entries, config)    → JSON text
  render_file_doc(doc, shift)               → Markdown
  render_options(options, config)           → Markdown
  normalize_comment, shift_headings, slugify, AnchorRegistry, inline_code
"""

from .body import parse_doc_body, parse_arguments, split_field_docs
from .format import (
    AnchorRegistry,
    code_fence_mask,
    fenced,
    heading,
    inline_code,
    normalize_comment,
    shift_headings,
    slugify,
)
from .functions import (
    doc_to_json,
    render_arguments,
    render_file_doc,
    render_functions,
    render_functions_json,
    render_structured,
)
from .options import render_literal, render_options

__all__ = [
    "parse_doc_body",
    "parse_arguments",
    "split_field_docs",
    "AnchorRegistry",
    "code_fence_mask",
    "fenced",
    "heading",
    "inline_code",
    "normalize_comment",
    "shift_headings",
    "slugify",
    "doc_to_json",
    "render_arguments",
    "render_file_doc",
    "render_functions",
    "render_functions_json",
    "render_structured",
    "render_literal",
    "render_options",
]
