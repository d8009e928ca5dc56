"""
options_doc — Markdown pages for declared module options.

Public API:
  document_options(json_text, config) → Rendered
  load_options(json_text, links)      → (list[OptionDoc], diagnostics)

Typical use:
    from data_model import RenderConfig
    from options_doc import document_options

    config = RenderConfig(title="NixOS Options", anchor_prefix="opt-")
    rendered = document_options(Path("options.json").read_text(), config)
"""

from __future__ import annotations

from data_model.render import RenderConfig, Rendered
from md_render.options import render_options

from .adapter import entry_errors, load_options, to_option_doc
from .schema import OPTION_ENTRY_SCHEMA


def document_options(json_text: str, config: RenderConfig) -> Rendered:
    """Raises OptionsJsonError when the document is not a JSON object."""
    options, diagnostics = load_options(json_text, config.declarations)
    return Rendered(render_options(options, config), tuple(diagnostics))


__all__ = [
    "document_options",
    "load_options",
    "entry_errors",
    "to_option_doc",
    "OPTION_ENTRY_SCHEMA",
]
