"""
options_doc/adapter.py — options JSON → OptionDoc list.

load_options(json_text, links) -> (options, diagnostics)

  - the document must be a JSON object, otherwise OptionsJsonError
  - every entry is validated against OPTION_ENTRY_SCHEMA; invalid entries
    are skipped with an options-entry-invalid warning
  - options are ordered by their dotted path, component by component
  - visible/internal flags are kept as read; the JSON producer filters
"""

from __future__ import annotations

import json
import re

from jsonschema import Draft202012Validator

from data_model.diagnostics import Diagnostic, DiagnosticCode
from data_model.errors import OptionsJsonError
from data_model.options import Declaration, LiteralKind, LiteralText, OptionDoc
from data_model.render import DeclarationLinks

from .schema import OPTION_ENTRY_SCHEMA

_STORE_PREFIX_RE = re.compile(r"^/nix/store/[^/]+-source/")
_CODE_LITERALS = {"literalExpression", "literalExample"}
_DEFAULT_REVISION = "master"

_validator = Draft202012Validator(OPTION_ENTRY_SCHEMA)


def load_options(
    json_text: str,
    links: DeclarationLinks | None = None,
) -> tuple[list[OptionDoc], list[Diagnostic]]:
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as exc:
        raise OptionsJsonError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise OptionsJsonError(
            f"expected an object mapping option names to entries, got {type(data).__name__}"
        )

    options: list[OptionDoc] = []
    diagnostics: list[Diagnostic] = []
    for name, entry in data.items():
        problems = entry_errors(entry)
        if problems:
            diagnostics.append(Diagnostic(
                code=DiagnosticCode.OPTIONS_ENTRY_INVALID,
                message=f"option `{name}` skipped: {'; '.join(problems)}",
                subject=name,
            ))
            continue
        options.append(to_option_doc(name, entry, links))

    options.sort(key=lambda o: o.path)
    return options, diagnostics


def entry_errors(entry: object) -> list[str]:
    """Schema violations of one entry as "path: message" strings."""
    out = []
    for e in sorted(_validator.iter_errors(entry), key=lambda e: list(map(str, e.absolute_path))):
        path = (
            "/" + "/".join(str(p) for p in e.absolute_path)
            if e.absolute_path
            else "/"
        )
        out.append(f"{path}: {e.message}")
    return out


def to_option_doc(name: str, entry: dict, links: DeclarationLinks | None = None) -> OptionDoc:
    """Converts an entry that already passed schema validation. links=None drops declarations."""
    return OptionDoc(
        name=name,
        type_label=entry["type"],
        description=_text(entry["description"]),
        default=_literal(entry["default"]) if "default" in entry else None,
        example=_literal(entry["example"]) if "example" in entry else None,
        declarations=(
            tuple(_declaration(d, links) for d in entry.get("declarations", []))
            if links is not None
            else ()
        ),
        read_only=entry.get("readOnly", False),
        visible=entry.get("visible", True) is not False,
        internal=entry.get("internal", False),
    )


# ---------------------------------------------------------------------------
# Field conversion
# ---------------------------------------------------------------------------

def _text(value: str | dict) -> str:
    return value if isinstance(value, str) else value["text"]


def _literal(value: object) -> LiteralText:
    if isinstance(value, dict) and "_type" in value:
        if value["_type"] == "literalMD":
            return LiteralText(value["text"], LiteralKind.MARKDOWN)
        if value["_type"] in _CODE_LITERALS:
            return LiteralText(value["text"], LiteralKind.CODE)
    if isinstance(value, str):
        return LiteralText(value, LiteralKind.CODE)
    return LiteralText(json.dumps(value, ensure_ascii=False), LiteralKind.CODE)


def _declaration(value: str | dict, links: DeclarationLinks | None) -> Declaration:
    if isinstance(value, dict):
        return Declaration(value["name"], value.get("url"))
    path = _STORE_PREFIX_RE.sub("", value)
    if links is None or not links.base_url or path.startswith("/"):
        return Declaration(path)
    revision = links.revision or _DEFAULT_REVISION
    return Declaration(path, f"{links.base_url.rstrip('/')}/blob/{revision}/{path}")
