"""
md_render/functions.py — Markdown and JSON rendering of function entries.

Layout of one rendered file:

    # {description} {#sec-functions-library-{category}}     base_level
    {file doc}

    ## `lib.strings.concatStrings` {#function-library-lib-strings-concatstrings}
    {summary}                                                base_level + shift
    ### Arguments                                            + 1
    `list`

    : The list of strings
    ...
    Located at {location}.

Doc-body text is shifted so that its `#` headings land one level below the
binding heading; fenced code is never touched.

JSON entry keys: prefix, category, name, location, description, fn_type,
example and args, followed by ident, anchor, defined_as and the non-argument
sections. fn_type is always null.
"""

from __future__ import annotations

import json
from collections.abc import Iterable

from data_model.docs import (
    ArgumentEntry,
    FunctionEntry,
    Parameter,
    PatternField,
    PatternParameter,
    Section,
    SectionKind,
    SimpleParameter,
    StructuredDoc,
)
from data_model.render import RenderConfig

from .body import ARGUMENTS_HEADING, split_field_docs
from .format import AnchorRegistry, heading, inline_code, shift_headings, slugify

JSON_FORMAT_VERSION = 1

PARAMETER_PLACEHOLDER = "Function argument"
PATTERN_PLACEHOLDER   = "Structured function argument"
PATTERN_TERM          = "structured function argument"


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------

def render_functions(
    entries: Iterable[FunctionEntry],
    config: RenderConfig,
    *,
    file_doc: StructuredDoc | None = None,
) -> str:
    blocks: list[str] = []

    if config.category or config.description:
        anchor = f"{config.section_anchor_prefix}{slugify(config.category)}" if config.category else None
        blocks.append(heading(config.base_level, config.description or config.category, anchor))
        if file_doc is not None and not file_doc.is_empty():
            blocks.append(render_structured(file_doc, config.base_level))

    anchors = AnchorRegistry(config.anchor_prefix)
    level = config.entry_level
    for entry in entries:
        blocks.append(heading(level, inline_code(entry.ident), anchors.claim(entry.ident)))
        if entry.doc is None:
            blocks.append(placeholder_text(entry.name))
        else:
            body = render_structured(entry.doc, level, entry.parameters)
            if body:
                blocks.append(body)
        if entry.location:
            blocks.append(f"Located at {entry.location}.")

    return "\n\n".join(blocks) + "\n" if blocks else ""


def render_file_doc(doc: StructuredDoc, shift: int = 0) -> str:
    """File-level doc; its `# Heading` sections land at level 1 + shift."""
    body = render_structured(doc, shift)
    return body + "\n" if body else ""


def render_structured(
    doc: StructuredDoc,
    level: int,
    parameters: tuple[Parameter, ...] = (),
) -> str:
    """Summary and sections of one doc; section headings at level + 1."""
    blocks: list[str] = []
    if doc.summary:
        blocks.append(shift_headings(doc.summary, level))
    for section in with_parameter_docs(doc.sections, parameters):
        blocks.append(heading(level + 1, section.heading))
        if section.kind is SectionKind.ARGUMENTS:
            blocks.append(render_arguments(section.arguments))
        elif section.text:
            blocks.append(shift_headings(section.text, level))
    return "\n\n".join(blocks)


def render_arguments(entries: Iterable[ArgumentEntry], indent: int = 0) -> str:
    """Definition list; structured arguments nest their fields."""
    pad = " " * indent
    items = []
    for entry in entries:
        term = inline_code(entry.name) if entry.name else PATTERN_TERM
        if entry.type:
            term += f" ({entry.type})"
        first, *rest = entry.description.split("\n")
        lines = [term, "", f": {first}"]
        lines += [f"  {line}" if line else "" for line in rest]
        if entry.fields:
            lines += ["", render_arguments(entry.fields, 4)]
        items.append(_indent("\n".join(lines), pad))
    return "\n\n".join(items)


def placeholder_text(name: str) -> str:
    return f"No documentation found for {inline_code(name)}."


# ---------------------------------------------------------------------------
# Parameter docs
# ---------------------------------------------------------------------------

def parameter_arguments(parameters: tuple[Parameter, ...]) -> tuple[ArgumentEntry, ...]:
    """
    Argument entries built from the doc comments on the lambda chain itself.
    Empty when no parameter (or pattern field) carries a doc comment.
    """
    documented = False
    entries = []
    for param in parameters:
        match param:
            case SimpleParameter(name=name, doc=doc):
                documented |= doc is not None
                entries.append(ArgumentEntry(name, doc.body if doc else PARAMETER_PLACEHOLDER))
            case PatternParameter(fields=fields, bind=bind, doc=doc):
                documented |= doc is not None or any(f.doc is not None for f in fields)
                description, listed = split_field_docs(doc.body) if doc else ("", ())
                entries.append(ArgumentEntry(
                    bind,
                    description or PATTERN_PLACEHOLDER,
                    fields=pattern_fields(fields, listed),
                ))
    return tuple(entries) if documented else ()


def pattern_fields(
    fields: tuple[PatternField, ...],
    listed: tuple[ArgumentEntry, ...],
) -> tuple[ArgumentEntry, ...]:
    """
    Field entries of a pattern parameter. A doc comment on the field itself
    wins over an entry listed in the pattern's doc; names listed there but
    not declared in the pattern (an open `...` pattern) follow at the end.
    """
    by_name = {e.name: e for e in listed}
    out = []
    for f in fields:
        if f.doc is not None:
            out.append(ArgumentEntry(f.name, f.doc.body))
        elif f.name in by_name:
            out.append(by_name[f.name])
        else:
            out.append(ArgumentEntry(f.name, PARAMETER_PLACEHOLDER))
    declared = {f.name for f in fields}
    out.extend(e for e in listed if e.name not in declared)
    return tuple(out)


def with_parameter_docs(
    sections: tuple[Section, ...],
    parameters: tuple[Parameter, ...],
) -> tuple[Section, ...]:
    """
    Adds parameter docs to the Arguments section, creating it in front of
    the other sections when the comment has none. Entries already written
    in the comment win.
    """
    from_params = parameter_arguments(parameters)
    if not from_params:
        return sections

    for i, section in enumerate(sections):
        if section.heading != ARGUMENTS_HEADING:
            continue
        if section.kind is not SectionKind.ARGUMENTS:
            return sections
        known = {a.name for a in section.arguments}
        extra = tuple(a for a in from_params if a.name is None or a.name not in known)
        merged = Section(section.heading, section.kind, arguments=section.arguments + extra)
        return sections[:i] + (merged,) + sections[i + 1:]

    return (Section(ARGUMENTS_HEADING, SectionKind.ARGUMENTS, arguments=from_params),) + sections


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def doc_to_json(doc: StructuredDoc) -> dict:
    return {
        "summary": doc.summary,
        "sections": [
            {
                "heading": s.heading,
                "kind": str(s.kind),
                "text": s.text,
                "arguments": [_argument_json(a) for a in s.arguments],
            }
            for s in doc.sections
        ],
    }


def render_functions_json(entries: Iterable[FunctionEntry], config: RenderConfig) -> str:
    anchors = AnchorRegistry(config.anchor_prefix)
    out = []
    for entry in entries:
        item = {
            "prefix": config.prefix,
            "category": config.category,
            "name": entry.name,
            "ident": entry.ident,
            "anchor": anchors.claim(entry.ident),
            "location": entry.location,
            "defined_as": entry.defined_as,
            "description": [],
            "fn_type": None,
            "example": None,
            "args": [],
            "sections": [],
        }
        if entry.doc is not None:
            doc = doc_to_json(entry.doc)
            item["description"] = _paragraphs(entry.doc.summary)
            sections = with_parameter_docs(entry.doc.sections, entry.parameters)
            args = next((s for s in sections if s.kind is SectionKind.ARGUMENTS), None)
            item["args"] = [_argument_json(a) for a in args.arguments] if args else []
            example = next((s for s in sections if s.kind is SectionKind.EXAMPLE), None)
            item["example"] = example.text if example else None
            item["sections"] = [s for s in doc["sections"] if s["kind"] != SectionKind.ARGUMENTS]
        out.append(item)
    return json.dumps({"version": JSON_FORMAT_VERSION, "entries": out}, ensure_ascii=False, indent=2)


def _argument_json(entry: ArgumentEntry) -> dict:
    return {
        "name": entry.name,
        "type": entry.type,
        "description": entry.description,
        "fields": [_argument_json(f) for f in entry.fields],
    }


def _paragraphs(text: str) -> list[str]:
    return [p.strip() for p in text.split("\n\n") if p.strip()]


def _indent(text: str, pad: str) -> str:
    if not pad:
        return text
    return "\n".join(pad + line if line else "" for line in text.split("\n"))
