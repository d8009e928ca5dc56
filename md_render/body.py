"""
md_render/body.py — parser of doc-comment bodies.

parse_doc_body(text) -> (StructuredDoc, list[Diagnostic])

The text is split on lines starting with exactly one `#` (outside fenced
code). Text before the first heading is the summary.

  # Arguments   entries in either form, both giving the same ArgumentEntry:
                  - `name` (type): description
                  `name` (type)
                  : description
                continuation lines are indented
  # Example     kept verbatim, `=>` result lines included
  other         kept verbatim under their own heading

An Arguments section that does not parse is kept verbatim as a text section
and reported as doc-body-malformed.

split_field_docs(text) separates the field list a pattern parameter's doc may
end with from the rest of that doc.
"""

from __future__ import annotations

import re
import textwrap

from data_model.diagnostics import Diagnostic, DiagnosticCode
from data_model.docs import ArgumentEntry, Section, SectionKind, StructuredDoc
from data_model.errors import DocBodyMalformed
from data_model.spans import SourceSpan

from .format import code_fence_mask

_SECTION_RE    = re.compile(r"^#(?!#)\s+(\S.*?)\s*$")
_BULLET_RE     = re.compile(
    r"^[-*+]\s+`(?P<name>[^`]+)`(?:\s*\((?P<type>[^)]*)\))?\s*:\s*(?P<desc>.*)$"
)
_TERM_RE       = re.compile(r"^`(?P<name>[^`]+)`(?:\s*\((?P<type>[^)]*)\))?\s*$")
_DEFINITION_RE = re.compile(r"^:(?:\s+(?P<desc>.*))?$")

ARGUMENTS_HEADING = "Arguments"
_EXAMPLE_HEADINGS = {"Example", "Examples"}


def parse_doc_body(
    text: str,
    *,
    subject: str | None = None,
    span: SourceSpan | None = None,
) -> tuple[StructuredDoc, list[Diagnostic]]:
    """subject and span only decorate the returned diagnostics."""
    diagnostics: list[Diagnostic] = []
    lines = text.split("\n")
    mask, unclosed = code_fence_mask(lines)
    if unclosed:
        diagnostics.append(Diagnostic(
            code=DiagnosticCode.UNCLOSED_CODE_FENCE,
            message="code fence is never closed; the rest of the comment is treated as code",
            span=span,
            subject=subject,
        ))

    summary: list[str] = []
    chunks: list[tuple[str, list[str]]] = []
    for line, in_code in zip(lines, mask):
        m = None if in_code else _SECTION_RE.match(line)
        if m:
            chunks.append((m.group(1), []))
        elif chunks:
            chunks[-1][1].append(line)
        else:
            summary.append(line)

    sections = []
    for heading, body in chunks:
        if heading == ARGUMENTS_HEADING:
            try:
                entries = parse_arguments(body, heading)
            except DocBodyMalformed as exc:
                diagnostics.append(Diagnostic(
                    code=DiagnosticCode.DOC_BODY_MALFORMED,
                    message=f"section '# {heading}' kept as text: {exc.message}",
                    span=span,
                    subject=subject,
                ))
                sections.append(Section(heading, SectionKind.TEXT, text=_join(body)))
            else:
                sections.append(Section(heading, SectionKind.ARGUMENTS, arguments=entries))
        elif heading in _EXAMPLE_HEADINGS:
            sections.append(Section(heading, SectionKind.EXAMPLE, text=_join(body)))
        else:
            sections.append(Section(heading, SectionKind.TEXT, text=_join(body)))

    return StructuredDoc(summary=_join(summary), sections=tuple(sections)), diagnostics


def parse_arguments(lines: list[str], heading: str = ARGUMENTS_HEADING) -> tuple[ArgumentEntry, ...]:
    """Raises DocBodyMalformed on anything that is not an argument entry."""
    entries: list[ArgumentEntry] = []
    i, n = 0, len(lines)
    while i < n:
        line = lines[i]
        if not line.strip():
            i += 1
            continue

        m = _BULLET_RE.match(line)
        if m:
            desc = [m.group("desc").strip()]
            i = _take_continuation(lines, i + 1, desc)
        else:
            m = _TERM_RE.match(line)
            if m is None:
                raise DocBodyMalformed(
                    f"not an argument entry: {line.strip()!r}", heading, line
                )
            j = i + 1
            while j < n and not lines[j].strip():
                j += 1
            d = _DEFINITION_RE.match(lines[j]) if j < n else None
            if d is None:
                raise DocBodyMalformed(
                    f"argument `{m.group('name')}` has no ': description' line", heading, line
                )
            desc = [(d.group("desc") or "").strip()]
            i = _take_continuation(lines, j + 1, desc)

        description = _join(desc)
        if not description:
            raise DocBodyMalformed(
                f"argument `{m.group('name')}` has an empty description", heading, line
            )
        type_ = (m.group("type") or "").strip() or None
        entries.append(ArgumentEntry(m.group("name").strip(), description, type_))

    if not entries:
        raise DocBodyMalformed("section has no argument entries", heading)
    return tuple(entries)


def split_field_docs(text: str) -> tuple[str, tuple[ArgumentEntry, ...]]:
    """
    Splits the doc of a pattern parameter into its own description and the
    entries it lists for the pattern's fields:

        Structured function argument

        `default`
        : documented argument

    The list must close the comment and start after a blank line. Text
    without such a list comes back unchanged with no entries.
    """
    lines = text.split("\n")
    mask, _ = code_fence_mask(lines)
    for i, line in enumerate(lines):
        if mask[i] or (i and lines[i - 1].strip()):
            continue
        if not (_TERM_RE.match(line) or _BULLET_RE.match(line)):
            continue
        try:
            entries = parse_arguments(lines[i:])
        except DocBodyMalformed:
            continue
        return _join(lines[:i]), entries
    return text, ()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _take_continuation(lines: list[str], i: int, out: list[str]) -> int:
    """Appends the indented lines starting at i to out; returns the next index."""
    block: list[str] = []
    n = len(lines)
    while i < n:
        line = lines[i]
        if not line.strip():
            k = i
            while k < n and not lines[k].strip():
                k += 1
            if k < n and lines[k][:1] in (" ", "\t"):
                block.extend([""] * (k - i))
                i = k
                continue
            break
        if line[:1] not in (" ", "\t"):
            break
        block.append(line)
        i += 1
    if block:
        out.extend(textwrap.dedent("\n".join(block)).split("\n"))
    return i


def _join(lines: list[str]) -> str:
    return "\n".join(lines).strip("\n")
