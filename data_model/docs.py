"""
data_model/docs.py — parsed documentation of functions and their arguments.

StructuredDoc is the body of one doc comment after parsing:
  summary  — text before the first `# Heading`
  sections — ordered Section list; `# Arguments` sections carry
             ArgumentEntry tuples, every other section carries verbatim text

Parameters of a documented lambda chain are a tagged variant:
  SimpleParameter  — `a: ...`
  PatternParameter — `{ x, y ? d, ... }@args: ...`

FunctionEntry is one rendered binding: the name it is exported under, the
doc it resolves to and the parameters of the resolved definition.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias
from enum import StrEnum

from .spans import DocComment


# ---------------------------------------------------------------------------
# Doc-comment body
# ---------------------------------------------------------------------------

class SectionKind(StrEnum):
    TEXT      = "text"
    ARGUMENTS = "arguments"
    EXAMPLE   = "example"


@dataclass(frozen=True, slots=True)
class ArgumentEntry:
    """
    One argument description, independent of the syntax it was written in.

    - name:        argument name; None for an unnamed structured argument
    - description: free text (may span several lines)
    - type:        optional type label from `name (type)`
    - fields:      nested entries of a structured (pattern) argument
    """
    name: str | None
    description: str
    type: str | None = None
    fields: tuple[ArgumentEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class Section:
    heading: str
    kind: SectionKind
    text: str = ""
    arguments: tuple[ArgumentEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class StructuredDoc:
    summary: str
    sections: tuple[Section, ...] = ()

    def section(self, heading: str) -> Section | None:
        return next((s for s in self.sections if s.heading == heading), None)

    def is_empty(self) -> bool:
        return not self.summary and not self.sections


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SimpleParameter:
    name: str
    doc: DocComment | None = None


@dataclass(frozen=True, slots=True)
class PatternField:
    name: str
    doc: DocComment | None = None


@dataclass(frozen=True, slots=True)
class PatternParameter:
    fields: tuple[PatternField, ...]
    bind: str | None = None        # name after/before `@`
    doc: DocComment | None = None


Parameter: TypeAlias = SimpleParameter | PatternParameter


# ---------------------------------------------------------------------------
# Rendered binding
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class FunctionEntry:
    """
    Binding selected for rendering.

    - name:       name the binding is exported under
    - ident:      qualified identifier, e.g. "lib.strings.concatStrings"
    - doc:        parsed doc comment; None renders a placeholder
    - parameters: lambda chain of the definition the doc was found on
    - defined_as: name of the definition when reached through aliases
    - location:   optional location text from the locations file
    """
    name: str
    ident: str
    doc: StructuredDoc | None
    parameters: tuple[Parameter, ...] = ()
    defined_as: str | None = None
    location: str | None = None
