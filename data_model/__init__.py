"""
data_model — data structures shared by the docgen pipeline.

Usage:
  from data_model import StructuredDoc, RenderConfig, Diagnostic, ...

Modules:
  spans       — SourceSpan, DocComment
  docs        — StructuredDoc, Section, SectionKind, ArgumentEntry,
                SimpleParameter, PatternParameter, PatternField, Parameter,
                FunctionEntry
  options     — OptionDoc, LiteralText, LiteralKind, Declaration
  render      — RenderConfig, DeclarationLinks, Rendered, MAX_HEADING_LEVEL
  diagnostics — Diagnostic, DiagnosticCode, Severity
  errors      — DocgenError, ParseError, ResolutionError, DocBodyMalformed,
                OptionsJsonError
"""

from .spans import (
    SourceSpan,
    DocComment,
)
from .docs import (
    SectionKind,
    ArgumentEntry,
    Section,
    StructuredDoc,
    SimpleParameter,
    PatternField,
    PatternParameter,
    Parameter,
    FunctionEntry,
)
from .options import (
    LiteralKind,
    LiteralText,
    Declaration,
    OptionDoc,
)
from .render import (
    MAX_HEADING_LEVEL,
    DeclarationLinks,
    RenderConfig,
    Rendered,
)
from .diagnostics import (
    DiagnosticCode,
    Severity,
    Diagnostic,
)
from .errors import (
    DocgenError,
    ParseError,
    ResolutionError,
    DocBodyMalformed,
    OptionsJsonError,
)

__all__ = [
    # spans
    "SourceSpan",
    "DocComment",
    # docs
    "SectionKind",
    "ArgumentEntry",
    "Section",
    "StructuredDoc",
    "SimpleParameter",
    "PatternField",
    "PatternParameter",
    "Parameter",
    "FunctionEntry",
    # options
    "LiteralKind",
    "LiteralText",
    "Declaration",
    "OptionDoc",
    # render
    "MAX_HEADING_LEVEL",
    "DeclarationLinks",
    "RenderConfig",
    "Rendered",
    # diagnostics
    "DiagnosticCode",
    "Severity",
    "Diagnostic",
    # errors
    "DocgenError",
    "ParseError",
    "ResolutionError",
    "DocBodyMalformed",
    "OptionsJsonError",
]
