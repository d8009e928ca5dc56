"""
data_model/errors.py — exceptions raised by the extraction pipeline.

  ParseError        malformed source; fatal for the file
  ResolutionError   export not found / alias cycle; recovered per name
  DocBodyMalformed  unparseable doc-comment section; recovered per section
  OptionsJsonError  invalid options JSON (entry or whole document)
"""

from __future__ import annotations

from .diagnostics import DiagnosticCode
from .spans import SourceSpan


class DocgenError(Exception):
    """Base class; carries an optional source position."""

    def __init__(self, message: str, span: SourceSpan | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.span = span

    def __str__(self) -> str:
        if self.span is not None:
            return f"{self.span}: {self.message}"
        return self.message


class ParseError(DocgenError):
    pass


class ResolutionError(DocgenError):
    def __init__(
        self,
        message: str,
        name: str,
        code: DiagnosticCode = DiagnosticCode.EXPORT_NOT_FOUND,
        span: SourceSpan | None = None,
    ) -> None:
        super().__init__(message, span)
        self.name = name
        self.code = code


class DocBodyMalformed(DocgenError):
    def __init__(self, message: str, heading: str, line: str = "") -> None:
        super().__init__(message)
        self.heading = heading
        self.line = line


class OptionsJsonError(DocgenError):
    def __init__(self, message: str, option: str | None = None) -> None:
        super().__init__(message)
        self.option = option

    def __str__(self) -> str:
        if self.option is not None:
            return f"{self.option}: {self.message}"
        return self.message
