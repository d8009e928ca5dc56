"""
data_model/diagnostics.py — warnings reported beside the rendered Markdown.

Diagnostic — one local problem (code, severity, message, optional position).
Rendered output never contains diagnostics; callers print them separately.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .spans import SourceSpan


class DiagnosticCode(StrEnum):
    """Stable identifiers of recoverable problems."""

    # locator
    UNATTACHED_DOC_COMMENT = "unattached-doc-comment"

    # resolver / collector
    EXPORT_NOT_FOUND       = "export-not-found"
    ALIAS_CYCLE            = "alias-cycle"
    ALIAS_TOO_DEEP         = "alias-too-deep"
    NO_DOC_COMMENT         = "no-doc-comment"

    # doc-body parser
    DOC_BODY_MALFORMED     = "doc-body-malformed"
    UNCLOSED_CODE_FENCE    = "unclosed-code-fence"

    # options
    OPTIONS_ENTRY_INVALID  = "options-entry-invalid"


class Severity(StrEnum):
    INFO    = "info"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """
    Single diagnostic.

    - code:     stable DiagnosticCode
    - message:  readable description
    - severity: INFO for expected skips, WARNING for content that was lost
                or replaced by a fallback
    - span:     position in the source file, when known
    - subject:  binding or option name the diagnostic is about
    """

    code: DiagnosticCode
    message: str
    severity: Severity = Severity.WARNING
    span: SourceSpan | None = None
    subject: str | None = None

    def format(self, path: str | None = None) -> str:
        where = ":".join(p for p in (path, str(self.span) if self.span else None) if p)
        prefix = f"{where}: " if where else ""
        return f"{prefix}{self.message} [{self.code}]"
