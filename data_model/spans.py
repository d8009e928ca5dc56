"""
data_model/spans.py — source positions and doc comments.

SourceSpan is a half-open byte range [start, end) into a source file plus
1-based line/column of both ends. DocComment is a `/** ... */` comment
together with the span of the token it documents.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceSpan:
    start: int
    end: int
    line: int          # 1-based
    column: int        # 1-based
    end_line: int
    end_column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"

    def precedes(self, other: SourceSpan) -> bool:
        return self.end <= other.start


@dataclass(frozen=True, slots=True)
class DocComment:
    """
    Doc comment bound to a target.

    - raw:         full comment text including `/**` and `*/`
    - body:        text between the delimiters, indentation normalized
    - span:        position of the comment itself
    - target_span: position of the token it documents
    """
    raw: str
    body: str
    span: SourceSpan
    target_span: SourceSpan
