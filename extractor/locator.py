"""
extractor/locator.py — binds doc comments to the tokens they document.

locate_doc_comments(source) -> DocIndex

A doc comment attaches to the token it immediately precedes, with nothing
but whitespace in between. Eligible tokens:

  binding name         `/** doc */ foo = ...;`, `inherit /** doc */ foo;`
  inherit keyword      `/** doc */ inherit foo;` (single-name inherits)
  parameter            `/** doc */ a: ...`
  pattern              `/** doc */ { x, ... }@args:` or `/** doc */ args@{ ... }:`
  pattern field        `{ /** doc */ x ? null }:`
  lambda delimiter     `a /** doc */ : b: ...` moves on to the next parameter

The file doc is the first doc comment of the file when it precedes the
first token; it is never also attached to that token. Everything else is
dropped with an informational unattached-doc-comment diagnostic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from data_model.diagnostics import Diagnostic, DiagnosticCode, Severity
from data_model.spans import DocComment
from md_render.format import normalize_comment
from nix_parser.nodes import (
    AttrpathValue,
    IdentParam,
    Inherit,
    Lambda,
    Node,
    Paren,
    PatternParam,
    SourceFile,
    walk,
)
from nix_parser.tokens import Token, Trivia, TriviaKind


class TargetKind(StrEnum):
    BINDING   = "binding"
    INHERIT   = "inherit"
    PARAMETER = "parameter"
    PATTERN   = "pattern"
    FIELD     = "field"
    DELIMITER = "delimiter"


@dataclass(slots=True)
class DocIndex:
    """Doc comments keyed by the start offset of their target token."""

    by_target: dict[int, DocComment] = field(default_factory=dict)
    file_doc: DocComment | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def doc_for(self, token: Token | None) -> DocComment | None:
        if token is None:
            return None
        return self.by_target.get(token.span.start)


def locate_doc_comments(source: SourceFile) -> DocIndex:
    targets, next_param = _collect_targets(source.expr)
    index = DocIndex()
    moved: list[tuple[Token, DocComment]] = []

    for position, token in enumerate(source.tokens):
        docs = [t for t in token.leading if t.kind is TriviaKind.DOC_COMMENT]
        if not docs:
            continue

        if position == 0:
            index.file_doc = _doc_comment(docs.pop(0), token)

        adjacent = _adjacent_doc(token)
        is_target = token.span.start in targets
        for trivia in docs:
            if trivia is adjacent and is_target:
                doc = _doc_comment(trivia, token)
                if targets[token.span.start] is TargetKind.DELIMITER:
                    moved.append((token, doc))
                else:
                    index.by_target[token.span.start] = doc
            elif trivia is adjacent:
                _drop(index, trivia, "does not precede a binding or parameter")
            else:
                _drop(index, trivia, "is separated from the next token by another comment")

    for colon, doc in moved:
        following = next_param.get(colon.span.start)
        if following is None or following.span.start in index.by_target:
            _drop(index, doc, "before ':' has no undocumented parameter to move to")
            continue
        index.by_target[following.span.start] = DocComment(doc.raw, doc.body, doc.span, following.span)

    return index


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------

def _collect_targets(root: Node) -> tuple[dict[int, TargetKind], dict[int, Token]]:
    """Target kinds by token start, and the parameter that follows each lambda `:`."""
    targets: dict[int, TargetKind] = {}
    next_param: dict[int, Token] = {}

    for node in walk(root):
        match node:
            case AttrpathValue():
                targets[node.first_token.span.start] = TargetKind.BINDING
            case Inherit():
                if len(node.names) == 1:
                    targets[node.keyword.span.start] = TargetKind.INHERIT
                for key in node.names:
                    targets[key.token.span.start] = TargetKind.BINDING
            case IdentParam():
                targets[node.token.span.start] = TargetKind.PARAMETER
            case PatternParam():
                targets[node.first_token.span.start] = TargetKind.PATTERN
                for entry in node.entries:
                    targets[entry.token.span.start] = TargetKind.FIELD
            case Lambda():
                targets[node.colon.span.start] = TargetKind.DELIMITER
                body = node.body
                while isinstance(body, Paren):
                    body = body.expr
                if isinstance(body, Lambda):
                    next_param[node.colon.span.start] = _param_token(body)

    return targets, next_param


def _param_token(node: Lambda) -> Token:
    if isinstance(node.param, IdentParam):
        return node.param.token
    return node.param.first_token


# ---------------------------------------------------------------------------
# Trivia helpers
# ---------------------------------------------------------------------------

def _adjacent_doc(token: Token) -> Trivia | None:
    """The doc comment directly before token (only whitespace after it)."""
    for trivia in reversed(token.leading):
        if trivia.kind is TriviaKind.WHITESPACE:
            continue
        return trivia if trivia.kind is TriviaKind.DOC_COMMENT else None
    return None


def _doc_comment(trivia: Trivia, token: Token) -> DocComment:
    return DocComment(
        raw=trivia.text,
        body=normalize_comment(trivia.text),
        span=trivia.span,
        target_span=token.span,
    )


def _drop(index: DocIndex, comment: Trivia | DocComment, reason: str) -> None:
    index.diagnostics.append(Diagnostic(
        code=DiagnosticCode.UNATTACHED_DOC_COMMENT,
        message=f"doc comment {reason}; ignored",
        severity=Severity.INFO,
        span=comment.span,
    ))
