"""
nix_parser/tokens.py — token and trivia types.

Every Token carries the whitespace and comments that precede it as
`leading` trivia; the EOF token carries whatever trails the last token.
Comments are therefore never lost and keep exact spans.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from data_model.spans import SourceSpan


class TokenKind(StrEnum):
    IDENT      = "ident"
    INT        = "int"
    FLOAT      = "float"
    STRING     = "string"       # "..."   (interpolation included)
    IND_STRING = "ind_string"   # ''...'' (interpolation included)
    PATH       = "path"
    URI        = "uri"

    # keywords
    IF       = "if"
    THEN     = "then"
    ELSE     = "else"
    ASSERT   = "assert"
    WITH     = "with"
    LET      = "let"
    IN       = "in"
    REC      = "rec"
    INHERIT  = "inherit"
    OR_KW    = "or"

    # punctuation / operators
    L_BRACE     = "{"
    R_BRACE     = "}"
    L_BRACK     = "["
    R_BRACK     = "]"
    L_PAREN     = "("
    R_PAREN     = ")"
    INTERP      = "${"
    SEMICOLON   = ";"
    COLON       = ":"
    COMMA       = ","
    AT          = "@"
    QUESTION    = "?"
    DOT         = "."
    ELLIPSIS    = "..."
    ASSIGN      = "="
    EQ          = "=="
    NEQ         = "!="
    LT          = "<"
    GT          = ">"
    LEQ         = "<="
    GEQ         = ">="
    AND         = "&&"
    OR          = "||"
    IMPL        = "->"
    UPDATE      = "//"
    CONCAT      = "++"
    PLUS        = "+"
    MINUS       = "-"
    STAR        = "*"
    SLASH       = "/"
    NOT         = "!"
    PIPE_RIGHT  = "|>"
    PIPE_LEFT   = "<|"

    EOF = "eof"


KEYWORDS: dict[str, TokenKind] = {
    "if":      TokenKind.IF,
    "then":    TokenKind.THEN,
    "else":    TokenKind.ELSE,
    "assert":  TokenKind.ASSERT,
    "with":    TokenKind.WITH,
    "let":     TokenKind.LET,
    "in":      TokenKind.IN,
    "rec":     TokenKind.REC,
    "inherit": TokenKind.INHERIT,
    "or":      TokenKind.OR_KW,
}

_NON_OPERATORS: set[TokenKind] = {
    TokenKind.IDENT,
    TokenKind.INT,
    TokenKind.FLOAT,
    TokenKind.STRING,
    TokenKind.IND_STRING,
    TokenKind.PATH,
    TokenKind.URI,
    TokenKind.EOF,
    *KEYWORDS.values(),
}

# Longest first: the lexer takes the first match.
OPERATORS: list[tuple[str, TokenKind]] = sorted(
    ((kind.value, kind) for kind in TokenKind if kind not in _NON_OPERATORS),
    key=lambda item: -len(item[0]),
)


class TriviaKind(StrEnum):
    WHITESPACE    = "whitespace"
    LINE_COMMENT  = "line_comment"    # # ...
    BLOCK_COMMENT = "block_comment"   # /* ... */
    DOC_COMMENT   = "doc_comment"     # /** ... */


@dataclass(frozen=True, slots=True)
class Trivia:
    kind: TriviaKind
    text: str
    span: SourceSpan

    @property
    def is_comment(self) -> bool:
        return self.kind is not TriviaKind.WHITESPACE


@dataclass(frozen=True, slots=True)
class Token:
    kind: TokenKind
    text: str
    span: SourceSpan
    leading: tuple[Trivia, ...] = ()

    def __str__(self) -> str:
        return self.text if self.kind is not TokenKind.EOF else "end of file"
