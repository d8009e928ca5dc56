"""
nix_parser/lexer.py — tokenizer for Nix source text.

tokenize(text) -> list[Token]

Trivia (whitespace, `#` comments, `/* */` comments, `/** */` doc comments)
is attached as leading trivia of the following token. String literals,
including their `${...}` interpolations, are single opaque tokens: the
interpolated expression is lexed only to find the closing brace.

Literal classes follow the Nix lexer, longest match wins:
  URI    http://example.org, x:x
  PATH   ./a, ../a, /a, a/b       (optionally with ${} segments)
  HPATH  ~/a
  SPATH  <nixpkgs>
"""

from __future__ import annotations

import bisect
import re

from data_model.errors import ParseError
from data_model.spans import SourceSpan

from .tokens import KEYWORDS, OPERATORS, Token, TokenKind, Trivia, TriviaKind

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_PATH_CHAR = r"[a-zA-Z0-9._\-+]"

_URI_RE   = re.compile(r"[a-zA-Z][a-zA-Z0-9+\-.]*:[a-zA-Z0-9%/?:@&=+$,\-_.!~*']+")
_PATH_RE  = re.compile(rf"{_PATH_CHAR}*(?:/{_PATH_CHAR}+)+/?")
_HPATH_RE = re.compile(rf"~(?:/{_PATH_CHAR}+)+/?")
_SPATH_RE = re.compile(rf"<{_PATH_CHAR}+(?:/{_PATH_CHAR}+)*>")
_FLOAT_RE = re.compile(r"(?:[1-9][0-9]*\.[0-9]*|0?\.[0-9]+)(?:[Ee][+-]?[0-9]+)?")
_INT_RE   = re.compile(r"[0-9]+")
_IDENT_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_'\-]*")

# Path prefix directly followed by an interpolation: ./${name}.nix
_PATH_INTERP_RE = re.compile(rf"(?:{_PATH_CHAR}*|~)(?:/{_PATH_CHAR}+)*/(?=\$\{{)")
_PATH_TAIL_RE   = re.compile(rf"(?:{_PATH_CHAR}|/)+")

_WHITESPACE_RE = re.compile(r"[ \t\r\n]+")

# Tried in this order; the longest match wins, earlier wins ties.
_LITERALS: list[tuple[re.Pattern[str], TokenKind]] = [
    (_URI_RE, TokenKind.URI),
    (_PATH_RE, TokenKind.PATH),
    (_HPATH_RE, TokenKind.PATH),
    (_SPATH_RE, TokenKind.PATH),
    (_FLOAT_RE, TokenKind.FLOAT),
    (_INT_RE, TokenKind.INT),
    (_IDENT_RE, TokenKind.IDENT),
]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def tokenize(text: str) -> list[Token]:
    """Tokenizes the whole text; the last token is always EOF."""
    return _Lexer(text).run()


# ---------------------------------------------------------------------------
# Implementation
# ---------------------------------------------------------------------------

class _Lexer:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self._line_starts = [0] + [m.end() for m in re.finditer(r"\n", text)]

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    def _line_col(self, offset: int) -> tuple[int, int]:
        line = bisect.bisect_right(self._line_starts, offset) - 1
        return line + 1, offset - self._line_starts[line] + 1

    def span(self, start: int, end: int) -> SourceSpan:
        line, column = self._line_col(start)
        end_line, end_column = self._line_col(end)
        return SourceSpan(start, end, line, column, end_line, end_column)

    def _error(self, message: str, start: int, end: int | None = None) -> ParseError:
        return ParseError(message, self.span(start, end if end is not None else start + 1))

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            token = self._next_token()
            tokens.append(token)
            if token.kind is TokenKind.EOF:
                return tokens

    def _next_token(self) -> Token:
        leading = self._lex_trivia()
        start = self.pos
        text = self.text

        if start >= len(text):
            return Token(TokenKind.EOF, "", self.span(start, start), leading)

        if text.startswith('"', start):
            self._skip_string(start)
            return self._make(TokenKind.STRING, start, leading)
        if text.startswith("''", start):
            self._skip_indented_string(start)
            return self._make(TokenKind.IND_STRING, start, leading)

        m = _PATH_INTERP_RE.match(text, start)
        if m:
            self.pos = m.end()
            self._skip_path_tail()
            return self._make(TokenKind.PATH, start, leading)

        best_end, best_kind = start, None
        for pattern, kind in _LITERALS:
            m = pattern.match(text, start)
            if m and m.end() > best_end:
                best_end, best_kind = m.end(), kind
        if best_kind is not None:
            self.pos = best_end
            if best_kind is TokenKind.PATH and text.startswith("${", self.pos):
                self._skip_path_tail()
            if best_kind is TokenKind.IDENT:
                best_kind = KEYWORDS.get(text[start:self.pos], TokenKind.IDENT)
            return self._make(best_kind, start, leading)

        for op, kind in OPERATORS:
            if text.startswith(op, start):
                self.pos = start + len(op)
                return self._make(kind, start, leading)

        raise self._error(f"unexpected character {text[start]!r}", start)

    def _make(self, kind: TokenKind, start: int, leading: list[Trivia]) -> Token:
        return Token(kind, self.text[start:self.pos], self.span(start, self.pos), tuple(leading))

    # ------------------------------------------------------------------
    # Trivia
    # ------------------------------------------------------------------

    def _lex_trivia(self) -> list[Trivia]:
        trivia: list[Trivia] = []
        text = self.text
        while self.pos < len(text):
            start = self.pos
            m = _WHITESPACE_RE.match(text, start)
            if m:
                self.pos = m.end()
                kind = TriviaKind.WHITESPACE
            elif text.startswith("#", start):
                end = text.find("\n", start)
                self.pos = len(text) if end == -1 else end
                kind = TriviaKind.LINE_COMMENT
            elif text.startswith("/*", start):
                end = text.find("*/", start + 2)
                if end == -1:
                    raise self._error("unterminated comment", start, len(text))
                self.pos = end + 2
                is_doc = text.startswith("/**", start) and not text.startswith("/**/", start)
                kind = TriviaKind.DOC_COMMENT if is_doc else TriviaKind.BLOCK_COMMENT
            else:
                break
            trivia.append(Trivia(kind, text[start:self.pos], self.span(start, self.pos)))
        return trivia

    # ------------------------------------------------------------------
    # Strings and interpolation
    # ------------------------------------------------------------------

    def _skip_string(self, start: int) -> None:
        text = self.text
        i = start + 1
        while True:
            if i >= len(text):
                raise self._error("unterminated string", start, len(text))
            c = text[i]
            if c == "\\":
                i += 2
            elif c == '"':
                self.pos = i + 1
                return
            elif text.startswith("$${", i):
                i += 3
            elif text.startswith("${", i):
                i = self._skip_interpolation(i + 2)
            else:
                i += 1

    def _skip_indented_string(self, start: int) -> None:
        text = self.text
        i = start + 2
        while True:
            if i >= len(text):
                raise self._error("unterminated indented string", start, len(text))
            if text.startswith("''", i):
                following = text[i + 2:i + 3]
                if following in ("'", "$"):
                    i += 3
                elif following == "\\":
                    i += 4
                else:
                    self.pos = i + 2
                    return
            elif text.startswith("$${", i):
                i += 3
            elif text.startswith("${", i):
                i = self._skip_interpolation(i + 2)
            else:
                i += 1

    def _skip_path_tail(self) -> None:
        text = self.text
        while True:
            if text.startswith("${", self.pos):
                self.pos = self._skip_interpolation(self.pos + 2)
                continue
            m = _PATH_TAIL_RE.match(text, self.pos)
            if not m:
                return
            self.pos = m.end()

    def _skip_interpolation(self, pos: int) -> int:
        """Lexes from `pos` (just after `${`) to the matching `}`; returns the offset after it."""
        opened = pos - 2
        self.pos = pos
        depth = 1
        while True:
            token = self._next_token()
            if token.kind is TokenKind.EOF:
                raise self._error("unterminated interpolation", opened, len(self.text))
            if token.kind in (TokenKind.L_BRACE, TokenKind.INTERP):
                depth += 1
            elif token.kind is TokenKind.R_BRACE:
                depth -= 1
                if depth == 0:
                    return self.pos
