"""
nix_parser/parser.py — recursive-descent parser for Nix expressions.

parse(text) -> SourceFile

Grammar (precedence low → high):
  expr     := lambda | assert | with | let-in | if | op
  lambda   := IDENT ':' expr
            | IDENT '@' pattern ':' expr
            | pattern ('@' IDENT)? ':' expr
  op       := binary operators (Pratt), unary '!' and '-', '?' has-attr
  app      := select select*
  select   := simple ('.' attrpath ('or' select)?)?
  simple   := IDENT | literal | '(' expr ')' | '[' select* ']'
            | 'rec'? '{' bindings '}' | 'let' '{' bindings '}'

Malformed input raises ParseError with the span of the offending token.
"""

from __future__ import annotations

import re
from enum import Enum

from data_model.errors import ParseError
from data_model.spans import SourceSpan

from .lexer import tokenize
from .nodes import (
    Apply,
    Assert,
    AttrKey,
    AttrpathValue,
    AttrSet,
    BinOp,
    BindingNode,
    HasAttr,
    Ident,
    IdentParam,
    IfElse,
    Inherit,
    Lambda,
    LetIn,
    ListExpr,
    Literal,
    Node,
    Paren,
    PatternEntry,
    PatternParam,
    Select,
    SourceFile,
    UnaryOp,
    With,
)
from .tokens import Token, TokenKind

# ---------------------------------------------------------------------------
# Operator table
# ---------------------------------------------------------------------------

class _Assoc(Enum):
    LEFT = "left"
    RIGHT = "right"
    NONE = "none"


_BINARY: dict[TokenKind, tuple[int, _Assoc]] = {
    TokenKind.PIPE_RIGHT: (1, _Assoc.LEFT),
    TokenKind.PIPE_LEFT:  (1, _Assoc.RIGHT),
    TokenKind.IMPL:       (2, _Assoc.RIGHT),
    TokenKind.OR:         (3, _Assoc.LEFT),
    TokenKind.AND:        (4, _Assoc.LEFT),
    TokenKind.EQ:         (5, _Assoc.NONE),
    TokenKind.NEQ:        (5, _Assoc.NONE),
    TokenKind.LT:         (6, _Assoc.NONE),
    TokenKind.GT:         (6, _Assoc.NONE),
    TokenKind.LEQ:        (6, _Assoc.NONE),
    TokenKind.GEQ:        (6, _Assoc.NONE),
    TokenKind.UPDATE:     (7, _Assoc.RIGHT),
    TokenKind.PLUS:       (9, _Assoc.LEFT),
    TokenKind.MINUS:      (9, _Assoc.LEFT),
    TokenKind.STAR:       (10, _Assoc.LEFT),
    TokenKind.SLASH:      (10, _Assoc.LEFT),
    TokenKind.CONCAT:     (11, _Assoc.RIGHT),
}
_NOT_BP      = 8
_HAS_ATTR_BP = 12
_NEGATE_BP   = 13

_LITERAL_KINDS = {
    TokenKind.INT,
    TokenKind.FLOAT,
    TokenKind.STRING,
    TokenKind.IND_STRING,
    TokenKind.PATH,
    TokenKind.URI,
}

_SIMPLE_START = _LITERAL_KINDS | {
    TokenKind.IDENT,
    TokenKind.L_PAREN,
    TokenKind.L_BRACE,
    TokenKind.L_BRACK,
    TokenKind.REC,
}

_INTERPOLATION_RE = re.compile(r"(?<![\\$])\$\{")
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse(text: str) -> SourceFile:
    """Parses a whole Nix file. Raises ParseError on malformed input."""
    tokens = tokenize(text)
    parser = _Parser(tokens)
    expr = parser.parse_expr()
    parser.expect(TokenKind.EOF, "end of file")
    return SourceFile(text=text, expr=expr, tokens=tokens)


def string_value(token_text: str) -> str | None:
    """Value of a plain `"..."` literal; None when it interpolates."""
    inner = token_text[1:-1]
    if _INTERPOLATION_RE.search(inner):
        return None
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), inner, flags=re.DOTALL)


# ---------------------------------------------------------------------------
# Implementation
# ---------------------------------------------------------------------------

def _join(start: SourceSpan, end: SourceSpan) -> SourceSpan:
    return SourceSpan(start.start, end.end, start.line, start.column, end.end_line, end.end_column)


class _Parser:
    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.i = 0

    # ------------------------------------------------------------------
    # Token helpers
    # ------------------------------------------------------------------

    def peek(self, k: int = 0) -> Token:
        return self.tokens[min(self.i + k, len(self.tokens) - 1)]

    def at(self, *kinds: TokenKind) -> bool:
        return self.peek().kind in kinds

    def advance(self) -> Token:
        token = self.peek()
        if token.kind is not TokenKind.EOF:
            self.i += 1
        return token

    @property
    def prev(self) -> Token:
        return self.tokens[self.i - 1]

    def expect(self, kind: TokenKind, what: str | None = None) -> Token:
        token = self.peek()
        if token.kind is not kind:
            raise ParseError(f"expected {what or repr(kind.value)}, found {str(token)!r}", token.span)
        return self.advance()

    def _since(self, start: SourceSpan) -> SourceSpan:
        return _join(start, self.prev.span)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expr(self) -> Node:
        token = self.peek()
        kind = token.kind

        if kind is TokenKind.IDENT:
            following = self.peek(1).kind
            if following is TokenKind.COLON:
                return self._parse_ident_lambda()
            if following is TokenKind.AT:
                return self._parse_pattern_lambda()
        if kind is TokenKind.L_BRACE and self._looks_like_pattern():
            return self._parse_pattern_lambda()

        if kind is TokenKind.ASSERT:
            self.advance()
            condition = self.parse_expr()
            self.expect(TokenKind.SEMICOLON, "';' after assert condition")
            body = self.parse_expr()
            return Assert(_join(token.span, body.span), condition, body)

        if kind is TokenKind.WITH:
            self.advance()
            env = self.parse_expr()
            self.expect(TokenKind.SEMICOLON, "';' after with expression")
            body = self.parse_expr()
            return With(_join(token.span, body.span), env, body)

        if kind is TokenKind.LET and self.peek(1).kind is not TokenKind.L_BRACE:
            self.advance()
            bindings = self._parse_bindings(TokenKind.IN)
            self.expect(TokenKind.IN, "'in'")
            body = self.parse_expr()
            return LetIn(_join(token.span, body.span), bindings, body)

        if kind is TokenKind.IF:
            self.advance()
            condition = self.parse_expr()
            self.expect(TokenKind.THEN, "'then'")
            then = self.parse_expr()
            self.expect(TokenKind.ELSE, "'else'")
            else_ = self.parse_expr()
            return IfElse(_join(token.span, else_.span), condition, then, else_)

        return self._parse_binary(0)

    def _parse_binary(self, min_bp: int) -> Node:
        token = self.peek()
        if token.kind is TokenKind.NOT:
            self.advance()
            operand = self._parse_binary(_NOT_BP)
            lhs: Node = UnaryOp(_join(token.span, operand.span), "!", operand)
        elif token.kind is TokenKind.MINUS:
            self.advance()
            operand = self._parse_binary(_NEGATE_BP)
            lhs = UnaryOp(_join(token.span, operand.span), "-", operand)
        else:
            lhs = self._parse_application()

        while True:
            token = self.peek()
            if token.kind is TokenKind.QUESTION and _HAS_ATTR_BP >= min_bp:
                self.advance()
                path = self._parse_attrpath()
                lhs = HasAttr(self._since(lhs.span), lhs, path)
                continue

            info = _BINARY.get(token.kind)
            if info is None:
                return lhs
            bp, assoc = info
            if bp < min_bp:
                return lhs
            self.advance()
            rhs = self._parse_binary(bp if assoc is _Assoc.RIGHT else bp + 1)
            lhs = BinOp(_join(lhs.span, rhs.span), token.text, lhs, rhs)

    def _parse_application(self) -> Node:
        function = self._parse_select()
        while self._starts_simple():
            argument = self._parse_select()
            function = Apply(_join(function.span, argument.span), function, argument)
        return function

    def _starts_simple(self) -> bool:
        token = self.peek()
        if token.kind in _SIMPLE_START:
            return True
        return token.kind is TokenKind.LET and self.peek(1).kind is TokenKind.L_BRACE

    def _parse_select(self) -> Node:
        expr = self._parse_simple()
        if not self.at(TokenKind.DOT):
            return expr
        path: list[AttrKey] = []
        while self.at(TokenKind.DOT):
            self.advance()
            path.append(self._parse_attr_key())
        default = None
        if self.at(TokenKind.OR_KW):
            self.advance()
            default = self._parse_select()
        return Select(self._since(expr.span), expr, path, default)

    def _parse_simple(self) -> Node:
        token = self.peek()
        kind = token.kind

        if kind is TokenKind.IDENT:
            self.advance()
            return Ident(token.span, token.text, token)
        if kind in _LITERAL_KINDS:
            self.advance()
            return Literal(token.span, token)
        if kind is TokenKind.L_PAREN:
            self.advance()
            inner = self.parse_expr()
            self.expect(TokenKind.R_PAREN, "')'")
            return Paren(self._since(token.span), inner)
        if kind is TokenKind.L_BRACE:
            return self._parse_attrset(recursive=False)
        if kind is TokenKind.REC:
            self.advance()
            return self._parse_attrset(recursive=True, start=token.span)
        if kind is TokenKind.LET and self.peek(1).kind is TokenKind.L_BRACE:
            # legacy `let { ...; body = ...; }`
            self.advance()
            return self._parse_attrset(recursive=True, start=token.span)
        if kind is TokenKind.L_BRACK:
            self.advance()
            items: list[Node] = []
            while not self.at(TokenKind.R_BRACK):
                if self.at(TokenKind.EOF):
                    raise ParseError("unterminated list", token.span)
                items.append(self._parse_select())
            self.advance()
            return ListExpr(self._since(token.span), items)

        raise ParseError(f"unexpected {str(token)!r}", token.span)

    # ------------------------------------------------------------------
    # Attribute sets
    # ------------------------------------------------------------------

    def _parse_attrset(self, recursive: bool, start: SourceSpan | None = None) -> AttrSet:
        open_token = self.expect(TokenKind.L_BRACE, "'{'")
        bindings = self._parse_bindings(TokenKind.R_BRACE)
        self.expect(TokenKind.R_BRACE, "'}'")
        return AttrSet(self._since(start or open_token.span), open_token, bindings, recursive)

    def _parse_bindings(self, terminator: TokenKind) -> list[BindingNode]:
        bindings: list[BindingNode] = []
        while not self.at(terminator):
            if self.at(TokenKind.EOF):
                raise ParseError(f"expected {terminator.value!r}, found end of file", self.peek().span)
            if self.at(TokenKind.INHERIT):
                bindings.append(self._parse_inherit())
            else:
                bindings.append(self._parse_attrpath_value())
        return bindings

    def _parse_inherit(self) -> Inherit:
        keyword = self.advance()
        source = None
        if self.at(TokenKind.L_PAREN):
            self.advance()
            source = self.parse_expr()
            self.expect(TokenKind.R_PAREN, "')'")
        names: list[AttrKey] = []
        while not self.at(TokenKind.SEMICOLON):
            names.append(self._parse_attr_key())
        self.advance()
        return Inherit(self._since(keyword.span), keyword, source, names)

    def _parse_attrpath_value(self) -> AttrpathValue:
        path = self._parse_attrpath()
        self.expect(TokenKind.ASSIGN, "'='")
        value = self.parse_expr()
        self.expect(TokenKind.SEMICOLON, "';'")
        return AttrpathValue(self._since(path[0].span), path, value)

    def _parse_attrpath(self) -> list[AttrKey]:
        path = [self._parse_attr_key()]
        while self.at(TokenKind.DOT):
            self.advance()
            path.append(self._parse_attr_key())
        return path

    def _parse_attr_key(self) -> AttrKey:
        token = self.peek()
        if token.kind in (TokenKind.IDENT, TokenKind.OR_KW):
            self.advance()
            return AttrKey(token.span, token, token.text)
        if token.kind is TokenKind.STRING:
            self.advance()
            return AttrKey(token.span, token, string_value(token.text))
        if token.kind is TokenKind.INTERP:
            self.advance()
            inner = self.parse_expr()
            self.expect(TokenKind.R_BRACE, "'}'")
            return AttrKey(self._since(token.span), token, None, inner)
        raise ParseError(f"expected attribute name, found {str(token)!r}", token.span)

    # ------------------------------------------------------------------
    # Lambdas
    # ------------------------------------------------------------------

    def _looks_like_pattern(self) -> bool:
        """At `{`: decides between a pattern parameter and an attribute set."""
        first, second = self.peek(1).kind, self.peek(2).kind
        if first is TokenKind.R_BRACE:
            return second in (TokenKind.COLON, TokenKind.AT)
        if first is TokenKind.ELLIPSIS:
            return True
        if first is TokenKind.IDENT:
            if second in (TokenKind.COMMA, TokenKind.QUESTION):
                return True
            if second is TokenKind.R_BRACE:
                return self.peek(3).kind in (TokenKind.COLON, TokenKind.AT)
        return False

    def _parse_ident_lambda(self) -> Lambda:
        token = self.advance()
        param = IdentParam(token.span, token.text, token)
        colon = self.expect(TokenKind.COLON, "':'")
        body = self.parse_expr()
        return Lambda(_join(token.span, body.span), param, colon, body)

    def _parse_pattern_lambda(self) -> Lambda:
        start = self.peek()
        bind_token: Token | None = None
        if start.kind is TokenKind.IDENT:
            bind_token = self.advance()
            self.expect(TokenKind.AT, "'@'")

        open_token = self.expect(TokenKind.L_BRACE, "'{'")
        entries: list[PatternEntry] = []
        ellipsis = False
        while not self.at(TokenKind.R_BRACE):
            if self.at(TokenKind.ELLIPSIS):
                self.advance()
                ellipsis = True
            else:
                name = self.expect(TokenKind.IDENT, "parameter name")
                default = None
                if self.at(TokenKind.QUESTION):
                    self.advance()
                    default = self.parse_expr()
                entries.append(PatternEntry(self._since(name.span), name.text, name, default))
            if not self.at(TokenKind.COMMA):
                break
            self.advance()
        self.expect(TokenKind.R_BRACE, "'}' closing the parameter pattern")

        if bind_token is None and self.at(TokenKind.AT):
            self.advance()
            bind_token = self.expect(TokenKind.IDENT, "name after '@'")

        param = PatternParam(
            span=self._since(start.span),
            open_token=open_token,
            entries=entries,
            ellipsis=ellipsis,
            bind=bind_token.text if bind_token is not None else None,
            bind_token=bind_token,
        )
        colon = self.expect(TokenKind.COLON, "':'")
        body = self.parse_expr()
        return Lambda(_join(start.span, body.span), param, colon, body)
