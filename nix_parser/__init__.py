"""
nix_parser — tokenizer and parser for Nix source files.

Public API:
  parse(text)       → SourceFile   (raises data_model.ParseError)
  tokenize(text)    → list[Token]
  string_value(tok) → value of a plain string literal
  nodes             syntax tree classes, walk(), iter_children()

Typical use:
    from nix_parser import parse

    source = parse(Path("lib/strings.nix").read_text(encoding="utf-8"))
    for node in walk(source.expr):
        ...
"""

from .lexer import tokenize
from .parser import parse, string_value
from .nodes import SourceFile, iter_children, walk
from .tokens import Token, TokenKind, Trivia, TriviaKind

__all__ = [
    "tokenize",
    "parse",
    "string_value",
    "SourceFile",
    "iter_children",
    "walk",
    "Token",
    "TokenKind",
    "Trivia",
    "TriviaKind",
]
