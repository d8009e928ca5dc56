"""
nix_parser/nodes.py — syntax tree of a Nix file.

Only the structure needed for documentation is modelled precisely
(attribute sets, bindings, let/rec scopes, lambdas and their parameters);
the rest of the expression language is kept as generic nodes so that a whole
file parses, but is never interpreted.

Nodes keep the tokens that doc comments may attach to:
  AttrpathValue.path[0].token   binding name
  IdentParam.token              simple parameter
  PatternParam.first_token      `{` or the `name` of `name@{ ... }`
  PatternEntry.token            pattern field
  Lambda.colon                  `:` delimiter (comments before it move on)
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from typing import TypeAlias
from dataclasses import dataclass, field

from data_model.spans import SourceSpan

from .tokens import Token


@dataclass(slots=True)
class Node:
    span: SourceSpan


# ---------------------------------------------------------------------------
# Leaves
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Ident(Node):
    name: str
    token: Token


@dataclass(slots=True)
class Literal(Node):
    """Number, path, URI or string literal, kept as source text."""
    token: Token

    @property
    def text(self) -> str:
        return self.token.text


# ---------------------------------------------------------------------------
# Attribute sets and bindings
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class AttrKey(Node):
    """
    One attrpath component.

    name is None for keys that cannot be known without evaluation
    (`${expr}` or interpolated strings).
    """
    token: Token
    name: str | None
    dynamic: Node | None = None


@dataclass(slots=True)
class AttrpathValue(Node):
    path: list[AttrKey]
    value: Node

    @property
    def name(self) -> str | None:
        parts = [k.name for k in self.path]
        if any(p is None for p in parts):
            return None
        return ".".join(parts)  # type: ignore[arg-type]

    @property
    def first_token(self) -> Token:
        return self.path[0].token


@dataclass(slots=True)
class Inherit(Node):
    keyword: Token
    source: Node | None
    names: list[AttrKey]


BindingNode: TypeAlias = AttrpathValue | Inherit


@dataclass(slots=True)
class AttrSet(Node):
    open_token: Token
    bindings: list[BindingNode]
    recursive: bool = False


@dataclass(slots=True)
class LetIn(Node):
    bindings: list[BindingNode]
    body: Node


# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class IdentParam(Node):
    name: str
    token: Token


@dataclass(slots=True)
class PatternEntry(Node):
    name: str
    token: Token
    default: Node | None = None


@dataclass(slots=True)
class PatternParam(Node):
    open_token: Token
    entries: list[PatternEntry]
    ellipsis: bool = False
    bind: str | None = None
    bind_token: Token | None = None

    @property
    def first_token(self) -> Token:
        if self.bind_token is not None and self.bind_token.span.start < self.open_token.span.start:
            return self.bind_token
        return self.open_token


Param: TypeAlias = IdentParam | PatternParam


@dataclass(slots=True)
class Lambda(Node):
    param: Param
    colon: Token
    body: Node


# ---------------------------------------------------------------------------
# Other expressions
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class With(Node):
    env: Node
    body: Node


@dataclass(slots=True)
class Assert(Node):
    condition: Node
    body: Node


@dataclass(slots=True)
class IfElse(Node):
    condition: Node
    then: Node
    else_: Node


@dataclass(slots=True)
class Apply(Node):
    function: Node
    argument: Node


@dataclass(slots=True)
class Select(Node):
    expr: Node
    path: list[AttrKey]
    default: Node | None = None


@dataclass(slots=True)
class HasAttr(Node):
    expr: Node
    path: list[AttrKey]


@dataclass(slots=True)
class BinOp(Node):
    op: str
    lhs: Node
    rhs: Node


@dataclass(slots=True)
class UnaryOp(Node):
    op: str
    operand: Node


@dataclass(slots=True)
class ListExpr(Node):
    items: list[Node] = field(default_factory=list)


@dataclass(slots=True)
class Paren(Node):
    expr: Node


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class SourceFile:
    text: str
    expr: Node
    tokens: list[Token]


def iter_children(node: Node) -> Iterator[Node]:
    """Direct child nodes in field (= source) order."""
    for f in dataclasses.fields(node):
        value = getattr(node, f.name)
        if isinstance(value, Node):
            yield value
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, Node):
                    yield item


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_children(current))))
