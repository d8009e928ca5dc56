"""
extractor/resolver.py — scopes of a Nix file and alias resolution.

module_scope(source, index) -> Scope | None
    Scope of the attribute set the file exports, chained to the `let`
    scopes around it:

        { lib }:                  lambda, peeled
        let                       LET scope
          helper = x: x;
        in {                      ATTRSET scope (parent: LET)
          exported = helper;
        }

resolve(name, scope) -> Binding
    Looks the name up through the scope chain and follows simple aliases
    (`a = b;`, `inherit b;`) until a binding with its own doc comment or a
    real definition is reached. The walk is iterative, remembers visited
    bindings and gives up after MAX_ALIAS_DEPTH steps.

Alias targets are looked up where Nix would evaluate them: bindings of
`rec` sets and `let` blocks see their own scope, bindings of plain sets
and `inherit` see the enclosing one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from data_model.diagnostics import DiagnosticCode
from data_model.errors import ResolutionError
from data_model.spans import DocComment
from nix_parser.nodes import (
    Assert,
    AttrpathValue,
    AttrSet,
    BindingNode,
    Ident,
    Inherit,
    Lambda,
    LetIn,
    Node,
    Paren,
    SourceFile,
    With,
    walk,
)
from nix_parser.tokens import Token

from .locator import DocIndex

MAX_ALIAS_DEPTH = 16


class ScopeKind(StrEnum):
    ATTRSET = "attrset"
    REC     = "rec"
    LET     = "let"


@dataclass(slots=True, eq=False)
class Binding:
    """
    One name defined in a scope.

    - value:     right-hand side; None for `inherit`
    - inherited: True for `inherit name;` (alias to the same name outside)
    - source:    the `(expr)` of `inherit (expr) name;`
    """
    name: str
    scope: Scope
    name_token: Token
    value: Node | None = None
    doc: DocComment | None = None
    inherited: bool = False
    source: Node | None = None

    @property
    def alias(self) -> str | None:
        """Name this binding merely renames, if it is a simple alias."""
        if self.inherited:
            return None if self.source is not None else self.name
        value = self.value
        while isinstance(value, Paren):
            value = value.expr
        return value.name if isinstance(value, Ident) else None

    @property
    def lookup_scope(self) -> Scope | None:
        if self.inherited or self.scope.kind is ScopeKind.ATTRSET:
            return self.scope.parent
        return self.scope


@dataclass(slots=True, eq=False)
class Scope:
    kind: ScopeKind
    parent: Scope | None = None
    bindings: dict[str, Binding] = field(default_factory=dict)

    def lookup(self, name: str) -> Binding | None:
        scope: Scope | None = self
        while scope is not None:
            binding = scope.bindings.get(name)
            if binding is not None:
                return binding
            scope = scope.parent
        return None


# ---------------------------------------------------------------------------
# Scope construction
# ---------------------------------------------------------------------------

def build_scope(
    bindings: list[BindingNode],
    kind: ScopeKind,
    parent: Scope | None,
    index: DocIndex,
) -> Scope:
    """
    `a.b = ...` is kept under its dotted name; it is exported but never an
    alias target. Bindings with `${x}` keys are not addressable.
    """
    scope = Scope(kind, parent)
    for node in bindings:
        if isinstance(node, AttrpathValue):
            if node.name is None:
                continue
            scope.bindings.setdefault(node.name, Binding(
                name=node.name,
                scope=scope,
                name_token=node.first_token,
                value=node.value,
                doc=index.doc_for(node.first_token),
            ))
        elif isinstance(node, Inherit):
            for key in node.names:
                if key.name is None:
                    continue
                doc = index.doc_for(key.token)
                if doc is None and len(node.names) == 1:
                    doc = index.doc_for(node.keyword)
                scope.bindings.setdefault(key.name, Binding(
                    name=key.name,
                    scope=scope,
                    name_token=key.token,
                    doc=doc,
                    inherited=True,
                    source=node.source,
                ))
    return scope


def module_scope(source: SourceFile, index: DocIndex) -> Scope | None:
    """
    Scope of the exported attribute set. Falls back to the first `let` or
    attribute set in the file when the top-level expression is something
    else (a function application, an `if`, ...).
    """
    scope = _peel(source.expr, None, index)
    if scope is not None:
        return scope
    for node in walk(source.expr):
        if isinstance(node, (LetIn, AttrSet)):
            return _peel(node, None, index)
    return None


def _peel(node: Node, scope: Scope | None, index: DocIndex) -> Scope | None:
    followed: set[int] = set()
    while True:
        match node:
            case Lambda(body=body) | With(body=body) | Assert(body=body):
                node = body
            case Paren(expr=expr):
                node = expr
            case LetIn(bindings=bindings, body=body):
                scope = build_scope(bindings, ScopeKind.LET, scope, index)
                node = body
            case AttrSet(bindings=bindings, recursive=recursive):
                kind = ScopeKind.REC if recursive else ScopeKind.ATTRSET
                return build_scope(bindings, kind, scope, index)
            case Ident(name=name):
                # `let ... in self`
                binding = scope.lookup(name) if scope is not None else None
                if binding is None or binding.value is None or id(binding) in followed:
                    return scope
                followed.add(id(binding))
                node = binding.value
            case _:
                return scope


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def resolve(name: str, scope: Scope, max_depth: int = MAX_ALIAS_DEPTH) -> Binding:
    binding = scope.lookup(name)
    if binding is None:
        raise ResolutionError(f"`{name}` is not defined in this file", name)
    return follow_aliases(binding, max_depth)


def follow_aliases(binding: Binding, max_depth: int = MAX_ALIAS_DEPTH) -> Binding:
    """
    Follows simple aliases from binding. Stops at the first binding with a
    doc comment, or at an alias whose target is not defined in the file
    (a function argument, a builtin).
    """
    visited = {id(binding)}
    current = binding
    depth = 0
    while current.doc is None:
        target = current.alias
        lookup = current.lookup_scope
        if target is None or lookup is None:
            return current
        following = lookup.lookup(target)
        if following is None:
            return current
        if id(following) in visited:
            raise ResolutionError(
                f"alias cycle through `{target}` while resolving `{binding.name}`",
                binding.name,
                code=DiagnosticCode.ALIAS_CYCLE,
                span=binding.name_token.span,
            )
        depth += 1
        if depth > max_depth:
            raise ResolutionError(
                f"more than {max_depth} aliases while resolving `{binding.name}`",
                binding.name,
                code=DiagnosticCode.ALIAS_TOO_DEEP,
                span=binding.name_token.span,
            )
        visited.add(id(following))
        current = following
    return current
