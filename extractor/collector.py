"""
extractor/collector.py — selects the bindings to document.

collect(source, index, config, locations) -> (entries, diagnostics)

Without an export filter every binding of the exported set that carries
documentation (its own, through an alias, or on its parameters) becomes an
entry; undocumented bindings are skipped silently.

With an export filter exactly the listed names are rendered, in the listed
order:
  not found / alias cycle / too deep  → placeholder entry + warning
  found but undocumented              → skipped + no-doc-comment warning
"""

from __future__ import annotations

from collections.abc import Mapping

from data_model.diagnostics import Diagnostic, DiagnosticCode
from data_model.docs import (
    FunctionEntry,
    Parameter,
    PatternField,
    PatternParameter,
    SimpleParameter,
    StructuredDoc,
)
from data_model.errors import ResolutionError
from data_model.render import RenderConfig
from md_render.body import parse_doc_body
from nix_parser.nodes import IdentParam, Lambda, Node, Paren, SourceFile

from .locator import DocIndex
from .resolver import Binding, follow_aliases, module_scope, resolve


def collect(
    source: SourceFile,
    index: DocIndex,
    config: RenderConfig,
    locations: Mapping[str, str] | None = None,
) -> tuple[list[FunctionEntry], list[Diagnostic]]:
    diagnostics: list[Diagnostic] = []
    entries: list[FunctionEntry] = []
    scope = module_scope(source, index)
    locations = locations or {}

    if config.exports is None:
        if scope is None:
            return entries, diagnostics
        for name, binding in scope.bindings.items():
            try:
                resolved = follow_aliases(binding)
            except ResolutionError as exc:
                diagnostics.append(_resolution_diagnostic(exc))
                continue
            entry = _entry(name, binding, resolved, index, config, locations, diagnostics)
            if entry is not None:
                entries.append(entry)
        return entries, diagnostics

    for name in config.exports:
        try:
            if scope is None:
                raise ResolutionError("the file does not define an attribute set", name)
            binding = scope.lookup(name)
            resolved = resolve(name, scope)
        except ResolutionError as exc:
            diagnostics.append(_resolution_diagnostic(exc))
            ident = config.qualify(name)
            entries.append(FunctionEntry(name, ident, None, location=locations.get(ident)))
            continue

        entry = _entry(name, binding, resolved, index, config, locations, diagnostics)
        if entry is None:
            diagnostics.append(Diagnostic(
                code=DiagnosticCode.NO_DOC_COMMENT,
                message=f"`{name}` has no doc comment; skipped",
                span=resolved.name_token.span,
                subject=name,
            ))
            continue
        entries.append(entry)
    return entries, diagnostics


def _entry(
    name: str,
    binding: Binding | None,
    resolved: Binding,
    index: DocIndex,
    config: RenderConfig,
    locations: Mapping[str, str],
    diagnostics: list[Diagnostic],
) -> FunctionEntry | None:
    """None when neither the definition nor its parameters are documented."""
    parameters = lambda_parameters(resolved.value, index)
    if resolved.doc is None and not _has_parameter_docs(parameters):
        return None

    if resolved.doc is not None:
        doc, body_diagnostics = parse_doc_body(
            resolved.doc.body, subject=name, span=resolved.doc.span
        )
        diagnostics.extend(body_diagnostics)
    else:
        doc = StructuredDoc(summary="")

    ident = config.qualify(name)
    return FunctionEntry(
        name=name,
        ident=ident,
        doc=doc,
        parameters=parameters,
        defined_as=resolved.name if resolved is not binding else None,
        location=locations.get(ident),
    )


def lambda_parameters(value: Node | None, index: DocIndex) -> tuple[Parameter, ...]:
    """Parameters of the curried lambda chain `a: { x, y }@p: ...`."""
    params: list[Parameter] = []
    node = value
    while True:
        while isinstance(node, Paren):
            node = node.expr
        if not isinstance(node, Lambda):
            return tuple(params)
        param = node.param
        if isinstance(param, IdentParam):
            params.append(SimpleParameter(param.name, index.doc_for(param.token)))
        else:
            params.append(PatternParameter(
                fields=tuple(
                    PatternField(e.name, index.doc_for(e.token))
                    for e in param.entries
                ),
                bind=param.bind,
                doc=index.doc_for(param.first_token),
            ))
        node = node.body


def _has_parameter_docs(parameters: tuple[Parameter, ...]) -> bool:
    for param in parameters:
        match param:
            case SimpleParameter(doc=doc):
                if doc is not None:
                    return True
            case PatternParameter(fields=fields, doc=doc):
                if doc is not None or any(f.doc is not None for f in fields):
                    return True
    return False


def _resolution_diagnostic(exc: ResolutionError) -> Diagnostic:
    return Diagnostic(code=exc.code, message=exc.message, span=exc.span, subject=exc.name)
