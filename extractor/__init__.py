"""
extractor — finds doc comments in a Nix file and turns them into entries.

Public API:
  document_functions(text, config)        → Rendered
  collect_function_entries(text, config)  → Extraction
  document_file(text, shift)              → Rendered
  read_file_doc(text)                     → (StructuredDoc | None, diagnostics)

Lower layers:
  locate_doc_comments(source)   → DocIndex
  module_scope(source, index)   → Scope
  resolve(name, scope)          → Binding
"""

from data_model.render import Rendered

from .api import (
    Extraction,
    collect_function_entries,
    document_file,
    document_functions,
    read_file_doc,
)
from .collector import collect, lambda_parameters
from .locator import DocIndex, TargetKind, locate_doc_comments
from .resolver import (
    MAX_ALIAS_DEPTH,
    Binding,
    Scope,
    ScopeKind,
    follow_aliases,
    module_scope,
    resolve,
)

__all__ = [
    "Extraction",
    "Rendered",
    "collect_function_entries",
    "document_file",
    "document_functions",
    "read_file_doc",
    "collect",
    "lambda_parameters",
    "DocIndex",
    "TargetKind",
    "locate_doc_comments",
    "MAX_ALIAS_DEPTH",
    "Binding",
    "Scope",
    "ScopeKind",
    "follow_aliases",
    "module_scope",
    "resolve",
]
