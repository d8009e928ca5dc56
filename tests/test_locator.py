from __future__ import annotations

from data_model.diagnostics import DiagnosticCode, Severity
from extractor import locate_doc_comments
from nix_parser import parse, walk
from nix_parser.nodes import IdentParam, PatternParam, SourceFile


def located(text: str):
    source = parse(text)
    return source, locate_doc_comments(source)


def token(source: SourceFile, text: str, nth: int = 0):
    matches = [t for t in source.tokens if t.text == text]
    return matches[nth]


def param(source: SourceFile, name: str):
    for node in walk(source.expr):
        if isinstance(node, IdentParam) and node.name == name:
            return node.token
        if isinstance(node, PatternParam) and node.bind == name:
            return node.first_token
    raise AssertionError(f"no parameter {name}")


def test_binding_doc():
    source, index = located("{ /** Binding doc. */ a = 1; b = 2; }")
    assert index.doc_for(token(source, "a")).body == "Binding doc."
    assert index.doc_for(token(source, "b")) is None
    assert index.file_doc is None


def test_doc_keeps_raw_text_and_target_span():
    source, index = located("{\n  /** Doc. */\n  a = 1;\n}")
    doc = index.doc_for(token(source, "a"))
    assert doc.raw == "/** Doc. */"
    assert doc.span.line == 2
    assert doc.target_span == token(source, "a").span


def test_file_doc_is_first_comment_before_first_token():
    source, index = located("/** File doc. */\n{ lib }:\n{ /** a */ a = 1; }")
    assert index.file_doc.body == "File doc."
    # the pattern parameter does not get the file doc as well
    assert index.doc_for(token(source, "{")) is None
    assert index.doc_for(token(source, "a")).body == "a"


def test_second_leading_doc_comment_documents_the_first_token():
    source, index = located("/** File. */\n/** Function. */\n{ x }: x")
    assert index.file_doc.body == "File."
    assert index.doc_for(token(source, "{")).body == "Function."


def test_doc_comment_before_first_binding_is_not_a_file_doc():
    source, index = located("{ lib }:\n{\n  /** a */\n  a = 1;\n}")
    assert index.file_doc is None
    assert index.doc_for(token(source, "a")).body == "a"


def test_comment_without_target_is_dropped_with_info():
    source, index = located("{ lib }: /** nothing */ { }")
    assert index.by_target == {}
    [diag] = index.diagnostics
    assert diag.code is DiagnosticCode.UNATTACHED_DOC_COMMENT
    assert diag.severity is Severity.INFO
    assert diag.span.column == 10


def test_comment_separated_by_another_comment_is_dropped():
    source, index = located("{\n  /** doc */\n  # note\n  a = 1;\n}")
    assert index.doc_for(token(source, "a")) is None
    assert [d.code for d in index.diagnostics] == [DiagnosticCode.UNATTACHED_DOC_COMMENT]


def test_nearest_doc_comment_wins():
    source, index = located("{ /** far */ /** near */ a = 1; }")
    assert index.doc_for(token(source, "a")).body == "near"
    assert len(index.diagnostics) == 1


def test_curried_parameters_get_their_own_docs():
    source, index = located("{ fn = /** doc A */ a: /** doc B */ { x ? null }@p: x; }")
    assert index.doc_for(token(source, "fn")) is None
    assert index.doc_for(param(source, "a")).body == "doc A"
    assert index.doc_for(param(source, "p")).body == "doc B"


def test_pattern_field_doc():
    source, index = located("{ f = { /** The x. */ x ? 1, y }: x; }")
    assert index.doc_for(token(source, "x")).body == "The x."
    assert index.doc_for(token(source, "y")) is None


def test_doc_before_delimiter_moves_to_next_parameter():
    source, index = located("{ f = a /** about b */ : b: a; }")
    assert index.doc_for(param(source, "a")) is None
    moved = index.doc_for(param(source, "b"))
    assert moved.body == "about b"
    assert moved.target_span == param(source, "b").span


def test_doc_before_delimiter_never_overrides_a_parameter_doc():
    source, index = located("{ f = a /** x */ : /** y */ b: a; }")
    assert index.doc_for(param(source, "b")).body == "y"
    assert [d.code for d in index.diagnostics] == [DiagnosticCode.UNATTACHED_DOC_COMMENT]


def test_doc_before_last_delimiter_is_dropped():
    source, index = located("{ f = a /** x */ : a; }")
    assert index.by_target == {}
    assert len(index.diagnostics) == 1


def test_inherit_docs():
    source, index = located("{ /** kw */ inherit a; inherit /** b */ b c; }")
    assert index.doc_for(token(source, "inherit")).body == "kw"
    assert index.doc_for(token(source, "b")).body == "b"
