from __future__ import annotations

import json

import pytest

from data_model.diagnostics import DiagnosticCode
from data_model.render import RenderConfig
from extractor import collect_function_entries, document_file, document_functions, read_file_doc
from md_render import render_functions_json, shift_headings


def render(text: str, **config) -> str:
    return document_functions(text, RenderConfig(**config)).markdown


def codes(rendered) -> list[DiagnosticCode]:
    return [d.code for d in rendered.diagnostics]


# ---------------------------------------------------------------------------
# Whole-file behaviour
# ---------------------------------------------------------------------------

def test_file_without_doc_comments_renders_nothing():
    assert document_file("{ a = 1; }").markdown == ""
    result = document_functions("{ a = 1; }", RenderConfig())
    assert result.markdown == ""
    assert result.diagnostics == ()


def test_rendering_is_deterministic(strings_nix):
    config = RenderConfig(category="strings")
    assert document_functions(strings_nix, config) == document_functions(strings_nix, config)


@pytest.mark.parametrize("shift, extra", [(0, 1), (1, 2), (1, 0)])
def test_shifting_the_output_equals_rendering_with_a_larger_shift(strings_nix, shift, extra):
    rendered = render(strings_nix, shift=shift)
    assert shift_headings(rendered, extra) == render(strings_nix, shift=shift + extra)


def test_strings_fixture(strings_nix):
    result = document_functions(strings_nix, RenderConfig(category="strings"))
    md = result.markdown
    assert result.diagnostics == ()

    assert md.startswith(
        "# strings {#sec-functions-library-strings}\n\n"
        "String manipulation functions.\n\n"
        "## Conventions\n\n"
        "Functions take the string they operate on as their last argument.\n\n"
        "## `lib.strings.concatStrings` {#function-library-lib-strings-concatstrings}\n\n"
        "Concatenate a list of strings.\n\n"
        "### Example\n\n"
        "```nix\n"
        'concatStrings [ "foo" "bar" ]\n'
        '=> "foobar"\n'
        "```\n\n"
    )
    assert md.endswith(
        "## `lib.strings.hasPrefix` {#function-library-lib-strings-hasprefix}\n\n"
        "Determine whether a string has a given prefix.\n\n"
        "### Arguments\n\n"
        "`pref`\n\n"
        ": Prefix to check for\n\n"
        "`str`\n\n"
        ": Input string\n"
    )
    # undocumented bindings and let-only helpers are not rendered
    assert "stringLength" not in md
    assert "`lib.strings.join`" not in md


def test_alias_through_let_renders_the_definition_doc(strings_nix):
    md = render(strings_nix, category="strings", exports=("joinWith",))
    assert md == (
        "# strings {#sec-functions-library-strings}\n\n"
        "String manipulation functions.\n\n"
        "## Conventions\n\n"
        "Functions take the string they operate on as their last argument.\n\n"
        "## `lib.strings.joinWith` {#function-library-lib-strings-joinwith}\n\n"
        "Join a list of strings with a separator.\n\n"
        "### Arguments\n\n"
        "`sep` (string)\n\n"
        ": Separator placed between elements\n\n"
        "`list` (list of strings)\n\n"
        ": Strings to join\n\n"
        "### Example\n\n"
        "```nix\n"
        'join ", " [ "a" "b" ]\n'
        '=> "a, b"\n'
        "```\n"
    )


def test_category_description_is_the_header_text(strings_nix):
    md = render(strings_nix, category="strings", description="String functions")
    assert md.startswith("# String functions {#sec-functions-library-strings}\n\n")


def test_locations():
    md = document_functions(
        "{ /** Doc. */ f = x: x; }",
        RenderConfig(),
        locations={"lib.f": "[lib/f.nix:1](https://example.org/lib/f.nix#L1)"},
    ).markdown
    assert md.endswith("Located at [lib/f.nix:1](https://example.org/lib/f.nix#L1).\n")


def test_plain_strings_fixture(plain_strings_nix):
    result = document_functions(plain_strings_nix, RenderConfig(category="strings"))
    md = result.markdown
    assert result.diagnostics == ()
    assert md.startswith(
        "# strings {#sec-functions-library-strings}\n\n"
        "String manipulation functions.\n\n"
        "## `lib.strings.concatStrings` {#function-library-lib-strings-concatstrings}\n\n"
    )
    assert md.endswith(
        "## `lib.strings.hasPrefix` {#function-library-lib-strings-hasprefix}\n\n"
        "Determine whether a string has given prefix.\n\n"
        "### Arguments\n\n"
        "`pref`\n\n"
        ": Prefix to check for\n\n"
        "`str`\n\n"
        ": Input string\n\n"
        "### Example\n\n"
        "```nix\n"
        'hasPrefix "foo" "foobar"\n'
        "=> true\n"
        'hasPrefix "foo" "barfoo"\n'
        "=> false\n"
        "```\n"
    )
    assert "length" not in md


def test_category_heading_stays_at_the_base_level(strings_nix):
    one = render(strings_nix, category="strings", shift=1)
    two = render(strings_nix, category="strings", shift=2)
    first = "`lib.strings.concatStrings`"
    split_one = one.index("\n#", one.index("## Conventions") + 1) + 1
    split_two = two.index("\n#", two.index("## Conventions") + 1) + 1
    assert first in one[split_one:].split("\n")[0]
    assert first in two[split_two:].split("\n")[0]

    # header and file doc do not move with the shift
    assert one[:split_one] == two[:split_two]
    assert one.startswith("# strings {#sec-functions-library-strings}\n\n")
    assert shift_headings(one[split_one:], 1) == two[split_two:]
    assert shift_headings(one, 1) != two


# ---------------------------------------------------------------------------
# Arguments
# ---------------------------------------------------------------------------

def test_both_argument_syntaxes_render_the_same():
    bullets = "{ /** S.\n\n# Arguments\n\n- `x` (int): The x.\n*/ f = x: x; }"
    terms = "{ /** S.\n\n# Arguments\n\n`x` (int)\n: The x.\n*/ f = x: x; }"
    assert render(bullets) == render(terms)
    assert "`x` (int)\n\n: The x." in render(bullets)


def test_argument_formats_fixture(arg_formatting_nix):
    assert render(arg_formatting_nix) == (
        "## `lib.fn` {#function-library-lib-fn}\n\n"
        "Documented function with various argument formats.\n\n"
        "### Arguments\n\n"
        "`a`\n\n"
        ": Single argument\n\n"
        "`args`\n\n"
        ": Structured function argument\n\n"
        "    `default`\n\n"
        "    : documented argument\n\n"
        "    `example`\n\n"
        "    : i like this argument. another!\n"
    )
    assert render(arg_formatting_nix).count("`default`") == 1


def test_pattern_field_docs_combine_with_the_pattern_doc():
    text = (
        "{ f = /** Settings.\n\n`x`\n: listed x\n\n`y`\n: listed y\n\n`extra`\n: passed on\n*/\n"
        "  { /** own x */ x, y, z, ... }: x; }"
    )
    assert render(text) == (
        "## `lib.f` {#function-library-lib-f}\n\n"
        "### Arguments\n\n"
        "structured function argument\n\n"
        ": Settings.\n\n"
        "    `x`\n\n"
        "    : own x\n\n"
        "    `y`\n\n"
        "    : listed y\n\n"
        "    `z`\n\n"
        "    : Function argument\n\n"
        "    `extra`\n\n"
        "    : passed on\n"
    )


def test_curried_parameter_docs_document_the_binding():
    md = render("{ fn = /** doc A */ a: /** doc B */ { x ? null }@p: x; }")
    assert md == (
        "## `lib.fn` {#function-library-lib-fn}\n\n"
        "### Arguments\n\n"
        "`a`\n\n"
        ": doc A\n\n"
        "`p`\n\n"
        ": doc B\n\n"
        "    `x`\n\n"
        "    : Function argument\n"
    )


def test_written_arguments_win_over_parameter_docs():
    text = (
        "{ /** S.\n\n# Arguments\n\n- `a`: Written.\n*/\n"
        "  f = /** Param a. */ a: /** Param b. */ b: a; }"
    )
    md = render(text)
    assert "`a`\n\n: Written.\n\n`b`\n\n: Param b." in md
    assert "Param a." not in md


# ---------------------------------------------------------------------------
# Anchors and export filters
# ---------------------------------------------------------------------------

def test_anchors_are_unique():
    md = render("{ /** a */ foo-bar = 1; /** b */ foo_bar = 2; /** c */ fooBar = 3; }")
    assert "{#function-library-lib-foo-bar}" in md
    assert "{#function-library-lib-foo-bar-1}" in md
    assert "{#function-library-lib-foobar}" in md


def test_alias_renders_under_the_exported_name():
    md = render(
        "rec { /** Helper doc. */ helper = x: x; exported = helper; }",
        exports=("exported",),
    )
    assert "`lib.exported`" in md
    assert "Helper doc." in md
    assert "lib.helper" not in md


def test_dotted_binding_renders_under_its_full_name():
    md = render("{ /** Doc. */ foo.bar = x: x; }")
    assert md == "## `lib.foo.bar` {#function-library-lib-foo-bar}\n\nDoc.\n"
    assert render("{ /** Doc. */ foo.bar = x: x; }", exports=("foo.bar",)) == md


def test_export_filter_keeps_listed_order():
    text = "{ /** A */ a = 1; /** B */ b = 2; /** C */ c = 3; }"
    md = render(text, exports=("c", "a"))
    assert md.index("`lib.c`") < md.index("`lib.a`")
    assert "`lib.b`" not in md


def test_missing_export_renders_a_placeholder():
    result = document_functions("{ /** A */ a = 1; }", RenderConfig(exports=("missing",)))
    assert result.markdown == (
        "## `lib.missing` {#function-library-lib-missing}\n\n"
        "No documentation found for `missing`.\n"
    )
    assert codes(result) == [DiagnosticCode.EXPORT_NOT_FOUND]


def test_alias_cycle_renders_a_placeholder():
    result = document_functions("rec { a = b; b = a; }", RenderConfig(exports=("a",)))
    assert "No documentation found for `a`." in result.markdown
    assert codes(result) == [DiagnosticCode.ALIAS_CYCLE]


def test_cycle_without_filter_is_a_warning_only():
    result = document_functions("rec { a = b; b = a; /** C */ c = 1; }", RenderConfig())
    assert "`lib.a`" not in result.markdown
    assert "`lib.c`" in result.markdown
    assert codes(result) == [DiagnosticCode.ALIAS_CYCLE, DiagnosticCode.ALIAS_CYCLE]


def test_undocumented_export_is_skipped_with_a_warning():
    result = document_functions("{ a = 1; }", RenderConfig(exports=("a",)))
    assert result.markdown == ""
    assert codes(result) == [DiagnosticCode.NO_DOC_COMMENT]


def test_malformed_arguments_are_reported_and_kept():
    result = document_functions(
        "{ /** S.\n\n# Arguments\n\nprose\n*/ f = x: x; }", RenderConfig()
    )
    assert "### Arguments\n\nprose" in result.markdown
    assert codes(result) == [DiagnosticCode.DOC_BODY_MALFORMED]
    assert result.diagnostics[0].subject == "f"


# ---------------------------------------------------------------------------
# File doc
# ---------------------------------------------------------------------------

def test_file_doc(strings_nix):
    md = document_file(strings_nix, shift=1).markdown
    assert md == (
        "String manipulation functions.\n\n"
        "## Conventions\n\n"
        "Functions take the string they operate on as their last argument.\n"
    )


def test_read_file_doc_structure(strings_nix):
    doc, diags = read_file_doc(strings_nix)
    assert doc.summary == "String manipulation functions."
    assert [s.heading for s in doc.sections] == ["Conventions"]
    assert diags == []


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def test_json_output(strings_nix):
    config = RenderConfig(category="strings")
    extraction = collect_function_entries(strings_nix, config)
    data = json.loads(render_functions_json(extraction.entries, config))

    assert data["version"] == 1
    by_name = {e["name"]: e for e in data["entries"]}
    assert list(by_name) == ["concatStrings", "concatMapStrings", "joinWith", "hasPrefix"]

    has_prefix = by_name["hasPrefix"]
    assert has_prefix["ident"] == "lib.strings.hasPrefix"
    assert has_prefix["anchor"] == "function-library-lib-strings-hasprefix"
    assert has_prefix["description"] == ["Determine whether a string has a given prefix."]
    assert [a["name"] for a in has_prefix["args"]] == ["pref", "str"]

    assert by_name["joinWith"]["defined_as"] == "join"
    assert by_name["concatMapStrings"]["args"][0] == {
        "name": "f", "type": None, "description": "Function to map", "fields": [],
    }
    [example] = by_name["concatStrings"]["sections"]
    assert example["kind"] == "example"
    assert "=> \"foobar\"" in example["text"]
    assert by_name["concatStrings"]["example"] == example["text"]
    assert by_name["hasPrefix"]["example"] is None
    assert all(e["fn_type"] is None for e in data["entries"])
    assert has_prefix["prefix"] == "lib"
    assert has_prefix["category"] == "strings"
