from __future__ import annotations

import pytest

from md_render import (
    AnchorRegistry,
    code_fence_mask,
    fenced,
    heading,
    inline_code,
    normalize_comment,
    shift_headings,
    slugify,
)


# ---------------------------------------------------------------------------
# normalize_comment
# ---------------------------------------------------------------------------

def test_normalize_block_comment():
    raw = "/**\n    Summary line.\n\n    # Example\n\n      indented\n  */"
    assert normalize_comment(raw) == "Summary line.\n\n# Example\n\n  indented"


def test_normalize_star_gutter():
    raw = "/**\n * First.\n *\n * Second.\n */"
    assert normalize_comment(raw) == "First.\n\nSecond."


def test_normalize_single_line():
    assert normalize_comment("/** Short. */") == "Short."
    assert normalize_comment("/***/") == ""


def test_normalize_text_on_opening_line():
    raw = "/** First line\n      continues here\n    */"
    assert normalize_comment(raw) == "First line\ncontinues here"


# ---------------------------------------------------------------------------
# headings
# ---------------------------------------------------------------------------

def test_shift_headings_skips_code():
    text = "# A\n\n```nix\n# not a heading\n```\n\n## B\n###### C"
    assert shift_headings(text, 2) == (
        "### A\n\n```nix\n# not a heading\n```\n\n#### B\n###### C"
    )


def test_shift_headings_leaves_hashes_that_are_not_headings():
    text = "#hashtag\n    # indented code\n#"
    assert shift_headings(text, 1) == "#hashtag\n    # indented code\n##"


def test_shift_by_zero_is_identity():
    assert shift_headings("# A", 0) == "# A"


def test_code_fence_mask():
    lines = ["a", "~~~~", "```", "~~~", "~~~~", "b", "```x"]
    mask, unclosed = code_fence_mask(lines)
    assert mask == [False, True, True, True, True, False, True]
    assert unclosed


def test_heading_clamps_level():
    assert heading(0, "x") == "# x"
    assert heading(9, "x", "a") == "###### x {#a}"


# ---------------------------------------------------------------------------
# anchors
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("text, slug", [
    ("lib.strings.concatStrings", "lib-strings-concatstrings"),
    ("--A__b--", "a-b"),
    ("services.foo.enable", "services-foo-enable"),
    ("<name>", "name"),
])
def test_slugify(text, slug):
    assert slugify(text) == slug


def test_anchor_registry_disambiguates():
    anchors = AnchorRegistry("p-")
    assert [anchors.claim(n) for n in ("a.b", "a-b", "a_b", "c")] == [
        "p-a-b", "p-a-b-1", "p-a-b-2", "p-c",
    ]


def test_anchor_suffix_never_reuses_a_taken_anchor():
    anchors = AnchorRegistry("")
    assert anchors.claim("x-1") == "x-1"
    assert anchors.claim("x") == "x"
    assert anchors.claim("x") == "x-2"


# ---------------------------------------------------------------------------
# code
# ---------------------------------------------------------------------------

def test_inline_code():
    assert inline_code("map") == "`map`"
    assert inline_code("a`b") == "``a`b``"
    assert inline_code("`x") == "`` `x ``"


def test_fenced_is_longer_than_inner_fences():
    assert fenced("a = 1;", "nix") == "```nix\na = 1;\n```"
    assert fenced("```\nb\n```").startswith("````\n")
