from __future__ import annotations

import json
from pathlib import Path

import pytest

from docgen.cli import build_parser, main


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    """No `.env` from the checkout, no DOCGEN_* from the caller."""
    monkeypatch.chdir(tmp_path)
    for var in (
        "DOCGEN_PREFIX",
        "DOCGEN_ANCHOR_PREFIX",
        "DOCGEN_OPTIONS_ANCHOR_PREFIX",
        "DOCGEN_DECLARATIONS_BASE_URL",
        "DOCGEN_REVISION",
    ):
        # set first so values loaded from `.env` are undone afterwards
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)


def write(tmp_path: Path, name: str, text: str) -> str:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_command_is_required(capsys):
    with pytest.raises(SystemExit) as info:
        build_parser().parse_args([])
    assert info.value.code == 2


def test_functions_is_the_default_command(tmp_path, capsys):
    path = write(tmp_path, "a.nix", "{ /** A. */ a = 1; /** B. */ b = 2; }")
    main(["--file", path, "--category", "", "--description", "", "--anchor-prefix", "", "--export", "a"])
    out, err = capsys.readouterr()
    assert out == "## `lib.a` {#lib-a}\n\nA.\n"
    assert err == ""


def test_functions_short_flags(tmp_path, capsys):
    path = write(tmp_path, "a.nix", "{ /** A. */ a = 1; }")
    main(["-f", path, "-p", "pkgs", "-c", "x", "-j"])
    [entry] = json.loads(capsys.readouterr().out)["entries"]
    assert entry["ident"] == "pkgs.x.a"


# ---------------------------------------------------------------------------
# functions
# ---------------------------------------------------------------------------

def test_functions(tmp_path, capsys, strings_nix):
    path = write(tmp_path, "strings.nix", strings_nix)
    main(["functions", "--file", path, "--category", "strings"])
    out, err = capsys.readouterr()
    assert out.startswith("# strings {#sec-functions-library-strings}\n")
    assert "## `lib.strings.concatStrings`" in out
    assert err == ""


def test_functions_export_warnings_go_to_stderr(tmp_path, capsys):
    path = write(tmp_path, "a.nix", "{ /** A. */ a = 1; }")
    main(["functions", "-f", path, "--export", "a, missing"])
    out, err = capsys.readouterr()
    assert "## `lib.a`" in out
    assert "No documentation found for `missing`." in out
    assert "warning:" in err
    assert "[export-not-found]" in err


def test_functions_quiet(tmp_path, capsys):
    path = write(tmp_path, "a.nix", "{ a = 1; }")
    main(["functions", "-f", path, "--export", "a", "--quiet"])
    out, err = capsys.readouterr()
    assert out == ""
    assert err == ""


def test_functions_verbose_shows_ignored_comments(tmp_path, capsys):
    path = write(tmp_path, "a.nix", "{ lib }: /** stray */ { }")
    main(["functions", "-f", path])
    assert capsys.readouterr().err == ""
    main(["functions", "-f", path, "--verbose"])
    assert "[unattached-doc-comment]" in capsys.readouterr().err


def test_functions_json_output(tmp_path, capsys):
    path = write(tmp_path, "a.nix", "{ /** A. */ a = x: x; }")
    locs = write(tmp_path, "locs.json", json.dumps({"lib.a": "a.nix:1"}))
    main(["functions", "-f", path, "--json-output", "--locs", locs])
    data = json.loads(capsys.readouterr().out)
    [entry] = data["entries"]
    assert entry["ident"] == "lib.a"
    assert entry["location"] == "a.nix:1"


def test_functions_prefix_from_environment(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("DOCGEN_PREFIX", "pkgs.lib")
    path = write(tmp_path, "a.nix", "{ /** A. */ a = 1; }")
    main(["functions", "-f", path])
    assert "## `pkgs.lib.a` {#function-library-pkgs-lib-a}" in capsys.readouterr().out


def test_functions_anchor_prefix_from_dotenv(tmp_path, capsys):
    write(tmp_path, ".env", "DOCGEN_ANCHOR_PREFIX=fn-\n")
    path = write(tmp_path, "a.nix", "{ /** A. */ a = 1; }")
    main(["functions", "-f", path])
    assert "{#fn-lib-a}" in capsys.readouterr().out


def test_functions_parse_error(tmp_path, capsys):
    path = write(tmp_path, "bad.nix", "{ a = 1 }")
    with pytest.raises(SystemExit) as info:
        main(["functions", "-f", path])
    assert info.value.code == 1
    out, err = capsys.readouterr()
    assert out == ""
    assert "Parse error in" in err


def test_functions_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as info:
        main(["functions", "-f", str(tmp_path / "nope.nix")])
    assert info.value.code == 1
    assert "Cannot read" in capsys.readouterr().err


def test_functions_invalid_base_level(tmp_path, capsys):
    path = write(tmp_path, "a.nix", "{ }")
    with pytest.raises(SystemExit):
        main(["functions", "-f", path, "--base-level", "7"])
    assert "Invalid options:" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# file-doc
# ---------------------------------------------------------------------------

def test_file_doc(tmp_path, capsys, strings_nix):
    path = write(tmp_path, "strings.nix", strings_nix)
    main(["file-doc", "-f", path, "--shift-headings", "1"])
    assert capsys.readouterr().out == (
        "String manipulation functions.\n\n"
        "## Conventions\n\n"
        "Functions take the string they operate on as their last argument.\n"
    )


def test_file_doc_absent(tmp_path, capsys):
    path = write(tmp_path, "a.nix", "{ /** A. */ a = 1; }")
    main(["file-doc", "-f", path])
    assert capsys.readouterr().out == ""
    main(["file-doc", "-f", path, "--fallback", "Nothing here."])
    assert capsys.readouterr().out == "Nothing here.\n"


def test_file_doc_formats(tmp_path, capsys):
    path = write(tmp_path, "a.nix", "/**\n  Summary.\n\n  # Notes\n\n  text\n*/\n{ }")
    main(["file-doc", "-f", path, "--format", "json"])
    data = json.loads(capsys.readouterr().out)
    assert data == {"file": path, "doc": "Summary.\n\n# Notes\n\ntext"}

    main(["file-doc", "-f", path, "--format", "plain"])
    assert capsys.readouterr().out == "Summary.\n\n# Notes\n\ntext\n"


def test_file_doc_json_fallback(tmp_path, capsys):
    path = write(tmp_path, "a.nix", "{ }")
    main(["file-doc", "-f", path, "--format", "json", "--fallback", "F."])
    assert json.loads(capsys.readouterr().out) == {"file": path, "doc": "F."}

    main(["file-doc", "-f", path, "--format", "json"])
    assert json.loads(capsys.readouterr().out) == {"file": path, "doc": None}


def test_file_doc_rejects_negative_shift(tmp_path, capsys):
    path = write(tmp_path, "a.nix", "{ }")
    with pytest.raises(SystemExit) as info:
        main(["file-doc", "-f", path, "--shift-headings", "-1"])
    assert info.value.code == 1


# ---------------------------------------------------------------------------
# options
# ---------------------------------------------------------------------------

def test_options_to_file(tmp_path, capsys, options_json):
    path = write(tmp_path, "options.json", options_json)
    out_path = tmp_path / "options.md"
    main(["options", "-f", path, "-o", str(out_path), "--title", "Foo"])
    out, err = capsys.readouterr()
    assert out == ""
    assert "Written:" in err
    assert "[options-entry-invalid]" in err
    md = out_path.read_text(encoding="utf-8")
    assert md.startswith("# Foo\n\n## `services.foo.enable` {#opt-services-foo-enable}\n")


def test_options_anchor_prefix_from_environment(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("DOCGEN_OPTIONS_ANCHOR_PREFIX", "nixos-opt-")
    path = write(tmp_path, "o.json", json.dumps({"a.b": {"description": "d", "type": "int"}}))
    main(["options", "-f", path])
    assert "{#nixos-opt-a-b}" in capsys.readouterr().out


def test_options_declaration_links(tmp_path, capsys, options_json):
    path = write(tmp_path, "options.json", options_json)
    main([
        "options", "-f", path, "-q",
        "--declarations-base-url", "https://example.org/nixpkgs",
        "--revision", "v1",
    ])
    out = capsys.readouterr().out
    assert "(https://example.org/nixpkgs/blob/v1/nixos/modules/services/foo.nix)" in out

    main(["options", "-f", path, "-q", "--no-include-declarations"])
    assert "Declared by" not in capsys.readouterr().out


def test_options_invalid_json(tmp_path, capsys):
    path = write(tmp_path, "o.json", "[1, 2]")
    with pytest.raises(SystemExit) as info:
        main(["options", "-f", path])
    assert info.value.code == 1
    assert "Invalid options JSON in" in capsys.readouterr().err
