"""Shared fixtures: Nix and options JSON sample files under tests/fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def plain_strings_nix() -> str:
    return (FIXTURES / "strings.nix").read_text(encoding="utf-8")


@pytest.fixture
def strings_nix() -> str:
    """strings.nix plus let helpers, aliases, parameter docs and an undocumented binding."""
    return (FIXTURES / "strings-extended.nix").read_text(encoding="utf-8")


@pytest.fixture
def arg_formatting_nix() -> str:
    return (FIXTURES / "arg-formatting.nix").read_text(encoding="utf-8")


@pytest.fixture
def options_json() -> str:
    return (FIXTURES / "options.json").read_text(encoding="utf-8")
