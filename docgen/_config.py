"""Site-wide defaults — environment variables, optionally from a `.env` file."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv


@dataclass(frozen=True, slots=True)
class Defaults:
    prefix:                str
    anchor_prefix:         str
    options_anchor_prefix: str
    declarations_base_url: str | None
    revision:              str | None


def load_env() -> None:
    """Loads the nearest `.env` above the working directory; set variables win."""
    path = find_dotenv(usecwd=True)
    if path:
        load_dotenv(path, override=False)


def defaults() -> Defaults:
    return Defaults(
        prefix                = os.getenv("DOCGEN_PREFIX",                "lib"),
        anchor_prefix         = os.getenv("DOCGEN_ANCHOR_PREFIX",         "function-library-"),
        options_anchor_prefix = os.getenv("DOCGEN_OPTIONS_ANCHOR_PREFIX", "opt-"),
        declarations_base_url = os.getenv("DOCGEN_DECLARATIONS_BASE_URL") or None,
        revision              = os.getenv("DOCGEN_REVISION") or None,
    )
