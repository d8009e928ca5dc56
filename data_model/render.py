"""
data_model/render.py — per-invocation rendering configuration.

RenderConfig is built once by the caller (CLI or library user) and never
mutated while rendering:
  base_level            level of the title / category heading (1..6)
  shift                 offset of binding/option headings below base_level
  anchor_prefix         prepended to every slugified identifier
  prefix, category      qualify function identifiers ("lib.strings.foo")
  description           category header text (functions)
  exports               export filter; None renders every documented binding
  title, preamble       options document heading and intro text
  section_anchor_prefix anchor prefix of the category heading
  declarations          link settings for option declarations; None omits
                        the "Declared by" list

Rendered is what every pipeline returns: the text and its diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass

from .diagnostics import Diagnostic

MAX_HEADING_LEVEL = 6


@dataclass(frozen=True, slots=True)
class DeclarationLinks:
    base_url: str | None = None
    revision: str | None = None


@dataclass(frozen=True, slots=True)
class RenderConfig:
    base_level: int = 1
    shift: int = 1
    anchor_prefix: str = "function-library-"
    prefix: str = "lib"
    category: str = ""
    description: str = ""
    exports: tuple[str, ...] | None = None
    title: str = "Module Options"
    preamble: str | None = None
    section_anchor_prefix: str = "sec-functions-library-"
    declarations: DeclarationLinks | None = DeclarationLinks()

    def __post_init__(self) -> None:
        if not 1 <= self.base_level <= MAX_HEADING_LEVEL:
            raise ValueError(
                f"base_level must be between 1 and {MAX_HEADING_LEVEL}, got {self.base_level}"
            )
        if self.shift < 0:
            raise ValueError(f"shift must not be negative, got {self.shift}")

    @property
    def entry_level(self) -> int:
        """Heading level of a binding or option."""
        return min(self.base_level + self.shift, MAX_HEADING_LEVEL)

    def qualify(self, name: str) -> str:
        """"lib" + "strings" + "foo" → "lib.strings.foo" (empty parts dropped)."""
        return ".".join(p for p in (self.prefix, self.category, name) if p)


@dataclass(frozen=True, slots=True)
class Rendered:
    """Output of one pipeline call: Markdown (or JSON) text plus warnings."""
    markdown: str
    diagnostics: tuple[Diagnostic, ...] = ()
