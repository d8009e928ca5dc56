"""
data_model/options.py — declared module options read from options JSON.

Mapping on the JSON produced by `lib.optionAttrSetToDocList`:
  key             → OptionDoc.name  (dotted path, e.g. "services.foo.enable")
  type            → type_label
  description     → description     (str or {"_type": "mdDoc", "text": ...})
  default/example → LiteralText     (str, literalExpression, literalMD, JSON)
  declarations    → list[Declaration]
  readOnly        → read_only
  visible/internal→ kept as read; filtering is done by the JSON producer
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class LiteralKind(StrEnum):
    CODE     = "code"        # rendered as inline code or a fenced nix block
    MARKDOWN = "markdown"    # literalMD: rendered as-is


@dataclass(frozen=True, slots=True)
class LiteralText:
    text: str
    kind: LiteralKind = LiteralKind.CODE


@dataclass(frozen=True, slots=True)
class Declaration:
    name: str                # path as shown to the reader
    url: str | None = None


@dataclass(frozen=True, slots=True)
class OptionDoc:
    name: str
    type_label: str
    description: str
    default: LiteralText | None = None
    example: LiteralText | None = None
    declarations: tuple[Declaration, ...] = ()
    read_only: bool = False
    visible: bool = True
    internal: bool = False

    @property
    def path(self) -> tuple[str, ...]:
        return tuple(self.name.split("."))
