"""
md_render/format.py — Markdown primitives shared by function and option pages.

  normalize_comment(raw)      `/** ... */` → body text with indentation removed
  code_fence_mask(lines)      which lines belong to fenced code blocks
  shift_headings(text, by)    adds `by` levels to ATX headings outside code
  heading(level, text, anchor)
  slugify(text), AnchorRegistry
  inline_code(text), fenced(text, info)

Heading levels are always clamped to MAX_HEADING_LEVEL, never wrapped.
"""

from __future__ import annotations

import re
import textwrap

from data_model.render import MAX_HEADING_LEVEL

_FENCE_RE    = re.compile(r"^ {0,3}(`{3,}|~{3,})(.*)$")
_HEADING_RE  = re.compile(r"^( {0,3})(#{1,6})(?=\s|$)(.*)$")
_GUTTER_RE   = re.compile(r"^\s*\*(?: |$)")
_SLUG_RE     = re.compile(r"[^a-z0-9]+")
_BACKTICKS   = re.compile(r"`+")


# ---------------------------------------------------------------------------
# Doc comments
# ---------------------------------------------------------------------------

def normalize_comment(raw: str) -> str:
    """
    Strips the `/**` and `*/` delimiters, an optional `*` gutter and the
    common indentation. Text on the opening line is kept as the first line.

        /**
          Concatenate a list of strings.

          # Example
          ...
        */
    """
    inner = raw
    if inner.startswith("/**"):
        inner = inner[3:]
    if inner.endswith("*/"):
        inner = inner[:-2]

    lines = inner.split("\n")
    first = lines[0].strip()
    rest = lines[1:]

    non_blank = [line for line in rest if line.strip()]
    if non_blank and all(_GUTTER_RE.match(line) for line in non_blank):
        rest = [_GUTTER_RE.sub("", line, count=1) if line.strip() else "" for line in rest]

    body = textwrap.dedent("\n".join(rest))
    if first:
        body = first + "\n" + body if body.strip() else first
    return "\n".join(line.rstrip() for line in body.split("\n")).strip("\n")


# ---------------------------------------------------------------------------
# Headings
# ---------------------------------------------------------------------------

def code_fence_mask(lines: list[str]) -> tuple[list[bool], bool]:
    """
    For every line, whether it is part of a fenced code block (fence lines
    included). The second value is True when the last fence is never closed.
    """
    mask: list[bool] = []
    fence: str | None = None
    for line in lines:
        m = _FENCE_RE.match(line)
        if fence is None:
            # a backtick fence's info string may not contain backticks
            if m and not (m.group(1)[0] == "`" and "`" in m.group(2)):
                fence = m.group(1)
                mask.append(True)
            else:
                mask.append(False)
            continue
        mask.append(True)
        if (
            m
            and m.group(1)[0] == fence[0]
            and len(m.group(1)) >= len(fence)
            and not m.group(2).strip()
        ):
            fence = None
    return mask, fence is not None


def shift_headings(text: str, by: int) -> str:
    """Adds `by` levels to every ATX heading outside fenced code."""
    if by == 0 or not text:
        return text
    lines = text.split("\n")
    mask, _ = code_fence_mask(lines)
    out = []
    for line, in_code in zip(lines, mask):
        m = None if in_code else _HEADING_RE.match(line)
        if m:
            level = min(len(m.group(2)) + by, MAX_HEADING_LEVEL)
            line = f"{m.group(1)}{'#' * level}{m.group(3)}"
        out.append(line)
    return "\n".join(out)


def heading(level: int, text: str, anchor: str | None = None) -> str:
    marks = "#" * min(max(level, 1), MAX_HEADING_LEVEL)
    suffix = f" {{#{anchor}}}" if anchor else ""
    return f"{marks} {text}{suffix}"


# ---------------------------------------------------------------------------
# Anchors
# ---------------------------------------------------------------------------

def slugify(text: str) -> str:
    """"lib.strings.concatMapStrings" → "lib-strings-concatmapstrings"."""
    return _SLUG_RE.sub("-", text.lower()).strip("-")


class AnchorRegistry:
    """Hands out anchors unique within one rendered document."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        self._used: set[str] = set()

    def claim(self, name: str) -> str:
        base = f"{self.prefix}{slugify(name)}"
        anchor = base
        n = 0
        while anchor in self._used:
            n += 1
            anchor = f"{base}-{n}"
        self._used.add(anchor)
        return anchor


# ---------------------------------------------------------------------------
# Code
# ---------------------------------------------------------------------------

def inline_code(text: str) -> str:
    longest = max((len(m.group()) for m in _BACKTICKS.finditer(text)), default=0)
    ticks = "`" * (longest + 1)
    if text.startswith(("`", " ")) or text.endswith(("`", " ")):
        text = f" {text} "
    return f"{ticks}{text}{ticks}"


def fenced(text: str, info: str = "") -> str:
    longest = max((len(m.group()) for m in _BACKTICKS.finditer(text)), default=0)
    ticks = "`" * max(3, longest + 1)
    return f"{ticks}{info}\n{text.rstrip(chr(10))}\n{ticks}"
