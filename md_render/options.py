"""
md_render/options.py — Markdown rendering of declared module options.

    # {title}                                          base_level
    {preamble}

    ## `services.foo.enable` {#opt-services-foo-enable}  base_level + shift
    {description, verbatim}

    **Type:** `boolean`

    **Default:** `false`

    **Example:** `true`

    **Declared by:**
    - [nixos/modules/services/foo.nix](https://…/blob/rev/nixos/modules/services/foo.nix)
"""

from __future__ import annotations

from collections.abc import Iterable

from data_model.options import LiteralKind, LiteralText, OptionDoc
from data_model.render import RenderConfig

from .format import AnchorRegistry, fenced, heading, inline_code


def render_options(options: Iterable[OptionDoc], config: RenderConfig) -> str:
    blocks = [heading(config.base_level, config.title)]
    if config.preamble:
        blocks.append(config.preamble.strip())

    anchors = AnchorRegistry(config.anchor_prefix)
    level = config.entry_level
    for option in options:
        blocks.append(heading(level, inline_code(option.name), anchors.claim(option.name)))
        if option.description.strip():
            blocks.append(option.description.strip())
        blocks.append(f"**Type:** {inline_code(option.type_label)}")
        if option.default is not None:
            blocks.append(render_literal("Default", option.default))
        if option.example is not None:
            blocks.append(render_literal("Example", option.example))
        if option.read_only:
            blocks.append("**Read only:** yes")
        if option.declarations:
            lines = ["**Declared by:**"]
            for decl in option.declarations:
                label = inline_code(decl.name)
                lines.append(f"- [{label}]({decl.url})" if decl.url else f"- {label}")
            blocks.append("\n".join(lines))

    return "\n\n".join(blocks) + "\n"


def render_literal(label: str, value: LiteralText) -> str:
    text = value.text.strip("\n")
    if value.kind is LiteralKind.MARKDOWN:
        if "\n" in text:
            return f"**{label}:**\n\n{text}"
        return f"**{label}:** {text}"
    if "\n" in text:
        return f"**{label}:**\n\n{fenced(text, 'nix')}"
    return f"**{label}:** {inline_code(text)}"
