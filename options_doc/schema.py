"""
options_doc/schema.py — JSON Schema of one entry of an options JSON file.

The file itself is an object mapping dotted option names to entries:

    {
      "services.foo.enable": {
        "description": "Whether to enable foo.",
        "type": "boolean",
        "default": {"_type": "literalExpression", "text": "false"},
        "declarations": ["/nix/store/…-source/nixos/modules/services/foo.nix"],
        "readOnly": false
      }
    }

`description` and `type` are required; `default` and `example` may be
any JSON value, or a typed literal (`literalExpression`, `literalMD`, …)
which then must carry its `text`.
"""

from __future__ import annotations

OPTION_ENTRY_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["description", "type"],
    "properties": {
        "description": {
            "anyOf": [
                {"type": "string"},
                {"$ref": "#/$defs/typedText"},
            ],
        },
        "type": {"type": "string"},
        "default": {"$ref": "#/$defs/literal"},
        "example": {"$ref": "#/$defs/literal"},
        "declarations": {
            "type": "array",
            "items": {
                "anyOf": [
                    {"type": "string"},
                    {
                        "type": "object",
                        "required": ["name"],
                        "properties": {
                            "name": {"type": "string"},
                            "url": {"type": "string"},
                        },
                    },
                ],
            },
        },
        "readOnly": {"type": "boolean"},
        "internal": {"type": "boolean"},
        "visible": {"type": ["boolean", "string"]},
        "loc": {"type": "array", "items": {"type": "string"}},
    },
    "$defs": {
        "typedText": {
            "type": "object",
            "required": ["_type", "text"],
            "properties": {
                "_type": {"type": "string"},
                "text": {"type": "string"},
            },
        },
        "literal": {
            "if": {"type": "object", "required": ["_type"]},
            "then": {"$ref": "#/$defs/typedText"},
        },
    },
}
