"""docgen — Markdown reference pages from Nix doc comments and options JSON."""

__version__ = "0.1.0"
