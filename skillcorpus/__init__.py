"""Tooling for a corpus of library skill files: parse, lint, normalize, serve."""

__version__ = "0.1.0"
