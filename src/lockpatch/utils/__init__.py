"""Utility functions package for lockpatch. Exports specifier parsing helpers."""

from lockpatch.utils.specifier_parsing import is_scoped, parse_specifier, parse_specifiers

__all__ = ["is_scoped", "parse_specifier", "parse_specifiers"]
