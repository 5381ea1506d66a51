"""Validation module for lockpatch."""

from lockpatch.validation.version_gate import check_npm_version

__all__ = ["check_npm_version"]
