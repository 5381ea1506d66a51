"""Resolver implementations for lockpatch."""

from lockpatch.resolvers.npm_cli import NpmResolver

__all__ = ["NpmResolver"]
