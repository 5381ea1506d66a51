"""Utilities for parsing package specifier strings.

This module handles the ``name@version`` and ``@scope/name@version`` formats
accepted by ``lockpatch add``, keeping the leading scope ``@`` out of the
name/version split.
"""

from typing import List

from lockpatch.exceptions import InvalidSpecifierError
from lockpatch.schemas import PackageSpec


def is_scoped(name: str) -> bool:
    """Check if a package name carries an ``@scope/`` prefix.

    Examples:
        >>> is_scoped("@babel/core")
        True
        >>> is_scoped("left-pad")
        False
        >>> is_scoped("@")
        False
    """
    return name.startswith("@") and "/" in name[1:]


def parse_specifier(raw: str) -> PackageSpec:
    """
    Parse a package argument into name and version.

    Args:
        raw: Token such as "left-pad@1.3.0", "@org/pkg@2.0.0" or "pkg"

    Returns:
        PackageSpec with an empty version when none was given

    Raises:
        InvalidSpecifierError: If no package name can be extracted

    Examples:
        >>> parse_specifier("foo@1.2.3")
        PackageSpec(name='foo', version='1.2.3')

        >>> parse_specifier("@scope/foo@^1.2.0")
        PackageSpec(name='@scope/foo', version='^1.2.0')

        >>> parse_specifier("@scope/foo")
        PackageSpec(name='@scope/foo', version='')
    """
    token = raw.strip()

    if token.startswith("@"):
        # The last "@" past index 0 separates name from version
        boundary = token.rfind("@")
        if boundary > 0:
            name, version = token[:boundary], token[boundary + 1 :]
        else:
            name, version = token, ""
    else:
        name, _, rest = token.partition("@")
        version = rest.split("@", 1)[0]

    if not name or name == "@":
        raise InvalidSpecifierError(
            f'Invalid package format for "{raw}". '
            "Use package@version or @namespace/package@version"
        )

    return PackageSpec(name=name, version=version)


def parse_specifiers(raw_specs: List[str]) -> List[PackageSpec]:
    """Parse every token up front so a bad one aborts before any work starts."""
    return [parse_specifier(raw) for raw in raw_specs]
