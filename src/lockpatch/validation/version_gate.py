"""Check that the installed npm writes the `packages` keyed lockfile layout."""

import logging
import re

from lockpatch.constants import MIN_NPM_MAJOR_VERSION
from lockpatch.exceptions import PreconditionError

logger = logging.getLogger(__name__)

_MAJOR_PATTERN = re.compile(r"^\s*v?(\d+)")


def check_npm_version(version: str, minimum: int = MIN_NPM_MAJOR_VERSION) -> int:
    """
    Validate an npm version string against the minimum major version.

    Args:
        version: Output of ``npm --version``, e.g. "9.6.4"
        minimum: Lowest accepted major version

    Returns:
        The parsed major version

    Raises:
        PreconditionError: If the version is unparseable or too old
    """
    match = _MAJOR_PATTERN.match(version)
    if not match:
        raise PreconditionError(f"Could not determine npm version from '{version}'")

    major = int(match.group(1))
    if major < minimum:
        raise PreconditionError(
            f"This tool requires npm v{minimum} or higher. You are using npm v{version}"
        )

    logger.debug(f"npm v{version} accepted (major {major})")
    return major
