"""
Lockfile merging for lockpatch.

Grafts the part of a freshly resolved lockfile that belongs to one package
into the user's existing lockfile, leaving unrelated entries untouched.
"""

import copy
import logging
from typing import List

from lockpatch.constants import ROOT_PACKAGE_PATH
from lockpatch.exceptions import LockfileError
from lockpatch.lockfile_core import (
    PackageEntry,
    PackageLock,
    is_nested_under,
    is_within_package,
)
from lockpatch.schemas import MergePolicy

logger = logging.getLogger(__name__)

# Top-level fields copied from the resolved lockfile only when the original lacks them
BACKFILL_FIELDS = ("dependencies", "lockfileVersion")


def merge_package_into_lock(
    original: PackageLock,
    package_name: str,
    entry: PackageEntry,
    resolved: PackageLock,
    policy: MergePolicy = MergePolicy.BROAD,
) -> PackageLock:
    """
    Merge a resolved package into a copy of the original lockfile.

    With ``MergePolicy.BROAD`` every resolved path is copied when it is the
    root, the target or one of its nested copies, or absent from the original.
    Missing top-level ``dependencies``/``lockfileVersion`` are backfilled.

    With ``MergePolicy.NARROW`` only the extracted entry and nested copies of
    the target that the original lacks are copied.

    Args:
        original: The lockfile being patched (never mutated)
        package_name: Name of the package being added
        entry: The package's entry, as returned by find_package_entry
        resolved: The lockfile produced by the resolver
        policy: Which merge policy to apply

    Returns:
        A new, complete lockfile

    Raises:
        LockfileError: If the merged lockfile ended up without a root entry
    """
    result = original.copy()
    packages = result.data.get("packages")
    if not isinstance(packages, dict):
        packages = result.data["packages"] = {}

    if policy == MergePolicy.BROAD:
        copied = _graft_broad(packages, package_name, resolved)
        for field in BACKFILL_FIELDS:
            if resolved.data.get(field) and not result.data.get(field):
                result.data[field] = copy.deepcopy(resolved.data[field])
                logger.debug(f"Backfilled top-level {field} from resolved lockfile")
    elif policy == MergePolicy.NARROW:
        copied = _graft_narrow(packages, package_name, entry, resolved)
    else:
        raise ValueError(f"Unknown merge policy: {policy!r}")

    logger.debug(f"Merged {package_name} ({policy.value}): {copied} package entries copied")

    if ROOT_PACKAGE_PATH not in packages:
        raise LockfileError(f"Lockfile has no root package entry after merging {package_name}")

    return result


def _graft_broad(packages: dict, package_name: str, resolved: PackageLock) -> int:
    copied = 0
    for path, record in resolved.items():
        if (
            path == ROOT_PACKAGE_PATH
            or is_within_package(path, package_name)
            or path not in packages
        ):
            packages[path] = copy.deepcopy(record)
            copied += 1
    return copied


def _graft_narrow(
    packages: dict, package_name: str, entry: PackageEntry, resolved: PackageLock
) -> int:
    packages[entry.path] = copy.deepcopy(entry.record)
    copied = 1
    for path, record in resolved.items():
        if is_nested_under(path, package_name) and path not in packages:
            packages[path] = copy.deepcopy(record)
            copied += 1
    return copied


def changed_paths(before: PackageLock, after: PackageLock) -> List[str]:
    """Package paths whose record was added or replaced between two lockfiles."""
    previous = before.packages
    return [path for path, record in after.items() if previous.get(path) != record]
