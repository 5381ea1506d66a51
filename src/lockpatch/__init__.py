"""lockpatch - add packages to package-lock.json without regenerating it."""

__version__ = "1.0.0"

from .exceptions import (
    ConfigurationError,
    InvalidSpecifierError,
    LockfileError,
    LockfileIOError,
    LockfileParseError,
    LockpatchError,
    PackageNotFoundError,
    PreconditionError,
    ResolutionFailedError,
)
from .lockfile_core import PackageEntry, PackageLock, find_package_entry
from .schemas import AddedPackage, AddRequest, AddResult, MergePolicy, PackageSpec
from .service import LockPatcher
from .services import ScratchWorkspace, merge_package_into_lock
from .utils import parse_specifier

__all__ = [
    "AddRequest",
    "AddResult",
    "AddedPackage",
    "ConfigurationError",
    "InvalidSpecifierError",
    "LockPatcher",
    "LockfileError",
    "LockfileIOError",
    "LockfileParseError",
    "LockpatchError",
    "MergePolicy",
    "PackageEntry",
    "PackageLock",
    "PackageNotFoundError",
    "PreconditionError",
    "ResolutionFailedError",
    "ScratchWorkspace",
    "find_package_entry",
    "merge_package_into_lock",
    "parse_specifier",
]
