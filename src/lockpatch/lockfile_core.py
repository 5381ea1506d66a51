"""Lockfile handling for lockpatch. Reads, writes and queries npm package-lock.json documents."""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lockpatch.constants import LOCKFILE_NAME, NODE_MODULES_PREFIX, ROOT_PACKAGE_PATH
from lockpatch.exceptions import LockfileIOError, LockfileParseError, PackageNotFoundError

logger = logging.getLogger(__name__)

PackageRecord = Dict[str, Any]


class LockfileSchema(BaseModel):
    """The part of package-lock.json that lockpatch reads and writes.

    Everything else is allowed through untouched; package records are never
    interpreted beyond being JSON objects.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    lockfile_version: Optional[int] = Field(None, alias="lockfileVersion")
    packages: Dict[str, PackageRecord] = Field(default_factory=dict)
    dependencies: Optional[Dict[str, Any]] = None


class PackageEntry(BaseModel):
    """A package path and the record stored under it."""

    path: str
    record: PackageRecord

    @property
    def version(self) -> Optional[str]:
        value = self.record.get("version")
        return value if isinstance(value, str) else None


def package_path(name: str) -> str:
    """Top-level install path for a package, e.g. ``node_modules/@scope/pkg``."""
    return f"{NODE_MODULES_PREFIX}{name}"


def is_within_package(path: str, name: str) -> bool:
    """True for the package's own path and for its private nested copies."""
    own = package_path(name)
    return path == own or path.startswith(own + "/")


def is_nested_under(path: str, name: str) -> bool:
    """True only for paths strictly below the package's own path."""
    return path.startswith(package_path(name) + "/")


class PackageLock:
    """An npm package-lock.json document.

    The document is kept as the decoded dict so that key order, and every
    field lockpatch does not care about, survive a round trip to disk.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None, file_path: Optional[Path] = None):
        self.data: Dict[str, Any] = data if data is not None else {}
        self.file_path = file_path

    @property
    def packages(self) -> Dict[str, PackageRecord]:
        packages = self.data.get("packages")
        return packages if isinstance(packages, dict) else {}

    @property
    def lockfile_version(self) -> Optional[int]:
        return self.data.get("lockfileVersion")

    @property
    def root(self) -> Optional[PackageRecord]:
        return self.packages.get(ROOT_PACKAGE_PATH)

    @property
    def name(self) -> Optional[str]:
        """Name of the root project, from the document or its root entry."""
        name = self.data.get("name")
        if not name and self.root:
            name = self.root.get("name")
        return name if isinstance(name, str) else None

    def items(self) -> Iterator[Tuple[str, PackageRecord]]:
        return iter(self.packages.items())

    def copy(self) -> "PackageLock":
        """Fully independent copy; mutating it never touches this document."""
        return PackageLock(copy.deepcopy(self.data), file_path=self.file_path)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageLock):
            return NotImplemented
        return self.data == other.data

    def __repr__(self) -> str:
        return f"PackageLock(lockfileVersion={self.lockfile_version!r}, packages={len(self.packages)})"

    @classmethod
    def loads(cls, raw: str, source: str = LOCKFILE_NAME) -> "PackageLock":
        """Parse and validate a lockfile from its JSON text."""
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise LockfileParseError(
                f"Invalid JSON in {source} (line {e.lineno}, column {e.colno}): {e.msg}"
            ) from e

        if not isinstance(data, dict):
            raise LockfileParseError(f"Invalid {source}: expected a JSON object")

        try:
            LockfileSchema.model_validate(data)
        except ValidationError as e:
            raise LockfileParseError(f"Invalid {source}: {e.errors()[0]['msg']}") from e

        return cls(data)

    @classmethod
    def load(cls, path: Path) -> "PackageLock":
        """Load a lockfile from disk."""
        try:
            raw = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise LockfileIOError(f"Failed to read {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise LockfileParseError(f"Invalid {path}: not UTF-8 ({e})") from e

        lock = cls.loads(raw, source=str(path))
        lock.file_path = Path(path)
        logger.debug(f"Loaded {path} with {len(lock.packages)} package entries")
        return lock

    def dumps(self) -> str:
        """Serialize with 2-space indentation and a trailing newline, as npm does."""
        return json.dumps(self.data, indent=2, ensure_ascii=False) + "\n"

    def save(self, path: Optional[Path] = None) -> Path:
        """Save the lockfile to disk."""
        path = Path(path or self.file_path or LOCKFILE_NAME)
        try:
            path.write_text(self.dumps(), encoding="utf-8")
        except OSError as e:
            raise LockfileIOError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Wrote {path}")
        return path


def find_package_entry(lock: PackageLock, package_name: str) -> PackageEntry:
    """
    Locate the entry for a package in a resolved lockfile.

    The top-level ``node_modules/<name>`` placement is the normal match. The
    root entry only matches when the package being added is the root project
    itself.

    Args:
        lock: The resolved lockfile
        package_name: Name of the package to find

    Returns:
        The matched path and record

    Raises:
        PackageNotFoundError: If the package has no entry
    """
    target = package_path(package_name)
    root_matches = lock.name == package_name

    for path, record in lock.items():
        if path == target or (root_matches and path == ROOT_PACKAGE_PATH):
            return PackageEntry(path=path, record=record)

    raise PackageNotFoundError(package_name)
