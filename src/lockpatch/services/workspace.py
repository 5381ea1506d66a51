"""
Scratch workspace management for lockpatch.

The resolver rewrites package-lock.json in place, so it runs inside a
disposable copy of the project files rather than the project itself.
"""

import logging
import shutil
from pathlib import Path

from lockpatch.constants import LOCKFILE_NAME, MANIFEST_NAME, NPMRC_NAME, WORKSPACE_DIR_NAME
from lockpatch.exceptions import LockfileIOError, PreconditionError
from lockpatch.lockfile_core import PackageLock

logger = logging.getLogger(__name__)


class ScratchWorkspace:
    """
    A disposable directory seeded with the project's manifest and lockfile.

    Used as an async context manager; the directory is removed on exit
    whether the body succeeded, failed or was cancelled. The directory name
    is fixed, so two invocations in the same project race on it. That is
    not guarded against.
    """

    def __init__(self, project_dir: Path, dir_name: str = WORKSPACE_DIR_NAME):
        """
        Initialize the workspace.

        Args:
            project_dir: Directory holding package.json and package-lock.json
            dir_name: Name of the scratch directory created inside project_dir
        """
        self.project_dir = Path(project_dir)
        self.path = self.project_dir / dir_name

    @property
    def manifest_path(self) -> Path:
        return self.path / MANIFEST_NAME

    @property
    def lockfile_path(self) -> Path:
        return self.path / LOCKFILE_NAME

    async def __aenter__(self) -> "ScratchWorkspace":
        try:
            self.create()
        except BaseException:
            # __aexit__ does not run when entering fails
            self.cleanup()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        self.cleanup()
        return False

    def create(self) -> None:
        """Create the directory and copy the project files into it."""
        if self.path.exists():
            logger.warning(
                f"Workspace {self.path} already exists, probably left over from an "
                "interrupted run; reusing it"
            )

        try:
            self.path.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.project_dir / MANIFEST_NAME, self.manifest_path)
            shutil.copyfile(self.project_dir / LOCKFILE_NAME, self.lockfile_path)
        except OSError as e:
            raise LockfileIOError(f"Failed to prepare workspace {self.path}: {e}") from e

        self._copy_npmrc()
        logger.debug(f"Created workspace {self.path}")

    def _copy_npmrc(self) -> None:
        npmrc = self.project_dir / NPMRC_NAME
        if not npmrc.exists():
            return

        try:
            # Copy by content so a symlinked .npmrc still lands as a real file
            contents = npmrc.read_text(encoding="utf-8")
            (self.path / NPMRC_NAME).write_text(contents, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to copy {NPMRC_NAME} file: {e}")

    def cleanup(self) -> None:
        """Remove the workspace. Failures are logged, never raised."""
        try:
            shutil.rmtree(self.path)
            logger.debug(f"Removed workspace {self.path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove workspace {self.path}: {e}")

    def read_lockfile(self) -> PackageLock:
        """Load the workspace's current lockfile, as left by the resolver."""
        return PackageLock.load(self.lockfile_path)

    def write_lockfile(self, lock: PackageLock) -> None:
        """Persist an intermediate merge result for the next resolver run."""
        lock.save(self.lockfile_path)


def require_project_files(project_dir: Path) -> None:
    """Raise PreconditionError unless package-lock.json and package.json exist."""
    for name in (LOCKFILE_NAME, MANIFEST_NAME):
        if not (Path(project_dir) / name).exists():
            raise PreconditionError(f"{name} not found")
