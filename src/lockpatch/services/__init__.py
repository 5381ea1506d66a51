"""
Service layer for lockpatch.

This package contains focused pieces used by LockPatcher:
- ScratchWorkspace: Disposable copy of the project files for the resolver
- merge_package_into_lock: Graft a resolved package into the original lockfile
"""

from lockpatch.services.lockfile_merger import changed_paths, merge_package_into_lock
from lockpatch.services.workspace import ScratchWorkspace, require_project_files

__all__ = [
    "ScratchWorkspace",
    "changed_paths",
    "merge_package_into_lock",
    "require_project_files",
]
