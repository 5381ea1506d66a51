"""
Lockfile patching service. Adds packages to package-lock.json without
regenerating it, by resolving each package in a scratch workspace and merging
the result back.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple, Union

from lockpatch.base import BaseResolver, resolve_merge_policy_config
from lockpatch.constants import ENV_MERGE_POLICY, LOCKFILE_NAME
from lockpatch.exceptions import InvalidSpecifierError, ResolutionFailedError
from lockpatch.lockfile_core import PackageEntry, PackageLock, find_package_entry
from lockpatch.resolvers import NpmResolver
from lockpatch.schemas import AddedPackage, AddRequest, AddResult, MergePolicy, PackageSpec
from lockpatch.services import (
    ScratchWorkspace,
    changed_paths,
    merge_package_into_lock,
    require_project_files,
)
from lockpatch.utils import parse_specifier
from lockpatch.validation import check_npm_version

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[PackageSpec], None]


class LockPatcher:
    """Adds packages to a project's package-lock.json."""

    def __init__(
        self,
        project_dir: Optional[Path] = None,
        resolver: Optional[BaseResolver] = None,
        policy: Optional[Union[MergePolicy, str]] = None,
    ):
        """
        Initialize the patcher.

        Args:
            project_dir: Directory holding package.json and package-lock.json
                (default: current directory)
            resolver: Resolver to run in the workspace (default: NpmResolver)
            policy: Merge policy; falls back to LOCKPATCH_MERGE_POLICY, then broad
        """
        self.project_dir = Path(project_dir or Path.cwd())
        self.resolver = resolver or NpmResolver()
        self.policy = resolve_merge_policy_config(policy, os.getenv(ENV_MERGE_POLICY))
        self.lockfile_path = self.project_dir / LOCKFILE_NAME

    @classmethod
    def from_request(
        cls, request: AddRequest, resolver: Optional[BaseResolver] = None
    ) -> "LockPatcher":
        return cls(project_dir=request.project_dir, resolver=resolver, policy=request.policy)

    async def check_resolver(self) -> str:
        """Query the resolver's version and reject versions without `packages` lockfiles."""
        version = await self.resolver.version()
        check_npm_version(version)
        return version

    async def add(
        self,
        specs: Sequence[Union[str, PackageSpec]],
        dry: bool = False,
        on_package: Optional[ProgressCallback] = None,
    ) -> AddResult:
        """
        Add packages to the project lockfile.

        Packages are resolved one at a time in a single scratch workspace; each
        merge result becomes the working lockfile for the next package. The
        project lockfile is only written once all packages merged.

        Args:
            specs: Tokens like "left-pad@1.3.0", or parsed PackageSpecs
            dry: Resolve and merge but leave package-lock.json untouched
            on_package: Called with each spec before it is resolved

        Returns:
            AddResult describing where each package landed

        Raises:
            LockpatchError: On any failure; nothing is written in that case
        """
        packages = [s if isinstance(s, PackageSpec) else parse_specifier(s) for s in specs]
        if not packages:
            raise InvalidSpecifierError("No packages given")

        await self.check_resolver()
        require_project_files(self.project_dir)

        current = PackageLock.load(self.lockfile_path)
        added = []

        async with ScratchWorkspace(self.project_dir) as workspace:
            for spec in packages:
                if on_package:
                    on_package(spec)
                current, entry = await self._add_one(workspace, current, spec)
                added.append(AddedPackage(spec=spec, path=entry.path, version=entry.version))

            if dry:
                logger.info("Dry run; not updating package-lock.json")
            else:
                current.save(self.lockfile_path)

        return AddResult(
            lockfile_path=self.lockfile_path,
            added=added,
            written=not dry,
            policy=self.policy,
        )

    async def run(self, request: AddRequest, on_package: Optional[ProgressCallback] = None) -> AddResult:
        """Execute a structured add request."""
        return await self.add(request.packages, dry=request.dry, on_package=on_package)

    async def _add_one(
        self, workspace: ScratchWorkspace, current: PackageLock, spec: PackageSpec
    ) -> Tuple[PackageLock, PackageEntry]:
        returncode = await self.resolver.install(workspace.path, spec.specifier)
        if returncode != 0:
            raise ResolutionFailedError(f"npm install failed with code {returncode}", returncode)

        resolved = workspace.read_lockfile()
        entry = find_package_entry(resolved, spec.name)
        merged = merge_package_into_lock(current, spec.name, entry, resolved, self.policy)

        workspace.write_lockfile(merged)
        logger.debug(f"{spec}: {len(changed_paths(current, merged))} package entries changed")
        return merged, entry
