"""npm resolver, running the npm CLI as a subprocess."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

from lockpatch.base import BaseResolver, ResolverConfig
from lockpatch.constants import ENV_NPM_EXECUTABLE
from lockpatch.exceptions import PreconditionError

logger = logging.getLogger(__name__)


class NpmResolver(BaseResolver):
    """Resolves packages with ``npm install --package-lock-only``."""

    def __init__(self, executable: Optional[str] = None, config: Optional[ResolverConfig] = None):
        """
        Initialize the npm resolver.

        Args:
            executable: npm executable; falls back to LOCKPATCH_NPM, then "npm"
            config: Resolver configuration
        """
        super().__init__(config)
        if executable:
            self.config.executable = executable
        elif env_executable := os.getenv(ENV_NPM_EXECUTABLE):
            self.config.executable = env_executable

    async def install(self, workspace_dir: Path, specifier: str) -> int:
        cmd = [self.config.executable, "install", specifier, *self.config.install_args]
        logger.debug(f"Running {' '.join(cmd)} in {workspace_dir}")

        # npm output goes straight to the terminal
        process = await self._spawn(*cmd, cwd=str(workspace_dir))
        returncode = await process.wait()

        logger.debug(f"npm install {specifier} exited with code {returncode}")
        return returncode

    async def version(self) -> str:
        process = await self._spawn(
            self.config.executable,
            "--version",
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()

        if process.returncode != 0:
            logger.debug(f"npm --version failed: {stderr.decode(errors='replace').strip()}")
            raise PreconditionError("Failed to get npm version")

        return stdout.decode().strip()

    async def _spawn(self, *cmd: str, **kwargs) -> asyncio.subprocess.Process:
        try:
            return await asyncio.create_subprocess_exec(*cmd, **kwargs)
        except FileNotFoundError as e:
            raise PreconditionError(
                f"npm executable '{self.config.executable}' not found. "
                f"Install npm or set {ENV_NPM_EXECUTABLE}."
            ) from e
