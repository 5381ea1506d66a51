"""Base classes for resolvers (interface and config)."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from lockpatch.constants import DEFAULT_NPM_EXECUTABLE
from lockpatch.exceptions import ConfigurationError
from lockpatch.schemas import MergePolicy


def resolve_merge_policy_config(
    override: Optional[Union[MergePolicy, str]],
    env_value: Optional[str],
    default: MergePolicy = MergePolicy.BROAD,
) -> MergePolicy:
    """
    Resolve the merge policy from an override, environment string, or default.

    Args:
        override: Explicit policy (e.g. from --policy), or None
        env_value: Environment variable string value
        default: Policy used when nothing else is specified

    Returns:
        The merge policy to apply

    Raises:
        ConfigurationError: If the chosen value names no known policy
    """
    value = override
    if value is None:
        if env_value is None or not env_value.strip():
            return default
        value = env_value.strip().lower()

    try:
        return MergePolicy(value)
    except ValueError as exc:
        choices = ", ".join(p.value for p in MergePolicy)
        raise ConfigurationError(
            f"Invalid merge policy '{value}'. Choose one of: {choices}."
        ) from exc


class ResolverConfig(BaseModel):
    """Configuration for a resolver."""

    executable: str = Field(DEFAULT_NPM_EXECUTABLE, description="Package manager executable")
    install_args: List[str] = Field(
        default_factory=lambda: ["--package-lock-only"],
        description="Extra arguments restricting install to lockfile resolution",
    )


class BaseResolver(ABC):
    """Base class for lockfile resolvers.

    A resolver runs a package manager inside a workspace so that the
    workspace's lockfile gains a package and its transitive dependencies.
    """

    def __init__(self, config: Optional[ResolverConfig] = None):
        """
        Initialize the resolver.

        Args:
            config: Resolver configuration
        """
        self.config = config or ResolverConfig()

    @abstractmethod
    async def install(self, workspace_dir: Path, specifier: str) -> int:
        """
        Resolve a specifier into the workspace lockfile.

        Args:
            workspace_dir: Directory holding the scratch package.json and lockfile
            specifier: "name" or "name@version"

        Returns:
            The process exit code; 0 on success
        """
        pass

    @abstractmethod
    async def version(self) -> str:
        """
        Report the package manager's version string (e.g. "10.2.0").

        Returns:
            Version string
        """
        pass
