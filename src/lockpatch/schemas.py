# ABOUTME: Pydantic schemas for package specifiers, add requests and their results.
# ABOUTME: Lockfile documents themselves stay plain dicts; see lockfile_core.
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


class MergePolicy(str, Enum):
    """How much of a resolved lockfile is grafted into the original."""

    BROAD = "broad"  # root, target subtree, and any path new to the original
    NARROW = "narrow"  # target entry plus its new nested copies only


class PackageSpec(BaseModel):
    """A parsed ``name`` or ``name@version`` token."""

    name: str = Field(..., min_length=1, description="Package name, optionally @scope/name")
    version: str = Field("", description="Requested version or range; empty means resolver default")

    @property
    def specifier(self) -> str:
        """Render the token handed to the resolver."""
        return f"{self.name}@{self.version}" if self.version else self.name

    def __str__(self) -> str:
        return self.specifier


class AddRequest(BaseModel):
    """Structured form of ``lockpatch add``."""

    packages: List[PackageSpec] = Field(..., min_length=1)
    dry: bool = False
    policy: MergePolicy = MergePolicy.BROAD
    project_dir: Path = Field(default_factory=Path.cwd)


class AddedPackage(BaseModel):
    """Where a requested package landed in the merged lockfile."""

    spec: PackageSpec
    path: str
    version: Optional[str] = None


class AddResult(BaseModel):
    """Outcome of a completed add run."""

    lockfile_path: Path
    added: List[AddedPackage] = Field(default_factory=list)
    written: bool = False
    policy: MergePolicy = MergePolicy.BROAD
