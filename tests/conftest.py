"""Test configuration and fixtures for lockpatch"""

from pathlib import Path

import pytest

from lockfile_fixtures import LEFTPAD_RECORD, ROOT_RECORD, StubResolver, make_lock, write_json
from lockpatch.constants import LOCKFILE_NAME, MANIFEST_NAME


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project with package.json and a lockfile holding only the root entry."""
    write_json(tmp_path / MANIFEST_NAME, ROOT_RECORD)
    write_json(tmp_path / LOCKFILE_NAME, make_lock({}))
    return tmp_path


@pytest.fixture
def leftpad_resolver() -> StubResolver:
    """Resolver whose only known package is leftpad 1.3.0 with no dependencies."""
    return StubResolver({"leftpad": {"node_modules/leftpad": dict(LEFTPAD_RECORD)}})
