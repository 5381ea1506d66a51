"""Unit tests for the scratch workspace lifecycle."""

import logging
import os
import shutil

import pytest

from lockfile_fixtures import make_lock
from lockpatch.constants import WORKSPACE_DIR_NAME
from lockpatch.exceptions import LockfileIOError, PreconditionError
from lockpatch.lockfile_core import PackageLock
from lockpatch.services import ScratchWorkspace, require_project_files


@pytest.mark.unit
class TestScratchWorkspace:
    @pytest.mark.asyncio
    async def test_copies_project_files_and_removes_them(self, project_dir):
        async with ScratchWorkspace(project_dir) as workspace:
            assert workspace.path == project_dir / WORKSPACE_DIR_NAME
            assert workspace.manifest_path.read_text() == (project_dir / "package.json").read_text()
            assert workspace.lockfile_path.read_text() == (
                project_dir / "package-lock.json"
            ).read_text()
            assert not (workspace.path / ".npmrc").exists()

        assert not (project_dir / WORKSPACE_DIR_NAME).exists()

    @pytest.mark.asyncio
    async def test_removed_when_body_raises(self, project_dir):
        with pytest.raises(RuntimeError):
            async with ScratchWorkspace(project_dir):
                raise RuntimeError("boom")

        assert not (project_dir / WORKSPACE_DIR_NAME).exists()

    @pytest.mark.asyncio
    async def test_npmrc_copied(self, project_dir):
        (project_dir / ".npmrc").write_text("registry=https://npm.example.com/\n")

        async with ScratchWorkspace(project_dir) as workspace:
            assert (workspace.path / ".npmrc").read_text() == "registry=https://npm.example.com/\n"

    @pytest.mark.asyncio
    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="needs symlinks")
    async def test_symlinked_npmrc_copied_as_regular_file(self, project_dir, tmp_path_factory):
        real = tmp_path_factory.mktemp("home") / "npmrc"
        real.write_text("//npm.example.com/:_authToken=secret\n")
        (project_dir / ".npmrc").symlink_to(real)

        async with ScratchWorkspace(project_dir) as workspace:
            copied = workspace.path / ".npmrc"
            assert not copied.is_symlink()
            assert copied.read_text() == "//npm.example.com/:_authToken=secret\n"

    @pytest.mark.asyncio
    async def test_npmrc_failure_is_only_a_warning(self, project_dir, caplog):
        # A directory named .npmrc cannot be read as text
        (project_dir / ".npmrc").mkdir()

        with caplog.at_level(logging.WARNING, logger="lockpatch"):
            async with ScratchWorkspace(project_dir) as workspace:
                assert workspace.lockfile_path.exists()

        assert "Failed to copy .npmrc file" in caplog.text

    @pytest.mark.asyncio
    async def test_existing_directory_is_reused_with_warning(self, project_dir, caplog):
        leftover = project_dir / WORKSPACE_DIR_NAME
        leftover.mkdir()
        (leftover / "stale.txt").write_text("old")

        with caplog.at_level(logging.WARNING, logger="lockpatch"):
            async with ScratchWorkspace(project_dir) as workspace:
                assert workspace.lockfile_path.exists()

        assert "already exists" in caplog.text
        assert not leftover.exists()

    def test_missing_manifest_raises_io_error(self, project_dir):
        (project_dir / "package.json").unlink()
        workspace = ScratchWorkspace(project_dir)

        with pytest.raises(LockfileIOError, match="Failed to prepare workspace"):
            workspace.create()
        workspace.cleanup()

    @pytest.mark.asyncio
    async def test_removed_when_copy_fails_on_enter(self, project_dir):
        (project_dir / "package.json").unlink()
        (project_dir / "package.json").mkdir()

        with pytest.raises(LockfileIOError, match="Failed to prepare workspace"):
            async with ScratchWorkspace(project_dir):
                pytest.fail("body should not run")

        assert not (project_dir / WORKSPACE_DIR_NAME).exists()

    def test_cleanup_failure_is_logged_not_raised(self, project_dir, monkeypatch, caplog):
        workspace = ScratchWorkspace(project_dir)
        workspace.create()

        def failing_rmtree(path, *args, **kwargs):
            raise PermissionError(f"cannot remove {path}")

        monkeypatch.setattr(shutil, "rmtree", failing_rmtree)
        with caplog.at_level(logging.WARNING, logger="lockpatch"):
            workspace.cleanup()

        assert "Failed to remove workspace" in caplog.text
        monkeypatch.undo()
        workspace.cleanup()

    def test_cleanup_of_missing_directory_is_silent(self, project_dir, caplog):
        with caplog.at_level(logging.WARNING, logger="lockpatch"):
            ScratchWorkspace(project_dir).cleanup()
        assert caplog.text == ""

    def test_intermediate_lockfile_round_trip(self, project_dir):
        workspace = ScratchWorkspace(project_dir)
        workspace.create()
        try:
            lock = PackageLock(make_lock({"node_modules/a": {"version": "1.0.0"}}))
            workspace.write_lockfile(lock)
            assert workspace.read_lockfile() == lock
            # The project's own lockfile is untouched
            assert "node_modules/a" not in PackageLock.load(project_dir / "package-lock.json").packages
        finally:
            workspace.cleanup()


class TestRequireProjectFiles:
    def test_passes_with_both_files(self, project_dir):
        require_project_files(project_dir)

    @pytest.mark.parametrize("missing", ["package-lock.json", "package.json"])
    def test_missing_file(self, project_dir, missing):
        (project_dir / missing).unlink()
        with pytest.raises(PreconditionError, match=f"{missing} not found"):
            require_project_files(project_dir)
