"""Tests for merging a workspace back into its repository."""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from sweatshop.config import SweatshopConfig
from sweatshop.exceptions import ExternalCommandError, PathFormatError, WorkspaceLookupError
from sweatshop.git import GitClient, run_git
from sweatshop.merge import MergeCoordinator
from sweatshop.session import ZmxSession
from sweatshop.workspace import WorkspaceManager


class MergeCoordinatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.home = Path(self._tmp.name)
        self.repo = self.home / "eng" / "repos" / "myrepo"
        self.worktree = self.home / "eng" / "worktrees" / "myrepo" / "feature"
        self.repo.mkdir(parents=True)
        self.worktree.mkdir(parents=True)
        self.git = mock.create_autospec(GitClient, instance=True)
        self.session = mock.create_autospec(ZmxSession, instance=True)
        self.coordinator = MergeCoordinator(
            SweatshopConfig(home=self.home), git=self.git, session=self.session
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_success_removes_and_detaches(self) -> None:
        removed = self.coordinator.run(self.worktree)

        self.assertEqual(removed, self.worktree)
        self.git.merge_no_ff.assert_called_once_with(self.repo, "feature")
        self.git.worktree_remove.assert_called_once_with(self.repo, self.worktree)
        self.session.detach.assert_called_once_with()

    def test_subdirectory_removes_whole_workspace(self) -> None:
        subdir = self.worktree / "src" / "pkg"
        subdir.mkdir(parents=True)

        self.coordinator.run(subdir)

        self.git.worktree_remove.assert_called_once_with(self.repo, self.worktree)

    def test_failed_merge_keeps_workspace(self) -> None:
        self.git.merge_no_ff.side_effect = ExternalCommandError(["git", "merge"], 1)

        with self.assertLogs("sweatshop.merge", level="ERROR"):
            with self.assertRaises(ExternalCommandError):
                self.coordinator.run(self.worktree)

        self.git.worktree_remove.assert_not_called()
        self.session.detach.assert_not_called()

    def test_outside_home(self) -> None:
        with tempfile.TemporaryDirectory() as other:
            with self.assertRaises(WorkspaceLookupError):
                self.coordinator.run(Path(other))

    def test_home_itself_is_rejected(self) -> None:
        with self.assertRaises(WorkspaceLookupError):
            self.coordinator.run(self.home)

    def test_not_a_worktree_directory(self) -> None:
        with self.assertRaises(PathFormatError):
            self.coordinator.run(self.repo)

    def test_missing_repository(self) -> None:
        shutil.rmtree(self.repo)

        with self.assertRaises(WorkspaceLookupError):
            self.coordinator.run(self.worktree)

        self.git.merge_no_ff.assert_not_called()


@unittest.skipUnless(shutil.which("git"), "git is not installed")
class MergeWithGitTests(unittest.TestCase):
    """Round trip through a real repository: create, commit, merge."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.home = Path(self._tmp.name)
        env = {
            "GIT_AUTHOR_NAME": "Test",
            "GIT_AUTHOR_EMAIL": "test@example.com",
            "GIT_COMMITTER_NAME": "Test",
            "GIT_COMMITTER_EMAIL": "test@example.com",
            "GIT_CONFIG_NOSYSTEM": "1",
            "GIT_CONFIG_GLOBAL": os.devnull,
            "GIT_MERGE_AUTOEDIT": "no",
        }
        patcher = mock.patch.dict(os.environ, env)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.repo = self.home / "eng" / "repos" / "myrepo"
        self.repo.mkdir(parents=True)
        run_git(["init", "-q"], cwd=self.repo)
        self._commit(self.repo, "README", "hello\n")

        self.worktree = self.home / "eng" / "worktrees" / "myrepo" / "feature"
        git = GitClient()
        self.session = mock.create_autospec(ZmxSession, instance=True)
        WorkspaceManager(self.home, git).create("eng", self.repo, self.worktree)
        self.coordinator = MergeCoordinator(
            SweatshopConfig(home=self.home), git=git, session=self.session
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _commit(self, cwd: Path, name: str, content: str) -> None:
        (cwd / name).write_text(content)
        run_git(["add", name], cwd=cwd)
        run_git(["commit", "-q", "-m", f"update {name}"], cwd=cwd)

    def _registered_worktrees(self) -> str:
        return run_git(["worktree", "list", "--porcelain"], cwd=self.repo).stdout

    def test_successful_merge_removes_worktree(self) -> None:
        self._commit(self.worktree, "feature.txt", "feature\n")

        self.coordinator.run(self.worktree)

        self.assertFalse(self.worktree.exists())
        self.assertNotIn(str(self.worktree.resolve()), self._registered_worktrees())
        self.assertTrue((self.repo / "feature.txt").exists())
        self.session.detach.assert_called_once_with()

    def test_conflicting_merge_keeps_worktree(self) -> None:
        self._commit(self.worktree, "README", "from feature\n")
        self._commit(self.repo, "README", "from main\n")

        with self.assertRaises(ExternalCommandError):
            self.coordinator.run(self.worktree)

        self.assertTrue(self.worktree.is_dir())
        self.assertEqual((self.worktree / "README").read_text(), "from feature\n")
        self.assertIn(str(self.worktree.resolve()), self._registered_worktrees())
        self.session.detach.assert_not_called()
        subprocess.run(["git", "merge", "--abort"], cwd=self.repo, check=False)


if __name__ == "__main__":
    unittest.main()
