"""Tests for local enumeration and status collection."""

from __future__ import annotations

import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from sweatshop.completions import local_candidates, write_candidates
from sweatshop.git import GitClient
from sweatshop.models import BranchStatus, WorkspaceCandidate
from sweatshop.report import collect_local, remote_rows


class LocalTreeTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.home = Path(self._tmp.name)
        (self.home / "eng" / "repos" / "alpha").mkdir(parents=True)
        (self.home / "eng" / "repos" / "beta").mkdir(parents=True)
        (self.home / "notes" / "repos" / "ignored").mkdir(parents=True)
        self.feature = self.home / "eng" / "worktrees" / "alpha" / "feature"
        self.feature.mkdir(parents=True)
        (self.feature / ".git").write_text("gitdir: elsewhere\n")
        # a stray directory that is not a worktree
        (self.home / "eng" / "worktrees" / "alpha" / "scratch").mkdir()

    def tearDown(self) -> None:
        self._tmp.cleanup()


class LocalCandidatesTests(LocalTreeTestCase):
    def test_lists_repos_and_worktrees(self) -> None:
        out = io.StringIO()

        write_candidates(local_candidates(self.home), out)

        self.assertEqual(
            out.getvalue().splitlines(),
            [
                "eng/worktrees/alpha/\tnew worktree",
                "eng/worktrees/alpha/feature\texisting worktree",
                "eng/worktrees/beta/\tnew worktree",
            ],
        )

    def test_empty_home(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(local_candidates(Path(tmp)), [])


class CollectLocalTests(LocalTreeTestCase):
    def test_rows_for_existing_worktrees(self) -> None:
        git = mock.create_autospec(GitClient, instance=True)
        git.status_porcelain.return_value = " M a.txt\n?? b.txt"
        git.upstream_counts.return_value = ("origin/feature", 2, 0)
        git.last_commit_date.return_value = "2025-01-02"

        rows = collect_local(self.home, git)

        self.assertEqual(len(rows), 1)
        row = rows[0]
        self.assertEqual(row.repo, "eng/repos/alpha")
        self.assertEqual(row.branch, "feature")
        self.assertEqual(row.dirty, "1M 1?")
        self.assertEqual(row.remote, "↑2 origin/feature")
        self.assertEqual(row.last_commit, "2025-01-02")
        self.assertRegex(row.last_modified, r"^\d{4}-\d{2}-\d{2}$")
        git.status_porcelain.assert_called_once_with(self.feature)

    def test_clean_without_upstream(self) -> None:
        git = mock.create_autospec(GitClient, instance=True)
        git.status_porcelain.return_value = ""
        git.upstream_counts.return_value = None
        git.last_commit_date.return_value = ""

        rows = collect_local(self.home, git)

        self.assertEqual(rows[0].dirty, "clean")
        self.assertEqual(rows[0].remote, "")


class RemoteRowsTests(unittest.TestCase):
    def test_only_existing_worktrees(self) -> None:
        rows = remote_rows(
            [
                WorkspaceCandidate("eng/worktrees/repo/", "remote: new worktree", "box"),
                WorkspaceCandidate("eng/worktrees/repo/fix", "remote: existing worktree", "box"),
            ]
        )

        self.assertEqual(rows, [BranchStatus("box:eng/repos/repo", "fix", "?", "?", "?", "?")])


if __name__ == "__main__":
    unittest.main()
