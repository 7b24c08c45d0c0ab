"""Tests for the workspace picker."""

from __future__ import annotations

import unittest
from unittest import mock

from sweatshop import interactive
from sweatshop.exceptions import PathFormatError
from sweatshop.models import WorkspaceCandidate

NEW = WorkspaceCandidate("eng/worktrees/repo/", "new worktree")
EXISTING = WorkspaceCandidate("eng/worktrees/repo/feature", "remote: existing worktree", "box")


class BuildCandidateChoicesTests(unittest.TestCase):
    def test_existing_first(self) -> None:
        choices = interactive.build_candidate_choices([NEW, EXISTING])

        self.assertEqual([choice.value for choice in choices], [EXISTING, NEW])
        self.assertEqual(choices[0].name, "box:eng/worktrees/repo/feature · remote: existing worktree")


class PromptWorkspaceTests(unittest.TestCase):
    def test_existing_selection_returns_target(self) -> None:
        with mock.patch.object(interactive, "fuzzy_select", return_value=EXISTING):
            self.assertEqual(interactive.prompt_workspace([EXISTING]), "box:eng/worktrees/repo/feature")

    def test_new_slot_asks_for_branch(self) -> None:
        with mock.patch.object(interactive, "fuzzy_select", return_value=NEW), mock.patch.object(
            interactive, "text_input", return_value="fix-bug"
        ):
            self.assertEqual(interactive.prompt_workspace([NEW]), "eng/worktrees/repo/fix-bug")

    def test_nested_branch_rejected(self) -> None:
        with mock.patch.object(interactive, "fuzzy_select", return_value=NEW), mock.patch.object(
            interactive, "text_input", return_value="a/b"
        ):
            with self.assertRaises(PathFormatError):
                interactive.prompt_workspace([NEW])


if __name__ == "__main__":
    unittest.main()
