"""Tests for hunk and file staging and for committing."""

from __future__ import annotations

from contextlib import contextmanager
from unittest.mock import MagicMock, PropertyMock, patch

import pytest
from pygit2.enums import FileMode, RepositoryState

from gitfrisky.git.diff import get_diff
from gitfrisky.git.errors import (
	ApplyFailedError,
	InvalidHunkError,
	NothingToCommitError,
	SigningMissingError,
	StateBlockedError,
)
from gitfrisky.git.history import log
from gitfrisky.git.models import DiffHunk, FileStatus
from gitfrisky.git.staging import commit, stage, stage_hunk, unstage, unstage_hunk
from gitfrisky.git.status import get_status
from tests.base import GitTestBase

TWENTY_LINES = "".join(f"line {n}\n" for n in range(1, 21))
TWO_EDITS = TWENTY_LINES.replace("line 2\n", "two\n").replace("line 18\n", "eighteen\n")


@pytest.mark.git
class TestStageHunk(GitTestBase):
	"""Tests for stage_hunk and unstage_hunk."""

	def test_every_extracted_hunk_applies(self) -> None:
		"""Each hunk from an unchanged surface stages cleanly on its own."""
		self.write("a.txt", TWENTY_LINES)
		self.commit_all("init")
		self.write("a.txt", TWO_EDITS)

		for hunk in reversed(get_diff(self.repo_path, "a.txt")):
			stage_hunk(self.repo_path, "a.txt", hunk)

		assert self.index_entries()["a.txt"][0] == self.blob_id(TWO_EDITS)
		assert get_diff(self.repo_path, "a.txt") == ()

	def test_stage_one_hunk_of_two(self) -> None:
		"""Staging the first hunk leaves the second unstaged."""
		self.write("a.txt", TWENTY_LINES)
		self.commit_all("init")
		self.write("a.txt", TWO_EDITS)
		first, _second = get_diff(self.repo_path, "a.txt")

		stage_hunk(self.repo_path, "a.txt", first)

		assert self.index_entries()["a.txt"][0] == self.blob_id(TWENTY_LINES.replace("line 2\n", "two\n"))
		assert len(get_diff(self.repo_path, "a.txt", staged=True)) == 1
		(remaining,) = get_diff(self.repo_path, "a.txt")
		assert remaining.old_start > first.old_start

	def test_working_directory_untouched(self) -> None:
		"""Staging writes only to the index."""
		self.write("a.txt", TWENTY_LINES)
		self.commit_all("init")
		path = self.write("a.txt", TWO_EDITS)

		stage_hunk(self.repo_path, "a.txt", get_diff(self.repo_path, "a.txt")[0])

		assert path.read_text() == TWO_EDITS

	def test_stage_then_unstage_restores_index(self) -> None:
		"""Unstaging a staged hunk puts back the exact index entry."""
		self.write("a.txt", TWENTY_LINES)
		self.commit_all("init")
		self.write("a.txt", TWO_EDITS)
		before = self.index_entries()

		stage_hunk(self.repo_path, "a.txt", get_diff(self.repo_path, "a.txt")[1])
		assert self.index_entries() != before
		(staged,) = get_diff(self.repo_path, "a.txt", staged=True)
		unstage_hunk(self.repo_path, "a.txt", staged)

		assert self.index_entries() == before

	def test_drifted_hunk_leaves_index_unchanged(self) -> None:
		"""A hunk whose context no longer matches the index is refused."""
		self.write("a.txt", TWENTY_LINES)
		self.commit_all("init")
		self.write("a.txt", TWO_EDITS)
		stale = get_diff(self.repo_path, "a.txt")[0]
		self.write("a.txt", TWENTY_LINES.replace("line 1\n", "drifted\n").replace("line 3\n", "drifted\n"))
		self.add("a.txt")
		before = self.index_entries()

		with pytest.raises(ApplyFailedError):
			stage_hunk(self.repo_path, "a.txt", stale)

		assert self.index_entries() == before

	def test_inconsistent_hunk_rejected(self) -> None:
		"""A hunk whose lines contradict its header never reaches the index."""
		self.write("a.txt", TWENTY_LINES)
		self.commit_all("init")
		self.write("a.txt", TWO_EDITS)
		hunk = get_diff(self.repo_path, "a.txt")[0]
		broken = DiffHunk(hunk.header, hunk.old_start, hunk.old_lines + 1, hunk.new_start, hunk.new_lines, hunk.lines)

		with pytest.raises(InvalidHunkError):
			stage_hunk(self.repo_path, "a.txt", broken)

	def test_stage_untracked_file_hunk(self) -> None:
		"""The hunk of an untracked file adds the file to the index."""
		self.write("a.txt", "a\n")
		self.commit_all("init")
		self.write("new.txt", "hello\nworld\n")
		(hunk,) = get_diff(self.repo_path, "new.txt")

		stage_hunk(self.repo_path, "new.txt", hunk)

		assert self.index_entries()["new.txt"] == (self.blob_id("hello\nworld\n"), FileMode.BLOB)
		assert get_status(self.repo_path).staged[0].status is FileStatus.ADDED

	def test_unstage_new_file_hunk(self) -> None:
		"""Unstaging the only hunk of a newly added file removes it from the index."""
		self.write("a.txt", "a\n")
		self.commit_all("init")
		self.write("new.txt", "hello\n")
		self.add("new.txt")
		(hunk,) = get_diff(self.repo_path, "new.txt", staged=True)

		unstage_hunk(self.repo_path, "new.txt", hunk)

		assert "new.txt" not in self.index_entries()
		assert (self.repo_path / "new.txt").exists()

	def test_stage_and_unstage_deletion_hunk(self) -> None:
		"""A deleted file's hunk stages the deletion, and unstaging brings the entry back."""
		self.write("a.txt", "a\n")
		self.write("gone.txt", "x\ny\n")
		self.commit_all("init")
		before = self.index_entries()
		(self.repo_path / "gone.txt").unlink()
		(hunk,) = get_diff(self.repo_path, "gone.txt")

		stage_hunk(self.repo_path, "gone.txt", hunk)
		assert "gone.txt" not in self.index_entries()

		(staged,) = get_diff(self.repo_path, "gone.txt", staged=True)
		unstage_hunk(self.repo_path, "gone.txt", staged)
		assert self.index_entries() == before

	def test_no_newline_round_trip(self) -> None:
		"""A hunk ending without a newline stages and unstages exactly."""
		self.write("a.txt", "a\nb\n")
		self.commit_all("init")
		self.write("a.txt", "a\nc")
		before = self.index_entries()

		(hunk,) = get_diff(self.repo_path, "a.txt")
		stage_hunk(self.repo_path, "a.txt", hunk)
		assert self.index_entries()["a.txt"][0] == self.blob_id("a\nc")

		(staged,) = get_diff(self.repo_path, "a.txt", staged=True)
		unstage_hunk(self.repo_path, "a.txt", staged)
		assert self.index_entries() == before

	def test_old_side_without_final_newline_round_trip(self) -> None:
		"""Extending a file that lacked a final newline stages and unstages exactly."""
		self.write("a.txt", "a\nb")
		self.commit_all("init")
		self.write("a.txt", "a\nb\nc\n")
		before = self.index_entries()

		(hunk,) = get_diff(self.repo_path, "a.txt")
		stage_hunk(self.repo_path, "a.txt", hunk)
		assert self.index_entries()["a.txt"][0] == self.blob_id("a\nb\nc\n")

		(staged,) = get_diff(self.repo_path, "a.txt", staged=True)
		unstage_hunk(self.repo_path, "a.txt", staged)
		assert self.index_entries() == before


@pytest.mark.git
class TestStageFiles(GitTestBase):
	"""Tests for whole-file stage and unstage."""

	def test_stage_and_unstage_modification(self) -> None:
		"""Unstaging resets the entry to the last commit."""
		self.write("a.txt", "a\n")
		self.commit_all("init")
		before = self.index_entries()
		self.write("a.txt", "b\n")

		stage(self.repo_path, ["a.txt"])
		assert self.index_entries()["a.txt"][0] == self.blob_id("b\n")

		unstage(self.repo_path, ["a.txt"])
		assert self.index_entries() == before

	def test_stage_deletion(self) -> None:
		"""Staging a file missing from disk stages its deletion."""
		self.write("a.txt", "a\n")
		self.write("b.txt", "b\n")
		self.commit_all("init")
		(self.repo_path / "b.txt").unlink()

		stage(self.repo_path, ["b.txt"])

		status = get_status(self.repo_path)
		assert [(change.path, change.status) for change in status.staged] == [("b.txt", FileStatus.DELETED)]

	def test_unstage_new_file(self) -> None:
		"""A file with no counterpart in the last commit leaves the index."""
		self.write("a.txt", "a\n")
		self.commit_all("init")
		self.write("new.txt", "n\n")
		stage(self.repo_path, ["new.txt"])

		unstage(self.repo_path, ["new.txt"])

		assert "new.txt" not in self.index_entries()

	def test_unstage_in_unborn_repository(self) -> None:
		"""Without commits, unstaging removes the entry."""
		self.write("a.txt", "a\n")
		stage(self.repo_path, ["a.txt"])

		unstage(self.repo_path, ["a.txt"])

		assert self.index_entries() == {}


@pytest.mark.git
class TestCommit(GitTestBase):
	"""Tests for commit."""

	def test_commit_staged_changes(self) -> None:
		"""The created commit sits on HEAD with the previous commit as parent."""
		self.write("a.txt", "a\n")
		parent = self.commit_all("init")
		self.write("a.txt", "b\n")
		stage(self.repo_path, ["a.txt"])

		created = commit(self.repo_path, "Update a\n\nLonger body")

		assert created.summary == "Update a"
		assert created.author == "Test User"
		assert created.parents == (parent,)
		assert created.message is None
		assert log(self.repo_path, limit=1)[0].id == created.id
		assert get_status(self.repo_path).staged == ()

	def test_first_commit_has_no_parents(self) -> None:
		"""Committing in an unborn repository creates a root commit."""
		self.write("a.txt", "a\n")
		stage(self.repo_path, ["a.txt"])

		created = commit(self.repo_path, "init")

		assert created.parents == ()
		assert not self.open().head_is_unborn

	def test_nothing_to_commit(self) -> None:
		"""An index equal to HEAD is refused."""
		self.write("a.txt", "a\n")
		self.commit_all("init")
		self.write("a.txt", "unstaged\n")

		with pytest.raises(NothingToCommitError):
			commit(self.repo_path, "empty")

	def test_blocked_during_merge(self) -> None:
		"""A merge in progress blocks the commit."""
		self.write("a.txt", "a\n")
		head = self.commit_all("init")
		self.write("a.txt", "b\n")
		stage(self.repo_path, ["a.txt"])
		(self.repo_path / ".git" / "MERGE_HEAD").write_text(f"{head}\n")

		with pytest.raises(StateBlockedError, match="merge"):
			commit(self.repo_path, "during merge")

	def test_missing_identity(self) -> None:
		"""Without a configured author the commit fails instead of inventing one."""
		repo = MagicMock()
		repo.state.return_value = RepositoryState.NONE
		type(repo).default_signature = PropertyMock(side_effect=KeyError("user.name"))

		@contextmanager
		def fake_open(_path):
			yield repo

		with (
			patch("gitfrisky.git.staging.open_repository", fake_open),
			pytest.raises(SigningMissingError),
		):
			commit(self.repo_path, "no identity")
		repo.create_commit.assert_not_called()
