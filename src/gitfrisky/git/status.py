"""Classify changed paths into staged and unstaged buckets."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pygit2 import GitError as Pygit2GitError
from pygit2.enums import FileStatus as GitStatus

from gitfrisky.git.diff import diff_file
from gitfrisky.git.errors import GitError, ReadFailedError
from gitfrisky.git.models import FileChange, FileStatus, LineType, StatusPayload
from gitfrisky.git.utils import open_repository

if TYPE_CHECKING:
	from pygit2 import Repository

logger = logging.getLogger(__name__)

# Checked in order, first match wins
STAGED_FLAGS = (
	(GitStatus.INDEX_NEW, FileStatus.ADDED),
	(GitStatus.INDEX_MODIFIED, FileStatus.MODIFIED),
	(GitStatus.INDEX_DELETED, FileStatus.DELETED),
	(GitStatus.INDEX_RENAMED, FileStatus.RENAMED),
)

UNSTAGED_FLAGS = (
	(GitStatus.WT_NEW, FileStatus.UNTRACKED),
	(GitStatus.WT_MODIFIED, FileStatus.MODIFIED),
	(GitStatus.WT_DELETED, FileStatus.DELETED),
	(GitStatus.WT_RENAMED, FileStatus.RENAMED),
)


def classify(flags: int, table: tuple[tuple[GitStatus, FileStatus], ...]) -> FileStatus | None:
	"""Return the status of the first flag in ``table`` that is set in ``flags``."""
	for flag, status in table:
		if flags & flag:
			return status
	return None


def get_status(repo_path: str | Path, *, with_counts: bool = False) -> StatusPayload:
	"""
	Get the staged and unstaged changes of a repository.

	Untracked files are included, recursing into untracked directories. A path may
	appear in both buckets when it is partially staged. Conflicted paths are added
	to the unstaged bucket as well.

	Args:
		repo_path: Path to the repository.
		with_counts: Derive added/deleted line counts from each file's diff. When
			False the counts are left unset.

	Returns:
		StatusPayload: The classified changes.

	Raises:
		OpenFailedError: If the repository cannot be opened.
		GitError: If the status cannot be computed.
		DiffFailedError: If counts are requested and a diff fails.

	"""
	with open_repository(repo_path) as repo:
		try:
			statuses = repo.status(untracked_files="all")
		except Pygit2GitError as e:
			msg = f"Failed to get repository status: {e}"
			logger.exception(msg)
			raise GitError(msg) from e

		staged: list[FileChange] = []
		unstaged: list[FileChange] = []
		for path, flags in statuses.items():
			staged_status = classify(flags, STAGED_FLAGS)
			if staged_status is not None:
				staged.append(_change(repo, path, staged_status, staged=True, with_counts=with_counts))

			unstaged_status = classify(flags, UNSTAGED_FLAGS)
			if unstaged_status is not None:
				unstaged.append(_change(repo, path, unstaged_status, staged=False, with_counts=with_counts))

			if flags & GitStatus.CONFLICTED:
				unstaged.append(FileChange(path=path, status=FileStatus.CONFLICTED))

		logger.debug("Status: %d staged, %d unstaged", len(staged), len(unstaged))
		return StatusPayload(staged=tuple(staged), unstaged=tuple(unstaged))


def _change(repo: Repository, path: str, status: FileStatus, *, staged: bool, with_counts: bool) -> FileChange:
	if not with_counts:
		return FileChange(path=path, status=status)

	try:
		hunks = diff_file(repo, path, staged=staged)
	except ReadFailedError:
		logger.warning("Cannot read %s; leaving its line counts unset", path)
		return FileChange(path=path, status=status)
	return FileChange(
		path=path,
		status=status,
		additions=sum(hunk.count(LineType.ADDITION) for hunk in hunks),
		deletions=sum(hunk.count(LineType.DELETION) for hunk in hunks),
	)
