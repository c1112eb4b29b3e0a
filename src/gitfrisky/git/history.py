"""Commit history across every branch tip."""

from __future__ import annotations

import logging
from itertools import islice
from pathlib import Path
from typing import TYPE_CHECKING

from pygit2 import GitError as Pygit2GitError
from pygit2 import Oid
from pygit2.enums import SortMode

from gitfrisky.git.errors import GitError
from gitfrisky.git.models import Commit
from gitfrisky.git.utils import open_repository

if TYPE_CHECKING:
	from pygit2 import Commit as Pygit2Commit
	from pygit2 import Repository

logger = logging.getLogger(__name__)

DEFAULT_LOG_LIMIT = 500


def first_line(message: str | None) -> str:
	"""Return the first line of a commit message."""
	if not message:
		return ""
	lines = message.strip().splitlines()
	return lines[0].strip() if lines else ""


def log(repo_path: str | Path, limit: int = DEFAULT_LOG_LIMIT) -> tuple[Commit, ...]:
	"""
	List commits reachable from all local and remote branches, newest first.

	Args:
		repo_path: Path to the repository.
		limit: Maximum number of commits to return.

	Returns:
		Up to ``limit`` commits in time order. Empty when the repository has no commits.

	Raises:
		OpenFailedError: If the repository cannot be opened.
		GitError: If the history cannot be walked.

	"""
	with open_repository(repo_path) as repo:
		roots = _branch_tips(repo)
		if not roots and not repo.head_is_unborn:
			roots = [repo.head.target]
		if not roots or limit <= 0:
			return ()

		try:
			walker = repo.walk(roots[0], SortMode.TIME)
			for oid in roots[1:]:
				walker.push(oid)
			commits = tuple(_to_commit(commit) for commit in islice(walker, limit))
		except Pygit2GitError as e:
			msg = f"Failed to walk commit history: {e}"
			logger.exception(msg)
			raise GitError(msg) from e

		logger.debug("Read %d commits from %d roots", len(commits), len(roots))
		return commits


def _branch_tips(repo: Repository) -> list[Oid]:
	"""Collect the commit ids of local and remote branch tips, skipping symbolic refs."""
	tips: list[Oid] = []
	for branches in (repo.branches.local, repo.branches.remote):
		for name in branches:
			target = branches[name].target
			if isinstance(target, Oid) and target not in tips:
				tips.append(target)
	return tips


def _to_commit(commit: Pygit2Commit) -> Commit:
	author = commit.author
	return Commit(
		id=str(commit.id),
		author=author.name or "Unknown",
		email=author.email or "",
		timestamp=commit.commit_time,
		summary=first_line(commit.message),
		message=commit.message,
		parents=tuple(str(parent) for parent in commit.parent_ids),
	)
