"""Repository handle helpers shared by the git operations."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from pygit2 import Commit, GitError as Pygit2GitError, Repository, Tree

from gitfrisky.git.errors import GitError, OpenFailedError

if TYPE_CHECKING:
	from collections.abc import Iterator

	from pygit2 import Oid

logger = logging.getLogger(__name__)


@contextmanager
def open_repository(repo_path: str | Path) -> Iterator[Repository]:
	"""
	Open a repository for the duration of a single operation.

	Args:
		repo_path: Path to the repository (working directory or git dir).

	Yields:
		Repository: An open pygit2 repository, released on exit.

	Raises:
		OpenFailedError: If no repository can be opened at the path.

	"""
	try:
		repo = Repository(str(repo_path))
	except (Pygit2GitError, KeyError, OSError) as e:
		msg = f"Failed to open repository at {repo_path}: {e}"
		logger.error(msg)
		raise OpenFailedError(msg) from e
	try:
		yield repo
	finally:
		repo.free()


def get_workdir(repo: Repository) -> Path:
	"""Return the working directory of a non-bare repository."""
	if repo.workdir is None:
		msg = f"Repository at {repo.path} is bare and has no working directory"
		raise GitError(msg)
	return Path(repo.workdir)


def get_head_commit(repo: Repository) -> Commit | None:
	"""Return the commit HEAD points to, or None for an unborn repository."""
	if repo.head_is_unborn:
		return None
	return repo.head.peel(Commit)


def get_head_tree(repo: Repository) -> Tree | None:
	"""Return the tree of the last commit, or None for an unborn repository."""
	commit = get_head_commit(repo)
	return commit.tree if commit is not None else None


def get_empty_tree(repo: Repository) -> Tree:
	"""Return the empty tree, writing it to the object database if needed."""
	oid: Oid = repo.TreeBuilder().write()
	return repo[oid].peel(Tree)
