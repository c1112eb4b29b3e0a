"""Repository overview: branches, upstream tracking, HEAD and in-progress operations."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pygit2 import GitError as Pygit2GitError
from pygit2 import Oid
from pygit2.enums import RepositoryState

from gitfrisky.git.errors import GitError
from gitfrisky.git.models import Branch, RepoState, RepoSummary
from gitfrisky.git.utils import open_repository

if TYPE_CHECKING:
	from pygit2 import Branch as Pygit2Branch
	from pygit2 import Repository

logger = logging.getLogger(__name__)

_STATE_MAP = {
	RepositoryState.NONE: RepoState.CLEAN,
	RepositoryState.MERGE: RepoState.MERGE,
	RepositoryState.REVERT: RepoState.REVERT,
	RepositoryState.REVERT_SEQUENCE: RepoState.REVERT,
	RepositoryState.CHERRYPICK: RepoState.CHERRY_PICK,
	RepositoryState.CHERRYPICK_SEQUENCE: RepoState.CHERRY_PICK,
	RepositoryState.BISECT: RepoState.BISECT,
	RepositoryState.REBASE: RepoState.REBASE,
	RepositoryState.REBASE_INTERACTIVE: RepoState.REBASE_INTERACTIVE,
	RepositoryState.REBASE_MERGE: RepoState.REBASE_MERGE,
	RepositoryState.APPLY_MAILBOX: RepoState.APPLY_MAILBOX,
	RepositoryState.APPLY_MAILBOX_OR_REBASE: RepoState.APPLY_MAILBOX,
}


def map_repo_state(state: int) -> RepoState:
	"""Map a libgit2 repository state to RepoState."""
	return _STATE_MAP.get(state, RepoState.CLEAN)


def open_repo(repo_path: str | Path) -> RepoSummary:
	"""
	Summarize a repository.

	Args:
		repo_path: Path to the repository.

	Returns:
		RepoSummary: Local branches with ahead/behind counts, HEAD and state.

	Raises:
		OpenFailedError: If the repository cannot be opened.
		GitError: If branches cannot be listed.

	"""
	with open_repository(repo_path) as repo:
		is_detached = repo.head_is_detached
		head: str | None = None
		if not repo.head_is_unborn:
			head = str(repo.head.target) if is_detached else repo.head.shorthand

		try:
			branches = tuple(
				_to_branch(repo, repo.branches.local[name]) for name in repo.branches.local
			)
		except Pygit2GitError as e:
			msg = f"Failed to list branches: {e}"
			logger.exception(msg)
			raise GitError(msg) from e

		return RepoSummary(
			path=str(repo_path),
			branches=branches,
			head=head,
			is_bare=repo.is_bare,
			is_detached=is_detached,
			state=map_repo_state(repo.state()),
		)


def _to_branch(repo: Repository, branch: Pygit2Branch) -> Branch:
	try:
		upstream = branch.upstream
	except KeyError:
		# configured upstream whose ref is gone
		upstream = None
	ahead = behind = 0
	if upstream is not None and isinstance(branch.target, Oid) and isinstance(upstream.target, Oid):
		ahead, behind = repo.ahead_behind(branch.target, upstream.target)
	return Branch(
		name=branch.branch_name,
		full_name=branch.name,
		is_head=branch.is_head(),
		is_remote=False,
		upstream=upstream.branch_name if upstream is not None else None,
		ahead=ahead,
		behind=behind,
	)
