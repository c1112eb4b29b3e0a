"""Stage and unstage changes in the index, by hunk or by whole file, and commit them."""

from __future__ import annotations

import logging
import stat
from pathlib import Path
from typing import TYPE_CHECKING

from pygit2 import Diff, IndexEntry
from pygit2 import GitError as Pygit2GitError
from pygit2.enums import ApplyLocation, FileMode, RepositoryState

from gitfrisky.git.errors import (
	ApplyFailedError,
	IndexUpdateError,
	NothingToCommitError,
	SigningMissingError,
	StateBlockedError,
)
from gitfrisky.git.history import first_line
from gitfrisky.git.models import Commit
from gitfrisky.git.patch import synthesize_patch
from gitfrisky.git.summary import map_repo_state
from gitfrisky.git.utils import (
	get_empty_tree,
	get_head_commit,
	get_head_tree,
	get_workdir,
	open_repository,
)

if TYPE_CHECKING:
	from collections.abc import Iterable

	from pygit2 import Object, Repository, Tree

	from gitfrisky.git.models import DiffHunk

logger = logging.getLogger(__name__)


def stage_hunk(repo_path: str | Path, file_path: str, hunk: DiffHunk) -> None:
	"""
	Apply one hunk of the unstaged diff to the index.

	The working directory is never touched.

	Args:
		repo_path: Path to the repository.
		file_path: File path relative to the repository root.
		hunk: A hunk from the index-vs-workdir diff of ``file_path``.

	Raises:
		OpenFailedError: If the repository cannot be opened.
		InvalidHunkError: If the hunk is structurally inconsistent.
		ApplyFailedError: If the hunk no longer matches the index.

	"""
	file_path = Path(file_path).as_posix()
	with open_repository(repo_path) as repo:
		index = repo.index
		new_file_mode = deleted_file_mode = None
		if hunk.creates_file and file_path not in index:
			new_file_mode = _workdir_mode(get_workdir(repo) / file_path)
		elif hunk.removes_file and file_path in index and not _exists(get_workdir(repo) / file_path):
			deleted_file_mode = index[file_path].mode

		patch = synthesize_patch(
			file_path,
			hunk,
			new_file_mode=new_file_mode,
			deleted_file_mode=deleted_file_mode,
		)
		_apply_to_index(repo, patch, file_path)
		logger.info("Staged hunk %s of %s", hunk.header, file_path)


def unstage_hunk(repo_path: str | Path, file_path: str, hunk: DiffHunk) -> None:
	"""
	Remove one hunk of the staged diff from the index by applying its inverse.

	Args:
		repo_path: Path to the repository.
		file_path: File path relative to the repository root.
		hunk: A hunk from the tree-vs-index diff of ``file_path``.

	Raises:
		OpenFailedError: If the repository cannot be opened.
		InvalidHunkError: If the hunk is structurally inconsistent.
		ApplyFailedError: If the hunk no longer matches the index.

	"""
	file_path = Path(file_path).as_posix()
	with open_repository(repo_path) as repo:
		index = repo.index
		head_entry = _tree_entry(get_head_tree(repo), file_path)
		new_file_mode = deleted_file_mode = None
		if hunk.creates_file and head_entry is None and file_path in index:
			deleted_file_mode = index[file_path].mode
		elif hunk.removes_file and file_path not in index:
			new_file_mode = head_entry.filemode if head_entry is not None else FileMode.BLOB

		patch = synthesize_patch(
			file_path,
			hunk,
			reverse=True,
			new_file_mode=new_file_mode,
			deleted_file_mode=deleted_file_mode,
		)
		_apply_to_index(repo, patch, file_path)
		logger.info("Unstaged hunk %s of %s", hunk.header, file_path)


def stage(repo_path: str | Path, paths: Iterable[str]) -> None:
	"""
	Stage whole files.

	Existing files are added to the index. A file that no longer exists on disk but
	is still in the index has its deletion staged.

	Raises:
		OpenFailedError: If the repository cannot be opened.
		IndexUpdateError: If a path cannot be added or the index cannot be written.

	"""
	with open_repository(repo_path) as repo:
		workdir = get_workdir(repo)
		index = repo.index
		try:
			for path in paths:
				path = Path(path).as_posix()
				if not _exists(workdir / path) and path in index:
					index.remove(path)
					logger.debug("Staged deletion of %s", path)
				else:
					index.add(path)
					logger.debug("Staged %s", path)
			index.write()
		except (Pygit2GitError, KeyError, OSError) as e:
			msg = f"Failed to stage files: {e}"
			logger.exception(msg)
			raise IndexUpdateError(msg) from e


def unstage(repo_path: str | Path, paths: Iterable[str]) -> None:
	"""
	Unstage whole files.

	Each index entry is reset to the blob and mode of the last commit. Paths with no
	counterpart in the last commit, or any path in an unborn repository, are removed
	from the index.

	Raises:
		OpenFailedError: If the repository cannot be opened.
		IndexUpdateError: If the index cannot be updated or written.

	"""
	with open_repository(repo_path) as repo:
		head_tree = get_head_tree(repo)
		index = repo.index
		try:
			for path in paths:
				path = Path(path).as_posix()
				entry = _tree_entry(head_tree, path)
				if entry is not None:
					index.add(IndexEntry(path, entry.id, entry.filemode))
					logger.debug("Reset %s to last commit", path)
				elif path in index:
					index.remove(path)
					logger.debug("Removed %s from index", path)
				else:
					logger.warning("Skipping %s: not in index or last commit", path)
			index.write()
		except (Pygit2GitError, KeyError, OSError) as e:
			msg = f"Failed to unstage files: {e}"
			logger.exception(msg)
			raise IndexUpdateError(msg) from e


def commit(repo_path: str | Path, message: str) -> Commit:
	"""
	Commit the index on top of HEAD.

	Args:
		repo_path: Path to the repository.
		message: The commit message.

	Returns:
		The created commit, without its full message.

	Raises:
		OpenFailedError: If the repository cannot be opened.
		StateBlockedError: If a merge, rebase or similar operation is in progress.
		SigningMissingError: If no author identity is configured.
		NothingToCommitError: If nothing is staged.
		IndexUpdateError: If the tree or commit cannot be written.

	"""
	with open_repository(repo_path) as repo:
		state = repo.state()
		if state != RepositoryState.NONE:
			msg = f"Cannot commit during {map_repo_state(state).value}. Please complete or abort the current operation."
			raise StateBlockedError(msg)

		try:
			signature = repo.default_signature
		except (Pygit2GitError, KeyError) as e:
			msg = "No author identity configured. Set user.name and user.email in git config."
			raise SigningMissingError(msg) from e

		head = get_head_commit(repo)
		index = repo.index
		base_tree = head.tree if head is not None else get_empty_tree(repo)
		if len(base_tree.diff_to_index(index)) == 0:
			msg = "Nothing to commit - no changes staged"
			raise NothingToCommitError(msg)

		parents = [head.id] if head is not None else []
		try:
			tree_id = index.write_tree()
			oid = repo.create_commit("HEAD", signature, signature, message, tree_id, parents)
		except Pygit2GitError as e:
			msg = f"Failed to create commit: {e}"
			logger.exception(msg)
			raise IndexUpdateError(msg) from e

		created = repo.get(oid)
		logger.info("Created commit %s with message: %s", oid, first_line(message))
		return Commit(
			id=str(oid),
			author=signature.name,
			email=signature.email,
			timestamp=created.commit_time,
			summary=first_line(message),
			parents=tuple(str(parent) for parent in parents),
		)


def _apply_to_index(repo: Repository, patch: str, file_path: str) -> None:
	"""Apply a patch to the index, refusing it when its preimage does not match."""
	logger.debug("Applying patch to index:\n%s", patch)
	try:
		diff = Diff.parse_diff(patch)
		if not repo.applies(diff, ApplyLocation.INDEX):
			msg = f"Patch does not apply to the index for {file_path}: the file changed since the hunk was computed"
			logger.error(msg)
			raise ApplyFailedError(msg)
		repo.apply(diff, ApplyLocation.INDEX)
	except Pygit2GitError as e:
		msg = f"Failed to apply patch to the index for {file_path}: {e}"
		logger.exception(msg)
		raise ApplyFailedError(msg) from e


def _tree_entry(tree: Tree | None, path: str) -> Object | None:
	if tree is None:
		return None
	try:
		return tree[path]
	except KeyError:
		return None


def _exists(path: Path) -> bool:
	return path.exists() or path.is_symlink()


def _workdir_mode(path: Path) -> int:
	"""Index mode for a new file from the working directory."""
	try:
		mode = path.lstat().st_mode
	except OSError:
		return FileMode.BLOB
	if stat.S_ISLNK(mode):
		return FileMode.LINK
	if mode & stat.S_IXUSR:
		return FileMode.BLOB_EXECUTABLE
	return FileMode.BLOB
