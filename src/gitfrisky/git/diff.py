"""Structured per-file diffs between the last commit, the index and the working directory."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

from pygit2 import GitError as Pygit2GitError
from pygit2.enums import DiffOption

from gitfrisky.git.errors import DiffFailedError, ReadFailedError
from gitfrisky.git.models import DiffHunk, DiffLine, LineType
from gitfrisky.git.utils import get_empty_tree, get_head_tree, get_workdir, open_repository

if TYPE_CHECKING:
	from collections.abc import Iterable, Iterator

	from pygit2 import Diff, Repository

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_LINES = 3

# libgit2 origins for the "\ No newline at end of file" marker that follows a line.
# They are not lines of either side, so they never become DiffLines or move a counter.
_EOFNL_ORIGINS = frozenset({"=", ">", "<"})


class _HunkStart(NamedTuple):
	header: str
	old_start: int
	old_lines: int
	new_start: int
	new_lines: int


class _LineEvent(NamedTuple):
	origin: str
	content: str


def get_diff(
	repo_path: str | Path,
	rel_path: str,
	staged: bool = False,
	context_lines: int = DEFAULT_CONTEXT_LINES,
) -> tuple[DiffHunk, ...]:
	"""
	Get the hunks of a single file.

	Args:
		repo_path: Path to the repository.
		rel_path: File path relative to the repository root.
		staged: If True, diff the last commit against the index; otherwise diff the
			index against the working directory.
		context_lines: Number of context lines around each change.

	Returns:
		The hunks in file order. Empty when the file has no changes on that surface.

	Raises:
		OpenFailedError: If the repository cannot be opened.
		ReadFailedError: If an untracked file cannot be read.
		DiffFailedError: If libgit2 fails to compute the diff.

	"""
	logger.debug("get_diff called with rel_path: '%s', staged: %s", rel_path, staged)
	with open_repository(repo_path) as repo:
		return diff_file(repo, rel_path, staged=staged, context_lines=context_lines)


def diff_file(
	repo: Repository,
	rel_path: str,
	*,
	staged: bool = False,
	context_lines: int = DEFAULT_CONTEXT_LINES,
) -> tuple[DiffHunk, ...]:
	"""Same as :func:`get_diff`, on an already open repository."""
	rel_path = Path(rel_path).as_posix()
	if not staged and rel_path not in repo.index:
		return _untracked_file_diff(get_workdir(repo) / rel_path)

	try:
		diff = _surface_diff(repo, staged=staged, context_lines=context_lines)
		return _fold_hunks(_iter_diff_events(diff, rel_path))
	except Pygit2GitError as e:
		msg = f"Failed to get {'staged' if staged else 'unstaged'} diff for {rel_path}: {e}"
		logger.exception(msg)
		raise DiffFailedError(msg) from e


def _surface_diff(repo: Repository, *, staged: bool, context_lines: int) -> Diff:
	if staged:
		tree = get_head_tree(repo) or get_empty_tree(repo)
		return tree.diff_to_index(repo.index, context_lines=context_lines)
	flags = DiffOption.INCLUDE_UNTRACKED | DiffOption.SHOW_UNTRACKED_CONTENT
	return repo.index.diff_to_workdir(flags, context_lines=context_lines)


def _iter_diff_events(diff: Diff, rel_path: str) -> Iterator[_HunkStart | _LineEvent]:
	"""Yield hunk-start and line events for the patches touching ``rel_path``."""
	for patch in diff:
		if patch is None:
			continue
		if rel_path not in {patch.delta.new_file.path, patch.delta.old_file.path}:
			continue
		for hunk in patch.hunks:
			yield _HunkStart(
				header=hunk.header.strip(),
				old_start=hunk.old_start,
				old_lines=hunk.old_lines,
				new_start=hunk.new_start,
				new_lines=hunk.new_lines,
			)
			for line in hunk.lines:
				yield _LineEvent(origin=line.origin, content=line.content)


def _fold_hunks(events: Iterable[_HunkStart | _LineEvent]) -> tuple[DiffHunk, ...]:
	"""Build DiffHunk values from a stream of diff events."""
	hunks: list[DiffHunk] = []
	start: _HunkStart | None = None
	lines: list[DiffLine] = []
	old_lineno = new_lineno = 0

	for event in events:
		if isinstance(event, _HunkStart):
			if start is not None:
				hunks.append(DiffHunk(*start, lines=tuple(lines)))
			start, lines = event, []
			old_lineno, new_lineno = event.old_start, event.new_start
			continue

		if start is None:
			continue
		content = event.content.removesuffix("\n")
		if event.origin == "+":
			lines.append(DiffLine(content, LineType.ADDITION, new_lineno=new_lineno))
			new_lineno += 1
		elif event.origin == "-":
			lines.append(DiffLine(content, LineType.DELETION, old_lineno=old_lineno))
			old_lineno += 1
		elif event.origin == " ":
			lines.append(DiffLine(content, LineType.CONTEXT, old_lineno=old_lineno, new_lineno=new_lineno))
			old_lineno += 1
			new_lineno += 1
		elif event.origin in _EOFNL_ORIGINS and lines:
			lines[-1] = replace(lines[-1], no_newline=True)

	if start is not None:
		hunks.append(DiffHunk(*start, lines=tuple(lines)))
	return tuple(hunks)


def _split_lines(text: str) -> tuple[list[str], bool]:
	"""Split text on newlines, returning the lines and whether the text ended with one."""
	if not text:
		return [], True
	ends_with_newline = text.endswith("\n")
	lines = text.split("\n")
	if ends_with_newline:
		lines.pop()
	return lines, ends_with_newline


def _untracked_file_diff(file_path: Path) -> tuple[DiffHunk, ...]:
	"""Show a file that is not in the index as a single all-additions hunk."""
	try:
		text = file_path.read_bytes().decode("utf-8")
	except (OSError, UnicodeDecodeError) as e:
		msg = f"Failed to read file {file_path}: {e}"
		logger.exception(msg)
		raise ReadFailedError(msg) from e

	contents, ends_with_newline = _split_lines(text)
	lines = [
		DiffLine(content, LineType.ADDITION, new_lineno=index + 1) for index, content in enumerate(contents)
	]
	if lines and not ends_with_newline:
		lines[-1] = replace(lines[-1], no_newline=True)

	line_count = len(lines)
	return (
		DiffHunk(
			header=f"@@ -0,0 +1,{line_count} @@",
			old_start=0,
			old_lines=0,
			new_start=1,
			new_lines=line_count,
			lines=tuple(lines),
		),
	)
