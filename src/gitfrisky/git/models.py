"""Value records shared by the diff, staging, status and log operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class LineType(str, Enum):
	"""Role of a line inside a hunk."""

	CONTEXT = "context"
	ADDITION = "addition"
	DELETION = "deletion"


class FileStatus(str, Enum):
	"""Status of a changed path within one bucket of the status payload."""

	ADDED = "A"
	MODIFIED = "M"
	DELETED = "D"
	RENAMED = "R"
	UNTRACKED = "U"
	CONFLICTED = "C"


class RepoState(str, Enum):
	"""Operation the repository is in the middle of, if any."""

	CLEAN = "clean"
	MERGE = "merge"
	REBASE = "rebase"
	REBASE_INTERACTIVE = "rebaseInteractive"
	REBASE_MERGE = "rebaseMerge"
	REVERT = "revert"
	CHERRY_PICK = "cherryPick"
	BISECT = "bisect"
	APPLY_MAILBOX = "applyMailbox"


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
	return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class DiffLine:
	"""A single line of a hunk."""

	content: str
	"""Line text without its trailing newline."""

	line_type: LineType

	old_lineno: int | None = None
	"""1-based line number on the old side; set for context and deletion lines."""

	new_lineno: int | None = None
	"""1-based line number on the new side; set for context and addition lines."""

	no_newline: bool = False
	"""The line ends its side of the file without a terminating newline."""

	def to_dict(self) -> dict[str, Any]:
		"""Convert to the client-facing dictionary."""
		data = _drop_none(
			{
				"content": self.content,
				"lineType": self.line_type.value,
				"oldLineno": self.old_lineno,
				"newLineno": self.new_lineno,
			}
		)
		if self.no_newline:
			data["noNewline"] = True
		return data

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> DiffLine:
		"""Create a DiffLine from its client-facing dictionary."""
		return cls(
			content=data["content"],
			line_type=LineType(data["lineType"]),
			old_lineno=data.get("oldLineno"),
			new_lineno=data.get("newLineno"),
			no_newline=bool(data.get("noNewline", False)),
		)


@dataclass(frozen=True)
class DiffHunk:
	"""
	A contiguous block of a unified diff.

	The four integers are the source of truth for every computation. ``header`` is
	the text libgit2 produced for the hunk and is only meant for display.

	"""

	header: str
	old_start: int
	old_lines: int
	new_start: int
	new_lines: int
	lines: tuple[DiffLine, ...] = ()

	@property
	def creates_file(self) -> bool:
		"""Whether the hunk starts from an empty old side."""
		return self.old_start == 0 and self.old_lines == 0

	@property
	def removes_file(self) -> bool:
		"""Whether the hunk leaves an empty new side."""
		return self.new_start == 0 and self.new_lines == 0

	def count(self, line_type: LineType) -> int:
		"""Count the lines of the given type."""
		return sum(1 for line in self.lines if line.line_type is line_type)

	def to_dict(self) -> dict[str, Any]:
		"""Convert to the client-facing dictionary."""
		return {
			"header": self.header,
			"oldStart": self.old_start,
			"oldLines": self.old_lines,
			"newStart": self.new_start,
			"newLines": self.new_lines,
			"lines": [line.to_dict() for line in self.lines],
		}

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> DiffHunk:
		"""Create a DiffHunk from its client-facing dictionary."""
		return cls(
			header=data.get("header", ""),
			old_start=int(data["oldStart"]),
			old_lines=int(data["oldLines"]),
			new_start=int(data["newStart"]),
			new_lines=int(data["newLines"]),
			lines=tuple(DiffLine.from_dict(line) for line in data.get("lines", [])),
		)


@dataclass(frozen=True)
class FileChange:
	"""A changed path in one bucket of the status payload."""

	path: str
	status: FileStatus

	old_path: str | None = None
	"""Rename source. Not populated; libgit2 status flags carry no rename origin here."""

	additions: int | None = None
	"""Added line count, only set when derived from the file's diff."""

	deletions: int | None = None
	"""Deleted line count, only set when derived from the file's diff."""

	def to_dict(self) -> dict[str, Any]:
		"""Convert to the client-facing dictionary."""
		return _drop_none(
			{
				"path": self.path,
				"status": self.status.value,
				"oldPath": self.old_path,
				"additions": self.additions,
				"deletions": self.deletions,
			}
		)


@dataclass(frozen=True)
class StatusPayload:
	"""Changed paths split into staged (tree vs index) and unstaged (index vs workdir)."""

	staged: tuple[FileChange, ...] = ()
	unstaged: tuple[FileChange, ...] = ()

	def to_dict(self) -> dict[str, Any]:
		"""Convert to the client-facing dictionary."""
		return {
			"staged": [change.to_dict() for change in self.staged],
			"unstaged": [change.to_dict() for change in self.unstaged],
		}


@dataclass(frozen=True)
class Commit:
	"""Summary of a single commit."""

	id: str
	author: str
	email: str
	timestamp: int
	"""Commit time in seconds since the epoch."""

	summary: str
	message: str | None = None
	parents: tuple[str, ...] = ()

	refs: tuple[str, ...] | None = None
	"""Branch and tag names. Left unset; annotation belongs to the presentation layer."""

	lane: int | None = None
	"""Graph lane. Left unset; assigned by the presentation layer."""

	def to_dict(self) -> dict[str, Any]:
		"""Convert to the client-facing dictionary."""
		data = {
			"oid": self.id,
			"author": self.author,
			"email": self.email,
			"timestamp": self.timestamp,
			"summary": self.summary,
			"message": self.message,
			"parents": list(self.parents),
			"refs": list(self.refs) if self.refs is not None else None,
			"lane": self.lane,
		}
		return _drop_none(data)


@dataclass(frozen=True)
class Branch:
	"""A local or remote branch with its upstream tracking information."""

	name: str
	full_name: str
	is_head: bool
	is_remote: bool
	upstream: str | None = None
	ahead: int = 0
	behind: int = 0

	def to_dict(self) -> dict[str, Any]:
		"""Convert to the client-facing dictionary."""
		return _drop_none(
			{
				"name": self.name,
				"fullName": self.full_name,
				"isHead": self.is_head,
				"isRemote": self.is_remote,
				"upstream": self.upstream,
				"ahead": self.ahead,
				"behind": self.behind,
			}
		)


@dataclass(frozen=True)
class RepoSummary:
	"""Overview of an opened repository."""

	path: str
	branches: tuple[Branch, ...]
	head: str | None
	"""Current branch shorthand, or the commit id when HEAD is detached."""

	is_bare: bool
	is_detached: bool
	state: RepoState

	def to_dict(self) -> dict[str, Any]:
		"""Convert to the client-facing dictionary."""
		return _drop_none(
			{
				"path": self.path,
				"branches": [branch.to_dict() for branch in self.branches],
				"head": self.head,
				"isBare": self.is_bare,
				"isDetached": self.is_detached,
				"state": self.state.value,
			}
		)
