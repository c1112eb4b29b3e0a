"""Serialize a single hunk into a minimal unified-diff document."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitfrisky.git.errors import InvalidHunkError
from gitfrisky.git.models import LineType

if TYPE_CHECKING:
	from gitfrisky.git.models import DiffHunk, DiffLine

NO_NEWLINE_MARKER = "\\ No newline at end of file"

_FORWARD_PREFIXES = {LineType.ADDITION: "+", LineType.DELETION: "-", LineType.CONTEXT: " "}
_REVERSE_PREFIXES = {LineType.ADDITION: "-", LineType.DELETION: "+", LineType.CONTEXT: " "}


def validate_hunk(hunk: DiffHunk) -> None:
	"""
	Check that a hunk's lines agree with its header.

	Raises:
		InvalidHunkError: If any position or count is negative, the hunk has no lines,
			the line counts contradict the header, or a line carries a line number
			for the side it does not exist on.

	"""
	numbers = (hunk.old_start, hunk.old_lines, hunk.new_start, hunk.new_lines)
	if any(number < 0 for number in numbers):
		msg = f"Hunk header has negative values: {numbers}"
		raise InvalidHunkError(msg)
	if not hunk.lines:
		msg = "Hunk has no lines"
		raise InvalidHunkError(msg)

	context = hunk.count(LineType.CONTEXT)
	old_count = hunk.count(LineType.DELETION) + context
	new_count = hunk.count(LineType.ADDITION) + context
	if old_count != hunk.old_lines or new_count != hunk.new_lines:
		msg = (
			f"Hunk lines do not match its header: header says -{hunk.old_lines} +{hunk.new_lines}, "
			f"lines give -{old_count} +{new_count}"
		)
		raise InvalidHunkError(msg)

	for line in hunk.lines:
		if (line.line_type is LineType.ADDITION and line.old_lineno is not None) or (
			line.line_type is LineType.DELETION and line.new_lineno is not None
		):
			msg = f"{line.line_type.value.capitalize()} line carries a line number for the wrong side: {line.content!r}"
			raise InvalidHunkError(msg)


def format_hunk_header(hunk: DiffHunk, *, reverse: bool = False) -> str:
	"""Build the ``@@`` header from the hunk's integers, swapping sides when reversed."""
	if reverse:
		return f"@@ -{hunk.new_start},{hunk.new_lines} +{hunk.old_start},{hunk.old_lines} @@"
	return f"@@ -{hunk.old_start},{hunk.old_lines} +{hunk.new_start},{hunk.new_lines} @@"


def synthesize_patch(
	file_path: str,
	hunk: DiffHunk,
	*,
	reverse: bool = False,
	new_file_mode: int | None = None,
	deleted_file_mode: int | None = None,
) -> str:
	"""
	Build a unified diff containing one file header and one hunk.

	Args:
		file_path: Path of the file relative to the repository root.
		hunk: The hunk to serialize.
		reverse: Produce the patch that undoes the hunk.
		new_file_mode: Mark the patch as creating the file with this mode.
		deleted_file_mode: Mark the patch as deleting the file, which had this mode.

	Returns:
		The patch text.

	Raises:
		InvalidHunkError: If the hunk is structurally inconsistent, or both file
			modes are given.

	"""
	validate_hunk(hunk)
	if new_file_mode is not None and deleted_file_mode is not None:
		msg = "A patch cannot both create and delete a file"
		raise InvalidHunkError(msg)

	old_name = f"a/{file_path}"
	new_name = f"b/{file_path}"
	parts = [f"diff --git {old_name} {new_name}\n"]
	if new_file_mode is not None:
		parts.append(f"new file mode {new_file_mode:o}\n")
		old_name = "/dev/null"
	elif deleted_file_mode is not None:
		parts.append(f"deleted file mode {deleted_file_mode:o}\n")
		new_name = "/dev/null"
	parts.append(f"--- {old_name}\n")
	parts.append(f"+++ {new_name}\n")
	parts.append(format_hunk_header(hunk, reverse=reverse) + "\n")

	prefixes = _REVERSE_PREFIXES if reverse else _FORWARD_PREFIXES
	lines = _reverse_order(hunk.lines) if reverse else hunk.lines
	for line in lines:
		parts.append(prefixes[line.line_type] + line.content)
		if not line.content.endswith("\n"):
			parts.append("\n")
		if line.no_newline:
			parts.append(NO_NEWLINE_MARKER + "\n")
	return "".join(parts)


def _reverse_order(lines: tuple[DiffLine, ...]) -> list[DiffLine]:
	"""
	Reorder each run of changed lines so additions come before deletions.

	Once inverted, the additions are removed and the deletions restored. Keeping the
	removed side first means a no-newline marker always ends its own side's lines.

	"""
	ordered: list[DiffLine] = []
	additions: list[DiffLine] = []
	deletions: list[DiffLine] = []
	for line in lines:
		if line.line_type is LineType.ADDITION:
			additions.append(line)
		elif line.line_type is LineType.DELETION:
			deletions.append(line)
		else:
			ordered += additions + deletions
			ordered.append(line)
			additions, deletions = [], []
	return ordered + additions + deletions
