"""Tests for single-hunk patch synthesis."""

import pytest

from gitfrisky.git.errors import InvalidHunkError
from gitfrisky.git.models import DiffHunk, DiffLine, LineType
from gitfrisky.git.patch import NO_NEWLINE_MARKER, format_hunk_header, synthesize_patch, validate_hunk


def _modification() -> DiffHunk:
	return DiffHunk(
		header="@@ -2,3 +2,3 @@ some function",
		old_start=2,
		old_lines=3,
		new_start=2,
		new_lines=3,
		lines=(
			DiffLine("b", LineType.CONTEXT, old_lineno=2, new_lineno=2),
			DiffLine("c", LineType.DELETION, old_lineno=3),
			DiffLine("C", LineType.ADDITION, new_lineno=3),
			DiffLine("d", LineType.CONTEXT, old_lineno=4, new_lineno=4),
		),
	)


@pytest.mark.unit
class TestSynthesizePatch:
	"""Tests for synthesize_patch."""

	def test_forward_patch(self) -> None:
		"""A forward patch has one file header, a header rebuilt from integers, and prefixed lines."""
		patch = synthesize_patch("src/app.py", _modification())

		assert patch == (
			"diff --git a/src/app.py b/src/app.py\n"
			"--- a/src/app.py\n"
			"+++ b/src/app.py\n"
			"@@ -2,3 +2,3 @@\n"
			" b\n"
			"-c\n"
			"+C\n"
			" d\n"
		)

	def test_reverse_patch_swaps_sides(self) -> None:
		"""Reversing swaps the header ranges and the +/- prefixes, leaving context alone."""
		hunk = DiffHunk(
			header="@@ -1,1 +1,2 @@",
			old_start=1,
			old_lines=1,
			new_start=1,
			new_lines=2,
			lines=(
				DiffLine("a", LineType.CONTEXT, old_lineno=1, new_lineno=1),
				DiffLine("b", LineType.ADDITION, new_lineno=2),
			),
		)

		patch = synthesize_patch("f.txt", hunk, reverse=True)

		assert patch.splitlines()[3:] == ["@@ -1,2 +1,1 @@", " a", "-b"]

	def test_no_newline_marker(self) -> None:
		"""A line without a terminating newline is followed by the marker."""
		hunk = DiffHunk(
			header="@@ -1,1 +1,1 @@",
			old_start=1,
			old_lines=1,
			new_start=1,
			new_lines=1,
			lines=(
				DiffLine("old", LineType.DELETION, old_lineno=1),
				DiffLine("new", LineType.ADDITION, new_lineno=1, no_newline=True),
			),
		)

		patch = synthesize_patch("f.txt", hunk)

		assert patch.endswith(f"-old\n+new\n{NO_NEWLINE_MARKER}\n")

	def test_reverse_keeps_no_newline_marker_at_side_end(self) -> None:
		"""Reversed additions precede reversed deletions, so the marker closes the restored side."""
		hunk = DiffHunk(
			header="@@ -1,2 +1,3 @@",
			old_start=1,
			old_lines=2,
			new_start=1,
			new_lines=3,
			lines=(
				DiffLine("a", LineType.CONTEXT, old_lineno=1, new_lineno=1),
				DiffLine("b", LineType.DELETION, old_lineno=2, no_newline=True),
				DiffLine("b", LineType.ADDITION, new_lineno=2),
				DiffLine("c", LineType.ADDITION, new_lineno=3),
			),
		)

		patch = synthesize_patch("f.txt", hunk, reverse=True)

		assert patch.splitlines()[3:] == ["@@ -1,3 +1,2 @@", " a", "-b", "-c", "+b", NO_NEWLINE_MARKER]

	def test_new_file_header(self) -> None:
		"""Creating a file uses /dev/null as the old side and records the mode."""
		hunk = DiffHunk(
			header="@@ -0,0 +1,1 @@",
			old_start=0,
			old_lines=0,
			new_start=1,
			new_lines=1,
			lines=(DiffLine("hello", LineType.ADDITION, new_lineno=1),),
		)

		patch = synthesize_patch("new.txt", hunk, new_file_mode=0o100644)

		assert patch.splitlines()[:4] == [
			"diff --git a/new.txt b/new.txt",
			"new file mode 100644",
			"--- /dev/null",
			"+++ b/new.txt",
		]

	def test_deleted_file_header(self) -> None:
		"""Deleting a file uses /dev/null as the new side."""
		hunk = DiffHunk(
			header="@@ -1,1 +0,0 @@",
			old_start=1,
			old_lines=1,
			new_start=0,
			new_lines=0,
			lines=(DiffLine("bye", LineType.DELETION, old_lineno=1),),
		)

		patch = synthesize_patch("gone.txt", hunk, deleted_file_mode=0o100755)

		assert "deleted file mode 100755\n--- a/gone.txt\n+++ /dev/null\n" in patch

	def test_both_modes_rejected(self) -> None:
		"""A patch cannot both create and delete its file."""
		with pytest.raises(InvalidHunkError, match="both create and delete"):
			synthesize_patch("f.txt", _modification(), new_file_mode=0o100644, deleted_file_mode=0o100644)

	def test_header_text_is_not_used(self) -> None:
		"""The display header may be stale; the integers decide."""
		hunk = DiffHunk(
			header="@@ -99,99 +99,99 @@",
			old_start=2,
			old_lines=3,
			new_start=2,
			new_lines=3,
			lines=_modification().lines,
		)

		assert format_hunk_header(hunk) == "@@ -2,3 +2,3 @@"


@pytest.mark.unit
class TestValidateHunk:
	"""Tests for validate_hunk."""

	def test_consistent_hunk(self) -> None:
		"""A hunk whose lines match its header passes."""
		validate_hunk(_modification())

	@pytest.mark.parametrize(
		("numbers", "match"),
		[
			((2, 4, 2, 3), "do not match"),
			((2, 3, 2, 2), "do not match"),
			((-1, 3, 2, 3), "negative"),
		],
	)
	def test_header_mismatch(self, numbers: tuple[int, int, int, int], match: str) -> None:
		"""Counts that contradict the lines are rejected."""
		hunk = DiffHunk("", *numbers, lines=_modification().lines)

		with pytest.raises(InvalidHunkError, match=match):
			validate_hunk(hunk)

	def test_empty_hunk(self) -> None:
		"""A hunk with no lines cannot be applied."""
		with pytest.raises(InvalidHunkError, match="no lines"):
			validate_hunk(DiffHunk("@@ -0,0 +1,0 @@", 0, 0, 1, 0))

	def test_line_number_on_wrong_side(self) -> None:
		"""An addition may not claim an old line number."""
		hunk = DiffHunk(
			header="",
			old_start=1,
			old_lines=0,
			new_start=1,
			new_lines=1,
			lines=(DiffLine("x", LineType.ADDITION, old_lineno=1, new_lineno=1),),
		)

		with pytest.raises(InvalidHunkError, match="wrong side"):
			validate_hunk(hunk)
