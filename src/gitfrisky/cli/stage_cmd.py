"""Commands that move changes into and out of the index."""

import logging
from pathlib import Path

import typer
from rich.markup import escape

from gitfrisky.cli.cli_types import FilePathArg, HunkIndexArg, PathsArg, RepoOpt

logger = logging.getLogger(__name__)


def register_command(app: typer.Typer) -> None:
	"""Register the stage, unstage, stage-hunk and unstage-hunk commands."""

	@app.command(name="stage")
	def stage_command(paths: PathsArg, repo: RepoOpt = Path()) -> None:
		"""Stage whole files, including deletions."""
		_stage_files_impl(repo, paths, unstaging=False)

	@app.command(name="unstage")
	def unstage_command(paths: PathsArg, repo: RepoOpt = Path()) -> None:
		"""Reset whole files in the index to the last commit."""
		_stage_files_impl(repo, paths, unstaging=True)

	@app.command(name="stage-hunk")
	def stage_hunk_command(file_path: FilePathArg, hunk_index: HunkIndexArg, repo: RepoOpt = Path()) -> None:
		"""Stage one hunk of a file's unstaged diff, as numbered by `diff`."""
		_stage_hunk_impl(repo, file_path, hunk_index, unstaging=False)

	@app.command(name="unstage-hunk")
	def unstage_hunk_command(file_path: FilePathArg, hunk_index: HunkIndexArg, repo: RepoOpt = Path()) -> None:
		"""Unstage one hunk of a file's staged diff, as numbered by `diff --staged`."""
		_stage_hunk_impl(repo, file_path, hunk_index, unstaging=True)


def _stage_files_impl(repo: Path, paths: list[str], *, unstaging: bool) -> None:
	from gitfrisky.git.errors import GitError
	from gitfrisky.git.staging import stage, unstage
	from gitfrisky.utils.cli_utils import console, exit_with_error

	try:
		if unstaging:
			unstage(repo, paths)
		else:
			stage(repo, paths)
	except GitError as e:
		exit_with_error(str(e))
		return

	verb = "Unstaged" if unstaging else "Staged"
	for path in paths:
		console.print(f"[green]{verb}[/green] {escape(path)}")


def _stage_hunk_impl(repo: Path, file_path: str, hunk_index: int, *, unstaging: bool) -> None:
	from gitfrisky.config import ConfigLoader
	from gitfrisky.git.diff import get_diff
	from gitfrisky.git.errors import GitError
	from gitfrisky.git.staging import stage_hunk, unstage_hunk
	from gitfrisky.utils.cli_utils import console, exit_with_error

	context_lines = ConfigLoader.get_instance().get.diff.context_lines
	try:
		hunks = get_diff(repo, file_path, staged=unstaging, context_lines=context_lines)
		if hunk_index >= len(hunks):
			surface = "staged" if unstaging else "unstaged"
			exit_with_error(f"{file_path} has {len(hunks)} {surface} hunk(s); index {hunk_index} is out of range")
			return
		hunk = hunks[hunk_index]
		if unstaging:
			unstage_hunk(repo, file_path, hunk)
		else:
			stage_hunk(repo, file_path, hunk)
	except GitError as e:
		exit_with_error(str(e))
		return

	verb = "Unstaged" if unstaging else "Staged"
	console.print(f"[green]{verb}[/green] {escape(hunk.header)} in {escape(file_path)}")
