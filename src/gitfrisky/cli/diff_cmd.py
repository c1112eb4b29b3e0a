"""Command showing the hunks of a single file."""

import logging
from pathlib import Path

import typer
from rich.markup import escape
from rich.text import Text

from gitfrisky.cli.cli_types import FilePathArg, JsonFlag, RepoOpt, StagedFlag

logger = logging.getLogger(__name__)

_LINE_STYLES = {"addition": ("+", "green"), "deletion": ("-", "red"), "context": (" ", "")}


def register_command(app: typer.Typer) -> None:
	"""Register the diff command with the CLI app."""

	@app.command(name="diff")
	def diff_command(
		file_path: FilePathArg,
		repo: RepoOpt = Path(),
		staged: StagedFlag = False,
		as_json: JsonFlag = False,
	) -> None:
		"""Show the hunks for one file, numbered for stage-hunk and unstage-hunk."""
		_diff_command_impl(repo, file_path, staged=staged, as_json=as_json)


def _diff_command_impl(repo: Path, file_path: str, *, staged: bool, as_json: bool) -> None:
	from gitfrisky.config import ConfigLoader
	from gitfrisky.git.diff import get_diff
	from gitfrisky.git.errors import GitError
	from gitfrisky.utils.cli_utils import console, exit_with_error, print_json

	context_lines = ConfigLoader.get_instance().get.diff.context_lines
	try:
		hunks = get_diff(repo, file_path, staged=staged, context_lines=context_lines)
	except GitError as e:
		exit_with_error(str(e))
		return

	if as_json:
		print_json([hunk.to_dict() for hunk in hunks])
		return

	if not hunks:
		console.print(f"[dim]No {'staged' if staged else 'unstaged'} changes in {escape(file_path)}[/dim]")
		return

	for index, hunk in enumerate(hunks):
		console.print(f"[bold cyan][{index}][/bold cyan] [cyan]{escape(hunk.header)}[/cyan]")
		for line in hunk.lines:
			prefix, style = _LINE_STYLES[line.line_type.value]
			console.print(Text(prefix + line.content, style=style))
			if line.no_newline:
				console.print(Text("\\ No newline at end of file", style="dim"))
