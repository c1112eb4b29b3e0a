"""Command creating a commit from the index."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from gitfrisky.cli.cli_types import JsonFlag, RepoOpt

logger = logging.getLogger(__name__)

MessageOpt = Annotated[str, typer.Option("--message", "-m", help="Commit message")]


def register_command(app: typer.Typer) -> None:
	"""Register the commit command with the CLI app."""

	@app.command(name="commit")
	def commit_command(message: MessageOpt, repo: RepoOpt = Path(), as_json: JsonFlag = False) -> None:
		"""Commit the staged changes on top of HEAD."""
		_commit_command_impl(repo, message, as_json=as_json)


def _commit_command_impl(repo: Path, message: str, *, as_json: bool) -> None:
	from gitfrisky.git.errors import GitError
	from gitfrisky.git.staging import commit
	from gitfrisky.utils.cli_utils import console, exit_with_error, print_json

	if not message.strip():
		exit_with_error("Aborting commit due to empty commit message.")
		return

	try:
		created = commit(repo, message)
	except GitError as e:
		exit_with_error(str(e))
		return

	if as_json:
		print_json(created.to_dict())
		return
	console.print(f"[green]✓[/green] Committed [bold]{created.id[:7]}[/bold] {created.summary}")
