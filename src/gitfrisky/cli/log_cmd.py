"""Command listing the commit history."""

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from gitfrisky.cli.cli_types import JsonFlag, RepoOpt

logger = logging.getLogger(__name__)

LimitOpt = Annotated[
	int | None,
	typer.Option("--limit", "-n", help="Maximum number of commits to list (default from config)", min=1),
]


def register_command(app: typer.Typer) -> None:
	"""Register the log command with the CLI app."""

	@app.command(name="log")
	def log_command(repo: RepoOpt = Path(), limit: LimitOpt = None, as_json: JsonFlag = False) -> None:
		"""List commits reachable from every branch, newest first."""
		_log_command_impl(repo, limit, as_json=as_json)


def _log_command_impl(repo: Path, limit: int | None, *, as_json: bool) -> None:
	from gitfrisky.config import ConfigLoader
	from gitfrisky.git.errors import GitError
	from gitfrisky.git.history import log
	from gitfrisky.utils.cli_utils import console, exit_with_error, print_json

	if limit is None:
		limit = ConfigLoader.get_instance().get.log.limit
	try:
		commits = log(repo, limit=limit)
	except GitError as e:
		exit_with_error(str(e))
		return

	if as_json:
		print_json([commit.to_dict() for commit in commits])
		return

	table = Table(show_header=True, box=None)
	table.add_column("Commit", style="yellow", no_wrap=True)
	table.add_column("Date", no_wrap=True)
	table.add_column("Author")
	table.add_column("Summary")
	for commit in commits:
		date = datetime.fromtimestamp(commit.timestamp, tz=UTC).strftime("%Y-%m-%d %H:%M")
		table.add_row(commit.id[:7], date, commit.author, commit.summary)
	console.print(table)
