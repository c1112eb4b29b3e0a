"""Commands showing repository status and summary."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from gitfrisky.cli.cli_types import JsonFlag, RepoOpt

logger = logging.getLogger(__name__)

CountsFlag = Annotated[bool, typer.Option("--counts", help="Derive added/deleted line counts from each diff")]

_STATUS_STYLES = {"A": "green", "M": "yellow", "D": "red", "R": "cyan", "U": "magenta", "C": "bold red"}


def register_command(app: typer.Typer) -> None:
	"""Register the status commands with the CLI app."""

	@app.command(name="status")
	def status_command(
		repo: RepoOpt = Path(),
		counts: CountsFlag = False,
		as_json: JsonFlag = False,
	) -> None:
		"""Show staged and unstaged changes."""
		_status_command_impl(repo, counts=counts, as_json=as_json)

	@app.command(name="summary")
	def summary_command(repo: RepoOpt = Path(), as_json: JsonFlag = False) -> None:
		"""Show branches, HEAD and repository state."""
		_summary_command_impl(repo, as_json=as_json)


def _status_command_impl(repo: Path, *, counts: bool, as_json: bool) -> None:
	from gitfrisky.git.errors import GitError
	from gitfrisky.git.status import get_status
	from gitfrisky.utils.cli_utils import console, exit_with_error, print_json

	try:
		payload = get_status(repo, with_counts=counts)
	except GitError as e:
		exit_with_error(str(e))
		return

	if as_json:
		print_json(payload.to_dict())
		return

	for title, changes in (("Staged", payload.staged), ("Unstaged", payload.unstaged)):
		table = Table(title=f"{title} ({len(changes)})", show_header=True, title_justify="left")
		table.add_column("Status", width=6)
		table.add_column("Path")
		if counts:
			table.add_column("+", justify="right", style="green")
			table.add_column("-", justify="right", style="red")
		for change in changes:
			status = change.status.value
			row = [f"[{_STATUS_STYLES[status]}]{status}[/]", change.path]
			if counts:
				row += [_count(change.additions), _count(change.deletions)]
			table.add_row(*row)
		console.print(table)


def _summary_command_impl(repo: Path, *, as_json: bool) -> None:
	from gitfrisky.git.errors import GitError
	from gitfrisky.git.summary import open_repo
	from gitfrisky.utils.cli_utils import console, exit_with_error, print_json

	try:
		summary = open_repo(repo)
	except GitError as e:
		exit_with_error(str(e))
		return

	if as_json:
		print_json(summary.to_dict())
		return

	head = summary.head or "(no commits yet)"
	if summary.is_detached:
		head = f"detached at {head}"
	console.print(f"[bold]HEAD:[/bold] {head}")
	console.print(f"[bold]State:[/bold] {summary.state.value}")

	table = Table(title="Branches", title_justify="left")
	table.add_column("")
	table.add_column("Branch")
	table.add_column("Upstream")
	table.add_column("Ahead", justify="right")
	table.add_column("Behind", justify="right")
	for branch in summary.branches:
		table.add_row(
			"*" if branch.is_head else "",
			branch.name,
			branch.upstream or "",
			str(branch.ahead),
			str(branch.behind),
		)
	console.print(table)


def _count(value: int | None) -> str:
	return "" if value is None else str(value)
