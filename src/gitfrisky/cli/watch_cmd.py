"""Command printing debounced repository change notifications."""

import logging
import threading
from pathlib import Path

import typer

from gitfrisky.cli.cli_types import JsonFlag, RepoOpt

logger = logging.getLogger(__name__)


def register_command(app: typer.Typer) -> None:
	"""Register the watch command with the CLI app."""

	@app.command(name="watch")
	def watch_command(repo: RepoOpt = Path(), as_json: JsonFlag = False) -> None:
		"""Print a line whenever status, HEAD or refs change, until interrupted."""
		_watch_command_impl(repo, as_json=as_json)


def _watch_command_impl(repo: Path, *, as_json: bool) -> None:
	import json

	from gitfrisky.config import ConfigLoader
	from gitfrisky.utils.cli_utils import console, exit_with_error, handle_keyboard_interrupt
	from gitfrisky.watcher import WatchEvent, WatchSession

	debounce_delay = ConfigLoader.get_instance().get.watch.debounce_ms / 1000

	def on_event(event: WatchEvent) -> None:
		if as_json:
			typer.echo(json.dumps(event.to_dict()))
		else:
			console.print(f"[cyan]{event.kind.value}[/cyan] changed")

	session = WatchSession(debounce_delay)
	try:
		session.start(repo, on_event)
	except ValueError as e:
		exit_with_error(str(e))
		return

	if not as_json:
		console.print(f"Watching [bold]{repo.resolve()}[/bold]. Press Ctrl+C to stop.")
	try:
		threading.Event().wait()
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	finally:
		session.stop()
