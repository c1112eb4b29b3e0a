"""Command-line interface package for gitfrisky."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from gitfrisky import __version__
from gitfrisky.config import ConfigError, ConfigLoader
from gitfrisky.utils.cli_utils import exit_with_error
from gitfrisky.utils.log_setup import setup_logging

from .commit_cmd import register_command as register_commit_command
from .diff_cmd import register_command as register_diff_command
from .log_cmd import register_command as register_log_command
from .stage_cmd import register_command as register_stage_command
from .status_cmd import register_command as register_status_command
from .watch_cmd import register_command as register_watch_command

logger = logging.getLogger(__name__)

app = typer.Typer(
	help=f"gitfrisky - Inspect and stage changes in a git repository, hunk by hunk\n\nVersion: {__version__}",
	no_args_is_help=True,
	context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
	"""Callback for --version option."""
	if value:
		typer.echo(f"gitfrisky version: {__version__}")
		raise typer.Exit


@app.callback(invoke_without_command=True)
def global_options(
	ctx: typer.Context,
	is_verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False,
	config_file: Annotated[
		Path | None,
		typer.Option("--config", help="Path to a YAML configuration file.", dir_okay=False),
	] = None,
	_version: Annotated[
		bool | None,
		typer.Option("--version", help="Show version and exit.", callback=_version_callback, is_eager=True),
	] = None,
) -> None:
	"""Global CLI options, configuration and logging setup."""
	setup_logging(is_verbose=is_verbose)
	try:
		config = ConfigLoader.get_instance(config_file, reload=True).get
	except ConfigError as e:
		exit_with_error(str(e))
		return

	ctx.meta["is_verbose"] = is_verbose or config.logging.verbose
	if config.logging.verbose or config.logging.log_file:
		setup_logging(is_verbose=ctx.meta["is_verbose"], log_file_path=config.logging.log_file)


register_status_command(app)
register_diff_command(app)
register_stage_command(app)
register_commit_command(app)
register_log_command(app)
register_watch_command(app)


def main() -> int:
	"""Run the CLI application."""
	return app()


if __name__ == "__main__":
	sys.exit(main())
