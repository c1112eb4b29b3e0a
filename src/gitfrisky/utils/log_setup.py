"""
Logging setup for gitfrisky.

Console output goes through rich; an optional log file receives everything
from DEBUG up.

"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text

# Initialize console for rich output
console = Console(stderr=True)


def setup_logging(
	is_verbose: bool = False,
	log_to_console: bool = True,
	log_file_path: Path | str | None = None,
) -> None:
	"""
	Set up logging configuration.

	Args:
	    is_verbose: Enable verbose logging
	    log_to_console: Whether to log to the console
	    log_file_path: Optional path to a file for logging. If None, no file logging.

	"""
	log_level = logging.DEBUG if is_verbose else logging.WARNING

	root_logger = logging.getLogger()
	root_logger.setLevel(logging.DEBUG if log_file_path else log_level)

	# Clear existing handlers to avoid duplicate logs if called multiple times
	for handler in root_logger.handlers[:]:
		root_logger.removeHandler(handler)

	if log_to_console:
		console_handler = RichHandler(
			level=log_level,
			console=console,
			rich_tracebacks=True,
			show_time=True,
			show_path=is_verbose,
		)
		root_logger.addHandler(console_handler)

	if log_file_path:
		try:
			file_handler_path = Path(log_file_path)
			file_handler_path.parent.mkdir(parents=True, exist_ok=True)

			file_handler = logging.FileHandler(file_handler_path, mode="a", encoding="utf-8")
			file_handler.setLevel(logging.DEBUG)
			file_handler.setFormatter(
				logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s")
			)
			root_logger.addHandler(file_handler)
			root_logger.debug("Logging to file: %s", file_handler_path)
		except OSError as e:
			crit_logger = logging.getLogger("gitfrisky.cli.critical_setup")
			crit_logger.handlers.clear()
			stream_handler = logging.StreamHandler()
			stream_handler.setFormatter(logging.Formatter("%(message)s"))
			crit_logger.addHandler(stream_handler)
			crit_logger.propagate = False
			crit_logger.critical("Failed to set up file logging to %s: %s", log_file_path, e)

	logging.getLogger("watchdog").setLevel(logging.WARNING)


def display_error_summary(error_message: str) -> None:
	"""
	Display an error summary with a divider and a title.

	Args:
	        error_message: The error message to display

	"""
	title = Text("Error Summary", style="bold red")

	console.print()
	console.print(Rule(title, style="red"))
	console.print(f"\n{error_message}\n", markup=False)
	console.print(Rule(style="red"))
	console.print()
