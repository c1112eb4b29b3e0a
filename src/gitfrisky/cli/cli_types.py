"""Type definitions for CLI parameters."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

RepoOpt = Annotated[
	Path,
	typer.Option(
		"--repo",
		"-C",
		help="Path to the repository",
		exists=True,
		file_okay=False,
	),
]

JsonFlag = Annotated[bool, typer.Option("--json", help="Print the result as JSON")]

StagedFlag = Annotated[bool, typer.Option("--staged", "-s", help="Use the staged (last commit vs index) diff")]

FilePathArg = Annotated[str, typer.Argument(help="File path relative to the repository root")]

PathsArg = Annotated[list[str], typer.Argument(help="File paths relative to the repository root")]

HunkIndexArg = Annotated[int, typer.Argument(help="Position of the hunk in the file's diff, starting at 0", min=0)]
