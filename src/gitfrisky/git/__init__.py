"""Git operations exposed to clients."""

from gitfrisky.git.diff import get_diff
from gitfrisky.git.errors import (
	ApplyFailedError,
	DiffFailedError,
	GitError,
	IndexUpdateError,
	InvalidHunkError,
	NothingToCommitError,
	OpenFailedError,
	ReadFailedError,
	SigningMissingError,
	StateBlockedError,
)
from gitfrisky.git.history import log
from gitfrisky.git.models import (
	Branch,
	Commit,
	DiffHunk,
	DiffLine,
	FileChange,
	FileStatus,
	LineType,
	RepoState,
	RepoSummary,
	StatusPayload,
)
from gitfrisky.git.patch import synthesize_patch
from gitfrisky.git.staging import commit, stage, stage_hunk, unstage, unstage_hunk
from gitfrisky.git.status import get_status
from gitfrisky.git.summary import open_repo

__all__ = [
	# Errors
	"ApplyFailedError",
	# Models
	"Branch",
	"Commit",
	"DiffFailedError",
	"DiffHunk",
	"DiffLine",
	"FileChange",
	"FileStatus",
	"GitError",
	"IndexUpdateError",
	"InvalidHunkError",
	"LineType",
	"NothingToCommitError",
	"OpenFailedError",
	"ReadFailedError",
	"RepoState",
	"RepoSummary",
	"SigningMissingError",
	"StateBlockedError",
	"StatusPayload",
	# Operations
	"commit",
	"get_diff",
	"get_status",
	"log",
	"open_repo",
	"stage",
	"stage_hunk",
	"synthesize_patch",
	"unstage",
	"unstage_hunk",
]
