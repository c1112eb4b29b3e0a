"""Exceptions raised by the git operations."""


class GitError(Exception):
	"""Base class for Git-related errors. The message is shown to the user verbatim."""


class OpenFailedError(GitError):
	"""The repository cannot be located or opened."""


class ReadFailedError(GitError):
	"""A file cannot be read from the working directory."""


class DiffFailedError(GitError):
	"""libgit2 failed to compute a diff."""


class InvalidHunkError(GitError):
	"""A hunk's line counts or line numbers contradict its header."""


class ApplyFailedError(GitError):
	"""A patch does not apply cleanly to the index."""


class IndexUpdateError(GitError):
	"""The index could not be updated or written."""


class StateBlockedError(GitError):
	"""The repository is in the middle of a merge, rebase or similar operation."""


class NothingToCommitError(GitError):
	"""There are no staged changes."""


class SigningMissingError(GitError):
	"""No author identity is configured."""
