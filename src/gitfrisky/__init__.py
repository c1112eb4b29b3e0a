"""gitfrisky - working-copy status, structured diffs and hunk-level staging."""

__version__ = "0.1.0"
