"""Debounced repository change notifications."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_DELAY = 0.3

WATCHED_EVENT_TYPES = frozenset({"created", "modified", "deleted", "moved"})

# Git internals that change on every read or write without affecting status
IGNORED_GIT_PREFIXES = (".git/objects/", ".git/logs/")


class WatchEventKind(str, Enum):
	"""What a client should re-query after a change."""

	STATUS = "status"
	HEAD = "head"
	REFS = "refs"


@dataclass(frozen=True)
class WatchEvent:
	"""A coalesced notification that part of the repository changed."""

	kind: WatchEventKind

	def to_dict(self) -> dict[str, str]:
		"""Convert to the client-facing dictionary."""
		return {"kind": self.kind.value}


def classify_event(path: str | Path, event_type: str, repo_root: Path) -> WatchEventKind | None:
	"""
	Classify a file-system event by the repository state it affects.

	Args:
		path: Absolute path of the changed file.
		event_type: watchdog event type (``created``, ``modified``, ...).
		repo_root: Resolved repository working directory.

	Returns:
		The kind of change, or None if the event does not affect the repository view.

	"""
	if event_type not in WATCHED_EVENT_TYPES:
		return None
	try:
		relative = Path(path).relative_to(repo_root).as_posix()
	except ValueError:
		return None

	if relative == ".git/HEAD" or relative.startswith(".git/HEAD."):
		return WatchEventKind.HEAD
	if relative.startswith(".git/refs/") or relative == ".git/packed-refs":
		return WatchEventKind.REFS
	if relative == ".git/index" or relative.startswith(".git/index."):
		return WatchEventKind.STATUS
	if relative.startswith(IGNORED_GIT_PREFIXES):
		return None
	return WatchEventKind.STATUS


class RepoEventHandler(FileSystemEventHandler):
	"""Collects classified events and delivers them once the debounce window closes."""

	def __init__(
		self,
		repo_root: Path,
		callback: Callable[[WatchEvent], None],
		debounce_delay: float = DEFAULT_DEBOUNCE_DELAY,
	) -> None:
		"""
		Initialize the handler.

		Args:
		    repo_root: Resolved repository working directory.
		    callback: Called once per pending kind after the debounce delay.
		    debounce_delay: Quiet period (seconds) before pending events are delivered.
		"""
		self.repo_root = repo_root
		self.callback = callback
		self.debounce_delay = debounce_delay
		self._lock = threading.Lock()
		self._pending: set[WatchEventKind] = set()
		self._timer: threading.Timer | None = None

	def on_any_event(self, event: FileSystemEvent) -> None:
		"""Classify the event and restart the debounce timer if it matters."""
		if event.is_directory:
			return

		paths = [event.src_path]
		if event.event_type == "moved" and event.dest_path:
			paths.append(event.dest_path)
		kinds = {kind for path in paths if (kind := classify_event(path, event.event_type, self.repo_root))}
		if not kinds:
			return

		logger.debug("Detected %s: %s -> %s", event.event_type, paths, sorted(kind.value for kind in kinds))
		with self._lock:
			self._pending |= kinds
			if self._timer is not None:
				self._timer.cancel()
			self._timer = threading.Timer(self.debounce_delay, self._flush)
			self._timer.daemon = True
			self._timer.start()

	def _flush(self) -> None:
		with self._lock:
			kinds, self._pending = self._pending, set()
			self._timer = None

		for kind in WatchEventKind:
			if kind not in kinds:
				continue
			try:
				self.callback(WatchEvent(kind))
			except Exception:
				logger.exception("Error executing watcher callback")

	def cancel(self) -> None:
		"""Drop pending events and stop the debounce timer."""
		with self._lock:
			if self._timer is not None:
				self._timer.cancel()
			self._timer = None
			self._pending.clear()


class RepoWatcher:
	"""Monitors a repository working directory, including ``.git``, for changes."""

	def __init__(
		self,
		repo_path: str | Path,
		on_event: Callable[[WatchEvent], None],
		debounce_delay: float = DEFAULT_DEBOUNCE_DELAY,
	) -> None:
		"""
		Initialize the watcher.

		Args:
		    repo_path: The repository working directory.
		    on_event: Called with each debounced WatchEvent, on a timer thread.
		    debounce_delay: Delay in seconds used to coalesce bursts of events.
		"""
		self.repo_root = Path(repo_path).resolve()
		if not self.repo_root.is_dir():
			msg = f"Path to watch must be a directory: {self.repo_root}"
			raise ValueError(msg)
		self.observer = Observer()
		self.event_handler = RepoEventHandler(self.repo_root, on_event, debounce_delay)

	@property
	def is_running(self) -> bool:
		"""Whether the observer thread is alive."""
		return self.observer.is_alive()

	def start(self) -> None:
		"""Start monitoring the repository."""
		self.observer.schedule(self.event_handler, str(self.repo_root), recursive=True)
		self.observer.start()
		logger.info("Started watching repository: %s", self.repo_root)

	def stop(self) -> None:
		"""Stop monitoring and discard undelivered events."""
		if self.observer.is_alive():
			self.observer.stop()
			self.observer.join()
			logger.info("Watchdog observer stopped.")
		self.event_handler.cancel()


class WatchSession:
	"""
	Holds at most one running RepoWatcher for the process.

	Starting a session replaces any watcher that is already running. Stopping is
	always safe, including when nothing is running.

	"""

	def __init__(self, debounce_delay: float = DEFAULT_DEBOUNCE_DELAY) -> None:
		"""Initialize an idle session."""
		self.debounce_delay = debounce_delay
		self._lock = threading.Lock()
		self._watcher: RepoWatcher | None = None

	@property
	def is_running(self) -> bool:
		"""Whether a watcher is currently running."""
		with self._lock:
			return self._watcher is not None and self._watcher.is_running

	def start(self, repo_path: str | Path, on_event: Callable[[WatchEvent], None]) -> None:
		"""
		Start watching a repository, replacing any running watcher.

		Raises:
			ValueError: If the repository path does not exist.

		"""
		if not Path(repo_path).exists():
			msg = f"Repository path does not exist: {repo_path}"
			raise ValueError(msg)

		with self._lock:
			self._stop_locked()
			watcher = RepoWatcher(repo_path, on_event, self.debounce_delay)
			watcher.start()
			self._watcher = watcher

	def stop(self) -> None:
		"""Stop the running watcher, if any."""
		with self._lock:
			self._stop_locked()

	def _stop_locked(self) -> None:
		if self._watcher is None:
			return
		self._watcher.stop()
		self._watcher = None
