"""Filewatcher module for repository change notifications."""

from gitfrisky.watcher.file_watcher import (
	RepoEventHandler,
	RepoWatcher,
	WatchEvent,
	WatchEventKind,
	WatchSession,
	classify_event,
)

__all__ = ["RepoEventHandler", "RepoWatcher", "WatchEvent", "WatchEventKind", "WatchSession", "classify_event"]
