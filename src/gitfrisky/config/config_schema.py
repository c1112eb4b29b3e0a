"""Pydantic schemas for the gitfrisky configuration file."""

from pydantic import BaseModel, Field


class DiffSchema(BaseModel):
	"""Settings for diff extraction."""

	context_lines: int = Field(default=3, ge=0)


class LogSchema(BaseModel):
	"""Settings for the commit log."""

	limit: int = Field(default=500, gt=0)


class WatchSchema(BaseModel):
	"""Settings for the repository watcher."""

	debounce_ms: int = Field(default=300, ge=0)


class LoggingSchema(BaseModel):
	"""Settings for log output."""

	verbose: bool = False
	log_file: str | None = None


class AppConfigSchema(BaseModel):
	"""Top-level configuration."""

	diff: DiffSchema = Field(default_factory=DiffSchema)
	log: LogSchema = Field(default_factory=LogSchema)
	watch: WatchSchema = Field(default_factory=WatchSchema)
	logging: LoggingSchema = Field(default_factory=LoggingSchema)
