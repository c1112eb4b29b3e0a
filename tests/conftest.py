"""Global test fixtures and configuration."""

from collections.abc import Iterator

import pytest

from gitfrisky.config import ConfigLoader


@pytest.fixture(autouse=True)
def reset_config_loader() -> Iterator[None]:
	"""Drop the configuration singleton so no test sees another test's config file."""
	ConfigLoader._instance = None
	yield
	ConfigLoader._instance = None
