"""Shared test configuration and fixtures."""

from collections.abc import Iterator

import pytest

import signal_scanner.core.config as config_module


@pytest.fixture(autouse=True)
def _reset_config_singleton() -> Iterator[None]:  # pyright: ignore[reportUnusedFunction]
    """Discard the cached ``ConfigLoader`` around every test.

    ``get_config()`` caches the first loader it builds, so a test that
    patches environment variables would otherwise leak its settings into
    later tests.
    """
    config_module._config = None
    yield
    config_module._config = None
