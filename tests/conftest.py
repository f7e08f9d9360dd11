"""Test fixtures for haremote tests."""

import os
from collections.abc import Generator

import pytest

# Qt needs a platform plugin even though no window is shown
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from fakes import FakeTransport  # noqa: E402

from haremote.core.config import ConfigManager  # noqa: E402
from haremote.models.configuration import ApiConfiguration  # noqa: E402

BASE_URL = "http://homeassistant.local:8123"
API_KEY = "test-token"


@pytest.fixture
def transport() -> FakeTransport:
    """Return a fresh recording transport."""
    return FakeTransport()


@pytest.fixture
def api_config() -> ApiConfiguration:
    """Return a complete hub configuration."""
    return ApiConfiguration(base_url=BASE_URL, api_key=API_KEY)


@pytest.fixture
def config_manager() -> Generator[ConfigManager, None, None]:
    """Return a ConfigManager on an isolated, emptied settings file."""
    # Use unique organization/app to avoid test interference
    config = ConfigManager("HARemoteTest", "TestConfig")
    config.clear()
    yield config
    config.clear()
