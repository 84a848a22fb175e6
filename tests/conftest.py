"""
pytest configuration and fixtures.

Loads environment variables from .env file for all tests and resets the
process-wide caches between tests.
"""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from reminderbot.config import get_settings
from reminderbot.worker import handlers


def pytest_configure(config):
    """Load .env file before running tests"""
    project_root = Path(__file__).parent.parent
    env_file = project_root / ".env"

    if env_file.exists():
        print(f"Loading environment from {env_file}")
        load_dotenv(env_file)


@pytest.fixture(autouse=True)
def reset_cached_clients():
    """Settings, clients and the Trello resolver are cached per process."""
    get_settings.cache_clear()
    handlers.get_slack_client.cache_clear()
    handlers.get_shopify_client.cache_clear()
    handlers.get_trello_client.cache_clear()
    handlers.get_trello_resolver.cache_clear()
    yield
