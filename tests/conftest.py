"""Shared pytest fixtures."""
import pytest

from springlog.utils import config


@pytest.fixture(autouse=True)
def skip_dotenv(monkeypatch):
    """Keep a developer's local .env out of test runs."""
    monkeypatch.setattr(config, "_ENV_LOADED", True)
