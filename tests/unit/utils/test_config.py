"""Unit tests for configuration loading."""
import os

import pytest

from springlog.utils import config
from springlog.utils.config import DEFAULT_IDENTITY_DIR, get_settings, load_env_file

ENV_VARS = [
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "SUPABASE_TABLE",
    "SUPABASE_TIMEOUT",
    "IDENTITY_DIR",
    "REGISTRATION_CACHE_FILE",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "ADMIN_PASSWORD",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "_ENV_LOADED", True)


class TestGetSettings:
    """Test get_settings."""

    def test_defaults(self, clean_env):
        settings = get_settings()

        assert settings.supabase_url == ""
        assert settings.supabase_table == "registrations"
        assert settings.request_timeout == 10.0
        assert settings.identity_dir == DEFAULT_IDENTITY_DIR
        assert settings.cache_file is None
        assert settings.admin_password == "admin"

    def test_reads_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co/")
        monkeypatch.setenv("SUPABASE_ANON_KEY", "  key  ")
        monkeypatch.setenv("SUPABASE_TIMEOUT", "2.5")
        monkeypatch.setenv("REGISTRATION_CACHE_FILE", "data/cache.json")

        settings = get_settings()

        assert settings.supabase_url == "https://demo.supabase.co"
        assert settings.supabase_anon_key == "key"
        assert settings.request_timeout == 2.5
        assert settings.cache_file == "data/cache.json"

    def test_non_numeric_timeout_falls_back(self, clean_env, monkeypatch):
        monkeypatch.setenv("SUPABASE_TIMEOUT", "soon")
        assert get_settings().request_timeout == 10.0

    def test_blank_table_falls_back(self, clean_env, monkeypatch):
        monkeypatch.setenv("SUPABASE_TABLE", " ")
        assert get_settings().supabase_table == "registrations"


class TestLoadEnvFile:
    """Test .env loading."""

    def test_loads_values_without_overriding(self, clean_env, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "# comment\n"
            "SUPABASE_URL='https://from-file.supabase.co'\n"
            "ADMIN_PASSWORD=from-file\n"
            "not a pair\n",
            encoding="utf-8",
        )
        monkeypatch.setenv("ADMIN_PASSWORD", "from-env")
        monkeypatch.setattr(config, "_ENV_LOADED", False)
        # Register for cleanup; load_env_file writes os.environ directly.
        monkeypatch.setenv("SUPABASE_URL", "placeholder")
        monkeypatch.delenv("SUPABASE_URL")

        load_env_file(env_file)

        assert os.environ["SUPABASE_URL"] == "https://from-file.supabase.co"
        assert os.environ["ADMIN_PASSWORD"] == "from-env"

    def test_loads_only_once(self, clean_env, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("OPENAI_MODEL=first\n", encoding="utf-8")
        monkeypatch.setattr(config, "_ENV_LOADED", False)
        monkeypatch.setenv("OPENAI_MODEL", "placeholder")
        monkeypatch.delenv("OPENAI_MODEL")

        load_env_file(env_file)
        env_file.write_text("OPENAI_MODEL=second\n", encoding="utf-8")
        monkeypatch.delenv("OPENAI_MODEL")
        load_env_file(env_file)

        assert "OPENAI_MODEL" not in os.environ
