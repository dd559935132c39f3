"""Application settings loaded from the environment and an optional .env file."""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "registrations"
DEFAULT_TIMEOUT = 10.0
DEFAULT_IDENTITY_DIR = "data/identities"
DEFAULT_OPENAI_MODEL = "gpt-5-mini-2025-08-07"
DEFAULT_ADMIN_PASSWORD = "admin"

_ENV_LOADED = False
_ENV_LOCK = Lock()


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the registration app."""

    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_table: str = DEFAULT_TABLE
    request_timeout: float = DEFAULT_TIMEOUT
    identity_dir: str = DEFAULT_IDENTITY_DIR
    cache_file: Optional[str] = None
    openai_api_key: str = ""
    openai_model: str = DEFAULT_OPENAI_MODEL
    admin_password: str = DEFAULT_ADMIN_PASSWORD


def load_env_file(env_path: Path = Path(".env")) -> None:
    """
    Load KEY=VALUE pairs from a .env file into os.environ.

    Values already present in the environment win. The file is read at most
    once per process.
    """
    global _ENV_LOADED

    if _ENV_LOADED:
        return

    with _ENV_LOCK:
        if _ENV_LOADED:
            return

        if env_path.exists():
            for raw_line in env_path.read_text(encoding="utf-8").splitlines():
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"\'')

                if key and key not in os.environ:
                    os.environ[key] = value

        _ENV_LOADED = True


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %s", name, raw, default)
        return default


def get_settings() -> Settings:
    """
    Build settings from environment variables.

    Returns:
        Settings populated from SUPABASE_*, OPENAI_*, IDENTITY_DIR,
        REGISTRATION_CACHE_FILE and ADMIN_PASSWORD
    """
    load_env_file()

    return Settings(
        supabase_url=os.getenv("SUPABASE_URL", "").strip().rstrip("/"),
        supabase_anon_key=os.getenv("SUPABASE_ANON_KEY", "").strip(),
        supabase_table=os.getenv("SUPABASE_TABLE", DEFAULT_TABLE).strip() or DEFAULT_TABLE,
        request_timeout=_float_env("SUPABASE_TIMEOUT", DEFAULT_TIMEOUT),
        identity_dir=os.getenv("IDENTITY_DIR", "").strip() or DEFAULT_IDENTITY_DIR,
        cache_file=os.getenv("REGISTRATION_CACHE_FILE") or None,
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        openai_model=os.getenv("OPENAI_MODEL", "").strip() or DEFAULT_OPENAI_MODEL,
        admin_password=os.getenv("ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD),
    )
