"""Persisted marker that re-associates a returning visitor with their registration."""
import logging
import os
import re
import secrets
from typing import Optional

from springlog.services.storage_service import load_json, save_json

logger = logging.getLogger(__name__)

MARKER_KEY = "last_emp_id"

_BROWSER_TOKEN_PATTERN = re.compile(r"[0-9a-f]{32}")


def new_browser_token() -> str:
    """Random token identifying one browser."""
    return secrets.token_hex(16)


def is_browser_token(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(_BROWSER_TOKEN_PATTERN.fullmatch(value))


def marker_for_browser(directory: str, browser_token: str) -> "IdentityMarker":
    """
    Build the marker belonging to one browser.

    Raises:
        ValueError: If the token is not a value from new_browser_token()
    """
    if not is_browser_token(browser_token):
        raise ValueError(f"Invalid browser token: {browser_token!r}")
    return IdentityMarker(os.path.join(directory, f"{browser_token}.json"))


class IdentityMarker:
    """
    A single persisted string: the last employee number submitted from one browser.

    Written on every successful submit, read on startup. No expiry, no
    versioning; unreadable files read as "no marker".
    """

    def __init__(self, file_path: str):
        self.file_path = file_path

    def get(self) -> Optional[str]:
        """Return the stored employee number, or None."""
        try:
            data = load_json(self.file_path)
        except FileNotFoundError:
            return None
        except (ValueError, OSError) as e:
            logger.warning(f"Ignoring unreadable identity marker {self.file_path}: {e}")
            return None

        value = data.get(MARKER_KEY) if isinstance(data, dict) else None
        if not isinstance(value, str) or not value.strip():
            return None
        return value

    def set(self, employee_identifier: str) -> None:
        """
        Persist the employee number.

        Raises:
            IOError: If the marker file cannot be written
        """
        save_json(self.file_path, {MARKER_KEY: employee_identifier})

    def clear(self) -> None:
        """Forget the stored employee number."""
        try:
            os.remove(self.file_path)
        except FileNotFoundError:
            pass


class MemoryIdentityMarker(IdentityMarker):
    """Non-persistent marker for tests and for running without a writable data dir."""

    def __init__(self, value: Optional[str] = None):
        super().__init__(file_path="")
        self._value = value

    def get(self) -> Optional[str]:
        return self._value

    def set(self, employee_identifier: str) -> None:
        self._value = employee_identifier

    def clear(self) -> None:
        self._value = None
