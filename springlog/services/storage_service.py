"""Low-level JSON file I/O and the local registration cache."""
import json
import logging
import os
import tempfile
from dataclasses import asdict
from typing import Any, Dict, List

from springlog.models.registration import Registration

logger = logging.getLogger(__name__)

CACHE_VERSION = 1


def load_json(file_path: str) -> Dict[str, Any]:
    """
    Read a small UTF-8 JSON document.

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If JSON is malformed
    """
    with open(file_path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise json.JSONDecodeError(f"Malformed JSON in {file_path}: {e.msg}", e.doc, e.pos) from e


def save_json(file_path: str, data: Dict[str, Any]) -> None:
    """
    Save data to JSON file atomically with UTF-8 encoding.

    The payload is written to a temp file in the same directory and renamed
    over the target, so readers never observe a half-written file.

    Raises:
        IOError: If write operation fails
    """
    dir_path = os.path.dirname(file_path)
    if dir_path and not os.path.exists(dir_path):
        os.makedirs(dir_path, exist_ok=True)

    temp_fd, temp_path = tempfile.mkstemp(
        dir=dir_path if dir_path else ".",
        prefix=".tmp_",
        suffix=".json"
    )

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, file_path)

    except Exception as e:
        if os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError:
                logger.warning("Could not remove temp file %s", temp_path)
        raise IOError(f"Failed to write file {file_path}: {e}") from e


def load_registrations(file_path: str) -> List[Registration]:
    """
    Load the locally cached registration collection.

    Returns:
        Cached registrations in stored order; empty list if the cache is
        missing or unreadable. Malformed rows are skipped.
    """
    try:
        data = load_json(file_path)
    except FileNotFoundError:
        return []
    except (ValueError, OSError) as e:
        logger.error(f"Failed to read registration cache {file_path}: {e}")
        return []

    registrations = []
    for row in data.get("registrations", []):
        try:
            registrations.append(Registration(**row))
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed cached registration {row!r}: {e}")
    return registrations


def save_registrations(file_path: str, registrations: List[Registration]) -> None:
    """
    Write the registration collection to the local cache.

    Raises:
        IOError: If write operation fails
    """
    rows = []
    for registration in registrations:
        row = asdict(registration)
        row["commute_preference"] = registration.commute_preference.value
        rows.append(row)

    save_json(file_path, {"version": CACHE_VERSION, "registrations": rows})
