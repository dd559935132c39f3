"""
HTTP client for the hosted registration store.

The store exposes a PostgREST-style REST endpoint for a single
`registrations` table. Reads degrade to an empty list; writes raise
RemoteStoreError so the caller can tell the user.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from springlog.models.registration import Registration
from springlog.utils.config import Settings, get_settings
from springlog.utils.exceptions import RemoteStoreError

logger = logging.getLogger(__name__)

PLACEHOLDER_URL_MARKER = "your-project"
MIN_API_KEY_LENGTH = 50
CONFLICT_COLUMN = "employee_id"

# model attribute -> wire column
FIELD_MAP = {
    "id": "id",
    "name": "name",
    "employee_identifier": "employee_id",
    "contact_info": "contact_info",
    "dietary_preference": "dietary",
    "activity_interest": "activity_interest",
    "commute_preference": "carpool",
    "submitted_at": "timestamp",
}


def registration_to_row(registration: Registration) -> Dict[str, Any]:
    """Translate a registration into a store row."""
    row = {column: getattr(registration, attr) for attr, column in FIELD_MAP.items()}
    row["carpool"] = registration.commute_preference.value
    return row


def row_to_registration(row: Dict[str, Any]) -> Registration:
    """
    Translate a store row into a registration.

    Raises:
        ValueError: If the row is not an object or misses required columns
    """
    if not isinstance(row, dict):
        raise ValueError(f"Expected an object row, got {type(row).__name__}")

    values = {}
    for attr, column in FIELD_MAP.items():
        value = row.get(column)
        if value is not None:
            values[attr] = value if attr != "id" else str(value)

    try:
        return Registration(**values)
    except TypeError as e:
        raise ValueError(f"Incomplete row: {e}") from e


class RemoteStoreClient:
    """Thin client around the registrations REST resource."""

    def __init__(
        self,
        url: str,
        api_key: str,
        table: str = "registrations",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.url = (url or "").rstrip("/")
        self.api_key = api_key or ""
        self.table = table
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(cls, settings: Optional[Settings] = None) -> "RemoteStoreClient":
        settings = settings or get_settings()
        return cls(
            url=settings.supabase_url,
            api_key=settings.supabase_anon_key,
            table=settings.supabase_table,
            timeout=settings.request_timeout,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.url}/rest/v1/{self.table}"

    def get_diagnostics(self) -> List[str]:
        """
        List configuration problems.

        Returns:
            Human-readable issues; empty when the client is usable
        """
        issues = []
        if not self.url or PLACEHOLDER_URL_MARKER in self.url:
            issues.append("缺少 SUPABASE_URL")
        if not self.api_key or len(self.api_key) < MIN_API_KEY_LENGTH:
            issues.append("缺少有效的 SUPABASE_ANON_KEY")
        return issues

    def is_configured(self) -> bool:
        """True when both endpoint and credential look real. No I/O."""
        return not self.get_diagnostics()

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self._transport)

    @staticmethod
    def _error_message(response: httpx.Response, fallback: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"{fallback} (HTTP {response.status_code})"
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return f"{fallback} (HTTP {response.status_code})"

    def fetch_all(self) -> List[Registration]:
        """
        Fetch every registration, newest first.

        Returns:
            Registrations ordered by submission time descending; empty list
            when unconfigured or on any network, status or parse failure
        """
        if not self.is_configured():
            return []

        try:
            with self._client() as client:
                response = client.get(
                    self.endpoint,
                    params={"select": "*", "order": "timestamp.desc"},
                    headers=self._headers(),
                )
        except httpx.HTTPError as e:
            logger.error(f"Registration fetch failed: {e}")
            return []

        if not response.is_success:
            logger.error(
                "Registration fetch returned %s: %s",
                response.status_code,
                self._error_message(response, "Fetch failed"),
            )
            return []

        try:
            rows = response.json()
        except ValueError as e:
            logger.error(f"Registration fetch returned malformed JSON: {e}")
            return []

        if not isinstance(rows, list):
            logger.error(f"Registration fetch expected a list, got {type(rows).__name__}")
            return []

        registrations = []
        for row in rows:
            try:
                registrations.append(row_to_registration(row))
            except ValueError as e:
                logger.warning(f"Skipping malformed registration row: {e}")
        return registrations

    def save(self, registration: Registration) -> None:
        """
        Insert or update a registration keyed on its employee number.

        Raises:
            RemoteStoreError: On network failure or non-success status
        """
        if not self.is_configured():
            return

        headers = self._headers()
        headers["Prefer"] = "resolution=merge-duplicates"

        try:
            with self._client() as client:
                response = client.post(
                    self.endpoint,
                    params={"on_conflict": CONFLICT_COLUMN},
                    headers=headers,
                    json=registration_to_row(registration),
                )
        except httpx.HTTPError as e:
            logger.error(f"Registration save failed for {registration.employee_identifier}: {e}")
            raise RemoteStoreError(f"无法连接到数据服务：{e}") from e

        if not response.is_success:
            message = self._error_message(response, "Save failed")
            logger.error(
                "Registration save for %s returned %s: %s",
                registration.employee_identifier,
                response.status_code,
                message,
            )
            raise RemoteStoreError(message, status_code=response.status_code)
