"""Registration service: keeps the in-memory collection in sync with the stores."""
import logging
import time
from dataclasses import replace
from enum import Enum
from typing import Callable, List, Optional, Tuple

from springlog.models.registration import Registration, RegistrationForm
from springlog.services.identity_marker import IdentityMarker
from springlog.services.remote_store import RemoteStoreClient
from springlog.services.seed_data import load_seed_registrations
from springlog.services.storage_service import load_registrations, save_registrations
from springlog.utils.date_utils import now_timestamp
from springlog.utils.exceptions import RegistrationError, RemoteStoreError, ValidationError
from springlog.utils.validation import normalize_employee_identifier

logger = logging.getLogger(__name__)


class SyncState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


def generate_registration_id() -> str:
    """Synthesize an opaque id from the submission time in milliseconds."""
    return f"user-{int(time.time() * 1000)}"


class RegistrationSynchronizer:
    """
    Owns the registration collection for one browser session.

    Holds the collection, the current session's registration id and the
    identity marker. Loading falls back from the remote store to the local
    cache (if enabled) to bundled seed data, so the collection is never
    empty once READY.
    """

    def __init__(
        self,
        remote: RemoteStoreClient,
        marker: IdentityMarker,
        seed: Optional[Callable[[], List[Registration]]] = None,
        cache_path: Optional[str] = None,
        id_factory: Callable[[], str] = generate_registration_id,
        clock: Callable[[], str] = now_timestamp,
    ):
        self.remote = remote
        self.marker = marker
        self.cache_path = cache_path
        self._seed = seed or load_seed_registrations
        self._id_factory = id_factory
        self._clock = clock

        self._registrations: List[Registration] = []
        self.current_user_id: Optional[str] = None
        self.state = SyncState.UNINITIALIZED
        self.source: Optional[str] = None

    @property
    def registrations(self) -> List[Registration]:
        """Snapshot of the collection, most recent submission first."""
        return list(self._registrations)

    @property
    def is_ready(self) -> bool:
        return self.state == SyncState.READY

    def load(self) -> List[Registration]:
        """
        Populate the collection.

        Returns:
            The loaded registrations

        Behavior:
            - Unconfigured remote store: seed data
            - Configured: fetch_all(); non-empty result is adopted
            - Empty result (including fetch failure): cache, then seed data
            - No-op once READY
        """
        if self.state == SyncState.READY:
            return self.registrations

        self.state = SyncState.LOADING
        registrations: List[Registration] = []

        if self.remote.is_configured():
            registrations = self.remote.fetch_all()
            if registrations:
                self.source = "remote"
                self._write_cache(registrations)
            else:
                logger.info("Remote store returned no registrations, falling back")
        else:
            logger.info("Remote store not configured: %s", ", ".join(self.remote.get_diagnostics()))

        if not registrations and self.cache_path:
            registrations = load_registrations(self.cache_path)
            if registrations:
                self.source = "cache"

        if not registrations:
            registrations = self._seed()
            self.source = "seed"

        self._registrations = registrations
        self.state = SyncState.READY
        logger.info("Loaded %d registrations from %s", len(registrations), self.source)
        return self.registrations

    def _find_index(self, employee_identifier: str) -> Optional[int]:
        key = normalize_employee_identifier(employee_identifier)
        for index, registration in enumerate(self._registrations):
            if normalize_employee_identifier(registration.employee_identifier) == key:
                return index
        return None

    def _id_in_use(self, registration_id: str) -> bool:
        return any(r.id == registration_id for r in self._registrations)

    def submit(self, form: RegistrationForm) -> Tuple[bool, str, Registration]:
        """
        Create or update the current user's registration.

        Args:
            form: Submitted fields

        Returns:
            Tuple of (remote_ok: bool, message: str, registration)
            - (True, "报名成功", reg) when saved (or no remote store configured)
            - (False, error_message, reg) when the remote save failed; the
              local collection keeps the update

        Raises:
            RegistrationError: If called before load()
            ValidationError: If the form is invalid
        """
        if self.state != SyncState.READY:
            raise RegistrationError("Registrations have not been loaded yet")

        is_valid, error_msg = form.validate()
        if not is_valid:
            raise ValidationError(error_msg)

        form = replace(form, employee_identifier=normalize_employee_identifier(form.employee_identifier))
        index = self._find_index(form.employee_identifier)

        # An existing row keeps its id and its key exactly as stored.
        if index is not None:
            existing = self._registrations[index]
            registration_id = existing.id
            form = replace(form, employee_identifier=existing.employee_identifier)
        elif self.current_user_id and not self._id_in_use(self.current_user_id):
            registration_id = self.current_user_id
        else:
            registration_id = self._id_factory()

        registration = Registration.from_form(form, registration_id, self._clock())

        if index is not None:
            self._registrations[index] = registration
        else:
            self._registrations.insert(0, registration)

        remote_ok, message = True, "报名成功"
        if self.remote.is_configured():
            try:
                self.remote.save(registration)
            except RemoteStoreError as e:
                logger.error(f"Remote save failed for {registration.employee_identifier}: {e}")
                remote_ok = False
                message = f"已在本地保存，但同步到云端失败：{e}"

        self._write_cache(self._registrations)

        try:
            self.marker.set(registration.employee_identifier)
        except IOError as e:
            logger.error(f"Failed to persist identity marker: {e}")

        self.current_user_id = registration.id
        return remote_ok, message, registration

    def identify_current_user(self) -> Optional[Registration]:
        """
        Find the current user's registration.

        Matches either the session's registration id or the employee number
        stored by the identity marker; returns the first match.
        """
        marker_value = self.marker.get()
        marker_key = normalize_employee_identifier(marker_value) if marker_value else None

        for registration in self._registrations:
            if self.current_user_id is not None and registration.id == self.current_user_id:
                return registration
            if marker_key is not None and normalize_employee_identifier(registration.employee_identifier) == marker_key:
                return registration
        return None

    def forget_current_user(self) -> None:
        """Drop the session id and identity marker; the collection is untouched."""
        self.current_user_id = None
        self.marker.clear()

    def _write_cache(self, registrations: List[Registration]) -> None:
        if not self.cache_path:
            return
        try:
            save_registrations(self.cache_path, registrations)
        except IOError as e:
            logger.error(f"Failed to write registration cache: {e}")
