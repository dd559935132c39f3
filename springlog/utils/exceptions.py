"""Custom exception classes."""
from typing import Optional


class RegistrationError(Exception):
    """Base error for registration persistence and synchronization."""
    pass


class ValidationError(RegistrationError):
    """Raised when registration data fails validation."""
    pass


class RemoteStoreError(RegistrationError):
    """Raised when a write to the remote registration store fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
