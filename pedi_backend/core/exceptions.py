"""
Domain exceptions shared by the record service and the upload subsystem.

These exceptions are raised by the service layers and translated to
DRF responses in the views. Every error renders the same JSON shape:

    {"error": "<message>", "details": <optional>}
"""

from __future__ import annotations

from typing import Any


class PediError(Exception):
    """Base exception for all record and upload errors."""

    status_code = 500

    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = {'error': self.message}
        if self.details is not None:
            result['details'] = self.details
        return result


class ValidationError(PediError):
    """
    Caller-supplied data violates a precondition.

    Missing required field, unparseable date, wrong content type or
    oversized upload. Recoverable by resubmitting corrected input.
    """
    status_code = 400


class NotFoundError(PediError):
    """Raised when the referenced patient record does not exist."""
    status_code = 404

    def __init__(self, message: str = 'Patient not found', details: Any = None):
        super().__init__(message, details)


class ConfigurationError(PediError):
    """
    The deployment lacks required storage configuration.

    Raised before any side effect happens; not fixable by the caller.
    """
    status_code = 500


class StorageError(PediError):
    """
    The database or the object-storage backend rejected an operation.

    Attributes:
        transient: True when resubmitting the same request may succeed
            (timeouts, connection loss, throttling, 5xx from the backend).
    """
    status_code = 500

    def __init__(self, message: str, details: Any = None, *, transient: bool = False):
        self.transient = transient
        super().__init__(message, details)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result['transient'] = self.transient
        return result
