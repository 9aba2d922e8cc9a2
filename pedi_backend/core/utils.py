import logging

from rest_framework.response import Response

from .exceptions import PediError

logger = logging.getLogger(__name__)


def log_patient_action(user, action, patient_id=None, meta=None):
    """Writes one log line per patient record action (no persisted audit trail)."""

    username = getattr(user, 'username', '') or 'anonymous'
    if meta:
        logger.info('%s by %s (patient_id=%s) %s', action, username, patient_id, meta)
    else:
        logger.info('%s by %s (patient_id=%s)', action, username, patient_id)


def error_response(exc: PediError) -> Response:
    """Render a domain exception as a DRF response with its own status code."""
    return Response(exc.to_dict(), status=exc.status_code)
