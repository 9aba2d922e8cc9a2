"""
Patient record service.

All create/read/update/delete logic for patient records lives here.
Views delegate to these functions and translate the exceptions from
pedi_backend.core.exceptions into responses.

Rules:
- Input is validated and normalized completely before anything is written.
- Update is a field-level merge written with a single UPDATE statement over
  the supplied columns; concurrent writers are last-write-wins.
- Delete is a hard delete; deleting a missing record is a NotFoundError.
"""

from __future__ import annotations

import uuid
from datetime import timedelta
from typing import Any, Mapping

from django.db import Error as DatabaseError
from django.db import InterfaceError, OperationalError
from django.utils import timezone

from pedi_backend.core.exceptions import NotFoundError, StorageError, ValidationError
from pedi_backend.core.utils import log_patient_action
from pedi_backend.patients.models import Patient
from pedi_backend.patients.patch import PatientPatch
from pedi_backend.patients.serializers import PatientWriteSerializer


# ---------------------------------------------------------------------------
# Helper Functions
# ---------------------------------------------------------------------------

def _parse_id(patient_id) -> uuid.UUID:
    """Coerce a path/lookup value to a UUID; malformed ids cannot exist."""
    if isinstance(patient_id, uuid.UUID):
        return patient_id
    try:
        return uuid.UUID(str(patient_id))
    except (TypeError, ValueError):
        raise NotFoundError()


def _storage_error(message: str, exc: DatabaseError) -> StorageError:
    transient = isinstance(exc, (OperationalError, InterfaceError))
    return StorageError(message, details=str(exc), transient=transient)


def _validated(payload: Mapping[str, Any] | None, *, partial: bool) -> dict[str, Any]:
    serializer = PatientWriteSerializer(data=payload if payload is not None else {}, partial=partial)
    if not serializer.is_valid():
        raise ValidationError('Invalid patient data', details=dict(serializer.errors))
    return dict(serializer.validated_data)


def parse_patch(payload: Mapping[str, Any] | None) -> PatientPatch:
    """Validate a partial payload and return it as a PatientPatch."""
    return PatientPatch.from_validated(_validated(payload, partial=True))


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def create_patient(payload: Mapping[str, Any] | None, *, user=None) -> Patient:
    """Create a patient record.

    Raises:
        ValidationError: a required field is missing/blank or a date is unparseable.
        StorageError: the database rejected the insert.
    """
    data = _validated(payload, partial=False)
    now = timezone.now()

    try:
        patient = Patient.objects.create(created_at=now, updated_at=now, **data)
    except DatabaseError as exc:
        raise _storage_error('Failed to create patient', exc) from exc

    log_patient_action(user, 'patient_created', patient_id=patient.pk)
    return patient


def get_patient(patient_id, *, user=None) -> Patient:
    """Return one record or raise NotFoundError."""
    pk = _parse_id(patient_id)
    try:
        patient = Patient.objects.get(pk=pk)
    except Patient.DoesNotExist:
        raise NotFoundError()
    except DatabaseError as exc:
        raise _storage_error('Failed to fetch patient', exc) from exc

    if user is not None:
        log_patient_action(user, 'patient_view', patient_id=pk)
    return patient


def list_patients(*, user=None) -> list[Patient]:
    """All records, most recently created first."""
    try:
        patients = list(Patient.objects.order_by('-created_at', '-id'))
    except DatabaseError as exc:
        raise _storage_error('Failed to fetch patients', exc) from exc

    if user is not None:
        log_patient_action(user, 'patient_list', meta={'count': len(patients)})
    return patients


def update_patient(patient_id, payload: Mapping[str, Any] | None, *, user=None) -> Patient:
    """Merge the supplied fields into an existing record.

    Fields absent from ``payload`` are left untouched. id, createdAt and
    updatedAt in the payload are ignored; updatedAt is set server-side and
    always moves forward.

    Raises:
        NotFoundError: no record with that id.
        ValidationError: a supplied field is invalid.
        StorageError: the database rejected the update.
    """
    current = get_patient(patient_id)
    patch = parse_patch(payload)

    changes = patch.changes()
    changes['updated_at'] = max(timezone.now(), current.updated_at + timedelta(microseconds=1))

    try:
        updated = Patient.objects.filter(pk=current.pk).update(**changes)
    except DatabaseError as exc:
        raise _storage_error('Failed to update patient', exc) from exc

    if not updated:
        # Deleted between the lookup and the write.
        raise NotFoundError()

    log_patient_action(user, 'patient_updated', patient_id=current.pk, meta={'fields': sorted(patch.changes())})
    return get_patient(current.pk)


def delete_patient(patient_id, *, user=None) -> None:
    """Permanently remove a record; a missing record raises NotFoundError."""
    pk = _parse_id(patient_id)
    try:
        deleted, _ = Patient.objects.filter(pk=pk).delete()
    except DatabaseError as exc:
        raise _storage_error('Failed to delete patient', exc) from exc

    if not deleted:
        raise NotFoundError()

    log_patient_action(user, 'patient_deleted', patient_id=pk)
