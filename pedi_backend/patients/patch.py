"""
Partial update type for patient records.

Every field defaults to UNSET. A field that is UNSET was absent from the
request and must be left untouched; a field holding None was sent as
null (or as an empty value that normalizes to null) and clears the
stored value.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Mapping


class _Unset:
    """Sentinel for a field that was not supplied."""

    def __repr__(self) -> str:
        return 'UNSET'

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class PatientPatch:
    first_name: str = UNSET
    last_name: str = UNSET
    date_of_birth: datetime = UNSET
    parent_name: str = UNSET
    phone_number: str = UNSET
    email: str | None = UNSET
    address: str | None = UNSET
    profile_image: str | None = UNSET
    medical_notes: str | None = UNSET
    last_visit: datetime | None = UNSET

    @classmethod
    def from_validated(cls, data: Mapping[str, Any]) -> PatientPatch:
        """Build a patch from serializer validated_data (model field names)."""
        return cls(**dict(data))

    def changes(self) -> dict[str, Any]:
        """Supplied fields only, keyed by model field name."""
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not UNSET:
                result[f.name] = value
        return result

    def is_empty(self) -> bool:
        return not self.changes()
