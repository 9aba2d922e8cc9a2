"""Serializers for patient records.

The API speaks camelCase; the model is snake_case. Field ``source``
arguments map between the two.

PatientWriteSerializer is used for both create and update (partial=True),
so the normalization rules are identical on both write paths:
- optional text: empty or whitespace-only input becomes None
- dateOfBirth: required, never null, stored as midnight UTC
- lastVisit: "" or null becomes None, otherwise midnight UTC
"""

from datetime import timezone as dt_timezone

from rest_framework import serializers
from rest_framework.fields import empty

from pedi_backend.patients.dates import normalize_instant
from pedi_backend.patients.models import Patient


class CalendarDateField(serializers.Field):
    """A calendar date stored as the instant at midnight UTC."""

    default_error_messages = {
        'invalid': 'Date has wrong format. Use YYYY-MM-DD.',
        'blank': 'This field may not be blank.',
    }

    def to_internal_value(self, data):
        if isinstance(data, str) and not data.strip():
            if self.allow_null:
                return None
            self.fail('blank')

        value = normalize_instant(data)
        if value is None:
            self.fail('invalid')
        return value

    def to_representation(self, value):
        return _isoformat_utc(value)


class NullableTextField(serializers.CharField):
    """Optional text; absent-or-empty input is stored as None."""

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_blank', True)
        kwargs.setdefault('allow_null', True)
        super().__init__(**kwargs)

    def run_validation(self, data=empty):
        value = super().run_validation(data)
        return value or None


class PatientWriteSerializer(serializers.Serializer):
    """Validates and normalizes a create payload or a partial update payload.

    id, createdAt and updatedAt are not declared, so client-supplied values
    for them never reach validated_data.
    """

    firstName = serializers.CharField(source='first_name', max_length=100)
    lastName = serializers.CharField(source='last_name', max_length=100)
    dateOfBirth = CalendarDateField(source='date_of_birth')
    parentName = serializers.CharField(source='parent_name', max_length=200)
    phoneNumber = serializers.CharField(source='phone_number', max_length=50)
    email = NullableTextField(max_length=254)
    address = NullableTextField()
    profileImage = NullableTextField(source='profile_image')
    medicalNotes = NullableTextField(source='medical_notes')
    lastVisit = CalendarDateField(source='last_visit', required=False, allow_null=True)


class PatientReadSerializer(serializers.ModelSerializer):
    """Read-only serializer with all fields."""

    firstName = serializers.CharField(source='first_name', read_only=True)
    lastName = serializers.CharField(source='last_name', read_only=True)
    dateOfBirth = CalendarDateField(source='date_of_birth', read_only=True)
    parentName = serializers.CharField(source='parent_name', read_only=True)
    phoneNumber = serializers.CharField(source='phone_number', read_only=True)
    profileImage = serializers.CharField(source='profile_image', read_only=True)
    medicalNotes = serializers.CharField(source='medical_notes', read_only=True)
    lastVisit = CalendarDateField(source='last_visit', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Patient
        fields = [
            'id',
            'firstName',
            'lastName',
            'dateOfBirth',
            'parentName',
            'phoneNumber',
            'email',
            'address',
            'profileImage',
            'medicalNotes',
            'lastVisit',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = fields


def _isoformat_utc(value):
    text = value.astimezone(dt_timezone.utc).isoformat()
    if text.endswith('+00:00'):
        text = text[:-6] + 'Z'
    return text
