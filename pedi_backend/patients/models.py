import uuid

from django.db import models


class Patient(models.Model):
    """Pediatric patient profile.

    Date fields are stored as instants (midnight UTC of the calendar date).
    Optional text fields hold NULL, never an empty string.
    profile_image is an opaque reference returned by the upload subsystem.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    date_of_birth = models.DateTimeField()
    parent_name = models.CharField(max_length=200)
    phone_number = models.CharField(max_length=50)
    email = models.CharField(max_length=254, null=True, blank=True)
    address = models.TextField(null=True, blank=True)
    profile_image = models.TextField(null=True, blank=True)
    medical_notes = models.TextField(null=True, blank=True)
    last_visit = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(editable=False)
    updated_at = models.DateTimeField()

    class Meta:
        db_table = 'patients_patient'
        ordering = ['-created_at']
        verbose_name = 'Patient'
        verbose_name_plural = 'Patients'

    def __str__(self) -> str:
        return f"{self.last_name}, {self.first_name}"
