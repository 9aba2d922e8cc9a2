"""Tests for the shared error taxonomy and its JSON rendering."""

from __future__ import annotations

from django.test import SimpleTestCase

from pedi_backend.core.exceptions import (
    ConfigurationError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from pedi_backend.core.utils import error_response


class ErrorRenderingTest(SimpleTestCase):

    def test_validation_error_is_400_with_details(self):
        exc = ValidationError("Invalid patient data", details={"firstName": ["required"]})
        response = error_response(exc)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.data,
            {"error": "Invalid patient data", "details": {"firstName": ["required"]}},
        )

    def test_details_omitted_when_absent(self):
        self.assertEqual(NotFoundError().to_dict(), {"error": "Patient not found"})
        self.assertEqual(error_response(NotFoundError()).status_code, 404)

    def test_configuration_error_is_500(self):
        self.assertEqual(error_response(ConfigurationError("no backend")).status_code, 500)

    def test_storage_error_reports_transient_flag(self):
        permanent = StorageError("Failed to create patient", details="constraint")
        transient = StorageError("Upload failed", transient=True)

        self.assertEqual(
            permanent.to_dict(),
            {"error": "Failed to create patient", "details": "constraint", "transient": False},
        )
        self.assertTrue(transient.to_dict()["transient"])
        self.assertEqual(error_response(transient).status_code, 500)
