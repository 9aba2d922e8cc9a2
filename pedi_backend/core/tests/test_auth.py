"""Tests for Authentication endpoints.

Tests cover:
- Login (POST /api/auth/login/)
- Refresh (POST /api/auth/refresh/)
- Me (GET /api/auth/me/)
- Health (GET /api/health/)
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase

from rest_framework import status
from rest_framework.test import APIClient


class AuthenticationTest(TestCase):
    """Tests for /api/auth/ endpoints."""

    def setUp(self):
        User = get_user_model()
        self.staff = User.objects.create_user(
            username="staff_auth_test",
            email="staff_auth@example.com",
            password="SecurePass123!",
        )
        self.inactive_user = User.objects.create_user(
            username="inactive_auth_test",
            email="inactive_auth@example.com",
            password="SecurePass123!",
            is_active=False,
        )

        self.client = APIClient()
        self.client.defaults["HTTP_HOST"] = "localhost"

    def _login(self):
        return self.client.post(
            "/api/auth/login/",
            {"username": "staff_auth_test", "password": "SecurePass123!"},
            format="json",
        )

    # ========== LOGIN TESTS ==========

    def test_login_success_returns_tokens_and_user(self):
        """Successful login returns access, refresh tokens and user info."""
        response = self._login()

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)
        self.assertEqual(response.data["user"]["id"], self.staff.id)
        self.assertEqual(response.data["user"]["username"], "staff_auth_test")

    def test_login_wrong_password_returns_400(self):
        response = self.client.post(
            "/api/auth/login/",
            {"username": "staff_auth_test", "password": "WrongPassword!"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertNotIn("access", response.data)

    def test_login_inactive_user_returns_400(self):
        """Inactive user cannot login."""
        response = self.client.post(
            "/api/auth/login/",
            {"username": "inactive_auth_test", "password": "SecurePass123!"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login_missing_fields_returns_400(self):
        response = self.client.post(
            "/api/auth/login/",
            {"username": "staff_auth_test"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    # ========== REFRESH TESTS ==========

    def test_refresh_success_returns_new_access_token(self):
        refresh_token = self._login().data["refresh"]

        response = self.client.post(
            "/api/auth/refresh/",
            {"refresh": refresh_token},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["access"])

    def test_refresh_invalid_token_returns_400(self):
        response = self.client.post(
            "/api/auth/refresh/",
            {"refresh": "invalid_token_here"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    # ========== ME ENDPOINT TESTS ==========

    def test_me_with_valid_token_returns_user(self):
        access_token = self._login().data["access"]

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {access_token}")
        response = self.client.get("/api/auth/me/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["username"], "staff_auth_test")

    def test_me_without_token_returns_401(self):
        response = self.client.get("/api/auth/me/")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_with_invalid_token_returns_401(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer invalid_token_here")
        response = self.client.get("/api/auth/me/")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    # ========== HEALTH ==========

    def test_health_requires_no_auth(self):
        response = self.client.get("/api/health/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})
