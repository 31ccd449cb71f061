"""
Integration tests — login with multiple identifiers (multi-field login).

Endpoint under test:  POST /api/accounts/auth/login/
                      (named URL: accounts:login)
Request payload:      {"identifier": "<username|email|badge_number>",
                       "password": "<password>"}
Success response:     HTTP 200, body contains {"access": "...", "refresh": "...",
                      "user": {...}}; the access token carries the
                      ``user_type`` and ``primary_unit_id`` claims used for
                      unit scoping.
Failure response:     HTTP 400 — CustomTokenObtainPairSerializer.validate
                      raises ValidationError when credentials are invalid.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from units.models import Unit

User = get_user_model()

# ── Constants ────────────────────────────────────────────────────────────────
_PASSWORD = "Str0ng!Pass99"

_USER_FIELDS = {
    "username":     "login_test_user",
    "email":        "login_test_user@example.com",
    "badge_number": "B-1099",
    "first_name":   "Login",
    "last_name":    "Tester",
}


class TestAuthLoginMultiIdentifier(TestCase):
    """Integration tests for the multi-field login endpoint."""

    @classmethod
    def setUpTestData(cls):
        cls.unit = Unit.objects.create(name="Kotwali PS", code="KTW01")
        cls.user = User.objects.create_user(
            password=_PASSWORD,
            primary_unit=cls.unit,
            **_USER_FIELDS,
        )

    def setUp(self):
        self.client = APIClient()
        self.login_url = reverse("accounts:login")

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _post_login(self, identifier: str, password: str):
        return self.client.post(
            self.login_url,
            {"identifier": identifier, "password": password},
            format="json",
        )

    def _assert_token_shape(self, resp):
        self.assertIn("access", resp.data)
        self.assertIn("refresh", resp.data)
        self.assertTrue(resp.data["access"])
        self.assertTrue(resp.data["refresh"])

    # ── Success tests ────────────────────────────────────────────────────────

    def test_all_identifier_types_succeed(self):
        """Username, email and badge number each authenticate the same user."""
        for field_name in ("username", "email", "badge_number"):
            with self.subTest(identifier_field=field_name):
                resp = self._post_login(_USER_FIELDS[field_name], _PASSWORD)
                self.assertEqual(
                    resp.status_code,
                    status.HTTP_200_OK,
                    msg=f"Login with {field_name} expected HTTP 200. Body: {resp.data}",
                )
                self._assert_token_shape(resp)
                self.assertEqual(resp.data["user"]["id"], self.user.pk)

    def test_email_is_case_insensitive(self):
        resp = self._post_login(_USER_FIELDS["email"].upper(), _PASSWORD)
        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)

    def test_access_token_carries_unit_claims(self):
        """The access token exposes user_type and primary_unit_id."""
        resp = self._post_login(_USER_FIELDS["username"], _PASSWORD)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

        token = AccessToken(resp.data["access"])
        self.assertEqual(token["user_type"], "OFFICER")
        self.assertEqual(token["primary_unit_id"], str(self.unit.pk))

    def test_user_payload_includes_primary_unit(self):
        resp = self._post_login(_USER_FIELDS["username"], _PASSWORD)
        user_data = resp.data["user"]
        self.assertEqual(user_data["username"], _USER_FIELDS["username"])
        self.assertEqual(user_data["primary_unit"]["code"], "KTW01")
        self.assertFalse(user_data["is_admin"])
        self.assertNotIn("password", user_data)

    def test_admin_without_unit_has_null_unit_claim(self):
        User.objects.create_user(
            username="hq_admin",
            email="hq_admin@example.com",
            password=_PASSWORD,
            user_type="ADMIN",
        )
        resp = self._post_login("hq_admin", _PASSWORD)
        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)

        token = AccessToken(resp.data["access"])
        self.assertEqual(token["user_type"], "ADMIN")
        self.assertIsNone(token["primary_unit_id"])
        self.assertTrue(resp.data["user"]["is_admin"])

    # ── Negative tests ───────────────────────────────────────────────────────

    def test_wrong_password_rejected(self):
        resp = self._post_login(_USER_FIELDS["username"], "WrongPassword!")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("detail", resp.data)

    def test_unknown_identifier_rejected(self):
        resp = self._post_login("nobody_at_all_xyz", _PASSWORD)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("detail", resp.data)

    def test_inactive_user_cannot_login(self):
        inactive = User.objects.create_user(
            username="inactive_login_user",
            password=_PASSWORD,
            email="inactive_login@example.com",
            is_active=False,
        )
        resp = self._post_login(inactive.username, _PASSWORD)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_missing_password_field_rejected(self):
        resp = self.client.post(
            self.login_url,
            {"identifier": _USER_FIELDS["username"]},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password", resp.data)

    def test_missing_identifier_field_rejected(self):
        resp = self.client.post(self.login_url, {"password": _PASSWORD}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("identifier", resp.data)

    def test_refresh_token_issues_new_access_token(self):
        resp = self._post_login(_USER_FIELDS["username"], _PASSWORD)
        refresh_resp = self.client.post(
            reverse("accounts:token-refresh"),
            {"refresh": resp.data["refresh"]},
            format="json",
        )
        self.assertEqual(refresh_resp.status_code, status.HTTP_200_OK)
        self.assertIn("access", refresh_resp.data)
