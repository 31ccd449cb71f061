"""
Accounts app serializers.

Contains the Request and Response serializers for the accounts API.
Serializers handle field definitions and basic validation.  Credential
checks are delegated to ``services.AuthenticationService``.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from units.models import Unit

User = get_user_model()


# ═══════════════════════════════════════════════════════════════════
#  Authentication Serializers
# ═══════════════════════════════════════════════════════════════════


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Custom SimpleJWT serializer that:

    1. Accepts ``identifier`` + ``password`` instead of
       ``username`` + ``password``.
    2. Resolves the user via the ``MultiFieldAuthBackend``.
    3. Injects scoping claims (``user_type``, ``primary_unit_id``)
       into the JWT payload.
    """

    username_field = "identifier"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields.pop(self.username_field, None)
        self.fields["identifier"] = serializers.CharField(
            help_text="Username, email, or badge number.",
        )

    @classmethod
    def get_token(cls, user) -> Any:
        token = super().get_token(user)
        token["user_type"] = user.user_type
        token["primary_unit_id"] = (
            str(user.primary_unit_id) if user.primary_unit_id else None
        )
        return token

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        """
        Authenticate and return ``{"access": ..., "refresh": ...}``.

        The authenticated user is kept on ``self.user`` for the view.
        """
        from .services import AuthenticationService

        user = AuthenticationService.authenticate(
            identifier=attrs.get("identifier"),
            password=attrs.get("password"),
            request=self.context.get("request"),
        )
        if user is None:
            raise serializers.ValidationError(
                {"detail": "Invalid credentials."},
                code="authentication",
            )

        refresh = self.get_token(user)
        self.user = user
        return {
            "access": str(refresh.access_token),
            "refresh": str(refresh),
        }


# ═══════════════════════════════════════════════════════════════════
#  User Serializers
# ═══════════════════════════════════════════════════════════════════


class UnitSummarySerializer(serializers.ModelSerializer):
    """Compact unit representation nested inside user payloads."""

    class Meta:
        model = Unit
        fields = ["id", "name", "code", "unit_type"]
        read_only_fields = fields


class UserDetailSerializer(serializers.ModelSerializer):
    """Full profile of a user, including their primary unit."""

    primary_unit = UnitSummarySerializer(read_only=True)
    is_admin = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "badge_number",
            "user_type",
            "is_admin",
            "primary_unit",
            "is_active",
            "date_joined",
        ]
        read_only_fields = fields


class TokenResponseSerializer(serializers.Serializer):
    """Documents the login response: token pair plus the user profile."""

    access = serializers.CharField(read_only=True)
    refresh = serializers.CharField(read_only=True)
    user = UserDetailSerializer(read_only=True)
