"""
Accounts Service Layer.

Business logic for the ``accounts`` app.  Views stay *thin*: they
validate input through serializers, call a service method, and return
the result wrapped in a DRF ``Response``.

Architecture
------------
- ``AuthenticationService``    — multi-field credential check.
- ``CurrentUserService``       — "Me" endpoint helpers.
"""

from __future__ import annotations

import logging

from django.contrib.auth import authenticate as django_authenticate
from django.contrib.auth import get_user_model

User = get_user_model()

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Authentication Service
# ═══════════════════════════════════════════════════════════════════


class AuthenticationService:
    """
    Handles multi-field login and JWT token generation.
    Supports identification via username, email, or badge number.
    """

    @staticmethod
    def authenticate(identifier: str, password: str, request=None) -> User | None:
        """
        Validate credentials and return the user if successful.

        Returns ``None`` when the identifier is unknown, the password
        is wrong, or the account is inactive.
        """
        user = django_authenticate(
            request=request,
            identifier=identifier,
            password=password,
        )
        if user is None:
            logger.info("Failed login attempt for identifier %r", identifier)
        else:
            logger.info("User %s logged in", user.pk)
        return user


# ═══════════════════════════════════════════════════════════════════
#  Current User Service
# ═══════════════════════════════════════════════════════════════════


class CurrentUserService:

    @staticmethod
    def get_profile(user: User) -> User:
        """Reload the user with the primary unit joined in."""
        return User.objects.select_related("primary_unit").get(pk=user.pk)
