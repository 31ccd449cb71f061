"""
Root conftest.py — shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``create_unit`` factory fixture for creating units.
  - ``create_user`` factory fixture for creating test users.
  - ``auth_header`` fixture for authenticated requests (JWT).
  - ``create_shelf`` / ``create_item`` factories for Malkhana records.
"""

from __future__ import annotations

import pytest
from rest_framework.test import APIClient


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture()
def create_unit(db):
    """
    Factory fixture that creates a police unit with a unique code.

    Usage::

        def test_something(create_unit):
            station = create_unit(name="Kotwali PS")
    """
    from units.models import Unit

    _counter = 0

    def _factory(*, name: str | None = None, code: str | None = None, **kwargs) -> Unit:
        nonlocal _counter
        _counter += 1
        return Unit.objects.create(
            name=name or f"Test Station {_counter}",
            code=code or f"PS{_counter:04d}",
            **kwargs,
        )

    return _factory


@pytest.fixture()
def create_user(db):
    """
    Factory fixture that creates a user with sensible defaults.

    Usage::

        def test_something(create_user, create_unit):
            officer = create_user(username="alice", primary_unit=create_unit())
            admin = create_user(user_type="ADMIN")   # no unit: unrestricted
    """
    from accounts.models import User

    _counter = 0

    def _factory(
        *,
        username: str | None = None,
        password: str = "TestPass123!",
        email: str | None = None,
        primary_unit=None,
        user_type: str = "OFFICER",
        is_active: bool = True,
        **kwargs,
    ) -> User:
        nonlocal _counter
        _counter += 1
        if username is None:
            username = f"testuser{_counter}"
        if email is None:
            email = f"{username}@test.local"

        return User.objects.create_user(
            username=username,
            password=password,
            email=email,
            primary_unit=primary_unit,
            user_type=user_type,
            is_active=is_active,
            **kwargs,
        )

    return _factory


@pytest.fixture()
def auth_header(create_user):
    """
    Returns a helper function that creates a user and returns an
    ``Authorization`` header dict with a valid JWT access token.

    Usage::

        def test_protected(auth_header, api_client, create_unit):
            header = auth_header(primary_unit=create_unit())
            api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])
            resp = api_client.get("/api/malkhana/stats/")
            assert resp.status_code != 401

    The returned dict looks like::

        {"Authorization": "Bearer eyJ..."}
    """
    from rest_framework_simplejwt.tokens import AccessToken

    def _make(*, username: str | None = None, **user_kwargs) -> dict[str, str]:
        user = create_user(username=username, **user_kwargs)
        token = AccessToken.for_user(user)
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture()
def create_shelf(db):
    """Factory fixture that creates a shelf in the given unit."""
    from malkhana.models import Shelf

    _counter = 0

    def _factory(*, unit, name: str | None = None, location: str = "Store Room", **kwargs) -> Shelf:
        nonlocal _counter
        _counter += 1
        return Shelf.objects.create(
            unit=unit,
            name=name or f"Shelf {_counter}",
            location=location,
            **kwargs,
        )

    return _factory


@pytest.fixture()
def create_item(db):
    """
    Factory fixture that inserts a Malkhana item directly through the ORM,
    bypassing numbering.  Use it to lay out a register in a known state::

        create_item(unit=unit, registry_type="RED_INK", registry_number=5)
        create_item(unit=unit, registry_year=2024, registry_number=1)

    Mother numbers are drawn from a high sequence range (``50001`` up) so
    they stay clear of hand-picked Red Ink numbers.  Items laid out in the
    current year therefore push the next Black Ink sequence above 50000.
    """
    from django.utils import timezone

    from malkhana.models import MalkhanaItem, format_mother_number

    _counter = 0

    def _factory(
        *,
        unit,
        registry_type: str = "BLACK_INK",
        registry_number: int | None = None,
        registry_year: int | None = None,
        status: str = "ACTIVE",
        **kwargs,
    ) -> MalkhanaItem:
        nonlocal _counter
        _counter += 1
        year = registry_year or timezone.localdate().year
        sequence = 50000 + _counter
        defaults = {
            "category": "General",
            "date_received": timezone.now(),
            "received_from": "Complainant",
            "condition": "Good",
        }
        defaults.update(kwargs)
        return MalkhanaItem.objects.create(
            unit=unit,
            mother_year=year,
            mother_sequence=sequence,
            mother_number=format_mother_number(year, sequence),
            registry_type=registry_type,
            registry_number=registry_number if registry_number is not None else _counter,
            registry_year=year,
            status=status,
            **defaults,
        )

    return _factory
