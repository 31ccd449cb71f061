"""
core.domain.access — Unit-scoped queryset selectors (shared patterns).

Every unit-owned record (evidence items, shelves) is visible only to
users of the owning unit.  An administrator without a primary unit gets
an unrestricted, all-units view.  Rather than overloading ``None`` for
that case, the caller's reach is represented explicitly:

    UnitScope = Scoped(unit_id) | Unrestricted()

Architecture overview
---------------------

    ┌─────────┐      ┌────────────────┐      ┌──────────────────┐
    │  View   │─────▶│  App service   │─────▶│ core.domain      │
    │ (thin)  │      │ (owns logic)   │      │   .access        │
    └─────────┘      └────────────────┘      │ (shared helpers) │
         │                                   └──────────────────┘
         └── resolve_unit_scope(request.user)

Usage in an app's service layer::

    from core.domain.access import apply_unit_scope, ensure_unit_access

    qs = apply_unit_scope(MalkhanaItem.objects.all(), scope)
    ensure_unit_access(scope, item.unit_id, message="Item belongs to another unit.")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from django.db.models import QuerySet

from core.domain.exceptions import DomainError, PermissionDenied

if TYPE_CHECKING:
    from accounts.models import User


@dataclass(frozen=True)
class Scoped:
    """Caller is confined to a single unit."""

    unit_id: Any

    @property
    def is_unrestricted(self) -> bool:
        return False


@dataclass(frozen=True)
class Unrestricted:
    """Administrator without a fixed unit: sees and writes every unit."""

    @property
    def is_unrestricted(self) -> bool:
        return True


UnitScope = Union[Scoped, Unrestricted]


def resolve_unit_scope(user: User) -> UnitScope:
    """
    Derive the caller's unit scope from the authenticated user.

    A user with a primary unit is always scoped to it, administrators
    included.  Only an administrator *without* a unit is unrestricted.

    Raises:
        PermissionDenied: The user has no unit and is not an administrator.
    """
    unit_id = getattr(user, "primary_unit_id", None)
    if unit_id is not None:
        return Scoped(unit_id)
    if getattr(user, "is_admin", False):
        return Unrestricted()
    raise PermissionDenied("User does not have an associated unit.")


def apply_unit_scope(
    queryset: QuerySet,
    scope: UnitScope,
    *,
    field: str = "unit_id",
) -> QuerySet:
    """Filter ``queryset`` down to the caller's unit (no-op when unrestricted)."""
    if isinstance(scope, Scoped):
        return queryset.filter(**{field: scope.unit_id})
    return queryset


def ensure_unit_access(scope: UnitScope, owner_unit_id: Any, *, message: str = "") -> None:
    """
    Guard that raises ``PermissionDenied`` when a scoped caller reaches
    into a record owned by another unit.
    """
    if isinstance(scope, Scoped) and str(scope.unit_id) != str(owner_unit_id):
        raise PermissionDenied(message or "This record belongs to another unit.")


def require_unit(scope: UnitScope, explicit_unit_id: Any = None) -> Any:
    """
    Return the effective unit id for a write operation.

    Scoped callers always write into their own unit.  Unrestricted
    callers must name the target unit explicitly.

    Raises:
        DomainError: Neither the scope nor the request supplies a unit.
    """
    if isinstance(scope, Scoped):
        return scope.unit_id
    if explicit_unit_id:
        return explicit_unit_id
    raise DomainError("A unit is required: supply 'unit_id' for this operation.")
