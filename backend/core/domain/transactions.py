"""
core.domain.transactions — Helpers for row-locked, atomic updates.

Wraps ``select_for_update`` into reusable patterns so that every app's
service layer follows the same concurrency-safe approach.  Both helpers
must be called inside a ``transaction.atomic()`` block (service methods
are decorated with ``@transaction.atomic``).

Usage::

    from core.domain.transactions import lock_for_update, lock_rows

    with transaction.atomic():
        item = lock_for_update(MalkhanaItem, item_id)
        followers = lock_rows(
            MalkhanaItem.objects.filter(unit_id=unit_id),
            order_by=("registry_number",),
        )
"""

from __future__ import annotations

from typing import Any, TypeVar

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models

from core.domain.exceptions import NotFound

M = TypeVar("M", bound=models.Model)


def lock_for_update(model_class: type[M], pk: Any) -> M:
    """
    Acquire a row-level lock on the given model instance.

    Convenience wrapper around ``select_for_update().get(pk=pk)``
    that must be called inside an ``atomic()`` block.

    Args:
        model_class: The Django model class.
        pk:          Primary key value.

    Returns:
        The locked model instance.

    Raises:
        NotFound: If no row with that PK exists.
    """
    try:
        return model_class.objects.select_for_update().get(pk=pk)
    except (model_class.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFound(f"{model_class.__name__} with pk={pk} does not exist.")


def lock_rows(queryset: models.QuerySet, *, order_by: tuple[str, ...]) -> list:
    """
    Lock and materialise every row of ``queryset`` in a deterministic order.

    Backends without row locks (SQLite) ignore ``select_for_update``;
    the surrounding transaction still serialises writers there.
    """
    return list(queryset.select_for_update().order_by(*order_by))
