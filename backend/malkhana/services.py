"""
Malkhana app Service Layer.

This module is the **single source of truth** for all business logic
in the ``malkhana`` app.  Views must remain thin: validate input via
serializers, resolve the caller's ``UnitScope``, call a service method,
and return the result wrapped in a DRF ``Response``.

Architecture
------------
- ``MalkhanaItemService``      — Creation (mother/registry numbering),
                                 update, disposal, shelf assignment, QR.
- ``RedInkRenumberingService`` — Closes the gap a disposed Red Ink item
                                 leaves in its unit's register.
- ``YearTransitionService``    — Bulk re-filing of a closed year's Black
                                 Ink items into the Red Ink register.
- ``MalkhanaQueryService``     — Unit-scoped listings, lookups, search,
                                 and dashboard statistics.
- ``ShelfService``             — Shelf CRUD, shelf contents, shelf QR.

Numbering rules
---------------
Mother number   ``{year}-{sequence:05d}``; assigned once, globally unique.
Black Ink       next sequence = highest sequence already used for the
                current year (store-wide) + 1; registry number = sequence.
Red Ink         mother sequence and year are supplied by the caller when
                back-filing; registry number = supplied sequence.
Renumbering     disposing a Red Ink item shifts every ACTIVE Red Ink item
                filed after it (same unit) down by one, recording the
                vacated number in ``RedInkHistory`` first.

Services hold no state between calls.  Every public method re-reads the
rows it mutates, and every multi-row mutation runs inside a single
transaction so a failure never leaves a half-renumbered register.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import timedelta
from typing import Any

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import Count, Max, Q, QuerySet
from django.utils import timezone

from core.constants import DEFAULT_NUMBERING_MAX_ATTEMPTS, DEFAULT_RECENT_WINDOW_DAYS
from core.domain.access import (
    UnitScope,
    apply_unit_scope,
    ensure_unit_access,
    require_unit,
)
from core.domain.exceptions import Conflict, DomainError, InvalidTransition, NotFound, PermissionDenied
from core.domain.transactions import lock_for_update, lock_rows
from units.models import Unit

from .models import (
    ItemStatus,
    MalkhanaItem,
    RedInkHistory,
    RegistryType,
    Shelf,
    format_mother_number,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════


def _malkhana_setting(key: str, default: Any) -> Any:
    return getattr(settings, "MALKHANA", {}).get(key, default)


def current_year() -> int:
    """Calendar year in the project's time zone."""
    return timezone.localdate().year


def build_qr_code_url(kind: str, pk: Any) -> str:
    base = _malkhana_setting("QR_CODE_BASE_URL", "https://api.example.com/qr")
    return f"{base.rstrip('/')}/{kind}/{pk}"


def _get_or_not_found(queryset: QuerySet, label: str, **lookup):
    """``queryset.get(**lookup)`` that maps a miss (or malformed id) to ``NotFound``."""
    try:
        return queryset.get(**lookup)
    except (queryset.model.DoesNotExist, DjangoValidationError, ValueError):
        raise NotFound(f"{label} not found.")


def _get_unit(unit_id: Any) -> Unit:
    return _get_or_not_found(Unit.objects.all(), "Unit", pk=unit_id)


def _resolve_shelf(shelf_id: Any, unit_id: Any, scope: UnitScope) -> Shelf:
    """
    Load a shelf that an item of ``unit_id`` may be filed on.

    Administrators without a unit may file onto any shelf; everyone else
    only onto shelves of the item's unit.
    """
    shelf = _get_or_not_found(Shelf.objects.all(), "Shelf", pk=shelf_id)
    if not scope.is_unrestricted and str(shelf.unit_id) != str(unit_id):
        raise PermissionDenied("Shelf does not belong to this unit.")
    return shelf


# ═══════════════════════════════════════════════════════════════════
#  Item Lifecycle Service
# ═══════════════════════════════════════════════════════════════════


class MalkhanaItemService:
    """
    Creation and mutation of Malkhana items.

    Every method receives the caller's ``UnitScope`` and the acting user;
    nothing is cached between calls.
    """

    @staticmethod
    def create_item(validated_data: dict[str, Any], scope: UnitScope, user) -> MalkhanaItem:
        """
        Create a new item in the Black Ink or Red Ink register.

        Parameters
        ----------
        validated_data : dict
            Cleaned data from ``MalkhanaItemCreateSerializer``.  The
            numbering keys ``registry_type``, ``mother_number`` and
            ``registry_year`` plus ``unit_id`` / ``shelf_id`` are consumed
            here; the rest are descriptive fields copied onto the row.
        scope : UnitScope
            Caller's reach.  Scoped callers always create in their own
            unit; unrestricted callers must pass ``unit_id``.
        user : User
            Recorded as ``created_by``.

        Raises
        ------
        DomainError
            No unit could be determined, or a Red Ink item is missing
            its mother number / registry year.
        NotFound
            Unknown unit or shelf.
        PermissionDenied
            Shelf belongs to another unit (scoped callers only).
        Conflict
            The mother number is already taken.
        """
        data = dict(validated_data)
        unit_id = require_unit(scope, data.pop("unit_id", None))
        unit = _get_unit(unit_id)

        registry_type = data.pop("registry_type", None) or RegistryType.BLACK_INK
        mother_sequence = data.pop("mother_number", None)
        registry_year = data.pop("registry_year", None)

        shelf_id = data.pop("shelf_id", None)
        if shelf_id:
            data["shelf"] = _resolve_shelf(shelf_id, unit.pk, scope)

        data.update(unit=unit, created_by=user, updated_by=user, status=ItemStatus.ACTIVE)

        if registry_type == RegistryType.RED_INK:
            item = MalkhanaItemService._create_red_ink(data, mother_sequence, registry_year)
        else:
            item = MalkhanaItemService._create_black_ink(data)

        logger.info(
            "Malkhana item %s created in unit %s (%s #%s) by user %s",
            item.mother_number,
            unit.pk,
            item.registry_type,
            item.registry_number,
            getattr(user, "pk", None),
        )
        return item

    @staticmethod
    def _create_red_ink(data: dict[str, Any], mother_sequence: int | None, registry_year: int | None) -> MalkhanaItem:
        if not mother_sequence or not registry_year or mother_sequence < 1 or registry_year < 1:
            raise DomainError(
                "Red Ink items require a positive 'mother_number' and 'registry_year'."
            )

        mother_number = format_mother_number(registry_year, mother_sequence)
        if MalkhanaItem.objects.filter(mother_number=mother_number).exists():
            raise Conflict(f"Mother number {mother_number} already exists.")

        try:
            with transaction.atomic():
                return MalkhanaItem.objects.create(
                    mother_number=mother_number,
                    mother_year=registry_year,
                    mother_sequence=mother_sequence,
                    registry_type=RegistryType.RED_INK,
                    registry_number=mother_sequence,
                    registry_year=registry_year,
                    **data,
                )
        except IntegrityError:
            raise Conflict(f"Mother number {mother_number} already exists.")

    @staticmethod
    def _create_black_ink(data: dict[str, Any]) -> MalkhanaItem:
        """
        Allocate the next mother sequence for the current year and insert.

        Two concurrent requests can read the same maximum; the loser of
        the race hits the unique constraint, rolls back its savepoint and
        re-reads.  After ``NUMBERING_MAX_ATTEMPTS`` failures the collision
        surfaces as ``Conflict``.
        """
        year = current_year()
        attempts = max(1, int(_malkhana_setting("NUMBERING_MAX_ATTEMPTS", DEFAULT_NUMBERING_MAX_ATTEMPTS)))

        for attempt in range(1, attempts + 1):
            sequence = MalkhanaItemService.next_mother_sequence(year)
            mother_number = format_mother_number(year, sequence)
            try:
                with transaction.atomic():
                    return MalkhanaItem.objects.create(
                        mother_number=mother_number,
                        mother_year=year,
                        mother_sequence=sequence,
                        registry_type=RegistryType.BLACK_INK,
                        registry_number=sequence,
                        registry_year=year,
                        **data,
                    )
            except IntegrityError:
                logger.warning(
                    "Mother number %s was taken concurrently (attempt %d/%d)",
                    mother_number,
                    attempt,
                    attempts,
                )

        raise Conflict(
            f"Could not allocate a mother number for {year}; please retry."
        )

    @staticmethod
    def next_mother_sequence(year: int) -> int:
        """Highest mother sequence used for ``year`` anywhere in the store, plus one."""
        highest = (
            MalkhanaItem.objects
            .filter(mother_year=year)
            .aggregate(highest=Max("mother_sequence"))["highest"]
        )
        return (highest or 0) + 1

    @staticmethod
    @transaction.atomic
    def update_item(item_id: Any, validated_data: dict[str, Any], scope: UnitScope, user) -> MalkhanaItem:
        """
        Apply a partial update to descriptive fields, status or shelf.

        Disposal cannot be performed here: ``status=DISPOSED`` is rejected
        so that Red Ink renumbering always runs through ``dispose_item``.
        Disposed items are frozen and reject every update.
        """
        item = lock_for_update(MalkhanaItem, item_id)
        ensure_unit_access(scope, item.unit_id, message="Item belongs to another unit.")

        data = dict(validated_data)
        target_status = data.get("status")
        if target_status == ItemStatus.DISPOSED:
            raise InvalidTransition(
                current=item.status,
                target=ItemStatus.DISPOSED,
                reason="Use the dispose action to dispose of an item.",
            )
        if item.status == ItemStatus.DISPOSED:
            raise InvalidTransition(
                current=item.status,
                target=target_status or item.status,
                reason="Disposed items cannot be modified.",
            )

        if "shelf_id" in data:
            shelf_id = data.pop("shelf_id")
            item.shelf = _resolve_shelf(shelf_id, item.unit_id, scope) if shelf_id else None

        for field, value in data.items():
            setattr(item, field, value)
        item.updated_by = user
        item.save()

        logger.info("Malkhana item %s updated by user %s", item.mother_number, getattr(user, "pk", None))
        return item

    @staticmethod
    @transaction.atomic
    def dispose_item(item_id: Any, validated_data: dict[str, Any], scope: UnitScope, user) -> MalkhanaItem:
        """
        Mark an item as disposed and, for Red Ink items, close the gap.

        The disposed item keeps its registry number.  Renumbering of the
        remaining Red Ink items happens in the same transaction, so either
        both the disposal and the renumbering commit or neither does.

        Raises
        ------
        NotFound
            Unknown item.
        PermissionDenied
            Item belongs to another unit (scoped callers only).
        InvalidTransition
            Item is already disposed.
        """
        item = lock_for_update(MalkhanaItem, item_id)
        ensure_unit_access(scope, item.unit_id, message="Item belongs to another unit.")

        if item.status == ItemStatus.DISPOSED:
            raise InvalidTransition(
                current=item.status,
                target=ItemStatus.DISPOSED,
                reason="Item is already disposed.",
            )

        item.status = ItemStatus.DISPOSED
        item.disposal_date = validated_data.get("disposal_date") or timezone.localdate()
        item.disposal_reason = validated_data.get("disposal_reason", "")
        item.disposal_approved_by = validated_data.get("disposal_approved_by", "")
        item.updated_by = user
        item.save()

        shifted = []
        if item.registry_type == RegistryType.RED_INK:
            shifted = RedInkRenumberingService.close_gap(item.unit_id, item.registry_number)

        logger.info(
            "Malkhana item %s disposed by user %s; %d Red Ink item(s) renumbered",
            item.mother_number,
            getattr(user, "pk", None),
            len(shifted),
        )
        return item

    @staticmethod
    @transaction.atomic
    def assign_to_shelf(item_id: Any, shelf_id: Any, scope: UnitScope, user) -> MalkhanaItem:
        """File an item onto a shelf of its own unit."""
        item = lock_for_update(MalkhanaItem, item_id)
        ensure_unit_access(scope, item.unit_id, message="Item belongs to another unit.")

        if item.status == ItemStatus.DISPOSED:
            raise InvalidTransition(
                current=item.status,
                target=item.status,
                reason="Disposed items cannot be modified.",
            )

        item.shelf = _resolve_shelf(shelf_id, item.unit_id, scope)
        item.updated_by = user
        item.save(update_fields=["shelf", "updated_by", "updated_at"])

        logger.info("Malkhana item %s assigned to shelf %s", item.mother_number, item.shelf_id)
        return item

    @staticmethod
    def generate_qr_code(item_id: Any, scope: UnitScope) -> str:
        """Build, persist and return the QR code URL for an item."""
        item = MalkhanaQueryService.get_item(item_id, scope)
        item.qr_code_url = build_qr_code_url("item", item.pk)
        item.save(update_fields=["qr_code_url", "updated_at"])
        return item.qr_code_url


# ═══════════════════════════════════════════════════════════════════
#  Red Ink Renumbering Service
# ═══════════════════════════════════════════════════════════════════


class RedInkRenumberingService:

    @staticmethod
    @transaction.atomic
    def close_gap(unit_id: Any, disposed_number: int) -> list[MalkhanaItem]:
        """
        Shift the unit's ACTIVE Red Ink items filed after ``disposed_number``
        down by one so the register stays dense.

        Each shifted item first gets a ``RedInkHistory`` row holding the
        number it is about to give up.  Items are processed in filing
        order (registry number, then creation time), so the first one
        takes over ``disposed_number`` itself.

        Returns the shifted items with their new numbers.
        """
        followers = lock_rows(
            MalkhanaItem.objects.filter(
                unit_id=unit_id,
                registry_type=RegistryType.RED_INK,
                status=ItemStatus.ACTIVE,
                registry_number__gt=disposed_number,
            ),
            order_by=("registry_number", "created_at"),
        )
        if not followers:
            return []

        year = current_year()
        RedInkHistory.objects.bulk_create(
            [
                RedInkHistory(item=item, year=year, red_ink_id=item.registry_number)
                for item in followers
            ]
        )

        now = timezone.now()
        for offset, item in enumerate(followers):
            item.registry_number = disposed_number + offset
            item.updated_at = now
        MalkhanaItem.objects.bulk_update(followers, ["registry_number", "updated_at"])

        logger.debug(
            "Closed Red Ink gap at #%s in unit %s (%d item(s) shifted)",
            disposed_number,
            unit_id,
            len(followers),
        )
        return followers


# ═══════════════════════════════════════════════════════════════════
#  Year Transition Service
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class YearTransitionResult:
    success: bool
    message: str
    items_transitioned: int
    previous_year: int
    new_year: int

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


class YearTransitionService:

    @staticmethod
    @transaction.atomic
    def perform(unit_id: Any, new_year: int, user=None) -> YearTransitionResult:
        """
        Move every ACTIVE Black Ink item of ``new_year - 1`` into the
        unit's Red Ink register.

        The items are appended after the unit's highest Red Ink number in
        filing order.  Mother numbers and registry years are left alone.
        A year with nothing to move is a successful no-op.

        Raises
        ------
        DomainError
            The year being closed lies in the future.
        NotFound
            Unknown unit.
        """
        transition_year = new_year - 1
        this_year = current_year()
        if transition_year > this_year:
            raise DomainError(
                f"Cannot close year {transition_year}: it is later than the current year {this_year}."
            )
        _get_unit(unit_id)

        items = lock_rows(
            MalkhanaItem.objects.filter(
                unit_id=unit_id,
                registry_type=RegistryType.BLACK_INK,
                status=ItemStatus.ACTIVE,
                registry_year=transition_year,
            ),
            order_by=("registry_number", "created_at"),
        )
        if not items:
            return YearTransitionResult(
                success=True,
                message=f"No Black Ink items to transition for {transition_year}.",
                items_transitioned=0,
                previous_year=transition_year,
                new_year=new_year,
            )

        highest = (
            MalkhanaItem.objects
            .filter(unit_id=unit_id, registry_type=RegistryType.RED_INK)
            .aggregate(highest=Max("registry_number"))["highest"]
        )
        next_number = (highest or 0) + 1

        history = []
        now = timezone.now()
        for item in items:
            # Guard for legacy data only: the query above selects BLACK_INK
            # rows, so this never fires for records written by this service.
            # A pre-existing RED_INK row would keep its old number in history.
            if item.registry_type == RegistryType.RED_INK:
                history.append(
                    RedInkHistory(item=item, year=item.registry_year, red_ink_id=item.registry_number)
                )
            item.registry_type = RegistryType.RED_INK
            item.registry_number = next_number
            item.updated_by = user
            item.updated_at = now
            next_number += 1

        if history:
            RedInkHistory.objects.bulk_create(history)
        MalkhanaItem.objects.bulk_update(
            items,
            ["registry_type", "registry_number", "updated_by", "updated_at"],
        )

        logger.info(
            "Year transition %s -> %s in unit %s moved %d item(s) to Red Ink",
            transition_year,
            new_year,
            unit_id,
            len(items),
        )
        return YearTransitionResult(
            success=True,
            message=f"Transitioned {len(items)} item(s) from {transition_year} Black Ink to Red Ink.",
            items_transitioned=len(items),
            previous_year=transition_year,
            new_year=new_year,
        )


# ═══════════════════════════════════════════════════════════════════
#  Query Service
# ═══════════════════════════════════════════════════════════════════


class MalkhanaQueryService:
    """
    Read-side helpers.  Listings are filtered by ``apply_unit_scope`` so
    unrestricted administrators see every unit; point lookups tell
    "absent" (``NotFound``) apart from "another unit's" (``PermissionDenied``).
    """

    @staticmethod
    def _base_queryset() -> QuerySet[MalkhanaItem]:
        return MalkhanaItem.objects.select_related("unit", "shelf").prefetch_related("red_ink_history")

    @staticmethod
    def list_black_ink(scope: UnitScope) -> QuerySet[MalkhanaItem]:
        """Current-year Black Ink register, in filing order."""
        qs = MalkhanaQueryService._base_queryset().filter(
            registry_type=RegistryType.BLACK_INK,
            registry_year=current_year(),
        )
        return apply_unit_scope(qs, scope).order_by("registry_number", "created_at")

    @staticmethod
    def list_red_ink(scope: UnitScope) -> QuerySet[MalkhanaItem]:
        """Full Red Ink register, in filing order."""
        qs = MalkhanaQueryService._base_queryset().filter(registry_type=RegistryType.RED_INK)
        return apply_unit_scope(qs, scope).order_by("registry_number", "created_at")

    @staticmethod
    def get_item(item_id: Any, scope: UnitScope) -> MalkhanaItem:
        item = _get_or_not_found(MalkhanaQueryService._base_queryset(), "Item", pk=item_id)
        ensure_unit_access(scope, item.unit_id, message="Item belongs to another unit.")
        return item

    @staticmethod
    def find_by_mother_number(mother_number: str, scope: UnitScope) -> MalkhanaItem:
        item = _get_or_not_found(
            MalkhanaQueryService._base_queryset(),
            f"Item with mother number {mother_number}",
            mother_number=mother_number,
        )
        ensure_unit_access(scope, item.unit_id, message="Item belongs to another unit.")
        return item

    @staticmethod
    def search_items(query: str, scope: UnitScope) -> QuerySet[MalkhanaItem]:
        """
        Case-insensitive substring search over mother number, case number,
        description, category and received-from.  A blank query matches
        nothing.
        """
        query = (query or "").strip()
        if not query:
            return MalkhanaItem.objects.none()

        qs = MalkhanaQueryService._base_queryset().filter(
            Q(mother_number__icontains=query)
            | Q(case_number__icontains=query)
            | Q(description__icontains=query)
            | Q(category__icontains=query)
            | Q(received_from__icontains=query)
        )
        return apply_unit_scope(qs, scope).order_by("-created_at")

    @staticmethod
    def get_stats(scope: UnitScope) -> dict[str, int]:
        """
        Dashboard counters for the caller's unit (or every unit when
        unrestricted), computed in a single aggregate query.
        """
        year = current_year()
        window = int(_malkhana_setting("RECENT_WINDOW_DAYS", DEFAULT_RECENT_WINDOW_DAYS))
        since = timezone.now() - timedelta(days=window)

        counts = apply_unit_scope(MalkhanaItem.objects.all(), scope).aggregate(
            black_ink_items=Count(
                "pk",
                filter=Q(registry_type=RegistryType.BLACK_INK, registry_year=year),
            ),
            red_ink_items=Count("pk", filter=Q(registry_type=RegistryType.RED_INK)),
            disposed_items=Count("pk", filter=Q(status=ItemStatus.DISPOSED)),
            recently_added_items=Count("pk", filter=Q(created_at__gte=since)),
        )
        return {
            "total_items": counts["black_ink_items"] + counts["red_ink_items"],
            "black_ink_items": counts["black_ink_items"],
            "red_ink_items": counts["red_ink_items"],
            "disposed_items": counts["disposed_items"],
            "recently_added_items": counts["recently_added_items"],
            "current_year": year,
        }


# ═══════════════════════════════════════════════════════════════════
#  Shelf Service
# ═══════════════════════════════════════════════════════════════════


class ShelfService:
    """Shelf CRUD, always confined to the caller's unit scope."""

    @staticmethod
    def _annotated() -> QuerySet[Shelf]:
        return Shelf.objects.select_related("unit").annotate(item_count=Count("items"))

    @staticmethod
    def list_shelves(scope: UnitScope) -> QuerySet[Shelf]:
        return apply_unit_scope(ShelfService._annotated(), scope).order_by("name")

    @staticmethod
    def get_shelf(shelf_id: Any, scope: UnitScope) -> Shelf:
        shelf = _get_or_not_found(ShelfService._annotated(), "Shelf", pk=shelf_id)
        ensure_unit_access(scope, shelf.unit_id, message="Shelf belongs to another unit.")
        return shelf

    @staticmethod
    def create_shelf(validated_data: dict[str, Any], scope: UnitScope) -> Shelf:
        data = dict(validated_data)
        unit = _get_unit(require_unit(scope, data.pop("unit_id", None)))
        shelf = Shelf.objects.create(unit=unit, **data)
        logger.info("Shelf %s created in unit %s", shelf.pk, unit.pk)
        return ShelfService.get_shelf(shelf.pk, scope)

    @staticmethod
    def update_shelf(shelf_id: Any, validated_data: dict[str, Any], scope: UnitScope) -> Shelf:
        shelf = ShelfService.get_shelf(shelf_id, scope)
        for field, value in validated_data.items():
            setattr(shelf, field, value)
        shelf.save()
        return shelf

    @staticmethod
    @transaction.atomic
    def delete_shelf(shelf_id: Any, scope: UnitScope) -> None:
        """Delete an empty shelf.  Shelves that still hold items are kept."""
        shelf = ShelfService.get_shelf(shelf_id, scope)
        if shelf.items.exists():
            raise Conflict("Shelf still holds items; move them before deleting the shelf.")
        shelf.delete()
        logger.info("Shelf %s deleted", shelf_id)

    @staticmethod
    def list_items(shelf_id: Any, scope: UnitScope) -> QuerySet[MalkhanaItem]:
        shelf = ShelfService.get_shelf(shelf_id, scope)
        return (
            MalkhanaItem.objects
            .filter(shelf=shelf)
            .select_related("unit", "shelf")
            .prefetch_related("red_ink_history")
            .order_by("registry_type", "registry_number")
        )

    @staticmethod
    def generate_qr_code(shelf_id: Any, scope: UnitScope) -> str:
        shelf = ShelfService.get_shelf(shelf_id, scope)
        shelf.qr_code_url = build_qr_code_url("shelf", shelf.pk)
        shelf.save(update_fields=["qr_code_url", "updated_at"])
        return shelf.qr_code_url
