"""
Malkhana app models.

The Malkhana is a unit's evidence store room.  Every item received into
custody is filed in one of two registers:

    • **Black Ink** – the current year's register.  Items are numbered
      sequentially as they arrive and keep that number for the year.
    • **Red Ink**   – the historical register.  Closed years are moved
      here by the year transition, and old items can be back-filed
      manually.  Red Ink numbers are a dense shelf order that is
      compacted whenever an item leaves through disposal.

Each item also carries a permanent **mother number** (``YYYY-NNNNN``)
that is assigned once at creation and never changes, whatever happens
to its registry number.  The numeric parts of the mother number are
stored in their own integer columns so the next sequence is found with
a numeric ``MAX`` rather than by parsing strings.
"""

import uuid

from django.conf import settings
from django.db import models

from core.constants import MOTHER_NUMBER_PAD_WIDTH
from core.models import TimeStampedModel


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class RegistryType(models.TextChoices):
    BLACK_INK = "BLACK_INK", "Black Ink"
    RED_INK = "RED_INK", "Red Ink"


class ItemStatus(models.TextChoices):
    """Custody status.  ``DISPOSED`` is terminal."""

    ACTIVE = "ACTIVE", "Active"
    DISPOSED = "DISPOSED", "Disposed"
    TRANSFERRED = "TRANSFERRED", "Transferred"
    RELEASED = "RELEASED", "Released"


class PropertyNature(models.TextChoices):
    STOLEN_PROPERTY = "STOLEN_PROPERTY", "Stolen Property"
    INTESTATE_PROPERTY = "INTESTATE_PROPERTY", "Intestate Property"
    UNCLAIMED_PROPERTY = "UNCLAIMED_PROPERTY", "Unclaimed Property"
    SUSPICIOUS_PROPERTY = "SUSPICIOUS_PROPERTY", "Suspicious Property"
    EXHIBITS_AND_OTHER_PROPERTY = "EXHIBITS_AND_OTHER_PROPERTY", "Exhibits and Other Property"
    SAFE_CUSTODY_PROPERTY = "SAFE_CUSTODY_PROPERTY", "Safe Custody Property"
    OTHERS = "OTHERS", "Others"


def format_mother_number(year: int, sequence: int) -> str:
    """Render a mother number, e.g. ``format_mother_number(2025, 42) == "2025-00042"``."""
    return f"{year}-{sequence:0{MOTHER_NUMBER_PAD_WIDTH}d}"


# ────────────────────────────────────────────────────────────────────
# Shelf
# ────────────────────────────────────────────────────────────────────

class Shelf(TimeStampedModel):
    """Physical shelf in a unit's store room that items are filed on."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    unit = models.ForeignKey(
        "units.Unit",
        on_delete=models.PROTECT,
        related_name="shelves",
        verbose_name="Unit",
    )
    name = models.CharField(max_length=100, verbose_name="Name")
    location = models.CharField(max_length=200, verbose_name="Location")
    category = models.CharField(
        max_length=100,
        blank=True,
        default="",
        verbose_name="Category",
    )
    qr_code_url = models.CharField(
        max_length=255,
        blank=True,
        default="",
        verbose_name="QR Code URL",
    )

    class Meta:
        verbose_name = "Shelf"
        verbose_name_plural = "Shelves"
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.location})"


# ────────────────────────────────────────────────────────────────────
# Malkhana item
# ────────────────────────────────────────────────────────────────────

class MalkhanaItem(TimeStampedModel):
    """
    A single piece of property held in custody.

    ``mother_number`` is globally unique across all units and immutable.
    ``registry_number`` is the current filing position within the
    unit's register identified by ``registry_type``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    unit = models.ForeignKey(
        "units.Unit",
        on_delete=models.PROTECT,
        related_name="malkhana_items",
        verbose_name="Unit",
    )

    # ── Numbering ────────────────────────────────────────────────────
    mother_number = models.CharField(
        max_length=20,
        unique=True,
        editable=False,
        verbose_name="Mother Number",
    )
    mother_year = models.PositiveIntegerField(editable=False, verbose_name="Mother Year")
    mother_sequence = models.PositiveIntegerField(editable=False, verbose_name="Mother Sequence")
    registry_number = models.PositiveIntegerField(verbose_name="Registry Number")
    registry_type = models.CharField(
        max_length=10,
        choices=RegistryType.choices,
        default=RegistryType.BLACK_INK,
        db_index=True,
        verbose_name="Registry Type",
    )
    registry_year = models.PositiveIntegerField(verbose_name="Registry Year")
    status = models.CharField(
        max_length=12,
        choices=ItemStatus.choices,
        default=ItemStatus.ACTIVE,
        db_index=True,
        verbose_name="Status",
    )

    # ── Case details ─────────────────────────────────────────────────
    case_number = models.CharField(max_length=100, blank=True, default="", verbose_name="Case Number")
    pr_number = models.CharField(max_length=50, blank=True, default="", verbose_name="PR Number")
    gde_number = models.CharField(max_length=50, blank=True, default="", verbose_name="GDE Number")
    description = models.CharField(max_length=500, blank=True, default="", verbose_name="Description")
    category = models.CharField(max_length=100, verbose_name="Category")
    property_nature = models.CharField(
        max_length=30,
        choices=PropertyNature.choices,
        blank=True,
        default="",
        verbose_name="Nature of Property",
    )
    date_received = models.DateTimeField(verbose_name="Date Received")
    received_from = models.CharField(max_length=200, verbose_name="Received From")
    received_from_address = models.TextField(blank=True, default="", verbose_name="Received From Address")

    # ── Investigating officer ────────────────────────────────────────
    investigating_officer_name = models.CharField(max_length=200, blank=True, default="")
    investigating_officer_rank = models.CharField(max_length=100, blank=True, default="")
    investigating_officer_phone = models.CharField(max_length=15, blank=True, default="")
    investigating_officer_unit = models.CharField(max_length=200, blank=True, default="")

    condition = models.CharField(max_length=200, verbose_name="Condition")
    notes = models.TextField(blank=True, default="", verbose_name="Notes")
    photos = models.JSONField(
        default=list,
        blank=True,
        verbose_name="Photos",
        help_text="List of photo URLs.",
    )

    # ── Disposal ─────────────────────────────────────────────────────
    disposal_date = models.DateField(null=True, blank=True, verbose_name="Disposal Date")
    disposal_reason = models.TextField(blank=True, default="", verbose_name="Disposal Reason")
    disposal_approved_by = models.CharField(
        max_length=200,
        blank=True,
        default="",
        verbose_name="Disposal Approved By",
    )

    shelf = models.ForeignKey(
        Shelf,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="items",
        verbose_name="Shelf",
    )
    qr_code_url = models.CharField(max_length=255, blank=True, default="", verbose_name="QR Code URL")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_malkhana_items",
        verbose_name="Created By",
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="updated_malkhana_items",
        verbose_name="Updated By",
    )

    class Meta:
        verbose_name = "Malkhana Item"
        verbose_name_plural = "Malkhana Items"
        ordering = ["registry_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["mother_year", "mother_sequence"],
                name="malkhana_unique_mother_year_sequence",
            ),
        ]
        indexes = [
            models.Index(
                fields=["unit", "registry_type", "registry_number"],
                name="malkhana_unit_registry_idx",
            ),
        ]

    def __str__(self):
        return f"{self.mother_number} [{self.get_registry_type_display()} #{self.registry_number}]"


class RedInkHistory(models.Model):
    """
    Snapshot of a Red Ink number an item held before it was renumbered.

    Rows are written only by disposal renumbering and by the year
    transition, and are deleted together with their item.
    """

    item = models.ForeignKey(
        MalkhanaItem,
        on_delete=models.CASCADE,
        related_name="red_ink_history",
        verbose_name="Item",
    )
    year = models.PositiveIntegerField(verbose_name="Year")
    red_ink_id = models.PositiveIntegerField(verbose_name="Previous Red Ink Number")
    created_at = models.DateTimeField(auto_now_add=True, verbose_name="Created At")

    class Meta:
        verbose_name = "Red Ink History"
        verbose_name_plural = "Red Ink History"
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.item_id}: #{self.red_ink_id} ({self.year})"
