"""
Units app models.

A ``Unit`` is an office of the department (police station, outpost,
circle office, ...).  Unit-owned records across the project carry a
foreign key to it, and every non-administrator user belongs to one.
"""

import uuid

from django.db import models

from core.models import TimeStampedModel


class UnitType(models.TextChoices):
    SP_OFFICE = "SP_OFFICE", "SP Office"
    ADDL_SP_OFFICE = "ADDL_SP_OFFICE", "Addl. SP Office"
    DY_SP_OFFICE = "DY_SP_OFFICE", "Dy. SP Office"
    CIRCLE_OFFICE = "CIRCLE_OFFICE", "Circle Office"
    POLICE_STATION = "POLICE_STATION", "Police Station"
    OUTPOST = "OUTPOST", "Outpost"
    OTHER = "OTHER", "Other"


class Unit(TimeStampedModel):
    """Organisational unit that owns registries, shelves and staff."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=150, verbose_name="Name")
    code = models.CharField(max_length=20, unique=True, verbose_name="Code")
    unit_type = models.CharField(
        max_length=20,
        choices=UnitType.choices,
        default=UnitType.POLICE_STATION,
        verbose_name="Unit Type",
    )
    address = models.CharField(max_length=500, blank=True, default="", verbose_name="Address")
    is_active = models.BooleanField(default=True, verbose_name="Active")

    class Meta:
        verbose_name = "Unit"
        verbose_name_plural = "Units"
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.code})"
