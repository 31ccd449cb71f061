import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("units", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Shelf",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("location", models.CharField(max_length=200, verbose_name="Location")),
                ("category", models.CharField(blank=True, default="", max_length=100, verbose_name="Category")),
                ("qr_code_url", models.CharField(blank=True, default="", max_length=255, verbose_name="QR Code URL")),
                (
                    "unit",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="shelves",
                        to="units.unit",
                        verbose_name="Unit",
                    ),
                ),
            ],
            options={
                "verbose_name": "Shelf",
                "verbose_name_plural": "Shelves",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="MalkhanaItem",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("mother_number", models.CharField(editable=False, max_length=20, unique=True, verbose_name="Mother Number")),
                ("mother_year", models.PositiveIntegerField(editable=False, verbose_name="Mother Year")),
                ("mother_sequence", models.PositiveIntegerField(editable=False, verbose_name="Mother Sequence")),
                ("registry_number", models.PositiveIntegerField(verbose_name="Registry Number")),
                (
                    "registry_type",
                    models.CharField(
                        choices=[("BLACK_INK", "Black Ink"), ("RED_INK", "Red Ink")],
                        db_index=True,
                        default="BLACK_INK",
                        max_length=10,
                        verbose_name="Registry Type",
                    ),
                ),
                ("registry_year", models.PositiveIntegerField(verbose_name="Registry Year")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("ACTIVE", "Active"),
                            ("DISPOSED", "Disposed"),
                            ("TRANSFERRED", "Transferred"),
                            ("RELEASED", "Released"),
                        ],
                        db_index=True,
                        default="ACTIVE",
                        max_length=12,
                        verbose_name="Status",
                    ),
                ),
                ("case_number", models.CharField(blank=True, default="", max_length=100, verbose_name="Case Number")),
                ("pr_number", models.CharField(blank=True, default="", max_length=50, verbose_name="PR Number")),
                ("gde_number", models.CharField(blank=True, default="", max_length=50, verbose_name="GDE Number")),
                ("description", models.CharField(blank=True, default="", max_length=500, verbose_name="Description")),
                ("category", models.CharField(max_length=100, verbose_name="Category")),
                (
                    "property_nature",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("STOLEN_PROPERTY", "Stolen Property"),
                            ("INTESTATE_PROPERTY", "Intestate Property"),
                            ("UNCLAIMED_PROPERTY", "Unclaimed Property"),
                            ("SUSPICIOUS_PROPERTY", "Suspicious Property"),
                            ("EXHIBITS_AND_OTHER_PROPERTY", "Exhibits and Other Property"),
                            ("SAFE_CUSTODY_PROPERTY", "Safe Custody Property"),
                            ("OTHERS", "Others"),
                        ],
                        default="",
                        max_length=30,
                        verbose_name="Nature of Property",
                    ),
                ),
                ("date_received", models.DateTimeField(verbose_name="Date Received")),
                ("received_from", models.CharField(max_length=200, verbose_name="Received From")),
                ("received_from_address", models.TextField(blank=True, default="", verbose_name="Received From Address")),
                ("investigating_officer_name", models.CharField(blank=True, default="", max_length=200)),
                ("investigating_officer_rank", models.CharField(blank=True, default="", max_length=100)),
                ("investigating_officer_phone", models.CharField(blank=True, default="", max_length=15)),
                ("investigating_officer_unit", models.CharField(blank=True, default="", max_length=200)),
                ("condition", models.CharField(max_length=200, verbose_name="Condition")),
                ("notes", models.TextField(blank=True, default="", verbose_name="Notes")),
                (
                    "photos",
                    models.JSONField(blank=True, default=list, help_text="List of photo URLs.", verbose_name="Photos"),
                ),
                ("disposal_date", models.DateField(blank=True, null=True, verbose_name="Disposal Date")),
                ("disposal_reason", models.TextField(blank=True, default="", verbose_name="Disposal Reason")),
                (
                    "disposal_approved_by",
                    models.CharField(blank=True, default="", max_length=200, verbose_name="Disposal Approved By"),
                ),
                ("qr_code_url", models.CharField(blank=True, default="", max_length=255, verbose_name="QR Code URL")),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_malkhana_items",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Created By",
                    ),
                ),
                (
                    "shelf",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="items",
                        to="malkhana.shelf",
                        verbose_name="Shelf",
                    ),
                ),
                (
                    "unit",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="malkhana_items",
                        to="units.unit",
                        verbose_name="Unit",
                    ),
                ),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="updated_malkhana_items",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Updated By",
                    ),
                ),
            ],
            options={
                "verbose_name": "Malkhana Item",
                "verbose_name_plural": "Malkhana Items",
                "ordering": ["registry_number"],
                "indexes": [
                    models.Index(
                        fields=["unit", "registry_type", "registry_number"],
                        name="malkhana_unit_registry_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("mother_year", "mother_sequence"),
                        name="malkhana_unique_mother_year_sequence",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="RedInkHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("year", models.PositiveIntegerField(verbose_name="Year")),
                ("red_ink_id", models.PositiveIntegerField(verbose_name="Previous Red Ink Number")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                (
                    "item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="red_ink_history",
                        to="malkhana.malkhanaitem",
                        verbose_name="Item",
                    ),
                ),
            ],
            options={
                "verbose_name": "Red Ink History",
                "verbose_name_plural": "Red Ink History",
                "ordering": ["created_at", "id"],
            },
        ),
    ]
