import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Unit",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=150, verbose_name="Name")),
                ("code", models.CharField(max_length=20, unique=True, verbose_name="Code")),
                (
                    "unit_type",
                    models.CharField(
                        choices=[
                            ("SP_OFFICE", "SP Office"),
                            ("ADDL_SP_OFFICE", "Addl. SP Office"),
                            ("DY_SP_OFFICE", "Dy. SP Office"),
                            ("CIRCLE_OFFICE", "Circle Office"),
                            ("POLICE_STATION", "Police Station"),
                            ("OUTPOST", "Outpost"),
                            ("OTHER", "Other"),
                        ],
                        default="POLICE_STATION",
                        max_length=20,
                        verbose_name="Unit Type",
                    ),
                ),
                ("address", models.CharField(blank=True, default="", max_length=500, verbose_name="Address")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
            ],
            options={
                "verbose_name": "Unit",
                "verbose_name_plural": "Units",
                "ordering": ["name"],
            },
        ),
    ]
