"""
Accounts app models.

Defines the custom ``User`` model that extends Django's ``AbstractUser``
with the officer attributes the registries rely on: a user type, an
optional badge number, and the primary unit that scopes everything the
user may see or change.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class UserType(models.TextChoices):
    ADMIN = "ADMIN", "Administrator"
    OFFICER = "OFFICER", "Officer"
    STAFF = "STAFF", "Staff"
    PUBLIC = "PUBLIC", "Public"


class User(AbstractUser):
    """
    Custom user model for department staff.

    Login is supported via *any one* of username / email / badge_number
    together with the password (see ``accounts.backends``).

    ``primary_unit`` determines the user's unit scope.  A user without a
    primary unit can only operate when they are an administrator, in
    which case their scope is unrestricted.
    """

    email = models.EmailField(
        unique=True,
        verbose_name="Email Address",
    )
    badge_number = models.CharField(
        max_length=20,
        unique=True,
        null=True,
        blank=True,
        verbose_name="Badge Number",
    )
    user_type = models.CharField(
        max_length=10,
        choices=UserType.choices,
        default=UserType.OFFICER,
        verbose_name="User Type",
    )
    primary_unit = models.ForeignKey(
        "units.Unit",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="members",
        verbose_name="Primary Unit",
    )

    REQUIRED_FIELDS = ["email"]

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.username} ({self.get_user_type_display()})"

    @property
    def is_admin(self) -> bool:
        """Superusers and ADMIN-type users bypass unit scoping."""
        return self.is_superuser or self.user_type == UserType.ADMIN
