"""
Malkhana app serializers.

Request serializers validate field types and shape only.  Numbering,
unit ownership, and lifecycle rules are enforced in ``services.py`` so
they hold no matter how the services are called.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import ItemStatus, MalkhanaItem, RedInkHistory, RegistryType, Shelf

# Fields a caller may set on an item, at creation and on update.
_DESCRIPTIVE_FIELDS = [
    "case_number",
    "pr_number",
    "gde_number",
    "description",
    "category",
    "property_nature",
    "date_received",
    "received_from",
    "received_from_address",
    "investigating_officer_name",
    "investigating_officer_rank",
    "investigating_officer_phone",
    "investigating_officer_unit",
    "condition",
    "notes",
    "photos",
]


# ═══════════════════════════════════════════════════════════════════
#  Shelf Serializers
# ═══════════════════════════════════════════════════════════════════


class ShelfSummarySerializer(serializers.ModelSerializer):
    """Compact shelf representation nested inside item payloads."""

    class Meta:
        model = Shelf
        fields = ["id", "name", "location"]
        read_only_fields = fields


class ShelfSerializer(serializers.ModelSerializer):
    """Full shelf representation with the number of items filed on it."""

    unit_id = serializers.UUIDField(read_only=True)
    item_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Shelf
        fields = [
            "id",
            "unit_id",
            "name",
            "location",
            "category",
            "qr_code_url",
            "item_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ShelfCreateSerializer(serializers.ModelSerializer):
    """
    Validates shelf creation.  ``unit_id`` is only honoured for
    administrators without a unit of their own.
    """

    unit_id = serializers.UUIDField(required=False)

    class Meta:
        model = Shelf
        fields = ["unit_id", "name", "location", "category"]


class ShelfUpdateSerializer(serializers.ModelSerializer):

    class Meta:
        model = Shelf
        fields = ["name", "location", "category"]
        extra_kwargs = {
            "name": {"required": False},
            "location": {"required": False},
        }


# ═══════════════════════════════════════════════════════════════════
#  Item Serializers (Response)
# ═══════════════════════════════════════════════════════════════════


class RedInkHistorySerializer(serializers.ModelSerializer):

    class Meta:
        model = RedInkHistory
        fields = ["id", "year", "red_ink_id", "created_at"]
        read_only_fields = fields


class MalkhanaItemSerializer(serializers.ModelSerializer):
    """Full item representation, including its Red Ink history."""

    unit_id = serializers.UUIDField(read_only=True)
    shelf = ShelfSummarySerializer(read_only=True)
    red_ink_history = RedInkHistorySerializer(many=True, read_only=True)
    created_by = serializers.PrimaryKeyRelatedField(read_only=True)
    updated_by = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = MalkhanaItem
        fields = [
            "id",
            "unit_id",
            "mother_number",
            "registry_number",
            "registry_type",
            "registry_year",
            "status",
            *_DESCRIPTIVE_FIELDS,
            "disposal_date",
            "disposal_reason",
            "disposal_approved_by",
            "shelf",
            "qr_code_url",
            "red_ink_history",
            "created_by",
            "updated_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# ═══════════════════════════════════════════════════════════════════
#  Item Serializers (Request)
# ═══════════════════════════════════════════════════════════════════


class MalkhanaItemCreateSerializer(serializers.ModelSerializer):
    """
    Validates a new item.

    ``registry_type`` defaults to Black Ink.  Red Ink items are
    back-filed and must name their ``mother_number`` (the numeric
    sequence, e.g. ``42``) and ``registry_year``; the service rejects
    Red Ink requests that omit them.  ``unit_id`` is only honoured for
    administrators without a unit of their own.
    """

    registry_type = serializers.ChoiceField(
        choices=RegistryType.choices,
        required=False,
    )
    mother_number = serializers.IntegerField(
        min_value=1,
        required=False,
        help_text="Red Ink only: numeric mother sequence.",
    )
    registry_year = serializers.IntegerField(
        min_value=1,
        required=False,
        help_text="Red Ink only: filing year of the mother number.",
    )
    unit_id = serializers.UUIDField(required=False)
    shelf_id = serializers.UUIDField(required=False, allow_null=True)

    class Meta:
        model = MalkhanaItem
        fields = [
            "registry_type",
            "mother_number",
            "registry_year",
            "unit_id",
            "shelf_id",
            *_DESCRIPTIVE_FIELDS,
        ]


class MalkhanaItemUpdateSerializer(serializers.ModelSerializer):
    """
    Partial update of descriptive fields, custody status and shelf.
    Numbering fields are not writable.
    """

    shelf_id = serializers.UUIDField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=ItemStatus.choices, required=False)

    class Meta:
        model = MalkhanaItem
        fields = ["status", "shelf_id", *_DESCRIPTIVE_FIELDS]


class DisposeItemSerializer(serializers.Serializer):
    disposal_date = serializers.DateField()
    disposal_reason = serializers.CharField()
    disposal_approved_by = serializers.CharField(max_length=200)


class AssignShelfSerializer(serializers.Serializer):
    shelf_id = serializers.UUIDField()


class QRCodeResponseSerializer(serializers.Serializer):
    qr_code_url = serializers.CharField(read_only=True)


# ═══════════════════════════════════════════════════════════════════
#  Registry-wide Serializers
# ═══════════════════════════════════════════════════════════════════


class YearTransitionRequestSerializer(serializers.Serializer):
    new_year = serializers.IntegerField(min_value=1)
    unit_id = serializers.UUIDField(
        required=False,
        help_text="Required for administrators without a unit of their own.",
    )


class YearTransitionResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    items_transitioned = serializers.IntegerField()
    previous_year = serializers.IntegerField()
    new_year = serializers.IntegerField()


class MalkhanaStatsSerializer(serializers.Serializer):
    total_items = serializers.IntegerField()
    black_ink_items = serializers.IntegerField()
    red_ink_items = serializers.IntegerField()
    disposed_items = serializers.IntegerField()
    recently_added_items = serializers.IntegerField()
    current_year = serializers.IntegerField()
