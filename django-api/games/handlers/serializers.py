"""Serializers for request payloads and domain model responses.

Input serializers only check shape and ranges; inventory rules are enforced
by the services.
"""

from rest_framework import serializers

from games.domain import ALL_PACKS, DEFAULT_BUNDLE_SIZES, InventoryStatus, TierLevel

MONEY = {"max_digits": 10, "decimal_places": 2}

TIER_CHOICES = [tier.value for tier in TierLevel]
STATUS_CHOICES = [status.value for status in InventoryStatus]


class EnumValueField(serializers.Field):
    """Read-only field rendering an Enum (or None) as its value."""

    def __init__(self, **kwargs):
        kwargs["read_only"] = True
        super().__init__(**kwargs)

    def to_representation(self, value):
        return value.value


class UnitsField(serializers.Field):
    """Read-only field rendering a frozenset as a sorted list."""

    def __init__(self, **kwargs):
        kwargs["read_only"] = True
        super().__init__(**kwargs)

    def to_representation(self, value):
        return sorted(value)


# Responses


class GamePricingSerializer(serializers.Serializer):
    """Serializer for GamePricing domain model."""

    game_id = serializers.CharField()
    margin_percent = serializers.DecimalField(max_digits=5, decimal_places=2)
    avg_ticket_price = serializers.DecimalField(**MONEY)
    avg_break_value = serializers.DecimalField(**MONEY)
    spin_price_per_bundle = serializers.DecimalField(**MONEY)
    spin_price_1x = serializers.DecimalField(source="bundle_prices.spin_price_1x", **MONEY)
    spin_price_2x = serializers.DecimalField(source="bundle_prices.spin_price_2x", **MONEY)
    spin_price_3x = serializers.DecimalField(source="bundle_prices.spin_price_3x", **MONEY)
    spin_price_4x = serializers.DecimalField(source="bundle_prices.spin_price_4x", **MONEY)
    pools_stale = serializers.BooleanField()
    updated_at = serializers.DateTimeField()


class PrizePoolSerializer(serializers.Serializer):
    """Serializer for PrizePool domain model."""

    id = serializers.CharField()
    game_id = serializers.CharField()
    bundle_size = serializers.IntegerField()
    pack = serializers.CharField()
    bundles = serializers.ListField(child=serializers.DictField())
    total_value = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    status = EnumValueField()
    claimed_by = serializers.CharField()
    claimed_at = serializers.DateTimeField()


class QuoteSerializer(serializers.Serializer):
    game_id = serializers.CharField()
    bundle_size = serializers.IntegerField()
    pack = serializers.CharField()
    price_per_bundle = serializers.DecimalField(**MONEY)
    total_price = serializers.DecimalField(**MONEY)
    pool = PrizePoolSerializer()


class BestPrizesSerializer(serializers.Serializer):
    ticket = serializers.SerializerMethodField()
    memorabilia = serializers.SerializerMethodField()

    def get_ticket(self, obj):
        return obj.ticket.to_dict() if obj.ticket else None

    def get_memorabilia(self, obj):
        return obj.memorabilia.to_dict() if obj.memorabilia else None


class TicketGroupSerializer(serializers.Serializer):
    """Serializer for TicketGroup domain model."""

    id = serializers.CharField()
    game_id = serializers.CharField()
    section = serializers.CharField()
    row = serializers.CharField()
    quantity = serializers.IntegerField()
    price_per_seat = serializers.DecimalField(**MONEY)
    status = EnumValueField()
    available_units = UnitsField()
    available_packs = UnitsField()
    tier_level = EnumValueField()
    tier_priority = serializers.IntegerField()


class SpecialPrizeSerializer(serializers.Serializer):
    """Serializer for SpecialPrize domain model."""

    id = serializers.CharField()
    game_id = serializers.CharField()
    name = serializers.CharField()
    value = serializers.DecimalField(**MONEY)
    quantity = serializers.IntegerField()
    prize_type = serializers.CharField()
    available_units = UnitsField()
    is_backup = serializers.BooleanField()
    backup_for = serializers.CharField()


class CardBreakSerializer(serializers.Serializer):
    """Serializer for CardBreak domain model."""

    id = serializers.CharField()
    game_id = serializers.CharField()
    break_name = serializers.CharField()
    break_value = serializers.DecimalField(**MONEY)
    quantity = serializers.IntegerField()
    status = EnumValueField()
    available_units = UnitsField()
    available_packs = UnitsField()
    tier_level = EnumValueField()
    tier_priority = serializers.IntegerField()


class VipPromotionSerializer(serializers.Serializer):
    depleted_id = serializers.CharField()
    promoted_id = serializers.CharField()
    promoted_kind = EnumValueField()
    priorities = serializers.SerializerMethodField()

    def get_priorities(self, obj):
        return [
            {"type": kind.value, "id": str(item_id), "tier_priority": rank}
            for (kind, item_id), rank in obj.priorities.items()
        ]


class BackupActivationSerializer(serializers.Serializer):
    prize_id = serializers.CharField()
    remaining_quantity = serializers.IntegerField()
    promoted_backup_id = serializers.CharField()


# Requests


class MarginInputSerializer(serializers.Serializer):
    margin_percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, required=False, allow_null=True
    )


class PoolGenerationInputSerializer(serializers.Serializer):
    pool_count = serializers.IntegerField(min_value=1, max_value=100, required=False)
    bundle_sizes = serializers.ListField(
        child=serializers.IntegerField(min_value=1, max_value=max(DEFAULT_BUNDLE_SIZES)),
        required=False,
        allow_empty=False,
    )
    pack = serializers.ChoiceField(choices=ALL_PACKS, required=False, allow_null=True)


class QuoteInputSerializer(serializers.Serializer):
    bundle_size = serializers.IntegerField(min_value=1, max_value=max(DEFAULT_BUNDLE_SIZES))
    pack = serializers.ChoiceField(choices=ALL_PACKS, required=False, allow_null=True)


class TicketGroupInputSerializer(serializers.Serializer):
    section = serializers.CharField(max_length=50)
    row = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    quantity = serializers.IntegerField(min_value=0, default=1)
    price_per_seat = serializers.DecimalField(min_value=0, **MONEY)
    status = serializers.ChoiceField(choices=STATUS_CHOICES, default=InventoryStatus.AVAILABLE.value)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    seat_view_url = serializers.URLField(max_length=500, required=False, allow_null=True)
    available_units = serializers.ListField(child=serializers.IntegerField(), required=False)
    available_packs = serializers.ListField(child=serializers.CharField(), required=False)
    tier_level = serializers.ChoiceField(choices=TIER_CHOICES, required=False)
    tier_priority = serializers.IntegerField(min_value=1, required=False)


class BulkTicketGroupsInputSerializer(serializers.Serializer):
    game_id = serializers.UUIDField()
    ticket_groups = TicketGroupInputSerializer(many=True, allow_empty=False)


class SpecialPrizeInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    value = serializers.DecimalField(min_value=0, default=0, **MONEY)
    quantity = serializers.IntegerField(min_value=0, default=0)
    prize_type = serializers.CharField(max_length=30, default="MEMORABILIA")
    image_url = serializers.URLField(max_length=500, required=False, allow_null=True)
    available_units = serializers.ListField(child=serializers.IntegerField(), required=False)
    is_backup = serializers.BooleanField(default=False)
    backup_for = serializers.UUIDField(required=False, allow_null=True)


class BulkSpecialPrizesInputSerializer(serializers.Serializer):
    game_id = serializers.UUIDField()
    special_prizes = SpecialPrizeInputSerializer(many=True, allow_empty=False)


class CardBreakInputSerializer(serializers.Serializer):
    break_name = serializers.CharField(max_length=255)
    break_value = serializers.DecimalField(min_value=0, default=0, **MONEY)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    image_url = serializers.URLField(max_length=500, required=False, allow_null=True)
    item_type = serializers.CharField(max_length=30, default="memorabilia")
    category = serializers.CharField(max_length=30, required=False, allow_blank=True, default="")
    source_url = serializers.URLField(max_length=500, required=False, allow_null=True)
    quantity = serializers.IntegerField(min_value=1, default=1)
    available_units = serializers.ListField(child=serializers.IntegerField(), required=False)
    available_packs = serializers.ListField(child=serializers.CharField(), required=False)
    tier_level = serializers.ChoiceField(choices=TIER_CHOICES, required=False, allow_null=True)
    tier_priority = serializers.IntegerField(min_value=1, required=False, allow_null=True)


class AddCardBreaksInputSerializer(serializers.Serializer):
    card_breaks = CardBreakInputSerializer(many=True, allow_empty=False)


class DeleteBySourceInputSerializer(serializers.Serializer):
    source_url = serializers.CharField(max_length=500)


class RepairInputSerializer(serializers.Serializer):
    game_id = serializers.UUIDField(required=False, allow_null=True)


class FulfilInputSerializer(serializers.Serializer):
    claimed_by = serializers.CharField(max_length=255)
