"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from games.domain.value_objects import ALL_PACKS, TierLevel


def all_packs() -> list[str]:
    return list(ALL_PACKS)


TIER_CHOICES = [(tier.value, tier.value.replace("_", " ").title()) for tier in TierLevel]


class InventoryStatus(models.TextChoices):
    AVAILABLE = "AVAILABLE"
    RESERVED = "RESERVED"
    SOLD = "SOLD"


class Game(models.Model):
    """Persistence model for a sellable event-day offering."""

    class Status(models.TextChoices):
        DRAFT = "DRAFT"
        ACTIVE = "ACTIVE"
        INACTIVE = "INACTIVE"
        CLOSED = "CLOSED"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event_name = models.CharField(max_length=255)
    event_date = models.DateTimeField()
    venue = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=50, blank=True)
    sport = models.CharField(max_length=50, blank=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.DRAFT)
    max_entries = models.PositiveIntegerField(default=0)
    current_entries = models.PositiveIntegerField(default=0)

    # last applied margin; null until first priced, then the configured default applies
    margin_percent = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    avg_ticket_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    avg_break_value = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    spin_price_per_bundle = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    spin_price_1x = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    spin_price_2x = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    spin_price_3x = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    spin_price_4x = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    pools_stale = models.BooleanField(default=True)
    pricing_updated_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["event_date"]
        indexes = [
            models.Index(fields=["status", "event_date"]),
        ]

    def __str__(self) -> str:
        return self.event_name


class TicketGroup(models.Model):
    """Persistence model for a block of physical seats."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    game = models.ForeignKey(Game, on_delete=models.CASCADE, related_name="ticket_groups")
    section = models.CharField(max_length=50)
    row = models.CharField(max_length=20, blank=True)
    quantity = models.PositiveIntegerField(default=1)
    price_per_seat = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=10, choices=InventoryStatus.choices, default=InventoryStatus.AVAILABLE
    )
    notes = models.TextField(blank=True)
    seat_view_url = models.URLField(max_length=500, blank=True, null=True)
    available_units = models.JSONField(default=list)
    available_packs = models.JSONField(default=all_packs)
    tier_level = models.CharField(max_length=20, choices=TIER_CHOICES, null=True, blank=True)
    tier_priority = models.PositiveSmallIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["game", "status"]),
            models.Index(fields=["game", "tier_level", "tier_priority"]),
        ]

    def __str__(self) -> str:
        return f"Section {self.section} Row {self.row} x{self.quantity}"


class TicketLevel(models.Model):
    """Persistence model for a fungible stadium-level seat pool."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    game = models.ForeignKey(Game, on_delete=models.CASCADE, related_name="ticket_levels")
    level = models.CharField(max_length=50)
    level_name = models.CharField(max_length=100)
    sections = models.JSONField(default=list, blank=True)
    quantity = models.PositiveIntegerField(default=0)
    price_per_seat = models.DecimalField(max_digits=10, decimal_places=2)
    view_image_url = models.URLField(max_length=500, blank=True, null=True)
    available_units = models.JSONField(default=list)
    available_packs = models.JSONField(default=all_packs)
    tier_level = models.CharField(max_length=20, choices=TIER_CHOICES, null=True, blank=True)
    tier_priority = models.PositiveSmallIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["level"]
        indexes = [
            models.Index(fields=["game", "tier_level", "tier_priority"]),
        ]

    def __str__(self) -> str:
        return f"{self.level_name} x{self.quantity}"


class SpecialPrize(models.Model):
    """Persistence model for a named bonus prize."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    game = models.ForeignKey(Game, on_delete=models.CASCADE, related_name="special_prizes")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    value = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    quantity = models.PositiveIntegerField(default=0)
    prize_type = models.CharField(max_length=30, default="MEMORABILIA")
    image_url = models.URLField(max_length=500, blank=True, null=True)
    available_units = models.JSONField(default=list)
    is_backup = models.BooleanField(default=False)
    # weak link: a backup knows which prize it stands in for, never owns it
    backup_for = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="backups",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-value"]
        indexes = [
            models.Index(fields=["game", "is_backup", "quantity"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} x{self.quantity}"


class CardBreak(models.Model):
    """Persistence model for a memorabilia or trading-card item."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    game = models.ForeignKey(Game, on_delete=models.CASCADE, related_name="card_breaks")
    break_name = models.CharField(max_length=255)
    break_value = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    description = models.TextField(blank=True)
    image_url = models.URLField(max_length=500, blank=True, null=True)
    item_type = models.CharField(max_length=30, default="memorabilia")
    category = models.CharField(max_length=30, blank=True)
    source_url = models.URLField(max_length=500, blank=True, null=True)
    status = models.CharField(
        max_length=10, choices=InventoryStatus.choices, default=InventoryStatus.AVAILABLE
    )
    quantity = models.PositiveIntegerField(default=1)
    available_units = models.JSONField(default=list)
    available_packs = models.JSONField(default=all_packs)
    tier_level = models.CharField(max_length=20, choices=TIER_CHOICES, null=True, blank=True)
    tier_priority = models.PositiveSmallIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["game", "status"]),
            models.Index(fields=["game", "source_url"]),
        ]

    def __str__(self) -> str:
        return self.break_name


class PrizePool(models.Model):
    """Persistence model for a pre-drawn set of bundles."""

    class Status(models.TextChoices):
        AVAILABLE = "AVAILABLE"
        STALE = "STALE"
        CLAIMED = "CLAIMED"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    game = models.ForeignKey(Game, on_delete=models.CASCADE, related_name="prize_pools")
    bundle_size = models.PositiveSmallIntegerField()
    pack = models.CharField(max_length=10, null=True, blank=True)
    bundles = models.JSONField(default=list, encoder=DjangoJSONEncoder)
    total_value = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.AVAILABLE)
    claimed_by = models.CharField(max_length=255, null=True, blank=True)
    claimed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["game", "bundle_size", "status"]),
        ]

    def __str__(self) -> str:
        return f"{self.game_id} {self.bundle_size}x [{self.status}]"
