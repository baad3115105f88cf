"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in games/models.py (persistence layer).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from games.domain.errors import InvalidSnapshotError
from games.domain.tiers import tier_display
from games.domain.value_objects import (
    ALL_PACKS,
    GameId,
    InventoryStatus,
    ItemId,
    ItemKind,
    PoolStatus,
    TierLevel,
)


def _check_non_negative(label: str, quantity: int, amount: Decimal) -> None:
    if quantity < 0:
        raise InvalidSnapshotError(f"{label} has negative quantity {quantity}")
    if amount < 0:
        raise InvalidSnapshotError(f"{label} has negative value {amount}")


class _Tiered:
    """Shared tier helpers for items carrying tier_level/tier_priority."""

    tier_level: TierLevel | None
    tier_priority: int | None

    @property
    def is_vip(self) -> bool:
        return self.tier_level is TierLevel.VIP_ITEM

    @property
    def is_vip_backup(self) -> bool:
        """VIP items ranked below the primary slot wait for promotion."""
        return self.is_vip and (self.tier_priority or 1) > 1


@dataclass(frozen=True)
class TicketGroup(_Tiered):
    """A block of physical seats sold together or split by bundle size."""

    id: ItemId
    game_id: GameId
    section: str
    row: str
    quantity: int
    price_per_seat: Decimal
    status: InventoryStatus = InventoryStatus.AVAILABLE
    available_units: frozenset[int] = frozenset()
    available_packs: frozenset[str] = frozenset(ALL_PACKS)
    tier_level: TierLevel | None = None
    tier_priority: int | None = None

    def __post_init__(self) -> None:
        _check_non_negative(f"Ticket group {self.id}", self.quantity, self.price_per_seat)

    kind = ItemKind.TICKET_GROUP

    @property
    def value(self) -> Decimal:
        return self.price_per_seat

    @property
    def label(self) -> str:
        return f"Section {self.section} Row {self.row}"

    @property
    def is_sellable(self) -> bool:
        return (
            self.status is InventoryStatus.AVAILABLE
            and self.quantity > 0
            and not self.is_vip_backup
        )


@dataclass(frozen=True)
class TicketLevel(_Tiered):
    """A fungible pool of seats for a stadium level (e.g. "Upper Deck")."""

    id: ItemId
    game_id: GameId
    level: str
    level_name: str
    quantity: int
    price_per_seat: Decimal
    available_units: frozenset[int] = frozenset()
    available_packs: frozenset[str] = frozenset(ALL_PACKS)
    tier_level: TierLevel | None = None
    tier_priority: int | None = None

    def __post_init__(self) -> None:
        _check_non_negative(f"Ticket level {self.id}", self.quantity, self.price_per_seat)

    kind = ItemKind.TICKET_LEVEL

    @property
    def value(self) -> Decimal:
        return self.price_per_seat

    @property
    def label(self) -> str:
        return self.level_name

    @property
    def is_sellable(self) -> bool:
        return self.quantity > 0 and not self.is_vip_backup


@dataclass(frozen=True)
class SpecialPrize:
    """A named bonus prize, optionally standing by as backup for another."""

    id: ItemId
    game_id: GameId
    name: str
    value: Decimal
    quantity: int
    prize_type: str = "MEMORABILIA"
    available_units: frozenset[int] = frozenset()
    is_backup: bool = False
    backup_for: ItemId | None = None

    def __post_init__(self) -> None:
        _check_non_negative(f"Special prize {self.id}", self.quantity, self.value)

    kind = ItemKind.SPECIAL_PRIZE
    available_packs = None
    tier_level = None

    @property
    def label(self) -> str:
        return self.name

    @property
    def is_sellable(self) -> bool:
        return self.quantity > 0 and not self.is_backup


@dataclass(frozen=True)
class CardBreak(_Tiered):
    """A memorabilia or trading-card item."""

    id: ItemId
    game_id: GameId
    break_name: str
    break_value: Decimal
    quantity: int = 1
    status: InventoryStatus = InventoryStatus.AVAILABLE
    available_units: frozenset[int] = frozenset()
    available_packs: frozenset[str] = frozenset(ALL_PACKS)
    tier_level: TierLevel | None = None
    tier_priority: int | None = None

    def __post_init__(self) -> None:
        _check_non_negative(f"Card break {self.id}", self.quantity, self.break_value)

    kind = ItemKind.CARD_BREAK

    @property
    def value(self) -> Decimal:
        return self.break_value

    @property
    def label(self) -> str:
        return self.break_name

    @property
    def is_sellable(self) -> bool:
        return (
            self.status is InventoryStatus.AVAILABLE
            and self.quantity > 0
            and not self.is_vip_backup
        )


@dataclass(frozen=True)
class InventorySnapshot:
    """All inventory of one game, as read at a point in time."""

    ticket_groups: tuple[TicketGroup, ...] = ()
    ticket_levels: tuple[TicketLevel, ...] = ()
    special_prizes: tuple[SpecialPrize, ...] = ()
    card_breaks: tuple[CardBreak, ...] = ()


@dataclass(frozen=True)
class PricingSummary:
    """Aggregate pricing of one game under a margin."""

    avg_ticket_price: Decimal
    avg_break_value: Decimal
    total_bundle_value: Decimal
    spin_price_per_bundle: Decimal
    available_tickets: int
    available_breaks: int


@dataclass(frozen=True)
class BundlePrices:
    """Price of one bundle for every offered bundle size."""

    prices: Mapping[int, Decimal]

    def price_for(self, bundle_size: int) -> Decimal:
        return self.prices[bundle_size]

    @property
    def spin_price_1x(self) -> Decimal | None:
        return self.prices.get(1)

    @property
    def spin_price_2x(self) -> Decimal | None:
        return self.prices.get(2)

    @property
    def spin_price_3x(self) -> Decimal | None:
        return self.prices.get(3)

    @property
    def spin_price_4x(self) -> Decimal | None:
        return self.prices.get(4)


@dataclass(frozen=True)
class GamePricing:
    """Pricing fields as persisted on a game."""

    game_id: GameId
    margin_percent: Decimal | None
    avg_ticket_price: Decimal
    avg_break_value: Decimal
    spin_price_per_bundle: Decimal
    bundle_prices: BundlePrices
    pools_stale: bool
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Game:
    """Domain representation of a Game."""

    id: GameId
    event_name: str
    status: str
    margin_percent: Decimal | None
    pools_stale: bool


@dataclass(frozen=True)
class BundleItem:
    """One inventory unit placed in a bundle."""

    kind: ItemKind
    item_id: ItemId
    name: str
    value: Decimal
    tier_level: TierLevel | None = None
    packs: frozenset[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.kind.value,
            "id": str(self.item_id),
            "name": self.name,
            "value": str(self.value),
            "tier_level": self.tier_level.value if self.tier_level else None,
        }
        if self.tier_level is not None:
            data["tier_label"] = tier_display(self.tier_level)[0]
        if self.packs is not None:
            data["packs"] = sorted(self.packs)
        return data


@dataclass(frozen=True)
class Bundle:
    """The atomic sellable unit: one ticket-side item plus memorabilia."""

    ticket: BundleItem
    memorabilia: tuple[BundleItem, ...] = ()

    @property
    def bundle_value(self) -> Decimal:
        return self.ticket.value + sum((m.value for m in self.memorabilia), Decimal("0"))

    def to_dict(self) -> dict[str, Any]:
        return {
            "ticket": self.ticket.to_dict(),
            "memorabilia": [m.to_dict() for m in self.memorabilia],
            "bundle_value": str(self.bundle_value),
        }


@dataclass(frozen=True)
class PoolDraft:
    """A freshly built pool, not yet persisted."""

    bundle_size: int
    bundles: tuple[Bundle, ...]
    total_value: Decimal
    total_price: Decimal
    pack: str | None = None


@dataclass(frozen=True)
class PrizePool:
    """Domain representation of a persisted PrizePool."""

    id: ItemId
    game_id: GameId
    bundle_size: int
    bundles: tuple[dict[str, Any], ...]
    total_value: Decimal
    total_price: Decimal
    status: PoolStatus
    pack: str | None = None
    claimed_by: str | None = None
    claimed_at: datetime | None = None
    created_at: datetime | None = None

    def item_units(self) -> dict[tuple[ItemKind, ItemId], int]:
        """Units of each inventory row this pool consumes when claimed.

        Every bundle of a multi-bundle pool shares one ticket-side item,
        so the ticket row is consumed once per bundle.
        """
        units: dict[tuple[ItemKind, ItemId], int] = {}
        for bundle in self.bundles:
            entries = [bundle["ticket"], *bundle.get("memorabilia", [])]
            for entry in entries:
                key = (ItemKind(entry["type"]), ItemId.from_string(entry["id"]))
                units[key] = units.get(key, 0) + 1
        return units


@dataclass(frozen=True)
class BestPrizes:
    """Highest-value sellable items of a game, for display."""

    ticket: BundleItem | None = None
    memorabilia: BundleItem | None = None


@dataclass(frozen=True)
class VipPromotion:
    """Outcome of promoting a VIP backup into the primary slot."""

    game_id: GameId
    depleted_id: ItemId
    promoted_id: ItemId
    promoted_kind: ItemKind
    priorities: Mapping[tuple[ItemKind, ItemId], int] = field(default_factory=dict)


@dataclass(frozen=True)
class BackupActivation:
    """Outcome of consuming a special prize."""

    prize_id: ItemId
    remaining_quantity: int
    promoted_backup_id: ItemId | None = None
