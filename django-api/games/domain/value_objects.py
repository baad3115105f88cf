"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Self
from uuid import UUID

from games.domain.errors import InvalidIdentifierError

DEFAULT_BUNDLE_SIZES: tuple[int, ...] = (1, 2, 3, 4)
ALL_PACKS: tuple[str, ...] = ("blue", "red", "gold")

CENT = Decimal("0.01")


def to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def as_decimal(value: Decimal | int | float | str) -> Decimal:
    """Coerce a number to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class TierLevel(Enum):
    """Price-derived classification of ticket-side inventory."""

    VIP_ITEM = "VIP_ITEM"
    GOLD_LEVEL = "GOLD_LEVEL"
    UPPER_DECK = "UPPER_DECK"


class ItemKind(Enum):
    """Inventory tables an item can come from."""

    TICKET_LEVEL = "level"
    TICKET_GROUP = "individual"
    SPECIAL_PRIZE = "special"
    CARD_BREAK = "memorabilia"


class InventoryStatus(Enum):
    AVAILABLE = "AVAILABLE"
    RESERVED = "RESERVED"
    SOLD = "SOLD"


class PoolStatus(Enum):
    AVAILABLE = "AVAILABLE"
    STALE = "STALE"
    CLAIMED = "CLAIMED"


@dataclass(frozen=True)
class GameId:
    """Unique identifier for a Game."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        try:
            return cls(value=UUID(str(value)))
        except ValueError as exc:
            raise InvalidIdentifierError() from exc

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ItemId:
    """Unique identifier for any inventory row or prize pool."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        try:
            return cls(value=UUID(str(value)))
        except ValueError as exc:
            raise InvalidIdentifierError() from exc

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TierAssignment:
    """Tier label and its priority rank (1 is highest)."""

    tier_level: TierLevel
    tier_priority: int
