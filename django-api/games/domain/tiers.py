"""Price-based tier classification for ticket-side inventory."""

from decimal import Decimal

from games.domain.value_objects import TierAssignment, TierLevel, as_decimal

VIP_THRESHOLD = Decimal("500")
GOLD_THRESHOLD = Decimal("200")

_DISPLAY = {
    TierLevel.VIP_ITEM: ("VIP Item", 1),
    TierLevel.GOLD_LEVEL: ("Gold Level", 2),
    TierLevel.UPPER_DECK: ("Upper Deck", 3),
}


def classify_tier(price: Decimal | int | float) -> TierAssignment:
    """Map a per-seat price to its tier.

    Only the lower bounds of VIP and Gold are checked, so zero and negative
    prices land in Upper Deck.
    """
    amount = as_decimal(price)
    if amount >= VIP_THRESHOLD:
        return TierAssignment(TierLevel.VIP_ITEM, 1)
    if amount >= GOLD_THRESHOLD:
        return TierAssignment(TierLevel.GOLD_LEVEL, 2)
    return TierAssignment(TierLevel.UPPER_DECK, 3)


def tier_display(tier_level: TierLevel | None) -> tuple[str, int]:
    """Return the (label, rank) shown to buyers for a tier."""
    return _DISPLAY.get(tier_level, ("Standard", 4))
