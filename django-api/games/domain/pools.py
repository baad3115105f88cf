"""Building prize pools (pre-drawn bundle combinations) from inventory."""

import random
from decimal import Decimal

from games.domain.availability import supports_bundle_size, supports_pack
from games.domain.models import (
    BestPrizes,
    Bundle,
    BundleItem,
    InventorySnapshot,
    PoolDraft,
)
from games.domain.pricing import DEFAULT_MARGIN_PERCENT, margin_multiplier
from games.domain.value_objects import to_cents


def to_bundle_item(item) -> BundleItem:
    return BundleItem(
        kind=item.kind,
        item_id=item.id,
        name=item.label,
        value=item.value,
        tier_level=item.tier_level,
        packs=item.available_packs,
    )


def eligible_ticket_side(
    snapshot: InventorySnapshot, bundle_size: int, pack: str | None = None
) -> list:
    items = (*snapshot.ticket_levels, *snapshot.ticket_groups, *snapshot.special_prizes)
    return [
        item
        for item in items
        if item.is_sellable
        and supports_bundle_size(item, bundle_size)
        and item.quantity >= bundle_size
        and supports_pack(item, pack)
    ]


def eligible_memorabilia(
    snapshot: InventorySnapshot, bundle_size: int, pack: str | None = None
) -> list:
    return [
        item
        for item in snapshot.card_breaks
        if item.is_sellable
        and supports_bundle_size(item, bundle_size)
        and supports_pack(item, pack)
    ]


def _expand(items: list) -> list:
    # one entry per remaining unit so bigger stock is proportionally likelier
    return [item for item in items for _ in range(item.quantity)]


def build_prize_pool(
    snapshot: InventorySnapshot,
    bundle_size: int,
    margin_percent: Decimal | int | float = DEFAULT_MARGIN_PERCENT,
    rng: random.Random | None = None,
    pack: str | None = None,
) -> PoolDraft | None:
    """Draw one pool of ``bundle_size`` bundles, or None if stock is short.

    All bundles of a pool share a single ticket-side item (adjacent seats)
    and each gets its own memorabilia unit.
    """
    rng = rng or random.Random()
    tickets = _expand(eligible_ticket_side(snapshot, bundle_size, pack))
    memorabilia = _expand(eligible_memorabilia(snapshot, bundle_size, pack))
    if len(tickets) < bundle_size or len(memorabilia) < bundle_size:
        return None

    rng.shuffle(tickets)
    rng.shuffle(memorabilia)

    ticket = to_bundle_item(tickets[0])
    bundles = tuple(
        Bundle(ticket=ticket, memorabilia=(to_bundle_item(item),))
        for item in memorabilia[:bundle_size]
    )
    total_value = sum((b.bundle_value for b in bundles), Decimal("0"))
    return PoolDraft(
        bundle_size=bundle_size,
        bundles=bundles,
        total_value=to_cents(total_value),
        total_price=to_cents(total_value * margin_multiplier(margin_percent)),
        pack=pack,
    )


def select_best_prizes(snapshot: InventorySnapshot) -> BestPrizes:
    tickets = [
        item
        for item in (*snapshot.ticket_levels, *snapshot.ticket_groups, *snapshot.special_prizes)
        if item.is_sellable
    ]
    memorabilia = [item for item in snapshot.card_breaks if item.is_sellable]
    best_ticket = max(tickets, key=lambda item: item.value, default=None)
    best_memorabilia = max(memorabilia, key=lambda item: item.value, default=None)
    return BestPrizes(
        ticket=to_bundle_item(best_ticket) if best_ticket else None,
        memorabilia=to_bundle_item(best_memorabilia) if best_memorabilia else None,
    )
