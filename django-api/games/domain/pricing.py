"""Bundle pricing from the currently sellable inventory of a game.

A bundle's expected value is the average ticket-side value (ticket groups
and ticket levels) plus the average memorabilia-side value (card breaks and
special prizes). Averages are weighted by remaining units, so a level with
forty seats counts forty times. The spin price marks that value up by the
margin percentage.

All functions here are pure: persisting the result is the caller's job.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal

from games.domain.availability import supports_bundle_size, supports_pack
from games.domain.models import (
    BundlePrices,
    CardBreak,
    PricingSummary,
    SpecialPrize,
    TicketGroup,
    TicketLevel,
)
from games.domain.value_objects import DEFAULT_BUNDLE_SIZES, as_decimal, to_cents

DEFAULT_MARGIN_PERCENT = Decimal("30")

ZERO = Decimal("0")


def margin_multiplier(margin_percent: Decimal | int | float) -> Decimal:
    return 1 + as_decimal(margin_percent) / 100


def weighted_average(items: Iterable[object]) -> tuple[Decimal, int]:
    """Return (average value per unit, total units); (0, 0) when empty."""
    total_value = ZERO
    total_units = 0
    for item in items:
        total_value += item.value * item.quantity
        total_units += item.quantity
    if total_units == 0:
        return ZERO, 0
    return total_value / total_units, total_units


def calculate_bundle_pricing(
    ticket_groups: Sequence[TicketGroup],
    card_breaks: Sequence[CardBreak],
    margin_percent: Decimal | int | float = DEFAULT_MARGIN_PERCENT,
    ticket_levels: Sequence[TicketLevel] = (),
    special_prizes: Sequence[SpecialPrize] = (),
) -> PricingSummary:
    """Aggregate pricing over every sellable item, regardless of bundle size."""
    tickets = [i for i in (*ticket_groups, *ticket_levels) if i.is_sellable]
    memorabilia = [i for i in (*card_breaks, *special_prizes) if i.is_sellable]

    avg_ticket, ticket_units = weighted_average(tickets)
    avg_break, break_units = weighted_average(memorabilia)
    total = avg_ticket + avg_break

    return PricingSummary(
        avg_ticket_price=to_cents(avg_ticket),
        avg_break_value=to_cents(avg_break),
        total_bundle_value=to_cents(total),
        spin_price_per_bundle=to_cents(total * margin_multiplier(margin_percent)),
        available_tickets=ticket_units,
        available_breaks=break_units,
    )


def calculate_bundle_specific_pricing(
    ticket_levels: Sequence[TicketLevel],
    ticket_groups: Sequence[TicketGroup],
    special_prizes: Sequence[SpecialPrize],
    card_breaks: Sequence[CardBreak],
    margin_percent: Decimal | int | float = DEFAULT_MARGIN_PERCENT,
    bundle_sizes: Iterable[int] = DEFAULT_BUNDLE_SIZES,
    pack: str | None = None,
) -> BundlePrices:
    """Price one bundle for each size, using only items eligible at that size.

    A ticket-side item must list the size in ``available_units`` and hold at
    least that many units, since one ticket row fills every bundle of a
    multi-bundle spin. Memorabilia only needs the size listed.
    """
    multiplier = margin_multiplier(margin_percent)
    tickets = [
        i for i in (*ticket_levels, *ticket_groups) if i.is_sellable and supports_pack(i, pack)
    ]
    memorabilia = [
        i for i in (*special_prizes, *card_breaks) if i.is_sellable and supports_pack(i, pack)
    ]

    prices = {}
    for size in sorted(bundle_sizes):
        avg_ticket, _ = weighted_average(
            i for i in tickets if supports_bundle_size(i, size) and i.quantity >= size
        )
        avg_break, _ = weighted_average(
            i for i in memorabilia if supports_bundle_size(i, size)
        )
        prices[size] = to_cents((avg_ticket + avg_break) * multiplier)
    return BundlePrices(prices=prices)
