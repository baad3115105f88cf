"""Odds of a spin also winning the game's primary VIP prizes.

Every spin rolls twice, once for the primary VIP ticket and once for the
primary VIP memorabilia, and each roll wins with ``VIP_PROBABILITY``. The
expected value of those rolls is what a VIP surcharge on a bundle covers.
"""

import random
from dataclasses import dataclass
from decimal import Decimal

from games.domain.models import CardBreak, InventorySnapshot, TicketGroup, TicketLevel
from games.domain.pricing import ZERO, margin_multiplier
from games.domain.value_objects import ItemId, ItemKind, as_decimal, to_cents

# 1 in 5,000
VIP_PROBABILITY = Decimal("0.0002")


def _mean(values: list[Decimal]) -> Decimal:
    return sum(values, ZERO) / len(values) if values else ZERO


def _wins(roll: float) -> bool:
    return as_decimal(roll) < VIP_PROBABILITY


@dataclass(frozen=True)
class VipPrizePool:
    """Primary VIP items of a game that a winning roll can hand out."""

    tickets: tuple[TicketGroup | TicketLevel, ...] = ()
    memorabilia: tuple[CardBreak, ...] = ()

    @property
    def avg_ticket_value(self) -> Decimal:
        return _mean([item.value for item in self.tickets])

    @property
    def avg_memorabilia_value(self) -> Decimal:
        return _mean([item.value for item in self.memorabilia])

    @property
    def expected_value(self) -> Decimal:
        return VIP_PROBABILITY * (self.avg_ticket_value + self.avg_memorabilia_value)


def build_vip_prize_pool(snapshot: InventorySnapshot) -> VipPrizePool:
    """Collect the in-stock VIP items holding the primary slot."""
    tickets = [
        item
        for item in (*snapshot.ticket_levels, *snapshot.ticket_groups)
        if item.is_vip and item.is_sellable
    ]
    memorabilia = [item for item in snapshot.card_breaks if item.is_vip and item.is_sellable]
    return VipPrizePool(tickets=tuple(tickets), memorabilia=tuple(memorabilia))


def vip_pricing_component(
    pool: VipPrizePool, margin_percent: Decimal | int | float
) -> Decimal:
    """Per-bundle surcharge covering the VIP rolls, with the margin applied."""
    return to_cents(pool.expected_value * margin_multiplier(margin_percent))


@dataclass(frozen=True)
class VipRoll:
    """Outcome of both VIP rolls for one spin."""

    ticket_roll: float
    memorabilia_roll: float
    expected_value: Decimal
    ticket_prize: tuple[ItemKind, ItemId] | None = None
    memorabilia_prize: tuple[ItemKind, ItemId] | None = None

    @property
    def ticket_won(self) -> bool:
        return _wins(self.ticket_roll)

    @property
    def memorabilia_won(self) -> bool:
        return _wins(self.memorabilia_roll)


def roll_vip_prizes(pool: VipPrizePool, rng: random.Random | None = None) -> VipRoll:
    """Roll for both VIP prizes and pick a winning item from the pool.

    A winning roll with nothing in its half of the pool awards no prize.
    """
    rng = rng or random.Random()
    ticket_roll = rng.random()
    memorabilia_roll = rng.random()

    ticket_prize = memorabilia_prize = None
    if _wins(ticket_roll) and pool.tickets:
        item = rng.choice(pool.tickets)
        ticket_prize = (item.kind, item.id)
    if _wins(memorabilia_roll) and pool.memorabilia:
        item = rng.choice(pool.memorabilia)
        memorabilia_prize = (item.kind, item.id)
    return VipRoll(
        ticket_roll=ticket_roll,
        memorabilia_roll=memorabilia_roll,
        expected_value=pool.expected_value,
        ticket_prize=ticket_prize,
        memorabilia_prize=memorabilia_prize,
    )
