"""Unit tests for the pricing engine.

Run with: pytest tests/test_pricing.py -v
"""

from decimal import Decimal
from uuid import uuid4

from games.domain import (
    CardBreak,
    GameId,
    InventorySnapshot,
    InventoryStatus,
    ItemId,
    ItemKind,
    SpecialPrize,
    TicketGroup,
    TicketLevel,
    TierLevel,
)
from games.domain.pricing import calculate_bundle_pricing, calculate_bundle_specific_pricing
from games.domain.vip_odds import (
    VipPrizePool,
    build_vip_prize_pool,
    roll_vip_prizes,
    vip_pricing_component,
)

GAME = GameId(uuid4())
ALL = frozenset({1, 2, 3, 4})


def level(price, quantity=10, units=ALL, **kw) -> TicketLevel:
    return TicketLevel(
        id=ItemId(uuid4()),
        game_id=GAME,
        level="UD",
        level_name="Upper Deck",
        quantity=quantity,
        price_per_seat=Decimal(price),
        available_units=frozenset(units),
        **kw,
    )


def group(price, quantity=1, units=ALL, **kw) -> TicketGroup:
    return TicketGroup(
        id=ItemId(uuid4()),
        game_id=GAME,
        section="101",
        row="A",
        quantity=quantity,
        price_per_seat=Decimal(price),
        available_units=frozenset(units),
        **kw,
    )


def card_break(value, quantity=1, units=ALL, **kw) -> CardBreak:
    return CardBreak(
        id=ItemId(uuid4()),
        game_id=GAME,
        break_name="Hobby Box",
        break_value=Decimal(value),
        quantity=quantity,
        available_units=frozenset(units),
        **kw,
    )


def prize(value, quantity=1, units=ALL, **kw) -> SpecialPrize:
    return SpecialPrize(
        id=ItemId(uuid4()),
        game_id=GAME,
        name="Signed Jersey",
        value=Decimal(value),
        quantity=quantity,
        available_units=frozenset(units),
        **kw,
    )


class TestBundlePricing:
    """Tests for calculate_bundle_pricing."""

    def test_margin_is_applied_to_the_expected_bundle_value(self):
        summary = calculate_bundle_pricing([group("100")], [card_break("35")], 30)
        assert summary.avg_ticket_price == Decimal("100.00")
        assert summary.avg_break_value == Decimal("35.00")
        assert summary.total_bundle_value == Decimal("135.00")
        assert summary.spin_price_per_bundle == Decimal("175.50")

    def test_no_tickets_prices_the_ticket_side_at_zero(self):
        summary = calculate_bundle_pricing([], [card_break("35")], 30)
        assert summary.avg_ticket_price == Decimal("0")
        assert summary.available_tickets == 0
        assert summary.spin_price_per_bundle == Decimal("45.50")

    def test_empty_inventory_is_free_not_an_error(self):
        summary = calculate_bundle_pricing([], [], 30)
        assert summary.spin_price_per_bundle == Decimal("0")
        assert summary.available_breaks == 0

    def test_averages_are_weighted_by_remaining_units(self):
        summary = calculate_bundle_pricing(
            [group("200")], [], 0, ticket_levels=[level("100", quantity=3)]
        )
        assert summary.avg_ticket_price == Decimal("125.00")
        assert summary.available_tickets == 4

    def test_special_prizes_count_as_memorabilia(self):
        summary = calculate_bundle_pricing([], [card_break("40")], 0, special_prizes=[prize("60")])
        assert summary.avg_break_value == Decimal("50.00")

    def test_unsellable_items_are_ignored(self):
        summary = calculate_bundle_pricing(
            [
                group("100"),
                group("900", status=InventoryStatus.SOLD),
                group("900", quantity=0),
                group("900", tier_level=TierLevel.VIP_ITEM, tier_priority=2),
            ],
            [card_break("35"), card_break("500", status=InventoryStatus.SOLD)],
            30,
            special_prizes=[prize("900", quantity=0), prize("900", is_backup=True)],
        )
        assert summary.avg_ticket_price == Decimal("100.00")
        assert summary.avg_break_value == Decimal("35.00")

    def test_rounds_half_up_to_cents(self):
        summary = calculate_bundle_pricing([group("10"), group("10.01")], [], 0)
        assert summary.avg_ticket_price == Decimal("10.01")


class TestBundleSpecificPricing:
    """Tests for calculate_bundle_specific_pricing."""

    def test_each_size_uses_only_items_offered_at_that_size(self):
        prices = calculate_bundle_specific_pricing(
            [level("100")], [group("300", quantity=2, units={2})], [], [card_break("50")], 0
        )
        assert prices.spin_price_1x == Decimal("150.00")
        # (100 * 10 + 300 * 2) / 12 + 50
        assert prices.spin_price_2x == Decimal("183.33")
        assert prices.spin_price_3x == Decimal("150.00")
        assert prices.spin_price_4x == Decimal("150.00")

    def test_adding_a_single_only_item_leaves_the_2x_price_alone(self):
        base = calculate_bundle_specific_pricing([level("100")], [], [], [card_break("35")], 30)
        more = calculate_bundle_specific_pricing(
            [level("100")], [group("1000", units={1})], [], [card_break("35")], 30
        )
        assert more.spin_price_2x == base.spin_price_2x
        assert more.spin_price_1x > base.spin_price_1x

    def test_ticket_side_needs_enough_units_for_the_whole_spin(self):
        prices = calculate_bundle_specific_pricing(
            [level("100", quantity=1, units={1, 2})], [], [], [card_break("35")], 0
        )
        assert prices.spin_price_1x == Decimal("135.00")
        assert prices.spin_price_2x == Decimal("35.00")

    def test_pack_filter_limits_memorabilia(self):
        breaks = [
            card_break("100", available_packs=frozenset({"red"})),
            card_break("20", available_packs=frozenset({"blue"})),
        ]
        red = calculate_bundle_specific_pricing([level("100")], [], [], breaks, 0, pack="red")
        blue = calculate_bundle_specific_pricing([level("100")], [], [], breaks, 0, pack="blue")
        assert red.spin_price_1x == Decimal("200.00")
        assert blue.spin_price_1x == Decimal("120.00")

    def test_special_prizes_are_in_every_pack(self):
        breaks = [card_break("100", available_packs=frozenset({"red"}))]
        prices = calculate_bundle_specific_pricing(
            [level("100")], [], [prize("60")], breaks, 0, pack="red"
        )
        assert prices.spin_price_1x == Decimal("180.00")

    def test_only_configured_sizes_are_priced(self):
        prices = calculate_bundle_specific_pricing(
            [level("100")], [], [], [card_break("35")], 30, bundle_sizes=(1, 2)
        )
        assert set(prices.prices) == {1, 2}
        assert prices.spin_price_3x is None
        assert prices.price_for(2) == Decimal("175.50")


class FixedRolls:
    """Stands in for random.Random with preset rolls; choice takes the first item."""

    def __init__(self, *rolls):
        self._rolls = list(rolls)

    def random(self):
        return self._rolls.pop(0)

    def choice(self, items):
        return items[0]


def vip_pool() -> VipPrizePool:
    return build_vip_prize_pool(
        InventorySnapshot(
            ticket_levels=(
                level("600", tier_level=TierLevel.VIP_ITEM, tier_priority=1),
                level("400", tier_level=TierLevel.VIP_ITEM, tier_priority=2),
                level("100"),
            ),
            ticket_groups=(group("500", tier_level=TierLevel.VIP_ITEM, tier_priority=1),),
            card_breaks=(
                card_break("200", tier_level=TierLevel.VIP_ITEM, tier_priority=1),
                card_break(
                    "900",
                    status=InventoryStatus.SOLD,
                    quantity=0,
                    tier_level=TierLevel.VIP_ITEM,
                    tier_priority=1,
                ),
            ),
        )
    )


class TestVipOdds:
    """Tests for the VIP prize pool and rolls."""

    def test_pool_holds_in_stock_primaries_only(self):
        pool = vip_pool()
        assert [item.value for item in pool.tickets] == [Decimal("600"), Decimal("500")]
        assert [item.value for item in pool.memorabilia] == [Decimal("200")]

    def test_expected_value_uses_plain_averages(self):
        """One in 5,000 of (550 + 200)."""
        assert vip_pool().expected_value == Decimal("0.15")

    def test_pricing_component_applies_the_margin(self):
        assert vip_pricing_component(vip_pool(), 30) == Decimal("0.20")
        assert vip_pricing_component(vip_pool(), 0) == Decimal("0.15")
        assert vip_pricing_component(VipPrizePool(), 30) == Decimal("0.00")

    def test_rolls_below_the_odds_win(self):
        pool = vip_pool()
        roll = roll_vip_prizes(pool, FixedRolls(0.0001, 0.0002))

        assert roll.ticket_won is True
        assert roll.memorabilia_won is False
        assert roll.ticket_prize == (ItemKind.TICKET_LEVEL, pool.tickets[0].id)
        assert roll.memorabilia_prize is None

    def test_win_with_an_empty_pool_awards_nothing(self):
        roll = roll_vip_prizes(VipPrizePool(), FixedRolls(0.0, 0.0))
        assert roll.ticket_won and roll.memorabilia_won
        assert (roll.ticket_prize, roll.memorabilia_prize) == (None, None)
