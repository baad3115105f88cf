"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from dataclasses import FrozenInstanceError
from decimal import Decimal
from uuid import uuid4

import pytest

from games.domain import (
    BundleItem,
    GameId,
    InventoryStatus,
    ItemId,
    ItemKind,
    PoolStatus,
    PrizePool,
    SpecialPrize,
    TicketGroup,
    TierAssignment,
    TierLevel,
)
from games.domain.availability import (
    compute_available_units,
    supports_pack,
    validate_available_units,
)
from games.domain.errors import InvalidIdentifierError, InvalidSnapshotError
from games.domain.tiers import classify_tier, tier_display

GAME = GameId(uuid4())


def ticket_group(**overrides) -> TicketGroup:
    fields = {
        "id": ItemId(uuid4()),
        "game_id": GAME,
        "section": "101",
        "row": "A",
        "quantity": 2,
        "price_per_seat": Decimal("150"),
        "available_units": frozenset({2}),
    }
    fields.update(overrides)
    return TicketGroup(**fields)


class TestIdentifiers:
    """Tests for GameId and ItemId value objects."""

    def test_from_string_valid_uuid(self):
        raw = uuid4()
        assert GameId.from_string(str(raw)).value == raw
        assert str(ItemId.from_string(str(raw))) == str(raw)

    def test_from_string_invalid_uuid(self):
        with pytest.raises(InvalidIdentifierError):
            GameId.from_string("not-a-uuid")
        with pytest.raises(InvalidIdentifierError):
            ItemId.from_string("")


class TestTierClassifier:
    """Tests for price-based tier classification."""

    @pytest.mark.parametrize(
        ("price", "tier", "priority"),
        [
            ("500", TierLevel.VIP_ITEM, 1),
            ("2500", TierLevel.VIP_ITEM, 1),
            ("499.99", TierLevel.GOLD_LEVEL, 2),
            ("200", TierLevel.GOLD_LEVEL, 2),
            ("199.99", TierLevel.UPPER_DECK, 3),
            ("0", TierLevel.UPPER_DECK, 3),
        ],
    )
    def test_thresholds(self, price, tier, priority):
        assignment = classify_tier(Decimal(price))
        assert assignment.tier_level is tier
        assert assignment.tier_priority == priority

    def test_accepts_floats_without_binary_drift(self):
        assert classify_tier(499.99).tier_level is TierLevel.GOLD_LEVEL

    def test_assignment_is_immutable(self):
        assignment = classify_tier(Decimal("650"))
        assert assignment == TierAssignment(TierLevel.VIP_ITEM, 1)
        with pytest.raises(FrozenInstanceError):
            assignment.tier_priority = 2

    def test_display_labels(self):
        assert tier_display(TierLevel.VIP_ITEM) == ("VIP Item", 1)
        assert tier_display(None) == ("Standard", 4)

    def test_bundle_items_carry_the_display_label(self):
        item = BundleItem(
            kind=ItemKind.TICKET_LEVEL,
            item_id=ItemId(uuid4()),
            name="Club Level",
            value=Decimal("250"),
            tier_level=TierLevel.GOLD_LEVEL,
        )
        assert item.to_dict()["tier_label"] == "Gold Level"


class TestAvailableUnits:
    """Tests for the quantity to bundle-size policy."""

    @pytest.mark.parametrize("quantity", [1, 2, 3, 4])
    def test_small_blocks_are_never_split(self, quantity):
        assert compute_available_units(quantity) == frozenset({quantity})

    @pytest.mark.parametrize("quantity", [5, 7, 40])
    def test_large_blocks_serve_every_size(self, quantity):
        assert compute_available_units(quantity) == frozenset({1, 2, 3, 4})

    def test_zero_quantity_has_no_sizes(self):
        assert compute_available_units(0) == frozenset()

    def test_negative_quantity_is_rejected(self):
        with pytest.raises(InvalidSnapshotError):
            compute_available_units(-1)

    def test_respects_configured_sizes(self):
        assert compute_available_units(2, bundle_sizes=(1, 2)) == frozenset({2})
        assert compute_available_units(3, bundle_sizes=(1, 2)) == frozenset({1, 2})

    def test_validate_flags_unknown_and_oversized_sizes(self):
        problems = validate_available_units([4, 5], quantity=2)
        assert len(problems) == 2
        assert "[5]" in problems[0]
        assert "exceed quantity 2" in problems[1]

    def test_validate_accepts_policy_output(self):
        assert validate_available_units(compute_available_units(6), quantity=6) == []

    def test_validate_keeps_small_blocks_whole(self):
        [problem] = validate_available_units([1, 2], quantity=2)
        assert "must stay whole" in problem
        assert validate_available_units([2], quantity=2) == []

    def test_special_prizes_match_every_pack(self):
        prize = SpecialPrize(
            id=ItemId(uuid4()), game_id=GAME, name="Jersey", value=Decimal("1"), quantity=1
        )
        assert supports_pack(prize, "gold")
        assert not supports_pack(ticket_group(available_packs=frozenset({"red"})), "gold")
        assert supports_pack(ticket_group(), None)


class TestInventoryItems:
    """Tests for inventory item invariants."""

    def test_negative_quantity_is_rejected(self):
        with pytest.raises(InvalidSnapshotError):
            ticket_group(quantity=-1)

    def test_negative_price_is_rejected(self):
        with pytest.raises(InvalidSnapshotError):
            ticket_group(price_per_seat=Decimal("-5"))

    def test_sold_or_empty_groups_are_not_sellable(self):
        assert ticket_group().is_sellable
        assert not ticket_group(status=InventoryStatus.SOLD).is_sellable
        assert not ticket_group(quantity=0).is_sellable

    def test_vip_backups_wait_for_promotion(self):
        primary = ticket_group(tier_level=TierLevel.VIP_ITEM, tier_priority=1)
        backup = ticket_group(tier_level=TierLevel.VIP_ITEM, tier_priority=2)
        gold = ticket_group(tier_level=TierLevel.GOLD_LEVEL, tier_priority=2)
        assert primary.is_sellable
        assert not backup.is_sellable
        assert gold.is_sellable

    def test_backup_prizes_are_not_sellable(self):
        backup = SpecialPrize(
            id=ItemId(uuid4()),
            game_id=GAME,
            name="Signed Jersey (Backup)",
            value=Decimal("300"),
            quantity=3,
            is_backup=True,
        )
        assert not backup.is_sellable


class TestPrizePool:
    """Tests for PrizePool unit accounting."""

    def test_item_units_counts_the_shared_ticket_once_per_bundle(self):
        level_id, break_a, break_b = uuid4(), uuid4(), uuid4()
        ticket = {"type": "level", "id": str(level_id), "name": "Upper Deck", "value": "100"}
        pool = PrizePool(
            id=ItemId(uuid4()),
            game_id=GAME,
            bundle_size=2,
            bundles=(
                {"ticket": ticket, "memorabilia": [{"type": "memorabilia", "id": str(break_a)}]},
                {"ticket": ticket, "memorabilia": [{"type": "memorabilia", "id": str(break_b)}]},
            ),
            total_value=Decimal("270"),
            total_price=Decimal("351"),
            status=PoolStatus.AVAILABLE,
        )
        assert pool.item_units() == {
            (ItemKind.TICKET_LEVEL, ItemId(level_id)): 2,
            (ItemKind.CARD_BREAK, ItemId(break_a)): 1,
            (ItemKind.CARD_BREAK, ItemId(break_b)): 1,
        }
