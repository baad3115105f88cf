"""Tests for admin inventory mutations.

Run with: pytest tests/test_inventory.py -v
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from games import models
from games.domain import ItemId, TierLevel
from games.domain.errors import GameNotFoundError, InventoryValidationError

SOURCE = "https://breaks.example.com/lot/17"


@pytest.mark.django_db
class TestTicketGroups:
    """Tests for InventoryService.bulk_create_ticket_groups."""

    def test_units_and_tier_are_derived(self, inventory_service, game):
        """Blocks of up to four seats stay whole; prices pick the tier."""
        created = inventory_service.bulk_create_ticket_groups(
            str(game.id),
            [
                {"section": "101", "row": "A", "quantity": 2, "price_per_seat": Decimal("150")},
                {"section": "VIP", "row": "1", "quantity": 6, "price_per_seat": Decimal("650")},
            ],
        )

        assert created[0].available_units == frozenset({2})
        assert created[0].tier_level is TierLevel.UPPER_DECK
        assert created[0].tier_priority == 3
        assert created[1].available_units == frozenset({1, 2, 3, 4})
        assert created[1].tier_level is TierLevel.VIP_ITEM
        assert created[1].tier_priority == 1
        assert created[1].available_packs == frozenset({"blue", "red", "gold"})

    def test_explicit_tier_is_kept(self, inventory_service, game):
        created = inventory_service.bulk_create_ticket_groups(
            str(game.id),
            [
                {
                    "section": "VIP",
                    "row": "2",
                    "quantity": 2,
                    "price_per_seat": Decimal("700"),
                    "tier_level": "VIP_ITEM",
                    "tier_priority": 2,
                }
            ],
        )
        assert created[0].tier_priority == 2

    def test_invalid_units_reject_the_whole_batch(self, inventory_service, game):
        """One bad group means nothing is created."""
        with pytest.raises(InventoryValidationError) as excinfo:
            inventory_service.bulk_create_ticket_groups(
                str(game.id),
                [
                    {"section": "101", "quantity": 4, "price_per_seat": Decimal("100")},
                    {
                        "section": "102",
                        "quantity": 2,
                        "price_per_seat": Decimal("100"),
                        "available_units": [2, 5],
                    },
                ],
            )
        assert "ticket group 1" in excinfo.value.message
        assert not models.TicketGroup.objects.filter(game=game).exists()

    @pytest.mark.parametrize("units", [[1], [1, 2], []])
    def test_small_blocks_cannot_be_split(self, inventory_service, game, units):
        """A pair may only be sold as a 2x bundle."""
        with pytest.raises(InventoryValidationError) as excinfo:
            inventory_service.bulk_create_ticket_groups(
                str(game.id),
                [
                    {
                        "section": "101",
                        "quantity": 2,
                        "price_per_seat": Decimal("150"),
                        "available_units": units,
                    }
                ],
            )
        assert "must stay whole" in excinfo.value.message
        assert not models.TicketGroup.objects.filter(game=game).exists()

    def test_large_blocks_accept_a_subset_of_sizes(self, inventory_service, game):
        created = inventory_service.bulk_create_ticket_groups(
            str(game.id),
            [
                {
                    "section": "101",
                    "quantity": 6,
                    "price_per_seat": Decimal("150"),
                    "available_units": [2, 4],
                }
            ],
        )
        assert created[0].available_units == frozenset({2, 4})

    def test_unknown_pack_is_rejected(self, inventory_service, game):
        with pytest.raises(InventoryValidationError):
            inventory_service.bulk_create_ticket_groups(
                str(game.id),
                [
                    {
                        "section": "101",
                        "quantity": 1,
                        "price_per_seat": Decimal("100"),
                        "available_packs": ["green"],
                    }
                ],
            )

    def test_missing_game_raises_error(self, inventory_service, db):
        with pytest.raises(GameNotFoundError):
            inventory_service.bulk_create_ticket_groups(
                str(uuid4()), [{"section": "1", "quantity": 1, "price_per_seat": Decimal("1")}]
            )

    def test_prices_and_pools_refresh_after_commit(
        self, inventory_service, stocked_game, django_capture_on_commit_callbacks
    ):
        """The refresh runs once the mutation commits."""
        stocked_game.pools_stale = False
        stocked_game.save()
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            inventory_service.bulk_create_ticket_groups(
                str(stocked_game.id),
                [{"section": "101", "quantity": 10, "price_per_seat": Decimal("200")}],
            )

        assert len(callbacks) == 1
        stocked_game.refresh_from_db()
        assert stocked_game.pools_stale is True
        # (100 * 10 + 200 * 10) / 20 + 35, plus 30%
        assert stocked_game.spin_price_per_bundle == Decimal("240.50")


@pytest.mark.django_db
class TestSpecialPrizes:
    """Tests for InventoryService.bulk_create_special_prizes."""

    def test_prizes_default_to_every_size(self, inventory_service, game):
        created = inventory_service.bulk_create_special_prizes(
            str(game.id), [{"name": "Signed Jersey", "value": Decimal("300"), "quantity": 1}]
        )
        assert created[0].available_units == frozenset({1, 2, 3, 4})
        assert created[0].is_backup is False

    def test_backup_links_to_its_primary(self, inventory_service, game, make_special_prize):
        primary = make_special_prize(game)
        created = inventory_service.bulk_create_special_prizes(
            str(game.id),
            [
                {
                    "name": "Signed Jersey (Backup)",
                    "value": Decimal("300"),
                    "quantity": 3,
                    "backup_for": primary.id,
                }
            ],
        )
        assert created[0].is_backup is True
        assert created[0].backup_for == ItemId(primary.id)

    def test_backup_must_target_the_same_game(
        self, inventory_service, game, make_game, make_special_prize
    ):
        elsewhere = make_special_prize(make_game(event_name="Cubs vs Cardinals"))
        with pytest.raises(InventoryValidationError):
            inventory_service.bulk_create_special_prizes(
                str(game.id),
                [{"name": "Backup", "quantity": 1, "backup_for": str(elsewhere.id)}],
            )

    def test_backup_without_target_is_rejected(self, inventory_service, game):
        with pytest.raises(InventoryValidationError):
            inventory_service.bulk_create_special_prizes(
                str(game.id), [{"name": "Backup", "quantity": 1, "is_backup": True}]
            )


@pytest.mark.django_db
class TestCardBreaks:
    """Tests for adding and deleting card breaks."""

    def test_breaks_default_to_every_size_and_pack(self, inventory_service, game):
        created = inventory_service.add_card_breaks(
            str(game.id), [{"break_name": "Bowman Hobby Box", "break_value": Decimal("60")}]
        )
        assert created[0].available_units == frozenset({1, 2, 3, 4})
        assert created[0].available_packs == frozenset({"blue", "red", "gold"})

    def test_delete_is_idempotent(self, inventory_service, game, make_card_break):
        """Deleting a break that is already gone still succeeds."""
        item = make_card_break(game)
        assert inventory_service.delete_card_break(str(game.id), str(item.id)) is True
        assert inventory_service.delete_card_break(str(game.id), str(item.id)) is False
        assert not models.CardBreak.objects.filter(pk=item.id).exists()

    def test_delete_only_touches_the_given_game(
        self, inventory_service, game, make_game, make_card_break
    ):
        item = make_card_break(make_game(event_name="Cubs vs Cardinals"))
        assert inventory_service.delete_card_break(str(game.id), str(item.id)) is False
        assert models.CardBreak.objects.filter(pk=item.id).exists()

    def test_duplicate_creates_an_available_copy(self, inventory_service, game, make_card_break):
        item = make_card_break(game, quantity=0, status="SOLD", source_url=SOURCE)

        copy = inventory_service.duplicate_card_break(str(game.id), str(item.id))

        assert copy.id.value != item.id
        assert copy.break_name == "Topps Chrome Hobby Box (Copy)"
        assert copy.quantity == 1
        assert copy.status.value == "AVAILABLE"
        assert copy.break_value == Decimal("35.00")
        assert models.CardBreak.objects.filter(game=game).count() == 2
        assert models.CardBreak.objects.get(pk=copy.id.value).source_url == SOURCE

    def test_duplicate_unknown_break_returns_none(self, inventory_service, game):
        assert inventory_service.duplicate_card_break(str(game.id), str(uuid4())) is None

    def test_delete_by_source(self, inventory_service, game, make_card_break):
        make_card_break(game, source_url=SOURCE)
        make_card_break(game, source_url=SOURCE)
        keep = make_card_break(game, source_url="https://breaks.example.com/lot/18")

        assert inventory_service.delete_card_breaks_by_source(str(game.id), SOURCE) == 2
        assert list(models.CardBreak.objects.filter(game=game)) == [keep]

    def test_delete_by_source_needs_a_source(self, inventory_service, game):
        with pytest.raises(InventoryValidationError):
            inventory_service.delete_card_breaks_by_source(str(game.id), "")


@pytest.mark.django_db
class TestRepairAvailableUnits:
    """Tests for InventoryService.repair_available_units."""

    def test_repair_reapplies_the_units_policy(
        self, inventory_service, game, make_ticket_group, make_ticket_level
    ):
        wrong_group = make_ticket_group(game, quantity=6, available_units=[4])
        wrong_level = make_ticket_level(game, quantity=3)
        make_ticket_group(game, section="102")

        report = inventory_service.repair_available_units(str(game.id))

        assert (report.updated, report.unchanged) == (2, 1)
        wrong_group.refresh_from_db()
        wrong_level.refresh_from_db()
        assert wrong_group.available_units == [1, 2, 3, 4]
        assert wrong_level.available_units == [3]

    def test_repair_can_be_scoped_to_one_game(
        self, inventory_service, game, make_game, make_ticket_group
    ):
        other = make_game(event_name="Cubs vs Cardinals")
        make_ticket_group(game, quantity=6, available_units=[4])
        untouched = make_ticket_group(other, quantity=6, available_units=[4])

        report = inventory_service.repair_available_units(str(game.id))

        assert report.updated == 1
        untouched.refresh_from_db()
        assert untouched.available_units == [4]

    def test_repair_skips_sold_out_items(self, inventory_service, game, make_ticket_level):
        make_ticket_level(game, quantity=0, available_units=[1])
        report = inventory_service.repair_available_units()
        assert (report.updated, report.unchanged) == (0, 0)
