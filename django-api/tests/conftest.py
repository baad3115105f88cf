"""Pytest configuration and shared fixtures."""

import random
from datetime import timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from games import models
from games.conf import GameSettings, pricing_cache
from games.services import (
    BackupPrizeService,
    CheckoutService,
    InventoryRefresher,
    InventoryService,
    PricingService,
    PrizePoolService,
    VipBackupService,
)
from games.stores.django_store import DjangoInventoryStore, DjangoPrizePoolStore

ALL_SIZES = [1, 2, 3, 4]


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def admin_api_client(db) -> APIClient:
    user = get_user_model().objects.create_user(
        username="boxoffice", password="not-used", is_staff=True
    )
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    pricing_cache().clear()
    yield
    cache.clear()
    pricing_cache().clear()


@pytest.fixture
def game_config() -> GameSettings:
    return GameSettings(
        bundle_sizes=(1, 2, 3, 4),
        default_margin_percent=Decimal("30"),
        pools_per_size=5,
        min_available_pools=3,
    )


@pytest.fixture
def inventory_store(game_config) -> DjangoInventoryStore:
    return DjangoInventoryStore(game_config.bundle_sizes)


@pytest.fixture
def pool_store() -> DjangoPrizePoolStore:
    return DjangoPrizePoolStore()


@pytest.fixture
def pricing_service(inventory_store, game_config) -> PricingService:
    return PricingService(inventory_store, pricing_cache(), game_config)


@pytest.fixture
def pool_service(inventory_store, pool_store, game_config) -> PrizePoolService:
    return PrizePoolService(inventory_store, pool_store, game_config, rng=random.Random(7))


@pytest.fixture
def vip_service(inventory_store, game_config) -> VipBackupService:
    return VipBackupService(inventory_store, game_config, rng=random.Random(7))


@pytest.fixture
def backup_service(inventory_store) -> BackupPrizeService:
    return BackupPrizeService(inventory_store)


@pytest.fixture
def refresher(pricing_service, pool_service) -> InventoryRefresher:
    return InventoryRefresher(pricing_service, pool_service)


@pytest.fixture
def inventory_service(inventory_store, refresher, game_config) -> InventoryService:
    return InventoryService(inventory_store, refresher, game_config)


@pytest.fixture
def checkout_service(
    inventory_store, pricing_service, pool_service, vip_service, backup_service, refresher
) -> CheckoutService:
    return CheckoutService(
        inventory_store, pricing_service, pool_service, vip_service, backup_service, refresher
    )


# Inventory factories


@pytest.fixture
def make_game(db):
    def make(**overrides) -> models.Game:
        fields = {
            "event_name": "Yankees vs Red Sox",
            "event_date": timezone.now() + timedelta(days=7),
            "venue": "Yankee Stadium",
            "city": "New York",
            "state": "NY",
            "sport": "MLB",
            "status": models.Game.Status.ACTIVE,
        }
        fields.update(overrides)
        return models.Game.objects.create(**fields)

    return make


@pytest.fixture
def game(make_game) -> models.Game:
    return make_game()


@pytest.fixture
def make_ticket_level(db):
    def make(game, **overrides) -> models.TicketLevel:
        fields = {
            "level": "UD",
            "level_name": "Upper Deck",
            "quantity": 10,
            "price_per_seat": Decimal("100.00"),
            "available_units": ALL_SIZES,
        }
        fields.update(overrides)
        return models.TicketLevel.objects.create(game=game, **fields)

    return make


@pytest.fixture
def make_ticket_group(db):
    def make(game, **overrides) -> models.TicketGroup:
        fields = {
            "section": "101",
            "row": "A",
            "quantity": 4,
            "price_per_seat": Decimal("150.00"),
            "available_units": [4],
        }
        fields.update(overrides)
        return models.TicketGroup.objects.create(game=game, **fields)

    return make


@pytest.fixture
def make_special_prize(db):
    def make(game, **overrides) -> models.SpecialPrize:
        fields = {
            "name": "Signed Jersey",
            "value": Decimal("300.00"),
            "quantity": 1,
            "available_units": ALL_SIZES,
        }
        fields.update(overrides)
        return models.SpecialPrize.objects.create(game=game, **fields)

    return make


@pytest.fixture
def make_card_break(db):
    def make(game, **overrides) -> models.CardBreak:
        fields = {
            "break_name": "Topps Chrome Hobby Box",
            "break_value": Decimal("35.00"),
            "quantity": 1,
            "available_units": ALL_SIZES,
        }
        fields.update(overrides)
        return models.CardBreak.objects.create(game=game, **fields)

    return make


@pytest.fixture
def stocked_game(game, make_ticket_level, make_card_break) -> models.Game:
    """A game with one ten-seat level at 100 and four 35-dollar breaks."""
    make_ticket_level(game)
    for n in range(4):
        make_card_break(game, break_name=f"Break {n}")
    return game
