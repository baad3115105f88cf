"""Checkout service - quote a spin and fulfil a claimed pool.

Payment happens between the two calls and is not handled here.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction

from games.domain import ItemKind, PrizePool
from games.domain.errors import InsufficientInventoryError, ItemOutOfStockError
from games.domain.value_objects import to_cents
from games.services.backup_prize_service import BackupPrizeService
from games.services.pool_service import PrizePoolService
from games.services.pricing_service import PricingService, load_game
from games.services.refresh import InventoryRefresher
from games.services.vip_service import TICKET_SIDE_KINDS, VipBackupService
from games.stores.interfaces import InventoryStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Quote:
    game_id: str
    bundle_size: int
    pack: str | None
    price_per_bundle: Decimal
    total_price: Decimal
    pool: PrizePool


class CheckoutService:
    """Service joining pricing, pools and inventory depletion for one spin."""

    def __init__(
        self,
        store: InventoryStore,
        pricing: PricingService,
        pools: PrizePoolService,
        vip: VipBackupService,
        backups: BackupPrizeService,
        refresher: InventoryRefresher,
    ) -> None:
        self._store = store
        self._pricing = pricing
        self._pools = pools
        self._vip = vip
        self._backups = backups
        self._refresher = refresher

    def quote(self, game_id: str, bundle_size: int, pack: str | None = None) -> Quote:
        """Price a spin from fresh data and pick the pool it will be served from.

        Stale games are re-priced before anything is trusted.

        Raises:
            InvalidIdentifierError: If the game_id is not a valid UUID.
            GameNotFoundError: If the game does not exist.
            InvalidBundleSizeError: If the size is not offered.
            InsufficientInventoryError: If no pool can be served.
        """
        _, game = load_game(self._store, game_id)
        if game.pools_stale:
            self._pricing.recalculate_game_pricing(game_id)
        if not self._pools.ensure_pools_available(game_id, bundle_size, pack):
            raise InsufficientInventoryError(bundle_size)
        pool = self._pools.get_random_available_pool(game_id, bundle_size, pack)
        if pool is None:
            raise InsufficientInventoryError(bundle_size)

        if pack is None:
            pricing = self._pricing.get_game_pricing(game_id)
            if bundle_size not in pricing.bundle_prices.prices:
                pricing = self._pricing.recalculate_game_pricing(game_id)
            price = pricing.bundle_prices.price_for(bundle_size)
        else:
            _, prices = self._pricing.calculate(game_id, pack=pack)
            price = prices.price_for(bundle_size)
        return Quote(
            game_id=game_id,
            bundle_size=bundle_size,
            pack=pack,
            price_per_bundle=price,
            total_price=to_cents(price * bundle_size),
            pool=pool,
        )

    def fulfil(self, pool_id: str, claimed_by: str) -> PrizePool:
        """Claim a pool and consume every inventory unit its bundles hold.

        Depleted VIP primaries and special prizes hand over to their backups
        in the same transaction.

        Raises:
            InvalidIdentifierError: If the pool_id is not a valid UUID.
            PoolUnavailableError: If the pool was claimed or went stale.
            ItemOutOfStockError: If an item was sold out from under the pool.
            ConcurrentUpdateError: If inventory rows cannot be locked.
        """
        with transaction.atomic():
            pool = self._pools.claim_pool(pool_id, claimed_by)
            for (kind, item_id), units in pool.item_units().items():
                if kind in TICKET_SIDE_KINDS:
                    self._vip.decrement_vip_inventory(kind, str(item_id), units)
                elif kind is ItemKind.SPECIAL_PRIZE:
                    prize = self._store.get_special_prize(item_id, for_update=True)
                    remaining = prize.quantity if prize else 0
                    if remaining < units:
                        raise ItemOutOfStockError(item_id, units, remaining)
                    for _ in range(units):
                        self._backups.activate_backup_prize(str(item_id))
                elif self._store.decrement_item(kind, item_id, units) is None:
                    raise ItemOutOfStockError(item_id, units, 0)
            self._refresher.schedule(str(pool.game_id))
        logger.info(
            "Fulfilled %dx pool %s of game %s for %s",
            pool.bundle_size,
            pool.id,
            pool.game_id,
            claimed_by,
        )
        return pool
