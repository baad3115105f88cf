"""Prize pool service - materialize, invalidate and hand out prize pools."""

import logging
import random
from collections.abc import Iterable

from django.db import transaction

from games.conf import GameSettings, game_settings
from games.domain import BestPrizes, ItemId, PoolStatus, PrizePool
from games.domain.errors import InvalidBundleSizeError, PoolUnavailableError
from games.domain.pools import build_prize_pool, select_best_prizes
from games.domain.value_objects import GameId
from games.services.pricing_service import effective_margin, load_game
from games.stores.interfaces import InventoryStore, PrizePoolStore

logger = logging.getLogger(__name__)


class PrizePoolService:
    """Service for prize pool generation, staleness and claiming."""

    def __init__(
        self,
        inventory: InventoryStore,
        pools: PrizePoolStore,
        config: GameSettings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._inventory = inventory
        self._pools = pools
        self._config = config or game_settings()
        self._rng = rng or random.Random()

    def generate_prize_pools(
        self,
        game_id: str,
        pool_count: int | None = None,
        bundle_sizes: Iterable[int] | None = None,
        pack: str | None = None,
    ) -> dict[int, list[PrizePool]]:
        """Replace the unclaimed pools of a game with freshly drawn ones.

        Draws up to ``pool_count`` pools per size; a size whose inventory runs
        short ends up with fewer (possibly zero) pools. Clears the game's
        staleness flag once every size has been regenerated.

        Raises:
            InvalidIdentifierError: If the game_id is not a valid UUID.
            GameNotFoundError: If the game does not exist.
            InvalidBundleSizeError: If a requested size is not offered.
        """
        count = self._config.pools_per_size if pool_count is None else pool_count
        sizes = self._config.bundle_sizes if bundle_sizes is None else tuple(bundle_sizes)
        for size in sizes:
            self._check_size(size)

        with transaction.atomic():
            gid, game = load_game(self._inventory, game_id, for_update=True)
            margin = effective_margin(game, self._config)
            snapshot = self._inventory.get_snapshot(gid)

            generated = {}
            for size in sizes:
                drafts = []
                for _ in range(count):
                    draft = build_prize_pool(snapshot, size, margin, rng=self._rng, pack=pack)
                    if draft is None:
                        logger.warning(
                            "Not enough inventory for %dx pools of game %s (built %d of %d)",
                            size,
                            gid,
                            len(drafts),
                            count,
                        )
                        break
                    drafts.append(draft)
                generated[size] = self._pools.replace_pools(gid, size, drafts, pack=pack)

            if pack is None and set(sizes) >= set(self._config.bundle_sizes):
                self._inventory.set_pools_stale(gid, False)

        logger.info(
            "Generated prize pools for game %s: %s",
            gid,
            {size: len(pools) for size, pools in generated.items()},
        )
        return generated

    def mark_pools_as_stale(self, game_id: str) -> int:
        """Flag a game's pools for regeneration. Never raises; failures are logged."""
        try:
            gid = GameId.from_string(game_id)
            with transaction.atomic():
                marked = self._pools.mark_stale(gid)
                self._inventory.set_pools_stale(gid, True)
        except Exception:
            logger.exception("Failed to mark prize pools stale for game %s", game_id)
            return 0
        logger.debug("Marked %d prize pools stale for game %s", marked, gid)
        return marked

    def ensure_pools_available(
        self, game_id: str, bundle_size: int, pack: str | None = None
    ) -> bool:
        """Regenerate when stale or running low; return whether any pool is available."""
        self._check_size(bundle_size)
        gid, game = load_game(self._inventory, game_id)

        if game.pools_stale:
            logger.info("Pools of game %s are stale, regenerating", gid)
            self.generate_prize_pools(game_id)

        available = self._pools.count_available(gid, bundle_size, pack)
        if available < self._config.min_available_pools:
            logger.info(
                "Game %s has %d available %dx pools (minimum %d), regenerating",
                gid,
                available,
                bundle_size,
                self._config.min_available_pools,
            )
            self.generate_prize_pools(game_id, bundle_sizes=[bundle_size], pack=pack)
            available = self._pools.count_available(gid, bundle_size, pack)
        return available > 0

    def get_random_available_pool(
        self, game_id: str, bundle_size: int, pack: str | None = None
    ) -> PrizePool | None:
        gid = GameId.from_string(game_id)
        pools = self._pools.list_available(gid, bundle_size, pack)
        if not pools:
            return None
        return self._rng.choice(pools)

    def claim_pool(self, pool_id: str, claimed_by: str) -> PrizePool:
        """Mark an AVAILABLE pool CLAIMED under a row lock.

        Raises:
            InvalidIdentifierError: If the pool_id is not a valid UUID.
            PoolUnavailableError: If the pool is missing, stale or already claimed.
        """
        pid = ItemId.from_string(pool_id)
        with transaction.atomic():
            pool = self._pools.get_pool(pid, for_update=True)
            if pool is None or pool.status is not PoolStatus.AVAILABLE:
                raise PoolUnavailableError(pool_id)
            claimed = self._pools.mark_claimed(pid, claimed_by)
        logger.info("Pool %s claimed by %s", pid, claimed_by)
        return claimed

    def best_prizes(self, game_id: str) -> BestPrizes:
        gid, _ = load_game(self._inventory, game_id)
        return select_best_prizes(self._inventory.get_snapshot(gid))

    def _check_size(self, bundle_size: int) -> None:
        if bundle_size not in self._config.bundle_sizes:
            raise InvalidBundleSizeError(bundle_size)
