"""After-commit refresh of derived state (stale pools, recalculated prices)."""

import logging

from django.db import transaction

from games.services.pool_service import PrizePoolService
from games.services.pricing_service import PricingService

logger = logging.getLogger(__name__)


class InventoryRefresher:
    """Runs the post-mutation refresh without ever failing the mutation."""

    def __init__(self, pricing: PricingService, pools: PrizePoolService) -> None:
        self._pricing = pricing
        self._pools = pools

    def refresh(self, game_id: str) -> None:
        self._pools.mark_pools_as_stale(game_id)
        try:
            self._pricing.recalculate_game_pricing(game_id)
        except Exception:
            logger.exception("Background price recalculation failed for game %s", game_id)

    def schedule(self, game_id: str) -> None:
        """Refresh once the current transaction commits (immediately outside one)."""
        transaction.on_commit(lambda: self.refresh(game_id))
