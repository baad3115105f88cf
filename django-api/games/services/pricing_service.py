"""Pricing service - recompute and persist derived game prices.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.core.cache.backends.base import BaseCache

from games.conf import GameSettings, game_settings
from games.domain import BundlePrices, Game, GameId, GamePricing, PricingSummary
from games.domain.errors import DomainError, GameNotFoundError
from games.domain.pricing import calculate_bundle_pricing, calculate_bundle_specific_pricing
from games.domain.value_objects import as_decimal
from games.stores.interfaces import InventoryStore

logger = logging.getLogger(__name__)


def pricing_cache_key(game_id: GameId) -> str:
    return f"game:{game_id}:pricing"


def effective_margin(game: Game, config: GameSettings) -> Decimal:
    """The game's last applied margin, or the configured default if never set."""
    if game.margin_percent is None:
        return config.default_margin_percent
    return game.margin_percent


def load_game(store: InventoryStore, game_id: str, for_update: bool = False) -> tuple[GameId, Game]:
    """Parse ``game_id`` and fetch the game.

    Raises:
        InvalidIdentifierError: If the game_id is not a valid UUID.
        GameNotFoundError: If the game does not exist.
    """
    gid = GameId.from_string(game_id)
    game = store.get_game(gid, for_update=for_update)
    if game is None:
        raise GameNotFoundError(game_id)
    return gid, game


@dataclass(frozen=True)
class RecalculationReport:
    updated: int
    failed: int


class PricingService:
    """Service for computing, persisting and serving game prices."""

    def __init__(
        self,
        store: InventoryStore,
        cache: BaseCache,
        config: GameSettings | None = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self._config = config or game_settings()

    def calculate(
        self,
        game_id: str,
        margin_percent: Decimal | int | float | None = None,
        pack: str | None = None,
    ) -> tuple[PricingSummary, BundlePrices]:
        """Price a game from its current inventory without persisting anything."""
        gid, game = load_game(self._store, game_id)
        return self._price(gid, self._margin(game, margin_percent), pack)

    def _price(
        self, gid: GameId, margin: Decimal, pack: str | None = None
    ) -> tuple[PricingSummary, BundlePrices]:
        snapshot = self._store.get_snapshot(gid)
        summary = calculate_bundle_pricing(
            snapshot.ticket_groups,
            snapshot.card_breaks,
            margin,
            ticket_levels=snapshot.ticket_levels,
            special_prizes=snapshot.special_prizes,
        )
        bundle_prices = calculate_bundle_specific_pricing(
            snapshot.ticket_levels,
            snapshot.ticket_groups,
            snapshot.special_prizes,
            snapshot.card_breaks,
            margin,
            bundle_sizes=self._config.bundle_sizes,
            pack=pack,
        )
        return summary, bundle_prices

    def recalculate_game_pricing(
        self, game_id: str, margin_percent: Decimal | int | float | None = None
    ) -> GamePricing:
        """Recompute every derived price of a game and write them in one update.

        Raises:
            InvalidIdentifierError: If the game_id is not a valid UUID.
            GameNotFoundError: If the game does not exist.
        """
        gid, game = load_game(self._store, game_id)
        margin = self._margin(game, margin_percent)
        summary, bundle_prices = self._price(gid, margin)
        pricing = self._store.save_pricing(gid, summary, bundle_prices, margin)
        self._cache.delete(pricing_cache_key(gid))
        logger.info(
            "Recalculated pricing for game %s: %s per bundle (%s tickets, %s breaks, margin %s%%)",
            gid,
            summary.spin_price_per_bundle,
            summary.available_tickets,
            summary.available_breaks,
            margin,
        )
        return pricing

    def recalculate_all(
        self, margin_percent: Decimal | int | float | None = None
    ) -> RecalculationReport:
        """Recalculate every game; one failing game does not stop the rest."""
        updated = failed = 0
        for gid in self._store.list_game_ids():
            try:
                self.recalculate_game_pricing(str(gid), margin_percent)
            except DomainError:
                logger.exception("Pricing recalculation failed for game %s", gid)
                failed += 1
            else:
                updated += 1
        logger.info("Recalculated pricing for %d games (%d failed)", updated, failed)
        return RecalculationReport(updated=updated, failed=failed)

    def get_game_pricing(self, game_id: str) -> GamePricing:
        """Return persisted pricing, served from cache while fresh.

        Raises:
            InvalidIdentifierError: If the game_id is not a valid UUID.
            GameNotFoundError: If the game does not exist.
        """
        gid = GameId.from_string(game_id)
        key = pricing_cache_key(gid)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        pricing = self._store.get_pricing(gid)
        if pricing is None:
            raise GameNotFoundError(game_id)
        self._cache.set(key, pricing)
        return pricing

    def _margin(self, game: Game, override: Decimal | int | float | None) -> Decimal:
        if override is not None:
            return as_decimal(override)
        return effective_margin(game, self._config)
