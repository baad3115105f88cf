"""VIP service - keep a sellable item in the VIP primary slot and roll VIP prizes."""

import logging
import random
from decimal import Decimal

from django.db import transaction

from games.conf import GameSettings, game_settings
from games.domain import GameId, ItemId, ItemKind, VipPromotion
from games.domain.errors import InvalidSnapshotError
from games.domain.ranking import PRIMARY, VipRanking
from games.domain.value_objects import as_decimal
from games.domain.vip_odds import (
    VipPrizePool,
    VipRoll,
    build_vip_prize_pool,
    roll_vip_prizes,
    vip_pricing_component,
)
from games.services.pricing_service import effective_margin, load_game
from games.stores.interfaces import InventoryStore

logger = logging.getLogger(__name__)

TICKET_SIDE_KINDS = (ItemKind.TICKET_LEVEL, ItemKind.TICKET_GROUP)


class VipBackupService:
    """Service for VIP backups across ticket levels and ticket groups, and VIP prize rolls."""

    def __init__(
        self,
        store: InventoryStore,
        config: GameSettings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store
        self._config = config or game_settings()
        self._rng = rng or random.Random()

    def promote_vip_backup(self, game_id: str, depleted_id: str) -> VipPromotion | None:
        """Replace a depleted primary VIP item with the best in-stock backup.

        Returns None, changing nothing, when the item is not a depleted
        primary or no backup has stock.

        Raises:
            InvalidIdentifierError: If an ID is not a valid UUID.
            GameNotFoundError: If the game does not exist.
            ConcurrentUpdateError: If the VIP rows cannot be locked.
        """
        depleted = ItemId.from_string(depleted_id)
        with transaction.atomic():
            gid, _ = load_game(self._store, game_id)
            ranking = self._store.vip_ranking(gid, for_update=True)
            return self._promote(gid, ranking, depleted)

    def check_and_promote_vip_backups(self, game_id: str) -> list[VipPromotion]:
        """Promote a backup for every depleted primary of a game.

        Running it again without new depletion changes nothing.
        """
        promotions = []
        with transaction.atomic():
            gid, _ = load_game(self._store, game_id)
            ranking = self._store.vip_ranking(gid, for_update=True)
            for item in ranking.depleted_primaries():
                if ranking.next_backup() is None:
                    logger.info(
                        "No in-stock VIP backup left for %s in game %s", item.label, gid
                    )
                    break
                promotion = self._promote(gid, ranking, item.item_id)
                promotions.append(promotion)
                ranking = ranking.apply(promotion.priorities)
        return promotions

    def decrement_vip_inventory(
        self, kind: ItemKind, item_id: str, units: int = 1
    ) -> VipPromotion | None:
        """Take units from a ticket level or group and promote if it ran out.

        Raises:
            InvalidIdentifierError: If the item_id is not a valid UUID.
            InvalidSnapshotError: If ``kind`` is not ticket-side or the item is missing.
            ItemOutOfStockError: If fewer than ``units`` are left.
        """
        if kind not in TICKET_SIDE_KINDS:
            raise InvalidSnapshotError(f"{kind.value} items have no VIP ranking")
        iid = ItemId.from_string(item_id)
        with transaction.atomic():
            item = self._store.decrement_item(kind, iid, units)
            if item is None:
                raise InvalidSnapshotError(f"Item {item_id} does not exist")
            logger.info("Decremented %s to quantity %d", item.label, item.quantity)
            if item.quantity > 0 or not item.is_vip or (item.tier_priority or PRIMARY) != PRIMARY:
                return None
            ranking = self._store.vip_ranking(item.game_id, for_update=True)
            return self._promote(item.game_id, ranking, iid)

    def get_vip_prize_pool(self, game_id: str) -> VipPrizePool:
        gid, _ = load_game(self._store, game_id)
        return build_vip_prize_pool(self._store.get_snapshot(gid))

    def get_vip_pricing_component(
        self, game_id: str, margin_percent: Decimal | int | float | None = None
    ) -> Decimal:
        """Per-bundle cost of the VIP rolls under the game's margin (or an override)."""
        gid, game = load_game(self._store, game_id)
        if margin_percent is None:
            margin = effective_margin(game, self._config)
        else:
            margin = as_decimal(margin_percent)
        return vip_pricing_component(build_vip_prize_pool(self._store.get_snapshot(gid)), margin)

    def roll_for_vip_prizes(self, game_id: str, claimed_by: str) -> VipRoll:
        """Roll both VIP prizes for one spin and hand out whatever was won.

        A won ticket is taken one unit at a time, so selling out the primary
        promotes its backup. A won card break is sold.

        Raises:
            InvalidIdentifierError: If the game_id is not a valid UUID.
            GameNotFoundError: If the game does not exist.
        """
        with transaction.atomic():
            gid, _ = load_game(self._store, game_id)
            roll = roll_vip_prizes(build_vip_prize_pool(self._store.get_snapshot(gid)), self._rng)
            logger.info(
                "VIP roll for %s in game %s: ticket %.6f (%s), memorabilia %.6f (%s)",
                claimed_by,
                gid,
                roll.ticket_roll,
                "won" if roll.ticket_won else "lost",
                roll.memorabilia_roll,
                "won" if roll.memorabilia_won else "lost",
            )
            if roll.ticket_prize is not None:
                kind, item_id = roll.ticket_prize
                self.decrement_vip_inventory(kind, str(item_id))
            if roll.memorabilia_prize is not None:
                kind, item_id = roll.memorabilia_prize
                self._store.decrement_item(kind, item_id)
        return roll

    def _promote(self, gid: GameId, ranking: VipRanking, depleted: ItemId) -> VipPromotion | None:
        changes = ranking.promote(depleted)
        if changes is None:
            item = ranking.get(depleted)
            if item is not None and item.tier_priority == PRIMARY and not item.in_stock:
                logger.info("No in-stock VIP backup for %s in game %s", item.label, gid)
            return None

        self._store.set_vip_priorities(changes)
        promoted = next(key for key, rank in changes.items() if rank == PRIMARY)
        logger.info(
            "Promoted VIP backup %s %s to primary in game %s (replacing %s)",
            promoted[0].value,
            promoted[1],
            gid,
            depleted,
        )
        return VipPromotion(
            game_id=gid,
            depleted_id=depleted,
            promoted_id=promoted[1],
            promoted_kind=promoted[0],
            priorities=changes,
        )
