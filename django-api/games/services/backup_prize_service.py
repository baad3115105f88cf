"""Special-prize backup service.

A backup prize stands in for exactly one primary. When the primary is won
out, the backup is promoted once and for all by clearing its backup link.
"""

import logging

from django.db import transaction

from games.domain import BackupActivation, ItemId, ItemKind, SpecialPrize
from games.services.pricing_service import load_game
from games.stores.interfaces import InventoryStore

logger = logging.getLogger(__name__)


class BackupPrizeService:
    """Service for consuming special prizes and activating their backups."""

    def __init__(self, store: InventoryStore) -> None:
        self._store = store

    def activate_backup_prize(self, main_prize_id: str) -> BackupActivation | None:
        """Consume one unit of a prize; promote its backup when it reaches zero.

        Returns None for an unknown prize.

        Raises:
            InvalidIdentifierError: If the prize ID is not a valid UUID.
            ConcurrentUpdateError: If the prize rows cannot be locked.
        """
        prize_id = ItemId.from_string(main_prize_id)
        with transaction.atomic():
            prize = self._store.decrement_item(
                ItemKind.SPECIAL_PRIZE, prize_id, floor_at_zero=True
            )
            if prize is None:
                logger.warning("Special prize %s not found, nothing to activate", prize_id)
                return None
            logger.info("Special prize %s won, %d left", prize.name, prize.quantity)

            promoted = None
            if prize.quantity == 0:
                promoted = self._promote_backup(prize)
        return BackupActivation(
            prize_id=prize_id,
            remaining_quantity=prize.quantity,
            promoted_backup_id=promoted.id if promoted else None,
        )

    def check_and_activate_backups(self, game_id: str) -> list[BackupActivation]:
        """Promote the backup of every depleted primary prize of a game.

        Promotion clears the backup link, so a second run finds nothing new.
        """
        activations = []
        with transaction.atomic():
            gid, _ = load_game(self._store, game_id)
            for prize in self._store.list_depleted_prizes(gid):
                promoted = self._promote_backup(prize)
                if promoted is not None:
                    activations.append(
                        BackupActivation(
                            prize_id=prize.id,
                            remaining_quantity=0,
                            promoted_backup_id=promoted.id,
                        )
                    )
        logger.info("Activated %d backup prizes for game %s", len(activations), gid)
        return activations

    def _promote_backup(self, prize: SpecialPrize) -> SpecialPrize | None:
        backup = self._store.find_backup_for(prize.id, for_update=True)
        if backup is None:
            logger.info("No in-stock backup for depleted prize %s", prize.name)
            return None
        self._store.promote_backup_prize(backup.id)
        logger.info("Promoted backup prize %s in place of %s", backup.name, prize.name)
        return backup
