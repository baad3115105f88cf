"""Inventory service - admin mutations of game inventory.

Every mutation is all-or-nothing and schedules a refresh of the game's pools
and prices for after commit.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from django.db import transaction

from games.conf import GameSettings, game_settings
from games.domain import ALL_PACKS, CardBreak, ItemId, SpecialPrize, TicketGroup
from games.domain.availability import compute_available_units, validate_available_units
from games.domain.errors import InventoryValidationError
from games.domain.tiers import classify_tier
from games.domain.value_objects import GameId
from games.services.pricing_service import load_game
from games.services.refresh import InventoryRefresher
from games.stores.interfaces import InventoryStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepairReport:
    updated: int
    unchanged: int
    games: tuple[GameId, ...] = ()


def _check_packs(label: str, packs: Sequence[str]) -> list[str]:
    unknown = sorted(set(packs) - set(ALL_PACKS))
    return [f"{label}: unknown packs {unknown}"] if unknown else []


class InventoryService:
    """Service for admin inventory mutations."""

    def __init__(
        self,
        store: InventoryStore,
        refresher: InventoryRefresher,
        config: GameSettings | None = None,
    ) -> None:
        self._store = store
        self._refresher = refresher
        self._config = config or game_settings()

    def bulk_create_ticket_groups(
        self, game_id: str, groups: Sequence[Mapping[str, Any]]
    ) -> list[TicketGroup]:
        """Create ticket groups, deriving units and tier where none are given.

        Raises:
            InvalidIdentifierError: If the game_id is not a valid UUID.
            GameNotFoundError: If the game does not exist.
            InventoryValidationError: If any group breaks a units or pack rule.
        """
        gid, _ = load_game(self._store, game_id)
        sizes = self._config.bundle_sizes
        rows, problems = [], []
        for index, group in enumerate(groups):
            row = dict(group)
            label = f"ticket group {index}"
            units = row.get("available_units")
            if units is None:
                row["available_units"] = sorted(compute_available_units(row["quantity"], sizes))
            else:
                problems += [
                    f"{label}: {p}" for p in validate_available_units(units, row["quantity"], sizes)
                ]
                row["available_units"] = sorted(set(units))
            row["available_packs"] = list(row.get("available_packs") or ALL_PACKS)
            problems += _check_packs(label, row["available_packs"])
            if not row.get("tier_level"):
                tier = classify_tier(row["price_per_seat"])
                row["tier_level"] = tier.tier_level.value
                row["tier_priority"] = row.get("tier_priority") or tier.tier_priority
            rows.append(row)
        if problems:
            raise InventoryValidationError("; ".join(problems))

        with transaction.atomic():
            created = self._store.create_ticket_groups(gid, rows)
            self._refresher.schedule(game_id)
        logger.info("Created %d ticket groups for game %s", len(created), gid)
        return created

    def bulk_create_special_prizes(
        self, game_id: str, prizes: Sequence[Mapping[str, Any]]
    ) -> list[SpecialPrize]:
        """Create special prizes; backups must point at a prize of the same game.

        Raises:
            InvalidIdentifierError: If an ID is not a valid UUID.
            GameNotFoundError: If the game does not exist.
            InventoryValidationError: If units or backup links are invalid.
        """
        gid, _ = load_game(self._store, game_id)
        sizes = self._config.bundle_sizes
        rows, problems, targets = [], [], set()
        for index, prize in enumerate(prizes):
            row = dict(prize)
            label = f"special prize {index}"
            units = row.get("available_units")
            if units is None:
                row["available_units"] = list(sizes)
            else:
                problems += [f"{label}: {p}" for p in validate_available_units(units, None, sizes)]
                row["available_units"] = sorted(set(units))

            backup_for = row.pop("backup_for", None)
            if backup_for:
                target = ItemId.from_string(backup_for)
                targets.add(target)
                row["backup_for_id"] = target.value
                row["is_backup"] = True
            elif row.get("is_backup"):
                problems.append(f"{label}: a backup needs the prize it stands in for")
            rows.append(row)

        if targets and not self._store.special_prizes_exist(gid, targets):
            problems.append("backup_for must reference special prizes of the same game")
        if problems:
            raise InventoryValidationError("; ".join(problems))

        with transaction.atomic():
            created = self._store.create_special_prizes(gid, rows)
            self._refresher.schedule(game_id)
        logger.info("Created %d special prizes for game %s", len(created), gid)
        return created

    def add_card_breaks(
        self, game_id: str, breaks: Sequence[Mapping[str, Any]]
    ) -> list[CardBreak]:
        """Add memorabilia, eligible for every size and pack unless told otherwise."""
        gid, _ = load_game(self._store, game_id)
        sizes = self._config.bundle_sizes
        rows, problems = [], []
        for index, item in enumerate(breaks):
            row = dict(item)
            label = f"card break {index}"
            units = row.get("available_units")
            if units is None:
                row["available_units"] = list(sizes)
            else:
                problems += [f"{label}: {p}" for p in validate_available_units(units, None, sizes)]
                row["available_units"] = sorted(set(units))
            row["available_packs"] = list(row.get("available_packs") or ALL_PACKS)
            problems += _check_packs(label, row["available_packs"])
            rows.append(row)
        if problems:
            raise InventoryValidationError("; ".join(problems))

        with transaction.atomic():
            created = self._store.create_card_breaks(gid, rows)
            self._refresher.schedule(game_id)
        logger.info("Added %d card breaks to game %s", len(created), gid)
        return created

    def duplicate_card_break(self, game_id: str, break_id: str) -> CardBreak | None:
        """Copy a card break as a fresh single AVAILABLE item named "<name> (Copy)"."""
        gid = GameId.from_string(game_id)
        iid = ItemId.from_string(break_id)
        with transaction.atomic():
            copy = self._store.duplicate_card_break(gid, iid)
            if copy is not None:
                self._refresher.schedule(game_id)
        if copy is None:
            logger.info("Card break %s of game %s not found for duplication", iid, gid)
        else:
            logger.info("Duplicated card break %s of game %s as %s", iid, gid, copy.id)
        return copy

    def delete_card_break(self, game_id: str, break_id: str) -> bool:
        """Delete a card break. Deleting one that is already gone succeeds too."""
        gid = GameId.from_string(game_id)
        iid = ItemId.from_string(break_id)
        with transaction.atomic():
            deleted = self._store.delete_card_break(gid, iid)
            if deleted:
                self._refresher.schedule(game_id)
        if not deleted:
            logger.info("Card break %s of game %s already gone", iid, gid)
        return deleted

    def delete_card_breaks_by_source(self, game_id: str, source_url: str) -> int:
        if not source_url:
            raise InventoryValidationError("source_url is required")
        gid = GameId.from_string(game_id)
        with transaction.atomic():
            deleted = self._store.delete_card_breaks_by_source(gid, source_url)
            if deleted:
                self._refresher.schedule(game_id)
        logger.info("Deleted %d card breaks from %s for game %s", deleted, source_url, gid)
        return deleted

    def repair_available_units(self, game_id: str | None = None) -> RepairReport:
        """Re-apply the units policy to ticket groups and levels with stock."""
        gid = GameId.from_string(game_id) if game_id else None
        sizes = self._config.bundle_sizes
        updated = unchanged = 0
        touched = []
        with transaction.atomic():
            for kind, item_id, item_game, quantity, units in self._store.list_ticket_side_units(gid):
                expected = compute_available_units(quantity, sizes)
                if units == expected:
                    unchanged += 1
                    continue
                self._store.set_available_units(kind, item_id, expected)
                logger.info(
                    "Fixed units of %s %s: %s -> %s",
                    kind.value,
                    item_id,
                    sorted(units),
                    sorted(expected),
                )
                updated += 1
                if item_game not in touched:
                    touched.append(item_game)
            for item_game in touched:
                self._refresher.schedule(str(item_game))
        logger.info("Available units repair: %d updated, %d unchanged", updated, unchanged)
        return RepairReport(updated=updated, unchanged=unchanged, games=tuple(touched))
