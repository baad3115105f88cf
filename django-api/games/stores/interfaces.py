"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Methods taking
``for_update=True`` lock the rows they read and must run inside a
transaction opened by the caller.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal
from typing import Any

from games.domain import (
    BundlePrices,
    CardBreak,
    Game,
    GameId,
    GamePricing,
    InventorySnapshot,
    ItemId,
    ItemKind,
    PoolDraft,
    PricingSummary,
    PrizePool,
    SpecialPrize,
    TicketGroup,
)
from games.domain.ranking import RankKey, VipRanking


class InventoryStore(ABC):
    """Interface for game and inventory persistence operations."""

    @abstractmethod
    def get_game(self, game_id: GameId, for_update: bool = False) -> Game | None:
        """Return a game by ID, or None if not found."""
        ...

    @abstractmethod
    def list_game_ids(self) -> list[GameId]:
        """Return the IDs of every game."""
        ...

    @abstractmethod
    def get_snapshot(self, game_id: GameId) -> InventorySnapshot:
        """Return all inventory rows of a game."""
        ...

    @abstractmethod
    def get_pricing(self, game_id: GameId) -> GamePricing | None:
        """Return the persisted pricing fields of a game."""
        ...

    @abstractmethod
    def save_pricing(
        self,
        game_id: GameId,
        summary: PricingSummary,
        bundle_prices: BundlePrices,
        margin_percent: Decimal,
    ) -> GamePricing:
        """Overwrite every pricing field of a game in a single write."""
        ...

    @abstractmethod
    def set_pools_stale(self, game_id: GameId, stale: bool) -> None:
        ...

    @abstractmethod
    def create_ticket_groups(
        self, game_id: GameId, rows: Sequence[Mapping[str, Any]]
    ) -> list[TicketGroup]:
        ...

    @abstractmethod
    def create_special_prizes(
        self, game_id: GameId, rows: Sequence[Mapping[str, Any]]
    ) -> list[SpecialPrize]:
        ...

    @abstractmethod
    def create_card_breaks(
        self, game_id: GameId, rows: Sequence[Mapping[str, Any]]
    ) -> list[CardBreak]:
        ...

    @abstractmethod
    def special_prizes_exist(self, game_id: GameId, prize_ids: Iterable[ItemId]) -> bool:
        """Check that every prize ID belongs to the game."""
        ...

    @abstractmethod
    def duplicate_card_break(self, game_id: GameId, break_id: ItemId) -> CardBreak | None:
        """Copy a card break as a new AVAILABLE row; None if it does not exist."""
        ...

    @abstractmethod
    def delete_card_break(self, game_id: GameId, break_id: ItemId) -> bool:
        """Delete a card break; False when it was already gone."""
        ...

    @abstractmethod
    def delete_card_breaks_by_source(self, game_id: GameId, source_url: str) -> int:
        ...

    @abstractmethod
    def list_ticket_side_units(
        self, game_id: GameId | None = None
    ) -> list[tuple[ItemKind, ItemId, GameId, int, frozenset[int]]]:
        """Return (kind, id, game, quantity, units) for sellable groups and levels."""
        ...

    @abstractmethod
    def set_available_units(self, kind: ItemKind, item_id: ItemId, units: frozenset[int]) -> None:
        ...

    @abstractmethod
    def decrement_item(
        self, kind: ItemKind, item_id: ItemId, units: int = 1, floor_at_zero: bool = False
    ):
        """Lock a row, take ``units`` from its quantity and return it.

        Raises ItemOutOfStockError when fewer than ``units`` are left, unless
        ``floor_at_zero`` is set. Ticket groups and card breaks turn SOLD when
        they reach zero; ticket-side units are recomputed from the new
        quantity. Returns None when the row does not exist.
        """
        ...

    @abstractmethod
    def get_special_prize(self, prize_id: ItemId, for_update: bool = False) -> SpecialPrize | None:
        ...

    @abstractmethod
    def find_backup_for(self, prize_id: ItemId, for_update: bool = False) -> SpecialPrize | None:
        """Return an in-stock backup linked to ``prize_id``."""
        ...

    @abstractmethod
    def promote_backup_prize(self, backup_id: ItemId) -> None:
        """Turn a backup into an ordinary prize (clears is_backup and backup_for)."""
        ...

    @abstractmethod
    def list_depleted_prizes(self, game_id: GameId) -> list[SpecialPrize]:
        """Return non-backup prizes of a game with zero quantity."""
        ...

    @abstractmethod
    def vip_ranking(self, game_id: GameId, for_update: bool = False) -> VipRanking:
        """Return VIP ticket levels and ticket groups of a game as one ranking."""
        ...

    @abstractmethod
    def set_vip_priorities(self, changes: Mapping[RankKey, int]) -> None:
        ...


class PrizePoolStore(ABC):
    """Interface for prize pool persistence operations."""

    @abstractmethod
    def replace_pools(
        self,
        game_id: GameId,
        bundle_size: int,
        drafts: Sequence[PoolDraft],
        pack: str | None = None,
    ) -> list[PrizePool]:
        """Drop unclaimed pools for the game/size/pack and store ``drafts``."""
        ...

    @abstractmethod
    def mark_stale(self, game_id: GameId) -> int:
        """Flag every AVAILABLE pool of a game STALE; returns how many."""
        ...

    @abstractmethod
    def count_available(self, game_id: GameId, bundle_size: int, pack: str | None = None) -> int:
        ...

    @abstractmethod
    def list_available(
        self, game_id: GameId, bundle_size: int, pack: str | None = None
    ) -> list[PrizePool]:
        ...

    @abstractmethod
    def get_pool(self, pool_id: ItemId, for_update: bool = False) -> PrizePool | None:
        ...

    @abstractmethod
    def mark_claimed(self, pool_id: ItemId, claimed_by: str) -> PrizePool:
        ...
