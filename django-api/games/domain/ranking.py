"""Ranked VIP inventory of a game.

Priority 1 is the primary slot and may be shared by several items. Ranks
from 2 upwards order the backups and are kept dense and unique: promoting a
backup moves everyone ranked after it up by one and appends the depleted
primary as the last backup.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Self

from games.domain.value_objects import ItemId, ItemKind

PRIMARY = 1

RankKey = tuple[ItemKind, ItemId]


@dataclass(frozen=True)
class RankedItem:
    kind: ItemKind
    item_id: ItemId
    label: str
    tier_priority: int
    in_stock: bool

    @property
    def key(self) -> RankKey:
        return (self.kind, self.item_id)


class VipRanking:
    """Ordered VIP ticket levels and ticket groups of one game."""

    def __init__(self, items: Iterable[RankedItem]) -> None:
        self._items = sorted(
            items, key=lambda i: (i.tier_priority, i.kind.value, str(i.item_id))
        )

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: ItemId) -> RankedItem | None:
        return next((i for i in self._items if i.item_id == item_id), None)

    def primaries(self) -> list[RankedItem]:
        return [i for i in self._items if i.tier_priority <= PRIMARY]

    def backups(self) -> list[RankedItem]:
        return [i for i in self._items if i.tier_priority > PRIMARY]

    def depleted_primaries(self) -> list[RankedItem]:
        return [i for i in self.primaries() if not i.in_stock]

    def next_backup(self) -> RankedItem | None:
        return next((i for i in self.backups() if i.in_stock), None)

    def promote(self, depleted_id: ItemId) -> dict[RankKey, int] | None:
        """Return the rank changes that replace a depleted primary.

        None when the item is not a depleted primary or no backup has stock;
        both leave the ranking untouched.
        """
        depleted = self.get(depleted_id)
        if depleted is None or depleted.tier_priority != PRIMARY or depleted.in_stock:
            return None
        candidate = self.next_backup()
        if candidate is None:
            return None

        changes = {candidate.key: PRIMARY}
        remaining = [b for b in self.backups() if b.key != candidate.key]
        for rank, backup in enumerate(remaining, start=PRIMARY + 1):
            if backup.tier_priority != rank:
                changes[backup.key] = rank
        changes[depleted.key] = len(remaining) + PRIMARY + 1
        return changes

    def apply(self, changes: Mapping[RankKey, int]) -> Self:
        return type(self)(
            replace(i, tier_priority=changes[i.key]) if i.key in changes else i
            for i in self._items
        )
