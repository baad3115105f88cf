"""Django ORM implementation of the game stores.

Rows are converted to domain models on the way out; nothing outside this
module sees an ORM instance.
"""

from collections.abc import Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from decimal import Decimal
from typing import Any

from django.db import OperationalError, transaction
from django.utils import timezone

from games import models
from games.conf import game_settings
from games.domain import (
    BundlePrices,
    CardBreak,
    Game,
    GameId,
    GamePricing,
    InventorySnapshot,
    InventoryStatus,
    ItemId,
    ItemKind,
    PoolDraft,
    PoolStatus,
    PricingSummary,
    PrizePool,
    SpecialPrize,
    TicketGroup,
    TicketLevel,
    TierLevel,
)
from games.domain.availability import compute_available_units
from games.domain.errors import (
    ConcurrentUpdateError,
    InventoryValidationError,
    ItemOutOfStockError,
)
from games.domain.ranking import RankedItem, RankKey, VipRanking
from games.stores.interfaces import InventoryStore, PrizePoolStore


@contextmanager
def lock_errors() -> Iterator[None]:
    """Surface lock timeouts, deadlocks and serialization failures as retryable."""
    try:
        yield
    except OperationalError as exc:
        raise ConcurrentUpdateError() from exc


def _units(raw: Iterable[Any] | None) -> frozenset[int]:
    return frozenset(int(size) for size in raw or ())


def _packs(raw: Iterable[str] | None) -> frozenset[str]:
    return frozenset(raw or ())


def _tier(raw: str | None) -> TierLevel | None:
    return TierLevel(raw) if raw else None


def _to_ticket_group(row: models.TicketGroup) -> TicketGroup:
    return TicketGroup(
        id=ItemId(row.id),
        game_id=GameId(row.game_id),
        section=row.section,
        row=row.row,
        quantity=row.quantity,
        price_per_seat=row.price_per_seat,
        status=InventoryStatus(row.status),
        available_units=_units(row.available_units),
        available_packs=_packs(row.available_packs),
        tier_level=_tier(row.tier_level),
        tier_priority=row.tier_priority,
    )


def _to_ticket_level(row: models.TicketLevel) -> TicketLevel:
    return TicketLevel(
        id=ItemId(row.id),
        game_id=GameId(row.game_id),
        level=row.level,
        level_name=row.level_name,
        quantity=row.quantity,
        price_per_seat=row.price_per_seat,
        available_units=_units(row.available_units),
        available_packs=_packs(row.available_packs),
        tier_level=_tier(row.tier_level),
        tier_priority=row.tier_priority,
    )


def _to_special_prize(row: models.SpecialPrize) -> SpecialPrize:
    return SpecialPrize(
        id=ItemId(row.id),
        game_id=GameId(row.game_id),
        name=row.name,
        value=row.value,
        quantity=row.quantity,
        prize_type=row.prize_type,
        available_units=_units(row.available_units),
        is_backup=row.is_backup,
        backup_for=ItemId(row.backup_for_id) if row.backup_for_id else None,
    )


def _to_card_break(row: models.CardBreak) -> CardBreak:
    return CardBreak(
        id=ItemId(row.id),
        game_id=GameId(row.game_id),
        break_name=row.break_name,
        break_value=row.break_value,
        quantity=row.quantity,
        status=InventoryStatus(row.status),
        available_units=_units(row.available_units),
        available_packs=_packs(row.available_packs),
        tier_level=_tier(row.tier_level),
        tier_priority=row.tier_priority,
    )


def _to_game(row: models.Game) -> Game:
    return Game(
        id=GameId(row.id),
        event_name=row.event_name,
        status=row.status,
        margin_percent=row.margin_percent,
        pools_stale=row.pools_stale,
    )


def _to_pricing(row: models.Game) -> GamePricing:
    prices = {
        size: price
        for size, price in (
            (1, row.spin_price_1x),
            (2, row.spin_price_2x),
            (3, row.spin_price_3x),
            (4, row.spin_price_4x),
        )
        if price is not None
    }
    return GamePricing(
        game_id=GameId(row.id),
        margin_percent=row.margin_percent,
        avg_ticket_price=row.avg_ticket_price,
        avg_break_value=row.avg_break_value,
        spin_price_per_bundle=row.spin_price_per_bundle,
        bundle_prices=BundlePrices(prices=prices),
        pools_stale=row.pools_stale,
        updated_at=row.pricing_updated_at,
    )


def _to_pool(row: models.PrizePool) -> PrizePool:
    return PrizePool(
        id=ItemId(row.id),
        game_id=GameId(row.game_id),
        bundle_size=row.bundle_size,
        bundles=tuple(row.bundles),
        total_value=Decimal(row.total_value),
        total_price=Decimal(row.total_price),
        status=PoolStatus(row.status),
        pack=row.pack,
        claimed_by=row.claimed_by,
        claimed_at=row.claimed_at,
        created_at=row.created_at,
    )


_ITEM_MODELS = {
    ItemKind.TICKET_GROUP: (models.TicketGroup, _to_ticket_group),
    ItemKind.TICKET_LEVEL: (models.TicketLevel, _to_ticket_level),
    ItemKind.SPECIAL_PRIZE: (models.SpecialPrize, _to_special_prize),
    ItemKind.CARD_BREAK: (models.CardBreak, _to_card_break),
}

# kinds whose rows carry an AVAILABLE/SOLD status
_STATUSED = frozenset({ItemKind.TICKET_GROUP, ItemKind.CARD_BREAK})

# kinds whose available_units follow the quantity policy
_UNIT_TRACKED = frozenset({ItemKind.TICKET_GROUP, ItemKind.TICKET_LEVEL})


def _bulk_create(model, game_id: GameId, rows: Sequence[Mapping[str, Any]]) -> list:
    objs = [model(game_id=game_id.value, **row) for row in rows]
    with transaction.atomic():
        created = model.objects.bulk_create(objs)
        stored = model.objects.filter(pk__in=[obj.pk for obj in created]).count()
        if stored != len(rows):
            raise InventoryValidationError(
                f"Expected to create {len(rows)} {model._meta.verbose_name_plural}, "
                f"stored {stored}"
            )
    return created


class DjangoInventoryStore(InventoryStore):
    """Database-backed game and inventory store using Django ORM."""

    def __init__(self, bundle_sizes: Iterable[int] | None = None) -> None:
        if bundle_sizes is None:
            bundle_sizes = game_settings().bundle_sizes
        self._bundle_sizes = tuple(bundle_sizes)

    def get_game(self, game_id: GameId, for_update: bool = False) -> Game | None:
        qs = models.Game.objects.filter(pk=game_id.value)
        if for_update:
            qs = qs.select_for_update()
        with lock_errors():
            row = qs.first()
        return _to_game(row) if row else None

    def list_game_ids(self) -> list[GameId]:
        return [GameId(pk) for pk in models.Game.objects.values_list("pk", flat=True)]

    def get_snapshot(self, game_id: GameId) -> InventorySnapshot:
        pk = game_id.value
        return InventorySnapshot(
            ticket_groups=tuple(
                _to_ticket_group(r) for r in models.TicketGroup.objects.filter(game_id=pk)
            ),
            ticket_levels=tuple(
                _to_ticket_level(r) for r in models.TicketLevel.objects.filter(game_id=pk)
            ),
            special_prizes=tuple(
                _to_special_prize(r) for r in models.SpecialPrize.objects.filter(game_id=pk)
            ),
            card_breaks=tuple(
                _to_card_break(r) for r in models.CardBreak.objects.filter(game_id=pk)
            ),
        )

    def get_pricing(self, game_id: GameId) -> GamePricing | None:
        row = models.Game.objects.filter(pk=game_id.value).first()
        return _to_pricing(row) if row else None

    def save_pricing(
        self,
        game_id: GameId,
        summary: PricingSummary,
        bundle_prices: BundlePrices,
        margin_percent: Decimal,
    ) -> GamePricing:
        now = timezone.now()
        models.Game.objects.filter(pk=game_id.value).update(
            margin_percent=margin_percent,
            avg_ticket_price=summary.avg_ticket_price,
            avg_break_value=summary.avg_break_value,
            spin_price_per_bundle=summary.spin_price_per_bundle,
            spin_price_1x=bundle_prices.spin_price_1x,
            spin_price_2x=bundle_prices.spin_price_2x,
            spin_price_3x=bundle_prices.spin_price_3x,
            spin_price_4x=bundle_prices.spin_price_4x,
            pricing_updated_at=now,
            updated_at=now,
        )
        return _to_pricing(models.Game.objects.get(pk=game_id.value))

    def set_pools_stale(self, game_id: GameId, stale: bool) -> None:
        models.Game.objects.filter(pk=game_id.value).update(
            pools_stale=stale, updated_at=timezone.now()
        )

    def create_ticket_groups(
        self, game_id: GameId, rows: Sequence[Mapping[str, Any]]
    ) -> list[TicketGroup]:
        created = _bulk_create(models.TicketGroup, game_id, rows)
        return [_to_ticket_group(row) for row in created]

    def create_special_prizes(
        self, game_id: GameId, rows: Sequence[Mapping[str, Any]]
    ) -> list[SpecialPrize]:
        created = _bulk_create(models.SpecialPrize, game_id, rows)
        return [_to_special_prize(row) for row in created]

    def create_card_breaks(
        self, game_id: GameId, rows: Sequence[Mapping[str, Any]]
    ) -> list[CardBreak]:
        created = _bulk_create(models.CardBreak, game_id, rows)
        return [_to_card_break(row) for row in created]

    def special_prizes_exist(self, game_id: GameId, prize_ids: Iterable[ItemId]) -> bool:
        wanted = {prize_id.value for prize_id in prize_ids}
        found = models.SpecialPrize.objects.filter(game_id=game_id.value, pk__in=wanted).count()
        return found == len(wanted)

    def duplicate_card_break(self, game_id: GameId, break_id: ItemId) -> CardBreak | None:
        row = models.CardBreak.objects.filter(game_id=game_id.value, pk=break_id.value).first()
        if row is None:
            return None
        row.pk = None
        row._state.adding = True
        row.break_name = f"{row.break_name} (Copy)"
        row.status = models.InventoryStatus.AVAILABLE
        row.quantity = 1
        row.save()
        return _to_card_break(row)

    def delete_card_break(self, game_id: GameId, break_id: ItemId) -> bool:
        deleted, _ = models.CardBreak.objects.filter(
            game_id=game_id.value, pk=break_id.value
        ).delete()
        return deleted > 0

    def delete_card_breaks_by_source(self, game_id: GameId, source_url: str) -> int:
        deleted, _ = models.CardBreak.objects.filter(
            game_id=game_id.value, source_url=source_url
        ).delete()
        return deleted

    def list_ticket_side_units(
        self, game_id: GameId | None = None
    ) -> list[tuple[ItemKind, ItemId, GameId, int, frozenset[int]]]:
        groups = models.TicketGroup.objects.filter(
            status=models.InventoryStatus.AVAILABLE, quantity__gt=0
        )
        levels = models.TicketLevel.objects.filter(quantity__gt=0)
        if game_id is not None:
            groups = groups.filter(game_id=game_id.value)
            levels = levels.filter(game_id=game_id.value)

        found = []
        for kind, qs in ((ItemKind.TICKET_GROUP, groups), (ItemKind.TICKET_LEVEL, levels)):
            for pk, game_pk, quantity, units in qs.values_list(
                "pk", "game_id", "quantity", "available_units"
            ):
                found.append((kind, ItemId(pk), GameId(game_pk), quantity, _units(units)))
        return found

    def set_available_units(self, kind: ItemKind, item_id: ItemId, units: frozenset[int]) -> None:
        model, _ = _ITEM_MODELS[kind]
        model.objects.filter(pk=item_id.value).update(available_units=sorted(units))

    def decrement_item(
        self, kind: ItemKind, item_id: ItemId, units: int = 1, floor_at_zero: bool = False
    ):
        model, convert = _ITEM_MODELS[kind]
        with lock_errors():
            row = model.objects.select_for_update().filter(pk=item_id.value).first()
            if row is None:
                return None
            if row.quantity < units and not floor_at_zero:
                raise ItemOutOfStockError(item_id, units, row.quantity)
            row.quantity = max(0, row.quantity - units)
            update_fields = ["quantity"]
            if kind in _STATUSED and row.quantity == 0:
                row.status = models.InventoryStatus.SOLD
                update_fields.append("status")
            if kind in _UNIT_TRACKED:
                row.available_units = sorted(
                    compute_available_units(row.quantity, self._bundle_sizes)
                )
                update_fields.append("available_units")
            row.save(update_fields=update_fields)
        return convert(row)

    def get_special_prize(self, prize_id: ItemId, for_update: bool = False) -> SpecialPrize | None:
        qs = models.SpecialPrize.objects.filter(pk=prize_id.value)
        if for_update:
            qs = qs.select_for_update()
        with lock_errors():
            row = qs.first()
        return _to_special_prize(row) if row else None

    def find_backup_for(self, prize_id: ItemId, for_update: bool = False) -> SpecialPrize | None:
        qs = models.SpecialPrize.objects.filter(
            backup_for_id=prize_id.value, is_backup=True, quantity__gt=0
        ).order_by("created_at", "id")
        if for_update:
            qs = qs.select_for_update()
        with lock_errors():
            row = qs.first()
        return _to_special_prize(row) if row else None

    def promote_backup_prize(self, backup_id: ItemId) -> None:
        models.SpecialPrize.objects.filter(pk=backup_id.value).update(
            is_backup=False, backup_for=None
        )

    def list_depleted_prizes(self, game_id: GameId) -> list[SpecialPrize]:
        rows = models.SpecialPrize.objects.filter(
            game_id=game_id.value, quantity=0, is_backup=False
        ).order_by("created_at", "id")
        return [_to_special_prize(row) for row in rows]

    def vip_ranking(self, game_id: GameId, for_update: bool = False) -> VipRanking:
        vip = TierLevel.VIP_ITEM.value
        sources = (
            (ItemKind.TICKET_LEVEL, models.TicketLevel, lambda r: r.level_name),
            (ItemKind.TICKET_GROUP, models.TicketGroup, lambda r: f"Section {r.section} Row {r.row}"),
        )
        items = []
        with lock_errors():
            for kind, model, label in sources:
                qs = model.objects.filter(game_id=game_id.value, tier_level=vip)
                if for_update:
                    qs = qs.select_for_update()
                for row in qs:
                    items.append(
                        RankedItem(
                            kind=kind,
                            item_id=ItemId(row.id),
                            label=label(row),
                            tier_priority=row.tier_priority or 1,
                            in_stock=row.quantity > 0,
                        )
                    )
        return VipRanking(items)

    def set_vip_priorities(self, changes: Mapping[RankKey, int]) -> None:
        for (kind, item_id), rank in changes.items():
            model, _ = _ITEM_MODELS[kind]
            model.objects.filter(pk=item_id.value).update(tier_priority=rank)


class DjangoPrizePoolStore(PrizePoolStore):
    """Database-backed prize pool store using Django ORM."""

    def _unclaimed(self, game_id: GameId, bundle_size: int, pack: str | None):
        return models.PrizePool.objects.filter(
            game_id=game_id.value,
            bundle_size=bundle_size,
            pack=pack,
            status__in=[models.PrizePool.Status.AVAILABLE, models.PrizePool.Status.STALE],
        )

    def replace_pools(
        self,
        game_id: GameId,
        bundle_size: int,
        drafts: Sequence[PoolDraft],
        pack: str | None = None,
    ) -> list[PrizePool]:
        objs = [
            models.PrizePool(
                game_id=game_id.value,
                bundle_size=bundle_size,
                pack=pack,
                bundles=[bundle.to_dict() for bundle in draft.bundles],
                total_value=draft.total_value,
                total_price=draft.total_price,
            )
            for draft in drafts
        ]
        with transaction.atomic():
            self._unclaimed(game_id, bundle_size, pack).delete()
            created = models.PrizePool.objects.bulk_create(objs)
        return [_to_pool(row) for row in created]

    def mark_stale(self, game_id: GameId) -> int:
        return models.PrizePool.objects.filter(
            game_id=game_id.value, status=models.PrizePool.Status.AVAILABLE
        ).update(status=models.PrizePool.Status.STALE)

    def count_available(self, game_id: GameId, bundle_size: int, pack: str | None = None) -> int:
        return models.PrizePool.objects.filter(
            game_id=game_id.value,
            bundle_size=bundle_size,
            pack=pack,
            status=models.PrizePool.Status.AVAILABLE,
        ).count()

    def list_available(
        self, game_id: GameId, bundle_size: int, pack: str | None = None
    ) -> list[PrizePool]:
        rows = models.PrizePool.objects.filter(
            game_id=game_id.value,
            bundle_size=bundle_size,
            pack=pack,
            status=models.PrizePool.Status.AVAILABLE,
        ).order_by("created_at", "id")
        return [_to_pool(row) for row in rows]

    def get_pool(self, pool_id: ItemId, for_update: bool = False) -> PrizePool | None:
        qs = models.PrizePool.objects.filter(pk=pool_id.value)
        if for_update:
            qs = qs.select_for_update()
        with lock_errors():
            row = qs.first()
        return _to_pool(row) if row else None

    def mark_claimed(self, pool_id: ItemId, claimed_by: str) -> PrizePool:
        models.PrizePool.objects.filter(pk=pool_id.value).update(
            status=models.PrizePool.Status.CLAIMED,
            claimed_by=claimed_by,
            claimed_at=timezone.now(),
        )
        return _to_pool(models.PrizePool.objects.get(pk=pool_id.value))
