"""Default wiring of the services to the Django stores and the pricing cache."""

from games.conf import pricing_cache
from games.services.backup_prize_service import BackupPrizeService
from games.services.checkout_service import CheckoutService
from games.services.inventory_service import InventoryService
from games.services.pool_service import PrizePoolService
from games.services.pricing_service import PricingService
from games.services.refresh import InventoryRefresher
from games.services.vip_service import VipBackupService
from games.stores.django_store import DjangoInventoryStore, DjangoPrizePoolStore


def get_pricing_service() -> PricingService:
    return PricingService(DjangoInventoryStore(), pricing_cache())


def get_pool_service() -> PrizePoolService:
    return PrizePoolService(DjangoInventoryStore(), DjangoPrizePoolStore())


def get_vip_service() -> VipBackupService:
    return VipBackupService(DjangoInventoryStore())


def get_backup_prize_service() -> BackupPrizeService:
    return BackupPrizeService(DjangoInventoryStore())


def get_refresher() -> InventoryRefresher:
    return InventoryRefresher(get_pricing_service(), get_pool_service())


def get_inventory_service() -> InventoryService:
    return InventoryService(DjangoInventoryStore(), get_refresher())


def get_checkout_service() -> CheckoutService:
    pricing = get_pricing_service()
    pools = get_pool_service()
    return CheckoutService(
        DjangoInventoryStore(),
        pricing,
        pools,
        get_vip_service(),
        get_backup_prize_service(),
        InventoryRefresher(pricing, pools),
    )


__all__ = [
    "BackupPrizeService",
    "CheckoutService",
    "InventoryRefresher",
    "InventoryService",
    "PricingService",
    "PrizePoolService",
    "VipBackupService",
    "get_backup_prize_service",
    "get_checkout_service",
    "get_inventory_service",
    "get_pool_service",
    "get_pricing_service",
    "get_refresher",
    "get_vip_service",
]
