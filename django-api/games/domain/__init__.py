from games.domain.models import (
    BackupActivation,
    BestPrizes,
    Bundle,
    BundleItem,
    BundlePrices,
    CardBreak,
    Game,
    GamePricing,
    InventorySnapshot,
    PoolDraft,
    PricingSummary,
    PrizePool,
    SpecialPrize,
    TicketGroup,
    TicketLevel,
    VipPromotion,
)
from games.domain.value_objects import (
    ALL_PACKS,
    DEFAULT_BUNDLE_SIZES,
    GameId,
    InventoryStatus,
    ItemId,
    ItemKind,
    PoolStatus,
    TierAssignment,
    TierLevel,
)

__all__ = [
    "BackupActivation",
    "BestPrizes",
    "Bundle",
    "BundleItem",
    "BundlePrices",
    "CardBreak",
    "Game",
    "GamePricing",
    "InventorySnapshot",
    "PoolDraft",
    "PricingSummary",
    "PrizePool",
    "SpecialPrize",
    "TicketGroup",
    "TicketLevel",
    "VipPromotion",
    "ALL_PACKS",
    "DEFAULT_BUNDLE_SIZES",
    "GameId",
    "InventoryStatus",
    "ItemId",
    "ItemKind",
    "PoolStatus",
    "TierAssignment",
    "TierLevel",
]
