from games.handlers.views import (
    BackupPrizeSweepView,
    BestPrizesView,
    BulkSpecialPrizesView,
    BulkTicketGroupsView,
    CardBreakDetailView,
    CardBreakDuplicateView,
    CardBreakListView,
    DeleteCardBreaksBySourceView,
    FulfilPoolView,
    GamePricingView,
    PrizePoolGenerationView,
    QuoteView,
    RecalculateAllPricesView,
    RecalculateGamePricingView,
    RepairAvailableUnitsView,
    SpecialPrizeWinView,
    VipBackupSweepView,
)

__all__ = [
    "BackupPrizeSweepView",
    "BestPrizesView",
    "BulkSpecialPrizesView",
    "BulkTicketGroupsView",
    "CardBreakDetailView",
    "CardBreakDuplicateView",
    "CardBreakListView",
    "DeleteCardBreaksBySourceView",
    "FulfilPoolView",
    "GamePricingView",
    "PrizePoolGenerationView",
    "QuoteView",
    "RecalculateAllPricesView",
    "RecalculateGamePricingView",
    "RepairAvailableUnitsView",
    "SpecialPrizeWinView",
    "VipBackupSweepView",
]
