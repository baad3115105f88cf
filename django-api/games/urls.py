from django.urls import path

from games.handlers import (
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

urlpatterns = [
    path("games/<str:game_id>/pricing", GamePricingView.as_view(), name="game-pricing"),
    path("games/<str:game_id>/quote", QuoteView.as_view(), name="game-quote"),
    path("games/<str:game_id>/best-prizes", BestPrizesView.as_view(), name="game-best-prizes"),
    path(
        "admin/games/<str:game_id>/recalculate-pricing",
        RecalculateGamePricingView.as_view(),
        name="admin-recalculate-pricing",
    ),
    path(
        "admin/recalculate-prices",
        RecalculateAllPricesView.as_view(),
        name="admin-recalculate-prices",
    ),
    path(
        "admin/games/<str:game_id>/prize-pools",
        PrizePoolGenerationView.as_view(),
        name="admin-prize-pools",
    ),
    path(
        "admin/games/<str:game_id>/vip-backups/sweep",
        VipBackupSweepView.as_view(),
        name="admin-vip-sweep",
    ),
    path(
        "admin/games/<str:game_id>/special-prizes/backups/sweep",
        BackupPrizeSweepView.as_view(),
        name="admin-backup-prize-sweep",
    ),
    path(
        "admin/special-prizes/<str:prize_id>/win",
        SpecialPrizeWinView.as_view(),
        name="admin-special-prize-win",
    ),
    path(
        "admin/ticket-groups/bulk",
        BulkTicketGroupsView.as_view(),
        name="admin-ticket-groups-bulk",
    ),
    path(
        "admin/special-prizes/bulk",
        BulkSpecialPrizesView.as_view(),
        name="admin-special-prizes-bulk",
    ),
    path(
        "admin/games/<str:game_id>/card-breaks",
        CardBreakListView.as_view(),
        name="admin-card-breaks",
    ),
    path(
        "admin/games/<str:game_id>/card-breaks/delete-by-source",
        DeleteCardBreaksBySourceView.as_view(),
        name="admin-card-breaks-delete-by-source",
    ),
    path(
        "admin/games/<str:game_id>/card-breaks/<str:break_id>",
        CardBreakDetailView.as_view(),
        name="admin-card-break-detail",
    ),
    path(
        "admin/games/<str:game_id>/card-breaks/<str:break_id>/duplicate",
        CardBreakDuplicateView.as_view(),
        name="admin-card-break-duplicate",
    ),
    path(
        "admin/available-units/repair",
        RepairAvailableUnitsView.as_view(),
        name="admin-repair-available-units",
    ),
    path(
        "admin/prize-pools/<str:pool_id>/fulfil",
        FulfilPoolView.as_view(),
        name="admin-fulfil-pool",
    ),
]
