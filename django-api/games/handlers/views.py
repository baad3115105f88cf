"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from games.domain.errors import DomainError, ErrorCode
from games.handlers.serializers import (
    AddCardBreaksInputSerializer,
    BackupActivationSerializer,
    BestPrizesSerializer,
    BulkSpecialPrizesInputSerializer,
    BulkTicketGroupsInputSerializer,
    CardBreakSerializer,
    DeleteBySourceInputSerializer,
    FulfilInputSerializer,
    GamePricingSerializer,
    MarginInputSerializer,
    PoolGenerationInputSerializer,
    PrizePoolSerializer,
    QuoteInputSerializer,
    QuoteSerializer,
    RepairInputSerializer,
    SpecialPrizeSerializer,
    TicketGroupSerializer,
    VipPromotionSerializer,
)
from games.services import (
    get_backup_prize_service,
    get_checkout_service,
    get_inventory_service,
    get_pool_service,
    get_pricing_service,
    get_vip_service,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.INVALID_IDENTIFIER: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVENTORY_VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_BUNDLE_SIZE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.GAME_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_SNAPSHOT: status.HTTP_409_CONFLICT,
    ErrorCode.INSUFFICIENT_INVENTORY: status.HTTP_409_CONFLICT,
    ErrorCode.POOL_UNAVAILABLE: status.HTTP_409_CONFLICT,
    ErrorCode.CONCURRENT_UPDATE: status.HTTP_409_CONFLICT,
}


def error_response(exc: DomainError) -> Response:
    return Response(
        {"error": {"code": exc.code.value, "message": exc.message}},
        status=ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST),
    )


class DomainAPIView(APIView):
    """APIView that turns domain errors into JSON error responses."""

    def handle_exception(self, exc):
        if isinstance(exc, DomainError):
            logger.info("%s %s rejected: %s", self.request.method, self.request.path, exc)
            return error_response(exc)
        return super().handle_exception(exc)


def _validated(serializer_class, data) -> dict:
    serializer = serializer_class(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


class GamePricingView(DomainAPIView):
    """Handler for GET /api/games/{game_id}/pricing"""

    permission_classes = [AllowAny]

    def get(self, request: Request, game_id: str) -> Response:
        pricing = get_pricing_service().get_game_pricing(game_id)
        return Response(GamePricingSerializer(pricing).data)


class QuoteView(DomainAPIView):
    """Handler for POST /api/games/{game_id}/quote"""

    permission_classes = [AllowAny]

    def post(self, request: Request, game_id: str) -> Response:
        data = _validated(QuoteInputSerializer, request.data)
        quote = get_checkout_service().quote(game_id, data["bundle_size"], data.get("pack"))
        return Response(QuoteSerializer(quote).data)


class BestPrizesView(DomainAPIView):
    """Handler for GET /api/games/{game_id}/best-prizes"""

    permission_classes = [AllowAny]

    def get(self, request: Request, game_id: str) -> Response:
        best = get_pool_service().best_prizes(game_id)
        return Response(BestPrizesSerializer(best).data)


class RecalculateGamePricingView(DomainAPIView):
    """Handler for POST /api/admin/games/{game_id}/recalculate-pricing"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, game_id: str) -> Response:
        data = _validated(MarginInputSerializer, request.data)
        pricing = get_pricing_service().recalculate_game_pricing(
            game_id, data.get("margin_percent")
        )
        return Response(GamePricingSerializer(pricing).data)


class RecalculateAllPricesView(DomainAPIView):
    """Handler for POST /api/admin/recalculate-prices"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request) -> Response:
        data = _validated(MarginInputSerializer, request.data)
        report = get_pricing_service().recalculate_all(data.get("margin_percent"))
        return Response({"updated": report.updated, "failed": report.failed})


class PrizePoolGenerationView(DomainAPIView):
    """Handler for POST /api/admin/games/{game_id}/prize-pools"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, game_id: str) -> Response:
        data = _validated(PoolGenerationInputSerializer, request.data)
        generated = get_pool_service().generate_prize_pools(
            game_id,
            data.get("pool_count"),
            bundle_sizes=data.get("bundle_sizes"),
            pack=data.get("pack"),
        )
        return Response(
            {
                "pools": {
                    str(size): PrizePoolSerializer(pools, many=True).data
                    for size, pools in generated.items()
                }
            },
            status=status.HTTP_201_CREATED,
        )


class VipBackupSweepView(DomainAPIView):
    """Handler for POST /api/admin/games/{game_id}/vip-backups/sweep"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, game_id: str) -> Response:
        promotions = get_vip_service().check_and_promote_vip_backups(game_id)
        return Response({"promotions": VipPromotionSerializer(promotions, many=True).data})


class BackupPrizeSweepView(DomainAPIView):
    """Handler for POST /api/admin/games/{game_id}/special-prizes/backups/sweep"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, game_id: str) -> Response:
        activations = get_backup_prize_service().check_and_activate_backups(game_id)
        return Response({"activations": BackupActivationSerializer(activations, many=True).data})


class SpecialPrizeWinView(DomainAPIView):
    """Handler for POST /api/admin/special-prizes/{prize_id}/win"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, prize_id: str) -> Response:
        activation = get_backup_prize_service().activate_backup_prize(prize_id)
        if activation is None:
            return Response(
                {"error": {"code": "PRIZE_NOT_FOUND", "message": "Special prize not found"}},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(BackupActivationSerializer(activation).data)


class BulkTicketGroupsView(DomainAPIView):
    """Handler for POST /api/admin/ticket-groups/bulk"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request) -> Response:
        data = _validated(BulkTicketGroupsInputSerializer, request.data)
        created = get_inventory_service().bulk_create_ticket_groups(
            str(data["game_id"]), data["ticket_groups"]
        )
        return Response(
            {"count": len(created), "ticket_groups": TicketGroupSerializer(created, many=True).data},
            status=status.HTTP_201_CREATED,
        )


class BulkSpecialPrizesView(DomainAPIView):
    """Handler for POST /api/admin/special-prizes/bulk"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request) -> Response:
        data = _validated(BulkSpecialPrizesInputSerializer, request.data)
        created = get_inventory_service().bulk_create_special_prizes(
            str(data["game_id"]), data["special_prizes"]
        )
        return Response(
            {
                "count": len(created),
                "special_prizes": SpecialPrizeSerializer(created, many=True).data,
            },
            status=status.HTTP_201_CREATED,
        )


class CardBreakListView(DomainAPIView):
    """Handler for POST /api/admin/games/{game_id}/card-breaks"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, game_id: str) -> Response:
        data = _validated(AddCardBreaksInputSerializer, request.data)
        created = get_inventory_service().add_card_breaks(game_id, data["card_breaks"])
        return Response(
            {"count": len(created), "card_breaks": CardBreakSerializer(created, many=True).data},
            status=status.HTTP_201_CREATED,
        )


class CardBreakDetailView(DomainAPIView):
    """Handler for DELETE /api/admin/games/{game_id}/card-breaks/{break_id}"""

    permission_classes = [IsAdminUser]

    def delete(self, request: Request, game_id: str, break_id: str) -> Response:
        get_inventory_service().delete_card_break(game_id, break_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CardBreakDuplicateView(DomainAPIView):
    """Handler for POST /api/admin/games/{game_id}/card-breaks/{break_id}/duplicate"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, game_id: str, break_id: str) -> Response:
        copy = get_inventory_service().duplicate_card_break(game_id, break_id)
        if copy is None:
            return Response(
                {"error": {"code": "BREAK_NOT_FOUND", "message": "Card break not found"}},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(CardBreakSerializer(copy).data, status=status.HTTP_201_CREATED)


class DeleteCardBreaksBySourceView(DomainAPIView):
    """Handler for POST /api/admin/games/{game_id}/card-breaks/delete-by-source"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, game_id: str) -> Response:
        data = _validated(DeleteBySourceInputSerializer, request.data)
        deleted = get_inventory_service().delete_card_breaks_by_source(
            game_id, data["source_url"]
        )
        return Response({"deleted": deleted})


class RepairAvailableUnitsView(DomainAPIView):
    """Handler for POST /api/admin/available-units/repair"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request) -> Response:
        data = _validated(RepairInputSerializer, request.data)
        game_id = data.get("game_id")
        report = get_inventory_service().repair_available_units(
            str(game_id) if game_id else None
        )
        return Response({"updated": report.updated, "unchanged": report.unchanged})


class FulfilPoolView(DomainAPIView):
    """Handler for POST /api/admin/prize-pools/{pool_id}/fulfil"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, pool_id: str) -> Response:
        data = _validated(FulfilInputSerializer, request.data)
        pool = get_checkout_service().fulfil(pool_id, data["claimed_by"])
        return Response(PrizePoolSerializer(pool).data)
