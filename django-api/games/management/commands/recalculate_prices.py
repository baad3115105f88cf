from argparse import ArgumentTypeError
from decimal import Decimal, InvalidOperation

from django.core.management.base import BaseCommand, CommandError

from games.domain.errors import DomainError
from games.services import get_pricing_service


def margin_percent(value: str) -> Decimal:
    try:
        margin = Decimal(value)
    except InvalidOperation as exc:
        raise ArgumentTypeError(f"invalid margin percent: {value!r}") from exc
    if not margin.is_finite() or margin < 0:
        raise ArgumentTypeError(f"invalid margin percent: {value!r}")
    return margin


class Command(BaseCommand):
    help = "Recalculate derived prices for one game or for every game."

    def add_arguments(self, parser):
        parser.add_argument("--game", help="Only recalculate this game ID")
        parser.add_argument(
            "--margin", type=margin_percent, help="Margin percent to apply instead of the game's"
        )

    def handle(self, *args, **options):
        service = get_pricing_service()
        if options["game"]:
            try:
                pricing = service.recalculate_game_pricing(options["game"], options["margin"])
            except DomainError as exc:
                raise CommandError(exc.message) from exc
            prices = ", ".join(
                f"{size}x={price}" for size, price in sorted(pricing.bundle_prices.prices.items())
            )
            self.stdout.write(self.style.SUCCESS(f"Game {pricing.game_id}: {prices}"))
            return

        report = service.recalculate_all(options["margin"])
        self.stdout.write(
            self.style.SUCCESS(f"Recalculated {report.updated} games ({report.failed} failed)")
        )
