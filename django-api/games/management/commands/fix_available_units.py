from django.core.management.base import BaseCommand, CommandError

from games.domain.errors import DomainError
from games.services import get_inventory_service


class Command(BaseCommand):
    help = "Re-apply the bundle-size policy to ticket groups and ticket levels."

    def add_arguments(self, parser):
        parser.add_argument("--game", help="Only repair this game ID")

    def handle(self, *args, **options):
        try:
            report = get_inventory_service().repair_available_units(options["game"])
        except DomainError as exc:
            raise CommandError(exc.message) from exc
        self.stdout.write(
            self.style.SUCCESS(f"Updated {report.updated}, unchanged {report.unchanged}")
        )
