from django.core.management.base import BaseCommand, CommandError

from games.domain import ALL_PACKS
from games.domain.errors import DomainError
from games.services import get_pool_service


class Command(BaseCommand):
    help = "Regenerate the unclaimed prize pools of a game."

    def add_arguments(self, parser):
        parser.add_argument("game", help="Game ID")
        parser.add_argument("--count", type=int, help="Pools per bundle size")
        parser.add_argument("--pack", choices=ALL_PACKS)

    def handle(self, *args, **options):
        try:
            generated = get_pool_service().generate_prize_pools(
                options["game"], options["count"], pack=options["pack"]
            )
        except DomainError as exc:
            raise CommandError(exc.message) from exc
        for size, pools in sorted(generated.items()):
            self.stdout.write(f"{size}x: {len(pools)} pools")
