from django.core.management.base import BaseCommand, CommandError

from games.conf import PRICING_CACHE_ALIAS, pricing_cache
from games.domain import GameId
from games.domain.errors import InvalidIdentifierError
from games.services.pricing_service import pricing_cache_key


class Command(BaseCommand):
    help = "Drop cached pricing for one game, or the whole pricing cache."

    def add_arguments(self, parser):
        parser.add_argument("--game", help="Only drop this game's cached pricing")

    def handle(self, *args, **options):
        cache = pricing_cache()
        if options["game"]:
            try:
                gid = GameId.from_string(options["game"])
            except InvalidIdentifierError as exc:
                raise CommandError(exc.message) from exc
            cache.delete(pricing_cache_key(gid))
            self.stdout.write(f"Dropped cached pricing for game {gid}")
            return
        cache.clear()
        self.stdout.write(f"Cleared the {PRICING_CACHE_ALIAS!r} cache")
