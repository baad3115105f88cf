"""Django signals for cache invalidation.

Any write to a game or its inventory drops the game's cached pricing.
"""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from games.conf import pricing_cache
from games.domain import GameId
from games.models import CardBreak, Game, SpecialPrize, TicketGroup, TicketLevel
from games.services.pricing_service import pricing_cache_key


def _invalidate(game_id) -> None:
    pricing_cache().delete(pricing_cache_key(GameId(game_id)))


@receiver([post_save, post_delete], sender=Game)
def invalidate_game_cache(sender, instance, **kwargs):
    """Invalidate caches when a game is saved or deleted."""
    _invalidate(instance.pk)


@receiver([post_save, post_delete], sender=TicketGroup)
@receiver([post_save, post_delete], sender=TicketLevel)
@receiver([post_save, post_delete], sender=SpecialPrize)
@receiver([post_save, post_delete], sender=CardBreak)
def invalidate_inventory_cache(sender, instance, **kwargs):
    """Invalidate the owning game's caches when inventory is saved or deleted."""
    _invalidate(instance.game_id)
