"""Access to the SEATJUMPER settings dict with defaults and validation."""

from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings
from django.core.cache import caches
from django.core.cache.backends.base import BaseCache
from django.core.exceptions import ImproperlyConfigured

from games.domain.value_objects import DEFAULT_BUNDLE_SIZES, as_decimal

# Alias in settings.CACHES holding persisted game pricing.
PRICING_CACHE_ALIAS = "pricing"

# Game rows store one price column per size, 1x through 4x.
PERSISTABLE_BUNDLE_SIZES = frozenset(DEFAULT_BUNDLE_SIZES)

DEFAULTS = {
    "BUNDLE_SIZES": DEFAULT_BUNDLE_SIZES,
    "DEFAULT_MARGIN_PERCENT": 30,
    "POOLS_PER_SIZE": 5,
    "MIN_AVAILABLE_POOLS": 3,
}


@dataclass(frozen=True)
class GameSettings:
    bundle_sizes: tuple[int, ...]
    default_margin_percent: Decimal
    pools_per_size: int
    min_available_pools: int


def game_settings() -> GameSettings:
    user = getattr(settings, "SEATJUMPER", {})
    unknown = set(user) - set(DEFAULTS)
    if unknown:
        raise ImproperlyConfigured(f"Unknown SEATJUMPER settings: {sorted(unknown)}")
    merged = {**DEFAULTS, **user}

    sizes = tuple(sorted(set(merged["BUNDLE_SIZES"])))
    if not sizes or not PERSISTABLE_BUNDLE_SIZES.issuperset(sizes):
        raise ImproperlyConfigured(
            f"SEATJUMPER['BUNDLE_SIZES'] must be a non-empty subset of "
            f"{sorted(PERSISTABLE_BUNDLE_SIZES)}, got {merged['BUNDLE_SIZES']!r}"
        )
    for key in ("POOLS_PER_SIZE", "MIN_AVAILABLE_POOLS"):
        if int(merged[key]) < 0:
            raise ImproperlyConfigured(f"SEATJUMPER['{key}'] cannot be negative")

    return GameSettings(
        bundle_sizes=sizes,
        default_margin_percent=as_decimal(merged["DEFAULT_MARGIN_PERCENT"]),
        pools_per_size=int(merged["POOLS_PER_SIZE"]),
        min_available_pools=int(merged["MIN_AVAILABLE_POOLS"]),
    )


def pricing_cache() -> BaseCache:
    return caches[PRICING_CACHE_ALIAS]
