"""Which bundle sizes an inventory item may be sold at."""

from collections.abc import Iterable
from typing import Protocol

from games.domain.errors import InvalidSnapshotError
from games.domain.value_objects import DEFAULT_BUNDLE_SIZES


class _Stocked(Protocol):
    quantity: int
    available_units: frozenset[int]


def compute_available_units(
    quantity: int, bundle_sizes: Iterable[int] = DEFAULT_BUNDLE_SIZES
) -> frozenset[int]:
    """Return the bundle sizes an item holding ``quantity`` units can fill.

    Blocks that exactly match an offered size stay whole (a pair is never
    split into two singles). Larger blocks can serve every size up to their
    quantity.
    """
    if quantity < 0:
        raise InvalidSnapshotError(f"Quantity cannot be negative: {quantity}")
    sizes = frozenset(bundle_sizes)
    if quantity in sizes:
        return frozenset({quantity})
    return frozenset(size for size in sizes if size <= quantity)


def supports_bundle_size(item: _Stocked, bundle_size: int) -> bool:
    return bundle_size in item.available_units


def supports_pack(item: object, pack: str | None) -> bool:
    """Pack-agnostic items (no ``available_packs``) match every pack."""
    if pack is None:
        return True
    packs = getattr(item, "available_packs", None)
    return packs is None or pack in packs


def validate_available_units(
    units: Iterable[int],
    quantity: int | None = None,
    bundle_sizes: Iterable[int] = DEFAULT_BUNDLE_SIZES,
) -> list[str]:
    """Return the problems with a requested set of units (empty when valid).

    With a ``quantity``, sizes may not exceed it, and a block whose quantity
    is itself an offered size may only be sold whole.
    """
    offered = frozenset(bundle_sizes)
    requested = frozenset(units)
    problems = []
    unknown = sorted(requested - offered)
    if unknown:
        problems.append(f"Unsupported bundle sizes: {unknown}")
    if quantity is not None:
        too_large = sorted(size for size in requested if size > quantity)
        if too_large:
            problems.append(f"Bundle sizes {too_large} exceed quantity {quantity}")
        elif quantity in offered and requested != {quantity}:
            problems.append(f"A block of {quantity} must stay whole: units must be [{quantity}]")
    return problems
