"""Domain error codes for the games module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
    INVALID_SNAPSHOT = "INVALID_SNAPSHOT"
    INVENTORY_VALIDATION = "INVENTORY_VALIDATION"
    INVALID_BUNDLE_SIZE = "INVALID_BUNDLE_SIZE"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"
    POOL_UNAVAILABLE = "POOL_UNAVAILABLE"
    CONCURRENT_UPDATE = "CONCURRENT_UPDATE"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class GameNotFoundError(DomainError):
    """Raised when a game is not found."""

    def __init__(self, game_id: str) -> None:
        super().__init__(
            code=ErrorCode.GAME_NOT_FOUND,
            message="Game not found",
        )
        self.game_id = game_id


class InvalidIdentifierError(DomainError):
    """Raised when a game, item or pool ID is malformed."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_IDENTIFIER,
            message="Invalid identifier format",
        )


class InvalidSnapshotError(DomainError):
    """Raised when inventory data violates a hard invariant (e.g. negative quantity)."""

    def __init__(self, detail: str) -> None:
        super().__init__(code=ErrorCode.INVALID_SNAPSHOT, message=detail)


class InventoryValidationError(DomainError):
    """Raised when an admin mutation payload breaks an inventory rule."""

    def __init__(self, detail: str) -> None:
        super().__init__(code=ErrorCode.INVENTORY_VALIDATION, message=detail)


class InvalidBundleSizeError(DomainError):
    """Raised when a bundle size outside the configured sizes is requested."""

    def __init__(self, bundle_size: int) -> None:
        super().__init__(
            code=ErrorCode.INVALID_BUNDLE_SIZE,
            message=f"Bundle size {bundle_size} is not offered",
        )
        self.bundle_size = bundle_size


class InsufficientInventoryError(DomainError):
    """Raised when no pool can be served for the requested bundle size."""

    def __init__(self, bundle_size: int) -> None:
        super().__init__(
            code=ErrorCode.INSUFFICIENT_INVENTORY,
            message=f"Not enough inventory for a {bundle_size}x bundle",
        )
        self.bundle_size = bundle_size


class PoolUnavailableError(DomainError):
    """Raised when a prize pool is missing or already claimed/stale."""

    def __init__(self, pool_id: str) -> None:
        super().__init__(
            code=ErrorCode.POOL_UNAVAILABLE,
            message="Prize pool is no longer available",
        )
        self.pool_id = pool_id


class ConcurrentUpdateError(DomainError):
    """Raised when a row lock cannot be taken; the caller should retry."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CONCURRENT_UPDATE,
            message="Inventory is being updated, please retry",
        )


class ItemOutOfStockError(DomainError):
    """Raised when a sale needs more units than an item has left."""

    def __init__(self, item_id, requested: int, remaining: int) -> None:
        super().__init__(
            code=ErrorCode.INSUFFICIENT_INVENTORY,
            message=f"Item {item_id} has {remaining} units left, {requested} needed",
        )
        self.item_id = item_id
        self.requested = requested
        self.remaining = remaining
