"""
Hold domain errors

Raised inside entities and use cases, converted into explicit outcome
variants at the use case boundary.
"""

from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    UnprocessableError,
)


class InventoryNotFoundError(NotFoundError):
    def __init__(self, inventory_id: object) -> None:
        self.inventory_id = inventory_id
        super().__init__(f'Schedule inventory {inventory_id} not found')


class HoldNotFoundError(NotFoundError):
    def __init__(self, hold_id: object, message: str | None = None) -> None:
        self.hold_id = hold_id
        super().__init__(message or f'Hold {hold_id} not found')


class InactiveScheduleError(UnprocessableError):
    def __init__(self, inventory_id: object, status: str) -> None:
        self.inventory_id = inventory_id
        self.status = status
        super().__init__(f'Schedule inventory {inventory_id} is {status} and accepts no holds')


class HoldPolicyDisabledError(UnprocessableError):
    def __init__(self, partner_id: str) -> None:
        self.partner_id = partner_id
        super().__init__(
            f'Seat hold is disabled for partner {partner_id}, please book directly instead'
        )


class QuotaExceededError(ConflictError):
    def __init__(self, *, max_allowed: int, currently_held: int, requested: int) -> None:
        self.max_allowed = max_allowed
        self.currently_held = currently_held
        self.requested = requested
        super().__init__(
            f'Hold quota exceeded. Max allowed: {max_allowed}, Currently held: {currently_held}'
        )


class UnitUnavailableError(ConflictError):
    def __init__(self, unit_ids: list[str], message: str | None = None) -> None:
        self.unit_ids = unit_ids
        super().__init__(message or f'Units not available: {", ".join(unit_ids)}')


class HoldNotActiveError(ConflictError):
    def __init__(self, hold_id: object, status: str) -> None:
        self.hold_id = hold_id
        self.status = status
        super().__init__(f'Hold {hold_id} is already {status}')


class InvalidHoldRequestError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class UnsupportedHoldCategoryError(DomainError):
    def __init__(self, category: str) -> None:
        self.category = category
        super().__init__(f'Holds are not supported for {category} inventory yet', 400)
