"""Domain exception hierarchy for the carrier registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from carrierbase.domain.model import CarrierConflict


class CarrierRegistryError(RuntimeError):
    """Base class for recoverable registry failures."""


class CandidateValidationError(CarrierRegistryError):
    """Raised when a candidate carries no usable identifying signal."""


class CarrierConflictError(CarrierRegistryError):
    """Raised when identity signals on one call point at different carriers."""

    def __init__(self, conflict: CarrierConflict) -> None:
        super().__init__(conflict.message)
        self.conflict = conflict


class PersistenceError(CarrierRegistryError):
    """Raised when the persistence layer rejects or fails a write."""


class DuplicateKeyError(PersistenceError):
    """Raised when a create collides with an existing unique key."""


class LoadNotFoundError(CarrierRegistryError):
    def __init__(self, load_id: UUID) -> None:
        super().__init__(f"Load {load_id} not found")
        self.load_id = load_id


class CarrierNotFoundError(CarrierRegistryError):
    def __init__(self, carrier_id: UUID) -> None:
        super().__init__(f"Carrier {carrier_id} not found")
        self.carrier_id = carrier_id


class StatisticsUnavailableError(CarrierRegistryError):
    """Raised when load history cannot be read; cached statistics stay as they are."""


class AuthorityLookupError(CarrierRegistryError):
    """Base class for failures talking to an authority data source."""


class AuthoritySourceUnavailableError(AuthorityLookupError):
    """Raised when neither the primary nor the fallback source produced an answer."""
