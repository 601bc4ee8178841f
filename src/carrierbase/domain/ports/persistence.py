"""Ports for persisting registry aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from carrierbase.domain.model import (
    Carrier,
    CarrierCallInteraction,
    CarrierConflict,
    LoadRecord,
    VerificationRecord,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from carrierbase.domain.model import EquipmentType, LoadLinkDetails


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class CarrierRepository(Repository[Carrier], Protocol):
    """Persistence contract for carriers, always scoped to one organization."""

    def get(self, carrier_id: UUID) -> Carrier | None: ...

    def find_by_mc_number(self, organization_id: str, mc_number: str) -> Carrier | None: ...

    def find_by_phone(
        self,
        organization_id: str,
        phone: str,
        *,
        exact: bool = False,
    ) -> list[Carrier]:
        """Carriers whose primary or alternate phone matches, oldest first."""
        ...

    def search(
        self,
        organization_id: str,
        *,
        query: str | None = None,
        equipment: EquipmentType | None = None,
        lane: str | None = None,
        min_score: int | None = None,
        limit: int = 50,
    ) -> list[Carrier]: ...


@runtime_checkable
class LoadRepository(Repository[LoadRecord], Protocol):
    """Access to load records owned by the surrounding system."""

    def get(self, load_id: UUID) -> LoadRecord | None: ...

    def find_by_reference(
        self, organization_id: str, references: Sequence[str]
    ) -> LoadRecord | None: ...

    def list_for_carrier(self, carrier_id: UUID) -> list[LoadRecord]:
        """Full load history for a carrier in creation order."""
        ...

    def link_carrier(
        self, organization_id: str, load_id: UUID, details: LoadLinkDetails
    ) -> LoadRecord:
        """Assign the carrier.

        Raises ``LoadNotFoundError`` for unknown loads and for loads owned by
        another organization.
        """
        ...


@runtime_checkable
class InteractionLog(Protocol):
    """Append-only log of carriers mentioned on calls."""

    def record(self, interaction: CarrierCallInteraction) -> bool:
        """Store the entry; returns ``False`` if (carrier, call) was already logged."""
        ...

    def list_for_carrier(self, carrier_id: UUID) -> list[CarrierCallInteraction]: ...


@runtime_checkable
class ConflictRepository(Repository[CarrierConflict], Protocol):
    """Review queue for identity conflicts."""

    def list_for_organization(self, organization_id: str) -> list[CarrierConflict]: ...


@runtime_checkable
class VerificationRepository(Repository[VerificationRecord], Protocol):
    """Cache of authority verification results."""

    def latest_for(
        self,
        *,
        mc_number: str | None = None,
        dot_number: str | None = None,
    ) -> VerificationRecord | None:
        """Most recent record for the MC number, else the DOT number, expired or not."""
        ...
