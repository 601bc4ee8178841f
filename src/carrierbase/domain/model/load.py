"""Load records owned by the surrounding freight system."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from carrierbase.domain.model.entity import Entity, utcnow
from carrierbase.domain.model.enums import LoadStatus

if TYPE_CHECKING:
    from datetime import date, datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class LoadRecord(Entity):
    """A shipment the registry reads for statistics and writes carrier links to.

    ``status`` stays a plain string since the owning system may use values
    outside :class:`LoadStatus`; only the known ones affect statistics.
    """

    organization_id: str
    load_number: str | None = None
    reference_number: str | None = None
    status: str = LoadStatus.NEEDS_CARRIER.value
    carrier_id: UUID | None = None
    rate_to_carrier: float | None = None
    margin: float | None = None
    equipment_type: str | None = None
    origin_state: str | None = None
    destination_state: str | None = None
    delivery_date: date | None = None
    actual_delivery_date: date | None = None
    driver_name: str | None = None
    driver_phone: str | None = None
    carrier_assigned_at: datetime | None = None
    created_at: datetime = field(default_factory=utcnow)

    @property
    def lane(self) -> str | None:
        if self.origin_state and self.destination_state:
            return f"{self.origin_state}-{self.destination_state}"
        return None


@dataclass(slots=True, frozen=True)
class LoadLinkDetails:
    """Fields written onto a load when a carrier is assigned from a call."""

    carrier_id: UUID
    assigned_at: datetime
    rate_to_carrier: float | None = None
    driver_name: str | None = None
    driver_phone: str | None = None
