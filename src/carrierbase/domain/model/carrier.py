"""Carrier aggregate: the durable, deduplicated registry record."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from carrierbase.domain.model.entity import Entity, utcnow
from carrierbase.domain.model.enums import CarrierStatus, EquipmentType

if TYPE_CHECKING:
    from datetime import datetime

    from carrierbase.domain.model.statistics import CarrierStatisticsSnapshot

PLACEHOLDER_NAME: Final[str] = "Unknown Carrier"
CALL_SOURCE: Final[str] = "carrier_call"


@dataclass(eq=False, kw_only=True)
class Carrier(Entity):
    """A trucking company known to one organization.

    Authority numbers are stored as bare digits. Once set they are never
    cleared or replaced by automated merges; set-valued fields only grow.
    Carriers are never deleted, only moved between statuses.
    """

    organization_id: str
    name: str = PLACEHOLDER_NAME
    mc_number: str | None = None
    dot_number: str | None = None

    primary_contact: str | None = None
    phone: str | None = None
    alt_phone: str | None = None
    email: str | None = None
    driver_name: str | None = None
    driver_phone: str | None = None

    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None

    equipment_types: set[EquipmentType] = field(default_factory=set[EquipmentType])
    preferred_lanes: set[str] = field(default_factory=set[str])

    total_loads: int = 0
    completed_loads: int = 0
    cancelled_loads: int = 0
    on_time_percentage: int = 100
    average_rate: float | None = None
    average_margin: float | None = None
    lifetime_revenue: float = 0.0
    performance_score: int | None = None
    last_load_date: datetime | None = None
    statistics_updated_at: datetime | None = None

    first_contact_date: datetime | None = None
    last_contact_date: datetime | None = None
    last_used_date: datetime | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    status: CarrierStatus = CarrierStatus.ACTIVE
    auto_created: bool = False
    source: str | None = None
    created_from_call_id: str | None = None

    @property
    def has_placeholder_name(self) -> bool:
        return not self.name or self.name == PLACEHOLDER_NAME

    def touch(self, when: datetime | None = None) -> None:
        self.updated_at = when or utcnow()

    def blacklist(self) -> None:
        self.status = CarrierStatus.BLACKLISTED
        self.touch()

    def deactivate(self) -> None:
        self.status = CarrierStatus.INACTIVE
        self.touch()

    def reactivate(self) -> None:
        self.status = CarrierStatus.ACTIVE
        self.touch()

    def apply_statistics(self, snapshot: CarrierStatisticsSnapshot) -> None:
        """Overwrite the cached statistics with a freshly computed snapshot."""

        self.total_loads = snapshot.total_loads
        self.completed_loads = snapshot.completed_loads
        self.cancelled_loads = snapshot.cancelled_loads
        self.on_time_percentage = snapshot.on_time_percentage
        self.average_rate = snapshot.average_rate
        self.average_margin = snapshot.average_margin
        self.lifetime_revenue = snapshot.lifetime_revenue
        self.performance_score = snapshot.performance_score
        self.last_load_date = snapshot.last_load_date
        self.statistics_updated_at = snapshot.computed_at
        self.touch(snapshot.computed_at)
