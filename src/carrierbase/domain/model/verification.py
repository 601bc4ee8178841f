"""Authority snapshots, risk warnings and cached verification records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID

from carrierbase.domain.model.entity import Entity
from carrierbase.domain.model.enums import (
    OperatingStatus,
    RiskLevel,
    SafetyRating,
    WarningSeverity,
)

# Minimum bodily injury / property damage liability for general freight.
DEFAULT_BIPD_REQUIRED = 750_000.0


@dataclass(slots=True, kw_only=True)
class AuthoritySnapshot:
    """Regulatory data for one carrier, normalized across lookup sources.

    Fields the source did not report stay ``None``. Operating status is the
    exception and always carries one of the :class:`OperatingStatus` values.
    """

    operating_status: OperatingStatus = OperatingStatus.UNREGISTERED
    source: str | None = None

    mc_number: str | None = None
    dot_number: str | None = None
    legal_name: str | None = None
    dba_name: str | None = None

    physical_address: str | None = None
    physical_city: str | None = None
    physical_state: str | None = None
    physical_zip: str | None = None
    phone: str | None = None

    entity_type: str | None = None
    cargo_carried: list[str] = field(default_factory=list[str])

    authority_date: date | None = None
    safety_rating: SafetyRating | None = None
    safety_rating_date: date | None = None
    out_of_service_date: date | None = None
    mcs150_date: date | None = None
    mcs150_mileage: int | None = None

    bipd_insurance_on_file: bool | None = None
    bipd_required: float | None = None
    bipd_on_file: float | None = None
    cargo_insurance_on_file: bool | None = None
    cargo_required: float | None = None
    cargo_on_file: float | None = None

    vehicle_inspections: int | None = None
    vehicle_oos_rate: float | None = None
    driver_inspections: int | None = None
    driver_oos_rate: float | None = None
    hazmat_inspections: int | None = None
    hazmat_oos_rate: float | None = None

    fatal_crashes: int | None = None
    injury_crashes: int | None = None
    tow_crashes: int | None = None
    total_crashes: int | None = None

    power_units: int | None = None
    drivers: int | None = None


@dataclass(slots=True, frozen=True)
class VerificationWarning:
    severity: WarningSeverity
    message: str
    field: str | None = None


@dataclass(slots=True, frozen=True)
class RiskAssessment:
    risk_level: RiskLevel
    risk_score: int
    warnings: tuple[VerificationWarning, ...] = ()


@dataclass(eq=False, kw_only=True)
class VerificationRecord(Entity):
    """A cached, successful verification keyed by MC and/or DOT number."""

    mc_number: str | None = None
    dot_number: str | None = None
    carrier_id: UUID | None = None
    snapshot: AuthoritySnapshot
    risk_level: RiskLevel
    risk_score: int
    warnings: list[VerificationWarning] = field(default_factory=list[VerificationWarning])
    verified_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
