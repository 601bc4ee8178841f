"""Ephemeral carrier mentions derived from a single call."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from carrierbase.domain.model.enums import EquipmentType, FieldOrigin

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import date, datetime
    from uuid import UUID


@dataclass(slots=True, frozen=True)
class CallMetadata:
    """Provenance of a call event as supplied by the surrounding system."""

    call_id: str
    organization_id: str
    call_date: datetime
    load_id: UUID | None = None


@dataclass(slots=True, frozen=True, kw_only=True)
class CarrierCandidate:
    """A proposed update to a carrier record, never persisted as-is.

    Authority numbers and phones are already normalized to digits.
    ``origins`` records which fields were scanned from free text rather than
    stated in structured extraction output.
    """

    call_id: str
    organization_id: str
    call_date: datetime

    company_name: str | None = None
    mc_number: str | None = None
    dot_number: str | None = None

    contact_name: str | None = None
    phone: str | None = None
    email: str | None = None
    driver_name: str | None = None
    driver_phone: str | None = None

    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None

    equipment_types: frozenset[EquipmentType] = field(default_factory=frozenset[EquipmentType])
    preferred_lanes: frozenset[str] = field(default_factory=frozenset[str])

    quoted_rate: float | None = None
    available_date: date | None = None
    reference_numbers: tuple[str, ...] = ()

    origins: Mapping[str, FieldOrigin] = field(default_factory=dict[str, FieldOrigin])
    confidence: int = 0

    def origin_of(self, name: str) -> FieldOrigin | None:
        if getattr(self, name, None) in (None, "", frozenset(), ()):
            return None
        return self.origins.get(name, FieldOrigin.EXPLICIT)

    @property
    def has_identity_signal(self) -> bool:
        """Whether anything here could identify or name a carrier."""

        return bool(self.mc_number or self.dot_number or self.phone or self.company_name)

    @property
    def has_complete_address(self) -> bool:
        return bool(self.address and self.city and self.state)
