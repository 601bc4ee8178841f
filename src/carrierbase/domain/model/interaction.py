"""Append-only call interaction log and the conflict review queue."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from carrierbase.domain.model.entity import Entity, utcnow
from carrierbase.domain.model.enums import ConflictKind, EquipmentType

if TYPE_CHECKING:
    from datetime import date, datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class CarrierCallInteraction(Entity):
    """One carrier mentioned on one call; unique per (carrier, call)."""

    carrier_id: UUID
    call_id: str
    call_date: datetime
    load_id: UUID | None = None
    quoted_rate: float | None = None
    available_date: date | None = None
    equipment_mentioned: set[EquipmentType] = field(default_factory=set[EquipmentType])
    lanes_mentioned: set[str] = field(default_factory=set[str])
    contact_name: str | None = None
    contact_phone: str | None = None
    confidence: int = 0
    created_at: datetime = field(default_factory=utcnow)


@dataclass(eq=False, kw_only=True)
class CarrierConflict(Entity):
    """Identity signals on a call that point at different carriers."""

    organization_id: str
    call_id: str
    kind: ConflictKind
    message: str
    candidate_mc_number: str | None = None
    candidate_phone: str | None = None
    mc_match_id: UUID | None = None
    phone_match_id: UUID | None = None
    created_at: datetime = field(default_factory=utcnow)
