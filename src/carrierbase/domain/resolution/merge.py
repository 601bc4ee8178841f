"""Field-level rules for folding a candidate into a carrier record."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from carrierbase.domain.model import (
    CALL_SOURCE,
    PLACEHOLDER_NAME,
    Carrier,
    ensure_utc,
    utcnow,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from carrierbase.domain.model import CarrierCandidate

log = logging.getLogger(__name__)

_OVERWRITE_IF_PRESENT: tuple[tuple[str, str], ...] = (
    ("contact_name", "primary_contact"),
    ("email", "email"),
    ("driver_name", "driver_name"),
    ("driver_phone", "driver_phone"),
)
_AUTHORITY_FIELDS: tuple[str, ...] = ("mc_number", "dot_number")


@dataclass(slots=True, frozen=True)
class MergeOutcome:
    carrier: Carrier
    created: bool
    changed_fields: tuple[str, ...] = ()
    ignored_fields: tuple[str, ...] = ()


class MergePolicy:
    """Create a carrier from a candidate, or fold a candidate into one.

    - Authority numbers are write-once; a differing value is ignored.
    - Equipment and lanes only grow (set union).
    - Scalars overwrite only with non-empty values.
    - Address fields move as a group: address, city and state together.
    - Contact timestamps only move forward.
    """

    def merge(self, existing: Carrier | None, candidate: CarrierCandidate) -> MergeOutcome:
        if existing is None:
            return self.create(candidate)
        return self.update(existing, candidate)

    def create(self, candidate: CarrierCandidate) -> MergeOutcome:
        call_date = ensure_utc(candidate.call_date)
        carrier = Carrier(
            organization_id=candidate.organization_id,
            name=candidate.company_name or PLACEHOLDER_NAME,
            mc_number=candidate.mc_number,
            dot_number=candidate.dot_number,
            primary_contact=candidate.contact_name,
            phone=candidate.phone,
            email=candidate.email,
            driver_name=candidate.driver_name,
            driver_phone=candidate.driver_phone,
            address=candidate.address,
            city=candidate.city,
            state=candidate.state,
            zip_code=candidate.zip_code,
            equipment_types=set(candidate.equipment_types),
            preferred_lanes=set(candidate.preferred_lanes),
            total_loads=0,
            completed_loads=0,
            cancelled_loads=0,
            on_time_percentage=100,
            lifetime_revenue=0.0,
            first_contact_date=call_date,
            last_contact_date=call_date,
            auto_created=True,
            source=CALL_SOURCE,
            created_from_call_id=candidate.call_id,
        )
        log.info(
            "New carrier %s (%s, MC %s) from call %s",
            carrier.id,
            carrier.name,
            carrier.mc_number or "-",
            candidate.call_id,
        )
        return MergeOutcome(carrier=carrier, created=True)

    def update(self, carrier: Carrier, candidate: CarrierCandidate) -> MergeOutcome:
        changed: list[str] = []
        ignored: list[str] = []

        def assign(name: str, value: object) -> None:
            if getattr(carrier, name) != value:
                setattr(carrier, name, value)
                changed.append(name)

        call_date = ensure_utc(candidate.call_date)
        for name in ("last_contact_date", "last_used_date"):
            current: datetime | None = getattr(carrier, name)
            if current is None or call_date > current:
                assign(name, call_date)
        if carrier.first_contact_date is None or call_date < carrier.first_contact_date:
            assign("first_contact_date", call_date)

        if candidate.company_name and carrier.has_placeholder_name:
            assign("name", candidate.company_name)

        for authority in _AUTHORITY_FIELDS:
            incoming: str | None = getattr(candidate, authority)
            stored: str | None = getattr(carrier, authority)
            if not incoming:
                continue
            if stored is None:
                assign(authority, incoming)
            elif stored != incoming:
                ignored.append(authority)
                log.info(
                    "Carrier %s keeps %s %s; call %s reported %s",
                    carrier.id,
                    authority,
                    stored,
                    candidate.call_id,
                    incoming,
                )

        for source_name, target_name in _OVERWRITE_IF_PRESENT:
            value = getattr(candidate, source_name)
            if value:
                assign(target_name, value)

        self._merge_phone(carrier, candidate, assign)

        equipment = carrier.equipment_types | set(candidate.equipment_types)
        if equipment != carrier.equipment_types:
            # reassign so the ORM sees the change
            assign("equipment_types", equipment)
        lanes = carrier.preferred_lanes | set(candidate.preferred_lanes)
        if lanes != carrier.preferred_lanes:
            assign("preferred_lanes", lanes)

        if candidate.has_complete_address:
            assign("address", candidate.address)
            assign("city", candidate.city)
            assign("state", candidate.state)
            if candidate.zip_code:
                assign("zip_code", candidate.zip_code)
        elif candidate.address or candidate.city or candidate.state or candidate.zip_code:
            ignored.append("address")
            log.debug("Ignoring partial address for carrier %s", carrier.id)

        carrier.touch(utcnow())
        return MergeOutcome(
            carrier=carrier,
            created=False,
            changed_fields=tuple(changed),
            ignored_fields=tuple(ignored),
        )

    @staticmethod
    def _merge_phone(
        carrier: Carrier,
        candidate: CarrierCandidate,
        assign: Callable[[str, object], None],
    ) -> None:
        phone = candidate.phone
        if not phone:
            return
        if not carrier.phone:
            assign("phone", phone)
        elif phone not in carrier.phone:
            assign("alt_phone", phone)
