"""Turn raw extraction payloads into strict carrier candidates."""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from carrierbase.domain.errors import CandidateValidationError
from carrierbase.domain.extraction.confidence import score_confidence
from carrierbase.domain.extraction.equipment import normalize_equipment
from carrierbase.domain.extraction.patterns import CandidateExtractor, RegexCandidateExtractor
from carrierbase.domain.extraction.payload import FreightExtractionPayload
from carrierbase.domain.identifiers import (
    lane_token,
    normalize_authority_number,
    normalize_phone,
    normalize_state,
)
from carrierbase.domain.model import CarrierCandidate, EquipmentType, FieldOrigin

if TYPE_CHECKING:
    from collections.abc import Mapping

    from carrierbase.domain.model import CallMetadata

log = logging.getLogger(__name__)

CARRIER_CALL_TYPE: Final[str] = "carrier_call"


def _first[T](*values: T | None) -> T | None:
    for value in values:
        if value is not None:
            return value
    return None


class ExtractionNormalizer:
    """Convert loosely shaped extraction output into a :class:`CarrierCandidate`."""

    def __init__(self, extractor: CandidateExtractor | None = None) -> None:
        self._extractor = extractor or RegexCandidateExtractor()

    def normalize(
        self,
        extraction: Mapping[str, object] | FreightExtractionPayload,
        call: CallMetadata,
    ) -> CarrierCandidate | None:
        """Return a candidate, or ``None`` when the call carries no carrier signal.

        Raises :class:`CandidateValidationError` when the payload cannot be
        read at all.
        """

        payload = self._validate(extraction)

        if payload.call_type and payload.call_type.strip().lower() != CARRIER_CALL_TYPE:
            log.debug("Call %s is a %s, not a carrier call", call.call_id, payload.call_type)
            return None

        scanned = self._extractor.scan_identifiers([*payload.key_points, *payload.action_items])
        info = payload.carrier_information
        if info is None and scanned.mc_number is None and scanned.dot_number is None:
            log.debug("Call %s has no carrier information", call.call_id)
            return None

        origins: dict[str, FieldOrigin] = {}

        def pick(name: str, stated: str | None, inferred: str | None) -> str | None:
            if stated:
                return stated
            if inferred:
                origins[name] = FieldOrigin.INFERRED
            return inferred

        participant = payload.carrier_participant()
        route = payload.route_details
        driver = route.driver_info if route else None

        mc_number = normalize_authority_number(
            pick("mc_number", info.mc_number if info else None, scanned.mc_number)
        )
        dot_number = normalize_authority_number(
            pick("dot_number", info.dot_number if info else None, scanned.dot_number)
        )
        phone = normalize_phone(
            pick(
                "phone",
                _first(info.phone if info else None, participant.phone if participant else None),
                scanned.phone,
            )
        )
        email = pick("email", info.email if info else None, scanned.email)

        candidate = CarrierCandidate(
            call_id=call.call_id,
            organization_id=call.organization_id,
            call_date=call.call_date,
            company_name=_first(
                info.company_name if info else None,
                participant.name if participant else None,
            ),
            mc_number=mc_number,
            dot_number=dot_number,
            contact_name=_first(
                info.contact_name if info else None,
                participant.name if participant else None,
            ),
            phone=phone,
            email=email.lower() if email else None,
            driver_name=_first(info.driver_name if info else None, driver.name if driver else None),
            driver_phone=normalize_phone(
                _first(info.driver_phone if info else None, driver.phone if driver else None)
            ),
            address=info.address if info else None,
            city=info.city if info else None,
            state=normalize_state(info.state) if info else None,
            zip_code=info.zip_code if info else None,
            equipment_types=frozenset(self._equipment(payload)),
            preferred_lanes=frozenset(self._lanes(payload)),
            quoted_rate=_first(
                payload.pricing.carrier_rate if payload.pricing else None,
                payload.pricing.linehaul if payload.pricing else None,
            ),
            available_date=route.pickup_date if route else None,
            reference_numbers=tuple(dict.fromkeys(payload.reference_numbers)),
            origins=origins,
        )
        return dataclasses.replace(candidate, confidence=score_confidence(candidate))

    def _validate(
        self, extraction: Mapping[str, object] | FreightExtractionPayload
    ) -> FreightExtractionPayload:
        if isinstance(extraction, FreightExtractionPayload):
            return extraction
        try:
            return FreightExtractionPayload.model_validate(extraction)
        except ValidationError as exc:
            raise CandidateValidationError(f"Unreadable extraction payload: {exc}") from exc

    def _equipment(self, payload: FreightExtractionPayload) -> set[EquipmentType]:
        texts = [payload.summary] if payload.summary else []
        found = self._extractor.scan_equipment([*texts, *payload.key_points])
        structured = [payload.equipment_details.type] if payload.equipment_details else []
        if payload.carrier_information is not None:
            structured.extend(payload.carrier_information.equipment_types)
        for value in structured:
            equipment = normalize_equipment(value)
            if equipment is not None:
                found.add(equipment)
        return found

    def _lanes(self, payload: FreightExtractionPayload) -> set[str]:
        lanes = self._extractor.scan_lanes(payload.key_points)
        route = payload.route_details
        if route and route.origin and route.destination:
            token = lane_token(route.origin.state, route.destination.state)
            if token is not None:
                lanes.add(token)
        return lanes


def prepare_candidate(candidate: CarrierCandidate) -> CarrierCandidate:
    """Normalize identifiers on a candidate built outside the normalizer."""

    prepared = dataclasses.replace(
        candidate,
        mc_number=normalize_authority_number(candidate.mc_number),
        dot_number=normalize_authority_number(candidate.dot_number),
        phone=normalize_phone(candidate.phone),
        driver_phone=normalize_phone(candidate.driver_phone),
        state=normalize_state(candidate.state),
    )
    if prepared.confidence:
        return prepared
    return dataclasses.replace(prepared, confidence=score_confidence(prepared))
