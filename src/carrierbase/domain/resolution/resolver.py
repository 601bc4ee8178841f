"""Identity resolution of carrier candidates against the registry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from carrierbase.domain.identifiers import MIN_PHONE_DIGITS
from carrierbase.domain.model import CarrierConflict, ConflictKind, MatchStrategy, PhoneMatchMode

if TYPE_CHECKING:
    from carrierbase.domain.model import Carrier, CarrierCandidate
    from carrierbase.domain.ports import CarrierRepository

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Resolution:
    """Outcome of matching one candidate.

    ``blocked`` marks a phone hit on a carrier with a different MC number:
    the candidate must neither be merged into it nor create a new record.
    """

    carrier: Carrier | None
    strategy: MatchStrategy | None = None
    conflicts: tuple[CarrierConflict, ...] = ()
    blocked: bool = False

    @property
    def is_new(self) -> bool:
        return self.carrier is None and not self.blocked


class IdentityResolver:
    """Strictly ordered matching: MC number first, then phone.

    Phone matching strips both sides to digits. In ``CONTAINS`` mode the
    candidate digits may appear anywhere in a stored number, which can tie
    together carriers sharing a dispatch line; ``EXACT`` requires equality.
    """

    def __init__(self, phone_match: PhoneMatchMode = PhoneMatchMode.CONTAINS) -> None:
        self.phone_match = phone_match

    def resolve(self, carriers: CarrierRepository, candidate: CarrierCandidate) -> Resolution:
        organization_id = candidate.organization_id
        mc_match = (
            carriers.find_by_mc_number(organization_id, candidate.mc_number)
            if candidate.mc_number
            else None
        )
        phone_matches = self._phone_matches(carriers, candidate)

        if mc_match is not None:
            split = [carrier for carrier in phone_matches if carrier.id != mc_match.id]
            if not split:
                return Resolution(mc_match, MatchStrategy.MC_NUMBER)
            conflict = CarrierConflict(
                organization_id=organization_id,
                call_id=candidate.call_id,
                kind=ConflictKind.MC_PHONE_SPLIT,
                message=(
                    f"MC {candidate.mc_number} belongs to carrier {mc_match.id} but phone "
                    f"{candidate.phone} matches carrier {split[0].id}"
                ),
                candidate_mc_number=candidate.mc_number,
                candidate_phone=candidate.phone,
                mc_match_id=mc_match.id,
                phone_match_id=split[0].id,
            )
            log.warning("Identity conflict on call %s: %s", candidate.call_id, conflict.message)
            return Resolution(mc_match, MatchStrategy.MC_NUMBER, conflicts=(conflict,))

        if not phone_matches:
            return Resolution(None)

        if len(phone_matches) > 1:
            log.info(
                "Phone %s matches %d carriers; using the oldest (%s)",
                candidate.phone,
                len(phone_matches),
                phone_matches[0].id,
            )
        match = phone_matches[0]
        if candidate.mc_number and match.mc_number and match.mc_number != candidate.mc_number:
            conflict = CarrierConflict(
                organization_id=organization_id,
                call_id=candidate.call_id,
                kind=ConflictKind.PHONE_MC_MISMATCH,
                message=(
                    f"Phone {candidate.phone} matches carrier {match.id} with MC "
                    f"{match.mc_number}, but the call names MC {candidate.mc_number}"
                ),
                candidate_mc_number=candidate.mc_number,
                candidate_phone=candidate.phone,
                phone_match_id=match.id,
            )
            log.warning("Identity conflict on call %s: %s", candidate.call_id, conflict.message)
            return Resolution(None, MatchStrategy.PHONE, conflicts=(conflict,), blocked=True)

        return Resolution(match, MatchStrategy.PHONE)

    def _phone_matches(
        self, carriers: CarrierRepository, candidate: CarrierCandidate
    ) -> list[Carrier]:
        if not candidate.phone or len(candidate.phone) < MIN_PHONE_DIGITS:
            return []
        return carriers.find_by_phone(
            candidate.organization_id,
            candidate.phone,
            exact=self.phone_match is PhoneMatchMode.EXACT,
        )
