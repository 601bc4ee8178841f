"""Field-completeness confidence for extracted carrier candidates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from carrierbase.domain.model import CarrierCandidate

CONFIDENCE_WEIGHTS: Final[dict[str, int]] = {
    "authority_number": 30,
    "company_name": 20,
    "phone": 15,
    "contact_name": 10,
    "state": 5,
    "quoted_rate": 10,
    "email": 3,
    "address": 3,
    "equipment_types": 2,
    "preferred_lanes": 2,
}


def _present_fields(candidate: CarrierCandidate) -> set[str]:
    present = {
        name
        for name in CONFIDENCE_WEIGHTS
        if name != "authority_number" and getattr(candidate, name)
    }
    if candidate.quoted_rate is not None:
        present.add("quoted_rate")
    if candidate.mc_number or candidate.dot_number:
        present.add("authority_number")
    return present


def score_confidence(candidate: CarrierCandidate) -> int:
    """Share of weighted fields present, as an integer percentage.

    Advisory only: nothing in the pipeline rejects a candidate on this score.
    """

    total = sum(CONFIDENCE_WEIGHTS.values())
    earned = sum(CONFIDENCE_WEIGHTS[name] for name in _present_fields(candidate))
    return int(earned * 100 / total + 0.5)
