from __future__ import annotations

from carrierbase.domain.extraction import (
    RegexCandidateExtractor,
    normalize_equipment,
    scan_equipment,
    score_confidence,
)
from carrierbase.domain.extraction.patterns import CandidateExtractor
from carrierbase.domain.model import CarrierCandidate, EquipmentType
from tests.helpers.registry import CALL_DATE, ORG


def test_regex_extractor_satisfies_protocol() -> None:
    assert isinstance(RegexCandidateExtractor(), CandidateExtractor)


def test_scan_identifiers_takes_first_match_per_field() -> None:
    scanned = RegexCandidateExtractor().scan_identifiers(
        [
            "Dispatch for MC #445566, reach them at (555) 201-3456",
            "USDOT 7654321, also MC 999999, email Ops@Acme-Freight.com",
        ]
    )

    assert scanned.mc_number == "445566"
    assert scanned.dot_number == "7654321"
    assert scanned.phone == "(555) 201-3456"
    assert scanned.email == "Ops@Acme-Freight.com"


def test_scan_identifiers_ignores_short_numbers() -> None:
    scanned = RegexCandidateExtractor().scan_identifiers(["MC 1234 and DOT 99"])

    assert scanned.mc_number is None
    assert scanned.dot_number is None


def test_scan_lanes_requires_upper_case_state_codes() -> None:
    lanes = RegexCandidateExtractor().scan_lanes(
        ["Wants IL to GA and TX-CA", "could go to me later", "ZZ to YY"]
    )

    assert lanes == {"IL-GA", "TX-CA"}


def test_normalize_equipment_synonyms() -> None:
    assert normalize_equipment("Refrigerated Van") is EquipmentType.REEFER
    assert normalize_equipment("step-deck") is EquipmentType.STEP_DECK
    assert normalize_equipment("flat") is EquipmentType.FLATBED
    assert normalize_equipment("Car Hauler") is EquipmentType.CAR_HAULER
    assert normalize_equipment("spaceship") is None
    assert normalize_equipment(None) is None


def test_scan_equipment_prefers_longer_phrases() -> None:
    found = scan_equipment(["Has a sprinter van and two reefers"])

    assert found == {EquipmentType.SPRINTER_VAN, EquipmentType.REEFER}


def test_scan_equipment_skips_ambiguous_words_in_free_text() -> None:
    assert scan_equipment(["Rates are flat this week, check the box"]) == set()


def test_score_confidence_weights_present_fields() -> None:
    bare = CarrierCandidate(call_id="c", organization_id=ORG, call_date=CALL_DATE)
    full = CarrierCandidate(
        call_id="c",
        organization_id=ORG,
        call_date=CALL_DATE,
        company_name="Acme",
        dot_number="1234567",
        contact_name="Dana",
        phone="5552013456",
        email="ops@acme.test",
        address="1 Main St",
        state="TX",
        quoted_rate=0.0,
        equipment_types=frozenset({EquipmentType.FLATBED}),
        preferred_lanes=frozenset({"TX-CA"}),
    )

    assert score_confidence(bare) == 0
    assert score_confidence(full) == 100
