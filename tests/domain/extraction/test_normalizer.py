from __future__ import annotations

import pytest

from carrierbase.domain.errors import CandidateValidationError
from carrierbase.domain.extraction import ExtractionNormalizer, prepare_candidate
from carrierbase.domain.extraction.payload import FreightExtractionPayload
from carrierbase.domain.model import CarrierCandidate, EquipmentType, FieldOrigin
from tests.helpers.registry import CALL_DATE, ORG, make_call, make_extraction


def test_normalize_structured_carrier_information() -> None:
    candidate = ExtractionNormalizer().normalize(make_extraction(), make_call())

    assert candidate is not None
    assert candidate.call_id == "call-1"
    assert candidate.organization_id == ORG
    assert candidate.call_date == CALL_DATE
    assert candidate.company_name == "Acme Trucking"
    assert candidate.mc_number == "778899"
    assert candidate.phone == "5552013456"
    assert candidate.equipment_types == frozenset({EquipmentType.DRY_VAN})
    assert candidate.origin_of("mc_number") is FieldOrigin.EXPLICIT
    # authority 30 + name 20 + phone 15 + equipment 2
    assert candidate.confidence == 67


def test_normalize_accepts_validated_payload() -> None:
    payload = FreightExtractionPayload.model_validate(make_extraction())

    candidate = ExtractionNormalizer().normalize(payload, make_call())

    assert candidate is not None
    assert candidate.mc_number == "778899"


def test_normalize_skips_other_call_types() -> None:
    extraction = make_extraction(call_type="shipper_call")

    assert ExtractionNormalizer().normalize(extraction, make_call()) is None


def test_normalize_returns_none_without_carrier_signal() -> None:
    extraction = {"call_type": "carrier_call", "summary": "Caller asked about the weather"}

    assert ExtractionNormalizer().normalize(extraction, make_call()) is None


def test_normalize_scans_key_points_when_structured_info_is_missing() -> None:
    extraction = {
        "call_type": "carrier_call",
        "key_points": [
            "Carrier is MC# 445566, call back at (555) 867-5309",
            "Runs TX to CA weekly with a reefer",
        ],
    }

    candidate = ExtractionNormalizer().normalize(extraction, make_call())

    assert candidate is not None
    assert candidate.mc_number == "445566"
    assert candidate.phone == "5558675309"
    assert candidate.origin_of("mc_number") is FieldOrigin.INFERRED
    assert candidate.origin_of("phone") is FieldOrigin.INFERRED
    assert candidate.preferred_lanes == frozenset({"TX-CA"})
    assert EquipmentType.REEFER in candidate.equipment_types


def test_normalize_prefers_stated_values_over_scanned_ones() -> None:
    extraction = make_extraction(key_points=["Earlier they said MC 111111"])

    candidate = ExtractionNormalizer().normalize(extraction, make_call())

    assert candidate is not None
    assert candidate.mc_number == "778899"
    assert candidate.origin_of("mc_number") is FieldOrigin.EXPLICIT


def test_normalize_reads_route_pricing_and_driver() -> None:
    extraction = make_extraction(
        route_details={
            "origin": {"city": "Dallas", "state": "tx"},
            "destination": {"city": "Fresno", "state": "CA"},
            "pickup_date": "2025-03-12",
            "driver_info": {"name": "Sam Driver", "phone": "555 300 1000"},
        },
        pricing={"carrier_rate": "$2,350"},
        reference_numbers=["PO-1", "PO-1", "LD-77"],
    )

    candidate = ExtractionNormalizer().normalize(extraction, make_call())

    assert candidate is not None
    assert candidate.preferred_lanes == frozenset({"TX-CA"})
    assert candidate.quoted_rate == 2350.0
    assert candidate.available_date is not None
    assert candidate.available_date.isoformat() == "2025-03-12"
    assert candidate.driver_name == "Sam Driver"
    assert candidate.driver_phone == "5553001000"
    assert candidate.reference_numbers == ("PO-1", "LD-77")


def test_normalize_falls_back_to_carrier_participant() -> None:
    extraction = {
        "call_type": "carrier_call",
        "carrier_information": {"mc": 223344},
        "participants": [
            {"name": "Broker Bob", "role": "broker", "phone": "5550000000"},
            {"name": "Dana", "role": "Carrier", "phone": "555-444-1212"},
        ],
    }

    candidate = ExtractionNormalizer().normalize(extraction, make_call())

    assert candidate is not None
    assert candidate.mc_number == "223344"
    assert candidate.contact_name == "Dana"
    assert candidate.phone == "5554441212"


def test_normalize_drops_unknown_equipment_and_bad_state() -> None:
    extraction = make_extraction(equipment="hovercraft")
    extraction["carrier_information"]["state"] = "Texas"  # type: ignore[index]

    candidate = ExtractionNormalizer().normalize(extraction, make_call())

    assert candidate is not None
    assert candidate.equipment_types == frozenset()
    assert candidate.state is None


def test_normalize_rejects_unreadable_payload() -> None:
    extraction = {"call_type": "carrier_call", "carrier_information": "Acme"}

    with pytest.raises(CandidateValidationError):
        ExtractionNormalizer().normalize(extraction, make_call())


def test_prepare_candidate_normalizes_identifiers_and_scores() -> None:
    candidate = CarrierCandidate(
        call_id="call-9",
        organization_id=ORG,
        call_date=CALL_DATE,
        company_name="Acme Freight",
        mc_number="MC-778899",
        phone="555-201-3456",
        state="tx",
    )

    prepared = prepare_candidate(candidate)

    assert prepared.mc_number == "778899"
    assert prepared.phone == "5552013456"
    assert prepared.state == "TX"
    assert prepared.confidence == 70
