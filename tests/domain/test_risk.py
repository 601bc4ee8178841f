from __future__ import annotations

from datetime import date, timedelta

import pytest

from carrierbase.domain.model import OperatingStatus, RiskLevel, SafetyRating, WarningSeverity
from carrierbase.domain.risk import assess_risk, classify_risk, liability_adequate
from tests.helpers.registry import make_snapshot

TODAY = date(2025, 3, 10)


@pytest.mark.parametrize(
    ("score", "level"),
    [
        (100, RiskLevel.LOW),
        (80, RiskLevel.LOW),
        (79, RiskLevel.MEDIUM),
        (50, RiskLevel.MEDIUM),
        (49, RiskLevel.HIGH),
        (0, RiskLevel.HIGH),
    ],
)
def test_classify_risk_tiers(score: int, level: RiskLevel) -> None:
    assert classify_risk(score) is level


def test_clean_carrier_is_low_risk() -> None:
    assessment = assess_risk(make_snapshot(), today=TODAY)

    assert assessment.risk_score == 100
    assert assessment.risk_level is RiskLevel.LOW
    assert assessment.warnings == ()


def test_unauthorized_carrier_is_critical() -> None:
    assessment = assess_risk(
        make_snapshot(operating_status=OperatingStatus.NOT_AUTHORIZED), today=TODAY
    )

    assert assessment.risk_score == 50
    assert assessment.risk_level is RiskLevel.MEDIUM
    (warning,) = assessment.warnings
    assert warning.severity is WarningSeverity.CRITICAL
    assert warning.field == "operating_status"
    assert warning.message == "Carrier operating status is NOT AUTHORIZED"


def test_score_never_drops_below_zero() -> None:
    snapshot = make_snapshot(
        operating_status=OperatingStatus.OUT_OF_SERVICE,
        out_of_service_date=TODAY - timedelta(days=3),
        safety_rating=SafetyRating.UNSATISFACTORY,
        bipd_insurance_on_file=False,
        bipd_on_file=None,
        cargo_insurance_on_file=False,
    )

    assessment = assess_risk(snapshot, today=TODAY)

    assert assessment.risk_score == 0
    assert assessment.risk_level is RiskLevel.HIGH
    assert [warning.field for warning in assessment.warnings] == [
        "operating_status",
        "out_of_service_date",
        "safety_rating",
        "insurance",
        "cargo_insurance",
    ]


def test_insufficient_liability_coverage() -> None:
    snapshot = make_snapshot(bipd_on_file=500_000.0)

    assessment = assess_risk(snapshot, today=TODAY)

    assert not liability_adequate(snapshot)
    assert assessment.risk_score == 70
    assert assessment.warnings[0].message == "Liability insurance is inadequate or not on file"


def test_liability_defaults_to_standard_requirement() -> None:
    assert liability_adequate(make_snapshot(bipd_required=None, bipd_on_file=750_000.0))
    assert not liability_adequate(make_snapshot(bipd_required=None, bipd_on_file=749_999.0))
    assert not liability_adequate(make_snapshot(bipd_on_file=None))


def test_conditional_rating_and_young_authority() -> None:
    snapshot = make_snapshot(
        safety_rating=SafetyRating.CONDITIONAL,
        authority_date=TODAY - timedelta(days=30),
    )

    assessment = assess_risk(snapshot, today=TODAY)

    assert assessment.risk_score == 65
    assert assessment.risk_level is RiskLevel.MEDIUM
    assert [warning.severity for warning in assessment.warnings] == [
        WarningSeverity.WARNING,
        WarningSeverity.WARNING,
    ]


def test_authority_age_bands() -> None:
    recent = assess_risk(make_snapshot(authority_date=TODAY - timedelta(days=120)), today=TODAY)
    settled = assess_risk(make_snapshot(authority_date=TODAY - timedelta(days=400)), today=TODAY)

    assert recent.risk_score == 95
    assert recent.warnings[0].severity is WarningSeverity.INFO
    assert settled.risk_score == 100


def test_stale_mcs150() -> None:
    assessment = assess_risk(make_snapshot(mcs150_date=TODAY - timedelta(days=1100)), today=TODAY)

    assert assessment.risk_score == 90
    assert assessment.warnings[0].message == "MCS-150 not updated in 3 years"


@pytest.mark.parametrize(
    ("vehicle", "driver", "expected"),
    [
        (35.0, None, 85),
        (25.0, None, 95),
        (10.0, None, 100),
        (None, 12.0, 85),
        (None, 7.0, 95),
        (35.0, 12.0, 70),
    ],
)
def test_out_of_service_rates(vehicle: float | None, driver: float | None, expected: int) -> None:
    snapshot = make_snapshot(vehicle_oos_rate=vehicle, driver_oos_rate=driver)

    assert assess_risk(snapshot, today=TODAY).risk_score == expected


def test_crash_history() -> None:
    assessment = assess_risk(make_snapshot(fatal_crashes=2, total_crashes=6), today=TODAY)

    assert assessment.risk_score == 70
    assert [warning.message for warning in assessment.warnings] == [
        "2 fatal crashes on record",
        "6 total crashes on record",
    ]


def test_single_fatal_crash_message() -> None:
    assessment = assess_risk(make_snapshot(fatal_crashes=1), today=TODAY)

    assert assessment.warnings[0].message == "1 fatal crash on record"
