"""Weighted risk scoring of authority snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from carrierbase.domain.model import (
    DEFAULT_BIPD_REQUIRED,
    OperatingStatus,
    RiskAssessment,
    RiskLevel,
    SafetyRating,
    VerificationWarning,
    WarningSeverity,
)

if TYPE_CHECKING:
    from datetime import date

    from carrierbase.domain.model import AuthoritySnapshot


@dataclass(slots=True, frozen=True)
class NationalAverages:
    """Out-of-service rates (percent) across all inspected carriers."""

    vehicle_oos_rate: float = 20.7
    driver_oos_rate: float = 5.5
    hazmat_oos_rate: float = 4.5


NATIONAL_AVERAGES: Final[NationalAverages] = NationalAverages()

LOW_RISK_MIN_SCORE: Final[int] = 80
MEDIUM_RISK_MIN_SCORE: Final[int] = 50

NEW_AUTHORITY_DAYS: Final[int] = 90
YOUNG_AUTHORITY_DAYS: Final[int] = 180
STALE_MCS150_DAYS: Final[int] = 730
HIGH_VEHICLE_OOS_RATE: Final[float] = 30.0
HIGH_DRIVER_OOS_RATE: Final[float] = 10.0
MANY_CRASHES: Final[int] = 5


def classify_risk(score: int) -> RiskLevel:
    if score >= LOW_RISK_MIN_SCORE:
        return RiskLevel.LOW
    if score >= MEDIUM_RISK_MIN_SCORE:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def liability_adequate(snapshot: AuthoritySnapshot) -> bool:
    """BIPD coverage is on file and meets the required amount."""

    on_file = snapshot.bipd_insurance_on_file or bool(snapshot.bipd_on_file)
    if not on_file or snapshot.bipd_on_file is None:
        return False
    required = snapshot.bipd_required or DEFAULT_BIPD_REQUIRED
    return snapshot.bipd_on_file >= required


class _Scorecard:
    def __init__(self) -> None:
        self.score = 100
        self.warnings: list[VerificationWarning] = []

    def penalize(
        self, points: int, severity: WarningSeverity, message: str, field: str
    ) -> None:
        self.score -= points
        self.warnings.append(VerificationWarning(severity=severity, message=message, field=field))


def assess_risk(
    snapshot: AuthoritySnapshot,
    *,
    today: date,
    averages: NationalAverages = NATIONAL_AVERAGES,
) -> RiskAssessment:
    """Start from 100 and subtract a fixed penalty per triggered condition.

    Every penalty adds one warning, in the order the checks run. The score
    never drops below zero.
    """

    card = _Scorecard()
    critical = WarningSeverity.CRITICAL
    warning = WarningSeverity.WARNING
    info = WarningSeverity.INFO

    if snapshot.operating_status is not OperatingStatus.AUTHORIZED:
        card.penalize(
            50,
            critical,
            f"Carrier operating status is {snapshot.operating_status.value}",
            "operating_status",
        )

    if snapshot.out_of_service_date is not None:
        card.penalize(
            40,
            critical,
            f"Carrier was placed out of service on {snapshot.out_of_service_date.isoformat()}",
            "out_of_service_date",
        )

    if snapshot.safety_rating is SafetyRating.UNSATISFACTORY:
        card.penalize(35, critical, "Carrier has an UNSATISFACTORY safety rating", "safety_rating")

    if not liability_adequate(snapshot):
        card.penalize(
            30, critical, "Liability insurance is inadequate or not on file", "insurance"
        )

    if not snapshot.cargo_insurance_on_file:
        card.penalize(15, warning, "Cargo insurance not on file", "cargo_insurance")

    if snapshot.safety_rating is SafetyRating.CONDITIONAL:
        card.penalize(20, warning, "Carrier has a CONDITIONAL safety rating", "safety_rating")

    if snapshot.authority_date is not None:
        age = (today - snapshot.authority_date).days
        if age < NEW_AUTHORITY_DAYS:
            card.penalize(
                15, warning, f"New carrier: authority is only {age} days old", "authority_age"
            )
        elif age < YOUNG_AUTHORITY_DAYS:
            card.penalize(
                5, info, f"Relatively new carrier: authority is {age} days old", "authority_age"
            )

    if snapshot.mcs150_date is not None:
        age = (today - snapshot.mcs150_date).days
        if age > STALE_MCS150_DAYS:
            card.penalize(
                10, warning, f"MCS-150 not updated in {age // 365} years", "mcs150_date"
            )

    vehicle_rate = snapshot.vehicle_oos_rate
    if vehicle_rate is not None:
        average = averages.vehicle_oos_rate
        if vehicle_rate > HIGH_VEHICLE_OOS_RATE:
            card.penalize(
                15,
                warning,
                f"High vehicle out-of-service rate: {vehicle_rate}% (national avg: {average}%)",
                "vehicle_oos_rate",
            )
        elif vehicle_rate > average:
            card.penalize(
                5,
                info,
                f"Vehicle OOS rate above average: {vehicle_rate}% (national avg: {average}%)",
                "vehicle_oos_rate",
            )

    driver_rate = snapshot.driver_oos_rate
    if driver_rate is not None:
        average = averages.driver_oos_rate
        if driver_rate > HIGH_DRIVER_OOS_RATE:
            card.penalize(
                15,
                warning,
                f"High driver out-of-service rate: {driver_rate}% (national avg: {average}%)",
                "driver_oos_rate",
            )
        elif driver_rate > average:
            card.penalize(
                5,
                info,
                f"Driver OOS rate above average: {driver_rate}% (national avg: {average}%)",
                "driver_oos_rate",
            )

    fatal = snapshot.fatal_crashes or 0
    if fatal > 0:
        plural = "es" if fatal > 1 else ""
        card.penalize(20, warning, f"{fatal} fatal crash{plural} on record", "crashes")

    total = snapshot.total_crashes or 0
    if total > MANY_CRASHES:
        card.penalize(10, info, f"{total} total crashes on record", "crashes")

    score = max(0, card.score)
    return RiskAssessment(
        risk_level=classify_risk(score),
        risk_score=score,
        warnings=tuple(card.warnings),
    )
