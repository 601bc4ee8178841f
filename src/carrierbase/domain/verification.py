"""Carrier authority verification with a time-limited result cache."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import TYPE_CHECKING, Final

from carrierbase.domain.errors import AuthorityLookupError, PersistenceError
from carrierbase.domain.identifiers import normalize_authority_number
from carrierbase.domain.model import (
    RiskLevel,
    VerificationRecord,
    VerificationWarning,
    WarningSeverity,
    utcnow,
)
from carrierbase.domain.risk import assess_risk

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from uuid import UUID

    from carrierbase.domain.model import AuthoritySnapshot
    from carrierbase.domain.ports import AuthoritySource, RegistryUnitOfWork

log = logging.getLogger(__name__)

DEFAULT_VERIFICATION_TTL: Final[timedelta] = timedelta(hours=24)

NO_NUMBER_ERROR: Final[str] = "No MC or DOT number provided"
NOT_FOUND_ERROR: Final[str] = "Carrier not found"


@dataclass(slots=True, frozen=True, kw_only=True)
class VerificationResult:
    """Answer to a verification request; failures are reported, not raised."""

    verified: bool
    data: AuthoritySnapshot | None = None
    risk_level: RiskLevel = RiskLevel.HIGH
    risk_score: int = 0
    warnings: tuple[VerificationWarning, ...] = field(default=())
    cached: bool = False
    verified_at: datetime | None = None
    expires_at: datetime | None = None
    error: str | None = None

    @classmethod
    def failure(
        cls, error: str, message: str, *, severity: WarningSeverity = WarningSeverity.CRITICAL
    ) -> VerificationResult:
        return cls(
            verified=False,
            warnings=(VerificationWarning(severity=severity, message=message),),
            error=error,
        )

    @classmethod
    def from_record(cls, record: VerificationRecord, *, cached: bool) -> VerificationResult:
        return cls(
            verified=True,
            data=record.snapshot,
            risk_level=record.risk_level,
            risk_score=record.risk_score,
            warnings=tuple(record.warnings),
            cached=cached,
            verified_at=record.verified_at,
            expires_at=record.expires_at,
        )


class VerificationService:
    """Check a carrier against the authority source and score its risk.

    A stored result younger than ``ttl`` is served from the cache unless
    ``force_refresh`` is set. Only successful lookups are cached.
    """

    def __init__(
        self,
        source: AuthoritySource,
        unit_of_work_factory: Callable[[], RegistryUnitOfWork],
        *,
        ttl: timedelta = DEFAULT_VERIFICATION_TTL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._source = source
        self._unit_of_work_factory = unit_of_work_factory
        self._ttl = ttl
        self._clock = clock

    def verify(
        self,
        *,
        mc_number: str | None = None,
        dot_number: str | None = None,
        force_refresh: bool = False,
        carrier_id: UUID | None = None,
    ) -> VerificationResult:
        mc_number = normalize_authority_number(mc_number)
        dot_number = normalize_authority_number(dot_number)
        if mc_number is None and dot_number is None:
            return VerificationResult.failure(
                NO_NUMBER_ERROR, "No MC or DOT number provided for verification"
            )

        now = self._clock()
        if not force_refresh:
            cached = self._cached(mc_number=mc_number, dot_number=dot_number, now=now)
            if cached is not None:
                log.debug("Serving cached verification for MC %s / DOT %s", mc_number, dot_number)
                return VerificationResult.from_record(cached, cached=True)

        try:
            snapshot = self._source.lookup(mc_number=mc_number, dot_number=dot_number)
        except AuthorityLookupError as exc:
            log.warning("Verification of MC %s / DOT %s failed: %s", mc_number, dot_number, exc)
            return VerificationResult.failure(
                str(exc),
                "Unable to verify carrier at this time",
                severity=WarningSeverity.WARNING,
            )

        if snapshot is None:
            log.info("MC %s / DOT %s not found in the authority database", mc_number, dot_number)
            return VerificationResult.failure(
                NOT_FOUND_ERROR, "Carrier not found in FMCSA database"
            )

        assessment = assess_risk(snapshot, today=now.date())
        record = VerificationRecord(
            mc_number=mc_number or normalize_authority_number(snapshot.mc_number),
            dot_number=dot_number or normalize_authority_number(snapshot.dot_number),
            carrier_id=carrier_id,
            snapshot=snapshot,
            risk_level=assessment.risk_level,
            risk_score=assessment.risk_score,
            warnings=list(assessment.warnings),
            verified_at=now,
            expires_at=now + self._ttl,
        )
        self._store(record)
        log.info(
            "Verified MC %s / DOT %s: %s risk (score %d)",
            record.mc_number,
            record.dot_number,
            record.risk_level.value,
            record.risk_score,
        )
        return VerificationResult.from_record(record, cached=False)

    def _cached(
        self, *, mc_number: str | None, dot_number: str | None, now: datetime
    ) -> VerificationRecord | None:
        try:
            with self._unit_of_work_factory() as uow:
                record = uow.repositories.verifications.latest_for(
                    mc_number=mc_number, dot_number=dot_number
                )
        except PersistenceError as exc:
            log.warning("Verification cache unavailable: %s", exc)
            return None
        if record is None or record.is_expired(now):
            return None
        return record

    def _store(self, record: VerificationRecord) -> None:
        try:
            with self._unit_of_work_factory() as uow:
                uow.repositories.verifications.add(record)
                uow.commit()
        except PersistenceError as exc:
            log.warning("Could not cache verification %s: %s", record.id, exc)
