from __future__ import annotations

from datetime import datetime, timedelta

from carrierbase.domain.errors import AuthoritySourceUnavailableError, PersistenceError
from carrierbase.domain.model import RiskLevel, VerificationRecord, WarningSeverity, new_id
from carrierbase.domain.verification import (
    NO_NUMBER_ERROR,
    NOT_FOUND_ERROR,
    VerificationService,
)
from tests.helpers.registry import (
    CALL_DATE,
    FakeAuthoritySource,
    FakeUnitOfWork,
    FakeVerificationRepository,
    make_snapshot,
)


class _Clock:
    def __init__(self) -> None:
        self.now = CALL_DATE

    def __call__(self) -> datetime:
        return self.now


def _service(
    source: FakeAuthoritySource, uow: FakeUnitOfWork | None = None, clock: _Clock | None = None
) -> VerificationService:
    return VerificationService(
        source,
        uow or FakeUnitOfWork(),
        ttl=timedelta(hours=24),
        clock=clock or _Clock(),
    )


def test_verify_requires_a_number() -> None:
    source = FakeAuthoritySource(make_snapshot())

    result = _service(source).verify(mc_number="MC-", dot_number=None)

    assert not result.verified
    assert result.error == NO_NUMBER_ERROR
    assert result.risk_level is RiskLevel.HIGH
    assert result.warnings[0].severity is WarningSeverity.CRITICAL
    assert source.calls == []


def test_verify_scores_and_caches_fresh_lookup() -> None:
    uow = FakeUnitOfWork()
    source = FakeAuthoritySource(make_snapshot())
    carrier_id = new_id()

    result = _service(source, uow).verify(mc_number="MC-778899", carrier_id=carrier_id)

    assert result.verified
    assert not result.cached
    assert result.risk_level is RiskLevel.LOW
    assert result.risk_score == 100
    assert result.verified_at == CALL_DATE
    assert result.expires_at == CALL_DATE + timedelta(hours=24)
    assert source.calls == [("778899", None)]
    (record,) = uow.verifications.items
    assert record.mc_number == "778899"
    assert record.dot_number == "1234567"
    assert record.carrier_id == carrier_id


def test_verify_serves_cache_until_expiry() -> None:
    clock = _Clock()
    uow = FakeUnitOfWork()
    source = FakeAuthoritySource(make_snapshot())
    service = _service(source, uow, clock)

    service.verify(mc_number="778899")
    clock.now = CALL_DATE + timedelta(hours=23)
    cached = service.verify(mc_number="778899")

    assert cached.verified
    assert cached.cached
    assert cached.verified_at == CALL_DATE
    assert len(source.calls) == 1


def test_verify_treats_expired_record_as_miss() -> None:
    clock = _Clock()
    uow = FakeUnitOfWork()
    source = FakeAuthoritySource(make_snapshot())
    service = _service(source, uow, clock)

    service.verify(mc_number="778899")
    clock.now = CALL_DATE + timedelta(hours=24, seconds=1)
    fresh = service.verify(mc_number="778899")

    assert not fresh.cached
    assert fresh.verified_at == clock.now
    assert len(source.calls) == 2
    assert len(uow.verifications.items) == 2


def test_verify_force_refresh_bypasses_cache() -> None:
    source = FakeAuthoritySource(make_snapshot())
    service = _service(source)

    service.verify(mc_number="778899")
    refreshed = service.verify(mc_number="778899", force_refresh=True)

    assert not refreshed.cached
    assert len(source.calls) == 2


def test_verify_finds_cache_by_dot_number() -> None:
    source = FakeAuthoritySource(make_snapshot())
    service = _service(source)

    service.verify(dot_number="USDOT 1234567")
    cached = service.verify(dot_number="1234567")

    assert cached.cached
    assert source.calls == [(None, "1234567")]


def test_verify_not_found_is_not_cached() -> None:
    uow = FakeUnitOfWork()
    source = FakeAuthoritySource(None)

    result = _service(source, uow).verify(mc_number="778899")

    assert not result.verified
    assert result.error == NOT_FOUND_ERROR
    assert result.warnings[0].message == "Carrier not found in FMCSA database"
    assert uow.verifications.items == []


def test_verify_source_failure_downgrades_to_warning() -> None:
    uow = FakeUnitOfWork()
    source = FakeAuthoritySource(error=AuthoritySourceUnavailableError("FMCSA unreachable"))

    result = _service(source, uow).verify(mc_number="778899")

    assert not result.verified
    assert result.error == "FMCSA unreachable"
    assert result.risk_level is RiskLevel.HIGH
    assert result.warnings[0].severity is WarningSeverity.WARNING
    assert result.warnings[0].message == "Unable to verify carrier at this time"
    assert uow.verifications.items == []


def test_verify_survives_cache_failures() -> None:
    class BrokenCache(FakeVerificationRepository):
        def latest_for(
            self, *, mc_number: str | None = None, dot_number: str | None = None
        ) -> VerificationRecord | None:
            raise PersistenceError("cache down")

        def add(self, entity: VerificationRecord) -> None:
            raise PersistenceError("cache down")

    uow = FakeUnitOfWork()
    uow.repositories.verifications = BrokenCache()
    source = FakeAuthoritySource(make_snapshot())

    result = _service(source, uow).verify(mc_number="778899")

    assert result.verified
    assert not result.cached
