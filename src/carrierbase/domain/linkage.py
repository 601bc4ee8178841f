"""Coordinate a call's carrier through resolution, persistence and follow-up steps.

Each step commits on its own. Only resolving and writing the carrier can fail
the whole call; load linkage, statistics, the interaction log and verification
are best effort and never undo the stored carrier.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from carrierbase.domain.errors import (
    CandidateValidationError,
    CarrierConflictError,
    CarrierRegistryError,
    DuplicateKeyError,
    LoadNotFoundError,
    PersistenceError,
)
from carrierbase.domain.extraction import ExtractionNormalizer, prepare_candidate
from carrierbase.domain.model import (
    CarrierCallInteraction,
    CarrierCandidate,
    LinkageOutcome,
    LoadLinkDetails,
    utcnow,
)
from carrierbase.domain.resolution import IdentityResolver, MergePolicy

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from datetime import datetime
    from uuid import UUID

    from carrierbase.domain.extraction.payload import FreightExtractionPayload
    from carrierbase.domain.model import (
        CallMetadata,
        CarrierConflict,
        CarrierStatisticsSnapshot,
    )
    from carrierbase.domain.ports import RegistryUnitOfWork
    from carrierbase.domain.statistics import StatisticsEngine
    from carrierbase.domain.verification import VerificationResult, VerificationService

    type CallInput = CarrierCandidate | FreightExtractionPayload | Mapping[str, object]

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True, kw_only=True)
class LinkageResult:
    outcome: LinkageOutcome
    carrier_id: UUID | None = None
    is_new: bool = False
    linked_load_id: UUID | None = None
    confidence: int = 0
    statistics: CarrierStatisticsSnapshot | None = None
    changed_fields: tuple[str, ...] = ()
    conflicts: tuple[CarrierConflict, ...] = ()
    reason: str | None = None
    verification: VerificationResult | None = None

    @classmethod
    def skipped(cls, reason: str, *, confidence: int = 0) -> LinkageResult:
        return cls(outcome=LinkageOutcome.SKIPPED, reason=reason, confidence=confidence)


@dataclass(slots=True, frozen=True)
class RecordedCall:
    """A historical call queued for replay."""

    call: CallMetadata
    extraction: Mapping[str, object]


@dataclass(slots=True)
class ReplaySummary:
    processed: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    conflicts: int = 0
    errors: int = 0

    def add(self, result: LinkageResult) -> None:
        self.processed += 1
        match result.outcome:
            case LinkageOutcome.CREATED:
                self.created += 1
            case LinkageOutcome.UPDATED:
                self.updated += 1
            case LinkageOutcome.SKIPPED:
                self.skipped += 1
            case LinkageOutcome.CONFLICT:
                self.conflicts += 1

    def add_error(self) -> None:
        self.processed += 1
        self.errors += 1


@dataclass(slots=True, frozen=True)
class _StoredCarrier:
    carrier_id: UUID
    created: bool
    mc_number: str | None
    dot_number: str | None
    changed_fields: tuple[str, ...]


class CallLinkageCoordinator:
    def __init__(
        self,
        unit_of_work_factory: Callable[[], RegistryUnitOfWork],
        statistics: StatisticsEngine,
        *,
        normalizer: ExtractionNormalizer | None = None,
        resolver: IdentityResolver | None = None,
        merge_policy: MergePolicy | None = None,
        verification: VerificationService | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._statistics = statistics
        self._normalizer = normalizer or ExtractionNormalizer()
        self._resolver = resolver or IdentityResolver()
        self._merge_policy = merge_policy or MergePolicy()
        self._verification = verification
        self._clock = clock

    def link(
        self,
        candidate_or_extraction: CallInput,
        *,
        call: CallMetadata | None = None,
        load_id: UUID | None = None,
        verify: bool = False,
    ) -> LinkageResult:
        """Resolve the call's carrier and store it, then run the follow-up steps.

        Raises :class:`PersistenceError` only when the carrier itself could
        not be written.
        """

        try:
            candidate = self._candidate(candidate_or_extraction, call)
        except CandidateValidationError as exc:
            log.info("Skipping call: %s", exc)
            return LinkageResult.skipped(str(exc))
        if candidate is None:
            return LinkageResult.skipped("No carrier information on call")
        if not candidate.has_identity_signal:
            log.info("Skipping call %s: no identifying carrier details", candidate.call_id)
            return LinkageResult.skipped(
                "No MC number, DOT number, phone or company name", confidence=candidate.confidence
            )

        try:
            stored, conflicts = self._store_with_retry(candidate)
        except CarrierConflictError as exc:
            return LinkageResult(
                outcome=LinkageOutcome.CONFLICT,
                confidence=candidate.confidence,
                conflicts=(exc.conflict,),
                reason=str(exc),
            )

        if load_id is None and call is not None:
            load_id = call.load_id
        linked_load_id = self._link_load(stored, candidate, load_id)
        statistics = self._recompute(stored.carrier_id)
        self._record_interaction(stored, candidate, linked_load_id)
        verification = self._verify(stored) if verify else None

        return LinkageResult(
            outcome=LinkageOutcome.CREATED if stored.created else LinkageOutcome.UPDATED,
            carrier_id=stored.carrier_id,
            is_new=stored.created,
            linked_load_id=linked_load_id,
            confidence=candidate.confidence,
            statistics=statistics,
            changed_fields=stored.changed_fields,
            conflicts=conflicts,
            verification=verification,
        )

    def replay(
        self,
        items: Iterable[RecordedCall],
        *,
        delay_seconds: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> ReplaySummary:
        """Run historical calls through :meth:`link` one by one, pausing between them."""

        summary = ReplaySummary()
        for index, item in enumerate(items):
            if index and delay_seconds > 0:
                sleep(delay_seconds)
            try:
                result = self.link(item.extraction, call=item.call)
            except CarrierRegistryError:
                log.exception("Replay of call %s failed", item.call.call_id)
                summary.add_error()
                continue
            summary.add(result)
        log.info(
            "Replayed %d calls: %d created, %d updated, %d skipped, %d conflicts, %d errors",
            summary.processed,
            summary.created,
            summary.updated,
            summary.skipped,
            summary.conflicts,
            summary.errors,
        )
        return summary

    def _candidate(
        self, value: CallInput, call: CallMetadata | None
    ) -> CarrierCandidate | None:
        if isinstance(value, CarrierCandidate):
            return prepare_candidate(value)
        if call is None:
            raise CandidateValidationError("Call metadata is required to normalize an extraction")
        return self._normalizer.normalize(value, call)

    def _store_with_retry(
        self, candidate: CarrierCandidate
    ) -> tuple[_StoredCarrier, tuple[CarrierConflict, ...]]:
        try:
            return self._store(candidate)
        except DuplicateKeyError:
            log.info(
                "MC %s was registered concurrently; retrying call %s as an update",
                candidate.mc_number,
                candidate.call_id,
            )
        return self._store(candidate)

    def _store(
        self, candidate: CarrierCandidate
    ) -> tuple[_StoredCarrier, tuple[CarrierConflict, ...]]:
        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            resolution = self._resolver.resolve(repositories.carriers, candidate)
            for conflict in resolution.conflicts:
                repositories.conflicts.add(conflict)
            if resolution.blocked:
                uow.commit()
                raise CarrierConflictError(resolution.conflicts[0])

            outcome = self._merge_policy.merge(resolution.carrier, candidate)
            if outcome.created:
                repositories.carriers.add(outcome.carrier)
            carrier = outcome.carrier
            stored = _StoredCarrier(
                carrier_id=carrier.id,
                created=outcome.created,
                mc_number=carrier.mc_number,
                dot_number=carrier.dot_number,
                changed_fields=outcome.changed_fields,
            )
            uow.commit()
        if not outcome.created and outcome.changed_fields:
            log.info(
                "Updated carrier %s from call %s: %s",
                stored.carrier_id,
                candidate.call_id,
                ", ".join(outcome.changed_fields),
            )
        return stored, resolution.conflicts

    def _link_load(
        self, stored: _StoredCarrier, candidate: CarrierCandidate, load_id: UUID | None
    ) -> UUID | None:
        try:
            with self._unit_of_work_factory() as uow:
                loads = uow.repositories.loads
                if load_id is None:
                    if not candidate.reference_numbers:
                        return None
                    load = loads.find_by_reference(
                        candidate.organization_id, candidate.reference_numbers
                    )
                    if load is None:
                        return None
                    load_id = load.id
                details = LoadLinkDetails(
                    carrier_id=stored.carrier_id,
                    assigned_at=self._clock(),
                    rate_to_carrier=candidate.quoted_rate,
                    driver_name=candidate.driver_name,
                    driver_phone=candidate.driver_phone,
                )
                loads.link_carrier(candidate.organization_id, load_id, details)
                uow.commit()
        except (LoadNotFoundError, PersistenceError) as exc:
            log.warning("Could not link carrier %s to load: %s", stored.carrier_id, exc)
            return None
        log.info("Linked carrier %s to load %s", stored.carrier_id, load_id)
        return load_id

    def _recompute(self, carrier_id: UUID) -> CarrierStatisticsSnapshot | None:
        try:
            return self._statistics.recompute(carrier_id)
        except CarrierRegistryError as exc:
            log.warning("Statistics for carrier %s not updated: %s", carrier_id, exc)
            return None

    def _record_interaction(
        self, stored: _StoredCarrier, candidate: CarrierCandidate, load_id: UUID | None
    ) -> None:
        interaction = CarrierCallInteraction(
            carrier_id=stored.carrier_id,
            call_id=candidate.call_id,
            call_date=candidate.call_date,
            load_id=load_id,
            quoted_rate=candidate.quoted_rate,
            available_date=candidate.available_date,
            equipment_mentioned=set(candidate.equipment_types),
            lanes_mentioned=set(candidate.preferred_lanes),
            contact_name=candidate.contact_name,
            contact_phone=candidate.phone,
            confidence=candidate.confidence,
        )
        try:
            with self._unit_of_work_factory() as uow:
                recorded = uow.repositories.interactions.record(interaction)
                uow.commit()
        except PersistenceError as exc:
            log.warning("Interaction for call %s not logged: %s", candidate.call_id, exc)
            return
        if not recorded:
            log.debug("Call %s already logged for carrier %s", candidate.call_id, stored.carrier_id)

    def _verify(self, stored: _StoredCarrier) -> VerificationResult | None:
        if self._verification is None:
            log.warning("Verification requested but no authority source is configured")
            return None
        if stored.mc_number is None and stored.dot_number is None:
            log.info("Carrier %s has no authority number to verify", stored.carrier_id)
            return None
        return self._verification.verify(
            mc_number=stored.mc_number,
            dot_number=stored.dot_number,
            carrier_id=stored.carrier_id,
        )
