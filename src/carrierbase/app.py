"""Application composition root and entry points."""

from __future__ import annotations

import json
import time
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Any
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, NaiveDatetime

from carrierbase.adapters.fmcsa import FmcsaAuthorityClient
from carrierbase.adapters.sqlalchemy import Database
from carrierbase.config import (
    RegistryConfig,
    get_database_config,
    get_fmcsa_config,
    get_registry_config,
)
from carrierbase.domain.errors import CarrierNotFoundError
from carrierbase.domain.linkage import CallLinkageCoordinator, RecordedCall
from carrierbase.domain.model import CallMetadata, ensure_utc, utcnow
from carrierbase.domain.resolution import IdentityResolver
from carrierbase.domain.statistics import StatisticsEngine
from carrierbase.domain.verification import VerificationResult, VerificationService

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime
    from pathlib import Path

    from carrierbase.config import FmcsaConfig
    from carrierbase.domain.linkage import CallInput, LinkageResult, ReplaySummary
    from carrierbase.domain.model import (
        Carrier,
        CarrierCallInteraction,
        CarrierConflict,
        CarrierStatisticsSnapshot,
        EquipmentType,
    )
    from carrierbase.domain.ports import AuthoritySource, RegistryUnitOfWork

type UnitOfWorkFactory = Callable[[], RegistryUnitOfWork]

log = getLogger(__name__)


class CarrierRegistry:
    """Entry points for carrier resolution, statistics and verification."""

    def __init__(
        self,
        *,
        unit_of_work_factory: UnitOfWorkFactory,
        authority_source: AuthoritySource | None = None,
        config: RegistryConfig | None = None,
        clock: Callable[[], datetime] = utcnow,
        sleep: Callable[[float], None] = time.sleep,
        database: Database | None = None,
    ) -> None:
        self.config = config or RegistryConfig()
        self.database = database
        self._unit_of_work_factory = unit_of_work_factory
        self._sleep = sleep
        self.statistics = StatisticsEngine(unit_of_work_factory, clock=clock)
        self.verification = (
            VerificationService(
                authority_source,
                unit_of_work_factory,
                ttl=timedelta(hours=self.config.verification_ttl_hours),
                clock=clock,
            )
            if authority_source is not None
            else None
        )
        self.linkage = CallLinkageCoordinator(
            unit_of_work_factory,
            self.statistics,
            resolver=IdentityResolver(self.config.phone_match),
            verification=self.verification,
            clock=clock,
        )

    def resolve_and_persist_carrier(
        self,
        candidate_or_extraction: CallInput,
        *,
        call: CallMetadata | None = None,
        load_id: UUID | None = None,
        verify: bool = False,
    ) -> LinkageResult:
        return self.linkage.link(candidate_or_extraction, call=call, load_id=load_id, verify=verify)

    def recompute_statistics(self, carrier_id: UUID) -> CarrierStatisticsSnapshot:
        return self.statistics.recompute(carrier_id)

    def verify_carrier(
        self,
        mc_number: str | None = None,
        dot_number: str | None = None,
        *,
        force_refresh: bool = False,
    ) -> VerificationResult:
        if self.verification is None:
            return VerificationResult.failure(
                "No authority source configured", "Unable to verify carrier at this time"
            )
        return self.verification.verify(
            mc_number=mc_number, dot_number=dot_number, force_refresh=force_refresh
        )

    def replay_calls(
        self, items: Iterable[RecordedCall], delay_seconds: float | None = None
    ) -> ReplaySummary:
        delay = self.config.replay_delay_seconds if delay_seconds is None else delay_seconds
        return self.linkage.replay(items, delay_seconds=delay, sleep=self._sleep)

    def get_carrier(self, carrier_id: UUID) -> Carrier | None:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.carriers.get(carrier_id)

    def search_carriers(
        self,
        organization_id: str,
        *,
        query: str | None = None,
        equipment: EquipmentType | None = None,
        lane: str | None = None,
        min_score: int | None = None,
        limit: int = 50,
    ) -> list[Carrier]:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.carriers.search(
                organization_id,
                query=query,
                equipment=equipment,
                lane=lane,
                min_score=min_score,
                limit=limit,
            )

    def list_conflicts(self, organization_id: str) -> list[CarrierConflict]:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.conflicts.list_for_organization(organization_id)

    def list_interactions(self, carrier_id: UUID) -> list[CarrierCallInteraction]:
        with self._unit_of_work_factory() as uow:
            return uow.repositories.interactions.list_for_carrier(carrier_id)

    def blacklist_carrier(self, carrier_id: UUID) -> Carrier:
        return self._transition(carrier_id, "blacklist")

    def deactivate_carrier(self, carrier_id: UUID) -> Carrier:
        return self._transition(carrier_id, "deactivate")

    def reactivate_carrier(self, carrier_id: UUID) -> Carrier:
        return self._transition(carrier_id, "reactivate")

    def close(self) -> None:
        if self.database is not None:
            self.database.dispose()

    def _transition(self, carrier_id: UUID, action: str) -> Carrier:
        with self._unit_of_work_factory() as uow:
            carrier = uow.repositories.carriers.get(carrier_id)
            if carrier is None:
                raise CarrierNotFoundError(carrier_id)
            getattr(carrier, action)()
            uow.commit()
        log.info("Carrier %s is now %s", carrier_id, carrier.status.value)
        return carrier


def build_registry(
    *,
    database: Database | None = None,
    database_uri: str | None = None,
    authority_source: AuthoritySource | None = None,
    fmcsa_config: FmcsaConfig | None = None,
    config: RegistryConfig | None = None,
) -> CarrierRegistry:
    """Wire the registry to a database and the FMCSA authority client."""

    db = database or Database.from_uri(database_uri or get_database_config().uri)
    if not db.is_started:
        db.startup()
    source = authority_source or FmcsaAuthorityClient(config=fmcsa_config or get_fmcsa_config())
    return CarrierRegistry(
        unit_of_work_factory=db.unit_of_work,
        authority_source=source,
        config=config or get_registry_config(),
        database=db,
    )


class RecordedCallPayload(BaseModel):
    """One line of a replay file."""

    model_config = ConfigDict(extra="ignore")

    call_id: str
    organization_id: str
    call_date: AwareDatetime | NaiveDatetime
    load_id: UUID | None = None
    extraction: dict[str, Any] = Field(default_factory=dict[str, Any])

    def to_recorded_call(self) -> RecordedCall:
        return RecordedCall(
            call=CallMetadata(
                call_id=self.call_id,
                organization_id=self.organization_id,
                call_date=ensure_utc(self.call_date),
                load_id=self.load_id,
            ),
            extraction=self.extraction,
        )


def read_recorded_calls(path: Path) -> list[RecordedCall]:
    """Read a JSON array or JSON-lines file of recorded calls, oldest call first."""

    text = path.read_text(encoding="utf-8")
    stripped = text.lstrip()
    if stripped.startswith("["):
        rows = json.loads(stripped)
    else:
        rows = [json.loads(line) for line in text.splitlines() if line.strip()]
    calls = [RecordedCallPayload.model_validate(row).to_recorded_call() for row in rows]
    calls.sort(key=lambda item: item.call.call_date)
    return calls
