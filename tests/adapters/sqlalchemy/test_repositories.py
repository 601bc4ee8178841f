from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

import pytest

from carrierbase.domain.errors import LoadNotFoundError
from carrierbase.domain.model import (
    Carrier,
    CarrierCallInteraction,
    CarrierConflict,
    ConflictKind,
    EquipmentType,
    LoadLinkDetails,
    LoadRecord,
    RiskLevel,
    VerificationRecord,
    VerificationWarning,
    WarningSeverity,
    new_id,
)
from tests.helpers.registry import CALL_DATE, ORG, make_snapshot

if TYPE_CHECKING:
    from collections.abc import Callable

    from carrierbase.adapters.sqlalchemy import SqlAlchemyUnitOfWork

type UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]


def _store(factory: UnitOfWorkFactory, *entities: object) -> None:
    with factory() as uow:
        session = uow.session  # pyright: ignore[reportAttributeAccessIssue]
        session.add_all(entities)
        uow.commit()


def test_find_by_mc_number(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    carrier = Carrier(organization_id=ORG, mc_number="778899", dot_number="1234567")
    _store(sqlite_unit_of_work, carrier)

    with sqlite_unit_of_work() as uow:
        carriers = uow.repositories.carriers
        by_mc = carriers.find_by_mc_number(ORG, "778899")
        other_org = carriers.find_by_mc_number("org-2", "778899")

    assert by_mc is not None
    assert by_mc.id == carrier.id
    assert by_mc.dot_number == "1234567"
    assert other_org is None


def test_find_by_phone_contains_and_exact(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    older = Carrier(organization_id=ORG, phone="5552013456", created_at=CALL_DATE)
    newer = Carrier(
        organization_id=ORG,
        phone="5550000000",
        alt_phone="5552013456",
        created_at=CALL_DATE + timedelta(hours=1),
    )
    _store(sqlite_unit_of_work, newer, older)

    with sqlite_unit_of_work() as uow:
        carriers = uow.repositories.carriers
        contains = carriers.find_by_phone(ORG, "2013456")
        exact_partial = carriers.find_by_phone(ORG, "2013456", exact=True)
        exact_full = carriers.find_by_phone(ORG, "5552013456", exact=True)

    assert [carrier.id for carrier in contains] == [older.id, newer.id]
    assert exact_partial == []
    assert [carrier.id for carrier in exact_full] == [older.id, newer.id]


def test_search_filters_and_orders_by_score(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    strong = Carrier(
        organization_id=ORG,
        name="Acme Trucking",
        mc_number="778899",
        performance_score=92,
        equipment_types={EquipmentType.REEFER},
        preferred_lanes={"TX-CA"},
    )
    weak = Carrier(
        organization_id=ORG,
        name="Acme Freight",
        performance_score=55,
        equipment_types={EquipmentType.DRY_VAN, EquipmentType.REEFER},
    )
    unscored = Carrier(organization_id=ORG, name="Acme Logistics")
    elsewhere = Carrier(organization_id="org-2", name="Acme West", performance_score=99)
    _store(sqlite_unit_of_work, weak, unscored, strong, elsewhere)

    with sqlite_unit_of_work() as uow:
        carriers = uow.repositories.carriers
        by_name = carriers.search(ORG, query="acme")
        by_mc = carriers.search(ORG, query="7788")
        reefers = carriers.search(ORG, equipment=EquipmentType.REEFER)
        dry_vans = carriers.search(ORG, equipment=EquipmentType.DRY_VAN)
        on_lane = carriers.search(ORG, lane="tx-ca")
        good = carriers.search(ORG, min_score=60)
        limited = carriers.search(ORG, limit=1)

    assert [carrier.id for carrier in by_name] == [strong.id, weak.id, unscored.id]
    assert [carrier.id for carrier in by_mc] == [strong.id]
    assert [carrier.id for carrier in reefers] == [strong.id, weak.id]
    assert [carrier.id for carrier in dry_vans] == [weak.id]
    assert [carrier.id for carrier in on_lane] == [strong.id]
    assert [carrier.id for carrier in good] == [strong.id]
    assert [carrier.id for carrier in limited] == [strong.id]


def test_load_lookup_and_linking(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    carrier = Carrier(organization_id=ORG, mc_number="778899")
    load = LoadRecord(
        organization_id=ORG,
        load_number="LD-77",
        reference_number="PO-1",
        rate_to_carrier=1800.0,
    )
    _store(sqlite_unit_of_work, carrier, load)

    with sqlite_unit_of_work() as uow:
        loads = uow.repositories.loads
        by_reference = loads.find_by_reference(ORG, ["PO-1"])
        by_number = loads.find_by_reference(ORG, ["nope", "LD-77"])
        missing = loads.find_by_reference(ORG, ["PO-2"])
        linked = loads.link_carrier(
            ORG,
            load.id,
            LoadLinkDetails(carrier_id=carrier.id, assigned_at=CALL_DATE, driver_name="Sam"),
        )
        uow.commit()

    assert by_reference is not None
    assert by_reference.id == load.id
    assert by_number is not None
    assert by_number.id == load.id
    assert missing is None
    assert linked.carrier_id == carrier.id

    with sqlite_unit_of_work() as uow:
        history = uow.repositories.loads.list_for_carrier(carrier.id)

    (stored,) = history
    assert stored.rate_to_carrier == 1800.0
    assert stored.driver_name == "Sam"
    assert stored.carrier_assigned_at == CALL_DATE


def test_link_unknown_load_raises(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    with sqlite_unit_of_work() as uow, pytest.raises(LoadNotFoundError):
        uow.repositories.loads.link_carrier(
            ORG, new_id(), LoadLinkDetails(carrier_id=new_id(), assigned_at=CALL_DATE)
        )


def test_link_load_of_other_organization_raises(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    carrier = Carrier(organization_id=ORG)
    foreign = LoadRecord(organization_id="org-2", load_number="LD-9", rate_to_carrier=9999.0)
    _store(sqlite_unit_of_work, carrier, foreign)

    with sqlite_unit_of_work() as uow, pytest.raises(LoadNotFoundError):
        uow.repositories.loads.link_carrier(
            ORG, foreign.id, LoadLinkDetails(carrier_id=carrier.id, assigned_at=CALL_DATE)
        )

    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.loads.get(foreign.id)
        history = uow.repositories.loads.list_for_carrier(carrier.id)

    assert stored is not None
    assert stored.carrier_id is None
    assert history == []


def test_interaction_log_is_unique_per_call(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    carrier = Carrier(organization_id=ORG)
    _store(sqlite_unit_of_work, carrier)

    def interaction() -> CarrierCallInteraction:
        return CarrierCallInteraction(
            carrier_id=carrier.id,
            call_id="call-1",
            call_date=CALL_DATE,
            equipment_mentioned={EquipmentType.FLATBED},
        )

    with sqlite_unit_of_work() as uow:
        first = uow.repositories.interactions.record(interaction())
        uow.commit()
    with sqlite_unit_of_work() as uow:
        second = uow.repositories.interactions.record(interaction())
        uow.commit()
    with sqlite_unit_of_work() as uow:
        logged = uow.repositories.interactions.list_for_carrier(carrier.id)

    assert first
    assert not second
    (entry,) = logged
    assert entry.equipment_mentioned == {EquipmentType.FLATBED}


def test_conflicts_are_listed_per_organization(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    conflict = CarrierConflict(
        organization_id=ORG,
        call_id="call-2",
        kind=ConflictKind.PHONE_MC_MISMATCH,
        message="Phone matches another MC",
        candidate_mc_number="445566",
    )
    _store(sqlite_unit_of_work, conflict)

    with sqlite_unit_of_work() as uow:
        listed = uow.repositories.conflicts.list_for_organization(ORG)
        other = uow.repositories.conflicts.list_for_organization("org-2")

    (stored,) = listed
    assert stored.kind is ConflictKind.PHONE_MC_MISMATCH
    assert other == []


def test_verification_cache_round_trip(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    older = VerificationRecord(
        mc_number="778899",
        dot_number="1234567",
        snapshot=make_snapshot(),
        risk_level=RiskLevel.LOW,
        risk_score=100,
        verified_at=CALL_DATE - timedelta(days=2),
        expires_at=CALL_DATE - timedelta(days=1),
    )
    newer = VerificationRecord(
        mc_number="778899",
        dot_number="1234567",
        snapshot=make_snapshot(vehicle_oos_rate=25.0),
        risk_level=RiskLevel.LOW,
        risk_score=95,
        warnings=[
            VerificationWarning(
                severity=WarningSeverity.INFO,
                message="Vehicle OOS rate above average",
                field="vehicle_oos_rate",
            )
        ],
        verified_at=CALL_DATE,
        expires_at=CALL_DATE + timedelta(days=1),
    )
    _store(sqlite_unit_of_work, older, newer)

    with sqlite_unit_of_work() as uow:
        by_mc = uow.repositories.verifications.latest_for(mc_number="778899")
        by_dot = uow.repositories.verifications.latest_for(dot_number="1234567")
        unknown = uow.repositories.verifications.latest_for(mc_number="111111")

    assert by_mc is not None
    assert by_mc.id == newer.id
    assert by_mc.snapshot == newer.snapshot
    assert by_mc.warnings == newer.warnings
    assert by_mc.expires_at == CALL_DATE + timedelta(days=1)
    assert by_dot is not None
    assert by_dot.id == newer.id
    assert unknown is None
