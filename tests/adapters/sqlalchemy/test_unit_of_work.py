from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import inspect

from carrierbase.adapters.sqlalchemy import Database, SqlAlchemyUnitOfWork, StartupError
from carrierbase.domain.errors import DuplicateKeyError
from carrierbase.domain.model import Carrier, EquipmentType
from tests.helpers.registry import CALL_DATE, ORG

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine


def test_database_requires_startup(sqlite_engine: Engine) -> None:
    database = Database(sqlite_engine)

    assert not database.is_started
    with pytest.raises(StartupError):
        database.unit_of_work()


def test_startup_creates_schema(database: Database) -> None:
    tables = set(inspect(database.engine).get_table_names())

    assert {
        "carrier",
        "load",
        "carrier_call_interaction",
        "carrier_conflict",
        "carrier_verification",
        "alembic_version",
    } <= tables


def test_repositories_outside_context_raise() -> None:
    uow = SqlAlchemyUnitOfWork(session_factory=lambda: None)  # type: ignore[arg-type]

    with pytest.raises(StartupError):
        _ = uow.repositories


def test_unit_of_work_persists_carrier(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    carrier = Carrier(
        organization_id=ORG,
        name="Acme Trucking",
        mc_number="778899",
        phone="5552013456",
        equipment_types={EquipmentType.REEFER, EquipmentType.DRY_VAN},
        preferred_lanes={"TX-CA"},
        first_contact_date=CALL_DATE,
    )

    with sqlite_unit_of_work() as uow:
        uow.repositories.carriers.add(carrier)
        uow.commit()

    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.carriers.get(carrier.id)

    assert stored is not None
    assert stored.name == "Acme Trucking"
    assert stored.equipment_types == {EquipmentType.DRY_VAN, EquipmentType.REEFER}
    assert stored.preferred_lanes == {"TX-CA"}
    assert stored.first_contact_date == CALL_DATE


def test_unit_of_work_rolls_back_without_commit(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    carrier = Carrier(organization_id=ORG, mc_number="778899")

    with sqlite_unit_of_work() as uow:
        uow.repositories.carriers.add(carrier)

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.carriers.get(carrier.id) is None


def test_duplicate_mc_in_organization_raises_duplicate_key(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.carriers.add(Carrier(organization_id=ORG, mc_number="778899"))
        uow.commit()

    with sqlite_unit_of_work() as uow:
        uow.repositories.carriers.add(Carrier(organization_id=ORG, mc_number="778899"))
        with pytest.raises(DuplicateKeyError):
            uow.commit()

    with sqlite_unit_of_work() as uow:
        uow.repositories.carriers.add(Carrier(organization_id="org-2", mc_number="778899"))
        uow.commit()


def test_carriers_without_mc_do_not_collide(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.carriers.add(Carrier(organization_id=ORG, phone="5550000001"))
        uow.repositories.carriers.add(Carrier(organization_id=ORG, phone="5550000002"))
        uow.commit()
