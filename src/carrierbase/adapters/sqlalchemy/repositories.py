"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy import String, or_, select, type_coerce
from sqlalchemy.exc import SQLAlchemyError

from carrierbase.adapters.sqlalchemy.mappings import (
    carrier_call_interaction_table,
    carrier_conflict_table,
    carrier_table,
    carrier_verification_table,
    load_table,
)
from carrierbase.domain.errors import LoadNotFoundError, PersistenceError
from carrierbase.domain.model import (
    Carrier,
    CarrierCallInteraction,
    CarrierConflict,
    LoadRecord,
    VerificationRecord,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from uuid import UUID

    from sqlalchemy.orm import Session

    from carrierbase.domain.model import EquipmentType, LoadLinkDetails


@contextmanager
def _translate_errors(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise PersistenceError(f"Failed to {action}: {exc}") from exc


def _json_member(value: str) -> str:
    # Set columns hold sorted JSON string arrays.
    return f'%"{value}"%'


class SqlAlchemyCarrierRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Carrier) -> None:
        self.session.add(entity)

    def get(self, carrier_id: UUID) -> Carrier | None:
        with _translate_errors(f"load carrier {carrier_id}"):
            return self.session.get(Carrier, carrier_id)

    def find_by_mc_number(self, organization_id: str, mc_number: str) -> Carrier | None:
        stmt = (
            select(Carrier)
            .where(carrier_table.c.organization_id == organization_id)
            .where(carrier_table.c.mc_number == mc_number)
            .limit(1)
        )
        with _translate_errors(f"look up MC {mc_number}"):
            return self.session.execute(stmt).scalar_one_or_none()

    def find_by_phone(
        self,
        organization_id: str,
        phone: str,
        *,
        exact: bool = False,
    ) -> list[Carrier]:
        if exact:
            condition = or_(carrier_table.c.phone == phone, carrier_table.c.alt_phone == phone)
        else:
            pattern = f"%{phone}%"
            condition = or_(
                carrier_table.c.phone.like(pattern),
                carrier_table.c.alt_phone.like(pattern),
            )
        stmt = (
            select(Carrier)
            .where(carrier_table.c.organization_id == organization_id)
            .where(condition)
            .order_by(carrier_table.c.created_at, carrier_table.c.id)
        )
        with _translate_errors(f"look up phone {phone}"):
            return list(self.session.execute(stmt).scalars())

    def search(
        self,
        organization_id: str,
        *,
        query: str | None = None,
        equipment: EquipmentType | None = None,
        lane: str | None = None,
        min_score: int | None = None,
        limit: int = 50,
    ) -> list[Carrier]:
        stmt = select(Carrier).where(carrier_table.c.organization_id == organization_id)
        if query:
            pattern = f"%{query.strip()}%"
            stmt = stmt.where(
                or_(
                    carrier_table.c.name.ilike(pattern),
                    carrier_table.c.mc_number.ilike(pattern),
                    carrier_table.c.dot_number.ilike(pattern),
                )
            )
        if equipment is not None:
            stmt = stmt.where(
                type_coerce(carrier_table.c.equipment_types, String).like(
                    _json_member(equipment.value)
                )
            )
        if lane:
            stmt = stmt.where(
                type_coerce(carrier_table.c.preferred_lanes, String).like(
                    _json_member(lane.upper())
                )
            )
        if min_score is not None:
            stmt = stmt.where(carrier_table.c.performance_score >= min_score)
        stmt = stmt.order_by(
            carrier_table.c.performance_score.desc().nulls_last(),
            carrier_table.c.name,
        ).limit(limit)
        with _translate_errors("search carriers"):
            return list(self.session.execute(stmt).scalars())


class SqlAlchemyLoadRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: LoadRecord) -> None:
        self.session.add(entity)

    def get(self, load_id: UUID) -> LoadRecord | None:
        with _translate_errors(f"load load {load_id}"):
            return self.session.get(LoadRecord, load_id)

    def find_by_reference(
        self, organization_id: str, references: Sequence[str]
    ) -> LoadRecord | None:
        if not references:
            return None
        stmt = (
            select(LoadRecord)
            .where(load_table.c.organization_id == organization_id)
            .where(
                or_(
                    load_table.c.reference_number.in_(references),
                    load_table.c.load_number.in_(references),
                )
            )
            .order_by(load_table.c.created_at)
            .limit(1)
        )
        with _translate_errors("look up load by reference"):
            return self.session.execute(stmt).scalars().first()

    def list_for_carrier(self, carrier_id: UUID) -> list[LoadRecord]:
        stmt = (
            select(LoadRecord)
            .where(load_table.c.carrier_id == carrier_id)
            .order_by(load_table.c.created_at, load_table.c.id)
        )
        with _translate_errors(f"list loads for carrier {carrier_id}"):
            return list(self.session.execute(stmt).scalars())

    def link_carrier(
        self, organization_id: str, load_id: UUID, details: LoadLinkDetails
    ) -> LoadRecord:
        load = self.get(load_id)
        if load is None or load.organization_id != organization_id:
            raise LoadNotFoundError(load_id)
        load.carrier_id = details.carrier_id
        load.carrier_assigned_at = details.assigned_at
        if details.rate_to_carrier is not None:
            load.rate_to_carrier = details.rate_to_carrier
        if details.driver_name:
            load.driver_name = details.driver_name
        if details.driver_phone:
            load.driver_phone = details.driver_phone
        with _translate_errors(f"link load {load_id}"):
            self.session.flush()
        return load


class SqlAlchemyInteractionLog:
    def __init__(self, session: Session) -> None:
        self.session = session

    def record(self, interaction: CarrierCallInteraction) -> bool:
        stmt = (
            select(carrier_call_interaction_table.c.id)
            .where(carrier_call_interaction_table.c.carrier_id == interaction.carrier_id)
            .where(carrier_call_interaction_table.c.call_id == interaction.call_id)
            .limit(1)
        )
        with _translate_errors(f"record interaction for call {interaction.call_id}"):
            if self.session.execute(stmt).scalar_one_or_none() is not None:
                return False
            self.session.add(interaction)
        return True

    def list_for_carrier(self, carrier_id: UUID) -> list[CarrierCallInteraction]:
        stmt = (
            select(CarrierCallInteraction)
            .where(carrier_call_interaction_table.c.carrier_id == carrier_id)
            .order_by(carrier_call_interaction_table.c.call_date)
        )
        with _translate_errors(f"list interactions for carrier {carrier_id}"):
            return list(self.session.execute(stmt).scalars())


class SqlAlchemyConflictRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: CarrierConflict) -> None:
        self.session.add(entity)

    def list_for_organization(self, organization_id: str) -> list[CarrierConflict]:
        stmt = (
            select(CarrierConflict)
            .where(carrier_conflict_table.c.organization_id == organization_id)
            .order_by(carrier_conflict_table.c.created_at)
        )
        with _translate_errors(f"list conflicts for {organization_id}"):
            return list(self.session.execute(stmt).scalars())


class SqlAlchemyVerificationRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: VerificationRecord) -> None:
        self.session.add(entity)

    def latest_for(
        self,
        *,
        mc_number: str | None = None,
        dot_number: str | None = None,
    ) -> VerificationRecord | None:
        if mc_number:
            condition = carrier_verification_table.c.mc_number == mc_number
        elif dot_number:
            condition = carrier_verification_table.c.dot_number == dot_number
        else:
            return None
        stmt = (
            select(VerificationRecord)
            .where(condition)
            .order_by(carrier_verification_table.c.verified_at.desc())
            .limit(1)
        )
        with _translate_errors("read verification cache"):
            return self.session.execute(stmt).scalars().first()
