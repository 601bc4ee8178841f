"""SQLAlchemy mapping metadata for the carrier registry model."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import Any, cast

from pydantic import TypeAdapter
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)

from carrierbase.domain.model import (
    AuthoritySnapshot,
    Carrier,
    CarrierCallInteraction,
    CarrierConflict,
    CarrierStatus,
    ConflictKind,
    EquipmentType,
    LoadRecord,
    RiskLevel,
    VerificationRecord,
    VerificationWarning,
)

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _load_json_list(value: str | None) -> list[Any]:
    if value is None:
        return []
    loaded = json.loads(value)
    if not isinstance(loaded, list):
        return []
    return cast(list[Any], loaded)


class EquipmentSetType(TypeDecorator[set[EquipmentType]]):
    impl = String
    cache_ok = True

    def process_bind_param(
        self, value: set[EquipmentType] | None, dialect: Dialect
    ) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(sorted(item.value for item in value))

    def process_result_value(self, value: str | None, dialect: Dialect) -> set[EquipmentType]:
        _ = dialect
        equipment: set[EquipmentType] = set()
        for item in _load_json_list(value):
            if isinstance(item, str):
                equipment.add(EquipmentType(item))
        return equipment


class StringSetType(TypeDecorator[set[str]]):
    impl = String
    cache_ok = True

    def process_bind_param(self, value: set[str] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(sorted(value))

    def process_result_value(self, value: str | None, dialect: Dialect) -> set[str]:
        _ = dialect
        return {item for item in _load_json_list(value) if isinstance(item, str)}


_SNAPSHOT_ADAPTER: TypeAdapter[AuthoritySnapshot] = TypeAdapter(AuthoritySnapshot)
_WARNINGS_ADAPTER: TypeAdapter[list[VerificationWarning]] = TypeAdapter(list[VerificationWarning])


class AuthoritySnapshotType(TypeDecorator[AuthoritySnapshot]):
    impl = JSON
    cache_ok = True

    def process_bind_param(
        self, value: AuthoritySnapshot | None, dialect: Dialect
    ) -> dict[str, Any] | None:
        _ = dialect
        if value is None:
            return None
        return cast(dict[str, Any], _SNAPSHOT_ADAPTER.dump_python(value, mode="json"))

    def process_result_value(
        self, value: dict[str, Any] | None, dialect: Dialect
    ) -> AuthoritySnapshot | None:
        _ = dialect
        if value is None:
            return None
        return _SNAPSHOT_ADAPTER.validate_python(value)


class WarningListType(TypeDecorator[list[VerificationWarning]]):
    impl = JSON
    cache_ok = True

    def process_bind_param(
        self, value: list[VerificationWarning] | None, dialect: Dialect
    ) -> list[Any] | None:
        _ = dialect
        if value is None:
            return None
        return cast(list[Any], _WARNINGS_ADAPTER.dump_python(value, mode="json"))

    def process_result_value(
        self, value: list[Any] | None, dialect: Dialect
    ) -> list[VerificationWarning]:
        _ = dialect
        if value is None:
            return []
        return _WARNINGS_ADAPTER.validate_python(value)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

carrier_table = Table(
    "carrier",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("organization_id", String, nullable=False),
    Column("name", String, nullable=False),
    Column("mc_number", String(16), nullable=True),
    Column("dot_number", String(16), nullable=True),
    Column("primary_contact", String, nullable=True),
    Column("phone", String(32), nullable=True),
    Column("alt_phone", String(32), nullable=True),
    Column("email", String, nullable=True),
    Column("driver_name", String, nullable=True),
    Column("driver_phone", String(32), nullable=True),
    Column("address", String, nullable=True),
    Column("city", String, nullable=True),
    Column("state", String(2), nullable=True),
    Column("zip_code", String(16), nullable=True),
    Column("equipment_types", EquipmentSetType, nullable=False),
    Column("preferred_lanes", StringSetType, nullable=False),
    Column("total_loads", Integer, nullable=False),
    Column("completed_loads", Integer, nullable=False),
    Column("cancelled_loads", Integer, nullable=False),
    Column("on_time_percentage", Integer, nullable=False),
    Column("average_rate", Float, nullable=True),
    Column("average_margin", Float, nullable=True),
    Column("lifetime_revenue", Float, nullable=False),
    Column("performance_score", Integer, nullable=True),
    Column("last_load_date", UTCDateTime, nullable=True),
    Column("statistics_updated_at", UTCDateTime, nullable=True),
    Column("first_contact_date", UTCDateTime, nullable=True),
    Column("last_contact_date", UTCDateTime, nullable=True),
    Column("last_used_date", UTCDateTime, nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
    Column("status", Enum(CarrierStatus, native_enum=False, length=16), nullable=False),
    Column("auto_created", Boolean, nullable=False),
    Column("source", String, nullable=True),
    Column("created_from_call_id", String, nullable=True),
    UniqueConstraint("organization_id", "mc_number"),
    Index("ix_carrier_organization_phone", "organization_id", "phone"),
    Index("ix_carrier_organization_dot_number", "organization_id", "dot_number"),
)

load_table = Table(
    "load",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("organization_id", String, nullable=False),
    Column("load_number", String, nullable=True),
    Column("reference_number", String, nullable=True),
    Column("status", String(32), nullable=False),
    Column(
        "carrier_id",
        UUIDColumnType,
        ForeignKey("carrier.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("rate_to_carrier", Float, nullable=True),
    Column("margin", Float, nullable=True),
    Column("equipment_type", String, nullable=True),
    Column("origin_state", String(2), nullable=True),
    Column("destination_state", String(2), nullable=True),
    Column("delivery_date", Date, nullable=True),
    Column("actual_delivery_date", Date, nullable=True),
    Column("driver_name", String, nullable=True),
    Column("driver_phone", String(32), nullable=True),
    Column("carrier_assigned_at", UTCDateTime, nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
    Index("ix_load_carrier_id", "carrier_id"),
    Index("ix_load_organization_reference", "organization_id", "reference_number"),
)

carrier_call_interaction_table = Table(
    "carrier_call_interaction",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "carrier_id",
        UUIDColumnType,
        ForeignKey("carrier.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("call_id", String, nullable=False),
    Column("call_date", UTCDateTime, nullable=False),
    Column("load_id", UUIDColumnType, nullable=True),
    Column("quoted_rate", Float, nullable=True),
    Column("available_date", Date, nullable=True),
    Column("equipment_mentioned", EquipmentSetType, nullable=False),
    Column("lanes_mentioned", StringSetType, nullable=False),
    Column("contact_name", String, nullable=True),
    Column("contact_phone", String(32), nullable=True),
    Column("confidence", Integer, nullable=False),
    Column("created_at", UTCDateTime, nullable=False),
    UniqueConstraint("carrier_id", "call_id"),
)

carrier_conflict_table = Table(
    "carrier_conflict",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("organization_id", String, nullable=False),
    Column("call_id", String, nullable=False),
    Column("kind", Enum(ConflictKind, native_enum=False, length=32), nullable=False),
    Column("message", String, nullable=False),
    Column("candidate_mc_number", String(16), nullable=True),
    Column("candidate_phone", String(32), nullable=True),
    Column("mc_match_id", UUIDColumnType, nullable=True),
    Column("phone_match_id", UUIDColumnType, nullable=True),
    Column("created_at", UTCDateTime, nullable=False),
    Index("ix_carrier_conflict_organization_id", "organization_id"),
)

carrier_verification_table = Table(
    "carrier_verification",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("mc_number", String(16), nullable=True),
    Column("dot_number", String(16), nullable=True),
    Column("carrier_id", UUIDColumnType, nullable=True),
    Column("snapshot", AuthoritySnapshotType, nullable=False),
    Column("risk_level", Enum(RiskLevel, native_enum=False, length=16), nullable=False),
    Column("risk_score", Integer, nullable=False),
    Column("warnings", WarningListType, nullable=False),
    Column("verified_at", UTCDateTime, nullable=False),
    Column("expires_at", UTCDateTime, nullable=False),
    Index("ix_carrier_verification_mc_number", "mc_number"),
    Index("ix_carrier_verification_dot_number", "dot_number"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the registry model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Carrier, carrier_table)
    mapper_registry.map_imperatively(LoadRecord, load_table)
    mapper_registry.map_imperatively(CarrierCallInteraction, carrier_call_interaction_table)
    mapper_registry.map_imperatively(CarrierConflict, carrier_conflict_table)
    mapper_registry.map_imperatively(VerificationRecord, carrier_verification_table)

    orm.configure_mappers()
    return mapper_registry
