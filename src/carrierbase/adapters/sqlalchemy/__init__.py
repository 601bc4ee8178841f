"""SQLAlchemy adapter package for the carrier registry."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyCarrierRepository,
    SqlAlchemyConflictRepository,
    SqlAlchemyInteractionLog,
    SqlAlchemyLoadRepository,
    SqlAlchemyVerificationRepository,
)
from .unit_of_work import Database, SqlAlchemyUnitOfWork, StartupError

__all__ = [
    "Database",
    "SqlAlchemyCarrierRepository",
    "SqlAlchemyConflictRepository",
    "SqlAlchemyInteractionLog",
    "SqlAlchemyLoadRepository",
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyVerificationRepository",
    "StartupError",
    "mapper_registry",
    "start_mappers",
]
