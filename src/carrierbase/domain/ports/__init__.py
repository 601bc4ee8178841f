"""Domain ports (interfaces) for external systems."""

from __future__ import annotations

from .authority import AuthoritySource
from .persistence import (
    CarrierRepository,
    ConflictRepository,
    InteractionLog,
    LoadRepository,
    Repository,
    VerificationRepository,
)
from .unit_of_work import (
    RegistryRepositories,
    RegistryUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "AuthoritySource",
    "CarrierRepository",
    "ConflictRepository",
    "InteractionLog",
    "LoadRepository",
    "RegistryRepositories",
    "RegistryUnitOfWork",
    "Repository",
    "RepositoryCollection",
    "UnitOfWork",
    "VerificationRepository",
]
