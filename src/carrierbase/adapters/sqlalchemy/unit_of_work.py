"""SQLAlchemy database handle and unit of work for the carrier registry."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from carrierbase.adapters.sqlalchemy.mappings import start_mappers
from carrierbase.adapters.sqlalchemy.migrations import upgrade_head
from carrierbase.adapters.sqlalchemy.repositories import (
    SqlAlchemyCarrierRepository,
    SqlAlchemyConflictRepository,
    SqlAlchemyInteractionLog,
    SqlAlchemyLoadRepository,
    SqlAlchemyVerificationRepository,
)
from carrierbase.domain.errors import DuplicateKeyError, PersistenceError
from carrierbase.domain.ports.unit_of_work import RegistryRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when the database is used before :meth:`Database.startup`."""


class Database:
    """Owns the engine and session factory for one registry database."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._session_factory: sessionmaker[Session] | None = None

    @classmethod
    def from_uri(cls, database_uri: str) -> Database:
        return cls(create_engine(database_uri, future=True))

    def startup(self) -> Database:
        """Configure mappers and bring the schema to the latest revision."""

        start_mappers()
        upgrade_head(engine=self.engine)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self

    @property
    def is_started(self) -> bool:
        return self._session_factory is not None

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._session_factory is None:
            raise StartupError("Database not initialised. Call Database.startup() first.")
        return self._session_factory

    def unit_of_work(self) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(self.session_factory)

    def dispose(self) -> None:
        self.engine.dispose()
        self._session_factory = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        self._repositories = None
        return False

    def commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateKeyError(f"Unique constraint violated: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Commit failed: {exc}") from exc

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyUnitOfWork(BaseSqlAlchemyUnitOfWork[RegistryRepositories]):
    """Unit of work over all registry repositories."""

    def _build_repositories(self, session: Session) -> RegistryRepositories:
        return RegistryRepositories(
            carriers=SqlAlchemyCarrierRepository(session),
            loads=SqlAlchemyLoadRepository(session),
            interactions=SqlAlchemyInteractionLog(session),
            conflicts=SqlAlchemyConflictRepository(session),
            verifications=SqlAlchemyVerificationRepository(session),
        )


if TYPE_CHECKING:
    from carrierbase.domain.ports import RegistryUnitOfWork

    _uow_check: RegistryUnitOfWork = SqlAlchemyUnitOfWork(sessionmaker())
