from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from carrierbase.adapters.sqlalchemy import Database, SqlAlchemyUnitOfWork

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def database(sqlite_engine: Engine) -> Iterator[Database]:
    db = Database(sqlite_engine).startup()
    try:
        yield db
    finally:
        db.dispose()


@pytest.fixture
def sqlite_unit_of_work(database: Database) -> Callable[[], SqlAlchemyUnitOfWork]:
    return database.unit_of_work
