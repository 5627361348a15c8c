from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from aedsync.adapters.sqlalchemy import start_mappers
from aedsync.adapters.sqlalchemy.migrations import upgrade_head
from aedsync.adapters.sqlalchemy.run_store import SqlAlchemyRunStore
from aedsync.adapters.sqlalchemy.unit_of_work import shutdown, startup

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_run_store(sqlite_engine: Engine) -> Iterator[SqlAlchemyRunStore]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield SqlAlchemyRunStore()
    finally:
        shutdown()
