from __future__ import annotations

import os
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from assetledger.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyInventoryUnitOfWork,
    shutdown,
    startup,
)
from assetledger.adapters.validation import DefaultSanitizer
from assetledger.domain.inventory import DeviceInventory
from assetledger.domain.lifecycle import DeviceLifecycle
from assetledger.domain.session import ApplicationSession, SessionContext
from tests.helpers.clock import FrozenClock
from tests.helpers.session import TEST_ACTOR, TEST_SESSION_ID

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2025, 3, 1, 9, 30, tzinfo=UTC))


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyInventoryUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyInventoryUnitOfWork:
        return SqlAlchemyInventoryUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def session_context() -> SessionContext:
    return SessionContext(
        application=ApplicationSession(session_id=TEST_SESSION_ID),
        current_actor=lambda: TEST_ACTOR,
    )


@pytest.fixture
def lifecycle(
    sqlite_unit_of_work: Callable[[], SqlAlchemyInventoryUnitOfWork],
    session_context: SessionContext,
    clock: FrozenClock,
) -> DeviceLifecycle:
    return DeviceLifecycle(
        unit_of_work_factory=sqlite_unit_of_work,
        context=session_context,
        clock=clock,
    )


@pytest.fixture
def inventory(
    lifecycle: DeviceLifecycle,
    sqlite_unit_of_work: Callable[[], SqlAlchemyInventoryUnitOfWork],
) -> DeviceInventory:
    return DeviceInventory(
        lifecycle=lifecycle,
        unit_of_work_factory=sqlite_unit_of_work,
        sanitizer=DefaultSanitizer(),
    )
