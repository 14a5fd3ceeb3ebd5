"""SQLAlchemy-backed unit of work for the device inventory."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine, event
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.orm import Session, sessionmaker

from assetledger.adapters.sqlalchemy.mappings import start_mappers
from assetledger.adapters.sqlalchemy.migrations import upgrade_head
from assetledger.adapters.sqlalchemy.repositories import (
    SqlAlchemyArchiveRepository,
    SqlAlchemyAuditLogRepository,
    SqlAlchemyDeviceRepository,
)
from assetledger.config import get_database_config
from assetledger.domain.errors import PersistenceError, PersistenceErrorKind, StoreUnavailableError
from assetledger.domain.ports.unit_of_work import InventoryRepositories, RepositoryCollection

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import SessionTransaction

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call assetledger.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def translate_error(exc: SQLAlchemyError) -> PersistenceError:
    """Map a driver/ORM failure onto the inventory error taxonomy."""

    if isinstance(exc, IntegrityError):
        return PersistenceError(
            f"Constraint violated: {exc.orig}", kind=PersistenceErrorKind.CONFLICT
        )
    if isinstance(exc, OperationalError | InterfaceError | DisconnectionError):
        return StoreUnavailableError(f"Store unavailable: {exc}")
    return PersistenceError(f"Store error: {exc}")


def _sqlite_on_connect(dbapi_connection: Any, connection_record: Any) -> None:
    _ = connection_record
    dbapi_connection.isolation_level = None


def _sqlite_on_begin(connection: Any) -> None:
    connection.exec_driver_sql("BEGIN")


def enable_sqlite_savepoints(engine: Engine) -> None:
    """Let SQLAlchemy, not pysqlite, emit BEGIN so SAVEPOINT behaves."""

    if event.contains(engine, "begin", _sqlite_on_begin):
        return
    event.listen(engine, "connect", _sqlite_on_connect)
    event.listen(engine, "begin", _sqlite_on_begin)


def build_engine(database_uri: str | None = None) -> Engine:
    config = get_database_config()
    if database_uri is not None:
        config = replace(config, uri=database_uri)
    connect_args: dict[str, Any] = {}
    if config.is_sqlite:
        connect_args["timeout"] = config.busy_timeout_seconds
    return create_engine(config.uri, future=True, connect_args=connect_args)


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, metadata, and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or build_engine(database_uri)
    if resolved_engine.dialect.name == "sqlite":
        enable_sqlite_savepoints(resolved_engine)
    start_mappers()
    upgrade_head(engine=resolved_engine)
    _STATE.engine = resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections.

    ``SQLAlchemyError`` raised inside the ``with`` block is rolled back and re-raised as
    a ``PersistenceError``.
    """

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

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
        try:
            if exc_type is not None:
                self.rollback()
        finally:
            self.session.close()
            self.session = None
        if isinstance(exc_value, SQLAlchemyError):
            raise translate_error(exc_value) from exc_value
        return False

    @contextmanager
    def savepoint(self) -> Iterator[None]:
        nested = self.session.begin_nested()
        try:
            yield
            self.session.flush()
        except SQLAlchemyError as exc:
            _rollback_nested(nested)
            raise translate_error(exc) from exc
        except Exception:
            _rollback_nested(nested)
            raise
        nested.commit()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
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


def _rollback_nested(nested: SessionTransaction) -> None:
    if nested.is_active:
        nested.rollback()


class SqlAlchemyInventoryUnitOfWork(BaseSqlAlchemyUnitOfWork[InventoryRepositories]):
    """Unit of work managing SQLAlchemy sessions for devices, archives and audit entries."""

    def _build_repositories(self, session: Session) -> InventoryRepositories:
        return InventoryRepositories(
            devices=SqlAlchemyDeviceRepository(session),
            archive=SqlAlchemyArchiveRepository(session),
            audit_log=SqlAlchemyAuditLogRepository(session),
        )


if TYPE_CHECKING:
    from assetledger.domain.ports.unit_of_work import InventoryUnitOfWork

    _uow_check: InventoryUnitOfWork = SqlAlchemyInventoryUnitOfWork()
