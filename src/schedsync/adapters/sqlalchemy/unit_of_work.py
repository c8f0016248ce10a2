"""SQLAlchemy-backed unit of work for the schedule store.

The adapter keeps one engine per process. ``startup`` migrates the schema and
binds a session factory; each unit of work opens one session, exposes a store
per entity kind on it, and commits only when the caller asks. Leaving the
block with an exception rolls back whatever the stores staged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from schedsync.adapters.sqlalchemy.mappings import TABLE_BY_KIND
from schedsync.adapters.sqlalchemy.migrations import upgrade_head
from schedsync.adapters.sqlalchemy.store import SqlAlchemyScheduleStore
from schedsync.config import get_database_config
from schedsync.domain.ports.unit_of_work import ScheduleRepositories
from schedsync.domain.sync.policy import EntityKind

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when the schedule store is used before ``startup()``."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    session_factory: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self.session_factory = (
            sessionmaker(bind=engine, expire_on_commit=False) if engine is not None else None
        )


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Create (or adopt) the engine, migrate it to head and bind sessions to it."""

    if _STATE.engine is not None and not force:
        raise StartupError("Schedule store already started. Pass force=True to reconfigure.")

    resolved_engine = engine or create_engine(
        database_uri or get_database_config().uri, future=True
    )
    upgrade_head(engine=resolved_engine)
    _STATE.bind(resolved_engine)


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the engine and forget it (mainly for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.bind(None)


class SqlAlchemyScheduleUnitOfWork:
    """One session, one store per entity kind, explicit commit."""

    def __init__(self) -> None:
        if _STATE.session_factory is None:
            raise StartupError(
                "Schedule store not started. Call schedsync.adapters.sqlalchemy."
                "unit_of_work.startup() before opening a unit of work."
            )
        self._session_factory = _STATE.session_factory
        self._session: Session | None = None
        self._repositories: ScheduleRepositories | None = None

    def __enter__(self) -> SqlAlchemyScheduleUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        self._session = self._session_factory()
        self._repositories = ScheduleRepositories(
            vendors=SqlAlchemyScheduleStore(self._session, TABLE_BY_KIND[EntityKind.VENDOR]),
            speakers=SqlAlchemyScheduleStore(self._session, TABLE_BY_KIND[EntityKind.SPEAKER]),
        )
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
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not open")
        return self._session

    @property
    def repositories(self) -> ScheduleRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not open")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from schedsync.domain.ports.unit_of_work import ScheduleUnitOfWork

    _uow_check: ScheduleUnitOfWork = SqlAlchemyScheduleUnitOfWork()
