"""SQLAlchemy-backed key-value store holding the persisted registry snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, insert, select, update
from sqlalchemy.orm import Session, sessionmaker

from dd2planner.config import get_database_config

from .mappings import create_all_tables, kv_entry_table

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy store is used before initialisation."""


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
                "SQLAlchemy adapter not initialised. Call dd2planner.adapters.sqlalchemy."
                "store.startup() before opening a key-value store."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, tables, and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_engine(
        database_uri or get_database_config().uri, future=True
    )
    create_all_tables(resolved_engine)
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


class SqlAlchemyKeyValueStore:
    """String values keyed by string, one row per key.

    Each call runs in its own short-lived session and commits immediately.
    """

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory

    def get(self, key: str) -> str | None:
        with self.session_factory() as session:
            stmt = select(kv_entry_table.c.value).where(kv_entry_table.c.key == key)
            return session.execute(stmt).scalar_one_or_none()

    def put(self, key: str, value: str) -> None:
        now = datetime.now(tz=UTC)
        with self.session_factory() as session, session.begin():
            exists = session.execute(
                select(kv_entry_table.c.key).where(kv_entry_table.c.key == key)
            ).scalar_one_or_none()
            if exists is None:
                session.execute(insert(kv_entry_table).values(key=key, value=value, updated_at=now))
            else:
                session.execute(
                    update(kv_entry_table)
                    .where(kv_entry_table.c.key == key)
                    .values(value=value, updated_at=now)
                )
        log.debug("Stored %s characters under %r", len(value), key)

    def updated_at(self, key: str) -> datetime | None:
        with self.session_factory() as session:
            stmt = select(kv_entry_table.c.updated_at).where(kv_entry_table.c.key == key)
            return session.execute(stmt).scalar_one_or_none()
