from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from dd2planner.adapters.sqlalchemy import create_all_tables, shutdown
from dd2planner.domain.identities import DEFAULT_HEROES
from dd2planner.domain.model import Hero, Registry
from tests.helpers.catalog import InMemoryKeyValueStore, make_context

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator

    from dd2planner.domain.context import RegistryContext


@pytest.fixture
def heroes() -> tuple[Hero, ...]:
    return DEFAULT_HEROES


@pytest.fixture
def registry() -> Registry:
    return Registry(heroes=DEFAULT_HEROES)


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def memory_context(registry: Registry, memory_store: InMemoryKeyValueStore) -> RegistryContext:
    return make_context(registry, memory_store)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def reset_store_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()
