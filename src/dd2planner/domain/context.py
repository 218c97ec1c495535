"""Explicitly owned registry state shared by the application services.

The registry has a single logical writer. :class:`RegistryContext` enforces that
by running every mutation, and the snapshot write that follows it, under one
lock, so concurrent importers are serialized and a half-merged registry is never
persisted.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from dd2planner.domain.model import Registry
    from dd2planner.domain.ports import KeyValueStore

log = getLogger(__name__)


@dataclass(slots=True)
class RegistryContext:
    registry: Registry
    store: KeyValueStore
    snapshot_key: str
    serialize: Callable[[Registry], str]
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @contextmanager
    def mutation(self) -> Iterator[Registry]:
        """Hold the writer lock while the caller mutates the registry, then persist.

        Nothing is written when the block raises.
        """

        with self._lock:
            yield self.registry
            self._persist()

    def snapshot(self) -> str:
        """Serialize the registry without racing a mutation in progress."""

        with self._lock:
            return self.serialize(self.registry)

    def _persist(self) -> None:
        document = self.serialize(self.registry)
        self.store.put(self.snapshot_key, document)
        log.debug(
            "Persisted registry snapshot under %r (%s bytes)", self.snapshot_key, len(document)
        )
