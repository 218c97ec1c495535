"""Ports for persisting the registry snapshot."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal key-value contract: the registry is stored as one document under one key."""

    def get(self, key: str) -> str | None: ...

    def put(self, key: str, value: str) -> None: ...
