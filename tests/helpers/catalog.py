"""Builders and fakes shared by the catalog tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dd2planner.adapters.catalog import dumps_registry
from dd2planner.config import DEFAULT_SNAPSHOT_KEY
from dd2planner.domain.context import RegistryContext
from dd2planner.domain.model import Mod, Shard

if TYPE_CHECKING:
    from dd2planner.domain.model import Registry


@dataclass
class InMemoryKeyValueStore:
    values: dict[str, str] = field(default_factory=dict[str, str])
    writes: int = 0

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def put(self, key: str, value: str) -> None:
        self.values[key] = value
        self.writes += 1


def make_context(registry: Registry, store: InMemoryKeyValueStore) -> RegistryContext:
    return RegistryContext(
        registry=registry,
        store=store,
        snapshot_key=DEFAULT_SNAPSHOT_KEY,
        serialize=dumps_registry,
    )


def make_shard(
    name: str,
    *,
    slots: list[str] | None = None,
    hero_id: str | None = None,
    description: str = "No description",
    icon_url: str | None = None,
) -> Shard:
    return Shard(
        id=f"s_{name.lower().replace(' ', '-')}",
        name=name,
        description=description,
        compatible_slots=slots if slots is not None else ["relic"],
        hero_id=hero_id,
        icon_url=icon_url,
    )


def make_mod(
    name: str,
    *,
    slots: list[str] | None = None,
    hero_id: str | None = None,
) -> Mod:
    return Mod(
        id=f"m_{name.lower().replace(' ', '-')}",
        name=name,
        description="No description",
        compatible_slots=slots if slots is not None else ["relic"],
        hero_id=hero_id,
    )
