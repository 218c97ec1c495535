"""The registry aggregate: one collection per entity kind plus the hero catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .enums import EntityKind

if TYPE_CHECKING:
    from .builds import Build
    from .entities import Ability, Defense, Mod, ResourceLink, Shard, Tower
    from .hero import Hero


@dataclass(slots=True, kw_only=True)
class Registry:
    """In-memory unit of persistence.

    ``checklists`` and ``maps`` are user-authored payloads the core stores and
    persists without interpreting.
    """

    heroes: tuple[Hero, ...]
    shards: list[Shard] = field(default_factory=list["Shard"])
    mods: list[Mod] = field(default_factory=list["Mod"])
    defenses: list[Defense] = field(default_factory=list["Defense"])
    towers: list[Tower] = field(default_factory=list["Tower"])
    links: list[ResourceLink] = field(default_factory=list["ResourceLink"])
    abilities: list[Ability] = field(default_factory=list["Ability"])
    builds: list[Build] = field(default_factory=list["Build"])
    checklists: list[dict[str, Any]] = field(default_factory=list[dict[str, Any]])
    maps: list[dict[str, Any]] = field(default_factory=list[dict[str, Any]])

    def collection(self, kind: EntityKind) -> list[Any]:
        return getattr(self, kind.value)

    def replace_collection(self, kind: EntityKind, entities: list[Any]) -> None:
        setattr(self, kind.value, entities)

    def hero_by_id(self, hero_id: str) -> Hero | None:
        return next((hero for hero in self.heroes if hero.id == hero_id), None)

    def build_by_id(self, build_id: str) -> Build | None:
        return next((build for build in self.builds if build.id == build_id), None)
