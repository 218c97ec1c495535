"""Canonical catalog entities produced by the normalizers.

Entities are plain mutable dataclasses. Fields whose values are derived
(``hero_id``) are recomputed from raw input at normalization time and are never
read back from a persisted snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Final

from .enums import EntityKind

UNKNOWN_SOURCE: Final[str] = "Unknown"
NO_DESCRIPTION: Final[str] = "No description"
UNKNOWN_SHARD: Final[str] = "Unknown Shard"
UNKNOWN_MOD: Final[str] = "Unknown Mod"
UNKNOWN_DEFENSE: Final[str] = "Unknown Defense"
UNKNOWN_TOWER: Final[str] = "Unknown Tower"
UNKNOWN_AUTHOR: Final[str] = "Unknown"
UNTITLED_LINK: Final[str] = "Untitled"
PLACEHOLDER_URL: Final[str] = "#"

# Literal fallbacks the normalizers substitute for missing input. The reconciler
# treats them like empty values so they never overwrite real data.
PLACEHOLDERS: Final[frozenset[str]] = frozenset(
    {
        UNKNOWN_SOURCE,
        NO_DESCRIPTION,
        UNKNOWN_SHARD,
        UNKNOWN_MOD,
        UNKNOWN_DEFENSE,
        UNKNOWN_TOWER,
        UNKNOWN_AUTHOR,
        UNTITLED_LINK,
        PLACEHOLDER_URL,
    }
)

# Field metadata flag: merge mapping values key by key instead of as one value.
MERGE_KEYS: Final[dict[str, bool]] = {"merge_keys": True}


def derived_from(source: str) -> dict[str, str]:
    """Field metadata: the value is computed from ``source`` and merges along with it."""

    return {"derived_from": source}


@dataclass(frozen=True, slots=True)
class ShardSource:
    """Structured drop source of a shard (difficulty tier plus its icon)."""

    difficulty: str
    difficulty_icon: str | None = None


@dataclass(frozen=True, slots=True)
class Affinity:
    """One hero entry from a shard record: who can use it and in which slot."""

    name: str
    slot: str | None = None
    tier_label: str | None = None
    image: str | None = None


@dataclass(slots=True, kw_only=True)
class Shard:
    KIND: ClassVar[EntityKind] = EntityKind.SHARD

    id: str
    name: str
    description: str = NO_DESCRIPTION
    source: str | ShardSource = UNKNOWN_SOURCE
    compatible_slots: list[str] = field(default_factory=list[str])
    icon_url: str | None = None
    hero_id: str | None = field(default=None, metadata=derived_from("affinities"))
    affinities: list[Affinity] = field(default_factory=list[Affinity])
    upgrade_levels: Any = None

    @property
    def hero_label(self) -> str | None:
        return self.affinities[0].name if self.affinities else None


@dataclass(slots=True, kw_only=True)
class Mod:
    KIND: ClassVar[EntityKind] = EntityKind.MOD

    id: str
    name: str
    description: str = NO_DESCRIPTION
    source: str = UNKNOWN_SOURCE
    kind: str = "Any"
    compatible_slots: list[str] = field(default_factory=list[str])
    hero_name: str | None = None
    hero_id: str | None = field(default=None, metadata=derived_from("hero_name"))
    icon_url: str | None = None

    @property
    def hero_label(self) -> str | None:
        return self.hero_name


@dataclass(slots=True, kw_only=True)
class Defense:
    """Defensive unit; every game stat is carried opaquely in ``attributes``."""

    KIND: ClassVar[EntityKind] = EntityKind.DEFENSE

    name: str
    hero: str = ""
    icon_url: str | None = None
    hero_id: str | None = field(default=None, metadata=derived_from("hero"))
    attributes: dict[str, Any] = field(default_factory=dict[str, Any], metadata=MERGE_KEYS)

    @property
    def hero_label(self) -> str | None:
        return self.hero or None


@dataclass(slots=True, kw_only=True)
class Tower:
    """Buildable tower derived from a defensive-unit record."""

    KIND: ClassVar[EntityKind] = EntityKind.TOWER

    id: str
    name: str
    du_cost: int = 0
    hero_id: str | None = None
    icon_url: str | None = None
    stats: dict[str, Any] = field(default_factory=dict[str, Any], metadata=MERGE_KEYS)

    @property
    def hero_label(self) -> str | None:
        return None


@dataclass(slots=True, kw_only=True)
class ResourceLink:
    KIND: ClassVar[EntityKind] = EntityKind.LINK

    author: str = UNKNOWN_AUTHOR
    name: str = UNTITLED_LINK
    description: str = NO_DESCRIPTION
    url: str = PLACEHOLDER_URL


@dataclass(slots=True, kw_only=True)
class Ability:
    """Hero ability reference data. Replaced wholesale, never merged."""

    KIND: ClassVar[EntityKind] = EntityKind.ABILITY

    name: str
    heroes: list[str] = field(default_factory=list[str])
    icon_url: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict[str, Any])


type CatalogEntity = Shard | Mod | Defense | Tower | ResourceLink
