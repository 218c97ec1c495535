"""Public domain model surface."""

from __future__ import annotations

from dd2planner.domain.model.builds import DEFAULT_BUILD_COLOR, SLOT_POSITIONS, Build, BuildSlot
from dd2planner.domain.model.entities import (
    NO_DESCRIPTION,
    PLACEHOLDER_URL,
    PLACEHOLDERS,
    UNKNOWN_AUTHOR,
    UNKNOWN_DEFENSE,
    UNKNOWN_MOD,
    UNKNOWN_SHARD,
    UNKNOWN_SOURCE,
    UNKNOWN_TOWER,
    UNTITLED_LINK,
    Ability,
    Affinity,
    CatalogEntity,
    Defense,
    Mod,
    ResourceLink,
    Shard,
    ShardSource,
    Tower,
)
from dd2planner.domain.model.enums import BrowseSort, DocumentKind, EntityKind, ItemCategory
from dd2planner.domain.model.hero import Hero
from dd2planner.domain.model.registry import Registry

__all__ = [  # noqa: RUF022
    # entities
    "Ability",
    "Affinity",
    "CatalogEntity",
    "Defense",
    "Hero",
    "Mod",
    "ResourceLink",
    "Shard",
    "ShardSource",
    "Tower",
    # aggregates
    "Build",
    "BuildSlot",
    "Registry",
    # enums
    "BrowseSort",
    "DocumentKind",
    "EntityKind",
    "ItemCategory",
    # constants
    "NO_DESCRIPTION",
    "PLACEHOLDERS",
    "PLACEHOLDER_URL",
    "DEFAULT_BUILD_COLOR",
    "SLOT_POSITIONS",
    "UNKNOWN_AUTHOR",
    "UNKNOWN_DEFENSE",
    "UNKNOWN_MOD",
    "UNKNOWN_SHARD",
    "UNKNOWN_SOURCE",
    "UNKNOWN_TOWER",
    "UNTITLED_LINK",
]
