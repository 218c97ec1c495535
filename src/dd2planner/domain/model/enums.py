"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """Reconciled catalog collections; values double as snapshot collection names."""

    SHARD = "shards"
    MOD = "mods"
    DEFENSE = "defenses"
    TOWER = "towers"
    LINK = "links"
    ABILITY = "abilities"


class DocumentKind(StrEnum):
    """Classification outcome for one imported catalog document."""

    SHARDS = "shards"
    MODS = "mods"
    DEFENSES = "defenses"
    ABILITIES = "abilities"
    LINKS = "links"
    UNKNOWN = "unknown"


class ItemCategory(StrEnum):
    """Which item family a build slot position holds."""

    SHARD = "shards"
    MOD = "mods"


class BrowseSort(StrEnum):
    HERO = "hero"
    NAME = "name"
