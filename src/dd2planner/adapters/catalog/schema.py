"""Pydantic models describing the raw catalog payloads.

Catalog documents are authored by different people and disagree on shape, so
every model here is lenient: unknown fields are ignored, blank strings become
``None`` and wrongly-typed values fall back to an empty default instead of
failing validation.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return None


def _list_or_empty(value: object) -> object:
    return value if isinstance(value, list) else []


def _mappings_only(value: object) -> object:
    if not isinstance(value, list):
        return []
    items = cast(list[object], value)
    return [item for item in items if isinstance(item, Mapping)]


def _mapping_or_text(value: object) -> object:
    if isinstance(value, Mapping):
        return value
    return _blank_to_none(value)


class CatalogBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class IconsPayload(CatalogBaseModel):
    plain: str | None = None

    _normalize_text = field_validator("plain", mode="before")(_blank_to_none)


class DescriptionPayload(CatalogBaseModel):
    text: str | None = None

    _normalize_text = field_validator("text", mode="before")(_blank_to_none)


class AffinityPayload(CatalogBaseModel):
    name: str | None = None
    slot: str | None = None
    tier_label: str | None = Field(
        default=None, validation_alias=AliasChoices("tierLabel", "tier_label", "tier")
    )
    image: str | None = None

    _normalize_text = field_validator("name", "slot", "tier_label", "image", mode="before")(
        _blank_to_none
    )


class ShardSourcePayload(CatalogBaseModel):
    difficulty: str | None = None
    difficulty_icon: str | None = Field(
        default=None, validation_alias=AliasChoices("difficultyIcon", "difficulty_icon")
    )

    _normalize_text = field_validator("difficulty", "difficulty_icon", mode="before")(
        _blank_to_none
    )


class ShardPayload(CatalogBaseModel):
    id: str | None = None
    name: str | None = None
    description: str | DescriptionPayload | None = None
    source: str | ShardSourcePayload | None = None
    compatible_slots: list[str] = Field(
        default_factory=list[str],
        validation_alias=AliasChoices("compatibleSlots", "compatible_slots"),
    )
    heroes: list[AffinityPayload] = Field(default_factory=list["AffinityPayload"])
    icon_url: str | None = Field(default=None, validation_alias=AliasChoices("iconUrl", "icon_url"))
    image: str | None = None
    upgrade_levels: Any = Field(
        default=None, validation_alias=AliasChoices("upgradeLevels", "upgrade_levels")
    )

    _normalize_text = field_validator("id", "name", "icon_url", "image", mode="before")(
        _blank_to_none
    )
    _normalize_structured = field_validator("description", "source", mode="before")(
        _mapping_or_text
    )
    _normalize_heroes = field_validator("heroes", mode="before")(_mappings_only)

    @field_validator("compatible_slots", mode="before")
    @classmethod
    def _normalize_slots(cls, value: object) -> list[str]:
        if not isinstance(value, list):
            return []
        slots: list[str] = []
        for item in cast(list[object], value):
            text = _blank_to_none(item)
            if isinstance(text, str):
                slots.append(text)
        return slots


class ModPayload(CatalogBaseModel):
    id: str | None = None
    name: str | None = None
    description: str | None = None
    type: str | None = None
    drop: str | None = None
    source: str | None = None
    hero: str | None = None
    image: str | None = None
    icon_url: str | None = Field(default=None, validation_alias=AliasChoices("iconUrl", "icon_url"))
    icons: IconsPayload | None = None

    _normalize_text = field_validator(
        "id",
        "name",
        "description",
        "type",
        "drop",
        "source",
        "hero",
        "image",
        "icon_url",
        mode="before",
    )(_blank_to_none)

    @field_validator("icons", mode="before")
    @classmethod
    def _normalize_icons(cls, value: object) -> object:
        return value if isinstance(value, Mapping) else None


class DefensePayload(CatalogBaseModel):
    """Only the fields the core interprets; every other stat passes through raw."""

    name: str | None = None
    hero: str | None = None
    hero_id: str | None = Field(default=None, validation_alias=AliasChoices("heroId", "hero_id"))
    image_url: str | None = None
    icon_url: str | None = Field(default=None, validation_alias=AliasChoices("iconUrl", "icon_url"))
    icons: IconsPayload | None = None
    defense_type: str | None = None
    base_def_power: str | None = None

    _normalize_text = field_validator(
        "name",
        "hero",
        "hero_id",
        "image_url",
        "icon_url",
        "defense_type",
        "base_def_power",
        mode="before",
    )(_blank_to_none)

    @field_validator("icons", mode="before")
    @classmethod
    def _normalize_icons(cls, value: object) -> object:
        return value if isinstance(value, Mapping) else None

    @property
    def hero_reference(self) -> str | None:
        return self.hero or self.hero_id

    @property
    def is_tower(self) -> bool:
        return self.defense_type == "Tower" or self.base_def_power is not None


class TowerPayload(CatalogBaseModel):
    """A tower as stored in a snapshot, or the defense record it is derived from."""

    id: str | None = None
    name: str | None = None
    material: str | None = None
    du_cost: int | None = Field(default=None, validation_alias=AliasChoices("duCost", "du_cost"))
    mana_cost: str | None = None
    hero: str | None = None
    hero_id: str | None = Field(default=None, validation_alias=AliasChoices("heroId", "hero_id"))
    image_url: str | None = None
    icon_url: str | None = Field(default=None, validation_alias=AliasChoices("iconUrl", "icon_url"))
    icons: IconsPayload | None = None
    stats: dict[str, Any] | None = None

    _normalize_text = field_validator(
        "id",
        "name",
        "material",
        "mana_cost",
        "hero",
        "hero_id",
        "image_url",
        "icon_url",
        mode="before",
    )(_blank_to_none)

    @field_validator("du_cost", mode="before")
    @classmethod
    def _normalize_du_cost(cls, value: object) -> int | None:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return None

    @field_validator("icons", "stats", mode="before")
    @classmethod
    def _mapping_or_none(cls, value: object) -> object:
        return value if isinstance(value, Mapping) else None

    @property
    def hero_reference(self) -> str | None:
        return self.hero or self.hero_id


class LinkPayload(CatalogBaseModel):
    author: str | None = None
    name: str | None = None
    description: str | None = None
    url: str | None = Field(default=None, validation_alias=AliasChoices("url", "link"))

    _normalize_text = field_validator("author", "name", "description", "url", mode="before")(
        _blank_to_none
    )


class AbilityPayload(CatalogBaseModel):
    name: str | None = None
    heroes: list[str] = Field(default_factory=list[str])
    icon_url: str | None = Field(default=None, validation_alias=AliasChoices("iconUrl", "icon_url"))

    _normalize_text = field_validator("name", "icon_url", mode="before")(_blank_to_none)

    @field_validator("heroes", mode="before")
    @classmethod
    def _normalize_heroes(cls, value: object) -> list[str]:
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list):
            return []
        return [item for item in cast(list[object], value) if isinstance(item, str)]


class BuildSlotPayload(CatalogBaseModel):
    shards: list[str | None] = Field(default_factory=list[str | None])
    mods: list[str | None] = Field(default_factory=list[str | None])

    @field_validator("shards", "mods", mode="before")
    @classmethod
    def _normalize_positions(cls, value: object) -> list[str | None]:
        if not isinstance(value, list):
            return []
        items = cast(list[object], value)
        return [item if isinstance(item, str) and item else None for item in items]


class BuildPayload(CatalogBaseModel):
    id: str
    name: str
    hero_id: str = Field(validation_alias=AliasChoices("heroId", "hero_id"))
    custom_color: str | None = Field(
        default=None, validation_alias=AliasChoices("customColor", "custom_color")
    )
    slots: dict[str, BuildSlotPayload] = Field(default_factory=dict[str, "BuildSlotPayload"])
    last_edited: int | None = Field(
        default=None, validation_alias=AliasChoices("lastEdited", "last_edited")
    )


class RegistrySnapshot(CatalogBaseModel):
    """Envelope of the persisted registry document.

    Collections are validated only as lists here; each record goes through the
    matching normalizer when the registry is rebuilt.
    """

    shards: list[Any] = Field(default_factory=list[Any])
    mods: list[Any] = Field(default_factory=list[Any])
    defenses: list[Any] = Field(default_factory=list[Any])
    towers: list[Any] = Field(default_factory=list[Any])
    links: list[Any] = Field(default_factory=list[Any])
    abilities: list[Any] = Field(default_factory=list[Any])
    builds: list[Any] = Field(default_factory=list[Any])
    checklists: list[Any] = Field(default_factory=list[Any])
    maps: list[Any] = Field(default_factory=list[Any])

    _normalize_lists = field_validator(
        "shards",
        "mods",
        "defenses",
        "towers",
        "links",
        "abilities",
        "builds",
        "checklists",
        "maps",
        mode="before",
    )(_list_or_empty)
