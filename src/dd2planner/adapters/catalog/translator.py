"""Translate raw catalog records into canonical domain entities.

Every ``normalize_*`` function is total: whatever the record looks like, an
entity comes back. Missing fields get the placeholder literals from
``dd2planner.domain.model`` and hero references that cannot be resolved stay
``None``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from pydantic import ValidationError

from dd2planner.domain.identities import resolve_hero_id
from dd2planner.domain.model import (
    NO_DESCRIPTION,
    PLACEHOLDER_URL,
    UNKNOWN_AUTHOR,
    UNKNOWN_DEFENSE,
    UNKNOWN_MOD,
    UNKNOWN_SHARD,
    UNKNOWN_SOURCE,
    UNKNOWN_TOWER,
    UNTITLED_LINK,
    Ability,
    Affinity,
    Defense,
    Mod,
    ResourceLink,
    Shard,
    ShardSource,
    Tower,
)

from .schema import (
    AbilityPayload,
    CatalogBaseModel,
    DefensePayload,
    DescriptionPayload,
    LinkPayload,
    ModPayload,
    ShardPayload,
    TowerPayload,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from dd2planner.domain.model import Hero

log = getLogger(__name__)

DEFAULT_SHARD_SLOTS: Final[tuple[str, ...]] = (
    "relic",
    "weapon",
    "helmet",
    "chest",
    "gloves",
    "boots",
)
MOD_SLOTS_BY_KIND: Final[dict[str, tuple[str, ...]]] = {
    "weapon": ("weapon", "weapon1", "weapon2"),
    "relic": ("relic",),
    "armor": ("helmet", "chest", "gloves", "boots"),
}
DEFAULT_MOD_SLOTS: Final[tuple[str, ...]] = ("relic",)
DEFAULT_MOD_KIND: Final[str] = "Any"
UNKNOWN_ABILITY: Final[str] = "Unknown Ability"

# Raw defense fields the core derives itself; everything else is kept verbatim.
_DEFENSE_DERIVED_FIELDS: Final[frozenset[str]] = frozenset({"name", "hero", "heroId", "iconUrl"})
_ABILITY_CORE_FIELDS: Final[frozenset[str]] = frozenset({"name", "heroes", "iconUrl"})

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def slugify(text: str) -> str:
    slug = _SLUG_SEPARATORS.sub("-", text.lower()).strip("-")
    return slug or "item"


def parse_leading_int(value: str | None) -> int:
    """Parse the integer a value starts with (``"40 DU"`` -> 40); 0 when there is none."""

    if value is None:
        return 0
    found = _LEADING_INT.match(value)
    return int(found.group(1)) if found else 0


def _validate[TPayload: CatalogBaseModel](model: type[TPayload], raw: object) -> TPayload:
    if isinstance(raw, model):
        return raw
    if not isinstance(raw, Mapping):
        log.warning(
            "Ignoring non-object %s record of type %s", model.__name__, type(raw).__name__
        )
        return model()
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        log.warning(
            "Invalid %s record %r, using placeholders: %s",
            model.__name__,
            raw.get("name"),  # pyright: ignore[reportUnknownMemberType]
            exc.errors(include_url=False),
        )
        return model()


def _lower_unique(slots: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(slot.strip().lower() for slot in slots if slot.strip()))


def _raw_fields(raw: object, *, exclude: frozenset[str]) -> dict[str, Any]:
    if not isinstance(raw, Mapping):
        return {}
    return {
        str(key): value
        for key, value in raw.items()  # pyright: ignore[reportUnknownVariableType]
        if key not in exclude
    }


def normalize_shard(raw: object, heroes: Sequence[Hero]) -> Shard:
    payload = _validate(ShardPayload, raw)

    affinities = [
        Affinity(name=entry.name, slot=entry.slot, tier_label=entry.tier_label, image=entry.image)
        for entry in payload.heroes
        if entry.name
    ]
    first_entry = payload.heroes[0] if payload.heroes else None
    hero_name = affinities[0].name if affinities else None

    slots = (
        payload.compatible_slots
        or [entry.slot for entry in payload.heroes if entry.slot]
        or list(DEFAULT_SHARD_SLOTS)
    )

    source: str | ShardSource
    if isinstance(payload.source, str):
        source = payload.source
    elif payload.source is not None and (
        payload.source.difficulty or payload.source.difficulty_icon
    ):
        source = ShardSource(
            difficulty=payload.source.difficulty or UNKNOWN_SOURCE,
            difficulty_icon=payload.source.difficulty_icon,
        )
    else:
        source = UNKNOWN_SOURCE

    if isinstance(payload.description, DescriptionPayload):
        description = payload.description.text or NO_DESCRIPTION
    else:
        description = payload.description or NO_DESCRIPTION

    return Shard(
        id=payload.id or f"s_{slugify(payload.name or 'shard')}",
        name=payload.name or UNKNOWN_SHARD,
        description=description,
        source=source,
        compatible_slots=_lower_unique(slots),
        icon_url=(first_entry.image if first_entry else None) or payload.icon_url or payload.image,
        hero_id=resolve_hero_id(hero_name, heroes),
        affinities=affinities,
        upgrade_levels=payload.upgrade_levels,
    )


def normalize_mod(raw: object, heroes: Sequence[Hero]) -> Mod:
    payload = _validate(ModPayload, raw)
    kind = payload.type or DEFAULT_MOD_KIND
    slots = MOD_SLOTS_BY_KIND.get(kind.casefold(), DEFAULT_MOD_SLOTS)

    return Mod(
        id=payload.id or f"m_{slugify(payload.name or 'mod')}",
        name=payload.name or UNKNOWN_MOD,
        description=payload.description or NO_DESCRIPTION,
        source=payload.drop or payload.source or UNKNOWN_SOURCE,
        kind=kind,
        compatible_slots=list(slots),
        hero_name=payload.hero,
        hero_id=resolve_hero_id(payload.hero, heroes),
        icon_url=payload.image
        or payload.icon_url
        or (payload.icons.plain if payload.icons else None),
    )


def normalize_defense(raw: object, heroes: Sequence[Hero]) -> Defense:
    payload = _validate(DefensePayload, raw)
    hero_reference = payload.hero_reference

    return Defense(
        name=payload.name or UNKNOWN_DEFENSE,
        hero=hero_reference or "",
        icon_url=payload.image_url
        or payload.icon_url
        or (payload.icons.plain if payload.icons else None),
        hero_id=resolve_hero_id(hero_reference, heroes),
        attributes=_raw_fields(raw, exclude=_DEFENSE_DERIVED_FIELDS),
    )


def is_tower_record(raw: object) -> bool:
    """Whether a defense record describes a buildable tower."""

    return _validate(DefensePayload, raw).is_tower


def normalize_tower(raw: object, heroes: Sequence[Hero]) -> Tower:
    """Build a tower from a defense record or from a stored tower entry."""

    payload = _validate(TowerPayload, raw)
    name = payload.name or payload.material or UNKNOWN_TOWER
    du_cost = payload.du_cost
    if du_cost is None:
        du_cost = parse_leading_int(payload.mana_cost)
    stats = payload.stats if payload.stats is not None else _raw_fields(raw, exclude=frozenset())

    return Tower(
        id=payload.id or f"t_{slugify(name)}",
        name=name,
        du_cost=du_cost,
        hero_id=resolve_hero_id(payload.hero_reference, heroes),
        icon_url=payload.image_url
        or payload.icon_url
        or (payload.icons.plain if payload.icons else None),
        stats=stats,
    )


def normalize_link(raw: object) -> ResourceLink:
    payload = _validate(LinkPayload, raw)
    return ResourceLink(
        author=payload.author or UNKNOWN_AUTHOR,
        name=payload.name or UNTITLED_LINK,
        description=payload.description or NO_DESCRIPTION,
        url=payload.url or PLACEHOLDER_URL,
    )


def normalize_ability(raw: object) -> Ability:
    payload = _validate(AbilityPayload, raw)
    return Ability(
        name=payload.name or UNKNOWN_ABILITY,
        heroes=list(payload.heroes),
        icon_url=payload.icon_url,
        attributes=_raw_fields(raw, exclude=_ABILITY_CORE_FIELDS),
    )


def normalize_shards(records: Iterable[object], heroes: Sequence[Hero]) -> list[Shard]:
    return [normalize_shard(record, heroes) for record in records]


def normalize_mods(records: Iterable[object], heroes: Sequence[Hero]) -> list[Mod]:
    return [normalize_mod(record, heroes) for record in records]


def normalize_defenses(records: Iterable[object], heroes: Sequence[Hero]) -> list[Defense]:
    return [normalize_defense(record, heroes) for record in records]


def derive_towers(records: Iterable[object], heroes: Sequence[Hero]) -> list[Tower]:
    """Towers for the defense records that describe one."""

    return [normalize_tower(record, heroes) for record in records if is_tower_record(record)]


def normalize_links(records: Iterable[object]) -> list[ResourceLink]:
    return [normalize_link(record) for record in records]


def normalize_abilities(records: Iterable[object]) -> list[Ability]:
    return [normalize_ability(record) for record in records]
