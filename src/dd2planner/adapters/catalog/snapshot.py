"""Registry snapshot codec and startup composition.

The snapshot is one JSON document keyed by collection name. Entities are written
in the same raw shape the normalizers read, and derived hero ids are left out:
loading a snapshot runs every record through its normalizer again so weak
references are always recomputed against the current hero catalog.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from functools import singledispatch
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from pydantic import ValidationError

from dd2planner.domain.identities import hero_name_for
from dd2planner.domain.model import (
    SLOT_POSITIONS,
    Ability,
    Build,
    BuildSlot,
    Defense,
    Mod,
    Registry,
    ResourceLink,
    Shard,
    ShardSource,
    Tower,
)
from dd2planner.domain.reconciliation import reconcile, replace_catalog

from .schema import BuildPayload, RegistrySnapshot
from .translator import (
    derive_towers,
    normalize_abilities,
    normalize_defenses,
    normalize_links,
    normalize_mods,
    normalize_shards,
    normalize_tower,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dd2planner.domain.model import Hero

    from .bundled import CatalogBundle

log = getLogger(__name__)

DEFAULT_MAPS: Final[tuple[dict[str, Any], ...]] = (
    {"id": "m1", "name": "The Gates of Dragonfall", "maxDU": 1000, "difficulty": "campaign"},
    {"id": "m2", "name": "Nimbus Reach", "maxDU": 1200, "difficulty": "chaos"},
)


def _compact(record: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in record.items() if value is not None}


@singledispatch
def dump_entity(entity: object, heroes: Sequence[Hero]) -> dict[str, Any]:
    raise TypeError(f"Cannot serialize {type(entity).__name__}")


@dump_entity.register(Shard)
def _(shard: Shard, _heroes: Sequence[Hero]) -> dict[str, Any]:
    source: str | dict[str, Any]
    if isinstance(shard.source, ShardSource):
        source = _compact(
            {"difficulty": shard.source.difficulty, "difficultyIcon": shard.source.difficulty_icon}
        )
    else:
        source = shard.source
    return _compact(
        {
            "id": shard.id,
            "name": shard.name,
            "description": shard.description,
            "source": source,
            "compatibleSlots": list(shard.compatible_slots),
            "iconUrl": shard.icon_url,
            "heroes": [
                _compact(
                    {
                        "name": affinity.name,
                        "slot": affinity.slot,
                        "tierLabel": affinity.tier_label,
                        "image": affinity.image,
                    }
                )
                for affinity in shard.affinities
            ],
            "upgradeLevels": shard.upgrade_levels,
        }
    )


@dump_entity.register(Mod)
def _(mod: Mod, _heroes: Sequence[Hero]) -> dict[str, Any]:
    return _compact(
        {
            "id": mod.id,
            "name": mod.name,
            "description": mod.description,
            "source": mod.source,
            "type": mod.kind,
            "hero": mod.hero_name,
            "iconUrl": mod.icon_url,
            "compatibleSlots": list(mod.compatible_slots),
        }
    )


@dump_entity.register(Defense)
def _(defense: Defense, _heroes: Sequence[Hero]) -> dict[str, Any]:
    return {
        **defense.attributes,
        **_compact({"name": defense.name, "hero": defense.hero, "iconUrl": defense.icon_url}),
    }


@dump_entity.register(Tower)
def _(tower: Tower, heroes: Sequence[Hero]) -> dict[str, Any]:
    return _compact(
        {
            "id": tower.id,
            "name": tower.name,
            "duCost": tower.du_cost,
            "hero": hero_name_for(tower.hero_id, heroes) or None,
            "iconUrl": tower.icon_url,
            "stats": dict(tower.stats),
        }
    )


@dump_entity.register(ResourceLink)
def _(link: ResourceLink, _heroes: Sequence[Hero]) -> dict[str, Any]:
    return {
        "author": link.author,
        "name": link.name,
        "description": link.description,
        "url": link.url,
    }


@dump_entity.register(Ability)
def _(ability: Ability, _heroes: Sequence[Hero]) -> dict[str, Any]:
    return {
        **ability.attributes,
        **_compact(
            {"name": ability.name, "heroes": list(ability.heroes), "iconUrl": ability.icon_url}
        ),
    }


def _dump_build(build: Build) -> dict[str, Any]:
    return {
        "id": build.id,
        "name": build.name,
        "heroId": build.hero_id,
        "customColor": build.custom_color,
        "slots": {
            slot_id: {"slotId": slot.slot_id, "shards": list(slot.shards), "mods": list(slot.mods)}
            for slot_id, slot in build.slots.items()
        },
        "lastEdited": int(build.last_edited.timestamp() * 1000),
    }


def dump_registry(registry: Registry) -> dict[str, Any]:
    """Render the whole registry as the persisted/exported document."""

    heroes = registry.heroes
    return {
        "heroes": [
            _compact(
                {
                    "id": hero.id,
                    "name": hero.name,
                    "class": hero.hero_class,
                    "roleTags": list(hero.role_tags),
                    "color": hero.color,
                    "iconUrl": hero.icon_url,
                    "equipmentSlots": list(hero.slots),
                }
            )
            for hero in heroes
        ],
        "shards": [dump_entity(shard, heroes) for shard in registry.shards],
        "mods": [dump_entity(mod, heroes) for mod in registry.mods],
        "defenses": [dump_entity(defense, heroes) for defense in registry.defenses],
        "towers": [dump_entity(tower, heroes) for tower in registry.towers],
        "links": [dump_entity(link, heroes) for link in registry.links],
        "abilities": [dump_entity(ability, heroes) for ability in registry.abilities],
        "builds": [_dump_build(build) for build in registry.builds],
        "checklists": list(registry.checklists),
        "maps": list(registry.maps),
    }


def dumps_registry(registry: Registry) -> str:
    return json.dumps(dump_registry(registry), ensure_ascii=False)


def load_snapshot(document: str | None) -> RegistrySnapshot | None:
    """Parse a persisted document; ``None`` when it is absent or malformed."""

    if document is None or not document.strip():
        return None
    try:
        return RegistrySnapshot.model_validate_json(document)
    except ValidationError as exc:
        log.warning(
            "Ignoring malformed registry snapshot, falling back to bundled data: %s",
            exc.errors(include_url=False)[:3],
        )
        return None


def _restore_builds(records: Sequence[Any], heroes: Sequence[Hero]) -> list[Build]:
    known_heroes = {hero.id for hero in heroes}
    builds: list[Build] = []
    for record in records:
        try:
            payload = BuildPayload.model_validate(record)
        except ValidationError:
            log.warning("Dropping unreadable build record %r", record)
            continue
        if payload.hero_id not in known_heroes:
            log.warning("Dropping build %s for unknown hero %s", payload.id, payload.hero_id)
            continue
        build = Build(
            id=payload.id,
            name=payload.name,
            hero_id=payload.hero_id,
            slots={
                slot_id: BuildSlot(
                    slot_id=slot_id,
                    shards=_positions(slot.shards),
                    mods=_positions(slot.mods),
                )
                for slot_id, slot in payload.slots.items()
            },
        )
        if payload.custom_color:
            build.custom_color = payload.custom_color
        if payload.last_edited is not None:
            build.last_edited = datetime.fromtimestamp(payload.last_edited / 1000, tz=UTC)
        builds.append(build)
    return builds


def _positions(values: list[str | None]) -> list[str | None]:
    padded = [*values, *([None] * SLOT_POSITIONS)]
    return padded[:SLOT_POSITIONS]


def restore_registry(
    snapshot: RegistrySnapshot | None,
    bundle: CatalogBundle,
    heroes: Sequence[Hero],
) -> Registry:
    """Combine the persisted snapshot with the bundled canonical catalog.

    Persisted records come first so their positions are kept; bundled records
    are merged over them field by field. Abilities come from the bundle alone
    unless the bundle has none.
    """

    saved = snapshot or RegistrySnapshot()

    shards = reconcile([], normalize_shards([*saved.shards, *bundle.shards], heroes))
    mods = reconcile([], normalize_mods([*saved.mods, *bundle.mods], heroes))
    defenses = reconcile([], normalize_defenses([*saved.defenses, *bundle.defenses], heroes))
    towers = reconcile(
        [normalize_tower(record, heroes) for record in saved.towers],
        derive_towers(bundle.defenses, heroes),
    )
    links = reconcile([], normalize_links([*saved.links, *bundle.links]))
    abilities = replace_catalog(normalize_abilities(bundle.abilities or saved.abilities))

    return Registry(
        heroes=tuple(heroes),
        shards=shards,
        mods=mods,
        defenses=defenses,
        towers=towers,
        links=links,
        abilities=abilities,
        builds=_restore_builds(saved.builds, heroes),
        checklists=[record for record in saved.checklists if isinstance(record, dict)],
        maps=[record for record in saved.maps if isinstance(record, dict)]
        or [dict(record) for record in DEFAULT_MAPS],
    )
