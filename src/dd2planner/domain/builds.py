"""Build editing: create builds and fill their slot positions with compatible items."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING
from uuid import uuid4

from dd2planner.domain.matching import match
from dd2planner.domain.model import SLOT_POSITIONS, Build, ItemCategory

if TYPE_CHECKING:
    from dd2planner.domain.model import Hero, Mod, Registry, Shard

log = getLogger(__name__)


class BuildError(ValueError):
    """Raised when a build edit refers to something that does not fit."""


def create_build(registry: Registry, hero: Hero, *, name: str | None = None) -> Build:
    """Append a new, empty build for ``hero`` and return it."""

    hero_builds = [build for build in registry.builds if build.hero_id == hero.id]
    build = Build(
        id=f"b_{uuid4().hex[:12]}",
        name=name or f"New Build {len(hero_builds) + 1}",
        hero_id=hero.id,
    )
    registry.builds.append(build)
    log.info("Created build %s for hero %s", build.id, hero.name)
    return build


def candidates_for(
    registry: Registry, hero: Hero, slot_id: str, category: ItemCategory
) -> list[Shard] | list[Mod]:
    """Ranked items the picker offers for one slot of ``hero``."""

    if category is ItemCategory.SHARD:
        return match(registry.shards, slot_id, hero.id)
    return match(registry.mods, slot_id, hero.id)


def assign_build_item(
    registry: Registry,
    *,
    build_id: str,
    slot_id: str,
    category: ItemCategory,
    index: int,
    item_id: str | None,
) -> Build:
    """Put ``item_id`` (or clear the position when ``None``) into a build slot.

    Raises:
        BuildError: unknown build or hero, slot the hero does not have, position
            out of range, or an item that is not a candidate for the slot.
    """

    build = registry.build_by_id(build_id)
    if build is None:
        raise BuildError(f"Unknown build: {build_id}")
    hero = registry.hero_by_id(build.hero_id)
    if hero is None:
        raise BuildError(f"Build {build_id} refers to unknown hero {build.hero_id}")
    wanted_slot = slot_id.lower()
    if not hero.supports_slot(wanted_slot):
        raise BuildError(f"{hero.name} has no {slot_id!r} slot")
    if not 0 <= index < SLOT_POSITIONS:
        raise BuildError(f"Position {index} out of range 0..{SLOT_POSITIONS - 1}")

    if item_id is not None:
        candidates = candidates_for(registry, hero, wanted_slot, category)
        if not any(item.id == item_id for item in candidates):
            raise BuildError(f"{item_id} cannot be equipped in {hero.name}'s {wanted_slot} slot")

    build.slot(wanted_slot).positions(category)[index] = item_id
    build.touch()
    return build
