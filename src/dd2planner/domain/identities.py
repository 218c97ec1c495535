"""Identity registry: the built-in hero catalog and weak-reference lookups.

``hero_id`` on catalog entities is a weak reference. It is never trusted from raw
input; normalizers call :func:`resolve_hero_id` with the hero *name* they find in
the record, and an unknown name simply leaves the reference empty.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from dd2planner.domain.model import Hero

if TYPE_CHECKING:
    from collections.abc import Iterable

STANDARD_SLOTS: Final[tuple[str, ...]] = ("weapon", "helmet", "chest", "gloves", "boots", "relic")
SHIELD_SLOTS: Final[tuple[str, ...]] = (
    "weapon",
    "shield",
    "helmet",
    "chest",
    "gloves",
    "boots",
    "relic",
)
DUAL_WIELD_SLOTS: Final[tuple[str, ...]] = (
    "weapon1",
    "weapon2",
    "helmet",
    "chest",
    "gloves",
    "boots",
    "relic",
)

WEAPON_MARKER: Final[str] = "weapon"

_ICON_BASE = "https://static.wikia.nocookie.net/dungeondefenders/images"


def _hero(
    hero_id: str,
    name: str,
    role_tags: tuple[str, ...],
    color: str,
    slots: tuple[str, ...],
    icon_path: str,
) -> Hero:
    return Hero(
        id=hero_id,
        name=name,
        hero_class=name,
        role_tags=role_tags,
        slots=slots,
        color=color,
        icon_url=f"{_ICON_BASE}/{icon_path}",
    )


# fmt: off
DEFAULT_HEROES: Final[tuple[Hero, ...]] = (
    _hero("h20", "Squire", ("Tank", "Builder"), "bg-orange-600", SHIELD_SLOTS, "9/91/Squire_Icon.png"),
    _hero("h3", "Apprentice", ("DPS", "Builder"), "bg-blue-600", STANDARD_SLOTS, "2/2d/Apprentice_Icon.png"),
    _hero("h13", "Huntress", ("DPS", "Builder"), "bg-green-600", STANDARD_SLOTS, "9/96/Huntress_Icon.png"),
    _hero("h17", "Monk", ("Support", "Builder"), "bg-yellow-600", STANDARD_SLOTS, "3/3d/Monk_Icon.png"),
    _hero("h1", "Abyss Lord", ("Builder", "Tank"), "bg-purple-700", STANDARD_SLOTS, "6/65/Abyss_Lord_Icon.png"),
    _hero("h2", "Adept", ("DPS", "Builder"), "bg-violet-600", STANDARD_SLOTS, "8/88/Adept_Icon.png"),
    _hero("h4", "Aquarion", ("DPS", "Builder"), "bg-cyan-500", STANDARD_SLOTS, "c/c2/Aquarion_Icon.png"),
    _hero("h5", "Barbarian", ("DPS",), "bg-red-700", DUAL_WIELD_SLOTS, "a/a2/Barbarian_Icon.png"),
    _hero("h6", "Countess", ("Tank", "Builder"), "bg-orange-500", SHIELD_SLOTS, "c/c5/Countess_Icon.png"),
    _hero("h7", "Cyborg", ("DPS", "Builder"), "bg-zinc-600", STANDARD_SLOTS, "5/5f/Cyborg_Icon.png"),
    _hero("h8", "Dryad", ("Builder", "Support"), "bg-emerald-600", STANDARD_SLOTS, "4/4d/Dryad_Icon.png"),
    _hero("h9", "Engineer", ("Builder", "DPS"), "bg-teal-700", STANDARD_SLOTS, "a/a7/Engineer_Icon.png"),
    _hero("h10", "Frostweaver", ("Builder", "CC"), "bg-sky-500", STANDARD_SLOTS, "5/5d/Frostweaver_Icon.png"),
    _hero("h11", "Gunwitch", ("DPS",), "bg-pink-700", STANDARD_SLOTS, "8/8f/Gunwitch_Icon.png"),
    _hero("h12", "Hunter", ("DPS", "Builder"), "bg-emerald-700", STANDARD_SLOTS, "f/f6/Hunter_Icon.png"),
    _hero("h14", "Initiate", ("Support", "Builder"), "bg-amber-500", STANDARD_SLOTS, "8/88/Initiate_Icon.png"),
    _hero("h15", "Lavamancer", ("Tank", "Builder"), "bg-red-800", STANDARD_SLOTS, "c/c8/Lavamancer_Icon.png"),
    _hero("h16", "Mercenary", ("DPS",), "bg-slate-700", STANDARD_SLOTS, "3/36/Mercenary_Icon.png"),
    _hero("h18", "Mystic", ("Builder", "Support"), "bg-indigo-600", STANDARD_SLOTS, "8/8f/Mystic_Icon.png"),
    _hero("h19", "Series EV2", ("Builder", "DPS"), "bg-teal-600", STANDARD_SLOTS, "d/d3/Series_EV2_Icon.png"),
    _hero("h21", "Jester", ("Support", "DPS"), "bg-fuchsia-700", STANDARD_SLOTS, "9/9d/Jester_Icon.png"),
)
# fmt: on


def _name_key(name: str) -> str:
    return " ".join(name.split()).casefold()


def find_hero(name: object, heroes: Iterable[Hero]) -> Hero | None:
    """Case-insensitive hero lookup by display name."""

    if not isinstance(name, str) or not name.strip():
        return None
    key = _name_key(name)
    return next((hero for hero in heroes if _name_key(hero.name) == key), None)


def resolve_hero_id(name: object, heroes: Iterable[Hero]) -> str | None:
    """Return the id of the hero called ``name``; ``None`` when nobody matches."""

    hero = find_hero(name, heroes)
    return hero.id if hero is not None else None


def find_hero_by_reference(reference: str, heroes: Iterable[Hero]) -> Hero | None:
    """Accept either a hero id or a hero name (used by the CLI)."""

    candidates = tuple(heroes)
    by_id = next((hero for hero in candidates if hero.id == reference), None)
    return by_id or find_hero(reference, candidates)


def hero_name_for(hero_id: str | None, heroes: Iterable[Hero]) -> str:
    if hero_id is None:
        return ""
    return next((hero.name for hero in heroes if hero.id == hero_id), "")


def is_weapon_slot(slot_id: str) -> bool:
    return WEAPON_MARKER in slot_id
