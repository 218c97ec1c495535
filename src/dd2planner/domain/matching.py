"""Slot compatibility matching and encyclopedia-style browsing.

:func:`match` answers "which items can go into this slot for this hero" for the
build editor. :func:`browse` lists a catalog collection filtered by a free-text
search and a hero, the way the encyclopedia pages present it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from dd2planner.domain.identities import hero_name_for, is_weapon_slot
from dd2planner.domain.model import BrowseSort

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from dd2planner.domain.model import Ability, Hero


class Equippable(Protocol):
    name: str
    hero_id: str | None
    compatible_slots: list[str]


class HeroTagged(Protocol):
    name: str
    hero_id: str | None

    @property
    def hero_label(self) -> str | None: ...


class LinkLike(Protocol):
    author: str
    name: str
    description: str


type SlotMatch = int

EXACT_SLOT: SlotMatch = 0
WEAPON_FAMILY: SlotMatch = 1


def slot_match(entity: Equippable, slot_id: str) -> SlotMatch | None:
    """Return how ``entity`` fits ``slot_id``, or ``None`` when it does not fit.

    Hero-specific weapon slots (``weapon1``/``weapon2``) accept any weapon-family
    item so weapon items need not enumerate every handed variant.
    """

    slots = [slot.lower() for slot in entity.compatible_slots]
    if slot_id in slots:
        return EXACT_SLOT
    if is_weapon_slot(slot_id) and any(is_weapon_slot(slot) for slot in slots):
        return WEAPON_FAMILY
    return None


def match[TItem: Equippable](
    collection: Iterable[TItem],
    slot_id: str,
    hero_id: str,
) -> list[TItem]:
    """Return items equippable in ``slot_id`` by ``hero_id``, best candidates first.

    Items bound to another hero are excluded. Ranking is by hero affinity
    (items bound to ``hero_id`` first), then exact slot matches before weapon
    family matches, then case-insensitive name. The sort is stable.
    """

    wanted_slot = slot_id.lower()
    ranked: list[tuple[tuple[int, int, str], TItem]] = []
    for item in collection:
        if item.hero_id is not None and item.hero_id != hero_id:
            continue
        fit = slot_match(item, wanted_slot)
        if fit is None:
            continue
        hero_score = 0 if item.hero_id == hero_id else 1
        ranked.append(((hero_score, fit, item.name.casefold()), item))

    ranked.sort(key=lambda entry: entry[0])
    return [item for _, item in ranked]


def _hero_matches(entity: HeroTagged, hero: Hero) -> bool:
    if entity.hero_id == hero.id:
        return True
    label = entity.hero_label
    return bool(label) and label.casefold() == hero.name.casefold()


def browse[TItem: HeroTagged](
    collection: Iterable[TItem],
    *,
    heroes: Sequence[Hero],
    search: str = "",
    hero: Hero | None = None,
    sort: BrowseSort = BrowseSort.HERO,
) -> list[TItem]:
    """Filter by name substring and hero, then order for display.

    With a hero filter, entries bound to that hero by id come first. Then
    entries are grouped by hero name when sorting by hero, and ordered by name.
    """

    needle = search.casefold()
    selected = [
        item
        for item in collection
        if needle in item.name.casefold() and (hero is None or _hero_matches(item, hero))
    ]

    def sort_key(item: TItem) -> tuple[int, str, str]:
        pinned = 0 if hero is not None and item.hero_id == hero.id else 1
        group = hero_name_for(item.hero_id, heroes).casefold() if sort is BrowseSort.HERO else ""
        return (pinned, group, item.name.casefold())

    return sorted(selected, key=sort_key)


def abilities_for_hero(abilities: Iterable[Ability], hero: Hero) -> list[Ability]:
    """Abilities whose hero list names ``hero`` (compared case-insensitively)."""

    name = hero.name.casefold()
    return [ability for ability in abilities if any(h.casefold() == name for h in ability.heroes)]


def search_links[TLink: LinkLike](links: Iterable[TLink], search: str = "") -> list[TLink]:
    """Links whose name, description, or author contains ``search``."""

    needle = search.casefold()
    return [
        link
        for link in links
        if needle in link.name.casefold()
        or needle in link.description.casefold()
        or needle in link.author.casefold()
    ]
