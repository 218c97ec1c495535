from __future__ import annotations

import random

from dd2planner.domain.identities import DEFAULT_HEROES, find_hero_by_reference
from dd2planner.domain.matching import (
    EXACT_SLOT,
    WEAPON_FAMILY,
    abilities_for_hero,
    browse,
    match,
    search_links,
    slot_match,
)
from dd2planner.domain.model import Ability, BrowseSort, Hero, ResourceLink
from tests.helpers.catalog import make_shard


def _hero(reference: str) -> Hero:
    hero = find_hero_by_reference(reference, DEFAULT_HEROES)
    assert hero is not None
    return hero


def test_exact_slot_ranks_before_weapon_family_without_affinity() -> None:
    generic_weapon = make_shard("Alpha", slots=["weapon"])
    offhand = make_shard("Zeta", slots=["weapon1"])

    ranked = match([generic_weapon, offhand], "weapon1", "h5")

    assert ranked == [offhand, generic_weapon]


def test_hero_affinity_outranks_exact_slot() -> None:
    bound_weapon = make_shard("Zeta", slots=["weapon"], hero_id="h5")
    offhand = make_shard("Alpha", slots=["weapon1"])

    ranked = match([offhand, bound_weapon], "weapon1", "h5")

    assert ranked == [bound_weapon, offhand]


def test_items_bound_to_another_hero_are_excluded() -> None:
    engineer_only = make_shard("Overcharged Coil", slots=["weapon"], hero_id="h9")
    generic = make_shard("Destruction", slots=["weapon"])

    ranked = match([engineer_only, generic], "weapon", "h5")

    assert ranked == [generic]


def test_incompatible_slots_are_excluded() -> None:
    gloves = make_shard("Destruction", slots=["gloves"])

    assert match([gloves], "weapon", "h9") == []


def test_query_slot_is_case_insensitive() -> None:
    relic = make_shard("Defense Rate", slots=["relic"])

    assert match([relic], "Relic", "h9") == [relic]


def test_ties_break_on_case_insensitive_name() -> None:
    items = [make_shard(name, slots=["relic"]) for name in ("beta", "Alpha", "gamma")]

    ranked = match(items, "relic", "h9")

    assert [item.name for item in ranked] == ["Alpha", "beta", "gamma"]


def test_match_is_deterministic_under_input_permutation() -> None:
    items = [
        make_shard("Alpha", slots=["weapon"]),
        make_shard("Beta", slots=["weapon1"]),
        make_shard("Gamma", slots=["weapon"], hero_id="h5"),
        make_shard("Delta", slots=["relic"]),
    ]
    expected = [item.name for item in match(items, "weapon1", "h5")]

    shuffled = list(items)
    random.Random(7).shuffle(shuffled)

    assert [item.name for item in match(shuffled, "weapon1", "h5")] == expected
    assert expected == ["Gamma", "Beta", "Alpha"]


def test_slot_match_levels() -> None:
    assert slot_match(make_shard("A", slots=["Weapon1"]), "weapon1") == EXACT_SLOT
    assert slot_match(make_shard("B", slots=["weapon"]), "weapon2") == WEAPON_FAMILY
    assert slot_match(make_shard("C", slots=["helmet"]), "weapon") is None


def test_browse_filters_by_search_and_pins_hero_items() -> None:
    engineer = _hero("Engineer")
    items = [
        make_shard("Coil Power", hero_id="h9"),
        make_shard("Cannon Power", hero_id="h20"),
        make_shard("Generic Power"),
    ]

    everything = browse(items, heroes=DEFAULT_HEROES, search="power")
    engineer_items = browse(items, heroes=DEFAULT_HEROES, hero=engineer)

    assert [item.name for item in everything] == ["Generic Power", "Coil Power", "Cannon Power"]
    assert [item.name for item in engineer_items] == ["Coil Power"]


def test_browse_sorted_by_name() -> None:
    items = [make_shard("Zed", hero_id="h1"), make_shard("Ace", hero_id="h21")]

    ranked = browse(items, heroes=DEFAULT_HEROES, sort=BrowseSort.NAME)

    assert [item.name for item in ranked] == ["Ace", "Zed"]


def test_abilities_for_hero() -> None:
    abilities = [
        Ability(name="Reflect Beam", heroes=["Squire", "Countess"]),
        Ability(name="Mana Bomb", heroes=["Apprentice"]),
    ]

    assert [ability.name for ability in abilities_for_hero(abilities, _hero("countess"))] == [
        "Reflect Beam"
    ]


def test_search_links_matches_author_and_description() -> None:
    links = [
        ResourceLink(author="Community", name="Tier List", description="Shard ranking"),
        ResourceLink(author="Wiki", name="Heroes", description="Hero pages"),
    ]

    assert search_links(links, "community") == [links[0]]
    assert search_links(links, "HERO") == [links[1]]
