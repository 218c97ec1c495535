"""Identity keys used to decide whether two catalog entities are the same.

Keys are tuples headed by a namespace string so keys of different entity kinds
never collide, even if a caller mixes collections by mistake.
"""

from __future__ import annotations

from collections.abc import Hashable
from functools import singledispatch

from dd2planner.domain.model import Defense, Mod, ResourceLink, Shard, Tower

type IdentityKey = tuple[Hashable, ...]


@singledispatch
def identity_key(entity: object) -> IdentityKey:
    raise TypeError(f"No identity key defined for {type(entity).__name__}")


@identity_key.register
def _(shard: Shard) -> IdentityKey:
    return ("shard:name", shard.name.casefold())


@identity_key.register
def _(mod: Mod) -> IdentityKey:
    return ("mod:name", mod.name.casefold())


@identity_key.register
def _(defense: Defense) -> IdentityKey:
    # Source data is internally consistent on casing; compare verbatim.
    return ("defense:name", defense.name)


@identity_key.register
def _(tower: Tower) -> IdentityKey:
    return ("tower:name", tower.name)


@identity_key.register
def _(link: ResourceLink) -> IdentityKey:
    return ("link:name-url", link.name, link.url)
