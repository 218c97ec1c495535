"""Merge-and-dedup pass combining a normalized batch into an existing collection.

Rules:
- entities are matched by :func:`identity_key`; the first entity seen for a key
  keeps its position, later ones are merged into it
- merging works field by field: an incoming value wins only when it is
  populated, so a partial record never blanks out data that is already there
- mapping fields flagged with ``merge_keys`` metadata merge key by key
- fields flagged with ``derived_from`` metadata come from whichever side supplied
  the field they are computed from
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import fields, replace
from typing import TYPE_CHECKING, Any

from dd2planner.domain.model import PLACEHOLDERS, ShardSource

from .keys import identity_key

if TYPE_CHECKING:
    from collections.abc import Iterable

    from dd2planner.domain.model import CatalogEntity

    from .keys import IdentityKey

log = logging.getLogger(__name__)


def is_populated(value: object) -> bool:
    """Return whether ``value`` carries information worth keeping."""

    if value is None:
        return False
    if isinstance(value, str):
        stripped = value.strip()
        return bool(stripped) and stripped not in PLACEHOLDERS
    if isinstance(value, ShardSource):
        return is_populated(value.difficulty)
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return len(value) > 0  # pyright: ignore[reportUnknownArgumentType]
    return True


def _prefer(existing: object, incoming: object) -> object:
    return incoming if is_populated(incoming) else existing


def _merge_mapping(existing: Mapping[str, Any], incoming: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(existing)
    for key, value in incoming.items():
        merged[key] = _prefer(merged.get(key), value)
    return merged


def merge_entity[TEntity: CatalogEntity](existing: TEntity, incoming: TEntity) -> TEntity:
    """Return a new entity combining ``existing`` with the populated fields of ``incoming``."""

    if type(existing) is not type(incoming):
        raise TypeError(
            f"Cannot merge {type(incoming).__name__} into {type(existing).__name__}"
        )
    changes: dict[str, Any] = {}
    from_incoming: set[str] = set()
    derived: dict[str, str] = {}
    for entity_field in fields(existing):
        current = getattr(existing, entity_field.name)
        candidate = getattr(incoming, entity_field.name)
        if "derived_from" in entity_field.metadata:
            derived[entity_field.name] = entity_field.metadata["derived_from"]
        elif entity_field.metadata.get("merge_keys") and isinstance(current, Mapping):
            changes[entity_field.name] = _merge_mapping(
                current, candidate if isinstance(candidate, Mapping) else {}
            )
        elif is_populated(candidate):
            changes[entity_field.name] = candidate
            from_incoming.add(entity_field.name)
        else:
            changes[entity_field.name] = current

    for name, source in derived.items():
        winner = incoming if source in from_incoming else existing
        changes[name] = getattr(winner, name)
    return replace(existing, **changes)


def reconcile[TEntity: CatalogEntity](
    existing: Iterable[TEntity],
    incoming: Iterable[TEntity],
) -> list[TEntity]:
    """Merge ``incoming`` into ``existing`` and return the new collection.

    Neither input is modified. Entities already in ``existing`` keep their
    order; unseen incoming entities are appended in input order.
    """

    result: list[TEntity] = []
    position_by_key: dict[IdentityKey, int] = {}

    for entity in (*existing, *incoming):
        key = identity_key(entity)
        position = position_by_key.get(key)
        if position is None:
            position_by_key[key] = len(result)
            result.append(entity)
            continue
        result[position] = merge_entity(result[position], entity)

    return result


def reconcile_counts[TEntity: CatalogEntity](
    existing: Iterable[TEntity],
    incoming: Iterable[TEntity],
) -> tuple[list[TEntity], int, int]:
    """Like :func:`reconcile` but also report how many entities were added and merged."""

    before = list(existing)
    batch = list(incoming)
    reconciled = reconcile(before, batch)
    known = {identity_key(entity) for entity in before}
    added = len(reconciled) - len(known)
    merged = len(batch) - added
    log.debug("Reconciled batch: incoming=%s added=%s merged=%s", len(batch), added, merged)
    return reconciled, added, merged


def replace_catalog[TEntity](incoming: Iterable[TEntity]) -> list[TEntity]:
    """Fixed reference catalogs are replaced wholesale by the latest import."""

    return list(incoming)
