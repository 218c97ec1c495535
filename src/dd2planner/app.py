"""Application orchestration entry points."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from logging import getLogger
from typing import TYPE_CHECKING

from dd2planner.adapters.catalog import (
    DocumentParseError,
    dumps_registry,
    load_bundled_catalog,
    load_snapshot,
    normalize_document,
    parse_document,
    restore_registry,
)
from dd2planner.adapters.sqlalchemy import SqlAlchemyKeyValueStore, is_started, startup
from dd2planner.config import get_catalog_config, get_storage_config
from dd2planner.domain.builds import BuildError, assign_build_item, candidates_for, create_build
from dd2planner.domain.context import RegistryContext
from dd2planner.domain.identities import DEFAULT_HEROES, find_hero_by_reference
from dd2planner.domain.importing import ImportState, ImportStatus, NormalizedBatch, apply_batch
from dd2planner.domain.matching import abilities_for_hero, browse, search_links
from dd2planner.domain.model import BrowseSort, DocumentKind, EntityKind

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from dd2planner.adapters.catalog import CatalogBundle
    from dd2planner.config import CatalogConfig
    from dd2planner.domain.model import Build, Hero, ItemCategory, Mod, Registry, Shard
    from dd2planner.domain.ports import KeyValueStore

type ImportDocument = tuple[str, str | bytes]

log = getLogger(__name__)


def build_context(
    *,
    store: KeyValueStore | None = None,
    snapshot_key: str | None = None,
    catalog: CatalogConfig | None = None,
    bundle: CatalogBundle | None = None,
    heroes: Sequence[Hero] = DEFAULT_HEROES,
) -> RegistryContext:
    """Load the registry from the persisted snapshot and the canonical catalog.

    Without an explicit ``store`` the SQLAlchemy store is started from the
    environment configuration.
    """

    key = snapshot_key or get_storage_config().snapshot_key
    if store is None:
        if not is_started():
            startup()
        sql_store = SqlAlchemyKeyValueStore()
        saved_at = sql_store.updated_at(key)
        log.info("Snapshot %r last saved at %s", key, saved_at.isoformat() if saved_at else "never")
        store = sql_store

    effective_bundle = bundle or load_bundled_catalog(catalog or get_catalog_config())
    snapshot = load_snapshot(store.get(key))
    registry = restore_registry(snapshot, effective_bundle, heroes)
    log.info(
        "Registry ready: shards=%s mods=%s defenses=%s towers=%s links=%s builds=%s (snapshot=%s)",
        len(registry.shards),
        len(registry.mods),
        len(registry.defenses),
        len(registry.towers),
        len(registry.links),
        len(registry.builds),
        "restored" if snapshot is not None else "none",
    )
    return RegistryContext(
        registry=registry, store=store, snapshot_key=key, serialize=dumps_registry
    )


def _prepare(document: ImportDocument, heroes: Sequence[Hero]) -> NormalizedBatch | ImportStatus:
    filename, content = document
    try:
        parsed = parse_document(filename, content)
    except DocumentParseError as exc:
        log.warning("Could not parse %s: %s", filename, exc.reason)
        return ImportStatus(filename=filename, state=ImportState.FAILED, message=exc.reason)
    if parsed.kind is DocumentKind.UNKNOWN:
        return ImportStatus(
            filename=filename, state=ImportState.SKIPPED, message="Unknown file type"
        )
    return normalize_document(parsed, heroes)


def import_documents(
    context: RegistryContext,
    documents: Sequence[ImportDocument],
    *,
    max_workers: int | None = None,
) -> list[ImportStatus]:
    """Import ``(filename, content)`` documents into the live registry.

    Documents are parsed and normalized in parallel; their batches are then
    reconciled one at a time in input order, each persisted on its own. A
    document that fails to parse or cannot be classified is reported and
    leaves the registry untouched.
    """

    heroes = context.registry.heroes
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        prepared = list(executor.map(lambda document: _prepare(document, heroes), documents))

    statuses: list[ImportStatus] = []
    for (filename, _), outcome in zip(documents, prepared, strict=True):
        if isinstance(outcome, ImportStatus):
            statuses.append(outcome)
            continue
        with context.mutation() as registry:
            added, merged = apply_batch(registry, outcome)
        statuses.append(
            ImportStatus(
                filename=filename,
                state=ImportState.IMPORTED,
                kind=outcome.kind,
                added=added,
                merged=merged,
            )
        )

    for status in statuses:
        log.info(status.status_line)
    return statuses


def export_registry(context: RegistryContext, path: Path | None = None) -> str:
    """Render the registry snapshot, writing it to ``path`` when given."""

    document = context.snapshot()
    if path is not None:
        path.write_text(document, encoding="utf-8")
        log.info("Exported registry to %s", path)
    return document


def require_hero(registry: Registry, reference: str) -> Hero:
    hero = find_hero_by_reference(reference, registry.heroes)
    if hero is None:
        raise BuildError(f"Unknown hero: {reference}")
    return hero


def compatible_items(
    context: RegistryContext,
    *,
    hero_reference: str,
    slot_id: str,
    category: ItemCategory,
) -> list[Shard] | list[Mod]:
    """Ranked candidates for one slot of a hero, as the build picker shows them."""

    hero = require_hero(context.registry, hero_reference)
    return candidates_for(context.registry, hero, slot_id, category)


def browse_catalog(
    context: RegistryContext,
    kind: EntityKind,
    *,
    search: str = "",
    hero_reference: str | None = None,
    sort: BrowseSort = BrowseSort.HERO,
) -> list[object]:
    """List one collection the way the encyclopedia pages do."""

    registry = context.registry
    hero = require_hero(registry, hero_reference) if hero_reference else None

    if kind is EntityKind.LINK:
        return list(search_links(registry.links, search))
    if kind is EntityKind.ABILITY:
        abilities = abilities_for_hero(registry.abilities, hero) if hero else registry.abilities
        needle = search.casefold()
        return [ability for ability in abilities if needle in ability.name.casefold()]
    return list(
        browse(
            registry.collection(kind),
            heroes=registry.heroes,
            search=search,
            hero=hero,
            sort=sort,
        )
    )


def new_build(context: RegistryContext, hero_reference: str, *, name: str | None = None) -> Build:
    with context.mutation() as registry:
        hero = require_hero(registry, hero_reference)
        return create_build(registry, hero, name=name)


def set_build_item(
    context: RegistryContext,
    *,
    build_id: str,
    slot_id: str,
    category: ItemCategory,
    index: int,
    item_id: str | None,
) -> Build:
    with context.mutation() as registry:
        return assign_build_item(
            registry,
            build_id=build_id,
            slot_id=slot_id,
            category=category,
            index=index,
            item_id=item_id,
        )
