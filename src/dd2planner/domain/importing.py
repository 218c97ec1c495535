"""Import results and the sequential reconciliation point for imported batches."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from dd2planner.domain.model import DocumentKind, EntityKind
from dd2planner.domain.reconciliation import reconcile_counts, replace_catalog

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dd2planner.domain.model import (
        Ability,
        CatalogEntity,
        Defense,
        Mod,
        Registry,
        ResourceLink,
        Shard,
        Tower,
    )

log = getLogger(__name__)


class ImportState(StrEnum):
    IMPORTED = "imported"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(slots=True, kw_only=True)
class NormalizedBatch:
    """Entities normalized from one document, grouped by target collection."""

    kind: DocumentKind
    shards: list[Shard] = field(default_factory=list["Shard"])
    mods: list[Mod] = field(default_factory=list["Mod"])
    defenses: list[Defense] = field(default_factory=list["Defense"])
    towers: list[Tower] = field(default_factory=list["Tower"])
    links: list[ResourceLink] = field(default_factory=list["ResourceLink"])
    abilities: list[Ability] | None = None

    def merge_targets(self) -> tuple[tuple[EntityKind, Sequence[CatalogEntity]], ...]:
        return (
            (EntityKind.SHARD, self.shards),
            (EntityKind.MOD, self.mods),
            (EntityKind.DEFENSE, self.defenses),
            (EntityKind.TOWER, self.towers),
            (EntityKind.LINK, self.links),
        )


@dataclass(slots=True, kw_only=True)
class ImportStatus:
    """Outcome for one imported file, reported back instead of raised."""

    filename: str
    state: ImportState
    kind: DocumentKind = DocumentKind.UNKNOWN
    added: int = 0
    merged: int = 0
    message: str | None = None

    @property
    def status_line(self) -> str:
        if self.state is ImportState.FAILED:
            return f"Error parsing {self.filename}: {self.message}"
        if self.state is ImportState.SKIPPED:
            return f"Skipped {self.filename}: {self.message}"
        return (
            f"Imported {self.filename} as {self.kind}: "
            f"{self.added} added, {self.merged} merged"
        )


def apply_batch(registry: Registry, batch: NormalizedBatch) -> tuple[int, int]:
    """Reconcile ``batch`` into ``registry``; return (added, merged) totals.

    Callers must hold the registry's writer lock. Abilities are fixed reference
    data and replace the current list instead of merging into it.
    """

    added_total = 0
    merged_total = 0
    for kind, entities in batch.merge_targets():
        if not entities:
            continue
        reconciled, added, merged = reconcile_counts(registry.collection(kind), entities)
        registry.replace_collection(kind, reconciled)
        added_total += added
        merged_total += merged
        log.info("Reconciled %s: added=%s merged=%s total=%s", kind, added, merged, len(reconciled))

    if batch.abilities is not None:
        registry.abilities = replace_catalog(batch.abilities)
        added_total += len(batch.abilities)
        log.info("Replaced abilities catalog: total=%s", len(batch.abilities))

    return added_total, merged_total
