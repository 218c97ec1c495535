"""Canonical catalog documents shipped with the package."""

from __future__ import annotations

from dataclasses import dataclass, field
from importlib import resources
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from dd2planner.domain.model import DocumentKind

from .documents import DocumentParseError, parse_document

if TYPE_CHECKING:
    from importlib.resources.abc import Traversable
    from pathlib import Path

    from dd2planner.config import CatalogConfig

log = getLogger(__name__)

BUNDLED_DOCUMENTS: Final[dict[DocumentKind, str]] = {
    DocumentKind.SHARDS: "shards.json",
    DocumentKind.MODS: "mods.json",
    DocumentKind.DEFENSES: "defenses.json",
    DocumentKind.LINKS: "links.json",
    DocumentKind.ABILITIES: "abilities.json",
}


@dataclass(slots=True, kw_only=True)
class CatalogBundle:
    """Raw records of the canonical documents, not yet normalized."""

    shards: list[Any] = field(default_factory=list[Any])
    mods: list[Any] = field(default_factory=list[Any])
    defenses: list[Any] = field(default_factory=list[Any])
    links: list[Any] = field(default_factory=list[Any])
    abilities: list[Any] = field(default_factory=list[Any])


def _read_records(location: Traversable | Path, kind: DocumentKind) -> list[Any]:
    if not location.is_file():
        log.warning("Bundled catalog document %s is missing", location.name)
        return []
    try:
        parsed = parse_document(location.name, location.read_bytes())
    except DocumentParseError as exc:
        log.warning("Bundled catalog document %s is unreadable: %s", exc.filename, exc.reason)
        return []
    if parsed.kind is not kind:
        log.warning(
            "Bundled catalog document %s holds %s, expected %s", location.name, parsed.kind, kind
        )
        return []
    return parsed.records


def load_bundled_catalog(config: CatalogConfig | None = None) -> CatalogBundle:
    """Read every canonical document, from ``config.directory`` when set.

    A missing or broken document contributes no records.
    """

    base: Traversable | Path
    if config is not None and config.directory is not None:
        base = config.directory
    else:
        base = resources.files(__package__) / "data"

    records = {kind: _read_records(base / name, kind) for kind, name in BUNDLED_DOCUMENTS.items()}
    bundle = CatalogBundle(
        shards=records[DocumentKind.SHARDS],
        mods=records[DocumentKind.MODS],
        defenses=records[DocumentKind.DEFENSES],
        links=records[DocumentKind.LINKS],
        abilities=records[DocumentKind.ABILITIES],
    )
    log.info(
        "Loaded bundled catalog: shards=%s mods=%s defenses=%s links=%s abilities=%s",
        len(bundle.shards),
        len(bundle.mods),
        len(bundle.defenses),
        len(bundle.links),
        len(bundle.abilities),
    )
    return bundle
