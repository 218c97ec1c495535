"""Catalog documents adapter: payload schemas, normalizers, and snapshots."""

from __future__ import annotations

from .bundled import CatalogBundle, load_bundled_catalog
from .documents import DocumentParseError, ParsedDocument, normalize_document, parse_document
from .snapshot import (
    DEFAULT_MAPS,
    dump_entity,
    dump_registry,
    dumps_registry,
    load_snapshot,
    restore_registry,
)
from .translator import (
    derive_towers,
    normalize_ability,
    normalize_defense,
    normalize_link,
    normalize_mod,
    normalize_shard,
    normalize_tower,
)

__all__ = [
    "DEFAULT_MAPS",
    "CatalogBundle",
    "DocumentParseError",
    "ParsedDocument",
    "derive_towers",
    "dump_entity",
    "dump_registry",
    "dumps_registry",
    "load_bundled_catalog",
    "load_snapshot",
    "normalize_ability",
    "normalize_defense",
    "normalize_document",
    "normalize_link",
    "normalize_mod",
    "normalize_shard",
    "normalize_tower",
    "parse_document",
    "restore_registry",
]
