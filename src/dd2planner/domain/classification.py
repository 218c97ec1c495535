"""Classify imported catalog documents by file name and payload shape.

The shape sniffing is heuristic. Everything that cannot be placed ends up as
:attr:`DocumentKind.UNKNOWN` so callers can report it instead of guessing.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Final

from dd2planner.domain.model import DocumentKind

# Checked in order; the first substring found in the file name wins.
FILENAME_HINTS: Final[tuple[tuple[str, DocumentKind], ...]] = (
    ("defenses", DocumentKind.DEFENSES),
    ("shards", DocumentKind.SHARDS),
    ("mods", DocumentKind.MODS),
    ("materials", DocumentKind.DEFENSES),
    ("abilities", DocumentKind.ABILITIES),
    ("links", DocumentKind.LINKS),
)

# Named array properties that wrap the records of each kind.
RECORD_PROPERTIES: Final[dict[DocumentKind, tuple[str, ...]]] = {
    DocumentKind.DEFENSES: ("defenses", "materials", "towers"),
    DocumentKind.SHARDS: ("shards",),
    DocumentKind.MODS: ("mods",),
    DocumentKind.LINKS: ("resources", "links"),
    DocumentKind.ABILITIES: ("abilities",),
}

# Marker field on the first record -> kind. Defense records also carry ``hero``,
# so the more specific markers are tested first.
SHAPE_MARKERS: Final[tuple[tuple[str, DocumentKind], ...]] = (
    ("base_def_power", DocumentKind.DEFENSES),
    ("upgradeLevels", DocumentKind.SHARDS),
    ("hero", DocumentKind.MODS),
)


def _kind_from_filename(filename: str) -> DocumentKind | None:
    lowered = filename.lower()
    for hint, kind in FILENAME_HINTS:
        if hint in lowered:
            return kind
    return None


def _kind_from_properties(data: Mapping[str, Any]) -> DocumentKind | None:
    for kind, properties in RECORD_PROPERTIES.items():
        if any(isinstance(data.get(name), list) for name in properties):
            return kind
    return None


def _kind_from_shape(records: Sequence[Any]) -> DocumentKind | None:
    if not records or not isinstance(records[0], Mapping):
        return None
    first: Mapping[str, Any] = records[0]
    for marker, kind in SHAPE_MARKERS:
        if first.get(marker):
            return kind
    return None


def classify_document(filename: str, data: object) -> DocumentKind:
    """Decide which catalog kind ``data`` (already-parsed JSON) holds."""

    kind = _kind_from_filename(filename)
    if kind is None and isinstance(data, Mapping):
        kind = _kind_from_properties(data)  # pyright: ignore[reportUnknownArgumentType]
    if kind is None and isinstance(data, list):
        kind = _kind_from_shape(data)  # pyright: ignore[reportUnknownArgumentType]
    return kind or DocumentKind.UNKNOWN


def extract_records(kind: DocumentKind, data: object) -> list[Any]:
    """Return the raw records of a classified document.

    Accepts a bare array or an object carrying one of the kind's named array
    properties; anything else yields no records.
    """

    if isinstance(data, list):
        return list(data)  # pyright: ignore[reportUnknownArgumentType]
    if isinstance(data, Mapping):
        for name in RECORD_PROPERTIES.get(kind, ()):
            records = data.get(name)  # pyright: ignore[reportUnknownMemberType]
            if isinstance(records, list):
                return list(records)  # pyright: ignore[reportUnknownArgumentType]
    return []
