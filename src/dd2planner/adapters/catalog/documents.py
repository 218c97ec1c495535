"""Parse imported catalog files into normalized batches.

Parsing and normalization touch nothing shared, so callers may run them for
several files in parallel. Only :func:`dd2planner.domain.importing.apply_batch`
mutates the registry.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

from dd2planner.domain.classification import classify_document, extract_records
from dd2planner.domain.importing import NormalizedBatch
from dd2planner.domain.model import DocumentKind

from .translator import (
    derive_towers,
    normalize_abilities,
    normalize_defenses,
    normalize_links,
    normalize_mods,
    normalize_shards,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dd2planner.domain.model import Hero

log = getLogger(__name__)


class DocumentParseError(ValueError):
    """Raised when an imported file cannot be decoded as JSON."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(reason)
        self.filename = filename
        self.reason = reason


@dataclass(slots=True, frozen=True)
class ParsedDocument:
    filename: str
    kind: DocumentKind
    records: list[Any]


def parse_document(filename: str, content: str | bytes) -> ParsedDocument:
    """Decode ``content`` and classify it.

    Raw bytes are decoded here so an undecodable file fails on its own.

    Raises:
        DocumentParseError: the content is not text, not JSON or nested too deeply.
    """

    try:
        data = json.loads(content)
    except RecursionError as exc:
        raise DocumentParseError(filename, "Document is nested too deeply") from exc
    except ValueError as exc:
        raise DocumentParseError(filename, str(exc)) from exc

    kind = classify_document(filename, data)
    records = extract_records(kind, data) if kind is not DocumentKind.UNKNOWN else []
    log.debug("Classified %s as %s with %s records", filename, kind, len(records))
    return ParsedDocument(filename=filename, kind=kind, records=records)


def normalize_document(parsed: ParsedDocument, heroes: Sequence[Hero]) -> NormalizedBatch:
    """Run the records of ``parsed`` through the normalizer for its kind.

    Defense documents also yield the towers their records describe.
    """

    batch = NormalizedBatch(kind=parsed.kind)
    kind = parsed.kind
    if kind is DocumentKind.SHARDS:
        batch.shards = normalize_shards(parsed.records, heroes)
    elif kind is DocumentKind.MODS:
        batch.mods = normalize_mods(parsed.records, heroes)
    elif kind is DocumentKind.DEFENSES:
        batch.defenses = normalize_defenses(parsed.records, heroes)
        batch.towers = derive_towers(parsed.records, heroes)
    elif kind is DocumentKind.LINKS:
        batch.links = normalize_links(parsed.records)
    elif kind is DocumentKind.ABILITIES:
        batch.abilities = normalize_abilities(parsed.records)
    return batch
