from __future__ import annotations

import json

import pytest

from dd2planner.adapters.catalog import DocumentParseError, normalize_document, parse_document
from dd2planner.domain.identities import DEFAULT_HEROES
from dd2planner.domain.model import DocumentKind


def test_parse_document_rejects_invalid_json() -> None:
    with pytest.raises(DocumentParseError) as excinfo:
        parse_document("broken.json", "{not json")

    assert excinfo.value.filename == "broken.json"


@pytest.mark.parametrize("content", [b'["\xff"]', "[" * 200_000])
def test_parse_document_rejects_undecodable_content(content: str | bytes) -> None:
    with pytest.raises(DocumentParseError):
        parse_document("dd2_shards_data.json", content)


def test_parse_document_accepts_utf8_bytes() -> None:
    parsed = parse_document("dd2_mods_data.json", '[{"name": "Frêle"}]'.encode())

    assert parsed.kind is DocumentKind.MODS
    assert parsed.records == [{"name": "Frêle"}]


def test_defense_document_yields_defenses_and_towers() -> None:
    text = json.dumps(
        {
            "materials": [
                {"name": "Lightning Coil", "hero": "Engineer", "base_def_power": "1200"},
                {"name": "Spike Blockade", "hero": "Squire", "defense_type": "Blockade"},
            ]
        }
    )

    parsed = parse_document("upload.json", text)
    batch = normalize_document(parsed, DEFAULT_HEROES)

    assert parsed.kind is DocumentKind.DEFENSES
    assert [defense.name for defense in batch.defenses] == ["Lightning Coil", "Spike Blockade"]
    assert [tower.name for tower in batch.towers] == ["Lightning Coil"]
    assert batch.abilities is None


def test_abilities_document_replaces_catalog() -> None:
    parsed = parse_document("dd2_abilities.json", json.dumps([{"name": "Mana Bomb"}]))

    batch = normalize_document(parsed, DEFAULT_HEROES)

    assert batch.abilities is not None
    assert [ability.name for ability in batch.abilities] == ["Mana Bomb"]


def test_unknown_document_has_no_records() -> None:
    parsed = parse_document("notes.json", json.dumps({"title": "hello"}))

    batch = normalize_document(parsed, DEFAULT_HEROES)

    assert parsed.kind is DocumentKind.UNKNOWN
    assert parsed.records == []
    assert all(not entities for _, entities in batch.merge_targets())
