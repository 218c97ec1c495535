from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest

from dd2planner.adapters.catalog import CatalogBundle
from dd2planner.adapters.sqlalchemy import SqlAlchemyKeyValueStore
from dd2planner.app import build_context, import_documents
from dd2planner.config import DEFAULT_SNAPSHOT_KEY
from dd2planner.domain.importing import ImportState
from dd2planner.domain.model import DocumentKind
from tests.helpers.catalog import InMemoryKeyValueStore

if TYPE_CHECKING:
    from dd2planner.domain.context import RegistryContext


def _shards_document(*records: dict[str, object]) -> str:
    return json.dumps({"shards": list(records)})


@pytest.fixture
def seeded_context() -> RegistryContext:
    bundle = CatalogBundle(
        shards=[{"name": "Spider Shard", "description": "", "iconUrl": "a.png"}],
        mods=[{"name": "Overcharged Coil", "type": "Weapon", "hero": "Engineer"}],
    )
    return build_context(store=InMemoryKeyValueStore(), bundle=bundle)


def test_import_merges_into_existing_entities(seeded_context: RegistryContext) -> None:
    statuses = import_documents(
        seeded_context,
        [
            (
                "update.json",
                _shards_document(
                    {"name": "spider shard", "description": "Summons spiders", "iconUrl": ""},
                    {"name": "Frosty Power", "heroes": [{"name": "Frostweaver", "slot": "Weapon"}]},
                ),
            )
        ],
    )

    assert [status.state for status in statuses] == [ImportState.IMPORTED]
    assert statuses[0].kind is DocumentKind.SHARDS
    assert statuses[0].status_line == "Imported update.json as shards: 1 added, 1 merged"
    spider, frosty = seeded_context.registry.shards
    assert spider.description == "Summons spiders"
    assert spider.icon_url == "a.png"
    assert frosty.hero_id == "h10"


def test_failed_document_leaves_registry_unchanged(seeded_context: RegistryContext) -> None:
    store = seeded_context.store
    assert isinstance(store, InMemoryKeyValueStore)
    before = seeded_context.snapshot()

    statuses = import_documents(seeded_context, [("dd2_shards_data.json", "{not json")])

    assert [status.state for status in statuses] == [ImportState.FAILED]
    assert statuses[0].status_line.startswith("Error parsing dd2_shards_data.json:")
    assert seeded_context.snapshot() == before
    assert store.writes == 0


def test_failure_does_not_stop_the_batch(seeded_context: RegistryContext) -> None:
    statuses = import_documents(
        seeded_context,
        [
            ("broken.json", "["),
            ("notes.json", json.dumps({"title": "hello"})),
            ("more_shards.json", _shards_document({"name": "Destruction"})),
        ],
        max_workers=2,
    )

    assert [status.state for status in statuses] == [
        ImportState.FAILED,
        ImportState.SKIPPED,
        ImportState.IMPORTED,
    ]
    assert statuses[1].status_line == "Skipped notes.json: Unknown file type"
    assert [shard.name for shard in seeded_context.registry.shards] == [
        "Spider Shard",
        "Destruction",
    ]


def test_overly_nested_or_undecodable_documents_fail_alone(
    seeded_context: RegistryContext,
) -> None:
    statuses = import_documents(
        seeded_context,
        [
            ("shards.json", "[" * 200_000),
            ("dd2_shards_data.json", b'{"shards": ["\xff"]}'),
            ("mods.json", b'[{"name": "Explosive Charge", "type": "Relic"}]'),
        ],
    )

    assert [status.state for status in statuses] == [
        ImportState.FAILED,
        ImportState.FAILED,
        ImportState.IMPORTED,
    ]
    assert statuses[0].message == "Document is nested too deeply"
    assert "Explosive Charge" in [mod.name for mod in seeded_context.registry.mods]


def test_defense_import_derives_towers(seeded_context: RegistryContext) -> None:
    document = json.dumps(
        [
            {
                "name": "Lightning Coil",
                "hero": "Engineer",
                "base_def_power": "1200",
                "mana_cost": "40",
            }
        ]
    )

    (status,) = import_documents(seeded_context, [("upload.json", document)])

    assert status.kind is DocumentKind.DEFENSES
    assert status.added == 2
    (tower,) = seeded_context.registry.towers
    assert tower.du_cost == 40
    assert tower.hero_id == "h9"


def test_abilities_import_replaces_previous_list(seeded_context: RegistryContext) -> None:
    import_documents(seeded_context, [("dd2_abilities.json", json.dumps([{"name": "Old"}]))])
    import_documents(seeded_context, [("dd2_abilities.json", json.dumps([{"name": "New"}]))])

    assert [ability.name for ability in seeded_context.registry.abilities] == ["New"]


def test_reimport_is_idempotent(seeded_context: RegistryContext) -> None:
    document = _shards_document({"name": "Destruction", "compatibleSlots": ["gloves"]})

    import_documents(seeded_context, [("shards.json", document)])
    first = seeded_context.snapshot()
    (status,) = import_documents(seeded_context, [("shards.json", document)])

    assert status.added == 0
    assert status.merged == 1
    assert seeded_context.snapshot() == first


def test_each_import_is_persisted(seeded_context: RegistryContext) -> None:
    import_documents(seeded_context, [("shards.json", _shards_document({"name": "Destruction"}))])

    store = seeded_context.store
    saved = json.loads(store.get(DEFAULT_SNAPSHOT_KEY) or "{}")
    assert "Destruction" in [shard["name"] for shard in saved["shards"]]


@pytest.mark.usefixtures("reset_store_state")
def test_context_persists_through_sqlalchemy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    monkeypatch.delenv("DD2PLANNER_SNAPSHOT_KEY", raising=False)
    context = build_context(bundle=CatalogBundle())

    import_documents(context, [("shards.json", _shards_document({"name": "Destruction"}))])

    stored = SqlAlchemyKeyValueStore().get(DEFAULT_SNAPSHOT_KEY)
    assert stored is not None
    reloaded = build_context(store=SqlAlchemyKeyValueStore(), bundle=CatalogBundle())
    assert [shard.name for shard in reloaded.registry.shards] == ["Destruction"]


@pytest.mark.usefixtures("reset_store_state")
def test_build_context_reports_when_snapshot_was_saved(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")
    monkeypatch.delenv("DD2PLANNER_SNAPSHOT_KEY", raising=False)
    with caplog.at_level(logging.INFO, logger="dd2planner.app"):
        context = build_context(bundle=CatalogBundle())
    assert f"Snapshot '{DEFAULT_SNAPSHOT_KEY}' last saved at never" in caplog.text

    import_documents(context, [("shards.json", _shards_document({"name": "Destruction"}))])
    caplog.clear()
    with caplog.at_level(logging.INFO, logger="dd2planner.app"):
        build_context(bundle=CatalogBundle())

    assert "last saved at never" not in caplog.text
    assert f"Snapshot '{DEFAULT_SNAPSHOT_KEY}' last saved at 20" in caplog.text
