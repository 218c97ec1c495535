from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from dd2planner.domain.model import Hero, Registry
from dd2planner.ui import cli as cli_module
from tests.helpers.catalog import InMemoryKeyValueStore, make_context, make_shard

if TYPE_CHECKING:
    from pathlib import Path

    from dd2planner.domain.context import RegistryContext


@pytest.fixture
def cli_context(heroes: tuple[Hero, ...]) -> RegistryContext:
    registry = Registry(
        heroes=heroes,
        shards=[
            make_shard("Generic Edge", slots=["weapon"]),
            make_shard("Offhand Focus", slots=["weapon1"]),
        ],
    )
    return make_context(registry, InMemoryKeyValueStore())


def test_heroes_command_lists_catalog(
    cli_context: RegistryContext, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_module.main(["heroes"], context=cli_context)

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 21
    assert any(line.startswith("h9\tEngineer\t") for line in lines)


def test_match_command_ranks_items(
    cli_context: RegistryContext, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_module.main(["match", "--hero", "Barbarian", "--slot", "weapon1"], context=cli_context)

    out = capsys.readouterr().out.splitlines()
    assert out == ["s_offhand-focus\tOffhand Focus", "s_generic-edge\tGeneric Edge"]


def test_build_commands(cli_context: RegistryContext, capsys: pytest.CaptureFixture[str]) -> None:
    cli_module.main(["build", "create", "--hero", "h5", "--name", "Dual"], context=cli_context)
    build_id, name = capsys.readouterr().out.strip().split("\t")

    cli_module.main(
        [
            "build",
            "assign",
            "--build-id",
            build_id,
            "--slot",
            "weapon2",
            "--category",
            "shards",
            "--index",
            "1",
            "--item-id",
            "s_generic-edge",
        ],
        context=cli_context,
    )

    assert name == "Dual"
    build = cli_context.registry.build_by_id(build_id)
    assert build is not None
    assert build.slots["weapon2"].shards == [None, "s_generic-edge", None]


def test_import_and_export_commands(cli_context: RegistryContext, tmp_path: Path) -> None:
    source = tmp_path / "dd2_mods_data.json"
    payload = [{"name": "Explosive Charge", "type": "Weapon"}]
    source.write_text(json.dumps(payload), encoding="utf-8")
    backup = tmp_path / "backup.json"

    cli_module.main(["import", str(source)], context=cli_context)
    cli_module.main(["export", "--output", str(backup)], context=cli_context)

    saved = json.loads(backup.read_text(encoding="utf-8"))
    assert [mod["name"] for mod in saved["mods"]] == ["Explosive Charge"]


def test_failed_import_exits_with_error(cli_context: RegistryContext, tmp_path: Path) -> None:
    source = tmp_path / "broken.json"
    source.write_text("{", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["import", str(source)], context=cli_context)

    assert excinfo.value.code == 1


def test_undecodable_or_missing_file_does_not_cancel_the_batch(
    cli_context: RegistryContext, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    broken = tmp_path / "dd2_shards_data.json"
    broken.write_bytes(b'{"shards": [{"name": "\xff"}]}')
    good = tmp_path / "dd2_mods_data.json"
    good.write_text(json.dumps([{"name": "Explosive Charge", "type": "Weapon"}]), "utf-8")
    missing = tmp_path / "gone.json"

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["import", str(broken), str(missing), str(good)], context=cli_context)

    assert excinfo.value.code == 1
    assert [mod.name for mod in cli_context.registry.mods] == ["Explosive Charge"]
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("Error parsing gone.json: Cannot read file")
    assert out[1].startswith("Error parsing dd2_shards_data.json:")
    assert out[2] == "Imported dd2_mods_data.json as mods: 1 added, 0 merged"


def test_invalid_position_is_a_validation_error(cli_context: RegistryContext) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            [
                "build",
                "assign",
                "--build-id",
                "b_x",
                "--slot",
                "relic",
                "--category",
                "mods",
                "--index",
                "5",
            ],
            context=cli_context,
        )

    assert excinfo.value.code == 2


def test_unknown_hero_is_a_fatal_error(cli_context: RegistryContext) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["match", "--hero", "Nobody", "--slot", "weapon"], context=cli_context)

    assert excinfo.value.code == 1


def test_missing_command_exits_with_usage_error(cli_context: RegistryContext) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main([], context=cli_context)

    assert excinfo.value.code == 2
