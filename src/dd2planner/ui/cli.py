# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from dd2planner.app import (
    browse_catalog,
    build_context,
    compatible_items,
    export_registry,
    import_documents,
    new_build,
    set_build_item,
)
from dd2planner.config import DEFAULT_EXPORT_FILENAME, configure_logging
from dd2planner.domain.importing import ImportState, ImportStatus
from dd2planner.domain.model import SLOT_POSITIONS, BrowseSort, EntityKind, ItemCategory

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from dd2planner.domain.context import RegistryContext

log = logging.getLogger(__name__)

_BROWSABLE = [kind.value for kind in EntityKind]


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Dungeon Defenders 2 build planner")
    parser.add_argument("--verbose", action="store_true", help="Log debug output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("heroes", help="List the hero catalog and equipment slots")

    importer = subparsers.add_parser("import", help="Import catalog JSON documents")
    importer.add_argument("files", nargs="+", type=Path, help="Catalog documents to import")
    importer.add_argument(
        "--workers",
        type=int,
        help="Number of parallel parser threads (defaults to the executor's choice)",
    )

    exporter = subparsers.add_parser("export", help="Write a full registry backup")
    exporter.add_argument(
        "--output",
        type=Path,
        default=Path(DEFAULT_EXPORT_FILENAME),
        help="Backup file path (default: %(default)s)",
    )

    matcher = subparsers.add_parser("match", help="Rank items that fit a hero's slot")
    matcher.add_argument("--hero", required=True, help="Hero id or name")
    matcher.add_argument("--slot", required=True, help="Equipment slot id, e.g. weapon1")
    matcher.add_argument(
        "--category",
        choices=[category.value for category in ItemCategory],
        default=ItemCategory.SHARD.value,
        help="Item category to rank (default: %(default)s)",
    )

    browser = subparsers.add_parser("browse", help="Search one catalog collection")
    browser.add_argument("kind", choices=_BROWSABLE, help="Collection to list")
    browser.add_argument("--search", default="", help="Case-insensitive name filter")
    browser.add_argument("--hero", help="Hero id or name to filter by")
    browser.add_argument(
        "--sort",
        choices=[sort.value for sort in BrowseSort],
        default=BrowseSort.HERO.value,
        help="Ordering (default: %(default)s)",
    )

    build = subparsers.add_parser("build", help="Build management commands")
    build_sub = build.add_subparsers(dest="build_command", required=True)
    build_create = build_sub.add_parser("create", help="Create a build for a hero")
    build_create.add_argument("--hero", required=True, help="Hero id or name")
    build_create.add_argument("--name", help="Build name (defaults to 'New Build <n>')")
    build_assign = build_sub.add_parser("assign", help="Put an item into a build slot")
    build_assign.add_argument("--build-id", required=True, help="Build id")
    build_assign.add_argument("--slot", required=True, help="Equipment slot id")
    build_assign.add_argument(
        "--category",
        choices=[category.value for category in ItemCategory],
        required=True,
        help="Item category of the position",
    )
    build_assign.add_argument("--index", type=int, default=0, help="Position 0-2 in the slot")
    build_assign.add_argument("--item-id", help="Item id; omit to clear the position")

    return parser.parse_args(list(argv))


def _read_documents(
    paths: Sequence[Path],
) -> tuple[list[tuple[str, bytes]], list[ImportStatus]]:
    """Read every file as raw bytes; unreadable files become failed statuses."""
    documents: list[tuple[str, bytes]] = []
    failures: list[ImportStatus] = []
    for path in paths:
        try:
            documents.append((path.name, path.read_bytes()))
        except OSError as exc:
            log.warning("Cannot read %s: %s", path, exc)
            failures.append(
                ImportStatus(
                    filename=path.name,
                    state=ImportState.FAILED,
                    message=f"Cannot read file ({exc.strerror or exc})",
                )
            )
    return documents, failures


def _run_command(args: argparse.Namespace, context: RegistryContext) -> int:
    if args.command == "heroes":
        for hero in context.registry.heroes:
            print(f"{hero.id}\t{hero.name}\t{', '.join(hero.role_tags)}\t{' '.join(hero.slots)}")
    elif args.command == "import":
        documents, failures = _read_documents(args.files)
        statuses = [*failures, *import_documents(context, documents, max_workers=args.workers)]
        for status in statuses:
            print(status.status_line)
        if any(status.state is ImportState.FAILED for status in statuses):
            return 1
    elif args.command == "export":
        export_registry(context, args.output)
        print(f"Backup written to {args.output}")
    elif args.command == "match":
        items = compatible_items(
            context,
            hero_reference=args.hero,
            slot_id=args.slot,
            category=ItemCategory(args.category),
        )
        for item in items:
            print(f"{item.id}\t{item.name}")
    elif args.command == "browse":
        entries = browse_catalog(
            context,
            EntityKind(args.kind),
            search=args.search,
            hero_reference=args.hero,
            sort=BrowseSort(args.sort),
        )
        for entry in entries:
            print(getattr(entry, "name", entry))
    elif args.command == "build" and args.build_command == "create":
        created = new_build(context, args.hero, name=args.name)
        print(f"{created.id}\t{created.name}")
    elif args.command == "build" and args.build_command == "assign":
        updated = set_build_item(
            context,
            build_id=args.build_id,
            slot_id=args.slot,
            category=ItemCategory(args.category),
            index=args.index,
            item_id=args.item_id,
        )
        print(f"Updated {updated.id}")
    else:
        raise ValueError(f"Unsupported command: {args.command}")
    return 0


def main(argv: Sequence[str] | None = None, *, context: RegistryContext | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if getattr(parsed_args, "index", 0) not in range(SLOT_POSITIONS):
            limit = SLOT_POSITIONS - 1
            raise ValueError(f"Position index must be between 0 and {limit}")  # noqa: TRY301
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        effective_context = context or build_context()
        exit_code = _run_command(parsed_args, effective_context)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
