"""User-authored hero builds (per-slot shard and mod selections)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Final

from .enums import ItemCategory

SLOT_POSITIONS: Final[int] = 3
DEFAULT_BUILD_COLOR: Final[str] = "zinc"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _empty_positions() -> list[str | None]:
    return [None] * SLOT_POSITIONS


@dataclass(slots=True, kw_only=True)
class BuildSlot:
    slot_id: str
    shards: list[str | None] = field(default_factory=_empty_positions)
    mods: list[str | None] = field(default_factory=_empty_positions)

    def positions(self, category: ItemCategory) -> list[str | None]:
        return self.shards if category is ItemCategory.SHARD else self.mods


@dataclass(slots=True, kw_only=True)
class Build:
    id: str
    name: str
    hero_id: str
    custom_color: str = DEFAULT_BUILD_COLOR
    slots: dict[str, BuildSlot] = field(default_factory=dict[str, BuildSlot])
    last_edited: datetime = field(default_factory=_utcnow)

    def slot(self, slot_id: str) -> BuildSlot:
        """Return the slot entry, creating an empty one on first use."""

        existing = self.slots.get(slot_id)
        if existing is None:
            existing = BuildSlot(slot_id=slot_id)
            self.slots[slot_id] = existing
        return existing

    def touch(self) -> None:
        self.last_edited = _utcnow()
