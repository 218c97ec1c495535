"""Hero identities: the read-only character catalog every weak reference points at."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True, kw_only=True)
class Hero:
    id: str
    name: str
    hero_class: str
    role_tags: tuple[str, ...] = ()
    slots: tuple[str, ...] = field(default_factory=tuple[str, ...])
    color: str | None = None
    icon_url: str | None = None

    def supports_slot(self, slot_id: str) -> bool:
        return slot_id.lower() in self.slots
