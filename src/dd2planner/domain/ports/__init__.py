"""Ports the domain depends on; adapters provide the implementations."""

from __future__ import annotations

from .persistence import KeyValueStore

__all__ = ["KeyValueStore"]
