"""Reconciliation of normalized catalog batches against existing collections."""

from __future__ import annotations

from .keys import IdentityKey, identity_key
from .merge import is_populated, merge_entity, reconcile, reconcile_counts, replace_catalog

__all__ = [
    "IdentityKey",
    "identity_key",
    "is_populated",
    "merge_entity",
    "reconcile",
    "reconcile_counts",
    "replace_catalog",
]
