"""
Items component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from curation.domain.entities import CollectionItem, CollectionStats, ItemRef
from curation.domain.errors import CollectionError, OutputErrorsMixin

# --- Input Models ---


@dataclass(frozen=True)
class AddItemInput:
    actor_id: UUID
    collection_id: UUID
    item_type: str
    item_id: str
    item_title: str
    item_description: str | None = None


@dataclass(frozen=True)
class RemoveItemInput:
    actor_id: UUID
    collection_id: UUID
    ref: ItemRef


@dataclass(frozen=True)
class UpdateProgressInput:
    actor_id: UUID
    collection_id: UUID
    ref: ItemRef
    completed: bool


@dataclass(frozen=True)
class ReorderItemsInput:
    """
    Full new ordering of a collection's items.

    `new_order` must be a permutation of the current item refs. When
    `expected_version` is None the version read during validation is used.
    """

    actor_id: UUID
    collection_id: UUID
    new_order: tuple[ItemRef, ...]
    expected_version: int | None = None


# --- Output Models ---


@dataclass(frozen=True)
class ItemOutput(OutputErrorsMixin):
    """Output for add/remove/progress; `stats` is re-read after the write."""

    item: CollectionItem | None = None
    stats: CollectionStats | None = None
    errors: list[CollectionError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ReorderOutput(OutputErrorsMixin):
    items: list[CollectionItem] = field(default_factory=list)
    version: int | None = None
    errors: list[CollectionError] = field(default_factory=list)
    success: bool = True
