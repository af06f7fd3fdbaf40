"""
Collection persistence port.

Every mutating method is a single atomic unit at the storage layer:
conditional update-by-version, counter deltas and insert-if-absent by key.
Implementations raise the errors from curation.ports.storage.

Writes that take a `grant` re-check the collaborator role it names inside
the same transaction and raise AccessRevokedError when it no longer holds.
"""

from __future__ import annotations

import builtins
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from curation.domain.entities import (
    Collaborator,
    Collection,
    CollectionCategory,
    CollectionItem,
    CollectionType,
    Comment,
    ItemRef,
    Visibility,
)
from curation.domain.policy import WriteGrant


@dataclass(frozen=True)
class CollectionFilter:
    """
    Filter for listing collections; None means no constraint.

    `shared_with` matches collections where that user is a collaborator. Set
    together with `owner_id`, either condition qualifies.
    """

    owner_id: UUID | None = None
    shared_with: UUID | None = None
    type: CollectionType | None = None
    category: CollectionCategory | None = None
    visibility: Visibility | None = None
    search: str | None = None


@dataclass(frozen=True)
class OwnerStats:
    total_collections: int = 0
    total_items: int = 0
    total_completed_items: int = 0
    public_collections: int = 0


class CollectionRepoPort(Protocol):
    # --- Aggregate ---
    def insert(self, collection: Collection) -> Collection:
        """Insert a collection and all its items in one transaction."""
        ...

    def get_by_id(self, collection_id: UUID, include_items: bool = True) -> Collection | None: ...

    def list(
        self,
        filters: CollectionFilter,
        sort_by: str,
        sort_order: str,
        limit: int,
        offset: int,
    ) -> tuple[builtins.list[Collection], int]: ...

    def owner_stats(self, owner_id: UUID) -> OwnerStats: ...

    def update_fields(
        self,
        collection_id: UUID,
        fields: dict[str, Any],
        expected_version: int,
        now: datetime,
    ) -> Collection:
        """Conditional write; raises VersionConflictError on a stale version."""
        ...

    def delete(self, collection_id: UUID) -> None:
        """Delete the collection and every child row."""
        ...

    # --- Items ---
    def add_item(
        self,
        collection_id: UUID,
        item: CollectionItem,
        now: datetime,
        grant: WriteGrant | None = None,
    ) -> CollectionItem:
        """Insert-if-absent by ItemRef; raises DuplicateKeyError."""
        ...

    def remove_item(
        self,
        collection_id: UUID,
        ref: ItemRef,
        now: datetime,
        grant: WriteGrant | None = None,
    ) -> CollectionItem: ...

    def set_item_progress(
        self,
        collection_id: UUID,
        ref: ItemRef,
        completed: bool,
        now: datetime,
        grant: WriteGrant | None = None,
    ) -> tuple[CollectionItem, bool]:
        """Flip progress; returns (item, changed)."""
        ...

    def reorder_items(
        self,
        collection_id: UUID,
        new_order: builtins.list[ItemRef],
        expected_version: int,
        now: datetime,
        grant: WriteGrant | None = None,
    ) -> int:
        """Apply a full permutation; returns the new version."""
        ...

    # --- Social ---
    def toggle_like(
        self,
        collection_id: UUID,
        user_id: UUID,
        now: datetime,
        allow_insert: bool = True,
        grant: WriteGrant | None = None,
    ) -> tuple[bool, int]:
        """Atomic check-and-flip; returns (liked, like_count).

        With `allow_insert=False` an existing like is removed but none is added.
        """
        ...

    def has_liked(self, collection_id: UUID, user_id: UUID) -> bool: ...

    def add_comment(self, comment: Comment, grant: WriteGrant | None = None) -> Comment: ...

    def list_comments(
        self, collection_id: UUID, limit: int, offset: int
    ) -> tuple[builtins.list[Comment], int]: ...

    # --- Collaborators ---
    def add_collaborator(
        self,
        collection_id: UUID,
        collaborator: Collaborator,
        grant: WriteGrant | None = None,
    ) -> Collaborator:
        """Insert-if-absent by (collection, user); raises DuplicateKeyError."""
        ...

    def remove_collaborator(
        self, collection_id: UUID, user_id: UUID, grant: WriteGrant | None = None
    ) -> None: ...
