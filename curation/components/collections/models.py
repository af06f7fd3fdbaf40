"""
Collections component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from curation.domain.entities import Collection
from curation.domain.errors import CollectionError, OutputErrorsMixin
from curation.ports.repo import OwnerStats

# --- Input Models ---


@dataclass(frozen=True)
class CreateCollectionInput:
    """Input for creating a collection owned by `owner_id`."""

    owner_id: UUID
    name: str
    type: str
    category: str
    description: str | None = None
    visibility: str = "private"
    tags: tuple[str, ...] = ()
    cover: dict[str, Any] | None = None
    share_settings: dict[str, bool] | None = None
    allow_collaborators: bool = True


@dataclass(frozen=True)
class GetCollectionInput:
    actor_id: UUID
    collection_id: UUID
    include_items: bool = True


@dataclass(frozen=True)
class ListCollectionsInput:
    """
    Input for listing collections.

    Without `owner_id` the actor's own collections are listed, plus the ones
    shared with them as a collaborator when `include_shared` is set. Naming
    another owner restricts the result to that owner's public collections.
    """

    actor_id: UUID
    owner_id: UUID | None = None
    type: str | None = None
    category: str | None = None
    visibility: str | None = None
    search: str | None = None
    sort_by: str = "updated_at"
    sort_order: str = "desc"
    limit: int | None = None
    offset: int = 0
    include_shared: bool = False


@dataclass(frozen=True)
class ListPublicCollectionsInput:
    """Input for public discovery listing."""

    type: str | None = None
    category: str | None = None
    search: str | None = None
    sort_by: str = "last_activity_at"
    sort_order: str = "desc"
    limit: int | None = None
    offset: int = 0


@dataclass(frozen=True)
class UpdateCollectionInput:
    """Patch of non-derived fields, guarded by the version the caller read."""

    actor_id: UUID
    collection_id: UUID
    patch: dict[str, Any]
    expected_version: int


@dataclass(frozen=True)
class DeleteCollectionInput:
    actor_id: UUID
    collection_id: UUID


# --- Output Models ---


@dataclass(frozen=True)
class PaginationInfo:
    total: int
    limit: int
    offset: int

    @property
    def has_next(self) -> bool:
        return self.offset + self.limit < self.total

    @property
    def has_prev(self) -> bool:
        return self.offset > 0


@dataclass(frozen=True)
class CollectionOutput(OutputErrorsMixin):
    """Output for single-collection operations (create, get, update, delete)."""

    collection: Collection | None = None
    # Whether the actor likes the collection; set by get only
    liked: bool | None = None
    errors: list[CollectionError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class CollectionListOutput(OutputErrorsMixin):
    collections: list[Collection] = field(default_factory=list)
    pagination: PaginationInfo | None = None
    stats: OwnerStats | None = None
    errors: list[CollectionError] = field(default_factory=list)
    success: bool = True
