"""
Social component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from curation.domain.entities import Collection, Comment
from curation.domain.errors import CollectionError, OutputErrorsMixin

# --- Input Models ---


@dataclass(frozen=True)
class ToggleLikeInput:
    actor_id: UUID
    collection_id: UUID


@dataclass(frozen=True)
class AddCommentInput:
    actor_id: UUID
    collection_id: UUID
    content: str


@dataclass(frozen=True)
class ListCommentsInput:
    actor_id: UUID
    collection_id: UUID
    limit: int | None = None
    offset: int = 0


@dataclass(frozen=True)
class ForkCollectionInput:
    """Copy a readable collection into a new private one owned by the actor."""

    actor_id: UUID
    collection_id: UUID
    new_name: str | None = None


# --- Output Models ---


@dataclass(frozen=True)
class LikeOutput(OutputErrorsMixin):
    liked: bool = False
    like_count: int = 0
    errors: list[CollectionError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class CommentOutput(OutputErrorsMixin):
    comment: Comment | None = None
    errors: list[CollectionError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class CommentListOutput(OutputErrorsMixin):
    comments: list[Comment] = field(default_factory=list)
    total: int = 0
    limit: int = 0
    offset: int = 0
    errors: list[CollectionError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ForkOutput(OutputErrorsMixin):
    collection: Collection | None = None
    errors: list[CollectionError] = field(default_factory=list)
    success: bool = True
