from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from curation.domain.entities import (
    Collaborator,
    Collection,
    CollectionItem,
    CollectionStats,
    Comment,
)

# Enum-valued request fields are plain strings: the components validate them
# against the registry and report typed 400s instead of FastAPI 422s.


# --- Requests ---
class CoverModel(BaseModel):
    color: str | None = None
    icon: str | None = None


class ShareSettingsModel(BaseModel):
    allow_comments: bool = True
    allow_likes: bool = True
    allow_forks: bool = True


class CollectionCreateRequest(BaseModel):
    name: str
    type: str
    category: str
    description: str | None = None
    visibility: str = "private"
    tags: list[str] = []
    cover: CoverModel | None = None
    share_settings: dict[str, bool] | None = None
    allow_collaborators: bool = True


class CollectionUpdateRequest(BaseModel):
    """Partial update. Unknown keys are kept so the component can reject them."""

    model_config = ConfigDict(extra="allow")

    expected_version: int
    name: str | None = None
    description: str | None = None
    visibility: str | None = None
    tags: list[str] | None = None
    cover: CoverModel | None = None
    share_settings: dict[str, bool] | None = None
    allow_collaborators: bool | None = None

    def to_patch(self) -> dict[str, Any]:
        patch = self.model_dump(exclude_unset=True, exclude={"expected_version"})
        if isinstance(patch.get("cover"), dict):
            patch["cover"] = {k: v for k, v in patch["cover"].items() if v is not None}
        return patch


class ItemAddRequest(BaseModel):
    item_type: str
    item_id: str
    item_title: str
    item_description: str | None = None


class ItemRefModel(BaseModel):
    item_type: str
    item_id: str


class ProgressUpdateRequest(BaseModel):
    completed: bool


class ReorderRequest(BaseModel):
    new_order: list[ItemRefModel]
    expected_version: int | None = None


class CommentCreateRequest(BaseModel):
    content: str


class ForkRequest(BaseModel):
    name: str | None = None


class CollaboratorAddRequest(BaseModel):
    user_id: UUID
    role: str


# --- Responses ---
class ItemResponse(BaseModel):
    item_type: str
    item_id: str
    item_title: str
    item_description: str | None
    completed: bool
    completed_at: datetime | None
    added_at: datetime
    order: int

    @classmethod
    def from_item(cls, item: CollectionItem) -> "ItemResponse":
        return cls(
            item_type=item.item_type,
            item_id=item.item_id,
            item_title=item.item_title,
            item_description=item.item_description,
            completed=item.progress.completed,
            completed_at=item.progress.completed_at,
            added_at=item.added_at,
            order=item.order,
        )


class StatsResponse(BaseModel):
    total_items: int
    completed_items: int
    completion_percentage: int
    last_activity_at: datetime | None

    @classmethod
    def from_stats(cls, s: CollectionStats) -> "StatsResponse":
        return cls(
            total_items=s.total_items,
            completed_items=s.completed_items,
            completion_percentage=s.completion_percentage,
            last_activity_at=s.last_activity_at,
        )


class CollaboratorResponse(BaseModel):
    user_id: UUID
    role: str
    added_at: datetime
    added_by: UUID | None

    @classmethod
    def from_collaborator(cls, c: Collaborator) -> "CollaboratorResponse":
        return cls(user_id=c.user_id, role=c.role, added_at=c.added_at, added_by=c.added_by)


class CollectionResponse(BaseModel):
    id: UUID
    owner_id: UUID
    name: str
    description: str | None
    type: str
    category: str
    visibility: str
    cover: CoverModel
    tags: list[str]
    share_settings: ShareSettingsModel
    allow_collaborators: bool
    items: list[ItemResponse]
    collaborators: list[CollaboratorResponse]
    stats: StatsResponse
    like_count: int
    comment_count: int
    fork_count: int
    forked_from: UUID | None
    version: int
    created_at: datetime
    updated_at: datetime
    liked: bool | None = None

    @classmethod
    def from_collection(
        cls, c: Collection, liked: bool | None = None
    ) -> "CollectionResponse":
        return cls(
            id=c.id,
            owner_id=c.owner_id,
            name=c.name,
            description=c.description,
            type=c.type,
            category=c.category,
            visibility=c.visibility,
            cover=CoverModel(color=c.cover.color, icon=c.cover.icon),
            tags=c.tags,
            share_settings=ShareSettingsModel(**c.share_settings.model_dump()),
            allow_collaborators=c.allow_collaborators,
            items=[ItemResponse.from_item(i) for i in c.items],
            collaborators=[
                CollaboratorResponse.from_collaborator(x) for x in c.collaborators.values()
            ],
            stats=StatsResponse.from_stats(c.stats),
            like_count=c.like_count,
            comment_count=c.comment_count,
            fork_count=c.fork_count,
            forked_from=c.forked_from,
            version=c.version,
            created_at=c.created_at,
            updated_at=c.updated_at,
            liked=liked,
        )


class PaginationResponse(BaseModel):
    total: int
    limit: int
    offset: int
    has_next: bool
    has_prev: bool


class OwnerStatsResponse(BaseModel):
    total_collections: int
    total_items: int
    total_completed_items: int
    public_collections: int


class CollectionListResponse(BaseModel):
    collections: list[CollectionResponse]
    pagination: PaginationResponse
    stats: OwnerStatsResponse | None = None


class ItemMutationResponse(BaseModel):
    item: ItemResponse
    stats: StatsResponse | None


class ReorderResponse(BaseModel):
    items: list[ItemResponse]
    version: int


class LikeResponse(BaseModel):
    liked: bool
    like_count: int


class CommentResponse(BaseModel):
    id: UUID
    author_id: UUID
    content: str
    created_at: datetime

    @classmethod
    def from_comment(cls, c: Comment) -> "CommentResponse":
        return cls(id=c.id, author_id=c.author_id, content=c.content, created_at=c.created_at)


class CommentListResponse(BaseModel):
    comments: list[CommentResponse]
    pagination: PaginationResponse


class CollaboratorListResponse(BaseModel):
    owner_id: UUID
    collaborators: list[CollaboratorResponse]
